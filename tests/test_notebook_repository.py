"""Unit tests for the SQLModel notebook repository."""

from __future__ import annotations

import json

from sqlmodel import Session
from trackit.infra.repositories import SQLModelNotebookRepository
from trackit.infra.repositories.notebook import NOTEBOOKS_KEY
from trackit.models import StoredDocument
from trackit.services.records import SCHEMA_VERSION


def _store_raw(db_engine, value: str, version: int = 1) -> None:
    with Session(db_engine) as session:
        session.add(StoredDocument(key=NOTEBOOKS_KEY, value=value, schema_version=version))
        session.commit()


def test_load_empty_store(session_factory):
    repo = SQLModelNotebookRepository(session_factory)
    assert repo.load() == []


def test_save_then_load(session_factory, notebook_factory, transaction_factory):
    repo = SQLModelNotebookRepository(session_factory)
    notebooks = [
        notebook_factory(name="Trips", transactions=[transaction_factory(amount=12.5)]),
        notebook_factory(name="Home"),
    ]

    repo.save(notebooks)

    assert repo.load() == notebooks


def test_save_overwrites_and_records_schema_version(db_engine, session_factory, notebook_factory):
    repo = SQLModelNotebookRepository(session_factory)
    repo.save([notebook_factory(name="First")])
    repo.save([])

    assert repo.load() == []
    with Session(db_engine) as session:
        doc = session.get(StoredDocument, NOTEBOOKS_KEY)
        assert doc.schema_version == SCHEMA_VERSION
        assert json.loads(doc.value) == []


def test_load_upgrades_version_one_documents(db_engine, session_factory):
    _store_raw(
        db_engine,
        json.dumps(
            [
                {
                    "id": "notebook-1690000000000",
                    "name": "Legacy",
                    "transactions": [
                        {"id": "txn-1", "date": "2023-07-01", "item": "Tea", "type": "Expenditure", "amount": 2}
                    ],
                }
            ]
        ),
    )
    repo = SQLModelNotebookRepository(session_factory)

    [notebook] = repo.load()

    assert notebook.currency == "₹"
    assert notebook.created_at == 1_690_000_000_000
    assert notebook.transactions[0].category is None


def test_corrupt_payload_loads_as_empty(db_engine, session_factory, caplog):
    _store_raw(db_engine, "{not json", version=SCHEMA_VERSION)
    repo = SQLModelNotebookRepository(session_factory)

    with caplog.at_level("WARNING", logger="trackit"):
        assert repo.load() == []
    assert "not valid JSON" in caplog.text


def test_selected_notebook_reference(session_factory):
    repo = SQLModelNotebookRepository(session_factory)
    assert repo.get_selected_id() is None

    repo.set_selected_id("notebook-1")
    assert repo.get_selected_id() == "notebook-1"

    repo.set_selected_id("notebook-2")
    assert repo.get_selected_id() == "notebook-2"

    repo.set_selected_id(None)
    assert repo.get_selected_id() is None
    repo.set_selected_id(None)  # clearing twice is fine
