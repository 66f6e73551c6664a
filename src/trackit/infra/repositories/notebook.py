"""SQLModel implementation of the notebook repository."""

from __future__ import annotations

import json
from contextlib import AbstractContextManager
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from sqlmodel import Session, select

from ...logging_config import get_logger
from ...models.document import StoredDocument
from ...models.notebook import Notebook
from ...services.records import SCHEMA_VERSION, notebooks_from_records, notebooks_to_records

logger = get_logger(__name__)

NOTEBOOKS_KEY = "notebooks"
SELECTED_NOTEBOOK_KEY = "selected_notebook"


class SQLModelNotebookRepository:
    """Stores the notebook collection as a single versioned JSON document."""

    def __init__(self, session_factory: Callable[[], AbstractContextManager[Session]]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def _get(self, session: Session, key: str) -> Optional[StoredDocument]:
        return session.exec(select(StoredDocument).where(StoredDocument.key == key)).first()

    def _put(self, key: str, value: str, schema_version: int) -> None:
        with self.session_factory() as session:
            doc = self._get(session, key)
            if doc is None:
                doc = StoredDocument(key=key, value=value, schema_version=schema_version)
            else:
                doc.value = value
                doc.schema_version = schema_version
                doc.updated_at = datetime.now(timezone.utc)
            session.add(doc)
            session.commit()

    def load(self) -> list[Notebook]:
        """Return the stored collection; unreadable payloads load as empty."""
        with self.session_factory() as session:
            doc = self._get(session, NOTEBOOKS_KEY)
            if doc is None:
                return []
            raw, version = doc.value, doc.schema_version

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored notebooks are not valid JSON; starting empty", exc_info=True)
            return []
        if not isinstance(payload, list):
            logger.warning("Stored notebooks are not a list; starting empty", extra={"schema_version": version})
            return []
        if version < SCHEMA_VERSION:
            logger.info(
                "Upgrading stored notebooks",
                extra={"from_version": version, "to_version": SCHEMA_VERSION},
            )
        return notebooks_from_records(entry for entry in payload if isinstance(entry, dict))

    def save(self, notebooks: Sequence[Notebook]) -> None:
        """Replace the stored collection with ``notebooks``."""
        payload = json.dumps(notebooks_to_records(notebooks), ensure_ascii=False)
        self._put(NOTEBOOKS_KEY, payload, SCHEMA_VERSION)
        logger.debug("Notebooks saved", extra={"count": len(notebooks)})

    def get_selected_id(self) -> Optional[str]:
        with self.session_factory() as session:
            doc = self._get(session, SELECTED_NOTEBOOK_KEY)
            return doc.value if doc and doc.value else None

    def set_selected_id(self, notebook_id: Optional[str]) -> None:
        if notebook_id is None:
            with self.session_factory() as session:
                doc = self._get(session, SELECTED_NOTEBOOK_KEY)
                if doc:
                    session.delete(doc)
                    session.commit()
            return
        self._put(SELECTED_NOTEBOOK_KEY, notebook_id, SCHEMA_VERSION)


__all__ = ["NOTEBOOKS_KEY", "SELECTED_NOTEBOOK_KEY", "SQLModelNotebookRepository"]
