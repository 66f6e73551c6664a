"""Tests for stored record conversion and backward-compatible loading."""

from __future__ import annotations

import pytest
from trackit.constants.currencies import FALLBACK_CURRENCY
from trackit.models import TransactionType
from trackit.services import records


def test_round_trip_uses_stored_field_names(notebook_factory, transaction_factory):
    txn = transaction_factory(payment_mode="UPI", description="d", comments="c")
    notebook = notebook_factory(transactions=[txn])

    record = records.notebook_to_record(notebook)

    assert set(record) == {"id", "name", "currency", "transactions", "createdAt"}
    assert set(record["transactions"][0]) == {
        "id", "date", "item", "type", "category", "amount", "paymentMode", "description", "comments",
    }
    assert record["transactions"][0]["type"] == "Expenditure"
    assert records.notebook_from_record(record) == notebook


def test_category_is_omitted_when_absent(transaction_factory):
    record = records.transaction_to_record(transaction_factory(category=None))
    assert "category" not in record


def test_legacy_notebook_gets_defaults():
    notebook = records.notebook_from_record({"id": "notebook-1699999999999", "name": "Old"})

    assert notebook.currency == FALLBACK_CURRENCY
    assert notebook.created_at == 1_699_999_999_999
    assert notebook.transactions == ()


def test_created_at_falls_back_to_now_without_embedded_timestamp():
    notebook = records.notebook_from_record({"id": "custom", "name": "X"}, now=123_456)
    assert notebook.created_at == 123_456


def test_existing_created_at_is_kept():
    notebook = records.notebook_from_record(
        {"id": "notebook-1699999999999", "name": "X", "createdAt": 1_700_000_000_500, "currency": "€"}
    )
    assert notebook.created_at == 1_700_000_000_500
    assert notebook.currency == "€"


def test_legacy_transaction_without_category_or_text_fields():
    txn = records.transaction_from_record(
        {"id": "txn-1", "date": "2024-01-01", "item": "Tea", "type": "Earning", "amount": "7.5"}
    )
    assert txn.category is None
    assert txn.type is TransactionType.EARNING
    assert txn.amount == 7.5
    assert (txn.payment_mode, txn.description, txn.comments) == ("", "", "")


def test_bad_amount_and_type_are_normalized():
    txn = records.transaction_from_record({"id": "t", "amount": "oops", "type": "weird"})
    assert txn.amount == 0.0
    assert txn.type is TransactionType.EXPENDITURE


def test_missing_ids_are_generated():
    notebook = records.notebook_from_record({"name": "No id", "transactions": [{"item": "x"}]}, now=5)
    assert notebook.id.startswith("notebook-5-")
    assert notebook.transactions[0].id.startswith("txn-")


def test_timestamp_from_id():
    assert records.timestamp_from_id("notebook-1700000000000") == 1_700_000_000_000
    assert records.timestamp_from_id("notebook-1700000000000-abcd1234") == 1_700_000_000_000
    assert records.timestamp_from_id("abc") is None
    assert records.timestamp_from_id("") is None


@pytest.mark.parametrize("transactions", [5, "abc", {"id": "txn-1"}, None, True])
def test_malformed_transactions_field_loads_as_empty(transactions):
    notebook = records.notebook_from_record({"id": "notebook-1700000000000", "transactions": transactions})
    assert notebook.transactions == ()


@pytest.mark.parametrize("created_at", [float("nan"), float("inf"), float("-inf"), "yesterday", -5, False])
def test_unusable_created_at_is_backfilled_from_id(created_at):
    notebook = records.notebook_from_record({"id": "notebook-1700000000000", "createdAt": created_at})
    assert notebook.created_at == 1_700_000_000_000
