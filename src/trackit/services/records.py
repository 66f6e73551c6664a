"""Conversion between notebooks and their stored JSON records.

Stored records use the field names ``id, name, currency, transactions,
createdAt`` and, per transaction, ``id, date, item, type, category, amount,
paymentMode, description, comments``. Loading is forgiving: every record goes
through the same backfill rules regardless of which schema version wrote it.
"""

from __future__ import annotations

import math
import re
import time
from typing import Any, Iterable, Mapping, Optional

from ..constants.currencies import FALLBACK_CURRENCY
from ..logging_config import get_logger
from ..models.notebook import Notebook, Transaction, TransactionType
from .ledger_store import NOTEBOOK_ID_PREFIX, TRANSACTION_ID_PREFIX, new_id, parse_amount

logger = get_logger(__name__)

# 1: transactions without ``category``; 2: category-aware records.
SCHEMA_VERSION = 2

_EMBEDDED_TIMESTAMP = re.compile(r"^[A-Za-z]+-(\d{10,})")


def transaction_to_record(txn: Transaction) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": txn.id,
        "date": txn.date,
        "item": txn.item,
        "type": txn.type.value,
    }
    if txn.category is not None:
        record["category"] = txn.category
    record.update(
        {
            "amount": txn.amount,
            "paymentMode": txn.payment_mode,
            "description": txn.description,
            "comments": txn.comments,
        }
    )
    return record


def notebook_to_record(notebook: Notebook) -> dict[str, Any]:
    return {
        "id": notebook.id,
        "name": notebook.name,
        "currency": notebook.currency,
        "transactions": [transaction_to_record(t) for t in notebook.transactions],
        "createdAt": notebook.created_at,
    }


def notebooks_to_records(notebooks: Iterable[Notebook]) -> list[dict[str, Any]]:
    return [notebook_to_record(nb) for nb in notebooks]


def timestamp_from_id(record_id: str) -> Optional[int]:
    """Return the epoch-millisecond timestamp embedded in ids like ``notebook-1700000000000``."""

    match = _EMBEDDED_TIMESTAMP.match(record_id or "")
    if not match:
        return None
    return int(match.group(1))


def _text(record: Mapping[str, Any], key: str) -> str:
    value = record.get(key)
    return "" if value is None else str(value)


def transaction_from_record(record: Mapping[str, Any]) -> Transaction:
    """Build a transaction from a stored record, filling defaults for missing fields."""

    txn_id = _text(record, "id") or new_id(TRANSACTION_ID_PREFIX)
    category = record.get("category")
    return Transaction(
        id=txn_id,
        date=_text(record, "date"),
        item=_text(record, "item"),
        type=TransactionType.coerce(record.get("type")),
        category=str(category) if category else None,
        amount=parse_amount(record.get("amount")),
        payment_mode=_text(record, "paymentMode"),
        description=_text(record, "description"),
        comments=_text(record, "comments"),
    )


def notebook_from_record(record: Mapping[str, Any], *, now: Optional[int] = None) -> Notebook:
    """Build a notebook from a stored record, applying the backward-compatibility defaults.

    Missing ``currency`` falls back to the default symbol, a missing
    ``createdAt`` comes from the timestamp embedded in the id (or now), and a
    missing or malformed ``transactions`` list becomes empty. Non-finite
    ``createdAt`` values are treated as missing.
    """

    notebook_id = _text(record, "id") or new_id(NOTEBOOK_ID_PREFIX, now=now)
    created_at = record.get("createdAt")
    if (
        not isinstance(created_at, (int, float))
        or isinstance(created_at, bool)
        or (isinstance(created_at, float) and not math.isfinite(created_at))
        or created_at <= 0
    ):
        created_at = timestamp_from_id(notebook_id)
        if created_at is None:
            created_at = now if now is not None else int(time.time() * 1000)
        logger.debug(
            "Backfilled createdAt", extra={"notebook_id": notebook_id, "created_at": created_at}
        )

    raw_transactions = record.get("transactions")
    if not isinstance(raw_transactions, list):
        raw_transactions = []
    transactions = tuple(
        transaction_from_record(item) for item in raw_transactions if isinstance(item, Mapping)
    )
    return Notebook(
        id=notebook_id,
        name=_text(record, "name"),
        currency=_text(record, "currency") or FALLBACK_CURRENCY,
        created_at=int(created_at),
        transactions=transactions,
    )


def notebooks_from_records(
    records: Iterable[Mapping[str, Any]], *, now: Optional[int] = None
) -> list[Notebook]:
    return [notebook_from_record(record, now=now) for record in records]


__all__ = [
    "SCHEMA_VERSION",
    "notebook_from_record",
    "notebook_to_record",
    "notebooks_from_records",
    "notebooks_to_records",
    "timestamp_from_id",
    "transaction_from_record",
    "transaction_to_record",
]
