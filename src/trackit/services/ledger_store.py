"""Notebook collection operations.

Every function takes the current collection (or notebook) and returns a new
value; nothing here mutates its arguments or keeps state between calls. The
caller persists the result and owns any "currently selected notebook"
reference, which it must clear after :func:`delete_notebook`.
"""

from __future__ import annotations

import math
import re
import time
import uuid
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..logging_config import get_logger
from ..models.notebook import Notebook, Transaction, TransactionType

logger = get_logger(__name__)

NOTEBOOK_ID_PREFIX = "notebook-"
TRANSACTION_ID_PREFIX = "txn-"

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

# Transaction fields a caller may set through add/edit.
EDITABLE_FIELDS = (
    "date",
    "item",
    "type",
    "category",
    "amount",
    "payment_mode",
    "description",
    "comments",
)


class ValidationError(ValueError):
    """Raised when a required text field is blank."""


def _now_ms() -> int:
    return int(time.time() * 1000)


def new_id(prefix: str, *, now: Optional[int] = None) -> str:
    """Return ``<prefix><epoch ms>-<8 hex>``; the timestamp stays recoverable from the id."""

    stamp = _now_ms() if now is None else now
    return f"{prefix}{stamp}-{uuid.uuid4().hex[:8]}"


def parse_amount(value: Any) -> float:
    """Parse user input into a non-negative amount.

    Text is read like a browser ``parseFloat``: the leading decimal number is
    used and trailing junk ignored (``"12.50 rs"`` -> 12.5). Anything
    unparsable, non-finite or negative becomes 0.
    """

    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(str(value or ""))
        if not match:
            return 0.0
        number = float(match.group(0))
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _require_text(value: str, label: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{label} cannot be empty")
    return cleaned


# ---------------------------------------------------------------------------
# Notebook level
# ---------------------------------------------------------------------------


def create_notebook(
    collection: Sequence[Notebook],
    name: str,
    currency: str,
    *,
    now: Optional[int] = None,
) -> tuple[list[Notebook], Notebook]:
    """Append a new empty notebook and return ``(new_collection, notebook)``."""

    clean_name = _require_text(name, "Notebook name")
    created_at = _now_ms() if now is None else now
    existing_ids = {nb.id for nb in collection}
    notebook_id = new_id(NOTEBOOK_ID_PREFIX, now=created_at)
    while notebook_id in existing_ids:
        notebook_id = new_id(NOTEBOOK_ID_PREFIX, now=created_at)

    notebook = Notebook(
        id=notebook_id,
        name=clean_name,
        currency=currency,
        created_at=created_at,
    )
    logger.info("Notebook created", extra={"notebook_id": notebook.id, "currency": currency})
    return [*collection, notebook], notebook


def delete_notebook(collection: Sequence[Notebook], notebook_id: str) -> list[Notebook]:
    """Remove the notebook with ``notebook_id``; unknown ids leave the collection as-is."""

    remaining = [nb for nb in collection if nb.id != notebook_id]
    if len(remaining) == len(collection):
        logger.debug("Delete skipped, notebook not found", extra={"notebook_id": notebook_id})
    else:
        logger.info("Notebook deleted", extra={"notebook_id": notebook_id})
    return remaining


def update_notebook(collection: Sequence[Notebook], notebook: Notebook) -> list[Notebook]:
    """Replace the entry whose id matches ``notebook.id`` wholesale."""

    return [notebook if nb.id == notebook.id else nb for nb in collection]


def import_notebooks(
    existing: Sequence[Notebook], incoming: Iterable[Notebook]
) -> list[Notebook]:
    """Append incoming notebooks whose ids are not already present.

    A colliding notebook is dropped entirely; transaction lists are never merged.
    """

    seen = {nb.id for nb in existing}
    merged = list(existing)
    skipped = 0
    for notebook in incoming:
        if notebook.id in seen:
            skipped += 1
            continue
        seen.add(notebook.id)
        merged.append(notebook)
    logger.info(
        "Notebooks imported",
        extra={"added": len(merged) - len(existing), "skipped": skipped},
    )
    return merged


def find_notebook(collection: Iterable[Notebook], notebook_id: str) -> Notebook | None:
    for notebook in collection:
        if notebook.id == notebook_id:
            return notebook
    return None


# ---------------------------------------------------------------------------
# Transaction level (surfaced to the caller as a single update_notebook)
# ---------------------------------------------------------------------------


def _coerce_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for key in EDITABLE_FIELDS:
        if key not in fields:
            continue
        raw = fields[key]
        if key == "amount":
            values[key] = parse_amount(raw)
        elif key == "type":
            values[key] = TransactionType.coerce(raw)
        elif key == "category":
            values[key] = raw or None
        elif key == "date":
            values[key] = raw.isoformat() if isinstance(raw, date) else str(raw or "")
        else:
            values[key] = "" if raw is None else str(raw)
    return values


def add_transaction(
    notebook: Notebook, fields: Mapping[str, Any], *, now: Optional[int] = None
) -> Notebook:
    """Append a transaction built from form ``fields`` and return the updated notebook."""

    values = _coerce_fields(fields)
    values.setdefault("date", date.today().isoformat())
    values.setdefault("item", "")
    existing_ids = {txn.id for txn in notebook.transactions}
    txn_id = new_id(TRANSACTION_ID_PREFIX, now=now)
    while txn_id in existing_ids:
        txn_id = new_id(TRANSACTION_ID_PREFIX, now=now)

    transaction = Transaction(id=txn_id, **values)
    logger.debug(
        "Transaction added",
        extra={"notebook_id": notebook.id, "transaction_id": txn_id, "amount": transaction.amount},
    )
    return replace(notebook, transactions=(*notebook.transactions, transaction))


def edit_transaction(
    notebook: Notebook, transaction_id: str, fields: Mapping[str, Any]
) -> Notebook:
    """Merge ``fields`` over the matching transaction; unknown ids are a no-op."""

    if notebook.find_transaction(transaction_id) is None:
        logger.debug(
            "Edit skipped, transaction not found",
            extra={"notebook_id": notebook.id, "transaction_id": transaction_id},
        )
        return notebook

    values = _coerce_fields(fields)
    updated = tuple(
        replace(txn, **values) if txn.id == transaction_id else txn
        for txn in notebook.transactions
    )
    return replace(notebook, transactions=updated)


def delete_transaction(notebook: Notebook, transaction_id: str) -> Notebook:
    """Drop the matching transaction; unknown ids are a no-op."""

    remaining = tuple(txn for txn in notebook.transactions if txn.id != transaction_id)
    if len(remaining) == len(notebook.transactions):
        return notebook
    return replace(notebook, transactions=remaining)


__all__ = [
    "EDITABLE_FIELDS",
    "ValidationError",
    "add_transaction",
    "create_notebook",
    "delete_notebook",
    "delete_transaction",
    "edit_transaction",
    "find_notebook",
    "import_notebooks",
    "new_id",
    "parse_amount",
    "update_notebook",
]
