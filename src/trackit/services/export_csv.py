"""CSV export helpers for Track.it."""

from __future__ import annotations

import csv
import io
import re
from decimal import Decimal
from pathlib import Path
from typing import Callable, Iterable, Sequence

from ..logging_config import get_logger
from ..models.notebook import Transaction

logger = get_logger(__name__)

# Column header -> accessor, in export order.
COLUMN_ACCESSORS: dict[str, Callable[[Transaction], object]] = {
    "Date": lambda t: t.date,
    "Item": lambda t: t.item,
    "Category": lambda t: t.category,
    "Type": lambda t: t.type.value,
    "Amount": lambda t: t.amount,
    "Payment Mode": lambda t: t.payment_mode,
    "Description": lambda t: t.description,
    "Comments": lambda t: t.comments,
}

DEFAULT_COLUMNS: tuple[str, ...] = tuple(COLUMN_ACCESSORS)
# Schema without categories, for notebooks exported before categories existed.
LEGACY_COLUMNS: tuple[str, ...] = tuple(c for c in DEFAULT_COLUMNS if c != "Category")


def format_number(value: float) -> str:
    """Render numbers in natural decimal form: 12 not 12.0, 0.0000001 not 1e-07."""

    if not isinstance(value, float):
        return str(value)
    if value.is_integer():
        return str(int(value))
    # Shortest round-trip digits, written out without an exponent
    return format(Decimal(repr(value)), "f")


def _serialize_value(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def encode_csv(
    transactions: Iterable[Transaction], columns: Sequence[str] = DEFAULT_COLUMNS
) -> str:
    """Encode transactions as CSV text.

    The header is the literal column names joined by commas. Every data field
    is wrapped in double quotes with embedded quotes doubled, and rows are
    joined by ``\\n`` without a trailing newline.
    """

    unknown = [c for c in columns if c not in COLUMN_ACCESSORS]
    if unknown:
        raise KeyError(f"Unknown CSV column(s): {', '.join(unknown)}")

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for txn in transactions:
        writer.writerow([_serialize_value(COLUMN_ACCESSORS[c](txn)) for c in columns])

    lines = [",".join(columns)]
    body = buffer.getvalue()
    if body:
        lines.append(body[:-1])  # strip the final line terminator
    return "\n".join(lines)


def export_filename(notebook_name: str) -> str:
    """``Weekly  Budget`` -> ``Weekly_Budget_transactions.csv``."""

    stem = re.sub(r"\s+", "_", notebook_name)
    return f"{stem}_transactions.csv"


def export_transactions_csv(
    *,
    transactions: Iterable[Transaction],
    output_path: Path,
    columns: Sequence[str] = DEFAULT_COLUMNS,
) -> Path:
    """Write ``encode_csv`` output to ``output_path`` and return the path written."""

    rows = list(transactions)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    # newline="" keeps "\n" separators intact on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        fh.write(encode_csv(rows, columns))

    logger.info("CSV exported", extra={"path": str(output_path), "rows": len(rows)})
    return output_path


__all__ = [
    "COLUMN_ACCESSORS",
    "DEFAULT_COLUMNS",
    "LEGACY_COLUMNS",
    "encode_csv",
    "export_filename",
    "export_transactions_csv",
    "format_number",
]
