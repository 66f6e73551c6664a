"""JSON backup and restore of the notebook collection."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any, Optional, Sequence

from ..logging_config import get_logger
from ..models.notebook import Notebook
from .ledger_store import import_notebooks
from .records import notebooks_from_records, notebooks_to_records

logger = get_logger(__name__)


class BackupFormatError(ValueError):
    """Raised when a backup file does not hold an array of notebook records."""


def backup_filename(today: Optional[date] = None) -> str:
    stamp = (today or date.today()).isoformat()
    return f"trackit_backup_{stamp}.json"


def encode_backup(notebooks: Sequence[Notebook]) -> str:
    """Pretty-printed JSON array of notebook records (2-space indent, unicode kept)."""

    return json.dumps(notebooks_to_records(notebooks), indent=2, ensure_ascii=False)


def write_backup(notebooks: Sequence[Notebook], output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(encode_backup(notebooks), encoding="utf-8")
    logger.info("Backup written", extra={"path": str(output_path), "notebooks": len(notebooks)})
    return output_path


def parse_backup(text: str) -> list[Notebook]:
    """Decode backup text into notebooks.

    Raises:
        BackupFormatError: if the text is not JSON, the top-level value is not
            an array, or an entry is not an object.
    """

    try:
        payload: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise BackupFormatError("Invalid backup file format") from exc
    if not isinstance(payload, list):
        raise BackupFormatError("Invalid backup file format")
    if not all(isinstance(entry, dict) for entry in payload):
        raise BackupFormatError("Invalid backup file format")
    return notebooks_from_records(payload)


def restore_backup(existing: Sequence[Notebook], backup_file: Path) -> list[Notebook]:
    """Merge notebooks from ``backup_file`` into ``existing``; colliding ids are skipped."""

    source = backup_file if isinstance(backup_file, Path) else Path(backup_file)
    if not source.exists():
        raise FileNotFoundError(f"Backup file not found: {source}")
    try:
        text = source.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        raise BackupFormatError("Invalid backup file format") from exc
    incoming = parse_backup(text)
    logger.info("Backup parsed", extra={"path": str(source), "notebooks": len(incoming)})
    return import_notebooks(existing, incoming)


__all__ = [
    "BackupFormatError",
    "backup_filename",
    "encode_backup",
    "parse_backup",
    "restore_backup",
    "write_backup",
]
