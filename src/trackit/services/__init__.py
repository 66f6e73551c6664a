"""Service module exports."""

from . import backup, export_csv, insights, ledger_store, records, reports, views

__all__ = [
    "backup",
    "export_csv",
    "insights",
    "ledger_store",
    "records",
    "reports",
    "views",
]
