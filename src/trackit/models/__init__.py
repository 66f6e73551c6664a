"""Model exports."""

from .document import StoredDocument
from .notebook import Notebook, Transaction, TransactionType

__all__ = [
    "Notebook",
    "StoredDocument",
    "Transaction",
    "TransactionType",
]
