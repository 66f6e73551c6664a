"""Notebook and transaction value types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Direction of a transaction; the value is what gets persisted."""

    EXPENDITURE = "Expenditure"
    EARNING = "Earning"

    @classmethod
    def coerce(cls, raw: object) -> "TransactionType":
        """Map a stored or user supplied value onto a member, defaulting to expenditure."""

        if isinstance(raw, cls):
            return raw
        text = str(raw or "").strip().lower()
        for member in cls:
            if text in {member.value.lower(), member.name.lower()}:
                return member
        if text in {"income", "earnings"}:
            return cls.EARNING
        return cls.EXPENDITURE


@dataclass(frozen=True)
class Transaction:
    """One earning or expenditure inside a notebook."""

    id: str
    date: str
    item: str
    type: TransactionType = TransactionType.EXPENDITURE
    amount: float = 0.0
    category: Optional[str] = None
    payment_mode: str = ""
    description: str = ""
    comments: str = ""


@dataclass(frozen=True)
class Notebook:
    """A named ledger holding one currency and its transactions."""

    id: str
    name: str
    currency: str
    created_at: int  # epoch milliseconds
    transactions: tuple[Transaction, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.transactions, tuple):
            object.__setattr__(self, "transactions", tuple(self.transactions))

    def find_transaction(self, transaction_id: str) -> Transaction | None:
        for txn in self.transactions:
            if txn.id == transaction_id:
                return txn
        return None
