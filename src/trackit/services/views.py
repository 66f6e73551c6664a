"""Derived views over a notebook: totals, category breakdown, filtered and sorted listings."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional, Sequence

from ..constants.categories import DEFAULT_CATEGORY
from ..models.notebook import Notebook, Transaction, TransactionType

TRANSACTION_SORT_ORDERS = ("date-desc", "date-asc", "amount-desc", "amount-asc")
NOTEBOOK_SORT_ORDERS = ("date-desc", "date-asc", "name-asc", "name-desc")
TYPE_FILTERS = ("all", TransactionType.EXPENDITURE.value, TransactionType.EARNING.value)

DEFAULT_SORT_ORDER = "date-desc"


@dataclass(frozen=True)
class Aggregate:
    """Totals shown at the top of a notebook."""

    total_earnings: float = 0.0
    total_expenditure: float = 0.0
    balance: float = 0.0
    category_breakdown: list[tuple[str, float]] = field(default_factory=list)

    def category_share(self, amount: float) -> float:
        """Percentage of total expenditure represented by ``amount``."""

        if self.total_expenditure <= 0:
            return 0.0
        return amount / self.total_expenditure * 100


@dataclass
class TransactionQuery:
    """Filters applied to a notebook listing."""

    type_filter: str = "all"  # all | Expenditure | Earning
    search_term: str = ""
    sort_order: str = DEFAULT_SORT_ORDER


def aggregate(transactions: Iterable[Transaction]) -> Aggregate:
    """Compute earnings, expenditure, balance and the expenditure breakdown by category."""

    earnings = 0.0
    expenditure = 0.0
    totals: dict[str, float] = {}
    for txn in transactions:
        if txn.type is TransactionType.EARNING:
            earnings += txn.amount
            continue
        expenditure += txn.amount
        key = txn.category or DEFAULT_CATEGORY
        totals[key] = totals.get(key, 0.0) + txn.amount

    # sorted() is stable, so equal sums keep first-encounter order
    breakdown = sorted(totals.items(), key=lambda entry: entry[1], reverse=True)
    return Aggregate(
        total_earnings=earnings,
        total_expenditure=expenditure,
        balance=earnings - expenditure,
        category_breakdown=breakdown,
    )


def parse_date(value: str) -> Optional[date]:
    """Return the calendar date for an ISO string, or None when it does not parse."""

    text = (value or "").strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def _matches(txn: Transaction, needle: str) -> bool:
    haystacks = [txn.item, txn.description, txn.payment_mode]
    if txn.category:
        haystacks.append(txn.category)
    return any(needle in (text or "").lower() for text in haystacks)


def _sort_by_date(transactions: list[Transaction], *, newest_first: bool) -> list[Transaction]:
    dated: list[tuple[date, Transaction]] = []
    undated: list[Transaction] = []
    for txn in transactions:
        parsed = parse_date(txn.date)
        if parsed is None:
            undated.append(txn)
        else:
            dated.append((parsed, txn))
    dated.sort(key=lambda pair: pair[0], reverse=newest_first)
    # Unparsable dates always trail, in their original order
    return [txn for _, txn in dated] + undated


def filter_and_sort(
    transactions: Sequence[Transaction],
    type_filter: str = "all",
    search_term: str = "",
    sort_order: str = DEFAULT_SORT_ORDER,
) -> list[Transaction]:
    """Return a filtered, sorted copy of ``transactions``."""

    result = list(transactions)

    if type_filter and type_filter != "all":
        result = [txn for txn in result if txn.type.value == type_filter]

    if search_term:
        needle = search_term.lower()
        result = [txn for txn in result if _matches(txn, needle)]

    if sort_order == "date-asc":
        return _sort_by_date(result, newest_first=False)
    if sort_order == "amount-desc":
        return sorted(result, key=lambda txn: txn.amount, reverse=True)
    if sort_order == "amount-asc":
        return sorted(result, key=lambda txn: txn.amount)
    return _sort_by_date(result, newest_first=True)


def apply_query(transactions: Sequence[Transaction], query: TransactionQuery) -> list[Transaction]:
    return filter_and_sort(
        transactions,
        type_filter=query.type_filter,
        search_term=query.search_term,
        sort_order=query.sort_order,
    )


def _collation_key(name: str) -> tuple[str, str]:
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), name)


def sort_notebooks(notebooks: Sequence[Notebook], sort_order: str = DEFAULT_SORT_ORDER) -> list[Notebook]:
    """Return notebooks ordered for the home listing; unknown orders fall back to newest first."""

    if sort_order == "date-asc":
        return sorted(notebooks, key=lambda nb: nb.created_at)
    if sort_order == "name-asc":
        return sorted(notebooks, key=lambda nb: _collation_key(nb.name))
    if sort_order == "name-desc":
        return sorted(notebooks, key=lambda nb: _collation_key(nb.name), reverse=True)
    return sorted(notebooks, key=lambda nb: nb.created_at, reverse=True)


__all__ = [
    "Aggregate",
    "DEFAULT_SORT_ORDER",
    "NOTEBOOK_SORT_ORDERS",
    "TRANSACTION_SORT_ORDERS",
    "TYPE_FILTERS",
    "TransactionQuery",
    "aggregate",
    "apply_query",
    "filter_and_sort",
    "parse_date",
    "sort_notebooks",
]
