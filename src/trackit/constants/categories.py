"""
Centralized category definitions for transaction forms, filters and reports.
The set is closed: records carrying any other label are kept as-is but never offered in forms.
"""

from __future__ import annotations

# Transaction Categories
TRANSACTION_CATEGORIES = [
    "Food & Drink",
    "Shopping",
    "Transport",
    "Bills & Utilities",
    "Entertainment",
    "Health",
    "Salary",
    "Investment",
    "Gift",
    "Others",
]

# Preselected in new transaction forms and used to group uncategorized expenditures
DEFAULT_CATEGORY = "Others"
