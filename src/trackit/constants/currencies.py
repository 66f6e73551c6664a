"""Currency reference list offered when creating a notebook."""

from __future__ import annotations

# (symbol, display name) pairs; the symbol is what notebooks store.
CURRENCIES: list[tuple[str, str]] = [
    ("₹", "Indian Rupee"),
    ("$", "US Dollar"),
    ("€", "Euro"),
    ("£", "British Pound"),
    ("¥", "Japanese Yen"),
    ("₩", "South Korean Won"),
    ("₽", "Russian Ruble"),
    ("₺", "Turkish Lira"),
    ("₱", "Philippine Peso"),
    ("฿", "Thai Baht"),
    ("₫", "Vietnamese Dong"),
    ("₦", "Nigerian Naira"),
    ("৳", "Bangladeshi Taka"),
    ("₨", "Pakistani Rupee"),
    ("R", "South African Rand"),
    ("R$", "Brazilian Real"),
    ("A$", "Australian Dollar"),
    ("C$", "Canadian Dollar"),
    ("CHF", "Swiss Franc"),
    ("AED", "UAE Dirham"),
]

DEFAULT_CURRENCY = "₹"

# Applied by the loader to stored notebooks that predate the currency field.
FALLBACK_CURRENCY = "₹"


def currency_symbols() -> list[str]:
    """Return the selectable currency symbols in display order."""

    return [symbol for symbol, _ in CURRENCIES]
