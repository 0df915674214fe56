"""Display formatting for amounts, dates and percentages."""
from datetime import datetime
from decimal import Decimal

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
}


def format_currency(amount: Decimal, currency_code: str = "USD") -> str:
    """Render an amount with the currency symbol and two decimals, e.g. ``$1,234.50``."""
    symbol = CURRENCY_SYMBOLS.get(currency_code.upper(), f"{currency_code.upper()} ")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_date(value: datetime) -> str:
    """Medium date style, e.g. ``Oct 5, 2026``."""
    return f"{value:%b} {value.day}, {value.year}"


def format_percent(ratio: float, decimals: int = 0) -> str:
    """Signed percentage of a ratio: 0.25 -> ``+25%``."""
    sign = "+" if ratio >= 0 else ""
    return f"{sign}{ratio * 100:.{decimals}f}%"
