"""
Formatting utilities for display values in Bulgarian (bg-BG) style.

- Thousands separator: space, only from five integer digits up (1234 vs 12 345)
- Decimal separator: comma
- Currency symbol after the amount: "лв." for BGN, "€" for EUR
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from datetime import date, datetime
from typing import Union, Optional

CURRENCY_SYMBOLS = {
    'BGN': 'лв.',
    'EUR': '€',
}


def _group_thousands(integer_part: str) -> str:
    """Group by three with spaces; four-digit numbers stay ungrouped."""
    if len(integer_part) < 5:
        return integer_part
    reversed_int = integer_part[::-1]
    groups = [reversed_int[i:i+3] for i in range(0, len(reversed_int), 3)]
    return ' '.join(groups)[::-1]


def num_bg(value: Union[int, float, Decimal, str, None], decimals: int = 2) -> str:
    """
    Format a number in Bulgarian style with a fixed number of decimals.

    Examples:
        num_bg(945) -> "945,00"
        num_bg(1234.5) -> "1234,50"
        num_bg(12345.678) -> "12 345,68"
        num_bg(21, decimals=3) -> "21,000"
        num_bg(None) -> "-"
    """
    if value is None or value == "":
        return "-"

    try:
        normalized = str(value).replace(",", ".")
        num = Decimal(normalized).quantize(Decimal(10) ** -decimals, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError, TypeError):
        return "-"

    sign = "-" if num < 0 else ""
    num = abs(num)

    text = f"{num:.{decimals}f}"
    if decimals:
        integer_part, decimal_part = text.split(".")
        return f"{sign}{_group_thousands(integer_part)},{decimal_part}"
    return f"{sign}{_group_thousands(text)}"


def money_bg(value: Union[int, float, Decimal, str, None], currency: str = 'BGN') -> str:
    """
    Format an amount with two decimals and its currency symbol.

    Examples:
        money_bg(945) -> "945,00 лв."
        money_bg(12345.5, 'EUR') -> "12 345,50 €"
    """
    formatted = num_bg(value, 2)
    if formatted == "-":
        return formatted
    symbol = CURRENCY_SYMBOLS.get((currency or 'BGN').upper(), (currency or '').upper())
    return f"{formatted} {symbol}"


def date_bg(value: Union[date, datetime, None]) -> str:
    """
    Format a date as DD.MM.YYYY.

    Examples:
        date_bg(date(2025, 6, 20)) -> "20.06.2025"
    """
    if value is None:
        return "-"

    if isinstance(value, datetime):
        value = value.date()

    if not isinstance(value, date):
        return "-"

    return value.strftime("%d.%m.%Y")


def datetime_bg(value: Optional[datetime]) -> str:
    """Format a datetime as DD.MM.YYYY HH:MM ("-" when missing)."""
    if not isinstance(value, datetime):
        return "-"
    return value.strftime("%d.%m.%Y %H:%M")
