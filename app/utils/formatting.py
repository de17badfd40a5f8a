"""
Display helpers shared by the API views, the client store and the reports:
currency and date formatting, month arithmetic and client-side ids.
"""
from __future__ import annotations

import calendar
import random
import string
import time
from datetime import date, datetime
from typing import Any, Optional, Tuple

CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£"}

COLORS = [
    "#8884d8",
    "#82ca9d",
    "#ffc658",
    "#ff7c7c",
    "#8dd1e1",
    "#d084d0",
    "#ffb347",
    "#87d068",
    "#ff9f40",
    "#6fa8dc",
    "#ea4335",
    "#34a853",
    "#fbbc04",
    "#4285f4",
    "#9aa0a6",
]

_BASE36 = string.digits + string.ascii_lowercase


def format_currency(amount: Any, currency: str = "USD") -> str:
    """Format like en-US currency output, e.g. ``$1,234.50`` or ``-$12.00``."""
    try:
        value = float(amount or 0)
    except (TypeError, ValueError):
        value = 0.0
    symbol = CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def parse_date(value: Any) -> Optional[date]:
    """
    Read a transaction date. Accepts date/datetime objects, ISO-8601 dates and
    timestamps, and unpadded ``YYYY-M-D`` dates. Anything else yields None.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    try:
        return datetime.strptime(text.replace("T", " ").split(" ")[0], "%Y-%m-%d").date()
    except ValueError:
        return None


def format_date(value: Any) -> str:
    """``2024-01-05`` -> ``Jan 5, 2024``. Unparseable input is returned as text."""
    parsed = parse_date(value)
    if parsed is None:
        return "" if value is None else str(value)
    return f"{calendar.month_abbr[parsed.month]} {parsed.day}, {parsed.year}"


def get_month_name(month: int) -> str:
    """Month name for a 1-based month number."""
    return calendar.month_name[month]


def shift_month(year: int, month: int, offset: int) -> Tuple[int, int]:
    """Move ``offset`` calendar months from year/month (negative goes back)."""
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def previous_month(year: int, month: int) -> Tuple[int, int]:
    return shift_month(year, month, -1)


def parse_month(value: str) -> Tuple[int, int]:
    """
    Parse a ``YYYY-MM`` string into (year, month).
    Raises ValueError for anything else.
    """
    parsed = datetime.strptime(value, "%Y-%m")
    return parsed.year, parsed.month


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def generate_id() -> str:
    """Client-side document id: base36 millisecond clock followed by random base36 digits."""
    return _to_base36(int(time.time() * 1000)) + _to_base36(random.getrandbits(52))


def color_for_category(index: int) -> str:
    return COLORS[index % len(COLORS)]
