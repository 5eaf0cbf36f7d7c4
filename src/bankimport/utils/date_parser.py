"""Date parsing utilities."""

import re
from datetime import date, datetime, timedelta
from typing import Any

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

# Tried in order; the first match wins.
_YEAR_FIRST = re.compile(r"(\d{4})[-./](\d{1,2})[-./](\d{1,2})")
_COMPACT = re.compile(r"^(\d{4})(\d{2})(\d{2})")
_DAY_FIRST = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})")


def parse_transaction_date(value: Any) -> str:
    """Normalize a bank export date cell to ``YYYY-MM-DD``.

    Handles:
    - native date/datetime cells (spreadsheets)
    - "2024-03-05", "2024.3.5", "2024/03/05 14:22:01"
    - "20240305"
    - "5/3/2024" (day first)

    Args:
        value: Raw cell value

    Returns:
        ISO date string, or "" if the value is not recognized
    """
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")

    text = str(value).strip()
    if not text:
        return ""

    match = _YEAR_FIRST.search(text)
    if match:
        year, month, day = match.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    match = _COMPACT.match(text)
    if match:
        year, month, day = match.groups()
        return f"{year}-{month}-{day}"

    match = _DAY_FIRST.search(text)
    if match:
        day, month, year = match.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    return ""


def parse_date(date_str: str) -> date:
    """Parse a date filter string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and relative
    dates: "today", "yesterday", "last week", "this month", "last year", etc.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "week":
            # Monday of last week
            return today - timedelta(days=today.weekday() + 7)
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        if period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "week":
            return today - timedelta(days=today.weekday())
        if period == "month":
            return today.replace(day=1)
        if period == "year":
            return today.replace(month=1, day=1)

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
