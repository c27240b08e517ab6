#!/usr/bin/env python3
"""
Calendar Date Helpers

Month arithmetic and lenient date parsing shared by the PASELI scraper,
the Money Forward CSV reader and the sync window.
"""

from datetime import date, datetime

# Formats seen on the PASELI history page and in Money Forward CSV exports
_DATE_FORMATS = [
    "%Y/%m/%d",
    "%Y-%m-%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y年%m月%d日",
]


def parse_date(date_str: str) -> date:
    """
    Parse a date string in any of the known site formats.

    Args:
        date_str: Date text such as "2024/05/03" or "2024/05/03 12:34"

    Returns:
        Parsed calendar date

    Raises:
        ValueError: If the text matches none of the known formats
    """
    text = date_str.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Invalid date format: {date_str!r}")


def beginning_of_month(day: date) -> date:
    """Return the first day of the month containing ``day``."""
    return day.replace(day=1)


def beginning_of_previous_month(day: date) -> date:
    """
    Return the first day of the calendar month before ``day``'s month.

    Example:
        beginning_of_previous_month(date(2024, 1, 15)) -> date(2023, 12, 1)
    """
    if day.month == 1:
        return date(day.year - 1, 12, 1)
    return date(day.year, day.month - 1, 1)


def month_key(day: date) -> tuple[int, int]:
    """Return the (year, month) pair for ``day``."""
    return day.year, day.month
