#!/usr/bin/env python3
"""
Yen Amount Utilities

Both ledgers record whole yen, so amounts are plain integers throughout.

Currency Formats:
- PASELI history page: "1,500円" (always an unsigned magnitude)
- Money Forward CSV: "-1,500" (signed, comma separated)
- Display: "1,500円" / "-1,500円"
"""

import re

_YEN_CLEANUP = re.compile(r"[,\s円¥￥]")


def parse_yen(amount_str: str) -> int:
    """
    Parse a yen amount string to an integer.

    Args:
        amount_str: Text like "1,500円", "¥1,500" or "-3,000"

    Returns:
        Integer yen amount, sign preserved

    Raises:
        ValueError: If the text does not contain a whole-yen amount

    Example:
        parse_yen("1,500円") -> 1500
    """
    cleaned = _YEN_CLEANUP.sub("", amount_str)
    if not re.fullmatch(r"[-+]?\d+", cleaned):
        raise ValueError(f"Invalid yen amount: {amount_str!r}")
    return int(cleaned)


def format_yen(amount: int) -> str:
    """
    Format an integer yen amount for display.

    Example:
        format_yen(-1500) -> "-1,500円"
    """
    return f"{amount:,}円"
