"""
PASELI Source Package

The transit/e-money account whose charges and payments are mirrored.

Key Components:
- client: login and history/balance scraping
- classifier: raw history rows to canonical income/expense transactions
"""

from .classifier import (
    CHARGE_MARKER,
    EXPENSE_CATEGORY,
    INCOME_CATEGORY,
    Classification,
    ClassificationKind,
    classify,
)
from .client import PaseliClient, PaseliError

__all__ = [
    "CHARGE_MARKER",
    "EXPENSE_CATEGORY",
    "INCOME_CATEGORY",
    "Classification",
    "ClassificationKind",
    "PaseliClient",
    "PaseliError",
    "classify",
]
