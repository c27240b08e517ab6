#!/usr/bin/env python3
"""
Sync Window

A run only looks at the previous and current calendar month. The same window
decides which destination months are fetched and which source rows are old
enough to skip, so the two horizons cannot drift apart within a run.
"""

import logging
from dataclasses import dataclass
from datetime import date

from ..core.dates import beginning_of_previous_month, month_key
from ..core.models import CanonicalTransaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncWindow:
    """Trailing window from the first day of the previous month to today."""

    start: date
    end: date

    @classmethod
    def for_date(cls, today: date | None = None) -> "SyncWindow":
        """Compute the window for a run happening on ``today`` (default: the current date)."""
        if today is None:
            today = date.today()
        return cls(start=beginning_of_previous_month(today), end=today)

    def months(self) -> list[tuple[int, int]]:
        """(year, month) pairs whose destination history must be fetched."""
        return [month_key(self.start), month_key(self.end)]

    def is_eligible(self, transaction: CanonicalTransaction) -> bool:
        """
        Check whether a transaction is recent enough to sync.

        Only the lower bound is enforced; the source never reports future rows.
        """
        if transaction.date < self.start:
            logger.info(
                "Skipping old transaction: %s %s %d",
                transaction.date.isoformat(),
                transaction.description,
                transaction.amount,
            )
            return False
        return True
