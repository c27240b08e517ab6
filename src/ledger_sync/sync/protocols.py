#!/usr/bin/env python3
"""
Collaborator Protocols

The reconciliation engine only talks to the two ledgers through these
interfaces. ``PaseliClient`` and ``MoneyForwardClient`` implement them;
tests use in-memory fakes.
"""

from datetime import date
from typing import Protocol, Sequence

from ..core.models import CategoryCatalog, DestinationEntry, Direction, SourceRecord


class SourceLedger(Protocol):
    """Ledger whose movements are mirrored."""

    def fetch_source_history(self) -> Sequence[SourceRecord]:
        """
        Fetch raw history rows in page order (not necessarily sorted).

        Raises:
            Exception: Any failure is fatal to the run
        """
        ...


class DestinationLedger(Protocol):
    """Ledger that receives the missing entries."""

    def fetch_destination_history(self, wallet_id: str, year: int, month: int) -> Sequence[DestinationEntry]:
        """Fetch all entries of one wallet for one calendar month."""
        ...

    def fetch_category_catalog(self) -> CategoryCatalog:
        """Fetch the income/expense category tree."""
        ...

    def create_entry(
        self,
        wallet_id: str,
        direction: Direction,
        entry_date: date,
        amount: int,
        large_category_id: int,
        medium_category_id: int,
        description: str,
    ) -> bool:
        """
        Create one entry.

        Returns:
            True on success, False if the destination rejected it
        """
        ...
