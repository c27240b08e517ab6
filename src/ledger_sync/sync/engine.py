#!/usr/bin/env python3
"""
Sync Engine

Runs one reconciliation pass from the source ledger to one destination wallet:

1. Compute the window from today's date.
2. Fetch the destination history for the window's months and pool it.
3. Fetch the source history.
4. For each source row in page order: classify, window-filter, match,
   and create the entry when no match was found.

Rows are handled strictly one after another because every match shrinks the
pool for the rows that follow. Fatal errors propagate unchanged; entries
created earlier in the same run are not rolled back.
"""

import logging
from datetime import date

from ..core.models import SyncOutcome, SyncResult, SyncSummary
from ..paseli.classifier import classify
from .emitter import CommandEmitter, build_command
from .matcher import DestinationPool, Reconciler
from .protocols import DestinationLedger, SourceLedger
from .window import SyncWindow

logger = logging.getLogger(__name__)


class SyncEngine:
    """Mirrors source movements missing from a destination wallet."""

    def __init__(
        self,
        source: SourceLedger,
        destination: DestinationLedger,
        wallet_id: str,
        today: date | None = None,
        dry_run: bool = False,
    ):
        """
        Initialize the engine.

        Args:
            source: Source collaborator
            destination: Destination collaborator
            wallet_id: Destination wallet receiving the entries
            today: Run date (default: the current date)
            dry_run: Plan create commands without sending them
        """
        self.source = source
        self.destination = destination
        self.wallet_id = wallet_id
        self.today = today
        self.dry_run = dry_run

    def load_pool(self, window: SyncWindow) -> DestinationPool:
        """Fetch the destination history for every month of the window."""
        entries = []
        for year, month in window.months():
            entries.extend(self.destination.fetch_destination_history(self.wallet_id, year, month))
        pool = DestinationPool(entries)
        logger.debug("Destination pool holds %d entries", len(pool))
        return pool

    def run(self) -> SyncSummary:
        """
        Execute one sync run.

        Returns:
            SyncSummary with one result per source row

        Raises:
            CategoryNotFoundError: If a category is missing from the catalog
            CreateEntryError: If the destination rejects an entry
        """
        window = SyncWindow.for_date(self.today)
        logger.info(
            "Syncing wallet %s from %s to %s%s",
            self.wallet_id,
            window.start.isoformat(),
            window.end.isoformat(),
            " (dry run)" if self.dry_run else "",
        )

        reconciler = Reconciler(self.load_pool(window))
        records = self.source.fetch_source_history()
        emitter = CommandEmitter(self.destination, self.destination.fetch_category_catalog(), dry_run=self.dry_run)

        summary = SyncSummary(
            wallet_id=self.wallet_id,
            window_start=window.start,
            window_end=window.end,
            dry_run=self.dry_run,
        )

        for record in records:
            classification = classify(record)
            transaction = classification.transaction
            if transaction is None:
                logger.warning(
                    "Unrecognized transaction description: %s (%s), skipping...",
                    record.description,
                    classification.reason,
                )
                summary.results.append(SyncResult(record, SyncOutcome.UNRECOGNIZED))
                continue

            if not window.is_eligible(transaction):
                summary.results.append(SyncResult(record, SyncOutcome.SKIPPED_OLD, transaction=transaction))
                continue

            entry = reconciler.match(transaction)
            if entry is not None:
                summary.results.append(
                    SyncResult(record, SyncOutcome.MATCHED, transaction=transaction, matched_entry=entry)
                )
                continue

            command = build_command(self.wallet_id, transaction)
            emitter.emit(command)
            outcome = SyncOutcome.PLANNED if self.dry_run else SyncOutcome.CREATED
            summary.results.append(SyncResult(record, outcome, transaction=transaction, command=command))

        logger.info(
            "Sync finished: %d processed, %d matched, %d %s, %d skipped, %d unrecognized",
            summary.total_processed,
            summary.count(SyncOutcome.MATCHED),
            summary.count(SyncOutcome.PLANNED if self.dry_run else SyncOutcome.CREATED),
            "planned" if self.dry_run else "created",
            summary.count(SyncOutcome.SKIPPED_OLD),
            summary.count(SyncOutcome.UNRECOGNIZED),
        )
        return summary
