#!/usr/bin/env python3
"""
Destination Matching Module

Decides whether a canonical transaction is already recorded on the destination.

Matching is greedy: the first pool entry (in date, then fetch order) that
satisfies the predicate is consumed, even if a later entry would be a closer
fit. Two same-day payments for similarly named items can therefore claim each
other's entries. Each entry is consumed at most once per run.
"""

import logging
from collections import defaultdict
from collections.abc import Callable, Iterable, Iterator
from datetime import date
from enum import Enum

from ..core.models import CanonicalTransaction, DestinationEntry, Direction

logger = logging.getLogger(__name__)


class MatchStrategy(Enum):
    """Predicate used for each direction."""

    DATE_AMOUNT = "date_amount"  # income
    DATE_AMOUNT_DESCRIPTION = "date_amount_description"  # expense


class DestinationPool:
    """
    Consumable multiset of destination entries, indexed by date.

    Entries sharing a date keep their original relative order.
    """

    def __init__(self, entries: Iterable[DestinationEntry] = ()):
        self._by_date: dict[date, list[DestinationEntry]] = defaultdict(list)
        for entry in sorted(entries, key=lambda e: e.date):
            self._by_date[entry.date].append(entry)

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._by_date.values())

    def remaining(self) -> list[DestinationEntry]:
        """Unconsumed entries in pool order."""
        return [entry for day in sorted(self._by_date) for entry in self._by_date[day]]

    def take_first(self, on: date, predicate: Callable[[DestinationEntry], bool]) -> DestinationEntry | None:
        """Remove and return the first entry on ``on`` satisfying ``predicate``."""
        candidates = self._by_date.get(on)
        if not candidates:
            return None
        for index, entry in enumerate(candidates):
            if predicate(entry):
                del candidates[index]
                return entry
        return None

    def take_income_match(self, transaction: CanonicalTransaction) -> DestinationEntry | None:
        """Consume the first entry with the same date and amount."""
        return self.take_first(transaction.date, lambda e: e.amount == transaction.amount)

    def take_expense_match(self, transaction: CanonicalTransaction) -> DestinationEntry | None:
        """
        Consume the first entry with the same date and amount whose description
        contains the transaction's item name.

        Destination descriptions are often edited by hand ("映画チケット購入"),
        so containment is used rather than equality.
        """
        return self.take_first(
            transaction.date,
            lambda e: e.amount == transaction.amount and transaction.description in e.description,
        )


class Reconciler:
    """Matches canonical transactions against a destination pool it owns for one run."""

    def __init__(self, pool: DestinationPool):
        self.pool = pool

    def match(self, transaction: CanonicalTransaction) -> DestinationEntry | None:
        """
        Find and consume the destination entry recording ``transaction``.

        Args:
            transaction: Canonical transaction (income or expense)

        Returns:
            The consumed entry, or None if the destination lacks it
        """
        if transaction.direction == Direction.INCOME:
            strategy = MatchStrategy.DATE_AMOUNT
            entry = self.pool.take_income_match(transaction)
        else:
            strategy = MatchStrategy.DATE_AMOUNT_DESCRIPTION
            entry = self.pool.take_expense_match(transaction)

        if entry is not None:
            logger.info(
                "Found existing entry (%s): %s %s %d",
                strategy.value,
                transaction.date.isoformat(),
                entry.description,
                entry.amount,
            )
        return entry

    def reconcile(
        self, transactions: Iterable[CanonicalTransaction]
    ) -> Iterator[tuple[CanonicalTransaction, DestinationEntry | None]]:
        """Match transactions in order, yielding each with its consumed entry or None."""
        for transaction in transactions:
            yield transaction, self.match(transaction)
