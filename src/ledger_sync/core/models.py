#!/usr/bin/env python3
"""
Core Data Models for Ledger Sync

Common data structures shared by the PASELI source, the Money Forward
destination and the reconciliation engine.

Amount sign convention: positive = income (charge), negative = expense.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from .dates import parse_date
from .currency import parse_yen


class Direction(Enum):
    """Direction of a money movement on the destination ledger."""

    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def from_amount(cls, amount: int) -> "Direction":
        """Determine direction from a signed amount."""
        if amount > 0:
            return cls.INCOME
        if amount < 0:
            return cls.EXPENSE
        raise ValueError("A zero amount has no direction")


@dataclass(frozen=True)
class CategoryPair:
    """Large/medium category names as shown on Money Forward."""

    large: str
    medium: str

    def __str__(self) -> str:
        return f"{self.large} / {self.medium}"


@dataclass(frozen=True)
class SourceRecord:
    """
    Raw row from the PASELI history page.

    The amount is always the unsigned magnitude; the description decides the sign.
    """

    date: date
    description: str
    amount: int

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError(f"Source amount must be non-negative, got {self.amount}")


@dataclass(frozen=True)
class CanonicalTransaction:
    """
    Dated, signed, categorized money movement ready for matching.

    A canonical transaction never carries a zero amount.
    """

    date: date
    description: str
    amount: int
    category: CategoryPair | None = None

    def __post_init__(self) -> None:
        if self.amount == 0:
            raise ValueError("Canonical transaction amount must not be zero")

    @property
    def direction(self) -> Direction:
        """Income for positive amounts, expense for negative ones."""
        return Direction.from_amount(self.amount)

    @property
    def magnitude(self) -> int:
        """Unsigned amount."""
        return abs(self.amount)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "date": self.date.isoformat(),
            "description": self.description,
            "amount": self.amount,
            "category_large": self.category.large if self.category else None,
            "category_medium": self.category.medium if self.category else None,
        }


@dataclass(frozen=True)
class DestinationEntry:
    """
    Entry already present in a Money Forward wallet.

    Field names follow the CSV export of the household ledger.
    """

    date: date
    description: str
    amount: int
    category_large: str = ""
    category_medium: str = ""
    memo: str = ""

    @classmethod
    def from_csv_row(cls, row: dict[str, str]) -> "DestinationEntry":
        """
        Create DestinationEntry from a Money Forward CSV row.

        Args:
            row: One row of the "/cf/csv" export as a dict of column name to text

        Returns:
            DestinationEntry instance
        """
        return cls(
            date=parse_date(row["日付"]),
            description=row.get("内容") or "",
            amount=parse_yen(row["金額（円）"]),
            category_large=row.get("大項目") or "",
            category_medium=row.get("中項目") or "",
            memo=row.get("メモ") or "",
        )


@dataclass(frozen=True)
class CreateCommand:
    """Instruction to add one new entry to the destination ledger."""

    wallet_id: str
    direction: Direction
    date: date
    description: str
    amount: int  # Positive magnitude
    large_category: str
    medium_category: str

    def __post_init__(self) -> None:
        if self.amount <= 0:
            raise ValueError(f"Create command amount must be positive, got {self.amount}")

    @property
    def signed_amount(self) -> int:
        """Amount signed by direction (negative for expenses)."""
        return self.amount if self.direction == Direction.INCOME else -self.amount

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "wallet_id": self.wallet_id,
            "direction": self.direction.value,
            "date": self.date.isoformat(),
            "description": self.description,
            "amount": self.amount,
            "large_category": self.large_category,
            "medium_category": self.medium_category,
        }


@dataclass(frozen=True)
class LargeCategory:
    """Top-level Money Forward category."""

    id: int
    name: str


@dataclass(frozen=True)
class MediumCategory:
    """Second-level Money Forward category, child of a large category."""

    id: int
    name: str
    large_category_id: int


@dataclass
class CategoryCatalog:
    """
    Money Forward category tree, scoped separately for income and expense.

    Category ids are opaque to everything but the destination client.
    """

    income_large: list[LargeCategory] = field(default_factory=list)
    income_medium: list[MediumCategory] = field(default_factory=list)
    expense_large: list[LargeCategory] = field(default_factory=list)
    expense_medium: list[MediumCategory] = field(default_factory=list)

    def large_categories(self, direction: Direction) -> list[LargeCategory]:
        """Large categories in the given scope."""
        return self.income_large if direction == Direction.INCOME else self.expense_large

    def medium_categories(self, direction: Direction) -> list[MediumCategory]:
        """Medium categories in the given scope."""
        return self.income_medium if direction == Direction.INCOME else self.expense_medium

    def find_large(self, direction: Direction, name: str) -> LargeCategory | None:
        """Find a large category by exact name."""
        return next((lc for lc in self.large_categories(direction) if lc.name == name), None)

    def find_medium(self, direction: Direction, large_category_id: int, name: str) -> MediumCategory | None:
        """Find a medium category by exact name under the given large category."""
        return next(
            (
                mc
                for mc in self.medium_categories(direction)
                if mc.name == name and mc.large_category_id == large_category_id
            ),
            None,
        )

    def to_names(self) -> dict[str, list[dict[str, Any]]]:
        """Names-only view: {"expense": [{large_name, medium_names}], "income": [...]}."""
        result: dict[str, list[dict[str, Any]]] = {}
        for direction in (Direction.EXPENSE, Direction.INCOME):
            result[direction.value] = [
                {
                    "large_name": lc.name,
                    "medium_names": [
                        mc.name for mc in self.medium_categories(direction) if mc.large_category_id == lc.id
                    ],
                }
                for lc in self.large_categories(direction)
            ]
        return result


class SyncOutcome(Enum):
    """What happened to one source record during a sync run."""

    MATCHED = "matched"
    CREATED = "created"
    PLANNED = "planned"  # Dry run: would have been created
    SKIPPED_OLD = "skipped_old"
    UNRECOGNIZED = "unrecognized"


@dataclass
class SyncResult:
    """Outcome for a single source record."""

    record: SourceRecord
    outcome: SyncOutcome
    transaction: CanonicalTransaction | None = None
    matched_entry: DestinationEntry | None = None
    command: CreateCommand | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "date": self.record.date.isoformat(),
            "description": self.record.description,
            "amount": self.record.amount,
            "outcome": self.outcome.value,
            "transaction": self.transaction.to_dict() if self.transaction else None,
            "matched_entry": (
                {
                    "date": self.matched_entry.date.isoformat(),
                    "description": self.matched_entry.description,
                    "amount": self.matched_entry.amount,
                }
                if self.matched_entry
                else None
            ),
            "command": self.command.to_dict() if self.command else None,
        }


@dataclass
class SyncSummary:
    """
    Result of one sync run.

    Contains every per-record outcome plus convenience counts.
    """

    wallet_id: str
    window_start: date
    window_end: date
    dry_run: bool = False
    results: list[SyncResult] = field(default_factory=list)

    def count(self, outcome: SyncOutcome) -> int:
        """Number of records with the given outcome."""
        return sum(1 for r in self.results if r.outcome == outcome)

    @property
    def commands(self) -> list[CreateCommand]:
        """Create commands that were executed or planned, in processing order."""
        return [r.command for r in self.results if r.command is not None]

    @property
    def total_processed(self) -> int:
        """Number of source records seen."""
        return len(self.results)

    def to_dict(self) -> dict[str, Any]:
        """Convert summary to dict for JSON serialization."""
        return {
            "wallet_id": self.wallet_id,
            "window_start": self.window_start.isoformat(),
            "window_end": self.window_end.isoformat(),
            "dry_run": self.dry_run,
            "summary": {
                "total_processed": self.total_processed,
                **{outcome.value: self.count(outcome) for outcome in SyncOutcome},
            },
            "results": [r.to_dict() for r in self.results],
        }
