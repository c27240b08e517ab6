#!/usr/bin/env python3
"""
PASELI Transaction Classifier

Turns raw PASELI history rows into canonical transactions.

PASELI only reports two kinds of movement:
- "チャージ": a top-up, recorded as income
- "支払い(<item>)": a payment for <item>, recorded as an expense

Anything else is left unrecognized for the caller to report and drop.
Classification looks only at the record itself, so the same record always
classifies the same way.
"""

import re
from dataclasses import dataclass
from enum import Enum

from ..core.models import CanonicalTransaction, CategoryPair, SourceRecord

CHARGE_MARKER = "チャージ"
PAYMENT_PATTERN = re.compile(r"\A支払い\((.+?)\)\Z")

INCOME_CATEGORY = CategoryPair(large="未分類", medium="未分類")
EXPENSE_CATEGORY = CategoryPair(large="趣味・娯楽", medium="映画・音楽・ゲーム")


class ClassificationKind(Enum):
    """Possible classifier outcomes."""

    INCOME = "income"
    EXPENSE = "expense"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class Classification:
    """Classifier result; ``transaction`` is None only for UNRECOGNIZED."""

    kind: ClassificationKind
    record: SourceRecord
    transaction: CanonicalTransaction | None = None
    reason: str | None = None

    @property
    def is_recognized(self) -> bool:
        return self.kind != ClassificationKind.UNRECOGNIZED


def classify(record: SourceRecord) -> Classification:
    """
    Classify a single PASELI history row.

    Args:
        record: Raw source record (amount is an unsigned magnitude)

    Returns:
        Classification with the canonical transaction for income/expense rows
    """
    if record.amount == 0:
        return Classification(ClassificationKind.UNRECOGNIZED, record, reason="zero amount")

    if record.description == CHARGE_MARKER:
        return Classification(
            ClassificationKind.INCOME,
            record,
            CanonicalTransaction(
                date=record.date,
                description=CHARGE_MARKER,
                amount=record.amount,
                category=INCOME_CATEGORY,
            ),
        )

    match = PAYMENT_PATTERN.match(record.description)
    if match:
        return Classification(
            ClassificationKind.EXPENSE,
            record,
            CanonicalTransaction(
                date=record.date,
                description=match.group(1),
                amount=-record.amount,
                category=EXPENSE_CATEGORY,
            ),
        )

    return Classification(ClassificationKind.UNRECOGNIZED, record, reason="unrecognized description")

