#!/usr/bin/env python3
"""Tests for the sync window."""

from datetime import date

import pytest

from ledger_sync.core.models import CanonicalTransaction
from ledger_sync.sync import SyncWindow


def tx_on(day: date) -> CanonicalTransaction:
    return CanonicalTransaction(date=day, description="チャージ", amount=1000)


class TestSyncWindow:
    """Test window computation and eligibility."""

    @pytest.mark.sync
    def test_for_date(self):
        window = SyncWindow.for_date(date(2024, 5, 20))

        assert window.start == date(2024, 4, 1)
        assert window.end == date(2024, 5, 20)

    @pytest.mark.sync
    def test_for_date_defaults_to_today(self):
        assert SyncWindow.for_date().end == date.today()

    @pytest.mark.sync
    @pytest.mark.parametrize(
        "today,months",
        [
            (date(2024, 5, 20), [(2024, 4), (2024, 5)]),
            (date(2024, 1, 2), [(2023, 12), (2024, 1)]),
        ],
        ids=["same_year", "year_boundary"],
    )
    def test_months_cover_previous_and_current(self, today, months):
        assert SyncWindow.for_date(today).months() == months

    @pytest.mark.sync
    def test_first_day_of_previous_month_is_eligible(self):
        window = SyncWindow.for_date(date(2024, 5, 20))

        assert window.is_eligible(tx_on(date(2024, 4, 1)))
        assert window.is_eligible(tx_on(date(2024, 5, 20)))

    @pytest.mark.sync
    def test_day_before_start_is_skipped(self, caplog):
        window = SyncWindow.for_date(date(2024, 5, 20))

        with caplog.at_level("INFO", logger="ledger_sync.sync.window"):
            assert not window.is_eligible(tx_on(date(2024, 3, 31)))

        assert "Skipping old transaction" in caplog.text
