"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

from datetime import date

import pytest

from ledger_sync.core import config as config_module
from ledger_sync.core.models import SourceRecord
from tests.fixtures.ledgers import FakeDestination, FakeSource, sample_catalog


@pytest.fixture
def run_date() -> date:
    """Fixed run date; the sync window then starts on 2024-04-01."""
    return date(2024, 5, 20)


@pytest.fixture
def catalog():
    """Category catalog containing both default category pairs."""
    return sample_catalog()


@pytest.fixture
def destination(catalog) -> FakeDestination:
    """Empty in-memory destination ledger."""
    return FakeDestination(catalog=catalog)


@pytest.fixture
def charge_record() -> SourceRecord:
    """PASELI top-up of 3,000 yen."""
    return SourceRecord(date=date(2024, 5, 3), description="チャージ", amount=3000)


@pytest.fixture
def payment_record() -> SourceRecord:
    """PASELI payment of 1,500 yen for a movie."""
    return SourceRecord(date=date(2024, 5, 10), description="支払い(映画)", amount=1500)


@pytest.fixture
def make_source():
    """Build a FakeSource from records."""

    def _make(*records: SourceRecord) -> FakeSource:
        return FakeSource(list(records))

    return _make


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Set up test environment variables and reset cached configuration."""
    # Ensure tests don't use production data
    monkeypatch.setenv("LEDGER_SYNC_ENV", "test")
    monkeypatch.setenv("LEDGER_SYNC_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("LOG_LEVEL", "INFO")

    # Never pick up real credentials from the developer's .env
    for env_var in ["PASELI_ID", "PASELI_PASSWORD", "MONEYFORWARD_WALLET_ID", "MONEYFORWARD_COOKIES"]:
        monkeypatch.delenv(env_var, raising=False)

    monkeypatch.setattr(config_module, "_config", None)
    yield
    config_module._config = None


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for complete workflows")
    config.addinivalue_line("markers", "paseli: Tests for the PASELI source")
    config.addinivalue_line("markers", "moneyforward: Tests for the Money Forward destination")
    config.addinivalue_line("markers", "sync: Tests for the reconciliation engine")
