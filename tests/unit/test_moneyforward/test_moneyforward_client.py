#!/usr/bin/env python3
"""Tests for the Money Forward ME web client."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from ledger_sync.core.config import MoneyForwardConfig
from ledger_sync.core.models import DestinationEntry, Direction
from ledger_sync.moneyforward import CREATE_SUCCESS_BODY, MoneyForwardClient, MoneyForwardError, load_cookie_jar
from tests.fixtures.ledgers import (
    MONEYFORWARD_CSV,
    MONEYFORWARD_ID_PAGE,
    MONEYFORWARD_INDEX_PAGE,
    MONEYFORWARD_WALLET_PAGE,
    make_response,
)


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def client(session):
    return MoneyForwardClient(session, config=MoneyForwardConfig())


class TestLogin:
    """Test session verification."""

    @pytest.mark.moneyforward
    def test_login_reads_display_name(self, client, session):
        session.get.return_value = make_response(200, MONEYFORWARD_ID_PAGE)

        assert client.login() == "test@example.com"

    @pytest.mark.moneyforward
    def test_login_with_expired_cookies(self, client, session):
        session.get.return_value = make_response(200, "<html>sign in</html>")

        with pytest.raises(MoneyForwardError, match="cookies may have expired"):
            client.login()


class TestHistory:
    """Test the CSV history download."""

    @pytest.mark.moneyforward
    def test_fetch_destination_history(self, client, session):
        session.get.return_value = make_response(200, content=MONEYFORWARD_CSV.encode("cp932"))

        entries = client.fetch_destination_history("wallet-1", 2024, 5)

        assert entries[0] == DestinationEntry(
            date=date(2024, 5, 10),
            description="映画チケット購入",
            amount=-1500,
            category_large="趣味・娯楽",
            category_medium="映画・音楽・ゲーム",
            memo="",
        )
        assert entries[1].amount == 3000
        assert entries[1].memo == "手入力"

        params = session.get.call_args.kwargs["params"]
        assert params == {
            "account_id_hash": "wallet-1",
            "from": "2024/05/01",
            "month": 5,
            "service_id": 0,
            "year": 2024,
        }

    @pytest.mark.moneyforward
    def test_fetch_destination_history_failure(self, client, session):
        session.get.return_value = make_response(403)

        with pytest.raises(MoneyForwardError, match="Failed to fetch history"):
            client.fetch_destination_history("wallet-1", 2024, 5)

    @pytest.mark.moneyforward
    def test_empty_export_is_an_error(self, client, session):
        session.get.return_value = make_response(200, content=b"")

        with pytest.raises(MoneyForwardError, match="Failed to parse history CSV for 2024-05"):
            client.fetch_destination_history("wallet-1", 2024, 5)

    @pytest.mark.moneyforward
    def test_changed_export_header_is_an_error(self, client, session):
        """Test that a renamed amount column is reported instead of raising KeyError."""
        renamed = MONEYFORWARD_CSV.replace("金額（円）", "金額")
        session.get.return_value = make_response(200, content=renamed.encode("cp932"))

        with pytest.raises(MoneyForwardError, match="missing columns: 金額（円）"):
            client.fetch_destination_history("wallet-1", 2024, 5)

    @pytest.mark.moneyforward
    def test_month_without_entries(self, client, session):
        header = MONEYFORWARD_CSV.splitlines()[0] + "\n"
        session.get.return_value = make_response(200, content=header.encode("cp932"))

        assert client.fetch_destination_history("wallet-1", 2024, 5) == []


class TestCategoryCatalog:
    """Test category catalog scraping."""

    @pytest.mark.moneyforward
    def test_fetch_category_catalog(self, client, session):
        session.get.return_value = make_response(200, MONEYFORWARD_INDEX_PAGE)

        catalog = client.fetch_category_catalog()

        assert [c.name for c in catalog.income_large] == ["収入", "未分類"]
        assert catalog.find_medium(Direction.INCOME, 2, "未分類").id == 21
        assert catalog.find_large(Direction.EXPENSE, "趣味・娯楽").id == 4
        assert catalog.find_medium(Direction.EXPENSE, 4, "本").id == 42
        assert catalog.find_large(Direction.EXPENSE, "収入") is None

    @pytest.mark.moneyforward
    def test_catalog_is_fetched_once(self, client, session):
        session.get.return_value = make_response(200, MONEYFORWARD_INDEX_PAGE)

        first = client.fetch_category_catalog()
        second = client.fetch_category_catalog()

        assert first is second
        assert session.get.call_count == 1

    @pytest.mark.moneyforward
    def test_missing_menus(self, client, session):
        session.get.return_value = make_response(200, "<html></html>")

        with pytest.raises(MoneyForwardError, match="Category menus not found"):
            client.fetch_category_catalog()


class TestCreateEntry:
    """Test manual entry creation."""

    def _create(self, client, direction=Direction.EXPENSE, amount=-1500):
        return client.create_entry("wallet-1", direction, date(2024, 5, 10), amount, 4, 41, "映画")

    @pytest.mark.moneyforward
    def test_create_expense(self, client, session):
        session.get.return_value = make_response(200, MONEYFORWARD_WALLET_PAGE)
        session.post.return_value = make_response(200, CREATE_SUCCESS_BODY)

        assert self._create(client) is True

        form = session.post.call_args.kwargs["data"]
        assert form["authenticity_token"] == "mf-token"
        assert form["user_asset_act[is_income]"] == "0"
        assert form["user_asset_act[amount]"] == "-1500"
        assert form["user_asset_act[updated_at]"] == "2024/05/10"
        assert form["month"] == "2024-05"
        assert form["user_asset_act[sub_account_id_hash]"] == "sub-paseli"
        assert form["user_asset_act[large_category_id]"] == "4"
        assert form["user_asset_act[middle_category_id]"] == "41"
        assert form["user_asset_act[content]"] == "映画"
        assert session.post.call_args.kwargs["headers"] == {"X-CSRF-Token": "mf-token"}

    @pytest.mark.moneyforward
    def test_create_income_flag(self, client, session):
        session.get.return_value = make_response(200, MONEYFORWARD_WALLET_PAGE)
        session.post.return_value = make_response(200, CREATE_SUCCESS_BODY)

        assert self._create(client, Direction.INCOME, 3000) is True
        assert session.post.call_args.kwargs["data"]["user_asset_act[is_income]"] == "1"

    @pytest.mark.moneyforward
    @pytest.mark.parametrize(
        "status,body",
        [(500, ""), (200, "alert('error');")],
        ids=["http_error", "unexpected_body"],
    )
    def test_create_rejected(self, client, session, status, body):
        session.get.return_value = make_response(200, MONEYFORWARD_WALLET_PAGE)
        session.post.return_value = make_response(status, body)

        assert self._create(client) is False

    @pytest.mark.moneyforward
    def test_wallet_page_failure_raises(self, client, session):
        session.get.return_value = make_response(404)

        with pytest.raises(MoneyForwardError, match="Failed to get wallet page"):
            self._create(client)


class TestCookieJar:
    """Test cookies.txt loading."""

    @pytest.mark.moneyforward
    def test_load_cookie_jar(self, tmp_path):
        cookies_file = tmp_path / "cookies.txt"
        cookies_file.write_text(
            "# Netscape HTTP Cookie File\n"
            ".moneyforward.com\tTRUE\t/\tTRUE\t0\t_moneybook_session\tabc123\n"
        )

        jar = load_cookie_jar(cookies_file)

        assert {c.name: c.value for c in jar} == {"_moneybook_session": "abc123"}

    @pytest.mark.moneyforward
    def test_missing_cookie_file(self, tmp_path):
        with pytest.raises(MoneyForwardError, match="Cookies file not found"):
            load_cookie_jar(tmp_path / "missing.txt")

    @pytest.mark.moneyforward
    def test_from_cookies_file_builds_authenticated_session(self, tmp_path):
        cookies_file = tmp_path / "cookies.txt"
        cookies_file.write_text(
            "# Netscape HTTP Cookie File\n"
            ".moneyforward.com\tTRUE\t/\tTRUE\t0\t_moneybook_session\tabc123\n"
        )

        client = MoneyForwardClient.from_cookies_file(cookies_file, config=MoneyForwardConfig())

        assert client.session.cookies.get("_moneybook_session") == "abc123"
