#!/usr/bin/env python3
"""
Money Forward ME Web Client

Destination side of a sync run: reads a wallet's history as CSV, scrapes the
category catalog and creates manual entries. Authentication reuses a browser
session exported as a Netscape cookies.txt file.
"""

import io
import logging
import re
from datetime import date
from http.cookiejar import MozillaCookieJar
from pathlib import Path
from typing import Any

import pandas as pd
import requests
from bs4 import BeautifulSoup, Tag

from ..core.config import MoneyForwardConfig, get_config
from ..core.models import CategoryCatalog, DestinationEntry, Direction, LargeCategory, MediumCategory

logger = logging.getLogger(__name__)

# Money Forward exports CSV in Windows-31J
CSV_ENCODING = "cp932"

# Body returned by /cf/create when the entry was stored
CREATE_SUCCESS_BODY = "setTimeout('location.reload()',500);"

# Columns DestinationEntry.from_csv_row cannot do without
REQUIRED_CSV_COLUMNS = ("日付", "金額（円）")

_DISPLAY_NAME_PATTERN = re.compile(r'gon\.headerDisplayName="([^"]+)"')
_WALLET_NAME_PATTERN = re.compile(r"^(.*) \([-0-9,]+円\)$")


class MoneyForwardError(Exception):
    """Raised when Money Forward does not respond as expected."""


def load_cookie_jar(cookies_file: str | Path) -> MozillaCookieJar:
    """
    Load a Netscape cookies.txt file.

    Raises:
        MoneyForwardError: If the file is missing
    """
    path = Path(cookies_file)
    if not path.exists():
        raise MoneyForwardError(f"Cookies file not found: {path}")
    jar = MozillaCookieJar(str(path))
    jar.load(ignore_discard=True, ignore_expires=True)
    # Browsers export session cookies with expiry 0; keep them for the whole run
    for cookie in jar:
        if not cookie.expires:
            cookie.expires = None
    return jar


class MoneyForwardClient:
    """
    Scraper for the Money Forward ME household ledger.

    Usage:
        client = MoneyForwardClient(session)
        client.login()
        entries = client.fetch_destination_history(wallet_id, 2024, 5)
    """

    def __init__(self, session: requests.Session, config: MoneyForwardConfig | None = None):
        """
        Initialize the client.

        Args:
            session: HTTP session already carrying the Money Forward cookies
            config: Site URLs and timeout (defaults to application config)
        """
        self.session = session
        self.config = config if config is not None else get_config().moneyforward
        self.display_name: str | None = None
        self._catalog: CategoryCatalog | None = None

    @classmethod
    def from_cookies_file(
        cls, cookies_file: str | Path, config: MoneyForwardConfig | None = None
    ) -> "MoneyForwardClient":
        """Create a client whose session is authenticated by a cookies.txt file."""
        session = requests.Session()
        session.cookies.update(load_cookie_jar(cookies_file))
        return cls(session, config=config)

    @classmethod
    def from_config(cls) -> "MoneyForwardClient":
        """Create a client from the application configuration."""
        config = get_config().moneyforward
        if not config.cookies_file:
            raise MoneyForwardError("MONEYFORWARD_COOKIES must be set")
        return cls.from_cookies_file(config.cookies_file, config=config)

    def login(self) -> str:
        """
        Verify the session and return the account's display name.

        Raises:
            MoneyForwardError: If the session cookies are not accepted
        """
        logger.info("Logging in to Money Forward account...")
        response = self._get(self.config.id_url)
        self._expect_success(response, "Failed to get ID page")
        match = _DISPLAY_NAME_PATTERN.search(response.text)
        if not match:
            raise MoneyForwardError("Display name not found on ID page; cookies may have expired")
        self.display_name = match.group(1)
        logger.info("Logged in as %s", self.display_name)
        return self.display_name

    def fetch_destination_history(self, wallet_id: str, year: int, month: int) -> list[DestinationEntry]:
        """
        Fetch one month of a wallet's entries from the CSV export.

        Args:
            wallet_id: Money Forward account id hash of the wallet
            year: Calendar year
            month: Calendar month (1-12)

        Returns:
            List of DestinationEntry in export order

        Raises:
            MoneyForwardError: If the export cannot be fetched or parsed
        """
        response = self._get(
            f"{self.config.base_url}/cf/csv",
            params={
                "account_id_hash": wallet_id,
                "from": f"{year}/{month:02d}/01",
                "month": month,
                "service_id": 0,
                "year": year,
            },
        )
        self._expect_success(response, "Failed to fetch history")

        try:
            history_df = pd.read_csv(
                io.BytesIO(response.content), encoding=CSV_ENCODING, dtype=str, keep_default_na=False
            )
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise MoneyForwardError(f"Failed to parse history CSV for {year}-{month:02d}: {e}") from e

        missing = [column for column in REQUIRED_CSV_COLUMNS if column not in history_df.columns]
        if missing:
            raise MoneyForwardError(
                f"History CSV for {year}-{month:02d} is missing columns: {', '.join(missing)}"
            )

        entries = [DestinationEntry.from_csv_row(row.to_dict()) for _, row in history_df.iterrows()]
        logger.debug("Fetched %d entries for %d-%02d", len(entries), year, month)
        return entries

    def fetch_category_catalog(self) -> CategoryCatalog:
        """Scrape the income/expense category tree from the ledger index page (cached)."""
        if self._catalog is not None:
            return self._catalog

        response = self._get(f"{self.config.base_url}/cf")
        self._expect_success(response, "Failed to get index page")
        soup = BeautifulSoup(response.text, "lxml")

        income_menu = soup.select_one(".dropdown-menu.main_menu.plus")
        expense_menu = soup.select_one(".dropdown-menu.main_menu.minus")
        if income_menu is None or expense_menu is None:
            raise MoneyForwardError("Category menus not found on index page")

        self._catalog = CategoryCatalog(
            income_large=_parse_large_categories(income_menu),
            income_medium=_parse_medium_categories(income_menu),
            expense_large=_parse_large_categories(expense_menu),
            expense_medium=_parse_medium_categories(expense_menu),
        )
        return self._catalog

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
        Create a manual entry in a wallet.

        Args:
            wallet_id: Money Forward account id hash of the wallet
            direction: Income or expense
            entry_date: Date of the entry
            amount: Signed amount (negative for expenses)
            large_category_id: Resolved large category id
            medium_category_id: Resolved medium category id
            description: Entry content text

        Returns:
            True if Money Forward confirmed the entry, False otherwise
        """
        wallet_page = self._get(f"{self.config.base_url}/accounts/show_manual/{wallet_id}")
        self._expect_success(wallet_page, "Failed to get wallet page")
        wallet_doc = BeautifulSoup(wallet_page.text, "lxml")

        csrf_meta = wallet_doc.select_one('meta[name="csrf-token"]')
        wallet_option = wallet_doc.select_one('#user_asset_act_sub_account_id_hash > option[selected="selected"]')
        if csrf_meta is None or wallet_option is None:
            raise MoneyForwardError(f"Wallet form not found for wallet {wallet_id}")
        csrf_token = str(csrf_meta["content"])

        wallet_text = wallet_option.get_text(strip=True)
        name_match = _WALLET_NAME_PATTERN.match(wallet_text)
        wallet_name = name_match.group(1).strip() if name_match else wallet_text
        logger.info(
            "Creating %s transaction on %s for %d yen in wallet %s...",
            direction.value,
            entry_date.isoformat(),
            amount,
            wallet_name,
        )

        response = self.session.post(
            f"{self.config.base_url}/cf/create",
            data={
                "authenticity_token": csrf_token,
                "user_asset_act[is_transfer]": "0",
                "user_asset_act[is_income]": "1" if direction == Direction.INCOME else "0",
                "user_asset_act[payment]": "2",
                "user_asset_act[updated_at]": entry_date.strftime("%Y/%m/%d"),
                "month": entry_date.strftime("%Y-%m"),
                "user_asset_act[amount]": str(amount),
                "user_asset_act[sub_account_id_hash]": str(wallet_option["value"]),
                "user_asset_act[large_category_id]": str(large_category_id),
                "user_asset_act[middle_category_id]": str(medium_category_id),
                "user_asset_act[content]": description,
            },
            headers={"X-CSRF-Token": csrf_token},
            timeout=self.config.timeout,
        )

        if not 200 <= response.status_code < 300:
            logger.error("Failed to create transaction, code: %d", response.status_code)
            return False
        if response.text != CREATE_SUCCESS_BODY:
            logger.error("Unexpected response body: %s", response.text)
            return False
        return True

    def _get(self, url: str, **kwargs: Any) -> requests.Response:
        return self.session.get(url, timeout=self.config.timeout, **kwargs)

    @staticmethod
    def _expect_success(response: requests.Response, message: str) -> None:
        if not 200 <= response.status_code < 300:
            raise MoneyForwardError(f"{message}, code: {response.status_code}")


def _parse_large_categories(menu: Tag) -> list[LargeCategory]:
    return [
        LargeCategory(id=int(str(a["id"])), name=a.get_text(strip=True)) for a in menu.select("a.l_c_name")
    ]


def _parse_medium_categories(menu: Tag) -> list[MediumCategory]:
    # The grandparent of each medium category link carries its large category id
    categories = []
    for a in menu.select("a.m_c_name"):
        large_li = a.parent.parent if a.parent is not None else None
        if large_li is None or not large_li.get("id"):
            raise MoneyForwardError(f"Medium category {a.get_text(strip=True)!r} has no parent category")
        categories.append(
            MediumCategory(
                id=int(str(a["id"])),
                name=a.get_text(strip=True),
                large_category_id=int(str(large_li["id"])),
            )
        )
    return categories
