#!/usr/bin/env python3
"""
PASELI Web Client

Logs in to the PASELI charge site and scrapes the e-money history and balance.
Implements the source side of a sync run (``fetch_source_history``).
"""

import logging
from typing import Any

import requests
from bs4 import BeautifulSoup

from ..core.config import PaseliConfig, get_config
from ..core.currency import parse_yen
from ..core.dates import parse_date
from ..core.models import SourceRecord

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

# Each history entry is rendered as four consecutive <dd> cells
HISTORY_CELLS_PER_ENTRY = 4


class PaseliError(Exception):
    """Raised when the PASELI site does not respond as expected."""


class PaseliClient:
    """
    Scraper for the PASELI charge site.

    Usage:
        client = PaseliClient(user_id, password)
        client.login()
        records = client.fetch_source_history()
    """

    def __init__(
        self,
        user_id: str,
        password: str,
        config: PaseliConfig | None = None,
        session: requests.Session | None = None,
    ):
        """
        Initialize the client.

        Args:
            user_id: KONAMI ID used to log in
            password: KONAMI ID password
            config: Site URLs and timeout (defaults to application config)
            session: HTTP session to use (a new one is created if omitted)
        """
        self.user_id = user_id
        self.password = password
        self.config = config if config is not None else get_config().paseli
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})
        self.user_name: str | None = None

    @classmethod
    def from_config(cls) -> "PaseliClient":
        """Create a client from the application configuration."""
        config = get_config().paseli
        if not config.user_id or not config.password:
            raise PaseliError("PASELI_ID and PASELI_PASSWORD must be set")
        return cls(config.user_id, config.password, config=config)

    def login(self) -> str:
        """
        Log in and return the account holder's display name.

        Raises:
            PaseliError: If any step of the login sequence fails
        """
        logger.info("Logging in to PASELI account...")
        self._establish_login_cookie()
        login_doc = self._retrieve_login_page()
        csrf_token = self._extract_csrf_token(login_doc)
        self._perform_login(csrf_token)
        self.user_name = self._fetch_user_name()
        logger.info("Logged in as %s", self.user_name)
        return self.user_name

    def fetch_source_history(self) -> list[SourceRecord]:
        """
        Fetch the e-money history in page order.

        Returns:
            List of SourceRecord (amounts are unsigned magnitudes)
        """
        response = self._get(f"{self.config.base_url}/his01.html")
        self._expect_success(response, "Failed to get history page")

        soup = BeautifulSoup(response.text, "lxml")
        history_table = soup.select_one("#ajax_body > dl:nth-child(2)")
        if history_table is None:
            raise PaseliError("History table not found on history page")

        cells = [dd.get_text(strip=True) for dd in history_table.find_all("dd")]
        records = []
        for i in range(0, len(cells) - HISTORY_CELLS_PER_ENTRY + 1, HISTORY_CELLS_PER_ENTRY):
            date_text, description, amount_text = cells[i : i + 3]
            records.append(
                SourceRecord(
                    date=parse_date(date_text),
                    description=description,
                    amount=parse_yen(amount_text),
                )
            )

        logger.info("Fetched %d PASELI history entries", len(records))
        return records

    def current_balance(self) -> dict[str, int]:
        """
        Fetch the current e-money balance and point total.

        Returns:
            {"balance": yen, "points": points}
        """
        response = self._get(f"{self.config.base_url}/top.html")
        self._expect_success(response, "Failed to get balance page")

        soup = BeautifulSoup(response.text, "lxml")
        balance_el = soup.select_one("li.remain:nth-child(1) > div:nth-child(2)")
        point_el = soup.select_one("li.remain:nth-child(3) > div:nth-child(2)")
        if balance_el is None or point_el is None:
            raise PaseliError("Balance not found on top page")

        balance = parse_yen(balance_el.get_text(strip=True))
        points = parse_yen(point_el.get_text(strip=True).removesuffix("ポイント"))
        return {"balance": balance, "points": points}

    def _get(self, url: str, **kwargs: Any) -> requests.Response:
        return self.session.get(url, timeout=self.config.timeout, **kwargs)

    @staticmethod
    def _expect_success(response: requests.Response, message: str) -> None:
        if not 200 <= response.status_code < 300:
            raise PaseliError(f"{message}, code: {response.status_code}")

    @staticmethod
    def _expect_redirect(response: requests.Response, message: str) -> None:
        if not 300 <= response.status_code < 400:
            raise PaseliError(f"{message}, code: {response.status_code}")

    def _establish_login_cookie(self) -> None:
        response = self._get(self.config.base_url, allow_redirects=False)
        self._expect_success(response, "Failed to initialize login cookie")

    def _retrieve_login_page(self) -> BeautifulSoup:
        response = self._get(f"{self.config.base_url}/login.html")
        self._expect_success(response, "Failed to get login page")
        return BeautifulSoup(response.text, "lxml")

    def _extract_csrf_token(self, login_doc: BeautifulSoup) -> str:
        token_input = login_doc.select_one('input[name="csrfmiddlewaretoken"]')
        if token_input is None or not token_input.get("value"):
            raise PaseliError("CSRF token not found on login page")
        token = str(token_input["value"])
        logger.debug("CSRF Token: %s", token)
        return token

    def _perform_login(self, csrf_token: str) -> None:
        response = self.session.post(
            self.config.login_url,
            data={
                "csrfmiddlewaretoken": csrf_token,
                "userId": self.user_id,
                "password": self.password,
                "otpass": "",
            },
            headers={"Referer": self.config.login_url},
            allow_redirects=False,
            timeout=self.config.timeout,
        )
        self._expect_redirect(response, "Failed to login")

        next_url = response.headers.get("Location", "")
        redirect_response = self._get(next_url, allow_redirects=False)
        self._expect_redirect(redirect_response, "Failed to follow redirect after login")

    def _fetch_user_name(self) -> str:
        response = self._get(f"{self.config.base_url}/top.html")
        self._expect_success(response, "Failed to get top page")
        soup = BeautifulSoup(response.text, "lxml")
        name_el = soup.select_one("#header_user > div > strong")
        if name_el is None:
            raise PaseliError("User name not found on top page")
        return name_el.get_text(strip=True)
