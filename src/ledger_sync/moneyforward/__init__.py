"""
Money Forward ME Destination Package

The household ledger that should end up containing every PASELI movement.

This package provides:
- Wallet history download (CSV export, one calendar month per request)
- Category catalog scraping for income and expense scopes
- Manual entry creation
"""

from .client import CREATE_SUCCESS_BODY, MoneyForwardClient, MoneyForwardError, load_cookie_jar

__all__ = [
    "CREATE_SUCCESS_BODY",
    "MoneyForwardClient",
    "MoneyForwardError",
    "load_cookie_jar",
]
