"""
Core Utilities Package

Shared data models and utilities used by the source, destination and sync packages.

This package provides:
- Canonical transaction, destination entry and create-command models
- Yen amount parsing and formatting
- Calendar month helpers for the sync window
- Configuration management for environment-specific settings
"""

from .config import Config, Environment, get_config
from .currency import format_yen, parse_yen
from .dates import beginning_of_month, beginning_of_previous_month, month_key, parse_date
from .models import (
    CanonicalTransaction,
    CategoryCatalog,
    CategoryPair,
    CreateCommand,
    DestinationEntry,
    Direction,
    LargeCategory,
    MediumCategory,
    SourceRecord,
    SyncOutcome,
    SyncResult,
    SyncSummary,
)

__all__ = [
    # Data models
    "CanonicalTransaction",
    "CategoryCatalog",
    "CategoryPair",
    # Configuration
    "Config",
    "CreateCommand",
    "DestinationEntry",
    "Direction",
    "Environment",
    "LargeCategory",
    "MediumCategory",
    "SourceRecord",
    "SyncOutcome",
    "SyncResult",
    "SyncSummary",
    # Dates
    "beginning_of_month",
    "beginning_of_previous_month",
    # Currency
    "format_yen",
    "get_config",
    "month_key",
    "parse_date",
    "parse_yen",
]
