"""
Ledger Sync - PASELI to Money Forward ME

Keeps a Money Forward ME wallet in step with a PASELI e-money account by
creating the entries the wallet is missing.

Domain Packages:
- core: Data models, yen/date helpers, configuration
- paseli: PASELI scraping and transaction classification
- moneyforward: Money Forward history, categories and entry creation
- sync: Window filter, destination matching and the sync engine
- cli: Command-line interface

Example Usage:
    from ledger_sync.sync import SyncEngine
    from ledger_sync.paseli import PaseliClient
    from ledger_sync.moneyforward import MoneyForwardClient
"""

__version__ = "0.1.0"
__author__ = "Karl Davis"

from .core.config import Environment, get_config
from .core.models import CanonicalTransaction, CreateCommand, DestinationEntry, Direction, SourceRecord

__all__ = [
    "CanonicalTransaction",
    "CreateCommand",
    "DestinationEntry",
    "Direction",
    "Environment",
    "SourceRecord",
    "get_config",
]
