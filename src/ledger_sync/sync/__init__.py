"""
Reconciliation Engine Package

Keeps a Money Forward wallet in step with the PASELI history.

Key Components:
- window: trailing two-month sync window
- matcher: consumable destination pool and greedy matching
- emitter: category resolution and entry creation
- engine: one sync run tying the pieces together
- protocols: interfaces expected from the two ledgers

Duplicate prevention relies solely on matching against freshly fetched
destination history; nothing is persisted between runs.
"""

from .emitter import CommandEmitter, build_command, resolve_category_ids
from .engine import SyncEngine
from .errors import CategoryNotFoundError, CreateEntryError, SyncError
from .matcher import DestinationPool, MatchStrategy, Reconciler
from .protocols import DestinationLedger, SourceLedger
from .window import SyncWindow

__all__ = [
    "CategoryNotFoundError",
    "CommandEmitter",
    "CreateEntryError",
    "DestinationLedger",
    "DestinationPool",
    "MatchStrategy",
    "Reconciler",
    "SourceLedger",
    "SyncEngine",
    "SyncError",
    "SyncWindow",
    "build_command",
    "resolve_category_ids",
]
