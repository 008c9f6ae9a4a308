"""Persistence: SQLite draft store and the runtime key/value file."""

from .context import RuntimeContext
from .draft_store import DraftStore

__all__ = ["DraftStore", "RuntimeContext"]
