"""Persistent key-value storage for Deskpad.

The page state (currently just the editor text) lives in a single JSON file
under the per-application data directory.

Design goals:
  * Full-snapshot writes (the file always holds the whole mapping)
  * Atomic replace (no truncated file on crash)
  * Resilient loads (back up a corrupt file and fall back to defaults)
"""

from .errors import ConfigError, DeskpadError, ParseError
from .store import Store, StoreConfig, merge_defaults

__all__ = ["ConfigError", "DeskpadError", "ParseError", "Store", "StoreConfig", "merge_defaults"]
