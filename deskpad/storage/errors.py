"""Exceptions raised by the storage layer.

Write failures are not wrapped: ``Store.set`` lets the builtin ``OSError``
propagate so callers can handle it like any other file error.
"""

from __future__ import annotations


class DeskpadError(Exception):
    """Base class for Deskpad errors."""


class ConfigError(DeskpadError, ValueError):
    """A required store construction parameter is missing."""


class ParseError(DeskpadError, ValueError):
    """The backing file is not a JSON object."""

    def __init__(self, path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


__all__ = ["DeskpadError", "ConfigError", "ParseError"]
