"""Deskpad: a single-window notepad shell with a JSON-backed save/load bridge."""

__version__ = "0.1.0"
