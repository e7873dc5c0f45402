"""Tk window shell for Deskpad.

This module intentionally avoids eager imports so ``deskpad.gui.controller``
can be used without tkinter.
"""

from __future__ import annotations

from typing import Any

__all__ = ["DeskpadWindow", "main"]


def __getattr__(name: str) -> Any:
    if name in {"DeskpadWindow", "main"}:
        from .app import DeskpadWindow, main

        return {"DeskpadWindow": DeskpadWindow, "main": main}[name]
    raise AttributeError(name)
