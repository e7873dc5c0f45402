#!/usr/bin/env python3
"""Convenience launcher.

The window implementation lives in `deskpad.gui.app`.
"""

from deskpad.gui.app import main


if __name__ == "__main__":
    raise SystemExit(main())
