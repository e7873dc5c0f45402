"""Logging-related utilities.

Kept free of tkinter imports so the bridge and storage tests can use it
headlessly.
"""

from __future__ import annotations

import logging
import re
import sys
import threading
from pathlib import Path
from typing import Optional

from . import __version__
from .paths import ensure_data_dir

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"

# A reasonably complete ANSI escape sequence matcher (CSI + single-character).
_ANSI_ESCAPE_RE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def setup_logging(data_dir=None, level: str = "INFO") -> Optional[Path]:
    """Configure logging to ``deskpad.log`` in the data directory plus stdout.

    The window is often started without a visible console, so unhandled
    exceptions (main thread and worker threads) are routed into the log too.
    Returns the log file path, or None if the file could not be set up.
    """

    try:
        log_path = ensure_data_dir(data_dir).log_file
    except OSError:
        logging.getLogger(__name__).warning("Could not create data directory for logs", exc_info=True)
        return None

    # Don't clobber an existing logging configuration (e.g. when embedded).
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=getattr(logging, str(level).upper(), logging.INFO),
            format=LOG_FORMAT,
            handlers=[
                logging.FileHandler(str(log_path), mode="a", encoding="utf-8"),
                logging.StreamHandler(sys.stdout),
            ],
        )

    def _excepthook(exc_type, exc, tb):
        logging.error("Unhandled exception", exc_info=(exc_type, exc, tb))
        sys.__excepthook__(exc_type, exc, tb)

    sys.excepthook = _excepthook

    def _thread_excepthook(args):
        logging.error("Unhandled thread exception", exc_info=(args.exc_type, args.exc_value, args.exc_traceback))

    threading.excepthook = _thread_excepthook

    logging.info("Deskpad started (v%s)", __version__)
    return log_path


def sanitize_log(text: str) -> str:
    """Make captured log text readable in a Tk text widget.

    - Normalize carriage returns (``\\r``) into newlines (``\\n``).
    - Strip ANSI escape sequences (colors, cursor movement, etc.).
    """

    if not text:
        return ""

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return _ANSI_ESCAPE_RE.sub("", text)
