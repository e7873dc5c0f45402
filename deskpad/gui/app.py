"""Window entrypoint: one Tk root hosting the editor and logs pages."""

from __future__ import annotations

import argparse
import logging
import tkinter as tk
from pathlib import Path
from tkinter import ttk
from typing import Dict, List, Optional

from .. import __version__
from ..log_utils import setup_logging
from ..storage import StoreConfig
from .controller import DEFAULT_CONFIG_NAME, DEFAULT_STORE_CONFIG, Session, bootstrap
from .panels import panel_editor, panel_logs

logger = logging.getLogger(__name__)

WINDOW_TITLE = "Deskpad"
WINDOW_WIDTH = 800
WINDOW_HEIGHT = 600


class DeskpadWindow(tk.Tk):
    """Single application window.

    The bridge is pumped from this window's event loop, so every store call
    runs on the Tk main thread.
    """

    TAB_LABELS = (
        ("editor", "Editor"),
        ("logs", "Logs"),
    )

    def __init__(self, session: Session, *, log_path: Optional[Path] = None):
        super().__init__()
        self.session = session
        self.title(WINDOW_TITLE)
        self.geometry(f"{WINDOW_WIDTH}x{WINDOW_HEIGHT}")

        self.session.bridge.attach(self)

        self.main_notebook = ttk.Notebook(self)
        self.main_notebook.pack(fill=tk.BOTH, expand=True)

        # Pages get the exposed api / log path only.
        self.panel_frames: Dict[str, ttk.Frame] = {
            "editor": panel_editor.build_panel(self.main_notebook, api=session.api),
            "logs": panel_logs.build_panel(self.main_notebook, log_path=log_path),
        }
        for key, label in self.TAB_LABELS:
            self.main_notebook.add(self.panel_frames[key], text=label)

        self.protocol("WM_DELETE_WINDOW", self._on_close)
        logger.info("Window initialized")

    def _on_close(self) -> None:
        # Flush saves queued since the last tick before tearing down.
        self.session.bridge.process_pending()
        self.session.bridge.detach()
        self.destroy()


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="deskpad", description="Single-window notepad with persistent text.")
    ap.add_argument("--data-dir", default=None, help="Folder holding the store file and deskpad.log")
    ap.add_argument("--config-name", default=DEFAULT_CONFIG_NAME, help="Store file name (without .json)")
    ap.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def store_config_from_args(args: argparse.Namespace) -> StoreConfig:
    return StoreConfig(
        config_name=args.config_name,
        defaults=DEFAULT_STORE_CONFIG.defaults,
        data_dir=args.data_dir,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Start the Tk window."""
    args = build_arg_parser().parse_args(argv)
    log_path = setup_logging(args.data_dir, level=args.log_level)
    if log_path:
        print(f"[LOG] {log_path}")

    session = bootstrap(store_config_from_args(args))
    app = DeskpadWindow(session, log_path=log_path)
    app.mainloop()
    return 0
