"""Editor page: a text box saved to and loaded from the store bridge.

The page only receives the exposed ``save``/``load`` API, never the store.
"""

from __future__ import annotations

import logging
import tkinter as tk
from concurrent.futures import Future
from tkinter import ttk

log = logging.getLogger(__name__)

TEXT_KEY = "text"


def build_panel(parent, api) -> ttk.Frame:
    frame = ttk.Frame(parent)
    frame.columnconfigure(0, weight=1)
    frame.rowconfigure(0, weight=1)

    box = tk.Text(frame, wrap="word", undo=False)
    box.grid(row=0, column=0, sticky="nsew", padx=12, pady=(12, 8))

    actions = ttk.Frame(frame)
    actions.grid(row=1, column=0, sticky="ew", padx=12, pady=(0, 12))

    status_var = tk.StringVar(master=frame, value="")
    ttk.Label(actions, textvariable=status_var).pack(side=tk.RIGHT)

    def _content() -> str:
        # Text widgets always append a trailing newline.
        return box.get("1.0", "end-1c")

    def _fill(value) -> None:
        box.delete("1.0", tk.END)
        if value is not None:
            box.insert("1.0", str(value))
        status_var.set("Loaded")

    def _on_loaded(reply: Future) -> None:
        exc = reply.exception()
        if exc is not None:
            log.warning("Load failed: %s: %s", type(exc).__name__, exc)
            frame.after(0, lambda: status_var.set("Load failed"))
            return
        value = reply.result()
        frame.after(0, lambda: _fill(value))

    def _save() -> None:
        api.save(TEXT_KEY, _content())
        status_var.set("Saved")

    def _load() -> None:
        status_var.set("Loading…")
        api.load(TEXT_KEY).add_done_callback(_on_loaded)

    ttk.Button(actions, text="Save", command=_save).pack(side=tk.LEFT)
    ttk.Button(actions, text="Load", command=_load).pack(side=tk.LEFT, padx=(8, 0))

    frame.text = box
    frame.status_var = status_var
    frame.save = _save
    frame.load = _load

    _load()
    return frame
