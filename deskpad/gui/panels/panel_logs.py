"""Logs panel with refresh and error copy helper."""

from __future__ import annotations

import tkinter as tk
from pathlib import Path
from tkinter import messagebox, ttk
from typing import Optional

from ...log_utils import sanitize_log


def read_log(log_path: Optional[Path]) -> str:
    if log_path is None or not Path(log_path).exists():
        return "No deskpad.log found yet."
    try:
        return sanitize_log(Path(log_path).read_text(encoding="utf-8", errors="replace"))
    except OSError as e:
        return f"Could not read {log_path}: {e}"


def last_error_lines(text: str, limit: int = 20) -> str:
    lines = text.splitlines()
    error_lines = [ln for ln in lines if "error" in ln.lower() or "traceback" in ln.lower()]
    return "\n".join(error_lines[-limit:]).strip()


def build_panel(parent, log_path: Optional[Path] = None) -> ttk.Frame:
    frame = ttk.Frame(parent)
    frame.columnconfigure(0, weight=1)
    frame.rowconfigure(0, weight=1)

    box = tk.Text(frame, wrap="word", state="disabled")
    box.grid(row=0, column=0, sticky="nsew", padx=12, pady=(12, 8))

    actions = ttk.Frame(frame)
    actions.grid(row=1, column=0, sticky="ew", padx=12, pady=(0, 12))

    def _refresh() -> None:
        content = read_log(log_path)
        box.configure(state="normal")
        box.delete("1.0", tk.END)
        box.insert("1.0", content)
        box.configure(state="disabled")

    def _copy_last_error() -> None:
        text = last_error_lines(read_log(log_path)) or "No error line found in deskpad.log."
        frame.clipboard_clear()
        frame.clipboard_append(text)
        messagebox.showinfo("Logs", "Last error copied to clipboard.")

    ttk.Button(actions, text="Refresh", command=_refresh).pack(side=tk.LEFT)
    ttk.Button(actions, text="Copy last error", command=_copy_last_error).pack(side=tk.LEFT, padx=(8, 0))

    frame.text = box
    frame.refresh = _refresh

    _refresh()
    return frame
