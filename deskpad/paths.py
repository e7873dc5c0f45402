from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from platformdirs import user_data_dir

APP_NAME = "deskpad"
LOG_FILENAME = "deskpad.log"


def default_data_dir() -> Path:
    """Per-user application data folder (store files, deskpad.log)."""
    return Path(user_data_dir(APP_NAME, appauthor=False))


@dataclass(frozen=True)
class DataDirLayout:
    root: Path
    log_file: Path

    def store_file(self, config_name: str) -> Path:
        return self.root / f"{config_name}.json"


def resolve_data_dir(data_dir: Optional[Union[str, Path]] = None) -> DataDirLayout:
    """Resolve the data directory without touching the filesystem.

    Layout (under root):
      <config_name>.json
      deskpad.log
    """
    root = Path(data_dir).expanduser().resolve() if data_dir else default_data_dir()
    return DataDirLayout(root=root, log_file=root / LOG_FILENAME)


def ensure_data_dir(data_dir: Optional[Union[str, Path]] = None) -> DataDirLayout:
    layout = resolve_data_dir(data_dir)
    layout.root.mkdir(parents=True, exist_ok=True)
    return layout
