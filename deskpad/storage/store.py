from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from ..paths import resolve_data_dir
from .errors import ConfigError, ParseError

log = logging.getLogger(__name__)

DEFAULT_KEY = "text"


@dataclass(frozen=True)
class StoreConfig:
    """Construction parameters for :class:`Store`.

    ``config_name`` selects the backing file ``<data_dir>/<config_name>.json``.
    ``data_dir`` falls back to the per-user application data folder.
    """

    config_name: Optional[str] = None
    defaults: Mapping[str, Any] = field(default_factory=dict)
    data_dir: Optional[Union[str, Path]] = None

    def __post_init__(self) -> None:
        # Read-only view over a private copy; callers keep their own dict.
        object.__setattr__(self, "defaults", MappingProxyType(dict(self.defaults or {})))


def merge_defaults(persisted: Mapping[str, Any], defaults: Mapping[str, Any]) -> Dict[str, Any]:
    """Overlay *persisted* on top of *defaults*.

    Persisted keys win on collision, default-only keys are kept. Neither input
    is modified.
    """
    merged = dict(defaults)
    merged.update(persisted)
    return merged


def read_persisted(path: Path) -> Dict[str, Any]:
    """Return the JSON object stored at *path* (``{}`` if the file is missing).

    Raises ParseError if the file cannot be read, is not valid JSON, or its
    root is not an object.
    """
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ParseError(path, f"unreadable: {type(e).__name__}: {e}") from e
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
        raise ParseError(path, f"{type(e).__name__}: {e}") from e
    if not isinstance(data, dict):
        raise ParseError(path, f"root is {type(data).__name__}, expected object")
    return data


def _backup_corrupt(path: Path) -> Optional[Path]:
    ts = time.strftime("%Y%m%d_%H%M%S")
    bak = path.with_name(f"{path.name}.bak.{ts}")
    try:
        bak.write_bytes(path.read_bytes())
    except OSError:
        log.warning("Could not back up corrupt store file %s", path, exc_info=True)
        return None
    return bak


class Store:
    """JSON-file-backed key-value store with an in-memory default-merged cache.

    Every :meth:`set` rewrites the whole file, so memory and disk agree after
    each call. Single process, single writer.
    """

    def __init__(self, config: Optional[StoreConfig]) -> None:
        if config is None or not config.config_name:
            raise ConfigError("config_name is required")

        self._config = config
        self._path = resolve_data_dir(config.data_dir).store_file(config.config_name)

        try:
            persisted = read_persisted(self._path)
        except ParseError as e:
            bak = _backup_corrupt(self._path)
            log.warning("Ignoring unreadable store file (%s); backup: %s", e.reason, bak)
            persisted = {}

        self._data: Dict[str, Any] = merge_defaults(persisted, config.defaults)
        log.info("Store %r loaded from %s (%d keys)", config.config_name, self._path, len(self._data))

    @property
    def path(self) -> Path:
        return self._path

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def data(self) -> Dict[str, Any]:
        return dict(self._data)

    def get(self, key: Optional[str] = None, fallback: str = DEFAULT_KEY) -> Any:
        """Return the value for *key*.

        When *key* is absent the lookup falls back to the key named *fallback*
        (note: a key name, not a default value). ``get()`` therefore returns the
        value stored under ``"text"``. Returns None when neither key exists.
        """
        if key is not None and key in self._data:
            return self._data[key]
        return self._data.get(fallback)

    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key* and rewrite the backing file.

        Raises TypeError (store unchanged) if the resulting mapping cannot be
        serialized. Raises OSError if the file cannot be written; the in-memory
        mapping keeps the new value in that case.
        """
        candidate = dict(self._data)
        candidate[key] = value
        txt = json.dumps(candidate, indent=2, sort_keys=True)
        self._data = candidate
        self._write(txt)

    def _write(self, txt: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            tmp.write_text(txt, encoding="utf-8")
            os.replace(tmp, self._path)
        except OSError:
            log.error("Failed to write store file %s", self._path)
            try:
                tmp.unlink(missing_ok=True)
            except OSError:
                log.debug("Could not remove temp file %s", tmp, exc_info=True)
            raise
