"""Startup wiring for the window (no Tk widget code).

Keep this free of tkinter imports so it can be unit-tested headlessly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..bridge import HostBridge, StoreApi, expose_store
from ..storage import Store, StoreConfig

log = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "storage"
DEFAULT_TEXT = "Write something!"

DEFAULT_STORE_CONFIG = StoreConfig(config_name=DEFAULT_CONFIG_NAME, defaults={"text": DEFAULT_TEXT})


@dataclass(frozen=True)
class Session:
    store: Store
    bridge: HostBridge
    api: StoreApi


def bootstrap(config: StoreConfig = DEFAULT_STORE_CONFIG) -> Session:
    """Create the store once and register the save/load handlers.

    The returned ``api`` is the only object the page should receive.
    """
    store = Store(config)
    bridge = HostBridge(store)
    log.info("Bridge ready (store file: %s)", store.path)
    return Session(store=store, bridge=bridge, api=expose_store(bridge))
