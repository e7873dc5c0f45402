"""Save/load bridge between the host window and the editor page.

The page never touches the :class:`~deskpad.storage.Store`. It only holds a
:class:`StoreApi` whose calls are queued here and executed on the host (Tk
main) thread by :meth:`HostBridge.process_pending`.

Two channels exist:
  * ``store:save``: one-way, no acknowledgment, failures are logged only
  * ``store:load``: request/response, answered through a Future
"""

from __future__ import annotations

import logging
import queue
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .storage import Store
from .storage.store import DEFAULT_KEY

log = logging.getLogger(__name__)

SAVE_CHANNEL = "store:save"
LOAD_CHANNEL = "store:load"


def _key(key: Any) -> str:
    # Keys are strings on disk; None selects the default key.
    return DEFAULT_KEY if key is None else str(key)


def handle_save(store: Store, source: Any, key: Optional[str] = DEFAULT_KEY, content: Any = None) -> None:
    """Persist *content* under *key*. *source* is ignored."""
    store.set(_key(key), content)


def handle_load(store: Store, source: Any, key: Optional[str] = DEFAULT_KEY) -> Any:
    """Return the stored value for *key*. *source* is ignored."""
    return store.get(_key(key))


@dataclass(frozen=True)
class _Message:
    channel: str
    key: Optional[str]
    content: Any = None
    reply: Optional[Future] = None


class HostBridge:
    """Host side of the bridge. Owns the inbox and dispatches to the handlers."""

    def __init__(self, store: Store, *, source: Any = "page") -> None:
        self._store = store
        self._source = source
        self._inbox: "queue.SimpleQueue[_Message]" = queue.SimpleQueue()
        self._widget = None
        self._after_id = None
        self._interval_ms = 25

    # Page-facing operations ----------------------------------------------
    def notify(self, key: Optional[str], value: Any) -> None:
        self._inbox.put(_Message(SAVE_CHANNEL, key, value))

    def request(self, key: Optional[str]) -> Future:
        reply: Future = Future()
        reply.set_running_or_notify_cancel()
        self._inbox.put(_Message(LOAD_CHANNEL, key, reply=reply))
        return reply

    # Host loop -----------------------------------------------------------
    def process_pending(self) -> int:
        """Dispatch every queued message on the calling thread.

        Returns the number of messages handled.
        """
        handled = 0
        while True:
            try:
                msg = self._inbox.get_nowait()
            except queue.Empty:
                return handled
            self._dispatch(msg)
            handled += 1

    def _dispatch(self, msg: _Message) -> None:
        if msg.channel == SAVE_CHANNEL:
            try:
                handle_save(self._store, self._source, msg.key, msg.content)
            except Exception:
                # Nobody awaits a save; the log is the only error surface.
                log.exception("%s failed for key %r", SAVE_CHANNEL, msg.key)
            else:
                log.debug("%s key=%r", SAVE_CHANNEL, msg.key)
            return

        assert msg.reply is not None
        try:
            value = handle_load(self._store, self._source, msg.key)
        except Exception as e:
            log.warning("%s failed for key %r: %s: %s", LOAD_CHANNEL, msg.key, type(e).__name__, e)
            msg.reply.set_exception(e)
        else:
            log.debug("%s key=%r", LOAD_CHANNEL, msg.key)
            msg.reply.set_result(value)

    # Tk integration ------------------------------------------------------
    def attach(self, widget, interval_ms: int = 25) -> None:
        """Pump the inbox from *widget*'s event loop every *interval_ms*."""
        self.detach()
        self._widget = widget
        self._interval_ms = int(interval_ms)
        self._after_id = widget.after(self._interval_ms, self._tick)

    def detach(self) -> None:
        if self._widget is not None and self._after_id is not None:
            try:
                self._widget.after_cancel(self._after_id)
            except Exception:
                log.debug("after_cancel failed during detach", exc_info=True)
        self._widget = None
        self._after_id = None

    def _tick(self) -> None:
        self.process_pending()
        if self._widget is not None:
            self._after_id = self._widget.after(self._interval_ms, self._tick)


class StoreApi:
    """What the page is given: ``save`` and ``load``, nothing else."""

    __slots__ = ("save", "load")

    def __init__(self, save: Callable[[Optional[str], Any], None], load: Callable[[Optional[str]], Future]) -> None:
        self.save = save
        self.load = load


def expose_store(bridge: HostBridge) -> StoreApi:
    def save(key: Optional[str], content: Any) -> None:
        bridge.notify(key, content)

    def load(key: Optional[str] = None) -> Future:
        return bridge.request(key)

    return StoreApi(save=save, load=load)


__all__ = [
    "SAVE_CHANNEL",
    "LOAD_CHANNEL",
    "handle_save",
    "handle_load",
    "HostBridge",
    "StoreApi",
    "expose_store",
]
