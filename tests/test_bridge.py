from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

import pytest

from deskpad.bridge import HostBridge, StoreApi, expose_store, handle_load, handle_save
from deskpad.storage import Store, StoreConfig


@pytest.fixture
def store(tmp_path: Path) -> Store:
    return Store(StoreConfig(config_name="storage", defaults={"text": "Write something!"}, data_dir=tmp_path))


def test_handle_save_ignores_source_and_defaults_key(store: Store) -> None:
    assert handle_save(store, object(), "k", "v") is None
    handle_save(store, None, None, "via default key")

    assert store.get("k") == "v"
    assert store.get("text") == "via default key"


def test_handle_load_defaults_key(store: Store) -> None:
    assert handle_load(store, object()) == "Write something!"
    assert handle_load(store, None, None) == "Write something!"


def test_notify_is_queued_until_pumped(store: Store) -> None:
    bridge = HostBridge(store)
    bridge.notify("text", "hello")

    assert store.get("text") == "Write something!"
    assert bridge.process_pending() == 1
    assert store.get("text") == "hello"
    assert bridge.process_pending() == 0


def test_request_resolves_after_pump(store: Store) -> None:
    bridge = HostBridge(store)
    reply = bridge.request("text")

    assert not reply.done()
    bridge.process_pending()
    assert reply.result(timeout=0) == "Write something!"


def test_messages_are_handled_in_arrival_order(store: Store) -> None:
    bridge = HostBridge(store)
    before = bridge.request("text")
    bridge.notify("text", "first")
    bridge.notify("text", "second")
    after = bridge.request("text")

    assert bridge.process_pending() == 4
    assert before.result(timeout=0) == "Write something!"
    assert after.result(timeout=0) == "second"


def test_load_of_unknown_key_resolves_to_fallback_value(tmp_path: Path) -> None:
    bare = Store(StoreConfig(config_name="bare", data_dir=tmp_path))
    bridge = HostBridge(bare)
    reply = bridge.request("nothing-here")
    bridge.process_pending()
    assert reply.result(timeout=0) is None


def test_save_failure_is_logged_not_raised(tmp_path: Path, caplog) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    broken = Store(StoreConfig(config_name="storage", data_dir=blocker / "sub"))
    bridge = HostBridge(broken)

    bridge.notify("text", "lost on disk")
    with caplog.at_level(logging.ERROR, logger="deskpad.bridge"):
        assert bridge.process_pending() == 1

    assert any("store:save failed" in r.getMessage() for r in caplog.records)
    # In-memory value still reflects the update.
    assert broken.get("text") == "lost on disk"


def test_load_failure_is_delivered_through_future(store: Store, monkeypatch) -> None:
    bridge = HostBridge(store)

    def _boom(*_args, **_kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(store, "get", _boom)
    reply = bridge.request("text")
    bridge.process_pending()

    with pytest.raises(RuntimeError, match="boom"):
        reply.result(timeout=0)


def test_calls_from_other_threads_run_on_pumping_thread(store: Store) -> None:
    bridge = HostBridge(store)
    seen = []
    original_set = store.set

    def _recording_set(key, value):
        seen.append(threading.current_thread())
        original_set(key, value)

    store.set = _recording_set  # type: ignore[method-assign]

    worker = threading.Thread(target=lambda: bridge.notify("text", "from worker"))
    worker.start()
    worker.join()

    bridge.process_pending()
    assert seen == [threading.current_thread()]
    assert store.get("text") == "from worker"


def test_exposed_api_only_has_save_and_load(store: Store) -> None:
    api = expose_store(HostBridge(store))

    assert isinstance(api, StoreApi)
    assert not hasattr(api, "__dict__")
    assert set(StoreApi.__slots__) == {"save", "load"}


def test_exposed_api_roundtrip(store: Store) -> None:
    bridge = HostBridge(store)
    api = expose_store(bridge)

    assert api.save("text", "hello") is None
    reply = api.load("text")
    bridge.process_pending()

    assert reply.result(timeout=0) == "hello"


class _FakeWidget:
    def __init__(self) -> None:
        self.scheduled = {}
        self._next = 0

    def after(self, _ms, callback):
        self._next += 1
        self.scheduled[self._next] = callback
        return self._next

    def after_cancel(self, after_id):
        self.scheduled.pop(after_id, None)

    def run_pending(self) -> None:
        for after_id, callback in list(self.scheduled.items()):
            self.scheduled.pop(after_id)
            callback()


def test_attach_pumps_on_each_tick_and_detach_stops(store: Store) -> None:
    bridge = HostBridge(store)
    widget = _FakeWidget()
    bridge.attach(widget, interval_ms=5)
    assert len(widget.scheduled) == 1

    bridge.notify("text", "ticked")
    widget.run_pending()
    assert store.get("text") == "ticked"
    assert len(widget.scheduled) == 1

    bridge.detach()
    assert widget.scheduled == {}


def test_non_string_key_is_stored_under_its_string_form(store: Store) -> None:
    bridge = HostBridge(store)
    api = expose_store(bridge)

    api.save(1, "x")
    api.save("text", "hello")
    reply = api.load(1)
    assert bridge.process_pending() == 3

    assert reply.result(timeout=0) == "x"
    on_disk = json.loads(store.path.read_text(encoding="utf-8"))
    assert on_disk == {"1": "x", "text": "hello"}


def test_unserializable_save_does_not_block_later_saves(store: Store, caplog) -> None:
    bridge = HostBridge(store)
    api = expose_store(bridge)

    api.save("obj", object())
    api.save("text", "hello")
    with caplog.at_level(logging.ERROR, logger="deskpad.bridge"):
        bridge.process_pending()

    assert sum("store:save failed" in r.getMessage() for r in caplog.records) == 1
    on_disk = json.loads(store.path.read_text(encoding="utf-8"))
    assert on_disk == {"text": "hello"}
