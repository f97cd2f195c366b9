"""Unit tests for HookBus — synchronous hooks and queued fan-out.

Tests hook registration/ordering/isolation, publish/receive, queue
overflow (drop oldest) and thread safety.
"""
from __future__ import annotations

import queue
import threading

import pytest

from engine.comms.hooks import HookBus


@pytest.mark.unit
class TestHooks:
    """register/unregister/call behaviour."""

    def test_call_runs_callbacks_inline_in_order(self):
        bus = HookBus()
        seen: list[tuple[str, int]] = []
        bus.register("entity_spawned", lambda e: seen.append(("a", e)) or "a")
        bus.register("entity_spawned", lambda e: seen.append(("b", e)) or "b")
        assert bus.call("entity_spawned", 7) == ["a", "b"]
        assert seen == [("a", 7), ("b", 7)]

    def test_call_unknown_hook_returns_empty(self):
        assert HookBus().call("world_ready") == []

    def test_callback_runs_on_calling_thread(self):
        bus = HookBus()
        threads: list[threading.Thread] = []
        bus.register("world_ready", lambda: threads.append(threading.current_thread()))
        bus.call("world_ready")
        assert threads == [threading.current_thread()]

    def test_unregister_stops_callback(self):
        bus = HookBus()
        cb = lambda: "hit"  # noqa: E731
        bus.register("world_ready", cb)
        bus.unregister("world_ready", cb)
        assert bus.call("world_ready") == []
        assert not bus.has_hook("world_ready")

    def test_unregister_unknown_is_safe(self):
        HookBus().unregister("world_ready", lambda: None)

    def test_failing_callback_isolated(self):
        bus = HookBus()

        def boom():
            raise RuntimeError("plugin bug")

        bus.register("world_ready", boom)
        bus.register("world_ready", lambda: "ok")
        assert bus.call("world_ready") == [None, "ok"]

    def test_bound_methods_unregister(self):
        class Listener:
            def on_ready(self):
                return "ready"

        bus = HookBus()
        listener = Listener()
        bus.register("world_ready", listener.on_ready)
        bus.unregister("world_ready", listener.on_ready)
        assert bus.call("world_ready") == []


@pytest.mark.unit
class TestPublish:
    """Core subscribe/publish/unsubscribe functionality."""

    def test_subscribe_returns_queue(self):
        assert isinstance(HookBus().subscribe(), queue.Queue)

    def test_publish_delivers_to_subscriber(self):
        bus = HookBus()
        q = bus.subscribe()
        bus.publish("spawn_sweep_complete", {"removed": 5})
        msg = q.get_nowait()
        assert msg == {"type": "spawn_sweep_complete", "data": {"removed": 5}}

    def test_publish_without_data(self):
        bus = HookBus()
        q = bus.subscribe()
        bus.publish("ping")
        assert "data" not in q.get_nowait()

    def test_unsubscribe_stops_delivery(self):
        bus = HookBus()
        q = bus.subscribe()
        bus.unsubscribe(q)
        bus.publish("after_unsub")
        assert q.empty()

    def test_overflow_drops_oldest(self):
        bus = HookBus()
        q = bus.subscribe(maxsize=3)
        for i in range(5):
            bus.publish("tick", {"i": i})
        assert [q.get_nowait()["data"]["i"] for _ in range(3)] == [2, 3, 4]

    def test_concurrent_publish(self):
        bus = HookBus()
        q = bus.subscribe(maxsize=1000)

        def pump(offset):
            for i in range(100):
                bus.publish("tick", {"i": offset + i})

        threads = [threading.Thread(target=pump, args=(n * 100,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5.0)
        assert q.qsize() == 400
