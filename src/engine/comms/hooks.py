"""HookBus — synchronous named hooks plus a queued fan-out for observers.

The host engine announces lifecycle and entity events by calling named
hooks (``world_ready``, ``entity_spawned``, ...).  Hook callbacks run
inline on the announcing thread, so a plugin can act on an entity before
the tick that created it finishes.  Callbacks must be cheap.

Slower observers that only need to know *that* something happened use the
queue side instead: ``subscribe()`` returns a bounded Queue that receives
every ``publish()``ed message.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

HookCallback = Callable[..., Any]


class HookBus:
    """Thread-safe hook registry and pub/sub queue fan-out."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._hooks: dict[str, list[HookCallback]] = defaultdict(list)
        self._subscribers: list[queue.Queue] = []

    # -- Synchronous hooks --------------------------------------------------

    def register(self, hook: str, callback: HookCallback) -> None:
        with self._lock:
            self._hooks[hook].append(callback)

    def unregister(self, hook: str, callback: HookCallback) -> None:
        with self._lock:
            try:
                self._hooks[hook].remove(callback)
            except ValueError:
                pass

    def call(self, hook: str, *args: Any) -> list[Any]:
        """Invoke every callback registered for ``hook`` in order.

        Returns the callbacks' results.  A callback that raises is logged
        and contributes ``None``; the remaining callbacks still run.
        """
        with self._lock:
            callbacks = list(self._hooks.get(hook, ()))
        results: list[Any] = []
        for cb in callbacks:
            try:
                results.append(cb(*args))
            except Exception as e:
                logger.error(f"Hook '{hook}' callback {cb!r} failed: {e}")
                results.append(None)
        return results

    def has_hook(self, hook: str) -> bool:
        with self._lock:
            return bool(self._hooks.get(hook))

    # -- Queued fan-out -----------------------------------------------------

    def subscribe(self, maxsize: int = 100) -> queue.Queue:
        q: queue.Queue = queue.Queue(maxsize=maxsize)
        with self._lock:
            self._subscribers.append(q)
        return q

    def unsubscribe(self, q: queue.Queue) -> None:
        with self._lock:
            try:
                self._subscribers.remove(q)
            except ValueError:
                pass

    def publish(self, event_type: str, data: dict | None = None) -> None:
        msg: dict[str, Any] = {"type": event_type}
        if data is not None:
            msg["data"] = data
        with self._lock:
            for q in self._subscribers:
                try:
                    q.put_nowait(msg)
                except queue.Full:
                    # Drop oldest so the newest event always lands
                    try:
                        q.get_nowait()
                    except queue.Empty:
                        pass
                    try:
                        q.put_nowait(msg)
                    except queue.Full:
                        pass
