"""CleanupSweeper and StartupTask — one-shot removal of never-spawn types.

Instances placed by the engine before the catalog was consulted (map
load, saved world) are not seen by the gate.  The sweeper walks a
snapshot of the live world once and removes every instance whose type
is tuned to probability 0.  Instances created after the snapshot belong
to the gate.

StartupTask is the background thread the sweep runs on.  It is started
once per plugin lifetime and can be cancelled at any time; the work
callable receives the cancel Event and is expected to check it at its
suspension points.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from loguru import logger

from .catalog import Catalog

T = TypeVar("T")


@dataclass
class SweepResult:
    removed: int = 0
    cancelled: bool = False


class CleanupSweeper:
    """Removes live instances whose catalog probability is exactly 0."""

    def __init__(self, world: Any) -> None:
        self._world = world

    def sweep(
        self, catalog: Catalog, cancel_event: Optional[threading.Event] = None
    ) -> SweepResult:
        result = SweepResult()
        dead = catalog.dead_types()
        if not dead:
            logger.warning("Cleaned up 0 existing entities.")
            return result

        for instance in self._world.live_instances():
            if cancel_event is not None and cancel_event.is_set():
                result.cancelled = True
                logger.info(f"Cleanup cancelled after {result.removed} removals")
                return result
            if instance.type_id not in dead:
                continue
            try:
                self._remove(instance)
            except Exception as e:
                logger.error(f"Failed to remove {instance.type_id}: {e}")
                continue
            result.removed += 1

        logger.warning(f"Cleaned up {result.removed} existing entities.")
        return result

    def _remove(self, instance: Any) -> None:
        # Stale or client-side handles only have a scene object left
        try:
            if instance.is_valid() and instance.is_server:
                instance.admin_kill()
                return
        except Exception as e:
            logger.debug(f"admin_kill failed for {instance.type_id}; removing raw: {e}")
        self._world.destroy_object(instance)


class StartupTask(Generic[T]):
    """Cancellable one-shot background thread.

    Usage:
        task = StartupTask(lambda cancel: work(cancel))
        task.start()
        ...
        task.cancel()
        task.join(timeout=3.0)
    """

    def __init__(
        self, work: Callable[[threading.Event], T], name: str = "spawn-config-startup"
    ) -> None:
        self._work = work
        self._name = name
        self._cancel = threading.Event()
        self._thread: threading.Thread | None = None
        self.result: T | None = None
        self.error: BaseException | None = None

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError(f"Task '{self._name}' already started")
        self._thread = threading.Thread(target=self._run, daemon=True, name=self._name)
        self._thread.start()

    def cancel(self) -> None:
        self._cancel.set()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the task to finish. Returns True if it is no longer running."""
        if self._thread is not None:
            self._thread.join(timeout)
        return not self.running

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def started(self) -> bool:
        return self._thread is not None

    def _run(self) -> None:
        try:
            self.result = self._work(self._cancel)
        except Exception as e:
            self.error = e
            logger.exception(f"Task '{self._name}' failed: {e}")
