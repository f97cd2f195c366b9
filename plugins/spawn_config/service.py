"""SpawnControlService — owns the live catalog and its two consumers.

Lifecycle:
  load()            read (or reset) the config document at plugin start
  on_world_ready()  start the one-shot background task:
                      discover -> swap snapshot -> save -> [grace] -> sweep
  on_instance_created(instance)
                    gate decision for every spawn, on the engine thread
  shutdown()        cancel the background task and wait briefly

The catalog is shared by snapshot swap: the background task builds the
merged Catalog aside and rebinds ``_catalog`` in one assignment.  The
gate reads the reference once per call and never blocks.
"""
from __future__ import annotations

import random
import threading
from typing import Any, Optional

from loguru import logger

from .catalog import Catalog
from .discovery import DiscoveryScanner
from .gate import Decision, RandomSource, decide
from .store import CatalogStore
from .sweeper import CleanupSweeper, StartupTask, SweepResult


class SpawnControlService:
    """Spawn gating and catalog reconciliation for one world."""

    def __init__(
        self,
        store: CatalogStore,
        manifest: Any,
        world: Any,
        scanner: Optional[DiscoveryScanner] = None,
        rng: Optional[RandomSource] = None,
        grace_seconds: float = 1.0,
        hooks: Any = None,
    ) -> None:
        self._store = store
        self._manifest = manifest
        self._world = world
        self._scanner = scanner or DiscoveryScanner()
        self._rng: RandomSource = rng or random.Random()
        self._grace_seconds = grace_seconds
        self._hooks = hooks
        self._catalog = Catalog()
        self._task: Optional[StartupTask[Optional[SweepResult]]] = None

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def task(self) -> Optional[StartupTask[Optional[SweepResult]]]:
        return self._task

    # -- Catalog ------------------------------------------------------------

    def load(self) -> Catalog:
        self._catalog = self._store.load()
        return self._catalog

    def reload(self) -> Catalog:
        """Re-read the document after an operator edited it on disk.

        Refused while the startup task is running, since discovery would
        overwrite the reloaded snapshot with one merged from the old catalog.
        """
        if self._task is not None and self._task.running:
            logger.warning("Spawn catalog startup in progress; reload ignored")
            return self._catalog
        catalog = self.load()
        self._publish("spawn_catalog_updated", {"entries": len(catalog), "added": 0})
        return catalog

    def discover(self, cancel: Optional[threading.Event] = None) -> list[str]:
        """Merge newly found manifest prefabs into the catalog and persist it.

        If ``cancel`` is set once the manifest has been scanned, the merge is
        dropped and nothing is written.
        """
        paths = (record.path for record in self._manifest.iter_assets())
        merged, added = self._scanner.merge(self._catalog, paths)
        if cancel is not None and cancel.is_set():
            logger.info("Spawn discovery cancelled; catalog not saved")
            return []
        self._catalog = merged
        self._store.save(merged)
        self._publish(
            "spawn_catalog_updated", {"entries": len(merged), "added": len(added)}
        )
        return added

    # -- Startup task -------------------------------------------------------

    def on_world_ready(self) -> Optional[StartupTask[Optional[SweepResult]]]:
        """Kick off discovery and cleanup in the background (once)."""
        if self._task is not None:
            logger.warning("Spawn catalog startup already ran; ignoring world_ready")
            return None
        self._task = StartupTask(self._discover_and_clean)
        self._task.start()
        return self._task

    def _discover_and_clean(self, cancel: threading.Event) -> Optional[SweepResult]:
        self.discover(cancel)
        if cancel.is_set():
            return SweepResult(cancelled=True)

        catalog = self._catalog
        if not catalog.enabled:
            return None

        logger.warning("Cleaning up entities...")
        if cancel.wait(self._grace_seconds):
            logger.info("Spawn cleanup cancelled before it started")
            return SweepResult(cancelled=True)

        result = CleanupSweeper(self._world).sweep(catalog, cancel)
        self._publish(
            "spawn_sweep_complete",
            {"removed": result.removed, "cancelled": result.cancelled},
        )
        return result

    def shutdown(self, timeout: float = 3.0) -> None:
        if self._task is None or not self._task.running:
            return
        self._task.cancel()
        if not self._task.join(timeout):
            logger.warning(f"Spawn cleanup task still running after {timeout}s")

    # -- Gate ---------------------------------------------------------------

    def on_instance_created(self, instance: Any) -> Decision:
        decision = decide(instance.type_id, self._catalog, self._rng)
        if decision is Decision.DESTROY:
            self._kill(instance)
        return decision

    @staticmethod
    def _kill(instance: Any) -> None:
        # Stale engine handles may raise on any access
        try:
            if instance.is_valid():
                instance.admin_kill()
        except Exception as e:
            logger.debug(f"Kill skipped for {instance.type_id}: {e}")

    def _publish(self, event_type: str, data: dict) -> None:
        if self._hooks is not None:
            self._hooks.publish(event_type, data)
