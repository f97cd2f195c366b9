"""SpawnConfigPlugin — control which environment prefabs survive spawning."""
from __future__ import annotations

import logging
import random
from typing import Any, Optional

from engine.plugins.base import PluginContext, PluginInterface

from .config import SpawnConfigSettings
from .discovery import DiscoveryScanner
from .gate import Decision
from .service import SpawnControlService
from .store import CatalogStore

WORLD_READY_HOOK = "world_ready"
ENTITY_SPAWNED_HOOK = "entity_spawned"


class SpawnConfigPlugin(PluginInterface):
    """Gates engine spawns against a per-prefab spawn chance catalog.

    On world_ready the plugin merges new collectable/resource prefabs from
    the asset manifest into its config document and, when enabled, removes
    already-placed instances of never-spawn prefabs.  Every entity_spawned
    hook call is then kept or killed according to the prefab's spawnChance.
    """

    def __init__(self) -> None:
        self._hooks: Any = None
        self._logger: Optional[logging.Logger] = None
        self._settings: Optional[SpawnConfigSettings] = None
        self._service: Optional[SpawnControlService] = None
        self._running = False

    # ── PluginInterface identity ─────────────────────────────────

    @property
    def plugin_id(self) -> str:
        return "com.spawnconfig.gate"

    @property
    def name(self) -> str:
        return "Spawn Config"

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def capabilities(self) -> set[str]:
        return {"spawn_control", "background"}

    @property
    def service(self) -> Optional[SpawnControlService]:
        return self._service

    # ── PluginInterface lifecycle ────────────────────────────────

    def configure(self, ctx: PluginContext) -> None:
        """Build the service from the host context and plugin settings."""
        self._hooks = ctx.hooks
        self._logger = ctx.logger or logging.getLogger("spawn_config")
        self._settings = SpawnConfigSettings.from_context(ctx.settings)

        settings = self._settings
        store = CatalogStore(settings.resolve_config_path(ctx.data_dir))
        scanner = DiscoveryScanner(
            include_patterns=settings.include_patterns,
            exclude_patterns=settings.exclude_patterns,
            required_suffix=settings.required_suffix,
        )
        self._service = SpawnControlService(
            store=store,
            manifest=ctx.manifest,
            world=ctx.world,
            scanner=scanner,
            rng=random.Random(settings.seed),
            grace_seconds=settings.grace_seconds,
            hooks=ctx.hooks,
        )

        self._logger.info(
            "Spawn Config configured (config: %s, grace: %.1fs)",
            store.path,
            settings.grace_seconds,
        )

    def start(self) -> None:
        """Load the catalog and subscribe to world hooks."""
        if self._running:
            return
        if self._service is None:
            raise RuntimeError("SpawnConfigPlugin.start() called before configure()")

        catalog = self._service.load()

        if self._hooks is not None:
            self._hooks.register(WORLD_READY_HOOK, self.on_world_ready)
            self._hooks.register(ENTITY_SPAWNED_HOOK, self.on_entity_spawned)

        self._running = True
        if self._logger:
            self._logger.info(
                "Spawn Config started (%d prefabs, enabled=%s)",
                len(catalog),
                catalog.enabled,
            )

    def stop(self) -> None:
        """Unhook and cancel any pending cleanup."""
        if self._hooks is not None:
            self._hooks.unregister(WORLD_READY_HOOK, self.on_world_ready)
            self._hooks.unregister(ENTITY_SPAWNED_HOOK, self.on_entity_spawned)

        if self._service is not None and self._settings is not None:
            self._service.shutdown(timeout=self._settings.shutdown_timeout)

        self._running = False
        if self._logger:
            self._logger.info("Spawn Config stopped")

    @property
    def healthy(self) -> bool:
        if self._service is None or self._service.task is None:
            return True
        return self._service.task.error is None

    # ── Hooks ────────────────────────────────────────────────────

    def on_world_ready(self) -> None:
        if self._service is not None:
            self._service.on_world_ready()

    def on_entity_spawned(self, instance: Any) -> Decision:
        if self._service is None:
            return Decision.KEEP
        return self._service.on_instance_created(instance)
