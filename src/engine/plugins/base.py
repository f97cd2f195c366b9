"""Plugin interface and context for server-side world plugins.

Every plugin must extend PluginInterface and implement at minimum:
- plugin_id, name, version (class attributes or properties)
- start() and stop() methods

Plugins receive a PluginContext during configure() with references to
the hook bus, the live world, the asset manifest, and plugin settings.
The host drives the lifecycle:

  configure(ctx) -> start() -> [hooks fire] -> stop()
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Protocol, runtime_checkable


@runtime_checkable
class LiveInstance(Protocol):
    """An engine-owned entity, referenced only transiently by plugins."""

    @property
    def type_id(self) -> str: ...

    @property
    def is_server(self) -> bool: ...

    def is_valid(self) -> bool: ...

    def admin_kill(self) -> None: ...


@runtime_checkable
class World(Protocol):
    """The live world as seen by plugins."""

    def live_instances(self) -> list[LiveInstance]:
        """Return a snapshot copy of every instance currently in the world."""
        ...

    def destroy_object(self, instance: LiveInstance) -> None:
        """Unconditionally remove the instance's scene object."""
        ...


class AssetRecord(Protocol):
    path: str


@runtime_checkable
class AssetManifest(Protocol):
    """Engine asset manifest (pooled string table)."""

    def iter_assets(self) -> Iterable[AssetRecord]: ...


@dataclass
class PluginContext:
    """Context object passed to plugins during configuration.

    Provides access to shared host services and plugin-specific settings.
    """
    hooks: Any                   # HookBus
    world: Any                   # World or None before the map loads
    manifest: Any                # AssetManifest
    logger: logging.Logger       # Logger scoped to this plugin
    settings: dict = field(default_factory=dict)
    data_dir: Path = Path(".")   # Where plugins keep their config files


class PluginInterface(ABC):
    """Base class all server plugins must extend.

    Subclasses must define:
    - plugin_id: str  — unique identifier
    - name: str       — human-readable name
    - version: str    — semantic version

    And implement:
    - start()  — begin plugin operation
    - stop()   — gracefully shut down (the host is unloading the plugin)
    """

    @property
    @abstractmethod
    def plugin_id(self) -> str:
        """Unique identifier (reverse-domain: 'com.example.my-plugin')."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name."""

    @property
    @abstractmethod
    def version(self) -> str:
        """Semantic version (e.g., '1.2.3')."""

    @property
    def capabilities(self) -> set[str]:
        """Capabilities this plugin provides.

        Standard capabilities:
        - 'spawn_control' — Vetoes or removes engine-spawned entities
        - 'background'    — Runs a background thread
        """
        return set()

    def configure(self, ctx: PluginContext) -> None:
        """Called once with the plugin context. Store references here.

        Default implementation is a no-op. Override if needed.
        """

    @abstractmethod
    def start(self) -> None:
        """Start the plugin. Called after configure()."""

    @abstractmethod
    def stop(self) -> None:
        """Stop the plugin. Called during shutdown."""

    @property
    def healthy(self) -> bool:
        """Health check. Override to report actual health status."""
        return True
