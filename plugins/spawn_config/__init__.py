"""Spawn Config plugin — per-prefab spawn chances for environment objects."""
from __future__ import annotations

from .catalog import Catalog, CatalogDocument, CatalogEntry, SpawnEntry
from .discovery import DiscoveryScanner
from .gate import Decision, decide
from .service import SpawnControlService
from .store import CatalogLoadError, CatalogStore
from .sweeper import CleanupSweeper, StartupTask, SweepResult

__all__ = [
    "Catalog",
    "CatalogDocument",
    "CatalogEntry",
    "CatalogLoadError",
    "CatalogStore",
    "CleanupSweeper",
    "Decision",
    "DiscoveryScanner",
    "SpawnControlService",
    "SpawnEntry",
    "StartupTask",
    "SweepResult",
    "decide",
]
