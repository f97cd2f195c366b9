"""DiscoveryScanner — seed the catalog from the engine's asset manifest.

An asset qualifies when its path contains at least one include pattern,
contains none of the exclude patterns, and ends with the required suffix.
Qualifying paths that the catalog does not know yet are added with
spawn probability 1.0.  Existing entries are never touched, so operator
tuning survives every restart.
"""
from __future__ import annotations

from typing import Iterable, Sequence

from loguru import logger

from .catalog import Catalog, CatalogEntry

DEFAULT_INCLUDE_PATTERNS: tuple[str, ...] = (
    "/autospawn/collectable/",
    "/autospawn/resource/",
)
DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = ("/crystals/",)
DEFAULT_SUFFIX = ".prefab"


class DiscoveryScanner:
    """Filters asset paths and merges new ones into a Catalog."""

    def __init__(
        self,
        include_patterns: Sequence[str] = DEFAULT_INCLUDE_PATTERNS,
        exclude_patterns: Sequence[str] = DEFAULT_EXCLUDE_PATTERNS,
        required_suffix: str = DEFAULT_SUFFIX,
    ) -> None:
        self.include_patterns = tuple(include_patterns)
        self.exclude_patterns = tuple(exclude_patterns)
        self.required_suffix = required_suffix

    def qualifies(self, path: str) -> bool:
        # No include patterns means nothing matches, not everything
        return (
            any(p in path for p in self.include_patterns)
            and not any(p in path for p in self.exclude_patterns)
            and path.endswith(self.required_suffix)
        )

    def scan(self, paths: Iterable[str]) -> list[str]:
        """Return qualifying paths in scan order, duplicates collapsed."""
        seen: set[str] = set()
        found: list[str] = []
        for path in paths:
            if path in seen or not self.qualifies(path):
                continue
            seen.add(path)
            found.append(path)
        return found

    def merge(self, catalog: Catalog, paths: Iterable[str]) -> tuple[Catalog, list[str]]:
        """Merge newly discovered types into ``catalog``.

        Returns:
            (merged catalog, type ids that were added).  The input catalog
            is left unchanged.
        """
        added = [p for p in self.scan(paths) if p not in catalog]
        if not added:
            return catalog, []

        merged = catalog.with_added(CatalogEntry(p, 1.0) for p in added)
        logger.info(f"Discovered {len(added)} new spawnable prefabs")
        return merged, added
