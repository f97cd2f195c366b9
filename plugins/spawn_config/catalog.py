"""Spawn catalog — in-memory snapshot and persisted document schema.

The in-memory ``Catalog`` is immutable.  Discovery builds a new Catalog
and the service swaps its reference, so the gate never observes a
half-merged mapping.

The persisted layout is::

    {"enabled": false, "spawns": [{"prefab": "...", "spawnChance": 1.0}]}
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator


@dataclass(frozen=True)
class CatalogEntry:
    """Spawn probability for one object type (engine prefab path)."""

    type_id: str
    spawn_probability: float = 1.0


@dataclass(frozen=True)
class Catalog:
    """Global enable flag plus type_id -> CatalogEntry, in insertion order."""

    enabled: bool = False
    entries: Mapping[str, CatalogEntry] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        if not isinstance(self.entries, MappingProxyType):
            object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    @classmethod
    def from_entries(
        cls, enabled: bool, entries: Iterable[CatalogEntry]
    ) -> Catalog:
        """Build a catalog, keeping the first entry for any repeated type_id."""
        mapping: dict[str, CatalogEntry] = {}
        for entry in entries:
            if entry.type_id in mapping:
                logger.warning(
                    f"Duplicate spawn entry '{entry.type_id}' ignored; "
                    f"keeping spawnChance={mapping[entry.type_id].spawn_probability}"
                )
                continue
            mapping[entry.type_id] = entry
        return cls(enabled=enabled, entries=mapping)

    def get(self, type_id: str) -> CatalogEntry | None:
        return self.entries.get(type_id)

    def __contains__(self, type_id: object) -> bool:
        return type_id in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def with_added(self, new_entries: Iterable[CatalogEntry]) -> Catalog:
        """Return a copy with ``new_entries`` appended; existing keys win."""
        merged = dict(self.entries)
        for entry in new_entries:
            merged.setdefault(entry.type_id, entry)
        return Catalog(enabled=self.enabled, entries=merged)

    def dead_types(self) -> frozenset[str]:
        """Type ids tuned to never spawn."""
        return frozenset(
            e.type_id for e in self.entries.values() if e.spawn_probability == 0.0
        )

    # -- Document mapping ---------------------------------------------------

    @classmethod
    def from_document(cls, doc: CatalogDocument) -> Catalog:
        return cls.from_entries(
            doc.enabled,
            (CatalogEntry(s.prefab, s.spawn_chance) for s in doc.spawns),
        )

    def to_document(self) -> CatalogDocument:
        return CatalogDocument(
            enabled=self.enabled,
            spawns=[
                SpawnEntry(prefab=e.type_id, spawn_chance=e.spawn_probability)
                for e in self.entries.values()
            ],
        )


class SpawnEntry(BaseModel):
    """One ``spawns`` row of the config document."""

    model_config = ConfigDict(populate_by_name=True)

    prefab: str = Field(min_length=1)
    spawn_chance: float = Field(default=1.0, alias="spawnChance", allow_inf_nan=False)

    @field_validator("spawn_chance")
    @classmethod
    def _clamp_chance(cls, value: float) -> float:
        if value < 0.0 or value > 1.0:
            clamped = min(1.0, max(0.0, value))
            logger.warning(f"spawnChance {value} out of range; clamped to {clamped}")
            return clamped
        return value


class CatalogDocument(BaseModel):
    """The whole persisted config document."""

    enabled: bool = False
    spawns: list[SpawnEntry] = Field(default_factory=list)

    def dump(self) -> dict:
        return self.model_dump(by_alias=True)
