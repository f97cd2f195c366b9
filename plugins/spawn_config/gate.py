"""Spawn gate — per-event keep/destroy decision.

Called on the engine thread for every entity spawn, so it does no I/O,
takes no locks and allocates nothing per call.  Each call is an
independent trial; there is no memory of earlier decisions.
"""
from __future__ import annotations

import enum
from typing import Protocol

from .catalog import Catalog


class RandomSource(Protocol):
    def random(self) -> float:
        """Uniform float in [0.0, 1.0)."""
        ...


class Decision(str, enum.Enum):
    KEEP = "keep"
    DESTROY = "destroy"


def decide(type_id: str, catalog: Catalog, rng: RandomSource) -> Decision:
    """Decide whether a freshly created instance of ``type_id`` survives.

    Disabled catalogs and uncataloged types always keep.  Probabilities at
    or below 0 always destroy and at or above 1 always keep, without
    drawing.  Otherwise the instance is destroyed iff a uniform draw
    exceeds its probability.
    """
    if not catalog.enabled:
        return Decision.KEEP

    entry = catalog.entries.get(type_id)
    if entry is None:
        return Decision.KEEP

    chance = entry.spawn_probability
    if chance <= 0.0:
        return Decision.DESTROY
    if chance >= 1.0:
        return Decision.KEEP

    if rng.random() > chance:
        return Decision.DESTROY
    return Decision.KEEP
