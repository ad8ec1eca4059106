"""Entity identifier generation.

Ids are strings of the form ``"<kind>-<n>"`` (``"spore-4"``, ``"hypha-12"``).
They come from a per-session counter rather than the clock or the RNG, so a
seeded session produces identical ids on every run and id generation never
consumes random draws.

Usage:
------
    ids = EntityIdFactory()
    ids.next_id(EntityKind.SPORE)   # "spore-1"
    ids.next_id(EntityKind.SPORE)   # "spore-2"
    ids.next_id(EntityKind.HYPHA)   # "hypha-1"
"""

from enum import Enum
from typing import Dict


class EntityKind(Enum):
    """Kinds of entity the simulation creates, valued by their id prefix."""

    SPORE = "spore"
    HYPHA = "hypha"
    BRANCH = "branch"
    ROOT = "root"
    NUTRIENT = "nutrient"


class EntityIdFactory:
    """Hands out unique ids, one counter per entity kind."""

    def __init__(self) -> None:
        self._counters: Dict[EntityKind, int] = {kind: 0 for kind in EntityKind}

    def next_id(self, kind: EntityKind) -> str:
        self._counters[kind] += 1
        return f"{kind.value}-{self._counters[kind]}"

    def reserve(self, kind: EntityKind, last_used: int) -> None:
        """Make sure the next id for ``kind`` is numbered above ``last_used``.

        Used when entities with fixed ids (the initial root layout) are
        created outside the factory.
        """
        if last_used > self._counters[kind]:
            self._counters[kind] = last_used

    def issued(self, kind: EntityKind) -> int:
        """Number of ids issued (or reserved) for ``kind`` so far."""
        return self._counters[kind]


__all__ = ["EntityIdFactory", "EntityKind"]
