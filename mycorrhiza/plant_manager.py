"""Plant root management: initial layout, planting and removal.

PlantManager receives its dependencies (RNG, id factory) via constructor
injection rather than reaching into the session, which keeps it testable
in isolation.

Removing a plant cascades into the fungal network:
- every hypha drops its link to the removed root, and a hypha left with
  no linked root is disconnected (hyphae themselves are never deleted);
  a hypha flagged as connected without any recorded link stays connected
  only while some remaining root is colonized;
- nutrient flows that start or end near the root's exchange point are
  purged, since they have nowhere to go.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from mycorrhiza.config.session import (
    INITIAL_ROOT_LAYOUT,
    NUTRIENT_PURGE_RADIUS,
    PLANT_HEALTH,
    PLANT_LENGTH,
    PLANT_SIZE,
    PLANT_SPREAD,
)
from mycorrhiza.entities import Hypha, Nutrient, Root
from mycorrhiza.entity_ids import EntityIdFactory, EntityKind
from mycorrhiza.math_utils import Vector3
from mycorrhiza.result import Err, Ok, Result
from mycorrhiza.util.rng import RandomSource, require_rng_param

logger = logging.getLogger(__name__)


@dataclass
class PlantRemoval:
    """Collections left after a plant was removed, and what the cascade touched."""

    root: Root
    roots: List[Root]
    hyphae: List[Hypha]
    nutrients: List[Nutrient]
    disconnected_hyphae: int = 0
    purged_nutrients: int = 0


class PlantManager:
    """Creates and removes plant roots.

    Attributes:
        rng: Random source for unplaced plants and their dimensions
        ids: Id factory shared with the rest of the session
    """

    def __init__(self, rng: Optional[RandomSource] = None, ids: Optional[EntityIdFactory] = None):
        self.rng = require_rng_param(rng, "PlantManager.__init__")
        self.ids = ids if ids is not None else EntityIdFactory()

    def create_initial_roots(self) -> List[Root]:
        """The fixed three-root layout every session starts from."""
        roots = [
            Root(
                id=root_id,
                position=Vector3(*position),
                length=length,
                size=size,
                health=health,
            )
            for root_id, position, length, size, health in INITIAL_ROOT_LAYOUT
        ]
        self.ids.reserve(EntityKind.ROOT, len(roots))
        return roots

    def create_plant(self, position: Optional[Tuple[float, float]] = None) -> Root:
        """Create a root at ``(x, z)`` on the surface, or at a random spot.

        Args:
            position: Optional ``(x, z)`` surface coordinates

        Returns:
            The new root; the caller adds it to its collection
        """
        rng = self.rng
        if position is None:
            x = (rng.random() - 0.5) * PLANT_SPREAD
            z = (rng.random() - 0.5) * PLANT_SPREAD
        else:
            x, z = position

        root = Root(
            id=self.ids.next_id(EntityKind.ROOT),
            position=Vector3(x, 0.0, z),
            length=rng.uniform(*PLANT_LENGTH),
            size=rng.uniform(*PLANT_SIZE),
            health=rng.uniform(*PLANT_HEALTH),
        )
        return root

    def remove_plant(
        self,
        root_id: str,
        roots: Sequence[Root],
        hyphae: Sequence[Hypha],
        nutrients: Sequence[Nutrient],
    ) -> Result[PlantRemoval, str]:
        """Remove the root ``root_id`` and cascade into hyphae and nutrients.

        Args:
            root_id: Id of the root to remove
            roots: Current roots
            hyphae: Current hyphae; links to the removed root are dropped in place
            nutrients: Current nutrient flows

        Returns:
            Ok(PlantRemoval) with the new collections, or Err if no root has that id
        """
        removed = next((root for root in roots if root.id == root_id), None)
        if removed is None:
            return Err(f"Root {root_id} not found")

        remaining_roots = [root for root in roots if root.id != root_id]

        any_colonized = any(root.colonized for root in remaining_roots)
        disconnected = 0
        for hypha in hyphae:
            if hypha.connected_root_ids:
                if hypha.disconnect(root_id):
                    disconnected += 1
            elif hypha.connected_to_root and not any_colonized:
                # Flag set without recorded links: it can only hang on to
                # some other colonized root.
                hypha.connected_to_root = False
                disconnected += 1

        exchange_point = removed.exchange_point
        remaining_nutrients = [
            nutrient
            for nutrient in nutrients
            if nutrient.source.distance_to(exchange_point) > NUTRIENT_PURGE_RADIUS
            and nutrient.target.distance_to(exchange_point) > NUTRIENT_PURGE_RADIUS
        ]

        return Ok(
            PlantRemoval(
                root=removed,
                roots=remaining_roots,
                hyphae=list(hyphae),
                nutrients=remaining_nutrients,
                disconnected_hyphae=disconnected,
                purged_nutrients=len(nutrients) - len(remaining_nutrients),
            )
        )


__all__ = ["PlantManager", "PlantRemoval"]
