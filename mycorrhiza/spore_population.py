"""Spore population seeding and density-driven resizing."""

import logging
import math
from typing import List, Optional, Sequence, Tuple

from mycorrhiza.config.session import (
    ADDED_SPORE_SPREAD,
    ADDED_SPORE_VIABILITY,
    BASE_SPORE_COUNT,
    INITIAL_SPORE_SPREAD,
    INITIAL_SPORE_VIABILITY,
    REFERENCE_SPORE_DENSITY,
    SPORE_DEPTH_BAND,
    SPORE_DEPTH_TOP,
    SPORES_PER_DENSITY_UNIT,
)
from mycorrhiza.entities import Spore
from mycorrhiza.entity_ids import EntityIdFactory, EntityKind
from mycorrhiza.math_utils import Vector3
from mycorrhiza.util.rng import RandomSource, require_rng_param

logger = logging.getLogger(__name__)


def target_spore_count(spore_density: float) -> int:
    """Population size for a density: 12 at 1.0, one more per 0.1 above it.

    Halves round up (14.5 -> 15), not to the nearest even number.
    """
    raw = BASE_SPORE_COUNT + (spore_density - REFERENCE_SPORE_DENSITY) * SPORES_PER_DENSITY_UNIT
    return max(0, math.floor(raw + 0.5))


class SporePopulation:
    """Creates spores scattered just below the soil surface.

    Attributes:
        rng: Random source for positions and viability
        ids: Id factory shared with the rest of the session
    """

    def __init__(self, rng: Optional[RandomSource] = None, ids: Optional[EntityIdFactory] = None):
        self.rng = require_rng_param(rng, "SporePopulation.__init__")
        self.ids = ids if ids is not None else EntityIdFactory()

    def seed(self, spore_density: float) -> List[Spore]:
        """Fresh population for the start of a session."""
        count = target_spore_count(spore_density)
        return [
            self._create_spore(INITIAL_SPORE_SPREAD, INITIAL_SPORE_VIABILITY, time_created=0.0)
            for _ in range(count)
        ]

    def resize(self, spores: Sequence[Spore], spore_density: float, now: float) -> List[Spore]:
        """Grow or shrink ``spores`` to match ``spore_density``.

        Growing appends new dormant spores; shrinking keeps the earliest
        spores in their original order.

        Args:
            spores: Current population, left untouched
            spore_density: New density parameter
            now: Simulation time stamped on added spores

        Returns:
            The resized population as a new list
        """
        target = target_spore_count(spore_density)
        current = len(spores)
        if target < current:
            logger.debug("Spore population shrinks %d -> %d", current, target)
            return list(spores[:target])

        resized = list(spores)
        for _ in range(target - current):
            resized.append(self._create_spore(ADDED_SPORE_SPREAD, ADDED_SPORE_VIABILITY, time_created=now))
        if target > current:
            logger.debug("Spore population grows %d -> %d", current, target)
        return resized

    def _create_spore(
        self,
        spread: float,
        viability_range: Tuple[float, float],
        time_created: float,
    ) -> Spore:
        rng = self.rng
        position = Vector3(
            (rng.random() - 0.5) * spread,
            SPORE_DEPTH_TOP + rng.random() * SPORE_DEPTH_BAND,
            (rng.random() - 0.5) * spread,
        )
        return Spore(
            id=self.ids.next_id(EntityKind.SPORE),
            position=position,
            viability=rng.uniform(*viability_range),
            time_created=time_created,
        )


__all__ = ["SporePopulation", "target_spore_count"]
