"""Nutrient exchange between colonized roots and connected hyphae.

Each tick, ``NutrientExchangeEngine.advance_nutrients``:

1. drops flows that finished delivering,
2. lets every mature connected hypha trade with every colonized root,
   spawning one phosphorus, carbohydrate or water particle on success,
3. moves every particle along its path.

A particle's position is recomputed from its fixed source, target and
progress every tick instead of being integrated, so it lands exactly on
its target when progress reaches 1 regardless of the tick lengths used.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from mycorrhiza.config.nutrients import (
    CARBOHYDRATE_CONCENTRATION,
    CARBOHYDRATE_FLOW_RATE,
    CARBOHYDRATE_SHARE_END,
    CARBOHYDRATE_SOURCE_DEPTH,
    EXCHANGE_BASE_CHANCE,
    EXCHANGE_MIN_MATURITY,
    EXCHANGE_RATE_BASE,
    EXCHANGE_RATE_MOISTURE_SATURATION,
    PHOSPHORUS_CONCENTRATION,
    PHOSPHORUS_FLOW_RATE,
    PHOSPHORUS_SHARE,
    PHOSPHORUS_TARGET_DEPTH,
    PROGRESS_SPEED,
    WATER_CONCENTRATION,
    WATER_FLOW_RATE,
    WATER_TARGET_HEIGHT,
    WOBBLE_XZ,
    WOBBLE_Y,
)
from mycorrhiza.config.simulation_config import SimulationParameters
from mycorrhiza.entities import Hypha, Nutrient, NutrientType, Root
from mycorrhiza.entity_ids import EntityIdFactory, EntityKind
from mycorrhiza.math_utils import Vector3
from mycorrhiza.util.rng import RandomSource, require_rng_param

logger = logging.getLogger(__name__)


@dataclass
class NutrientFlowStats:
    """Aggregate view of the particles currently in flight."""

    phosphorus_count: int = 0
    carbohydrate_count: int = 0
    water_count: int = 0
    total_flow: float = 0.0
    average_concentration: float = 0.0

    def to_dict(self) -> dict:
        return {
            "phosphorusCount": self.phosphorus_count,
            "carbohydrateCount": self.carbohydrate_count,
            "waterCount": self.water_count,
            "totalFlow": self.total_flow,
            "averageConcentration": self.average_concentration,
        }


def exchange_probability(parameters: SimulationParameters) -> float:
    """Per-tick chance that one hypha-root pair starts a flow."""
    return EXCHANGE_BASE_CHANCE * parameters.nutrients * parameters.soil_moisture


def can_exchange(hypha: Hypha, root: Root) -> bool:
    return hypha.connected_to_root and hypha.maturity > EXCHANGE_MIN_MATURITY and root.colonized


def estimate_exchange_rate(hypha: Hypha, root: Root, parameters: SimulationParameters) -> float:
    """Relative strength of the symbiosis between ``hypha`` and ``root``.

    A display value for the presentation layer; the engine itself does not
    use it.
    """
    moisture_factor = min(1.0, parameters.soil_moisture / EXCHANGE_RATE_MOISTURE_SATURATION)
    return (
        EXCHANGE_RATE_BASE
        * moisture_factor
        * root.health
        * hypha.maturity
        * parameters.nutrients
    )


def nutrient_flow_stats(nutrients: Iterable[Nutrient]) -> NutrientFlowStats:
    stats = NutrientFlowStats()
    total_concentration = 0.0
    count = 0
    for nutrient in nutrients:
        if nutrient.type is NutrientType.PHOSPHORUS:
            stats.phosphorus_count += 1
        elif nutrient.type is NutrientType.CARBOHYDRATES:
            stats.carbohydrate_count += 1
        else:
            stats.water_count += 1
        stats.total_flow += nutrient.flow_rate
        total_concentration += nutrient.concentration
        count += 1
    if count:
        stats.average_concentration = total_concentration / count
    return stats


class NutrientExchangeEngine:
    """Creates and animates nutrient particles one tick at a time.

    Attributes:
        rng: Source of every random draw the engine makes
        ids: Id factory shared with the rest of the session
    """

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        ids: Optional[EntityIdFactory] = None,
    ) -> None:
        self.rng = require_rng_param(rng, "NutrientExchangeEngine.__init__")
        self.ids = ids if ids is not None else EntityIdFactory()

    def advance_nutrients(
        self,
        hyphae: Sequence[Hypha],
        roots: Sequence[Root],
        nutrients: Sequence[Nutrient],
        parameters: SimulationParameters,
        dt: float,
    ) -> List[Nutrient]:
        """Drop delivered flows, start new ones and advance all of them.

        Args:
            hyphae: Hyphae as left by this tick's growth pass
            roots: Current roots
            nutrients: Particles in flight; mutated in place
            parameters: Environmental conditions for this tick
            dt: Tick length in simulation seconds; ``dt <= 0`` changes nothing

        Returns:
            Particles still in flight, including ones created this tick
        """
        if dt <= 0:
            return list(nutrients)

        updated = [nutrient for nutrient in nutrients if not nutrient.delivered]

        chance = exchange_probability(parameters)
        for hypha in hyphae:
            for root in roots:
                if not can_exchange(hypha, root) or self.rng.random() >= chance:
                    continue
                updated.append(self._create_flow(hypha, root))

        for nutrient in updated:
            self._advance(nutrient, dt)

        return updated

    def _create_flow(self, hypha: Hypha, root: Root) -> Nutrient:
        draw = self.rng.random()
        if draw < PHOSPHORUS_SHARE:
            # Fungus hands phosphorus to the root midpoint
            return self._make(
                NutrientType.PHOSPHORUS,
                source=hypha.tip.copy(),
                target=root.point_along(-PHOSPHORUS_TARGET_DEPTH),
                concentration_range=PHOSPHORUS_CONCENTRATION,
                flow_rate_range=PHOSPHORUS_FLOW_RATE,
            )
        if draw < CARBOHYDRATE_SHARE_END:
            # Root pays the fungus in sugars
            return self._make(
                NutrientType.CARBOHYDRATES,
                source=root.point_along(-CARBOHYDRATE_SOURCE_DEPTH),
                target=hypha.tip.copy(),
                concentration_range=CARBOHYDRATE_CONCENTRATION,
                flow_rate_range=CARBOHYDRATE_FLOW_RATE,
            )
        return self._make(
            NutrientType.WATER,
            source=hypha.base.copy(),
            target=root.point_along(WATER_TARGET_HEIGHT),
            concentration_range=WATER_CONCENTRATION,
            flow_rate_range=WATER_FLOW_RATE,
        )

    def _make(
        self,
        nutrient_type: NutrientType,
        source: Vector3,
        target: Vector3,
        concentration_range: Tuple[float, float],
        flow_rate_range: Tuple[float, float],
    ) -> Nutrient:
        nutrient = Nutrient(
            id=self.ids.next_id(EntityKind.NUTRIENT),
            type=nutrient_type,
            position=source.copy(),
            source=source,
            target=target,
            concentration=self.rng.uniform(*concentration_range),
            flow_rate=self.rng.uniform(*flow_rate_range),
        )
        logger.debug("Started %s flow %s", nutrient_type.value, nutrient.id)
        return nutrient

    def _advance(self, nutrient: Nutrient, dt: float) -> None:
        nutrient.progress = min(1.0, nutrient.progress + nutrient.flow_rate * dt * PROGRESS_SPEED)

        position = nutrient.source.lerp(nutrient.target, nutrient.progress)
        if not nutrient.delivered:
            position.add_inplace(
                Vector3(
                    (self.rng.random() - 0.5) * WOBBLE_XZ,
                    (self.rng.random() - 0.5) * WOBBLE_Y,
                    (self.rng.random() - 0.5) * WOBBLE_XZ,
                )
            )
        nutrient.position = position


__all__ = [
    "NutrientExchangeEngine",
    "NutrientFlowStats",
    "can_exchange",
    "estimate_exchange_rate",
    "exchange_probability",
    "nutrient_flow_stats",
]
