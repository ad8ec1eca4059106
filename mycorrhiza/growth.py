"""Hyphal growth: spore germination, tip extension, branching and root colonization.

One call to ``GrowthEngine.advance_growth`` advances every spore and hypha
by one tick. Phases run in a fixed order:

1. Germination: dormant spores may sprout a hypha aimed at the nearest root.
2. Extension and branching: every active hypha steers toward nearby roots,
   advances its tip, matures, and may split off a child hypha.
3. Root connection: unconnected hyphae whose tip reached a root colonize it.

Side effects are limited to the objects passed in: ``Spore.germinated``,
``Root.colonized`` and the hyphae themselves. New hyphae are returned in
the updated list rather than written anywhere else.
"""

import logging
import math
from typing import List, Optional, Sequence

from mycorrhiza.config.growth import (
    BASE_GROWTH_SPEED,
    BRANCH_ANGLE_SPREAD,
    BRANCH_BASE_CHANCE,
    BRANCH_MATURITY_BONUS,
    BRANCH_MATURITY_INHERITANCE,
    BRANCH_MIN_MATURITY,
    BRANCH_MIN_SEGMENTS,
    BRANCH_NUTRIENT_BONUS,
    BRANCH_SEGMENT_INTERVAL,
    CONNECTION_RANGE_MULTIPLIER,
    DIRECTION_BLEND,
    DRY_SOIL_SAG,
    DRY_SOIL_THRESHOLD,
    GERMINATION_BASE_CHANCE,
    GERMINATION_COLONIZATION_BONUS,
    GERMINATION_MOISTURE_THRESHOLD,
    GERMINATION_NUTRIENT_THRESHOLD,
    GERMINATION_VIABILITY_THRESHOLD,
    INITIAL_DIRECTION_JITTER,
    LENGTH_NUTRIENT_BONUS,
    MATURATION_RATE,
    MATURITY_SPEED_BONUS,
    MIN_MOISTURE_FACTOR,
    MIN_NUTRIENT_FACTOR,
    MIN_SEGMENTS,
    NO_ROOT_DOWNWARD_BIAS,
    RICH_SOIL_THRESHOLD,
    RICH_SOIL_WOBBLE_XZ,
    RICH_SOIL_WOBBLE_Y,
    ROOT_ATTRACTION_FALLOFF,
    ROOT_ATTRACTION_RADIUS,
    ROOT_ATTRACTION_SOFTENING,
    SEGMENT_SPACING,
    STEERING_JITTER_XZ,
    STEERING_JITTER_Y,
)
from mycorrhiza.config.simulation_config import SimulationParameters
from mycorrhiza.entities import Hypha, Root, Spore
from mycorrhiza.entity_ids import EntityIdFactory, EntityKind
from mycorrhiza.math_utils import Vector3
from mycorrhiza.util.rng import RandomSource, require_rng_param

logger = logging.getLogger(__name__)

_STRAIGHT_DOWN = Vector3(0.0, -1.0, 0.0)


def germination_probability(spore: Spore, parameters: SimulationParameters) -> float:
    """Per-tick chance that ``spore`` germinates; 0.0 when a gate fails."""
    if spore.germinated:
        return 0.0
    if parameters.soil_moisture <= GERMINATION_MOISTURE_THRESHOLD:
        return 0.0
    if spore.viability <= GERMINATION_VIABILITY_THRESHOLD:
        return 0.0

    moisture_factor = max(
        0.0,
        (parameters.soil_moisture - GERMINATION_MOISTURE_THRESHOLD)
        / (1.0 - GERMINATION_MOISTURE_THRESHOLD),
    )
    nutrient_factor = max(
        0.0,
        (parameters.nutrients - GERMINATION_NUTRIENT_THRESHOLD)
        / (1.0 - GERMINATION_NUTRIENT_THRESHOLD),
    )
    base = GERMINATION_BASE_CHANCE + parameters.colonization_rate * GERMINATION_COLONIZATION_BONUS
    return base * moisture_factor * nutrient_factor


def growth_speed(hypha: Hypha, parameters: SimulationParameters, dt: float) -> float:
    """Distance the tip of ``hypha`` advances during a tick of ``dt`` seconds."""
    base_speed = parameters.growth_rate * dt * BASE_GROWTH_SPEED
    moisture_factor = max(MIN_MOISTURE_FACTOR, parameters.soil_moisture)
    nutrient_factor = max(MIN_NUTRIENT_FACTOR, parameters.nutrients)
    maturity_bonus = 1.0 + hypha.maturity * MATURITY_SPEED_BONUS
    return base_speed * moisture_factor * nutrient_factor * maturity_bonus


def max_hyphal_length(parameters: SimulationParameters) -> float:
    return parameters.max_hyphal_length * (1.0 + parameters.nutrients * LENGTH_NUTRIENT_BONUS)


def is_branch_eligible(hypha: Hypha) -> bool:
    """Whether the hypha is at a branching opportunity this tick."""
    count = hypha.segment_count
    return (
        count > BRANCH_MIN_SEGMENTS
        and count % BRANCH_SEGMENT_INTERVAL == 0
        and hypha.maturity > BRANCH_MIN_MATURITY
    )


def branch_probability(hypha: Hypha, parameters: SimulationParameters) -> float:
    base = parameters.branching_factor * parameters.colonization_rate * BRANCH_BASE_CHANCE
    bonus = 1.0 + hypha.maturity * BRANCH_MATURITY_BONUS + parameters.nutrients * BRANCH_NUTRIENT_BONUS
    return base * bonus


def connection_range(parameters: SimulationParameters) -> float:
    return parameters.connection_distance * CONNECTION_RANGE_MULTIPLIER


class GrowthEngine:
    """Advances fungal growth one tick at a time.

    Attributes:
        rng: Source of every random draw the engine makes
        ids: Id factory shared with the rest of the session
    """

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        ids: Optional[EntityIdFactory] = None,
    ) -> None:
        self.rng = require_rng_param(rng, "GrowthEngine.__init__")
        self.ids = ids if ids is not None else EntityIdFactory()

    def advance_growth(
        self,
        spores: Sequence[Spore],
        hyphae: Sequence[Hypha],
        roots: Sequence[Root],
        parameters: SimulationParameters,
        dt: float,
    ) -> List[Hypha]:
        """Run germination, extension/branching and root connection for one tick.

        Args:
            spores: Spore population; germinated flags may flip
            hyphae: Current hyphae; mutated in place
            roots: Current roots; colonized flags may flip
            parameters: Environmental conditions for this tick
            dt: Tick length in simulation seconds; ``dt <= 0`` changes nothing

        Returns:
            All hyphae, existing ones first, then newly germinated, then new branches
        """
        updated = list(hyphae)
        if dt <= 0:
            return updated

        updated.extend(self._germinate(spores, roots, parameters))

        branches: List[Hypha] = []
        for hypha in updated:
            if not hypha.active:
                continue
            self._extend(hypha, roots, parameters, dt)
            branch = self._try_branch(hypha, parameters)
            if branch is not None:
                branches.append(branch)
        updated.extend(branches)

        for hypha in updated:
            if not hypha.connected_to_root:
                self._check_root_connection(hypha, roots, parameters)

        return updated

    # ------------------------------------------------------------------
    # Germination
    # ------------------------------------------------------------------

    def _germinate(
        self,
        spores: Sequence[Spore],
        roots: Sequence[Root],
        parameters: SimulationParameters,
    ) -> List[Hypha]:
        sprouted: List[Hypha] = []
        for spore in spores:
            chance = germination_probability(spore, parameters)
            if chance <= 0.0 or self.rng.random() >= chance:
                continue

            spore.germinated = True
            hypha = Hypha(
                id=self.ids.next_id(EntityKind.HYPHA),
                segments=[spore.position.copy()],
                growth_direction=self._initial_direction(spore.position, roots),
                parent_spore_id=spore.id,
            )
            sprouted.append(hypha)
            logger.debug("Spore %s germinated into %s", spore.id, hypha.id)
        return sprouted

    def _initial_direction(self, origin: Vector3, roots: Sequence[Root]) -> Vector3:
        rng = self.rng
        if roots:
            nearest = min(roots, key=lambda root: origin.distance_to(root.position))
            toward = (nearest.position - origin).normalize()
            jitter = Vector3(
                (rng.random() - 0.5) * INITIAL_DIRECTION_JITTER,
                (rng.random() - 0.5) * INITIAL_DIRECTION_JITTER,
                (rng.random() - 0.5) * INITIAL_DIRECTION_JITTER,
            )
            direction = (toward + jitter).normalize()
        else:
            direction = Vector3(
                rng.random() - 0.5,
                -rng.random() * NO_ROOT_DOWNWARD_BIAS,
                rng.random() - 0.5,
            ).normalize()

        if direction.length_squared() == 0:
            return _STRAIGHT_DOWN.copy()
        return direction

    # ------------------------------------------------------------------
    # Extension
    # ------------------------------------------------------------------

    def _extend(
        self,
        hypha: Hypha,
        roots: Sequence[Root],
        parameters: SimulationParameters,
        dt: float,
    ) -> None:
        speed = growth_speed(hypha, parameters, dt)
        self._steer(hypha, roots)

        new_tip = hypha.tip + hypha.growth_direction * speed
        self._apply_environment(new_tip, parameters)

        # The live tip slides until it has moved far enough from the last
        # committed segment, so segment density does not depend on dt.
        if (
            hypha.segment_count < MIN_SEGMENTS
            or hypha.segments[-2].distance_to(new_tip) > SEGMENT_SPACING
        ):
            hypha.segments.append(new_tip)
        else:
            hypha.tip.update(new_tip.x, new_tip.y, new_tip.z)

        hypha.maturity = min(1.0, hypha.maturity + dt * MATURATION_RATE)

        if hypha.length() > max_hyphal_length(parameters):
            hypha.active = False
            logger.debug(
                "Hypha %s stopped growing at %d segments", hypha.id, hypha.segment_count
            )

    def _steer(self, hypha: Hypha, roots: Sequence[Root]) -> None:
        tip = hypha.tip
        direction = hypha.growth_direction

        if not hypha.connected_to_root:
            attraction = Vector3()
            for root in roots:
                distance = tip.distance_to(root.position)
                if distance >= ROOT_ATTRACTION_RADIUS:
                    continue
                strength = root.health / (distance + ROOT_ATTRACTION_SOFTENING) ** ROOT_ATTRACTION_FALLOFF
                attraction.add_inplace((root.position - tip).normalize() * strength)

            if attraction.length_squared() > 0:
                direction = direction.lerp(attraction.normalize(), DIRECTION_BLEND).normalize()

        jitter = Vector3(
            (self.rng.random() - 0.5) * STEERING_JITTER_XZ,
            (self.rng.random() - 0.5) * STEERING_JITTER_Y,
            (self.rng.random() - 0.5) * STEERING_JITTER_XZ,
        )
        steered = (direction + jitter).normalize()
        if steered.length_squared() > 0:
            hypha.growth_direction = steered

    def _apply_environment(self, position: Vector3, parameters: SimulationParameters) -> None:
        if parameters.soil_moisture < DRY_SOIL_THRESHOLD:
            position.y -= (DRY_SOIL_THRESHOLD - parameters.soil_moisture) * DRY_SOIL_SAG

        if parameters.nutrients > RICH_SOIL_THRESHOLD:
            position.add_inplace(
                Vector3(
                    (self.rng.random() - 0.5) * RICH_SOIL_WOBBLE_XZ,
                    self.rng.random() * RICH_SOIL_WOBBLE_Y,
                    (self.rng.random() - 0.5) * RICH_SOIL_WOBBLE_XZ,
                )
            )

    # ------------------------------------------------------------------
    # Branching
    # ------------------------------------------------------------------

    def _try_branch(self, hypha: Hypha, parameters: SimulationParameters) -> Optional[Hypha]:
        if not is_branch_eligible(hypha):
            return None
        if self.rng.random() >= branch_probability(hypha, parameters):
            return None

        branch_point = hypha.tip.copy()
        hypha.branch_points.append(branch_point)

        angle = (self.rng.random() - 0.5) * 2.0 * BRANCH_ANGLE_SPREAD * math.pi
        child = Hypha(
            id=self.ids.next_id(EntityKind.BRANCH),
            segments=[branch_point.copy()],
            growth_direction=hypha.growth_direction.rotate_about_y(angle),
            maturity=hypha.maturity * BRANCH_MATURITY_INHERITANCE,
            parent_spore_id=hypha.parent_spore_id,
        )
        logger.debug(
            "Hypha %s branched into %s at (%.2f, %.2f, %.2f)",
            hypha.id,
            child.id,
            branch_point.x,
            branch_point.y,
            branch_point.z,
        )
        return child

    # ------------------------------------------------------------------
    # Root connection
    # ------------------------------------------------------------------

    def _check_root_connection(
        self,
        hypha: Hypha,
        roots: Sequence[Root],
        parameters: SimulationParameters,
    ) -> None:
        reach = connection_range(parameters)
        tip = hypha.tip
        for root in roots:
            distance = tip.distance_to(root.position)
            if distance >= reach:
                continue
            hypha.connect(root.id)
            root.colonized = True
            logger.debug(
                "Hypha %s colonized root %s at distance %.2f", hypha.id, root.id, distance
            )


__all__ = [
    "GrowthEngine",
    "branch_probability",
    "connection_range",
    "germination_probability",
    "growth_speed",
    "is_branch_eligible",
    "max_hyphal_length",
]
