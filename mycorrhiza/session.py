"""Simulation session - owner of the entity collections and the control surface.

The session is the only place that replaces the entity collections or the
parameters. The engines get the current collections each tick and hand back
updated lists; control operations (parameter updates, planting, removal,
reset) run between ticks.

Tick order:
    growth (germination -> extension/branching -> root connection)
    -> nutrient exchange (drop delivered -> create -> advance)

Growth runs first so a hypha that connects this tick can start a flow in the
same tick.
"""

import logging
import math
import random
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from mycorrhiza.config.session import DEFAULT_SPEED, MAX_SPEED, MIN_SPEED
from mycorrhiza.config.simulation_config import SimulationParameters
from mycorrhiza.entities import Hypha, Nutrient, Root, Spore
from mycorrhiza.entity_ids import EntityIdFactory
from mycorrhiza.exceptions import SimulationError
from mycorrhiza.growth import GrowthEngine
from mycorrhiza.nutrient_exchange import NutrientExchangeEngine, NutrientFlowStats, nutrient_flow_stats
from mycorrhiza.plant_manager import PlantManager
from mycorrhiza.result import Err, Ok, Result
from mycorrhiza.simulation_stats_exporter import SimulationStatsExporter
from mycorrhiza.spore_population import SporePopulation
from mycorrhiza.util.rng import seed_for

logger = logging.getLogger(__name__)


class SimulationSession:
    """A running AMF colonization simulation.

    Attributes:
        seed: Seed of ``rng``; equal seeds replay identically
        rng: The only random source used by the session and its engines
        is_playing: Whether ``tick`` advances the simulation
        speed: Multiplier applied to every tick length
        time: Simulation seconds elapsed since the last reset
        parameters: Current environmental conditions and tunables
        spores, hyphae, roots, nutrients: Current entity collections
    """

    def __init__(
        self,
        parameters: Optional[SimulationParameters] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.seed = seed_for(seed)
        self.rng = random.Random(self.seed)
        self.ids = EntityIdFactory()

        self.growth_engine = GrowthEngine(self.rng, self.ids)
        self.nutrient_engine = NutrientExchangeEngine(self.rng, self.ids)
        self.spore_population = SporePopulation(self.rng, self.ids)
        self.plant_manager = PlantManager(self.rng, self.ids)
        self.exporter = SimulationStatsExporter(self)

        self.parameters = parameters if parameters is not None else SimulationParameters()
        self.speed = DEFAULT_SPEED
        self.is_playing = False
        self.time = 0.0
        self.tick_count = 0

        self.spores: List[Spore] = []
        self.hyphae: List[Hypha] = []
        self.roots: List[Root] = []
        self.nutrients: List[Nutrient] = []
        self._seed_entities()

    def _seed_entities(self) -> None:
        self.spores = self.spore_population.seed(self.parameters.spore_density)
        self.roots = self.plant_manager.create_initial_roots()
        self.hyphae = []
        self.nutrients = []

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    def toggle_play(self) -> bool:
        """Flip between playing and paused; returns the new state."""
        self.is_playing = not self.is_playing
        logger.info("Simulation %s", "playing" if self.is_playing else "paused")
        return self.is_playing

    def set_speed(self, speed: float) -> None:
        self.speed = max(MIN_SPEED, min(MAX_SPEED, float(speed)))

    def tick(self, dt: float) -> bool:
        """Advance by one frame of ``dt`` real seconds if playing.

        Returns:
            True if the simulation advanced
        """
        if not self.is_playing:
            return False
        self.step(dt * self.speed)
        return True

    def step(self, dt: float) -> None:
        """Advance by ``dt`` simulation seconds regardless of play state.

        A non-positive ``dt`` leaves the simulation unchanged.

        Raises:
            SimulationError: If ``dt`` is NaN or infinite
        """
        if not math.isfinite(dt):
            raise SimulationError(f"Tick length must be finite, got {dt!r}")
        if dt <= 0:
            return

        self.time += dt
        self.tick_count += 1
        self.hyphae = self.growth_engine.advance_growth(
            self.spores, self.hyphae, self.roots, self.parameters, dt
        )
        self.nutrients = self.nutrient_engine.advance_nutrients(
            self.hyphae, self.roots, self.nutrients, self.parameters, dt
        )

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def update_parameters(self, changes: Mapping[str, Any]) -> SimulationParameters:
        """Merge ``changes`` into the parameters.

        A change to the spore density resizes the spore population right
        away.

        Raises:
            ConfigurationError: If a key names no parameter
        """
        self.parameters = self.parameters.with_updates(changes)
        if "spore_density" in changes or "sporeDensity" in changes:
            self.spores = self.spore_population.resize(
                self.spores, self.parameters.spore_density, self.time
            )
        return self.parameters

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Return to the initial layout, keeping parameters and speed."""
        self.is_playing = False
        self.time = 0.0
        self.tick_count = 0
        self._seed_entities()
        logger.info("Simulation reset with %d spores", len(self.spores))

    def add_plant(self, position: Optional[Tuple[float, float]] = None) -> Root:
        """Plant a new root at ``(x, z)``, or at a random spot."""
        root = self.plant_manager.create_plant(position)
        self.roots = [*self.roots, root]
        logger.info(
            "Added plant %s at (%.2f, %.2f)", root.id, root.position.x, root.position.z
        )
        return root

    def remove_plant(self, root_id: str) -> Result[Root, str]:
        """Remove a root and cascade into hyphae and nutrient flows.

        An unknown ``root_id`` changes nothing.
        """
        result = self.plant_manager.remove_plant(root_id, self.roots, self.hyphae, self.nutrients)
        if result.is_err():
            logger.debug("Remove plant ignored: %s", result.error)
            return Err(result.error)

        removal = result.unwrap()
        self.roots = removal.roots
        self.hyphae = removal.hyphae
        self.nutrients = removal.nutrients
        logger.info(
            "Removed plant %s (%d hyphae disconnected, %d flows purged)",
            root_id,
            removal.disconnected_hyphae,
            removal.purged_nutrients,
        )
        return Ok(removal.root)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def stats(self) -> Dict[str, int]:
        return {
            "sporeCount": len(self.spores),
            "hyphalCount": len(self.hyphae),
            "rootCount": len(self.roots),
            "nutrientCount": len(self.nutrients),
            "colonizedRoots": sum(1 for root in self.roots if root.colonized),
        }

    def nutrient_flow_stats(self) -> NutrientFlowStats:
        return nutrient_flow_stats(self.nutrients)

    def export_data(self) -> Dict[str, Any]:
        """Timestamped snapshot of parameters and aggregate counts."""
        return self.exporter.build_snapshot()

    def export_json(self) -> bytes:
        return self.exporter.to_json()

    def export_to_file(self, path: Optional[Union[str, Path]] = None) -> Path:
        return self.exporter.export_to_file(path)


__all__ = ["SimulationSession"]
