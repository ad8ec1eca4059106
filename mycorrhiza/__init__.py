"""Arbuscular mycorrhizal fungi colonization simulation.

This package contains the pure simulation logic, with no rendering
dependencies. Key modules include:

- session: Owner of the entity collections and the control operations
- growth: Spore germination, hyphal extension, branching, root colonization
- nutrient_exchange: Nutrient particles between colonized roots and hyphae
- entities: Spore, Hypha, Root and Nutrient records
- config: Constants and the SimulationParameters dataclass

Design note: this module exposes a small, explicit public API via ``__all__``.
"""

from mycorrhiza.config.simulation_config import SimulationParameters
from mycorrhiza.entities import Hypha, Nutrient, NutrientType, Root, Spore
from mycorrhiza.session import SimulationSession

# Public API of the package. Keep this list intentionally small.
__all__ = [
    "Hypha",
    "Nutrient",
    "NutrientType",
    "Root",
    "SimulationParameters",
    "SimulationSession",
    "Spore",
]
