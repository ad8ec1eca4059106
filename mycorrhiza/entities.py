"""Entity records for the simulation: spores, hyphae, roots and nutrient flows.

These are passive data holders. The growth and nutrient exchange engines
mutate them in place during a tick; the session owns the collections.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set

from mycorrhiza.math_utils import Vector3, polyline_length


class NutrientType(Enum):
    """Substances carried between fungus and plant."""

    PHOSPHORUS = "phosphorus"  # Fungus to root
    CARBOHYDRATES = "carbohydrates"  # Root to fungus
    WATER = "water"  # Fungus to root


@dataclass
class Spore:
    """A dormant fungal propagule resting in the soil.

    Attributes:
        id: Unique identifier
        position: Location in the soil; never changes after creation
        viability: Chance-like quality in (0, 1]; spores at or below 0.3 never germinate
        germinated: Set once when the spore sprouts its first hypha
        time_created: Simulation time the spore was added
    """

    id: str
    position: Vector3
    viability: float
    germinated: bool = False
    time_created: float = 0.0


@dataclass
class Hypha:
    """A fungal filament, stored as a polyline from its base to its growing tip.

    ``segments[-1]`` is the live tip. Growth either commits the tip and
    appends a new one, or slides the live tip forward in place.

    Attributes:
        id: Unique identifier
        segments: Polyline points, base first
        growth_direction: Unit vector the tip advances along
        active: False once the hypha reached its length cap; never reset
        maturity: Developmental age in [0, 1], never decreases
        connected_to_root: True while at least one colonized root is linked;
            kept in step with ``connected_root_ids`` by ``connect`` and
            ``disconnect``, but may be set directly on a restored record
        connected_root_ids: Roots this hypha colonized
        branch_points: Points where child hyphae split off
        parent_spore_id: Spore the hypha (or its branch ancestry) came from
    """

    id: str
    segments: List[Vector3]
    growth_direction: Vector3
    active: bool = True
    maturity: float = 0.0
    connected_to_root: bool = False
    connected_root_ids: Set[str] = field(default_factory=set)
    branch_points: List[Vector3] = field(default_factory=list)
    parent_spore_id: Optional[str] = None

    @property
    def tip(self) -> Vector3:
        return self.segments[-1]

    @property
    def base(self) -> Vector3:
        return self.segments[0]

    @property
    def segment_count(self) -> int:
        return len(self.segments)

    def length(self) -> float:
        """Total path length from base to tip."""
        return polyline_length(self.segments)

    def connect(self, root_id: str) -> None:
        self.connected_root_ids.add(root_id)
        self.connected_to_root = True

    def disconnect(self, root_id: str) -> bool:
        """Drop the link to ``root_id``.

        Returns:
            True if this left the hypha with no connected root
        """
        if root_id not in self.connected_root_ids:
            return False
        self.connected_root_ids.discard(root_id)
        if not self.connected_root_ids:
            self.connected_to_root = False
            return True
        return False


@dataclass
class Root:
    """A plant root hanging down from the soil surface.

    Attributes:
        id: Unique identifier
        position: Where the root meets the surface; fixed
        length: Vertical extent
        size: Radius
        health: Scales how strongly the root attracts hyphae, in [0, 1]
        colonized: Set once a hypha connects; never reset
        branch_points: Lateral root points
    """

    id: str
    position: Vector3
    length: float
    size: float
    health: float
    colonized: bool = False
    branch_points: List[Vector3] = field(default_factory=list)

    def point_along(self, fraction: float) -> Vector3:
        """Point offset from ``position`` by ``fraction`` of the length along y."""
        return Vector3(self.position.x, self.position.y + self.length * fraction, self.position.z)

    @property
    def exchange_point(self) -> Vector3:
        """The root midpoint, where phosphorus is delivered."""
        return self.point_along(-0.5)


@dataclass
class Nutrient:
    """A particle travelling along a fixed source to target path.

    ``position`` is derived each tick from source, target and progress;
    only ``progress`` carries state between ticks.
    """

    id: str
    type: NutrientType
    position: Vector3
    source: Vector3
    target: Vector3
    concentration: float
    flow_rate: float
    progress: float = 0.0

    @property
    def delivered(self) -> bool:
        return self.progress >= 1.0


__all__ = ["Hypha", "Nutrient", "NutrientType", "Root", "Spore"]
