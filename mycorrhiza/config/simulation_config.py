"""Tunable simulation parameters."""

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Mapping

from mycorrhiza.exceptions import ConfigurationError

# Parameters that are fractions of their maximum and get clamped into [0, 1]
_UNIT_FIELDS = ("soil_moisture", "nutrients", "root_health")

# JSON / control-panel names for each field
_CAMEL_NAMES = {
    "spore_density": "sporeDensity",
    "soil_moisture": "soilMoisture",
    "nutrients": "nutrients",
    "root_health": "rootHealth",
    "growth_rate": "growthRate",
    "colonization_rate": "colonizationRate",
    "branching_factor": "branchingFactor",
    "max_hyphal_length": "maxHyphalLength",
    "connection_distance": "connectionDistance",
}
_FIELD_NAMES = {camel: name for name, camel in _CAMEL_NAMES.items()}


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


@dataclass(frozen=True)
class SimulationParameters:
    """Environmental conditions and tunables read by the engines.

    Instances are immutable; the session swaps in a new instance on every
    update so a tick in progress always sees one consistent set of values.

    Attributes:
        spore_density: Spore population scale; 1.0 means 12 spores
        soil_moisture: Soil water fraction, gates germination below 0.2
        nutrients: Soil nutrient fraction
        root_health: Overall root health shown by the presentation layer
        growth_rate: Hyphal extension speed multiplier
        colonization_rate: Scales germination and branching chances
        branching_factor: Scales branching chance
        max_hyphal_length: Path length at which a hypha stops growing
        connection_distance: Tip-to-root distance scale for colonization
    """

    spore_density: float = 1.2
    soil_moisture: float = 0.6
    nutrients: float = 0.7
    root_health: float = 0.8
    growth_rate: float = 1.0
    colonization_rate: float = 0.5
    branching_factor: float = 1.5
    max_hyphal_length: float = 5.0
    connection_distance: float = 0.5

    def __post_init__(self) -> None:
        for name in _UNIT_FIELDS:
            object.__setattr__(self, name, _clamp_unit(getattr(self, name)))

    def with_updates(self, changes: Mapping[str, Any]) -> "SimulationParameters":
        """Return a copy with ``changes`` merged in.

        Keys may use either the Python field names or the camelCase names of
        the exported snapshot.

        Raises:
            ConfigurationError: If a key names no parameter
        """
        return replace(self, **_normalize_keys(changes))

    def to_dict(self) -> Dict[str, float]:
        """Parameters keyed by their camelCase names."""
        return {_CAMEL_NAMES[name]: value for name, value in asdict(self).items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SimulationParameters":
        return cls(**_normalize_keys(data))


def _normalize_keys(changes: Mapping[str, Any]) -> Dict[str, float]:
    valid = {f.name for f in fields(SimulationParameters)}
    normalized: Dict[str, float] = {}
    for key, value in changes.items():
        name = _FIELD_NAMES.get(key, key)
        if name not in valid:
            raise ConfigurationError(f"Unknown simulation parameter: {key!r}")
        normalized[name] = float(value)
    return normalized


__all__ = ["SimulationParameters"]
