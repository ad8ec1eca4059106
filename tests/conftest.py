"""Pytest configuration and fixtures for mycorrhiza tests."""

import random

import pytest

from mycorrhiza.config.simulation_config import SimulationParameters
from mycorrhiza.entities import Hypha, Root, Spore
from mycorrhiza.entity_ids import EntityIdFactory
from mycorrhiza.math_utils import Vector3


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def ids():
    return EntityIdFactory()


@pytest.fixture
def parameters():
    """Default parameters."""
    return SimulationParameters()


@pytest.fixture
def session():
    """A seeded session in its initial, paused state."""
    from mycorrhiza.session import SimulationSession

    return SimulationSession(seed=42)


@pytest.fixture
def make_root():
    def _make_root(root_id="root-a", position=(0.0, 0.0, 0.0), length=2.0, health=0.9, colonized=False):
        return Root(
            id=root_id,
            position=Vector3(*position),
            length=length,
            size=0.08,
            health=health,
            colonized=colonized,
        )

    return _make_root


@pytest.fixture
def make_hypha():
    def _make_hypha(
        hypha_id="hypha-a",
        points=((0.0, -1.0, 0.0),),
        direction=(1.0, 0.0, 0.0),
        maturity=0.0,
        connected_to=(),
        active=True,
    ):
        hypha = Hypha(
            id=hypha_id,
            segments=[Vector3(*point) for point in points],
            growth_direction=Vector3(*direction).normalize(),
            maturity=maturity,
            active=active,
        )
        for root_id in connected_to:
            hypha.connect(root_id)
        return hypha

    return _make_hypha


@pytest.fixture
def make_spore():
    def _make_spore(spore_id="spore-a", position=(0.0, -1.0, 0.0), viability=1.0):
        return Spore(id=spore_id, position=Vector3(*position), viability=viability)

    return _make_spore


class ScriptedRandom:
    """RNG stand-in that replays a fixed list of draws, cycling when exhausted."""

    def __init__(self, values):
        self._values = list(values)
        self._index = 0
        self.draws = 0

    def random(self):
        value = self._values[self._index % len(self._values)]
        self._index += 1
        self.draws += 1
        return value

    def uniform(self, a, b):
        return a + (b - a) * self.random()


@pytest.fixture
def scripted_rng():
    """Factory for RNGs that return the given draws in order."""
    return ScriptedRandom
