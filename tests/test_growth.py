"""Tests for the growth engine: germination, extension, branching, connection."""

import random

import pytest

from mycorrhiza.config.simulation_config import SimulationParameters
from mycorrhiza.entity_ids import EntityIdFactory, EntityKind
from mycorrhiza.growth import (
    GrowthEngine,
    branch_probability,
    connection_range,
    germination_probability,
    growth_speed,
    is_branch_eligible,
    max_hyphal_length,
)
from mycorrhiza.math_utils import Vector3
from mycorrhiza.util.rng import MissingRNGError


def test_engine_requires_rng():
    with pytest.raises(MissingRNGError):
        GrowthEngine(None)


class TestGerminationProbability:
    def test_default_parameters(self, make_spore):
        chance = germination_probability(make_spore(), SimulationParameters())
        # (0.008 + 0.5 * 0.01) * (0.4 / 0.8) * (0.5 / 0.8)
        assert chance == pytest.approx(0.0040625)

    @pytest.mark.parametrize("moisture", [0.0, 0.15, 0.2])
    def test_dry_soil_blocks_germination(self, make_spore, moisture):
        parameters = SimulationParameters(soil_moisture=moisture)
        assert germination_probability(make_spore(), parameters) == 0.0

    def test_low_viability_blocks_germination(self, make_spore):
        assert germination_probability(make_spore(viability=0.3), SimulationParameters()) == 0.0

    def test_poor_nutrients_zero_chance(self, make_spore):
        parameters = SimulationParameters(nutrients=0.1)
        assert germination_probability(make_spore(), parameters) == 0.0

    def test_germinated_spore_has_no_chance(self, make_spore):
        spore = make_spore()
        spore.germinated = True
        assert germination_probability(spore, SimulationParameters()) == 0.0


class TestGermination:
    def test_germination_spawns_hypha_toward_root(self, scripted_rng, make_spore, make_root):
        spore = make_spore(position=(0.0, -1.0, 0.0))
        root = make_root(position=(3.0, 0.0, 0.0))
        engine = GrowthEngine(scripted_rng([0.0, 0.5, 0.5, 0.5]))

        hyphae = engine.advance_growth([spore], [], [root], SimulationParameters(), 0.1)

        assert spore.germinated is True
        assert len(hyphae) == 1
        hypha = hyphae[0]
        assert hypha.id.startswith("hypha-")
        assert hypha.parent_spore_id == spore.id
        assert hypha.base == spore.position
        assert hypha.base is not spore.position
        toward_root = (root.position - spore.position).normalize()
        assert hypha.growth_direction.dot(toward_root) > 0.95

    def test_no_roots_grows_downward(self, scripted_rng, make_spore):
        spore = make_spore()
        engine = GrowthEngine(scripted_rng([0.0, 0.9, 0.9, 0.9, 0.5, 0.5, 0.5]))

        hyphae = engine.advance_growth([spore], [], [], SimulationParameters(), 0.1)

        assert hyphae[0].growth_direction.y < 0
        assert hyphae[0].growth_direction.length() == pytest.approx(1.0)

    def test_spore_position_never_moves(self, seeded_rng, make_spore, make_root):
        spores = [make_spore(spore_id=f"spore-{i}", position=(i * 0.5, -1.0, 0.0)) for i in range(8)]
        before = [spore.position.copy() for spore in spores]
        engine = GrowthEngine(seeded_rng)
        hyphae = []
        parameters = SimulationParameters(soil_moisture=1.0, nutrients=1.0, colonization_rate=5.0)
        for _ in range(500):
            hyphae = engine.advance_growth(spores, hyphae, [make_root()], parameters, 0.1)

        assert [spore.position for spore in spores] == before
        assert any(spore.germinated for spore in spores)

    def test_dry_soil_never_germinates(self, seeded_rng, make_spore):
        spore = make_spore(viability=1.0)
        engine = GrowthEngine(seeded_rng)
        parameters = SimulationParameters(soil_moisture=0.15)
        hyphae = []

        for _ in range(10_000):
            hyphae = engine.advance_growth([spore], hyphae, [], parameters, 0.1)

        assert spore.germinated is False
        assert hyphae == []


class TestExtension:
    def test_growth_speed_formula(self, make_hypha):
        hypha = make_hypha(maturity=0.5)
        speed = growth_speed(hypha, SimulationParameters(), 0.1)
        assert speed == pytest.approx(1.0 * 0.1 * 0.8 * 0.6 * 0.7 * 1.15)

    def test_growth_speed_floors_poor_conditions(self, make_hypha):
        parameters = SimulationParameters(soil_moisture=0.0, nutrients=0.0)
        speed = growth_speed(make_hypha(), parameters, 1.0)
        assert speed == pytest.approx(0.8 * 0.4 * 0.4)

    def test_tip_advances_by_speed(self, scripted_rng, make_hypha):
        hypha = make_hypha(points=[(0.0, -1.0, 0.0)], direction=(1.0, 0.0, 0.0))
        engine = GrowthEngine(scripted_rng([0.5]))
        parameters = SimulationParameters()

        engine.advance_growth([], [hypha], [], parameters, 0.1)

        assert hypha.segment_count == 2
        assert hypha.tip.x == pytest.approx(1.0 * 0.1 * 0.8 * 0.6 * 0.7)
        assert hypha.tip.y == pytest.approx(-1.0)
        assert hypha.maturity == pytest.approx(0.003)

    def test_short_steps_slide_the_live_tip(self, scripted_rng, make_hypha):
        hypha = make_hypha(points=[(0.0, 0.0, 0.0), (0.1, 0.0, 0.0), (0.12, 0.0, 0.0)])
        engine = GrowthEngine(scripted_rng([0.5]))

        engine.advance_growth([], [hypha], [], SimulationParameters(), 0.1)

        assert hypha.segment_count == 3
        assert hypha.tip.x > 0.12
        assert hypha.segments[1] == Vector3(0.1, 0.0, 0.0)

    def test_long_steps_commit_a_segment(self, scripted_rng, make_hypha):
        hypha = make_hypha(points=[(0.0, 0.0, 0.0), (0.1, 0.0, 0.0), (0.12, 0.0, 0.0)])
        engine = GrowthEngine(scripted_rng([0.5]))

        engine.advance_growth([], [hypha], [], SimulationParameters(), 1.0)

        assert hypha.segment_count == 4
        assert hypha.segments[2] == Vector3(0.12, 0.0, 0.0)

    def test_segment_density_independent_of_tick_length(self, scripted_rng, make_hypha):
        coarse = make_hypha(points=[(0.0, 0.0, 0.0)])
        fine = make_hypha(points=[(0.0, 0.0, 0.0)])
        parameters = SimulationParameters(max_hyphal_length=100.0)
        coarse_engine = GrowthEngine(scripted_rng([0.5]))
        fine_engine = GrowthEngine(scripted_rng([0.5]))

        for _ in range(500):
            coarse_engine.advance_growth([], [coarse], [], parameters, 0.02)
        for _ in range(5000):
            fine_engine.advance_growth([], [fine], [], parameters, 0.002)

        assert coarse.tip.x == pytest.approx(fine.tip.x, rel=0.05)
        assert fine.segment_count > 30
        assert coarse.segment_count == pytest.approx(fine.segment_count, rel=0.15)

    def test_maturity_caps_at_one(self, scripted_rng, make_hypha):
        hypha = make_hypha(maturity=0.999)
        GrowthEngine(scripted_rng([0.5])).advance_growth([], [hypha], [], SimulationParameters(), 1.0)
        assert hypha.maturity == 1.0

    def test_hypha_deactivates_past_length_cap(self, scripted_rng, make_hypha):
        parameters = SimulationParameters(max_hyphal_length=1.0, nutrients=0.5)
        assert max_hyphal_length(parameters) == pytest.approx(1.15)
        hypha = make_hypha(points=[(0.0, 0.0, 0.0), (0.6, 0.0, 0.0), (1.2, 0.0, 0.0)])
        engine = GrowthEngine(scripted_rng([0.5]))

        engine.advance_growth([], [hypha], [], parameters, 0.1)
        assert hypha.active is False
        frozen = [point.copy() for point in hypha.segments]
        maturity = hypha.maturity

        engine.advance_growth([], [hypha], [], parameters, 0.1)
        assert hypha.active is False
        assert hypha.segments == frozen
        assert hypha.maturity == maturity

    def test_steers_toward_nearby_root(self, scripted_rng, make_hypha, make_root):
        hypha = make_hypha(points=[(0.0, -1.0, 0.0)], direction=(1.0, 0.0, 0.0))
        root = make_root(position=(0.0, -1.0, 2.0))
        engine = GrowthEngine(scripted_rng([0.5]))

        engine.advance_growth([], [hypha], [root], SimulationParameters(), 0.1)

        assert hypha.growth_direction.z > 0
        assert hypha.growth_direction.length() == pytest.approx(1.0)

    def test_ignores_distant_roots(self, scripted_rng, make_hypha, make_root):
        hypha = make_hypha(points=[(0.0, -1.0, 0.0)], direction=(1.0, 0.0, 0.0))
        root = make_root(position=(0.0, -1.0, 6.0))
        engine = GrowthEngine(scripted_rng([0.5]))

        engine.advance_growth([], [hypha], [root], SimulationParameters(), 0.1)

        assert hypha.growth_direction == Vector3(1.0, 0.0, 0.0)

    def test_connected_hypha_is_not_attracted(self, scripted_rng, make_hypha, make_root):
        hypha = make_hypha(points=[(0.0, -1.0, 0.0)], direction=(1.0, 0.0, 0.0), connected_to=["root-a"])
        root = make_root(position=(0.0, -1.0, 2.0))
        engine = GrowthEngine(scripted_rng([0.5]))

        engine.advance_growth([], [hypha], [root], SimulationParameters(), 0.1)

        assert hypha.growth_direction == Vector3(1.0, 0.0, 0.0)

    def test_dry_soil_sags_tip(self, scripted_rng, make_hypha):
        hypha = make_hypha(points=[(0.0, -1.0, 0.0)], direction=(1.0, 0.0, 0.0))
        parameters = SimulationParameters(soil_moisture=0.1)

        GrowthEngine(scripted_rng([0.5])).advance_growth([], [hypha], [], parameters, 0.1)

        assert hypha.tip.y == pytest.approx(-1.0 - 0.2 * 0.02)


class TestRootConnection:
    def test_tip_at_root_connects_in_one_pass(self, seeded_rng, make_hypha, make_root):
        root = make_root(position=(1.0, 0.0, 1.0))
        hypha = make_hypha(points=[(1.0, 0.0, 1.0)])
        parameters = SimulationParameters(connection_distance=0.5)

        GrowthEngine(seeded_rng).advance_growth([], [hypha], [root], parameters, 0.1)

        assert hypha.connected_to_root is True
        assert root.colonized is True
        assert hypha.connected_root_ids == {root.id}

    def test_out_of_range_tip_stays_unconnected(self, seeded_rng, make_hypha, make_root):
        root = make_root(position=(1.0, -1.0, 0.0))
        hypha = make_hypha(points=[(0.0, -1.0, 0.0)], direction=(0.0, 0.0, 1.0))
        parameters = SimulationParameters(connection_distance=0.5)
        assert connection_range(parameters) == pytest.approx(0.75)

        GrowthEngine(seeded_rng).advance_growth([], [hypha], [root], parameters, 0.1)

        assert hypha.connected_to_root is False
        assert root.colonized is False

    def test_every_root_in_reach_is_colonized(self, seeded_rng, make_hypha, make_root):
        near = make_root(root_id="root-a", position=(0.3, 0.0, 0.0))
        also_near = make_root(root_id="root-b", position=(-0.3, 0.0, 0.0))
        far = make_root(root_id="root-c", position=(5.0, 0.0, 0.0))
        hypha = make_hypha(points=[(0.0, 0.0, 0.0)])

        GrowthEngine(seeded_rng).advance_growth([], [hypha], [near, also_near, far], SimulationParameters(), 0.1)

        assert hypha.connected_root_ids == {"root-a", "root-b"}
        assert near.colonized and also_near.colonized
        assert far.colonized is False

    def test_inactive_hypha_connects_to_new_root(self, seeded_rng, make_hypha, make_root):
        hypha = make_hypha(points=[(0.0, -1.0, 0.0)], active=False)
        root = make_root(position=(0.0, -1.0, 0.2))

        GrowthEngine(seeded_rng).advance_growth([], [hypha], [root], SimulationParameters(), 0.1)

        assert hypha.connected_to_root is True


class TestBranching:
    def _branch_ready(self, make_hypha, maturity=0.8):
        points = [(i * 0.01, -1.0, 0.0) for i in range(15)]
        return make_hypha(points=points, direction=(1.0, 0.0, 0.0), maturity=maturity)

    def test_eligibility(self, make_hypha):
        assert is_branch_eligible(self._branch_ready(make_hypha))
        assert not is_branch_eligible(self._branch_ready(make_hypha, maturity=0.6))
        assert not is_branch_eligible(make_hypha(points=[(0, 0, 0)] * 12, maturity=0.9))
        assert not is_branch_eligible(make_hypha(points=[(0, 0, 0)] * 16, maturity=0.9))
        assert is_branch_eligible(make_hypha(points=[(0, 0, 0)] * 30, maturity=0.9))

    def test_branch_probability_formula(self, make_hypha):
        hypha = make_hypha(maturity=0.5)
        chance = branch_probability(hypha, SimulationParameters())
        assert chance == pytest.approx(1.5 * 0.5 * 0.001 * (1 + 0.15 + 0.14))

    def test_successful_branch(self, scripted_rng, make_hypha):
        parent = self._branch_ready(make_hypha)
        parent.parent_spore_id = "spore-9"
        engine = GrowthEngine(scripted_rng([0.5, 0.5, 0.5, 0.0, 0.5]))

        hyphae = engine.advance_growth([], [parent], [], SimulationParameters(), 0.1)

        assert len(hyphae) == 2
        child = hyphae[1]
        assert child.id.startswith("branch-")
        assert parent.branch_points == [parent.tip]
        assert child.segments == [parent.tip]
        assert child.segments[0] is not parent.branch_points[0]
        assert child.maturity == pytest.approx(parent.maturity * 0.7)
        assert child.parent_spore_id == "spore-9"
        assert child.growth_direction == parent.growth_direction
        assert child.active and not child.connected_to_root

    def test_branch_turns_within_spread(self, scripted_rng, make_hypha):
        parent = self._branch_ready(make_hypha)
        engine = GrowthEngine(scripted_rng([0.5, 0.5, 0.5, 0.0, 1.0]))

        child = engine.advance_growth([], [parent], [], SimulationParameters(), 0.1)[1]

        cos_angle = child.growth_direction.dot(parent.growth_direction)
        assert cos_angle == pytest.approx(0.5877852522924731)  # cos(0.3 * pi)
        assert child.growth_direction.y == pytest.approx(parent.growth_direction.y)

    def test_failed_draw_does_not_branch(self, scripted_rng, make_hypha):
        parent = self._branch_ready(make_hypha)
        engine = GrowthEngine(scripted_rng([0.5]))

        hyphae = engine.advance_growth([], [parent], [], SimulationParameters(), 0.1)

        assert len(hyphae) == 1
        assert parent.branch_points == []


def test_zero_dt_is_a_no_op(seeded_rng, make_spore, make_hypha, make_root):
    spore = make_spore()
    hypha = make_hypha(points=[(0.0, -1.0, 0.0)])
    root = make_root(position=(0.0, -1.0, 0.0))
    parameters = SimulationParameters(soil_moisture=1.0, nutrients=1.0, colonization_rate=1000.0)

    hyphae = GrowthEngine(seeded_rng).advance_growth([spore], [hypha], [root], parameters, 0.0)

    assert hyphae == [hypha]
    assert spore.germinated is False
    assert hypha.segment_count == 1
    assert hypha.maturity == 0.0
    assert hypha.connected_to_root is False


def test_ids_come_from_shared_factory(scripted_rng, make_spore):
    ids = EntityIdFactory()
    ids.next_id(EntityKind.HYPHA)
    engine = GrowthEngine(scripted_rng([0.0, 0.5]), ids)

    hyphae = engine.advance_growth([make_spore()], [], [], SimulationParameters(), 0.1)

    assert hyphae[0].id == "hypha-2"


def test_same_seed_same_growth(make_spore, make_root):
    def run(seed):
        engine = GrowthEngine(random.Random(seed))
        spores = [make_spore(spore_id=f"spore-{i}", position=(i - 3.0, -1.0, 0.5 * i)) for i in range(6)]
        roots = [make_root(position=(0.0, 0.0, 0.0))]
        parameters = SimulationParameters(soil_moisture=1.0, nutrients=1.0, colonization_rate=2.0)
        hyphae = []
        for _ in range(300):
            hyphae = engine.advance_growth(spores, hyphae, roots, parameters, 0.1)
        return [(h.id, h.segment_count, h.tip.as_tuple()) for h in hyphae]

    assert run(7) == run(7)
