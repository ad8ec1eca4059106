"""Tests for EntityIdFactory."""

from mycorrhiza.entity_ids import EntityIdFactory, EntityKind


def test_counters_are_per_kind():
    ids = EntityIdFactory()
    assert ids.next_id(EntityKind.SPORE) == "spore-1"
    assert ids.next_id(EntityKind.SPORE) == "spore-2"
    assert ids.next_id(EntityKind.HYPHA) == "hypha-1"
    assert ids.next_id(EntityKind.BRANCH) == "branch-1"
    assert ids.issued(EntityKind.SPORE) == 2
    assert ids.issued(EntityKind.NUTRIENT) == 0


def test_reserve_skips_fixed_ids():
    ids = EntityIdFactory()
    ids.reserve(EntityKind.ROOT, 3)
    assert ids.next_id(EntityKind.ROOT) == "root-4"


def test_reserve_never_moves_backwards():
    ids = EntityIdFactory()
    for _ in range(5):
        ids.next_id(EntityKind.ROOT)
    ids.reserve(EntityKind.ROOT, 2)
    assert ids.next_id(EntityKind.ROOT) == "root-6"
