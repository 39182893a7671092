"""Tests for the relation state machine and alliance cascades."""

import pytest

from worldsim.engine.diplomacy import (
    allied,
    at_war,
    check_alliance_cascade,
    declare_war,
    expire_truces,
    get_relation,
    make_peace,
    set_relation,
)
from worldsim.models import Civilization, RelationState, WorldState


def create_world(*ids: str) -> WorldState:
    ids = ids or ("A", "B", "C")
    return WorldState(seed_text="T", civilizations=[Civilization(id=i, name=f"Civ {i}") for i in ids])


def test_undefined_pairs_are_at_peace():
    world = create_world()
    assert get_relation(world, "A", "B") is RelationState.PEACE


def test_relations_are_symmetric():
    world = create_world()
    set_relation(world, "B", "A", RelationState.ALLIANCE)
    assert get_relation(world, "A", "B") is RelationState.ALLIANCE
    assert allied(world, "A", "B") and allied(world, "B", "A")
    assert len(world.relations) == 1


def test_set_relation_rejects_self_pair():
    world = create_world()
    with pytest.raises(ValueError):
        set_relation(world, "A", "A", RelationState.WAR)


class TestWarAndPeace:
    """Declaring war and signing truces."""

    def test_declare_war(self):
        world = create_world()
        world.routes_dirty = False
        assert declare_war(world, "A", "B")
        assert at_war(world, "B", "A")
        assert len(world.wars) == 1
        assert world.routes_dirty
        assert world.event_log[-1].category == "war"

    def test_declare_war_twice(self):
        world = create_world()
        declare_war(world, "A", "B")
        assert not declare_war(world, "B", "A")
        assert len(world.wars) == 1

    def test_no_war_with_self(self):
        world = create_world()
        assert not declare_war(world, "A", "A")
        assert world.wars == []

    def test_peace_leaves_truce(self):
        world = create_world()
        declare_war(world, "A", "B")
        world.tick = 12
        assert make_peace(world, "B", "A")
        assert get_relation(world, "A", "B") is RelationState.TRUCE
        assert world.relations[("A", "B")].since_tick == 12
        assert world.wars == []

    def test_peace_without_war(self):
        world = create_world()
        assert not make_peace(world, "A", "B")
        assert get_relation(world, "A", "B") is RelationState.PEACE

    def test_war_replaces_alliance(self):
        world = create_world()
        set_relation(world, "A", "B", RelationState.ALLIANCE)
        assert declare_war(world, "A", "B")
        assert not allied(world, "A", "B")


class TestAllianceCascade:
    """Allies join wars once their partner is under pressure."""

    def create_alliance(self, pressure: float) -> WorldState:
        world = create_world()
        set_relation(world, "A", "C", RelationState.ALLIANCE)
        declare_war(world, "A", "B")
        world.civ("A").external_pressure = pressure
        return world

    def test_ally_joins_under_pressure(self):
        world = self.create_alliance(70)
        assert check_alliance_cascade(world) == [("C", "B")]
        assert at_war(world, "C", "B")
        assert len(world.wars) == 2

    def test_no_join_below_threshold(self):
        world = self.create_alliance(60)
        assert check_alliance_cascade(world) == []
        assert not at_war(world, "C", "B")

    def test_explicit_threshold(self):
        world = self.create_alliance(60)
        assert check_alliance_cascade(world, threshold=50) == [("C", "B")]

    def test_already_fighting_ally_is_skipped(self):
        world = self.create_alliance(70)
        declare_war(world, "C", "B")
        assert check_alliance_cascade(world) == []


class TestTruceExpiry:
    def create_truce(self) -> WorldState:
        world = create_world()
        declare_war(world, "A", "B")
        make_peace(world, "A", "B")
        return world

    def test_truce_holds_before_expiry(self):
        world = self.create_truce()
        world.tick = 89
        assert expire_truces(world) == []
        assert get_relation(world, "A", "B") is RelationState.TRUCE

    def test_truce_expires(self):
        world = self.create_truce()
        world.tick = 90
        assert expire_truces(world) == [("A", "B")]
        assert get_relation(world, "A", "B") is RelationState.PEACE
        assert world.relations[("A", "B")].since_tick == 90
