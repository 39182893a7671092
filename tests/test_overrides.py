"""Tests for the external mutators."""

import pytest

from worldsim.engine.diplomacy import at_war, get_relation
from worldsim.engine.overrides import (
    force_colonization,
    force_peace,
    force_war,
    set_alliance_guarantee,
    set_ally_pressure_threshold,
    set_attribute,
    set_randomness,
)
from worldsim.engine.world_builder import initialize
from worldsim.models import Attribute, RelationState


@pytest.fixture
def world():
    return initialize("tess", "OVERRIDES")


class TestSetAttribute:
    def test_by_path(self, world):
        assert set_attribute(world, "SAL", "pillars.religion", 12) == 12
        assert world.civ("SAL").pillars.religion == 12

    def test_by_member(self, world):
        set_attribute(world, "SAL", Attribute.MILITARY, 99)
        assert world.civ("SAL").sectors.military == 99

    def test_treasury_range(self, world):
        set_attribute(world, "SAL", "treasury", 9999)
        assert world.civ("SAL").treasury == 9999
        with pytest.raises(ValueError):
            set_attribute(world, "SAL", "treasury", 10000)

    def test_top_level_value(self, world):
        set_attribute(world, "LYR", "external_pressure", 90)
        assert world.civ("LYR").external_pressure == 90

    def test_out_of_range(self, world):
        with pytest.raises(ValueError):
            set_attribute(world, "SAL", "pillars.religion", 101)
        with pytest.raises(ValueError):
            set_attribute(world, "SAL", "sectors.military", -1)
        assert world.civ("SAL").pillars.religion == 75

    def test_derived_rejected(self, world):
        with pytest.raises(ValueError, match="derived"):
            set_attribute(world, "SAL", "derived.prosperity", 50)

    def test_unknown_path(self, world):
        with pytest.raises(ValueError):
            set_attribute(world, "SAL", "pillars.astrology", 50)

    def test_non_numeric(self, world):
        with pytest.raises(ValueError):
            set_attribute(world, "SAL", "pillars.religion", "lots")

    def test_unknown_civ(self, world):
        with pytest.raises(KeyError):
            set_attribute(world, "ZZZ", "pillars.religion", 50)


class TestSettings:
    def test_randomness(self, world):
        set_randomness(world, 0.5)
        assert world.settings.randomness == 0.5
        with pytest.raises(ValueError):
            set_randomness(world, 1.5)

    def test_alliance_guarantee(self, world):
        set_alliance_guarantee(world, False)
        assert world.settings.alliance_guarantee is False

    def test_threshold(self, world):
        set_ally_pressure_threshold(world, 30)
        assert world.settings.ally_pressure_threshold == 30
        with pytest.raises(ValueError):
            set_ally_pressure_threshold(world, -5)


class TestForcedDiplomacy:
    def test_war_and_peace(self, world):
        assert force_war(world, "SAL", "LYR")
        assert at_war(world, "SAL", "LYR")
        assert not force_war(world, "LYR", "SAL")

        assert force_peace(world, "SAL", "LYR")
        assert get_relation(world, "SAL", "LYR") is RelationState.TRUCE
        assert not force_peace(world, "SAL", "LYR")

    def test_unknown_civ(self, world):
        with pytest.raises(KeyError):
            force_war(world, "SAL", "ZZZ")
        with pytest.raises(KeyError):
            force_peace(world, "ZZZ", "SAL")

    def test_same_civ(self, world):
        with pytest.raises(ValueError):
            force_war(world, "SAL", "SAL")


class TestForcedColonization:
    def test_creates_expedition(self, world):
        target = min(world.hex_map.colonizable)
        treasury = world.civ("THO").treasury
        colony = force_colonization(world, "THO", target, cost=25)
        assert colony.hex_id == target
        assert colony.cost == 25
        assert target not in world.hex_map.colonizable
        assert world.civ("THO").treasury == treasury

    def test_rejects_owned_hex(self, world):
        with pytest.raises(ValueError):
            force_colonization(world, "THO", world.hex_map.capitals["SAL"])

    def test_unknown_civ(self, world):
        with pytest.raises(KeyError):
            force_colonization(world, "ZZZ", min(world.hex_map.colonizable))


class TestForcedDiplomacyRoutes:
    def test_war_drops_routes_immediately(self, world):
        capitals = world.hex_map.capitals
        pair = {capitals["SAL"], capitals["LYR"]}

        force_war(world, "SAL", "LYR")
        assert not world.routes_dirty
        assert all({r.origin, r.destination} != pair for r in world.routes if r.cargo == "Mixed")

    def test_peace_rebuilds_routes(self, world):
        before = [r.key for r in world.routes]
        force_war(world, "SAL", "LYR")
        force_peace(world, "SAL", "LYR")
        assert not world.routes_dirty
        assert [r.key for r in world.routes] == before
