"""Tests for presets and world initialization."""

from itertools import combinations

import pytest

from worldsim.engine.diplomacy import get_relation
from worldsim.engine.map_generator import assemble_map
from worldsim.engine.presets import PRESETS, WorldConfigError, build_civilizations, get_preset
from worldsim.engine.world_builder import initialize, place_civilizations
from worldsim.models import HexType, RelationState, WorldSettings
from worldsim.utils.constants import CAPITAL_MIN_SPACING, GRID_H, GRID_W
from worldsim.utils.rng import WorldRNG
from worldsim.utils.serialization import export_world


class TestPresets:
    def test_known_presets(self):
        assert set(PRESETS) == {"tess", "we1914", "bac1200"}

    def test_unknown_preset(self):
        with pytest.raises(WorldConfigError, match="Unknown preset"):
            get_preset("atlantis")

    def test_civilizations_in_preset_order(self):
        civs = build_civilizations(get_preset("we1914"))
        assert [c.id for c in civs] == ["FRA", "UK", "BEL", "NED", "ESP", "PRT"]
        assert all(c.external_pressure == 40 for c in civs)
        uk = civs[1]
        assert uk.sectors.aggression == 100
        assert uk.sectors.agriculture == uk.pillars.economy

    def test_presets_build_fresh_objects(self):
        preset = get_preset("tess")
        first, second = build_civilizations(preset), build_civilizations(preset)
        first[0].pillars.religion = 0
        assert second[0].pillars.religion == 75


@pytest.mark.parametrize("preset", sorted(PRESETS))
def test_initialize(preset):
    world = initialize(preset, "719-SUNDER")
    hex_map = world.hex_map

    assert world.tick == 0
    assert world.preset == preset
    assert (hex_map.width, hex_map.height) == (GRID_W, GRID_H)
    assert world.civ_ids == [t.id for t in PRESETS[preset].civs]
    assert world.outer_pressure_name == PRESETS[preset].outer_pressure_name

    for civ in world.civilizations:
        cap = hex_map.capitals[civ.id]
        assert hex_map.hexes[cap].owner == civ.id
        assert hex_map.hexes[cap].capital
        assert hex_map.has_water_neighbor(cap)
        assert civ.prosperity > 0

    for a, b in combinations(hex_map.capitals.values(), 2):
        assert hex_map.distance(a, b) >= CAPITAL_MIN_SPACING

    assert not world.routes_dirty
    assert world.routes


def test_starting_relations():
    world = initialize("we1914", "719-SUNDER")
    allies = {("FRA", "UK"), ("FRA", "BEL"), ("UK", "NED")}
    for a, b in combinations(world.civ_ids, 2):
        expected = RelationState.ALLIANCE if (a, b) in allies else RelationState.PEACE
        assert get_relation(world, a, b) is expected
    assert world.wars == []


def test_same_seed_same_world():
    first = initialize("bac1200", "REPLAY")
    second = initialize("bac1200", "REPLAY")
    assert export_world(first) == export_world(second)


def test_settings_are_kept():
    world = initialize("tess", "T1", settings=WorldSettings(randomness=0.0, colonize_ticks=50))
    assert world.settings.randomness == 0.0
    assert world.settings.colonize_ticks == 50


def test_small_grid():
    world = initialize("tess", "T1", width=30, height=20)
    assert len(world.hex_map.hexes) == 600


@pytest.mark.parametrize("seed", ["", "   ", None])
def test_invalid_seed(seed):
    with pytest.raises(WorldConfigError):
        initialize("tess", seed)


def test_unknown_preset():
    with pytest.raises(WorldConfigError):
        initialize("atlantis", "T1")


def test_no_coast_for_capitals():
    hex_map = assemble_map(3, 3, [HexType.LAND] * 9)
    civs = build_civilizations(get_preset("tess"))
    with pytest.raises(WorldConfigError):
        place_civilizations(hex_map, civs, WorldRNG("T1"))


def test_crowded_map_falls_back_to_scan_order():
    # Two islets two hexes apart: the second capital cannot be spaced out
    cell_types = [HexType.SEA] * 7 + [HexType.LAND, HexType.SEA, HexType.LAND] + [HexType.SEA] * 8
    hex_map = assemble_map(6, 3, cell_types)
    civs = build_civilizations(get_preset("tess"))[:2]
    place_civilizations(hex_map, civs, WorldRNG("T1"))
    assert sorted(hex_map.capitals.values()) == [7, 9]
    assert hex_map.colonizable == set()
