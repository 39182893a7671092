"""Tests for data models."""

import pytest

from worldsim.models import (
    Attribute,
    BlockCause,
    Civilization,
    Colonization,
    Hex,
    HexMap,
    HexType,
    LogEntry,
    Modifier,
    Pillars,
    Relation,
    RelationState,
    RouteType,
    Sectors,
    TradeRoute,
    War,
    WorldSettings,
    WorldState,
    relation_key,
)
from worldsim.utils.constants import EVENT_LOG_LIMIT


class TestHex:
    """Test Hex dataclass."""

    def test_create_hex(self):
        h = Hex(id=5, q=5, r=0, type=HexType.LAND)
        assert h.owner is None
        assert h.is_land
        assert not h.capital

    def test_type_coerced_from_string(self):
        h = Hex(id=0, q=0, r=0, type="shoals")
        assert h.type is HexType.SHOALS
        assert h.type.is_water

    def test_invalid_resource(self):
        with pytest.raises(ValueError, match="Invalid resource"):
            Hex(id=0, q=0, r=0, type=HexType.LAND, resource="Gold")

    def test_capital_requires_owner(self):
        with pytest.raises(ValueError, match="Invalid capital"):
            Hex(id=0, q=0, r=0, type=HexType.LAND, capital=True)

    def test_negative_coordinates(self):
        with pytest.raises(ValueError):
            Hex(id=0, q=-1, r=0, type=HexType.SEA)


class TestHexMap:
    """Test HexMap container."""

    def test_invalid_dimensions(self):
        with pytest.raises(ValueError, match="Invalid width"):
            HexMap(width=0, height=3)
        with pytest.raises(ValueError, match="Invalid height"):
            HexMap(width=3, height=-1)

    def test_hex_lookup_out_of_range(self):
        hex_map = HexMap(width=1, height=1, hexes=[Hex(id=0, q=0, r=0, type=HexType.LAND)])
        assert hex_map.hex(0).id == 0
        with pytest.raises(KeyError):
            hex_map.hex(1)

    def test_rebuild_indexes_from_hex_fields(self):
        hexes = [
            Hex(id=0, q=0, r=0, type=HexType.LAND, owner="A", capital=True, resource="Grain"),
            Hex(id=1, q=1, r=0, type=HexType.SEA, strait=True),
            Hex(id=2, q=2, r=0, type=HexType.SHOALS),
        ]
        hex_map = HexMap(width=3, height=1, hexes=hexes)
        hex_map.rebuild_indexes()
        hex_map.reset_colonizable()

        assert hex_map.neighbors[1] == [2, 0]
        assert hex_map.straits == {1}
        assert hex_map.resource_hexes == [0]
        assert hex_map.outer_shoals == {2}
        assert hex_map.capitals == {"A": 0}
        assert hex_map.colonizable == set()


class TestCivilization:
    """Test Civilization dataclass."""

    def test_agriculture_and_industry_default_to_economy(self):
        civ = Civilization(id="A", name="Alpha", pillars=Pillars(economy=72))
        assert civ.sectors.agriculture == 72
        assert civ.sectors.industry == 72

    def test_explicit_sector_values_kept(self):
        civ = Civilization(id="A", name="Alpha", sectors=Sectors(agriculture=30, industry=40))
        assert civ.sectors.agriculture == 30
        assert civ.sectors.industry == 40

    def test_pillar_out_of_range(self):
        with pytest.raises(ValueError, match="pillars.religion"):
            Pillars(religion=101)

    def test_sector_out_of_range(self):
        with pytest.raises(ValueError, match="sectors.military"):
            Sectors(military=-5)

    def test_empty_id(self):
        with pytest.raises(ValueError):
            Civilization(id="", name="Nobody")

    def test_treasury_bounds(self):
        with pytest.raises(ValueError, match="Invalid treasury"):
            Civilization(id="A", name="Alpha", treasury=-1)


class TestAttribute:
    """Test the closed attribute set."""

    def test_from_path(self):
        assert Attribute.from_path("pillars.church_state") is Attribute.CHURCH_STATE
        assert Attribute.from_path("treasury") is Attribute.TREASURY

    def test_unknown_path(self):
        with pytest.raises(ValueError, match="Unknown attribute path"):
            Attribute.from_path("pillars.magic")

    def test_groups(self):
        assert Attribute.RELIGION.group == "pillars"
        assert Attribute.MILITARY.group == "sectors"
        assert Attribute.EXTERNAL_PRESSURE.group == "civilization"
        assert Attribute.PROSPERITY.is_derived
        assert not Attribute.TREASURY.is_derived

    def test_read_write(self):
        civ = Civilization(id="A", name="Alpha")
        Attribute.MEDIA.write(civ, 33)
        Attribute.HEALTH.write(civ, 44)
        Attribute.TREASURY.write(civ, 55)
        assert civ.pillars.media == 33
        assert Attribute.HEALTH.read(civ) == 44
        assert civ.treasury == 55


class TestRelation:
    """Test relation records."""

    def test_relation_key_is_order_independent(self):
        assert relation_key("B", "A") == relation_key("A", "B") == ("A", "B")

    def test_state_coerced(self):
        rel = Relation(state="war", since_tick=3)
        assert rel.state is RelationState.WAR

    def test_negative_since_tick(self):
        with pytest.raises(ValueError):
            Relation(state=RelationState.PEACE, since_tick=-1)

    def test_war_matches_either_order(self):
        war = War(a="A", b="B", since_tick=0)
        assert war.matches("B", "A")
        assert war.involves("A")
        assert not war.involves("C")


class TestTradeRoute:
    """Test TradeRoute validation."""

    def test_path_must_join_endpoints(self):
        with pytest.raises(ValueError):
            TradeRoute(type=RouteType.SEA, origin=1, destination=5, path=[1, 2, 3], origin_owner="A",
                       destination_owner="B")

    def test_path_too_short(self):
        with pytest.raises(ValueError):
            TradeRoute(type=RouteType.LAND, origin=1, destination=1, path=[1], origin_owner="A",
                       destination_owner=None)

    def test_block_and_clear(self):
        route = TradeRoute(type=RouteType.LAND, origin=1, destination=3, path=[1, 2, 3], origin_owner="A",
                           destination_owner=None)
        route.set_block(2, BlockCause.RAID)
        assert route.blocked and route.blockade_hex == 2
        route.clear_block()
        assert not route.blocked and route.blockade_hex is None and route.block_cause is None
        assert route.key == ("land", 1, 3)


def test_colonization_validation():
    with pytest.raises(ValueError):
        Colonization(civ_id="A", hex_id=3, progress=-1)
    with pytest.raises(ValueError):
        Colonization(civ_id="A", hex_id=3, cost=-10)


def test_modifier_from_path_and_activity():
    mod = Modifier(civ_id="A", attribute="derived.stability", delta=-5, until_tick=10)
    assert mod.attribute is Attribute.STABILITY
    assert mod.active_at(9)
    assert not mod.active_at(10)


def test_world_settings_validation():
    with pytest.raises(ValueError, match="randomness"):
        WorldSettings(randomness=1.5)
    with pytest.raises(ValueError, match="colonize_ticks"):
        WorldSettings(colonize_ticks=0)
    with pytest.raises(ValueError, match="blockade_margin"):
        WorldSettings(blockade_margin=0.9)


class TestWorldState:
    """Test WorldState helpers."""

    def test_civ_lookup(self):
        world = WorldState(seed_text="T", civilizations=[Civilization(id="A", name="Alpha")])
        assert world.civ("A").name == "Alpha"
        assert world.has_civ("A")
        assert world.civ_ids == ["A"]
        with pytest.raises(KeyError):
            world.civ("Z")

    def test_rng_seeded_from_text(self):
        world = WorldState(seed_text="T")
        assert world.rng.seed_text == "T"

    def test_negative_tick(self):
        with pytest.raises(ValueError):
            WorldState(seed_text="T", tick=-1)

    def test_record_stamps_tick_and_caps_log(self):
        world = WorldState(seed_text="T", tick=7)
        entry = world.record("Something happened.", "economy", 12)
        assert entry == LogEntry(tick=7, title="Something happened.", category="economy", hex_id=12)

        for i in range(EVENT_LOG_LIMIT + 25):
            world.record(f"Entry {i}")
        assert len(world.event_log) == EVENT_LOG_LIMIT
        assert world.event_log[-1].title == f"Entry {EVENT_LOG_LIMIT + 24}"
