"""Tests for the random event engine."""

import pytest

from worldsim.engine import events as events_module
from worldsim.engine.diplomacy import at_war, declare_war
from worldsim.engine.events import (
    EVENT_CATALOG,
    EVENTS_BY_ID,
    AttributeDelta,
    EventDefinition,
    apply_event,
    apply_modifiers,
    check_raider_pressure,
    delta,
    event_chance,
    run_events,
)
from worldsim.engine.indices import value
from worldsim.engine.map_generator import assemble_map
from worldsim.engine.world_builder import initialize
from worldsim.models import Attribute, Civilization, HexType, Modifier, RelationState, WorldState
from worldsim.utils.rng import WorldRNG


def create_world() -> WorldState:
    """Two civilizations on a 4x1 land strip."""
    hex_map = assemble_map(4, 1, [HexType.LAND] * 4)
    for hid, owner in enumerate(["A", "A", "B", "B"]):
        hex_map.hexes[hid].owner = owner
    civs = [Civilization(id="A", name="Alpha"), Civilization(id="B", name="Beta")]
    return WorldState(seed_text="EVENTS", hex_map=hex_map, civilizations=civs)


class TestCatalog:
    def test_catalog_size_and_ids(self):
        ids = [ev.id for ev in EVENT_CATALOG]
        assert len(ids) == 16
        assert len(set(ids)) == 16
        assert set(EVENTS_BY_ID) == set(ids)

    def test_effect_targets_are_resolved(self):
        for ev in EVENT_CATALOG:
            for effect in ev.effects:
                if isinstance(effect, AttributeDelta):
                    assert isinstance(effect.attribute, Attribute)

    def test_unknown_path_rejected(self):
        with pytest.raises(ValueError):
            delta("pillars.astrology", 5, 10)

    def test_invalid_definitions_rejected(self):
        with pytest.raises(ValueError):
            EventDefinition("x", "X", "weather", "", lambda c, w: True, 10, ())
        with pytest.raises(ValueError):
            EventDefinition("x", "X", "economy", "", lambda c, w: True, 0, ())

    def test_chance_scales_with_intensity(self):
        world = create_world()
        civ = world.civ("A")
        mine = EVENTS_BY_ID["mine_collapse"]
        assert event_chance(world, civ, mine) == pytest.approx(0.001 * 1.2)
        civ.event_intensity = 100
        assert event_chance(world, civ, mine) == pytest.approx(0.002 * 1.2)
        civ.event_intensity = 0
        assert event_chance(world, civ, mine) == 0

    def test_incursion_chance_scales_with_pressure(self):
        world = create_world()
        civ = world.civ("A")
        incursion = EVENTS_BY_ID["shoals_incursion"]

        for c in world.civilizations:
            c.external_pressure = 0
        assert event_chance(world, civ, incursion) == 0

        world.civ("A").external_pressure = 100
        assert event_chance(world, civ, incursion) == pytest.approx(0.001 * 1.2)

        world.civ("B").external_pressure = 100
        assert event_chance(world, civ, incursion) == pytest.approx(0.002 * 1.2)


class TestApplyEvent:
    def test_revival(self):
        world = create_world()
        world.tick = 10
        civ = world.civ("A")
        fired = apply_event(world, civ, EVENTS_BY_ID["revival"])

        assert civ.treasury == 340
        assert fired.event_id == "revival"
        assert fired.category == "religion"
        assert fired.hex_id in (0, 1)
        (mod,) = world.modifiers
        assert mod.attribute is Attribute.STABILITY
        assert mod.delta == 6
        assert mod.until_tick == 60
        assert mod.source == "revival"
        assert world.event_log[-1].title == "Religious Revival - A"

    def test_pillar_effect_is_an_overlay(self):
        world = create_world()
        civ = world.civ("A")
        apply_event(world, civ, EVENTS_BY_ID["golden_age"])
        assert civ.pillars.culture == 50
        assert value(world, civ, Attribute.CULTURE) == 60
        assert civ.treasury == 220

    def test_treasury_never_negative(self):
        world = create_world()
        civ = world.civ("A")
        civ.treasury = 10
        apply_event(world, civ, EVENTS_BY_ID["famine_relief"])
        assert civ.treasury == 0

    def test_peace_conference_ends_oldest_war(self):
        world = create_world()
        world.civilizations.append(Civilization(id="C", name="Gamma"))
        declare_war(world, "A", "B")
        declare_war(world, "A", "C")
        apply_event(world, world.civ("C"), EVENTS_BY_ID["peace_conference"])
        assert not at_war(world, "A", "B")
        assert world.relations[("A", "B")].state is RelationState.TRUCE
        assert at_war(world, "A", "C")


class TestModifiers:
    def test_expiry_and_treasury_payout(self):
        world = create_world()
        world.tick = 1
        world.modifiers = [
            Modifier("A", Attribute.TREASURY, 5, until_tick=3),
            Modifier("A", Attribute.RELIGION, 10, until_tick=1),
        ]
        assert apply_modifiers(world) == 1
        assert world.civ("A").treasury == 305
        assert [m.attribute for m in world.modifiers] == [Attribute.TREASURY]

        world.tick = 3
        assert apply_modifiers(world) == 0
        assert world.civ("A").treasury == 305

    def test_multi_tick_treasury_pays_every_tick(self):
        world = create_world()
        world.tick = 5
        stipend = EventDefinition(
            "stipend", "Stipend", "economy", "", lambda c, w: True, 10, (delta("treasury", 10, 3),)
        )
        apply_event(world, world.civ("A"), stipend)
        assert world.civ("A").treasury == 310
        (mod,) = world.modifiers
        assert mod.until_tick == 8

        for tick in range(6, 10):
            world.tick = tick
            apply_modifiers(world)
        assert world.civ("A").treasury == 330
        assert world.modifiers == []


class TestRunEvents:
    def test_cooldowns_skip_draws(self):
        world = create_world()
        world.event_cooldowns = {(c.id, ev.id): 100 for c in world.civilizations for ev in EVENT_CATALOG}
        state = world.rng.get_state()
        assert run_events(world) == []
        assert world.rng.get_state() == state

    def test_one_draw_per_civ_and_event(self):
        world = create_world()
        for civ in world.civilizations:
            civ.event_intensity = 0
        expected = WorldRNG("EVENTS")
        expected.set_state(world.rng.get_state())
        for _ in range(2 * len(EVENT_CATALOG)):
            expected.random()

        assert run_events(world) == []
        assert world.rng.get_state() == expected.get_state()

    def test_fired_events_go_on_cooldown(self, monkeypatch):
        monkeypatch.setattr(events_module, "event_chance", lambda world, civ, event: 1.0)
        world = create_world()
        world.tick = 5

        fired = run_events(world)
        fired_ids = {(f.civ_id, f.event_id) for f in fired}
        assert {("A", "mine_collapse"), ("B", "colonial_uprising"), ("A", "shoals_incursion")} <= fired_ids
        assert ("B", "shoals_incursion") not in fired_ids
        assert ("A", "peace_conference") not in fired_ids
        assert world.event_cooldowns[("A", "mine_collapse")] == 125

        assert run_events(world) == []


class TestRaiderPressure:
    def test_no_raid_before_interval(self):
        world = initialize("tess", "RAID")
        world.tick = 120
        state = world.rng.get_state()
        assert check_raider_pressure(world) is None
        assert world.rng.get_state() == state

    def test_no_pressure_no_raid(self):
        world = initialize("tess", "RAID")
        for civ in world.civilizations:
            civ.external_pressure = 0
        world.tick = 500
        assert check_raider_pressure(world) is None
        assert world.last_raid_tick == 0

    def test_raid_under_pressure(self):
        world = initialize("tess", "RAID")
        for civ in world.civilizations:
            civ.external_pressure = 100
        world.tick = 120

        route = None
        for _ in range(200):
            world.tick += 1
            route = check_raider_pressure(world)
            if route is not None:
                break

        assert route is not None
        assert world.last_raid_tick == world.tick
        assert route.imposed_block is not None
        assert all(c.raided for c in route.convoys)
