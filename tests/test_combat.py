"""Tests for border battles."""

from worldsim.engine.combat import find_contested_pairs, flip_hex, process_battles
from worldsim.engine.diplomacy import declare_war
from worldsim.engine.map_generator import assemble_map
from worldsim.models import Civilization, HexType, WorldState


def create_strip(owners: list[str], capitals: dict[str, int], seed: str = "T1") -> WorldState:
    """A one-row land strip; owners[i] holds hex i."""
    hex_map = assemble_map(len(owners), 1, [HexType.LAND] * len(owners))
    for hid, owner in enumerate(owners):
        hex_map.hexes[hid].owner = owner
    for civ_id, cap in capitals.items():
        hex_map.hexes[cap].capital = True
        hex_map.capitals[civ_id] = cap
    hex_map.reset_colonizable()
    civs = [Civilization(id=c, name=f"Civ {c}") for c in capitals]
    return WorldState(seed_text=seed, hex_map=hex_map, civilizations=civs)


def test_no_contested_pairs_at_peace():
    world = create_strip(["A", "A", "B", "B"], {"A": 0, "B": 3})
    assert find_contested_pairs(world) == []
    assert process_battles(world) == []


def test_contested_pairs_at_war():
    world = create_strip(["A", "A", "B", "B"], {"A": 0, "B": 3})
    declare_war(world, "A", "B")
    assert find_contested_pairs(world) == [(1, 2)]


def test_flip_hex_charges_exhaustion():
    world = create_strip(["A", "A", "B", "B"], {"A": 0, "B": 3})
    world.routes_dirty = False
    flip_hex(world, 2, "A", "B")
    assert world.hex_map.hexes[2].owner == "A"
    assert world.civ("A").war_exhaustion == 1.5
    assert world.civ("B").war_exhaustion == 2.0
    assert world.routes_dirty
    assert world.event_log[-1].hex_id == 2


def test_frontier_eventually_moves():
    world = create_strip(["A", "A", "B", "B"], {"A": 0, "B": 3})
    declare_war(world, "A", "B")

    events = []
    for _ in range(500):
        events = process_battles(world)
        if events:
            break

    assert len(events) == 1
    event = events[0]
    assert event.hex_id in (1, 2)
    assert world.hex_map.hexes[event.hex_id].owner == event.winner
    assert world.civ(event.loser).war_exhaustion > world.civ(event.winner).war_exhaustion
    owners = [h.owner for h in world.hex_map.hexes]
    assert owners.count("A") + owners.count("B") == 4
    assert owners.count(event.winner) == 3


def test_capitals_never_fall():
    world = create_strip(["A", "B"], {"A": 0, "B": 1})
    declare_war(world, "A", "B")
    for _ in range(300):
        assert process_battles(world) == []
    assert [h.owner for h in world.hex_map.hexes] == ["A", "B"]


def test_battles_are_deterministic():
    results = []
    for _ in range(2):
        world = create_strip(["A", "A", "A", "B", "B", "B"], {"A": 0, "B": 5}, seed="DUEL")
        declare_war(world, "A", "B")
        for _ in range(200):
            process_battles(world)
        results.append([h.owner for h in world.hex_map.hexes])
    assert results[0] == results[1]
