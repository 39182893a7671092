"""Battle resolution along contested frontiers.

This module handles:
1. Finding contested hex pairs (adjacent hexes owned by civs at war)
2. Rolling one capture per pair from the relative army strength
3. Flipping hex ownership and raising war exhaustion on both sides
"""

import logging
from dataclasses import dataclass

from ..models.world import WorldState
from ..utils.constants import (
    BASE_FLIP_CHANCE,
    BATTLE_SWING,
    CAPTURE_EXHAUSTION_LOSER,
    CAPTURE_EXHAUSTION_WINNER,
    FLIP_RATIO_RANGE,
)
from .diplomacy import at_war
from .indices import army_snapshot, clamp, morale_factor

logger = logging.getLogger(__name__)


@dataclass
class BattleEvent:
    """Record of a border battle that changed hands.

    Attributes:
        hex_id: Captured hex
        winner: Civilization that took the hex
        loser: Civilization that lost it
        winner_power: Rolled combat power of the winner
        loser_power: Rolled combat power of the loser
        flip_chance: Capture probability that was rolled against
    """

    hex_id: int
    winner: str
    loser: str
    winner_power: float
    loser_power: float
    flip_chance: float


def find_contested_pairs(world: WorldState) -> list[tuple[int, int]]:
    """Adjacent land hexes owned by two civilizations at war, each pair once.

    Pairs are returned as (lower id, higher id) in scan order.
    """
    hex_map = world.hex_map
    seen = set()
    contested = []
    for h in hex_map.hexes:
        if h.owner is None or not h.is_land:
            continue
        for nid in hex_map.neighbors[h.id]:
            other = hex_map.hexes[nid].owner
            if other is None or other == h.owner or not at_war(world, h.owner, other):
                continue
            pair = (min(h.id, nid), max(h.id, nid))
            if pair not in seen:
                seen.add(pair)
                contested.append(pair)
    return contested


def flip_hex(world: WorldState, hex_id: int, winner: str, loser: str) -> None:
    """Transfer a captured hex and charge war exhaustion to both sides."""
    h = world.hex_map.hexes[hex_id]
    h.owner = winner
    world.hex_map.colonizable.discard(hex_id)
    world.routes_dirty = True

    w = world.civ(winner)
    w.war_exhaustion = clamp(w.war_exhaustion + CAPTURE_EXHAUSTION_WINNER, 0, 100)
    lo = world.civ(loser)
    lo.war_exhaustion = clamp(lo.war_exhaustion + CAPTURE_EXHAUSTION_LOSER, 0, 100)

    logger.info(f"Tick {world.tick}: {winner} captured hex {hex_id} from {loser}")
    world.record(f"{winner} captured territory from {loser}.", "war", hex_id)


def process_battles(world: WorldState) -> list[BattleEvent]:
    """Resolve one round of border battles.

    Army strength and morale are frozen at the start of the round. Each
    contested pair is rolled once; a hex flips at most once per round and
    capitals never change hands.

    Args:
        world: World to mutate

    Returns:
        One event per captured hex, in resolution order
    """
    contested = find_contested_pairs(world)
    if not contested:
        return []

    hex_map = world.hex_map
    army = army_snapshot(world)
    morale = {civ.id: morale_factor(world, civ) for civ in world.civilizations}
    swing = BATTLE_SWING * world.settings.randomness

    flipped: set[int] = set()
    events = []
    for a_id, b_id in contested:
        if a_id in flipped or b_id in flipped:
            continue
        owner_a = hex_map.hexes[a_id].owner
        owner_b = hex_map.hexes[b_id].owner

        power_a = army[owner_a] * morale[owner_a] * world.rng.swing(swing)
        power_b = army[owner_b] * morale[owner_b] * world.rng.swing(swing)
        chance = BASE_FLIP_CHANCE * clamp(power_a / (power_b + 1e-5), *FLIP_RATIO_RANGE)
        if world.rng.random() >= chance:
            continue

        if power_a > power_b:
            winner, loser, target = owner_a, owner_b, b_id
            winner_power, loser_power = power_a, power_b
        else:
            winner, loser, target = owner_b, owner_a, a_id
            winner_power, loser_power = power_b, power_a

        if hex_map.hexes[target].capital:
            logger.debug(f"Tick {world.tick}: {loser} capital at hex {target} held")
            continue

        flip_hex(world, target, winner, loser)
        flipped.add(target)
        events.append(
            BattleEvent(
                hex_id=target,
                winner=winner,
                loser=loser,
                winner_power=winner_power,
                loser_power=loser_power,
                flip_chance=chance,
            )
        )
    return events
