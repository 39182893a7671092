"""Diplomatic relation state machine.

Relations are stored once per unordered pair; any pair without a record is
at peace. War can be declared between any two distinct civilizations, peace
only ends an active war (leaving a truce), and alliances are only created
at world setup.
"""

import logging
from typing import Optional

from ..models.relation import Relation, RelationState, War, relation_key
from ..models.world import WorldState
from ..utils.constants import TRUCE_TICKS

logger = logging.getLogger(__name__)


def get_relation(world: WorldState, a: str, b: str) -> RelationState:
    """Symmetric relation lookup; undefined pairs are at peace."""
    record = world.relations.get(relation_key(a, b))
    return record.state if record else RelationState.PEACE


def set_relation(world: WorldState, a: str, b: str, state: RelationState, since_tick: Optional[int] = None) -> None:
    """Overwrite the relation record of a pair.

    Raises:
        ValueError: If a and b are the same civilization
    """
    if a == b:
        raise ValueError(f"Cannot set a relation between {a} and itself")
    tick = world.tick if since_tick is None else since_tick
    world.relations[relation_key(a, b)] = Relation(state=state, since_tick=tick)


def at_war(world: WorldState, a: str, b: str) -> bool:
    return a != b and get_relation(world, a, b) is RelationState.WAR


def allied(world: WorldState, a: str, b: str) -> bool:
    return a != b and get_relation(world, a, b) is RelationState.ALLIANCE


def _event_location(world: WorldState, a: str, b: str) -> Optional[int]:
    """Pick a hex of either party to anchor a log entry on the map."""
    for civ_id in (a, b):
        owned = world.hex_map.owned_hexes(civ_id) if world.hex_map else []
        if owned:
            return world.rng.choice(owned).id
    return None


def declare_war(world: WorldState, a: str, b: str) -> bool:
    """Start a war between two civilizations.

    Args:
        world: World to mutate
        a: Aggressor civilization id
        b: Defender civilization id

    Returns:
        True if a new war started, False if a == b or they are already at war
    """
    if a == b or at_war(world, a, b):
        return False

    set_relation(world, a, b, RelationState.WAR)
    world.wars.append(War(a=a, b=b, since_tick=world.tick))
    world.routes_dirty = True

    logger.info(f"Tick {world.tick}: war declared between {a} and {b}")
    world.record(f"War declared between {a} and {b}.", "war", _event_location(world, a, b))
    return True


def make_peace(world: WorldState, a: str, b: str) -> bool:
    """End an active war with a truce.

    Returns:
        True if a war ended, False if the pair was not at war
    """
    if not at_war(world, a, b):
        return False

    set_relation(world, a, b, RelationState.TRUCE)
    world.wars = [w for w in world.wars if not w.matches(a, b)]
    world.routes_dirty = True

    logger.info(f"Tick {world.tick}: truce signed by {a} and {b}")
    world.record(f"Truce signed by {a} and {b}.", "diplomacy", _event_location(world, a, b))
    return True


def check_alliance_cascade(world: WorldState, threshold: Optional[float] = None) -> list[tuple[str, str]]:
    """Drag allies into active wars when a belligerent is under pressure.

    For every war that was active when the check started and every ally of
    either belligerent, the ally declares war on the opposing side if it is
    not already fighting it and the belligerent's external pressure has
    reached the threshold.

    Args:
        world: World to mutate
        threshold: Pressure threshold (defaults to the world setting)

    Returns:
        (ally, enemy) pairs of the wars that were declared
    """
    if threshold is None:
        threshold = world.settings.ally_pressure_threshold

    joined = []
    for war in list(world.wars):
        for civ in world.civilizations:
            for friend, enemy in ((war.a, war.b), (war.b, war.a)):
                if civ.id == enemy or not allied(world, civ.id, friend):
                    continue
                if at_war(world, civ.id, enemy):
                    continue
                if world.civ(friend).external_pressure < threshold:
                    continue
                if declare_war(world, civ.id, enemy):
                    logger.info(f"{civ.id} honors its alliance with {friend} against {enemy}")
                    joined.append((civ.id, enemy))
    return joined


def expire_truces(world: WorldState, truce_ticks: int = TRUCE_TICKS) -> list[tuple[str, str]]:
    """Return truces older than `truce_ticks` to peace.

    Returns:
        Pairs whose truce expired
    """
    expired = []
    for key, record in sorted(world.relations.items()):
        if record.state is RelationState.TRUCE and world.tick - record.since_tick >= truce_ticks:
            world.relations[key] = Relation(state=RelationState.PEACE, since_tick=world.tick)
            expired.append(key)
            logger.debug(f"Tick {world.tick}: truce between {key[0]} and {key[1]} expired")
    return expired
