"""Random event engine: catalog, triggers, cooldowns and timed modifiers.

Every tick, each civilization gets one intensity-scaled draw per catalog
event that is off cooldown. If the draw succeeds and the event's trigger
holds, its effects are applied and the (civilization, event) pair goes on
cooldown. Attribute effects become timed `Modifier`s rather than
rewriting base values.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from ..models.attributes import Attribute
from ..models.civilization import Civilization
from ..models.modifier import Modifier
from ..models.trade_route import TradeRoute
from ..models.world import WorldState
from ..utils.constants import (
    EVENT_BASE_CHANCE,
    EVENT_CATEGORY_WEIGHTS,
    INCURSION_PRESSURE_SCALE,
    PRESSURE_TO_RAID,
    RAIDER_STRIKE_EVERY,
    TREASURY_CAP,
)
from .diplomacy import make_peace
from .indices import clamp, value
from .trade import embargo, raid

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Effects
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class AttributeDelta:
    """Add `amount` to an attribute for `duration` ticks."""

    attribute: Attribute
    amount: float
    duration: int


@dataclass(frozen=True)
class RouteEmbargo:
    """Block every route the civilization originates for `duration` ticks."""

    duration: int


@dataclass(frozen=True)
class RaidTrigger:
    """Launch a raid on a random sea route."""


@dataclass(frozen=True)
class ForcedPeace:
    """End the oldest active war with a truce."""


Effect = Union[AttributeDelta, RouteEmbargo, RaidTrigger, ForcedPeace]
Trigger = Callable[[Civilization, WorldState], bool]


@dataclass(frozen=True)
class EventDefinition:
    """Static catalog entry."""

    id: str
    title: str
    category: str  # Key of EVENT_CATEGORY_WEIGHTS
    description: str
    trigger: Trigger
    cooldown: int  # Ticks before the same civ can draw this event again
    effects: tuple[Effect, ...]

    def __post_init__(self):
        if self.category not in EVENT_CATEGORY_WEIGHTS:
            raise ValueError(f"Invalid category: {self.category} (event {self.id})")
        if self.cooldown <= 0:
            raise ValueError(f"Invalid cooldown: {self.cooldown} (event {self.id})")


@dataclass
class FiredEvent:
    """An event that fired this tick."""

    event_id: str
    civ_id: str
    title: str
    category: str
    hex_id: Optional[int] = None


def delta(path: str, amount: float, duration: int) -> AttributeDelta:
    """Build an attribute effect from a dotted path; unknown paths fail here."""
    return AttributeDelta(Attribute.from_path(path), amount, duration)


def _is_first_civ(civ: Civilization, world: WorldState) -> bool:
    # Outer raids are a world-level threat; draw them once per tick.
    return bool(world.civilizations) and world.civilizations[0] is civ


EVENT_CATALOG: tuple[EventDefinition, ...] = (
    EventDefinition(
        "schism", "Doctrinal Schism", "religion",
        "Factions dispute orthodoxy, stressing unity.",
        lambda c, w: value(w, c, Attribute.RELIGION) > 70,
        90, (delta("derived.stability", -8, 60),),
    ),
    EventDefinition(
        "revival", "Religious Revival", "religion",
        "Pilgrimages and donations swell the faithful.",
        lambda c, w: value(w, c, Attribute.RELIGION) > 60,
        90, (delta("derived.stability", 6, 50), delta("treasury", 40, 1)),
    ),
    EventDefinition(
        "harvest_failure", "Harvest Failure", "economy",
        "Poor rains cut the surplus.",
        lambda c, w: value(w, c, Attribute.POPULATION) > 30,
        80, (delta("derived.prosperity", -10, 50),),
    ),
    EventDefinition(
        "famine_relief", "Famine Relief", "economy",
        "Granaries opened; prices stabilized.",
        lambda c, w: c.treasury > 200,
        80, (delta("derived.stability", 8, 40), delta("treasury", -60, 1)),
    ),
    EventDefinition(
        "industrial_boom", "Industrial Boom", "economy",
        "New workshops accelerate output.",
        lambda c, w: value(w, c, Attribute.ECONOMY) > 70,
        120, (delta("sectors.industry", 8, 90),),
    ),
    EventDefinition(
        "mine_collapse", "Mine Collapse", "economy",
        "A major mine halts production.",
        lambda c, w: True,
        120, (delta("sectors.resources", -12, 90),),
    ),
    EventDefinition(
        "printing_surge", "Printing Surge", "knowledge",
        "Pamphlets spread ideas far and fast.",
        lambda c, w: value(w, c, Attribute.KNOWLEDGE) > 65,
        100, (delta("pillars.knowledge", 6, 80), delta("derived.stability", -3, 50)),
    ),
    EventDefinition(
        "censorship", "Censorship Drive", "knowledge",
        "Scribes seize texts deemed subversive.",
        lambda c, w: value(w, c, Attribute.GOVERNMENT) > 70,
        100, (delta("pillars.knowledge", -8, 60), delta("derived.stability", -4, 40)),
    ),
    EventDefinition(
        "golden_age", "Golden Age", "culture",
        "Patrons sponsor a flowering of arts.",
        lambda c, w: value(w, c, Attribute.CULTURE) > 70 and c.treasury > 300,
        140, (delta("pillars.culture", 10, 100), delta("treasury", -80, 1)),
    ),
    EventDefinition(
        "tax_reform", "Tax Reform", "government",
        "Streamlined levies improve compliance.",
        lambda c, w: value(w, c, Attribute.GOVERNMENT) > 65,
        120, (delta("sectors.tax_capacity", 10, 120),),
    ),
    EventDefinition(
        "naval_blockade", "Naval Blockade", "war",
        "Enemy squadrons interdict straits.",
        lambda c, w: value(w, c, Attribute.MILITARY) > 60,
        130, (RouteEmbargo(70),),
    ),
    EventDefinition(
        "general_strike", "General Strike", "economy",
        "Workers halt mills and ports.",
        lambda c, w: value(w, c, Attribute.RIGIDITY) < 50,
        120, (delta("derived.prosperity", -8, 60), delta("derived.stability", -6, 60)),
    ),
    EventDefinition(
        "anti_corruption", "Anti-Corruption Drive", "government",
        "Audits and arrests deter graft.",
        lambda c, w: value(w, c, Attribute.GOVERNMENT) > 60,
        120, (delta("pillars.government", 6, 100), delta("derived.stability", 4, 80)),
    ),
    EventDefinition(
        "shoals_incursion", "Outer Shoals Incursion", "outer",
        "Raiders strike convoys and coasts.",
        _is_first_civ,
        90, (RaidTrigger(),),
    ),
    EventDefinition(
        "colonial_uprising", "Colonial Uprising", "war",
        "Resistance flares in overseas holdings.",
        lambda c, w: True,
        160, (delta("derived.stability", -6, 80),),
    ),
    EventDefinition(
        "peace_conference", "Peace Conference", "diplomacy",
        "Envoys seek to end conflicts.",
        lambda c, w: bool(w.wars),
        200, (ForcedPeace(),),
    ),
)

EVENTS_BY_ID = {ev.id: ev for ev in EVENT_CATALOG}


def average_pressure(world: WorldState) -> float:
    if not world.civilizations:
        return 0.0
    return sum(c.external_pressure for c in world.civilizations) / len(world.civilizations)


def event_chance(world: WorldState, civ: Civilization, event: EventDefinition) -> float:
    """Per-tick draw probability of an event for a civilization.

    Outer-category events (incursions from beyond the map edge) also scale
    with the average external pressure across all civilizations.
    """
    chance = EVENT_BASE_CHANCE * (civ.event_intensity / 50) * EVENT_CATEGORY_WEIGHTS[event.category]
    if event.category == "outer":
        chance *= average_pressure(world) / INCURSION_PRESSURE_SCALE
    return chance


def apply_event(world: WorldState, civ: Civilization, event: EventDefinition) -> FiredEvent:
    """Apply an event's effects to a civilization and log it.

    Treasury deltas pay their first installment immediately; those lasting
    more than one tick also become a timed modifier paying the rest. Every
    other attribute delta becomes a timed modifier.
    """
    owned = world.hex_map.owned_hexes(civ.id)
    hex_id = world.rng.choice(owned).id if owned else None
    title = f"{event.title} - {civ.id}"
    logger.info(f"Tick {world.tick}: {title}")
    world.record(title, event.category, hex_id)

    for effect in event.effects:
        if isinstance(effect, AttributeDelta):
            is_treasury = effect.attribute is Attribute.TREASURY
            if is_treasury:
                civ.treasury = clamp(civ.treasury + effect.amount, 0, TREASURY_CAP)
            if not is_treasury or effect.duration > 1:
                world.modifiers.append(
                    Modifier(
                        civ_id=civ.id,
                        attribute=effect.attribute,
                        delta=effect.amount,
                        until_tick=world.tick + effect.duration,
                        source=event.id,
                    )
                )
        elif isinstance(effect, RouteEmbargo):
            embargo(world, civ.id, effect.duration)
        elif isinstance(effect, RaidTrigger):
            raid(world)
        elif isinstance(effect, ForcedPeace):
            if world.wars:
                war = world.wars[0]
                make_peace(world, war.a, war.b)
        else:
            raise TypeError(f"Unknown effect: {effect!r}")

    return FiredEvent(event.id, civ.id, title, event.category, hex_id)


def run_events(world: WorldState) -> list[FiredEvent]:
    """Draw every off-cooldown event for every civilization.

    The draw happens before the trigger is evaluated so the number of RNG
    calls per tick does not depend on civilization state.
    """
    fired = []
    for civ in world.civilizations:
        for event in EVENT_CATALOG:
            key = (civ.id, event.id)
            if world.tick < world.event_cooldowns.get(key, 0):
                continue
            if world.rng.random() < event_chance(world, civ, event) and event.trigger(civ, world):
                fired.append(apply_event(world, civ, event))
                world.event_cooldowns[key] = world.tick + event.cooldown
    return fired


def apply_modifiers(world: WorldState) -> int:
    """Expire old modifiers and pay out multi-tick treasury deltas.

    Pillar, sector and derived-index modifiers are read through the overlay
    in `indices.value` and need no per-tick work here.

    Returns:
        Number of modifiers still active
    """
    active = []
    for mod in world.modifiers:
        if not mod.active_at(world.tick):
            logger.debug(f"Tick {world.tick}: modifier {mod.source or mod.attribute.value} on {mod.civ_id} expired")
            continue
        if mod.attribute is Attribute.TREASURY and world.has_civ(mod.civ_id):
            civ = world.civ(mod.civ_id)
            civ.treasury = clamp(civ.treasury + mod.delta, 0, TREASURY_CAP)
        active.append(mod)
    world.modifiers = active
    return len(active)


def check_raider_pressure(world: WorldState) -> Optional[TradeRoute]:
    """World-level raid check once enough ticks have passed since the last raid.

    The chance scales with the average external pressure.

    Returns:
        The raided route, or None
    """
    if not world.civilizations or world.tick - world.last_raid_tick <= RAIDER_STRIKE_EVERY:
        return None
    if world.rng.random() >= average_pressure(world) / 100 * PRESSURE_TO_RAID:
        return None
    world.last_raid_tick = world.tick
    return raid(world)
