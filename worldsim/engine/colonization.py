"""Colonial expeditions: launch and progress.

A wealthy, stable civilization with enough military occasionally launches
an expedition toward the nearest free coastal land. The target is reserved
(removed from the colonizable set) at launch and changes hands once the
expedition has run for the configured number of ticks.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..models.civilization import Civilization
from ..models.colonization import Colonization
from ..models.world import WorldState
from ..utils.constants import (
    COLONIZE_ARMY_REQ,
    COLONIZE_COST,
    COLONIZE_LAUNCH_CHANCE,
    COLONIZE_PROSPERITY_REQ,
    COLONIZE_STABILITY_REQ,
    RESOURCE_DISCOVERY_CHANCE,
    RESOURCE_TYPES,
)

logger = logging.getLogger(__name__)


@dataclass
class ColonyEvent:
    """A colonization milestone (launch or completion)."""

    civ_id: str
    hex_id: int
    kind: str  # "launched" or "founded"
    resource: Optional[str] = None  # Resource discovered on founding


def can_launch(civ: Civilization) -> bool:
    """Whether a civilization meets every expedition threshold."""
    return (
        civ.prosperity > COLONIZE_PROSPERITY_REQ
        and civ.stability > COLONIZE_STABILITY_REQ
        and civ.treasury > COLONIZE_COST
        and civ.sectors.military > COLONIZE_ARMY_REQ
    )


def nearest_target(world: WorldState, civ_id: str) -> Optional[int]:
    """Nearest colonizable coastal land hex to a civ's capital.

    Candidates are scanned in ascending id order; the first one at the
    smallest distance wins.
    """
    hex_map = world.hex_map
    capital = hex_map.capitals.get(civ_id)
    if capital is None:
        return None

    best_id, best_dist = None, None
    for hid in sorted(hex_map.colonizable):
        if not hex_map.hexes[hid].is_land or not hex_map.has_water_neighbor(hid):
            continue
        d = hex_map.distance(capital, hid)
        if best_dist is None or d < best_dist:
            best_id, best_dist = hid, d
    return best_id


def start_colonization(world: WorldState, civ_id: str, hex_id: int, cost: float = 0.0) -> Colonization:
    """Register an expedition and reserve its target.

    Args:
        world: World to mutate
        civ_id: Colonizing civilization
        hex_id: Target hex (must be colonizable)
        cost: Treasury already charged for the expedition

    Raises:
        KeyError: If the civilization does not exist
        ValueError: If the hex is not colonizable
    """
    world.civ(civ_id)
    if hex_id not in world.hex_map.colonizable:
        raise ValueError(f"Hex {hex_id} is not colonizable")

    colony = Colonization(civ_id=civ_id, hex_id=hex_id, progress=0, cost=cost)
    world.colonizations.append(colony)
    world.hex_map.colonizable.discard(hex_id)
    return colony


def launch_expeditions(world: WorldState) -> list[ColonyEvent]:
    """Give every qualifying civilization a chance to launch an expedition."""
    events = []
    for civ in world.civilizations:
        if not can_launch(civ):
            continue
        if world.rng.random() >= COLONIZE_LAUNCH_CHANCE:
            continue
        target = nearest_target(world, civ.id)
        if target is None:
            continue

        civ.treasury -= COLONIZE_COST
        start_colonization(world, civ.id, target, cost=COLONIZE_COST)
        logger.info(f"Tick {world.tick}: {civ.id} launched a colonial expedition to hex {target}")
        world.record(f"{civ.id} launched a colonial expedition.", "colonization", target)
        events.append(ColonyEvent(civ_id=civ.id, hex_id=target, kind="launched"))
    return events


def progress_colonizations(world: WorldState) -> list[ColonyEvent]:
    """Advance every expedition by one tick and found finished colonies."""
    threshold = world.settings.colonize_ticks
    events = []
    remaining = []
    for colony in world.colonizations:
        colony.progress += 1
        if colony.progress < threshold:
            remaining.append(colony)
            continue

        h = world.hex_map.hexes[colony.hex_id]
        h.owner = colony.civ_id
        world.routes_dirty = True
        logger.info(f"Tick {world.tick}: {colony.civ_id} established a colony at hex {h.id}")
        world.record(f"{colony.civ_id} established a colony.", "colonization", h.id)

        found = None
        if not h.resource and world.rng.random() < RESOURCE_DISCOVERY_CHANCE:
            found = world.rng.choice(RESOURCE_TYPES)
            h.resource = found
            world.hex_map.resource_hexes.append(h.id)
            world.record(f"{colony.civ_id} discovered {found} at the colony.", "colonization", h.id)
        events.append(ColonyEvent(civ_id=colony.civ_id, hex_id=h.id, kind="founded", resource=found))

    world.colonizations = remaining
    return events
