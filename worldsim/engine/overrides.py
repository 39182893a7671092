"""External mutators for the UI and test harnesses.

These bypass the event engine but share the model's invariants: attribute
writes are validated against the same [0, 100] bounds the formulas clamp
to, and ownership changes keep the colonizable set consistent.
"""

import logging
from typing import Union

from ..models.attributes import Attribute
from ..models.colonization import Colonization
from ..models.world import WorldState
from ..utils.constants import TREASURY_CAP
from .colonization import start_colonization
from .diplomacy import declare_war, make_peace
from .trade import refresh_routes

logger = logging.getLogger(__name__)


def set_attribute(world: WorldState, civ_id: str, attribute: Union[Attribute, str], new_value: float) -> float:
    """Set a pillar, sector or civilization-level value explicitly.

    Args:
        world: World to mutate
        civ_id: Target civilization
        attribute: Attribute member or its dotted path (e.g. "pillars.religion")
        new_value: Value to store

    Returns:
        The stored value

    Raises:
        KeyError: If the civilization does not exist
        ValueError: If the attribute is unknown or derived, or the value is out of range
    """
    civ = world.civ(civ_id)
    if not isinstance(attribute, Attribute):
        attribute = Attribute.from_path(attribute)
    if attribute.is_derived:
        raise ValueError(f"Cannot override derived attribute {attribute.value}; it is recomputed every tick")

    upper = TREASURY_CAP if attribute is Attribute.TREASURY else 100
    try:
        new_value = float(new_value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid value for {attribute.value}: {new_value!r}") from None
    if not 0 <= new_value <= upper:
        raise ValueError(f"Invalid value for {attribute.value}: {new_value} (must be 0-{upper:g})")

    attribute.write(civ, new_value)
    logger.debug(f"Override: {civ_id} {attribute.value} = {new_value}")
    return new_value


def set_alliance_guarantee(world: WorldState, enabled: bool) -> None:
    world.settings.alliance_guarantee = bool(enabled)


def set_randomness(world: WorldState, randomness: float) -> None:
    """Set the global randomness intensity.

    Raises:
        ValueError: If randomness is outside [0, 1]
    """
    if not 0 <= randomness <= 1:
        raise ValueError(f"Invalid randomness: {randomness} (must be 0-1)")
    world.settings.randomness = randomness


def set_ally_pressure_threshold(world: WorldState, threshold: float) -> None:
    """Set the external pressure at which allies join wars.

    Raises:
        ValueError: If threshold is outside [0, 100]
    """
    if not 0 <= threshold <= 100:
        raise ValueError(f"Invalid ally_pressure_threshold: {threshold} (must be 0-100)")
    world.settings.ally_pressure_threshold = threshold


def _check_pair(world: WorldState, a: str, b: str) -> None:
    world.civ(a)
    world.civ(b)
    if a == b:
        raise ValueError(f"A civilization cannot be paired with itself: {a}")


def force_war(world: WorldState, a: str, b: str) -> bool:
    """Declare war between two known civilizations.

    Routes between the new belligerents are dropped immediately rather than
    on the next tick.

    Raises:
        KeyError: If either civilization does not exist
        ValueError: If a == b
    """
    _check_pair(world, a, b)
    changed = declare_war(world, a, b)
    refresh_routes(world)
    return changed


def force_peace(world: WorldState, a: str, b: str) -> bool:
    """End a war between two known civilizations.

    Routes are rebuilt right away, as for `force_war`.
    """
    _check_pair(world, a, b)
    changed = make_peace(world, a, b)
    refresh_routes(world)
    return changed


def force_colonization(world: WorldState, civ_id: str, hex_id: int, cost: float = 0.0) -> Colonization:
    """Create an expedition toward a colonizable hex without the launch roll.

    Raises:
        KeyError: If the civilization does not exist
        ValueError: If the hex is not colonizable
    """
    colony = start_colonization(world, civ_id, hex_id, cost=cost)
    logger.info(f"Override: {civ_id} colonizing hex {hex_id}")
    return colony
