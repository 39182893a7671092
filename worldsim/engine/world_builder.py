"""World initialization: map, civilizations, capitals and starting relations."""

import logging
from typing import Optional

from ..models.civilization import Civilization
from ..models.hex_map import HexMap
from ..models.relation import RelationState
from ..models.world import WorldSettings, WorldState
from ..utils.constants import (
    CAPITAL_MIN_SPACING,
    CAPITAL_PLACEMENT_TRIES,
    EXPANSION_CHANCE,
    EXPANSION_PASSES,
    GRID_H,
    GRID_W,
)
from ..utils.rng import WorldRNG
from .diplomacy import set_relation
from .indices import recalc_derived
from .map_generator import generate_map
from .presets import WorldConfigError, build_civilizations, get_preset
from .trade import compute_routes, update_blockades

logger = logging.getLogger(__name__)


def place_civilizations(hex_map: HexMap, civs: list[Civilization], rng: WorldRNG) -> None:
    """Place a coastal capital for each civilization and grow its core territory.

    Each capital is drawn at random from coastal land at least
    CAPITAL_MIN_SPACING away from earlier capitals, with a bounded number of
    tries; when they run out the first free coastal hex in scan order is
    used. Land neighbors of the capital are annexed, then a few random
    expansion passes push the border outward.

    Raises:
        WorldConfigError: If the map has no free coastal land for a capital
    """
    candidates = [h.id for h in hex_map.hexes if h.is_land and hex_map.has_water_neighbor(h.id)]
    chosen: list[int] = []

    for civ in civs:
        free = [hid for hid in candidates if hex_map.hexes[hid].owner is None]
        if not free:
            raise WorldConfigError(f"No coastal land left for the capital of {civ.id}")

        capital = None
        for _ in range(CAPITAL_PLACEMENT_TRIES):
            cand = rng.choice(free)
            if all(hex_map.distance(cand, other) >= CAPITAL_MIN_SPACING for other in chosen):
                capital = cand
                break
        if capital is None:
            capital = free[0]
            logger.warning(f"Capital spacing not met for {civ.id}; using hex {capital}")

        h = hex_map.hexes[capital]
        h.owner = civ.id
        h.capital = True
        hex_map.capitals[civ.id] = capital
        chosen.append(capital)
        for nid in hex_map.neighbors[capital]:
            nh = hex_map.hexes[nid]
            if nh.is_land and nh.owner is None:
                nh.owner = civ.id

    for civ in civs:
        frontier = [h.id for h in hex_map.hexes if h.owner == civ.id]
        for _ in range(EXPANSION_PASSES):
            base = rng.choice(frontier)
            for nid in hex_map.neighbors[base]:
                nh = hex_map.hexes[nid]
                if nh.is_land and nh.owner is None and rng.random() < EXPANSION_CHANCE:
                    nh.owner = civ.id
                    frontier.append(nid)

    hex_map.reset_colonizable()


def initialize(
    preset_id: str,
    seed_text: str,
    settings: Optional[WorldSettings] = None,
    width: int = GRID_W,
    height: int = GRID_H,
) -> WorldState:
    """Build a fresh world for a preset.

    Args:
        preset_id: One of the preset ids ("tess", "we1914", "bac1200")
        seed_text: Non-empty seed string; the whole history derives from it
        settings: Runtime settings (defaults when omitted)
        width: Grid width in hexes
        height: Grid height in hexes

    Returns:
        World at tick 0 with routes and derived indices computed

    Raises:
        WorldConfigError: On an unknown preset, malformed seed or bad grid size
    """
    if not isinstance(seed_text, str) or not seed_text.strip():
        raise WorldConfigError(f"Invalid seed text: {seed_text!r} (must be a non-empty string)")
    preset = get_preset(preset_id)

    rng = WorldRNG(seed_text)
    hex_map = generate_map(preset_id, rng, width, height)
    civs = build_civilizations(preset)
    place_civilizations(hex_map, civs, rng)

    world = WorldState(
        seed_text=seed_text,
        preset=preset_id,
        hex_map=hex_map,
        civilizations=civs,
        settings=settings or WorldSettings(),
        outer_pressure_name=preset.outer_pressure_name,
        rng=rng,
    )

    for i, a in enumerate(civs):
        for b in civs[i + 1:]:
            set_relation(world, a.id, b.id, RelationState.PEACE, since_tick=0)
    for a, b in preset.alliances:
        set_relation(world, a, b, RelationState.ALLIANCE, since_tick=0)

    compute_routes(world)
    update_blockades(world)
    recalc_derived(world)

    logger.info(
        f"Initialized preset {preset_id} with seed {seed_text!r}: "
        f"{len(civs)} civilizations, {len(world.routes)} routes"
    )
    return world
