"""Procedural hex map generation.

Each preset is a closed-form land/sea classifier over normalized grid
coordinates; the only persisted randomness is resource placement.
"""

import logging
import math

from ..models.hex import Hex, HexType
from ..models.hex_map import HexMap
from ..utils.constants import (
    GRID_H,
    GRID_W,
    RESOURCE_PLACEMENT_ATTEMPTS,
    RESOURCE_TYPES,
    RESOURCES_PER_TYPE,
)
from ..utils.hexgrid import hex_id
from ..utils.rng import WorldRNG
from .presets import WorldConfigError

logger = logging.getLogger(__name__)

STRAIT_MIN_NON_SEA_NEIGHBORS = 4


def _tess_classifier(q: int, r: int, nx: float, ny: float) -> HexType:
    # Inland sea at the center, land around it, roughened by a trig noise field
    hex_type = HexType.SEA if nx * nx * 1.2 + ny * ny * 0.6 < 0.9 else HexType.LAND
    noise = math.sin(q * 0.9) * math.cos(r * 0.6) + math.sin((q + r) * 0.3) * 0.5
    if noise > 0.7:
        hex_type = HexType.LAND
    if noise < -0.85:
        hex_type = HexType.SEA
    return hex_type


def _we1914_classifier(q: int, r: int, nx: float, ny: float) -> HexType:
    # Wide continental block
    return HexType.LAND if nx * nx * 0.6 + ny * ny * 1.6 < 0.8 else HexType.SEA


def _bac1200_classifier(q: int, r: int, nx: float, ny: float) -> HexType:
    # Rounder landmass ringed by sea
    return HexType.LAND if nx * nx * 0.8 + ny * ny * 1.2 < 0.85 else HexType.SEA


CLASSIFIERS = {
    "tess": _tess_classifier,
    "we1914": _we1914_classifier,
    "bac1200": _bac1200_classifier,
}


def classify_grid(preset: str, width: int, height: int) -> list[HexType]:
    """Classify every cell of a grid as land or sea for a preset.

    Args:
        preset: Preset id
        width: Grid width in hexes
        height: Grid height in hexes

    Returns:
        Hex types in id order (row-major)

    Raises:
        WorldConfigError: If the preset is unknown or dimensions are not positive
    """
    if preset not in CLASSIFIERS:
        raise WorldConfigError(f"Unknown preset: {preset!r} (expected one of {sorted(CLASSIFIERS)})")
    if width <= 0 or height <= 0:
        raise WorldConfigError(f"Invalid grid dimensions: {width}x{height} (must be > 0)")

    classifier = CLASSIFIERS[preset]
    types = []
    for r in range(height):
        for q in range(width):
            nx = (q / width) * 2 - 1
            ny = (r / height) * 2 - 1
            types.append(classifier(q, r, nx, ny))
    return types


def assemble_map(width: int, height: int, cell_types: list[HexType]) -> HexMap:
    """Build a map from raw cell types.

    Edge sea hexes become shoals (the outer ring), adjacency is computed,
    straits are marked and all land starts out colonizable.

    Args:
        width: Grid width
        height: Grid height
        cell_types: One HexType per cell in row-major order

    Returns:
        Map with topology indexes built and no owners
    """
    if len(cell_types) != width * height:
        raise ValueError(f"Invalid cell count: {len(cell_types)} (expected {width * height})")

    hex_map = HexMap(width=width, height=height)
    for r in range(height):
        for q in range(width):
            hid = hex_id(q, r, width)
            hex_type = cell_types[hid]
            on_edge = q == 0 or r == 0 or q == width - 1 or r == height - 1
            if hex_type is HexType.SEA and on_edge:
                hex_type = HexType.SHOALS
                hex_map.outer_shoals.add(hid)
            hex_map.hexes.append(Hex(id=hid, q=q, r=r, type=hex_type))
    hex_map.build_adjacency()

    for h in hex_map.hexes:
        if h.type is not HexType.SEA:
            continue
        enclosing = sum(
            1 for n in hex_map.neighbors[h.id] if hex_map.hexes[n].type is not HexType.SEA
        )
        if enclosing >= STRAIT_MIN_NON_SEA_NEIGHBORS:
            h.strait = True
            hex_map.straits.add(h.id)

    hex_map.reset_colonizable()
    return hex_map


def place_resources(hex_map: HexMap, rng: WorldRNG, per_type: int = RESOURCES_PER_TYPE) -> int:
    """Scatter resources over land hexes without collision.

    Types are dealt round-robin. Each placement retries random hexes a
    bounded number of times, then falls back to the first free land hex in
    scan order so generation always terminates.

    Args:
        hex_map: Map to place resources on
        rng: Random number generator
        per_type: Number of hexes per resource type

    Returns:
        Number of resources placed (less than the quota only if land runs out)
    """
    quota = len(RESOURCE_TYPES) * per_type
    placed = 0
    while placed < quota:
        resource = RESOURCE_TYPES[placed % len(RESOURCE_TYPES)]
        target = None
        for _ in range(RESOURCE_PLACEMENT_ATTEMPTS):
            candidate = hex_map.hexes[rng.randint(0, len(hex_map.hexes) - 1)]
            if candidate.is_land and candidate.resource is None:
                target = candidate
                break
        if target is None:
            target = next((h for h in hex_map.hexes if h.is_land and h.resource is None), None)
            if target is None:
                logger.warning(f"Ran out of land for resources after placing {placed}/{quota}")
                break
        target.resource = resource
        hex_map.resource_hexes.append(target.id)
        placed += 1
    return placed


def generate_map(
    preset: str, rng: WorldRNG, width: int = GRID_W, height: int = GRID_H
) -> HexMap:
    """Generate the world map for a preset.

    Algorithm:
    1. Classify each cell with the preset's radial-falloff classifier
    2. Turn edge sea into shoals, build adjacency, mark straits
    3. Place resources on random land hexes
    4. Mark all land colonizable (capitals are placed later)

    Args:
        preset: Preset id ("tess", "we1914", "bac1200")
        rng: Random number generator
        width: Grid width
        height: Grid height

    Returns:
        Generated HexMap
    """
    cell_types = classify_grid(preset, width, height)
    hex_map = assemble_map(width, height, cell_types)
    place_resources(hex_map, rng)
    logger.debug(
        f"Generated {preset} map {width}x{height}: "
        f"{sum(1 for h in hex_map.hexes if h.is_land)} land, {len(hex_map.straits)} straits"
    )
    return hex_map
