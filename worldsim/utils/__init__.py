"""Utility functions and constants for the world simulator."""

from .constants import (
    BASE_RANDOMNESS,
    COLONIZE_TICKS,
    DEFAULT_PRESET,
    DEFAULT_SEED_TEXT,
    GRID_H,
    GRID_W,
    MIN_ROUTE_LEN,
    PRESET_IDS,
    RESOURCE_TYPES,
)
from .hexgrid import hex_distance, hex_id, neighbor_coords, offset_to_cube
from .rng import WorldRNG

__all__ = [
    "BASE_RANDOMNESS",
    "COLONIZE_TICKS",
    "DEFAULT_PRESET",
    "DEFAULT_SEED_TEXT",
    "GRID_H",
    "GRID_W",
    "MIN_ROUTE_LEN",
    "PRESET_IDS",
    "RESOURCE_TYPES",
    "hex_distance",
    "hex_id",
    "neighbor_coords",
    "offset_to_cube",
    "WorldRNG",
]
