"""Simulation engine components."""

from .map_generator import generate_map
from .presets import PRESETS, WorldConfigError
from .turn_executor import TickExecutor, TickResults, tick
from .world_builder import initialize

__all__ = [
    "generate_map",
    "initialize",
    "PRESETS",
    "tick",
    "TickExecutor",
    "TickResults",
    "WorldConfigError",
]
