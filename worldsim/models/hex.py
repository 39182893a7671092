"""Hex cell data model."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..utils.constants import RESOURCE_TYPES


class HexType(str, Enum):
    """Terrain class of a hex."""

    LAND = "land"
    SEA = "sea"
    SHOALS = "shoals"

    @property
    def is_water(self) -> bool:
        return self is not HexType.LAND


@dataclass
class Hex:
    """One cell of the world map.

    The owner is a back-reference to a civilization id, never an ownership
    edge: removing a civilization clears owners, it does not delete hexes.
    """

    id: int  # q + r * grid width
    q: int  # Column
    r: int  # Row
    type: HexType
    owner: Optional[str] = None  # Civilization id or None (neutral)
    resource: Optional[str] = None  # One of RESOURCE_TYPES
    capital: bool = False
    strait: bool = False

    def __post_init__(self):
        """Validate hex data after initialization."""
        if not isinstance(self.type, HexType):
            self.type = HexType(self.type)
        if self.q < 0 or self.r < 0:
            raise ValueError(f"Invalid coordinates: ({self.q}, {self.r}) (must be >= 0)")
        if self.resource is not None and self.resource not in RESOURCE_TYPES:
            raise ValueError(f"Invalid resource: {self.resource} (must be one of {RESOURCE_TYPES})")
        if self.capital and self.owner is None:
            raise ValueError(f"Invalid capital: hex {self.id} is a capital without an owner")

    @property
    def is_land(self) -> bool:
        return self.type is HexType.LAND
