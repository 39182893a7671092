"""Trade route data model."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class RouteType(str, Enum):
    """How a route travels."""

    LAND = "land"
    SEA = "sea"


class BlockCause(str, Enum):
    """Why a route is blocked."""

    STRAIT = "strait"  # Hostile naval dominance at a strait on the path
    RAID = "raid"  # Outer raiders struck the convoy lane
    EMBARGO = "embargo"  # Naval blockade event against the origin civilization


@dataclass
class Convoy:
    """Convoy marker: a position along the route path."""

    position: float  # [0, 1) fraction of the path
    raided: bool = False  # Transient; cleared when the marker wraps around


@dataclass
class RouteBlock:
    """A block imposed on a route for a limited time (raid or embargo)."""

    hex_id: int
    until_tick: int
    cause: BlockCause


@dataclass
class TradeRoute:
    """A trade route between two hexes.

    Routes are pure derived data, rebuilt wholesale when topology or war
    state changes. `path` is the full traversal: `path[0]` is the origin hex,
    `path[-1]` the destination, and every hex in between is passable for the
    route type.
    """

    type: RouteType
    origin: int  # Origin hex id (always a capital)
    destination: int  # Destination hex id (capital or resource hex)
    path: list[int]
    origin_owner: str  # Civilization id at the origin
    destination_owner: Optional[str]  # Civilization id at the destination, None if neutral
    cargo: str = "Mixed"
    convoys: list[Convoy] = field(default_factory=list)
    blocked: bool = False
    blockade_hex: Optional[int] = None
    block_cause: Optional[BlockCause] = None
    imposed_block: Optional[RouteBlock] = None
    throughput: float = 0.0  # Last computed throughput

    def __post_init__(self):
        """Validate route data after initialization."""
        if len(self.path) < 2:
            raise ValueError(f"Invalid path: {self.path} (must contain at least 2 hexes)")
        if self.path[0] != self.origin or self.path[-1] != self.destination:
            raise ValueError("Invalid path: must start at origin and end at destination")

    @property
    def key(self) -> tuple[str, int, int]:
        return (self.type.value, self.origin, self.destination)

    def clear_block(self) -> None:
        self.blocked = False
        self.blockade_hex = None
        self.block_cause = None

    def set_block(self, hex_id: int, cause: BlockCause) -> None:
        self.blocked = True
        self.blockade_hex = hex_id
        self.block_cause = cause
