"""World state container."""

from dataclasses import dataclass, field
from typing import Optional

from ..utils.constants import (
    ALLIANCE_GUARANTEE,
    ALLY_PRESSURE_THRESHOLD,
    BASE_RANDOMNESS,
    BLOCKADE_MARGIN,
    COLONIZE_TICKS,
    DEFAULT_PRESET,
    EVENT_LOG_LIMIT,
    MIN_ROUTE_LEN,
)
from ..utils.rng import WorldRNG
from .civilization import Civilization
from .colonization import Colonization
from .hex_map import HexMap
from .modifier import Modifier
from .relation import Relation, War
from .trade_route import TradeRoute


@dataclass
class WorldSettings:
    """Runtime-adjustable simulation knobs (exported with the state)."""

    randomness: float = BASE_RANDOMNESS  # 0-1, scales battle/trade noise
    alliance_guarantee: bool = ALLIANCE_GUARANTEE  # Allies join wars under pressure
    ally_pressure_threshold: float = ALLY_PRESSURE_THRESHOLD
    blockade_margin: float = BLOCKADE_MARGIN
    colonize_ticks: int = COLONIZE_TICKS
    min_route_len: int = MIN_ROUTE_LEN

    def __post_init__(self):
        """Validate settings after initialization."""
        if not 0 <= self.randomness <= 1:
            raise ValueError(f"Invalid randomness: {self.randomness} (must be 0-1)")
        if not 0 <= self.ally_pressure_threshold <= 100:
            raise ValueError(
                f"Invalid ally_pressure_threshold: {self.ally_pressure_threshold} (must be 0-100)"
            )
        if self.blockade_margin < 1:
            raise ValueError(f"Invalid blockade_margin: {self.blockade_margin} (must be >= 1)")
        if self.colonize_ticks <= 0:
            raise ValueError(f"Invalid colonize_ticks: {self.colonize_ticks} (must be > 0)")
        if self.min_route_len < 2:
            raise ValueError(f"Invalid min_route_len: {self.min_route_len} (must be >= 2)")


@dataclass
class LogEntry:
    """One entry of the in-world event log."""

    tick: int
    title: str
    category: str = "general"
    hex_id: Optional[int] = None  # Map annotation location


@dataclass
class WorldSummary:
    """Periodic digest of who leads the world (structured, not prose)."""

    tick: int
    prosperity_leader: Optional[str]
    treasury_leader: Optional[str]
    trade_leader: Optional[str]
    innovation_leader: Optional[str]
    stability_leader: Optional[str]
    pressure_leader: Optional[str]
    first_war: Optional[tuple[str, str]]
    colonizers: list[str]
    blocked_routes: int


@dataclass
class WorldState:
    """Complete simulation state threaded through every operation.

    Holds the map, civilizations, relation ledger, derived trade routes,
    timed modifiers, in-flight colonizations, the RNG and the tick counter.
    All engine operations take this value and mutate it in place.
    """

    seed_text: str
    preset: str = DEFAULT_PRESET
    tick: int = 0
    hex_map: Optional[HexMap] = None
    civilizations: list[Civilization] = field(default_factory=list)  # Fixed order
    relations: dict[tuple[str, str], Relation] = field(default_factory=dict)
    wars: list[War] = field(default_factory=list)  # Active wars, declaration order
    routes: list[TradeRoute] = field(default_factory=list)
    colonizations: list[Colonization] = field(default_factory=list)
    modifiers: list[Modifier] = field(default_factory=list)
    event_cooldowns: dict[tuple[str, str], int] = field(
        default_factory=dict
    )  # (civ id, event id) -> first tick the event may fire again
    event_log: list[LogEntry] = field(default_factory=list)
    last_raid_tick: int = 0
    routes_dirty: bool = True  # Topology or war state changed since last route build
    settings: WorldSettings = field(default_factory=WorldSettings)
    summary: Optional[WorldSummary] = None
    outer_pressure_name: str = "Outer Shoals"
    rng: Optional[WorldRNG] = None

    def __post_init__(self):
        """Initialize RNG if not provided."""
        if self.rng is None:
            self.rng = WorldRNG(self.seed_text)
        if self.tick < 0:
            raise ValueError(f"Invalid tick: {self.tick} (must be >= 0)")

    def civ(self, civ_id: str) -> Civilization:
        """Look up a civilization by id.

        Raises:
            KeyError: If no civilization has that id
        """
        for c in self.civilizations:
            if c.id == civ_id:
                return c
        raise KeyError(f"Civilization {civ_id} not found")

    def has_civ(self, civ_id: str) -> bool:
        return any(c.id == civ_id for c in self.civilizations)

    @property
    def civ_ids(self) -> list[str]:
        return [c.id for c in self.civilizations]

    def record(self, title: str, category: str = "general", hex_id: Optional[int] = None) -> LogEntry:
        """Append an entry to the event log, keeping only the most recent ones."""
        entry = LogEntry(tick=self.tick, title=title, category=category, hex_id=hex_id)
        self.event_log.append(entry)
        if len(self.event_log) > EVENT_LOG_LIMIT:
            del self.event_log[: len(self.event_log) - EVENT_LOG_LIMIT]
        return entry
