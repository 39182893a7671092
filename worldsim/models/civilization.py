"""Civilization data model."""

from dataclasses import dataclass, field, fields
from typing import Optional

from ..utils.constants import BASE_TREASURY, DEFAULT_EVENT_INTENSITY, TREASURY_CAP


def _check_range(owner: str, name: str, value: float) -> None:
    if not 0 <= value <= 100:
        raise ValueError(f"Invalid {owner}.{name}: {value} (must be 0-100)")


@dataclass
class Pillars:
    """Slow-moving cultural and institutional attributes, each 0-100."""

    religion: float = 50
    government: float = 50
    economy: float = 50
    knowledge: float = 50
    culture: float = 50
    social: float = 50
    tolerance: float = 50
    church_state: float = 50
    media: float = 50
    cohesion: float = 50
    rigidity: float = 50
    inequality: float = 50
    centralization: float = 50

    def __post_init__(self):
        for f in fields(self):
            _check_range("pillars", f.name, getattr(self, f.name))


@dataclass
class Sectors:
    """Faster-moving material attributes, each 0-100.

    Agriculture and industry default to the economy pillar when a preset
    does not set them (see `Civilization.__post_init__`).
    """

    population: float = 50
    urbanization: float = 50
    infrastructure: float = 50
    health: float = 50
    military: float = 50
    aggression: float = 50
    diplomacy: float = 50
    resources: float = 50
    trade_openness: float = 50
    tax_capacity: float = 50
    agriculture: Optional[float] = None
    industry: Optional[float] = None

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                _check_range("sectors", f.name, value)


@dataclass
class Civilization:
    """A competing polity.

    Pillars and sectors are inputs (set by presets, UI overrides and event
    modifiers); prosperity, stability, innovation and soft power are derived
    indices recomputed every tick. Territory is not stored here: hexes carry
    a back-reference to the owning civilization id.
    """

    id: str  # Short code, e.g. "SAL"
    name: str
    color: str = "#888888"  # UI only
    motto: str = ""
    religion_name: str = ""  # Flavor text, e.g. "Imperial Cult"
    government_name: str = ""
    pillars: Pillars = field(default_factory=Pillars)
    sectors: Sectors = field(default_factory=Sectors)
    external_pressure: float = 25  # 0-100, feeds raids and alliance cascades
    event_intensity: float = DEFAULT_EVENT_INTENSITY  # 0-100, scales random events
    treasury: float = BASE_TREASURY
    war_exhaustion: float = 0.0
    prosperity: float = 0.0
    stability: float = 0.0  # "Morale"
    innovation: float = 0.0
    soft_power: float = 0.0
    last_trade_volume: float = 0.0

    def __post_init__(self):
        """Validate civilization data after initialization."""
        if not self.id:
            raise ValueError("id cannot be empty")
        if self.sectors.agriculture is None:
            self.sectors.agriculture = self.pillars.economy
        if self.sectors.industry is None:
            self.sectors.industry = self.pillars.economy
        for name in ("external_pressure", "event_intensity", "war_exhaustion",
                     "prosperity", "stability", "innovation", "soft_power"):
            _check_range("civilization", name, getattr(self, name))
        if not 0 <= self.treasury <= TREASURY_CAP:
            raise ValueError(f"Invalid treasury: {self.treasury} (must be 0-{TREASURY_CAP})")
        if self.last_trade_volume < 0:
            raise ValueError(f"Invalid last_trade_volume: {self.last_trade_volume} (must be >= 0)")
