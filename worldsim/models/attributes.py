"""Closed set of addressable civilization attributes.

Event effects, modifiers and external overrides name their target with an
`Attribute` member instead of a free-form path, so every target is known when
the event catalog is loaded.
"""

from enum import Enum

from .civilization import Civilization


class Attribute(Enum):
    """Attribute of a civilization, valued by its dotted path."""

    # Pillars
    RELIGION = "pillars.religion"
    GOVERNMENT = "pillars.government"
    ECONOMY = "pillars.economy"
    KNOWLEDGE = "pillars.knowledge"
    CULTURE = "pillars.culture"
    SOCIAL = "pillars.social"
    TOLERANCE = "pillars.tolerance"
    CHURCH_STATE = "pillars.church_state"
    MEDIA = "pillars.media"
    COHESION = "pillars.cohesion"
    RIGIDITY = "pillars.rigidity"
    INEQUALITY = "pillars.inequality"
    CENTRALIZATION = "pillars.centralization"

    # Sectors
    POPULATION = "sectors.population"
    URBANIZATION = "sectors.urbanization"
    INFRASTRUCTURE = "sectors.infrastructure"
    HEALTH = "sectors.health"
    MILITARY = "sectors.military"
    AGGRESSION = "sectors.aggression"
    DIPLOMACY = "sectors.diplomacy"
    RESOURCES = "sectors.resources"
    TRADE_OPENNESS = "sectors.trade_openness"
    TAX_CAPACITY = "sectors.tax_capacity"
    AGRICULTURE = "sectors.agriculture"
    INDUSTRY = "sectors.industry"

    # Derived indices
    PROSPERITY = "derived.prosperity"
    STABILITY = "derived.stability"
    INNOVATION = "derived.innovation"
    SOFT_POWER = "derived.soft_power"

    # Top-level
    TREASURY = "treasury"
    EXTERNAL_PRESSURE = "external_pressure"
    EVENT_INTENSITY = "event_intensity"

    @classmethod
    def from_path(cls, path: str) -> "Attribute":
        """Resolve a dotted path to an attribute.

        Raises:
            ValueError: If the path does not name an addressable attribute
        """
        try:
            return cls(path)
        except ValueError:
            raise ValueError(f"Unknown attribute path: {path!r}") from None

    @property
    def group(self) -> str:
        return self.value.split(".")[0] if "." in self.value else "civilization"

    @property
    def field_name(self) -> str:
        return self.value.split(".")[-1]

    @property
    def is_derived(self) -> bool:
        return self.group == "derived"

    def read(self, civ: Civilization) -> float:
        """Read the stored (base) value from a civilization."""
        if self.group == "pillars":
            return getattr(civ.pillars, self.field_name)
        if self.group == "sectors":
            return getattr(civ.sectors, self.field_name)
        return getattr(civ, self.field_name)

    def write(self, civ: Civilization, value: float) -> None:
        """Store a value on a civilization (no range checks)."""
        if self.group == "pillars":
            setattr(civ.pillars, self.field_name, value)
        elif self.group == "sectors":
            setattr(civ.sectors, self.field_name, value)
        else:
            setattr(civ, self.field_name, value)
