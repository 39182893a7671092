"""Timed attribute modifier data model."""

from dataclasses import dataclass

from .attributes import Attribute


@dataclass
class Modifier:
    """Additive, time-limited adjustment to one civilization attribute.

    Active while the current tick is below `until_tick`; it never rewrites
    the base value it adjusts.
    """

    civ_id: str
    attribute: Attribute
    delta: float
    until_tick: int
    source: str = ""  # Event id that created it

    def __post_init__(self):
        if not isinstance(self.attribute, Attribute):
            self.attribute = Attribute.from_path(self.attribute)

    def active_at(self, tick: int) -> bool:
        return tick < self.until_tick
