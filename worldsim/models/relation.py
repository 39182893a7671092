"""Diplomatic relation data model."""

from dataclasses import dataclass
from enum import Enum


class RelationState(str, Enum):
    """State of the relation between two civilizations."""

    PEACE = "peace"
    TRUCE = "truce"
    ALLIANCE = "alliance"
    WAR = "war"


@dataclass
class Relation:
    """Relation record for one unordered pair of civilizations."""

    state: RelationState
    since_tick: int  # Tick the state was set

    def __post_init__(self):
        if not isinstance(self.state, RelationState):
            self.state = RelationState(self.state)
        if self.since_tick < 0:
            raise ValueError(f"Invalid since_tick: {self.since_tick} (must be >= 0)")


def relation_key(a: str, b: str) -> tuple[str, str]:
    """Canonical key of an unordered civilization pair."""
    return (a, b) if a < b else (b, a)


@dataclass
class War:
    """An active war between two civilizations, in declaration order."""

    a: str
    b: str
    since_tick: int

    def involves(self, civ_id: str) -> bool:
        return civ_id in (self.a, self.b)

    def matches(self, x: str, y: str) -> bool:
        return relation_key(self.a, self.b) == relation_key(x, y)
