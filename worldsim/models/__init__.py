"""Data models for the world simulator."""

from .attributes import Attribute
from .civilization import Civilization, Pillars, Sectors
from .colonization import Colonization
from .hex import Hex, HexType
from .hex_map import HexMap
from .modifier import Modifier
from .relation import Relation, RelationState, War, relation_key
from .trade_route import BlockCause, Convoy, RouteBlock, RouteType, TradeRoute
from .world import LogEntry, WorldSettings, WorldState, WorldSummary

__all__ = [
    "Attribute",
    "BlockCause",
    "Civilization",
    "Colonization",
    "Convoy",
    "Hex",
    "HexMap",
    "HexType",
    "LogEntry",
    "Modifier",
    "Pillars",
    "Relation",
    "RelationState",
    "RouteBlock",
    "RouteType",
    "Sectors",
    "TradeRoute",
    "War",
    "WorldSettings",
    "WorldState",
    "WorldSummary",
    "relation_key",
]
