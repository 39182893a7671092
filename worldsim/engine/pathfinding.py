"""Breadth-first pathfinding over the hex adjacency list."""

from collections import deque
from enum import Enum
from typing import Optional

from ..models.hex import HexType
from ..models.hex_map import HexMap


class PathMode(str, Enum):
    """Which hexes a path may cross."""

    SEA = "sea"  # Sea and shoals
    LAND = "land"  # Land only
    ANY = "any"  # Everything


def is_passable(hex_type: HexType, mode: PathMode) -> bool:
    if mode is PathMode.SEA:
        return hex_type.is_water
    if mode is PathMode.LAND:
        return hex_type is HexType.LAND
    return True


def pathfind(hex_map: HexMap, start: int, goal: int, mode: PathMode) -> Optional[list[int]]:
    """Find a shortest path between two hexes.

    BFS guarantees the minimum hop count. Ties are broken by the fixed
    neighbor order of the adjacency list, so results are reproducible. Only
    neighbors are tested for passability; the start hex is always allowed.

    Args:
        hex_map: Map with adjacency built
        start: Start hex id
        goal: Goal hex id
        mode: Passability rule

    Returns:
        Ordered list of hex ids from start to goal (inclusive), or None if
        the goal is unreachable
    """
    came_from: dict[int, Optional[int]] = {start: None}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        if current == goal:
            break
        for nid in hex_map.neighbors[current]:
            if nid not in came_from and is_passable(hex_map.hexes[nid].type, mode):
                came_from[nid] = current
                queue.append(nid)

    if goal not in came_from:
        return None

    path = []
    node: Optional[int] = goal
    while node is not None:
        path.append(node)
        node = came_from[node]
    path.reverse()
    return path
