"""World map container: hex cells plus derived topology indexes."""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..utils.hexgrid import hex_distance, hex_id, neighbor_coords
from .hex import Hex, HexType


@dataclass
class HexMap:
    """Fixed-size rectangular grid of hexes in odd-r offset layout.

    Only `width`, `height` and `hexes` are authoritative. Everything else is
    an index derived from the per-hex fields (see `rebuild_indexes`), except
    `colonizable`, which also depends on in-flight colonizations and is
    mutated only by ownership-changing operations.
    """

    width: int
    height: int
    hexes: list[Hex] = field(default_factory=list)
    neighbors: dict[int, list[int]] = field(default_factory=dict)  # Adjacency, computed once
    straits: set[int] = field(default_factory=set)  # Sea hexes enclosed by >= 4 non-sea hexes
    resource_hexes: list[int] = field(default_factory=list)  # In placement order
    outer_shoals: set[int] = field(default_factory=set)  # Edge-sea ring
    colonizable: set[int] = field(default_factory=set)  # Unowned, unreserved land
    capitals: dict[str, int] = field(default_factory=dict)  # Civ id -> capital hex id

    def __post_init__(self):
        """Validate map dimensions."""
        if self.width <= 0:
            raise ValueError(f"Invalid width: {self.width} (must be > 0)")
        if self.height <= 0:
            raise ValueError(f"Invalid height: {self.height} (must be > 0)")
        if self.hexes and len(self.hexes) != self.width * self.height:
            raise ValueError(
                f"Invalid hex count: {len(self.hexes)} (expected {self.width * self.height})"
            )

    # ------------------------------------------------------------------
    # Topology
    # ------------------------------------------------------------------

    def in_bounds(self, q: int, r: int) -> bool:
        return 0 <= q < self.width and 0 <= r < self.height

    def build_adjacency(self) -> None:
        """Compute the neighbor list of every hex from its coordinates."""
        self.neighbors = {}
        for h in self.hexes:
            self.neighbors[h.id] = [
                hex_id(nq, nr, self.width)
                for nq, nr in neighbor_coords(h.q, h.r)
                if self.in_bounds(nq, nr)
            ]

    def rebuild_indexes(self) -> None:
        """Rebuild every derived index from the persisted per-hex fields.

        Used after import: adjacency comes from coordinates, the strait set
        from the strait flags, the resource index from resource fields, the
        outer ring from shoals, and the capital index from capital flags.
        The colonizable set is left to the caller because it depends on
        in-flight colonizations.
        """
        self.build_adjacency()
        self.straits = {h.id for h in self.hexes if h.strait}
        self.resource_hexes = [h.id for h in self.hexes if h.resource]
        self.outer_shoals = {h.id for h in self.hexes if h.type is HexType.SHOALS}
        self.capitals = {h.owner: h.id for h in self.hexes if h.capital and h.owner}

    def reset_colonizable(self, reserved: Iterable[int] = ()) -> None:
        """Recompute the colonizable set: unowned land not reserved by a colonization."""
        reserved_ids = set(reserved)
        self.colonizable = {
            h.id for h in self.hexes if h.is_land and h.owner is None and h.id not in reserved_ids
        }

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def hex(self, hid: int) -> Hex:
        """Return the hex with the given id.

        Raises:
            KeyError: If the id is outside the grid
        """
        if not 0 <= hid < len(self.hexes):
            raise KeyError(f"Hex {hid} not found")
        return self.hexes[hid]

    def distance(self, a: int, b: int) -> int:
        """Hex-step distance between two hex ids."""
        ha, hb = self.hexes[a], self.hexes[b]
        return hex_distance(ha.q, ha.r, hb.q, hb.r)

    def has_water_neighbor(self, hid: int) -> bool:
        return any(self.hexes[n].type.is_water for n in self.neighbors[hid])

    def first_water_neighbor(self, hid: int) -> Optional[int]:
        """Return the first sea/shoals neighbor in direction order, or None."""
        for n in self.neighbors[hid]:
            if self.hexes[n].type.is_water:
                return n
        return None

    def owned_hexes(self, civ_id: str) -> list[Hex]:
        return [h for h in self.hexes if h.owner == civ_id]

    def owned_resources(self, civ_id: str) -> set[str]:
        """Resource types held by a civilization."""
        held = set()
        for hid in self.resource_hexes:
            h = self.hexes[hid]
            if h.owner == civ_id and h.resource:
                held.add(h.resource)
        return held

    def territory_counts(self) -> dict[str, int]:
        """Number of hexes owned per civilization id."""
        counts: dict[str, int] = {}
        for h in self.hexes:
            if h.owner is not None:
                counts[h.owner] = counts.get(h.owner, 0) + 1
        return counts

