"""World metrics calculator for analyzing simulation runs.

This module condenses a world into per-tick numbers across several
dimensions:
- Civilization indices (prosperity, stability, innovation, soft power)
- Economy (treasury, trade volume)
- Military (effective army and navy)
- Territory (hex counts, resource holdings)
- Conflict (active wars, blocked routes, colonizations)
"""

from ..engine.indices import effective_army, effective_navy, is_at_war
from ..models.trade_route import BlockCause
from ..models.world import WorldState


def calculate_world_metrics(world: WorldState) -> dict:
    """Calculate metrics for every civilization at the current tick.

    Args:
        world: The world state

    Returns:
        Dictionary with the tick, one entry per civilization under
        "civilizations", and world-level counters under "world"
    """
    territory = world.hex_map.territory_counts()
    return {
        "tick": world.tick,
        "seed": world.seed_text,
        "preset": world.preset,
        "civilizations": {
            civ.id: _calculate_civ_metrics(world, civ.id, territory) for civ in world.civilizations
        },
        "world": _calculate_world_counters(world),
    }


def _calculate_civ_metrics(world: WorldState, civ_id: str, territory: dict[str, int]) -> dict:
    civ = world.civ(civ_id)
    resources = world.hex_map.owned_resources(civ_id)
    return {
        "prosperity": round(civ.prosperity, 3),
        "stability": round(civ.stability, 3),
        "innovation": round(civ.innovation, 3),
        "soft_power": round(civ.soft_power, 3),
        "treasury": round(civ.treasury, 3),
        "war_exhaustion": round(civ.war_exhaustion, 3),
        "trade_volume": round(civ.last_trade_volume, 4),
        "army": round(effective_army(world, civ, resources), 4),
        "navy": round(effective_navy(world, civ, resources), 4),
        "territory": territory.get(civ_id, 0),
        "resources": sorted(resources),
        "at_war": is_at_war(world, civ_id),
    }


def _calculate_world_counters(world: WorldState) -> dict:
    blocked = [r for r in world.routes if r.blocked]
    return {
        "wars": len(world.wars),
        "routes": len(world.routes),
        "blocked_routes": len(blocked),
        "strait_blockades": sum(1 for r in blocked if r.block_cause is BlockCause.STRAIT),
        "colonizations": len(world.colonizations),
        "colonizable": len(world.hex_map.colonizable),
        "modifiers": len(world.modifiers),
    }


def territory_leader(world: WorldState) -> str | None:
    """Civilization holding the most hexes (first in preset order on ties)."""
    counts = world.hex_map.territory_counts()
    best = None
    for civ in world.civilizations:
        if best is None or counts.get(civ.id, 0) > counts.get(best, 0):
            best = civ.id
    return best
