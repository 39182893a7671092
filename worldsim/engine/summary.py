"""Periodic world summary: who leads, who fights, who expands."""

from typing import Callable, Optional

from ..models.civilization import Civilization
from ..models.world import WorldState, WorldSummary


def _leader(civs: list[Civilization], key: Callable[[Civilization], float]) -> Optional[str]:
    # max() keeps the first of equal values, so ties go to preset order
    if not civs:
        return None
    return max(civs, key=key).id


def build_summary(world: WorldState) -> WorldSummary:
    """Digest the current world into structured headline facts."""
    civs = world.civilizations
    colonizers = []
    for colony in world.colonizations:
        if colony.civ_id not in colonizers:
            colonizers.append(colony.civ_id)

    first_war = (world.wars[0].a, world.wars[0].b) if world.wars else None
    return WorldSummary(
        tick=world.tick,
        prosperity_leader=_leader(civs, lambda c: c.prosperity),
        treasury_leader=_leader(civs, lambda c: c.treasury),
        trade_leader=_leader(civs, lambda c: c.last_trade_volume),
        innovation_leader=_leader(civs, lambda c: c.innovation),
        stability_leader=_leader(civs, lambda c: c.stability),
        pressure_leader=_leader(civs, lambda c: c.external_pressure),
        first_war=first_war,
        colonizers=colonizers,
        blocked_routes=sum(1 for r in world.routes if r.blocked),
    )
