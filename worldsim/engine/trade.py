"""Trade network: route computation, blockades, throughput and raids.

Routes are derived data. `compute_routes` rebuilds the whole set whenever
the world is flagged dirty (territory or war state changed); blockades are
re-evaluated every tick against a snapshot of naval strength, and each
route's throughput feeds its origin civilization's trade volume.
"""

import logging
from typing import Optional

from ..models.attributes import Attribute
from ..models.trade_route import BlockCause, Convoy, RouteBlock, RouteType, TradeRoute
from ..models.world import WorldState
from ..utils.constants import (
    BLOCKADE_PENALTY,
    BLOCKED_VOLUME_SHARE,
    CONVOY_ADVANCE_PER_TICK,
    CONVOYS_PER_ROUTE,
    DEFAULT_PARTNER_VALUE,
    LAND_BONUS_FROM_INFRA,
    RAID_BLOCK_TICKS,
    SEA_BONUS_FROM_NAVY,
    THROUGHPUT_CAP,
    TRADE_VARIANCE,
)
from .diplomacy import at_war
from .indices import clamp, navy_snapshot, value
from .pathfinding import PathMode, pathfind

logger = logging.getLogger(__name__)


def schedule_convoys(count: int = CONVOYS_PER_ROUTE) -> list[Convoy]:
    """Evenly spaced convoy markers along a route."""
    return [Convoy(position=i / count) for i in range(count)]


def _capitals_in_order(world: WorldState) -> list[tuple[str, int]]:
    capitals = world.hex_map.capitals
    return [(civ.id, capitals[civ.id]) for civ in world.civilizations if civ.id in capitals]


def _sea_leg(world: WorldState, start: int, goal: int) -> Optional[list[int]]:
    """Sea path between the first water neighbors of two land hexes."""
    hex_map = world.hex_map
    start_sea = hex_map.first_water_neighbor(start)
    goal_sea = hex_map.first_water_neighbor(goal)
    if start_sea is None or goal_sea is None:
        return None
    return pathfind(hex_map, start_sea, goal_sea, PathMode.SEA)


def compute_routes(world: WorldState) -> list[TradeRoute]:
    """Rebuild the entire route set from scratch.

    Capital-to-capital sea routes are formed for every ordered pair of
    capitals not at war. Every capital is also linked to every resource
    hex (in id order), overland when a long enough land path exists and
    otherwise by sea. Paths shorter than the minimum route length are
    dropped. Imposed blocks (raids, embargoes) carry over to the rebuilt
    route with the same key.

    Returns:
        The new route list (also stored on the world)
    """
    hex_map = world.hex_map
    min_len = world.settings.min_route_len
    carried = {r.key: r.imposed_block for r in world.routes if r.imposed_block}
    capitals = _capitals_in_order(world)
    routes: list[TradeRoute] = []

    for civ_a, cap_a in capitals:
        for civ_b, cap_b in capitals:
            if cap_a == cap_b or at_war(world, civ_a, civ_b):
                continue
            sea_path = _sea_leg(world, cap_a, cap_b)
            if sea_path and len(sea_path) >= min_len:
                routes.append(
                    TradeRoute(
                        type=RouteType.SEA,
                        origin=cap_a,
                        destination=cap_b,
                        path=[cap_a] + sea_path + [cap_b],
                        origin_owner=civ_a,
                        destination_owner=civ_b,
                        convoys=schedule_convoys(),
                    )
                )

    for civ_id, cap in capitals:
        for res_id in sorted(hex_map.resource_hexes):
            target = hex_map.hexes[res_id]
            if not target.is_land or res_id == cap:
                continue
            route_type = None
            path = pathfind(hex_map, cap, res_id, PathMode.LAND)
            if path and len(path) >= min_len:
                route_type = RouteType.LAND
            else:
                sea_path = _sea_leg(world, cap, res_id)
                if sea_path and len(sea_path) >= min_len:
                    path = [cap] + sea_path + [res_id]
                    route_type = RouteType.SEA
            if route_type is None:
                continue
            routes.append(
                TradeRoute(
                    type=route_type,
                    origin=cap,
                    destination=res_id,
                    path=path,
                    origin_owner=civ_id,
                    destination_owner=target.owner,
                    cargo=target.resource,
                    convoys=schedule_convoys(),
                )
            )

    for route in routes:
        block = carried.get(route.key)
        if block is not None and block.until_tick > world.tick:
            route.imposed_block = block
            route.set_block(block.hex_id, block.cause)

    world.routes = routes
    world.routes_dirty = False
    logger.debug(f"Tick {world.tick}: computed {len(routes)} trade routes")
    return routes


def refresh_routes(world: WorldState) -> bool:
    """Rebuild routes and blockades if the world is flagged dirty.

    Called wherever control returns to the caller (end of a tick, external
    mutators) so that no observable or exported state carries routes that
    no longer match territory and war state.

    Returns:
        True if the routes were rebuilt
    """
    if not world.routes_dirty:
        return False
    compute_routes(world)
    update_blockades(world)
    return True


def _strait_dominator(world: WorldState, strait_id: int, navy: dict[str, float]) -> Optional[str]:
    """Civilization whose navy dominates the hexes around a strait, if any."""
    hex_map = world.hex_map
    owners: list[str] = []
    for n in hex_map.neighbors[strait_id]:
        owner = hex_map.hexes[n].owner
        if owner and owner not in owners:
            owners.append(owner)

    strongest, best, second = None, 0.0, 0.0
    for owner in owners:
        strength = navy.get(owner, 0.0)
        if strength > best:
            second = best
            best = strength
            strongest = owner
        elif strength > second:
            second = strength

    if strongest is not None and best > second * world.settings.blockade_margin:
        return strongest
    return None


def update_blockades(world: WorldState, navy: Optional[dict[str, float]] = None) -> int:
    """Re-evaluate every route's blocked state.

    A sea route is blocked at the first strait on its path where a single
    civilization's navy beats the runner-up by the blockade margin, unless
    that civilization owns the route's origin. Otherwise an imposed block
    that has not yet expired applies.

    Args:
        world: World to mutate
        navy: Naval strength per civilization (snapshotted when omitted)

    Returns:
        Number of blocked routes
    """
    if navy is None:
        navy = navy_snapshot(world)
    straits = world.hex_map.straits

    blocked = 0
    for route in world.routes:
        route.clear_block()
        if route.type is RouteType.SEA:
            for hid in route.path:
                if hid not in straits:
                    continue
                dominator = _strait_dominator(world, hid, navy)
                if dominator is not None and dominator != route.origin_owner:
                    route.set_block(hid, BlockCause.STRAIT)
                    break

        if not route.blocked and route.imposed_block is not None:
            if route.imposed_block.until_tick > world.tick:
                route.set_block(route.imposed_block.hex_id, route.imposed_block.cause)
            else:
                route.imposed_block = None

        if route.blocked:
            blocked += 1
    return blocked


def throughput(world: WorldState, route: TradeRoute, navy: dict[str, float]) -> float:
    """Throughput of one route this tick, in [0, THROUGHPUT_CAP].

    Draws once from the world RNG for the variance term.
    """
    civ_a = world.civ(route.origin_owner)
    owner_b = world.hex_map.hexes[route.destination].owner
    civ_b = world.civ(owner_b) if owner_b and world.has_civ(owner_b) else None

    open_a = value(world, civ_a, Attribute.TRADE_OPENNESS)
    open_b = value(world, civ_b, Attribute.TRADE_OPENNESS) if civ_b else DEFAULT_PARTNER_VALUE
    infra_a = value(world, civ_a, Attribute.INFRASTRUCTURE)
    infra_b = value(world, civ_b, Attribute.INFRASTRUCTURE) if civ_b else DEFAULT_PARTNER_VALUE
    stab_b = civ_b.stability if civ_b else DEFAULT_PARTNER_VALUE

    base = (open_a + open_b) / 2 / 100
    infra = (infra_a + infra_b) / 2 / 100
    stability = (civ_a.stability + stab_b) / 200

    if route.type is RouteType.SEA:
        type_bonus = 1 + SEA_BONUS_FROM_NAVY * (navy.get(civ_a.id, 0.0) / 100)
    else:
        type_bonus = 1 + LAND_BONUS_FROM_INFRA * (infra_a / 100)

    penalty = BLOCKADE_PENALTY if route.blocked else 1.0
    variance = world.rng.swing(TRADE_VARIANCE * world.settings.randomness)
    return clamp(base * (0.6 * infra + 0.4 * stability) * type_bonus * penalty * variance, 0, THROUGHPUT_CAP)


def advance_convoys(route: TradeRoute) -> None:
    """Move every convoy marker forward; a marker that wraps drops its raided flag."""
    for convoy in route.convoys:
        convoy.position += CONVOY_ADVANCE_PER_TICK
        if convoy.position >= 1.0:
            convoy.position -= 1.0
            convoy.raided = False


def update_trade(world: WorldState, navy: Optional[dict[str, float]] = None) -> dict[str, float]:
    """Compute route throughput and each civilization's trade volume.

    A civilization's volume is the sum over routes it originates; blocked
    routes only contribute a fraction of their throughput.

    Returns:
        Trade volume per civilization id
    """
    if navy is None:
        navy = navy_snapshot(world)

    volumes = {civ.id: 0.0 for civ in world.civilizations}
    for route in world.routes:
        route.throughput = throughput(world, route, navy)
        share = route.throughput * BLOCKED_VOLUME_SHARE if route.blocked else route.throughput
        volumes[route.origin_owner] = volumes.get(route.origin_owner, 0.0) + share
        advance_convoys(route)

    for civ in world.civilizations:
        civ.last_trade_volume = volumes[civ.id]
    return volumes


def _preferred_block_hex(world: WorldState, route: TradeRoute) -> int:
    """First strait on the path, else the middle of the path."""
    for hid in route.path:
        if hid in world.hex_map.straits:
            return hid
    return route.path[len(route.path) // 2]


def impose_block(world: WorldState, route: TradeRoute, hex_id: int, cause: BlockCause, duration: int) -> None:
    """Block a route for `duration` ticks; survives route recomputation.

    A strait blockade already in force keeps its hex.

    Raises:
        ValueError: If the hex is not on the route's path
    """
    if hex_id not in route.path:
        raise ValueError(f"Hex {hex_id} is not on the route path")
    route.imposed_block = RouteBlock(hex_id=hex_id, until_tick=world.tick + duration, cause=cause)
    if route.block_cause is not BlockCause.STRAIT:
        route.set_block(hex_id, cause)


def embargo(world: WorldState, civ_id: str, duration: int) -> int:
    """Block every route originating from a civilization.

    Returns:
        Number of routes embargoed
    """
    count = 0
    for route in world.routes:
        if route.origin_owner == civ_id:
            impose_block(world, route, _preferred_block_hex(world, route), BlockCause.EMBARGO, duration)
            count += 1
    if count:
        logger.info(f"Tick {world.tick}: {count} routes of {civ_id} embargoed for {duration} ticks")
    return count


def raid(world: WorldState, duration: int = RAID_BLOCK_TICKS) -> Optional[TradeRoute]:
    """Raiders strike a random sea route.

    Every convoy marker on the route is flagged raided and the route is
    blocked, at its current blockade hex if it already has one, otherwise
    at a strait on its path or a random hex of its sea leg.

    Returns:
        The raided route, or None if there is no sea route
    """
    sea_routes = [r for r in world.routes if r.type is RouteType.SEA]
    if not sea_routes:
        return None

    route = world.rng.choice(sea_routes)
    for convoy in route.convoys:
        convoy.raided = True

    if route.blockade_hex is not None:
        hex_id = route.blockade_hex
    else:
        straits = [hid for hid in route.path if hid in world.hex_map.straits]
        hex_id = straits[0] if straits else world.rng.choice(route.path[1:-1])

    impose_block(world, route, hex_id, BlockCause.RAID, duration)
    logger.info(f"Tick {world.tick}: raiders disrupted the {route.origin_owner} route at hex {hex_id}")
    world.record(f"Raiders from the {world.outer_pressure_name} disrupted a convoy lane.", "outer", hex_id)
    return route
