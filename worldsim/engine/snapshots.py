"""Read accessors: plain-dict snapshots of world state for the UI layer.

Snapshots are JSON-ready and use camelCase keys, matching what the browser
client expects. They never expose live model objects.
"""

from dataclasses import fields
from typing import Any, Optional

from ..models.civilization import Civilization
from ..models.relation import relation_key
from ..models.world import WorldState
from .diplomacy import get_relation
from .indices import effective_army, effective_navy, is_at_war


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _group(obj) -> dict[str, float]:
    return {_camel(f.name): getattr(obj, f.name) for f in fields(obj)}


def hex_snapshot(world: WorldState, hex_id: int) -> dict[str, Any]:
    """Snapshot of one hex.

    Raises:
        KeyError: If the hex id is outside the grid
    """
    h = world.hex_map.hex(hex_id)
    return {
        "id": h.id,
        "q": h.q,
        "r": h.r,
        "type": h.type.value,
        "owner": h.owner,
        "resource": h.resource,
        "capital": h.capital,
        "strait": h.strait,
        "colonizable": h.id in world.hex_map.colonizable,
    }


def map_snapshot(world: WorldState) -> dict[str, Any]:
    """Compact grid: per-hex arrays in id order."""
    hex_map = world.hex_map
    return {
        "width": hex_map.width,
        "height": hex_map.height,
        "types": [h.type.value for h in hex_map.hexes],
        "owners": [h.owner for h in hex_map.hexes],
        "resources": {str(hid): hex_map.hexes[hid].resource for hid in hex_map.resource_hexes},
        "capitals": dict(hex_map.capitals),
        "straits": sorted(hex_map.straits),
    }


def _civ_dict(world: WorldState, civ: Civilization, territory: dict[str, int]) -> dict[str, Any]:
    return {
        "id": civ.id,
        "name": civ.name,
        "color": civ.color,
        "motto": civ.motto,
        "religionName": civ.religion_name,
        "governmentName": civ.government_name,
        "pillars": _group(civ.pillars),
        "sectors": _group(civ.sectors),
        "prosperity": civ.prosperity,
        "stability": civ.stability,
        "innovation": civ.innovation,
        "softPower": civ.soft_power,
        "treasury": civ.treasury,
        "warExhaustion": civ.war_exhaustion,
        "lastTradeVolume": civ.last_trade_volume,
        "externalPressure": civ.external_pressure,
        "eventIntensity": civ.event_intensity,
        "capital": world.hex_map.capitals.get(civ.id),
        "territory": territory.get(civ.id, 0),
        "effectiveArmy": effective_army(world, civ),
        "effectiveNavy": effective_navy(world, civ),
        "atWar": is_at_war(world, civ.id),
    }


def civ_snapshot(world: WorldState, civ_id: str) -> dict[str, Any]:
    """Snapshot of one civilization: inputs, derived indices and strength.

    Raises:
        KeyError: If no civilization has that id
    """
    civ = world.civ(civ_id)
    return _civ_dict(world, civ, world.hex_map.territory_counts())


def civs_snapshot(world: WorldState) -> list[dict[str, Any]]:
    territory = world.hex_map.territory_counts()
    return [_civ_dict(world, civ, territory) for civ in world.civilizations]


def relation_snapshot(world: WorldState, a: str, b: str) -> dict[str, Any]:
    """Relation between two civilizations (symmetric).

    Raises:
        KeyError: If either civilization does not exist
    """
    world.civ(a)
    world.civ(b)
    state = get_relation(world, a, b)
    record = world.relations.get(relation_key(a, b))
    return {"a": a, "b": b, "state": state.value, "sinceTick": record.since_tick if record else 0}


def relations_snapshot(world: WorldState) -> list[dict[str, Any]]:
    return [
        {"a": a, "b": b, "state": rec.state.value, "sinceTick": rec.since_tick}
        for (a, b), rec in sorted(world.relations.items())
    ]


def routes_snapshot(world: WorldState) -> list[dict[str, Any]]:
    return [
        {
            "type": r.type.value,
            "origin": r.origin,
            "destination": r.destination,
            "path": list(r.path),
            "originOwner": r.origin_owner,
            "destinationOwner": r.destination_owner,
            "cargo": r.cargo,
            "blocked": r.blocked,
            "blockadeHex": r.blockade_hex,
            "blockCause": r.block_cause.value if r.block_cause else None,
            "throughput": r.throughput,
            "convoys": [{"position": c.position, "raided": c.raided} for c in r.convoys],
        }
        for r in world.routes
    ]


def wars_snapshot(world: WorldState) -> list[dict[str, Any]]:
    return [{"a": w.a, "b": w.b, "sinceTick": w.since_tick} for w in world.wars]


def colonizations_snapshot(world: WorldState) -> list[dict[str, Any]]:
    threshold = world.settings.colonize_ticks
    return [
        {
            "civId": c.civ_id,
            "hexId": c.hex_id,
            "progress": c.progress,
            "cost": c.cost,
            "remaining": max(threshold - c.progress, 0),
        }
        for c in world.colonizations
    ]


def event_log_snapshot(world: WorldState, limit: Optional[int] = None) -> list[dict[str, Any]]:
    """Most recent log entries, oldest first."""
    if limit is None:
        entries = world.event_log
    else:
        entries = world.event_log[-limit:] if limit > 0 else []
    return [
        {"tick": e.tick, "title": e.title, "category": e.category, "hexId": e.hex_id}
        for e in entries
    ]


def summary_snapshot(world: WorldState) -> Optional[dict[str, Any]]:
    s = world.summary
    if s is None:
        return None
    return {
        "tick": s.tick,
        "prosperityLeader": s.prosperity_leader,
        "treasuryLeader": s.treasury_leader,
        "tradeLeader": s.trade_leader,
        "innovationLeader": s.innovation_leader,
        "stabilityLeader": s.stability_leader,
        "pressureLeader": s.pressure_leader,
        "firstWar": list(s.first_war) if s.first_war else None,
        "colonizers": list(s.colonizers),
        "blockedRoutes": s.blocked_routes,
    }


def world_snapshot(world: WorldState, log_limit: int = 50) -> dict[str, Any]:
    """Everything the UI needs to redraw after a tick."""
    return {
        "tick": world.tick,
        "preset": world.preset,
        "seedText": world.seed_text,
        "outerPressureName": world.outer_pressure_name,
        "settings": {
            "randomness": world.settings.randomness,
            "allianceGuarantee": world.settings.alliance_guarantee,
            "allyPressureThreshold": world.settings.ally_pressure_threshold,
            "blockadeMargin": world.settings.blockade_margin,
            "colonizeTicks": world.settings.colonize_ticks,
            "minRouteLen": world.settings.min_route_len,
        },
        "map": map_snapshot(world),
        "civilizations": civs_snapshot(world),
        "relations": relations_snapshot(world),
        "wars": wars_snapshot(world),
        "routes": routes_snapshot(world),
        "colonizations": colonizations_snapshot(world),
        "eventLog": event_log_snapshot(world, log_limit),
        "summary": summary_snapshot(world),
    }
