"""World state serialization to/from JSON.

The exported document is flat and self-contained: grid dimensions and
per-hex fields, civilization records, the relation ledger, active wars,
modifiers, colonizations, event cooldowns, imposed route blocks, the event
log, settings, the seed text, RNG state and the tick counter. Derived
topology (adjacency, straits index, resource index, capitals) and the trade
routes are rebuilt on import rather than persisted; only the blocked state
of each route is carried over.
"""

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

from ..models.civilization import Civilization, Pillars, Sectors
from ..models.colonization import Colonization
from ..models.hex import Hex
from ..models.hex_map import HexMap
from ..models.modifier import Modifier
from ..models.relation import Relation, RelationState, War, relation_key
from ..models.trade_route import BlockCause, RouteBlock
from ..models.world import LogEntry, WorldSettings, WorldState
from .rng import WorldRNG

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class StateImportError(ValueError):
    """Raised when an exported document is malformed or inconsistent."""


def save_world(world: WorldState, filepath: str) -> None:
    """Save world state to a JSON file.

    Args:
        world: World state to save
        filepath: Path of the file to write (parent directories are created)

    Example:
        save_world(world, "saves/tess.json")
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(export_world(world), f, indent=2)


def load_world(filepath: str) -> WorldState:
    """Load world state from a JSON file.

    Args:
        filepath: Path to a file written by `save_world`

    Returns:
        Reconstructed world state

    Raises:
        FileNotFoundError: If the file doesn't exist
        StateImportError: If the JSON is invalid or the state is inconsistent
    """
    with open(filepath) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise StateImportError(f"Invalid JSON in {filepath}: {e}") from e
    return import_world(data)


# ----------------------------------------------------------------------
# Export
# ----------------------------------------------------------------------


def export_world(world: WorldState) -> dict[str, Any]:
    """Convert a world to a JSON-compatible dictionary.

    Args:
        world: World to serialize

    Returns:
        Dictionary representation of the full world state
    """
    hex_map = world.hex_map
    return {
        "version": FORMAT_VERSION,
        "seed_text": world.seed_text,
        "preset": world.preset,
        "tick": world.tick,
        "rng_state": world.rng.get_state(),  # Save RNG state for determinism
        "width": hex_map.width,
        "height": hex_map.height,
        "hexes": [_serialize_hex(h) for h in hex_map.hexes],
        "civilizations": [asdict(c) for c in world.civilizations],
        "relations": [
            {"a": a, "b": b, "state": rec.state.value, "since_tick": rec.since_tick}
            for (a, b), rec in sorted(world.relations.items())
        ],
        "wars": [{"a": w.a, "b": w.b, "since_tick": w.since_tick} for w in world.wars],
        "modifiers": [
            {
                "civ_id": m.civ_id,
                "attribute": m.attribute.value,
                "delta": m.delta,
                "until_tick": m.until_tick,
                "source": m.source,
            }
            for m in world.modifiers
        ],
        "colonizations": [asdict(c) for c in world.colonizations],
        "event_cooldowns": [
            {"civ_id": civ_id, "event_id": event_id, "until_tick": until}
            for (civ_id, event_id), until in world.event_cooldowns.items()
        ],
        "route_blocks": [
            {
                "type": r.type.value,
                "origin": r.origin,
                "destination": r.destination,
                "hex_id": r.imposed_block.hex_id,
                "until_tick": r.imposed_block.until_tick,
                "cause": r.imposed_block.cause.value,
            }
            for r in world.routes
            if r.imposed_block is not None and r.imposed_block.until_tick > world.tick
        ],
        "blockades": [
            {
                "type": r.type.value,
                "origin": r.origin,
                "destination": r.destination,
                "hex_id": r.blockade_hex,
                "cause": r.block_cause.value,
            }
            for r in world.routes
            if r.blocked
        ],
        "event_log": [asdict(e) for e in world.event_log],
        "settings": asdict(world.settings),
        "last_raid_tick": world.last_raid_tick,
        "outer_pressure_name": world.outer_pressure_name,
    }


def _serialize_hex(h: Hex) -> dict[str, Any]:
    return {
        "id": h.id,
        "q": h.q,
        "r": h.r,
        "type": h.type.value,
        "owner": h.owner,
        "resource": h.resource,
        "capital": h.capital,
        "strait": h.strait,
    }


# ----------------------------------------------------------------------
# Import
# ----------------------------------------------------------------------


def import_world(data: dict[str, Any]) -> WorldState:
    """Reconstruct a world from an exported dictionary.

    Every reference is checked before anything is rebuilt: hex owners,
    relation and war parties, modifier and colonization civilizations must
    all be known, and every civilization needs exactly one capital hex that
    it owns.

    Args:
        data: Dictionary produced by `export_world`

    Returns:
        Reconstructed world with derived topology and routes rebuilt

    Raises:
        StateImportError: If the document is malformed or inconsistent
    """
    try:
        world = _deserialize_world(data)
        _restore_routes(world, data)
    except StateImportError:
        raise
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        logger.warning(f"Rejected world import: {e!r}")
        raise StateImportError(f"Malformed world document: {e!r}") from e
    return world


def _restore_routes(world: WorldState, data: dict[str, Any]) -> None:
    """Rebuild routes, then put back imposed blocks and the exported blockades."""
    # Imported lazily: the engine depends on utils
    from ..engine.trade import compute_routes, update_blockades

    compute_routes(world)
    by_key = {r.key: r for r in world.routes}
    for b in data.get("route_blocks", []):
        route = by_key.get((b["type"], b["origin"], b["destination"]))
        if route is not None and b["hex_id"] in route.path:
            route.imposed_block = RouteBlock(
                hex_id=b["hex_id"], until_tick=b["until_tick"], cause=BlockCause(b["cause"])
            )

    if "blockades" not in data:
        update_blockades(world)
        return
    for b in data["blockades"]:
        route = by_key.get((b["type"], b["origin"], b["destination"]))
        if route is not None and b["hex_id"] in route.path:
            route.set_block(b["hex_id"], BlockCause(b["cause"]))


def _fail(message: str) -> None:
    logger.warning(f"Rejected world import: {message}")
    raise StateImportError(message)


def _deserialize_world(data: dict[str, Any]) -> WorldState:
    if data.get("version", FORMAT_VERSION) != FORMAT_VERSION:
        _fail(f"Unsupported format version: {data.get('version')}")

    width, height = data["width"], data["height"]
    hexes = [Hex(**h) for h in data["hexes"]]
    for index, h in enumerate(hexes):
        if h.id != index or h.id != h.q + h.r * width:
            _fail(f"Hex {h.id} is out of place (index {index}, coordinates {h.q},{h.r})")
    hex_map = HexMap(width=width, height=height, hexes=hexes)
    if len(hexes) != width * height:
        _fail(f"Expected {width * height} hexes, got {len(hexes)}")

    civs = [_deserialize_civilization(c) for c in data["civilizations"]]
    civ_ids = [c.id for c in civs]
    known = set(civ_ids)
    if len(known) != len(civ_ids):
        _fail(f"Duplicate civilization ids: {civ_ids}")

    capitals: dict[str, list[int]] = {cid: [] for cid in civ_ids}
    for h in hexes:
        if h.owner is not None and h.owner not in known:
            _fail(f"Hex {h.id} is owned by unknown civilization {h.owner!r}")
        if h.capital:
            capitals[h.owner].append(h.id)
    for cid, caps in capitals.items():
        if len(caps) != 1:
            _fail(f"Civilization {cid} must own exactly one capital hex, found {caps}")

    relations = {}
    for rec in data.get("relations", []):
        _check_pair(known, rec["a"], rec["b"], "relation")
        relations[relation_key(rec["a"], rec["b"])] = Relation(state=rec["state"], since_tick=rec["since_tick"])

    wars = []
    for w in data.get("wars", []):
        _check_pair(known, w["a"], w["b"], "war")
        wars.append(War(a=w["a"], b=w["b"], since_tick=w["since_tick"]))

    modifiers = []
    for m in data.get("modifiers", []):
        if m["civ_id"] not in known:
            _fail(f"Modifier targets unknown civilization {m['civ_id']!r}")
        modifiers.append(Modifier(**m))

    colonizations = []
    for c in data.get("colonizations", []):
        colony = Colonization(**c)
        if colony.civ_id not in known:
            _fail(f"Colonization by unknown civilization {colony.civ_id!r}")
        target = hex_map.hex(colony.hex_id)
        if not target.is_land or target.owner is not None:
            _fail(f"Colonization target {colony.hex_id} is not unowned land")
        colonizations.append(colony)

    cooldowns = {}
    for cd in data.get("event_cooldowns", []):
        if cd["civ_id"] not in known:
            _fail(f"Event cooldown for unknown civilization {cd['civ_id']!r}")
        cooldowns[(cd["civ_id"], cd["event_id"])] = cd["until_tick"]

    hex_map.rebuild_indexes()
    hex_map.reset_colonizable(reserved=[c.hex_id for c in colonizations])

    rng = WorldRNG(data["seed_text"])
    rng.set_state(data["rng_state"])

    world = WorldState(
        seed_text=data["seed_text"],
        preset=data["preset"],
        tick=data["tick"],
        hex_map=hex_map,
        civilizations=civs,
        relations=relations,
        wars=wars,
        colonizations=colonizations,
        modifiers=modifiers,
        event_cooldowns=cooldowns,
        event_log=[LogEntry(**e) for e in data.get("event_log", [])],
        last_raid_tick=data.get("last_raid_tick", 0),
        settings=WorldSettings(**data.get("settings", {})),
        outer_pressure_name=data.get("outer_pressure_name", "Outer Shoals"),
        rng=rng,
    )
    # Wars and relations must agree
    for w in wars:
        rec = relations.get(relation_key(w.a, w.b))
        if rec is None or rec.state is not RelationState.WAR:
            _fail(f"War between {w.a} and {w.b} has no matching war relation")
    return world


def _check_pair(known: set[str], a: str, b: str, what: str) -> None:
    if a not in known or b not in known:
        _fail(f"{what.capitalize()} references unknown civilization: {a!r}/{b!r}")
    if a == b:
        _fail(f"{what.capitalize()} pairs {a!r} with itself")


def _deserialize_civilization(data: dict[str, Any]) -> Civilization:
    fields = dict(data)
    fields["pillars"] = Pillars(**data["pillars"])
    fields["sectors"] = Sectors(**data["sectors"])
    return Civilization(**fields)
