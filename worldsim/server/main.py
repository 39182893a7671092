"""FastAPI server for the world simulator.

Provides HTTP/WebSocket API for the browser map client: create worlds,
advance ticks, inspect hexes and civilizations, and drive the external
mutators (attribute sliders, settings, forced war/peace/colonization).
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from ..engine import overrides
from ..engine.presets import WorldConfigError
from ..engine.snapshots import (
    civ_snapshot,
    colonizations_snapshot,
    event_log_snapshot,
    hex_snapshot,
    relation_snapshot,
    routes_snapshot,
    wars_snapshot,
)
from ..models.world import WorldSettings
from ..utils.serialization import StateImportError, export_world
from .schemas.requests import (
    ColonizationRequest,
    CreateWorldRequest,
    ImportWorldRequest,
    PairRequest,
    SetAttributeRequest,
    TickRequest,
    UpdateSettingsRequest,
)
from .schemas.responses import (
    ActionResponse,
    CreateWorldResponse,
    ExportResponse,
    TickResponse,
    WorldStateResponse,
)
from .session import WorldSession, WorldSessionManager

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Global session manager
sessions = WorldSessionManager()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown."""
    logger.info("World simulator server starting...")
    yield
    logger.info("World simulator server shutting down...")
    await sessions.cleanup_all()


app = FastAPI(
    title="Alternate World Simulator API",
    description="Deterministic hex-world simulation of rival civilizations",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _get_session(world_id: str) -> WorldSession:
    session = sessions.get(world_id)
    if not session:
        raise HTTPException(status_code=404, detail="World not found")
    return session


def _bad_request(e: Exception) -> HTTPException:
    return HTTPException(status_code=400, detail=str(e))


def _not_found(e: KeyError) -> HTTPException:
    # KeyError wraps its message in quotes
    detail = e.args[0] if e.args else "Not found"
    return HTTPException(status_code=404, detail=str(detail))


# ============================================
# API ENDPOINTS
# ============================================


@app.get("/api")
async def api_root():
    """API root endpoint - server health check."""
    return {
        "service": "Alternate World Simulator",
        "status": "operational",
        "activeWorlds": len(sessions.sessions),
    }


@app.post("/api/worlds", response_model=CreateWorldResponse)
async def create_world(request: CreateWorldRequest):
    """Create a new world.

    Example:
        POST /api/worlds
        {"preset": "we1914", "seedText": "719-SUNDER", "randomness": 0.2}
    """
    try:
        options = {}
        if request.randomness is not None:
            options["randomness"] = request.randomness
        if request.allianceGuarantee is not None:
            options["alliance_guarantee"] = request.allianceGuarantee
        settings = WorldSettings(**options)
        session = await sessions.create_session(
            preset=request.preset, seed_text=request.seedText, settings=settings
        )
    except WorldConfigError as e:
        raise _bad_request(e)
    except Exception as e:
        logger.error(f"Failed to create world: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to create world: {str(e)}")

    return CreateWorldResponse(
        worldId=session.id,
        preset=session.world.preset,
        seedText=session.world.seed_text,
        tick=session.world.tick,
        state=session.get_state(),
    )


@app.post("/api/worlds/import", response_model=CreateWorldResponse)
async def import_world_endpoint(request: ImportWorldRequest):
    """Load an exported world document into a new session."""
    try:
        session = await sessions.import_session(request.state)
    except StateImportError as e:
        raise _bad_request(e)

    return CreateWorldResponse(
        worldId=session.id,
        preset=session.world.preset,
        seedText=session.world.seed_text,
        tick=session.world.tick,
        state=session.get_state(),
    )


@app.get("/api/worlds/{world_id}/state", response_model=WorldStateResponse)
async def get_world_state(world_id: str, log_limit: int = 50):
    session = _get_session(world_id)
    return WorldStateResponse(worldId=world_id, tick=session.world.tick, state=session.get_state(log_limit))


@app.post("/api/worlds/{world_id}/tick", response_model=TickResponse)
async def advance_world(world_id: str, request: TickRequest):
    """Advance the world by one or more ticks and broadcast the results.

    Example:
        POST /api/worlds/world-abc123/tick
        {"count": 10}
    """
    session = _get_session(world_id)
    try:
        results = await session.run_ticks(request.count)
    except Exception as e:
        logger.error(f"World {world_id}: Tick failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to advance world: {str(e)}")

    return TickResponse(worldId=world_id, tick=session.world.tick, results=results, state=session.get_state())


@app.get("/api/worlds/{world_id}/hexes/{hex_id}")
async def get_hex(world_id: str, hex_id: int):
    session = _get_session(world_id)
    try:
        return hex_snapshot(session.world, hex_id)
    except KeyError as e:
        raise _not_found(e)


@app.get("/api/worlds/{world_id}/civilizations/{civ_id}")
async def get_civilization(world_id: str, civ_id: str):
    session = _get_session(world_id)
    try:
        return civ_snapshot(session.world, civ_id)
    except KeyError as e:
        raise _not_found(e)


@app.get("/api/worlds/{world_id}/relations/{a}/{b}")
async def get_relation(world_id: str, a: str, b: str):
    session = _get_session(world_id)
    try:
        return relation_snapshot(session.world, a, b)
    except KeyError as e:
        raise _not_found(e)


@app.get("/api/worlds/{world_id}/routes")
async def get_routes(world_id: str):
    return routes_snapshot(_get_session(world_id).world)


@app.get("/api/worlds/{world_id}/wars")
async def get_wars(world_id: str):
    return wars_snapshot(_get_session(world_id).world)


@app.get("/api/worlds/{world_id}/colonizations")
async def get_colonizations(world_id: str):
    return colonizations_snapshot(_get_session(world_id).world)


@app.get("/api/worlds/{world_id}/log")
async def get_event_log(world_id: str, limit: int | None = None):
    return event_log_snapshot(_get_session(world_id).world, limit)


# ============================================
# MUTATORS
# ============================================


@app.put("/api/worlds/{world_id}/civilizations/{civ_id}/attributes", response_model=ActionResponse)
async def set_civ_attribute(world_id: str, civ_id: str, request: SetAttributeRequest):
    """Set a pillar, sector or treasury value (slider binding).

    Example:
        PUT /api/worlds/world-abc123/civilizations/TES/attributes
        {"path": "pillars.religion", "value": 80}
    """
    session = _get_session(world_id)
    async with session.lock:
        try:
            stored = overrides.set_attribute(session.world, civ_id, request.path, request.value)
        except KeyError as e:
            raise _not_found(e)
        except ValueError as e:
            raise _bad_request(e)

    return ActionResponse(
        changed=True,
        message=f"{civ_id} {request.path} set to {stored:g}",
        data=civ_snapshot(session.world, civ_id),
    )


@app.patch("/api/worlds/{world_id}/settings", response_model=ActionResponse)
async def update_settings(world_id: str, request: UpdateSettingsRequest):
    session = _get_session(world_id)
    world = session.world
    async with session.lock:
        try:
            if request.randomness is not None:
                overrides.set_randomness(world, request.randomness)
            if request.allianceGuarantee is not None:
                overrides.set_alliance_guarantee(world, request.allianceGuarantee)
            if request.allyPressureThreshold is not None:
                overrides.set_ally_pressure_threshold(world, request.allyPressureThreshold)
        except ValueError as e:
            raise _bad_request(e)

    return ActionResponse(changed=True, message="Settings updated", data=asdict(world.settings))


@app.post("/api/worlds/{world_id}/wars", response_model=ActionResponse)
async def force_war(world_id: str, request: PairRequest):
    session = _get_session(world_id)
    async with session.lock:
        try:
            changed = overrides.force_war(session.world, request.a, request.b)
        except KeyError as e:
            raise _not_found(e)
        except ValueError as e:
            raise _bad_request(e)

    message = f"{request.a} and {request.b} are at war" if changed else "Already at war"
    return ActionResponse(changed=changed, message=message, data=relation_snapshot(session.world, request.a, request.b))


@app.post("/api/worlds/{world_id}/peace", response_model=ActionResponse)
async def force_peace(world_id: str, request: PairRequest):
    session = _get_session(world_id)
    async with session.lock:
        try:
            changed = overrides.force_peace(session.world, request.a, request.b)
        except KeyError as e:
            raise _not_found(e)
        except ValueError as e:
            raise _bad_request(e)

    message = f"{request.a} and {request.b} signed a truce" if changed else "Not at war"
    return ActionResponse(changed=changed, message=message, data=relation_snapshot(session.world, request.a, request.b))


@app.post("/api/worlds/{world_id}/colonizations", response_model=ActionResponse)
async def force_colonization(world_id: str, request: ColonizationRequest):
    session = _get_session(world_id)
    async with session.lock:
        try:
            overrides.force_colonization(session.world, request.civId, request.hexId, cost=request.cost)
        except KeyError as e:
            raise _not_found(e)
        except ValueError as e:
            raise _bad_request(e)

    return ActionResponse(
        changed=True,
        message=f"{request.civId} expedition to hex {request.hexId}",
        data={"colonizations": colonizations_snapshot(session.world)},
    )


@app.get("/api/worlds/{world_id}/export", response_model=ExportResponse)
async def export_world_endpoint(world_id: str):
    session = _get_session(world_id)
    return ExportResponse(worldId=world_id, state=export_world(session.world))


@app.delete("/api/worlds/{world_id}")
async def delete_world(world_id: str):
    if sessions.delete(world_id):
        return {"message": f"World {world_id} deleted"}
    raise HTTPException(status_code=404, detail="World not found")


# ============================================
# WEBSOCKET ENDPOINT
# ============================================


@app.websocket("/ws/worlds/{world_id}")
async def websocket_endpoint(websocket: WebSocket, world_id: str):
    """WebSocket connection for real-time world updates.

    Clients receive:
    - CONNECTED: Initial connection confirmation with the full snapshot
    - TICK: Results of every tick batch
    - PONG: Reply to a PING keepalive
    """
    session = sessions.get(world_id)
    if not session:
        await websocket.close(code=1008, reason="World not found")
        return

    await websocket.accept()
    session.add_connection(websocket)

    try:
        await websocket.send_json(
            {
                "type": "CONNECTED",
                "worldId": world_id,
                "tick": session.world.tick,
                "state": session.get_state(),
            }
        )

        while True:
            data = await websocket.receive_json()
            if data.get("type") == "PING":
                await websocket.send_json({"type": "PONG"})

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected from world {world_id}")
    except Exception as e:
        logger.error(f"WebSocket error in world {world_id}: {e}", exc_info=True)
    finally:
        session.remove_connection(websocket)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
