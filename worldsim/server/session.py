"""World session management for the browser client."""

import asyncio
import logging
import uuid
from dataclasses import asdict, dataclass, field
from typing import Any, Optional

from fastapi import WebSocket

from ..engine.snapshots import world_snapshot
from ..engine.turn_executor import TickExecutor, TickResults
from ..engine.world_builder import initialize
from ..models.world import WorldSettings, WorldState
from ..utils.constants import DEFAULT_PRESET
from ..utils.serialization import import_world

logger = logging.getLogger(__name__)


@dataclass
class WorldSession:
    """One running world and the clients watching it.

    Ticks and mutators run under the session lock so concurrent requests
    never interleave inside a tick.
    """

    id: str
    world: WorldState
    executor: TickExecutor = field(default_factory=TickExecutor)
    connections: list[WebSocket] = field(default_factory=list)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def get_state(self, log_limit: int = 50) -> dict:
        """Full UI snapshot of the world."""
        return world_snapshot(self.world, log_limit=log_limit)

    async def run_ticks(self, count: int = 1) -> list[dict]:
        """Advance the world and notify connected clients.

        Args:
            count: Number of ticks to run

        Returns:
            Serialized results, one entry per tick
        """
        async with self.lock:
            results = []
            for _ in range(count):
                self.world, tick_results = self.executor.execute_tick(self.world)
                results.append(self._serialize_results(tick_results))

        await self.broadcast({"type": "TICK", "tick": self.world.tick, "results": results})
        return results

    def _serialize_results(self, results: TickResults) -> dict[str, Any]:
        raided = results.raided_route
        return {
            "tick": results.tick,
            "events": [asdict(e) for e in results.fired_events],
            "colonies": [asdict(e) for e in results.colony_events],
            "battles": [asdict(b) for b in results.battles],
            "routesRecomputed": results.routes_recomputed,
            "blockedRoutes": results.blocked_routes,
            "tradeVolumes": dict(results.trade_volumes),
            "joinedWars": [list(pair) for pair in results.joined_wars],
            "expiredTruces": [list(pair) for pair in results.expired_truces],
            "raidedRoute": (
                {"type": raided.type.value, "origin": raided.origin, "destination": raided.destination}
                if raided is not None
                else None
            ),
            "summary": asdict(results.summary) if results.summary else None,
        }

    async def broadcast(self, message: dict):
        """Send message to all connected WebSocket clients.

        Args:
            message: Dictionary to send as JSON
        """
        disconnected = []
        for ws in self.connections:
            try:
                await ws.send_json(message)
            except Exception as e:
                logger.warning(f"Failed to send to WebSocket: {e}")
                disconnected.append(ws)

        for ws in disconnected:
            self.connections.remove(ws)

    def add_connection(self, websocket: WebSocket):
        self.connections.append(websocket)
        logger.info(f"WebSocket connected to world {self.id} ({len(self.connections)} total)")

    def remove_connection(self, websocket: WebSocket):
        if websocket in self.connections:
            self.connections.remove(websocket)
            logger.info(f"WebSocket disconnected from world {self.id} ({len(self.connections)} remaining)")


class WorldSessionManager:
    """Manages all active world sessions (in memory)."""

    def __init__(self):
        self.sessions: dict[str, WorldSession] = {}

    def _register(self, world: WorldState) -> WorldSession:
        world_id = f"world-{uuid.uuid4().hex[:8]}"
        session = WorldSession(id=world_id, world=world)
        self.sessions[world_id] = session
        return session

    async def create_session(
        self,
        preset: str = DEFAULT_PRESET,
        seed_text: Optional[str] = None,
        settings: Optional[WorldSettings] = None,
    ) -> WorldSession:
        """Create a fresh world for a preset.

        Args:
            preset: Preset id
            seed_text: Seed string; a random one is generated when omitted
            settings: Runtime settings (defaults when omitted)

        Returns:
            Newly created WorldSession

        Raises:
            WorldConfigError: On an unknown preset or malformed seed
        """
        if seed_text is None:
            seed_text = uuid.uuid4().hex[:8].upper()

        world = initialize(preset, seed_text, settings=settings)
        session = self._register(world)
        logger.info(f"Created world {session.id}: preset={preset}, seed={seed_text!r}")
        return session

    async def import_session(self, data: dict) -> WorldSession:
        """Create a session from an exported world document.

        Raises:
            StateImportError: If the document is malformed or inconsistent
        """
        world = import_world(data)
        session = self._register(world)
        logger.info(f"Imported world {session.id} at tick {world.tick}")
        return session

    def get(self, world_id: str) -> WorldSession | None:
        return self.sessions.get(world_id)

    def delete(self, world_id: str) -> bool:
        """Delete a world session.

        Returns:
            True if deleted, False if not found
        """
        if world_id in self.sessions:
            del self.sessions[world_id]
            logger.info(f"Deleted world {world_id}")
            return True
        return False

    async def cleanup_all(self):
        """Clean up all sessions (called on shutdown)."""
        logger.info(f"Cleaning up {len(self.sessions)} world sessions")
        self.sessions.clear()
