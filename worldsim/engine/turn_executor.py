"""Main tick orchestrator.

This module coordinates the sub-operations of one tick in a fixed order:
1. Modifier expiry (and multi-tick treasury payouts)
2. Random events
3. Colonization launch and progress
4. Border battles
5. Route recomputation (when flagged dirty) and blockade detection
6. Trade throughput
7. Derived-index recompute
8. Periodic checks: world summary, alliance cascade, truce expiry, raiders

Routes left dirty by the periodic phase are rebuilt before the tick returns.

The tick counter increments before phase 1, so everything a tick logs is
stamped with the new tick number.

Architecture:
Each phase is an independent method returning the world and its events.
`execute_tick` composes them; tests can run single phases.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..models.trade_route import TradeRoute
from ..models.world import WorldState, WorldSummary
from ..utils.constants import ALLIANCE_CHECK_EVERY, SUMMARY_EVERY
from .colonization import ColonyEvent, launch_expeditions, progress_colonizations
from .combat import BattleEvent, process_battles
from .diplomacy import check_alliance_cascade, expire_truces
from .events import FiredEvent, apply_modifiers, check_raider_pressure, run_events
from .indices import navy_snapshot, recalc_derived
from .summary import build_summary
from .trade import compute_routes, refresh_routes, update_blockades, update_trade

logger = logging.getLogger(__name__)


@dataclass
class TickResults:
    """Everything notable that happened during one tick."""

    tick: int
    fired_events: list[FiredEvent] = field(default_factory=list)
    colony_events: list[ColonyEvent] = field(default_factory=list)
    battles: list[BattleEvent] = field(default_factory=list)
    routes_recomputed: bool = False
    blocked_routes: int = 0
    trade_volumes: dict[str, float] = field(default_factory=dict)
    joined_wars: list[tuple[str, str]] = field(default_factory=list)
    expired_truces: list[tuple[str, str]] = field(default_factory=list)
    raided_route: Optional[TradeRoute] = None
    summary: Optional[WorldSummary] = None


class TickExecutor:
    """Runs discrete simulation ticks.

    Each phase is an independent method that can be tested separately.
    """

    # =========================================================================
    # INDEPENDENT PHASE METHODS
    # =========================================================================

    def execute_phase_modifiers(self, world: WorldState) -> tuple[WorldState, int]:
        """Drop expired modifiers; returns the number still active."""
        return world, apply_modifiers(world)

    def execute_phase_events(self, world: WorldState) -> tuple[WorldState, list[FiredEvent]]:
        return world, run_events(world)

    def execute_phase_colonization(self, world: WorldState) -> tuple[WorldState, list[ColonyEvent]]:
        """Launch new expeditions, then advance all of them (new ones included)."""
        events = launch_expeditions(world)
        events.extend(progress_colonizations(world))
        return world, events

    def execute_phase_battles(self, world: WorldState) -> tuple[WorldState, list[BattleEvent]]:
        return world, process_battles(world)

    def execute_phase_blockades(self, world: WorldState) -> tuple[WorldState, bool, int]:
        """Rebuild routes if territory or war state changed, then detect blockades.

        Returns:
            Tuple of (world, whether routes were rebuilt, blocked route count)
        """
        recomputed = False
        if world.routes_dirty:
            compute_routes(world)
            recomputed = True
        blocked = update_blockades(world, navy_snapshot(world))
        return world, recomputed, blocked

    def execute_phase_trade(self, world: WorldState) -> tuple[WorldState, dict[str, float]]:
        return world, update_trade(world, navy_snapshot(world))

    def execute_phase_derived(self, world: WorldState) -> WorldState:
        recalc_derived(world)
        return world

    def execute_phase_periodic(self, world: WorldState, results: TickResults) -> WorldState:
        """Run the checks that do not happen every tick.

        Args:
            world: Current world state
            results: Tick results to fill in

        Returns:
            Updated world state
        """
        if world.tick % SUMMARY_EVERY == 0:
            world.summary = build_summary(world)
            results.summary = world.summary

        if world.settings.alliance_guarantee and world.tick % ALLIANCE_CHECK_EVERY == 0:
            results.joined_wars = check_alliance_cascade(world)

        results.expired_truces = expire_truces(world)
        results.raided_route = check_raider_pressure(world)
        return world

    # =========================================================================
    # ORCHESTRATION
    # =========================================================================

    def execute_tick(self, world: WorldState) -> tuple[WorldState, TickResults]:
        """Advance the world by exactly one tick.

        Args:
            world: World to advance (mutated in place)

        Returns:
            Tuple of (updated world, results of the tick)
        """
        world.tick += 1
        results = TickResults(tick=world.tick)

        world, _ = self.execute_phase_modifiers(world)
        world, results.fired_events = self.execute_phase_events(world)
        world, results.colony_events = self.execute_phase_colonization(world)
        world, results.battles = self.execute_phase_battles(world)
        world, results.routes_recomputed, results.blocked_routes = self.execute_phase_blockades(world)
        world, results.trade_volumes = self.execute_phase_trade(world)
        world = self.execute_phase_derived(world)
        world = self.execute_phase_periodic(world, results)
        # Wars joined in the periodic phase must not leave stale routes behind
        if refresh_routes(world):
            results.routes_recomputed = True
            results.blocked_routes = sum(1 for r in world.routes if r.blocked)

        logger.debug(
            f"Tick {world.tick}: {len(results.fired_events)} events, "
            f"{len(results.battles)} captures, {results.blocked_routes} blocked routes"
        )
        return world, results


def tick(world: WorldState) -> WorldState:
    """Advance one tick with a default executor."""
    world, _ = TickExecutor().execute_tick(world)
    return world
