#!/usr/bin/env python3
"""Alternate World Simulator - command-line runner.

Builds (or loads) a world, advances it a fixed number of ticks and prints
a short standings report. Optionally saves the final state and writes a
JSONL metrics log with one line per tick.
"""

import argparse
import logging
import sys

from worldsim.analysis import TickLogger, territory_leader
from worldsim.engine import PRESETS, TickExecutor, WorldConfigError, initialize
from worldsim.models.world import WorldSettings, WorldState
from worldsim.utils.constants import DEFAULT_PRESET, DEFAULT_SEED_TEXT
from worldsim.utils.serialization import StateImportError, load_world, save_world

logger = logging.getLogger("sim")


def run(world: WorldState, ticks: int, tick_logger: TickLogger | None = None) -> WorldState:
    """Advance a world, logging metrics after every tick when requested."""
    executor = TickExecutor()
    for _ in range(ticks):
        world, results = executor.execute_tick(world)
        for battle in results.battles:
            logger.debug(f"Tick {results.tick}: {battle.winner} took hex {battle.hex_id} from {battle.loser}")
        if tick_logger is not None:
            tick_logger.log_tick(world, results)
    return world


def print_report(world: WorldState) -> None:
    territory = world.hex_map.territory_counts()
    print(f"\nTick {world.tick} - preset {world.preset}, seed {world.seed_text!r}")
    print(f"{'Civ':<5}{'Hexes':>7}{'Prosp':>8}{'Stab':>8}{'Innov':>8}{'Treasury':>10}")
    for civ in world.civilizations:
        print(
            f"{civ.id:<5}{territory.get(civ.id, 0):>7}{civ.prosperity:>8.1f}"
            f"{civ.stability:>8.1f}{civ.innovation:>8.1f}{civ.treasury:>10.0f}"
        )
    wars = ", ".join(f"{w.a}-{w.b}" for w in world.wars) or "none"
    print(f"Active wars: {wars}")
    print(f"Blocked routes: {sum(1 for r in world.routes if r.blocked)} of {len(world.routes)}")
    print(f"Territory leader: {territory_leader(world)}")
    for entry in world.event_log[-5:]:
        print(f"  [{entry.tick}] {entry.title}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Alternate World Simulator - deterministic hex-world geopolitics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                   # Tess preset, default seed, 100 ticks
  %(prog)s --preset we1914 --seed 1914-AUG   # Another preset and seed
  %(prog)s --ticks 500 --save saves/w.json   # Save the final state
  %(prog)s --load saves/w.json --ticks 50    # Continue a saved world
  %(prog)s --log-dir logs                    # Write per-tick metrics (JSONL)
        """,
    )
    parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default=DEFAULT_PRESET,
        help=f"World preset (default: {DEFAULT_PRESET})",
    )
    parser.add_argument(
        "--seed",
        type=str,
        default=DEFAULT_SEED_TEXT,
        help=f"Seed text; the whole history derives from it (default: {DEFAULT_SEED_TEXT})",
    )
    parser.add_argument("--ticks", type=int, default=100, help="Number of ticks to run (default: 100)")
    parser.add_argument("--randomness", type=float, default=None, help="Global randomness 0-1")
    parser.add_argument(
        "--no-alliance-guarantee",
        action="store_true",
        help="Allies never join wars automatically",
    )
    parser.add_argument("--load", type=str, metavar="FILE", help="Load world from JSON file")
    parser.add_argument("--save", type=str, metavar="FILE", help="Save world to JSON file after the run")
    parser.add_argument("--log-dir", type=str, default=None, help="Directory for the JSONL metrics log")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    if args.ticks < 0:
        print("Error: --ticks must be >= 0")
        sys.exit(1)

    if args.load:
        print(f"Loading world from {args.load}...")
        try:
            world = load_world(args.load)
        except FileNotFoundError:
            print(f"Error: File {args.load} not found.")
            sys.exit(1)
        except StateImportError as e:
            print(f"Error loading world: {e}")
            sys.exit(1)
    else:
        try:
            overrides = {"alliance_guarantee": not args.no_alliance_guarantee}
            if args.randomness is not None:
                overrides["randomness"] = args.randomness
            settings = WorldSettings(**overrides)
            world = initialize(args.preset, args.seed, settings=settings)
        except (WorldConfigError, ValueError) as e:
            print(f"Error: {e}")
            sys.exit(1)

    tick_logger = None
    if args.log_dir:
        try:
            tick_logger = TickLogger(world, output_dir=args.log_dir)
        except ValueError as e:
            print(f"Error: {e}")
            sys.exit(1)
        if tick_logger.last_tick > world.tick:
            print(f"Error: {tick_logger.log_path} already runs to tick {tick_logger.last_tick}")
            tick_logger.close()
            sys.exit(1)
        print(f"Writing metrics to {tick_logger.log_path}")

    try:
        world = run(world, args.ticks, tick_logger)
    except KeyboardInterrupt:
        print("\n\nRun interrupted by user.")
    finally:
        if tick_logger is not None:
            tick_logger.close()

    print_report(world)

    if args.save:
        save_world(world, args.save)
        print(f"\nWorld saved to {args.save}")


if __name__ == "__main__":
    main()
