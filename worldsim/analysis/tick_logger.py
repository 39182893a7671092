"""JSONL run log for a world.

A run log starts with a header record naming the world (preset, seed, grid
size and civilizations), followed by one record per tick holding
`calculate_world_metrics` output and a digest of what happened during the
tick. The file is keyed by preset and seed, so a saved world that is loaded
and run further keeps extending the same log.
"""

import json
import re
from pathlib import Path
from typing import Optional

from ..engine.turn_executor import TickResults
from ..models.world import WorldState
from .world_metrics import calculate_world_metrics


def run_id(world: WorldState) -> str:
    """File-name-safe identifier of a world's run (preset and seed)."""
    seed = re.sub(r"[^A-Za-z0-9_-]+", "-", world.seed_text).strip("-") or "seed"
    return f"{world.preset}_{seed}"


def _digest(results: TickResults) -> dict:
    return {
        "events": [f"{e.civ_id}:{e.event_id}" for e in results.fired_events],
        "captures": len(results.battles),
        "colonies": len(results.colony_events),
        "joined_wars": [list(pair) for pair in results.joined_wars],
        "expired_truces": [list(pair) for pair in results.expired_truces],
        "routes_recomputed": results.routes_recomputed,
        "raided": results.raided_route is not None,
    }


class TickLogger:
    """Logs one world's ticks to `{output_dir}/world_{run_id}_ticks.jsonl`.

    Records are appended in tick order; logging a tick at or before the
    last one already in the file raises ValueError.
    """

    def __init__(self, world: WorldState, output_dir: str = "logs"):
        """Open (or resume) the run log of a world.

        Args:
            world: World whose ticks will be logged
            output_dir: Directory to write log files (default: "logs")

        Raises:
            ValueError: If an existing log file cannot be parsed
        """
        self.preset = world.preset
        self.seed_text = world.seed_text
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.log_path = self.output_dir / f"world_{run_id(world)}_ticks.jsonl"

        self.last_tick = self._read_last_tick()
        try:
            self.file_handle = open(self.log_path, "a", encoding="utf-8")
        except OSError as e:
            raise OSError(f"Failed to open log file {self.log_path}: {e}") from e

        if self.last_tick is None:
            self._write(
                {
                    "type": "header",
                    "preset": world.preset,
                    "seed": world.seed_text,
                    "tick": world.tick,
                    "width": world.hex_map.width,
                    "height": world.hex_map.height,
                    "civilizations": world.civ_ids,
                    "outer_pressure": world.outer_pressure_name,
                }
            )
            self.last_tick = world.tick

    def _read_last_tick(self) -> Optional[int]:
        if not self.log_path.exists():
            return None
        last = None
        with open(self.log_path, encoding="utf-8") as f:
            for line in f:
                if line.strip():
                    last = line
        if last is None:
            return None
        try:
            return json.loads(last)["tick"]
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise ValueError(f"Unreadable run log {self.log_path}: {e}") from e

    def log_tick(self, world: WorldState, results: Optional[TickResults] = None) -> None:
        """Append the world's metrics for its current tick.

        Args:
            world: World after the tick
            results: What happened during the tick, summarized into the record

        Raises:
            ValueError: If the world is not the one this log belongs to, or
                its tick has already been logged
        """
        if (world.preset, world.seed_text) != (self.preset, self.seed_text):
            raise ValueError(
                f"World {world.preset}/{world.seed_text!r} does not belong to run log {self.log_path.name}"
            )
        if self.last_tick is not None and world.tick <= self.last_tick:
            raise ValueError(f"Tick {world.tick} is not after the last logged tick {self.last_tick}")

        record = {"type": "tick", **calculate_world_metrics(world)}
        if results is not None:
            record["digest"] = _digest(results)
        self._write(record)
        self.last_tick = world.tick

    def _write(self, record: dict) -> None:
        try:
            self.file_handle.write(json.dumps(record, separators=(",", ":")) + "\n")
            self.file_handle.flush()
        except OSError as e:
            raise OSError(f"Failed to write to log file: {e}") from e

    def close(self) -> None:
        """Close the log file. Safe to call multiple times."""
        if self.file_handle and not self.file_handle.closed:
            self.file_handle.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
