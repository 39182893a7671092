"""Run analysis: per-tick world metrics and JSONL logging."""

from .tick_logger import TickLogger, run_id
from .world_metrics import calculate_world_metrics, territory_leader

__all__ = ["TickLogger", "calculate_world_metrics", "run_id", "territory_leader"]
