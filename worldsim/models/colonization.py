"""In-flight colonization data model."""

from dataclasses import dataclass


@dataclass
class Colonization:
    """A colonial expedition under way.

    Created when a civilization launches an expedition and removed once
    progress reaches the colonization threshold.
    """

    civ_id: str  # Colonizing civilization
    hex_id: int  # Target land hex (reserved, not yet owned)
    progress: int = 0  # Ticks elapsed
    cost: float = 0.0  # Treasury already deducted at launch

    def __post_init__(self):
        """Validate colonization data after initialization."""
        if self.progress < 0:
            raise ValueError(f"Invalid progress: {self.progress} (must be >= 0)")
        if self.cost < 0:
            raise ValueError(f"Invalid cost: {self.cost} (must be >= 0)")
