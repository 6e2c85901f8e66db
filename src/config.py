"""Layout configuration."""

from dataclasses import dataclass


@dataclass(frozen=True)
class LayoutConfig:
    """Geometry and search budget for the layered layout."""

    node_width: float = 250
    node_height: float = 100
    node_gap: float = 50  # Horizontal spacing between nodes
    rank_gap: float = 80  # Vertical spacing between generations
    ordering_passes: int = 8
    # Extra crossings allowed when pulling spouses next to each other
    affinity_tolerance: int = 0

    @property
    def slot_width(self) -> float:
        return self.node_width + self.node_gap

    @property
    def rank_height(self) -> float:
        return self.node_height + self.rank_gap


DEFAULT_CONFIG = LayoutConfig()
