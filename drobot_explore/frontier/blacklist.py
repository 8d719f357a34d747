"""
Blacklist of rejected exploration goals.

Goals end up here once they have failed or stalled. Entries are kept for the
whole exploration run so the same region is never selected again.
"""
from typing import Iterator, List, Tuple

from drobot_explore.config import Config
from drobot_explore.types import Position


class GoalBlacklist:
    """Growable set of rejected goals with axis-aligned tolerance lookup."""

    def __init__(
        self,
        resolution: float = 0.05,
        tolerance_factor: float = Config.BLACKLIST_TOLERANCE
    ):
        """
        Initialize goal blacklist.

        Args:
            resolution: Map cell size in meters
            tolerance_factor: Tolerance in cells on each axis
        """
        self.resolution = resolution
        self.tolerance_factor = tolerance_factor
        self._entries: List[Position] = []

    @property
    def tolerance(self) -> float:
        """Tolerance on each axis in meters."""
        return self.tolerance_factor * self.resolution

    @property
    def entries(self) -> Tuple[Position, ...]:
        return tuple(self._entries)

    def update_resolution(self, resolution: float) -> None:
        """
        Track the resolution of the current map.

        Args:
            resolution: Map cell size in meters
        """
        self.resolution = resolution

    def add(self, point: Position) -> None:
        """
        Blacklist a goal. Duplicates are kept.

        Args:
            point: Goal position to reject
        """
        self._entries.append(point)

    def is_blacklisted(self, point: Position) -> bool:
        """
        Check if a point lies near a blacklisted goal.

        The test is a square, not a circle: a point matches an entry when it
        is closer than the tolerance on both the x and the y axis.

        Args:
            point: Candidate goal position

        Returns:
            True if any entry is within tolerance
        """
        tolerance = self.tolerance
        for entry in self._entries:
            if (abs(point.x - entry.x) < tolerance and
                    abs(point.y - entry.y) < tolerance):
                return True
        return False

    def __contains__(self, point: Position) -> bool:
        return self.is_blacklisted(point)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Position]:
        return iter(self._entries)
