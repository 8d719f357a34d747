"""
Frontier visualization records.

Turns a frontier list into colored render records and keeps track of how
many markers were drawn last time so stale ones can be cleared.
"""
from typing import List, Sequence, Tuple

from drobot_explore.frontier.blacklist import GoalBlacklist
from drobot_explore.types import Frontier, RenderRecord

BLACKLISTED_COLOR = (1.0, 0.0, 0.0, 1.0)


def frontier_color(index: int, count: int) -> Tuple[float, float, float, float]:
    """
    Gradient color for a viable frontier.

    Args:
        index: Position of the frontier in the cost-sorted list
        count: Number of frontiers in the list

    Returns:
        RGBA tuple, green-blue for the cheapest frontier shifting to
        red-blue for the most expensive
    """
    ratio = index / (count + 1)
    return (ratio, 1.0 - ratio, 1.0, 1.0)


class FrontierVisualizer:
    """Builds render records and stale marker ids for each pass."""

    def __init__(self):
        self.last_markers_count = 0

    def render(
        self,
        frontiers: Sequence[Frontier],
        blacklist: GoalBlacklist
    ) -> Tuple[List[RenderRecord], List[int]]:
        """
        Build render records for one visualization pass.

        Args:
            frontiers: Frontiers sorted by ascending cost
            blacklist: Rejected goals, drawn in red

        Returns:
            Tuple of (records, stale marker ids to delete)
        """
        records = []
        for index, frontier in enumerate(frontiers):
            if blacklist.is_blacklisted(frontier.centroid):
                color = BLACKLISTED_COLOR
            else:
                color = frontier_color(index, len(frontiers))
            records.append(RenderRecord(
                points=frontier.points,
                color=color,
                marker_id=index
            ))

        stale_ids = list(range(len(records), self.last_markers_count))
        self.last_markers_count = len(records)
        return records, stale_ids
