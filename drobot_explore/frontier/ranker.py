"""
Frontier selection.

Picks the cheapest frontier that is not blacklisted.
"""
from typing import Iterable, Optional

from drobot_explore.frontier.blacklist import GoalBlacklist
from drobot_explore.types import Frontier, Position


class FrontierRanker:
    """Selects exploration goals from cost-sorted frontier candidates."""

    def select_frontier(
        self,
        frontiers: Iterable[Frontier],
        blacklist: GoalBlacklist
    ) -> Optional[Frontier]:
        """
        Select the first frontier whose centroid is not blacklisted.

        Args:
            frontiers: Frontiers sorted by ascending cost
            blacklist: Rejected goals

        Returns:
            Best Frontier or None
        """
        for frontier in frontiers:
            if not blacklist.is_blacklisted(frontier.centroid):
                return frontier
        return None

    def select_goal(
        self,
        frontiers: Iterable[Frontier],
        blacklist: GoalBlacklist
    ) -> Optional[Position]:
        """
        Select the next exploration goal.

        None means every candidate is blacklisted or there are no candidates,
        i.e. exploration is complete.

        Args:
            frontiers: Frontiers sorted by ascending cost
            blacklist: Rejected goals

        Returns:
            Centroid of the selected frontier, or None
        """
        frontier = self.select_frontier(frontiers, blacklist)
        if frontier is None:
            return None
        return frontier.centroid
