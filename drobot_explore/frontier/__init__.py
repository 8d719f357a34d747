"""
Frontier search, ranking and goal blacklisting.

Provides algorithms for finding exploration frontiers and choosing among them.
"""
from .blacklist import GoalBlacklist
from .ranker import FrontierRanker
from .search import FrontierSearch

__all__ = ['GoalBlacklist', 'FrontierRanker', 'FrontierSearch']
