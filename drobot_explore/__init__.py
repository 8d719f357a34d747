"""
Drobot Explore Package

Frontier-based autonomous exploration for the Drobot robot.

The exploration core exported here has no ROS dependency; the ROS node and
its map, goal and marker adapters live in explore_node, costmap_client,
navigation.goal_client and markers.
"""
from .config import Config, ExploreParams
from .types import (
    Position,
    Frontier,
    RobotState,
    GoalState,
    MapInfo,
    RenderRecord,
    ExplorationState,
    ProgressDecision,
    ExplorationStats,
)
from .errors import ExplorationError, CollaboratorUnavailable
from .frontier import GoalBlacklist, FrontierRanker, FrontierSearch
from .navigation import ProgressMonitor
from .visualization import FrontierVisualizer
from .controller import ExplorationController
from . import utils

__version__ = "1.0.0"
__all__ = [
    'Config',
    'ExploreParams',
    'Position',
    'Frontier',
    'RobotState',
    'GoalState',
    'MapInfo',
    'RenderRecord',
    'ExplorationState',
    'ProgressDecision',
    'ExplorationStats',
    'ExplorationError',
    'CollaboratorUnavailable',
    'GoalBlacklist',
    'FrontierRanker',
    'FrontierSearch',
    'ProgressMonitor',
    'FrontierVisualizer',
    'ExplorationController',
    'utils',
]
