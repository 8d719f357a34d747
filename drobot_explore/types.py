"""
Data type definitions for the exploration core.

Provides structured data classes shared by the controller and its collaborators.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, List
import math

import numpy as np


@dataclass(frozen=True)
class Position:
    """Point in the global frame. z is carried but ignored."""
    x: float
    y: float
    z: float = 0.0

    def distance_to(self, other: 'Position') -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Frontier:
    """Frontier candidate produced by a frontier search."""
    centroid: Position
    cost: float
    points: Tuple[Position, ...] = field(default=(), repr=False)
    size: int = 0
    min_distance: float = float('inf')
    middle: Optional[Position] = None


@dataclass
class RobotState:
    """Robot pose in the global frame."""
    x: float = 0.0
    y: float = 0.0
    yaw: float = 0.0

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)


@dataclass
class GoalState:
    """Goal being pursued and the last confirmed progress toward it."""
    target: Position
    best_distance: float = float('inf')
    last_progress: float = 0.0


@dataclass
class MapInfo:
    """Map metadata for coordinate transformations."""
    data: Optional[np.ndarray] = field(default=None, repr=False)
    resolution: float = 0.05
    origin_x: float = 0.0
    origin_y: float = 0.0
    width: int = 0
    height: int = 0
    frame_id: str = ''

    def is_valid(self) -> bool:
        """Check if map data is available."""
        return self.data is not None and self.width > 0 and self.height > 0


@dataclass(frozen=True)
class RenderRecord:
    """One frontier marker: boundary points, RGBA color and marker id."""
    points: Tuple[Position, ...]
    color: Tuple[float, float, float, float]
    marker_id: int


class ExplorationState(Enum):
    SEARCHING = 'searching'
    NAVIGATING = 'navigating'
    DONE = 'done'
    STOPPED = 'stopped'


class ProgressDecision(Enum):
    KEEP = 'keep'
    ABANDON = 'abandon'


@dataclass
class ExplorationStats:
    """Exploration progress statistics."""
    dispatched_goals: int = 0
    reached_goals: int = 0
    failed_goals: int = 0
    abandoned_goals: int = 0
    skipped_ticks: int = 0

    @property
    def success_rate(self) -> float:
        """Calculate goal success rate."""
        if self.dispatched_goals == 0:
            return 0.0
        return (self.reached_goals / self.dispatched_goals) * 100

    def summary(self) -> List[str]:
        return [
            f'Goals: {self.reached_goals}/{self.dispatched_goals} '
            f'({self.success_rate:.0f}%)',
            f'Abandoned: {self.abandoned_goals} | Failed: {self.failed_goals}',
            f'Skipped ticks: {self.skipped_ticks}',
        ]
