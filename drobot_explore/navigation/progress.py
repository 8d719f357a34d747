"""
Goal progress monitoring.

Detects goals the robot has stopped getting closer to.
"""
from typing import Callable, Optional
import time

from drobot_explore.config import Config
from drobot_explore.types import GoalState, Position, ProgressDecision


class ProgressMonitor:
    """Flags goals without distance improvement for longer than a timeout."""

    def __init__(
        self,
        timeout: float = Config.PROGRESS_TIMEOUT,
        clock: Optional[Callable[[], float]] = None,
        logger: Optional[Callable] = None
    ):
        """
        Initialize progress monitor.

        Args:
            timeout: Seconds allowed without getting closer to the goal
            clock: Returns the current time in seconds
            logger: Optional logger function
        """
        self.timeout = timeout
        self.clock = clock or time.monotonic
        self.logger = logger or (lambda msg: None)

    def track(self, target: Position) -> GoalState:
        """
        Start tracking a new goal with a fresh baseline.

        Args:
            target: Goal position

        Returns:
            GoalState for the goal
        """
        return GoalState(target=target, best_distance=float('inf'), last_progress=self.clock())

    def on_tick(self, pose: Position, goal: Optional[GoalState]) -> ProgressDecision:
        """
        Update progress toward the goal.

        Args:
            pose: Current robot position
            goal: Goal being pursued, or None

        Returns:
            ABANDON if the distance has not strictly improved for longer
            than the timeout, KEEP otherwise
        """
        if goal is None:
            return ProgressDecision.KEEP

        now = self.clock()
        distance = pose.distance_to(goal.target)

        if distance < goal.best_distance:
            goal.best_distance = distance
            goal.last_progress = now
            return ProgressDecision.KEEP

        stalled = now - goal.last_progress
        if stalled > self.timeout:
            self.logger(
                f'No progress toward ({goal.target.x:.2f}, {goal.target.y:.2f}) '
                f'for {stalled:.0f}s, abandoning'
            )
            return ProgressDecision.ABANDON

        return ProgressDecision.KEEP
