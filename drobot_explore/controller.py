"""
Exploration controller.

Periodic decision loop tying frontier search, ranking, blacklisting and
progress monitoring together. It decides where to send the robot next and
whether to give up on the current goal; it never plans or drives.

Collaborators are duck-typed:

- pose provider: ``current_pose() -> RobotState``, ``resolution() -> float``,
  ``global_frame_id() -> str``
- frontier search: ``search_from(RobotState) -> list[Frontier]`` sorted by
  ascending cost
- goal executor: ``send_goal(Position)``, ``cancel()``
- visualization sink: ``publish(records, stale_ids)``

Collaborators raise CollaboratorUnavailable for transient failures; the
tick is then skipped and retried on the next one.
"""
from typing import Any, Callable, List, Optional
import logging
import threading

from drobot_explore.config import ExploreParams
from drobot_explore.errors import CollaboratorUnavailable
from drobot_explore.frontier import FrontierRanker, GoalBlacklist
from drobot_explore.navigation import ProgressMonitor
from drobot_explore.types import (
    ExplorationState,
    ExplorationStats,
    Frontier,
    GoalState,
    Position,
    ProgressDecision,
)
from drobot_explore.visualization import FrontierVisualizer
from drobot_explore import utils


class ExplorationController:
    """Frontier exploration state machine, driven by tick()."""

    def __init__(
        self,
        pose_provider: Any,
        frontier_search: Any,
        goal_executor: Any,
        params: Optional[ExploreParams] = None,
        visualization_sink: Any = None,
        clock: Optional[Callable[[], float]] = None,
        logger: Any = None
    ):
        """
        Initialize exploration controller.

        Args:
            pose_provider: Robot pose and map resolution source
            frontier_search: Produces cost-sorted frontiers
            goal_executor: Dispatches goals to the navigation stack
            params: Exploration parameters
            visualization_sink: Receives frontier render records when
                params.visualize is set
            clock: Returns the current time in seconds
            logger: Object with debug/info/warning/error methods
        """
        self.params = params or ExploreParams()
        self.pose_provider = pose_provider
        self.frontier_search = frontier_search
        self.goal_executor = goal_executor
        self.logger = logger or logging.getLogger(__name__)

        self.ranker = FrontierRanker()
        self.blacklist = self._new_blacklist()
        self.progress = ProgressMonitor(
            self.params.progress_timeout,
            clock=clock,
            logger=self.logger.warning
        )

        self.visualization_sink = visualization_sink if self.params.visualize else None
        self.visualizer = FrontierVisualizer()

        self.goal: Optional[GoalState] = None
        self.state = ExplorationState.SEARCHING
        self.stats = ExplorationStats()

        # Ticks, goal results and stop/restart never interleave
        self._lock = threading.RLock()

    @property
    def is_done(self) -> bool:
        return self.state is ExplorationState.DONE

    @property
    def current_goal(self) -> Optional[Position]:
        return self.goal.target if self.goal else None

    # ==================== Main Loop ====================

    def tick(self) -> ExplorationState:
        """
        Run one exploration cycle.

        Returns:
            State after the cycle
        """
        with self._lock:
            if self.state in (ExplorationState.DONE, ExplorationState.STOPPED):
                return self.state

            try:
                robot = self.pose_provider.current_pose()
                self.blacklist.update_resolution(self.pose_provider.resolution())
                frontiers = self.frontier_search.search_from(robot)
            except CollaboratorUnavailable as e:
                self.stats.skipped_ticks += 1
                self.logger.warning(f'Skipping exploration tick: {e}')
                return self.state

            self.logger.info(f'Found {len(frontiers)} frontiers')
            for i, frontier in enumerate(frontiers):
                self.logger.debug(f'Frontier {i} cost: {frontier.cost:.4f}')

            if self.visualization_sink is not None:
                self._visualize(frontiers)

            frontier = self.ranker.select_frontier(frontiers, self.blacklist)
            if frontier is None:
                self._finish()
                return self.state

            target = frontier.centroid
            if self.goal is None or not utils.same_point(target, self.goal.target):
                self._dispatch(target)

            decision = self.progress.on_tick(robot.position, self.goal)
            if decision is ProgressDecision.ABANDON:
                self._abandon()

            return self.state

    def on_goal_result(self, target: Position, succeeded: bool) -> None:
        """
        Handle the outcome of a dispatched goal.

        Only results for the goal currently pursued count. Nav2 reports a goal
        preempted by a newer one as aborted, so a stale failure is ignored.

        Args:
            target: Goal the result belongs to
            succeeded: True if the robot reached the goal
        """
        with self._lock:
            if self.goal is None or not utils.same_point(target, self.goal.target):
                self.logger.debug(
                    f'Ignoring result for stale goal ({target.x:.2f}, {target.y:.2f})'
                )
                return

            if succeeded:
                self.stats.reached_goals += 1
                self.logger.info(f'Goal ({target.x:.2f}, {target.y:.2f}) reached')
            else:
                self.stats.failed_goals += 1
                self.blacklist.add(target)
                self.logger.debug(f'Adding current goal ({target.x:.2f}, {target.y:.2f}) to blacklist')

            self.goal = None
            if self.state is ExplorationState.NAVIGATING:
                self.state = ExplorationState.SEARCHING

    def stop(self) -> None:
        """Stop exploring. Safe to call between ticks."""
        with self._lock:
            if self.state is ExplorationState.STOPPED:
                return
            self.logger.info('Exploration stopped.')
            self._cancel_goal()
            self.state = ExplorationState.STOPPED

    def restart(self) -> None:
        """Start a new exploration run with an empty blacklist."""
        with self._lock:
            self.logger.info('Exploration restarted.')
            self._cancel_goal()
            self.blacklist = self._new_blacklist()
            self.state = ExplorationState.SEARCHING

    # ==================== Internals ====================

    def _new_blacklist(self) -> GoalBlacklist:
        return GoalBlacklist(tolerance_factor=self.params.blacklist_tolerance)

    def _dispatch(self, target: Position) -> None:
        """Commit a new goal and hand it to the goal executor."""
        self.goal = self.progress.track(target)
        self.state = ExplorationState.NAVIGATING
        self.stats.dispatched_goals += 1
        self.logger.info(f'Sending goal ({target.x:.2f}, {target.y:.2f})')

        try:
            self.goal_executor.send_goal(target)
        except CollaboratorUnavailable as e:
            # Shows up later as lack of progress
            self.logger.warning(f'Goal dispatch failed: {e}')

    def _abandon(self) -> None:
        """Blacklist the current goal and cancel it."""
        target = self.goal.target
        self.blacklist.add(target)
        self.stats.abandoned_goals += 1
        self.logger.debug(f'Adding current goal ({target.x:.2f}, {target.y:.2f}) to blacklist')
        self._cancel_goal()
        self.state = ExplorationState.SEARCHING

    def _finish(self) -> None:
        """Enter the terminal state once no viable frontier is left."""
        self.logger.info('Exploration complete: no viable frontiers left.')
        self._cancel_goal()
        self.state = ExplorationState.DONE

    def _cancel_goal(self) -> None:
        # Executor may still be driving toward an abandoned goal
        try:
            self.goal_executor.cancel()
        except CollaboratorUnavailable as e:
            self.logger.warning(f'Goal cancel failed: {e}')
        self.goal = None

    def _visualize(self, frontiers: List[Frontier]) -> None:
        records, stale_ids = self.visualizer.render(frontiers, self.blacklist)
        self.logger.debug(f'Visualising {len(records)} frontiers')
        self.visualization_sink.publish(records, stale_ids)
