#!/usr/bin/env python3
"""
Explore Node

Frontier-based exploration on top of Nav2:
- Map and robot pose from the map topics and TF
- Frontier search, blacklist and progress timeout in the exploration core
- Goals sent through NavigateToPose
- Optional frontier markers for RViz
"""
from dataclasses import fields

import rclpy
from rclpy.node import Node
from std_msgs.msg import Bool

from drobot_explore.config import Config, ExploreParams
from drobot_explore.controller import ExplorationController
from drobot_explore.costmap_client import CostmapClient
from drobot_explore.frontier import FrontierSearch
from drobot_explore.markers import MarkerSink
from drobot_explore.navigation.goal_client import GoalClient
from drobot_explore.types import ExplorationState, Position


class Explorer(Node):
    """Autonomous frontier exploration node."""

    def __init__(self):
        super().__init__('explore')

        self.params = self._declare_parameters()
        self._init_components()
        self._init_subscribers()
        self._init_timers()

        self.get_logger().info(
            f'Explore started! (frequency={self.params.planner_frequency:.2f}Hz '
            f'progress_timeout={self.params.progress_timeout:.1f}s '
            f'visualize={self.params.visualize})'
        )

    def _declare_parameters(self) -> ExploreParams:
        """Declare ROS parameters with defaults and read them back."""
        defaults = ExploreParams()
        values = {}
        for f in fields(ExploreParams):
            self.declare_parameter(f.name, getattr(defaults, f.name))
            values[f.name] = self.get_parameter(f.name).value
        return ExploreParams.from_dict(values)

    def _init_components(self):
        """Initialize map, search, goal and visualization components."""
        self.costmap_client = CostmapClient(self, self.params)
        self.frontier_search = FrontierSearch(
            self.costmap_client.get_map_info,
            potential_scale=self.params.potential_scale,
            gain_scale=self.params.gain_scale,
            min_frontier_size=self.params.min_frontier_size,
            orientation_scale=self.params.orientation_scale
        )
        self.goal_client = GoalClient(
            self,
            self.params,
            on_result=self._goal_result_callback,
            get_frame=self.costmap_client.global_frame_id
        )
        marker_sink = None
        if self.params.visualize:
            marker_sink = MarkerSink(self, self.costmap_client.global_frame_id)

        self.controller = ExplorationController(
            self.costmap_client,
            self.frontier_search,
            self.goal_client,
            params=self.params,
            visualization_sink=marker_sink,
            clock=self._now,
            logger=self.get_logger()
        )

    def _init_subscribers(self):
        self.resume_sub = self.create_subscription(
            Bool, Config.RESUME_TOPIC, self._resume_callback, 10
        )

    def _init_timers(self):
        """Set up the exploration timer."""
        self.explore_timer = self.create_timer(
            self.params.tick_interval, self._explore_callback
        )

    def _now(self) -> float:
        return self.get_clock().now().nanoseconds / 1e9

    # ==================== Callbacks ====================

    def _explore_callback(self):
        """Main exploration loop."""
        state = self.controller.tick()

        if state is ExplorationState.DONE and self.params.stop_timer_on_complete:
            self.get_logger().info('Exploration done, stopping timer')
            self.explore_timer.cancel()

    def _goal_result_callback(self, target: Position, succeeded: bool):
        self.controller.on_goal_result(target, succeeded)

    def _resume_callback(self, msg: Bool):
        """Restart on true, stop on false."""
        if msg.data:
            self.controller.restart()
            if self.explore_timer.is_canceled():
                self.explore_timer.reset()
        else:
            self.controller.stop()


def main(args=None):
    rclpy.init(args=args)
    node = Explorer()

    try:
        rclpy.spin(node)
    except KeyboardInterrupt:
        node.controller.stop()
        node.get_logger().info(
            '\n=== Final Stats ===\n' + '\n'.join(node.controller.stats.summary())
        )
    finally:
        node.destroy_node()
        rclpy.try_shutdown()


if __name__ == '__main__':
    main()
