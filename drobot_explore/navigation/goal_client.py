"""
Nav2 goal dispatch.

Sends exploration goals through the NavigateToPose action and reports
their outcome.
"""
from typing import Callable, Optional

from rclpy.action import ActionClient
from rclpy.node import Node
from action_msgs.msg import GoalStatus
from nav2_msgs.action import NavigateToPose

from drobot_explore.config import Config, ExploreParams
from drobot_explore.errors import CollaboratorUnavailable
from drobot_explore.types import Position


class GoalClient:
    """Fire-and-forget goal executor on top of NavigateToPose."""

    def __init__(
        self,
        node: Node,
        params: ExploreParams,
        on_result: Callable[[Position, bool], None],
        get_frame: Callable[[], str]
    ):
        """
        Initialize goal client.

        Args:
            node: ROS node owning the action client
            params: Exploration parameters
            on_result: Called with (goal, succeeded) when Nav2 finishes a goal
            get_frame: Returns the frame goals are expressed in
        """
        self.node = node
        self.on_result = on_result
        self.get_frame = get_frame
        self.server_timeout = params.action_server_timeout
        self.nav_client = ActionClient(node, NavigateToPose, Config.NAVIGATE_ACTION)
        self.goal_handle: Optional[object] = None
        # Bumped on every send and cancel; callbacks from older requests are stale
        self.goal_seq = 0

    def send_goal(self, target: Position) -> None:
        """
        Send a navigation goal without waiting for the outcome.

        Raises:
            CollaboratorUnavailable: If the action server is not up
        """
        if not self.nav_client.wait_for_server(timeout_sec=self.server_timeout):
            raise CollaboratorUnavailable(f'{Config.NAVIGATE_ACTION} action server not available')

        goal_msg = NavigateToPose.Goal()
        goal_msg.pose.header.frame_id = self.get_frame()
        goal_msg.pose.header.stamp = self.node.get_clock().now().to_msg()
        goal_msg.pose.pose.position.x = target.x
        goal_msg.pose.pose.position.y = target.y
        goal_msg.pose.pose.orientation.w = 1.0

        self.goal_seq += 1
        seq = self.goal_seq
        future = self.nav_client.send_goal_async(goal_msg)
        future.add_done_callback(
            lambda f: self._goal_response_callback(f, target, seq)
        )

    def cancel(self) -> None:
        """Cancel the last goal, including one still awaiting acceptance."""
        self.goal_seq += 1
        if self.goal_handle is not None:
            self.goal_handle.cancel_goal_async()
            self.goal_handle = None

    def _goal_response_callback(self, future, target: Position, seq: int):
        """Handle goal acceptance/rejection."""
        goal_handle = future.result()
        if not goal_handle.accepted:
            # Left to the progress timeout
            self.node.get_logger().warning(
                f'Goal ({target.x:.2f}, {target.y:.2f}) rejected'
            )
            return

        if seq != self.goal_seq:
            # Cancelled or replaced while the request was in flight
            self.node.get_logger().debug(
                f'Cancelling outdated goal ({target.x:.2f}, {target.y:.2f})'
            )
            goal_handle.cancel_goal_async()
            return

        self.goal_handle = goal_handle
        result_future = goal_handle.get_result_async()
        result_future.add_done_callback(
            lambda f: self._goal_result_callback(f, target, seq)
        )

    def _goal_result_callback(self, future, target: Position, seq: int):
        """Handle navigation result."""
        status = future.result().status

        if seq != self.goal_seq:
            # Preempted by a newer goal; Nav2 reports these as aborted
            self.node.get_logger().debug(f'Ignoring result of outdated goal (status: {status})')
            return

        self.goal_handle = None
        if status == GoalStatus.STATUS_SUCCEEDED:
            self.on_result(target, True)
        elif status == GoalStatus.STATUS_ABORTED:
            self.node.get_logger().warning(f'Goal failed (status: {status})')
            self.on_result(target, False)
        else:
            self.node.get_logger().debug(f'Goal finished with status {status}')
