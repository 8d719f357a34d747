"""
Occupancy grid and robot pose provider.

Keeps the latest map from full and partial updates and looks up the robot
pose through TF.
"""
import numpy as np
from rclpy.duration import Duration
from rclpy.node import Node
from rclpy.qos import QoSProfile, DurabilityPolicy, ReliabilityPolicy
from rclpy.time import Time
from map_msgs.msg import OccupancyGridUpdate
from nav_msgs.msg import OccupancyGrid
from tf2_ros import Buffer, TransformException, TransformListener

from drobot_explore.config import ExploreParams
from drobot_explore.errors import CollaboratorUnavailable
from drobot_explore.types import MapInfo, RobotState
from drobot_explore import utils


class CostmapClient:
    """Map and pose provider backed by map topics and TF."""

    def __init__(self, node: Node, params: ExploreParams):
        """
        Initialize costmap client.

        Args:
            node: ROS node used for subscriptions and logging
            params: Exploration parameters (topics, frames, tolerance)
        """
        self.node = node
        self.robot_base_frame = params.robot_base_frame
        self.transform_tolerance = params.transform_tolerance
        self.map_info = MapInfo(frame_id=params.global_frame)

        self.tf_buffer = Buffer()
        self.tf_listener = TransformListener(self.tf_buffer, node)

        # Map publishers latch the last map
        map_qos = QoSProfile(
            depth=1,
            durability=DurabilityPolicy.TRANSIENT_LOCAL,
            reliability=ReliabilityPolicy.RELIABLE
        )
        self.map_sub = node.create_subscription(
            OccupancyGrid, params.costmap_topic, self._update_full_map, map_qos
        )
        self.map_updates_sub = node.create_subscription(
            OccupancyGridUpdate, params.costmap_updates_topic, self._update_partial_map, 10
        )
        node.get_logger().info(f'Waiting for costmap on topic: {params.costmap_topic}')

    # ==================== Provider Interface ====================

    def current_pose(self) -> RobotState:
        """
        Look up the robot pose in the global frame.

        Raises:
            CollaboratorUnavailable: If the transform is not available in time
        """
        try:
            transform = self.tf_buffer.lookup_transform(
                self.global_frame_id(),
                self.robot_base_frame,
                Time(),
                timeout=Duration(seconds=self.transform_tolerance)
            )
        except TransformException as e:
            raise CollaboratorUnavailable(
                f'No transform from {self.robot_base_frame} to {self.global_frame_id()}: {e}'
            ) from e

        t = transform.transform.translation
        q = transform.transform.rotation
        return RobotState(x=t.x, y=t.y, yaw=utils.quaternion_to_yaw(q.x, q.y, q.z, q.w))

    def resolution(self) -> float:
        """
        Cell size of the current map.

        Raises:
            CollaboratorUnavailable: If no map has been received
        """
        if not self.map_info.is_valid():
            raise CollaboratorUnavailable('No map received yet')
        return self.map_info.resolution

    def global_frame_id(self) -> str:
        return self.map_info.frame_id

    def get_map_info(self) -> MapInfo:
        return self.map_info

    # ==================== Callbacks ====================

    def _update_full_map(self, msg: OccupancyGrid):
        """Replace the map with a full update."""
        self.map_info = MapInfo(
            data=np.array(msg.data, dtype=np.int8).reshape((msg.info.height, msg.info.width)),
            resolution=msg.info.resolution,
            origin_x=msg.info.origin.position.x,
            origin_y=msg.info.origin.position.y,
            width=msg.info.width,
            height=msg.info.height,
            frame_id=msg.header.frame_id or self.map_info.frame_id,
        )
        self.node.get_logger().debug(
            f'Received full new map, resizing to: {msg.info.width}, {msg.info.height}'
        )

    def _update_partial_map(self, msg: OccupancyGridUpdate):
        """Copy a partial update into the current map."""
        if not self.map_info.is_valid():
            self.node.get_logger().debug('Partial map update before full map, ignoring')
            return

        if msg.x < 0 or msg.y < 0:
            self.node.get_logger().error(
                f'Negative coordinates, invalid update. x: {msg.x}, y: {msg.y}'
            )
            return

        x0, y0 = msg.x, msg.y
        xn = min(x0 + msg.width, self.map_info.width)
        yn = min(y0 + msg.height, self.map_info.height)
        if xn < x0 + msg.width or yn < y0 + msg.height:
            self.node.get_logger().warning(
                f'Received update doesn\'t fully fit into existing map, only part will be copied. '
                f'received: [{x0}, {x0 + msg.width}], [{y0}, {y0 + msg.height}] '
                f'map is: [0, {self.map_info.width}], [0, {self.map_info.height}]'
            )
        if xn <= x0 or yn <= y0:
            return

        update = np.array(msg.data, dtype=np.int8).reshape((msg.height, msg.width))
        self.map_info.data[y0:yn, x0:xn] = update[:yn - y0, :xn - x0]
