"""
RViz marker sink for frontier visualization.
"""
from typing import Callable, List

from rclpy.duration import Duration
from rclpy.node import Node
from geometry_msgs.msg import Point
from std_msgs.msg import ColorRGBA
from visualization_msgs.msg import Marker, MarkerArray

from drobot_explore.config import Config
from drobot_explore.types import RenderRecord


class MarkerSink:
    """Publishes frontier render records as a MarkerArray."""

    def __init__(self, node: Node, get_frame: Callable[[], str]):
        """
        Initialize marker sink.

        Args:
            node: ROS node owning the publisher
            get_frame: Returns the frame markers are expressed in
        """
        self.node = node
        self.get_frame = get_frame
        self.marker_pub = node.create_publisher(MarkerArray, Config.MARKER_TOPIC, 10)

    def publish(self, records: List[RenderRecord], stale_ids: List[int]) -> None:
        """
        Publish frontier markers and delete stale ones.

        Args:
            records: Frontier render records
            stale_ids: Marker ids drawn last time and unused now
        """
        markers_msg = MarkerArray()
        stamp = self.node.get_clock().now().to_msg()

        for record in records:
            m = self._new_marker(record.marker_id, stamp)
            m.action = Marker.ADD
            m.points = [Point(x=p.x, y=p.y, z=p.z) for p in record.points]
            r, g, b, a = record.color
            m.color = ColorRGBA(r=r, g=g, b=b, a=a)
            markers_msg.markers.append(m)

        for marker_id in stale_ids:
            m = self._new_marker(marker_id, stamp)
            m.action = Marker.DELETE
            markers_msg.markers.append(m)

        self.marker_pub.publish(markers_msg)

    def _new_marker(self, marker_id: int, stamp) -> Marker:
        m = Marker()
        m.header.frame_id = self.get_frame()
        m.header.stamp = stamp
        m.ns = Config.MARKER_NAMESPACE
        m.id = marker_id
        m.type = Marker.POINTS
        m.pose.orientation.w = 1.0
        m.scale.x = Config.MARKER_SCALE
        m.scale.y = Config.MARKER_SCALE
        m.scale.z = Config.MARKER_SCALE
        # lives forever
        m.lifetime = Duration(seconds=0).to_msg()
        m.frame_locked = True
        return m
