"""
Utility functions for exploration.

Common coordinate transformations and math utilities.
"""
import math
from typing import Tuple, Optional

from drobot_explore.types import MapInfo, Position

# Two points closer than this are the same goal
SAME_POINT_EPSILON = 0.01


def same_point(one: Position, two: Position, epsilon: float = SAME_POINT_EPSILON) -> bool:
    """
    Check whether two positions denote the same location.

    Args:
        one, two: Positions to compare (z ignored)
        epsilon: Euclidean distance below which they are equal

    Returns:
        True if the points are closer than epsilon
    """
    return euclidean_distance(one.x, one.y, two.x, two.y) < epsilon


def world_to_grid(wx: float, wy: float, map_info: MapInfo) -> Tuple[Optional[int], Optional[int]]:
    """
    Convert world coordinates to grid coordinates.

    Args:
        wx: World x coordinate
        wy: World y coordinate
        map_info: Map metadata

    Returns:
        Tuple of (grid_x, grid_y) or (None, None) if outside the map
    """
    if not map_info.is_valid():
        return None, None

    gx = int(math.floor((wx - map_info.origin_x) / map_info.resolution))
    gy = int(math.floor((wy - map_info.origin_y) / map_info.resolution))
    if not is_in_bounds(gx, gy, map_info.width, map_info.height):
        return None, None
    return gx, gy


def normalize_angle(angle: float) -> float:
    """
    Normalize angle to [-pi, pi] range.

    Args:
        angle: Angle in radians

    Returns:
        Normalized angle in radians
    """
    while angle > math.pi:
        angle -= 2 * math.pi
    while angle < -math.pi:
        angle += 2 * math.pi
    return angle


def euclidean_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Calculate Euclidean distance between two points."""
    return math.sqrt((x2 - x1) ** 2 + (y2 - y1) ** 2)


def quaternion_to_yaw(x: float, y: float, z: float, w: float) -> float:
    """
    Extract yaw angle from quaternion.

    Args:
        x, y, z, w: Quaternion components

    Returns:
        Yaw angle in radians
    """
    return math.atan2(2 * (w * z + x * y), 1 - 2 * (y * y + z * z))


def is_in_bounds(gx: int, gy: int, width: int, height: int) -> bool:
    """Check if grid coordinates are within map bounds."""
    return 0 <= gx < width and 0 <= gy < height
