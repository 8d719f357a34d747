"""
Frontier search over an occupancy grid.

Finds boundaries between known free space reachable from the robot and
unknown space, and returns them sorted by cost.
"""
from dataclasses import replace
from typing import Callable, List, Optional, Tuple
import math

import numpy as np
from scipy import ndimage

from drobot_explore.config import Config
from drobot_explore.errors import CollaboratorUnavailable
from drobot_explore.types import Frontier, MapInfo, Position, RobotState
from drobot_explore import utils

FREE_SPACE = 0
NO_INFORMATION = -1

# 4-connected neighbourhood
NHOOD4 = ndimage.generate_binary_structure(2, 1)
# 8-connected neighbourhood
NHOOD8 = ndimage.generate_binary_structure(2, 2)


class FrontierSearch:
    """Detects, clusters and costs frontiers reachable from the robot."""

    def __init__(
        self,
        get_map: Callable[[], MapInfo],
        potential_scale: float = Config.POTENTIAL_SCALE,
        gain_scale: float = Config.GAIN_SCALE,
        min_frontier_size: float = Config.MIN_FRONTIER_SIZE,
        orientation_scale: float = Config.ORIENTATION_SCALE,
        start_search_radius: int = 3
    ):
        """
        Initialize frontier search.

        Args:
            get_map: Returns the latest map snapshot
            potential_scale: Weight of the distance to the frontier
            gain_scale: Weight of the frontier size
            min_frontier_size: Minimum frontier length in meters
            orientation_scale: Weight of the heading change toward the frontier
            start_search_radius: Grid cells searched for a free start cell
        """
        self.get_map = get_map
        self.potential_scale = potential_scale
        self.gain_scale = gain_scale
        self.min_frontier_size = min_frontier_size
        self.orientation_scale = orientation_scale
        self.start_search_radius = start_search_radius

    def search_from(self, robot: RobotState) -> List[Frontier]:
        """
        Search frontiers reachable from the robot position.

        Args:
            robot: Robot pose in the map frame

        Returns:
            Frontiers sorted by ascending cost

        Raises:
            CollaboratorUnavailable: If there is no map yet, or the robot is
                outside it or not near any free cell
        """
        map_info = self.get_map()
        if not map_info.is_valid():
            raise CollaboratorUnavailable('No map received yet')

        gx, gy = utils.world_to_grid(robot.x, robot.y, map_info)
        if gx is None:
            raise CollaboratorUnavailable(
                f'Robot ({robot.x:.2f}, {robot.y:.2f}) out of map bounds, '
                f'cannot search for frontiers'
            )

        start = self.nearest_free_cell(gx, gy, map_info.data)
        if start is None:
            raise CollaboratorUnavailable('Could not find nearby clear cell to start search')

        frontiers = []
        for cells in self.find_frontier_cells(map_info.data, start):
            frontier = self._build_frontier(cells, robot, map_info)
            if frontier.size * map_info.resolution >= self.min_frontier_size:
                frontiers.append(frontier)

        frontiers.sort(key=lambda f: f.cost)
        return frontiers

    def nearest_free_cell(
        self,
        gx: int,
        gy: int,
        map_data: np.ndarray
    ) -> Optional[Tuple[int, int]]:
        """
        Find the free cell closest to a grid position, ring by ring.

        Args:
            gx, gy: Starting grid coordinates
            map_data: Occupancy grid data (rows are y)

        Returns:
            (grid_x, grid_y) or None if no free cell is in range
        """
        h, w = map_data.shape
        for r in range(self.start_search_radius + 1):
            for dx in range(-r, r + 1):
                for dy in range(-r, r + 1):
                    if abs(dx) == r or abs(dy) == r:
                        nx, ny = gx + dx, gy + dy
                        if utils.is_in_bounds(nx, ny, w, h) and map_data[ny, nx] == FREE_SPACE:
                            return nx, ny
        return None

    def find_frontier_cells(
        self,
        map_data: np.ndarray,
        start: Tuple[int, int]
    ) -> List[np.ndarray]:
        """
        Group frontier cells into 8-connected clusters.

        A frontier cell is an unknown cell with a 4-neighbour in the free
        space reachable from start.

        Args:
            map_data: Occupancy grid data (rows are y)
            start: (grid_x, grid_y) free start cell

        Returns:
            List of (N, 2) arrays of (y, x) cell coordinates
        """
        free = (map_data == FREE_SPACE)
        unknown = (map_data == NO_INFORMATION)

        free_labels, _ = ndimage.label(free, structure=NHOOD4)
        reachable = free_labels == free_labels[start[1], start[0]]

        candidates = unknown & ndimage.binary_dilation(reachable, structure=NHOOD4)
        labeled, count = ndimage.label(candidates, structure=NHOOD8)
        if count == 0:
            return []

        # Group all labelled cells in one pass, ordered by label
        cells = np.argwhere(labeled)
        labels = labeled[cells[:, 0], cells[:, 1]]
        order = np.argsort(labels, kind='stable')
        cells, labels = cells[order], labels[order]
        splits = np.flatnonzero(np.diff(labels)) + 1
        return np.split(cells, splits)

    def frontier_cost(self, frontier: Frontier, robot: RobotState, resolution: float) -> float:
        """
        Cost of a frontier, lower is better.

        Args:
            frontier: Frontier with size and min_distance filled in
            robot: Robot pose
            resolution: Map cell size in meters

        Returns:
            Weighted cost
        """
        heading_change = 0.0
        if self.orientation_scale:
            direction = math.atan2(frontier.centroid.y - robot.y, frontier.centroid.x - robot.x)
            heading_change = abs(utils.normalize_angle(direction - robot.yaw))

        return (
            self.potential_scale * frontier.min_distance * resolution +
            self.orientation_scale * heading_change -
            self.gain_scale * frontier.size * resolution
        )

    def _build_frontier(
        self,
        cells: np.ndarray,
        robot: RobotState,
        map_info: MapInfo
    ) -> Frontier:
        """Turn a cluster of (y, x) cells into a costed Frontier."""
        res = map_info.resolution
        wx = map_info.origin_x + (cells[:, 1] + 0.5) * res
        wy = map_info.origin_y + (cells[:, 0] + 0.5) * res

        distances = np.hypot(wx - robot.x, wy - robot.y)
        closest = int(np.argmin(distances))

        frontier = Frontier(
            centroid=Position(float(wx.mean()), float(wy.mean())),
            cost=0.0,
            points=tuple(Position(float(x), float(y)) for x, y in zip(wx, wy)),
            size=len(cells),
            min_distance=float(distances[closest]),
            middle=Position(float(wx[closest]), float(wy[closest])),
        )
        return replace(frontier, cost=self.frontier_cost(frontier, robot, res))
