"""
Configuration for frontier exploration.

Default values are centralized in Config; ExploreParams is the runtime
parameter set built from ROS parameters or a YAML file.
"""
from dataclasses import dataclass, fields, asdict
from typing import Any, Dict, Optional
import os

import yaml


class Config:
    """Exploration configuration constants."""

    # ==================== Timers ====================
    PLANNER_FREQUENCY = 1.0         # Hz - exploration tick rate
    PROGRESS_TIMEOUT = 30.0         # sec - max time without getting closer to goal

    # ==================== Frontier Search ====================
    POTENTIAL_SCALE = 1e-3          # weight of distance to frontier
    ORIENTATION_SCALE = 0.0         # weight of heading change toward frontier
    GAIN_SCALE = 1.0                # weight of frontier size
    MIN_FRONTIER_SIZE = 0.5         # m - frontiers shorter than this are dropped

    # ==================== Blacklist ====================
    BLACKLIST_TOLERANCE = 5.0       # grid cells - square half-width around entries

    # ==================== Frames / Topics ====================
    ROBOT_BASE_FRAME = 'base_link'
    GLOBAL_FRAME = 'map'
    COSTMAP_TOPIC = 'map'
    COSTMAP_UPDATES_TOPIC = 'map_updates'
    RESUME_TOPIC = 'explore/resume'
    MARKER_TOPIC = 'explore/frontiers'
    NAVIGATE_ACTION = 'navigate_to_pose'

    # ==================== Timeouts ====================
    TRANSFORM_TOLERANCE = 0.3       # sec - TF lookup timeout
    ACTION_SERVER_TIMEOUT = 1.0     # sec - wait for navigate_to_pose server

    # ==================== Visualization ====================
    VISUALIZE = False
    MARKER_NAMESPACE = 'frontiers'
    MARKER_SCALE = 0.1              # m - frontier point size

    # ==================== Lifecycle ====================
    STOP_TIMER_ON_COMPLETE = False  # cancel the tick timer once exploration is done


_TRUE_STRINGS = ('true', 'yes', 'on', '1')
_FALSE_STRINGS = ('false', 'no', 'off', '0')


def _to_bool(name: str, value: Any) -> bool:
    """Parse a boolean parameter, accepting YAML/CLI style strings."""
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        raise ValueError(f'{name} must be a boolean, got {value!r}')
    return bool(value)


@dataclass
class ExploreParams:
    """Runtime exploration parameters."""
    planner_frequency: float = Config.PLANNER_FREQUENCY
    progress_timeout: float = Config.PROGRESS_TIMEOUT
    visualize: bool = Config.VISUALIZE
    potential_scale: float = Config.POTENTIAL_SCALE
    orientation_scale: float = Config.ORIENTATION_SCALE
    gain_scale: float = Config.GAIN_SCALE
    min_frontier_size: float = Config.MIN_FRONTIER_SIZE
    blacklist_tolerance: float = Config.BLACKLIST_TOLERANCE
    robot_base_frame: str = Config.ROBOT_BASE_FRAME
    global_frame: str = Config.GLOBAL_FRAME
    costmap_topic: str = Config.COSTMAP_TOPIC
    costmap_updates_topic: str = Config.COSTMAP_UPDATES_TOPIC
    transform_tolerance: float = Config.TRANSFORM_TOLERANCE
    action_server_timeout: float = Config.ACTION_SERVER_TIMEOUT
    stop_timer_on_complete: bool = Config.STOP_TIMER_ON_COMPLETE

    @property
    def tick_interval(self) -> float:
        """Period between exploration ticks in seconds."""
        return 1.0 / self.planner_frequency

    def validate(self) -> 'ExploreParams':
        """
        Check parameter ranges.

        Returns:
            self, for chaining

        Raises:
            ValueError: If a parameter is out of range
        """
        if self.planner_frequency <= 0.0:
            raise ValueError(f'planner_frequency must be positive, got {self.planner_frequency}')
        if self.progress_timeout <= 0.0:
            raise ValueError(f'progress_timeout must be positive, got {self.progress_timeout}')
        if self.blacklist_tolerance <= 0.0:
            raise ValueError(f'blacklist_tolerance must be positive, got {self.blacklist_tolerance}')
        if self.min_frontier_size < 0.0:
            raise ValueError(f'min_frontier_size must not be negative, got {self.min_frontier_size}')
        if self.transform_tolerance < 0.0 or self.action_server_timeout < 0.0:
            raise ValueError('timeouts must not be negative')
        return self

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, values: Optional[Dict[str, Any]]) -> 'ExploreParams':
        """
        Build parameters from a mapping, ignoring unknown keys.

        Values are coerced to the type of the matching default.
        """
        params = cls()
        for f in fields(cls):
            if values and f.name in values and values[f.name] is not None:
                default = getattr(params, f.name)
                if isinstance(default, bool):
                    value = _to_bool(f.name, values[f.name])
                else:
                    value = type(default)(values[f.name])
                setattr(params, f.name, value)
        return params.validate()

    @classmethod
    def from_yaml(cls, path: str, node_name: str = 'explore') -> 'ExploreParams':
        """
        Load parameters from a YAML file.

        Accepts either a flat mapping or the ROS 2 layout
        ``<node_name>: {ros__parameters: {...}}``.

        Args:
            path: Path to the YAML file
            node_name: Node section to read in ROS 2 layout

        Returns:
            Validated ExploreParams

        Raises:
            FileNotFoundError: If the file does not exist
        """
        if not os.path.exists(path):
            raise FileNotFoundError(path)

        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}

        section = data.get(node_name, data)
        if isinstance(section, dict) and 'ros__parameters' in section:
            section = section['ros__parameters']
        return cls.from_dict(section)
