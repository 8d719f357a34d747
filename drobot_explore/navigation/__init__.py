"""
Navigation progress tracking.

The Nav2 goal client lives in goal_client and is imported by the node only,
so this package stays usable without a ROS installation.
"""
from .progress import ProgressMonitor

__all__ = ['ProgressMonitor']
