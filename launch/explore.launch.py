#!/usr/bin/env python3
"""
Explore Launch File

Starts the frontier exploration node on top of a running SLAM + Nav2 stack.

Usage:
  ros2 launch drobot_explore explore.launch.py
  ros2 launch drobot_explore explore.launch.py params_file:=/path/to/params.yaml
"""
import os
from ament_index_python.packages import get_package_share_directory
from launch import LaunchDescription
from launch.actions import DeclareLaunchArgument
from launch.substitutions import LaunchConfiguration
from launch_ros.actions import Node


def generate_launch_description():
    pkg_drobot_explore = get_package_share_directory('drobot_explore')
    default_params = os.path.join(pkg_drobot_explore, 'config', 'explore_params.yaml')

    use_sim_time = LaunchConfiguration('use_sim_time')
    params_file = LaunchConfiguration('params_file')

    explore = Node(
        package='drobot_explore',
        executable='explore',
        name='explore',
        output='screen',
        parameters=[params_file, {'use_sim_time': use_sim_time}],
    )

    return LaunchDescription([
        DeclareLaunchArgument('use_sim_time', default_value='true'),
        DeclareLaunchArgument('params_file', default_value=default_params),
        explore,
    ])
