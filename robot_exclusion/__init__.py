# robot_exclusion/__init__.py
"""
robot_exclusion package initializer.
Defines package version and exposes the service and CLI.
"""
__version__ = "0.1.0"

from robot_exclusion.engine import RobotExclusionService
from robot_exclusion.parser.builder import parse_robots

# Expose CLI entry point
from robot_exclusion.cli import cli
