"""Parsing of robots.txt text into parse events and :class:`Robots` documents."""
from robot_exclusion.parser.builder import RobotsBuilder, parse_robots
from robot_exclusion.parser.robots_parser import (
    DirectiveStateMachine,
    ParseError,
    ParserState,
    RobotsParseHandler,
    RobotsParser,
)

__all__ = [
    "DirectiveStateMachine",
    "ParseError",
    "ParserState",
    "RobotsBuilder",
    "RobotsParseHandler",
    "RobotsParser",
    "parse_robots",
]
