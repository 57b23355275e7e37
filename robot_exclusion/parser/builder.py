# File: robot_exclusion/parser/builder.py
"""robot_exclusion.parser.builder: collects parse events into a :class:`Robots` document."""

from __future__ import annotations

from typing import List, Optional

from robot_exclusion.crawler.models import (
    Directive,
    Group,
    OtherDirective,
    PathDirective,
    Robots,
)
from robot_exclusion.parser.robots_parser import RobotsParseHandler, RobotsParser, StreamT

__all__ = ("RobotsBuilder", "parse_robots")


class RobotsBuilder(RobotsParseHandler):
    """Handler that accumulates groups; call :meth:`get` once parsing is done."""

    def __init__(self) -> None:
        self._groups: List[Group] = []
        self._agents: Optional[List[str]] = None
        self._directives: List[Directive] = []

    def start_entry(self) -> None:
        self._agents = []
        self._directives = []

    def user_agent(self, name: str) -> None:
        agent = name.lower()
        if agent not in self._current_agents():
            self._current_agents().append(agent)

    def allow(self, path: str) -> None:
        self._directives.append(PathDirective.allow(path))

    def disallow(self, path: str) -> None:
        self._directives.append(PathDirective.disallow(path))

    def other_directive(self, token: str, value: str) -> None:
        self._directives.append(OtherDirective(token, value))

    def end_entry(self) -> None:
        self._groups.append(Group(tuple(self._current_agents()), tuple(self._directives)))
        self._agents = None
        self._directives = []

    def get(self) -> Robots:
        return Robots(tuple(self._groups))

    def _current_agents(self) -> List[str]:
        if self._agents is None:
            raise RuntimeError("parse event received outside of start_entry/end_entry")
        return self._agents


def parse_robots(stream: StreamT, charset: str = "utf-8") -> Robots:
    """Parse ``stream`` into an immutable :class:`Robots` document."""
    builder = RobotsBuilder()
    RobotsParser(stream, charset).parse(builder)
    return builder.get()
