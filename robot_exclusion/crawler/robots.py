# robot_exclusion/crawler/robots.py
"""
Rule matching over parsed robots.txt documents.
"""
from __future__ import annotations

from typing import Optional, Sequence
from urllib.parse import urlsplit

from robot_exclusion.crawler.models import WILDCARD_AGENT, Group, PathDirective, Robots

__all__ = ("best_matching_group", "matching_directive", "is_allowed", "request_path")


def best_matching_group(groups: Sequence[Group], agent: str) -> Optional[Group]:
    """Select the most specific group for ``agent``.

    A literal matches when it occurs in the agent string, ignoring case. The
    longest matching literal wins, the first group in document order breaks
    ties, and the first ``*`` group is the fallback.
    """
    ua = agent.lower()
    best: Optional[Group] = None
    best_len = 0
    wildcard: Optional[Group] = None
    for group in groups:
        for literal in group.user_agents:
            if literal == WILDCARD_AGENT:
                if wildcard is None:
                    wildcard = group
            elif literal and literal in ua and len(literal) > best_len:
                best, best_len = group, len(literal)
    return best if best is not None else wildcard


def matching_directive(group: Group, path: str) -> Optional[PathDirective]:
    """First allow/disallow of ``group`` whose pattern matches ``path``, if any."""
    for directive in group.directives_of(PathDirective):
        if directive.matches(path):
            return directive
    return None


def is_allowed(robots: Robots, agent: str, path: str) -> bool:
    """Return False only if the first path directive matching ``path`` is a disallow."""
    group = best_matching_group(robots.groups, agent)
    if group is None:
        return True
    directive = matching_directive(group, path)
    return True if directive is None else directive.allowed


def request_path(uri: str) -> str:
    """Path plus query of ``uri``; ``/`` for an empty path."""
    parts = urlsplit(uri)
    path = parts.path or "/"
    if parts.query:
        path += "?" + parts.query
    return path
