# robot_exclusion/crawler/models.py
"""
Data models for parsed robots.txt documents.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple, Type, TypeVar

WILDCARD_AGENT = "*"

_D = TypeVar("_D", bound="Directive")


@lru_cache(maxsize=4096)
def _compile_pattern(pattern: str) -> re.Pattern[str]:
    anchored = pattern.endswith("$")
    if anchored:
        pattern = pattern[:-1]
    body = ".*".join(re.escape(part) for part in pattern.split("*"))
    return re.compile(body + ("$" if anchored else ""), re.DOTALL)


@dataclass(frozen=True, slots=True)
class Directive:
    """A single rule line inside a group."""

    field: str
    value: str


@dataclass(frozen=True, slots=True)
class PathDirective(Directive):
    """Allow/disallow rule keyed by a path pattern."""

    allowed: bool = True

    @classmethod
    def allow(cls, value: str) -> PathDirective:
        return cls("allow", value, True)

    @classmethod
    def disallow(cls, value: str) -> PathDirective:
        return cls("disallow", value, False)

    def matches(self, path: str) -> bool:
        """Return True if the pattern matches the start of ``path``.

        ``*`` matches any run of characters and a trailing ``$`` anchors the
        pattern to the end of the path. An empty pattern matches nothing.
        """
        if not self.value:
            return False
        return _compile_pattern(self.value).match(path) is not None


@dataclass(frozen=True, slots=True)
class OtherDirective(Directive):
    """Opaque directive such as ``crawl-delay`` or ``host``."""


@dataclass(frozen=True, slots=True)
class Group:
    """User agents sharing one ordered list of directives."""

    user_agents: Tuple[str, ...]
    directives: Tuple[Directive, ...] = ()

    @property
    def is_wildcard(self) -> bool:
        return WILDCARD_AGENT in self.user_agents

    def directives_of(self, kind: Type[_D]) -> Tuple[_D, ...]:
        return tuple(d for d in self.directives if isinstance(d, kind))

    @property
    def crawl_delay(self) -> Optional[float]:
        for directive in self.directives_of(OtherDirective):
            if directive.field.lower() == "crawl-delay":
                try:
                    return float(directive.value)
                except ValueError:
                    return None
        return None


@dataclass(frozen=True, slots=True)
class Robots:
    """A parsed robots.txt: groups in file order."""

    groups: Tuple[Group, ...] = ()

    @classmethod
    def empty(cls) -> Robots:
        return cls(())

    def as_dict(self) -> dict:
        return {
            "groups": [
                {
                    "user_agents": list(g.user_agents),
                    "directives": [{"field": d.field, "value": d.value} for d in g.directives],
                }
                for g in self.groups
            ]
        }
