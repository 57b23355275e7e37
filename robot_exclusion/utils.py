# File: robot_exclusion/utils.py
"""robot_exclusion.utils: origin resolution for robots.txt and charset name lookup."""

from __future__ import annotations

import codecs
from dataclasses import dataclass
from typing import Dict, Sequence
from urllib.parse import urlsplit

from robot_exclusion.logger import logger

__all__: Sequence[str] = (
    "DEFAULT_PORTS",
    "RobotsSource",
    "RobotsSourceFactory",
    "resolve_charset",
)

DEFAULT_PORTS: Dict[str, int] = {"http": 80, "https": 443}

# Registered names that Python's codec registry does not know about.
_CHARSET_ALIASES: Dict[str, str] = {
    "unicode": "utf-16",
    "csisolatin1": "latin-1",
    "csascii": "ascii",
}


@dataclass(frozen=True, slots=True)
class RobotsSource:
    """Origin (scheme, host, port) governed by a single robots.txt."""

    scheme: str
    host: str
    port: int

    @property
    def url(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        if DEFAULT_PORTS.get(self.scheme) == self.port:
            return f"{self.scheme}://{host}/robots.txt"
        return f"{self.scheme}://{host}:{self.port}/robots.txt"

    def __str__(self) -> str:
        return self.url


class RobotsSourceFactory:
    """Maps resource URIs to the :class:`RobotsSource` whose rules apply to them."""

    def create_for(self, uri: str) -> RobotsSource:
        parts = urlsplit(uri)
        scheme = parts.scheme.lower()
        if scheme not in DEFAULT_PORTS:
            raise ValueError(f"Unsupported URI scheme for robots.txt: {uri!r}")
        if not parts.hostname:
            raise ValueError(f"URI has no host: {uri!r}")
        port = parts.port or DEFAULT_PORTS[scheme]
        source = RobotsSource(scheme, parts.hostname.lower(), port)
        logger.debug("Resolved %s -> %s", uri, source.url)
        return source


def resolve_charset(name: str) -> str:
    """Return the Python codec name for a charset name or alias.

    Raises:
        LookupError: if the name is unknown.
    """
    key = name.strip().lower()
    return codecs.lookup(_CHARSET_ALIASES.get(key, key)).name
