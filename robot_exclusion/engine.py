# File: robot_exclusion/engine.py
"""robot_exclusion.engine: the robot exclusion service, caching robots.txt per origin."""

from __future__ import annotations

from typing import Optional, Protocol

from robot_exclusion.cache import LoadingCache
from robot_exclusion.config import RobotExclusionConfig
from robot_exclusion.crawler.fetcher import RobotsDownloader
from robot_exclusion.crawler.models import Robots
from robot_exclusion.crawler.robots import best_matching_group, matching_directive, request_path
from robot_exclusion.logger import logger
from robot_exclusion.utils import RobotsSource, RobotsSourceFactory

__all__ = ["Downloader", "RobotExclusionService"]


class Downloader(Protocol):
    def load(self, source: RobotsSource) -> Robots: ...


class RobotExclusionService:
    """Answers "may this agent fetch this URI?" for many origins and threads.

    robots.txt documents are downloaded on first use and cached per origin.
    Whenever the rules cannot be obtained the answer is "allowed".
    """

    def __init__(
        self,
        config: RobotExclusionConfig,
        *,
        source_factory: Optional[RobotsSourceFactory] = None,
        downloader: Optional[Downloader] = None,
    ) -> None:
        if config is None:
            raise TypeError("config is None")
        self.config = config
        self.source_factory = source_factory or RobotsSourceFactory()
        self.downloader = downloader or RobotsDownloader(config)
        self._cache: Optional[LoadingCache[RobotsSource, Robots]] = None

    def __enter__(self) -> RobotExclusionService:
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    @property
    def running(self) -> bool:
        return self._cache is not None

    def start(self) -> None:
        logger.info("Starting up")
        logger.debug(
            "Initializing cache (max size: %d, expires after: %s hours)",
            self.config.cache_max_size_records,
            self.config.cache_expires_hours,
        )
        self._cache = LoadingCache(
            self.downloader.load,
            max_size=self.config.cache_max_size_records,
            expire_after_write=self.config.cache_expires_seconds,
        )

    def stop(self) -> None:
        logger.info("Shutting down")
        if self._cache is None:
            return
        self._cache.invalidate_all()
        logger.debug("Cache stats: %s", self._cache.stats())
        self._cache = None

    def is_allowed(self, agent: str, resource_uri: str) -> bool:
        """Return whether ``agent`` may fetch ``resource_uri``; never raises on fetch errors."""
        if agent is None:
            raise TypeError("agent is None")
        if resource_uri is None:
            raise TypeError("resource_uri is None")

        logger.debug("evaluating: %s", resource_uri)
        robots = self._robots_for(resource_uri)
        if robots is None:
            return True

        if not robots.groups:
            logger.debug("robots.txt contains no agent groups; allowing: %s", resource_uri)
            return True

        group = best_matching_group(robots.groups, agent)
        if group is None:
            logger.debug("No matching groups; allowing: %s", resource_uri)
            return True

        directive = matching_directive(group, request_path(resource_uri))
        if directive is None:
            logger.debug("No matching path directive; allowing: %s", resource_uri)
            return True
        logger.debug(
            "Path directive %s matches; %s: %s",
            directive.value,
            "allowing" if directive.allowed else "disallowing",
            resource_uri,
        )
        return directive.allowed

    def crawl_delay(self, agent: str, resource_uri: str) -> Optional[float]:
        """Crawl delay (seconds) the origin asks of ``agent``, if any."""
        if agent is None:
            raise TypeError("agent is None")
        if resource_uri is None:
            raise TypeError("resource_uri is None")
        robots = self._robots_for(resource_uri)
        if robots is None:
            return None
        group = best_matching_group(robots.groups, agent)
        return None if group is None else group.crawl_delay

    def _robots_for(self, resource_uri: str) -> Optional[Robots]:
        if self._cache is None:
            raise RuntimeError("RobotExclusionService is not running")
        try:
            source = self.source_factory.create_for(resource_uri)
            return self._cache.get(source)
        except Exception as exc:
            logger.warning("robots.txt download failure; allowing: %s (%s)", resource_uri, exc)
            return None
