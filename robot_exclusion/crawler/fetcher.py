# robot_exclusion/crawler/fetcher.py
"""
Fetcher module: downloads and parses robots.txt for a single origin.
"""
from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from aiohttp import ClientResponse, ClientSession, ClientTimeout

from robot_exclusion.config import RobotExclusionConfig
from robot_exclusion.crawler.models import Robots
from robot_exclusion.logger import logger
from robot_exclusion.parser.builder import parse_robots
from robot_exclusion.utils import RobotsSource, resolve_charset


class RobotsFetchError(Exception):
    """The robots.txt could not be obtained as a robots document."""


class RobotsDownloader:
    """Fetches robots.txt over HTTP(S) and parses it.

    HTTP 200 bodies are parsed, any 4xx means "no rules" (an empty document),
    everything else raises :class:`RobotsFetchError`.
    """

    def __init__(self, config: RobotExclusionConfig) -> None:
        if config is None:
            raise TypeError("config is None")
        self.config = config

    def load(self, source: RobotsSource) -> Robots:
        """Blocking variant of :meth:`fetch`.

        Runs a private event loop; when called from a thread that already runs
        one, the fetch happens on a worker thread so that loop is not re-entered.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.fetch(source))
        with ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(lambda: asyncio.run(self.fetch(source))).result()

    async def fetch(self, source: RobotsSource, session: Optional[ClientSession] = None) -> Robots:
        if session is not None:
            return await self._fetch(session, source)
        timeout = ClientTimeout(total=self.config.request_timeout)
        async with ClientSession(
            timeout=timeout,
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        ) as own_session:
            return await self._fetch(own_session, source)

    async def _fetch(self, session: ClientSession, source: RobotsSource) -> Robots:
        url = source.url
        logger.debug("Downloading %s", url)
        async with session.get(url) as resp:
            if 400 <= resp.status < 500:
                logger.debug("robots.txt %s -> HTTP %s; no restrictions", url, resp.status)
                return Robots.empty()
            if resp.status != 200:
                raise RobotsFetchError(f"{url} -> HTTP {resp.status}")
            mime = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
            if mime == "text/html":
                raise RobotsFetchError(f"{url} served {mime} instead of robots.txt")
            data = await self._read_limited(resp)
            charset = self._charset(resp)
        robots = parse_robots(data, charset)
        logger.debug("Parsed %s: %d group(s)", url, len(robots.groups))
        return robots

    async def _read_limited(self, resp: ClientResponse) -> bytes:
        remaining = self.config.max_file_size_bytes
        chunks: List[bytes] = []
        while remaining > 0:
            chunk = await resp.content.read(remaining)
            if not chunk:
                return b"".join(chunks)
            chunks.append(chunk)
            remaining -= len(chunk)
        data = b"".join(chunks)
        if not resp.content.at_eof():
            logger.debug("robots.txt %s truncated at %d bytes", resp.url, len(data))
            # drop the partial last line
            data = data[: data.rfind(b"\n") + 1]
        return data

    def _charset(self, resp: ClientResponse) -> str:
        declared = resp.charset
        if declared:
            try:
                return resolve_charset(declared)
            except LookupError:
                logger.debug("Unknown charset %r for %s; using %s", declared, resp.url, self.config.default_charset)
        return self.config.default_charset
