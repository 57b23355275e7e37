# File: tests/conftest.py
import threading
from typing import Callable, Dict, List

import pytest

from robot_exclusion.config import RobotExclusionConfig
from robot_exclusion.crawler.models import Robots
from robot_exclusion.parser.builder import parse_robots
from robot_exclusion.parser.robots_parser import RobotsParseHandler, RobotsParser
from robot_exclusion.utils import RobotsSource


class RecordingHandler(RobotsParseHandler):
    """Records every parse event as a tuple, in call order."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []

    def start_entry(self) -> None:
        self.calls.append(("start_entry",))

    def user_agent(self, name: str) -> None:
        self.calls.append(("user_agent", name))

    def allow(self, path: str) -> None:
        self.calls.append(("allow", path))

    def disallow(self, path: str) -> None:
        self.calls.append(("disallow", path))

    def other_directive(self, token: str, value: str) -> None:
        self.calls.append(("other_directive", token, value))

    def end_entry(self) -> None:
        self.calls.append(("end_entry",))


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeDownloader:
    """Serves canned robots.txt text per host; hosts mapped to an exception raise it."""

    def __init__(self, documents: Dict[str, object]) -> None:
        self.documents = documents
        self.calls: List[RobotsSource] = []
        self._lock = threading.Lock()

    def load(self, source: RobotsSource) -> Robots:
        with self._lock:
            self.calls.append(source)
        doc = self.documents[source.host]
        if isinstance(doc, BaseException):
            raise doc
        return parse_robots(doc)


@pytest.fixture()
def recorder() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture()
def parse_events(recorder) -> Callable[[str], List[tuple]]:
    """Parse text and return the recorded handler calls."""

    def _parse(text: str) -> List[tuple]:
        RobotsParser(text).parse(recorder)
        return recorder.calls

    return _parse


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def basic_config() -> RobotExclusionConfig:
    """Return a small valid config for service tests."""
    return RobotExclusionConfig(
        user_agent="TestAgent/1.0",
        cache_max_size_records=10,
        cache_expires_hours=1,
        request_timeout=2.0,
    )


@pytest.fixture()
def make_downloader() -> Callable[[Dict[str, object]], FakeDownloader]:
    return FakeDownloader
