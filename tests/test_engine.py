# File: tests/test_engine.py
"""Tests for the cached, fail-open robot exclusion service."""
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from robot_exclusion.crawler.fetcher import RobotsFetchError
from robot_exclusion.engine import RobotExclusionService
from robot_exclusion.parser.builder import parse_robots

EXAMPLE = "user-agent: *\ndisallow: /private\nallow: /private/public\n\nuser-agent: slowbot\ncrawl-delay: 5\ndisallow: /tmp\n"


@pytest.fixture()
def downloader(make_downloader):
    return make_downloader(
        {
            "example.com": EXAMPLE,
            "empty.example": "",
            "broken.example": RobotsFetchError("HTTP 503"),
        }
    )


@pytest.fixture()
def service(basic_config, downloader):
    with RobotExclusionService(basic_config, downloader=downloader) as svc:
        yield svc


def test_disallowed_path(service):
    assert service.is_allowed("anybot", "http://example.com/private/page") is False


def test_allowed_path(service):
    assert service.is_allowed("anybot", "http://example.com/public") is True


def test_first_matching_directive_wins(service):
    assert service.is_allowed("anybot", "http://example.com/private/public") is False


def test_specific_group_is_used(service):
    assert service.is_allowed("SlowBot/2.0", "http://example.com/private") is True
    assert service.is_allowed("SlowBot/2.0", "http://example.com/tmp/x") is False


def test_document_without_groups_allows(service):
    assert service.is_allowed("anybot", "https://empty.example/anything") is True


def test_download_failure_fails_open(service, downloader):
    assert service.is_allowed("anybot", "http://broken.example/private") is True
    assert service.is_allowed("anybot", "http://broken.example/private") is True
    assert len(downloader.calls) == 2


def test_unresolvable_uri_fails_open(service, downloader):
    assert service.is_allowed("anybot", "ftp://example.com/private") is True
    assert service.is_allowed("anybot", "not a uri") is True
    assert downloader.calls == []


def test_documents_are_cached_per_origin(service, downloader):
    service.is_allowed("a", "http://example.com/1")
    service.is_allowed("b", "http://EXAMPLE.com:80/2")
    service.is_allowed("c", "https://example.com/3")
    assert [(s.scheme, s.port) for s in downloader.calls] == [("http", 80), ("https", 443)]


def test_crawl_delay(service):
    assert service.crawl_delay("slowbot", "http://example.com/") == 5.0
    assert service.crawl_delay("anybot", "http://example.com/") is None
    assert service.crawl_delay("anybot", "http://broken.example/") is None


def test_null_arguments_are_rejected(service):
    with pytest.raises(TypeError):
        service.is_allowed(None, "http://example.com/")
    with pytest.raises(TypeError):
        service.is_allowed("bot", None)


def test_crawl_delay_rejects_null_arguments(service, downloader):
    with pytest.raises(TypeError):
        service.crawl_delay(None, "http://example.com/")
    with pytest.raises(TypeError):
        service.crawl_delay("bot", None)
    assert downloader.calls == []


def test_null_config_is_rejected():
    with pytest.raises(TypeError):
        RobotExclusionService(None)


def test_service_must_be_started(basic_config, downloader):
    service = RobotExclusionService(basic_config, downloader=downloader)
    assert not service.running
    with pytest.raises(RuntimeError):
        service.is_allowed("bot", "http://example.com/")


def test_stop_discards_cached_documents(basic_config, downloader):
    service = RobotExclusionService(basic_config, downloader=downloader)
    service.start()
    service.is_allowed("bot", "http://example.com/")
    service.stop()
    service.start()
    service.is_allowed("bot", "http://example.com/")
    service.stop()
    assert len(downloader.calls) == 2


class SlowDownloader:
    def __init__(self, text, error=None):
        self.text = text
        self.error = error
        self.calls = 0
        self._lock = threading.Lock()

    def load(self, source):
        with self._lock:
            self.calls += 1
        time.sleep(0.2)
        if self.error is not None:
            raise self.error
        return parse_robots(self.text)


def test_concurrent_requests_trigger_one_download(basic_config):
    downloader = SlowDownloader("user-agent: *\ndisallow: /a\n")
    with RobotExclusionService(basic_config, downloader=downloader) as service:
        with ThreadPoolExecutor(max_workers=10) as pool:
            results = list(pool.map(lambda i: service.is_allowed("bot", f"http://example.com/a/{i}"), range(10)))
    assert results == [False] * 10
    assert downloader.calls == 1


def test_concurrent_failures_all_fail_open(basic_config):
    downloader = SlowDownloader("", error=RobotsFetchError("HTTP 500"))
    with RobotExclusionService(basic_config, downloader=downloader) as service:
        with ThreadPoolExecutor(max_workers=5) as pool:
            results = list(pool.map(lambda i: service.is_allowed("bot", "http://example.com/"), range(5)))
    assert results == [True] * 5
    assert downloader.calls == 1
