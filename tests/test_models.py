# File: tests/test_models.py
"""Tests for the document builder and the domain model."""
import dataclasses

import pytest

from robot_exclusion.crawler.models import Group, OtherDirective, PathDirective, Robots
from robot_exclusion.parser.builder import RobotsBuilder, parse_robots


def test_empty_text_gives_no_groups():
    assert parse_robots("") == Robots.empty()


def test_groups_keep_file_order_and_lowercase_agents():
    robots = parse_robots(
        "User-Agent: GoodBot\nUser-Agent: OtherBot\nDisallow: /tmp\n"
        "User-agent: *\nAllow: /\nCrawl-delay: 2\n"
    )
    assert [g.user_agents for g in robots.groups] == [("goodbot", "otherbot"), ("*",)]
    assert robots.groups[0].directives == (PathDirective.disallow("/tmp"),)
    assert robots.groups[1].directives == (
        PathDirective.allow("/"),
        OtherDirective("Crawl-delay", "2"),
    )


def test_duplicate_groups_are_not_merged():
    robots = parse_robots("user-agent: a\ndisallow: /1\nuser-agent: a\ndisallow: /2\n")
    assert len(robots.groups) == 2


def test_repeated_agent_in_one_group_is_stored_once():
    robots = parse_robots("user-agent: bot\nuser-agent: BOT\nallow: /\n")
    assert robots.groups[0].user_agents == ("bot",)


def test_directives_outside_groups_are_not_attributed():
    robots = parse_robots("disallow: /\nuser-agent: *\nallow: /public\n")
    assert robots.groups == (Group(("*",), (PathDirective.allow("/public"),)),)


def test_documents_are_immutable():
    robots = parse_robots("user-agent: *\ndisallow: /\n")
    with pytest.raises(dataclasses.FrozenInstanceError):
        robots.groups[0].directives = ()


def test_builder_rejects_agent_outside_entry():
    with pytest.raises(RuntimeError):
        RobotsBuilder().user_agent("bot")


def test_directives_of_filters_by_type():
    group = parse_robots("user-agent: *\nhost: example.com\ndisallow: /a\nallow: /b\n").groups[0]
    assert group.directives_of(PathDirective) == (PathDirective.disallow("/a"), PathDirective.allow("/b"))
    assert group.directives_of(OtherDirective) == (OtherDirective("host", "example.com"),)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("user-agent: *\ncrawl-delay: 2.5\n", 2.5),
        ("user-agent: *\nCrawl-Delay: 10\n", 10.0),
        ("user-agent: *\ncrawl-delay: soon\n", None),
        ("user-agent: *\ndisallow: /\n", None),
    ],
)
def test_crawl_delay(text, expected):
    assert parse_robots(text).groups[0].crawl_delay == expected


def test_wildcard_group_flag():
    robots = parse_robots("user-agent: bot\nallow: /\nuser-agent: *\ndisallow: /\n")
    assert [g.is_wildcard for g in robots.groups] == [False, True]


def test_as_dict():
    robots = parse_robots("user-agent: Bot\ndisallow: /x\n")
    assert robots.as_dict() == {
        "groups": [{"user_agents": ["bot"], "directives": [{"field": "disallow", "value": "/x"}]}]
    }


@pytest.mark.parametrize(
    "pattern,path,expected",
    [
        ("/a", "/a", True),
        ("/a", "/a/b", True),
        ("/a", "/b/a", False),
        ("/", "/anything", True),
        ("", "/anything", False),
        ("/*.php", "/index.php", True),
        ("/*.php", "/dir/index.php?x=1", True),
        ("/*.php$", "/index.php", True),
        ("/*.php$", "/index.php?x=1", False),
        ("/fish*", "/fish.html", True),
        ("/fish*", "/Fish.html", False),
        ("/a$", "/a", True),
        ("/a$", "/ab", False),
        ("/search?q=", "/search?q=robots", True),
        ("/a.b", "/axb", False),
    ],
)
def test_path_pattern_matching(pattern, path, expected):
    assert PathDirective.disallow(pattern).matches(path) is expected
