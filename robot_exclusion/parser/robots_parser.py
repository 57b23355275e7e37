# File: robot_exclusion/parser/robots_parser.py
"""robot_exclusion.parser.robots_parser: line-oriented robots.txt push parser.

The parser reads a character (or byte) stream one physical line at a time and
reports what it finds to a :class:`RobotsParseHandler`::

    parser = RobotsParser(open("robots.txt", "rb"), charset="utf-8")
    parser.parse(handler)

Grouping decisions are made by :class:`DirectiveStateMachine`, which can be
driven line by line without any stream at all.
"""

from __future__ import annotations

import enum
import io
import re
from typing import IO, Iterator, Union

from robot_exclusion.logger import logger

__all__ = (
    "ParseError",
    "ParserState",
    "RobotsParseHandler",
    "DirectiveStateMachine",
    "RobotsParser",
    "strip_comment",
)

_COMMENT_RE = re.compile(r"(?<!\\)#.*")
_BOM = "\ufeff"

StreamT = Union[str, bytes, IO[str], IO[bytes]]


class ParseError(Exception):
    """Raised when the input cannot be read as robots.txt text at all."""


class RobotsParseHandler:
    """Receives parse events in document order. Every callback is a no-op here."""

    def start_entry(self) -> None:
        pass

    def user_agent(self, name: str) -> None:
        pass

    def allow(self, path: str) -> None:
        pass

    def disallow(self, path: str) -> None:
        pass

    def other_directive(self, token: str, value: str) -> None:
        pass

    def end_entry(self) -> None:
        pass


class ParserState(enum.Enum):
    OUTSIDE_GROUP = "outside-group"
    IN_GROUP = "in-group"


def strip_comment(line: str) -> str:
    """Drop everything from the first unescaped ``#`` and trim the rest."""
    return _COMMENT_RE.sub("", line, count=1).replace("\\#", "#").strip()


class DirectiveStateMachine:
    """Turns single lines into handler calls, tracking the current group."""

    def __init__(self, handler: RobotsParseHandler) -> None:
        self.handler = handler
        self.state = ParserState.OUTSIDE_GROUP
        self.last_was_agent = False

    def feed(self, raw_line: str) -> None:
        line = strip_comment(raw_line)
        if not line:
            return
        token, sep, value = line.partition(":")
        token = token.strip()
        if not sep or not token:
            logger.debug("Ignoring unparseable robots.txt line: %r", line)
            return
        value = value.strip()
        key = token.lower()
        if key == "user-agent":
            self._user_agent(value)
        else:
            self._directive(token, key, value)

    def finish(self) -> None:
        if self.state is ParserState.IN_GROUP:
            self.handler.end_entry()
        self.state = ParserState.OUTSIDE_GROUP
        self.last_was_agent = False

    def _user_agent(self, name: str) -> None:
        if self.state is ParserState.IN_GROUP and not self.last_was_agent:
            self.handler.end_entry()
            self.state = ParserState.OUTSIDE_GROUP
        if self.state is ParserState.OUTSIDE_GROUP:
            self.handler.start_entry()
            self.state = ParserState.IN_GROUP
        self.handler.user_agent(name)
        self.last_was_agent = True

    def _directive(self, token: str, key: str, value: str) -> None:
        if self.state is ParserState.OUTSIDE_GROUP:
            logger.debug("Discarding %r directive outside of any user-agent group", token)
            return
        self.last_was_agent = False
        if key == "allow":
            self.handler.allow(value)
        elif key == "disallow":
            self.handler.disallow(value)
        else:
            self.handler.other_directive(token, value)


class RobotsParser:
    """Push parser for robots.txt.

    Args:
        stream: text or binary file object, or the document as ``str``/``bytes``.
        charset: codec used when ``stream`` yields bytes.
    """

    def __init__(self, stream: StreamT, charset: str = "utf-8") -> None:
        if stream is None:
            raise TypeError("stream is None")
        if isinstance(stream, str):
            stream = io.StringIO(stream)
        elif isinstance(stream, (bytes, bytearray)):
            stream = io.BytesIO(stream)
        self._stream = stream
        self._charset = charset

    def parse(self, handler: RobotsParseHandler) -> None:
        """Feed every line of the stream to ``handler``; close the last group at EOF."""
        machine = DirectiveStateMachine(handler)
        for line in self._lines():
            machine.feed(line)
        machine.finish()

    def _lines(self) -> Iterator[str]:
        if isinstance(self._stream, io.TextIOBase):
            text, wrapper = self._stream, None
        else:
            wrapper = io.TextIOWrapper(self._stream, encoding=self._charset, newline="")
            text = wrapper
        first = True
        try:
            while True:
                try:
                    chunk = text.readline()
                except (UnicodeDecodeError, OSError) as exc:
                    raise ParseError(f"Unreadable robots.txt stream: {exc}") from exc
                if not chunk:
                    break
                if first:
                    # byte order mark, left in place by utf-8 and by text streams
                    chunk = chunk.lstrip(_BOM)
                    first = False
                yield from chunk.splitlines()
        finally:
            if wrapper is not None:
                wrapper.detach()
