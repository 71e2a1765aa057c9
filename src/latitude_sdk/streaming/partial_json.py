"""Incremental extraction of complete JSON objects from a growing text buffer.

Models often stream structured output as plain text deltas.  The
``IncrementalJsonParser`` accepts those deltas one at a time and hands back
every top-level JSON object as soon as its closing brace arrives, long
before the stream itself has finished.

Usage::

    parser = IncrementalJsonParser()
    parser.feed('[{"a": 1}, {"b"')   # -> [{"a": 1}]
    parser.feed(': 2}]')             # -> [{"b": 2}]
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

_SEPARATORS = " \t\r\n,"


class PartialParserState(BaseModel):
    """Snapshot of an ``IncrementalJsonParser``'s scanning state.

    Parameters:
        buffer: Text received but not yet consumed by an extracted object.
        depth: Current ``{`` nesting depth outside of strings (never negative).
        in_string: Whether the scanner is inside a JSON string literal.
        escape_next: Whether the next character is escaped.
        object_start: Buffer index of the ``{`` that opened the current
            top-level object, or ``-1``.
        array_mode: Whether the stream was detected to be a JSON array.
        cursor: Buffer index of the next character to scan.
    """

    model_config = ConfigDict(frozen=True)

    buffer: str = ""
    depth: int = 0
    in_string: bool = False
    escape_next: bool = False
    object_start: int = -1
    array_mode: bool = False
    cursor: int = 0


class IncrementalJsonParser:
    """Extracts complete top-level JSON objects from streamed text.

    Scanning resumes from a persistent cursor, so each call to ``feed`` only
    looks at the text it has not seen before.  Braces inside string literals
    (including escaped quotes) are ignored.  Spans that look balanced but are
    not valid JSON stay in the buffer and scanning moves on.  ``feed`` never
    raises.
    """

    __slots__ = (
        "_array_mode",
        "_buffer",
        "_cursor",
        "_depth",
        "_escape_next",
        "_in_string",
        "_object_start",
    )

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Return the parser to its initial, empty state."""
        self._buffer = ""
        self._depth = 0
        self._in_string = False
        self._escape_next = False
        self._object_start = -1
        self._array_mode = False
        self._cursor = 0

    @property
    def state(self) -> PartialParserState:
        return PartialParserState(
            buffer=self._buffer,
            depth=self._depth,
            in_string=self._in_string,
            escape_next=self._escape_next,
            object_start=self._object_start,
            array_mode=self._array_mode,
            cursor=self._cursor,
        )

    def get_partial(self) -> str:
        """Return the text received but not yet emitted as an object."""
        return self._buffer

    def feed(self, chunk: str) -> list[Any]:
        """Append ``chunk`` and return every object completed by it.

        Parameters:
            chunk: The next piece of streamed text.

        Returns:
            The decoded objects, in the order their closing braces appeared.
        """
        self._buffer += chunk
        self._detect_array()

        results: list[Any] = []
        buffer = self._buffer
        i = self._cursor
        while i < len(buffer):
            ch = buffer[i]
            if self._escape_next:
                self._escape_next = False
            elif self._in_string:
                if ch == "\\":
                    self._escape_next = True
                elif ch == '"':
                    self._in_string = False
            elif ch == '"':
                self._in_string = True
            elif ch == "{":
                if self._depth == 0:
                    self._object_start = i
                self._depth += 1
            elif ch == "}" and self._depth > 0:
                self._depth -= 1
                if self._depth == 0:
                    value, ok = _try_decode(buffer[self._object_start : i + 1])
                    self._object_start = -1
                    if ok:
                        results.append(value)
                        buffer = buffer[i + 1 :].lstrip(_SEPARATORS)
                        i = 0
                        continue
            i += 1

        self._buffer = buffer
        self._cursor = i
        return results

    def _detect_array(self) -> None:
        if self._array_mode or self._depth != 0 or self._in_string:
            return
        stripped = self._buffer.lstrip()
        if stripped.startswith("["):
            self._array_mode = True
            self._buffer = stripped[1:]
            self._cursor = 0


def _try_decode(candidate: str) -> tuple[Any, bool]:
    try:
        return json.loads(candidate), True
    except ValueError:
        logger.debug("Skipping balanced but invalid JSON span of %d chars", len(candidate))
        return None, False
