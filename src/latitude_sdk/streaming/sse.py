"""Server-Sent-Events framing.

``iter_sse_blocks`` groups the decoded lines of a streaming HTTP body into
blank-line-terminated blocks; ``parse_sse`` turns one block into a field map.
Line splitting across network chunks (including a ``\\r\\n`` pair split in
two) is handled by httpx's incremental line decoder.
"""

from __future__ import annotations

import re
from collections.abc import AsyncIterable, AsyncIterator

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def parse_sse(block: str | None) -> dict[str, str] | None:
    """Parse a single SSE block into ``{field: value}``.

    Lines starting with ``:`` are comments.  A line without a colon is a
    field with an empty value.  Values are stripped of surrounding
    whitespace, and repeated fields are joined with ``\\n``.

    Parameters:
        block: The raw text of one event block.

    Returns:
        The field map, or ``None`` when the block contains no fields.
    """
    if not block:
        return None

    fields: dict[str, str] = {}
    for line in _LINE_BREAK.split(block):
        if not line.strip() or line.startswith(":"):
            continue
        name, sep, value = line.partition(":")
        value = value.strip() if sep else ""
        if name in fields:
            fields[name] = f"{fields[name]}\n{value}"
        else:
            fields[name] = value

    return fields or None


async def iter_sse_blocks(lines: AsyncIterable[str]) -> AsyncIterator[str]:
    """Group decoded lines into event blocks.

    Parameters:
        lines: Lines without their terminators, e.g. ``response.aiter_lines()``.

    Yields:
        Each non-empty block, joined with ``\\n``.  A trailing block that the
        server did not terminate with a blank line is flushed at EOF.
    """
    pending: list[str] = []
    async for line in lines:
        if line.strip():
            pending.append(line)
        elif pending:
            yield "\n".join(pending)
            pending = []
    if pending:
        yield "\n".join(pending)


def format_sse(event: str, data: str) -> str:
    """Render one frame in the wire format the platform emits."""
    data_lines = "".join(f"data: {line}\n" for line in _LINE_BREAK.split(data))
    return f"event: {event}\n{data_lines}\n"
