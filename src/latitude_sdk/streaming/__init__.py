"""Streaming: SSE framing, event aggregation, tool round-trips and partial JSON."""

from .consumer import ConsumerState, StreamConsumer
from .objects import JsonObjectListener
from .partial_json import IncrementalJsonParser, PartialParserState
from .sse import format_sse, iter_sse_blocks, parse_sse
from .tools import ToolCallDispatcher, ToolHandler

__all__ = [
    "ConsumerState",
    "IncrementalJsonParser",
    "JsonObjectListener",
    "PartialParserState",
    "StreamConsumer",
    "ToolCallDispatcher",
    "ToolHandler",
    "format_sse",
    "iter_sse_blocks",
    "parse_sse",
]
