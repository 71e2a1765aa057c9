"""latitude-sdk: async Python client for the Latitude prompt platform.

Client:
    Latitude, Prompts, Runs, Projects, Versions, Logs, Evaluations

Streaming:
    StreamConsumer, ConsumerState, ToolCallDispatcher, IncrementalJsonParser,
    PartialParserState, JsonObjectListener, parse_sse, iter_sse_blocks

Models & Types:
    GenerationResponse, GenerationJob, StreamEvent, TextResponse,
    ObjectResponse, TokenUsage, Message, SystemMessage, UserMessage,
    AssistantMessage, ToolMessage, ToolCall, ToolResult, Project, Version,
    Prompt, DocumentLog, EvaluationResult, VersionChange

Constants:
    StreamEventTypes, ChainEventTypes, MessageRole, LogSources,
    ApiErrorCodes, RunErrorCodes, LatitudeErrorCodes, HEAD_COMMIT

Configuration:
    LatitudeSettings, GatewayConfig, get_settings

Protocols (extension points):
    Instrumentation, SpanExporter, MetricsCollector

Exceptions:
    LatitudeError, LatitudeApiError, ToolNotFoundError, ConfigurationError
"""

from importlib.metadata import PackageNotFoundError, version

from latitude_sdk.client import Evaluations, Latitude, Logs, Projects, Prompts, Runs, Versions
from latitude_sdk.config import GatewayConfig, LatitudeSettings, get_settings
from latitude_sdk.constants import (
    HEAD_COMMIT,
    ApiErrorCodes,
    ChainEventTypes,
    LatitudeErrorCodes,
    LogSources,
    MessageRole,
    RunErrorCodes,
    StreamEventTypes,
)
from latitude_sdk.exceptions import (
    ConfigurationError,
    LatitudeApiError,
    LatitudeError,
    ToolNotFoundError,
)
from latitude_sdk.models import (
    AssistantMessage,
    DocumentLog,
    EvaluationResult,
    GenerationJob,
    GenerationResponse,
    Message,
    ObjectResponse,
    Project,
    Prompt,
    StreamEvent,
    SystemMessage,
    TextResponse,
    TokenUsage,
    ToolCall,
    ToolMessage,
    ToolResult,
    UserMessage,
    Version,
    VersionChange,
)
from latitude_sdk.protocols import Instrumentation, MetricsCollector, SpanExporter
from latitude_sdk.streaming import (
    ConsumerState,
    IncrementalJsonParser,
    JsonObjectListener,
    PartialParserState,
    StreamConsumer,
    ToolCallDispatcher,
    iter_sse_blocks,
    parse_sse,
)

try:
    __version__ = version("latitude-sdk")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    "HEAD_COMMIT",
    "ApiErrorCodes",
    "AssistantMessage",
    "ChainEventTypes",
    "ConfigurationError",
    "ConsumerState",
    "DocumentLog",
    "EvaluationResult",
    "Evaluations",
    "GatewayConfig",
    "GenerationJob",
    "GenerationResponse",
    "IncrementalJsonParser",
    "Instrumentation",
    "JsonObjectListener",
    "Latitude",
    "LatitudeApiError",
    "LatitudeError",
    "LatitudeErrorCodes",
    "LatitudeSettings",
    "LogSources",
    "Logs",
    "Message",
    "MessageRole",
    "MetricsCollector",
    "ObjectResponse",
    "PartialParserState",
    "Project",
    "Projects",
    "Prompt",
    "Prompts",
    "RunErrorCodes",
    "Runs",
    "SpanExporter",
    "StreamConsumer",
    "StreamEvent",
    "StreamEventTypes",
    "SystemMessage",
    "TextResponse",
    "TokenUsage",
    "ToolCall",
    "ToolCallDispatcher",
    "ToolMessage",
    "ToolNotFoundError",
    "ToolResult",
    "UserMessage",
    "Version",
    "VersionChange",
    "Versions",
    "__version__",
    "get_settings",
    "iter_sse_blocks",
    "parse_sse",
]
