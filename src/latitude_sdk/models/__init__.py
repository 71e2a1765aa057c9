"""Wire models for the Latitude API."""

from .api import (
    DocumentLog,
    EvaluationResult,
    Project,
    ProjectWithVersion,
    Prompt,
    PushResult,
    ToolResult,
    Version,
    VersionChange,
)
from .base import WireModel
from .events import (
    ChainCompletedEvent,
    ChainError,
    ChainErrorEvent,
    ChainEvent,
    ChainResponse,
    ChainStartedEvent,
    ErrorDelta,
    FinishDelta,
    GenerationJob,
    GenerationResponse,
    IntegrationWakingUpEvent,
    ObjectResponse,
    PassthroughDelta,
    ProviderCompletedEvent,
    ProviderDelta,
    ProviderStartedEvent,
    StepCompletedEvent,
    StepStartedEvent,
    StreamEvent,
    TextDelta,
    TextResponse,
    TokenUsage,
    ToolCallDelta,
    ToolCompletedEvent,
    ToolResultDelta,
    ToolResultEvent,
    ToolsStartedEvent,
    UnknownChainEvent,
    parse_chain_response,
)
from .messages import (
    AssistantMessage,
    FileContent,
    ImageContent,
    Message,
    MessageContent,
    ReasoningContent,
    RedactedReasoningContent,
    SystemMessage,
    TextContent,
    ToolCall,
    ToolCallContent,
    ToolMessage,
    ToolResultContent,
    UnknownContent,
    UserMessage,
    dump_messages,
    message_text,
    parse_messages,
)

__all__ = [
    "AssistantMessage",
    "ChainCompletedEvent",
    "ChainError",
    "ChainErrorEvent",
    "ChainEvent",
    "ChainResponse",
    "ChainStartedEvent",
    "DocumentLog",
    "ErrorDelta",
    "EvaluationResult",
    "FileContent",
    "FinishDelta",
    "GenerationJob",
    "GenerationResponse",
    "ImageContent",
    "IntegrationWakingUpEvent",
    "Message",
    "MessageContent",
    "ObjectResponse",
    "PassthroughDelta",
    "Project",
    "ProjectWithVersion",
    "Prompt",
    "ProviderCompletedEvent",
    "ProviderDelta",
    "ProviderStartedEvent",
    "PushResult",
    "ReasoningContent",
    "RedactedReasoningContent",
    "StepCompletedEvent",
    "StepStartedEvent",
    "StreamEvent",
    "SystemMessage",
    "TextContent",
    "TextDelta",
    "TextResponse",
    "TokenUsage",
    "ToolCall",
    "ToolCallContent",
    "ToolCallDelta",
    "ToolCompletedEvent",
    "ToolMessage",
    "ToolResult",
    "ToolResultContent",
    "ToolResultDelta",
    "ToolResultEvent",
    "ToolsStartedEvent",
    "UnknownChainEvent",
    "UnknownContent",
    "UserMessage",
    "Version",
    "VersionChange",
    "WireModel",
    "dump_messages",
    "message_text",
    "parse_chain_response",
    "parse_messages",
]
