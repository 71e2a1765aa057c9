"""Conversation message models.

Messages are a tagged union on ``role``; their content parts are a tagged
union on ``type``.  Content tags this SDK does not know about are kept as
``UnknownContent`` instead of failing validation.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import Discriminator, Field, Tag, TypeAdapter, field_validator

from latitude_sdk.models.base import WireModel


class ToolCall(WireModel):
    """A tool invocation requested by the model."""

    id: str
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


# -- Content parts --


class TextContent(WireModel):
    type: Literal["text"] = "text"
    text: str | None = None


class ImageContent(WireModel):
    type: Literal["image"] = "image"
    image: str
    mime_type: str | None = None


class FileContent(WireModel):
    type: Literal["file"] = "file"
    file: str
    mime_type: str


class ReasoningContent(WireModel):
    type: Literal["reasoning"] = "reasoning"
    text: str
    id: str | None = None


class RedactedReasoningContent(WireModel):
    type: Literal["redacted-reasoning"] = "redacted-reasoning"
    data: str


class ToolCallContent(WireModel):
    type: Literal["tool-call"] = "tool-call"
    tool_call_id: str
    tool_name: str
    args: dict[str, Any] = Field(default_factory=dict)


class ToolResultContent(WireModel):
    type: Literal["tool-result"] = "tool-result"
    tool_call_id: str
    tool_name: str
    result: Any = None
    is_error: bool = False


class UnknownContent(WireModel):
    """Content part with a tag outside the known set; all fields are preserved."""

    type: str


_CONTENT_TAGS = frozenset(
    {"text", "image", "file", "reasoning", "redacted-reasoning", "tool-call", "tool-result"},
)


def _content_tag(value: Any) -> str:
    tag = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    return tag if tag in _CONTENT_TAGS else "unknown"


MessageContent = Annotated[
    Annotated[TextContent, Tag("text")]
    | Annotated[ImageContent, Tag("image")]
    | Annotated[FileContent, Tag("file")]
    | Annotated[ReasoningContent, Tag("reasoning")]
    | Annotated[RedactedReasoningContent, Tag("redacted-reasoning")]
    | Annotated[ToolCallContent, Tag("tool-call")]
    | Annotated[ToolResultContent, Tag("tool-result")]
    | Annotated[UnknownContent, Tag("unknown")],
    Discriminator(_content_tag),
]


# -- Messages --


class SystemMessage(WireModel):
    role: Literal["system"] = "system"
    content: str | list[MessageContent]


class UserMessage(WireModel):
    role: Literal["user"] = "user"
    content: str | list[MessageContent]
    name: str | None = None


class AssistantMessage(WireModel):
    role: Literal["assistant"] = "assistant"
    content: str | list[MessageContent]
    tool_calls: list[ToolCall] | None = None


class ToolMessage(WireModel):
    role: Literal["tool"] = "tool"
    content: list[MessageContent]

    @field_validator("content")
    @classmethod
    def _only_results(cls, value: list[Any]) -> list[Any]:
        for part in value:
            if part.type not in ("text", "tool-result"):
                msg = f"Tool messages may only contain text or tool-result parts, got {part.type!r}"
                raise ValueError(msg)
        return value


Message = Annotated[
    SystemMessage | UserMessage | AssistantMessage | ToolMessage,
    Field(discriminator="role"),
]

_messages_adapter: TypeAdapter[list[Message]] = TypeAdapter(list[Message])


def parse_messages(raw: Any) -> list[Message]:
    """Validate a list of message dicts (or message models) into typed messages."""
    return _messages_adapter.validate_python(raw)


def dump_messages(messages: list[Message]) -> list[dict[str, Any]]:
    """Serialise messages with the API's field names."""
    return [m.to_wire() for m in messages]


def message_text(message: Message) -> str:
    """Concatenate the plain-text parts of a message."""
    if isinstance(message.content, str):
        return message.content
    return "".join(part.text or "" for part in message.content if isinstance(part, TextContent))
