"""Stream event models: platform chain events, provider deltas and final responses."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Field, NonNegativeInt, Tag, TypeAdapter

from latitude_sdk.constants import ChainEventTypes, ProviderEventTypes, StreamEventTypes
from latitude_sdk.models.base import WireModel
from latitude_sdk.models.messages import Message, ToolCall

# -- Usage and responses --


class TokenUsage(WireModel):
    """Token accounting for a provider call or a whole chain."""

    input_tokens: NonNegativeInt = 0
    output_tokens: NonNegativeInt = 0
    prompt_tokens: NonNegativeInt = 0
    completion_tokens: NonNegativeInt = 0
    total_tokens: NonNegativeInt = 0
    reasoning_tokens: NonNegativeInt = 0
    cached_input_tokens: NonNegativeInt = 0

    @property
    def is_consistent(self) -> bool:
        """Whether ``total_tokens`` equals ``input_tokens + output_tokens``."""
        return self.total_tokens == self.input_tokens + self.output_tokens


class TextResponse(WireModel):
    stream_type: Literal["text"] = "text"
    text: str = ""
    usage: TokenUsage = Field(default_factory=TokenUsage)
    tool_calls: list[ToolCall] | None = None
    reasoning: str | None = None
    document_log_uuid: str | None = None
    provider_log: dict[str, Any] | None = None


class ObjectResponse(WireModel):
    stream_type: Literal["object"] = "object"
    text: str = ""
    usage: TokenUsage = Field(default_factory=TokenUsage)
    object: Any = None
    document_log_uuid: str | None = None
    provider_log: dict[str, Any] | None = None


def _stream_type_tag(value: Any) -> str:
    tag = value.get("streamType", value.get("stream_type")) if isinstance(value, dict) else getattr(
        value, "stream_type", None,
    )
    return "object" if tag == "object" else "text"


ChainResponse = Annotated[
    Annotated[TextResponse, Tag("text")] | Annotated[ObjectResponse, Tag("object")],
    Discriminator(_stream_type_tag),
]


class GenerationResponse(WireModel):
    """Final outcome of a run, chat or attach.

    Parameters:
        uuid: Conversation identifier, usable with ``chat`` / ``attach``.
        conversation: The full message history as last reported by the platform.
        response: The last provider response of the run.
    """

    uuid: str
    conversation: list[Message] = Field(default_factory=list)
    response: ChainResponse

    @property
    def text(self) -> str:
        return self.response.text

    @property
    def usage(self) -> TokenUsage:
        return self.response.usage


class GenerationJob(WireModel):
    """Handle returned by background runs."""

    uuid: str


# -- Platform (chain) events --


class ChainError(WireModel):
    name: str = "Error"
    message: str = ""
    stack: str | None = None


class _ChainEventBase(WireModel):
    timestamp: float | None = None
    uuid: str | None = None
    messages: list[Message] = Field(default_factory=list)


class ChainStartedEvent(_ChainEventBase):
    type: Literal["chain-started"] = "chain-started"


class StepStartedEvent(_ChainEventBase):
    type: Literal["step-started"] = "step-started"


class ProviderStartedEvent(_ChainEventBase):
    type: Literal["provider-started"] = "provider-started"
    config: dict[str, Any] = Field(default_factory=dict)


class ProviderCompletedEvent(_ChainEventBase):
    type: Literal["provider-completed"] = "provider-completed"
    response: ChainResponse
    provider_log_uuid: str | None = None
    token_usage: TokenUsage | None = None
    finish_reason: str | None = None


class ToolsStartedEvent(_ChainEventBase):
    type: Literal["tools-started"] = "tools-started"
    tools: list[ToolCall] = Field(default_factory=list)


class ToolCompletedEvent(_ChainEventBase):
    type: Literal["tool-completed"] = "tool-completed"


class ToolResultEvent(_ChainEventBase):
    type: Literal["tool-result"] = "tool-result"
    tool_call_id: str | None = None
    tool_name: str | None = None
    result: Any = None
    is_error: bool = False


class StepCompletedEvent(_ChainEventBase):
    type: Literal["step-completed"] = "step-completed"


class ChainCompletedEvent(_ChainEventBase):
    type: Literal["chain-completed"] = "chain-completed"
    response: ChainResponse | None = None
    tool_calls: list[ToolCall] = Field(default_factory=list)
    token_usage: TokenUsage | None = None
    finish_reason: str | None = None


class ChainErrorEvent(_ChainEventBase):
    type: Literal["chain-error"] = "chain-error"
    error: ChainError = Field(default_factory=ChainError)


class IntegrationWakingUpEvent(_ChainEventBase):
    type: Literal["integration-waking-up"] = "integration-waking-up"
    integration_name: str = ""


class UnknownChainEvent(_ChainEventBase):
    """Platform event with a tag this SDK does not model."""

    type: str


_CHAIN_EVENT_TAGS = frozenset(t.value for t in ChainEventTypes)


def _event_tag(value: Any) -> str:
    tag = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    return tag if tag in _CHAIN_EVENT_TAGS else "unknown"


ChainEvent = Annotated[
    Annotated[ChainStartedEvent, Tag(ChainEventTypes.CHAIN_STARTED.value)]
    | Annotated[StepStartedEvent, Tag(ChainEventTypes.STEP_STARTED.value)]
    | Annotated[ProviderStartedEvent, Tag(ChainEventTypes.PROVIDER_STARTED.value)]
    | Annotated[ProviderCompletedEvent, Tag(ChainEventTypes.PROVIDER_COMPLETED.value)]
    | Annotated[ToolsStartedEvent, Tag(ChainEventTypes.TOOLS_STARTED.value)]
    | Annotated[ToolCompletedEvent, Tag(ChainEventTypes.TOOL_COMPLETED.value)]
    | Annotated[ToolResultEvent, Tag(ChainEventTypes.TOOL_RESULT.value)]
    | Annotated[StepCompletedEvent, Tag(ChainEventTypes.STEP_COMPLETED.value)]
    | Annotated[ChainCompletedEvent, Tag(ChainEventTypes.CHAIN_COMPLETED.value)]
    | Annotated[ChainErrorEvent, Tag(ChainEventTypes.CHAIN_ERROR.value)]
    | Annotated[IntegrationWakingUpEvent, Tag(ChainEventTypes.INTEGRATION_WAKING_UP.value)]
    | Annotated[UnknownChainEvent, Tag("unknown")],
    Discriminator(_event_tag),
]


# -- Provider deltas --


class TextDelta(WireModel):
    type: Literal["text-delta"] = "text-delta"
    text_delta: str = ""


class ToolCallDelta(WireModel):
    type: Literal["tool-call"] = "tool-call"
    tool_call_id: str
    tool_name: str
    args: dict[str, Any] = Field(default_factory=dict)

    def to_tool_call(self) -> ToolCall:
        return ToolCall(id=self.tool_call_id, name=self.tool_name, arguments=self.args)


class ToolResultDelta(WireModel):
    type: Literal["tool-result"] = "tool-result"
    tool_call_id: str
    tool_name: str
    args: dict[str, Any] = Field(default_factory=dict)
    result: Any = None


class FinishDelta(WireModel):
    type: Literal["finish"] = "finish"
    finish_reason: str | None = None


class ErrorDelta(WireModel):
    type: Literal["error"] = "error"
    error: Any = None


class PassthroughDelta(WireModel):
    """Provider delta with any other tag, forwarded untouched."""

    type: str = ""


_PROVIDER_DELTA_TAGS = frozenset(t.value for t in ProviderEventTypes)


def _delta_tag(value: Any) -> str:
    tag = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    return tag if tag in _PROVIDER_DELTA_TAGS else "passthrough"


ProviderDelta = Annotated[
    Annotated[TextDelta, Tag(ProviderEventTypes.TEXT_DELTA.value)]
    | Annotated[ToolCallDelta, Tag(ProviderEventTypes.TOOL_CALL.value)]
    | Annotated[ToolResultDelta, Tag(ProviderEventTypes.TOOL_RESULT.value)]
    | Annotated[FinishDelta, Tag(ProviderEventTypes.FINISH.value)]
    | Annotated[ErrorDelta, Tag(ProviderEventTypes.ERROR.value)]
    | Annotated[PassthroughDelta, Tag("passthrough")],
    Discriminator(_delta_tag),
]

_chain_event_adapter: TypeAdapter[ChainEvent] = TypeAdapter(ChainEvent)
_provider_delta_adapter: TypeAdapter[ProviderDelta] = TypeAdapter(ProviderDelta)
_response_adapter: TypeAdapter[ChainResponse] = TypeAdapter(ChainResponse)


class StreamEvent(BaseModel):
    """One SSE frame, decoded.

    ``data`` is a chain event model for ``latitude-event`` frames, a provider
    delta model for ``provider-event`` frames, and the raw decoded JSON for
    any other event name.
    """

    model_config = ConfigDict(frozen=True)

    event: str
    data: Any

    @classmethod
    def from_frame(cls, event: str, payload: Any) -> StreamEvent:
        """Build a typed event from an SSE event name and its decoded JSON data."""
        if event == StreamEventTypes.LATITUDE:
            return cls(event=event, data=_chain_event_adapter.validate_python(payload))
        if event == StreamEventTypes.PROVIDER:
            return cls(event=event, data=_provider_delta_adapter.validate_python(payload))
        return cls(event=event, data=payload)

    @property
    def is_latitude_event(self) -> bool:
        return self.event == StreamEventTypes.LATITUDE

    @property
    def is_provider_event(self) -> bool:
        return self.event == StreamEventTypes.PROVIDER


def parse_chain_response(raw: Any) -> TextResponse | ObjectResponse:
    """Validate a response payload into its ``streamType`` variant."""
    return _response_adapter.validate_python(raw)
