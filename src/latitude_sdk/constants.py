"""Wire-level enumerations shared across the SDK."""

from __future__ import annotations

from enum import StrEnum

HEAD_COMMIT = "live"
DEFAULT_GATEWAY_HOST = "gateway.latitude.so"
LOCAL_GATEWAY_HOST = "localhost"
LOCAL_GATEWAY_PORT = 8787
API_VERSION = "v3"


class StreamEventTypes(StrEnum):
    """Names used in the ``event:`` field of SSE frames."""

    LATITUDE = "latitude-event"
    PROVIDER = "provider-event"


class ChainEventTypes(StrEnum):
    """Platform event tags carried in the ``type`` field of latitude events."""

    CHAIN_STARTED = "chain-started"
    STEP_STARTED = "step-started"
    PROVIDER_STARTED = "provider-started"
    PROVIDER_COMPLETED = "provider-completed"
    TOOLS_STARTED = "tools-started"
    TOOL_COMPLETED = "tool-completed"
    TOOL_RESULT = "tool-result"
    STEP_COMPLETED = "step-completed"
    CHAIN_COMPLETED = "chain-completed"
    CHAIN_ERROR = "chain-error"
    INTEGRATION_WAKING_UP = "integration-waking-up"


class ProviderEventTypes(StrEnum):
    """Tags of the provider deltas this SDK interprets."""

    TEXT_DELTA = "text-delta"
    TOOL_CALL = "tool-call"
    TOOL_RESULT = "tool-result"
    FINISH = "finish"
    ERROR = "error"


class StreamTypes(StrEnum):
    TEXT = "text"
    OBJECT = "object"


class MessageRole(StrEnum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class LogSources(StrEnum):
    """Origin reported to the platform in the ``__internal`` body field."""

    API = "api"
    PLAYGROUND = "playground"
    EVALUATION = "evaluation"


class ApiErrorCodes(StrEnum):
    HTTP_EXCEPTION = "http_exception"
    INTERNAL_SERVER_ERROR = "internal_server_error"


class RunErrorCodes(StrEnum):
    """Error codes emitted by the platform when a prompt run fails."""

    AI_PROVIDER_CONFIG_ERROR = "ai_provider_config_error"
    AI_RUN_ERROR = "ai_run_error"
    CHAIN_COMPILE_ERROR = "chain_compile_error"
    DEFAULT_PROVIDER_EXCEEDED_QUOTA_ERROR = "default_provider_exceeded_quota_error"
    DEFAULT_PROVIDER_INVALID_MODEL_ERROR = "default_provider_invalid_model_error"
    DOCUMENT_CONFIG_ERROR = "document_config_error"
    ERROR_GENERATING_MOCK_TOOL_RESULT = "error_generating_mock_tool_result"
    FAILED_TO_WAKE_UP_INTEGRATION_ERROR = "failed_to_wake_up_integration_error"
    INVALID_RESPONSE_FORMAT_ERROR = "invalid_response_format_error"
    MAX_STEP_COUNT_EXCEEDED_ERROR = "max_step_count_exceeded_error"
    MISSING_PROVIDER_ERROR = "missing_provider_error"
    RATE_LIMIT_ERROR = "rate_limit_error"
    UNKNOWN_ERROR = "unknown_error"
    UNSUPPORTED_PROVIDER_RESPONSE_TYPE_ERROR = "unsupported_provider_response_type_error"
    PAYMENT_REQUIRED_ERROR = "payment_required_error"
    ABORT_ERROR = "abort_error"


class LatitudeErrorCodes(StrEnum):
    """Generic error classes reported by the platform API."""

    UNEXPECTED_ERROR = "UnexpectedError"
    OVERLOADED_ERROR = "OverloadedError"
    RATE_LIMIT_ERROR = "RateLimitError"
    UNAUTHORIZED_ERROR = "UnauthorizedError"
    FORBIDDEN_ERROR = "ForbiddenError"
    BAD_REQUEST_ERROR = "BadRequestError"
    NOT_FOUND_ERROR = "NotFoundError"
    CONFLICT_ERROR = "ConflictError"
    UNPROCESSABLE_ENTITY_ERROR = "UnprocessableEntityError"
    NOT_IMPLEMENTED_ERROR = "NotImplementedError"
    PAYMENT_REQUIRED_ERROR = "PaymentRequiredError"
    ABORTED_ERROR = "AbortedError"
