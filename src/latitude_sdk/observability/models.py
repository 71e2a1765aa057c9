"""Pydantic models for instrumentation: invocations, spans, traces and metrics."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SpanKind(StrEnum):
    """The SDK operation a span covers."""

    RUN = "run"
    CHAT = "chat"
    ATTACH = "attach"
    TOOL = "tool"


class Invocation(BaseModel):
    """Identity of one ``run`` / ``chat`` / ``attach`` call.

    Passed as the first argument of every instrumentation hook so that a
    single instrumentation object can follow several concurrent calls.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    operation: SpanKind
    attributes: dict[str, Any] = Field(default_factory=dict)
    started_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Span(BaseModel):
    """A timed unit of work inside a trace.

    Spans nest through ``parent_span_id``; ``events`` holds point-in-time
    annotations such as the chain events seen while streaming.
    """

    model_config = ConfigDict(frozen=True)

    span_id: str = Field(default_factory=lambda: uuid.uuid4().hex[:16])
    parent_span_id: str | None = None
    trace_id: str
    name: str
    kind: SpanKind
    start_time: datetime = Field(default_factory=lambda: datetime.now(UTC))
    end_time: datetime | None = None
    duration_ms: float | None = None
    status: str = "ok"
    attributes: dict[str, Any] = Field(default_factory=dict)
    events: list[dict[str, Any]] = Field(default_factory=list)


class TraceRecord(BaseModel):
    """All spans recorded for one invocation."""

    model_config = ConfigDict(frozen=True)

    trace_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    spans: list[Span] = Field(default_factory=list)
    start_time: datetime | None = None
    end_time: datetime | None = None
    total_duration_ms: float | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class MetricPoint(BaseModel):
    """A single measurement.

    Parameters:
        name: Metric name, e.g. ``"run.duration_ms"``.
        value: The measured value.
        timestamp: When it was measured.
        tags: Labels such as the operation or error code.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    value: float
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    tags: dict[str, str] = Field(default_factory=dict)
