"""Instrumentation that records SDK calls as traces, spans and metrics."""

from __future__ import annotations

import logging
from typing import Any

from latitude_sdk.exceptions import LatitudeApiError
from latitude_sdk.models.api import ToolResult
from latitude_sdk.models.events import StreamEvent, TokenUsage
from latitude_sdk.models.messages import ToolCall
from latitude_sdk.observability.models import Invocation, MetricPoint, Span, SpanKind, TraceRecord
from latitude_sdk.observability.tracer import Tracer
from latitude_sdk.protocols.instrumentation import MetricsCollector, SpanExporter

logger = logging.getLogger(__name__)


class _OpenCall:
    __slots__ = ("events_received", "root", "tool_spans", "trace_id")

    def __init__(self, trace_id: str, root: Span) -> None:
        self.trace_id = trace_id
        self.root = root
        self.tool_spans: dict[str, Span] = {}
        self.events_received = 0


class TracingInstrumentation:
    """An ``Instrumentation`` that traces each call with a ``Tracer``.

    Each ``run`` / ``chat`` / ``attach`` call becomes one trace with a root
    span of the matching ``SpanKind``.  Chain events are recorded as span
    events on the root, and every client-side tool call gets a child span.
    When the call ends, all spans of the trace go to the registered
    ``SpanExporter`` implementations and duration and token metrics go to
    the optional ``MetricsCollector``.

    Usage::

        from latitude_sdk import Latitude
        from latitude_sdk.observability import InMemorySpanExporter, TracingInstrumentation

        exporter = InMemorySpanExporter()
        client = Latitude(api_key, project_id=1, instrumentation=TracingInstrumentation([exporter]))

        await client.prompts.run("greeting")
        spans = exporter.get_spans()

    Parameters:
        exporters: Span exporters receiving each finished trace.
        metrics_collector: Optional collector for duration and usage metrics.
        tracer: Tracer to use; a new one is created if not provided.
    """

    __slots__ = ("_exporters", "_last_trace", "_metrics_collector", "_open", "_tracer")

    def __init__(
        self,
        exporters: list[SpanExporter] | None = None,
        metrics_collector: MetricsCollector | None = None,
        tracer: Tracer | None = None,
    ) -> None:
        self._exporters: list[SpanExporter] = list(exporters or [])
        self._metrics_collector = metrics_collector
        self._tracer = tracer or Tracer()
        self._open: dict[str, _OpenCall] = {}
        self._last_trace: TraceRecord | None = None

    @property
    def tracer(self) -> Tracer:
        return self._tracer

    @property
    def last_trace(self) -> TraceRecord | None:
        """The most recently finished trace, or ``None``."""
        return self._last_trace

    # -- Instrumentation hooks --

    def on_request_start(self, invocation: Invocation) -> None:
        operation = invocation.operation.value
        trace = self._tracer.start_trace(operation, {"invocation_id": invocation.id, **invocation.attributes})
        root = self._tracer.start_span(
            trace_id=trace.trace_id,
            name=f"latitude.{operation}",
            kind=invocation.operation,
            attributes=dict(invocation.attributes),
        )
        self._open[invocation.id] = _OpenCall(trace.trace_id, root)

    def on_event(self, invocation: Invocation, event: StreamEvent) -> None:
        call = self._open.get(invocation.id)
        if call is None:
            return
        call.events_received += 1
        if event.is_latitude_event:
            call.root = self._tracer.add_event(call.root, str(event.data.type))

    def on_tool_call(self, invocation: Invocation, tool_call: ToolCall) -> None:
        call = self._open.get(invocation.id)
        if call is None:
            return
        call.tool_spans[tool_call.id] = self._tracer.start_span(
            trace_id=call.trace_id,
            name=f"tool.{tool_call.name}",
            kind=SpanKind.TOOL,
            parent_span_id=call.root.span_id,
            attributes={"tool_call_id": tool_call.id, "tool_name": tool_call.name},
        )

    def on_tool_result(self, invocation: Invocation, result: ToolResult) -> None:
        call = self._open.get(invocation.id)
        if call is None:
            return
        span = call.tool_spans.pop(result.tool_call_id, None)
        if span is not None:
            self._tracer.end_span(span, status="error" if result.is_error else "ok")

    def on_finished(self, invocation: Invocation, response: Any) -> None:
        attributes: dict[str, Any] = {"conversation_uuid": getattr(response, "uuid", None)}
        usage = getattr(response, "usage", None)
        self._finish(invocation, "ok", attributes, usage if isinstance(usage, TokenUsage) else None)

    def on_error(self, invocation: Invocation, error: LatitudeApiError) -> None:
        attributes = {"error": error.message, "error_code": error.error_code, "status": error.status}
        self._finish(invocation, "error", attributes, None)
        self._record(
            "latitude.errors",
            1.0,
            {"operation": invocation.operation.value, "error_code": error.error_code},
        )
        self._flush()

    # -- Internals --

    def _finish(
        self,
        invocation: Invocation,
        status: str,
        attributes: dict[str, Any],
        usage: TokenUsage | None,
    ) -> None:
        call = self._open.pop(invocation.id, None)
        if call is None:
            return

        for span in call.tool_spans.values():
            self._tracer.end_span(span, status="error", attributes={"error": "tool call never completed"})

        root = self._tracer.end_span(
            call.root,
            status=status,
            attributes={**attributes, "events_received": call.events_received},
        )
        trace = self._tracer.end_trace(call.trace_id)
        self._last_trace = trace

        if trace is not None and trace.spans:
            for exporter in self._exporters:
                try:
                    exporter.export(list(trace.spans))
                except Exception:
                    logger.warning("SpanExporter %r failed", exporter, exc_info=True)

        tags = {"operation": invocation.operation.value, "status": status}
        self._record("latitude.duration_ms", root.duration_ms or 0.0, tags)
        if usage is not None:
            self._record("latitude.input_tokens", float(usage.input_tokens), tags)
            self._record("latitude.output_tokens", float(usage.output_tokens), tags)
            self._record("latitude.total_tokens", float(usage.total_tokens), tags)
        if status == "ok":
            self._flush()

    def _record(self, name: str, value: float, tags: dict[str, str]) -> None:
        if self._metrics_collector is not None:
            self._metrics_collector.record(MetricPoint(name=name, value=value, tags=tags))

    def _flush(self) -> None:
        if self._metrics_collector is not None:
            self._metrics_collector.flush()
