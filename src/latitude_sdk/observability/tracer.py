"""In-process tracer used by ``TracingInstrumentation``."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from latitude_sdk.observability.models import Span, SpanKind, TraceRecord

logger = logging.getLogger(__name__)


def _elapsed_ms(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() * 1000


class Tracer:
    """Keeps open traces and the latest version of each of their spans.

    Spans and traces are frozen models; every mutation stores an updated
    copy in the open trace and returns it.  Intended for use from a single
    event loop.
    """

    __slots__ = ("_open",)

    def __init__(self) -> None:
        self._open: dict[str, TraceRecord] = {}

    # -- Traces --

    def start_trace(self, name: str, attributes: dict[str, Any] | None = None) -> TraceRecord:
        """Open a trace named ``name`` (the operation, e.g. ``"run"``)."""
        trace = TraceRecord(start_time=datetime.now(UTC), metadata={"name": name, **(attributes or {})})
        self._open[trace.trace_id] = trace
        logger.debug("Started trace %s (%s)", trace.trace_id, name)
        return trace

    def end_trace(self, trace_id: str) -> TraceRecord | None:
        """Close a trace and return its final state, or ``None`` if it is not open."""
        trace = self._open.pop(trace_id, None)
        if trace is None:
            return None
        now = datetime.now(UTC)
        duration = _elapsed_ms(trace.start_time, now) if trace.start_time else None
        logger.debug("Ended trace %s (%.2f ms)", trace_id, duration or 0)
        return trace.model_copy(update={"end_time": now, "total_duration_ms": duration})

    def get_trace(self, trace_id: str) -> TraceRecord | None:
        return self._open.get(trace_id)

    @property
    def open_traces(self) -> int:
        return len(self._open)

    # -- Spans --

    def start_span(
        self,
        trace_id: str,
        name: str,
        kind: SpanKind,
        parent_span_id: str | None = None,
        attributes: dict[str, Any] | None = None,
    ) -> Span:
        """Create a span and register it with its (open) trace."""
        span = Span(
            trace_id=trace_id,
            name=name,
            kind=kind,
            parent_span_id=parent_span_id,
            attributes=attributes or {},
        )
        self._store(span)
        return span

    def add_event(self, span: Span, name: str, attributes: dict[str, Any] | None = None) -> Span:
        """Append a timestamped event to ``span``."""
        event = {"name": name, "timestamp": datetime.now(UTC).isoformat(), **(attributes or {})}
        updated = span.model_copy(update={"events": [*span.events, event]})
        self._store(updated)
        return updated

    def end_span(self, span: Span, status: str = "ok", attributes: dict[str, Any] | None = None) -> Span:
        """Close ``span`` with a status, merging in any final attributes."""
        now = datetime.now(UTC)
        ended = span.model_copy(
            update={
                "end_time": now,
                "duration_ms": _elapsed_ms(span.start_time, now),
                "status": status,
                "attributes": {**span.attributes, **(attributes or {})},
            },
        )
        self._store(ended)
        logger.debug("Ended span %s (%s, %s)", span.span_id, span.name, status)
        return ended

    def _store(self, span: Span) -> None:
        trace = self._open.get(span.trace_id)
        if trace is None:
            return
        spans = [s for s in trace.spans if s.span_id != span.span_id]
        index = next((i for i, s in enumerate(trace.spans) if s.span_id == span.span_id), len(spans))
        spans.insert(index, span)
        self._open[span.trace_id] = trace.model_copy(update={"spans": spans})
