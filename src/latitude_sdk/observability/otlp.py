"""OTLP/HTTP exporters for spans and metrics.

Requires the ``otlp`` extra: ``pip install latitude-sdk[otlp]``
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from latitude_sdk.observability.models import MetricPoint, Span, SpanKind, TraceRecord

logger = logging.getLogger(__name__)

__all__ = [
    "OTLPMetricsExporter",
    "OTLPSpanExporter",
]

_OTEL_SPAN_KINDS: dict[SpanKind, str] = {
    SpanKind.RUN: "CLIENT",
    SpanKind.CHAT: "CLIENT",
    SpanKind.ATTACH: "CLIENT",
    SpanKind.TOOL: "INTERNAL",
}

_PRIMITIVES = (str, bool, int, float)


def _to_ns(dt: datetime) -> int:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp() * 1_000_000_000)


def _otel_attributes(attributes: dict[str, Any]) -> dict[str, Any]:
    """OTel only accepts primitive attribute values; everything else is stringified."""
    return {
        f"latitude.{key}": value if isinstance(value, _PRIMITIVES) else str(value)
        for key, value in attributes.items()
        if value is not None
    }


def convert_span(span: Span) -> dict[str, Any]:
    """Flatten a ``Span`` into the arguments used to replay it through OpenTelemetry.

    Kept free of OpenTelemetry imports so it can be tested without the extra.
    """
    converted: dict[str, Any] = {
        "name": span.name,
        "kind": _OTEL_SPAN_KINDS.get(span.kind, "INTERNAL"),
        "start_time": _to_ns(span.start_time),
        "end_time": _to_ns(span.end_time) if span.end_time is not None else None,
        "status": span.status,
        "attributes": {
            **_otel_attributes(span.attributes),
            "latitude.span_id": span.span_id,
            "latitude.trace_id": span.trace_id,
        },
        "events": [
            {
                "name": str(event.get("name", "event")),
                "attributes": _otel_attributes({k: v for k, v in event.items() if k != "name"}),
            }
            for event in span.events
        ],
    }
    if span.parent_span_id is not None:
        converted["attributes"]["latitude.parent_span_id"] = span.parent_span_id
    return converted


class OTLPSpanExporter:
    """Send spans to an OpenTelemetry collector over OTLP/HTTP.

    Implements the ``SpanExporter`` protocol.

    Parameters:
        endpoint: Collector base URL. Default ``"http://localhost:4318"``.
        service_name: ``service.name`` of the OTel resource.
        headers: Extra headers, e.g. for collector authentication.
    """

    __slots__ = ("_endpoint", "_provider", "_service_name", "_status_code", "_span_kind")

    def __init__(
        self,
        endpoint: str = "http://localhost:4318",
        service_name: str = "latitude-sdk",
        headers: dict[str, str] | None = None,
    ) -> None:
        try:
            from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
                OTLPSpanExporter as _OTLPExporter,
            )
            from opentelemetry.sdk.resources import Resource
            from opentelemetry.sdk.trace import TracerProvider
            from opentelemetry.sdk.trace.export import SimpleSpanProcessor
            from opentelemetry.trace import SpanKind as _OTelSpanKind
            from opentelemetry.trace import StatusCode
        except ImportError:
            msg = (
                "OTLPSpanExporter requires opentelemetry packages. "
                "Install with: pip install latitude-sdk[otlp]"
            )
            raise ImportError(msg) from None

        self._endpoint = endpoint
        self._service_name = service_name
        self._status_code = StatusCode
        self._span_kind = _OTelSpanKind

        provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
        provider.add_span_processor(
            SimpleSpanProcessor(_OTLPExporter(endpoint=f"{endpoint}/v1/traces", headers=headers or {})),
        )
        self._provider = provider

    def export(self, spans: list[Span]) -> None:
        tracer = self._provider.get_tracer(self._service_name)
        for span in spans:
            converted = convert_span(span)
            otel_span = tracer.start_span(
                name=converted["name"],
                kind=getattr(self._span_kind, converted["kind"]),
                attributes=converted["attributes"],
                start_time=converted["start_time"],
            )
            for event in converted["events"]:
                otel_span.add_event(event["name"], attributes=event["attributes"])
            if converted["status"] == "error":
                otel_span.set_status(self._status_code.ERROR)
            otel_span.end(end_time=converted["end_time"])
        logger.debug("Exported %d span(s) via OTLP", len(spans))

    def export_record(self, record: TraceRecord) -> None:
        self.export(list(record.spans))

    def shutdown(self) -> None:
        self._provider.shutdown()


class OTLPMetricsExporter:
    """Send metric points to an OpenTelemetry collector over OTLP/HTTP.

    Implements the ``MetricsCollector`` protocol; each metric name becomes
    an OTel gauge.

    Parameters:
        endpoint: Collector base URL. Default ``"http://localhost:4318"``.
        service_name: ``service.name`` of the OTel resource.
        headers: Extra headers, e.g. for collector authentication.
        export_interval_ms: How often the periodic reader pushes metrics.
    """

    __slots__ = ("_gauges", "_meter", "_provider")

    def __init__(
        self,
        endpoint: str = "http://localhost:4318",
        service_name: str = "latitude-sdk",
        headers: dict[str, str] | None = None,
        export_interval_ms: int = 5000,
    ) -> None:
        try:
            from opentelemetry.exporter.otlp.proto.http.metric_exporter import (
                OTLPMetricExporter as _OTLPMetricExporter,
            )
            from opentelemetry.sdk.metrics import MeterProvider
            from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
            from opentelemetry.sdk.resources import Resource
        except ImportError:
            msg = (
                "OTLPMetricsExporter requires opentelemetry packages. "
                "Install with: pip install latitude-sdk[otlp]"
            )
            raise ImportError(msg) from None

        exporter = _OTLPMetricExporter(endpoint=f"{endpoint}/v1/metrics", headers=headers or {})
        reader = PeriodicExportingMetricReader(exporter, export_interval_millis=export_interval_ms)
        self._provider = MeterProvider(
            resource=Resource.create({"service.name": service_name}),
            metric_readers=[reader],
        )
        self._meter = self._provider.get_meter(service_name)
        self._gauges: dict[str, Any] = {}

    def record(self, metric: MetricPoint) -> None:
        if not isinstance(metric, MetricPoint):
            msg = f"Expected MetricPoint, got {type(metric).__name__}"
            raise TypeError(msg)
        gauge = self._gauges.get(metric.name)
        if gauge is None:
            gauge = self._gauges[metric.name] = self._meter.create_gauge(metric.name)
        gauge.set(metric.value, attributes=dict(metric.tags))

    def flush(self) -> None:
        self._provider.force_flush()

    def shutdown(self) -> None:
        self._provider.shutdown()
