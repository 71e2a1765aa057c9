"""Tests for latitude_sdk.observability.otlp."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from latitude_sdk.observability.models import Span, SpanKind
from latitude_sdk.observability.otlp import OTLPMetricsExporter, OTLPSpanExporter, convert_span

START = datetime(2025, 1, 15, 12, 0, 0, tzinfo=UTC)
END = datetime(2025, 1, 15, 12, 0, 1, tzinfo=UTC)


class TestConvertSpan:
    @pytest.mark.parametrize("kind", list(SpanKind))
    def test_every_span_kind_converts(self, kind: SpanKind) -> None:
        span = Span(trace_id="t1", name="x", kind=kind, start_time=START)
        assert convert_span(span)["kind"] == ("INTERNAL" if kind == SpanKind.TOOL else "CLIENT")

    def test_span_kinds_are_the_sdk_operations(self) -> None:
        assert {k.value for k in SpanKind} == {"run", "chat", "attach", "tool"}

    def test_root_span(self) -> None:
        span = Span(
            trace_id="t1",
            name="latitude.run",
            kind=SpanKind.RUN,
            start_time=START,
            end_time=END,
            attributes={"route": "run-document", "stream": True, "usage": {"a": 1}, "skipped": None},
            events=[{"name": "chain-started", "timestamp": "now"}],
        )
        converted = convert_span(span)

        assert converted["name"] == "latitude.run"
        assert converted["kind"] == "CLIENT"
        assert converted["end_time"] - converted["start_time"] == 1_000_000_000
        assert converted["attributes"]["latitude.route"] == "run-document"
        assert converted["attributes"]["latitude.stream"] is True
        assert converted["attributes"]["latitude.usage"] == "{'a': 1}"
        assert "latitude.skipped" not in converted["attributes"]
        assert "latitude.parent_span_id" not in converted["attributes"]
        assert converted["events"] == [{"name": "chain-started", "attributes": {"latitude.timestamp": "now"}}]

    def test_tool_span(self) -> None:
        span = Span(trace_id="t1", name="tool.lookup", kind=SpanKind.TOOL, parent_span_id="p1", status="error")
        converted = convert_span(span)
        assert converted["kind"] == "INTERNAL"
        assert converted["end_time"] is None
        assert converted["status"] == "error"
        assert converted["attributes"]["latitude.parent_span_id"] == "p1"

    def test_naive_datetimes_are_treated_as_utc(self) -> None:
        span = Span(trace_id="t1", name="x", kind=SpanKind.TOOL, start_time=START.replace(tzinfo=None))
        assert convert_span(span)["start_time"] == int(START.timestamp() * 1_000_000_000)


class TestOTLPExporters:
    def test_span_exporter_builds_when_installed(self) -> None:
        pytest.importorskip("opentelemetry.exporter.otlp.proto.http")
        exporter = OTLPSpanExporter(endpoint="http://127.0.0.1:9", headers={"Authorization": "Bearer x"})
        exporter.export([])
        exporter.shutdown()

    def test_metrics_exporter_rejects_non_points(self) -> None:
        pytest.importorskip("opentelemetry.exporter.otlp.proto.http")
        exporter = OTLPMetricsExporter(endpoint="http://127.0.0.1:9", export_interval_ms=60_000)
        with pytest.raises(TypeError, match="MetricPoint"):
            exporter.record({"name": "x"})  # type: ignore[arg-type]
