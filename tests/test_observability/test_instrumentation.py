"""Tests for TracingInstrumentation wired into the Latitude client."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest

from latitude_sdk.constants import LatitudeErrorCodes
from latitude_sdk.exceptions import LatitudeApiError
from latitude_sdk.models.messages import ToolCall
from latitude_sdk.observability import (
    InMemoryMetricsCollector,
    InMemorySpanExporter,
    SpanKind,
    TracingInstrumentation,
)
from latitude_sdk.protocols import Instrumentation
from tests.conftest import latitude_event, make_client, provider_event, sse_response, successful_transcript

TOOL_FRAMES = [
    latitude_event("chain-started"),
    provider_event("tool-call", toolCallId="call-1", toolName="lookup", args={}),
    *successful_transcript()[2:],
]


def _respond(frames: list[str]) -> Any:
    def respond(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/tools/results"):
            return httpx.Response(200, json={})
        return sse_response(frames)

    return respond


class TestTracingInstrumentation:
    def test_protocol_compliance(self) -> None:
        assert isinstance(TracingInstrumentation(), Instrumentation)

    @pytest.mark.asyncio
    async def test_successful_run_exports_root_span(self) -> None:
        exporter = InMemorySpanExporter()
        metrics = InMemoryMetricsCollector()
        instrumentation = TracingInstrumentation([exporter], metrics)
        client, _ = make_client(_respond(successful_transcript()), instrumentation=instrumentation)

        await client.prompts.run("greet")

        (root,) = exporter.get_spans()
        assert root.kind == SpanKind.RUN
        assert root.name == "latitude.run"
        assert root.status == "ok"
        assert root.attributes["conversation_uuid"] == "conversation-uuid"
        assert root.attributes["events_received"] == 4
        assert [e["name"] for e in root.events] == ["chain-started", "provider-completed", "chain-completed"]
        assert metrics.total("latitude.total_tokens", operation="run") == 4
        assert len(metrics.get_metrics("latitude.duration_ms")) == 1
        assert instrumentation.tracer.open_traces == 0

    @pytest.mark.asyncio
    async def test_tool_calls_get_child_spans(self) -> None:
        exporter = InMemorySpanExporter()
        client, _ = make_client(
            _respond(TOOL_FRAMES),
            instrumentation=TracingInstrumentation([exporter]),
        )

        await client.prompts.run("greet", tools={"lookup": lambda args, details: "found"})

        (tool_span,) = exporter.get_spans(SpanKind.TOOL)
        (root,) = exporter.get_spans(SpanKind.RUN)
        assert tool_span.name == "tool.lookup"
        assert tool_span.parent_span_id == root.span_id
        assert tool_span.status == "ok"

    @pytest.mark.asyncio
    async def test_error_is_recorded_even_with_on_error(self) -> None:
        exporter = InMemorySpanExporter()
        metrics = InMemoryMetricsCollector()
        errors: list[LatitudeApiError] = []
        client, _ = make_client(
            lambda request: httpx.Response(404, json={"message": "Not found", "errorCode": "NotFoundError"}),
            instrumentation=TracingInstrumentation([exporter], metrics),
        )

        await client.prompts.run("greet", on_error=errors.append)

        assert len(errors) == 1
        (root,) = exporter.get_spans()
        assert root.status == "error"
        assert root.attributes["status"] == 404
        assert metrics.total("latitude.errors", error_code="NotFoundError") == 1

    @pytest.mark.asyncio
    async def test_cancelled_run_closes_its_trace(self) -> None:
        started = asyncio.Event()

        async def hanging_body() -> AsyncIterator[bytes]:
            yield latitude_event("chain-started").encode()
            started.set()
            await asyncio.sleep(10)

        exporter = InMemorySpanExporter()
        metrics = InMemoryMetricsCollector()
        instrumentation = TracingInstrumentation([exporter], metrics)
        errors: list[LatitudeApiError] = []
        client, _ = make_client(
            lambda request: httpx.Response(200, content=hanging_body()),
            instrumentation=instrumentation,
        )

        task = asyncio.create_task(client.prompts.run("greet", on_error=errors.append))
        await asyncio.wait_for(started.wait(), timeout=1)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert errors == []
        assert instrumentation.tracer.open_traces == 0
        (root,) = exporter.get_spans()
        assert root.status == "error"
        assert root.attributes["error_code"] == LatitudeErrorCodes.ABORTED_ERROR
        assert metrics.total("latitude.errors", error_code="AbortedError") == 1

    @pytest.mark.asyncio
    async def test_chat_and_attach_kinds(self) -> None:
        exporter = InMemorySpanExporter()
        client, _ = make_client(
            _respond(successful_transcript()),
            instrumentation=TracingInstrumentation([exporter]),
        )
        await client.prompts.chat("conversation-uuid", [])
        await client.runs.attach("conversation-uuid")
        assert [s.kind for s in exporter.get_spans()] == [SpanKind.CHAT, SpanKind.ATTACH]

    @pytest.mark.asyncio
    async def test_failing_exporter_does_not_fail_the_run(self, caplog: pytest.LogCaptureFixture) -> None:
        class BrokenExporter:
            def export(self, spans: list[Any]) -> None:
                msg = "disk full"
                raise OSError(msg)

        client, _ = make_client(
            _respond(successful_transcript()),
            instrumentation=TracingInstrumentation([BrokenExporter()]),
        )
        with caplog.at_level(logging.WARNING, logger="latitude_sdk.observability.instrumentation"):
            result = await client.prompts.run("greet")
        assert result is not None
        assert "SpanExporter" in caplog.text

    @pytest.mark.asyncio
    async def test_partial_instrumentation(self) -> None:
        seen: list[str] = []

        class OnlyErrors:
            def on_error(self, invocation: Any, error: LatitudeApiError) -> None:
                seen.append(invocation.operation)

        client, _ = make_client(_respond([latitude_event("chain-started")]), instrumentation=OnlyErrors())
        with pytest.raises(LatitudeApiError):
            await client.prompts.run("greet")
        assert seen == [SpanKind.RUN]

    @pytest.mark.asyncio
    async def test_raising_hook_is_ignored(self) -> None:
        class Exploding:
            def on_request_start(self, invocation: Any) -> None:
                msg = "boom"
                raise RuntimeError(msg)

            def on_tool_call(self, invocation: Any, call: ToolCall) -> None:
                msg = "boom"
                raise RuntimeError(msg)

        client, _ = make_client(_respond(TOOL_FRAMES), instrumentation=Exploding())
        result = await client.prompts.run("greet", tools={"lookup": lambda args, details: 1})
        assert result is not None
