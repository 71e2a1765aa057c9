"""Shared fixtures and helpers for latitude-sdk tests."""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Callable
from typing import Any

import httpx
import pytest

from latitude_sdk.client import Latitude
from latitude_sdk.config import GatewayConfig, LatitudeSettings
from latitude_sdk.streaming.sse import format_sse

API_KEY = "fake-api-key"
PROJECT_ID = 123
CONVERSATION_UUID = "conversation-uuid"
BASE_URL = "https://gateway.latitude.so/api/v3"

TEXT_RESPONSE: dict[str, Any] = {
    "streamType": "text",
    "text": "Hi",
    "usage": {"inputTokens": 3, "outputTokens": 1, "totalTokens": 4},
    "toolCalls": [],
}

CONVERSATION: list[dict[str, Any]] = [
    {"role": "user", "content": [{"type": "text", "text": "Say hi"}]},
    {"role": "assistant", "content": "Hi"},
]


# ---------------------------------------------------------------------------
# SSE transcript builders
# ---------------------------------------------------------------------------


def latitude_event(event_type: str, **fields: Any) -> str:
    """Render a ``latitude-event`` frame with the common platform fields filled in."""
    data = {"type": event_type, "uuid": CONVERSATION_UUID, "timestamp": 1, "messages": [], **fields}
    return format_sse("latitude-event", json.dumps(data))


def provider_event(event_type: str, **fields: Any) -> str:
    return format_sse("provider-event", json.dumps({"type": event_type, **fields}))


def successful_transcript(text: str = "Hi") -> list[str]:
    """chain-started, one text delta, provider-completed, chain-completed."""
    response = {**TEXT_RESPONSE, "text": text}
    return [
        latitude_event("chain-started"),
        provider_event("text-delta", textDelta=text),
        latitude_event("provider-completed", response=response, messages=CONVERSATION),
        latitude_event("chain-completed", response=response, messages=CONVERSATION),
    ]


async def byte_chunks(text: str, chunk_size: int | None = None) -> AsyncIterator[bytes]:
    """Yield ``text`` as UTF-8 bytes, split into ``chunk_size`` pieces when given."""
    data = text.encode()
    if not chunk_size:
        yield data
        return
    for start in range(0, len(data), chunk_size):
        yield data[start : start + chunk_size]


def sse_response(frames: list[str], chunk_size: int | None = None, status_code: int = 200) -> httpx.Response:
    """A streaming ``httpx.Response`` whose body is the concatenated frames."""
    return httpx.Response(
        status_code,
        headers={"content-type": "text/event-stream"},
        content=byte_chunks("".join(frames), chunk_size),
    )


class FakeBody:
    """Minimal stream body exposing ``aiter_lines`` / ``aclose`` for consumer tests."""

    def __init__(self, lines: list[str], fail_on_close: bool = False) -> None:
        self._lines = lines
        self._fail_on_close = fail_on_close
        self.closed = False

    async def aiter_lines(self) -> AsyncIterator[str]:
        for line in self._lines:
            yield line

    async def aclose(self) -> None:
        self.closed = True
        if self._fail_on_close:
            msg = "connection already gone"
            raise RuntimeError(msg)


# ---------------------------------------------------------------------------
# HTTP mocking
# ---------------------------------------------------------------------------


class RecordingHandler:
    """``httpx.MockTransport`` handler that records requests and delegates to ``respond``."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]) -> None:
        self._respond = respond
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def body(self, index: int = 0) -> dict[str, Any]:
        return json.loads(self.requests[index].content)


def make_client(respond: Callable[[httpx.Request], httpx.Response], **kwargs: Any) -> tuple[Latitude, RecordingHandler]:
    """A ``Latitude`` client wired to a mock transport; no retry delay, no env lookups."""
    handler = RecordingHandler(respond)
    options: dict[str, Any] = {
        "project_id": PROJECT_ID,
        "gateway": GatewayConfig(),
        "retry_delay": 0,
        "settings": LatitudeSettings(api_key=None, project_id=None, version_uuid="live"),
        **kwargs,
    }
    client = Latitude(
        API_KEY,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        **options,
    )
    return client, handler


@pytest.fixture()
def error_body() -> dict[str, Any]:
    return {"name": "LatitudeError", "message": "Document not found", "errorCode": "NotFoundError"}
