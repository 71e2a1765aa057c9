"""Tests for latitude_sdk.cli.

Exercises the Typer CLI app via CliRunner, covering the version flag, the
info command, offline replay of recorded streams and prompt runs against a
mocked gateway.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
from typer.testing import CliRunner

from latitude_sdk import __version__, cli
from latitude_sdk.cli import app
from latitude_sdk.config import get_settings
from tests.conftest import (
    CONVERSATION,
    TEXT_RESPONSE,
    latitude_event,
    make_client,
    sse_response,
    successful_transcript,
)

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("LATITUDE_API_KEY", "LATITUDE_PROJECT_ID", "LATITUDE_ENV", "GATEWAY_HOSTNAME", "GATEWAY_PORT"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()


def _patch_client(
    monkeypatch: pytest.MonkeyPatch,
    frames: list[str],
    respond: Callable[[httpx.Request], httpx.Response] | None = None,
) -> list[dict[str, Any]]:
    """Make ``latitude run`` talk to a mock transport; returns the captured constructor kwargs."""
    calls: list[dict[str, Any]] = []

    def factory(**kwargs: Any) -> Any:
        calls.append(kwargs)
        client, _ = make_client(respond or (lambda request: sse_response(frames)))
        return client

    monkeypatch.setattr(cli, "Latitude", factory)
    return calls


# ---------------------------------------------------------------------------
# main callback (--version)
# ---------------------------------------------------------------------------


class TestMainCallback:
    def test_version_flag_prints_version_and_exits(self) -> None:
        """--version before a subcommand prints the version and exits."""
        result = runner.invoke(app, ["--version", "info"])
        assert result.exit_code == 0
        assert "latitude-sdk" in result.output
        assert __version__ in result.output

    def test_short_version_flag(self) -> None:
        result = runner.invoke(app, ["-v", "info"])
        assert result.exit_code == 0
        assert __version__ in result.output


# ---------------------------------------------------------------------------
# info
# ---------------------------------------------------------------------------


class TestInfo:
    def test_shows_gateway_and_missing_key(self) -> None:
        result = runner.invoke(app, ["info"])
        assert result.exit_code == 0
        assert "gateway.latitude.so" in result.output
        assert "missing" in result.output
        assert "httpx" in result.output

    def test_local_gateway(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LATITUDE_ENV", "development")
        monkeypatch.setenv("LATITUDE_API_KEY", "key")
        result = runner.invoke(app, ["info"])
        assert result.exit_code == 0
        assert "localhost:8787" in result.output
        assert "set" in result.output


# ---------------------------------------------------------------------------
# replay
# ---------------------------------------------------------------------------


class TestReplay:
    def test_replays_transcript(self, tmp_path: Path) -> None:
        transcript = tmp_path / "run.sse"
        transcript.write_text("".join(successful_transcript("Hello there")), encoding="utf-8")

        result = runner.invoke(app, ["replay", str(transcript)])

        assert result.exit_code == 0
        assert "chain-started" in result.output
        assert "text-delta" in result.output
        assert "Hello there" in result.output
        assert "conversation conversation-uuid" in result.output

    def test_incomplete_transcript_fails(self, tmp_path: Path) -> None:
        transcript = tmp_path / "broken.sse"
        transcript.write_text(latitude_event("chain-started"), encoding="utf-8")

        result = runner.invoke(app, ["replay", str(transcript)])
        assert result.exit_code == 1
        assert "Stream ended without" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["replay", str(tmp_path / "nope.sse")])
        assert result.exit_code == 1
        assert "does not exist" in result.output


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


class TestRun:
    def test_streams_text_and_summary(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = _patch_client(monkeypatch, successful_transcript("Hi from the model"))
        result = runner.invoke(app, ["run", "greet", "-p", "name=Ada", "-p", "count=3", "--project-id", "7"])

        assert result.exit_code == 0
        assert "Hi from the model" in result.output
        assert "total=4" in result.output
        assert calls == [{"project_id": 7, "version_uuid": None}]

    def test_no_stream(self, monkeypatch: pytest.MonkeyPatch) -> None:
        body = {"uuid": "conversation-uuid", "conversation": CONVERSATION, "response": TEXT_RESPONSE}
        _patch_client(monkeypatch, [], respond=lambda request: httpx.Response(200, json=body))
        result = runner.invoke(app, ["run", "greet", "--no-stream"])
        assert result.exit_code == 0
        assert "Hi" in result.output

    def test_bad_param(self) -> None:
        result = runner.invoke(app, ["run", "greet", "-p", "no-equals-sign"])
        assert result.exit_code != 0

    def test_missing_api_key(self) -> None:
        result = runner.invoke(app, ["run", "greet", "--project-id", "1"])
        assert result.exit_code == 1
        assert "API key" in result.output

    def test_run_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _patch_client(monkeypatch, [latitude_event("chain-error", error={"message": "Provider exploded"})])
        result = runner.invoke(app, ["run", "greet"])
        assert result.exit_code == 1
        assert "Provider exploded" in result.output


def test_parse_params() -> None:
    assert cli._parse_params(["a=1", "b=text", 'c={"x": true}', "d="]) == {
        "a": 1,
        "b": "text",
        "c": {"x": True},
        "d": "",
    }


def test_mock_transport_sanity() -> None:
    client, handler = make_client(lambda request: httpx.Response(200))
    assert handler.requests == []
    assert client.base_url.endswith("/api/v3")
