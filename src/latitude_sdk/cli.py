"""CLI interface for latitude-sdk.

Requires the 'cli' extra: pip install latitude-sdk[cli]
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any

try:
    import typer
    from rich.console import Console
    from rich.table import Table
except ImportError:
    print(
        "CLI dependencies not installed. Install with: pip install latitude-sdk[cli]",
        file=sys.stderr,
    )
    sys.exit(1)

import httpx

from latitude_sdk import __version__
from latitude_sdk.client import Latitude
from latitude_sdk.config import get_settings
from latitude_sdk.exceptions import LatitudeError
from latitude_sdk.models.events import GenerationResponse, StreamEvent, TextDelta
from latitude_sdk.streaming.consumer import StreamConsumer

app = typer.Typer(
    name="latitude",
    help="Run and inspect Latitude prompts from the terminal.",
    add_completion=False,
)
console = Console()


@app.callback()
def main(
    version: bool = typer.Option(False, "--version", "-v", help="Show version"),
) -> None:
    if version:
        console.print(f"latitude-sdk {__version__}")
        raise typer.Exit()


@app.command()
def info() -> None:
    """Show the installed version, dependencies and the configured gateway."""
    settings = get_settings()
    table = Table(title="latitude-sdk info")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Version", __version__)
    table.add_row("Python", sys.version.split()[0])
    table.add_row("Gateway", settings.gateway().base_url)
    table.add_row("API key", "set" if settings.api_key else "[red]missing[/red]")

    for dep_name in ["httpx", "pydantic", "pydantic_settings"]:
        try:
            mod = __import__(dep_name)
            table.add_row(dep_name, str(getattr(mod, "__version__", "installed")))
        except ImportError:
            table.add_row(dep_name, "[red]not installed[/red]")

    console.print(table)


def _parse_params(pairs: list[str]) -> dict[str, Any]:
    params: dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            msg = f"Expected KEY=VALUE, got {pair!r}"
            raise typer.BadParameter(msg, param_hint="--param")
        try:
            params[key] = json.loads(raw)
        except ValueError:
            params[key] = raw
    return params


def _print_delta(event: StreamEvent) -> None:
    if isinstance(event.data, TextDelta):
        console.print(event.data.text_delta, end="", markup=False, highlight=False)


def _print_summary(result: GenerationResponse) -> None:
    usage = result.usage
    console.print()
    console.print(
        f"[dim]conversation {result.uuid} | tokens in={usage.input_tokens} "
        f"out={usage.output_tokens} total={usage.total_tokens}[/dim]",
    )


@app.command()
def run(
    path: str = typer.Argument(..., help="Prompt path, e.g. 'onboarding/welcome'"),
    param: list[str] = typer.Option([], "--param", "-p", help="Prompt parameter as KEY=VALUE (JSON values allowed)"),  # noqa: B008
    project_id: int | None = typer.Option(None, "--project-id", help="Project ID (default: LATITUDE_PROJECT_ID)"),
    version_uuid: str | None = typer.Option(None, "--version-uuid", help="Version UUID (default: live)"),
    stream: bool = typer.Option(True, "--stream/--no-stream", help="Stream text as it is generated"),
) -> None:
    """Run a prompt and print its response."""
    parameters = _parse_params(param)

    async def _execute() -> GenerationResponse | None:
        async with Latitude(project_id=project_id, version_uuid=version_uuid) as client:
            return await client.prompts.run(
                path,
                parameters=parameters,
                stream=stream,
                on_event=_print_delta if stream else None,
            )

    try:
        result = asyncio.run(_execute())
    except LatitudeError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(code=1) from None

    if result is None:
        raise typer.Exit(code=1)
    if not stream:
        console.print(result.text, markup=False, highlight=False)
    _print_summary(result)


@app.command()
def replay(
    transcript: Path = typer.Argument(..., help="File containing a recorded SSE stream"),  # noqa: B008
) -> None:
    """Feed a recorded event stream through the stream consumer, offline."""
    if not transcript.exists():
        console.print(f"[red]Error: {transcript} does not exist[/red]")
        raise typer.Exit(code=1)

    def _show(event: StreamEvent) -> None:
        kind = getattr(event.data, "type", "-")
        console.print(f"[cyan]{event.event}[/cyan] {kind}")

    response = httpx.Response(200, content=transcript.read_bytes())
    try:
        result = asyncio.run(StreamConsumer(on_event=_show).consume(response))
    except LatitudeError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(code=1) from None

    if result is not None:
        console.print(result.text, markup=False, highlight=False)
        _print_summary(result)


if __name__ == "__main__":
    app()
