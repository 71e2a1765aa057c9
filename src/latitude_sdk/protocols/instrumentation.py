"""Extension points: call instrumentation, span export and metrics collection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from latitude_sdk.exceptions import LatitudeApiError
    from latitude_sdk.models.api import ToolResult
    from latitude_sdk.models.events import StreamEvent
    from latitude_sdk.models.messages import ToolCall
    from latitude_sdk.observability.models import Invocation, MetricPoint, Span


@runtime_checkable
class Instrumentation(Protocol):
    """Observes ``run``, ``chat`` and ``attach`` calls.

    Every hook receives the ``Invocation`` it belongs to.  Implementations
    may define any subset of the hooks: missing ones are skipped, and a hook
    that raises is logged and ignored, so instrumentation can never change
    the outcome of a call.
    """

    def on_request_start(self, invocation: Invocation) -> None:
        """The call is about to send its first request."""
        ...

    def on_event(self, invocation: Invocation, event: StreamEvent) -> None:
        """A stream frame was received (before the caller's ``on_event``)."""
        ...

    def on_tool_call(self, invocation: Invocation, call: ToolCall) -> None:
        """A client-side tool handler is about to run."""
        ...

    def on_tool_result(self, invocation: Invocation, result: ToolResult) -> None:
        """A tool handler finished; ``result`` is about to be submitted."""
        ...

    def on_finished(self, invocation: Invocation, response: Any) -> None:
        """The call resolved with a ``GenerationResponse`` or ``GenerationJob``."""
        ...

    def on_error(self, invocation: Invocation, error: LatitudeApiError) -> None:
        """The call failed; called whether or not the caller supplied ``on_error``."""
        ...


@runtime_checkable
class SpanExporter(Protocol):
    """Receives the spans of each finished call from ``TracingInstrumentation``."""

    def export(self, spans: list[Span]) -> None: ...


@runtime_checkable
class MetricsCollector(Protocol):
    """Sink for the ``latitude.*`` duration, token and error metrics.

    ``flush`` is called once per finished call; collectors that deliver on
    ``record`` can make it a no-op.
    """

    def record(self, metric: MetricPoint) -> None: ...

    def flush(self) -> None: ...
