"""Stream consumer: turns an SSE response body into a ``GenerationResponse``."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from enum import StrEnum
from typing import Any, Protocol

from pydantic import ValidationError

from latitude_sdk._callbacks import call_user_callback
from latitude_sdk.constants import RunErrorCodes
from latitude_sdk.exceptions import LatitudeApiError
from latitude_sdk.models.events import (
    ChainErrorEvent,
    GenerationResponse,
    ObjectResponse,
    ProviderCompletedEvent,
    StreamEvent,
    TextResponse,
    ToolCallDelta,
)
from latitude_sdk.models.messages import Message
from latitude_sdk.streaming.sse import iter_sse_blocks, parse_sse

logger = logging.getLogger(__name__)

MISSING_RESPONSE_MESSAGE = "Stream ended without returning a provider response."

EventCallback = Callable[[StreamEvent], Any]
ErrorCallback = Callable[[LatitudeApiError], Any]
ToolCallHook = Callable[[ToolCallDelta], Awaitable[Any]]


class StreamBody(Protocol):
    """The subset of ``httpx.Response`` the consumer reads from."""

    def aiter_lines(self) -> AsyncIterator[str]: ...

    async def aclose(self) -> None: ...


class ConsumerState(StrEnum):
    IDLE = "idle"
    STREAMING = "streaming"
    COMPLETED = "completed"
    ERRORED = "errored"


class StreamConsumer:
    """Aggregates one run's event stream into its final response.

    Every frame is handed to ``on_event`` before the consumer updates its own
    state, in the order the frames arrived.  A frame that fails validation is
    still delivered, with its raw decoded JSON as ``data``, and then ends the
    run with a 500.  Platform events replace the tracked conversation
    wholesale; the last ``provider-completed`` event decides the final
    response.  A ``tool-call`` provider delta is awaited
    through ``on_tool_call`` before the next frame is read, and the dispatch
    is shielded so that cancelling the run never interrupts a tool handler
    that has already started.

    Errors are delivered once: to ``on_error`` when given (``consume`` then
    returns ``None``), raised otherwise.  Errors that are not already a
    ``LatitudeApiError`` are reported as a 500 ``internal_server_error``
    chained to the original exception.

    A consumer is single-use.

    Parameters:
        on_event: Called with each ``StreamEvent``; may be async.
        on_error: Receives the ``LatitudeApiError`` that ended the run; may be async.
        on_tool_call: Coroutine function run for each ``tool-call`` delta.
    """

    __slots__ = (
        "_conversation",
        "_on_error",
        "_on_event",
        "_on_tool_call",
        "_response",
        "_state",
        "_uuid",
    )

    def __init__(
        self,
        on_event: EventCallback | None = None,
        on_error: ErrorCallback | None = None,
        on_tool_call: ToolCallHook | None = None,
    ) -> None:
        self._on_event = on_event
        self._on_error = on_error
        self._on_tool_call = on_tool_call
        self._state = ConsumerState.IDLE
        self._uuid: str | None = None
        self._conversation: list[Message] = []
        self._response: TextResponse | ObjectResponse | None = None

    # -- Introspection --

    @property
    def state(self) -> ConsumerState:
        return self._state

    @property
    def uuid(self) -> str | None:
        return self._uuid

    @property
    def conversation(self) -> list[Message]:
        return list(self._conversation)

    @property
    def last_response(self) -> TextResponse | ObjectResponse | None:
        return self._response

    # -- Consumption --

    async def consume(self, body: StreamBody) -> GenerationResponse | None:
        """Read ``body`` to the end and build the run's final response.

        The body is closed on every exit path, including cancellation.

        Parameters:
            body: A streaming ``httpx.Response`` (or anything exposing
                ``aiter_lines()`` and ``aclose()``).

        Returns:
            The ``GenerationResponse``, or ``None`` when an error was handed
            to ``on_error``.

        Raises:
            LatitudeApiError: The run failed and no ``on_error`` was given.
            RuntimeError: The consumer was already used.
        """
        if self._state is not ConsumerState.IDLE:
            msg = f"StreamConsumer is single-use (state: {self._state})"
            raise RuntimeError(msg)

        self._state = ConsumerState.STREAMING
        try:
            result = await self._read(body)
        except Exception as exc:
            self._state = ConsumerState.ERRORED
            error = exc if isinstance(exc, LatitudeApiError) else LatitudeApiError.internal(str(exc))
            if self._on_error is None:
                if error is exc:
                    raise
                raise error from exc
            if error is not exc:
                error.__cause__ = exc
            await call_user_callback(self._on_error, error)
            return None
        finally:
            await _close_quietly(body)

        self._state = ConsumerState.COMPLETED
        return result

    async def _read(self, body: StreamBody) -> GenerationResponse:
        async for block in iter_sse_blocks(body.aiter_lines()):
            frame = parse_sse(block)
            if frame is None or "data" not in frame:
                continue

            name = frame.get("event", "message")
            try:
                payload = json.loads(frame["data"])
            except ValueError as exc:
                msg = f"Invalid JSON in {name!r} frame: {exc}"
                raise LatitudeApiError.internal(msg) from exc

            try:
                event = StreamEvent.from_frame(name, payload)
            except ValidationError as exc:
                await call_user_callback(self._on_event, StreamEvent(event=name, data=payload))
                msg = f"Malformed {name!r} frame: {exc}"
                raise LatitudeApiError.internal(msg) from exc
            logger.debug("Received %s frame (%s)", name, getattr(event.data, "type", None))

            await call_user_callback(self._on_event, event)

            if event.is_latitude_event:
                self._apply_chain_event(event.data)
            elif (
                event.is_provider_event
                and isinstance(event.data, ToolCallDelta)
                and self._on_tool_call is not None
            ):
                await _dispatch_tool_call(self._on_tool_call, event.data)

        if self._uuid is None or self._response is None:
            raise LatitudeApiError.internal(MISSING_RESPONSE_MESSAGE)

        return GenerationResponse(
            uuid=self._uuid,
            conversation=self._conversation,
            response=self._response,
        )

    def _apply_chain_event(self, data: Any) -> None:
        if data.uuid is not None:
            self._uuid = data.uuid
        self._conversation = list(data.messages)

        if isinstance(data, ChainErrorEvent):
            raise LatitudeApiError(
                status=402,
                message=data.error.message,
                server_response=data.error.message,
                error_code=RunErrorCodes.AI_RUN_ERROR,
            )
        if isinstance(data, ProviderCompletedEvent):
            self._response = data.response


async def _dispatch_tool_call(hook: ToolCallHook, call: ToolCallDelta) -> None:
    task = asyncio.ensure_future(hook(call))
    try:
        await asyncio.shield(task)
    except asyncio.CancelledError:
        # The shielded task keeps running; its outcome is only logged.
        task.add_done_callback(_log_detached_tool_call)
        raise


def _log_detached_tool_call(task: asyncio.Future[Any]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning("Tool call failed after the run was cancelled", exc_info=exc)


async def _close_quietly(body: StreamBody) -> None:
    try:
        await body.aclose()
    except Exception:
        logger.warning("Failed to close the event stream", exc_info=True)
