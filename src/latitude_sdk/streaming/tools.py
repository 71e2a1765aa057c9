"""Round-tripping of client-side tool calls requested mid-stream."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from latitude_sdk._callbacks import call_user_callback, fire_callbacks
from latitude_sdk.exceptions import ToolNotFoundError
from latitude_sdk.models.api import ToolResult
from latitude_sdk.models.events import ToolCallDelta
from latitude_sdk.models.messages import ToolCall
from latitude_sdk.observability.models import Invocation

logger = logging.getLogger(__name__)

ToolHandler = Callable[[dict[str, Any], ToolCall], Any]
"""``handler(args, details)``; may be a plain function or a coroutine function."""

SubmitToolResult = Callable[[ToolResult], Awaitable[Any]]


class ToolCallDispatcher:
    """Runs the registered handler for each ``tool-call`` delta and submits its result.

    The handler's return value is submitted as the tool result.  An exception
    raised by the handler is captured and submitted as an error result
    (``is_error=True`` with the exception text) so the model can react to
    it.  A tool name with no registered handler raises ``ToolNotFoundError``,
    which fails the run.

    Only one tool call may be in flight per dispatcher: the stream consumer
    awaits each dispatch before reading the next frame.

    Parameters:
        tools: Mapping of tool name to handler.
        submit: Coroutine function delivering a ``ToolResult`` to the platform.
        hooks: Instrumentation objects notified via ``on_tool_call`` and
            ``on_tool_result``.
        invocation: The call the hooks are told these tool calls belong to.
    """

    __slots__ = ("_hooks", "_in_flight", "_invocation", "_submit", "_tools")

    def __init__(
        self,
        tools: Mapping[str, ToolHandler] | None,
        submit: SubmitToolResult,
        hooks: Sequence[Any] = (),
        invocation: Invocation | None = None,
    ) -> None:
        self._tools: dict[str, ToolHandler] = dict(tools or {})
        self._submit = submit
        self._hooks = list(hooks)
        self._invocation = invocation
        self._in_flight = False

    @property
    def tool_names(self) -> list[str]:
        return list(self._tools)

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def __call__(self, call: ToolCallDelta) -> ToolResult:
        return await self.dispatch(call)

    async def dispatch(self, call: ToolCallDelta) -> ToolResult:
        """Execute one tool call and submit its outcome.

        Parameters:
            call: The ``tool-call`` provider delta.

        Returns:
            The ``ToolResult`` that was submitted.

        Raises:
            ToolNotFoundError: No handler is registered for ``call.tool_name``.
            RuntimeError: Another tool call is still in flight.
        """
        if self._in_flight:
            msg = "A tool call is already in flight; tool calls are dispatched one at a time"
            raise RuntimeError(msg)

        handler = self._tools.get(call.tool_name)
        if handler is None:
            raise ToolNotFoundError(call.tool_name)

        self._in_flight = True
        try:
            details = call.to_tool_call()
            fire_callbacks(self._hooks, "on_tool_call", self._invocation, details, logger=logger)
            logger.debug("Dispatching tool call %s (%s)", details.id, details.name)

            try:
                value = await call_user_callback(handler, call.args, details)
                result = ToolResult(tool_call_id=call.tool_call_id, result=_to_jsonable(value))
            except Exception as exc:
                logger.info("Tool %r raised %s; reporting it as an error result", call.tool_name, exc)
                result = ToolResult(tool_call_id=call.tool_call_id, result=str(exc), is_error=True)

            fire_callbacks(self._hooks, "on_tool_result", self._invocation, result, logger=logger)
            await self._submit(result)
            return result
        finally:
            self._in_flight = False


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    return value
