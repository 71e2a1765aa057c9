"""The ``Latitude`` client and its endpoint namespaces."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

import httpx
from pydantic import TypeAdapter

from latitude_sdk._callbacks import call_user_callback, fire_callbacks
from latitude_sdk.config import GatewayConfig, LatitudeSettings, get_settings
from latitude_sdk.constants import LogSources
from latitude_sdk.exceptions import ConfigurationError, LatitudeApiError
from latitude_sdk.models.api import (
    DocumentLog,
    EvaluationResult,
    Project,
    ProjectWithVersion,
    Prompt,
    PushResult,
    ToolResult,
    Version,
    VersionChange,
)
from latitude_sdk.models.events import GenerationJob, GenerationResponse, StreamEvent
from latitude_sdk.models.messages import Message, dump_messages, parse_messages
from latitude_sdk.observability.models import Invocation, SpanKind
from latitude_sdk.protocols.instrumentation import Instrumentation
from latitude_sdk.streaming.consumer import StreamConsumer
from latitude_sdk.streaming.tools import ToolCallDispatcher, ToolHandler
from latitude_sdk.transport.request import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_RETRY_DELAY,
    RequestClient,
    error_from_response,
)
from latitude_sdk.transport.routes import Route, RouteResolver

logger = logging.getLogger(__name__)

EventCallback = Callable[[StreamEvent], Any]
FinishedCallback = Callable[[GenerationResponse], Any]
ErrorCallback = Callable[[LatitudeApiError], Any]

_prompts_adapter: TypeAdapter[list[Prompt]] = TypeAdapter(list[Prompt])
_projects_adapter: TypeAdapter[list[Project]] = TypeAdapter(list[Project])
_versions_adapter: TypeAdapter[list[Version]] = TypeAdapter(list[Version])


class Latitude:
    """Async client for the Latitude prompt platform.

    Usage::

        async with Latitude("my-api-key", project_id=42) as client:
            result = await client.prompts.run(
                "onboarding/welcome",
                parameters={"name": "Ada"},
                on_event=lambda event: print(event.event),
            )
            print(result.text)

    Parameters:
        api_key: API key; read from ``LATITUDE_API_KEY`` when omitted.
        project_id: Default project for prompt, version and log calls;
            read from ``LATITUDE_PROJECT_ID`` when omitted.
        version_uuid: Default version; ``"live"`` unless configured.
        gateway: Gateway to talk to; resolved from the environment when omitted.
        retry_delay: Seconds between attempts of a request that got a 5xx.
        max_attempts: Total attempts per request.
        timeout: ``httpx`` timeout for the client created here.
        source: Log source reported to the platform.
        http_client: An ``httpx.AsyncClient`` to use instead of creating one.
        instrumentation: Optional hooks observing ``run``, ``chat`` and
            ``attach`` calls (see ``latitude_sdk.protocols.Instrumentation``).
        settings: Settings to read defaults from instead of the environment.

    Raises:
        ConfigurationError: No API key was given or configured.
    """

    __slots__ = (
        "_hooks",
        "_project_id",
        "_request",
        "_version_uuid",
        "evaluations",
        "logs",
        "projects",
        "prompts",
        "runs",
        "versions",
    )

    def __init__(
        self,
        api_key: str | None = None,
        *,
        project_id: int | None = None,
        version_uuid: str | None = None,
        gateway: GatewayConfig | None = None,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        timeout: float | None = None,
        source: LogSources = LogSources.API,
        http_client: httpx.AsyncClient | None = None,
        instrumentation: Instrumentation | None = None,
        settings: LatitudeSettings | None = None,
    ) -> None:
        settings = settings or get_settings()
        api_key = api_key or settings.api_key
        if not api_key:
            msg = "An API key is required: pass api_key or set LATITUDE_API_KEY"
            raise ConfigurationError(msg)

        self._project_id = project_id if project_id is not None else settings.project_id
        self._version_uuid = version_uuid or settings.version_uuid
        self._request = RequestClient(
            api_key,
            RouteResolver(gateway or settings.gateway()),
            http_client=http_client,
            timeout=timeout,
            retry_delay=retry_delay,
            max_attempts=max_attempts,
            source=source,
        )
        self._hooks: list[Any] = [instrumentation] if instrumentation is not None else []

        self.prompts = Prompts(self)
        self.runs = Runs(self)
        self.projects = Projects(self)
        self.versions = Versions(self)
        self.logs = Logs(self)
        self.evaluations = Evaluations(self)

    async def __aenter__(self) -> Latitude:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        await self._request.aclose()

    @property
    def base_url(self) -> str:
        return self._request.routes.base_url

    # -- Shared plumbing --

    def _version_params(self, project_id: int | None, version_uuid: str | None) -> dict[str, Any]:
        project_id = project_id if project_id is not None else self._project_id
        if project_id is None:
            msg = "Project ID is required: pass project_id or set LATITUDE_PROJECT_ID"
            raise ConfigurationError(msg)
        return {"project_id": project_id, "version_uuid": version_uuid or self._version_uuid}

    async def _submit_tool_result(self, result: ToolResult) -> None:
        await self._request.send_json(
            "POST",
            Route.TOOL_RESULTS,
            body={"toolCallId": result.tool_call_id, "result": result.result, "isError": result.is_error},
        )

    async def _generate(
        self,
        operation: SpanKind,
        route: Route,
        params: Callable[[], dict[str, Any]],
        body: dict[str, Any],
        *,
        stream: bool,
        background: bool = False,
        tools: Mapping[str, ToolHandler] | None = None,
        on_event: EventCallback | None = None,
        on_finished: FinishedCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> Any:
        """Run a generating request and deliver its outcome.

        Errors are delivered exactly once: to ``on_error`` (the call then
        returns ``None``) or, without it, raised.  Failures that are not
        ``LatitudeApiError`` are reported as 500 ``internal_server_error``.
        Cancellation propagates; instrumentation receives an ``AbortedError``
        through ``on_error`` first.
        """
        invocation = Invocation(
            operation=operation,
            attributes={"route": route.value, "stream": stream, "background": background},
        )
        fire_callbacks(self._hooks, "on_request_start", invocation, logger=logger)

        try:
            if background or not stream:
                result = await self._generate_sync(route, params(), body, background=background)
            else:
                result = await self._generate_stream(
                    invocation, route, params(), body, tools=tools, on_event=on_event,
                )
            fire_callbacks(self._hooks, "on_finished", invocation, result, logger=logger)
            if isinstance(result, GenerationResponse):
                await call_user_callback(on_finished, result)
            return result
        except asyncio.CancelledError:
            # Instrumentation still sees a terminal hook; the caller's on_error does not.
            fire_callbacks(self._hooks, "on_error", invocation, LatitudeApiError.aborted(), logger=logger)
            raise
        except Exception as exc:
            error = exc if isinstance(exc, LatitudeApiError) else LatitudeApiError.internal(str(exc))
            if error is not exc:
                error.__cause__ = exc
            fire_callbacks(self._hooks, "on_error", invocation, error, logger=logger)
            if on_error is None:
                if error is exc:
                    raise
                raise error from exc
            await call_user_callback(on_error, error)
            return None

    async def _generate_sync(
        self,
        route: Route,
        params: dict[str, Any],
        body: dict[str, Any],
        *,
        background: bool,
    ) -> GenerationResponse | GenerationJob:
        data = await self._request.send_json("POST", route, params=params, body={**body, "stream": False})
        if background:
            return GenerationJob.model_validate(data)
        return GenerationResponse.model_validate(data)

    async def _generate_stream(
        self,
        invocation: Invocation,
        route: Route,
        params: dict[str, Any],
        body: dict[str, Any],
        *,
        tools: Mapping[str, ToolHandler] | None,
        on_event: EventCallback | None,
    ) -> GenerationResponse | None:
        response = await self._request.send("POST", route, params=params, body={**body, "stream": True}, stream=True)
        if not response.is_success:
            raise await error_from_response(response)

        async def handle_event(event: StreamEvent) -> None:
            fire_callbacks(self._hooks, "on_event", invocation, event, logger=logger)
            await call_user_callback(on_event, event)

        dispatcher = ToolCallDispatcher(
            tools,
            submit=self._submit_tool_result,
            hooks=self._hooks,
            invocation=invocation,
        )
        consumer = StreamConsumer(on_event=handle_event, on_tool_call=dispatcher)
        return await consumer.consume(response)


class _Namespace:
    __slots__ = ("_client",)

    def __init__(self, client: Latitude) -> None:
        self._client = client

    @property
    def _request(self) -> RequestClient:
        return self._client._request


class Prompts(_Namespace):
    """Prompt documents: lookup, creation, runs and follow-up chats."""

    __slots__ = ()

    async def get(
        self,
        path: str,
        *,
        project_id: int | None = None,
        version_uuid: str | None = None,
    ) -> Prompt:
        params = {**self._client._version_params(project_id, version_uuid), "path": path}
        return Prompt.model_validate(await self._request.send_json("GET", Route.GET_DOCUMENT, params=params))

    async def get_all(
        self,
        *,
        project_id: int | None = None,
        version_uuid: str | None = None,
    ) -> list[Prompt]:
        params = self._client._version_params(project_id, version_uuid)
        data = await self._request.send_json("GET", Route.GET_ALL_DOCUMENTS, params=params)
        return _prompts_adapter.validate_python(data or [])

    async def create(
        self,
        path: str,
        *,
        prompt: str | None = None,
        project_id: int | None = None,
        version_uuid: str | None = None,
    ) -> Prompt:
        """Create a prompt at ``path`` in a draft version."""
        params = self._client._version_params(project_id, version_uuid)
        body = _compact({"path": path, "prompt": prompt})
        data = await self._request.send_json("POST", Route.CREATE_DOCUMENT, params=params, body=body)
        return Prompt.model_validate(data)

    async def get_or_create(
        self,
        path: str,
        *,
        prompt: str | None = None,
        project_id: int | None = None,
        version_uuid: str | None = None,
    ) -> Prompt:
        """Return the prompt at ``path``, creating it with ``prompt`` as content if missing."""
        params = self._client._version_params(project_id, version_uuid)
        body = _compact({"path": path, "prompt": prompt})
        data = await self._request.send_json("POST", Route.GET_OR_CREATE_DOCUMENT, params=params, body=body)
        return Prompt.model_validate(data)

    async def run(
        self,
        path: str,
        *,
        parameters: dict[str, Any] | None = None,
        project_id: int | None = None,
        version_uuid: str | None = None,
        custom_identifier: str | None = None,
        user_message: str | None = None,
        stream: bool = True,
        background: bool = False,
        tools: Mapping[str, ToolHandler] | None = None,
        on_event: EventCallback | None = None,
        on_finished: FinishedCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> GenerationResponse | GenerationJob | None:
        """Run the prompt at ``path``.

        Parameters:
            path: Prompt path inside the version.
            parameters: Values for the prompt's template parameters.
            project_id: Overrides the client's default project.
            version_uuid: Overrides the client's default version.
            custom_identifier: Free-form identifier stored with the log.
            user_message: Extra user message appended to the conversation.
            stream: Consume the response as an event stream (default) or
                wait for a single JSON response.
            background: Enqueue the run and return a ``GenerationJob``
                immediately; use ``runs.attach`` to follow it.
            tools: Client-side tool handlers, ``handler(args, details)``.
                Their names are declared to the platform with the run.
            on_event: Receives every ``StreamEvent`` in arrival order.
            on_finished: Receives the final ``GenerationResponse``.
            on_error: Receives the ``LatitudeApiError`` if the run fails.

        Returns:
            The ``GenerationResponse`` (or ``GenerationJob`` when
            ``background``), or ``None`` if an error went to ``on_error``.

        Raises:
            LatitudeApiError: The run failed and no ``on_error`` was given.
        """
        body = _compact(
            {
                "path": path,
                "parameters": parameters or {},
                "customIdentifier": custom_identifier,
                "userMessage": user_message,
                "background": background,
                "tools": list(tools or {}),
            },
        )
        return await self._client._generate(
            SpanKind.RUN,
            Route.RUN_DOCUMENT,
            lambda: self._client._version_params(project_id, version_uuid),
            body,
            stream=stream,
            background=background,
            tools=tools,
            on_event=on_event,
            on_finished=on_finished,
            on_error=on_error,
        )

    async def chat(
        self,
        conversation_uuid: str,
        messages: Sequence[Message | dict[str, Any]],
        *,
        stream: bool = True,
        tools: Mapping[str, ToolHandler] | None = None,
        on_event: EventCallback | None = None,
        on_finished: FinishedCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> GenerationResponse | None:
        """Continue a conversation with new ``messages``.

        Accepts the same streaming, tool and callback options as ``run``
        and delivers errors the same way.
        """
        body = {"messages": dump_messages(parse_messages(list(messages))), "tools": list(tools or {})}
        return await self._client._generate(
            SpanKind.CHAT,
            Route.CHAT,
            lambda: {"conversation_uuid": conversation_uuid},
            body,
            stream=stream,
            tools=tools,
            on_event=on_event,
            on_finished=on_finished,
            on_error=on_error,
        )


class Runs(_Namespace):
    """Runs already in progress (usually started with ``background=True``)."""

    __slots__ = ()

    async def attach(
        self,
        conversation_uuid: str,
        *,
        stream: bool = True,
        tools: Mapping[str, ToolHandler] | None = None,
        on_event: EventCallback | None = None,
        on_finished: FinishedCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> GenerationResponse | None:
        """Follow a running conversation until it finishes."""
        return await self._client._generate(
            SpanKind.ATTACH,
            Route.ATTACH_RUN,
            lambda: {"conversation_uuid": conversation_uuid},
            {},
            stream=stream,
            tools=tools,
            on_event=on_event,
            on_finished=on_finished,
            on_error=on_error,
        )

    async def stop(self, conversation_uuid: str) -> None:
        """Ask the platform to stop a running conversation."""
        await self._request.send_json(
            "POST",
            Route.STOP_RUN,
            params={"conversation_uuid": conversation_uuid},
        )


class Projects(_Namespace):
    __slots__ = ()

    async def get_all(self) -> list[Project]:
        data = await self._request.send_json("GET", Route.GET_ALL_PROJECTS)
        return _projects_adapter.validate_python(data or [])

    async def create(self, name: str) -> ProjectWithVersion:
        """Create a project; the platform also opens its first draft version."""
        data = await self._request.send_json("POST", Route.CREATE_PROJECT, body={"name": name})
        return ProjectWithVersion.model_validate(data)


class Versions(_Namespace):
    __slots__ = ()

    async def get(self, project_id: int | None = None, version_uuid: str | None = None) -> Version:
        params = self._client._version_params(project_id, version_uuid)
        return Version.model_validate(await self._request.send_json("GET", Route.GET_VERSION, params=params))

    async def get_all(self, project_id: int | None = None) -> list[Version]:
        params = {"project_id": self._client._version_params(project_id, None)["project_id"]}
        data = await self._request.send_json("GET", Route.GET_ALL_VERSIONS, params=params)
        return _versions_adapter.validate_python(data or [])

    async def create(self, name: str, *, project_id: int | None = None) -> Version:
        params = {"project_id": self._client._version_params(project_id, None)["project_id"]}
        data = await self._request.send_json("POST", Route.CREATE_VERSION, params=params, body={"name": name})
        return Version.model_validate(data)

    async def push(
        self,
        project_id: int | None,
        version_uuid: str,
        changes: Sequence[VersionChange | dict[str, Any]],
    ) -> PushResult:
        """Push document changes on top of ``version_uuid``."""
        params = self._client._version_params(project_id, version_uuid)
        body = {"changes": [VersionChange.model_validate(change).to_wire() for change in changes]}
        data = await self._request.send_json("POST", Route.PUSH_VERSION, params=params, body=body)
        return PushResult.model_validate(data)


class Logs(_Namespace):
    __slots__ = ()

    async def create(
        self,
        path: str,
        messages: Sequence[Message | dict[str, Any]],
        *,
        response: str | None = None,
        project_id: int | None = None,
        version_uuid: str | None = None,
    ) -> DocumentLog:
        """Record a conversation that happened outside the platform against a prompt."""
        params = self._client._version_params(project_id, version_uuid)
        body = _compact(
            {"path": path, "messages": dump_messages(parse_messages(list(messages))), "response": response},
        )
        data = await self._request.send_json("POST", Route.CREATE_LOG, params=params, body=body)
        return DocumentLog.model_validate(data)


class Evaluations(_Namespace):
    __slots__ = ()

    async def annotate(
        self,
        conversation_uuid: str,
        score: float,
        evaluation_uuid: str,
        *,
        reason: str | None = None,
        version_uuid: str | None = None,
    ) -> EvaluationResult:
        """Attach a manual score to a conversation for a given evaluation."""
        body = _compact(
            {
                "score": score,
                "metadata": {"reason": reason} if reason is not None else None,
                "versionUuid": version_uuid,
            },
        )
        data = await self._request.send_json(
            "POST",
            Route.ANNOTATE,
            params={"conversation_uuid": conversation_uuid, "evaluation_uuid": evaluation_uuid},
            body=body,
        )
        return EvaluationResult.model_validate(data)


def _compact(body: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in body.items() if value is not None}
