"""HTTP request layer: auth headers, body envelope and retries on 5xx."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from latitude_sdk.constants import LogSources
from latitude_sdk.exceptions import LatitudeApiError
from latitude_sdk.transport.routes import Route, RouteResolver

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_DELAY = 1.0

_RETRYABLE_TRANSPORT_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout)


class RequestClient:
    """Issues authenticated requests against the Latitude API.

    A response with status >= 500, or a failure to connect, is retried after
    a fixed ``retry_delay`` until ``max_attempts`` requests have been made;
    the last response (or error) is returned to the caller as is.  4xx
    responses are never retried.

    Parameters:
        api_key: Bearer token sent with every request.
        routes: Resolver for endpoint URLs.
        http_client: Optional ``httpx.AsyncClient`` to send requests through.
            A client created here is closed by ``aclose()``; an injected one
            is left open.
        timeout: Timeout for a client created here.
        retry_delay: Seconds to wait between attempts.
        max_attempts: Total number of attempts per request.
        source: Origin reported in the body's ``__internal`` envelope.
    """

    __slots__ = (
        "_api_key",
        "_client",
        "_max_attempts",
        "_owns_client",
        "_retry_delay",
        "_routes",
        "_source",
    )

    def __init__(
        self,
        api_key: str,
        routes: RouteResolver,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | httpx.Timeout | None = None,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        source: LogSources = LogSources.API,
    ) -> None:
        if max_attempts < 1:
            msg = f"max_attempts must be at least 1, got {max_attempts}"
            raise ValueError(msg)
        self._api_key = api_key
        self._routes = routes
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._retry_delay = retry_delay
        self._max_attempts = max_attempts
        self._source = source

    @property
    def routes(self) -> RouteResolver:
        return self._routes

    def _headers(self, stream: bool) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Accept": "text/event-stream" if stream else "application/json",
        }

    async def send(
        self,
        method: str,
        route: Route,
        *,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
        stream: bool = False,
    ) -> httpx.Response:
        """Send one logical request, retrying server errors.

        Parameters:
            method: HTTP method.
            route: The endpoint to call.
            params: Values for the route's URL placeholders.
            body: JSON body; ``__internal.source`` is added to it.
            stream: Leave the response body unread so it can be consumed
                incrementally.  The caller must close it.

        Returns:
            The final ``httpx.Response``, successful or not.
        """
        url = self._routes.resolve(route, **(params or {}))
        payload = None
        if method != "GET":
            payload = {**(body or {}), "__internal": {"source": self._source.value}}

        attempt = 1
        while True:
            request = self._client.build_request(method, url, headers=self._headers(stream), json=payload)
            logger.debug("%s %s (attempt %d/%d)", method, url, attempt, self._max_attempts)
            try:
                response = await self._client.send(request, stream=stream)
            except _RETRYABLE_TRANSPORT_ERRORS as exc:
                if attempt >= self._max_attempts:
                    raise
                logger.warning(
                    "Connecting to %s failed (attempt %d/%d): %s",
                    url, attempt, self._max_attempts, exc,
                )
            else:
                if response.status_code < 500 or attempt >= self._max_attempts:
                    return response
                logger.warning(
                    "%s %s returned %d (attempt %d/%d), retrying",
                    method, url, response.status_code, attempt, self._max_attempts,
                )
                await response.aclose()

            attempt += 1
            await asyncio.sleep(self._retry_delay)

    async def send_json(
        self,
        method: str,
        route: Route,
        *,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and decode its JSON body.

        Raises:
            LatitudeApiError: The final response was not successful.
        """
        response = await self.send(method, route, params=params, body=body)
        if not response.is_success:
            raise await error_from_response(response)
        if not response.content:
            return None
        return response.json()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


async def error_from_response(response: httpx.Response) -> LatitudeApiError:
    """Build a ``LatitudeApiError`` from an unsuccessful response.

    Reads (and closes) the body if it was streamed.  A body that is not JSON
    falls back to the reason phrase and ``internal_server_error``.
    """
    try:
        await response.aread()
    finally:
        await response.aclose()
    try:
        body = response.json()
    except ValueError:
        body = response.text or None
    return LatitudeApiError.from_response_body(response.status_code, body, response.reason_phrase)
