"""URL building for the Latitude v3 API."""

from __future__ import annotations

import string
from enum import StrEnum
from typing import Any
from urllib.parse import quote

from latitude_sdk.config import GatewayConfig
from latitude_sdk.exceptions import ConfigurationError


class Route(StrEnum):
    RUN_DOCUMENT = "run-document"
    CHAT = "chat"
    ATTACH_RUN = "attach-run"
    STOP_RUN = "stop-run"
    TOOL_RESULTS = "tool-results"
    GET_DOCUMENT = "get-document"
    GET_ALL_DOCUMENTS = "get-all-documents"
    CREATE_DOCUMENT = "create-document"
    GET_OR_CREATE_DOCUMENT = "get-or-create-document"
    CREATE_LOG = "create-log"
    GET_ALL_PROJECTS = "get-all-projects"
    CREATE_PROJECT = "create-project"
    GET_VERSION = "get-version"
    GET_ALL_VERSIONS = "get-all-versions"
    CREATE_VERSION = "create-version"
    PUSH_VERSION = "push-version"
    ANNOTATE = "annotate"


_VERSION_BASE = "/projects/{project_id}/versions/{version_uuid}"

_TEMPLATES: dict[Route, str] = {
    Route.RUN_DOCUMENT: f"{_VERSION_BASE}/documents/run",
    Route.GET_DOCUMENT: f"{_VERSION_BASE}/documents/{{path}}",
    Route.GET_ALL_DOCUMENTS: f"{_VERSION_BASE}/documents",
    Route.CREATE_DOCUMENT: f"{_VERSION_BASE}/documents/create",
    Route.GET_OR_CREATE_DOCUMENT: f"{_VERSION_BASE}/documents/get-or-create",
    Route.CREATE_LOG: f"{_VERSION_BASE}/documents/logs",
    Route.CHAT: "/conversations/{conversation_uuid}/chat",
    Route.ATTACH_RUN: "/conversations/{conversation_uuid}/attach",
    Route.STOP_RUN: "/conversations/{conversation_uuid}/stop",
    Route.ANNOTATE: "/conversations/{conversation_uuid}/evaluations/{evaluation_uuid}/annotate",
    Route.TOOL_RESULTS: "/tools/results",
    Route.GET_ALL_PROJECTS: "/projects",
    Route.CREATE_PROJECT: "/projects",
    Route.GET_VERSION: _VERSION_BASE,
    Route.GET_ALL_VERSIONS: "/projects/{project_id}/versions",
    Route.CREATE_VERSION: "/projects/{project_id}/versions",
    Route.PUSH_VERSION: "/projects/{project_id}/versions/{version_uuid}/push",
}


def route_params(route: Route) -> list[str]:
    """Names of the placeholders a route expects."""
    return [name for _, name, _, _ in string.Formatter().parse(_TEMPLATES[route]) if name]


class RouteResolver:
    """Resolves ``Route`` members to absolute URLs on a gateway.

    Parameters:
        gateway: The gateway whose base URL prefixes every route.
    """

    __slots__ = ("_base_url",)

    def __init__(self, gateway: GatewayConfig) -> None:
        self._base_url = gateway.base_url

    @property
    def base_url(self) -> str:
        return self._base_url

    def resolve(self, route: Route, **params: Any) -> str:
        """Build the URL for ``route``.

        Parameter values are percent-encoded; ``/`` is kept so nested
        document paths map onto nested URL segments.

        Raises:
            ConfigurationError: A placeholder has no value.
        """
        missing = [name for name in route_params(route) if params.get(name) is None]
        if missing:
            msg = f"Route {route.value!r} requires: {', '.join(missing)}"
            raise ConfigurationError(msg)
        encoded = {name: quote(str(value).strip("/"), safe="/") for name, value in params.items()}
        return self._base_url + _TEMPLATES[route].format(**encoded)
