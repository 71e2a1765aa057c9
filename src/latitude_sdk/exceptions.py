"""Custom exceptions for latitude-sdk."""

from __future__ import annotations

import json
from typing import Any

from latitude_sdk.constants import ApiErrorCodes, LatitudeErrorCodes

__all__ = [
    "ConfigurationError",
    "LatitudeApiError",
    "LatitudeError",
    "ToolNotFoundError",
]

_UNEXPECTED_CODES = frozenset({ApiErrorCodes.HTTP_EXCEPTION, ApiErrorCodes.INTERNAL_SERVER_ERROR})


class LatitudeError(Exception):
    """Base exception for all latitude-sdk errors."""


class ConfigurationError(LatitudeError):
    """Raised when the client is missing a required setting (api key, project id)."""


class ToolNotFoundError(LatitudeError):
    """Raised when the stream requests a tool that has no registered handler."""

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Tool {tool_name!r} not found in the provided tool handlers")
        self.tool_name = tool_name


class LatitudeApiError(LatitudeError):
    """Error reported by (or on behalf of) the Latitude API.

    Covers non-2xx HTTP responses, ``chain-error`` frames received while
    streaming, and protocol violations detected by the client itself.

    Parameters:
        status: HTTP-like status code (``402`` for chain errors, ``500`` for
            internal errors).
        message: Human readable description.
        server_response: Raw body returned by the server, if any.
        error_code: One of ``ApiErrorCodes``, ``RunErrorCodes`` or
            ``LatitudeErrorCodes`` (kept as a plain string so unknown server
            codes survive).
        db_error_ref: Optional ``{"entityUuid", "entityType"}`` reference to
            the persisted error on the platform.
    """

    def __init__(
        self,
        *,
        status: int,
        message: str,
        server_response: str = "",
        error_code: str = ApiErrorCodes.INTERNAL_SERVER_ERROR,
        db_error_ref: dict[str, Any] | None = None,
    ) -> None:
        self.status = status
        self.error_code = str(error_code)
        self.server_response = server_response
        self.db_error_ref = db_error_ref
        if self.error_code in _UNEXPECTED_CODES:
            message = f"Unexpected API Error: {status} {message}"
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status={self.status}, "
            f"error_code={self.error_code!r}, message={self.message!r})"
        )

    @classmethod
    def from_response_body(cls, status: int, body: Any, reason: str = "") -> LatitudeApiError:
        """Build an error from a decoded JSON error body.

        Parameters:
            status: The HTTP status code of the response.
            body: The decoded JSON body, or ``None`` when it was not JSON.
            reason: Fallback message (usually the HTTP reason phrase).

        Returns:
            A ``LatitudeApiError`` carrying the server's message and code.
        """
        if not isinstance(body, dict):
            return cls(
                status=status,
                message=reason or "Unknown error",
                server_response="" if body is None else str(body),
            )
        return cls(
            status=status,
            message=str(body.get("message") or reason or "Unknown error"),
            server_response=json.dumps(body),
            error_code=body.get("errorCode") or ApiErrorCodes.INTERNAL_SERVER_ERROR,
            db_error_ref=body.get("dbErrorRef"),
        )

    @classmethod
    def internal(cls, message: str) -> LatitudeApiError:
        """Build the 500 ``internal_server_error`` used for client-side failures."""
        return cls(
            status=500,
            message=message,
            server_response=message,
            error_code=ApiErrorCodes.INTERNAL_SERVER_ERROR,
        )

    @classmethod
    def aborted(cls, message: str = "The request was cancelled") -> LatitudeApiError:
        """Build the ``AbortedError`` reported when a call is cancelled."""
        return cls(
            status=499,
            message=message,
            server_response=message,
            error_code=LatitudeErrorCodes.ABORTED_ERROR,
        )
