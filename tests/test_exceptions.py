"""Tests for latitude_sdk.exceptions."""

from __future__ import annotations

import json

import pytest

from latitude_sdk.constants import ApiErrorCodes, LatitudeErrorCodes, RunErrorCodes
from latitude_sdk.exceptions import (
    ConfigurationError,
    LatitudeApiError,
    LatitudeError,
    ToolNotFoundError,
)


class TestHierarchy:
    @pytest.mark.parametrize("exc_type", [ConfigurationError, LatitudeApiError, ToolNotFoundError])
    def test_all_errors_are_latitude_errors(self, exc_type: type[Exception]) -> None:
        assert issubclass(exc_type, LatitudeError)

    def test_tool_not_found_message(self) -> None:
        error = ToolNotFoundError("get_weather")
        assert error.tool_name == "get_weather"
        assert "get_weather" in str(error)


class TestLatitudeApiError:
    def test_known_code_keeps_message(self) -> None:
        error = LatitudeApiError(status=402, message="Out of credits", error_code=RunErrorCodes.AI_RUN_ERROR)
        assert error.message == "Out of credits"
        assert str(error) == "Out of credits"
        assert error.error_code == "ai_run_error"

    @pytest.mark.parametrize("code", [ApiErrorCodes.INTERNAL_SERVER_ERROR, ApiErrorCodes.HTTP_EXCEPTION])
    def test_unexpected_codes_are_prefixed(self, code: str) -> None:
        error = LatitudeApiError(status=503, message="Overloaded", error_code=code)
        assert error.message == "Unexpected API Error: 503 Overloaded"

    def test_internal(self) -> None:
        error = LatitudeApiError.internal("Something broke")
        assert error.status == 500
        assert error.error_code == ApiErrorCodes.INTERNAL_SERVER_ERROR
        assert error.message == "Unexpected API Error: 500 Something broke"
        assert error.server_response == "Something broke"

    def test_aborted(self) -> None:
        error = LatitudeApiError.aborted()
        assert error.status == 499
        assert error.error_code == LatitudeErrorCodes.ABORTED_ERROR
        assert error.message == "The request was cancelled"

    def test_from_response_body(self) -> None:
        body = {
            "name": "NotFoundError",
            "message": "Document not found",
            "errorCode": LatitudeErrorCodes.NOT_FOUND_ERROR,
            "dbErrorRef": {"entityUuid": "e1", "entityType": "document"},
        }
        error = LatitudeApiError.from_response_body(404, body, "Not Found")
        assert error.status == 404
        assert error.message == "Document not found"
        assert error.error_code == "NotFoundError"
        assert error.db_error_ref == {"entityUuid": "e1", "entityType": "document"}
        assert json.loads(error.server_response) == body

    def test_from_response_body_without_message(self) -> None:
        error = LatitudeApiError.from_response_body(418, {}, "I'm a teapot")
        assert error.message == "Unexpected API Error: 418 I'm a teapot"

    def test_from_non_dict_body(self) -> None:
        error = LatitudeApiError.from_response_body(502, "gateway down", "Bad Gateway")
        assert error.message == "Unexpected API Error: 502 Bad Gateway"
        assert error.server_response == "gateway down"

    def test_from_missing_body(self) -> None:
        error = LatitudeApiError.from_response_body(500, None)
        assert error.message == "Unexpected API Error: 500 Unknown error"
        assert error.server_response == ""

    def test_repr(self) -> None:
        error = LatitudeApiError(status=402, message="x", error_code="ai_run_error")
        assert repr(error) == "LatitudeApiError(status=402, error_code='ai_run_error', message='x')"
