"""Tests for top-level package exports."""

from __future__ import annotations

import latitude_sdk


class TestTopLevelExports:
    """Verify all expected symbols are importable from the top-level package."""

    def test_client_exports(self) -> None:
        from latitude_sdk import Evaluations, Latitude, Logs, Projects, Prompts, Runs, Versions

        assert Latitude is not None
        assert all(ns is not None for ns in (Evaluations, Logs, Projects, Prompts, Runs, Versions))

    def test_streaming_exports(self) -> None:
        from latitude_sdk import (
            IncrementalJsonParser,
            JsonObjectListener,
            StreamConsumer,
            ToolCallDispatcher,
            iter_sse_blocks,
            parse_sse,
        )

        assert IncrementalJsonParser is not None
        assert JsonObjectListener is not None
        assert StreamConsumer is not None
        assert ToolCallDispatcher is not None
        assert callable(iter_sse_blocks)
        assert callable(parse_sse)

    def test_exception_exports(self) -> None:
        from latitude_sdk import ConfigurationError, LatitudeApiError, LatitudeError, ToolNotFoundError

        assert issubclass(LatitudeApiError, LatitudeError)
        assert issubclass(ConfigurationError, LatitudeError)
        assert issubclass(ToolNotFoundError, LatitudeError)

    def test_all_is_complete(self) -> None:
        for name in latitude_sdk.__all__:
            assert hasattr(latitude_sdk, name), f"{name} listed in __all__ but missing"

    def test_version(self) -> None:
        assert isinstance(latitude_sdk.__version__, str)
        assert latitude_sdk.__version__


class TestSubpackageExports:
    def test_observability(self) -> None:
        from latitude_sdk import observability

        for name in observability.__all__:
            assert hasattr(observability, name)

    def test_streaming(self) -> None:
        from latitude_sdk import streaming

        for name in streaming.__all__:
            assert hasattr(streaming, name)

    def test_models(self) -> None:
        from latitude_sdk import models

        for name in models.__all__:
            assert hasattr(models, name)
