"""Span exporters bundled with the SDK."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from latitude_sdk.observability.models import Span, SpanKind

logger = logging.getLogger(__name__)


def span_to_dict(span: Span) -> dict[str, Any]:
    """Serialise a span to plain JSON-compatible data."""
    return span.model_dump(mode="json")


class ConsoleSpanExporter:
    """Logs each exported span as one JSON line at ``log_level``."""

    __slots__ = ("_log_level",)

    def __init__(self, log_level: int = logging.INFO) -> None:
        self._log_level = log_level

    def export(self, spans: list[Span]) -> None:
        for span in spans:
            logger.log(self._log_level, json.dumps(span_to_dict(span), default=str))


class InMemorySpanExporter:
    """Keeps exported spans in a list; handy in tests."""

    __slots__ = ("_spans",)

    def __init__(self) -> None:
        self._spans: list[Span] = []

    def export(self, spans: list[Span]) -> None:
        self._spans.extend(spans)

    def get_spans(self, kind: SpanKind | None = None) -> list[Span]:
        """Return the exported spans, optionally only those of ``kind``."""
        if kind is None:
            return list(self._spans)
        return [s for s in self._spans if s.kind == kind]

    def clear(self) -> None:
        self._spans.clear()


class FileSpanExporter:
    """Appends spans to a JSON-Lines file.

    Parameters:
        path: Target file; its parent directory must exist.
    """

    __slots__ = ("_path",)

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def export(self, spans: list[Span]) -> None:
        with self._path.open("a", encoding="utf-8") as fh:
            for span in spans:
                fh.write(json.dumps(span_to_dict(span), default=str))
                fh.write("\n")
