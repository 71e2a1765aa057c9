"""Metrics collectors bundled with the SDK."""

from __future__ import annotations

import json
import logging
import statistics
from typing import Any

from latitude_sdk.observability.models import MetricPoint

logger = logging.getLogger(__name__)


class InMemoryMetricsCollector:
    """Stores metric points so they can be inspected or summarised."""

    __slots__ = ("_points",)

    def __init__(self) -> None:
        self._points: list[MetricPoint] = []

    def record(self, metric: MetricPoint) -> None:
        self._points.append(metric)

    def flush(self) -> None:
        """Nothing to flush; points stay available."""

    def get_metrics(self, name: str | None = None) -> list[MetricPoint]:
        if name is None:
            return list(self._points)
        return [p for p in self._points if p.name == name]

    def total(self, name: str, **tags: str) -> float:
        """Sum of the values recorded under ``name`` whose tags include ``tags``."""
        return sum(
            p.value
            for p in self._points
            if p.name == name and all(p.tags.get(k) == v for k, v in tags.items())
        )

    def get_summary(self, name: str) -> dict[str, Any]:
        """Return ``count``, ``min``, ``max``, ``avg`` and ``median`` for ``name``.

        An empty dict when nothing was recorded under that name.
        """
        values = [p.value for p in self._points if p.name == name]
        if not values:
            return {}
        return {
            "count": len(values),
            "min": min(values),
            "max": max(values),
            "avg": statistics.fmean(values),
            "median": statistics.median(values),
        }

    def clear(self) -> None:
        self._points.clear()


class LoggingMetricsCollector:
    """Emits each metric point immediately as a JSON log line."""

    __slots__ = ("_log_level",)

    def __init__(self, log_level: int = logging.INFO) -> None:
        self._log_level = log_level

    def record(self, metric: MetricPoint) -> None:
        logger.log(self._log_level, json.dumps(metric.model_dump(mode="json"), default=str))

    def flush(self) -> None:
        """Points are logged on ``record()``."""
