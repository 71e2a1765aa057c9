"""Protocol definitions for the SDK's extension points."""

from .instrumentation import Instrumentation, MetricsCollector, SpanExporter

__all__ = [
    "Instrumentation",
    "MetricsCollector",
    "SpanExporter",
]
