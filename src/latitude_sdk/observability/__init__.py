"""Observability: call tracing, metrics and span export."""

from .exporters import ConsoleSpanExporter, FileSpanExporter, InMemorySpanExporter
from .instrumentation import TracingInstrumentation
from .metrics import InMemoryMetricsCollector, LoggingMetricsCollector
from .models import Invocation, MetricPoint, Span, SpanKind, TraceRecord
from .otlp import OTLPMetricsExporter, OTLPSpanExporter
from .tracer import Tracer

__all__ = [
    "ConsoleSpanExporter",
    "FileSpanExporter",
    "InMemoryMetricsCollector",
    "InMemorySpanExporter",
    "Invocation",
    "LoggingMetricsCollector",
    "MetricPoint",
    "OTLPMetricsExporter",
    "OTLPSpanExporter",
    "Span",
    "SpanKind",
    "TraceRecord",
    "Tracer",
    "TracingInstrumentation",
]
