"""
OpenTelemetry Integration Module

Provides distributed tracing and metrics collection capabilities:
- tracer: Trace context management (injection, extraction, propagation)
- metrics: Counters and latency histograms for both adapters
"""

from .tracer import (
    TraceContext,
    setup_tracer,
    inject_trace_context,
    extract_trace_context,
    get_current_trace_context,
    with_trace_context,
    create_span
)
from .metrics import setup_metrics, increment_counter, record_latency

__all__ = [
    "TraceContext",
    "setup_tracer",
    "inject_trace_context",
    "extract_trace_context",
    "get_current_trace_context",
    "with_trace_context",
    "create_span",
    "setup_metrics",
    "increment_counter",
    "record_latency",
]
