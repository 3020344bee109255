"""
OpenTelemetry Integration Module

Provides tracing and metrics for the JSON-RPC client and server:
- tracer: spans and trace context propagation through request envelopes
- metrics: request/error counters and latency histograms
"""

from .tracer import (
    setup_tracer,
    extract_trace_context,
    get_current_trace_context,
    with_trace_context,
    create_span
)
from .metrics import setup_metrics, increment_counter, record_latency

__all__ = [
    "setup_tracer",
    "setup_metrics",
    "extract_trace_context",
    "get_current_trace_context",
    "with_trace_context",
    "create_span",
    "increment_counter",
    "record_latency"
]
