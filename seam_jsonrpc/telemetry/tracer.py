"""
OpenTelemetry Trace Context Management

Spans around JSON-RPC calls, plus conversion of the active span context to and
from the ``trace_context`` member that may ride along in a request envelope:

    {"trace_id": <32 hex>, "span_id": <16 hex>, "sampled": <bool>}
"""

import logging
import contextvars
from typing import Dict, Any, Optional, Iterator
from contextlib import contextmanager

from opentelemetry import trace
from opentelemetry.context import attach, detach
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ALWAYS_ON
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

logger = logging.getLogger(__name__)

# Trace context received from a peer, for code running inside with_trace_context
current_trace_context = contextvars.ContextVar('current_trace_context', default=None)

def setup_tracer(service_name: str, otlp_endpoint: str = "localhost:4317"):
    """Configure OpenTelemetry tracer

    Args:
        service_name: Service name
        otlp_endpoint: OTLP receiver address
    """
    provider = TracerProvider(sampler=ALWAYS_ON)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint)))
    trace.set_tracer_provider(provider)

    tracer = trace.get_tracer(service_name)

    logger.info(f"OpenTelemetry trace configured, service name: {service_name}, OTLP endpoint: {otlp_endpoint}")

    return tracer

def get_current_trace_context() -> Optional[Dict[str, Any]]:
    """Return the active span context as a transportable dictionary

    Falls back to the context received from a peer when no span is active.

    Returns:
        Dict with trace_id, span_id and sampled, or None
    """
    span_context = trace.get_current_span().get_span_context()

    if not span_context.is_valid:
        return current_trace_context.get()

    return {
        'trace_id': format(span_context.trace_id, '032x'),
        'span_id': format(span_context.span_id, '016x'),
        'sampled': span_context.trace_flags.sampled,
    }

def extract_trace_context(trace_context_dict: Any) -> Optional[Dict[str, Any]]:
    """Normalise a ``trace_context`` member received in a request

    Returns:
        Dict with trace_id, span_id and sampled, or None if unusable
    """
    if not isinstance(trace_context_dict, dict):
        return None

    trace_id = trace_context_dict.get('trace_id')
    span_id = trace_context_dict.get('span_id')
    if not isinstance(trace_id, str) or not isinstance(span_id, str):
        return None

    try:
        int(trace_id, 16)
        int(span_id, 16)
    except ValueError:
        logger.debug(f"Ignoring malformed trace context: {trace_context_dict}")
        return None

    return {
        'trace_id': trace_id,
        'span_id': span_id,
        'sampled': bool(trace_context_dict.get('sampled', True)),
    }

@contextmanager
def with_trace_context(trace_context: Optional[Dict[str, Any]]) -> Iterator[None]:
    """Run the enclosed block as a child of a remote span context

    Args:
        trace_context: Dictionary from extract_trace_context, or None
    """
    if not trace_context:
        yield
        return

    token_var = current_trace_context.set(trace_context)
    span_context = trace.SpanContext(
        trace_id=int(trace_context['trace_id'], 16),
        span_id=int(trace_context['span_id'], 16),
        is_remote=True,
        trace_flags=trace.TraceFlags(0x01 if trace_context['sampled'] else 0x00)
    )
    token = attach(trace.set_span_in_context(trace.NonRecordingSpan(span_context)))
    try:
        yield
    finally:
        detach(token)
        current_trace_context.reset(token_var)

def create_span(name: str, attributes: Dict[str, Any] = None, kind=trace.SpanKind.CLIENT):
    """Start a span as the current span (use as a context manager)"""
    tracer = trace.get_tracer(__name__)
    return tracer.start_as_current_span(
        name,
        attributes=attributes or {},
        kind=kind,
    )
