"""
Trace context propagation tests
"""
from opentelemetry import trace

from seam_jsonrpc.telemetry.tracer import (
    create_span,
    extract_trace_context,
    get_current_trace_context,
    with_trace_context,
)

TRACE_ID = "4bf92f3577b34da6a3ce929d0e0e4736"
SPAN_ID = "00f067aa0ba902b7"


def test_extract_valid_context():
    ctx = extract_trace_context({"trace_id": TRACE_ID, "span_id": SPAN_ID, "sampled": False})
    assert ctx == {"trace_id": TRACE_ID, "span_id": SPAN_ID, "sampled": False}


def test_extract_defaults_sampled():
    assert extract_trace_context({"trace_id": TRACE_ID, "span_id": SPAN_ID})["sampled"] is True


def test_extract_rejects_garbage():
    assert extract_trace_context(None) is None
    assert extract_trace_context("trace") is None
    assert extract_trace_context({"trace_id": TRACE_ID}) is None
    assert extract_trace_context({"trace_id": "xyz", "span_id": SPAN_ID}) is None


def test_with_trace_context_sets_remote_parent():
    ctx = extract_trace_context({"trace_id": TRACE_ID, "span_id": SPAN_ID, "sampled": True})
    with with_trace_context(ctx):
        span_context = trace.get_current_span().get_span_context()
        assert format(span_context.trace_id, '032x') == TRACE_ID
        assert format(span_context.span_id, '016x') == SPAN_ID
        assert get_current_trace_context() == ctx
    assert not trace.get_current_span().get_span_context().is_valid


def test_with_empty_context_is_noop():
    with with_trace_context(None):
        assert get_current_trace_context() is None


def test_create_span_is_context_manager():
    with create_span("jsonrpc.call test", {"rpc.method": "test"}):
        pass
