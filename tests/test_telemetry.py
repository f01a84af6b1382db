"""
Tests for trace context helpers and metrics wrappers
"""
from opentelemetry import trace

from cmdseam.telemetry import metrics
from cmdseam.telemetry.tracer import (
    TraceContext,
    create_span,
    current_trace_context,
    extract_trace_context,
    get_current_trace_context,
    with_trace_context,
)

TRACE_ID = "0af7651916cd43dd8448eb211c80319c"
SPAN_ID = "b7ad6b7169203331"


class TestTraceContext:
    """Extraction and propagation"""

    def test_extract(self):
        ctx = extract_trace_context({
            "trace_id": TRACE_ID,
            "span_id": SPAN_ID,
            "sampled": False,
            "baggage": {"tenant": 7},
        })
        assert ctx == TraceContext(trace_id=TRACE_ID, span_id=SPAN_ID, sampled=False, baggage={"tenant": "7"})

    def test_extract_ignores_garbage(self):
        assert extract_trace_context(None) is None
        assert extract_trace_context({}) is None
        assert extract_trace_context("trace") is None

    def test_with_trace_context_sets_remote_parent(self):
        ctx = TraceContext(trace_id=TRACE_ID, span_id=SPAN_ID)
        with with_trace_context(ctx):
            span_context = trace.get_current_span().get_span_context()
            assert span_context.is_valid
            assert span_context.is_remote
            assert format(span_context.trace_id, "032x") == TRACE_ID
            assert get_current_trace_context().trace_id == TRACE_ID
        assert current_trace_context.get() is None
        assert not trace.get_current_span().get_span_context().is_valid

    def test_malformed_ids_are_tolerated(self):
        ctx = TraceContext(trace_id="zz", span_id="not-hex")
        with with_trace_context(ctx):
            assert current_trace_context.get() is ctx
        assert current_trace_context.get() is None

    def test_none_context_is_passthrough(self):
        with with_trace_context(None):
            assert current_trace_context.get() is None

    def test_create_span_without_provider(self):
        with create_span("unit.test", {"k": "v"}) as span:
            assert span is not None

    def test_to_dict(self):
        ctx = TraceContext(trace_id=TRACE_ID, span_id=SPAN_ID, baggage={"a": "b"})
        assert ctx.to_dict() == {"trace_id": TRACE_ID, "span_id": SPAN_ID, "sampled": True, "baggage": {"a": "b"}}


class TestMetrics:
    """Instrument caching"""

    def test_counter_is_cached(self):
        first = metrics.get_counter("test.counter", "Test counter")
        assert metrics.get_counter("test.counter", "Test counter") is first
        metrics.increment_counter("test.counter", 2, {"kind": "unit"})

    def test_histogram_is_cached(self):
        first = metrics.get_histogram("test.latency", "Test latency")
        assert metrics.get_histogram("test.latency", "Test latency") is first
        metrics.record_latency("test.latency", 1.5)
