"""
OpenTelemetry Trace Context Management

Trace context injection, extraction and propagation, so a JSON-RPC call made
by one service shows up in the same trace as the command it runs on the other.
"""

import logging
import contextvars
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Iterator
from contextlib import contextmanager

from opentelemetry import trace
from opentelemetry.context import attach, detach
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ALWAYS_ON

logger = logging.getLogger(__name__)


@dataclass
class TraceContext:
    """Transportable trace context carried in the ``trace_context`` envelope member"""
    trace_id: str = ""
    span_id: str = ""
    sampled: bool = True
    baggage: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'trace_id': self.trace_id,
            'span_id': self.span_id,
            'sampled': self.sampled,
            'baggage': dict(self.baggage),
        }


# Context variable for current trace context
current_trace_context: contextvars.ContextVar = contextvars.ContextVar('current_trace_context', default=None)


def setup_tracer(service_name: str, otlp_endpoint: str = "localhost:4317"):
    """Configure OpenTelemetry tracer

    Args:
        service_name: Service name
        otlp_endpoint: OTLP receiver address
    """
    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

    provider = TracerProvider(sampler=ALWAYS_ON)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint)))
    trace.set_tracer_provider(provider)

    tracer = trace.get_tracer(service_name)
    logger.info(f"OpenTelemetry trace configured, service name: {service_name}, OTLP endpoint: {otlp_endpoint}")
    return tracer


def _from_span_context(span_context) -> TraceContext:
    return TraceContext(
        trace_id=span_context.trace_id.to_bytes(16, byteorder='big').hex(),
        span_id=span_context.span_id.to_bytes(8, byteorder='big').hex(),
        sampled=bool(span_context.trace_flags.sampled),
    )


def get_current_trace_context() -> Optional[TraceContext]:
    """Get current TraceContext

    Prefers the active OpenTelemetry span; falls back to the context
    variable set by extract_trace_context().
    """
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return current_trace_context.get()

    trace_ctx = _from_span_context(span_context)
    current_trace_context.set(trace_ctx)
    return trace_ctx


def inject_trace_context() -> Optional[Dict[str, Any]]:
    """Current trace context as a dictionary, or None when nothing is being traced"""
    trace_ctx = get_current_trace_context()
    if trace_ctx is None:
        return None
    return trace_ctx.to_dict()


def extract_trace_context(trace_context_dict: Optional[Dict[str, Any]]) -> Optional[TraceContext]:
    """Extract TraceContext from dictionary

    Args:
        trace_context_dict: Dictionary containing trace_id, span_id etc.

    Returns:
        TraceContext, or None if the dictionary is empty or not a dictionary
    """
    if not trace_context_dict or not isinstance(trace_context_dict, dict):
        return None

    trace_ctx = TraceContext(
        trace_id=str(trace_context_dict.get('trace_id', '')),
        span_id=str(trace_context_dict.get('span_id', '')),
        sampled=bool(trace_context_dict.get('sampled', True)),
    )
    baggage = trace_context_dict.get('baggage')
    if isinstance(baggage, dict):
        for key, value in baggage.items():
            trace_ctx.baggage[str(key)] = str(value)

    return trace_ctx


def _to_span_context(trace_ctx: TraceContext):
    try:
        trace_id = int.from_bytes(bytes.fromhex(trace_ctx.trace_id), byteorder='big')
        span_id = int.from_bytes(bytes.fromhex(trace_ctx.span_id), byteorder='big')
    except ValueError:
        logger.debug(f"Ignoring malformed trace context: {trace_ctx}")
        return None
    return trace.SpanContext(
        trace_id=trace_id,
        span_id=span_id,
        is_remote=True,
        trace_flags=trace.TraceFlags(0x01 if trace_ctx.sampled else 0x00),
    )


@contextmanager
def with_trace_context(trace_ctx: Optional[TraceContext]) -> Iterator[None]:
    """Use specified TraceContext as current context

    Args:
        trace_ctx: TraceContext object, None leaves the current context alone
    """
    if not trace_ctx:
        yield
        return

    token_var = current_trace_context.set(trace_ctx)
    try:
        span_context = None
        if trace_ctx.trace_id and trace_ctx.span_id:
            span_context = _to_span_context(trace_ctx)

        if span_context is not None and span_context.is_valid:
            otel_context = trace.set_span_in_context(trace.NonRecordingSpan(span_context))
            token = attach(otel_context)
            try:
                yield
            finally:
                detach(token)
        else:
            yield
    finally:
        current_trace_context.reset(token_var)


def create_span(name: str, attributes: Dict[str, Any] = None):
    """Create new span

    Args:
        name: Span name
        attributes: Span attributes

    Returns:
        Context manager yielding the span
    """
    tracer = trace.get_tracer(__name__)
    return tracer.start_as_current_span(
        name,
        attributes=attributes or {},
        kind=trace.SpanKind.INTERNAL,
    )
