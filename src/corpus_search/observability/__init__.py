"""Observability module for OpenTelemetry-aligned tracing, metrics, and logging."""

from corpus_search.observability.context import get_trace_context, set_trace_context, trace_context
from corpus_search.observability.logging import JsonFormatter, configure_logging
from corpus_search.observability.metrics import (
    CORPUS_READ_ERRORS,
    INDEX_BUILD_SECONDS,
    INDEX_DOC_COUNT,
    INDEX_TERM_COUNT,
    SEARCH_LATENCY,
    SEARCH_REQUESTS,
    get_metrics,
    init_metrics,
    track_latency,
)
from corpus_search.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "CORPUS_READ_ERRORS",
    "INDEX_BUILD_SECONDS",
    "INDEX_DOC_COUNT",
    "INDEX_TERM_COUNT",
    "SEARCH_LATENCY",
    "SEARCH_REQUESTS",
    "JsonFormatter",
    "configure_logging",
    "create_span",
    "get_metrics",
    "get_trace_context",
    "get_tracer",
    "init_metrics",
    "init_tracing",
    "set_trace_context",
    "trace_context",
    "track_latency",
]
