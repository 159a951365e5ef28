"""Tracing and structured logging for token building and token flows.

Log events pass through ``redact_credentials`` so client secrets, passwords
and tokens never reach a log sink, and through ``add_trace_context`` so log
lines can be joined with the span of the token request they belong to.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

if TYPE_CHECKING:
    from collections.abc import Generator, MutableMapping

    from .config import TelemetryConfig

TRACER_NAME = "identity-token-sdk"
TRACER_VERSION = "0.1.0"

REDACTED = "**********"
SENSITIVE_KEYS = frozenset(
    {
        "client_secret",
        "password",
        "access_token",
        "refresh_token",
        "assertion",
        "code",
        "code_verifier",
    }
)

_tracer: trace.Tracer | None = None
_logger: structlog.BoundLogger | None = None


def get_tracer() -> trace.Tracer:
    """Return the tracer spans of this package are started with."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME, TRACER_VERSION)
    return _tracer


def get_logger() -> structlog.BoundLogger:
    global _logger
    if _logger is None:
        _logger = structlog.get_logger(TRACER_NAME)
    return _logger


def redact_credentials(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask values of credential and token keys, including nested mappings."""
    for key, value in event_dict.items():
        if key in SENSITIVE_KEYS and value is not None:
            event_dict[key] = REDACTED
        elif isinstance(value, dict):
            event_dict[key] = redact_credentials(logger, method_name, dict(value))
    return event_dict


def add_trace_context(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Add trace and span id of the current recording span."""
    span = trace.get_current_span()
    if span.is_recording():
        context = span.get_span_context()
        event_dict["trace_id"] = f"{context.trace_id:032x}"
        event_dict["span_id"] = f"{context.span_id:016x}"
    return event_dict


def configure_telemetry(config: TelemetryConfig) -> None:
    """Set up structlog and the tracer from ``config``.

    Disabled telemetry swaps in a no-op tracer and leaves logging untouched.
    """
    global _tracer, _logger

    if not config.enabled:
        _tracer = trace.NoOpTracer()
        return

    renderer: Any = (
        structlog.processors.JSONRenderer()
        if config.json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_credentials,
            add_trace_context,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_log_level(config.log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _tracer = trace.get_tracer(config.service_name, TRACER_VERSION)
    _logger = structlog.get_logger(config.service_name)


def _log_level(level: str) -> int:
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


@contextmanager
def trace_operation(
    name: str,
    *,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """Run the enclosed block in a span.

    Attributes with a ``None`` value are skipped. An exception leaving the
    block is recorded on the span and re-raised.

    Args:
        name: Span name.
        attributes: Optional span attributes.

    Yields:
        The active span.
    """
    with get_tracer().start_as_current_span(name) as span:
        for key, value in (attributes or {}).items():
            if value is not None:
                span.set_attribute(key, value)
        try:
            yield span
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            raise
