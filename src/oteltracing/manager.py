"""Process-wide default tracing provider.

Module-level functions for applications that want one tracer per process
without passing a TracingProvider around. Each call delegates to the
default provider created by ``initialize()``.

Example:
    >>> import oteltracing
    >>> oteltracing.initialize(oteltracing.InitializeOptions(
    ...     service_name="checkout-api", exporter="console"))
    >>> span = oteltracing.start_span("example-span")
    >>> span.end()
    >>> oteltracing.shutdown()
"""

import functools
import logging
import threading
from typing import Any, Callable, Dict, Optional, TypeVar

from opentelemetry import trace as otel_trace
from opentelemetry.context import Context
from opentelemetry.trace import Span, SpanKind, Status, StatusCode, Tracer

from oteltracing.config import InitializeOptions
from oteltracing.exceptions import NotInitializedError
from oteltracing.http import ClientHTTPSpanOptions, ServerHTTPSpanOptions
from oteltracing.provider import (
    DEFAULT_SHUTDOWN_TIMEOUT_MILLIS,
    INSTRUMENTATION_SCOPE,
    TracingProvider,
)

# Singleton instance
_provider: Optional[TracingProvider] = None
_lock = threading.Lock()

# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., Any])

logger = logging.getLogger(__name__)


def initialize(options: Optional[InitializeOptions] = None) -> TracingProvider:
    """Create and start the default provider.

    Calling this again while the default provider is running logs a warning
    and returns the running provider unchanged.

    Args:
        options: Initialization options. If None, loads from environment.

    Returns:
        The started default provider.

    Raises:
        InvalidExporterError: If the exporter kind is unknown.
        ExporterError: If the exporter cannot be created.
        ResourceError: If the resource cannot be created.
    """
    global _provider

    with _lock:
        if _provider is not None and _provider.is_running:
            logger.warning("Tracing already initialized")
            return _provider

        provider = TracingProvider(options or InitializeOptions.from_env())
        provider.start()
        _provider = provider
        return provider


def shutdown(timeout_millis: int = DEFAULT_SHUTDOWN_TIMEOUT_MILLIS) -> None:
    """Flush and close the default provider. Errors are logged."""
    provider = _provider
    if provider is None:
        return
    provider.shutdown(timeout_millis)


def get_provider() -> TracingProvider:
    """Get the running default provider.

    Raises:
        NotInitializedError: If initialize() has not been called.
    """
    provider = _provider
    if provider is None or not provider.is_running:
        raise NotInitializedError()
    return provider


def start_span(name: str, context: Optional[Context] = None) -> Span:
    """Start a span with the given name on the default provider."""
    return get_provider().start_span(name, context=context)


def start_client_http_span(
    options: ClientHTTPSpanOptions, context: Optional[Context] = None
) -> Span:
    """Start a CLIENT HTTP span on the default provider."""
    return get_provider().start_client_http_span(options, context=context)


def start_server_http_span(
    options: ServerHTTPSpanOptions, context: Optional[Context] = None
) -> Span:
    """Start a SERVER HTTP span on the default provider."""
    return get_provider().start_server_http_span(options, context=context)


def reset_tracing() -> None:
    """Shut down and forget the default provider (mainly for testing)."""
    global _provider

    with _lock:
        if _provider is not None:
            _provider.shutdown()
        _provider = None


def _current_tracer() -> Tracer:
    provider = _provider
    if provider is not None and provider.is_running:
        return provider.tracer
    return otel_trace.get_tracer(INSTRUMENTATION_SCOPE)


def trace(
    name: Optional[str] = None,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: Optional[Dict[str, Any]] = None,
) -> Callable[[F], F]:
    """Decorator that wraps each call of a function in a span.

    The tracer is looked up on every call: the running default provider
    when there is one, otherwise the OpenTelemetry global provider.
    Re-initializing after ``shutdown()`` therefore takes effect for
    functions decorated earlier.

    Example:
        >>> @trace("load-user", kind=SpanKind.CLIENT)
        ... def load_user(user_id: int) -> dict:
        ...     ...
    """

    def decorator(func: F) -> F:
        span_name = name or func.__name__

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            tracer = _current_tracer()

            with tracer.start_as_current_span(
                span_name,
                kind=kind,
                attributes=attributes,
                record_exception=False,
                set_status_on_exception=False,
            ) as span:
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                    raise

        return wrapper  # type: ignore

    return decorator
