"""Tracing provider for OpenTelemetry distributed tracing.

This module provides a TracingProvider class that owns the SDK tracer
provider, its exporter and tracer, and offers helpers for starting
generic and HTTP spans.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from opentelemetry import trace as otel_trace
from opentelemetry.context import Context
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Span, SpanKind, Status, StatusCode, Tracer

from oteltracing.config import InitializeOptions
from oteltracing.exceptions import NotInitializedError
from oteltracing.exporter import create_exporter
from oteltracing.http import ClientHTTPSpanOptions, ServerHTTPSpanOptions
from oteltracing.resource import create_resource

logger = logging.getLogger(__name__)

INSTRUMENTATION_SCOPE = "oteltracing"
DEFAULT_SHUTDOWN_TIMEOUT_MILLIS = 30000


class TracingProvider:
    """Owns the OpenTelemetry tracer provider for one service.

    Example:
        >>> from oteltracing.config import InitializeOptions
        >>> provider = TracingProvider(InitializeOptions(
        ...     service_name="checkout-api",
        ...     service_version="1.0.0",
        ...     deployment_environment="dev",
        ...     exporter="console",
        ... ))
        >>> provider.start()
        >>>
        >>> span = provider.start_span("load-cart")
        >>> span.end()
        >>>
        >>> provider.shutdown()
    """

    def __init__(self, options: InitializeOptions) -> None:
        """Initialize tracing provider.

        Args:
            options: Service identity and exporter selection.
        """
        self.options = options
        self._tracer_provider: Optional[TracerProvider] = None
        self._tracer: Optional[Tracer] = None
        self._span_processor: Optional[BatchSpanProcessor] = None
        self._running = False
        self._lock = threading.Lock()

    def start(self) -> None:
        """Create the exporter, resource and tracer provider.

        Raises:
            InvalidExporterError: If the exporter kind is unknown.
            ExporterError: If the exporter cannot be created.
            ResourceError: If the resource cannot be created.
        """
        with self._lock:
            if self._running:
                logger.warning("TracingProvider already running")
                return

            self.options.validate()
            logger.info(
                f"Starting tracing for {self.options.service_name} "
                f"with {self.options.exporter} exporter"
            )

            # Resource first, so a failure cannot leave an open exporter behind
            resource = create_resource(self.options)
            exporter = create_exporter(self.options)

            self._tracer_provider = TracerProvider(resource=resource)
            # Batch timeout is 5 seconds
            self._span_processor = BatchSpanProcessor(
                exporter,
                max_queue_size=2048,
                schedule_delay_millis=5000,
                max_export_batch_size=512,
            )
            self._tracer_provider.add_span_processor(self._span_processor)

            if self.options.set_global:
                self._register_global()

            self._tracer = self._tracer_provider.get_tracer(INSTRUMENTATION_SCOPE)
            self._running = True
            logger.info("Tracing provider started")

    def _register_global(self) -> None:
        """Register as the OpenTelemetry global tracer provider.

        The SDK allows this once per process. When another provider already
        holds the global slot, this one is not registered and a warning is
        logged; its spans are still available through ``tracer``.
        """
        current = otel_trace.get_tracer_provider()
        if current is self._tracer_provider:
            return
        if not isinstance(current, otel_trace.ProxyTracerProvider):
            logger.warning(
                "Global tracer provider already registered, cannot replace it. "
                "Spans from instrumentation using the global provider will not "
                f"reach {self.options.service_name}"
            )
            return
        otel_trace.set_tracer_provider(self._tracer_provider)

    def shutdown(self, timeout_millis: int = DEFAULT_SHUTDOWN_TIMEOUT_MILLIS) -> None:
        """Flush pending spans and shut the provider down.

        Errors are logged, not raised. Safe to call when not started.

        Args:
            timeout_millis: Upper bound on the flush.
        """
        with self._lock:
            if not self._running:
                return

            logger.info("Shutting down tracing provider")

            if self._tracer_provider:
                try:
                    if not self._tracer_provider.force_flush(timeout_millis):
                        logger.error("Failed to flush: timed out")
                except Exception as e:
                    logger.error(f"Failed to flush: {e}")

                try:
                    self._tracer_provider.shutdown()
                except Exception as e:
                    logger.error(f"Error shutting down tracer provider: {e}")

            self._running = False
            logger.info("Tracing provider stopped")

    @property
    def tracer(self) -> Tracer:
        """Get the OpenTelemetry tracer.

        Raises:
            NotInitializedError: If provider not started.
        """
        if not self._running or not self._tracer:
            raise NotInitializedError("TracingProvider not started")
        return self._tracer

    @property
    def tracer_provider(self) -> TracerProvider:
        """Get the SDK tracer provider.

        Raises:
            NotInitializedError: If provider not started.
        """
        if not self._running or not self._tracer_provider:
            raise NotInitializedError("TracingProvider not started")
        return self._tracer_provider

    @property
    def is_running(self) -> bool:
        return self._running

    def start_span(
        self,
        name: str,
        context: Optional[Context] = None,
        kind: SpanKind = SpanKind.INTERNAL,
        attributes: Optional[Dict[str, Any]] = None,
    ) -> Span:
        """Start a span. The caller must end it.

        Args:
            name: Span name.
            context: Parent context; defaults to the current context.
            kind: Span kind.
            attributes: Initial span attributes.

        Returns:
            The started span. It is not made current.
        """
        return self.tracer.start_span(
            name, context=context, kind=kind, attributes=attributes
        )

    def start_client_http_span(
        self, options: ClientHTTPSpanOptions, context: Optional[Context] = None
    ) -> Span:
        """Start a CLIENT span for an outgoing HTTP request.

        Sets ``http.request.method``, ``url.full`` and ``http.route``.
        """
        return self.start_span(
            options.span_name(),
            context=context,
            kind=SpanKind.CLIENT,
            attributes=options.attributes(),
        )

    def start_server_http_span(
        self, options: ServerHTTPSpanOptions, context: Optional[Context] = None
    ) -> Span:
        """Start a SERVER span for an incoming HTTP request.

        Sets ``http.request.method``, ``http.route`` and ``url.path``.
        """
        return self.start_span(
            options.span_name(),
            context=context,
            kind=SpanKind.SERVER,
            attributes=options.attributes(),
        )

    @contextmanager
    def start_as_current_span(
        self,
        name: str,
        context: Optional[Context] = None,
        kind: SpanKind = SpanKind.INTERNAL,
        attributes: Optional[Dict[str, Any]] = None,
    ) -> Iterator[Span]:
        """Start a span, make it current, and end it on exit.

        Example:
            >>> with provider.start_as_current_span("charge-card") as span:
            ...     span.set_attribute("payment.provider", "stripe")
        """
        with self.tracer.start_as_current_span(
            name,
            context=context,
            kind=kind,
            attributes=attributes,
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            try:
                yield span
            except Exception as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                span.record_exception(e)
                raise
