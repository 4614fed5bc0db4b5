"""Convenience layer over the OpenTelemetry tracing SDK.

Initializes a tracer with a console or OTLP/gRPC exporter, tags it with
service metadata, and starts generic and HTTP spans with semantic
convention attribute names.

Example:
    >>> import oteltracing
    >>> from oteltracing import ClientHTTPSpanOptions, InitializeOptions
    >>>
    >>> oteltracing.initialize(InitializeOptions(
    ...     service_name="checkout-api",
    ...     service_version="1.0.0",
    ...     deployment_environment="dev",
    ...     exporter="console",
    ... ))
    >>>
    >>> span = oteltracing.start_client_http_span(ClientHTTPSpanOptions(
    ...     method="get",
    ...     url="https://api.example.com/api/v1/users/1",
    ...     route="/api/v1/users/{id}",
    ... ))
    >>> span.end()
    >>>
    >>> oteltracing.shutdown()
"""

from oteltracing.config import InitializeOptions, LoggingConfig
from oteltracing.exceptions import (
    ConfigError,
    ExporterError,
    InvalidExporterError,
    NotInitializedError,
    ResourceError,
    TracingError,
)
from oteltracing.http import ClientHTTPSpanOptions, ServerHTTPSpanOptions
from oteltracing.logs import configure_logging
from oteltracing.manager import (
    get_provider,
    initialize,
    reset_tracing,
    shutdown,
    start_client_http_span,
    start_server_http_span,
    start_span,
    trace,
)
from oteltracing.provider import TracingProvider

__version__ = "0.1.0"

__all__ = [
    "ClientHTTPSpanOptions",
    "ConfigError",
    "ExporterError",
    "InitializeOptions",
    "InvalidExporterError",
    "LoggingConfig",
    "NotInitializedError",
    "ResourceError",
    "ServerHTTPSpanOptions",
    "TracingError",
    "TracingProvider",
    "configure_logging",
    "get_provider",
    "initialize",
    "reset_tracing",
    "shutdown",
    "start_client_http_span",
    "start_server_http_span",
    "start_span",
    "trace",
]
