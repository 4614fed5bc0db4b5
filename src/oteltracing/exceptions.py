"""Exceptions for oteltracing.

This module defines the errors raised while configuring and starting
tracing, so callers can catch them with a single ``except TracingError``.

Example:
    >>> from oteltracing.exceptions import InvalidExporterError
    >>> raise InvalidExporterError("zipkin")
"""

from typing import Optional


class TracingError(Exception):
    """Base exception for all oteltracing errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        """Initialize tracing error.

        Args:
            message: Error description.
            cause: Original exception that caused this error.
        """
        super().__init__(message)
        self.cause = cause


class InvalidExporterError(TracingError, ValueError):
    """Exporter kind is not one of the supported values."""

    def __init__(self, exporter: str):
        super().__init__(f"Invalid exporter '{exporter}'. Use 'otlp' or 'console'")
        self.exporter = exporter


class ExporterError(TracingError):
    """Span exporter could not be created.

    Example:
        >>> raise ExporterError("Failed to create otlp exporter", cause=err)
    """

    pass


class ResourceError(TracingError):
    """Resource attributes could not be built."""

    pass


class NotInitializedError(TracingError, RuntimeError):
    """A span was requested before tracing was initialized."""

    def __init__(self, message: str = "Tracing not initialized, call initialize() first"):
        super().__init__(message)


class ConfigError(TracingError, ValueError):
    """Configuration file or value could not be parsed."""

    pass
