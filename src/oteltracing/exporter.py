"""Span exporter factory.

Builds the exporter that finished spans are handed to: a console exporter
that prints spans as JSON, or an OTLP exporter that sends them over gRPC.
"""

import logging
import os
import sys
from typing import IO, Optional

from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SpanExporter

from oteltracing.config import EXPORTER_CONSOLE, EXPORTER_OTLP, InitializeOptions
from oteltracing.exceptions import ExporterError, InvalidExporterError

logger = logging.getLogger(__name__)


def _compact_json(span: ReadableSpan) -> str:
    return span.to_json(indent=None) + os.linesep


def create_console_exporter(pretty: bool = True, out: Optional[IO[str]] = None) -> SpanExporter:
    """Create an exporter that writes each finished span to a stream.

    Args:
        pretty: Indent the JSON output. When False each span is one line.
        out: Stream to write to (defaults to stdout).

    Returns:
        ConsoleSpanExporter instance.
    """
    if pretty:
        return ConsoleSpanExporter(out=out or sys.stdout)
    return ConsoleSpanExporter(out=out or sys.stdout, formatter=_compact_json)


def create_otlp_exporter(options: InitializeOptions) -> SpanExporter:
    """Create an OTLP/gRPC span exporter.

    An empty endpoint falls back to the exporter's own default
    (``OTEL_EXPORTER_OTLP_ENDPOINT`` or ``localhost:4317``).

    Raises:
        ExporterError: If the exporter cannot be imported or constructed.
    """
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
            OTLPSpanExporter,
        )
    except ImportError as e:
        logger.error(f"Failed to import OTLP exporter: {e}")
        raise ExporterError(
            "OTLP exporter unavailable, install opentelemetry-exporter-otlp-proto-grpc",
            cause=e,
        ) from e

    # gRPC metadata keys must be lowercase
    headers = {k.lower(): v for k, v in options.otlp_headers.items()}
    try:
        return OTLPSpanExporter(
            endpoint=options.otlp_endpoint or None,
            insecure=options.otlp_insecure,
            headers=headers or None,
        )
    except Exception as e:
        logger.error(f"Failed to create otlp exporter: {e}")
        raise ExporterError(f"Failed to create otlp exporter: {e}", cause=e) from e


def create_exporter(options: InitializeOptions) -> SpanExporter:
    """Create the span exporter selected by ``options.exporter``.

    Raises:
        InvalidExporterError: If the exporter kind is unknown.
        ExporterError: If construction fails.
    """
    if options.exporter == EXPORTER_OTLP:
        logger.debug(f"Creating otlp exporter for {options.otlp_endpoint or 'default endpoint'}")
        return create_otlp_exporter(options)
    if options.exporter == EXPORTER_CONSOLE:
        logger.debug("Creating console exporter")
        try:
            return create_console_exporter(pretty=options.console_pretty)
        except Exception as e:
            logger.error(f"Failed to create console exporter: {e}")
            raise ExporterError(f"Failed to create console exporter: {e}", cause=e) from e
    raise InvalidExporterError(options.exporter)
