"""Log formatters that stamp records with the active trace context.

Records logged while a span is current carry its ``trace_id`` and
``span_id``, so log lines can be joined with exported traces.
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from opentelemetry import trace
from opentelemetry.trace import INVALID_SPAN_ID, INVALID_TRACE_ID

from oteltracing.config import LoggingConfig

ROOT_LOGGER_NAME = "oteltracing"

# LogRecord attributes that are not user-supplied extras
_RECORD_FIELDS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "asctime", "taskName"}


def current_trace_context() -> Optional[Dict[str, str]]:
    """Return hex ``trace_id`` and ``span_id`` of the current span, if any."""
    ctx = trace.get_current_span().get_span_context()
    if ctx.trace_id == INVALID_TRACE_ID or ctx.span_id == INVALID_SPAN_ID:
        return None
    return {
        "trace_id": format(ctx.trace_id, "032x"),
        "span_id": format(ctx.span_id, "016x"),
    }


class StructuredFormatter(logging.Formatter):
    """JSON log formatter.

    Example output:
        {"timestamp": "2024-01-15T10:30:45.123456+00:00", "level": "INFO",
         "logger": "oteltracing.provider", "message": "Tracing provider started",
         "trace_id": "4bf92f35...", "span_id": "00f067aa..."}
    """

    def __init__(
        self,
        include_trace_context: bool = True,
        extra_fields: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__()
        self.include_trace_context = include_trace_context
        self.extra_fields = extra_fields or {}

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
                timespec="microseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_trace_context:
            entry.update(current_trace_context() or {})

        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb),
            }

        entry.update(self.extra_fields)
        for key, value in record.__dict__.items():
            if key not in _RECORD_FIELDS and not key.startswith("_"):
                entry[key] = value

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Single-line text formatter.

        2024-01-15T10:30:45.123Z INFO     [oteltracing.provider] [trace=4bf92f3577b34da6] Tracing provider started
    """

    def __init__(self, include_trace_context: bool = True) -> None:
        super().__init__()
        self.include_trace_context = include_trace_context

    def format(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        parts = [
            dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            record.levelname.ljust(8),
            f"[{record.name}]",
        ]

        if self.include_trace_context:
            ctx = current_trace_context()
            if ctx:
                parts.append(f"[trace={ctx['trace_id'][:16]}]")

        parts.append(record.getMessage())
        result = " ".join(parts)

        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)
        return result


def configure_logging(
    config: Optional[LoggingConfig] = None, logger_name: str = ROOT_LOGGER_NAME
) -> logging.Handler:
    """Install a formatted handler on the package logger.

    Args:
        config: Logging configuration. If None, loads from environment.
        logger_name: Logger to configure.

    Returns:
        The installed handler, for later removal with ``remove_handler``.

    Raises:
        ValueError: If the configuration is invalid.
    """
    config = config or LoggingConfig.from_env()
    config.validate()

    formatter: logging.Formatter
    if config.format == "json":
        formatter = StructuredFormatter(include_trace_context=config.trace_correlation)
    else:
        formatter = TextFormatter(include_trace_context=config.trace_correlation)

    handler: logging.Handler
    if config.output_file:
        handler = logging.FileHandler(config.output_file)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    logger = logging.getLogger(logger_name)
    logger.setLevel(config.level)
    logger.addHandler(handler)
    logger.propagate = False
    return handler


def remove_handler(handler: logging.Handler, logger_name: str = ROOT_LOGGER_NAME) -> None:
    """Detach and close a handler installed by ``configure_logging``."""
    logging.getLogger(logger_name).removeHandler(handler)
    handler.close()
