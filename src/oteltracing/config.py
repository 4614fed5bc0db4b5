"""Tracing configuration module.

This module provides the options used to initialize tracing and to
configure log output, loadable from code, environment variables or a
YAML file.
"""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from oteltracing.exceptions import ConfigError, InvalidExporterError

EXPORTER_OTLP = "otlp"
EXPORTER_CONSOLE = "console"
VALID_EXPORTERS = (EXPORTER_OTLP, EXPORTER_CONSOLE)
_TRUTHY = ("1", "true", "yes")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in _TRUTHY


def _env_optional_bool(name: str) -> Optional[bool]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip().lower() in _TRUTHY


def parse_header(item: str) -> Tuple[str, str]:
    """Split a single ``key=value`` header. The value may contain commas.

    Raises:
        ConfigError: If there is no ``=`` or the key is empty.
    """
    if "=" not in item:
        raise ConfigError(f"Invalid header '{item}', expected key=value")
    key, val = item.split("=", 1)
    key = key.strip()
    if not key:
        raise ConfigError(f"Invalid header '{item}', expected key=value")
    return key, val.strip()


def parse_headers(value: Optional[str]) -> Dict[str, str]:
    """Parse a ``key=value,key2=value2`` header string.

    Args:
        value: Header string, as used by ``OTEL_EXPORTER_OTLP_HEADERS``.

    Returns:
        Dictionary of header names to values.

    Raises:
        ConfigError: If an entry has no ``=``.

    Example:
        >>> parse_headers("api-key=abc, x-team=core")
        {'api-key': 'abc', 'x-team': 'core'}
    """
    headers: Dict[str, str] = {}
    if not value:
        return headers

    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        key, val = parse_header(item)
        headers[key] = val
    return headers


@dataclass
class InitializeOptions:
    """Options for initializing tracing.

    Example:
        >>> options = InitializeOptions(
        ...     service_name="checkout-api",
        ...     service_version="1.0.0",
        ...     deployment_environment="dev",
        ...     exporter="otlp",
        ...     otlp_endpoint="otlp.nr-data.net:4317",
        ...     otlp_headers={"api-key": "replaceme"},
        ... )
        >>> options.validate()
    """

    # Lowercase letters and hyphens, e.g. "my-service"
    service_name: str = "unknown-service"
    # Semantic version, e.g. "1.0.0"
    service_version: str = ""
    # Short lowercase names where possible: "dev", "test", "uat", "prod"
    deployment_environment: str = ""
    exporter: str = EXPORTER_CONSOLE
    # gRPC host and port, e.g. "localhost:4317"
    otlp_endpoint: Optional[str] = None
    # Usually for authentication against the collector
    otlp_headers: Dict[str, str] = field(default_factory=dict)
    # None lets the exporter decide from the endpoint scheme
    otlp_insecure: Optional[bool] = None
    console_pretty: bool = True
    set_global: bool = True

    @classmethod
    def from_env(cls) -> "InitializeOptions":
        """Create options from environment variables.

        Environment Variables:
            TRACING_SERVICE_NAME: Service name (default: unknown-service)
            TRACING_SERVICE_VERSION: Service version
            TRACING_DEPLOYMENT_ENVIRONMENT: Deployment environment
            TRACING_EXPORTER: otlp or console (default: console)
            TRACING_OTLP_ENDPOINT: OTLP gRPC endpoint (e.g., localhost:4317)
            TRACING_OTLP_HEADERS: key=value pairs separated by commas
            TRACING_OTLP_INSECURE: 1/true/yes or anything else for false (unset lets the exporter decide)
            TRACING_CONSOLE_PRETTY: Pretty-print console spans (default: true)

        Returns:
            InitializeOptions populated from the environment.
        """
        return cls(
            service_name=os.getenv("TRACING_SERVICE_NAME", "unknown-service"),
            service_version=os.getenv("TRACING_SERVICE_VERSION", ""),
            deployment_environment=os.getenv("TRACING_DEPLOYMENT_ENVIRONMENT", ""),
            exporter=os.getenv("TRACING_EXPORTER", EXPORTER_CONSOLE).lower(),
            otlp_endpoint=os.getenv("TRACING_OTLP_ENDPOINT") or None,
            otlp_headers=parse_headers(os.getenv("TRACING_OTLP_HEADERS")),
            otlp_insecure=_env_optional_bool("TRACING_OTLP_INSECURE"),
            console_pretty=_env_bool("TRACING_CONSOLE_PRETTY", "true"),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InitializeOptions":
        """Create options from a dictionary, ignoring unknown keys.

        Raises:
            ConfigError: If data is not a mapping or headers are malformed.
        """
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a dictionary")

        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}

        if isinstance(values.get("exporter"), str):
            values["exporter"] = values["exporter"].strip().lower()

        headers = values.get("otlp_headers")
        if isinstance(headers, str):
            values["otlp_headers"] = parse_headers(headers)
        elif headers is None:
            values.pop("otlp_headers", None)
        elif isinstance(headers, dict):
            values["otlp_headers"] = {str(k): str(v) for k, v in headers.items()}
        else:
            raise ConfigError("otlp_headers must be a mapping or key=value string")

        return cls(**values)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "InitializeOptions":
        """Load options from a YAML file.

        Args:
            path: Path to a YAML file holding a mapping of option names.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ConfigError: If the YAML is invalid or not a mapping.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}", cause=e) from e

        return cls.from_dict(data)

    def validate(self) -> None:
        """Validate the exporter kind.

        Raises:
            InvalidExporterError: If exporter is not "otlp" or "console".
        """
        if self.exporter not in VALID_EXPORTERS:
            raise InvalidExporterError(self.exporter)


@dataclass
class LoggingConfig:
    """Configuration for log output."""

    level: str = "INFO"
    format: str = "text"  # or "json"
    trace_correlation: bool = True
    output_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """Create configuration from environment variables."""
        return cls(
            level=os.getenv("TRACING_LOG_LEVEL", "INFO").upper(),
            format=os.getenv("TRACING_LOG_FORMAT", "text").lower(),
            trace_correlation=_env_bool("TRACING_LOG_TRACE_CORRELATION", "true"),
            output_file=os.getenv("TRACING_LOG_FILE"),
        )

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If level or format is unknown.
        """
        valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        if self.level not in valid_levels:
            raise ValueError(
                f"Invalid log level: {self.level}. Must be one of {valid_levels}"
            )
        if self.format not in ("json", "text"):
            raise ValueError(
                f"Invalid log format: {self.format}. Must be 'json' or 'text'"
            )
