"""Pytest fixtures for oteltracing tests.

Providers are created with ``set_global=False`` so tests don't fight over
the process-wide OpenTelemetry tracer provider, and finished spans are
captured with an in-memory exporter.
"""

from typing import Generator

import pytest
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import (
    InMemorySpanExporter,
)

from oteltracing.config import InitializeOptions
from oteltracing.manager import initialize, reset_tracing
from oteltracing.provider import TracingProvider


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def console_options() -> InitializeOptions:
    """Create options for a console exporter.

    Returns:
        InitializeOptions with test-appropriate identity.
    """
    return InitializeOptions(
        service_name="oteltracing-test",
        service_version="1.0.0-test",
        deployment_environment="test",
        exporter="console",
        console_pretty=False,
        set_global=False,
    )


@pytest.fixture
def otlp_options() -> InitializeOptions:
    """Create options for an OTLP exporter with an auth header."""
    return InitializeOptions(
        service_name="oteltracing-test",
        service_version="1.0.0-test",
        deployment_environment="test",
        exporter="otlp",
        otlp_endpoint="localhost:4317",
        otlp_headers={"api-key": "replaceme"},
        otlp_insecure=True,
        set_global=False,
    )


# =============================================================================
# Provider Fixtures
# =============================================================================


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    """Create an in-memory exporter for inspecting finished spans."""
    return InMemorySpanExporter()


@pytest.fixture
def running_provider(
    console_options: InitializeOptions, span_exporter: InMemorySpanExporter
) -> Generator[TracingProvider, None, None]:
    """Create and start a provider that also records spans in memory.

    Yields:
        Started TracingProvider.
    """
    provider = TracingProvider(console_options)
    provider.start()
    provider.tracer_provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    yield provider
    provider.shutdown()


@pytest.fixture
def clean_tracing() -> Generator[None, None, None]:
    """Reset the default provider before and after each test."""
    reset_tracing()
    yield
    reset_tracing()


@pytest.fixture
def default_provider(
    clean_tracing: None,
    console_options: InitializeOptions,
    span_exporter: InMemorySpanExporter,
) -> TracingProvider:
    """Initialize the default provider and record its spans in memory."""
    provider = initialize(console_options)
    provider.tracer_provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return provider
