"""Unit tests for the module-level default provider."""

from dataclasses import replace

import pytest
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import (
    InMemorySpanExporter,
)
from opentelemetry.trace import SpanKind, StatusCode

import oteltracing
from oteltracing import manager
from oteltracing.config import InitializeOptions
from oteltracing.exceptions import InvalidExporterError, NotInitializedError
from oteltracing.http import ClientHTTPSpanOptions, ServerHTTPSpanOptions
from oteltracing.manager import trace

pytestmark = pytest.mark.usefixtures("clean_tracing")


def test_start_span_before_initialize():
    with pytest.raises(NotInitializedError):
        oteltracing.start_span("too-early")


def test_get_provider_before_initialize():
    with pytest.raises(RuntimeError, match="not initialized"):
        oteltracing.get_provider()


def test_initialize_invalid_exporter():
    with pytest.raises(InvalidExporterError):
        oteltracing.initialize(InitializeOptions(exporter="invalid", set_global=False))

    with pytest.raises(NotInitializedError):
        oteltracing.get_provider()


def test_initialize_and_start_spans(console_options):
    provider = oteltracing.initialize(console_options)

    assert oteltracing.get_provider() is provider

    span = oteltracing.start_span("example-span")
    assert span is not None
    span.end()

    oteltracing.start_client_http_span(
        ClientHTTPSpanOptions(
            method="GET",
            url="https://api.example.com/api/v1/users/1",
            route="/api/v1/users/{id}",
        )
    ).end()
    oteltracing.start_server_http_span(
        ServerHTTPSpanOptions(
            method="GET", route="/my-server-route", url_path="/my-server-route"
        )
    ).end()

    oteltracing.shutdown()
    assert provider.is_running is False


def test_initialize_twice_returns_running_provider(console_options):
    first = oteltracing.initialize(console_options)
    second = oteltracing.initialize(InitializeOptions(exporter="invalid"))
    assert second is first


def test_initialize_after_shutdown(console_options):
    first = oteltracing.initialize(console_options)
    oteltracing.shutdown()

    second = oteltracing.initialize(console_options)
    assert second is not first
    assert second.is_running is True


def test_trace_after_global_reinitialize(console_options):
    options = replace(console_options, set_global=True)
    oteltracing.initialize(options)
    oteltracing.shutdown()

    provider = oteltracing.initialize(options)
    exporter = InMemorySpanExporter()
    provider.tracer_provider.add_span_processor(SimpleSpanProcessor(exporter))

    @trace("decorated")
    def decorated():
        return "ok"

    assert decorated() == "ok"
    assert [s.name for s in exporter.get_finished_spans()] == ["decorated"]


def test_initialize_from_env(monkeypatch):
    monkeypatch.setenv("TRACING_SERVICE_NAME", "env-service")
    monkeypatch.setenv("TRACING_EXPORTER", "console")

    provider = oteltracing.initialize()

    attrs = dict(provider.tracer_provider.resource.attributes)
    assert attrs["service.name"] == "env-service"


def test_shutdown_without_initialize():
    oteltracing.shutdown()


def test_shutdown_twice(console_options):
    oteltracing.initialize(console_options)
    oteltracing.shutdown()
    oteltracing.shutdown()


def test_reset_tracing(console_options):
    provider = oteltracing.initialize(console_options)
    manager.reset_tracing()

    assert provider.is_running is False
    with pytest.raises(NotInitializedError):
        oteltracing.get_provider()


class TestTraceDecorator:
    """Tests for the @trace decorator."""

    def test_span_name_defaults_to_function(self, default_provider, span_exporter):
        @trace()
        def simple_function():
            return 42

        assert simple_function() == 42

        finished = span_exporter.get_finished_spans()
        assert [s.name for s in finished] == ["simple_function"]
        assert finished[0].kind == SpanKind.INTERNAL

    def test_name_kind_and_attributes(self, default_provider, span_exporter):
        @trace("load-user", kind=SpanKind.CLIENT, attributes={"user.role": "admin"})
        def load_user(user_id, fields=None):
            return (user_id, fields)

        assert load_user(7, fields=["name"]) == (7, ["name"])

        finished = span_exporter.get_finished_spans()[0]
        assert finished.name == "load-user"
        assert finished.kind == SpanKind.CLIENT
        assert dict(finished.attributes) == {"user.role": "admin"}

    def test_error_status_and_event(self, default_provider, span_exporter):
        @trace()
        def failing_function():
            raise RuntimeError("Test error")

        with pytest.raises(RuntimeError, match="Test error"):
            failing_function()

        finished = span_exporter.get_finished_spans()[0]
        assert finished.status.status_code == StatusCode.ERROR
        assert finished.status.description == "Test error"
        assert [e.name for e in finished.events] == ["exception"]
        assert finished.events[0].attributes["exception.type"] == "RuntimeError"

    def test_nested_calls_share_trace(self, default_provider, span_exporter):
        @trace("inner")
        def inner():
            return "inner"

        @trace("outer")
        def outer():
            return inner()

        outer()

        finished = {s.name: s for s in span_exporter.get_finished_spans()}
        assert finished["inner"].parent.span_id == finished["outer"].context.span_id
        assert finished["inner"].context.trace_id == finished["outer"].context.trace_id

    def test_without_provider(self):
        @trace()
        def documented_function():
            """This is the docstring."""
            return "hello"

        assert documented_function() == "hello"
        assert documented_function.__doc__ == "This is the docstring."
        assert documented_function.__name__ == "documented_function"
