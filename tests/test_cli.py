"""Tests for the example CLI."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from oteltracing.cli import cli

pytestmark = pytest.mark.usefixtures("clean_tracing")


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_console_example(runner):
    result = runner.invoke(cli, ["--pause", "0", "--service-name", "cli-test"])

    assert result.exit_code == 0, result.output
    assert "Tracing initialized" in result.output
    assert "example-span" in result.output
    assert "GET /api/v1/users/{id}" in result.output
    assert "GET /my-server-route" in result.output
    assert "Done" in result.output


def test_invalid_exporter_choice(runner):
    result = runner.invoke(cli, ["--exporter", "zipkin"])
    assert result.exit_code == 2


def test_invalid_header(runner):
    result = runner.invoke(cli, ["--exporter", "otlp", "--header", "api-key"])

    assert result.exit_code == 1
    assert "expected key=value" in result.output


def test_config_file(runner, tmp_path):
    path = tmp_path / "tracing.yaml"
    path.write_text("service_name: from-file\nexporter: console\nset_global: false\n")

    result = runner.invoke(cli, ["--pause", "0", "--config", str(path)])

    assert result.exit_code == 0, result.output
    assert "from-file" in result.output


def test_config_file_invalid_exporter(runner, tmp_path):
    path = tmp_path / "tracing.yaml"
    path.write_text("exporter: zipkin\n")

    result = runner.invoke(cli, ["--config", str(path)])

    assert result.exit_code == 1
    assert "Invalid exporter" in result.output


def test_header_value_with_comma(runner):
    with patch("oteltracing.manager.initialize") as initialize, patch(
        "oteltracing.cli.run_example"
    ):
        result = runner.invoke(
            cli,
            [
                "--exporter", "otlp",
                "--header", "Authorization=Basic a,b",
                "--header", "x-team=core",
            ],
        )

    assert result.exit_code == 0, result.output
    options = initialize.call_args.args[0]
    assert options.otlp_headers == {"Authorization": "Basic a,b", "x-team": "core"}
