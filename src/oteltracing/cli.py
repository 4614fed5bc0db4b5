"""Example CLI for oteltracing.

Initializes tracing and emits one generic span, one client HTTP span and
one server HTTP span, so exporter settings can be checked end to end.

Example:
    $ oteltracing-example
    $ oteltracing-example --exporter otlp --endpoint otlp.nr-data.net:4317 \\
        --header api-key=replaceme
"""

import logging
import sys
import time
from typing import Optional, Tuple

import click
from rich.console import Console

from oteltracing import manager
from oteltracing.config import VALID_EXPORTERS, InitializeOptions, parse_header
from oteltracing.exceptions import TracingError
from oteltracing.http import ClientHTTPSpanOptions, ServerHTTPSpanOptions

console = Console()


def run_example(pause: float) -> None:
    """Emit the three example spans on the default provider."""
    span = manager.start_span("example-span")
    time.sleep(pause)
    span.end()

    span = manager.start_client_http_span(
        ClientHTTPSpanOptions(
            method="GET",
            url="https://api.example.com/api/v1/users/1",
            route="/api/v1/users/{id}",
        )
    )
    time.sleep(pause)
    span.end()

    span = manager.start_server_http_span(
        ServerHTTPSpanOptions(
            method="GET",
            route="/my-server-route",
            url_path="/my-server-route",
        )
    )
    time.sleep(pause)
    span.end()


@click.command()
@click.option("--service-name", default="oteltracing-example", help="Service name")
@click.option("--service-version", default="1.0.0", help="Service version")
@click.option("--environment", default="local", help="Deployment environment")
@click.option(
    "--exporter",
    type=click.Choice(VALID_EXPORTERS),
    default="console",
    help="Where to send spans",
)
@click.option("--endpoint", default=None, help="OTLP gRPC endpoint (host:port)")
@click.option(
    "--header",
    "headers",
    multiple=True,
    help="OTLP header as KEY=VALUE (repeatable)",
)
@click.option("--insecure", is_flag=True, help="Disable TLS for OTLP")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML options file (overrides other options)",
)
@click.option("--pause", type=float, default=1.0, help="Seconds to hold each span open")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def cli(
    service_name: str,
    service_version: str,
    environment: str,
    exporter: str,
    endpoint: Optional[str],
    headers: Tuple[str, ...],
    insecure: bool,
    config: Optional[str],
    pause: float,
    verbose: bool,
) -> None:
    """Emit example spans with the selected exporter."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        if config:
            options = InitializeOptions.from_file(config)
        else:
            options = InitializeOptions(
                service_name=service_name,
                service_version=service_version,
                deployment_environment=environment,
                exporter=exporter,
                otlp_endpoint=endpoint,
                otlp_headers=dict(parse_header(h) for h in headers),
                otlp_insecure=True if insecure else None,
            )
        manager.initialize(options)
    except TracingError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)

    console.print(
        f"[bold green]Tracing initialized[/bold green] "
        f"service=[cyan]{options.service_name}[/cyan] exporter=[cyan]{options.exporter}[/cyan]"
    )

    try:
        run_example(pause)
    finally:
        manager.shutdown()

    console.print("[green]Done[/green]")


if __name__ == "__main__":
    cli()
