"""Server management commands for the Ditto CLI."""

import click
from rich.markup import escape
from rich.table import Table

from ditto_client.models.settings import RunnerKind
from ditto_client.models.status import DOCKER_DISABLED

from ..utils import (
    console,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    get_service,
    print_json,
    run_async,
)


@click.group()
def server():
    """Manage the Ditto Edge server container and check its health.

    Container commands require a runner to be configured
    (``ditto config set runner docker`` or ``compose``).

    Examples:
        ditto server up                     # Ensure the container is running
        ditto server down                   # Stop the container
        ditto server status                 # Container and HTTP status
    """
    pass


@server.command()
@click.pass_context
def up(ctx):
    """Ensure the Ditto Edge container is running.

    Loads the image from the configured tarball if it is missing and
    (re)creates the container unless it is already running.
    """
    settings = ctx.obj["settings"]
    if settings.runner == RunnerKind.NONE:
        echo_warning("Container management is disabled (runner: none)")
        echo_info("Enable it with: ditto config set runner docker")
        return

    service = get_service(ctx)
    echo_info(f"Starting container {settings.docker.container_name}...")
    run_async(service.init_db())

    if service.started_container:
        echo_success("Ditto Edge container started")
    else:
        echo_success("Ditto Edge container already running")
    echo_info(f"API at: {service.execute_url}")


@server.command()
@click.pass_context
def down(ctx):
    """Stop the Ditto Edge container (best effort)."""
    settings = ctx.obj["settings"]
    if settings.runner == RunnerKind.NONE:
        echo_warning("Container management is disabled (runner: none)")
        return

    run_async(get_service(ctx).close())
    echo_success(f"Stop requested for {settings.docker.container_name}")


@server.command()
@click.option(
    "--format",
    "output_format",
    default="table",
    type=click.Choice(["table", "json"]),
    help="Output format",
)
@click.pass_context
def status(ctx, output_format):
    """Show connection settings, container status and an HTTP probe result."""
    result = run_async(get_service(ctx).status())

    if output_format == "json":
        print_json(result.as_dict())
        return

    table = Table(title="Ditto Status")
    table.add_column("Property")
    table.add_column("Value")

    table.add_row("Base URL", result.base_url)
    table.add_row("App ID", result.app_id)
    if result.docker_error:
        table.add_row("Container", f"[red]error: {escape(result.docker_error)}[/red]")
    else:
        docker = result.docker or ""
        color = "green" if docker == "running" else "yellow"
        if docker == DOCKER_DISABLED:
            color = "dim"
        table.add_row("Container", f"[{color}]{escape(docker)}[/{color}]")
    table.add_row("HTTP", result.http or "")
    if result.http_error:
        table.add_row("HTTP Error", f"[red]{escape(result.http_error)}[/red]")

    console.print(table)

    if not result.reachable:
        echo_error("Ditto server is not reachable")
        ctx.exit(1)
