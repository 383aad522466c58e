"""Main CLI entry point for the Ditto client."""

from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console

from ditto_client.config import get_settings, set_settings
from ditto_client.logging import setup_logging
from ditto_client.models.settings import DittoSettings

from .utils import echo_error

console = Console()


@click.group(invoke_without_command=True)
@click.option("-v", "--version", is_flag=True, help="Show version information")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (default ~/.ditto-client/config.yaml)",
)
@click.option("--base-url", default=None, help="Ditto HTTP API base URL")
@click.option("--app-id", default=None, help="Application (database) ID")
@click.option("--log-level", default=None, help="Log level (DEBUG, INFO, ...)")
@click.pass_context
def cli(ctx, version, config_path, base_url, app_id, log_level):
    """Ditto - command line client for a Ditto Edge server.

    Runs DQL against the server's HTTP execute endpoint and optionally
    manages the server container with docker or docker compose.

    Examples:
        ditto -v                                  # Show version
        ditto server up                           # Start the Edge container
        ditto server status                       # Container + HTTP probe
        ditto docs insert users '{"name": "Al"}'  # Insert a document
        ditto docs list users --limit 10          # List documents
        ditto config set app_id myapp             # Persist a setting
    """
    if version:
        from ditto_client import __version__

        console.print(f"Ditto client v{__version__}")
        ctx.exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        ctx.exit()

    ctx.ensure_object(dict)

    try:
        if config_path is not None:
            settings = DittoSettings.load_from_file(config_path)
        else:
            settings = get_settings()
        overrides = {
            key: value
            for key, value in (
                ("base_url", base_url),
                ("app_id", app_id),
                ("log_level", log_level),
            )
            if value is not None
        }
        if overrides:
            settings = settings.model_validate(
                {**settings.model_dump(), **overrides}
            )
    except (ValidationError, ValueError, OSError) as e:
        echo_error(f"Invalid settings: {e}")
        ctx.exit(1)

    set_settings(settings)
    setup_logging(settings.log_level)

    ctx.obj["settings"] = settings
    ctx.obj["config_path"] = config_path


def register_commands():
    """Register all command groups."""
    from .commands.config import config
    from .commands.docs import docs
    from .commands.server import server

    cli.add_command(server)
    cli.add_command(docs)
    cli.add_command(config)


register_commands()


if __name__ == "__main__":
    cli()
