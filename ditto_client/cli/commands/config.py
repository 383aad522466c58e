"""Settings commands for the Ditto CLI."""

from pathlib import Path

import click
from pydantic import ValidationError

from ditto_client.config import get_config_file_path, set_settings
from ditto_client.models.settings import DittoSettings

from ..utils import echo_error, echo_info, echo_success, print_json

OPTIONAL_DOCKER_FIELDS = ("image_tar_path", "compose_file")


@click.group()
def config():
    """Show and edit the client settings file.

    Settings are read from ~/.ditto-client/config.yaml, then overridden by
    DITTO_* environment variables (nested docker options use
    DITTO_DOCKER__<FIELD>) and finally by command line options.

    Examples:
        ditto config show                               # Effective settings
        ditto config set app_id myapp                   # Set a value
        ditto config set runner compose                 # Manage via compose
        ditto config set docker.config_path ./edge.yaml # Nested docker option
    """
    pass


@config.command()
@click.pass_context
def show(ctx):
    """Show the effective settings."""
    settings: DittoSettings = ctx.obj["settings"]
    echo_info(f"Settings file: {ctx.obj.get('config_path') or get_config_file_path()}")
    print_json(settings.model_dump(mode="json"))


@config.command(name="set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def set_value(ctx, key, value):
    """Set KEY to VALUE and save the settings file.

    Use dotted keys (docker.image_name) for container options. An empty
    VALUE clears optional container options.
    """
    config_path: Path = ctx.obj.get("config_path") or get_config_file_path()
    # Edit the file contents only; environment overrides are not persisted
    try:
        current = DittoSettings.model_validate(DittoSettings.read_file(config_path))
    except (ValidationError, ValueError) as e:
        echo_error(f"Invalid settings file {config_path}: {e}")
        ctx.exit(1)
    data = current.model_dump(mode="json", exclude={"config_dir"})

    section, _, field = key.partition(".")
    if field:
        if section != "docker" or field not in data["docker"]:
            echo_error(f"Unknown setting: {key}")
            ctx.exit(1)
        if not value and field in OPTIONAL_DOCKER_FIELDS:
            data["docker"][field] = None
        else:
            data["docker"][field] = value
    else:
        if key not in data:
            echo_error(f"Unknown setting: {key}")
            ctx.exit(1)
        data[key] = value

    try:
        updated = DittoSettings.model_validate(data)
    except ValidationError as e:
        echo_error(f"Invalid value for {key}: {e.errors()[0]['msg']}")
        ctx.exit(1)

    saved = updated.save_to_file(config_path)
    set_settings(DittoSettings.load_from_file(saved))
    echo_success(f"{key} = {value} (saved to {saved})")
