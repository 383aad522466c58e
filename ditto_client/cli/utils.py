"""Utility functions for the Ditto CLI."""

import asyncio
import json
import sys
from typing import Any, Awaitable, TypeVar

import click
import httpx
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from ditto_client.client import DittoService
from ditto_client.errors import DittoError
from ditto_client.models.settings import DittoSettings

console = Console()

T = TypeVar("T")


def echo_success(message: str) -> None:
    """Print success message."""
    console.print(f"[green]✓ {escape(message)}[/green]")


def echo_error(message: str) -> None:
    """Print error message."""
    console.print(f"[red]✗ {escape(message)}[/red]")


def echo_warning(message: str) -> None:
    """Print warning message."""
    console.print(f"[yellow]⚠ {escape(message)}[/yellow]")


def echo_info(message: str) -> None:
    """Print info message."""
    console.print(f"[blue]ℹ {escape(message)}[/blue]")


def confirm_action(message: str, default: bool = False) -> bool:
    """Ask for user confirmation."""
    return click.confirm(message, default=default)


def print_json(data: Any) -> None:
    """Pretty-print a JSON value."""
    console.print(Syntax(json.dumps(data, indent=2, default=str), "json"))


def print_table(
    data: list[dict], title: str = "", headers: list[str] | None = None
) -> None:
    """Print a list of records as a rich table."""
    if not data:
        console.print(f"[yellow]No {title.lower() or 'records'} found.[/yellow]")
        return

    table = Table(title=title)

    if headers is None:
        headers = []
        for row in data:
            for key in row:
                if key not in headers:
                    headers.append(key)

    for header in headers:
        table.add_column(header)

    for row in data:
        table.add_row(*[_cell(row.get(header, "")) for header in headers])

    console.print(table)


def _cell(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return escape(json.dumps(value, default=str))
    return escape(str(value))


def parse_json_object(value: str, name: str = "document") -> dict:
    """Parse a JSON object argument, reading stdin when the value is ``-``."""
    if value == "-":
        value = sys.stdin.read()
    try:
        data = json.loads(value)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"invalid JSON: {e}", param_hint=name)
    if not isinstance(data, dict):
        raise click.BadParameter("expected a JSON object", param_hint=name)
    return data


def parse_filters(values: tuple[str, ...]) -> dict[str, str]:
    """Parse repeated ``field=value`` options into a filter mapping."""
    filters = {}
    for item in values:
        field, sep, value = item.partition("=")
        if not sep or not field:
            raise click.BadParameter(
                f"expected field=value, got '{item}'", param_hint="--filter"
            )
        filters[field.strip()] = value
    return filters


def extract_items(response: Any) -> list | None:
    """Pull the record list out of an execute response, if there is one."""
    if isinstance(response, list):
        return response
    if isinstance(response, dict):
        items = response.get("items")
        if isinstance(items, list):
            return items
    return None


def get_service(ctx: click.Context) -> DittoService:
    """Build a service from the settings stored on the click context."""
    settings: DittoSettings = ctx.obj["settings"]
    return DittoService.from_settings(settings)


def run_async(coro: Awaitable[T]) -> T:
    """Run a coroutine, turning client failures into a clean CLI exit."""
    try:
        return asyncio.run(coro)
    except DittoError as e:
        echo_error(e.message)
        sys.exit(1)
    except httpx.HTTPError as e:
        echo_error(f"Connection error: {e}")
        echo_info("Make sure the Ditto server is running: ditto server up")
        sys.exit(1)


def output_records(response: Any, output_format: str, title: str = "") -> None:
    """Render an execute response as a table when it holds records, else as JSON."""
    items = extract_items(response)
    if output_format == "table" and items is not None and all(
        isinstance(item, dict) for item in items
    ):
        print_table(items, title=title)
    else:
        print_json(response)
