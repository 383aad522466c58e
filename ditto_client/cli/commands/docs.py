"""Document commands for the Ditto CLI."""

import click

from ..utils import (
    confirm_action,
    echo_info,
    echo_success,
    get_service,
    output_records,
    parse_filters,
    parse_json_object,
    print_json,
    run_async,
)

output_format_option = click.option(
    "--format",
    "output_format",
    default="table",
    type=click.Choice(["table", "json"]),
    help="Output format",
)


@click.group()
def docs():
    """Create, read, update and delete documents in a collection.

    Examples:
        ditto docs insert users '{"name": "Alice", "age": 30}'
        ditto docs get users 123
        ditto docs list users --limit 10 --sort-by age --order desc
        ditto docs update users 123 '{"age": 31}'
        ditto docs search users -f name=Alice
        ditto docs latest users createdAt
        ditto docs delete users 123
        ditto docs purge users --force
    """
    pass


@docs.command()
@click.argument("collection")
@click.argument("document")
@click.pass_context
def insert(ctx, collection, document):
    """Insert a JSON DOCUMENT into COLLECTION (use - to read stdin)."""
    doc = parse_json_object(document)
    response = run_async(get_service(ctx).create_document(collection, doc))
    echo_success(f"Document inserted into '{collection}'")
    print_json(response)


@docs.command()
@click.argument("collection")
@click.argument("record_id")
@output_format_option
@click.pass_context
def get(ctx, collection, record_id, output_format):
    """Fetch the record with _id RECORD_ID from COLLECTION."""
    response = run_async(get_service(ctx).get_record(collection, record_id))
    output_records(response, output_format, title=collection)


@docs.command(name="list")
@click.argument("collection")
@click.option("--limit", "-l", default=0, help="Maximum records (0 for no limit)")
@click.option("--sort-by", default="", help="Field to order by")
@click.option(
    "--order",
    default="",
    type=click.Choice(["", "asc", "desc"], case_sensitive=False),
    help="Sort direction",
)
@output_format_option
@click.pass_context
def list_records(ctx, collection, limit, sort_by, order, output_format):
    """List documents in COLLECTION."""
    response = run_async(
        get_service(ctx).get_records(collection, limit, sort_by, order)
    )
    output_records(response, output_format, title=collection)


@docs.command()
@click.argument("collection")
@click.argument("record_id")
@click.argument("patch")
@click.pass_context
def update(ctx, collection, record_id, patch):
    """Apply a JSON object PATCH to record RECORD_ID in COLLECTION."""
    fields = parse_json_object(patch, name="patch")
    response = run_async(get_service(ctx).update_record(collection, record_id, fields))
    echo_success(f"Record '{record_id}' updated")
    print_json(response)


@docs.command()
@click.argument("collection")
@click.argument("record_id")
@click.pass_context
def delete(ctx, collection, record_id):
    """Delete record RECORD_ID from COLLECTION."""
    response = run_async(get_service(ctx).delete_record(collection, record_id))
    echo_success(f"Record '{record_id}' deleted")
    print_json(response)


@docs.command()
@click.argument("collection")
@click.option("--force", is_flag=True, help="Skip confirmation")
@click.pass_context
def purge(ctx, collection, force):
    """Delete every document in COLLECTION."""
    if not force and not confirm_action(
        f"Delete ALL documents in '{collection}'? This cannot be undone."
    ):
        echo_info("Cancelled")
        return

    response = run_async(get_service(ctx).delete_all_records(collection))
    echo_success(f"All documents in '{collection}' deleted")
    print_json(response)


@docs.command()
@click.argument("collection")
@click.argument("sort_by")
@output_format_option
@click.pass_context
def latest(ctx, collection, sort_by, output_format):
    """Show the newest record in COLLECTION ordered by SORT_BY."""
    response = run_async(get_service(ctx).latest_record(collection, sort_by))
    output_records(response, output_format, title=collection)


@docs.command()
@click.argument("collection")
@click.option(
    "--filter", "-f", "filters", multiple=True, help="Exact match, field=value"
)
@click.option("--limit", "-l", default=0, help="Maximum records (0 for no limit)")
@click.option("--sort-by", default="", help="Field to order by")
@click.option(
    "--order",
    default="",
    type=click.Choice(["", "asc", "desc"], case_sensitive=False),
    help="Sort direction",
)
@output_format_option
@click.pass_context
def search(ctx, collection, filters, limit, sort_by, order, output_format):
    """Search COLLECTION with exact-match filters."""
    response = run_async(
        get_service(ctx).search(
            collection, parse_filters(filters), limit, sort_by, order
        )
    )
    output_records(response, output_format, title=collection)


@docs.command()
@click.argument("statement")
@click.option("--args", "query_args", default=None, help="JSON object of query_args")
@click.pass_context
def query(ctx, statement, query_args):
    """Execute a raw DQL STATEMENT."""
    args = parse_json_object(query_args, name="--args") if query_args else None
    response = run_async(get_service(ctx).execute(statement, args))
    print_json(response)
