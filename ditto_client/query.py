"""DQL statement builders.

Mutating statements bind their values as ``query_args`` parameters. SELECT
filters are inlined as quoted string literals, so only exact string matches
are supported there.
"""

from typing import Any

from ditto_client.errors import QueryValidationError

DEFAULT_ID_FIELD = "_id"
MATCH_ALL_PATTERN = "%"


def escape_ident(value: str) -> str:
    """Minimal identifier sanitization: drop backticks, spaces become underscores."""
    return value.replace("`", "").replace(" ", "_")


def escape_string(value: str) -> str:
    """Escape double quotes for use inside a DQL string literal."""
    return value.replace('"', '\\"')


def build_select(
    collection: str,
    filters: dict[str, Any] | None = None,
    limit: int = 0,
    sort_by: str = "",
    sort_order: str = "",
) -> str:
    """Build a SELECT statement with optional exact-match filters, ordering and limit.

    Args:
        collection: Collection to select from
        filters: Field to value pairs joined with AND; keys are emitted sorted
            and values are compared as strings, None is rejected
        limit: Maximum number of records, 0 or less means no LIMIT clause
        sort_by: Field to order by, empty means no ORDER BY clause
        sort_order: "ASC" or "DESC" (case-insensitive), anything else leaves
            the direction to the server default

    Returns:
        The DQL statement
    """
    parts = [f"SELECT * FROM {escape_ident(collection)}"]

    if filters:
        missing = sorted(field for field, value in filters.items() if value is None)
        if missing:
            raise QueryValidationError(f"filter value required: {', '.join(missing)}")
        clauses = [
            f'{escape_ident(field)} == "{escape_string(str(filters[field]))}"'
            for field in sorted(filters)
        ]
        parts.append("WHERE " + " AND ".join(clauses))

    if sort_by:
        order = f"ORDER BY {escape_ident(sort_by)}"
        direction = (sort_order or "").upper()
        if direction in ("ASC", "DESC"):
            order += f" {direction}"
        parts.append(order)

    if limit > 0:
        parts.append(f"LIMIT {int(limit)}")

    return " ".join(parts)


def build_insert(collection: str, doc: Any) -> tuple[str, dict[str, Any]]:
    """Build an INSERT statement binding the whole document as ``:doc``."""
    if not collection:
        raise QueryValidationError("collection required")
    return (
        f"INSERT INTO {escape_ident(collection)} DOCUMENTS (:doc)",
        {"doc": doc},
    )


def build_update(
    collection: str, record_id: str, patch: dict[str, Any]
) -> tuple[str, dict[str, Any]]:
    """Build an UPDATE statement with one bound parameter per patched field.

    Each field ``f`` is bound as ``:p_f`` and the target record as ``:id``.
    """
    if not collection or not record_id:
        raise QueryValidationError("collection and id required")
    if not patch:
        raise QueryValidationError("patch is empty")

    args: dict[str, Any] = {"id": record_id}
    assignments = []
    for field in sorted(patch):
        ident = escape_ident(field)
        param = f"p_{ident}"
        assignments.append(f"{ident} = :{param}")
        args[param] = patch[field]

    statement = (
        f"UPDATE {escape_ident(collection)} SET {', '.join(assignments)} "
        f"WHERE {DEFAULT_ID_FIELD} == :id"
    )
    return statement, args


def build_get(collection: str, record_id: str) -> tuple[str, dict[str, Any]]:
    """Build a single-record lookup by ``_id``."""
    return (
        f"SELECT * FROM {escape_ident(collection)} "
        f"WHERE {DEFAULT_ID_FIELD} == :id LIMIT 1",
        {"id": record_id},
    )


def build_delete(collection: str, record_id: str) -> tuple[str, dict[str, Any]]:
    """Build a DELETE of one record by ``_id``."""
    return (
        f"DELETE FROM {escape_ident(collection)} WHERE {DEFAULT_ID_FIELD} = :id",
        {"id": record_id},
    )


def build_delete_all(collection: str) -> tuple[str, dict[str, Any]]:
    """Build a DELETE matching every ``_id``.

    DQL has no TRUNCATE, so a LIKE pattern that matches everything is used.
    """
    if not collection:
        raise QueryValidationError("collection required")
    return (
        f"DELETE FROM {escape_ident(collection)} "
        f"WHERE {DEFAULT_ID_FIELD} LIKE :pattern",
        {"pattern": MATCH_ALL_PATTERN},
    )


__all__ = [
    "escape_ident",
    "escape_string",
    "build_select",
    "build_insert",
    "build_update",
    "build_get",
    "build_delete",
    "build_delete_all",
]
