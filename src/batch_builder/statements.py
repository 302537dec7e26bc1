"""
Statement factory for Batch Builder.

This module renders single parameterized statements (INSERT, UPDATE, DELETE or
raw text) into ``PreparedStatement`` objects. Each statement carries its text,
with one positional placeholder per argument, and the arguments in the same
left-to-right order.

Columns are emitted in the iteration order of the mapping passed in, which
for a ``dict`` is insertion order. Pass ``sort_columns=True`` to emit them in
lexicographic order instead.

Any argument may be a ``Deferred``; it is resolved when the batch is assembled.

Example:
    >>> from batch_builder import new_insert, new_update, new_delete
    >>>
    >>> new_insert("users", {"id": 1, "name": "bob"}).text
    'INSERT INTO users (id, name) VALUES (?, ?)'
    >>> new_update("users", {"name": "alice"}, {"id": 1}).arguments
    ('alice', 1)
    >>> new_delete("users", {"id": 5}).text
    'DELETE FROM users WHERE id = ?'
"""
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, List, Mapping, Tuple

from batch_builder.config import PLACEHOLDER


@dataclass(frozen=True)
class PreparedStatement:
    """
    A single statement and its positional arguments.

    The number of placeholders in ``text`` must equal ``len(arguments)``.
    This is not checked: the text is never parsed.

    Attributes:
        text: Statement text with positional placeholders
        arguments: Argument values (or ``Deferred`` values) in placeholder order
    """

    text: str
    arguments: Tuple[Any, ...] = field(default=())

    def __post_init__(self):
        if not isinstance(self.arguments, tuple):
            object.__setattr__(self, "arguments", tuple(self.arguments))

    @property
    def argument_count(self) -> int:
        return len(self.arguments)

    def with_ttl(self, seconds: int) -> "PreparedStatement":
        """Return a copy with a ``USING TTL`` clause. See ``with_ttl``."""
        return with_ttl(self, seconds)


def new_statement(text: str, *args: Any) -> PreparedStatement:
    """
    Wrap raw statement text and its arguments.

    Args:
        text: Statement text with one placeholder per argument
        *args: Argument values in placeholder order

    Returns:
        PreparedStatement with the text and arguments as given
    """
    return PreparedStatement(text, args)


def _items(mapping: Mapping[str, Any], sort_columns: bool) -> List[Tuple[str, Any]]:
    items = list(mapping.items())
    if sort_columns:
        items.sort(key=lambda item: item[0])
    return items


def _assignments(columns: Iterable[str], placeholder: str) -> List[str]:
    return [f"{column} = {placeholder}" for column in columns]


def _require(mapping: Mapping[str, Any], what: str) -> None:
    if not mapping:
        raise ValueError(f"At least one {what} column is required")


def new_insert(
    table: str,
    values: Mapping[str, Any],
    sort_columns: bool = False,
    placeholder: str = PLACEHOLDER,
) -> PreparedStatement:
    """
    Create an INSERT statement.

    Args:
        table: Target table name
        values: Mapping of column name to value
        sort_columns: Emit columns in sorted order instead of mapping order
        placeholder: Positional placeholder for the driver's paramstyle

    Returns:
        PreparedStatement for ``INSERT INTO <table> (<cols>) VALUES (<placeholders>)``

    Raises:
        ValueError: If ``values`` is empty
    """
    _require(values, "value")
    items = _items(values, sort_columns)
    columns = ", ".join(column for column, _ in items)
    placeholders = ", ".join(placeholder for _ in items)
    return PreparedStatement(
        f"INSERT INTO {table} ({columns}) VALUES ({placeholders})",
        tuple(value for _, value in items),
    )


def new_update(
    table: str,
    updates: Mapping[str, Any],
    conditions: Mapping[str, Any],
    sort_columns: bool = False,
    placeholder: str = PLACEHOLDER,
) -> PreparedStatement:
    """
    Create an UPDATE statement.

    The SET values come first in the argument list, followed by the WHERE
    values. Conditions are joined with AND.

    Args:
        table: Target table name
        updates: Mapping of column name to new value
        conditions: Mapping of column name to the value it must equal
        sort_columns: Emit SET and WHERE columns in sorted order
        placeholder: Positional placeholder for the driver's paramstyle

    Returns:
        PreparedStatement for ``UPDATE <table> SET ... WHERE ...``

    Raises:
        ValueError: If ``updates`` or ``conditions`` is empty
    """
    _require(updates, "update")
    _require(conditions, "condition")
    update_items = _items(updates, sort_columns)
    condition_items = _items(conditions, sort_columns)
    set_clause = ", ".join(_assignments((c for c, _ in update_items), placeholder))
    where_clause = " AND ".join(_assignments((c for c, _ in condition_items), placeholder))
    arguments = [value for _, value in update_items]
    arguments.extend(value for _, value in condition_items)
    return PreparedStatement(f"UPDATE {table} SET {set_clause} WHERE {where_clause}", tuple(arguments))


def new_delete(
    table: str,
    conditions: Mapping[str, Any],
    sort_columns: bool = False,
    placeholder: str = PLACEHOLDER,
) -> PreparedStatement:
    """
    Create a DELETE statement whose conditions are joined with AND.

    Disjunctive deletes are not supported; use ``new_statement`` for those.

    Raises:
        ValueError: If ``conditions`` is empty
    """
    _require(conditions, "condition")
    items = _items(conditions, sort_columns)
    where_clause = " AND ".join(_assignments((c for c, _ in items), placeholder))
    return PreparedStatement(f"DELETE FROM {table} WHERE {where_clause}", tuple(v for _, v in items))


def with_ttl(statement: PreparedStatement, seconds: int) -> PreparedStatement:
    """
    Return a copy of ``statement`` with ``USING TTL <seconds>`` appended.

    Only meaningful for INSERT and UPDATE statements. Applying it to a
    DELETE or a raw SELECT is a caller error that is not detected here.

    Args:
        statement: Statement to qualify
        seconds: Time to live in seconds

    Returns:
        New PreparedStatement with the same arguments
    """
    return replace(statement, text=f"{statement.text} USING TTL {int(seconds)}")
