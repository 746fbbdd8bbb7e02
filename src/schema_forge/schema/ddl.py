"""DDL rendering for SQL Server bracket-quoted identifiers.

Turns desired columns, tables, and indexes into statement text, and a
``MigrationPlan`` into one script.  Pure rendering over validated models;
nothing here can fail for a valid model.

Statement shapes:

- ``CREATE TABLE [schema].[name] ( <col-defs> );``
- ``ALTER TABLE [schema].[name] ADD <col-def>;``
- ``ALTER TABLE schema.[name] ALTER COLUMN <col-def>;``
- ``CREATE [UNIQUE] INDEX [name] ON [schema].[table] ([c1],[c2]);``

Column definition: ``[name] <type> [IDENTITY] NULL|NOT NULL [PRIMARY KEY]
[DEFAULT <literal>]``.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from schema_forge.schema.models import MAX_LENGTH, Column, Index, Table
from schema_forge.schema.policy import ColumnPolicy, unwrap_optional

if TYPE_CHECKING:
    from schema_forge.schema.diff import MigrationPlan


# ------------------------------------------------------------------
# Column rendering
# ------------------------------------------------------------------


def column_type(column: Column, policy: ColumnPolicy) -> str:
    """Render the column type, with ``(n)``/``(MAX)`` for text columns."""
    if not policy.is_text(column.value_type):
        return column.db_type
    if column.length == MAX_LENGTH:
        return f"{column.db_type}(MAX)"
    return f"{column.db_type}({column.length})"


def column_default(column: Column, alter: bool, policy: ColumnPolicy) -> str | None:
    """Resolve the DEFAULT literal for a column, if any.

    An explicit default always wins.  Otherwise a zero value is synthesized
    only for ALTER statements on NOT NULL columns, so the statement succeeds
    against tables that already hold rows.  Identity columns never get one.

    Examples:
        >>> policy = ColumnPolicy()
        >>> col = policy.resolve("Count", int)
        >>> column_default(col, alter=True, policy=policy)
        '0'
        >>> column_default(col, alter=False, policy=policy) is None
        True
    """
    if column.default is not None:
        return column.default
    # IDENTITY columns cannot carry a DEFAULT constraint
    if not alter or column.is_nullable or column.is_identity:
        return None

    base, _ = unwrap_optional(column.value_type)
    if base is int or base is bool:
        return "0"
    if base is str:
        return policy.settings.text_alter_default
    if base is datetime:
        return policy.settings.datetime_alter_default
    return None


def column_sql(column: Column, alter: bool, policy: ColumnPolicy) -> str:
    """Render a full column definition."""
    parts = [f"[{column.name}]", column_type(column, policy)]
    if column.is_identity:
        parts.append("IDENTITY")
    parts.append("NULL" if column.is_nullable else "NOT NULL")
    if column.is_key:
        parts.append("PRIMARY KEY")
    default = column_default(column, alter, policy)
    if default is not None:
        parts.append(f"DEFAULT {default}")
    return " ".join(parts)


# ------------------------------------------------------------------
# Statement rendering
# ------------------------------------------------------------------


def create_table_sql(table: Table, policy: ColumnPolicy) -> str:
    """Render CREATE TABLE with columns in declaration order."""
    column_lines = ",\n".join(
        f"    {column_sql(column, False, policy)}" for column in table.columns
    )
    return f"CREATE TABLE {table.qualified_name} (\n{column_lines}\n);"


def add_column_sql(table: Table, column: Column, policy: ColumnPolicy) -> str:
    return f"ALTER TABLE {table.qualified_name} ADD {column_sql(column, True, policy)};"


def alter_column_sql(table: Table, column: Column, policy: ColumnPolicy) -> str:
    # Schema is left unquoted here, matching the established output format
    return (
        f"ALTER TABLE {table.schema_name}.[{table.name}] "
        f"ALTER COLUMN {column_sql(column, True, policy)};"
    )


def create_index_sql(index: Index) -> str:
    unique = "UNIQUE " if index.is_unique else ""
    columns = ",".join(f"[{name}]" for name in index.columns)
    return (
        f"CREATE {unique}INDEX [{index.name}] "
        f"ON [{index.schema_name}].[{index.table}] ({columns});"
    )


# ------------------------------------------------------------------
# Script generation
# ------------------------------------------------------------------


def generate_script(
    plan: MigrationPlan,
    policy: ColumnPolicy,
    clock: Callable[[], datetime] = datetime.now,
    header: bool = True,
) -> str:
    """Render a migration plan as one script.

    Every statement and comment line is newline-terminated.  Tables appear
    in plan order, each introduced by a ``-- Table: <name> --`` comment.

    Args:
        plan: Plan from ``diff_schema()``.
        policy: Column policy carrying the schema settings.
        clock: Source of the generation timestamp.
        header: Emit the leading ``-- Migration Generated`` comment.

    Returns:
        The script text.

    Example:
        script = generate_script(plan, policy, clock=lambda: fixed_time)
    """
    lines: list[str] = []
    if header:
        lines.append(f"-- Migration Generated: {clock():%Y-%m-%d %H:%M:%S} --")

    for table_plan in plan.tables:
        lines.append(f"-- Table: {table_plan.table.name} --")
        for action in table_plan.actions:
            lines.append(action.to_sql(policy))

    return "".join(f"{line}\n" for line in lines)
