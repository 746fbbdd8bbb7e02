"""Diff engine -- compare desired tables against live metadata.

Reads the live database through a ``MetadataProvider`` and classifies
each desired table, column, and index as create / add / alter / unchanged.
The engine is additive only: live tables, columns, and indexes missing
from the desired model are never dropped, and there is no DROP action.

Provider calls per run:
- ``list_tables()`` and ``list_indexes()`` once
- ``list_columns()`` once per desired table that already exists

Usage:
    from schema_forge.schema.diff import diff_schema
    from schema_forge.schema.ddl import generate_script

    plan = diff_schema(schema.tables, provider)
    if plan.has_changes:
        print(generate_script(plan, schema.policy))
"""

import logging
from dataclasses import dataclass, field

from schema_forge.schema import ddl
from schema_forge.schema.models import Column, Index, Table
from schema_forge.schema.policy import ColumnPolicy
from schema_forge.schema.provider import LiveColumn, MetadataProvider

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Actions
# ------------------------------------------------------------------


@dataclass
class CreateTable:
    """A missing table, created with every desired column.

    Example:
        CreateTable(table=person).to_sql(policy)
        # 'CREATE TABLE [dbo].[Person] (\\n    [Id] int ...\\n);'
    """

    table: Table

    def to_sql(self, policy: ColumnPolicy) -> str:
        return ddl.create_table_sql(self.table, policy)


@dataclass
class AddColumn:
    """A desired column missing from an existing table."""

    table: Table
    column: Column

    def to_sql(self, policy: ColumnPolicy) -> str:
        return ddl.add_column_sql(self.table, self.column, policy)


@dataclass
class AlterColumn:
    """An existing column whose definition drifted.

    ``live`` carries what the database reported, for reporting only.
    """

    table: Table
    column: Column
    live: LiveColumn

    def to_sql(self, policy: ColumnPolicy) -> str:
        return ddl.alter_column_sql(self.table, self.column, policy)


@dataclass
class CreateIndex:
    """A desired index with no live index of the same name."""

    index: Index

    def to_sql(self, policy: ColumnPolicy) -> str:
        return ddl.create_index_sql(self.index)


Action = CreateTable | AddColumn | AlterColumn | CreateIndex


@dataclass
class TablePlan:
    """Actions for one desired table.

    Attributes:
        table: The desired table.
        exists: Whether the table was found in the live database.
        actions: Create-table first, then column actions in column
            declaration order, then create-index in index declaration order.
    """

    table: Table
    exists: bool
    actions: list[Action] = field(default_factory=list)


@dataclass
class MigrationPlan:
    """Plan for bringing the live schema in line with the desired one."""

    tables: list[TablePlan] = field(default_factory=list)

    @property
    def actions(self) -> list[Action]:
        """All actions, in execution order."""
        return [action for table_plan in self.tables for action in table_plan.actions]

    @property
    def has_changes(self) -> bool:
        """True if any statement would be generated."""
        return any(table_plan.actions for table_plan in self.tables)

    @property
    def action_count(self) -> int:
        """Total number of actions."""
        return len(self.actions)


# ------------------------------------------------------------------
# Comparison
# ------------------------------------------------------------------


def column_matches(column: Column, live: LiveColumn) -> bool:
    """True if the live column already satisfies the desired one.

    Compares db type (case-insensitively), length, identity, key, and
    nullability.  Defaults are not compared.
    """
    return (
        live.db_type.lower() == column.db_type.lower()
        and live.length == column.length
        and live.is_identity == column.is_identity
        and live.is_key == column.is_key
        and live.is_nullable == column.is_nullable
    )


def _diff_columns(table: Table, live_columns: list[LiveColumn]) -> list[Action]:
    """Column actions for an existing table (never drops)."""
    live_by_name = {live.name: live for live in live_columns}
    actions: list[Action] = []

    for column in table.columns:
        live = live_by_name.get(column.name)
        if live is None:
            logger.debug("%s: add column %s", table.qualified_name, column.name)
            actions.append(AddColumn(table=table, column=column))
        elif column_matches(column, live):
            continue
        else:
            logger.debug("%s: alter column %s", table.qualified_name, column.name)
            actions.append(AlterColumn(table=table, column=column, live=live))

    return actions


def diff_schema(tables: list[Table], provider: MetadataProvider) -> MigrationPlan:
    """Compare desired tables against the live database.

    Tables are processed in the given order.  Existing indexes are matched
    on (schema, table, name) only -- a changed column list or uniqueness
    on an index that already exists is not reported.

    Args:
        tables: Desired tables, in the order they should be processed.
        provider: Live metadata source.

    Returns:
        ``MigrationPlan`` with one ``TablePlan`` per desired table.

    Raises:
        Exception: Anything the provider raises, unmodified.  No partial
            plan is returned.
    """
    live_tables = {(t.schema_name, t.name) for t in provider.list_tables()}
    live_indexes = {(ix.schema_name, ix.table, ix.name) for ix in provider.list_indexes()}

    plan = MigrationPlan()

    for table in tables:
        exists = (table.schema_name, table.name) in live_tables
        table_plan = TablePlan(table=table, exists=exists)

        if not exists:
            logger.debug("%s: create table", table.qualified_name)
            table_plan.actions.append(CreateTable(table=table))
        else:
            live_columns = provider.list_columns(table.schema_name, table.name)
            table_plan.actions.extend(_diff_columns(table, live_columns))

        for index in table.indexes:
            if (index.schema_name, index.table, index.name) in live_indexes:
                continue
            logger.debug("%s: create index %s", table.qualified_name, index.name)
            table_plan.actions.append(CreateIndex(index=index))

        plan.tables.append(table_plan)

    logger.info(
        "Diffed %d table(s): %d action(s)", len(plan.tables), plan.action_count
    )
    return plan
