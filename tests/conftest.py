"""Shared fixtures: an in-memory metadata provider and a sample schema."""

from datetime import datetime

import pytest

from schema_forge.config.models import SchemaSettings
from schema_forge.schema.builder import SchemaBuilder
from schema_forge.schema.diff import AddColumn, AlterColumn, CreateIndex, CreateTable, MigrationPlan
from schema_forge.schema.models import MAX_LENGTH, Column
from schema_forge.schema.provider import LiveColumn, LiveIndex, LiveTable

FIXED_TIME = datetime(2024, 3, 1, 9, 30, 0)


def live_column(column: Column) -> LiveColumn:
    """What the database would report after creating ``column``."""
    return LiveColumn(
        name=column.name,
        db_type=column.db_type,
        length=column.length,
        is_nullable=column.is_nullable,
        is_key=column.is_key,
        is_identity=column.is_identity,
    )


class FakeProvider:
    """In-memory ``MetadataProvider`` that counts calls.

    ``apply_plan`` mimics running a generated script so convergence can be
    checked without a database.
    """

    def __init__(self) -> None:
        self.tables: dict[tuple[str, str], list[LiveColumn]] = {}
        self.indexes: list[LiveIndex] = []
        self.calls: list[tuple] = []

    def add_table(self, schema_name: str, name: str, columns: list[LiveColumn]) -> None:
        self.tables[(schema_name, name)] = list(columns)

    def add_index(self, schema_name: str, table: str, name: str, columns: list[str]) -> None:
        self.indexes.append(
            LiveIndex(schema_name=schema_name, table=table, name=name, columns=columns)
        )

    def list_tables(self) -> list[LiveTable]:
        self.calls.append(("list_tables",))
        return [LiveTable(schema_name=s, name=n) for s, n in sorted(self.tables)]

    def list_indexes(self) -> list[LiveIndex]:
        self.calls.append(("list_indexes",))
        return sorted(self.indexes, key=lambda ix: (ix.schema_name, ix.table, ix.name))

    def list_columns(self, schema_name: str, table: str) -> list[LiveColumn]:
        self.calls.append(("list_columns", schema_name, table))
        return list(self.tables.get((schema_name, table), []))

    def apply_plan(self, plan: MigrationPlan) -> None:
        for action in plan.actions:
            if isinstance(action, CreateTable):
                self.add_table(
                    action.table.schema_name,
                    action.table.name,
                    [live_column(c) for c in action.table.columns],
                )
            elif isinstance(action, AddColumn):
                key = (action.table.schema_name, action.table.name)
                self.tables[key].append(live_column(action.column))
            elif isinstance(action, AlterColumn):
                key = (action.table.schema_name, action.table.name)
                self.tables[key] = [
                    live_column(action.column) if c.name == action.column.name else c
                    for c in self.tables[key]
                ]
            elif isinstance(action, CreateIndex):
                ix = action.index
                self.add_index(ix.schema_name, ix.table, ix.name, list(ix.columns))


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def settings() -> SchemaSettings:
    return SchemaSettings()


@pytest.fixture
def person_schema(settings: SchemaSettings) -> SchemaBuilder:
    """``Person`` with an identity key, a 30-char name and an unbounded email."""
    schema = SchemaBuilder(settings)
    (
        schema.table("Person")
        .column("Id", int, key=True, identity=True)
        .column("Name", str, max_length=30, required=True)
        .column("Email", str, max_length=MAX_LENGTH, required=True)
        .add()
    )
    return schema


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_TIME
