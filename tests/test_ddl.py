"""Tests for DDL rendering and script generation."""

from datetime import datetime

import pytest

from schema_forge.config.models import SchemaSettings
from schema_forge.schema.builder import SchemaBuilder
from schema_forge.schema.ddl import (
    add_column_sql,
    alter_column_sql,
    column_default,
    column_sql,
    column_type,
    create_index_sql,
    create_table_sql,
    generate_script,
)
from schema_forge.schema.diff import CreateTable, MigrationPlan, TablePlan
from schema_forge.schema.models import MAX_LENGTH, Index
from schema_forge.schema.policy import ColumnPolicy

from conftest import FIXED_TIME


def _flat(sql: str) -> str:
    """Collapse whitespace for layout-independent comparisons."""
    return " ".join(sql.split())


@pytest.fixture
def policy() -> ColumnPolicy:
    return ColumnPolicy(SchemaSettings())


class TestColumnType:
    def test_text_with_length(self, policy: ColumnPolicy) -> None:
        assert column_type(policy.resolve("Name", str, max_length=30), policy) == "varchar(30)"

    def test_text_unbounded(self, policy: ColumnPolicy) -> None:
        col = policy.resolve("Notes", str, max_length=MAX_LENGTH)
        assert column_type(col, policy) == "varchar(MAX)"

    def test_optional_text(self, policy: ColumnPolicy) -> None:
        assert column_type(policy.resolve("Nick", str | None), policy) == "varchar(50)"

    @pytest.mark.parametrize(
        ("value_type", "expected"), [(int, "int"), (bool, "bit"), (datetime, "datetime")]
    )
    def test_bare_types(self, policy: ColumnPolicy, value_type, expected: str) -> None:
        assert column_type(policy.resolve("X", value_type), policy) == expected


class TestColumnDefault:
    """Explicit default wins; zero values synthesized only for NOT NULL ALTERs."""

    def test_explicit_default_on_create(self, policy: ColumnPolicy) -> None:
        col = policy.resolve("Active", bool, default="1")
        assert column_default(col, alter=False, policy=policy) == "1"

    def test_explicit_default_beats_synthesized(self, policy: ColumnPolicy) -> None:
        col = policy.resolve("Count", int, default="7")
        assert column_default(col, alter=True, policy=policy) == "7"

    @pytest.mark.parametrize("value_type", [int, bool])
    def test_int_and_bool_zero_on_alter(self, policy: ColumnPolicy, value_type) -> None:
        col = policy.resolve("X", value_type)
        assert column_default(col, alter=True, policy=policy) == "0"

    def test_no_default_on_create(self, policy: ColumnPolicy) -> None:
        col = policy.resolve("Count", int)
        assert column_default(col, alter=False, policy=policy) is None

    def test_no_default_for_nullable(self, policy: ColumnPolicy) -> None:
        col = policy.resolve("Count", int | None)
        assert column_default(col, alter=True, policy=policy) is None

    def test_text_empty_string_on_alter(self, policy: ColumnPolicy) -> None:
        col = policy.resolve("Email", str, required=True)
        assert column_default(col, alter=True, policy=policy) == "''"

    def test_text_default_can_be_disabled(self) -> None:
        policy = ColumnPolicy(SchemaSettings(text_alter_default=None))
        col = policy.resolve("Email", str, required=True)
        assert column_default(col, alter=True, policy=policy) is None

    def test_blank_setting_disables_text_default(self) -> None:
        policy = ColumnPolicy(SchemaSettings(text_alter_default=""))
        col = policy.resolve("Email", str, required=True)
        assert column_default(col, alter=True, policy=policy) is None

    def test_datetime_on_alter(self, policy: ColumnPolicy) -> None:
        col = policy.resolve("Created", datetime)
        assert column_default(col, alter=True, policy=policy) == "'1900-01-01'"

    def test_no_synthesized_default_for_identity(self, policy: ColumnPolicy) -> None:
        col = policy.resolve("Id", int, key=True, identity=True)
        assert column_default(col, alter=True, policy=policy) is None
        assert column_sql(col, True, policy) == "[Id] int IDENTITY NOT NULL PRIMARY KEY"


class TestColumnSql:
    def test_identity_key(self, policy: ColumnPolicy) -> None:
        col = policy.resolve("Id", int, key=True, identity=True)
        assert column_sql(col, False, policy) == "[Id] int IDENTITY NOT NULL PRIMARY KEY"

    def test_nullable_text(self, policy: ColumnPolicy) -> None:
        col = policy.resolve("Nick", str, max_length=20)
        assert column_sql(col, False, policy) == "[Nick] varchar(20) NULL"

    def test_alter_with_synthesized_default(self, policy: ColumnPolicy) -> None:
        col = policy.resolve("Active", bool)
        assert column_sql(col, True, policy) == "[Active] bit NOT NULL DEFAULT 0"


class TestStatements:
    @pytest.fixture
    def person(self, person_schema: SchemaBuilder):
        return person_schema.tables[0]

    def test_create_table(self, person, policy: ColumnPolicy) -> None:
        sql = create_table_sql(person, policy)
        assert _flat(sql) == (
            "CREATE TABLE [dbo].[Person] ( "
            "[Id] int IDENTITY NOT NULL PRIMARY KEY, "
            "[Name] varchar(30) NOT NULL, "
            "[Email] varchar(MAX) NOT NULL );"
        )

    def test_create_table_one_column_per_line(self, person, policy: ColumnPolicy) -> None:
        lines = create_table_sql(person, policy).splitlines()
        assert lines[0] == "CREATE TABLE [dbo].[Person] ("
        assert lines[-1] == ");"
        assert len(lines) == 2 + len(person.columns)

    def test_add_column(self, person, policy: ColumnPolicy) -> None:
        email = person.get_column("Email")
        assert add_column_sql(person, email, policy) == (
            "ALTER TABLE [dbo].[Person] ADD [Email] varchar(MAX) NOT NULL DEFAULT '';"
        )

    def test_add_column_without_text_default(self, person) -> None:
        policy = ColumnPolicy(SchemaSettings(text_alter_default=None))
        email = person.get_column("Email")
        assert add_column_sql(person, email, policy) == (
            "ALTER TABLE [dbo].[Person] ADD [Email] varchar(MAX) NOT NULL;"
        )

    def test_alter_column(self, person, policy: ColumnPolicy) -> None:
        name = person.get_column("Name")
        assert alter_column_sql(person, name, policy) == (
            "ALTER TABLE dbo.[Person] ALTER COLUMN [Name] varchar(30) NOT NULL DEFAULT '';"
        )

    def test_create_index(self) -> None:
        ix = Index(name="IX_ABC", schema_name="dbo", table="T", columns=["A", "B", "C"])
        assert create_index_sql(ix) == "CREATE INDEX [IX_ABC] ON [dbo].[T] ([A],[B],[C]);"

    def test_create_unique_index(self) -> None:
        ix = Index(name="UX_Email", schema_name="hr", table="P", is_unique=True, columns=["Email"])
        assert create_index_sql(ix) == "CREATE UNIQUE INDEX [UX_Email] ON [hr].[P] ([Email]);"


class TestGenerateScript:
    def test_header_and_table_comment(self, person_schema, policy: ColumnPolicy, fixed_clock) -> None:
        table = person_schema.tables[0]
        plan = MigrationPlan(
            tables=[TablePlan(table=table, exists=False, actions=[CreateTable(table=table)])]
        )
        script = generate_script(plan, policy, clock=fixed_clock)
        lines = script.splitlines()
        assert lines[0] == f"-- Migration Generated: {FIXED_TIME:%Y-%m-%d %H:%M:%S} --"
        assert lines[1] == "-- Table: Person --"
        assert script.endswith(");\n")

    def test_no_header(self, person_schema, policy: ColumnPolicy) -> None:
        plan = MigrationPlan(tables=[TablePlan(table=person_schema.tables[0], exists=True)])
        assert generate_script(plan, policy, header=False) == "-- Table: Person --\n"

    def test_empty_plan(self, policy: ColumnPolicy, fixed_clock) -> None:
        script = generate_script(MigrationPlan(), policy, clock=fixed_clock)
        assert script == "-- Migration Generated: 2024-03-01 09:30:00 --\n"
