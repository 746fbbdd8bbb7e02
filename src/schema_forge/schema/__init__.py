"""Schema model, column policy, diff engine, and DDL rendering.

Provides the desired-schema models (``Table``, ``Column``, ``Index``),
the builder API (``SchemaBuilder``), the column policy (``ColumnPolicy``),
the metadata provider contract (``MetadataProvider``) with its SQL Server
implementation (``SqlServerIntrospector``), the diff engine
(``diff_schema``), and script rendering (``generate_script``).

Usage:
    from schema_forge.schema import SchemaBuilder, diff_schema, generate_script
"""

from schema_forge.schema.builder import SchemaBuilder, TableBuilder
from schema_forge.schema.ddl import generate_script
from schema_forge.schema.diff import (
    AddColumn,
    AlterColumn,
    CreateIndex,
    CreateTable,
    MigrationPlan,
    TablePlan,
    diff_schema,
)
from schema_forge.schema.introspector import SqlServerIntrospector
from schema_forge.schema.models import MAX_LENGTH, Column, Index, SchemaModelError, Table
from schema_forge.schema.policy import ColumnPolicy
from schema_forge.schema.provider import LiveColumn, LiveIndex, LiveTable, MetadataProvider

__all__ = [
    "SchemaBuilder",
    "TableBuilder",
    "ColumnPolicy",
    "Column",
    "Index",
    "Table",
    "MAX_LENGTH",
    "SchemaModelError",
    "MetadataProvider",
    "LiveTable",
    "LiveIndex",
    "LiveColumn",
    "SqlServerIntrospector",
    "diff_schema",
    "MigrationPlan",
    "TablePlan",
    "CreateTable",
    "AddColumn",
    "AlterColumn",
    "CreateIndex",
    "generate_script",
]
