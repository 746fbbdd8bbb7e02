"""schema-forge: generate additive DDL migrations from a declared schema.

Declare tables with the builder API, diff them against a live SQL Server
database through a metadata provider, and emit (or execute) the
CREATE/ALTER/INDEX statements that bring the database in line.

Usage:
    from schema_forge import SchemaBuilder, SchemaMigrator, SqlServerIntrospector
    from schema_forge import MAX_LENGTH, SchemaSettings, load_config
    from schema_forge import EngineExecutor, ScriptExecutor, MetadataProvider
"""

__version__ = "0.1.0"

# Executors
from schema_forge.adapters.base import ScriptExecutor
from schema_forge.adapters.engine import EngineExecutor

# Config
from schema_forge.config.loader import load_config
from schema_forge.config.models import DatabaseProfile, ForgeConfig, SchemaSettings

# Factory
from schema_forge.factory import ProfileNotFoundError, resolve_url

# Migrator
from schema_forge.migrator import SchemaMigrator

# Schema
from schema_forge.schema.builder import SchemaBuilder, TableBuilder
from schema_forge.schema.diff import MigrationPlan, diff_schema
from schema_forge.schema.introspector import SqlServerIntrospector
from schema_forge.schema.models import MAX_LENGTH, Column, Index, SchemaModelError, Table
from schema_forge.schema.provider import MetadataProvider

__all__ = [
    # Executors
    "ScriptExecutor",
    "EngineExecutor",
    # Config
    "load_config",
    "SchemaSettings",
    "DatabaseProfile",
    "ForgeConfig",
    # Factory
    "ProfileNotFoundError",
    "resolve_url",
    # Migrator
    "SchemaMigrator",
    # Schema
    "SchemaBuilder",
    "TableBuilder",
    "MigrationPlan",
    "diff_schema",
    "SqlServerIntrospector",
    "MAX_LENGTH",
    "Column",
    "Index",
    "Table",
    "SchemaModelError",
    "MetadataProvider",
]
