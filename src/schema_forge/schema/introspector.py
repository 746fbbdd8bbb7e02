"""SQL Server schema introspection via INFORMATION_SCHEMA and sys catalogs.

Implements the ``MetadataProvider`` protocol:
- Tables (user base tables only)
- Indexes (name, columns in key order, uniqueness, primary key flag)
- Columns (type, length, nullability, key, identity)

Uses a SQLAlchemy engine with ``text()`` queries; rows are validated into
``LiveTable``/``LiveIndex``/``LiveColumn`` before they leave this module.
"""

import logging
from collections import defaultdict

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine

from schema_forge.schema.provider import LiveColumn, LiveIndex, LiveTable

logger = logging.getLogger(__name__)


class SqlServerIntrospector:
    """Introspects a SQL Server database.

    Opens one connection per ``with`` block; every query in the block runs
    on that connection.

    Usage:
        with SqlServerIntrospector(database_url) as provider:
            tables = provider.list_tables()
            columns = provider.list_columns("dbo", "Person")
    """

    # Tables to exclude from introspection (system tables)
    EXCLUDED_TABLES_DEFAULT = {
        "sysdiagrams",
    }

    def __init__(
        self,
        database_url: str | None = None,
        excluded_tables: set[str] | None = None,
        connect_timeout: int = 10,
        engine: Engine | None = None,
    ):
        """Initialize with a connection URL or an existing engine.

        Args:
            database_url: SQLAlchemy URL, e.g. ``mssql+pyodbc://...``.
            excluded_tables: Table names to hide.  Defaults to
                ``EXCLUDED_TABLES_DEFAULT``; pass ``set()`` to hide none.
            connect_timeout: Login timeout in seconds for new engines.
            engine: Engine to reuse instead of creating one from the URL.
        """
        if database_url is None and engine is None:
            raise ValueError("SqlServerIntrospector needs database_url or engine")

        self._database_url = database_url
        self._excluded_tables = (
            set(self.EXCLUDED_TABLES_DEFAULT) if excluded_tables is None else excluded_tables
        )
        self._connect_timeout = connect_timeout
        self._engine = engine
        self._owns_engine = engine is None
        self._conn: Connection | None = None

    def __enter__(self) -> "SqlServerIntrospector":
        """Context manager entry - opens connection."""
        if self._engine is None:
            self._engine = create_engine(
                self._database_url,
                connect_args={"timeout": self._connect_timeout},
            )
        self._conn = self._engine.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - closes connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
        if self._owns_engine and self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def _require_connection(self) -> Connection:
        if self._conn is None:
            raise RuntimeError("Introspector not connected. Use with statement.")
        return self._conn

    # ------------------------------------------------------------------
    # MetadataProvider
    # ------------------------------------------------------------------

    def list_tables(self) -> list[LiveTable]:
        """Get all user base tables, ordered by (schema, name)."""
        conn = self._require_connection()
        query = text("""
            SELECT TABLE_SCHEMA, TABLE_NAME
            FROM INFORMATION_SCHEMA.TABLES
            WHERE TABLE_TYPE = 'BASE TABLE'
            ORDER BY TABLE_SCHEMA, TABLE_NAME
        """)
        tables = [
            LiveTable(schema_name=schema_name, name=name)
            for schema_name, name in conn.execute(query).fetchall()
            if name not in self._excluded_tables
        ]
        logger.debug("Found %d table(s)", len(tables))
        return tables

    def list_indexes(self) -> list[LiveIndex]:
        """Get all indexes on user tables, ordered by (schema, table, name).

        Heaps (``index_id = 0``) and Microsoft-shipped objects are omitted.
        """
        conn = self._require_connection()
        query = text("""
            SELECT
                SCHEMA_NAME(o.schema_id) AS schema_name,
                o.name AS table_name,
                i.name AS index_name,
                i.is_unique,
                i.is_primary_key,
                c.name AS column_name
            FROM sys.indexes i
            JOIN sys.objects o ON o.object_id = i.object_id
            JOIN sys.index_columns ic
                ON ic.object_id = i.object_id
                AND ic.index_id = i.index_id
                AND ic.key_ordinal > 0
            JOIN sys.columns c
                ON c.object_id = ic.object_id
                AND c.column_id = ic.column_id
            WHERE i.index_id > 0
              AND OBJECTPROPERTY(i.object_id, 'IsMsShipped') = 0
            ORDER BY schema_name, table_name, index_name, ic.key_ordinal
        """)

        indexes: dict[tuple[str, str, str], LiveIndex] = {}
        index_columns: dict[tuple[str, str, str], list[str]] = defaultdict(list)

        for row in conn.execute(query).fetchall():
            schema_name, table_name, index_name, is_unique, is_pk, column_name = row
            if table_name in self._excluded_tables:
                continue

            key = (schema_name, table_name, index_name)
            if key not in indexes:
                indexes[key] = LiveIndex(
                    schema_name=schema_name,
                    table=table_name,
                    name=index_name,
                    is_unique=bool(is_unique),
                    is_primary_key=bool(is_pk),
                )
            index_columns[key].append(column_name)

        # Update column lists
        for key, cols in index_columns.items():
            indexes[key].columns = cols

        return list(indexes.values())

    def list_columns(self, schema_name: str, table: str) -> list[LiveColumn]:
        """Get columns for a table, in ordinal order."""
        conn = self._require_connection()
        query = text("""
            SELECT
                c.COLUMN_NAME,
                c.DATA_TYPE,
                c.CHARACTER_MAXIMUM_LENGTH,
                c.IS_NULLABLE,
                CASE WHEN pk.COLUMN_NAME IS NULL THEN 0 ELSE 1 END AS is_key,
                COLUMNPROPERTY(
                    OBJECT_ID(QUOTENAME(c.TABLE_SCHEMA) + '.' + QUOTENAME(c.TABLE_NAME)),
                    c.COLUMN_NAME,
                    'IsIdentity'
                ) AS is_identity
            FROM INFORMATION_SCHEMA.COLUMNS c
            LEFT JOIN (
                SELECT tc.TABLE_SCHEMA, tc.TABLE_NAME, ccu.COLUMN_NAME
                FROM INFORMATION_SCHEMA.TABLE_CONSTRAINTS tc
                JOIN INFORMATION_SCHEMA.CONSTRAINT_COLUMN_USAGE ccu
                    ON tc.CONSTRAINT_NAME = ccu.CONSTRAINT_NAME
                    AND tc.TABLE_SCHEMA = ccu.TABLE_SCHEMA
                WHERE tc.CONSTRAINT_TYPE = 'PRIMARY KEY'
            ) pk
                ON pk.TABLE_SCHEMA = c.TABLE_SCHEMA
                AND pk.TABLE_NAME = c.TABLE_NAME
                AND pk.COLUMN_NAME = c.COLUMN_NAME
            WHERE c.TABLE_SCHEMA = :schema_name
              AND c.TABLE_NAME = :table_name
            ORDER BY c.ORDINAL_POSITION
        """)
        result = conn.execute(query, {"schema_name": schema_name, "table_name": table})

        columns = []
        for row in result.fetchall():
            name, data_type, length, is_nullable, is_key, is_identity = row
            columns.append(
                LiveColumn(
                    name=name,
                    db_type=self._normalize_data_type(data_type),
                    length=length,
                    is_nullable=is_nullable,
                    is_key=is_key,
                    is_identity=is_identity,
                )
            )
        return columns

    def _normalize_data_type(self, data_type: str) -> str:
        """Lower-case type names so they compare with the column policy."""
        return data_type.lower()
