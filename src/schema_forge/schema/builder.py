"""Fluent builder API for the desired schema.

Callers declare tables column by column; each column runs through the
``ColumnPolicy`` immediately, so unmapped value types fail while the model
is being built rather than during generation.

Usage:
    from schema_forge.schema.builder import SchemaBuilder
    from schema_forge.schema.models import MAX_LENGTH

    schema = SchemaBuilder()
    (
        schema.table("Person")
        .column("Id", int, key=True, identity=True)
        .column("Name", str, max_length=30, required=True, index="IX_Person_Name")
        .column("Email", str, max_length=MAX_LENGTH, required=True)
        .add()
    )
    tables = schema.tables
"""

from typing import Any

from schema_forge.config.models import SchemaSettings
from schema_forge.schema.models import Column, Index, Table
from schema_forge.schema.policy import ColumnPolicy


class TableBuilder:
    """Accumulates columns and indexes for one table.

    Nothing reaches the owning ``SchemaBuilder`` until ``add()`` succeeds.
    """

    def __init__(
        self,
        name: str,
        schema_name: str,
        policy: ColumnPolicy,
        owner: "SchemaBuilder | None" = None,
    ):
        self.name = name
        self.schema_name = schema_name
        self._policy = policy
        self._owner = owner
        self._columns: list[Column] = []
        self._indexes: list[Index] = []

    def column(
        self,
        name: str,
        value_type: Any,
        *,
        key: bool = False,
        required: bool = False,
        max_length: int | None = None,
        identity: bool = False,
        default: str | None = None,
        index: str | None = None,
        unique: bool = False,
    ) -> "TableBuilder":
        """Declare a column.

        Re-declaring an existing name replaces that column in place.

        Args:
            index: Optional index name this column participates in.
                Columns naming the same index are appended in declaration
                order.
            unique: Uniqueness of ``index`` when this declaration creates it.

        See ``ColumnPolicy.resolve`` for the remaining arguments.
        """
        column = self._policy.resolve(
            name,
            value_type,
            key=key,
            required=required,
            max_length=max_length,
            identity=identity,
            default=default,
        )

        # Last declaration wins, keeping the original position
        for i, existing in enumerate(self._columns):
            if existing.name == name:
                self._columns[i] = column
                break
        else:
            self._columns.append(column)

        if index is not None:
            self.index(index, name, unique=unique)
        return self

    def index(self, name: str, *columns: str, unique: bool = False) -> "TableBuilder":
        """Declare (or extend) an index.

        The first declaration of ``name`` fixes uniqueness; later ones only
        append columns.
        """
        existing = next((ix for ix in self._indexes if ix.name == name), None)
        if existing is None:
            existing = Index(
                name=name,
                schema_name=self.schema_name,
                table=self.name,
                is_unique=unique,
            )
            self._indexes.append(existing)

        for column_name in columns:
            if column_name not in existing.columns:
                existing.columns.append(column_name)
        return self

    def build(self) -> Table:
        """Validate and return the ``Table`` without registering it.

        Raises:
            SchemaModelError: If the table does not have exactly one key.
        """
        return Table(
            schema_name=self.schema_name,
            name=self.name,
            columns=list(self._columns),
            indexes=[ix.model_copy(deep=True) for ix in self._indexes],
        )

    def add(self) -> Table:
        """Validate the table and register it with the owning schema.

        Raises:
            SchemaModelError: If the table does not have exactly one key.
            RuntimeError: If the builder was created without an owner.
        """
        if self._owner is None:
            raise RuntimeError("TableBuilder has no owning SchemaBuilder. Use build().")
        table = self.build()
        self._owner.add_table(table)
        return table


class SchemaBuilder:
    """Ordered collection of desired tables.

    Args:
        settings: Schema defaults; also the source of the default schema name.
    """

    def __init__(self, settings: SchemaSettings | None = None):
        self.settings = settings or SchemaSettings()
        self.policy = ColumnPolicy(self.settings)
        self._tables: list[Table] = []

    @property
    def tables(self) -> list[Table]:
        """Tables in the order they were added."""
        return list(self._tables)

    def table(self, name: str, schema_name: str | None = None) -> TableBuilder:
        """Start declaring a table (``schema_name`` defaults to settings)."""
        return TableBuilder(
            name,
            schema_name or self.settings.default_schema,
            self.policy,
            owner=self,
        )

    def add_table(self, table: Table) -> None:
        """Register an already validated table."""
        self._tables.append(table)
