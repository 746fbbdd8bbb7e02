"""Pydantic models for the desired schema.

This module contains the schema-domain value objects:
- Desired structure: Column, Index, Table
- Model-construction error: SchemaModelError
- The canonical unbounded-length marker: MAX_LENGTH

Live database structure reported by a metadata provider lives in
schema_forge.schema.provider.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Canonical "unbounded" length; text columns with this length render as (MAX)
MAX_LENGTH = 2147483647


class SchemaModelError(Exception):
    """Raised when the desired schema cannot be built.

    Covers tables without exactly one key column and value types that
    have no column type mapping.
    """

    pass


# ============================================================================
# Desired Schema Models
# ============================================================================


class Column(BaseModel):
    """Desired column definition.

    Example:
        >>> col = Column(name="Id", value_type=int, db_type="int", is_key=True)
        >>> col.is_nullable
        False
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    value_type: Any
    db_type: str
    length: int | None = None
    is_nullable: bool = True
    is_key: bool = False
    is_identity: bool = False
    default: str | None = None  # Raw SQL literal, e.g. "0" or "'n/a'"

    @model_validator(mode="after")
    def _key_is_not_nullable(self) -> "Column":
        if self.is_key:
            self.is_nullable = False
        return self


class Index(BaseModel):
    """Desired index definition.

    ``columns`` are names only and are not checked against the table.
    """

    name: str
    schema_name: str
    table: str
    is_unique: bool = False
    columns: list[str] = Field(default_factory=list)


class Table(BaseModel):
    """Desired table definition.

    Columns keep insertion order; that order is the column order of the
    generated CREATE TABLE statement.

    Raises:
        SchemaModelError: If the table does not have exactly one key column,
            or an index lists no columns.
    """

    schema_name: str
    name: str
    columns: list[Column] = Field(default_factory=list)
    indexes: list[Index] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_structure(self) -> "Table":
        # Duplicate names collapse to the last declaration, at the first position
        by_name: dict[str, Column] = {}
        for column in self.columns:
            by_name[column.name] = column
        if len(by_name) != len(self.columns):
            self.columns = list(by_name.values())

        keys = [c.name for c in self.columns if c.is_key]
        if not keys:
            raise SchemaModelError(f"Table must have a key: {self.name}")
        if len(keys) > 1:
            raise SchemaModelError(
                f"Table must have exactly one key: {self.name} ({', '.join(keys)})"
            )

        for index in self.indexes:
            if not index.columns:
                raise SchemaModelError(f"Index has no columns: {index.name} on {self.name}")
        return self

    @property
    def qualified_name(self) -> str:
        """Bracket-quoted ``[schema].[name]``."""
        return f"[{self.schema_name}].[{self.name}]"

    def get_column(self, name: str) -> Column | None:
        """Return the column with exactly this name, if declared."""
        for column in self.columns:
            if column.name == name:
                return column
        return None
