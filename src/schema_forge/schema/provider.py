"""Metadata provider protocol and live-structure response models.

Defines the ``MetadataProvider`` Protocol the diff engine reads live
database structure through, and the typed rows every provider returns.
Rows are validated at the adapter boundary so the diff engine only ever
sees normalized values.

Usage:
    from schema_forge.schema.provider import MetadataProvider

    def existing_tables(provider: MetadataProvider) -> set[tuple[str, str]]:
        return {(t.schema_name, t.name) for t in provider.list_tables()}
"""

from typing import Protocol

from pydantic import BaseModel, Field, field_validator

from schema_forge.schema.models import MAX_LENGTH


# ============================================================================
# Provider Response Models
# ============================================================================


class LiveTable(BaseModel):
    """A user base table reported by the database."""

    schema_name: str
    name: str


class LiveIndex(BaseModel):
    """An index reported by the database.

    Only (schema, table, name) identity takes part in diffing.
    """

    schema_name: str
    table: str
    name: str
    columns: list[str] = Field(default_factory=list)
    is_unique: bool = False
    is_primary_key: bool = False


class LiveColumn(BaseModel):
    """A column reported by the database.

    Example:
        >>> LiveColumn(name="Notes", db_type="varchar", length=-1).length == MAX_LENGTH
        True
    """

    name: str
    db_type: str
    length: int | None = None
    is_nullable: bool = True
    is_key: bool = False
    is_identity: bool = False

    @field_validator("length")
    @classmethod
    def _normalize_unbounded(cls, value: int | None) -> int | None:
        # SQL Server reports (MAX) widths as -1
        if value == -1:
            return MAX_LENGTH
        return value

    @field_validator("is_nullable", "is_key", "is_identity", mode="before")
    @classmethod
    def _coerce_flag(cls, value: object) -> object:
        if value is None:
            return False
        if isinstance(value, str) and value.upper() in ("YES", "NO"):
            return value.upper() == "YES"
        return value


# ============================================================================
# Provider Protocol
# ============================================================================


class MetadataProvider(Protocol):
    """Read-only view of live database structure.

    Every method reflects the database at call time, is idempotent, and
    has no side effects.  Failures (connectivity, permissions) propagate
    to the caller unmodified.
    """

    def list_tables(self) -> list[LiveTable]:
        """List user base tables, ordered by (schema, name).

        System tables are excluded.
        """
        ...

    def list_indexes(self) -> list[LiveIndex]:
        """List indexes, ordered by (schema, table, name).

        ``columns`` are in key order.  Primary-key-backed indexes are
        included and flagged with ``is_primary_key``.
        """
        ...

    def list_columns(self, schema_name: str, table: str) -> list[LiveColumn]:
        """List the columns of a single table.

        Unbounded text lengths come back as ``MAX_LENGTH``.
        """
        ...
