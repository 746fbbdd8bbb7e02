"""Column policy: map a semantic value type to a resolved column.

Pure functions over ``SchemaSettings`` -- no I/O.  The type map is fixed;
new value types are supported by adding entries, never by falling back to
a default column type.

Usage:
    from schema_forge.config.models import SchemaSettings
    from schema_forge.schema.policy import ColumnPolicy

    policy = ColumnPolicy(SchemaSettings())
    column = policy.resolve("Name", str, max_length=30, required=True)
    column.db_type   # 'varchar'
"""

import types
import typing
from datetime import datetime
from typing import Any

from schema_forge.config.models import SchemaSettings
from schema_forge.schema.models import MAX_LENGTH, Column, SchemaModelError

# Value types mapped to a fixed db type; text maps to settings.default_string_type
_FIXED_DB_TYPES: dict[type, str] = {
    int: "int",
    bool: "bit",
    datetime: "datetime",
}


def unwrap_optional(value_type: Any) -> tuple[Any, bool]:
    """Split ``X | None`` / ``Optional[X]`` into ``(X, True)``.

    Non-optional types come back as ``(value_type, False)``.

    Examples:
        >>> unwrap_optional(int | None)
        (<class 'int'>, True)
        >>> unwrap_optional(str)
        (<class 'str'>, False)
    """
    origin = typing.get_origin(value_type)
    if origin is typing.Union or origin is types.UnionType:
        args = [a for a in typing.get_args(value_type) if a is not type(None)]
        if len(args) == 1:
            return args[0], True
    return value_type, False


class ColumnPolicy:
    """Resolves declared column constraints into a ``Column``.

    Args:
        settings: Schema defaults (string type, string length).
    """

    def __init__(self, settings: SchemaSettings | None = None):
        self._settings = settings or SchemaSettings()

    @property
    def settings(self) -> SchemaSettings:
        return self._settings

    def is_text(self, value_type: Any) -> bool:
        """True if the (possibly optional) value type is text."""
        base, _ = unwrap_optional(value_type)
        return base is str

    def db_type_for(self, value_type: Any) -> str:
        """Map a value type to its column type.

        Raises:
            SchemaModelError: If the value type has no mapping.
        """
        base, _ = unwrap_optional(value_type)
        if base is str:
            return self._settings.default_string_type
        # Lookup by identity so bool never resolves through int
        for mapped, db_type in _FIXED_DB_TYPES.items():
            if base is mapped:
                return db_type
        raise SchemaModelError(f"Column type unknown: {value_type!r}")

    def resolve(
        self,
        name: str,
        value_type: Any,
        *,
        key: bool = False,
        required: bool = False,
        max_length: int | None = None,
        identity: bool = False,
        default: str | None = None,
    ) -> Column:
        """Build a fully resolved ``Column``.

        Args:
            name: Column name.
            value_type: Semantic type, e.g. ``int``, ``str``, ``datetime``,
                ``bool | None``.
            key: Mark as the table key (forces NOT NULL).
            required: Force NOT NULL.
            max_length: Text length; ``MAX_LENGTH`` (or ``-1``) for unbounded.
            identity: Database-generated identity column.
            default: Raw SQL default literal.

        Returns:
            ``Column`` with db type, nullability, and length applied.

        Raises:
            SchemaModelError: If the value type has no mapping, or a text
                length is zero or negative (other than ``-1``).
        """
        db_type = self.db_type_for(value_type)
        base, optional = unwrap_optional(value_type)
        text = base is str

        # Nullable
        is_nullable = text or optional
        if required or key:
            is_nullable = False

        # Length
        length = max_length if text else None
        if length is None and text:
            length = self._settings.default_string_length
        elif length == -1:
            length = MAX_LENGTH
        elif length is not None and length <= 0:
            raise SchemaModelError(f"Column length must be positive: {name} ({length})")

        return Column(
            name=name,
            value_type=value_type,
            db_type=db_type,
            length=length,
            is_nullable=is_nullable,
            is_key=key,
            is_identity=identity,
            default=default,
        )
