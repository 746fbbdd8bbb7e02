"""Pydantic models for schema-forge configuration."""

from pydantic import BaseModel, Field, field_validator


# ============================================================================
# Schema Settings
# ============================================================================


class SchemaSettings(BaseModel):
    """Defaults applied while building and rendering the desired schema.

    Passed explicitly to the column policy, builders, and DDL generator --
    there is no process-wide default state.

    Example:
        >>> settings = SchemaSettings(default_string_type="nvarchar")
        >>> settings.default_schema
        'dbo'
    """

    default_schema: str = "dbo"
    default_string_type: str = "varchar"
    default_string_length: int = Field(default=50, gt=0)
    # Literal used when an ALTER makes a text column NOT NULL (None = no DEFAULT)
    text_alter_default: str | None = "''"
    # Same for datetime columns
    datetime_alter_default: str | None = "'1900-01-01'"

    @field_validator("default_string_type")
    @classmethod
    def _lower_type_name(cls, value: str) -> str:
        # Catalog DATA_TYPE values are compared in lower case
        return value.lower()

    @field_validator("text_alter_default", "datetime_alter_default")
    @classmethod
    def _blank_means_none(cls, value: str | None) -> str | None:
        # TOML has no null; an empty string switches synthesis off
        if value is not None and not value.strip():
            return None
        return value


# ============================================================================
# Configuration Models
# ============================================================================


class DatabaseProfile(BaseModel):
    """Database connection profile from schema-forge.toml."""

    url: str
    description: str = ""
    db_password: str | None = None  # For [YOUR-PASSWORD] placeholder substitution


class ForgeConfig(BaseModel):
    """Complete configuration from schema-forge.toml."""

    profiles: dict[str, DatabaseProfile] = Field(default_factory=dict)
    schema_settings: SchemaSettings = Field(default_factory=SchemaSettings)
    excluded_tables: set[str] | None = None
