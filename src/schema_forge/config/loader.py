"""TOML configuration loader.

Reads profiles and schema settings from ``schema-forge.toml``.

Usage:
    from schema_forge.config.loader import load_config

    config = load_config()                       # ./schema-forge.toml
    config = load_config(Path("ops/forge.toml"))
    print(config.schema_settings.default_schema)
"""

import tomllib
from pathlib import Path

from schema_forge.config.models import DatabaseProfile, ForgeConfig, SchemaSettings

DEFAULT_CONFIG_FILE = "schema-forge.toml"


def load_config(config_path: Path | None = None) -> ForgeConfig:
    """Load schema-forge configuration from a TOML file.

    Args:
        config_path: Path to the TOML file.  Defaults to
            ``schema-forge.toml`` in the current working directory.

    Returns:
        ``ForgeConfig`` with all profiles and schema settings.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValueError: If the config format is invalid.
    """
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_FILE

    if not config_path.exists():
        raise FileNotFoundError(
            f"Config not found: {config_path}\n"
            f"Create {DEFAULT_CONFIG_FILE} with [schema] and [profiles.<name>] sections."
        )

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {config_path.name}: {e}") from e

    profiles_data = data.get("profiles", {})
    if not isinstance(profiles_data, dict):
        raise ValueError(f"[profiles] must be a table in {config_path.name}")

    # Parse profiles
    profiles = {}
    for name, profile_data in profiles_data.items():
        profiles[name] = DatabaseProfile(**profile_data)

    # Parse schema settings
    schema_data = dict(data.get("schema", {}))
    excluded = schema_data.pop("excluded_tables", None)

    return ForgeConfig(
        profiles=profiles,
        schema_settings=SchemaSettings(**schema_data),
        excluded_tables=set(excluded) if excluded is not None else None,
    )
