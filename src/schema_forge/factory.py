"""Profile resolution and provider/executor construction.

Profiles live in ``schema-forge.toml``.  The active profile comes from an
explicit name or the ``{env_prefix}DB_PROFILE`` environment variable.

Usage:
    from schema_forge.factory import get_active_profile_name, create_introspector

    name = get_active_profile_name(env_prefix="APP_")   # reads APP_DB_PROFILE
    with create_introspector(config, name) as provider:
        ...
"""

import os
from urllib.parse import quote

from schema_forge.adapters.engine import EngineExecutor
from schema_forge.config.models import DatabaseProfile, ForgeConfig
from schema_forge.schema.introspector import SqlServerIntrospector


class ProfileNotFoundError(Exception):
    """Raised when no database profile is configured."""

    pass


def get_active_profile_name(env_prefix: str = "") -> str:
    """Get active profile name from the environment.

    Args:
        env_prefix: Prefix for the variable name (``""`` reads ``DB_PROFILE``).

    Raises:
        ProfileNotFoundError: If the variable is unset or empty.
    """
    var_name = f"{env_prefix}DB_PROFILE"
    env_profile = os.environ.get(var_name)
    if env_profile:
        return env_profile

    raise ProfileNotFoundError(
        "No database profile configured.\n"
        f"Run: {var_name}=<name> schema-forge plan --model <module:attr>\n"
        "Or pass --profile <name>."
    )


def get_profile(config: ForgeConfig, profile_name: str) -> DatabaseProfile:
    """Look up a profile by name.

    Raises:
        ProfileNotFoundError: If the profile is not in the config.
    """
    if profile_name not in config.profiles:
        available = ", ".join(config.profiles.keys()) or "(none)"
        raise ProfileNotFoundError(
            f"Profile '{profile_name}' not found. Available: {available}"
        )
    return config.profiles[profile_name]


def resolve_url(profile: DatabaseProfile) -> str:
    """Resolve profile URL with password substitution.

    Example:
        >>> resolve_url(DatabaseProfile(url="mssql+pyodbc://sa:[YOUR-PASSWORD]@db/app",
        ...                             db_password="p@ss"))
        'mssql+pyodbc://sa:p%40ss@db/app'
    """
    url = profile.url
    if profile.db_password and "[YOUR-PASSWORD]" in url:
        url = url.replace("[YOUR-PASSWORD]", quote(profile.db_password, safe=""))
    return url


def create_introspector(config: ForgeConfig, profile_name: str) -> SqlServerIntrospector:
    """Build an (unopened) introspector for a profile."""
    profile = get_profile(config, profile_name)
    return SqlServerIntrospector(
        resolve_url(profile),
        excluded_tables=config.excluded_tables,
    )


def create_executor(config: ForgeConfig, profile_name: str) -> EngineExecutor:
    """Build a script executor for a profile."""
    profile = get_profile(config, profile_name)
    return EngineExecutor(resolve_url(profile))
