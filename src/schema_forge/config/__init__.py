"""Configuration management: profiles, schema settings, and TOML loading.

Usage:
    >>> from schema_forge.config import load_config, SchemaSettings, DatabaseProfile
"""

from schema_forge.config.loader import load_config
from schema_forge.config.models import DatabaseProfile, ForgeConfig, SchemaSettings

__all__ = ["load_config", "ForgeConfig", "DatabaseProfile", "SchemaSettings"]
