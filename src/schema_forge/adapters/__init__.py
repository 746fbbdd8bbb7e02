"""Script executors package.

Provides the ``ScriptExecutor`` Protocol and the SQLAlchemy-backed
``EngineExecutor``.

Usage:
    from schema_forge.adapters import ScriptExecutor, EngineExecutor
"""

from schema_forge.adapters.base import ScriptExecutor
from schema_forge.adapters.engine import EngineExecutor

__all__ = [
    "ScriptExecutor",
    "EngineExecutor",
]
