"""Script executor protocol definition.

Defines the ``ScriptExecutor`` Protocol that the migrator hands generated
scripts to.  Executors run the text as one batch; they do not parse or
split it.

Usage:
    from schema_forge.adapters.base import ScriptExecutor

    def apply(executor: ScriptExecutor, script: str) -> None:
        executor.execute(script)
"""

from typing import Protocol


class ScriptExecutor(Protocol):
    """Runs a batch of SQL statements against a database."""

    def execute(self, sql: str) -> None:
        """Execute a script as a single batch.

        Args:
            sql: One or more newline-terminated statements.

        Raises:
            Exception: Driver errors propagate unmodified.

        Example:
            executor.execute("ALTER TABLE [dbo].[Person] ADD [Age] int NULL;\\n")
        """
        ...

    def close(self) -> None:
        """Release connections held by the executor."""
        ...
