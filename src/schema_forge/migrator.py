"""Migrator: diff a desired schema against a live database and emit DDL.

Ties the pieces together for one run -- the desired tables, a metadata
provider, and (optionally) a script executor.

Usage:
    from schema_forge import SchemaBuilder, SchemaMigrator, SqlServerIntrospector

    schema = SchemaBuilder()
    schema.table("Person").column("Id", int, key=True, identity=True).add()

    with SqlServerIntrospector(url) as provider:
        migrator = SchemaMigrator(schema, provider)
        print(migrator.generate_sql())
"""

import logging
from collections.abc import Callable
from datetime import datetime

from schema_forge.adapters.base import ScriptExecutor
from schema_forge.config.models import SchemaSettings
from schema_forge.schema.builder import SchemaBuilder
from schema_forge.schema.ddl import generate_script
from schema_forge.schema.diff import MigrationPlan, diff_schema
from schema_forge.schema.models import Table
from schema_forge.schema.policy import ColumnPolicy
from schema_forge.schema.provider import MetadataProvider

logger = logging.getLogger(__name__)


class SchemaMigrator:
    """One diff-and-generate run over a desired schema.

    Not safe to share between concurrent runs: the provider session and
    the model belong to a single invocation.

    Args:
        schema: ``SchemaBuilder`` or list of validated ``Table``s.
        provider: Live metadata source.
        settings: Schema settings for rendering.  Defaults to the
            builder's settings, or ``SchemaSettings()`` for a table list.
        clock: Timestamp source for the script header.
    """

    def __init__(
        self,
        schema: SchemaBuilder | list[Table],
        provider: MetadataProvider,
        settings: SchemaSettings | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        if isinstance(schema, SchemaBuilder):
            tables = schema.tables
            settings = settings or schema.settings
        else:
            tables = list(schema)

        self.tables = tables
        self.provider = provider
        self.policy = ColumnPolicy(settings or SchemaSettings())
        self._clock = clock

    def plan(self) -> MigrationPlan:
        """Diff the desired tables against the provider."""
        return diff_schema(self.tables, self.provider)

    def generate_sql(self, plan: MigrationPlan | None = None) -> str:
        """Render the migration script.

        Args:
            plan: Reuse an existing plan instead of querying the provider
                again.
        """
        if plan is None:
            plan = self.plan()
        return generate_script(plan, self.policy, clock=self._clock)

    def execute(self, executor: ScriptExecutor, plan: MigrationPlan | None = None) -> str:
        """Generate the script and submit it as one batch.

        Returns:
            The script that was executed.
        """
        script = self.generate_sql(plan)
        executor.execute(script)
        logger.info("Applied migration for %d table(s)", len(self.tables))
        return script
