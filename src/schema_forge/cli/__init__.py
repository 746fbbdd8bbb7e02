"""CLI module for schema diffing and migration generation.

Loads a desired schema from a Python object, diffs it against the live
database of a configured profile, and prints or applies the DDL.

Usage:
    DB_PROFILE=local schema-forge plan --model myapp.schema:schema
    schema-forge --profile local plan --model myapp.schema:schema --output migrate.sql
    schema-forge --profile local apply --model myapp.schema:schema --confirm
    schema-forge profiles

Commands:
    plan      - Show the migration script for the current database
    apply     - Generate the migration script and execute it
    profiles  - List available profiles

The ``--model`` reference is ``module:attribute`` and may point at a
``SchemaBuilder``, a list of ``Table``, or a callable that takes
``SchemaSettings`` and returns either.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from schema_forge.config.loader import load_config
from schema_forge.config.models import ForgeConfig, SchemaSettings
from schema_forge.factory import (
    ProfileNotFoundError,
    create_executor,
    create_introspector,
    get_active_profile_name,
)
from schema_forge.migrator import SchemaMigrator
from schema_forge.schema.builder import SchemaBuilder
from schema_forge.schema.diff import AddColumn, AlterColumn, CreateIndex, CreateTable, MigrationPlan
from schema_forge.schema.models import SchemaModelError
from schema_forge.schema.models import Table as SchemaTable

console = Console()


# ============================================================================
# Helpers
# ============================================================================


def _load_model(reference: str, settings: SchemaSettings) -> SchemaBuilder | list[SchemaTable]:
    """Resolve a ``module:attribute`` reference to a desired schema.

    Raises:
        ValueError: If the reference is malformed or resolves to something
            that is not a schema.
        ImportError: If the module cannot be imported.
    """
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Model reference must be 'module:attribute', got '{reference}'")

    module = importlib.import_module(module_name)
    try:
        obj = getattr(module, attr)
    except AttributeError:
        raise ValueError(f"'{module_name}' has no attribute '{attr}'") from None

    if callable(obj) and not isinstance(obj, SchemaBuilder):
        obj = obj(settings)

    if isinstance(obj, SchemaBuilder):
        return obj
    if isinstance(obj, (list, tuple)) and all(isinstance(t, SchemaTable) for t in obj):
        return list(obj)
    raise ValueError(
        f"'{reference}' is not a SchemaBuilder or list of Table (got {type(obj).__name__})"
    )


def _resolve_profile(args: argparse.Namespace) -> str:
    return args.profile or get_active_profile_name(env_prefix=args.env_prefix)


def _print_plan(plan: MigrationPlan) -> None:
    """Render the plan as a summary table."""
    diff_table = Table(title="Schema Differences", show_header=True, header_style="bold")
    diff_table.add_column("Table", style="dim")
    diff_table.add_column("Action")
    diff_table.add_column("Detail")

    for action in plan.actions:
        if isinstance(action, CreateTable):
            diff_table.add_row(
                action.table.qualified_name,
                "[bold green]NEW TABLE[/bold green]",
                f"{len(action.table.columns)} columns",
            )
        elif isinstance(action, AddColumn):
            diff_table.add_row(
                action.table.qualified_name, "[green]ADD COLUMN[/green]", action.column.name
            )
        elif isinstance(action, AlterColumn):
            diff_table.add_row(
                action.table.qualified_name,
                "[yellow]ALTER COLUMN[/yellow]",
                f"{action.column.name} (was {action.live.db_type})",
            )
        elif isinstance(action, CreateIndex):
            diff_table.add_row(
                f"[{action.index.schema_name}].[{action.index.table}]",
                "[cyan]CREATE INDEX[/cyan]",
                action.index.name,
            )

    console.print(diff_table)


def _prepare(args: argparse.Namespace) -> tuple[ForgeConfig, str, SchemaBuilder | list[SchemaTable]]:
    config_path = Path(args.config) if args.config else None
    config = load_config(config_path)
    profile = _resolve_profile(args)
    model = _load_model(args.model, config.schema_settings)
    return config, profile, model


# ============================================================================
# Commands
# ============================================================================


def cmd_plan(args: argparse.Namespace) -> int:
    """Show (or write) the migration script.

    Returns:
        0 on success, 1 on failure.
    """
    try:
        config, profile, model = _prepare(args)
    except (FileNotFoundError, ValueError, ImportError, ProfileNotFoundError, SchemaModelError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    console.print(f"Analyzing schema for profile: [bold cyan]{profile}[/bold cyan]")

    try:
        with create_introspector(config, profile) as provider:
            migrator = SchemaMigrator(model, provider, settings=config.schema_settings)
            plan = migrator.plan()
            script = migrator.generate_sql(plan)
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] Introspection failed: {e}")
        return 1

    if not plan.has_changes:
        console.print("\n[bold green]v[/bold green] Schema is up to date - no changes needed")
        return 0

    console.print()
    _print_plan(plan)

    if args.output:
        Path(args.output).write_text(script)
        console.print(f"\nScript written to [cyan]{args.output}[/cyan]")
    else:
        console.print()
        console.print(Syntax(script, "sql", word_wrap=True))

    return 0


def cmd_apply(args: argparse.Namespace) -> int:
    """Generate the migration script and execute it.

    Requires ``--confirm``; without it the plan is shown and nothing runs.

    Returns:
        0 on success, 1 on failure.
    """
    try:
        config, profile, model = _prepare(args)
    except (FileNotFoundError, ValueError, ImportError, ProfileNotFoundError, SchemaModelError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    console.print(f"Analyzing schema for profile: [bold cyan]{profile}[/bold cyan]")

    try:
        with create_introspector(config, profile) as provider:
            migrator = SchemaMigrator(model, provider, settings=config.schema_settings)
            plan = migrator.plan()
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] Introspection failed: {e}")
        return 1

    if not plan.has_changes:
        console.print("\n[bold green]v[/bold green] Schema is up to date - no changes needed")
        return 0

    console.print()
    _print_plan(plan)

    if not args.confirm:
        console.print()
        console.print("[dim]To apply the migration, add[/dim] [cyan]--confirm[/cyan] [dim]flag.[/dim]")
        return 0

    console.print()
    console.print("[bold]Applying migration...[/bold]")

    executor = create_executor(config, profile)
    try:
        migrator.execute(executor, plan)
    except Exception as e:
        console.print(f"\n[bold red]x[/bold red] Migration failed: {e}")
        return 1
    finally:
        executor.close()

    console.print(f"[bold green]v Migration complete![/bold green] {plan.action_count} statement(s) applied")
    return 0


def cmd_profiles(args: argparse.Namespace) -> int:
    """List available profiles from the config file.

    Returns:
        0 on success, 1 if the config file is missing or invalid.
    """
    config_path = Path(args.config) if args.config else None
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    try:
        current = _resolve_profile(args)
    except ProfileNotFoundError:
        current = None

    table = Table(title="Database Profiles", show_header=True, header_style="bold")
    table.add_column("", width=2)
    table.add_column("Profile")
    table.add_column("Description")

    for name, profile in config.profiles.items():
        marker = "[bold green]*[/bold green]" if name == current else " "
        table.add_row(
            marker,
            f"[bold cyan]{name}[/bold cyan]" if name == current else name,
            profile.description or "",
        )

    console.print(table)

    if current:
        console.print("\n[bold green]*[/bold green] = active profile")

    return 0


# ============================================================================
# Main entry point
# ============================================================================


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        prog="schema-forge",
        description="Generate DDL migrations from a declared schema",
    )

    parser.add_argument(
        "--config",
        default=None,
        help="Path to schema-forge.toml (default: ./schema-forge.toml)",
    )
    parser.add_argument(
        "--profile",
        default=None,
        help="Profile name (overrides the DB_PROFILE environment variable)",
    )
    parser.add_argument(
        "--env-prefix",
        default="",
        help=(
            "Prefix for environment variable lookup "
            "(e.g., --env-prefix APP_ reads APP_DB_PROFILE)"
        ),
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # plan command
    p_plan = subparsers.add_parser("plan", help="Show the migration script")
    p_plan.add_argument("--model", required=True, help="Desired schema as module:attribute")
    p_plan.add_argument("--output", "-o", default=None, help="Write the script to a file")
    p_plan.set_defaults(func=cmd_plan)

    # apply command
    p_apply = subparsers.add_parser("apply", help="Generate and execute the migration")
    p_apply.add_argument("--model", required=True, help="Desired schema as module:attribute")
    p_apply.add_argument(
        "--confirm",
        action="store_true",
        help="Actually execute the script (otherwise only show the plan)",
    )
    p_apply.set_defaults(func=cmd_apply)

    # profiles command
    p_profiles = subparsers.add_parser("profiles", help="List available profiles")
    p_profiles.set_defaults(func=cmd_profiles)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
