"""
CLI commands for schemaplan.

Uses click for command-line argument parsing.
"""

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from .. import __version__
from ..config import ENV_DIALECT, ENV_MODELS_DIR, ENV_SQL_DIR, ENV_STATE, MigrationSettings
from ..exceptions import SchemaPlanError
from ..migrations.plan import MigrationPlan
from ..types import Dialect


def fail(error: Exception) -> NoReturn:
    """Report ``error`` on stderr and exit with status 1."""
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


def load_plan(settings: MigrationSettings) -> MigrationPlan:
    """
    Load the models of ``settings`` and build their plan.

    Raises:
        SchemaPlanError: If the models cannot be loaded or built
    """
    from ..loader import load_models
    from ..migrations.builder import build_migration_plan

    models = load_models(settings.models_dir)
    if not models:
        raise SchemaPlanError(f"No models found in {settings.models_dir}")
    return build_migration_plan(models, settings.dialect)


@click.group()
@click.version_option(__version__, prog_name="schemaplan")
@click.option(
    "--models-dir",
    "-m",
    envvar=ENV_MODELS_DIR,
    default="models",
    help="Directory of JSON model definitions (default: models)",
)
@click.option(
    "--dialect",
    "-d",
    envvar=ENV_DIALECT,
    type=click.Choice([d.value for d in Dialect], case_sensitive=False),
    default=Dialect.POSTGRES.value,
    help="Target SQL dialect",
)
@click.option(
    "--sql-dir",
    "-o",
    envvar=ENV_SQL_DIR,
    default="sql",
    help="Directory for generated .sql files (default: sql)",
)
@click.option(
    "--state",
    envvar=ENV_STATE,
    default=None,
    help="Plan snapshot file (default: <models-dir>/.schemaplan.<dialect>.json)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log progress to stderr")
@click.pass_context
def cli(
    ctx: click.Context,
    models_dir: str,
    dialect: str,
    sql_dir: str,
    state: str | None,
    verbose: bool,
) -> None:
    """schemaplan SQL migration planning tool."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["settings"] = MigrationSettings(
        dialect=Dialect(dialect.lower()),
        models_dir=Path(models_dir),
        sql_dir=Path(sql_dir),
        state_path=Path(state) if state else None,
    )


@cli.command()
@click.pass_context
def plan(ctx: click.Context) -> None:
    """Print the migration plan of the current models as JSON."""
    from ..migrations.plan import json_default

    try:
        migration_plan = load_plan(ctx.obj["settings"])
    except SchemaPlanError as e:
        fail(e)

    click.echo(json.dumps(migration_plan.to_dict(), indent=2, default=json_default))


@cli.command()
@click.option("--full", is_flag=True, help="Ignore the snapshot and generate the full migration")
@click.option("--write/--no-write", default=True, help="Write .sql files or print the statements")
@click.option("--save-snapshot", is_flag=True, help="Record the current plan as applied")
@click.option("--replace-existing", is_flag=True, help="Overwrite files that share a name")
@click.pass_context
def generate(
    ctx: click.Context,
    full: bool,
    write: bool,
    save_snapshot: bool,
    replace_existing: bool,
) -> None:
    """Generate SQL migrations from model changes."""
    from ..migrations.diff import PlanDiff
    from ..migrations.generator import write_migration_files
    from ..migrations.snapshot import load_snapshot
    from ..migrations.snapshot import save_snapshot as store_snapshot

    settings: MigrationSettings = ctx.obj["settings"]
    try:
        current = load_plan(settings)
    except SchemaPlanError as e:
        fail(e)

    previous = None
    if not full:
        snapshot = load_snapshot(settings.snapshot_path)
        previous = snapshot.plan if snapshot else None

    diff = PlanDiff(previous, current)

    if not write:
        click.echo("\n".join(diff.statements()))
    else:
        for skipped in diff.skipped_changes():
            click.echo(f"Skipped {skipped.describe()}; apply manually if intended: {skipped.statement}", err=True)

        files = diff.migration_files()
        if not any(files):
            click.echo("No changes detected.")
        else:
            try:
                paths = write_migration_files(files, settings.sql_dir, replace_existing=replace_existing)
            except OSError as e:
                fail(e)
            click.echo(f"Wrote {len(paths)} migration file(s) to {settings.sql_dir}:")
            for path in paths:
                click.echo(f"  - {path.name}")

    if save_snapshot:
        snapshot = store_snapshot(settings.snapshot_path, current)
        click.echo(f"Saved snapshot: {settings.snapshot_path} ({snapshot.hash[:12]})")


@cli.command("hash")
@click.pass_context
def hash_command(ctx: click.Context) -> None:
    """Print the hash of the current migration plan."""
    from ..migrations.hashing import hash_migration_plan

    try:
        migration_plan = load_plan(ctx.obj["settings"])
    except SchemaPlanError as e:
        fail(e)

    click.echo(hash_migration_plan(migration_plan))


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Compare the current models with the saved snapshot."""
    from ..migrations.diff import PlanDiff
    from ..migrations.generator import flatten
    from ..migrations.hashing import hash_migration_plan
    from ..migrations.snapshot import load_snapshot

    settings: MigrationSettings = ctx.obj["settings"]
    try:
        current = load_plan(settings)
    except SchemaPlanError as e:
        fail(e)

    snapshot = load_snapshot(settings.snapshot_path)
    click.echo(f"Dialect:  {settings.dialect}")
    click.echo(f"Current:  {hash_migration_plan(current)}")

    if snapshot is None:
        click.echo(f"Snapshot: none ({settings.snapshot_path})")
        click.echo("Status:   no plan applied yet")
        return

    click.echo(f"Snapshot: {snapshot.hash}")
    if snapshot.is_stale:
        click.echo("Warning: snapshot hash does not match its stored plan", err=True)

    if snapshot.matches(current):
        click.echo("Status:   up to date")
        return

    diff = PlanDiff(snapshot.plan, current)
    pending = flatten(diff.migration_files())
    skipped = diff.skipped_changes()
    click.echo(f"Status:   {len(pending)} pending statement(s), {len(skipped)} skipped change(s)")
    for change in skipped:
        click.echo(f"  - skipped {change.describe()}")


@cli.command()
@click.option("--keep-bookkeeping", is_flag=True, help="Do not drop the migrations table")
@click.pass_context
def reset(ctx: click.Context, keep_bookkeeping: bool) -> None:
    """Print the statements that drop everything the models create."""
    from ..migrations.reset import generate_reset_sql

    try:
        migration_plan = load_plan(ctx.obj["settings"])
    except SchemaPlanError as e:
        fail(e)

    for statement in generate_reset_sql(migration_plan, include_migrations_table=not keep_bookkeeping):
        click.echo(statement)


@cli.command()
@click.pass_context
def bookkeeping(ctx: click.Context) -> None:
    """Print the migrations table DDL and its queries."""
    from ..drivers import get_dialect_driver

    driver = get_dialect_driver(ctx.obj["settings"].dialect)
    click.echo(driver.migrations_table_ddl())
    click.echo("")
    click.echo(f"-- executed migrations\n{driver.executed_migrations_query()}")
    click.echo(f"-- record migration\n{driver.record_migration_query()}")


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
