"""
SQL migration generator.

This module renders a full, CREATE-only migration from a plan and writes
migration statements to ``.sql`` files that the statement-execution engine
applies in lexical order.

Statements are produced in three passes across all tables:

1. enum types required by a table, immediately followed by its CREATE TABLE
2. foreign key constraints (both sides of every reference now exist)
3. indexes
"""

import logging
import re
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from ..drivers import DialectDriver, get_dialect_driver
from ..utils import slugify
from .plan import ColumnPlan, MigrationPlan, TablePlan

logger = logging.getLogger(__name__)

_MIGRATION_FILE_RE = re.compile(r"^\d+-(.+)\.sql$")


@dataclass
class MigrationFile:
    """
    A group of statements written to one ``.sql`` file.

    Attributes:
        slug: Semantic part of the file name (e.g. ``create-users-table``)
        statements: Statements in execution order
    """

    slug: str
    statements: list[str] = field(default_factory=list)

    @property
    def content(self) -> str:
        return "\n\n".join(self.statements)

    def __bool__(self) -> bool:
        return bool(self.statements)


class MigrationSequence:
    """
    Monotonic file-name prefix source.

    Prefixes are ``<unix seconds at creation> + <counter>`` so files created
    within the same clock second still sort in generation order. One
    sequence is threaded through a single generation run.
    """

    def __init__(self, base: int | None = None):
        self.base = int(time.time()) if base is None else base
        self.counter = 0

    def next_prefix(self) -> int:
        prefix = self.base + self.counter
        self.counter += 1
        return prefix


class EnumTypeTracker:
    """
    Deduplicates standalone enum types by generated type name.

    A type is created once per run, by the first column that needs it.
    """

    def __init__(self, driver: DialectDriver, known: Iterable[str] = ()):
        self.driver = driver
        self.seen: dict[str, list[str] | None] = {name: None for name in known}

    def statements_for(self, columns: Iterable[ColumnPlan]) -> list[str]:
        """Return the enum type statements needed by ``columns`` not emitted yet."""
        statements = []
        for column in columns:
            if not column.is_enum:
                continue
            type_name = self.driver.enum_type_name(column)
            if type_name in self.seen:
                previous = self.seen[type_name]
                if previous is not None and previous != column.enum_values:
                    logger.warning(
                        f"Enum type {type_name} already defined with values {previous}; "
                        f"ignoring {column.enum_values} from column {column.name}"
                    )
                continue
            self.seen[type_name] = list(column.enum_values)
            statement = self.driver.create_enum_type(type_name, column.enum_values)
            if statement:
                statements.append(statement)
        return statements


def create_table_file(driver: DialectDriver, table: TablePlan, enums: EnumTypeTracker) -> MigrationFile:
    """Enum types of ``table`` followed by its CREATE TABLE."""
    statements = enums.statements_for(table.columns)
    statements.append(driver.create_table(table))
    return MigrationFile(slug=f"create-{table.table}-table", statements=statements)


def foreign_key_files(driver: DialectDriver, tables: Iterable[TablePlan]) -> list[MigrationFile]:
    """One file per foreign key of ``tables``; dialects rendering them inline yield none."""
    files = []
    for table in tables:
        for column in table.columns:
            if column.references is None:
                continue
            statement = driver.add_foreign_key(
                table.table, column.name, column.references.table, column.references.column
            )
            if statement:
                files.append(MigrationFile(slug=f"alter-{table.table}-{column.name}", statements=[statement]))
    return files


def index_files(driver: DialectDriver, tables: Iterable[TablePlan]) -> list[MigrationFile]:
    """One file per index of ``tables``."""
    files = []
    for table in tables:
        for index in table.indexes:
            statement = driver.create_index(table.table, index)
            files.append(MigrationFile(slug=f"create-{index.name}-index-in-{table.table}", statements=[statement]))
    return files


def full_migration_files(
    driver: DialectDriver,
    tables: list[TablePlan],
    enums: EnumTypeTracker,
) -> list[MigrationFile]:
    """The three-pass CREATE-only migration for ``tables``."""
    files = [create_table_file(driver, table, enums) for table in tables]
    files.extend(foreign_key_files(driver, tables))
    files.extend(index_files(driver, tables))
    return files


def plan_migration_files(plan: MigrationPlan) -> list[MigrationFile]:
    """
    Group the full migration of ``plan`` into files.

    Args:
        plan: The plan to render

    Returns:
        Migration files in execution order
    """
    driver = get_dialect_driver(plan.dialect)
    return full_migration_files(driver, plan.tables, EnumTypeTracker(driver))


def flatten(files: Iterable[MigrationFile]) -> list[str]:
    """Concatenate the statements of ``files`` in order."""
    return [statement for f in files for statement in f.statements]


def generate_sql(plan: MigrationPlan) -> list[str]:
    """
    Render the full, CREATE-only migration of ``plan``.

    Returns:
        Ordered list of SQL statements
    """
    return flatten(plan_migration_files(plan))


def generate_sql_string(plan: MigrationPlan) -> str:
    """``generate_sql`` joined into a single script."""
    return "\n".join(generate_sql(plan))


class MigrationFileWriter:
    """
    Writes migration files to a SQL directory.

    Files are named ``<prefix>-<slug>.sql`` where the prefix comes from a
    ``MigrationSequence``. With ``replace_existing``, a file whose slug
    already exists in the directory is overwritten in place instead of
    getting a new prefix.
    """

    def __init__(
        self,
        sql_dir: Path | str,
        sequence: MigrationSequence | None = None,
        replace_existing: bool = False,
    ):
        """
        Initialize the writer with a SQL directory.

        Args:
            sql_dir: Directory receiving the ``.sql`` files
            sequence: Prefix source, a fresh one by default
            replace_existing: Overwrite files that share a slug
        """
        self.sql_dir = Path(sql_dir)
        self.sequence = sequence or MigrationSequence()
        self.replace_existing = replace_existing
        self.created: list[Path] = []
        self.updated: list[Path] = []

    def ensure_directory(self) -> None:
        """Create the SQL directory if it doesn't exist."""
        if not self.sql_dir.exists():
            self.sql_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created SQL directory: {self.sql_dir}")

    def find_existing(self, slug: str) -> Path | None:
        """Return the file already holding ``slug``, if any."""
        for filepath in sorted(self.sql_dir.glob("*.sql")):
            match = _MIGRATION_FILE_RE.match(filepath.name)
            if match and match.group(1) == slug:
                return filepath
        return None

    def write(self, migration: MigrationFile) -> Path | None:
        """
        Write one migration file.

        Returns:
            Path of the written file, or None when there was nothing to write
        """
        if not migration:
            return None
        self.ensure_directory()

        slug = slugify(migration.slug)
        if self.replace_existing:
            existing = self.find_existing(slug)
            if existing is not None:
                existing.write_text(migration.content + "\n")
                logger.info(f"Migration file updated: {existing.name}")
                self.updated.append(existing)
                return existing

        filepath = self.sql_dir / f"{self.sequence.next_prefix()}-{slug}.sql"
        filepath.write_text(migration.content + "\n")
        logger.info(f"Migration file created: {filepath.name}")
        self.created.append(filepath)
        return filepath

    def write_all(self, migrations: Iterable[MigrationFile]) -> list[Path]:
        """Write ``migrations`` in order and log a summary."""
        paths = [p for p in (self.write(m) for m in migrations) if p is not None]
        logger.info(self.summary())
        return paths

    def summary(self) -> str:
        if not self.created and not self.updated:
            return "Nothing to migrate"
        parts = []
        if self.created:
            parts.append(f"{len(self.created)} created")
        if self.updated:
            parts.append(f"{len(self.updated)} updated")
        return f"Migration files: {', '.join(parts)}"


def write_migration_files(
    migrations: Iterable[MigrationFile],
    sql_dir: Path | str,
    sequence: MigrationSequence | None = None,
    replace_existing: bool = False,
) -> list[Path]:
    """
    Write migration files to ``sql_dir``.

    Args:
        migrations: Files in execution order
        sql_dir: Target directory
        sequence: Prefix source, a fresh one by default
        replace_existing: Overwrite files that share a slug

    Returns:
        Paths of the written files
    """
    writer = MigrationFileWriter(sql_dir, sequence=sequence, replace_existing=replace_existing)
    return writer.write_all(migrations)


__all__ = [
    "EnumTypeTracker",
    "MigrationFile",
    "MigrationFileWriter",
    "MigrationSequence",
    "flatten",
    "full_migration_files",
    "generate_sql",
    "generate_sql_string",
    "plan_migration_files",
    "write_migration_files",
]
