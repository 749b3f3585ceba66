"""
Additive-only diffing between two migration plans.

The diff evolves a previous plan into a new one using only additions:
new tables (with their enum types, foreign keys and indexes), new columns
on existing tables (with their enum types and foreign keys) and new
indexes. Tables, columns and indexes that exist only in the previous plan
are never dropped, and existing columns are never altered. Those changes
are reported as ``SkippedChange`` entries for manual review instead.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from ..drivers import DialectDriver, get_dialect_driver
from .generator import EnumTypeTracker, MigrationFile, flatten, full_migration_files, plan_migration_files
from .plan import ColumnPlan, MigrationPlan, TablePlan, json_default

logger = logging.getLogger(__name__)

# Returned instead of an empty list when the plans need no migration
NO_CHANGES = "-- No changes detected"


@dataclass(frozen=True)
class SkippedChange:
    """
    A destructive change the additive-only diff deliberately ignores.

    Attributes:
        kind: ``drop_table``, ``drop_column``, ``drop_index`` or ``alter_column``
        table: Affected table
        name: Affected column or index, None for whole tables
        statement: The statement that would apply the change; review before use
    """

    kind: str
    table: str
    name: str | None
    statement: str

    def describe(self) -> str:
        target = f"{self.table}.{self.name}" if self.name else self.table
        return f"{self.kind.replace('_', ' ')} {target}"


def _persisted(value: Any) -> Any:
    """A default as it reads back from a snapshot: dates and decimals become strings."""
    if isinstance(value, (date, Decimal)):
        return json_default(value)
    return value


def columns_are_different(previous: ColumnPlan, current: ColumnPlan) -> bool:
    """Whether a column kept its name but changed its definition."""
    if (
        previous.type != current.type
        or previous.is_nullable != current.is_nullable
        or previous.has_default != current.has_default
        or _persisted(previous.default_value) != _persisted(current.default_value)
        or previous.is_unique != current.is_unique
    ):
        return True
    if previous.is_enum or current.is_enum:
        return sorted(previous.enum_values or []) != sorted(current.enum_values or [])
    return False


class PlanDiff:
    """
    Computes the additive migration from ``previous`` to ``current``.

    When there is no previous plan, or it targets another dialect, the diff
    is the full migration of ``current``.
    """

    def __init__(self, previous: MigrationPlan | None, current: MigrationPlan):
        self.previous = previous
        self.current = current
        self.driver: DialectDriver = get_dialect_driver(current.dialect)

    @property
    def is_full_rebuild(self) -> bool:
        return self.previous is None or self.previous.dialect != self.current.dialect

    def migration_files(self) -> list[MigrationFile]:
        """
        Group the additive migration into files.

        Returns:
            Files in execution order; empty when nothing changed
        """
        if self.is_full_rebuild:
            return plan_migration_files(self.current)

        previous = self.previous
        enums = EnumTypeTracker(
            self.driver,
            known=[self.driver.enum_type_name(c) for t in previous.tables for c in t.columns if c.is_enum],
        )

        new_tables = [t for t in self.current.tables if previous.get_table(t.table) is None]
        for table in new_tables:
            logger.info(f"Detected new table: {table.table}")
        files = full_migration_files(self.driver, new_tables, enums)

        for table in self.current.tables:
            previous_table = previous.get_table(table.table)
            if previous_table is None:
                continue
            changes = self._alter_table_file(previous_table, table, enums)
            if changes:
                files.append(changes)

        return files

    def _alter_table_file(self, previous: TablePlan, current: TablePlan, enums: EnumTypeTracker) -> MigrationFile:
        """New columns, then new indexes, of one existing table."""
        changes = MigrationFile(slug=f"alter-{current.table}-table")
        previous_columns = {c.name for c in previous.columns}
        previous_indexes = {i.key for i in previous.indexes}

        for column in current.columns:
            if column.name in previous_columns:
                continue
            logger.info(f"Detected new column: {current.table}.{column.name}")
            changes.statements.extend(enums.statements_for([column]))
            changes.statements.append(self.driver.add_column(current.table, column))
            if column.references is not None:
                statement = self.driver.add_foreign_key(
                    current.table, column.name, column.references.table, column.references.column
                )
                if statement:
                    changes.statements.append(statement)

        for index in current.indexes:
            if index.key in previous_indexes:
                continue
            logger.info(f"Detected new index: {index.name} in {current.table}")
            changes.statements.append(self.driver.create_index(current.table, index))

        return changes

    def statements(self) -> list[str]:
        """
        Render the additive migration.

        Returns:
            Ordered statements, or ``[NO_CHANGES]`` when an incremental
            diff found nothing to do. A full rebuild is returned verbatim.
        """
        statements = flatten(self.migration_files())
        if self.is_full_rebuild:
            return statements

        for skipped in self.skipped_changes():
            logger.warning(f"Skipping destructive change: {skipped.describe()}")
        if not statements:
            return [NO_CHANGES]
        return statements

    def skipped_changes(self) -> list[SkippedChange]:
        """
        List the removals and alterations the diff does not apply.

        Returns:
            Skipped changes in table order; empty for a full rebuild
        """
        if self.is_full_rebuild:
            return []

        skipped: list[SkippedChange] = []
        current_tables = {t.table: t for t in self.current.tables}
        for previous_table in self.previous.tables:
            table = previous_table.table
            current = current_tables.get(table)
            if current is None:
                skipped.append(SkippedChange("drop_table", table, None, self.driver.drop_table(table)))
                continue

            current_indexes = {i.key for i in current.indexes}
            for index in previous_table.indexes:
                if index.key not in current_indexes:
                    skipped.append(
                        SkippedChange("drop_index", table, index.name, self.driver.drop_index(table, index.name))
                    )

            for column in previous_table.columns:
                current_column = current.get_column(column.name)
                if current_column is None:
                    skipped.append(
                        SkippedChange("drop_column", table, column.name, self.driver.drop_column(table, column.name))
                    )
                elif columns_are_different(column, current_column):
                    skipped.append(
                        SkippedChange(
                            "alter_column", table, column.name, self.driver.modify_column(table, current_column)
                        )
                    )
        return skipped


def generate_diff_sql(previous: MigrationPlan | None, current: MigrationPlan) -> list[str]:
    """
    Render the additive migration from ``previous`` to ``current``.

    Args:
        previous: Last applied plan, or None when there is none
        current: Plan computed from the current models

    Returns:
        Ordered statements; ``[NO_CHANGES]`` when nothing needs to change
    """
    return PlanDiff(previous, current).statements()


def generate_diff_sql_string(previous: MigrationPlan | None, current: MigrationPlan) -> str:
    """``generate_diff_sql`` joined into a single script."""
    return "\n".join(generate_diff_sql(previous, current))


def diff_migration_files(previous: MigrationPlan | None, current: MigrationPlan) -> list[MigrationFile]:
    """File grouping of the additive migration, for ``write_migration_files``."""
    return PlanDiff(previous, current).migration_files()


def detect_skipped_changes(previous: MigrationPlan | None, current: MigrationPlan) -> list[SkippedChange]:
    """Destructive changes between the plans that the diff will not apply."""
    return PlanDiff(previous, current).skipped_changes()


__all__ = [
    "NO_CHANGES",
    "PlanDiff",
    "SkippedChange",
    "columns_are_different",
    "detect_skipped_changes",
    "diff_migration_files",
    "generate_diff_sql",
    "generate_diff_sql_string",
]
