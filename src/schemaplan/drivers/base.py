"""
Base Dialect Driver Interface.

Defines the interface every SQL dialect implements and the rendering that
all three dialects share. Drivers are stateless: they turn normalized plan
objects into literal DDL strings and never touch a database.

Operations with no equivalent in a dialect return an empty string (or, for
``modify_column`` on SQLite, a SQL comment). Callers filter empty results
before execution.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING

from ..types import Dialect, IndexType
from ..utils import quote_literal

if TYPE_CHECKING:
    from ..migrations.plan import ColumnPlan, IndexPlan, TablePlan

MIGRATIONS_TABLE = "migrations"


def format_datetime(value: date) -> str:
    """
    Format a date default as ISO-8601.

    Aware datetimes are converted to UTC and rendered with a ``Z`` suffix
    and millisecond precision; naive datetimes and plain dates keep their
    own ISO form.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
            return value.isoformat(timespec="milliseconds") + "Z"
        return value.isoformat(timespec="milliseconds")
    return value.isoformat()


class DialectDriver(ABC):
    """
    Abstract base class for dialect drivers.

    Subclasses provide identifier quoting, the type mapping and the
    bookkeeping DDL; statement layout is shared.
    """

    dialect: Dialect
    # Parameter placeholder used by ``record_migration_query``
    placeholder: str = "?"

    # Abstract methods that must be implemented

    @abstractmethod
    def quote_identifier(self, name: str) -> str:
        """Quote a table, column or type name."""
        ...

    @abstractmethod
    def column_type(self, column: ColumnPlan) -> str:
        """SQL type of a regular (non primary key) column."""
        ...

    @abstractmethod
    def migrations_table_ddl(self) -> str:
        """DDL creating the bookkeeping table if it does not exist."""
        ...

    @abstractmethod
    def modify_column(self, table: str, column: ColumnPlan) -> str:
        """Statement changing an existing column to match ``column``."""
        ...

    # Hooks with a common default

    def primary_key_type(self, column: ColumnPlan) -> str:
        """SQL type of a primary key column."""
        return self.column_type(column)

    def auto_increment_clause(self, column: ColumnPlan) -> str:
        """Clause placed after ``PRIMARY KEY`` for auto-incrementing keys."""
        return ""

    def boolean_literal(self, value: bool) -> str:
        return "1" if value else "0"

    def inline_reference(self, column: ColumnPlan) -> str:
        """Foreign key clause rendered inside a column definition, if any."""
        return ""

    def enum_type_name(self, column: ColumnPlan) -> str:
        """Name of the standalone enum type backing ``column``."""
        return f"{column.name}_type"

    def enum_literals(self, values: list[str]) -> str:
        return ", ".join(quote_literal(v) for v in values)

    def default_value_clause(self, column: ColumnPlan) -> str:
        """
        Render the ``default ...`` clause of a column.

        Returns:
            The clause, or an empty string when the column has no default
        """
        if not column.has_default or column.default_value is None:
            return ""

        value = column.default_value
        if isinstance(value, str):
            return f"default {quote_literal(value)}"
        if isinstance(value, bool):
            return f"default {self.boolean_literal(value)}"
        if isinstance(value, (datetime, date)):
            return f"default '{format_datetime(value)}'"
        return f"default {value}"

    def create_enum_type(self, name: str, values: list[str]) -> str:
        """Standalone enum type creation. Empty for dialects with inline enums."""
        return ""

    def drop_enum_type(self, name: str) -> str:
        """Standalone enum type removal. Empty for dialects with inline enums."""
        return ""

    # Shared statement rendering

    def render_column(self, column: ColumnPlan) -> str:
        """Render a column definition as used inside ``CREATE TABLE``."""
        type_sql = self.primary_key_type(column) if column.is_primary_key else self.column_type(column)
        parts = [self.quote_identifier(column.name), type_sql]

        if column.is_primary_key:
            parts.append("PRIMARY KEY")
            auto_increment = self.auto_increment_clause(column)
            if auto_increment:
                parts.append(auto_increment)

        parts.extend(self._column_constraints(column))
        return " ".join(parts)

    def _column_constraints(self, column: ColumnPlan) -> list[str]:
        parts = []
        if not column.is_nullable and not column.is_primary_key:
            parts.append("not null")

        default_value = self.default_value_clause(column)
        if default_value:
            parts.append(default_value)

        reference = self.inline_reference(column)
        if reference:
            parts.append(reference)
        return parts

    def create_table(self, table: TablePlan) -> str:
        columns = ",\n  ".join(self.render_column(c) for c in table.columns)
        return f"CREATE TABLE {self.quote_identifier(table.table)} (\n  {columns}\n);"

    def index_name(self, table: str, index_name: str) -> str:
        """Table-qualified index name, unique across the whole schema."""
        return f"{table}_{index_name}"

    def create_index(self, table: str, index: IndexPlan) -> str:
        kind = "UNIQUE " if index.type == IndexType.UNIQUE else ""
        columns = ", ".join(self.quote_identifier(c) for c in index.columns)
        return f"CREATE {kind}INDEX {self.index_name(table, index.name)} ON {self.quote_identifier(table)} ({columns});"

    def add_foreign_key(self, table: str, column: str, ref_table: str, ref_column: str) -> str:
        return (
            f"ALTER TABLE {self.quote_identifier(table)} ADD CONSTRAINT {table}_{column}_fk "
            f"FOREIGN KEY ({self.quote_identifier(column)}) "
            f"REFERENCES {self.quote_identifier(ref_table)}({self.quote_identifier(ref_column)});"
        )

    def add_column(self, table: str, column: ColumnPlan) -> str:
        parts = [self.quote_identifier(column.name), self.column_type(column)]
        parts.extend(self._column_constraints(column))
        return f"ALTER TABLE {self.quote_identifier(table)} ADD COLUMN {' '.join(parts)};"

    def drop_column(self, table: str, column: str) -> str:
        return f"ALTER TABLE {self.quote_identifier(table)} DROP COLUMN {self.quote_identifier(column)};"

    def drop_index(self, table: str, index_name: str) -> str:
        return f"DROP INDEX IF EXISTS {self.index_name(table, index_name)};"

    def drop_table(self, table: str) -> str:
        return f"DROP TABLE IF EXISTS {self.quote_identifier(table)};"

    # Bookkeeping queries

    def executed_migrations_query(self) -> str:
        return f"SELECT migration FROM {MIGRATIONS_TABLE} ORDER BY executed_at"

    def record_migration_query(self) -> str:
        return f"INSERT INTO {MIGRATIONS_TABLE} (migration) VALUES ({self.placeholder})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


__all__ = ["MIGRATIONS_TABLE", "DialectDriver", "format_datetime"]
