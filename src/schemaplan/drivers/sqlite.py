"""
SQLite dialect driver.

SQLite stores most types loosely (TEXT, INTEGER, REAL), checks enums with a
CHECK constraint, and cannot add constraints to or retype columns of an
existing table. Foreign keys are therefore rendered inline in the column
definition, and ``modify_column`` returns a comment asking for manual
intervention.

Unlike the other drivers, SQLite has no separate foreign key pass:
``add_foreign_key`` returns an empty string instead of an
``ALTER TABLE ... ADD CONSTRAINT`` statement, which SQLite would reject.
Both the generator and the diff drop empty statements, so the reference
appears once, in ``CREATE TABLE`` or ``ADD COLUMN``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..types import ColumnType, Dialect
from .base import MIGRATIONS_TABLE, DialectDriver

if TYPE_CHECKING:
    from ..migrations.plan import ColumnPlan

_TYPE_MAP: dict[ColumnType, str] = {
    ColumnType.STRING: "TEXT",
    ColumnType.TEXT: "TEXT",
    ColumnType.BOOLEAN: "INTEGER",  # 0/1
    ColumnType.INTEGER: "INTEGER",
    ColumnType.BIGINT: "INTEGER",
    ColumnType.FLOAT: "REAL",
    ColumnType.DOUBLE: "REAL",
    ColumnType.DECIMAL: "REAL",
    ColumnType.DATE: "TEXT",
    ColumnType.DATETIME: "TEXT",
    ColumnType.JSON: "TEXT",
}


class SQLiteDriver(DialectDriver):
    """Renders DDL for SQLite."""

    dialect = Dialect.SQLITE

    def quote_identifier(self, name: str) -> str:
        return f'"{name}"'

    def column_type(self, column: ColumnPlan) -> str:
        if column.type == ColumnType.ENUM and column.is_enum:
            return f"TEXT CHECK ({self.quote_identifier(column.name)} IN ({self.enum_literals(column.enum_values)}))"
        return _TYPE_MAP.get(column.type, "TEXT")

    def auto_increment_clause(self, column: ColumnPlan) -> str:
        if column.is_primary_key and column.type.is_integral:
            return "AUTOINCREMENT"
        return ""

    def inline_reference(self, column: ColumnPlan) -> str:
        if column.references is None:
            return ""
        ref = column.references
        return f"REFERENCES {self.quote_identifier(ref.table)}({self.quote_identifier(ref.column)})"

    def add_foreign_key(self, table: str, column: str, ref_table: str, ref_column: str) -> str:
        # Rendered inline by create_table / add_column
        return ""

    def modify_column(self, table: str, column: ColumnPlan) -> str:
        return (
            f"-- SQLite cannot alter column {self.quote_identifier(table)}.{self.quote_identifier(column.name)} "
            f"in place; rebuild the table manually to change it to {self.column_type(column)}"
        )

    def migrations_table_ddl(self) -> str:
        return (
            f"CREATE TABLE IF NOT EXISTS {MIGRATIONS_TABLE} (\n"
            "  id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "  migration TEXT NOT NULL UNIQUE,\n"
            "  executed_at DATETIME DEFAULT CURRENT_TIMESTAMP\n"
            ");"
        )
