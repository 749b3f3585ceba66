"""
MySQL dialect driver.

MySQL has no standalone enum types: enum columns are typed inline as
``ENUM(...)`` and ``create_enum_type`` / ``drop_enum_type`` are no-ops.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..types import ColumnType, Dialect
from .base import MIGRATIONS_TABLE, DialectDriver

if TYPE_CHECKING:
    from ..migrations.plan import ColumnPlan

_TYPE_MAP: dict[ColumnType, str] = {
    ColumnType.STRING: "varchar(255)",
    ColumnType.TEXT: "text",
    ColumnType.BOOLEAN: "tinyint(1)",
    ColumnType.INTEGER: "integer",
    ColumnType.BIGINT: "bigint",
    ColumnType.FLOAT: "real",
    ColumnType.DOUBLE: "double precision",
    ColumnType.DECIMAL: "decimal(10,2)",
    ColumnType.DATE: "date",
    ColumnType.DATETIME: "datetime",
    ColumnType.JSON: "json",
}


class MySQLDriver(DialectDriver):
    """Renders DDL for MySQL."""

    dialect = Dialect.MYSQL

    def quote_identifier(self, name: str) -> str:
        return f"`{name}`"

    def column_type(self, column: ColumnPlan) -> str:
        if column.type == ColumnType.ENUM:
            return f"ENUM({self.enum_literals(column.enum_values)})" if column.is_enum else "text"
        return _TYPE_MAP.get(column.type, "text")

    def auto_increment_clause(self, column: ColumnPlan) -> str:
        if column.is_primary_key and column.type.is_integral:
            return "AUTO_INCREMENT"
        return ""

    def drop_index(self, table: str, index_name: str) -> str:
        return f"DROP INDEX {self.index_name(table, index_name)} ON {self.quote_identifier(table)};"

    def modify_column(self, table: str, column: ColumnPlan) -> str:
        parts = [self.quote_identifier(column.name), self.column_type(column)]
        parts.extend(self._column_constraints(column))
        return f"ALTER TABLE {self.quote_identifier(table)} MODIFY COLUMN {' '.join(parts)};"

    def migrations_table_ddl(self) -> str:
        return (
            f"CREATE TABLE IF NOT EXISTS {MIGRATIONS_TABLE} (\n"
            "  id INT AUTO_INCREMENT PRIMARY KEY,\n"
            "  migration VARCHAR(255) NOT NULL UNIQUE,\n"
            "  executed_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP\n"
            ");"
        )
