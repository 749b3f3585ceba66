"""
PostgreSQL dialect driver.

Enums become native types (``CREATE TYPE ... AS ENUM``) referenced by
name from the column; integral primary keys use SERIAL/BIGSERIAL.
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
    ColumnType.BOOLEAN: "boolean",
    ColumnType.INTEGER: "integer",
    ColumnType.BIGINT: "bigint",
    ColumnType.FLOAT: "real",
    ColumnType.DOUBLE: "double precision",
    ColumnType.DECIMAL: "decimal(10,2)",
    ColumnType.DATE: "date",
    ColumnType.DATETIME: "timestamp",
    ColumnType.JSON: "jsonb",
}

_SERIAL_TYPES: dict[ColumnType, str] = {
    ColumnType.INTEGER: "SERIAL",
    ColumnType.BIGINT: "BIGSERIAL",
}


class PostgresDriver(DialectDriver):
    """Renders DDL for PostgreSQL."""

    dialect = Dialect.POSTGRES
    placeholder = "$1"

    def quote_identifier(self, name: str) -> str:
        return f'"{name}"'

    def column_type(self, column: ColumnPlan) -> str:
        if column.type == ColumnType.ENUM:
            return self.enum_type_name(column) if column.is_enum else "text"
        return _TYPE_MAP.get(column.type, "text")

    def primary_key_type(self, column: ColumnPlan) -> str:
        return _SERIAL_TYPES.get(column.type) or self.column_type(column)

    def boolean_literal(self, value: bool) -> str:
        return "true" if value else "false"

    def create_enum_type(self, name: str, values: list[str]) -> str:
        return f"CREATE TYPE {self.quote_identifier(name)} AS ENUM ({self.enum_literals(values)});"

    def drop_enum_type(self, name: str) -> str:
        return f"DROP TYPE IF EXISTS {self.quote_identifier(name)} CASCADE;"

    def drop_table(self, table: str) -> str:
        return f"DROP TABLE IF EXISTS {self.quote_identifier(table)} CASCADE;"

    def modify_column(self, table: str, column: ColumnPlan) -> str:
        return (
            f"ALTER TABLE {self.quote_identifier(table)} ALTER COLUMN {self.quote_identifier(column.name)} "
            f"TYPE {self.column_type(column)};"
        )

    def migrations_table_ddl(self) -> str:
        return (
            f"CREATE TABLE IF NOT EXISTS {MIGRATIONS_TABLE} (\n"
            "  id SERIAL PRIMARY KEY,\n"
            "  migration VARCHAR(255) NOT NULL UNIQUE,\n"
            "  executed_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP\n"
            ");"
        )
