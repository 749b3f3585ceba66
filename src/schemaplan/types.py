"""
Type definitions for schemaplan.

This module contains the enums shared by the plan builder, the dialect
drivers and the diff engine: supported SQL dialects, normalized column
types and index kinds.
"""

from enum import StrEnum


class Dialect(StrEnum):
    """
    SQL dialect a migration plan is rendered for.

    - POSTGRES: native enum types, SERIAL/BIGSERIAL primary keys, jsonb
    - MYSQL: inline ENUM columns, AUTO_INCREMENT primary keys
    - SQLITE: loose typing, CHECK-constrained enums, AUTOINCREMENT
    """

    POSTGRES = "postgres"
    MYSQL = "mysql"
    SQLITE = "sqlite"


class ColumnType(StrEnum):
    """
    Normalized column types produced by type inference.

    Drivers translate each of these to a dialect-specific SQL type.

    Textual Types:
        - STRING: Short text, up to 255 characters
        - TEXT: Unbounded text

    Numeric Types:
        - INTEGER: 32-bit signed integer
        - BIGINT: 64-bit signed integer (primary and foreign keys)
        - FLOAT: Single precision floating point
        - DOUBLE: Double precision floating point
        - DECIMAL: Fixed precision decimal

    Other Types:
        - BOOLEAN: true/false
        - DATE: Calendar date
        - DATETIME: Timestamp
        - JSON: Structured document
        - ENUM: One of a fixed, ordered list of string values
    """

    STRING = "string"
    TEXT = "text"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    BIGINT = "bigint"
    FLOAT = "float"
    DOUBLE = "double"
    DECIMAL = "decimal"
    DATE = "date"
    DATETIME = "datetime"
    JSON = "json"
    ENUM = "enum"

    @property
    def is_integral(self) -> bool:
        """Whether the type can back an auto-incrementing primary key."""
        return self in (ColumnType.INTEGER, ColumnType.BIGINT)


class IndexType(StrEnum):
    """Kind of index: plain lookup index or uniqueness constraint."""

    INDEX = "index"
    UNIQUE = "unique"


__all__ = ["ColumnType", "Dialect", "IndexType"]
