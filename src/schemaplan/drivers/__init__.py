"""
schemaplan dialect drivers.

Provides the PostgreSQL, MySQL and SQLite driver implementations and the
dialect tag dispatch.
"""

from ..exceptions import UnsupportedDialectError
from ..types import Dialect
from .base import MIGRATIONS_TABLE, DialectDriver
from .mysql import MySQLDriver
from .postgres import PostgresDriver
from .sqlite import SQLiteDriver

_DRIVERS: dict[Dialect, type[DialectDriver]] = {
    Dialect.POSTGRES: PostgresDriver,
    Dialect.MYSQL: MySQLDriver,
    Dialect.SQLITE: SQLiteDriver,
}


def get_dialect_driver(dialect: Dialect | str) -> DialectDriver:
    """
    Return the driver for a dialect tag.

    Raises:
        UnsupportedDialectError: If the tag names no supported dialect
    """
    try:
        return _DRIVERS[Dialect(dialect)]()
    except ValueError:
        raise UnsupportedDialectError(str(dialect)) from None


__all__ = [
    "MIGRATIONS_TABLE",
    "DialectDriver",
    "MySQLDriver",
    "PostgresDriver",
    "SQLiteDriver",
    "get_dialect_driver",
]
