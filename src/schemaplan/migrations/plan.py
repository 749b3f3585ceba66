"""
Migration plan data model.

A ``MigrationPlan`` is the normalized, in-memory representation of a full
database schema for one dialect. Plans carry no identity: two plans are the
same plan when they are structurally equal.

The ``to_dict`` / ``from_dict`` pairs produce the JSON form used by the
snapshot store and the plan hasher. Keys follow the camelCase names of the
persisted format and optional keys are omitted when absent.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from ..types import ColumnType, Dialect, IndexType

PrimitiveDefault = str | int | float | bool | Decimal | date | datetime


@dataclass(frozen=True)
class ForeignKeyRef:
    """Target of an inferred foreign key."""

    table: str
    column: str

    def to_dict(self) -> dict[str, str]:
        return {"table": self.table, "column": self.column}


@dataclass
class ColumnPlan:
    """
    Normalized description of one column.

    Attributes:
        name: Column name
        type: Normalized column type
        is_primary_key: Whether this is the table's primary key
        is_unique: Whether the attribute was declared unique
        is_nullable: Whether the column accepts NULL
        has_default: Whether the attribute declared a default
        default_value: The default, when it is a supported primitive
        references: Foreign key target, if inferred
        enum_values: Ordered enum members, required for enum columns
    """

    name: str
    type: ColumnType
    is_primary_key: bool = False
    is_unique: bool = False
    is_nullable: bool = True
    has_default: bool = False
    default_value: PrimitiveDefault | None = None
    references: ForeignKeyRef | None = None
    enum_values: list[str] | None = None

    @property
    def is_enum(self) -> bool:
        """True for enum columns that carry at least one value."""
        return self.type == ColumnType.ENUM and bool(self.enum_values)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "type": self.type.value,
            "isPrimaryKey": self.is_primary_key,
            "isUnique": self.is_unique,
            "isNullable": self.is_nullable,
            "hasDefault": self.has_default,
        }
        if self.default_value is not None:
            data["defaultValue"] = self.default_value
        if self.references is not None:
            data["references"] = self.references.to_dict()
        if self.enum_values is not None:
            data["enumValues"] = list(self.enum_values)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ColumnPlan":
        references = data.get("references")
        enum_values = data.get("enumValues")
        return cls(
            name=data["name"],
            type=ColumnType(data["type"]),
            is_primary_key=bool(data.get("isPrimaryKey", False)),
            is_unique=bool(data.get("isUnique", False)),
            is_nullable=bool(data.get("isNullable", True)),
            has_default=bool(data.get("hasDefault", False)),
            default_value=data.get("defaultValue"),
            references=ForeignKeyRef(references["table"], references["column"]) if references else None,
            enum_values=[str(v) for v in enum_values] if enum_values is not None else None,
        )


@dataclass
class IndexPlan:
    """
    An index on one table.

    Attributes:
        name: Index name, unqualified. Drivers render it as ``<table>_<name>``.
        columns: Ordered column names
        type: Plain index or unique index
    """

    name: str
    columns: list[str]
    type: IndexType = IndexType.INDEX

    @property
    def key(self) -> str:
        """Composite identity used when comparing indexes across plans."""
        return f"{self.type.value}:{self.name}:{','.join(self.columns)}"

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "columns": list(self.columns), "type": self.type.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IndexPlan":
        return cls(name=data["name"], columns=list(data["columns"]), type=IndexType(data.get("type", "index")))


@dataclass
class TablePlan:
    """Columns and indexes of one table, both in declaration order."""

    table: str
    columns: list[ColumnPlan] = field(default_factory=list)
    indexes: list[IndexPlan] = field(default_factory=list)

    def get_column(self, name: str) -> ColumnPlan | None:
        """Get a column by name."""
        for column in self.columns:
            if column.name == name:
                return column
        return None

    @property
    def primary_key(self) -> ColumnPlan | None:
        for column in self.columns:
            if column.is_primary_key:
                return column
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "table": self.table,
            "columns": [c.to_dict() for c in self.columns],
            "indexes": [i.to_dict() for i in self.indexes],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TablePlan":
        return cls(
            table=data["table"],
            columns=[ColumnPlan.from_dict(c) for c in data.get("columns", [])],
            indexes=[IndexPlan.from_dict(i) for i in data.get("indexes", [])],
        )


@dataclass
class MigrationPlan:
    """
    Normalized schema for one dialect.

    This class is the input of the SQL generator, the diff engine and the
    plan hasher.

    Attributes:
        dialect: Target SQL dialect
        tables: Tables in model declaration order
    """

    dialect: Dialect
    tables: list[TablePlan] = field(default_factory=list)

    def get_table(self, name: str) -> TablePlan | None:
        """Get a table by name."""
        for table in self.tables:
            if table.table == name:
                return table
        return None

    @property
    def table_names(self) -> list[str]:
        return [t.table for t in self.tables]

    def to_dict(self) -> dict[str, Any]:
        return {"dialect": self.dialect.value, "tables": [t.to_dict() for t in self.tables]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MigrationPlan":
        """
        Rebuild a plan from its JSON form.

        Raises:
            AttributeError, KeyError, TypeError, ValueError: If the data is not a plan
        """
        return cls(
            dialect=Dialect(data["dialect"]),
            tables=[TablePlan.from_dict(t) for t in data["tables"]],
        )

    def __repr__(self) -> str:
        return f"MigrationPlan(dialect={self.dialect.value!r}, tables={self.table_names})"


def json_default(value: Any) -> Any:
    """
    ``json.dumps`` fallback for plan leaves that JSON cannot represent.

    Dates serialize as ISO-8601 and decimals as strings. Anything else is a
    programming error and raises ``TypeError``.
    """
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


__all__ = [
    "ColumnPlan",
    "ForeignKeyRef",
    "IndexPlan",
    "MigrationPlan",
    "PrimitiveDefault",
    "TablePlan",
    "json_default",
]
