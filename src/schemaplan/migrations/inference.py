"""
Type inference for model attributes.

Every attribute resolves to exactly one normalized column type. The rules
are tried in order and the first match wins:

1. Name heuristics (``*_id``, ``*_at``, ``is_*`` / ``has_*``)
2. Explicit enum values
3. Explicit declared type
4. Runtime type of the default value
5. Fallback: ``bigint`` for primary keys, ``string`` otherwise

Inference never fails.
"""

from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from ..models import AttributeDefinition
from ..types import ColumnType
from ..utils import capitalize_first
from .plan import ColumnPlan, ForeignKeyRef, PrimitiveDefault

# Longest default that still infers a varchar(255)-backed ``string``.
MAX_STRING_LENGTH = 255

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


def guess_type_from_name(name: str) -> ColumnType | None:
    """
    Guess a column type from naming conventions.

    Examples:
        guess_type_from_name("user_id")    # ColumnType.BIGINT
        guess_type_from_name("created_at") # ColumnType.DATETIME
        guess_type_from_name("is_active")  # ColumnType.BOOLEAN
        guess_type_from_name("title")      # None
    """
    if name.endswith("_id"):
        # Matches the bigint primary keys it points at
        return ColumnType.BIGINT
    if name.endswith("_at"):
        return ColumnType.DATETIME
    if name.startswith(("is_", "has_")):
        return ColumnType.BOOLEAN
    return None


def normalize_default_value(value: Any) -> PrimitiveDefault | None:
    """Keep ``value`` if it is a primitive the drivers can render, else ``None``."""
    if isinstance(value, (str, bool, int, float, Decimal, date, datetime)):
        return value
    return None


def type_from_default(value: Any) -> ColumnType | None:
    """
    Infer a column type from the runtime type of a default value.

    ``bool`` is checked before ``int`` and ``datetime`` before ``date``
    because of Python's subclass relationships.
    """
    if isinstance(value, bool):
        return ColumnType.BOOLEAN
    if isinstance(value, str):
        return ColumnType.TEXT if len(value) > MAX_STRING_LENGTH else ColumnType.STRING
    if isinstance(value, int):
        return ColumnType.INTEGER if _INT32_MIN <= value <= _INT32_MAX else ColumnType.BIGINT
    if isinstance(value, float):
        return ColumnType.FLOAT
    if isinstance(value, Decimal):
        return ColumnType.DECIMAL
    if isinstance(value, datetime):
        return ColumnType.DATETIME
    if isinstance(value, date):
        return ColumnType.DATE
    return None


def infer_column_type(name: str, attribute: AttributeDefinition, is_primary_key: bool = False) -> ColumnType:
    """Resolve the normalized type of one attribute."""
    inferred = guess_type_from_name(name)
    if inferred is not None:
        return inferred
    if attribute.enum_values:
        return ColumnType.ENUM
    if attribute.type is not None:
        return attribute.type
    inferred = type_from_default(normalize_default_value(attribute.default))
    if inferred is not None:
        return inferred
    return ColumnType.BIGINT if is_primary_key else ColumnType.STRING


def infer_reference(
    name: str,
    model_tables: Mapping[str, str],
    primary_keys: Mapping[str, str],
) -> ForeignKeyRef | None:
    """
    Infer a foreign key from a ``<model>_id`` attribute name.

    ``author_id`` references model ``Author`` if that model exists in the
    schema. This is a naming convention, not a declaration.

    Args:
        name: Attribute name
        model_tables: Model name to table name
        primary_keys: Table name to primary key column
    """
    if not name.endswith("_id"):
        return None
    model_name = capitalize_first(name[: -len("_id")])
    table = model_tables.get(model_name)
    if table is None:
        return None
    return ForeignKeyRef(table=table, column=primary_keys.get(table, "id"))


def infer_column(
    name: str,
    attribute: AttributeDefinition,
    is_primary_key: bool = False,
    model_tables: Mapping[str, str] | None = None,
    primary_keys: Mapping[str, str] | None = None,
) -> ColumnPlan:
    """
    Build the ``ColumnPlan`` for one attribute.

    Args:
        name: Attribute name
        attribute: Attribute definition
        is_primary_key: Whether the attribute is the table's primary key
        model_tables: Model name to table name, for foreign key inference
        primary_keys: Table name to primary key column, for foreign key inference

    Returns:
        ColumnPlan describing the column
    """
    column_type = infer_column_type(name, attribute, is_primary_key)
    references = None
    if model_tables is not None:
        references = infer_reference(name, model_tables, primary_keys or {})

    return ColumnPlan(
        name=name,
        type=column_type,
        is_primary_key=is_primary_key,
        is_unique=attribute.unique,
        # Inferred columns are always nullable; no "required" marker is honored.
        is_nullable=True,
        has_default=attribute.has_default,
        default_value=normalize_default_value(attribute.default),
        references=references,
        enum_values=list(attribute.enum_values) if column_type == ColumnType.ENUM else None,
    )


__all__ = [
    "MAX_STRING_LENGTH",
    "guess_type_from_name",
    "infer_column",
    "infer_column_type",
    "infer_reference",
    "normalize_default_value",
    "type_from_default",
]
