"""
Declarative model definitions.

A model set is an ordered mapping of model name to ``ModelDefinition``.
Definitions are plain data: the plan builder reads them, nothing here
talks to a database.

Example:
    User = ModelDefinition(
        name="User",
        attributes={
            "id": AttributeDefinition(),
            "email": AttributeDefinition(unique=True),
            "role": AttributeDefinition(enum_values=["admin", "member"]),
        },
        indexes=[IndexDefinition(name="email_role", columns=["email", "role"])],
    )
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .exceptions import ModelDefinitionError
from .types import ColumnType
from .utils import validate_identifier

_DEFINITION_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
    frozen=True,
)


class AttributeDefinition(BaseModel):
    """
    One model attribute.

    Attributes:
        default: Default value. Its runtime type drives type inference.
        unique: Whether the column gets a unique index.
        enum_values: Explicit, ordered enum members. Marks the column as enum.
        type: Explicit normalized type, used when no name heuristic applies.
    """

    model_config = _DEFINITION_CONFIG

    default: Any = None
    unique: bool = False
    enum_values: list[str] | None = Field(default=None, min_length=1)
    type: ColumnType | None = None

    @field_validator("enum_values", mode="before")
    @classmethod
    def _stringify_enum_values(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [str(v) for v in value]
        return value

    @model_validator(mode="after")
    def _check_enum_type(self) -> "AttributeDefinition":
        if self.type == ColumnType.ENUM and not self.enum_values:
            raise ValueError("type 'enum' requires a non-empty enum_values list")
        return self

    @property
    def has_default(self) -> bool:
        """True when a default was declared, even an explicit ``None``."""
        return "default" in self.model_fields_set


class IndexDefinition(BaseModel):
    """A named, possibly multi-column, index declared on a model."""

    model_config = _DEFINITION_CONFIG

    name: str
    columns: list[str] = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        validate_identifier(value, "index name")
        return value


class ModelDefinition(BaseModel):
    """
    Declarative definition of one model (one table).

    Attributes:
        name: Model name, e.g. ``"User"``
        table: Explicit table name. Defaults to the lowercased, pluralized name.
        primary_key: Primary key attribute. Defaults to ``"id"``.
        attributes: Ordered mapping of attribute name to definition
        indexes: Composite index declarations
    """

    model_config = _DEFINITION_CONFIG

    name: str
    table: str | None = None
    primary_key: str | None = None
    attributes: dict[str, AttributeDefinition] = Field(default_factory=dict)
    indexes: list[IndexDefinition] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        # The default table name and the index names derive from it
        validate_identifier(value, "model name")
        return value

    @field_validator("table")
    @classmethod
    def _check_table(cls, value: str | None) -> str | None:
        if value is not None:
            validate_identifier(value, "table name")
        return value

    @field_validator("primary_key")
    @classmethod
    def _check_primary_key(cls, value: str | None) -> str | None:
        if value is not None:
            validate_identifier(value, "primary key")
        return value

    @field_validator("attributes")
    @classmethod
    def _check_attribute_names(cls, value: dict[str, AttributeDefinition]) -> dict[str, AttributeDefinition]:
        for attr_name in value:
            validate_identifier(attr_name, "attribute name")
        return value

    def get_table_name(self) -> str:
        """Return the explicit table name or ``<name lowercased>s``."""
        return self.table or f"{self.name.lower()}s"

    def get_primary_key(self) -> str:
        """Return the declared primary key attribute, ``id`` by default."""
        return self.primary_key or "id"


def parse_model_set(models: Mapping[str, ModelDefinition | Mapping[str, Any]]) -> dict[str, ModelDefinition]:
    """
    Validate a model set, accepting definitions or plain dicts.

    A dict without a ``name`` takes its key as the model name. Declaration
    order of the mapping is preserved.

    Raises:
        ModelDefinitionError: If a definition fails validation
    """
    parsed: dict[str, ModelDefinition] = {}
    for key, definition in models.items():
        if isinstance(definition, ModelDefinition):
            parsed[key] = definition
            continue
        data = dict(definition)
        data.setdefault("name", key)
        try:
            parsed[key] = ModelDefinition.model_validate(data)
        except ValidationError as e:
            raise ModelDefinitionError(f"Invalid model definition {key!r}: {e}", model=key) from e
    return parsed


__all__ = ["AttributeDefinition", "IndexDefinition", "ModelDefinition", "parse_model_set"]
