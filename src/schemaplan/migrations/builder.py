"""
Migration plan builder.

This module turns a model set into a ``MigrationPlan`` for one dialect.
Building is a pure function of its input: the same models (in the same
declaration order) always produce an equal plan, which is what makes
diffing and hashing meaningful.
"""

import logging
from collections.abc import Mapping
from typing import Any

from ..exceptions import ModelDefinitionError, UnsupportedDialectError
from ..models import ModelDefinition, parse_model_set
from ..types import Dialect, IndexType
from .inference import infer_column
from .plan import IndexPlan, MigrationPlan, TablePlan

logger = logging.getLogger(__name__)


def resolve_dialect(dialect: Dialect | str) -> Dialect:
    """
    Coerce a dialect tag to ``Dialect``.

    Raises:
        UnsupportedDialectError: If the tag names no supported dialect
    """
    try:
        return Dialect(dialect)
    except ValueError:
        raise UnsupportedDialectError(str(dialect)) from None


class PlanBuilder:
    """
    Builds a ``MigrationPlan`` from model definitions.

    The builder first collects schema-wide metadata (model to table, table
    to primary key) so that ``*_id`` attributes can be resolved to foreign
    keys regardless of declaration order, then infers every table.
    """

    def __init__(self, models: Mapping[str, ModelDefinition | Mapping[str, Any]]):
        """
        Initialize the builder with a model set.

        Args:
            models: Ordered mapping of model name to definition or plain dict

        Raises:
            ModelDefinitionError: If a definition is invalid or two models
                resolve to the same table
        """
        self.models = parse_model_set(models)
        self.model_tables: dict[str, str] = {}
        self.primary_keys: dict[str, str] = {}

        for model_name, model in self.models.items():
            table = model.get_table_name()
            if table in self.primary_keys:
                raise ModelDefinitionError(
                    f"Models {self._model_for_table(table)!r} and {model_name!r} both map to table {table!r}",
                    model=model_name,
                )
            self.model_tables[model_name] = table
            self.primary_keys[table] = model.get_primary_key()

    def _model_for_table(self, table: str) -> str | None:
        for model_name, model_table in self.model_tables.items():
            if model_table == table:
                return model_name
        return None

    def build(self, dialect: Dialect | str) -> MigrationPlan:
        """
        Build the plan for ``dialect``.

        Returns:
            MigrationPlan with one table per model, in declaration order
        """
        plan = MigrationPlan(dialect=resolve_dialect(dialect))
        for model_name, model in self.models.items():
            plan.tables.append(self._build_table(model_name, model))
        logger.debug(f"Built {plan.dialect.value} plan with {len(plan.tables)} table(s)")
        return plan

    def _build_table(self, model_name: str, model: ModelDefinition) -> TablePlan:
        """
        Infer the table plan of a single model.

        Args:
            model_name: Key of the model in the model set
            model: The model definition

        Returns:
            TablePlan with inferred columns and derived indexes
        """
        table = self.model_tables[model_name]
        primary_key = self.primary_keys[table]
        table_plan = TablePlan(table=table)

        for attr_name, attribute in model.attributes.items():
            column = infer_column(
                attr_name,
                attribute,
                is_primary_key=attr_name == primary_key,
                model_tables=self.model_tables,
                primary_keys=self.primary_keys,
            )
            table_plan.columns.append(column)

        # Composite indexes declared on the model
        for index in model.indexes:
            table_plan.indexes.append(IndexPlan(name=index.name, columns=list(index.columns), type=IndexType.INDEX))

        # Single-column unique indexes from attribute flags
        for column in table_plan.columns:
            if column.is_unique and not column.is_primary_key:
                table_plan.indexes.append(
                    IndexPlan(name=f"{column.name}_unique", columns=[column.name], type=IndexType.UNIQUE)
                )

        return table_plan


def build_migration_plan(
    models: Mapping[str, ModelDefinition | Mapping[str, Any]],
    dialect: Dialect | str,
) -> MigrationPlan:
    """
    Convenience function to build a plan.

    Args:
        models: Ordered mapping of model name to definition or plain dict
        dialect: Target dialect

    Returns:
        MigrationPlan representing the models
    """
    return PlanBuilder(models).build(dialect)


__all__ = ["PlanBuilder", "build_migration_plan", "resolve_dialect"]
