"""
schemaplan: SQL migration plans from declarative models.

Infers a dialect-specific schema plan from model definitions, renders it
as CREATE-only DDL for PostgreSQL, MySQL or SQLite, and evolves it with
additive-only diffs tracked by canonical plan hashes.
"""

__version__ = "0.1.0"

from .exceptions import ModelDefinitionError, SchemaPlanError, UnsupportedDialectError
from .loader import load_models
from .migrations import (
    NO_CHANGES,
    ColumnPlan,
    ForeignKeyRef,
    IndexPlan,
    MigrationPlan,
    PlanDiff,
    TablePlan,
    build_migration_plan,
    generate_diff_sql,
    generate_sql,
    hash_migration_plan,
    load_snapshot,
    save_snapshot,
)
from .models import AttributeDefinition, IndexDefinition, ModelDefinition
from .types import ColumnType, Dialect, IndexType

__all__ = [
    "__version__",
    # Models
    "AttributeDefinition",
    "IndexDefinition",
    "ModelDefinition",
    "load_models",
    # Types
    "ColumnType",
    "Dialect",
    "IndexType",
    # Plan
    "ColumnPlan",
    "ForeignKeyRef",
    "IndexPlan",
    "MigrationPlan",
    "TablePlan",
    "build_migration_plan",
    # SQL
    "NO_CHANGES",
    "PlanDiff",
    "generate_diff_sql",
    "generate_sql",
    "hash_migration_plan",
    "load_snapshot",
    "save_snapshot",
    # Exceptions
    "ModelDefinitionError",
    "SchemaPlanError",
    "UnsupportedDialectError",
]
