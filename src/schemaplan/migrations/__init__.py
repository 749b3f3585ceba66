"""
schemaplan migration system.

This package turns model definitions into SQL migrations:
- Plan building with type and foreign key inference
- Full CREATE-only migrations for a plan
- Additive-only diffs between two plans
- Canonical plan hashing and persisted snapshots

Usage:
    plan = build_migration_plan(models, "postgres")

    # First migration
    statements = generate_sql(plan)

    # Later migrations
    previous = load_snapshot(path)
    statements = generate_diff_sql(previous.plan if previous else None, plan)
    save_snapshot(path, plan)
"""

from .builder import PlanBuilder, build_migration_plan, resolve_dialect
from .diff import (
    NO_CHANGES,
    PlanDiff,
    SkippedChange,
    detect_skipped_changes,
    diff_migration_files,
    generate_diff_sql,
    generate_diff_sql_string,
)
from .generator import (
    MigrationFile,
    MigrationFileWriter,
    MigrationSequence,
    generate_sql,
    generate_sql_string,
    plan_migration_files,
    write_migration_files,
)
from .hashing import canonicalize, hash_migration_plan
from .inference import infer_column, infer_column_type
from .plan import ColumnPlan, ForeignKeyRef, IndexPlan, MigrationPlan, TablePlan
from .reset import generate_reset_sql
from .snapshot import PlanSnapshot, default_snapshot_path, load_snapshot, save_snapshot

__all__ = [
    # Plan
    "ColumnPlan",
    "ForeignKeyRef",
    "IndexPlan",
    "MigrationPlan",
    "TablePlan",
    # Building
    "PlanBuilder",
    "build_migration_plan",
    "infer_column",
    "infer_column_type",
    "resolve_dialect",
    # SQL
    "MigrationFile",
    "MigrationFileWriter",
    "MigrationSequence",
    "generate_sql",
    "generate_sql_string",
    "plan_migration_files",
    "write_migration_files",
    "generate_reset_sql",
    # Diff
    "NO_CHANGES",
    "PlanDiff",
    "SkippedChange",
    "detect_skipped_changes",
    "diff_migration_files",
    "generate_diff_sql",
    "generate_diff_sql_string",
    # Hashing and snapshots
    "PlanSnapshot",
    "canonicalize",
    "default_snapshot_path",
    "hash_migration_plan",
    "load_snapshot",
    "save_snapshot",
]
