# schemaplan Examples

# Meant to be run cell by cell with an editor that supports "# %%"-style cells, or as a script.
# Use the comment as cell definition

# Load requirements

import os
from pathlib import Path

from schemaplan import build_migration_plan, generate_diff_sql, generate_sql, hash_migration_plan, load_models
from schemaplan.migrations import load_snapshot, save_snapshot, write_migration_files
from schemaplan.migrations.diff import diff_migration_files

EXAMPLE_DIR = Path(__file__).parent
DIALECT = os.getenv("SCHEMAPLAN_DIALECT", "postgres")


# Load the JSON model definitions (one model per file)
models = load_models(EXAMPLE_DIR / "models")
plan = build_migration_plan(models, DIALECT)
print(plan)
print("Plan hash:", hash_migration_plan(plan))


# The full, CREATE-only migration: tables, then foreign keys, then indexes
for statement in generate_sql(plan):
    print(statement)


# Diff against the last applied plan. Without a snapshot this is the full migration.
snapshot_path = EXAMPLE_DIR / "models" / f".schemaplan.{DIALECT}.json"
snapshot = load_snapshot(snapshot_path)
previous = snapshot.plan if snapshot else None
print("\n".join(generate_diff_sql(previous, plan)))


# Write the migration as .sql files and record the plan as applied
paths = write_migration_files(diff_migration_files(previous, plan), EXAMPLE_DIR / "sql")
for path in paths:
    print("Written:", path.name)
save_snapshot(snapshot_path, plan)


# Same models for another dialect
for statement in generate_sql(build_migration_plan(models, "sqlite")):
    print(statement)
