"""
Migration settings.

Provides the immutable configuration container the CLI builds from its
options and environment variables.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .migrations.snapshot import default_snapshot_path
from .types import Dialect

# Environment variables read by the CLI
ENV_DIALECT = "SCHEMAPLAN_DIALECT"
ENV_MODELS_DIR = "SCHEMAPLAN_MODELS_DIR"
ENV_SQL_DIR = "SCHEMAPLAN_SQL_DIR"
ENV_STATE = "SCHEMAPLAN_STATE"


@dataclass(frozen=True)
class MigrationSettings:
    """
    Immutable configuration for one migration run.

    Attributes:
        dialect: Target SQL dialect.
        models_dir: Directory holding the JSON model definitions.
        sql_dir: Directory receiving generated ``.sql`` files.
        state_path: Explicit snapshot path; None uses the dialect default.
    """

    dialect: Dialect = Dialect.POSTGRES
    models_dir: Path = Path("models")
    sql_dir: Path = Path("sql")
    state_path: Path | None = None

    @property
    def snapshot_path(self) -> Path:
        """Snapshot file for this dialect, ``<models_dir>/.schemaplan.<dialect>.json`` by default."""
        return self.state_path or default_snapshot_path(self.models_dir, self.dialect)


__all__ = ["ENV_DIALECT", "ENV_MODELS_DIR", "ENV_SQL_DIR", "ENV_STATE", "MigrationSettings"]
