"""
Persisted plan snapshots.

A snapshot records the last plan that was applied for a dialect, as JSON:

    {"plan": {...}, "hash": "<sha256>", "updatedAt": "<ISO-8601>"}

It is read once per diff and replaced wholesale after a successful apply.
Reading, diffing and writing a snapshot is not atomic: callers must not run
two migrations against the same snapshot file at the same time.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..types import Dialect
from .hashing import hash_migration_plan
from .plan import MigrationPlan, json_default

logger = logging.getLogger(__name__)

SNAPSHOT_PREFIX = ".schemaplan"


@dataclass
class PlanSnapshot:
    """
    A persisted plan.

    Attributes:
        plan: The applied plan
        hash: ``hash_migration_plan(plan)`` at the time it was saved
        updated_at: When the snapshot was written, if recorded
    """

    plan: MigrationPlan
    hash: str
    updated_at: datetime | None = None

    @property
    def is_stale(self) -> bool:
        """True when the stored hash no longer matches the stored plan."""
        return self.hash != hash_migration_plan(self.plan)

    def matches(self, plan: MigrationPlan) -> bool:
        """Whether ``plan`` is the plan recorded by this snapshot."""
        return self.hash == hash_migration_plan(plan)

    def to_dict(self) -> dict[str, Any]:
        return {
            "plan": self.plan.to_dict(),
            "hash": self.hash,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlanSnapshot":
        """
        Parse a snapshot, also accepting a bare plan.

        Raises:
            KeyError, TypeError, ValueError: If the data holds no plan
        """
        if "plan" in data:
            plan = MigrationPlan.from_dict(data["plan"])
            updated_at = data.get("updatedAt")
            return cls(
                plan=plan,
                hash=data.get("hash") or hash_migration_plan(plan),
                updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
            )
        plan = MigrationPlan.from_dict(data)
        return cls(plan=plan, hash=hash_migration_plan(plan))


def default_snapshot_path(directory: Path | str, dialect: Dialect | str) -> Path:
    """Dialect-qualified snapshot location: ``<dir>/.schemaplan.<dialect>.json``."""
    return Path(directory) / f"{SNAPSHOT_PREFIX}.{Dialect(dialect).value}.json"


def load_snapshot(path: Path | str) -> PlanSnapshot | None:
    """
    Read a snapshot file.

    A missing, unreadable or malformed file is treated as "no previous
    plan" and logged, never raised.

    Returns:
        The snapshot, or None
    """
    path = Path(path)
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return PlanSnapshot.from_dict(data)
    except (OSError, json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as e:
        logger.warning(f"Ignoring unreadable plan snapshot {path}: {e}")
        return None


def save_snapshot(path: Path | str, plan: MigrationPlan, now: datetime | None = None) -> PlanSnapshot:
    """
    Replace the snapshot at ``path`` with ``plan``.

    The file is written next to its destination and moved into place, so
    readers never observe a partially written snapshot.

    Returns:
        The snapshot that was written
    """
    path = Path(path)
    snapshot = PlanSnapshot(
        plan=plan,
        hash=hash_migration_plan(plan),
        updated_at=now or datetime.now(timezone.utc),
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    tmp_path.write_text(json.dumps(snapshot.to_dict(), indent=2, default=json_default) + "\n", encoding="utf-8")
    tmp_path.replace(path)
    logger.info(f"Saved plan snapshot {path} ({snapshot.hash[:12]})")
    return snapshot


__all__ = ["PlanSnapshot", "SNAPSHOT_PREFIX", "default_snapshot_path", "load_snapshot", "save_snapshot"]
