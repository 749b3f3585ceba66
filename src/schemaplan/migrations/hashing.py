"""
Canonical fingerprints of migration plans.

The hash only depends on plan content: mapping keys are sorted at every
level before serialization, so the order in which keys were inserted
upstream does not matter. List order does matter.
"""

import hashlib
import json
from datetime import date
from typing import Any

from .plan import MigrationPlan, json_default


def canonicalize(value: Any) -> Any:
    """
    Recursively sort mapping keys, keeping list order.

    Dates and primitives are returned untouched.
    """
    if value is None or isinstance(value, (str, int, float, date)):
        return value
    if isinstance(value, (list, tuple)):
        return [canonicalize(v) for v in value]
    if isinstance(value, dict):
        return {key: canonicalize(value[key]) for key in sorted(value)}
    return value


def canonical_json(plan: MigrationPlan | dict[str, Any]) -> str:
    """
    Serialize a plan canonically.

    Raises:
        TypeError: If the plan holds a value JSON cannot represent
    """
    data = plan.to_dict() if isinstance(plan, MigrationPlan) else plan
    return json.dumps(canonicalize(data), separators=(",", ":"), ensure_ascii=False, default=json_default)


def hash_migration_plan(plan: MigrationPlan | dict[str, Any]) -> str:
    """
    Compute the SHA-256 hex digest of a plan's canonical form.

    Args:
        plan: A plan or its ``to_dict()`` form

    Returns:
        64-character hex digest
    """
    return hashlib.sha256(canonical_json(plan).encode("utf-8")).hexdigest()


__all__ = ["canonical_json", "canonicalize", "hash_migration_plan"]
