"""
Pytest configuration for schemaplan tests.

Model sets are plain dicts, the same shape the JSON loader produces, so
every test file can build plans without touching the filesystem.
"""

import json
from pathlib import Path
from typing import Any

import pytest

from schemaplan.migrations.builder import build_migration_plan
from schemaplan.migrations.plan import MigrationPlan


def blog_model_set(**user_attributes: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """``User{id, email unique}`` and ``Post{id, user_id}``, plus extra User attributes."""
    return {
        "User": {
            "attributes": {
                "id": {"type": "integer"},
                "email": {"unique": True},
                **user_attributes,
            },
        },
        "Post": {
            "attributes": {
                "id": {"type": "integer"},
                "user_id": {"type": "integer"},
            },
        },
    }


@pytest.fixture
def make_blog_models():
    """Factory for the blog schema with extra User attributes."""
    return blog_model_set


@pytest.fixture
def blog_models() -> dict[str, dict[str, Any]]:
    """The two-model blog schema."""
    return blog_model_set()


@pytest.fixture
def blog_plan(blog_models: dict[str, dict[str, Any]]) -> MigrationPlan:
    """Postgres plan of the blog schema."""
    return build_migration_plan(blog_models, "postgres")


@pytest.fixture
def blog_plan_with_age() -> MigrationPlan:
    """Postgres plan of the blog schema after ``User.age`` was added."""
    return build_migration_plan(blog_model_set(age={"type": "integer"}), "postgres")


@pytest.fixture
def models_dir(tmp_path: Path) -> Path:
    """A models directory holding the blog schema as JSON files."""
    directory = tmp_path / "models"
    directory.mkdir()
    for name, definition in blog_model_set().items():
        (directory / f"{name}.json").write_text(json.dumps(definition))
    return directory
