"""
Unit tests for canonical plan hashing.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from schemaplan.migrations.builder import build_migration_plan
from schemaplan.migrations.hashing import canonical_json, canonicalize, hash_migration_plan
from schemaplan.migrations.plan import MigrationPlan


class TestCanonicalize:
    """Tests for canonicalize."""

    def test_sorts_nested_keys(self) -> None:
        """Test that keys are sorted at every level."""
        value = {"b": 1, "a": {"d": 2, "c": 3}}
        assert list(canonicalize(value)) == ["a", "b"]
        assert list(canonicalize(value)["a"]) == ["c", "d"]

    def test_keeps_list_order(self) -> None:
        """Test that lists are not reordered."""
        assert canonicalize([{"b": 1, "a": 2}, 3, 1]) == [{"a": 2, "b": 1}, 3, 1]

    def test_dates_are_opaque(self) -> None:
        """Test that dates are returned untouched."""
        value = datetime(2024, 1, 1, 12, 0)
        assert canonicalize({"at": value})["at"] is value
        assert canonicalize(date(2024, 1, 1)) == date(2024, 1, 1)


class TestHashMigrationPlan:
    """Tests for hash_migration_plan."""

    def test_hex_digest(self, blog_plan: MigrationPlan) -> None:
        """Test the digest format."""
        digest = hash_migration_plan(blog_plan)
        assert len(digest) == 64
        assert all(c in "0123456789abcdef" for c in digest)

    def test_deterministic(self, blog_models: dict) -> None:
        """Test that equal plans hash equally."""
        first = build_migration_plan(blog_models, "postgres")
        second = build_migration_plan(blog_models, "postgres")
        assert hash_migration_plan(first) == hash_migration_plan(second)

    def test_plan_and_dict_agree(self, blog_plan: MigrationPlan) -> None:
        """Test that a plan and its dict form hash equally."""
        assert hash_migration_plan(blog_plan) == hash_migration_plan(blog_plan.to_dict())

    def test_key_order_irrelevant(self) -> None:
        """Test that mapping key order does not change the hash."""
        a = {"dialect": "postgres", "tables": [{"table": "t", "columns": [], "indexes": []}]}
        b = {"tables": [{"indexes": [], "columns": [], "table": "t"}], "dialect": "postgres"}
        assert hash_migration_plan(a) == hash_migration_plan(b)

    def test_list_order_matters(self) -> None:
        """Test that table order changes the hash."""
        a = {"dialect": "postgres", "tables": [{"table": "a"}, {"table": "b"}]}
        b = {"dialect": "postgres", "tables": [{"table": "b"}, {"table": "a"}]}
        assert hash_migration_plan(a) != hash_migration_plan(b)

    def test_content_changes_hash(self, blog_plan: MigrationPlan, blog_plan_with_age: MigrationPlan) -> None:
        """Test that a new column changes the hash."""
        assert hash_migration_plan(blog_plan) != hash_migration_plan(blog_plan_with_age)

    def test_dialect_changes_hash(self, blog_models: dict) -> None:
        """Test that the dialect is part of the hash."""
        postgres = build_migration_plan(blog_models, "postgres")
        sqlite = build_migration_plan(blog_models, "sqlite")
        assert hash_migration_plan(postgres) != hash_migration_plan(sqlite)

    def test_equal_dates_hash_equally(self) -> None:
        """Test that equal date values give equal hashes."""
        a = {"default": datetime(2024, 1, 1, 12, 0)}
        b = {"default": datetime(2024, 1, 1, 12, 0)}
        assert hash_migration_plan(a) == hash_migration_plan(b)

    def test_decimal_supported(self) -> None:
        """Test that decimal defaults serialize."""
        assert canonical_json({"default": Decimal("9.99")}) == '{"default":"9.99"}'

    def test_unsupported_value(self) -> None:
        """Test that values JSON cannot represent are rejected."""
        with pytest.raises(TypeError):
            hash_migration_plan({"default": object()})

    def test_compact_form(self) -> None:
        """Test the canonical serialization."""
        assert canonical_json({"b": [1, 2], "a": "é"}) == '{"a":"é","b":[1,2]}'
