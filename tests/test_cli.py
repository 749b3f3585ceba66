"""
Tests for the schemaplan CLI.

Uses click's CliRunner against a temporary models directory.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from schemaplan.cli.commands import cli
from schemaplan.loader import load_models
from schemaplan.migrations.builder import build_migration_plan
from schemaplan.migrations.hashing import hash_migration_plan


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


def invoke(runner: CliRunner, models_dir: Path, *args: str, env: dict[str, str] | None = None):
    return runner.invoke(cli, ["--models-dir", str(models_dir), *args], env=env)


def add_user_attribute(models_dir: Path, name: str, definition: dict) -> None:
    path = models_dir / "User.json"
    data = json.loads(path.read_text())
    data["attributes"][name] = definition
    path.write_text(json.dumps(data))


class TestCliBasics:
    """Tests for basic CLI functionality."""

    def test_cli_help(self, runner: CliRunner) -> None:
        """Test CLI --help shows usage."""
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "schemaplan SQL migration planning tool" in result.output
        for command in ("plan", "generate", "hash", "status", "reset", "bookkeeping"):
            assert command in result.output

    def test_version(self, runner: CliRunner) -> None:
        """Test --version."""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "schemaplan" in result.output

    def test_unknown_dialect(self, runner: CliRunner, models_dir: Path) -> None:
        """Test that unsupported dialects are a usage error."""
        result = invoke(runner, models_dir, "--dialect", "oracle", "plan")
        assert result.exit_code == 2

    def test_missing_models_dir(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test that a missing models directory fails cleanly."""
        result = invoke(runner, tmp_path / "missing", "plan")
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_no_models(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test that an empty models directory fails cleanly."""
        result = invoke(runner, tmp_path, "hash")
        assert result.exit_code == 1
        assert "No models found" in result.output

    def test_invalid_model(self, runner: CliRunner, models_dir: Path) -> None:
        """Test that invalid definitions fail cleanly."""
        (models_dir / "Broken.json").write_text(json.dumps({"attributes": {"bad-name": {}}}))
        result = invoke(runner, models_dir, "plan")
        assert result.exit_code == 1
        assert "Broken" in result.output


class TestPlanAndHash:
    """Tests for the plan and hash commands."""

    def test_plan(self, runner: CliRunner, models_dir: Path) -> None:
        """Test printing the plan as JSON."""
        result = invoke(runner, models_dir, "plan")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["dialect"] == "postgres"
        assert [t["table"] for t in data["tables"]] == ["posts", "users"]

    def test_dialect_from_environment(self, runner: CliRunner, models_dir: Path) -> None:
        """Test the SCHEMAPLAN_DIALECT fallback."""
        result = invoke(runner, models_dir, "plan", env={"SCHEMAPLAN_DIALECT": "mysql"})
        assert result.exit_code == 0
        assert json.loads(result.output)["dialect"] == "mysql"

    def test_hash(self, runner: CliRunner, models_dir: Path) -> None:
        """Test printing the plan hash."""
        result = invoke(runner, models_dir, "hash")
        assert result.exit_code == 0
        expected = hash_migration_plan(build_migration_plan(load_models(models_dir), "postgres"))
        assert result.output.strip() == expected


class TestGenerateCommand:
    """Tests for the generate command."""

    def test_print_full_migration(self, runner: CliRunner, models_dir: Path) -> None:
        """Test printing the first migration."""
        result = invoke(runner, models_dir, "generate", "--no-write")
        assert result.exit_code == 0
        assert 'CREATE TABLE "posts"' in result.output
        assert 'CREATE UNIQUE INDEX users_email_unique ON "users" ("email");' in result.output

    def test_write_files(self, runner: CliRunner, models_dir: Path, tmp_path: Path) -> None:
        """Test writing migration files."""
        sql_dir = tmp_path / "sql"
        result = invoke(runner, models_dir, "--sql-dir", str(sql_dir), "generate")
        assert result.exit_code == 0
        assert "Wrote 4 migration file(s)" in result.output
        names = sorted(p.name for p in sql_dir.glob("*.sql"))
        assert len(names) == 4
        assert names[0].endswith("-create-posts-table.sql")

    def test_incremental_after_snapshot(self, runner: CliRunner, models_dir: Path, tmp_path: Path) -> None:
        """Test that a saved snapshot makes the next run incremental."""
        sql_dir = tmp_path / "sql"
        result = invoke(runner, models_dir, "--sql-dir", str(sql_dir), "generate", "--save-snapshot")
        assert result.exit_code == 0
        assert "Saved snapshot" in result.output
        assert (models_dir / ".schemaplan.postgres.json").exists()

        result = invoke(runner, models_dir, "--sql-dir", str(sql_dir), "generate")
        assert "No changes detected." in result.output

        add_user_attribute(models_dir, "age", {"type": "integer"})
        result = invoke(runner, models_dir, "generate", "--no-write")
        assert result.output.strip() == 'ALTER TABLE "users" ADD COLUMN "age" integer;'

    def test_full_ignores_snapshot(self, runner: CliRunner, models_dir: Path) -> None:
        """Test that --full regenerates everything."""
        invoke(runner, models_dir, "generate", "--no-write", "--save-snapshot")
        result = invoke(runner, models_dir, "generate", "--no-write", "--full")
        assert 'CREATE TABLE "users"' in result.output

    def test_skipped_changes_reported(self, runner: CliRunner, models_dir: Path, tmp_path: Path) -> None:
        """Test that removed attributes are reported, not dropped."""
        add_user_attribute(models_dir, "age", {"type": "integer"})
        invoke(runner, models_dir, "generate", "--no-write", "--save-snapshot")

        data = json.loads((models_dir / "User.json").read_text())
        del data["attributes"]["age"]
        (models_dir / "User.json").write_text(json.dumps(data))

        sql_dir = tmp_path / "sql"
        result = invoke(runner, models_dir, "--sql-dir", str(sql_dir), "generate")
        assert result.exit_code == 0
        assert "Skipped drop column users.age" in result.output
        assert "No changes detected." in result.output
        assert not sql_dir.exists()

    def test_custom_state_path(self, runner: CliRunner, models_dir: Path, tmp_path: Path) -> None:
        """Test the --state option."""
        state = tmp_path / "state" / "plan.json"
        result = invoke(runner, models_dir, "--state", str(state), "generate", "--no-write", "--save-snapshot")
        assert result.exit_code == 0
        assert state.exists()


class TestStatusCommand:
    """Tests for the status command."""

    def test_no_snapshot(self, runner: CliRunner, models_dir: Path) -> None:
        """Test status before anything was applied."""
        result = invoke(runner, models_dir, "status")
        assert result.exit_code == 0
        assert "no plan applied yet" in result.output

    def test_up_to_date(self, runner: CliRunner, models_dir: Path) -> None:
        """Test status right after saving a snapshot."""
        invoke(runner, models_dir, "generate", "--no-write", "--save-snapshot")
        result = invoke(runner, models_dir, "status")
        assert "up to date" in result.output

    def test_pending(self, runner: CliRunner, models_dir: Path) -> None:
        """Test status after a model change."""
        invoke(runner, models_dir, "generate", "--no-write", "--save-snapshot")
        add_user_attribute(models_dir, "age", {"type": "integer"})
        result = invoke(runner, models_dir, "status")
        assert "1 pending statement(s), 0 skipped change(s)" in result.output


class TestResetAndBookkeeping:
    """Tests for the reset and bookkeeping commands."""

    def test_reset(self, runner: CliRunner, models_dir: Path) -> None:
        """Test printing the reset statements."""
        result = invoke(runner, models_dir, "reset")
        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert lines == [
            'DROP TABLE IF EXISTS "migrations" CASCADE;',
            'DROP TABLE IF EXISTS "users" CASCADE;',
            'DROP TABLE IF EXISTS "posts" CASCADE;',
        ]

    def test_reset_keep_bookkeeping(self, runner: CliRunner, models_dir: Path) -> None:
        """Test --keep-bookkeeping."""
        result = invoke(runner, models_dir, "reset", "--keep-bookkeeping")
        assert "migrations" not in result.output

    def test_bookkeeping(self, runner: CliRunner, models_dir: Path) -> None:
        """Test printing the bookkeeping DDL and queries."""
        result = invoke(runner, models_dir, "--dialect", "sqlite", "bookkeeping")
        assert result.exit_code == 0
        assert "id INTEGER PRIMARY KEY AUTOINCREMENT" in result.output
        assert "INSERT INTO migrations (migration) VALUES (?)" in result.output
