"""
Unit tests for the JSON model loader and settings.
"""

import json
from pathlib import Path

import pytest

from schemaplan.config import MigrationSettings
from schemaplan.exceptions import ModelDefinitionError
from schemaplan.loader import load_model_file, load_models
from schemaplan.types import Dialect


class TestLoadModels:
    """Tests for load_models."""

    def test_load_directory(self, models_dir: Path) -> None:
        """Test loading every JSON file in name order."""
        models = load_models(models_dir)
        assert list(models) == ["Post", "User"]
        assert models["User"].attributes["email"].unique is True

    def test_name_in_file_wins(self, tmp_path: Path) -> None:
        """Test that an explicit name overrides the file stem."""
        (tmp_path / "person.json").write_text(json.dumps({"name": "Person", "table": "people"}))
        models = load_models(tmp_path)
        assert list(models) == ["Person"]
        assert models["Person"].get_table_name() == "people"

    def test_ignores_other_files(self, models_dir: Path) -> None:
        """Test that non-JSON files and hidden snapshots are skipped."""
        (models_dir / "README.md").write_text("# models")
        (models_dir / ".schemaplan.postgres.json").write_text("{}")
        assert list(load_models(models_dir)) == ["Post", "User"]

    def test_missing_directory(self, tmp_path: Path) -> None:
        """Test a missing models directory."""
        with pytest.raises(ModelDefinitionError):
            load_models(tmp_path / "missing")

    def test_empty_directory(self, tmp_path: Path) -> None:
        """Test a directory without models."""
        assert load_models(tmp_path) == {}

    def test_duplicate_name(self, tmp_path: Path) -> None:
        """Test two files defining the same model."""
        (tmp_path / "a.json").write_text(json.dumps({"name": "User"}))
        (tmp_path / "b.json").write_text(json.dumps({"name": "User"}))
        with pytest.raises(ModelDefinitionError) as exc_info:
            load_models(tmp_path)
        assert exc_info.value.model == "User"


class TestLoadModelFile:
    """Tests for load_model_file."""

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Test a file that is not JSON."""
        path = tmp_path / "User.json"
        path.write_text("{")
        with pytest.raises(ModelDefinitionError):
            load_model_file(path)

    def test_not_an_object(self, tmp_path: Path) -> None:
        """Test a file holding a JSON array."""
        path = tmp_path / "User.json"
        path.write_text("[]")
        with pytest.raises(ModelDefinitionError):
            load_model_file(path)

    def test_invalid_definition(self, tmp_path: Path) -> None:
        """Test that validation errors are wrapped."""
        path = tmp_path / "User.json"
        path.write_text(json.dumps({"attributes": {"role": {"type": "enum"}}}))
        with pytest.raises(ModelDefinitionError) as exc_info:
            load_model_file(path)
        assert exc_info.value.model == "User"


class TestMigrationSettings:
    """Tests for MigrationSettings."""

    def test_defaults(self) -> None:
        """Test the default settings."""
        settings = MigrationSettings()
        assert settings.dialect == Dialect.POSTGRES
        assert settings.snapshot_path == Path("models") / ".schemaplan.postgres.json"

    def test_explicit_state_path(self, tmp_path: Path) -> None:
        """Test an explicit snapshot location."""
        settings = MigrationSettings(dialect=Dialect.SQLITE, state_path=tmp_path / "state.json")
        assert settings.snapshot_path == tmp_path / "state.json"

    def test_frozen(self) -> None:
        """Test that settings are immutable."""
        settings = MigrationSettings()
        with pytest.raises(AttributeError):
            settings.dialect = Dialect.MYSQL
