"""
Model loader.

Reads model definitions from a directory of JSON files, one model per
file. Files are read in name order, which fixes the declaration order of
the resulting model set.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from .exceptions import ModelDefinitionError
from .models import ModelDefinition

logger = logging.getLogger(__name__)


def load_model_file(path: Path | str) -> ModelDefinition:
    """
    Load one model definition.

    A definition without ``name`` is named after the file stem.

    Raises:
        ModelDefinitionError: If the file is not valid JSON or not a valid model
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ModelDefinitionError(f"Cannot read model file {path}: {e}", model=path.stem) from e

    if not isinstance(data, dict):
        raise ModelDefinitionError(f"Model file {path} must contain a JSON object", model=path.stem)

    data.setdefault("name", path.stem)
    try:
        return ModelDefinition.model_validate(data)
    except ValidationError as e:
        raise ModelDefinitionError(f"Invalid model definition in {path}: {e}", model=data["name"]) from e


def load_models(models_dir: Path | str) -> dict[str, ModelDefinition]:
    """
    Load every ``*.json`` model in ``models_dir`` (non-recursive).

    Returns:
        Ordered mapping of model name to definition

    Raises:
        ModelDefinitionError: If the directory is missing, a file is invalid,
            or two files define the same model name
    """
    models_dir = Path(models_dir)
    if not models_dir.is_dir():
        raise ModelDefinitionError(f"Models directory not found: {models_dir}")

    models: dict[str, ModelDefinition] = {}
    for filepath in sorted(models_dir.glob("*.json")):
        if filepath.name.startswith("."):
            continue
        model = load_model_file(filepath)
        if model.name in models:
            raise ModelDefinitionError(f"Model {model.name!r} is defined more than once", model=model.name)
        models[model.name] = model
        logger.debug(f"Loaded model {model.name} from {filepath.name}")

    return models


__all__ = ["load_model_file", "load_models"]
