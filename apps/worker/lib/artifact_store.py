"""
Load the read-only artifacts a run depends on: the keyphrase dictionary and
the fitted model. Both are loaded once, before any record is processed.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from packages.shared.errors import ConfigurationError
from packages.shared.models import FittedModel, KeyphraseDictionary
from packages.shared.schema_validator import validate_artifact
from packages.shared.storage import get_dictionary_path, get_model_path

logger = logging.getLogger(__name__)


def _read_json(path: Path, label: str) -> Any:
    if not path.exists():
        raise ConfigurationError(f"{label} not found at {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"{label} at {path} could not be read: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"{label} at {path} is not valid JSON: {exc}") from exc


def _check_schema(kind: str, payload: Any, path: Path, label: str) -> None:
    is_valid, errors = validate_artifact(kind, payload)
    if not is_valid:
        raise ConfigurationError(f"{label} at {path} failed schema validation: {'; '.join(errors[:5])}")


def load_keyphrase_dictionary(path: str | Path | None = None) -> KeyphraseDictionary:
    """Load and validate the keyphrase dictionary. Missing or malformed -> ConfigurationError."""
    path = Path(path) if path else get_dictionary_path()
    payload = _read_json(path, "Keyphrase dictionary")
    _check_schema("keyphrase_dictionary", payload, path, "Keyphrase dictionary")
    try:
        dictionary = KeyphraseDictionary(**payload)
    except ValidationError as exc:
        raise ConfigurationError(f"Keyphrase dictionary at {path} is invalid: {exc}") from exc
    logger.info(
        f"Loaded keyphrase dictionary '{dictionary.name}' v{dictionary.version} "
        f"({len(dictionary.features)} features) from {path}"
    )
    return dictionary


def load_fitted_model(path: str | Path | None = None) -> FittedModel:
    """Load and validate the fitted model. Missing or malformed -> ConfigurationError."""
    path = Path(path) if path else get_model_path()
    payload = _read_json(path, "Fitted model")
    _check_schema("fitted_model", payload, path, "Fitted model")
    try:
        model = FittedModel(**payload)
    except ValidationError as exc:
        raise ConfigurationError(f"Fitted model at {path} is invalid: {exc}") from exc
    logger.info(
        f"Loaded fitted model '{model.name}' v{model.version} "
        f"({len(model.coefficients)} coefficients, cutoff={model.cutoff}) from {path}"
    )
    return model
