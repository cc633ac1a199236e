"""
JSON schema checks for the keyphrase dictionary and fitted model documents.
"""
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema

from packages.shared.errors import ConfigurationError

_SCHEMA_DIR = Path(__file__).resolve().parent.parent.parent / "schemas"
ARTIFACT_SCHEMAS: dict[str, str] = {
    "keyphrase_dictionary": "keyphrase-dictionary.schema.json",
    "fitted_model": "fitted-model.schema.json",
}
MAX_REPORTED_ERRORS = 20


@lru_cache(maxsize=None)
def _validator(kind: str) -> jsonschema.Draft202012Validator:
    filename = ARTIFACT_SCHEMAS.get(kind)
    if filename is None:
        raise ConfigurationError(f"No schema registered for artifact kind '{kind}'")
    schema = json.loads((_SCHEMA_DIR / filename).read_text(encoding="utf-8"))
    jsonschema.Draft202012Validator.check_schema(schema)
    return jsonschema.Draft202012Validator(schema)


def _describe(error: jsonschema.ValidationError) -> str:
    # json_path reads "$" for the document root and "$.coefficients.x" below it
    return f"{error.json_path}: {error.message}"


def validate_artifact(kind: str, data: Any) -> tuple[bool, list[str]]:
    """
    Check *data* against the schema registered for *kind*.
    Returns (is_valid, messages); messages are ordered by document path and capped.
    """
    errors = sorted(_validator(kind).iter_errors(data), key=lambda e: e.json_path)
    messages = [_describe(e) for e in errors[:MAX_REPORTED_ERRORS]]
    return (not errors, messages)
