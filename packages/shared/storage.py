"""
Local disk helpers for bundled artifacts and prediction outputs.
"""
from __future__ import annotations

import hashlib
import os
from pathlib import Path

_REPO_DATA_DIR = Path(__file__).resolve().parent.parent.parent / "data"

DATA_DIR = Path(os.environ.get("DATA_DIR", str(_REPO_DATA_DIR)))
DICTIONARY_FILENAME = "keyphrase_dictionary.json"
MODEL_FILENAME = "hybrid_model.json"


def sha256_bytes(data: bytes) -> str:
    """Compute sha256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def get_dictionary_path() -> Path:
    """Return the keyphrase dictionary path, honouring DISTINCT_DICTIONARY_PATH."""
    override = os.getenv("DISTINCT_DICTIONARY_PATH", "").strip()
    return Path(override) if override else DATA_DIR / DICTIONARY_FILENAME


def get_model_path() -> Path:
    """Return the fitted model path, honouring DISTINCT_MODEL_PATH."""
    override = os.getenv("DISTINCT_MODEL_PATH", "").strip()
    return Path(override) if override else DATA_DIR / MODEL_FILENAME


def save_output(path: str | Path, data: bytes) -> Path:
    """Write a generated output file, creating parent directories. Returns the path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path
