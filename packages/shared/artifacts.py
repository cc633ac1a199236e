"""
Central registry of output artifact types for the prediction writer.
"""
from __future__ import annotations

from pathlib import Path

ARTIFACT_XLSX = "xlsx"
ARTIFACT_CSV = "csv"
ARTIFACT_JSON = "json"

ARTIFACT_SUFFIX_MAP: dict[str, str] = {
    ".xlsx": ARTIFACT_XLSX,
    ".csv": ARTIFACT_CSV,
    ".json": ARTIFACT_JSON,
}


def artifact_type_for_path(path: str | Path) -> str | None:
    """Map an output path to its artifact type by suffix, or None if unsupported."""
    return ARTIFACT_SUFFIX_MAP.get(Path(path).suffix.lower())
