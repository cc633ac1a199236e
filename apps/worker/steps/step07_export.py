"""
Step 7 — Prediction export.
Render scored rows to an .xlsx, .csv or .json file when the caller asks for it.
"""
from __future__ import annotations

import csv
import io
import json
from datetime import date
from pathlib import Path
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

from packages.shared.artifacts import ARTIFACT_CSV, ARTIFACT_JSON, ARTIFACT_XLSX, artifact_type_for_path
from packages.shared.errors import ConfigurationError
from packages.shared.models import ArtifactRef, ScoredScan
from packages.shared.storage import save_output, sha256_bytes

_SHEET_TITLE = "Predictions"
_HEADER_FONT = Font(bold=True)
_MAX_COLUMN_WIDTH = 60


def _columns(rows: list[dict[str, Any]]) -> list[str]:
    columns: list[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    return columns


def _cell(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, date)):
        return value
    return str(value)


def _render_xlsx(rows: list[dict[str, Any]], columns: list[str]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = _SHEET_TITLE
    ws.append(columns)
    for row in rows:
        ws.append([_cell(row.get(c)) for c in columns])

    for col in range(1, len(columns) + 1):
        cell = ws.cell(row=1, column=col)
        cell.font = _HEADER_FONT
        cell.alignment = Alignment(horizontal="center", vertical="center")
        ws.column_dimensions[get_column_letter(col)].width = min(
            _MAX_COLUMN_WIDTH, max(10, len(columns[col - 1]) + 2)
        )
    ws.freeze_panes = "A2"

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def _render_csv(rows: list[dict[str, Any]], columns: list[str]) -> bytes:
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(columns)
    for row in rows:
        writer.writerow(["" if row.get(c) is None else row.get(c) for c in columns])
    return buf.getvalue().encode("utf-8")


def _render_json(rows: list[dict[str, Any]]) -> bytes:
    return json.dumps(rows, indent=2, default=str).encode("utf-8")


def write_predictions(scored: list[ScoredScan], output_path: str | Path) -> ArtifactRef:
    """Write scored rows to output_path. The format follows the file suffix."""
    artifact_type = artifact_type_for_path(output_path)
    rows = [s.to_row() for s in scored]
    if artifact_type == ARTIFACT_XLSX:
        data = _render_xlsx(rows, _columns(rows))
    elif artifact_type == ARTIFACT_CSV:
        data = _render_csv(rows, _columns(rows))
    elif artifact_type == ARTIFACT_JSON:
        data = _render_json(rows)
    else:
        raise ConfigurationError(
            f"Unsupported output file type '{Path(output_path).suffix}'. Use .xlsx, .csv or .json."
        )

    path = save_output(output_path, data)
    return ArtifactRef(uri=str(path), sha256=sha256_bytes(data), bytes=len(data))
