"""
Step 0 — Input reading + validation.
Read the scan table, check required columns and types, normalise dates,
clamp negative counts to zero (with a warning) and build ScanRecords.
"""
from __future__ import annotations

import csv
import logging
import math
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

from openpyxl import load_workbook

from packages.shared.errors import SchemaError
from packages.shared.models import (
    DATE_COLUMNS,
    NUMERIC_COLUMNS,
    OPTIONAL_COLUMNS,
    REQUIRED_COLUMNS,
    TEXT_COLUMNS,
    ScanRecord,
    Warning,
    WarningCode,
)

logger = logging.getLogger(__name__)

_DATE_FORMAT = "%Y-%m-%d"


def _read_csv(path: Path) -> list[dict[str, Any]]:
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        return [dict(row) for row in csv.DictReader(f)]


def _read_xlsx(path: Path) -> list[dict[str, Any]]:
    wb = load_workbook(path, read_only=True, data_only=True)
    try:
        ws = wb.worksheets[0]
        rows = ws.iter_rows(values_only=True)
        header = next(rows, None)
        if header is None:
            return []
        columns = [str(c).strip() if c is not None else "" for c in header]
        out: list[dict[str, Any]] = []
        for values in rows:
            if values is None or all(v is None for v in values):
                continue
            out.append({col: val for col, val in zip(columns, values) if col})
        return out
    finally:
        wb.close()


def read_scan_table(source: str | Path | Sequence[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """
    Read raw rows from a CSV file, an .xlsx workbook or an in-memory sequence
    of mappings. Returns a list of plain dicts keyed by column name.
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        suffix = path.suffix.lower()
        if suffix not in (".csv", ".xlsx"):
            raise SchemaError(f"File type not supported: '{path.name}'. Please provide a CSV or Excel (.xlsx) file.")
        if not path.exists():
            raise SchemaError(f"Input file not found: {path}")
        rows = _read_csv(path) if suffix == ".csv" else _read_xlsx(path)
        logger.info(f"Read {len(rows)} rows from {path}")
        return rows
    if isinstance(source, Sequence) and all(isinstance(r, Mapping) for r in source):
        return [dict(r) for r in source]
    raise SchemaError("Invalid input type. Please provide a file path or a sequence of row mappings.")


def _as_patient_id(value: Any, row: int) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise SchemaError(f"Row {row}: patient_id is empty")
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _as_date(value: Any, column: str, row: int) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), _DATE_FORMAT).date()
        except ValueError:
            pass
    raise SchemaError(f"Row {row}: {column} must be a date or a 'YYYY-MM-DD' string, got {value!r}")


def _as_text(value: Any, column: str, row: int) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    raise SchemaError(f"Row {row}: {column} must be of type character, got {type(value).__name__}")


def _as_number(value: Any, column: str, row: int) -> float:
    number: Optional[float] = None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = float(value)
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value)
        except ValueError:
            pass
    if number is not None and math.isfinite(number):
        return number
    raise SchemaError(f"Row {row}: {column} must be a finite number, got {value!r}")


def validate_scan_rows(rows: list[dict[str, Any]]) -> tuple[list[ScanRecord], list[Warning]]:
    """
    Validate raw rows and build ScanRecords.
    Returns (records, warnings). Schema problems raise SchemaError.
    """
    warnings: list[Warning] = []
    if not rows:
        return [], warnings

    present = set().union(*(r.keys() for r in rows))
    missing = [c for c in REQUIRED_COLUMNS if c not in present]
    if missing:
        raise SchemaError(f"The following required columns are missing: {', '.join(missing)}")
    optional = [c for c in OPTIONAL_COLUMNS if c in present]

    clamped: dict[str, int] = {}
    records: list[ScanRecord] = []
    for i, raw in enumerate(rows):
        numbers: dict[str, float] = {}
        for col in NUMERIC_COLUMNS:
            value = _as_number(raw.get(col), col, i)
            if value < 0:
                clamped[col] = clamped.get(col, 0) + 1
                value = 0.0
            numbers[col] = value
        dates = {col: _as_date(raw.get(col), col, i) for col in DATE_COLUMNS}
        texts = {col: _as_text(raw.get(col), col, i) for col in TEXT_COLUMNS}

        records.append(ScanRecord(
            patient_id=_as_patient_id(raw.get("patient_id"), i),
            diagnosis_date=dates["diagnosis_date"],
            ct_date=dates["ct_date"],
            provider_type=texts["provider_type"],
            report=texts["report"],
            symptom_diagnosis=numbers["symptom_diagnosis"],
            lungdisease_diagnosis=numbers["lungdisease_diagnosis"],
            xray_count=numbers["Xray_count"],
            row_index=i,
            extras={c: raw.get(c) for c in optional},
        ))

    for col in NUMERIC_COLUMNS:
        if col in clamped:
            msg = f"Negative values in {col} have been set to 0."
            logger.warning(f"{msg} ({clamped[col]} rows)")
            warnings.append(Warning(
                code=WarningCode.NEGATIVE_VALUE_CLAMPED.value,
                message=msg,
                column=col,
            ))

    return records, warnings
