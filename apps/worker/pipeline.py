"""
Pipeline orchestrator — runs the prediction steps in sequence.

Artifacts are loaded and checked before any record is processed. A run either
scores every record or raises; nothing is written on failure.
"""
from __future__ import annotations

import logging
import time
import uuid
from collections import Counter
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Optional

from packages.shared.errors import PipelineError
from packages.shared.models import (
    CTIndication,
    FeatureRow,
    FittedModel,
    KeyphraseDictionary,
    PredictionResult,
    RunConfig,
    ScanRecord,
    Warning,
)

from apps.worker.lib.artifact_store import load_fitted_model, load_keyphrase_dictionary
from apps.worker.steps.step00_validate import read_scan_table, validate_scan_rows
from apps.worker.steps.step01_intervals import compute_ct_intervals
from apps.worker.steps.step02_ehr_features import derive_ehr_features
from apps.worker.steps.step03_segment import segment_report
from apps.worker.steps.step04_keyphrases import KeyphraseGroup, compile_dictionary, count_keyphrases
from apps.worker.steps.step05_assemble import assemble_features, feature_schema
from apps.worker.steps.step06_score import check_model_features, score_features
from apps.worker.steps.step07_export import write_predictions

logger = logging.getLogger(__name__)


def _new_run_id() -> str:
    return uuid.uuid4().hex[:16]


def extract_features(
    records: list[ScanRecord],
    groups: list[KeyphraseGroup],
    config: RunConfig,
    run_id: str = "local",
) -> list[FeatureRow]:
    """Steps 1-5: intervals, EHR derivations, segmentation, keyphrases, assembly."""
    nlp_names = [g.name for g in groups]

    # Intervals need each patient's full timeline, so they finish before assembly
    logger.info(f"[{run_id}] Step 1: CT interval computation (threshold={config.interval_months} months)")
    intervals = compute_ct_intervals(records, config.interval_months)

    logger.info(f"[{run_id}] Steps 2-5: EHR features, segmentation, keyphrases, assembly")
    rows: list[FeatureRow] = []
    for interval in intervals:
        ehr = derive_ehr_features(interval.record)
        segments = segment_report(interval.record.report)
        nlp = count_keyphrases(segments.text_of_interest, groups)
        rows.append(assemble_features(interval, ehr, nlp, nlp_names))
    return rows


def predict_indication(
    rows: list[FeatureRow],
    model: FittedModel,
    config: RunConfig,
    run_id: str = "local",
) -> PredictionResult:
    """Step 6: score and binarise every feature row."""
    n_cols = len(rows[0].features) if rows else 0
    logger.info(f"[{run_id}] Step 6: Scoring. Input data dimension: {len(rows)} x {n_cols}")
    scored, cutoff, warnings = score_features(rows, model, config.binarize_threshold)
    for w in warnings:
        logger.warning(f"[{run_id}] {w.message}")

    if scored:
        probs = [s.prediction.probability for s in scored]
        logger.info(f"[{run_id}] Max prediction value = {max(probs):.4f}, Min prediction value = {min(probs):.4f}")
    logger.info(f"[{run_id}] Binarization threshold used: {cutoff}")

    counts = Counter(s.prediction.label.value for s in scored)
    label_counts = {label.value: counts.get(label.value, 0) for label in CTIndication}
    logger.info(f"[{run_id}] Summary of predicted labels: {label_counts}")

    return PredictionResult(
        run_id=run_id,
        cutoff=cutoff,
        rows=scored,
        warnings=warnings,
        label_counts=label_counts,
    )


def run_pipeline(
    source: str | Path | Sequence[Mapping[str, Any]],
    config: Optional[RunConfig] = None,
    dictionary: Optional[KeyphraseDictionary] = None,
    model: Optional[FittedModel] = None,
    run_id: Optional[str] = None,
) -> PredictionResult:
    """
    Execute the full prediction pipeline over a scan table.
    Missing artifacts and schema problems raise before any output is produced.
    """
    config = config or RunConfig()
    run_id = run_id or _new_run_id()
    start_time = time.time()
    all_warnings: list[Warning] = []

    try:
        # ── Artifacts ─────────────────────────────────────────────────
        dictionary = dictionary or load_keyphrase_dictionary()
        model = model or load_fitted_model()
        groups = compile_dictionary(dictionary)
        check_model_features(model, feature_schema([g.name for g in groups]))

        # ── Step 0: Read + validate ───────────────────────────────────
        logger.info(f"[{run_id}] Step 0: Input validation")
        records, step_warnings = validate_scan_rows(read_scan_table(source))
        all_warnings.extend(step_warnings)

        # ── Steps 1-5: Features ───────────────────────────────────────
        rows = extract_features(records, groups, config, run_id)

        # ── Step 6: Scoring ───────────────────────────────────────────
        result = predict_indication(rows, model, config, run_id)
        all_warnings.extend(result.warnings)
        result.warnings = all_warnings

        # ── Step 7: Export ────────────────────────────────────────────
        if config.write_file:
            logger.info(f"[{run_id}] Step 7: Writing predictions to {config.output_path}")
            result.artifact = write_predictions(result.rows, config.output_path)
    except PipelineError as exc:
        logger.exception(f"[{run_id}] Pipeline failed: {exc}")
        raise

    logger.info(
        f"[{run_id}] Pipeline completed: scans={len(result.rows)}, "
        f"warnings={len(all_warnings)}, seconds={time.time() - start_time:.2f}"
    )
    return result
