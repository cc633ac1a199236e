"""
API route: Predictions
"""
from __future__ import annotations

from datetime import date
from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from apps.worker.lib.artifact_store import load_fitted_model, load_keyphrase_dictionary
from apps.worker.pipeline import run_pipeline
from packages.shared.models import FittedModel, KeyphraseDictionary, RunConfig, Warning

router = APIRouter(tags=["predictions"])


class ScanRow(BaseModel):
    patient_id: str | int
    diagnosis_date: date
    ct_date: date
    provider_type: str
    report: str
    symptom_diagnosis: float
    lungdisease_diagnosis: float
    Xray_count: float
    symptom_names: Optional[str] = None
    lungdisease_names: Optional[str] = None


class PredictRequest(BaseModel):
    records: list[ScanRow] = Field(min_length=1)
    binarize_threshold: Optional[float] = None
    interval_months: float = Field(default=6, ge=0)


class PredictionOut(BaseModel):
    patient_id: str
    ct_date: date
    diff_prev_ct_months: float
    features: dict[str, float]
    probability: float
    label: str


class PredictResponse(BaseModel):
    run_id: str
    cutoff: float
    label_counts: dict[str, int]
    warnings: list[Warning]
    predictions: list[PredictionOut]


@lru_cache(maxsize=1)
def get_artifacts() -> tuple[KeyphraseDictionary, FittedModel]:
    """Load the dictionary and model once per process."""
    return load_keyphrase_dictionary(), load_fitted_model()


@router.post("/predictions", response_model=PredictResponse)
def create_predictions(
    req: PredictRequest,
    artifacts: tuple[KeyphraseDictionary, FittedModel] = Depends(get_artifacts),
):
    """Score a batch of CT scan rows."""
    dictionary, model = artifacts
    config = RunConfig(
        interval_months=req.interval_months,
        binarize_threshold=req.binarize_threshold,
        write_file=False,
    )
    rows = [r.model_dump(exclude_none=True) for r in req.records]
    result = run_pipeline(rows, config, dictionary=dictionary, model=model)

    return PredictResponse(
        run_id=result.run_id,
        cutoff=result.cutoff,
        label_counts=result.label_counts,
        warnings=result.warnings,
        predictions=[
            PredictionOut(
                patient_id=s.record.patient_id,
                ct_date=s.record.ct_date,
                diff_prev_ct_months=s.diff_prev_ct_months,
                features=s.features,
                probability=s.prediction.probability,
                label=s.prediction.label.value,
            )
            for s in result.rows
        ],
    )
