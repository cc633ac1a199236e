"""
Step 6 — Scoring + binarisation.
Apply the fitted logistic model to each feature row and label the scan
Surveillance when its probability is strictly above the cutoff.
"""
from __future__ import annotations

import math
from typing import Optional

from packages.shared.errors import SchemaError
from packages.shared.models import (
    CTIndication,
    FeatureRow,
    FittedModel,
    Prediction,
    ScoredScan,
    Warning,
    WarningCode,
)

PREDICTOR_DECIMALS = 4
PROBABILITY_FLOOR = 1e-4


def check_model_features(model: FittedModel, feature_names: list[str]) -> None:
    """Fail before scoring when the model needs a feature the assembler never produces."""
    missing = [name for name in model.feature_names if name not in feature_names]
    if missing:
        raise SchemaError(f"Model '{model.name}' requires features that are not produced: {', '.join(missing)}")


def linear_predictor(features: dict[str, float], model: FittedModel) -> float:
    """intercept + sum(coef * value) over the model's features, rounded to 4 decimals."""
    total = model.intercept
    for name, coef in model.coefficients.items():
        if name not in features:
            raise SchemaError(f"Feature '{name}' required by model '{model.name}' is missing from the feature vector")
        total += coef * features[name]
    return round(total, PREDICTOR_DECIMALS)


def logistic(lp: float) -> float:
    if lp >= 0:
        return 1.0 / (1.0 + math.exp(-lp))
    e = math.exp(lp)
    return e / (1.0 + e)


def to_probability(lp: float) -> float:
    p = logistic(lp)
    return 0.0 if abs(p) < PROBABILITY_FLOOR else p


def resolve_cutoff(model: FittedModel, override: Optional[float]) -> tuple[float, list[Warning]]:
    """Use the caller's cutoff when given and inside [0, 1], else the model's own."""
    if override is None:
        return model.cutoff, []
    if isinstance(override, (int, float)) and not math.isnan(override) and 0 <= override <= 1:
        return float(override), []
    return model.cutoff, [Warning(
        code=WarningCode.CUTOFF_OUT_OF_RANGE.value,
        message=f"Binarization threshold {override!r} is outside [0, 1]; using model cutoff {model.cutoff}",
    )]


def label_for(probability: float, cutoff: float) -> CTIndication:
    return CTIndication.SURVEILLANCE if probability > cutoff else CTIndication.OTHER_REASONS


def score_vector(row: FeatureRow, model: FittedModel, cutoff: float) -> ScoredScan:
    probability = to_probability(linear_predictor(row.features, model))
    return ScoredScan(
        record=row.record,
        diff_prev_ct_months=row.diff_prev_ct_months,
        features=dict(row.features),
        prediction=Prediction(probability=probability, label=label_for(probability, cutoff)),
    )


def score_features(
    rows: list[FeatureRow],
    model: FittedModel,
    binarize_threshold: Optional[float] = None,
) -> tuple[list[ScoredScan], float, list[Warning]]:
    """
    Score every row. Returns (scored_rows, cutoff_used, warnings).
    """
    cutoff, warnings = resolve_cutoff(model, binarize_threshold)
    return [score_vector(r, model, cutoff) for r in rows], cutoff, warnings
