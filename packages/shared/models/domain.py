from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import (
    INTERVAL_COLUMN,
    LABEL_COLUMN,
    PROBABILITY_COLUMN,
)
from .enums import CTIndication


class Warning(BaseModel):
    code: str
    message: str
    row: Optional[int] = None
    column: Optional[str] = None


class RunConfig(BaseModel):
    """Configuration for a prediction run."""
    interval_months: float = Field(default=6, ge=0)
    binarize_threshold: Optional[float] = None  # None -> use the model's own cutoff
    write_file: bool = False
    output_path: str = "Predictions.xlsx"


class ArtifactRef(BaseModel):
    uri: str
    sha256: str = Field(min_length=64, max_length=64)
    bytes: int = Field(ge=0)


class ScanRecord(BaseModel):
    """One CT scan episode as read from the input table."""
    model_config = ConfigDict(frozen=True)

    patient_id: str
    diagnosis_date: date
    ct_date: date
    provider_type: str
    report: str
    symptom_diagnosis: float = Field(ge=0)
    lungdisease_diagnosis: float = Field(ge=0)
    xray_count: float = Field(ge=0)
    row_index: int = Field(default=0, ge=0)
    extras: dict[str, Any] = Field(default_factory=dict)

    def to_row(self) -> dict[str, Any]:
        row: dict[str, Any] = {
            "patient_id": self.patient_id,
            "diagnosis_date": self.diagnosis_date,
            "ct_date": self.ct_date,
            "provider_type": self.provider_type,
            "report": self.report,
            "symptom_diagnosis": self.symptom_diagnosis,
            "lungdisease_diagnosis": self.lungdisease_diagnosis,
            "Xray_count": self.xray_count,
        }
        row.update(self.extras)
        return row


class ScanInterval(BaseModel):
    record: ScanRecord
    diff_prev_ct_months: float = 0.0
    prior_ct_6mon: int = Field(ge=0, le=1)


class ReportSegments(BaseModel):
    clinical_history: str = ""
    findings: str = ""
    impression: str = ""

    @property
    def text_of_interest(self) -> str:
        return " ".join((self.clinical_history, self.findings, self.impression))


class KeyphraseDictionary(BaseModel):
    """Named groups of case-insensitive pattern variants, one NLP feature per group."""
    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    features: dict[str, list[str]]

    @field_validator("features")
    @classmethod
    def _groups_not_empty(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        if not v:
            raise ValueError("keyphrase dictionary declares no features")
        empty = [name for name, patterns in v.items() if not patterns]
        if empty:
            raise ValueError(f"keyphrase groups without patterns: {', '.join(empty)}")
        return v

    @property
    def feature_names(self) -> list[str]:
        return list(self.features)


class FittedModel(BaseModel):
    """Logistic model coefficients plus the cutoff chosen at training time."""
    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    intercept: float
    coefficients: dict[str, float]
    cutoff: float = Field(ge=0, le=1)

    @property
    def feature_names(self) -> list[str]:
        return list(self.coefficients)


class FeatureRow(BaseModel):
    record: ScanRecord
    diff_prev_ct_months: float = 0.0
    features: dict[str, float] = Field(default_factory=dict)

    def to_row(self) -> dict[str, Any]:
        row = self.record.to_row()
        row[INTERVAL_COLUMN] = self.diff_prev_ct_months
        row.update(self.features)
        return row


class Prediction(BaseModel):
    probability: float = Field(ge=0, le=1)
    label: CTIndication


class ScoredScan(FeatureRow):
    prediction: Prediction

    def to_row(self) -> dict[str, Any]:
        row = super().to_row()
        row[PROBABILITY_COLUMN] = self.prediction.probability
        row[LABEL_COLUMN] = self.prediction.label.value
        return row


class PredictionResult(BaseModel):
    run_id: str
    cutoff: float
    rows: list[ScoredScan] = Field(default_factory=list)
    warnings: list[Warning] = Field(default_factory=list)
    label_counts: dict[str, int] = Field(default_factory=dict)
    artifact: Optional[ArtifactRef] = None
