from .common import (
    DATE_COLUMNS,
    EHR_FEATURE_NAMES,
    INTERVAL_COLUMN,
    LABEL_COLUMN,
    NUMERIC_COLUMNS,
    OPTIONAL_COLUMNS,
    PROBABILITY_COLUMN,
    REQUIRED_COLUMNS,
    TEXT_COLUMNS,
)
from .domain import (
    ArtifactRef,
    FeatureRow,
    FittedModel,
    KeyphraseDictionary,
    Prediction,
    PredictionResult,
    ReportSegments,
    RunConfig,
    ScanInterval,
    ScanRecord,
    ScoredScan,
    Warning,
)
from .enums import CTIndication, WarningCode

__all__ = [
    "ArtifactRef",
    "CTIndication",
    "DATE_COLUMNS",
    "EHR_FEATURE_NAMES",
    "FeatureRow",
    "FittedModel",
    "INTERVAL_COLUMN",
    "KeyphraseDictionary",
    "LABEL_COLUMN",
    "NUMERIC_COLUMNS",
    "OPTIONAL_COLUMNS",
    "PROBABILITY_COLUMN",
    "Prediction",
    "PredictionResult",
    "REQUIRED_COLUMNS",
    "ReportSegments",
    "RunConfig",
    "ScanInterval",
    "ScanRecord",
    "ScoredScan",
    "TEXT_COLUMNS",
    "Warning",
    "WarningCode",
]
