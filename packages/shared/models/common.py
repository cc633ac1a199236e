"""
Column and feature names shared by the reader, the steps and the writers.
"""

REQUIRED_COLUMNS: tuple[str, ...] = (
    "patient_id",
    "diagnosis_date",
    "ct_date",
    "provider_type",
    "report",
    "symptom_diagnosis",
    "lungdisease_diagnosis",
    "Xray_count",
)
OPTIONAL_COLUMNS: tuple[str, ...] = ("symptom_names", "lungdisease_names")
NUMERIC_COLUMNS: tuple[str, ...] = ("Xray_count", "symptom_diagnosis", "lungdisease_diagnosis")
DATE_COLUMNS: tuple[str, ...] = ("ct_date", "diagnosis_date")
TEXT_COLUMNS: tuple[str, ...] = ("provider_type", "report")

# Structured EHR features, in the order the fitted model lists them
EHR_FEATURE_NAMES: tuple[str, ...] = (
    "priorCT_6mon",
    "provider_med",
    "provider_onc",
    "symptom_binary",
    "LungDis_binary",
    "Xray_count",
)

INTERVAL_COLUMN = "diff_prev_ct_months"
PROBABILITY_COLUMN = "Prediction_Probability"
LABEL_COLUMN = "CT_indication"
