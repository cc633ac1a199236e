"""
Step 5 — Feature assembly.
Merge interval, structured EHR and keyphrase features into one fixed-schema
feature row per scan.
"""
from __future__ import annotations

from packages.shared.errors import SchemaError
from packages.shared.models import EHR_FEATURE_NAMES, FeatureRow, ScanInterval


def feature_schema(nlp_feature_names: list[str]) -> list[str]:
    """The closed, ordered feature schema: EHR features then NLP features."""
    clash = [n for n in nlp_feature_names if n in EHR_FEATURE_NAMES]
    if clash:
        raise SchemaError(f"NLP features collide with EHR feature names: {', '.join(clash)}")
    return list(EHR_FEATURE_NAMES) + list(nlp_feature_names)


def assemble_features(
    interval: ScanInterval,
    ehr: dict[str, float],
    nlp: dict[str, int],
    nlp_feature_names: list[str],
) -> FeatureRow:
    """Build the feature row for one scan. A declared feature that was not produced raises SchemaError."""
    produced: dict[str, float] = {"priorCT_6mon": interval.prior_ct_6mon}
    produced.update(ehr)
    produced.update(nlp)

    schema = feature_schema(nlp_feature_names)
    missing = [name for name in schema if name not in produced]
    if missing:
        raise SchemaError(
            f"Could not produce features {', '.join(missing)} for patient "
            f"{interval.record.patient_id} scan {interval.record.ct_date.isoformat()}"
        )

    return FeatureRow(
        record=interval.record,
        diff_prev_ct_months=interval.diff_prev_ct_months,
        features={name: produced[name] for name in schema},
    )
