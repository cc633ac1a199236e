"""
Step 2 — Structured EHR feature derivation.
Provider-type flags, symptom / lung-disease binarisation and the X-ray count.
"""
from __future__ import annotations

from packages.shared.models import ScanRecord

_ONCOLOGY = "oncology"
_MEDICINE = "medicine"


def derive_ehr_features(record: ScanRecord) -> dict[str, float]:
    """Derive the structured features of one scan (priorCT_6mon comes from step 1)."""
    provider = (record.provider_type or "").lower()
    return {
        "provider_med": int(_MEDICINE in provider),
        "provider_onc": int(_ONCOLOGY in provider),
        "symptom_binary": int(record.symptom_diagnosis > 0),
        "LungDis_binary": int(record.lungdisease_diagnosis > 0),
        "Xray_count": record.xray_count,
    }
