"""
Unit tests for structured EHR features (Step 2) and feature assembly (Step 5).
"""
from datetime import date

import pytest

from apps.worker.steps.step02_ehr_features import derive_ehr_features
from apps.worker.steps.step05_assemble import assemble_features, feature_schema
from packages.shared.errors import SchemaError
from packages.shared.models import EHR_FEATURE_NAMES, ScanInterval, ScanRecord


def _record(provider: str = "Medical Oncology", symptom: float = 0, lung: float = 0, xray: float = 0) -> ScanRecord:
    return ScanRecord(
        patient_id="P1",
        diagnosis_date=date(2018, 1, 1),
        ct_date=date(2020, 1, 1),
        provider_type=provider,
        report="",
        symptom_diagnosis=symptom,
        lungdisease_diagnosis=lung,
        xray_count=xray,
    )


class TestDeriveEhrFeatures:
    def test_provider_flags_are_not_exclusive(self):
        ehr = derive_ehr_features(_record(provider="Medical Oncology / Internal Medicine"))
        assert ehr["provider_onc"] == 1
        assert ehr["provider_med"] == 1

    def test_provider_match_ignores_case(self):
        ehr = derive_ehr_features(_record(provider="radiation ONCOLOGY"))
        assert ehr["provider_onc"] == 1
        assert ehr["provider_med"] == 0

    def test_other_provider(self):
        ehr = derive_ehr_features(_record(provider="Pulmonology"))
        assert (ehr["provider_onc"], ehr["provider_med"]) == (0, 0)

    def test_binarisation_and_passthrough(self):
        ehr = derive_ehr_features(_record(symptom=3, lung=0, xray=4))
        assert ehr["symptom_binary"] == 1
        assert ehr["LungDis_binary"] == 0
        assert ehr["Xray_count"] == 4


class TestAssembleFeatures:
    def test_schema_order_is_ehr_then_nlp(self):
        rec = _record(provider="Internal Medicine", lung=2, xray=1)
        row = assemble_features(
            ScanInterval(record=rec, diff_prev_ct_months=7.5, prior_ct_6mon=1),
            derive_ehr_features(rec),
            {"Surveillance": 2, "Symptom": 0},
            ["Surveillance", "Symptom"],
        )
        assert list(row.features) == list(EHR_FEATURE_NAMES) + ["Surveillance", "Symptom"]
        assert row.features["priorCT_6mon"] == 1
        assert row.features["provider_med"] == 1
        assert row.features["LungDis_binary"] == 1
        assert row.features["Surveillance"] == 2
        assert row.diff_prev_ct_months == 7.5
        assert row.record == rec

    def test_missing_nlp_feature_fails(self):
        rec = _record()
        with pytest.raises(SchemaError):
            assemble_features(
                ScanInterval(record=rec, prior_ct_6mon=1),
                derive_ehr_features(rec),
                {"Surveillance": 1},
                ["Surveillance", "Recurrence"],
            )

    def test_missing_ehr_feature_fails(self):
        rec = _record()
        ehr = derive_ehr_features(rec)
        del ehr["Xray_count"]
        with pytest.raises(SchemaError):
            assemble_features(ScanInterval(record=rec, prior_ct_6mon=1), ehr, {}, [])

    def test_nlp_name_colliding_with_ehr_feature_fails(self):
        with pytest.raises(SchemaError):
            feature_schema(["Xray_count"])
