"""
Unit tests for CT interval computation (Step 1).
"""
from datetime import date

from apps.worker.steps.step01_intervals import compute_ct_intervals
from packages.shared.models import ScanRecord


def _scan(patient_id: str, ct_date: date, row_index: int = 0, provider: str = "Medical Oncology") -> ScanRecord:
    return ScanRecord(
        patient_id=patient_id,
        diagnosis_date=date(2018, 1, 1),
        ct_date=ct_date,
        provider_type=provider,
        report="",
        symptom_diagnosis=0,
        lungdisease_diagnosis=0,
        xray_count=0,
        row_index=row_index,
    )


class TestComputeCtIntervals:
    def test_two_scans_200_days_apart(self):
        records = [_scan("P1", date(2020, 1, 10), 0), _scan("P1", date(2020, 7, 28), 1)]
        first, second = compute_ct_intervals(records)
        assert first.diff_prev_ct_months == 0
        assert first.prior_ct_6mon == 1
        assert second.diff_prev_ct_months == 200 / 30
        assert second.prior_ct_6mon == 1

    def test_short_gap_is_zero(self):
        records = [_scan("P1", date(2021, 1, 1), 0), _scan("P1", date(2021, 5, 31), 1)]
        _, second = compute_ct_intervals(records)
        assert second.diff_prev_ct_months == 150 / 30
        assert second.prior_ct_6mon == 0

    def test_exactly_threshold_is_not_a_long_gap(self):
        records = [_scan("P1", date(2021, 1, 1), 0), _scan("P1", date(2021, 6, 30), 1)]
        _, second = compute_ct_intervals(records)
        assert second.diff_prev_ct_months == 6.0
        assert second.prior_ct_6mon == 0

    def test_threshold_is_configurable(self):
        records = [_scan("P1", date(2021, 1, 1), 0), _scan("P1", date(2021, 5, 31), 1)]
        _, second = compute_ct_intervals(records, interval_months=3)
        assert second.prior_ct_6mon == 1

    def test_first_scan_of_every_patient_is_flagged(self):
        records = [
            _scan("P2", date(2020, 3, 1), 0),
            _scan("P1", date(2020, 2, 1), 1),
            _scan("P2", date(2020, 3, 15), 2),
        ]
        intervals = compute_ct_intervals(records)
        firsts = {}
        for iv in intervals:
            firsts.setdefault(iv.record.patient_id, iv)
        assert all(iv.prior_ct_6mon == 1 and iv.diff_prev_ct_months == 0 for iv in firsts.values())

    def test_output_is_grouped_and_chronological(self):
        records = [
            _scan("P2", date(2020, 3, 1), 0),
            _scan("P1", date(2021, 1, 1), 1),
            _scan("P1", date(2020, 1, 1), 2),
        ]
        intervals = compute_ct_intervals(records)
        assert [(iv.record.patient_id, iv.record.ct_date) for iv in intervals] == [
            ("P1", date(2020, 1, 1)),
            ("P1", date(2021, 1, 1)),
            ("P2", date(2020, 3, 1)),
        ]
        assert intervals[1].diff_prev_ct_months == 366 / 30

    def test_same_day_scans_keep_input_order(self):
        records = [
            _scan("P1", date(2020, 1, 1), 0, provider="Internal Medicine"),
            _scan("P1", date(2020, 1, 1), 1, provider="Medical Oncology"),
        ]
        first, second = compute_ct_intervals(records)
        assert first.record.provider_type == "Internal Medicine"
        assert second.record.provider_type == "Medical Oncology"
        assert second.diff_prev_ct_months == 0
        assert second.prior_ct_6mon == 0

    def test_empty_input(self):
        assert compute_ct_intervals([]) == []
