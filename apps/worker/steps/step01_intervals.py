"""
Step 1 — CT interval computation.
Group scans by patient, order each patient's scans by ct_date and compute the
months elapsed since the previous scan plus the long-gap indicator.
"""
from __future__ import annotations

from collections import defaultdict

from packages.shared.models import ScanInterval, ScanRecord

DAYS_PER_MONTH = 30


def _patient_timelines(records: list[ScanRecord]) -> dict[str, list[ScanRecord]]:
    by_patient: dict[str, list[ScanRecord]] = defaultdict(list)
    for rec in sorted(records, key=lambda r: r.row_index):
        by_patient[rec.patient_id].append(rec)
    # sorted() is stable, so same-day scans keep their input order
    return {pid: sorted(scans, key=lambda r: r.ct_date) for pid, scans in by_patient.items()}


def compute_ct_intervals(
    records: list[ScanRecord],
    interval_months: float = 6,
) -> list[ScanInterval]:
    """
    Returns one ScanInterval per record, ordered by (patient_id, ct_date).

    diff_prev_ct_months is the calendar-day difference to the previous scan of
    the same patient divided by 30. prior_ct_6mon is 1 when that difference
    exceeds interval_months. A patient's first scan has a zero difference but
    prior_ct_6mon = 1: no recent prior scan exists.
    """
    timelines = _patient_timelines(records)
    intervals: list[ScanInterval] = []

    for patient_id in sorted(timelines):
        prev: ScanRecord | None = None
        for rec in timelines[patient_id]:
            if prev is None:
                intervals.append(ScanInterval(record=rec, diff_prev_ct_months=0.0, prior_ct_6mon=1))
            else:
                diff = (rec.ct_date - prev.ct_date).days / DAYS_PER_MONTH
                intervals.append(ScanInterval(
                    record=rec,
                    diff_prev_ct_months=diff,
                    prior_ct_6mon=int(diff > interval_months),
                ))
            prev = rec

    return intervals
