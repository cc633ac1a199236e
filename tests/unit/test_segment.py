"""
Unit tests for report segmentation (Step 3).
"""
from apps.worker.steps.step03_segment import segment_report, segment_reports
from packages.shared.models import ReportSegments

from tests.fixtures.scan_rows import SURVEILLANCE_REPORT


def test_findings_only_report():
    seg = segment_report("FINDINGS: nothing notable")
    assert seg.clinical_history == ""
    assert seg.findings == "nothing notable"
    assert seg.impression == ""


def test_empty_and_anchor_free_reports_yield_empty_segments():
    for text in ("", "Chest CT without contrast. Lungs are clear."):
        seg = segment_report(text)
        assert seg == ReportSegments()


def test_full_report_sections():
    seg = segment_report(SURVEILLANCE_REPORT)
    assert seg.clinical_history == (
        "with history of lung cancer, status post lobectomy, here for surveillance."
    )
    assert seg.findings == "Stable postsurgical changes of the right upper lobe. No new nodule."
    assert seg.impression == "Stable examination without evidence of recurrence. Continue follow-up."


def test_history_starts_after_last_age_phrase():
    text = (
        "CLINICAL HISTORY: Patient is 70 years of age. Smoker for 40 years of age onward "
        "with nodule. COMPARISON: none."
    )
    seg = segment_report(text)
    assert seg.clinical_history == "onward with nodule."


def test_history_without_start_anchor_runs_from_text_start():
    seg = segment_report("Patient with cough. COMPARISON: none. FINDINGS: clear.")
    assert seg.clinical_history == "Patient with cough."
    assert seg.findings == "clear."


def test_findings_without_heading_run_from_text_start():
    seg = segment_report("Chest CT. Lungs clear. IMPRESSION: Normal.")
    assert seg.clinical_history == ""
    assert seg.findings == "Chest CT. Lungs clear."
    assert seg.impression == ""


def test_missing_headings_reach_keyphrase_text():
    text = (
        "Follow-up of treated lung cancer. COMPARISON: 2019. "
        "Surveillance imaging, no nodules. IMPRESSION: Stable. "
        "I have personally reviewed the images for this examination."
    )
    seg = segment_report(text)
    assert seg.clinical_history == "Follow-up of treated lung cancer."
    assert seg.findings.startswith("Follow-up of treated lung cancer. COMPARISON: 2019.")
    assert seg.impression == "Stable."


def test_history_after_comparison_is_empty():
    seg = segment_report("COMPARISON: none. CLINICAL HISTORY: cough.")
    assert seg.clinical_history == ""


def test_anchors_are_case_sensitive():
    seg = segment_report("findings: lower case heading. impression: none.")
    assert seg.findings == ""
    assert seg.impression == ""


def test_lowercase_impression_heading_bounds_findings():
    text = "FINDINGS: Clear lungs. Impression: Normal. I have personally reviewed the images for this examination."
    seg = segment_report(text)
    assert seg.findings == "Clear lungs."
    assert seg.impression == "Normal."


def test_impression_needs_closing_boilerplate():
    seg = segment_report("FINDINGS: Clear lungs. IMPRESSION: Normal chest.")
    assert seg.findings == "Clear lungs."
    assert seg.impression == ""


def test_numbered_list_marker_moves_the_boundary():
    text = (
        "FINDINGS: Lungs clear.\n"
        "IMPRESSION:\n"
        "1. No recurrence.\n"
        "2. Stable nodule.\n"
        "Physician to Physician Radiology Consult Line: 555-0100"
    )
    seg = segment_report(text)
    # the last "1. " wins over IMPRESSION:, and the impression skips len("IMPRESSION:") past it
    assert seg.findings == "Lungs clear.\nIMPRESSION:"
    assert seg.impression == "rence.\n2. Stable nodule."


def test_later_boilerplate_closes_impression():
    text = (
        "FINDINGS: Clear. IMPRESSION: Normal. "
        "Physician to Physician Radiology Consult Line: 555. "
        "Addendum text. I have personally reviewed the images for this examination."
    )
    seg = segment_report(text)
    assert seg.impression == "Normal. Physician to Physician Radiology Consult Line: 555. Addendum text."


def test_text_of_interest_joins_segments():
    seg = ReportSegments(clinical_history="a", findings="b", impression="c")
    assert seg.text_of_interest == "a b c"
    assert ReportSegments().text_of_interest == "  "


def test_segment_reports_is_per_report():
    out = segment_reports(["FINDINGS: one", "", "FINDINGS: two"])
    assert [s.findings for s in out] == ["one", "", "two"]
