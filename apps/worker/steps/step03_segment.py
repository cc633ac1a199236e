"""
Step 3 — Report segmentation.
Split a free-text CT report into clinical history, findings and impression
using literal anchor phrases. Anchors that are not found degrade the affected
segment to an empty string; segmentation never fails.
"""
from __future__ import annotations

from typing import Optional

from packages.shared.models import ReportSegments

HISTORY_ANCHOR = "CLINICAL HISTORY:"
AGE_ANCHOR = "years of age"
COMPARISON_ANCHOR = "COMPARISON:"
FINDINGS_ANCHOR = "FINDINGS:"
IMPRESSION_ANCHORS = ("IMPRESSION:", "Impression:")
LIST_MARKER_ANCHOR = "1. "
CONSULT_ANCHOR = "Physician to Physician Radiology Consult Line"
REVIEWED_ANCHOR = "I have personally reviewed the images for this examination"


def _first(text: str, anchor: str) -> Optional[int]:
    pos = text.find(anchor)
    return pos if pos >= 0 else None


def _last(text: str, anchor: str) -> Optional[int]:
    pos = text.rfind(anchor)
    return pos if pos >= 0 else None


def _end_of(pos: Optional[int], anchor: str) -> Optional[int]:
    return None if pos is None else pos + len(anchor)


def _latest(*positions: Optional[int]) -> Optional[int]:
    found = [p for p in positions if p is not None]
    return max(found) if found else None


def _or_text_start(pos: Optional[int]) -> int:
    # An unfound start anchor sits before all text
    return 0 if pos is None else pos


def _slice(text: str, start: Optional[int], end: Optional[int]) -> str:
    if start is None or end is None or start >= end:
        return ""
    return text[start:end].strip()


def _findings_boundary(text: str) -> Optional[int]:
    # The last "1. " list marker usually opens the numbered impression
    return _latest(
        _first(text, IMPRESSION_ANCHORS[0]),
        _first(text, IMPRESSION_ANCHORS[1]),
        _last(text, LIST_MARKER_ANCHOR),
    )


def segment_report(report: str) -> ReportSegments:
    """
    Segment one report. Searches are case-sensitive literal substring searches.

    A missing history or findings heading places the segment start before the
    text, so the segment runs from the beginning up to its end anchor. Findings
    without any impression boundary run to the end of the text, but only when
    the FINDINGS: heading itself is present.
    """
    text = report or ""

    history_start = _latest(
        _end_of(_first(text, HISTORY_ANCHOR), HISTORY_ANCHOR),
        _end_of(_last(text, AGE_ANCHOR), AGE_ANCHOR),
    )
    history = _slice(text, _or_text_start(history_start), _first(text, COMPARISON_ANCHOR))

    boundary = _findings_boundary(text)
    findings_start = _end_of(_first(text, FINDINGS_ANCHOR), FINDINGS_ANCHOR)
    if boundary is not None:
        findings_end = boundary
    else:
        findings_end = len(text) if findings_start is not None else None
    findings = _slice(text, _or_text_start(findings_start), findings_end)

    # The impression always skips len("IMPRESSION:") characters past the boundary,
    # whichever anchor produced it
    impression_start = _end_of(boundary, IMPRESSION_ANCHORS[0])
    impression_end = _latest(_first(text, CONSULT_ANCHOR), _first(text, REVIEWED_ANCHOR))
    impression = _slice(text, impression_start, impression_end)

    return ReportSegments(clinical_history=history, findings=findings, impression=impression)


def segment_reports(reports: list[str]) -> list[ReportSegments]:
    return [segment_report(r) for r in reports]
