"""
Severity, laterality and examination-method detection for a span of text.

Used by the region scorer (on a window around each matched term) and by
the finding extractor (on a whole sentence), so both agree on what
"severe" or "bilateral" means. The scorer reads the five-tier
``severity``; findings use the three-step ``finding_severity`` scale.
"""

import re
from dataclasses import dataclass

from clinical_diagrams.models.analysis_models import FindingSeverity, Laterality, SeverityTier
from clinical_diagrams.services.terminology import (
    SEVERITY_WEIGHTS,
    TerminologyCatalog,
    contains_term,
    find_term,
)

# "no significant murmur" does not make a finding severe
_NEGATED_MARKER = re.compile(r"\b(?:no|not|without)\s+$")


@dataclass(frozen=True)
class ContextClassification:
    severity: SeverityTier | None
    finding_severity: FindingSeverity
    laterality: Laterality
    exam_methods: tuple[str, ...]


def classify(text: str, catalog: TerminologyCatalog) -> ContextClassification:
    """Classify a lower-case span of clinical text."""
    return ContextClassification(
        severity=detect_severity(text, catalog),
        finding_severity=detect_finding_severity(text, catalog),
        laterality=detect_laterality(text, catalog),
        exam_methods=detect_exam_methods(text, catalog),
    )


def detect_severity(text: str, catalog: TerminologyCatalog) -> SeverityTier | None:
    """Highest-weight severity tier with a marker in text, or None."""
    best: SeverityTier | None = None
    for tier, markers in catalog.severity_markers.items():
        if any(contains_term(text, marker) for marker in markers):
            if best is None or SEVERITY_WEIGHTS[tier] > SEVERITY_WEIGHTS[best]:
                best = tier
    return best


def detect_finding_severity(text: str, catalog: TerminologyCatalog) -> FindingSeverity:
    """First finding-severity tier (catalog order) with a non-negated marker."""
    for severity, markers in catalog.finding_severity_markers.items():
        for marker in markers:
            position = find_term(text, marker)
            if position >= 0 and not _NEGATED_MARKER.search(text[:position]):
                return severity
    return FindingSeverity.NONE


def detect_laterality(text: str, catalog: TerminologyCatalog) -> Laterality:
    markers = catalog.laterality_markers

    def present(side: str) -> bool:
        return any(contains_term(text, marker) for marker in markers[side])

    has_left = present("left")
    has_right = present("right")
    if present("bilateral") or (has_left and has_right):
        return Laterality.BILATERAL
    if has_left:
        return Laterality.LEFT
    if has_right:
        return Laterality.RIGHT
    if present("unilateral"):
        return Laterality.UNILATERAL
    return Laterality.NONE


def detect_exam_methods(text: str, catalog: TerminologyCatalog) -> tuple[str, ...]:
    return tuple(
        method
        for method, markers in catalog.exam_methods.items()
        if any(contains_term(text, marker) for marker in markers)
    )
