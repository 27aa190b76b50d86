"""
Complexity Assessor.

Scores how much a note would benefit from the model path: several body
systems mentioned together, explicit severity, laterality, hedging and
sheer length all push the score up.
"""

import re

from clinical_diagrams.models.analysis_models import ComplexityAssessment
from clinical_diagrams.services.terminology import TerminologyCatalog, get_terminology_catalog


class ComplexityAssessor:

    COMPLEXITY_THRESHOLD = 3.0
    LONG_TEXT_CHARS = 200
    LONG_TEXT_WEIGHT = 1.0

    def __init__(self, catalog: TerminologyCatalog | None = None):
        self.catalog = catalog or get_terminology_catalog()
        self._indicators = [
            (indicator, re.compile(indicator.pattern, re.IGNORECASE | re.DOTALL))
            for indicator in self.catalog.complexity_indicators
        ]

    def assess(self, text: str) -> ComplexityAssessment:
        lower_text = (text or "").lower()
        score = 0.0
        matched: list[str] = []
        has_ambiguity = False

        for indicator, pattern in self._indicators:
            if pattern.search(lower_text):
                score += indicator.weight
                matched.append(indicator.name)
                if indicator.hedging:
                    has_ambiguity = True

        if len(lower_text) >= self.LONG_TEXT_CHARS:
            score += self.LONG_TEXT_WEIGHT
            matched.append("long_text")

        return ComplexityAssessment(
            score=score,
            is_complex=score >= self.COMPLEXITY_THRESHOLD,
            has_ambiguity=has_ambiguity,
            matched_indicators=matched,
        )
