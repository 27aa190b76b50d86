"""
Region Scorer - keyword/context scoring of body systems in a note.

For each scoring region, counts the region's terms present in the note and
inspects a window around each match for severity, laterality and
examination-method markers.
"""

from clinical_diagrams.config.logging_config import get_logger
from clinical_diagrams.models.analysis_models import (
    Laterality,
    RegionAnalysis,
    RegionScore,
    SeverityTier,
)
from clinical_diagrams.services.context_classifier import classify
from clinical_diagrams.services.terminology import (
    SEVERITY_WEIGHTS,
    TerminologyCatalog,
    find_term,
    get_terminology_catalog,
)

logger = get_logger(__name__)


class RegionScorer:
    """Scores every region of the catalog against a note."""

    CONTEXT_WINDOW = 100
    MAX_PRIMARY_REGIONS = 3

    def __init__(self, catalog: TerminologyCatalog | None = None):
        self.catalog = catalog or get_terminology_catalog()

    def analyze(self, text: str) -> RegionAnalysis:
        """
        Score the note.

        Args:
            text: Free-text note.

        Returns:
            RegionAnalysis with one entry per region that has at least one
            hit, in catalog order.
        """
        lower_text = (text or "").lower()
        regions: dict[str, RegionScore] = {}

        for region in self.catalog.exam_regions:
            matched: list[str] = []
            severity: SeverityTier | None = None
            laterality = Laterality.NONE
            methods: list[str] = []

            for term in region.terms:
                index = find_term(lower_text, term)
                if index == -1:
                    continue
                matched.append(term)

                start = max(0, index - self.CONTEXT_WINDOW)
                end = min(len(lower_text), index + len(term) + self.CONTEXT_WINDOW)
                context = classify(lower_text[start:end], self.catalog)

                if context.severity is not None and (
                    severity is None or SEVERITY_WEIGHTS[context.severity] > SEVERITY_WEIGHTS[severity]
                ):
                    severity = context.severity
                if laterality == Laterality.NONE:
                    laterality = context.laterality
                for method in context.exam_methods:
                    if method not in methods:
                        methods.append(method)

            if matched:
                regions[region.id] = RegionScore(
                    score=len(matched),
                    matched_terms=matched,
                    severity=severity or SeverityTier.MILD,
                    laterality=laterality,
                    exam_methods=methods,
                )

        overall = SeverityTier.MILD
        if regions:
            overall = max(
                (score.severity for score in regions.values()),
                key=lambda tier: SEVERITY_WEIGHTS[tier],
            )

        # sorted() is stable, so ties keep catalog order
        primary = [
            region_id
            for region_id, _ in sorted(regions.items(), key=lambda item: -item[1].score)
        ][: self.MAX_PRIMARY_REGIONS]

        logger.debug(
            "Regions scored",
            text_length=len(lower_text),
            regions=len(regions),
            overall_severity=overall.value,
        )

        return RegionAnalysis(regions=regions, overall_severity=overall, primary_regions=primary)
