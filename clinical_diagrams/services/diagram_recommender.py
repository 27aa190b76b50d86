"""
Diagram Recommendation Generator.

Turns a RegionAnalysis into at most three ranked diagram views.
Lower priority values are more important.
"""

from clinical_diagrams.config.logging_config import get_logger
from clinical_diagrams.models.analysis_models import (
    DiagramMatch,
    DiagramView,
    Laterality,
    RegionAnalysis,
    SeverityTier,
)
from clinical_diagrams.services.diagram_assets import asset_id, normalize_gender
from clinical_diagrams.services.terminology import TerminologyCatalog, get_terminology_catalog

logger = get_logger(__name__)

MAX_RECOMMENDATIONS = 3

SEVERITY_ADJUSTMENT: dict[SeverityTier, float] = {
    SeverityTier.CRITICAL: -2,
    SeverityTier.HIGH: -1,
    SeverityTier.MODERATE: 0,
    SeverityTier.MILD: 1,
    SeverityTier.NORMAL: 2,
}

DEFAULT_VIEW_PRIORITY = 10.0
DEFAULT_VIEW_REASON = "Default view - general physical examination"


def default_recommendation(gender: str) -> DiagramMatch:
    return DiagramMatch(
        view=DiagramView.FRONT,
        priority=DEFAULT_VIEW_PRIORITY,
        findings=["general physical examination"],
        reason=DEFAULT_VIEW_REASON,
        asset_id=asset_id(DiagramView.FRONT, gender),
    )


def expand_views(views: tuple[DiagramView, ...], laterality: Laterality) -> list[DiagramView]:
    """Add the side views a lateralised finding needs."""
    expanded = list(views)
    wanted: tuple[DiagramView, ...] = ()
    if laterality == Laterality.LEFT:
        wanted = (DiagramView.LEFTSIDE,)
    elif laterality == Laterality.RIGHT:
        wanted = (DiagramView.RIGHTSIDE,)
    elif laterality == Laterality.BILATERAL:
        wanted = (DiagramView.LEFTSIDE, DiagramView.RIGHTSIDE)
    for view in wanted:
        if view not in expanded:
            expanded.append(view)
    return expanded


class DiagramRecommender:
    """Ranks diagram views for scored regions."""

    def __init__(self, catalog: TerminologyCatalog | None = None):
        self.catalog = catalog or get_terminology_catalog()

    def recommend(self, analysis: RegionAnalysis, gender: str) -> list[DiagramMatch]:
        gender = normalize_gender(gender)
        best: dict[DiagramView, DiagramMatch] = {}

        for region_id, region_score in analysis.regions.items():
            region = self.catalog.exam_region(region_id)
            if region is None:
                logger.warning("Scored region missing from catalog", region=region_id)
                continue

            base = float(region.priority) + SEVERITY_ADJUSTMENT[region_score.severity]
            if region_score.score >= 5:
                base -= 0.5
            elif region_score.score >= 3:
                base -= 0.2

            finding = f"{region_id.replace('_', ' ')} examination"
            if region_score.severity != SeverityTier.MILD:
                finding += f" ({region_score.severity.value})"
            if region_score.laterality != Laterality.NONE:
                finding += f" - {region_score.laterality.value} sided"
            reason = (
                f"{region_score.score} medical terms detected: "
                f"{', '.join(region_score.matched_terms[:3])}"
            )

            for index, view in enumerate(expand_views(region.views, region_score.laterality)):
                priority = round(base + index * 0.1, 2)
                current = best.get(view)
                # Earlier regions keep the view on a tie
                if current is not None and current.priority <= priority:
                    continue
                best[view] = DiagramMatch(
                    view=view,
                    priority=priority,
                    findings=[finding],
                    reason=reason,
                    asset_id=asset_id(view, gender),
                )

        recommendations = sorted(best.values(), key=lambda match: match.priority)[:MAX_RECOMMENDATIONS]
        if not recommendations:
            return [default_recommendation(gender)]
        return recommendations
