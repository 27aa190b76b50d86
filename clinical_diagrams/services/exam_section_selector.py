"""
Diagram selection from structured examination sections.

Used when a note is captured as separate examination fields (general,
cardiovascular, respiratory, abdominal, other systems) rather than free
text. Each view is scored from keyword groups and the best views are
returned as rendering assets.
"""

from clinical_diagrams.config.logging_config import get_logger
from clinical_diagrams.models.analysis_models import (
    DiagramAsset,
    DiagramView,
    ExaminationAnalysis,
    ExaminationSections,
    ViewScore,
)
from clinical_diagrams.services.diagram_assets import get_diagram_assets
from clinical_diagrams.services.terminology import (
    TerminologyCatalog,
    get_terminology_catalog,
    matching_terms,
)

logger = get_logger(__name__)


class ExaminationSectionSelector:
    """Scores diagram views for structured examination sections."""

    CARDIORESPI_WEIGHT = 2.0
    ABDOMINAL_WEIGHT = 2.0
    BACK_WEIGHT = 1.5
    FRONT_BASE_SCORE = 1.0
    GENERAL_EXAM_BONUS = 0.5
    SIDE_BONUS = 1.0

    LEFT_MARKERS = ("left", "sinister")
    RIGHT_MARKERS = ("right", "dexter")

    def __init__(self, catalog: TerminologyCatalog | None = None):
        self.catalog = catalog or get_terminology_catalog()

    def score_views(self, sections: ExaminationSections) -> list[ViewScore]:
        """Score every view; returned in vocabulary order."""
        text = sections.combined_text()
        keywords = self.catalog.examination_keywords
        scores = {view: ViewScore(view=view) for view in DiagramView}

        front = scores[DiagramView.FRONT]
        front.score = self.FRONT_BASE_SCORE
        front.factors.append("Default view")

        cardio_resp = matching_terms(text, keywords["cardiovascular"] + keywords["respiratory"])
        if cardio_resp:
            view = scores[DiagramView.CARDIORESPI]
            view.score = len(cardio_resp) * self.CARDIORESPI_WEIGHT
            view.factors.append(f"Cardiovascular/Respiratory keywords: {', '.join(cardio_resp[:3])}")

        abdominal = matching_terms(text, keywords["abdominal"])
        if abdominal:
            view = scores[DiagramView.ABDOMINALLINGUINAL]
            view.score = len(abdominal) * self.ABDOMINAL_WEIGHT
            view.factors.append(f"Abdominal keywords: {', '.join(abdominal[:3])}")

        back = matching_terms(text, keywords["back"])
        if back:
            view = scores[DiagramView.BACK]
            view.score = len(back) * self.BACK_WEIGHT
            view.factors.append(f"Back/Spine keywords: {', '.join(back[:3])}")

        musculoskeletal = matching_terms(text, keywords["musculoskeletal"])
        if musculoskeletal:
            front.score += len(musculoskeletal)
            front.factors.append(f"Musculoskeletal findings: {', '.join(musculoskeletal[:3])}")

        if matching_terms(text, self.LEFT_MARKERS):
            scores[DiagramView.LEFTSIDE].score += self.SIDE_BONUS
            scores[DiagramView.LEFTSIDE].factors.append("Left side mentioned")

        if matching_terms(text, self.RIGHT_MARKERS):
            scores[DiagramView.RIGHTSIDE].score += self.SIDE_BONUS
            scores[DiagramView.RIGHTSIDE].factors.append("Right side mentioned")

        if sections.general_examination.strip():
            front.score += self.GENERAL_EXAM_BONUS
            front.factors.append("General examination documented")

        return list(scores.values())

    def select_dynamic_diagram(self, gender: str, sections: ExaminationSections) -> ExaminationAnalysis:
        """Pick the primary diagram and up to two alternatives."""
        assets = get_diagram_assets(gender)
        ranked = sorted(self.score_views(sections), key=lambda s: -s.score)

        primary = ranked[0]
        second_score = ranked[1].score if len(ranked) > 1 else 0.0
        if primary.score > second_score:
            confidence = min(0.9, 0.5 + (primary.score - second_score) / 10)
        else:
            confidence = 0.5

        secondary = [assets[s.view] for s in ranked[1:3] if s.score > 0]

        logger.debug(
            "Examination diagram selected",
            primary=primary.view.value,
            score=primary.score,
            confidence=round(confidence, 3),
        )

        return ExaminationAnalysis(
            primary_diagram=assets[primary.view],
            secondary_diagrams=secondary,
            confidence=confidence,
            reasoning_factors=primary.factors,
        )

    def get_recommended_diagrams(
        self,
        gender: str,
        sections: ExaminationSections,
        limit: int = 3,
    ) -> list[DiagramAsset]:
        analysis = self.select_dynamic_diagram(gender, sections)
        return [analysis.primary_diagram, *analysis.secondary_diagrams][:limit]

    def get_all_relevant_diagrams(
        self,
        gender: str,
        sections: ExaminationSections,
        min_score: float = 1.0,
    ) -> list[DiagramAsset]:
        """Every view scoring at least min_score, best first; front when none qualify."""
        assets = get_diagram_assets(gender)
        relevant = sorted(
            (s for s in self.score_views(sections) if s.score >= min_score),
            key=lambda s: -s.score,
        )
        if not relevant:
            return [assets[DiagramView.FRONT]]
        return [assets[s.view] for s in relevant]
