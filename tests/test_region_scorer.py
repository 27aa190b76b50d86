"""
Unit tests for region scoring and diagram recommendation.
"""
import pytest

from clinical_diagrams.models.analysis_models import (
    DiagramView,
    Laterality,
    RegionAnalysis,
    RegionScore,
    SeverityTier,
)
from clinical_diagrams.services.diagram_recommender import (
    DEFAULT_VIEW_PRIORITY,
    DiagramRecommender,
    expand_views,
)
from clinical_diagrams.services.region_scorer import RegionScorer


@pytest.fixture
def scorer(catalog) -> RegionScorer:
    return RegionScorer(catalog)


@pytest.fixture
def recommender(catalog) -> DiagramRecommender:
    return DiagramRecommender(catalog)


CHEST_AND_ANKLE = "Patient reports severe chest pain. Mild ankle swelling."


class TestRegionScorer:

    def test_empty_text(self, scorer):
        analysis = scorer.analyze("")
        assert analysis.regions == {}
        assert analysis.overall_severity == SeverityTier.MILD
        assert analysis.primary_regions == []

    def test_only_regions_with_hits(self, scorer):
        analysis = scorer.analyze(CHEST_AND_ANKLE)
        assert set(analysis.regions) == {"cardiovascular", "respiratory", "abdominal", "musculoskeletal"}
        assert all(score.score >= 1 for score in analysis.regions.values())

    def test_regions_in_catalog_order(self, scorer):
        analysis = scorer.analyze(CHEST_AND_ANKLE)
        assert list(analysis.regions) == ["cardiovascular", "respiratory", "abdominal", "musculoskeletal"]

    def test_overall_severity_is_maximum(self, scorer):
        analysis = scorer.analyze(CHEST_AND_ANKLE)
        assert analysis.overall_severity == SeverityTier.HIGH

    def test_primary_regions_by_score_then_catalog_order(self, scorer):
        analysis = scorer.analyze(CHEST_AND_ANKLE)
        assert analysis.regions["musculoskeletal"].matched_terms == ["swelling", "ankle"]
        assert analysis.primary_regions == ["musculoskeletal", "cardiovascular", "respiratory"]

    def test_severity_defaults_to_mild(self, scorer):
        analysis = scorer.analyze("Left knee swollen.")
        assert analysis.regions["musculoskeletal"].severity == SeverityTier.MILD

    def test_laterality_and_methods_from_context(self, scorer):
        analysis = scorer.analyze("On auscultation there are crackles at the right base.")
        respiratory = analysis.regions["respiratory"]
        assert respiratory.laterality == Laterality.RIGHT
        assert "auscultation" in respiratory.exam_methods

    def test_pure_function(self, scorer):
        assert scorer.analyze(CHEST_AND_ANKLE) == scorer.analyze(CHEST_AND_ANKLE)


class TestDiagramRecommender:

    def test_default_view_when_nothing_scored(self, recommender):
        recommendations = recommender.recommend(RegionAnalysis(), "female")
        assert len(recommendations) == 1
        assert recommendations[0].view == DiagramView.FRONT
        assert recommendations[0].priority == DEFAULT_VIEW_PRIORITY
        assert recommendations[0].asset_id == "femalefront"

    def test_cardiorespiratory_outranks_limbs(self, scorer, recommender):
        recommendations = recommender.recommend(scorer.analyze(CHEST_AND_ANKLE), "male")
        assert [r.view for r in recommendations] == [
            DiagramView.CARDIORESPI,
            DiagramView.FRONT,
            DiagramView.BACK,
        ]
        assert recommendations[0].priority == pytest.approx(1.0)
        assert recommendations[0].asset_id == "malecardiorespi"

    def test_laterality_adds_side_view(self, scorer, recommender):
        recommendations = recommender.recommend(scorer.analyze("Left ear pain."), "male")
        assert [r.view for r in recommendations] == [
            DiagramView.FRONT,
            DiagramView.LEFTSIDE,
            DiagramView.ABDOMINALLINGUINAL,
        ]
        assert recommendations[1].priority == pytest.approx(2.1)
        assert recommendations[0].findings == ["head neck examination - left sided"]

    def test_score_magnitude_adjustment(self, scorer, recommender):
        analysis = scorer.analyze("Heart murmur, tachycardia, irregular pulse.")
        assert analysis.regions["cardiovascular"].score == 5
        recommendations = recommender.recommend(analysis, "male")
        assert recommendations[0].view == DiagramView.CARDIORESPI
        assert recommendations[0].priority == pytest.approx(2.5)

    def test_reason_lists_first_three_terms(self, recommender):
        analysis = RegionAnalysis(
            regions={
                "respiratory": RegionScore(
                    score=4,
                    matched_terms=["lung", "wheeze", "crackle", "chest"],
                    severity=SeverityTier.MODERATE,
                ),
            },
            overall_severity=SeverityTier.MODERATE,
            primary_regions=["respiratory"],
        )
        recommendations = recommender.recommend(analysis, "male")
        assert recommendations[0].reason == "4 medical terms detected: lung, wheeze, crackle"
        assert recommendations[0].findings == ["respiratory examination (moderate)"]
        assert recommendations[0].priority == pytest.approx(1.8)

    def test_views_are_unique_and_capped(self, scorer, recommender):
        text = (
            "Severe headache, bilateral leg weakness, abdominal pain with guarding, "
            "crackles in both lungs and a loud murmur."
        )
        recommendations = recommender.recommend(scorer.analyze(text), "female")
        views = [r.view for r in recommendations]
        assert 1 <= len(views) <= 3
        assert len(set(views)) == len(views)
        assert [r.priority for r in recommendations] == sorted(r.priority for r in recommendations)

    def test_expand_views_bilateral(self):
        assert expand_views((DiagramView.CARDIORESPI, DiagramView.FRONT), Laterality.BILATERAL) == [
            DiagramView.CARDIORESPI,
            DiagramView.FRONT,
            DiagramView.LEFTSIDE,
            DiagramView.RIGHTSIDE,
        ]

    def test_expand_views_keeps_existing(self):
        views = (DiagramView.FRONT, DiagramView.LEFTSIDE)
        assert expand_views(views, Laterality.LEFT) == [DiagramView.FRONT, DiagramView.LEFTSIDE]

    def test_unknown_gender_defaults_to_male(self, recommender):
        recommendations = recommender.recommend(RegionAnalysis(), "unknown")
        assert recommendations[0].asset_id == "malefront"
