"""
Hybrid analyzer - public entry point of the library.

Combines the deterministic rule-based path (region scoring and diagram
recommendation) with an optional model path for complex or ambiguous
notes. Model output is validated and merged by confidence; every failure
degrades to the rule-based result so callers always get a usable,
non-empty recommendation set.
"""

import time
from collections.abc import AsyncIterator

from clinical_diagrams.config.config import Settings, get_settings
from clinical_diagrams.config.logging_config import get_logger
from clinical_diagrams.exceptions import DiagramAnalysisError, InputError
from clinical_diagrams.models.analysis_models import (
    AnalysisMethod,
    ComplexityAssessment,
    DiagramMatch,
    DiagramView,
    HybridAnalysisResult,
    NoteAnalysis,
)
from clinical_diagrams.models.llm_models import LLMAnalysis, LLMConfig
from clinical_diagrams.services.complexity import ComplexityAssessor
from clinical_diagrams.services.diagram_assets import asset_id, normalize_gender
from clinical_diagrams.services.diagram_recommender import MAX_RECOMMENDATIONS, DiagramRecommender
from clinical_diagrams.services.finding_extractor import ClinicalFindingExtractor
from clinical_diagrams.services.llm_gateway import LLMGateway
from clinical_diagrams.services.llm_providers import LLMProvider, build_provider
from clinical_diagrams.services.region_scorer import RegionScorer
from clinical_diagrams.services.terminology import TerminologyCatalog, get_terminology_catalog

logger = get_logger(__name__)


class HybridAnalyzer:
    """
    Routes a note through the rule-based path and, when worthwhile, the
    model path.

    Routing:
    - model disabled: rules only
    - model enabled and the note is complex or hedged: model path, rules
      on any failure
    - model enabled and the note is simple: rules only

    Merge policy by model confidence:
    - below 0.6, or nothing valid returned: rules
    - 0.8 and above: model result verbatim
    - in between: union of both, rule entries nudged down by 0.1
    """

    LOW_CONFIDENCE = 0.6
    HIGH_CONFIDENCE = 0.8
    RULE_PRIORITY_NUDGE = 0.1
    FALLBACK_CONFIDENCE = 0.5

    def __init__(
        self,
        config: LLMConfig | None = None,
        catalog: TerminologyCatalog | None = None,
        provider: LLMProvider | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize the analyzer.

        Args:
            config: Model configuration. Built from settings if not provided.
            catalog: Terminology catalog. Uses the shared catalog if not provided.
            provider: Model provider. Built lazily from config if not provided.
            settings: Settings used for provider model names and endpoints.
        """
        self.settings = settings or get_settings()
        self.config = config or LLMConfig.from_settings(self.settings)
        self.catalog = catalog or get_terminology_catalog()
        self.scorer = RegionScorer(self.catalog)
        self.recommender = DiagramRecommender(self.catalog)
        self.extractor = ClinicalFindingExtractor(self.catalog)
        self.complexity = ComplexityAssessor(self.catalog)
        self._provider = provider

    # =========================================================================
    # Public API
    # =========================================================================

    async def analyze(self, text: str, gender: str = "male") -> HybridAnalysisResult:
        """
        Recommend diagram views for a note.

        Never raises; returns the generic fallback view on unexpected errors.
        """
        start_time = time.perf_counter()
        try:
            gender = normalize_gender(gender)
            rules = self.analyze_rules(text, gender)

            if not self.config.enabled:
                return self._rules_result(rules, start_time)

            complexity = self.complexity.assess(text)
            if not (complexity.is_complex or complexity.has_ambiguity):
                return self._rules_result(rules, start_time, complexity=complexity)

            return await self._model_path(text, gender, rules, complexity, start_time)

        except InputError as e:
            logger.warning("Analysis input rejected, using fallback view", **e.to_dict())
            return self.fallback_result(gender, start_time)
        except Exception as e:
            logger.exception("Analysis failed, using fallback view", error=str(e))
            return self.fallback_result(gender, start_time)

    async def analyze_progressive(self, text: str, gender: str = "male") -> AsyncIterator[HybridAnalysisResult]:
        """
        Yield the rule-based result immediately, then the upgraded result
        if the model path produces one.
        """
        start_time = time.perf_counter()
        try:
            gender = normalize_gender(gender)
            rules = self.analyze_rules(text, gender)
            complexity = self.complexity.assess(text)
        except InputError as e:
            logger.warning("Analysis input rejected, using fallback view", **e.to_dict())
            yield self.fallback_result(gender, start_time)
            return
        except Exception as e:
            logger.exception("Analysis failed, using fallback view", error=str(e))
            yield self.fallback_result(gender, start_time)
            return

        yield self._rules_result(rules, start_time, complexity=complexity)

        if not self.config.enabled or not (complexity.is_complex or complexity.has_ambiguity):
            return

        upgraded = await self._model_path(text, gender, rules, complexity, start_time)
        if upgraded.method != AnalysisMethod.RULES:
            yield upgraded

    async def analyze_note(self, text: str, gender: str = "male") -> NoteAnalysis:
        """
        Extract findings and recommend diagrams for the same note.

        Never raises; a failed extraction yields the empty extraction with
        the generic front view.
        """
        gender = normalize_gender(gender)
        try:
            extraction = self.extractor.extract(text, gender)
        except Exception as e:
            logger.exception("Finding extraction failed, using empty extraction", error=str(e))
            extraction = self.extractor.empty_result(gender)
        diagrams = await self.analyze(text, gender)
        return NoteAnalysis(extraction=extraction, diagrams=diagrams)

    def analyze_rules(self, text: str, gender: str) -> list[DiagramMatch]:
        """Deterministic recommendation; pure function of text and gender."""
        if not isinstance(text, str):
            raise InputError(
                "Note text must be a string",
                details={"received_type": type(text).__name__},
            )
        return self.recommender.recommend(self.scorer.analyze(text), gender)

    # =========================================================================
    # Model path
    # =========================================================================

    def _get_provider(self) -> LLMProvider:
        if self._provider is None:
            self._provider = build_provider(self.config, self.settings)
        return self._provider

    async def _model_path(
        self,
        text: str,
        gender: str,
        rules: list[DiagramMatch],
        complexity: ComplexityAssessment,
        start_time: float,
    ) -> HybridAnalysisResult:
        try:
            gateway = LLMGateway(self._get_provider(), self.config)
            llm_result = await gateway.analyze(text, gender)
        except DiagramAnalysisError as e:
            log = logger.warning if self.config.fallback_to_rules else logger.error
            log("Model path failed, using rule-based result", **e.to_dict())
            return self._rules_result(rules, start_time, complexity=complexity)
        except Exception as e:
            logger.exception("Unexpected model path error, using rule-based result", error=str(e))
            return self._rules_result(rules, start_time, complexity=complexity)

        return self.validate_and_merge(rules, llm_result, start_time, complexity=complexity)

    def validate_and_merge(
        self,
        rules: list[DiagramMatch],
        llm_result: LLMAnalysis,
        start_time: float,
        complexity: ComplexityAssessment | None = None,
    ) -> HybridAnalysisResult:
        """Choose between rule, model and merged recommendations by model confidence."""
        if llm_result.confidence < self.LOW_CONFIDENCE or not llm_result.recommendations:
            logger.info(
                "Model result rejected",
                confidence=llm_result.confidence,
                recommendations=len(llm_result.recommendations),
            )
            return self._rules_result(rules, start_time, complexity=complexity, reasoning=llm_result.reasoning)

        if llm_result.confidence >= self.HIGH_CONFIDENCE:
            method = AnalysisMethod.LLM
            recommendations = llm_result.recommendations
            confidence = llm_result.confidence
        else:
            method = AnalysisMethod.HYBRID
            recommendations = self.merge_recommendations(rules, llm_result.recommendations)
            confidence = (self.rule_based_confidence(rules) + llm_result.confidence) / 2

        logger.info(
            "Analysis completed",
            method=method.value,
            confidence=round(confidence, 3),
            recommendations=len(recommendations),
        )
        return HybridAnalysisResult(
            recommendations=recommendations,
            method=method,
            confidence=confidence,
            reasoning=llm_result.reasoning,
            processing_time_ms=self._elapsed_ms(start_time),
            complexity=complexity,
        )

    def merge_recommendations(
        self,
        rules: list[DiagramMatch],
        llm_recommendations: list[DiagramMatch],
    ) -> list[DiagramMatch]:
        """Union by view; the lower priority wins and rules win ties."""
        merged: dict[DiagramView, DiagramMatch] = {}
        for match in rules:
            merged[match.view] = match.model_copy(
                update={"priority": round(match.priority + self.RULE_PRIORITY_NUDGE, 2)}
            )
        for match in llm_recommendations:
            existing = merged.get(match.view)
            if existing is None or match.priority < existing.priority:
                merged[match.view] = match
        return sorted(merged.values(), key=lambda m: m.priority)[:MAX_RECOMMENDATIONS]

    @staticmethod
    def rule_based_confidence(recommendations: list[DiagramMatch]) -> float:
        count = len(recommendations)
        if count == 0:
            return 0.3
        if count == 1:
            return 0.7
        if count == 2:
            return 0.8
        return 0.85

    # =========================================================================
    # Results
    # =========================================================================

    def _rules_result(
        self,
        rules: list[DiagramMatch],
        start_time: float,
        complexity: ComplexityAssessment | None = None,
        reasoning: str | None = None,
    ) -> HybridAnalysisResult:
        confidence = self.rule_based_confidence(rules)
        logger.info(
            "Analysis completed",
            method=AnalysisMethod.RULES.value,
            confidence=confidence,
            recommendations=len(rules),
        )
        return HybridAnalysisResult(
            recommendations=rules,
            method=AnalysisMethod.RULES,
            confidence=confidence,
            reasoning=reasoning,
            processing_time_ms=self._elapsed_ms(start_time),
            complexity=complexity,
        )

    def fallback_result(self, gender: str, start_time: float) -> HybridAnalysisResult:
        """Single generic front view used when analysis itself fails."""
        gender = normalize_gender(gender)
        return HybridAnalysisResult(
            recommendations=[
                DiagramMatch(
                    view=DiagramView.FRONT,
                    priority=1,
                    findings=["general examination"],
                    reason="Fallback view due to analysis error",
                    asset_id=asset_id(DiagramView.FRONT, gender),
                )
            ],
            method=AnalysisMethod.RULES,
            confidence=self.FALLBACK_CONFIDENCE,
            processing_time_ms=self._elapsed_ms(start_time),
        )

    @staticmethod
    def _elapsed_ms(start_time: float) -> float:
        return round((time.perf_counter() - start_time) * 1000, 3)


_analyzer: HybridAnalyzer | None = None


def get_hybrid_analyzer() -> HybridAnalyzer:
    """Get the process-wide analyzer, configured from settings."""
    global _analyzer
    if _analyzer is None:
        _analyzer = HybridAnalyzer()
        logger.info(
            "Hybrid analyzer initialized",
            llm_enabled=_analyzer.config.enabled,
            llm_model=_analyzer.config.model,
        )
    return _analyzer
