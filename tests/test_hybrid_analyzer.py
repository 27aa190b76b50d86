"""
Tests for the hybrid analyzer: routing, merge policy and fallbacks.
"""
import pytest

from clinical_diagrams.models.analysis_models import AnalysisMethod, DiagramMatch, DiagramView
from clinical_diagrams.models.llm_models import LLMConfig
from clinical_diagrams.services.hybrid_analyzer import HybridAnalyzer, get_hybrid_analyzer

from .conftest import FakeProvider, model_reply


LEFT_SIDE_REPLY = [
    {"type": "leftside", "priority": 1, "findings": ["left arm radiation"], "reason": "Radiating pain"},
    {"type": "cardiorespi", "priority": 2, "findings": ["murmur", "crackles"], "reason": "Heart and lungs"},
]


def match(view: DiagramView, priority: float) -> DiagramMatch:
    return DiagramMatch(view=view, priority=priority, asset_id=f"male{view.value}")


class TestRouting:

    @pytest.mark.asyncio
    async def test_disabled_uses_rules(self, disabled_config, complex_note):
        provider = FakeProvider(model_reply(LEFT_SIDE_REPLY))
        analyzer = HybridAnalyzer(config=disabled_config, provider=provider)

        result = await analyzer.analyze(complex_note, "male")

        assert result.method == AnalysisMethod.RULES
        assert result.recommendations == analyzer.analyze_rules(complex_note, "male")
        assert provider.prompts == []

    @pytest.mark.asyncio
    async def test_simple_note_skips_model(self, enabled_config, simple_note):
        provider = FakeProvider(model_reply(LEFT_SIDE_REPLY))
        analyzer = HybridAnalyzer(config=enabled_config, provider=provider)

        result = await analyzer.analyze(simple_note, "female")

        assert result.method == AnalysisMethod.RULES
        assert result.complexity is not None
        assert not result.complexity.is_complex
        assert provider.prompts == []

    @pytest.mark.asyncio
    async def test_hedged_note_goes_to_model(self, enabled_config):
        provider = FakeProvider(model_reply(LEFT_SIDE_REPLY, confidence=0.9))
        analyzer = HybridAnalyzer(config=enabled_config, provider=provider)

        result = await analyzer.analyze("Possibly a small effusion in the left knee.", "male")

        assert result.method == AnalysisMethod.LLM
        assert len(provider.prompts) == 1

    @pytest.mark.asyncio
    async def test_high_confidence_uses_model(self, enabled_config, complex_note):
        provider = FakeProvider(model_reply(LEFT_SIDE_REPLY, confidence=0.9))
        analyzer = HybridAnalyzer(config=enabled_config, provider=provider)

        result = await analyzer.analyze(complex_note, "male")

        assert result.method == AnalysisMethod.LLM
        assert result.confidence == pytest.approx(0.9)
        assert [r.view for r in result.recommendations] == [DiagramView.LEFTSIDE, DiagramView.CARDIORESPI]
        assert result.recommendations[0].asset_id == "maleleftside"
        assert result.reasoning == "Cardiorespiratory focus"
        assert result.complexity.is_complex

    @pytest.mark.asyncio
    async def test_model_views_are_unique(self, enabled_config, complex_note):
        reply = model_reply(
            [
                {"type": "front", "priority": 2, "findings": ["chest pain"]},
                {"type": "front", "priority": 1, "findings": ["leg swelling"]},
            ],
            confidence=0.9,
        )
        analyzer = HybridAnalyzer(config=enabled_config, provider=FakeProvider(reply))

        result = await analyzer.analyze(complex_note, "male")

        assert result.method == AnalysisMethod.LLM
        assert [r.view for r in result.recommendations] == [DiagramView.FRONT]
        assert result.recommendations[0].findings == ["leg swelling"]

    @pytest.mark.asyncio
    async def test_mid_confidence_merges(self, enabled_config, complex_note):
        provider = FakeProvider(model_reply(LEFT_SIDE_REPLY, confidence=0.7))
        analyzer = HybridAnalyzer(config=enabled_config, provider=provider)
        rules = analyzer.analyze_rules(complex_note, "male")

        result = await analyzer.analyze(complex_note, "male")

        assert result.method == AnalysisMethod.HYBRID
        expected = (HybridAnalyzer.rule_based_confidence(rules) + 0.7) / 2
        assert result.confidence == pytest.approx(expected)
        assert 1 <= len(result.recommendations) <= 3
        views = [r.view for r in result.recommendations]
        assert len(set(views)) == len(views)

    @pytest.mark.asyncio
    async def test_low_confidence_keeps_rules(self, enabled_config, complex_note):
        provider = FakeProvider(model_reply(LEFT_SIDE_REPLY, confidence=0.4, reasoning="Unsure"))
        analyzer = HybridAnalyzer(config=enabled_config, provider=provider)

        result = await analyzer.analyze(complex_note, "male")

        assert result.method == AnalysisMethod.RULES
        assert result.recommendations == analyzer.analyze_rules(complex_note, "male")
        assert result.reasoning == "Unsure"

    @pytest.mark.asyncio
    async def test_no_valid_recommendations_keeps_rules(self, enabled_config, complex_note):
        reply = model_reply([{"type": "xray", "priority": 1, "findings": []}], confidence=0.95)
        analyzer = HybridAnalyzer(config=enabled_config, provider=FakeProvider(reply))

        result = await analyzer.analyze(complex_note, "male")

        assert result.method == AnalysisMethod.RULES


class TestFallbacks:

    @pytest.mark.asyncio
    async def test_provider_failure_uses_rules(self, enabled_config, complex_note, failing_provider):
        analyzer = HybridAnalyzer(config=enabled_config, provider=failing_provider)

        result = await analyzer.analyze(complex_note, "male")

        assert result.method == AnalysisMethod.RULES
        assert result.recommendations == analyzer.analyze_rules(complex_note, "male")
        assert len(failing_provider.prompts) == 1

    @pytest.mark.asyncio
    async def test_unparseable_reply_uses_rules(self, enabled_config, complex_note):
        analyzer = HybridAnalyzer(config=enabled_config, provider=FakeProvider("I would suggest the front view."))
        result = await analyzer.analyze(complex_note, "male")
        assert result.method == AnalysisMethod.RULES

    @pytest.mark.asyncio
    async def test_missing_api_key_uses_rules(self, complex_note):
        config = LLMConfig(enabled=True, model="gpt-4", api_key="")
        result = await HybridAnalyzer(config=config).analyze(complex_note, "male")
        assert result.method == AnalysisMethod.RULES

    @pytest.mark.asyncio
    async def test_strict_mode_still_falls_back(self, complex_note, failing_provider):
        config = LLMConfig(enabled=True, api_key="k", fallback_to_rules=False)
        result = await HybridAnalyzer(config=config, provider=failing_provider).analyze(complex_note, "male")
        assert result.method == AnalysisMethod.RULES

    @pytest.mark.asyncio
    async def test_non_string_note_gets_fallback_view(self, disabled_config):
        result = await HybridAnalyzer(config=disabled_config).analyze(None, "female")

        assert len(result.recommendations) == 1
        fallback = result.recommendations[0]
        assert fallback.view == DiagramView.FRONT
        assert fallback.asset_id == "femalefront"
        assert fallback.findings == ["general examination"]
        assert fallback.reason == "Fallback view due to analysis error"
        assert result.confidence == pytest.approx(HybridAnalyzer.FALLBACK_CONFIDENCE)
        assert result.method == AnalysisMethod.RULES

    @pytest.mark.asyncio
    async def test_empty_note_gets_default_view(self, disabled_config):
        result = await HybridAnalyzer(config=disabled_config).analyze("", "male")
        assert [r.asset_id for r in result.recommendations] == ["malefront"]
        assert result.confidence == pytest.approx(0.7)

    @pytest.mark.asyncio
    async def test_unknown_gender_treated_as_male(self, disabled_config, simple_note):
        result = await HybridAnalyzer(config=disabled_config).analyze(simple_note, "other")
        assert all(r.asset_id.startswith("male") for r in result.recommendations)


class TestMerge:

    def test_lower_priority_wins(self, disabled_config):
        analyzer = HybridAnalyzer(config=disabled_config)
        rules = [match(DiagramView.FRONT, 1.0), match(DiagramView.BACK, 2.0)]
        llm = [
            match(DiagramView.FRONT, 1.05),
            match(DiagramView.LEFTSIDE, 1.5),
            match(DiagramView.BACK, 3.0),
        ]

        merged = analyzer.merge_recommendations(rules, llm)

        assert [(m.view, m.priority) for m in merged] == [
            (DiagramView.FRONT, 1.05),
            (DiagramView.LEFTSIDE, 1.5),
            (DiagramView.BACK, 2.1),
        ]

    def test_rules_win_ties(self, disabled_config):
        analyzer = HybridAnalyzer(config=disabled_config)
        rule_front = DiagramMatch(view=DiagramView.FRONT, priority=1.0, reason="rules", asset_id="malefront")
        llm_front = DiagramMatch(view=DiagramView.FRONT, priority=1.1, reason="model", asset_id="malefront")

        merged = analyzer.merge_recommendations([rule_front], [llm_front])

        assert len(merged) == 1
        assert merged[0].reason == "rules"
        assert merged[0].priority == pytest.approx(1.1)

    def test_merge_caps_at_three(self, disabled_config):
        analyzer = HybridAnalyzer(config=disabled_config)
        rules = [match(DiagramView.FRONT, 1.0), match(DiagramView.BACK, 2.0)]
        llm = [match(DiagramView.LEFTSIDE, 1.0), match(DiagramView.RIGHTSIDE, 1.5)]
        assert len(analyzer.merge_recommendations(rules, llm)) == 3

    def test_rule_confidence_grows_with_coverage(self):
        confidences = [
            HybridAnalyzer.rule_based_confidence([match(DiagramView.FRONT, 1.0)] * count)
            for count in range(5)
        ]
        assert confidences == [0.3, 0.7, 0.8, 0.85, 0.85]


class TestProgressive:

    @pytest.mark.asyncio
    async def test_rules_then_upgrade(self, enabled_config, complex_note):
        analyzer = HybridAnalyzer(config=enabled_config, provider=FakeProvider(model_reply(LEFT_SIDE_REPLY)))

        results = [result async for result in analyzer.analyze_progressive(complex_note, "male")]

        assert [r.method for r in results] == [AnalysisMethod.RULES, AnalysisMethod.LLM]

    @pytest.mark.asyncio
    async def test_no_upgrade_when_model_fails(self, enabled_config, complex_note, failing_provider):
        analyzer = HybridAnalyzer(config=enabled_config, provider=failing_provider)
        results = [result async for result in analyzer.analyze_progressive(complex_note, "male")]
        assert [r.method for r in results] == [AnalysisMethod.RULES]

    @pytest.mark.asyncio
    async def test_disabled_yields_once(self, disabled_config, complex_note):
        analyzer = HybridAnalyzer(config=disabled_config)
        results = [result async for result in analyzer.analyze_progressive(complex_note, "male")]
        assert len(results) == 1

    @pytest.mark.asyncio
    async def test_non_string_yields_fallback(self, disabled_config):
        analyzer = HybridAnalyzer(config=disabled_config)
        results = [result async for result in analyzer.analyze_progressive(42, "male")]
        assert len(results) == 1
        assert results[0].confidence == pytest.approx(HybridAnalyzer.FALLBACK_CONFIDENCE)


class TestNoteAnalysis:

    @pytest.mark.asyncio
    async def test_findings_and_diagrams_together(self, disabled_config):
        note = "Physical Examination: Abdomen is soft and non-tender. Left knee is swollen and tender."
        result = await HybridAnalyzer(config=disabled_config).analyze_note(note, "female")

        assert result.extraction.section_found
        assert len(result.extraction.findings) == 2
        assert result.diagrams.method == AnalysisMethod.RULES
        assert all(r.asset_id.startswith("female") for r in result.diagrams.recommendations)

    @pytest.mark.asyncio
    async def test_extraction_failure_keeps_diagrams(self, disabled_config, monkeypatch):
        analyzer = HybridAnalyzer(config=disabled_config)

        def broken_extract(text, gender):
            raise RuntimeError("catalog unavailable")

        monkeypatch.setattr(analyzer.extractor, "extract", broken_extract)
        note = "Physical Examination: Heart sounds normal. Lungs clear."

        result = await analyzer.analyze_note(note, "female")

        assert result.extraction.section_found is False
        assert result.extraction.findings == []
        assert result.extraction.recommended_diagrams == ["femalefront"]
        assert result.diagrams.method == AnalysisMethod.RULES
        assert len(result.diagrams.recommendations) >= 1

    @pytest.mark.asyncio
    async def test_camel_case_serialization(self, disabled_config, simple_note):
        result = await HybridAnalyzer(config=disabled_config).analyze_note(simple_note, "male")
        payload = result.model_dump(by_alias=True)
        assert "processingTimeMs" in payload["diagrams"]
        assert "recommendedDiagrams" in payload["extraction"]


def test_singleton():
    assert get_hybrid_analyzer() is get_hybrid_analyzer()
