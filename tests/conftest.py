"""
Pytest Configuration and Fixtures

Shared fixtures for the clinical diagram analysis tests.
"""
import json

import pytest

from clinical_diagrams.exceptions import ModelTransportError
from clinical_diagrams.models.llm_models import LLMConfig
from clinical_diagrams.services.finding_extractor import ClinicalFindingExtractor
from clinical_diagrams.services.llm_providers import LLMProvider
from clinical_diagrams.services.terminology import get_terminology_catalog


class FakeProvider(LLMProvider):
    """In-process provider returning a canned reply (or raising)."""

    name = "fake"

    def __init__(self, reply: str = "", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


def model_reply(recommendations: list[dict], confidence=0.9, reasoning="Cardiorespiratory focus") -> str:
    return json.dumps({
        "analysis": {"primaryRegions": ["cardiovascular"], "severity": "high"},
        "recommendations": recommendations,
        "reasoning": reasoning,
        "confidence": confidence,
    })


@pytest.fixture
def catalog():
    return get_terminology_catalog()


@pytest.fixture
def extractor(catalog) -> ClinicalFindingExtractor:
    return ClinicalFindingExtractor(catalog)


@pytest.fixture
def enabled_config() -> LLMConfig:
    """Model path enabled with a dummy key; providers are always faked."""
    return LLMConfig(enabled=True, api_key="test-key", model="gpt-4", timeout_seconds=2.0)


@pytest.fixture
def disabled_config() -> LLMConfig:
    return LLMConfig(enabled=False)


@pytest.fixture
def complex_note() -> str:
    """Note that clears the complexity threshold (multi-system, severity, laterality)."""
    return (
        "Physical Examination: Severe chest pain radiating to the left arm. "
        "Heart sounds regular with a soft systolic murmur. "
        "Respiratory examination shows bilateral crackles at the lung bases. "
        "Right leg swelling noted."
    )


@pytest.fixture
def simple_note() -> str:
    return "Abdomen soft."


@pytest.fixture
def failing_provider() -> FakeProvider:
    return FakeProvider(error=ModelTransportError("connection refused", provider="fake"))
