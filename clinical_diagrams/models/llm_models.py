"""
Models for the optional language-model path.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from clinical_diagrams.config.config import Settings
from clinical_diagrams.models.analysis_models import DiagramMatch


LLMModel = Literal["gpt-4", "claude", "local-llm"]


class LLMConfig(BaseModel):
    """Runtime configuration for the model path. Read-only once built."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    api_key: str = Field(default="", repr=False)
    model: LLMModel = "gpt-4"
    endpoint: str | None = None
    max_tokens: int = Field(default=1000, ge=1)
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    fallback_to_rules: bool = True
    timeout_seconds: float = Field(default=15.0, gt=0)

    @classmethod
    def from_settings(cls, settings: Settings) -> "LLMConfig":
        return cls(
            enabled=settings.llm_enabled,
            api_key=settings.llm_api_key,
            model=settings.llm_model,
            endpoint=settings.llm_endpoint,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
            fallback_to_rules=settings.llm_fallback_to_rules,
            timeout_seconds=settings.llm_timeout_seconds,
        )


# Deployment presets: no external calls, a local model, or a cloud model.
# The cloud preset carries no key; combine it with settings via model_copy.
MEDICAL_LLM_CONFIGS: dict[str, LLMConfig] = {
    "privacy_first": LLMConfig(enabled=False, fallback_to_rules=True),
    "local_llm": LLMConfig(
        enabled=True,
        model="local-llm",
        endpoint="http://localhost:11434/api/generate",
        fallback_to_rules=True,
    ),
    "cloud_llm": LLMConfig(
        enabled=True,
        model="gpt-4",
        max_tokens=1000,
        temperature=0.3,
        fallback_to_rules=True,
    ),
}


class LLMAnalysis(BaseModel):
    """Model output after sanitisation."""
    recommendations: list[DiagramMatch] = Field(default_factory=list)
    reasoning: str = "LLM analysis completed"
    confidence: float = Field(default=0.8, ge=0.0, le=1.0)
    analysis: dict[str, Any] = Field(
        default_factory=dict,
        description="Free-form analysis block echoed by the model"
    )
