"""
Model Gateway and Validator.

Builds the constrained prompt, performs one bounded provider call and
turns the untrusted reply into an LLMAnalysis whose recommendations only
use the closed view vocabulary.
"""

import asyncio
import json
import re
from typing import Any

from clinical_diagrams.config.logging_config import get_logger
from clinical_diagrams.exceptions import ModelSchemaError, ModelTransportError
from clinical_diagrams.models.analysis_models import DiagramMatch, DiagramView
from clinical_diagrams.models.llm_models import LLMAnalysis, LLMConfig
from clinical_diagrams.services.diagram_assets import asset_id, normalize_gender
from clinical_diagrams.services.llm_providers import LLMProvider

logger = get_logger(__name__)


AVAILABLE_VIEWS: tuple[str, ...] = tuple(view.value for view in DiagramView)

MAX_LLM_RECOMMENDATIONS = 3
MAX_FINDINGS_PER_RECOMMENDATION = 5
MIN_PRIORITY = 1.0
MAX_PRIORITY = 10.0
DEFAULT_CONFIDENCE = 0.8
DEFAULT_REASONING = "LLM analysis completed"
DEFAULT_REASON = "LLM recommendation"

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


PROMPT_TEMPLATE = """As a medical expert analyzing clinical notes, recommend anatomical diagram views for documentation.

PATIENT GENDER: {gender}
AVAILABLE VIEWS: {views}

MEDICAL TEXT:
"{text}"

ANALYSIS REQUIREMENTS:
1. Identify primary anatomical regions involved
2. Consider severity and clinical significance
3. Account for laterality (left/right/bilateral)
4. Prioritize most relevant views (max 3)
5. Provide clear medical reasoning

RESPONSE FORMAT (JSON only, no prose):
{{
  "analysis": {{
    "primaryRegions": ["region1", "region2"],
    "severity": "mild|moderate|high|critical",
    "laterality": "left|right|bilateral|none",
    "complexity": "simple|moderate|complex"
  }},
  "recommendations": [
    {{
      "type": "view_name",
      "priority": 1,
      "findings": ["finding1", "finding2"],
      "reason": "medical justification"
    }}
  ],
  "reasoning": "detailed explanation of why these views were selected",
  "confidence": 0.85
}}

Ensure recommendations use only available views and are medically appropriate.
"""


def build_prompt(text: str, gender: str) -> str:
    return PROMPT_TEMPLATE.format(
        gender=gender,
        views=", ".join(AVAILABLE_VIEWS),
        text=text,
    )


def parse_llm_response(raw: str) -> dict[str, Any]:
    """
    Parse the model reply strictly.

    Markdown code fences are stripped first; anything that is not a JSON
    object raises ModelSchemaError.
    """
    content = _CODE_FENCE.sub("", (raw or "").strip()).strip()
    try:
        payload = json.loads(content)
    except json.JSONDecodeError as e:
        raise ModelSchemaError(
            "Model reply is not valid JSON",
            details={"position": e.pos, "length": len(content)},
        ) from e
    if not isinstance(payload, dict):
        raise ModelSchemaError(
            "Model reply is not a JSON object",
            details={"received_type": type(payload).__name__},
        )
    return payload


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def sanitize_recommendations(raw: Any, gender: str) -> list[DiagramMatch]:
    """
    Drop malformed entries, clamp priorities, truncate findings and count.

    A view named more than once keeps its best (lowest) priority at the
    position it was first named.
    """
    if not isinstance(raw, list):
        return []

    best: dict[DiagramView, DiagramMatch] = {}
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        view = entry.get("type")
        priority = entry.get("priority")
        findings = entry.get("findings")
        if not isinstance(view, str) or view not in AVAILABLE_VIEWS:
            continue
        if not _is_number(priority):
            continue
        if not isinstance(findings, list):
            continue

        reason = entry.get("reason")
        match = DiagramMatch(
            view=DiagramView(view),
            priority=min(MAX_PRIORITY, max(MIN_PRIORITY, float(priority))),
            findings=[f for f in findings if isinstance(f, str)][:MAX_FINDINGS_PER_RECOMMENDATION],
            reason=reason if isinstance(reason, str) and reason else DEFAULT_REASON,
            asset_id=asset_id(view, gender),
        )
        existing = best.get(match.view)
        if existing is None or match.priority < existing.priority:
            best[match.view] = match
    return list(best.values())[:MAX_LLM_RECOMMENDATIONS]


def sanitize_confidence(value: Any) -> float:
    if not _is_number(value):
        return DEFAULT_CONFIDENCE
    return min(1.0, max(0.0, float(value)))


class LLMGateway:
    """One bounded model call per analysis."""

    def __init__(self, provider: LLMProvider, config: LLMConfig):
        self.provider = provider
        self.config = config

    async def analyze(self, text: str, gender: str) -> LLMAnalysis:
        """
        Ask the model for diagram recommendations.

        Raises:
            ModelTransportError: provider failure or timeout.
            ModelSchemaError: unusable reply.
        """
        gender = normalize_gender(gender)
        prompt = build_prompt(text, gender)

        try:
            raw = await asyncio.wait_for(
                self.provider.complete(prompt),
                timeout=self.config.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise ModelTransportError(
                "Model call timed out",
                provider=self.provider.name,
                details={"timeout_seconds": self.config.timeout_seconds},
            ) from e

        payload = parse_llm_response(raw)
        reasoning = payload.get("reasoning")
        analysis = payload.get("analysis")

        result = LLMAnalysis(
            recommendations=sanitize_recommendations(payload.get("recommendations"), gender),
            reasoning=reasoning if isinstance(reasoning, str) and reasoning else DEFAULT_REASONING,
            confidence=sanitize_confidence(payload.get("confidence")),
            analysis=analysis if isinstance(analysis, dict) else {},
        )

        logger.info(
            "Model analysis parsed",
            provider=self.provider.name,
            recommendations=len(result.recommendations),
            confidence=result.confidence,
        )
        return result
