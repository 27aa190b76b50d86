"""
Pydantic models for the clinical note analysis pipeline.

This module defines the structured representation of clinical findings,
region scores, diagram recommendations and the combined analysis results.
All models serialise to camelCase with ``model_dump(by_alias=True)``.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ============================================================================
# Vocabularies
# ============================================================================

class DiagramView(str, Enum):
    """Closed set of anatomical illustration identifiers."""
    FRONT = "front"
    BACK = "back"
    LEFTSIDE = "leftside"
    RIGHTSIDE = "rightside"
    CARDIORESPI = "cardiorespi"
    ABDOMINALLINGUINAL = "abdominallinguinal"


class SeverityTier(str, Enum):
    """Severity tiers detected by keyword context."""
    CRITICAL = "critical"
    HIGH = "high"
    MODERATE = "moderate"
    MILD = "mild"
    NORMAL = "normal"


class FindingSeverity(str, Enum):
    """Severity scale attached to an individual finding."""
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"
    NONE = "none"


class Laterality(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    BILATERAL = "bilateral"
    UNILATERAL = "unilateral"
    NONE = "none"


class FindingType(str, Enum):
    SYMPTOM = "symptom"
    EXAMINATION = "examination"
    INVESTIGATION = "investigation"
    ASSESSMENT = "assessment"


class ClinicalSignificance(str, Enum):
    NORMAL = "normal"
    ABNORMAL = "abnormal"
    EQUIVOCAL = "equivocal"


class ClinicalRelevance(str, Enum):
    """How much a body region raises the priority of its findings."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"


class AnalysisMethod(str, Enum):
    """Which path produced a recommendation set."""
    RULES = "rules"
    LLM = "llm"
    HYBRID = "hybrid"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _FrozenCamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# ============================================================================
# Findings (sentence level)
# ============================================================================

class ClinicalFinding(_FrozenCamelModel):
    """A single classified observation from the Physical Examination section."""
    id: str = Field(..., description="Stable identifier, finding_<sentence index>")
    text: str = Field(..., description="Source sentence")
    body_region: str = Field(..., description="Anatomical region id")
    finding_type: FindingType
    clinical_significance: ClinicalSignificance
    severity: FindingSeverity = FindingSeverity.NONE
    laterality: Laterality = Laterality.NONE
    anatomical_location: str = Field(..., description="Term that matched the region")
    description: str
    priority: int = Field(..., ge=1, le=5, description="1-5, higher = more important")


class ExtractionResult(_CamelModel):
    """Findings extracted from one note."""
    findings: list[ClinicalFinding] = Field(default_factory=list)
    body_regions: list[str] = Field(default_factory=list)
    recommended_diagrams: list[str] = Field(
        default_factory=list,
        description="Gender-specific asset ids, e.g. 'femalecardiorespi'"
    )
    clinical_summary: str = ""
    abnormal_findings: list[ClinicalFinding] = Field(default_factory=list)
    normal_findings: list[ClinicalFinding] = Field(default_factory=list)
    priority_findings: list[ClinicalFinding] = Field(default_factory=list)
    section_found: bool = Field(
        default=True,
        description="False when the note has no Physical Examination content"
    )


# ============================================================================
# Region scoring (note level)
# ============================================================================

class RegionScore(_CamelModel):
    """Keyword evidence for one scoring region."""
    score: int = Field(..., ge=1, description="Number of distinct region terms found")
    matched_terms: list[str] = Field(default_factory=list)
    severity: SeverityTier = SeverityTier.MILD
    laterality: Laterality = Laterality.NONE
    exam_methods: list[str] = Field(default_factory=list)


class RegionAnalysis(_CamelModel):
    """Region scores for a note, in catalog order."""
    regions: dict[str, RegionScore] = Field(default_factory=dict)
    overall_severity: SeverityTier = SeverityTier.MILD
    primary_regions: list[str] = Field(default_factory=list)


class DiagramMatch(_FrozenCamelModel):
    """A recommended diagram view. Lower priority = more important."""
    view: DiagramView
    priority: float
    findings: list[str] = Field(default_factory=list)
    reason: str = ""
    asset_id: str = Field(..., description="Gender-specific asset id, <gender><view>")


# ============================================================================
# Routing
# ============================================================================

class ComplexityAssessment(_CamelModel):
    """Decides whether a note is worth a model call."""
    score: float = 0.0
    is_complex: bool = False
    has_ambiguity: bool = False
    matched_indicators: list[str] = Field(default_factory=list)


class HybridAnalysisResult(_CamelModel):
    """Final recommendation set returned to the caller."""
    recommendations: list[DiagramMatch] = Field(..., min_length=1, max_length=3)
    method: AnalysisMethod
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str | None = None
    processing_time_ms: float = 0.0
    complexity: ComplexityAssessment | None = None


class NoteAnalysis(_CamelModel):
    """Findings and diagram recommendations for the same note."""
    extraction: ExtractionResult
    diagrams: HybridAnalysisResult


# ============================================================================
# Diagram assets and section-based selection
# ============================================================================

class DiagramAsset(_FrozenCamelModel):
    """Rendering asset for a view and gender."""
    view: DiagramView
    asset_id: str
    image_path: str
    json_key: str
    priority: int
    mirror_image: bool = False
    width: int
    height: int


class ExaminationSections(_CamelModel):
    """Structured examination sections as captured by the note form."""
    general_examination: str = ""
    cardiovascular_examination: str = ""
    respiratory_examination: str = ""
    abdominal_examination: str = ""
    other_systems_examination: str = ""

    def combined_text(self) -> str:
        return " ".join([
            self.general_examination,
            self.cardiovascular_examination,
            self.respiratory_examination,
            self.abdominal_examination,
            self.other_systems_examination,
        ]).lower()


class ViewScore(_CamelModel):
    view: DiagramView
    score: float = 0.0
    factors: list[str] = Field(default_factory=list)


class ExaminationAnalysis(_CamelModel):
    """Primary and secondary diagrams chosen from examination sections."""
    primary_diagram: DiagramAsset
    secondary_diagrams: list[DiagramAsset] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning_factors: list[str] = Field(default_factory=list)
