"""
Terminology catalog for clinical note analysis.

Provides:
- Scoring regions (body systems) with their default diagram views
- Anatomical regions used to place sentence-level findings
- Laterality, severity and examination-method markers
- Clinical indicator vocabularies and section header vocabularies
- Whole-word term matching shared by every analyser
"""

import re
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

from clinical_diagrams.config.logging_config import get_logger
from clinical_diagrams.models.analysis_models import (
    ClinicalRelevance,
    DiagramView,
    FindingSeverity,
    SeverityTier,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class ExamRegion:
    """Body system used by the region scorer."""
    id: str
    terms: tuple[str, ...]
    priority: int
    views: tuple[DiagramView, ...]


@dataclass(frozen=True)
class AnatomicalRegion:
    """Body region a single finding is attached to."""
    id: str
    display_name: str
    terms: tuple[str, ...]
    systems: tuple[str, ...]
    relevance: ClinicalRelevance
    view: DiagramView
    abbreviations: tuple[str, ...] = ()


@dataclass(frozen=True)
class ComplexityIndicator:
    """Regex indicator contributing to the complexity score."""
    name: str
    pattern: str
    weight: float
    hedging: bool = False


@dataclass(frozen=True)
class TerminologyCatalog:
    """
    Immutable vocabulary shared by all analysers.

    Built once per process by ``get_terminology_catalog``; collections
    are tuples or read-only mappings so it can be shared without copying.
    """
    exam_regions: tuple[ExamRegion, ...]
    anatomical_regions: tuple[AnatomicalRegion, ...]
    laterality_markers: Mapping[str, tuple[str, ...]] = field(hash=False)
    severity_markers: Mapping[SeverityTier, tuple[str, ...]] = field(hash=False)
    finding_severity_markers: Mapping[FindingSeverity, tuple[str, ...]] = field(hash=False)
    exam_methods: Mapping[str, tuple[str, ...]] = field(hash=False)
    examination_indicators: tuple[str, ...] = ()
    symptom_indicators: tuple[str, ...] = ()
    normal_indicators: tuple[str, ...] = ()
    abnormal_indicators: tuple[str, ...] = ()
    abnormal_descriptors: tuple[str, ...] = ()
    physical_exam_indicators: tuple[str, ...] = ()
    section_start_headers: tuple[str, ...] = ()
    section_heading_only_headers: tuple[str, ...] = ()
    section_end_headers: tuple[str, ...] = ()
    complexity_indicators: tuple[ComplexityIndicator, ...] = ()
    examination_keywords: Mapping[str, tuple[str, ...]] = field(hash=False, default_factory=dict)

    def exam_region(self, region_id: str) -> ExamRegion | None:
        for region in self.exam_regions:
            if region.id == region_id:
                return region
        return None

    def anatomical_region(self, region_id: str) -> AnatomicalRegion | None:
        for region in self.anatomical_regions:
            if region.id == region_id:
                return region
        return None


# ============================================================================
# Term matching
# ============================================================================

SEVERITY_WEIGHTS: dict[SeverityTier, int] = {
    SeverityTier.CRITICAL: 5,
    SeverityTier.HIGH: 4,
    SeverityTier.MODERATE: 3,
    SeverityTier.MILD: 2,
    SeverityTier.NORMAL: 1,
}


@lru_cache(maxsize=4096)
def term_pattern(term: str) -> re.Pattern[str]:
    """
    Compile a whole-word pattern for a lower-case term.

    The term may not be part of a longer word ("ear" never matches
    "clear") but may carry a plural suffix ("murmur" matches "murmurs").
    """
    return re.compile(rf"(?<![a-z0-9]){re.escape(term)}(?:e?s)?(?![a-z0-9])")


def find_term(text: str, term: str) -> int:
    """Return the index of the first whole-word match of term in text, or -1."""
    match = term_pattern(term).search(text)
    return match.start() if match else -1


def contains_term(text: str, term: str) -> bool:
    return term_pattern(term).search(text) is not None


def matching_terms(text: str, terms: tuple[str, ...] | list[str]) -> list[str]:
    """Terms (in vocabulary order) that occur in lower-case text."""
    return [term for term in terms if contains_term(text, term)]


# ============================================================================
# Catalog contents
# ============================================================================

_EXAM_REGIONS: tuple[ExamRegion, ...] = (
    ExamRegion(
        id="head_neck",
        terms=(
            # Head, skull, face
            "head", "skull", "cranium", "brain", "cerebral", "intracranial", "scalp",
            "face", "facial", "forehead", "cheek", "chin", "jaw", "mandible", "maxilla",
            # Eyes
            "eye", "ocular", "visual", "pupil", "iris", "sclera", "conjunctiva", "eyelid",
            "vision", "sight", "blind", "diplopia", "nystagmus", "ptosis", "strabismus",
            # Ears
            "ear", "auditory", "hearing", "tympanic", "eardrum", "otitis", "tinnitus",
            # Nose
            "nose", "nasal", "nostril", "sinus", "rhinitis", "epistaxis", "nosebleed",
            # Mouth and throat
            "mouth", "oral", "tongue", "lips", "teeth", "tooth", "gums", "throat",
            "pharynx", "larynx", "swallowing", "dysphagia", "hoarse", "hoarseness",
            # Neck
            "neck", "cervical", "thyroid", "lymph node", "carotid", "jugular", "trachea",
            "cervical spine", "c-spine",
        ),
        priority=1,
        views=(DiagramView.FRONT,),
    ),
    ExamRegion(
        id="cardiovascular",
        terms=(
            "heart", "cardiac", "cardio", "cardiovascular", "murmur", "gallop", "rub",
            "valve", "mitral", "aortic", "tricuspid", "pulmonary valve",
            "heart sound", "s1", "s2", "s3", "s4", "systolic", "diastolic",
            "apex beat", "pmi", "point of maximal impulse",
            "pulse", "pulsation", "blood pressure", "bp", "hypertension", "hypotension",
            "arrhythmia", "irregular", "tachycardia", "bradycardia",
            "carotid pulse", "jugular", "jvp", "jugular venous pressure", "edema", "swelling",
            "cyanosis", "perfusion", "circulation",
            "precordium", "precordial", "parasternal", "suprasternal", "substernal", "heave", "lift",
        ),
        priority=2,
        views=(DiagramView.CARDIORESPI, DiagramView.FRONT),
    ),
    ExamRegion(
        id="respiratory",
        terms=(
            "lung", "pulmonary", "respiratory", "breathing", "breath", "breathe",
            "dyspnea", "shortness of breath", "sob", "tachypnea", "bradypnea", "apnea",
            "wheeze", "wheezing", "rhonchi", "rales", "crackle", "stridor", "pleural",
            "pneumonia", "asthma", "copd", "emphysema",
            "chest", "thorax", "thoracic", "intercostal", "diaphragm", "expansion", "excursion",
            "percussion", "percuss", "dull", "dullness", "resonant", "hyperresonant", "tympanic",
            "auscultation", "auscultate", "breath sound", "vesicular", "bronchial", "diminished",
            "absent breath sound", "decreased breath sound",
        ),
        priority=2,
        views=(DiagramView.CARDIORESPI, DiagramView.FRONT, DiagramView.BACK),
    ),
    ExamRegion(
        id="abdominal",
        terms=(
            "abdomen", "abdominal", "stomach", "belly", "epigastric", "hypogastric", "umbilical",
            "periumbilical", "suprapubic",
            "right upper quadrant", "left upper quadrant", "right lower quadrant", "left lower quadrant",
            "ruq", "luq", "rlq", "llq", "quadrant",
            "liver", "hepatic", "hepatomegaly", "spleen", "splenic", "splenomegaly",
            "pancreas", "pancreatic", "gallbladder", "appendix", "appendicitis",
            "bowel", "intestine", "colon", "rectum", "rectal",
            "tender", "tenderness", "pain", "painful", "guarding", "rigidity", "rebound",
            "distended", "distention", "bloated", "mass", "hernia",
            "ascites", "fluid", "bruit", "unremarkable",
        ),
        priority=3,
        views=(DiagramView.ABDOMINALLINGUINAL, DiagramView.FRONT),
    ),
    ExamRegion(
        id="genitourinary",
        terms=(
            "kidney", "renal", "bladder", "urethra", "ureter",
            "urinary", "urine", "dysuria", "hematuria", "proteinuria", "frequency", "urgency",
            "costovertebral angle", "cva", "cva tenderness", "flank", "flank pain", "suprapubic",
            "pelvis", "pelvic", "pelvic exam", "perineum", "perineal", "genital", "genitals",
            "inguinal", "groin", "hernia", "lymph node",
        ),
        priority=3,
        views=(DiagramView.ABDOMINALLINGUINAL, DiagramView.FRONT),
    ),
    ExamRegion(
        id="musculoskeletal",
        terms=(
            "joint", "muscle", "muscular", "bone", "skeletal",
            "range of motion", "rom", "mobility", "movement", "strength", "weakness", "weak",
            "atrophy", "spasm", "contracture", "deformity", "swelling", "inflammation",
            "spine", "spinal", "vertebra", "vertebrae", "vertebral", "back", "back pain",
            "lumbar", "thoracic", "cervical", "sacral", "coccyx",
            "scoliosis", "kyphosis", "lordosis", "sciatica", "radiculopathy",
            "extremity", "extremities", "limb", "upper extremity", "lower extremity",
            "arm", "leg", "hand", "foot", "feet", "knee", "ankle", "shoulder", "elbow", "wrist",
        ),
        priority=4,
        views=(DiagramView.FRONT, DiagramView.BACK, DiagramView.LEFTSIDE, DiagramView.RIGHTSIDE),
    ),
    ExamRegion(
        id="neurological",
        terms=(
            "neurological", "neurologic", "neuro", "nervous system", "cns", "pns",
            "mental status", "consciousness", "alert", "oriented", "confused", "lethargic", "stupor",
            "motor", "sensory", "sensation", "reflex", "reflexes", "dtr", "deep tendon reflexes",
            "strength", "weakness", "paralysis", "paresis", "hemiparesis", "hemiplegia",
            "numbness", "tingling", "paresthesia", "hyperesthesia", "anesthesia",
            "coordination", "ataxia", "tremor", "gait", "balance", "romberg",
            "dysmetria", "dysdiadochokinesia", "intention tremor",
            "cranial nerve", "facial nerve", "trigeminal", "optic nerve",
            "facial droop", "facial weakness", "bell palsy",
        ),
        priority=4,
        views=(DiagramView.FRONT, DiagramView.LEFTSIDE, DiagramView.RIGHTSIDE),
    ),
)


_ANATOMICAL_REGIONS: tuple[AnatomicalRegion, ...] = (
    AnatomicalRegion(
        id="head", display_name="Head",
        terms=("head", "skull", "scalp", "cranium", "cephalic"),
        systems=("neurological", "dermatological"),
        relevance=ClinicalRelevance.HIGH, view=DiagramView.FRONT,
    ),
    AnatomicalRegion(
        id="face", display_name="Face",
        terms=("face", "facial", "cheek", "chin", "forehead", "temple", "zygoma", "maxilla", "mandible"),
        systems=("dermatological", "neurological", "ophthalmological"),
        relevance=ClinicalRelevance.HIGH, view=DiagramView.FRONT,
    ),
    AnatomicalRegion(
        id="eyes", display_name="Eyes",
        terms=("eye", "ocular", "conjunctiva", "sclera", "cornea", "pupil", "iris", "eyelid"),
        systems=("ophthalmological", "neurological"),
        relevance=ClinicalRelevance.HIGH, view=DiagramView.FRONT,
        abbreviations=("visual",),
    ),
    AnatomicalRegion(
        id="ears", display_name="Ears",
        terms=("ear", "hearing", "auricle", "tympanic", "tympanic membrane", "ear canal"),
        systems=("otological", "neurological"),
        relevance=ClinicalRelevance.MEDIUM, view=DiagramView.FRONT,
        abbreviations=("aural", "otological"),
    ),
    AnatomicalRegion(
        id="nose", display_name="Nose",
        terms=("nose", "nasal", "nostril", "septum", "turbinate", "sinus"),
        systems=("otolaryngological", "respiratory"),
        relevance=ClinicalRelevance.MEDIUM, view=DiagramView.FRONT,
        abbreviations=("rhinological",),
    ),
    AnatomicalRegion(
        id="mouth", display_name="Mouth",
        terms=("mouth", "oral", "dental", "gums", "teeth", "tongue", "palate", "pharynx", "uvula"),
        systems=("dental", "gastrointestinal"),
        relevance=ClinicalRelevance.MEDIUM, view=DiagramView.FRONT,
        abbreviations=("buccal",),
    ),
    AnatomicalRegion(
        id="neck", display_name="Neck",
        terms=("neck", "cervical", "larynx", "trachea", "thyroid", "lymph", "carotid"),
        systems=("cardiovascular", "respiratory", "neurological"),
        relevance=ClinicalRelevance.HIGH, view=DiagramView.FRONT,
        abbreviations=("throat",),
    ),
    AnatomicalRegion(
        id="chest", display_name="Chest",
        terms=("chest", "sternum", "rib", "costal", "intercostal"),
        systems=("cardiovascular", "respiratory"),
        relevance=ClinicalRelevance.HIGH, view=DiagramView.CARDIORESPI,
        abbreviations=("thorax", "thoracic"),
    ),
    AnatomicalRegion(
        id="heart", display_name="Heart",
        terms=("heart", "cardiac", "cardiovascular", "pericardium", "atrium", "ventricle"),
        systems=("cardiovascular",),
        relevance=ClinicalRelevance.CRITICAL, view=DiagramView.CARDIORESPI,
        abbreviations=("hr", "myocardium"),
    ),
    AnatomicalRegion(
        id="lungs", display_name="Lungs",
        terms=("lung", "pulmonary", "respiratory", "bronchi", "alveoli", "pleura"),
        systems=("respiratory",),
        relevance=ClinicalRelevance.CRITICAL, view=DiagramView.CARDIORESPI,
        abbreviations=("pulm", "resp"),
    ),
    AnatomicalRegion(
        id="abdomen", display_name="Abdomen",
        terms=("abdomen", "abdominal", "epigastric", "umbilical", "hypogastric", "quadrant"),
        systems=("gastrointestinal", "genitourinary"),
        relevance=ClinicalRelevance.HIGH, view=DiagramView.ABDOMINALLINGUINAL,
        abbreviations=("abdo", "stomach", "belly"),
    ),
    AnatomicalRegion(
        id="pelvis", display_name="Pelvis",
        terms=("pelvis", "pelvic", "genital", "inguinal", "pubic", "sacrum", "coccyx"),
        systems=("genitourinary", "reproductive"),
        relevance=ClinicalRelevance.HIGH, view=DiagramView.ABDOMINALLINGUINAL,
    ),
    AnatomicalRegion(
        id="back", display_name="Back",
        terms=("back", "spine", "spinal", "vertebral", "lumbar"),
        systems=("musculoskeletal", "neurological"),
        relevance=ClinicalRelevance.HIGH, view=DiagramView.BACK,
        abbreviations=("dorsal",),
    ),
    AnatomicalRegion(
        id="upperExtremities", display_name="Upper Extremities",
        terms=("arm", "shoulder", "elbow", "wrist", "hand", "finger", "thumb", "humerus", "radius", "ulna"),
        systems=("musculoskeletal", "neurological", "vascular"),
        relevance=ClinicalRelevance.MEDIUM, view=DiagramView.FRONT,
        abbreviations=("upper extremities", "upper extremity", "upper limb"),
    ),
    AnatomicalRegion(
        id="lowerExtremities", display_name="Lower Extremities",
        terms=("leg", "thigh", "knee", "ankle", "foot", "feet", "toe", "femur", "tibia", "fibula"),
        systems=("musculoskeletal", "neurological", "vascular"),
        relevance=ClinicalRelevance.MEDIUM, view=DiagramView.FRONT,
        abbreviations=("lower extremities", "lower extremity", "lower limb"),
    ),
)


_LATERALITY_MARKERS: dict[str, tuple[str, ...]] = {
    "left": ("left", "left-sided", "left side", "sinister"),
    "right": ("right", "right-sided", "right side", "dexter"),
    "bilateral": ("bilateral", "bilaterally", "both sides", "both", "symmetrical", "symmetric"),
    "unilateral": ("unilateral",),
}

_SEVERITY_MARKERS: dict[SeverityTier, tuple[str, ...]] = {
    SeverityTier.CRITICAL: ("emergency", "critical", "life-threatening", "severe acute", "urgent"),
    SeverityTier.HIGH: (
        "severe", "significant", "marked", "pronounced", "obvious", "striking",
        "dramatic", "prominent", "extreme",
    ),
    SeverityTier.MODERATE: (
        "moderate", "noticeable", "evident", "present", "visible", "palpable",
        "appreciable", "modest", "intermediate",
    ),
    SeverityTier.MILD: (
        "mild", "slight", "minimal", "subtle", "trace", "questionable", "possible",
        "minor", "trivial",
    ),
    SeverityTier.NORMAL: ("normal", "unremarkable", "within normal limits", "wnl", "negative", "clear", "intact"),
}

# Sentence-level scale for findings, checked in order; the first tier with a
# marker wins.
_FINDING_SEVERITY_MARKERS: dict[FindingSeverity, tuple[str, ...]] = {
    FindingSeverity.MILD: ("mild", "slight", "minimal", "subtle", "minor", "trivial"),
    FindingSeverity.MODERATE: ("moderate", "modest", "noticeable", "intermediate"),
    FindingSeverity.SEVERE: ("severe", "marked", "significant", "prominent", "obvious", "extreme"),
}

_EXAM_METHODS: dict[str, tuple[str, ...]] = {
    "inspection": ("inspection", "inspect", "visual", "appearance", "looks", "appears", "visible", "observed"),
    "palpation": ("palpation", "palpate", "palpable", "feels", "touch", "pressure", "mass", "tender", "palpated"),
    "percussion": ("percussion", "percuss", "dull", "resonant", "hyperresonant", "tympanic", "percussed"),
    "auscultation": ("auscultation", "auscultate", "listen", "listened", "sounds", "murmur", "bruit", "rub"),
}

_EXAMINATION_INDICATORS = (
    "examination", "exam", "inspection", "palpation", "percussion", "auscultation",
    "observed", "noted", "found", "revealed", "demonstrated", "showed",
    "appears", "looks", "seems", "presents", "displays", "shows",
)

_SYMPTOM_INDICATORS = (
    "complains", "reports", "experiences", "feels", "suffers", "presents with",
    "pain", "discomfort", "tenderness", "swelling", "redness", "warmth",
    "ache", "soreness", "burning", "tingling", "numbness", "weakness",
)

_NORMAL_INDICATORS = (
    "normal", "unremarkable", "clear", "healthy", "intact", "symmetrical",
    "no tenderness", "no swelling", "no abnormality", "within normal limits",
    "good", "adequate", "satisfactory", "appropriate", "physiological", "soft",
)

_ABNORMAL_INDICATORS = (
    "abnormal", "tender", "swollen", "red", "warm", "asymmetrical",
    "decreased", "increased", "diminished", "absent", "irregular",
    "enlarged", "distended", "rigid", "spastic", "flaccid", "edematous",
)

# Descriptors that mark a sentence abnormal unless it is negated.
# Noun forms are listed so "tenderness in the RLQ" classifies like "tender".
_ABNORMAL_DESCRIPTORS = (
    "tender", "tenderness", "swollen", "swelling", "red", "redness", "warm", "warmth",
    "painful", "enlarged", "distended", "rigid", "rigidity", "spastic", "flaccid",
    "edematous", "asymmetrical", "irregular", "decreased", "increased", "diminished",
    "absent", "guarding",
)

_PHYSICAL_EXAM_INDICATORS = (
    "temperature", "temp", "pulse", "heart rate", "blood pressure", "bp",
    "respiratory rate", "respiration", "breathing", "lung", "chest",
    "heart sound", "murmur", "abdomen", "abdominal", "tender", "palpation",
    "inspection", "auscultation", "percussion", "lymph node", "skin",
    "extremities", "neurological", "reflexes", "pupil", "throat",
    "ear", "nose", "mouth", "neck", "thyroid", "liver", "spleen",
    "bowel sound", "edema", "cyanosis", "jaundice", "rash", "lesion",
)

# Matched anywhere in the note.
_SECTION_START_HEADERS = (
    "physical examination",
    "physical exam",
    "clinical examination",
    "clinical exam",
    "objective examination",
    "objective findings",
    "examination findings",
    "physical findings",
    "on examination",
)

# Matched only at the start of a line or when followed by a colon.
_SECTION_HEADING_ONLY_HEADERS = ("examination", "exam")

_SECTION_END_HEADERS = (
    "assessment",
    "impression",
    "diagnosis",
    "differential",
    "plan",
    "treatment",
    "medications",
    "prescriptions",
    "recommendations",
    "follow-up",
    "discharge",
    "summary",
)

_COMPLEXITY_INDICATORS = (
    ComplexityIndicator("cardio_respiratory", r"(cardiac|heart).*(respiratory|lung|breath)", 2.0),
    ComplexityIndicator("neuro_pain", r"(neuro|weakness).*(pain|ache)", 2.0),
    ComplexityIndicator("severity_terms", r"\b(severe|critical|emergency|acute)\b", 1.5),
    ComplexityIndicator("bilateral", r"\bleft\b.*\bright\b|\bright\b.*\bleft\b|\bbilateral", 1.5),
    ComplexityIndicator("head_trunk", r"(head|face).*(chest|abdomen)", 1.0),
    ComplexityIndicator("spine_limb", r"(back|spine).*(leg|arm)", 1.0),
    ComplexityIndicator("hedging", r"\b(possibly|maybe|uncertain|unclear)\b", 1.0, hedging=True),
)

_EXAMINATION_KEYWORDS: dict[str, tuple[str, ...]] = {
    "cardiovascular": (
        "heart", "cardiac", "cardio", "chest pain", "palpitation", "murmur",
        "tachycardia", "bradycardia", "arrhythmia", "pulse", "blood pressure",
        "s1", "s2", "s3", "s4", "gallop", "rub", "apex", "precordium",
    ),
    "respiratory": (
        "lung", "breath", "cough", "wheeze", "stridor", "rale", "crackle",
        "dyspnea", "shortness of breath", "chest", "thorax", "respiratory",
        "pneumonia", "asthma", "copd", "pleural", "bronchi",
    ),
    "abdominal": (
        "abdomen", "stomach", "belly", "bowel", "liver", "spleen", "kidney",
        "pain abdomen", "abdominal pain", "nausea", "vomiting", "diarrhea",
        "constipation", "hepatomegaly", "splenomegaly", "ascites", "hernia",
        "inguinal", "umbilical", "epigastric", "hypogastric",
    ),
    "back": (
        "back pain", "spine", "vertebra", "lumbar", "thoracic", "cervical",
        "sciatica", "spinal", "kyphosis", "scoliosis", "lordosis", "disc",
    ),
    "musculoskeletal": (
        "joint", "muscle", "bone", "fracture", "strain", "sprain", "arthritis",
        "swelling", "tender", "mobility", "range of motion", "stiffness",
    ),
    "neurological": (
        "neuro", "reflex", "sensation", "motor", "coordination", "gait",
        "tremor", "weakness", "numbness", "tingling", "paralysis",
    ),
    "dermatological": (
        "skin", "rash", "lesion", "mole", "bruise", "wound", "ulcer",
        "erythema", "pruritus", "dermatitis", "eczema",
    ),
}


@lru_cache
def get_terminology_catalog() -> TerminologyCatalog:
    """Get the process-wide terminology catalog."""
    catalog = TerminologyCatalog(
        exam_regions=_EXAM_REGIONS,
        anatomical_regions=_ANATOMICAL_REGIONS,
        laterality_markers=MappingProxyType(_LATERALITY_MARKERS),
        severity_markers=MappingProxyType(_SEVERITY_MARKERS),
        finding_severity_markers=MappingProxyType(_FINDING_SEVERITY_MARKERS),
        exam_methods=MappingProxyType(_EXAM_METHODS),
        examination_indicators=_EXAMINATION_INDICATORS,
        symptom_indicators=_SYMPTOM_INDICATORS,
        normal_indicators=_NORMAL_INDICATORS,
        abnormal_indicators=_ABNORMAL_INDICATORS,
        abnormal_descriptors=_ABNORMAL_DESCRIPTORS,
        physical_exam_indicators=_PHYSICAL_EXAM_INDICATORS,
        section_start_headers=_SECTION_START_HEADERS,
        section_heading_only_headers=_SECTION_HEADING_ONLY_HEADERS,
        section_end_headers=_SECTION_END_HEADERS,
        complexity_indicators=_COMPLEXITY_INDICATORS,
        examination_keywords=MappingProxyType(_EXAMINATION_KEYWORDS),
    )
    logger.debug(
        "Terminology catalog loaded",
        exam_regions=len(catalog.exam_regions),
        anatomical_regions=len(catalog.anatomical_regions),
    )
    return catalog
