"""
Clinical Finding Extractor.

Isolates the Physical Examination section of a note, splits it into
sentences and turns each sentence that names a body region into a
ClinicalFinding.

Pipeline:
1. Section isolation (header vocabulary, falls back to the whole note
   when it reads like an examination)
2. Sentence split that survives abbreviations ("Dr.", "e.g.")
3. Per-sentence classification: type, region, significance, severity,
   laterality, priority
4. Rollup: regions, gendered diagram asset ids, summary
"""

import re
from dataclasses import dataclass

from clinical_diagrams.config.logging_config import get_logger
from clinical_diagrams.exceptions import InputError
from clinical_diagrams.models.analysis_models import (
    ClinicalFinding,
    ClinicalRelevance,
    ClinicalSignificance,
    DiagramView,
    ExtractionResult,
    FindingSeverity,
    FindingType,
)
from clinical_diagrams.services.context_classifier import classify
from clinical_diagrams.services.diagram_assets import asset_id, normalize_gender
from clinical_diagrams.services.terminology import (
    AnatomicalRegion,
    TerminologyCatalog,
    contains_term,
    get_terminology_catalog,
    matching_terms,
)

logger = get_logger(__name__)


NO_SECTION_SUMMARY = "No Physical Examination section found."
NO_FINDINGS_SUMMARY = "No Physical Examination findings documented."


@dataclass(frozen=True)
class _RegionMatch:
    region: AnatomicalRegion
    term: str


class ClinicalFindingExtractor:
    """
    Extracts structured findings from the Physical Examination section.

    Stateless apart from the catalog; safe to share between threads.
    """

    MIN_SENTENCE_LENGTH = 10
    PRIORITY_FINDING_THRESHOLD = 4

    NEGATION_PATTERNS = [
        re.compile(r"\bno\s+\w+"),
        re.compile(r"\bnot\s+\w+"),
        re.compile(r"\bwithout\s+\w+"),
        re.compile(r"\bnon-?(?:tender|distended|focal|erythematous|labou?red)\b"),
        re.compile(r"\babsence\s+of\b"),
        re.compile(r"\bfree\s+from\b"),
        re.compile(r"\bclear\s+of\b"),
        re.compile(r"\bnegative\s+for\b"),
        re.compile(r"\bunremarkable\b"),
        re.compile(r"\bwithin\s+normal\s+limits\b"),
        re.compile(r"\bnormal\s+range\b"),
    ]

    ABBREVIATIONS = frozenset({
        "dr.", "mr.", "mrs.", "ms.", "prof.", "vs.", "etc.", "e.g.", "i.e.",
    })

    SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")

    RELEVANCE_BONUS = {
        ClinicalRelevance.CRITICAL: 2,
        ClinicalRelevance.HIGH: 1,
        ClinicalRelevance.MEDIUM: 0,
    }

    def __init__(self, catalog: TerminologyCatalog | None = None):
        self.catalog = catalog or get_terminology_catalog()
        headers = sorted(self.catalog.section_start_headers, key=len, reverse=True)
        self._start_pattern = re.compile(
            r"\b(?:" + "|".join(re.escape(h) for h in headers) + r")\b",
            re.IGNORECASE,
        )
        heading_only = "|".join(re.escape(h) for h in self.catalog.section_heading_only_headers)
        self._heading_only_pattern = re.compile(
            rf"(?:^[ \t]*(?:{heading_only})\b|\b(?:{heading_only})[ \t]*:)",
            re.IGNORECASE | re.MULTILINE,
        )
        end_headers = "|".join(re.escape(h) for h in self.catalog.section_end_headers)
        self._end_pattern = re.compile(
            rf"(?:^[ \t]*(?:{end_headers})\b|\b(?:{end_headers})[ \t]*:)",
            re.IGNORECASE | re.MULTILINE,
        )

    # =========================================================================
    # Public API
    # =========================================================================

    def extract(self, text: str, gender: str = "male") -> ExtractionResult:
        """
        Extract findings from a note.

        Args:
            text: Free-text note. Non-string input yields the empty result.
            gender: Patient gender, selects the diagram asset ids.

        Returns:
            ExtractionResult; ``section_found`` is False when the note has
            no examination content.
        """
        gender = normalize_gender(gender)
        try:
            section = self.isolate_section(text)
        except InputError as e:
            logger.warning("Finding extraction skipped", **e.to_dict())
            return self.empty_result(gender)

        if not section:
            logger.info("No physical examination section", text_length=len(text))
            return self.empty_result(gender)

        findings: list[ClinicalFinding] = []
        for index, sentence in enumerate(self.split_sentences(section)):
            finding = self.analyze_sentence(sentence, index)
            if finding is not None:
                findings.append(finding)

        # Abnormal first, then priority descending (stable)
        findings.sort(key=lambda f: (f.clinical_significance != ClinicalSignificance.ABNORMAL, -f.priority))

        body_regions: list[str] = []
        for finding in findings:
            if finding.body_region not in body_regions:
                body_regions.append(finding.body_region)

        abnormal = [f for f in findings if f.clinical_significance == ClinicalSignificance.ABNORMAL]
        normal = [f for f in findings if f.clinical_significance == ClinicalSignificance.NORMAL]
        priority = sorted(
            (f for f in findings if f.priority >= self.PRIORITY_FINDING_THRESHOLD),
            key=lambda f: -f.priority,
        )

        logger.info(
            "Findings extracted",
            section_length=len(section),
            findings=len(findings),
            abnormal=len(abnormal),
            regions=len(body_regions),
        )

        return ExtractionResult(
            findings=findings,
            body_regions=body_regions,
            recommended_diagrams=self.recommend_diagrams(body_regions, gender),
            clinical_summary=self.summarize(findings),
            abnormal_findings=abnormal,
            normal_findings=normal,
            priority_findings=priority,
            section_found=True,
        )

    # =========================================================================
    # Section isolation
    # =========================================================================

    def isolate_section(self, text: str) -> str | None:
        """
        Return the Physical Examination section text without its header.

        Returns None when there is no header and the note does not read
        like an examination.
        """
        if not isinstance(text, str):
            raise InputError(
                "Note text must be a string",
                details={"received_type": type(text).__name__},
            )
        if not text.strip():
            return None

        start_match = self._find_start_header(text)
        if start_match is None:
            lower_text = text.lower()
            if any(contains_term(lower_text, term) for term in self.catalog.physical_exam_indicators):
                return text.strip()
            return None

        header_end = start_match.end()
        end_match = self._end_pattern.search(text, header_end)
        end = end_match.start() if end_match else len(text)

        section = text[header_end:end].lstrip(" \t\r\n:-").strip()
        return section or None

    def _find_start_header(self, text: str) -> re.Match[str] | None:
        candidates = [
            match
            for match in (self._start_pattern.search(text), self._heading_only_pattern.search(text))
            if match is not None
        ]
        if not candidates:
            return None
        # Earliest header wins, the longest one on a tie
        return min(candidates, key=lambda m: (m.start(), -(m.end() - m.start())))

    # =========================================================================
    # Sentences
    # =========================================================================

    def split_sentences(self, section: str) -> list[str]:
        """Split on terminal punctuation and line breaks, keeping abbreviations intact."""
        sentences: list[str] = []
        for line in section.splitlines():
            buffer = ""
            for fragment in self.SENTENCE_BOUNDARY.split(line.strip()):
                buffer = f"{buffer} {fragment}" if buffer else fragment
                last_word = buffer.rsplit(None, 1)[-1].lower() if buffer.strip() else ""
                if last_word in self.ABBREVIATIONS:
                    continue
                sentences.append(buffer.strip())
                buffer = ""
            if buffer.strip():
                sentences.append(buffer.strip())
        return [s for s in sentences if len(s) >= self.MIN_SENTENCE_LENGTH]

    def analyze_sentence(self, sentence: str, index: int) -> ClinicalFinding | None:
        lower = sentence.lower().strip()
        if len(lower) < self.MIN_SENTENCE_LENGTH:
            return None

        region_match = self.find_region(lower)
        if region_match is None:
            return None
        region = region_match.region

        significance = self.determine_significance(lower)
        context = classify(lower, self.catalog)
        severity = context.finding_severity

        return ClinicalFinding(
            id=f"finding_{index}",
            text=sentence.strip(),
            body_region=region.id,
            finding_type=self.determine_finding_type(lower),
            clinical_significance=significance,
            severity=severity,
            laterality=context.laterality,
            anatomical_location=region_match.term,
            description=self.describe(sentence.strip(), region, significance),
            priority=self.calculate_priority(significance, severity, region),
        )

    def determine_finding_type(self, sentence: str) -> FindingType:
        if matching_terms(sentence, self.catalog.examination_indicators):
            return FindingType.EXAMINATION
        if matching_terms(sentence, self.catalog.symptom_indicators):
            return FindingType.SYMPTOM
        return FindingType.EXAMINATION

    def find_region(self, sentence: str) -> _RegionMatch | None:
        """First region in catalog order whose terms or abbreviations occur."""
        for region in self.catalog.anatomical_regions:
            for term in region.terms:
                if contains_term(sentence, term):
                    return _RegionMatch(region, term)
            for abbreviation in region.abbreviations:
                if contains_term(sentence, abbreviation):
                    return _RegionMatch(region, abbreviation)
        return None

    def determine_significance(self, sentence: str) -> ClinicalSignificance:
        if any(pattern.search(sentence) for pattern in self.NEGATION_PATTERNS):
            return ClinicalSignificance.NORMAL
        if matching_terms(sentence, self.catalog.abnormal_descriptors):
            return ClinicalSignificance.ABNORMAL

        normal_count = len(matching_terms(sentence, self.catalog.normal_indicators))
        abnormal_count = len(matching_terms(sentence, self.catalog.abnormal_indicators))
        if normal_count > abnormal_count:
            return ClinicalSignificance.NORMAL
        if abnormal_count > normal_count:
            return ClinicalSignificance.ABNORMAL
        return ClinicalSignificance.EQUIVOCAL

    def calculate_priority(
        self,
        significance: ClinicalSignificance,
        severity: FindingSeverity,
        region: AnatomicalRegion,
    ) -> int:
        priority = 1
        if significance == ClinicalSignificance.ABNORMAL:
            priority += 2
        elif significance == ClinicalSignificance.EQUIVOCAL:
            priority += 1

        if severity == FindingSeverity.SEVERE:
            priority += 2
        elif severity == FindingSeverity.MODERATE:
            priority += 1

        priority += self.RELEVANCE_BONUS[region.relevance]
        return min(priority, 5)

    @staticmethod
    def describe(sentence: str, region: AnatomicalRegion, significance: ClinicalSignificance) -> str:
        if significance == ClinicalSignificance.ABNORMAL:
            return f"Abnormal finding in {region.display_name}: {sentence}"
        if significance == ClinicalSignificance.NORMAL:
            return f"{region.display_name}: {sentence}"
        return f"{region.display_name} examination: {sentence}"

    # =========================================================================
    # Rollup
    # =========================================================================

    def recommend_diagrams(self, body_regions: list[str], gender: str) -> list[str]:
        """Gendered asset ids for the regions, front first when many are involved."""
        views: list[DiagramView] = []
        if len(body_regions) > 2:
            views.append(DiagramView.FRONT)
        for region_id in body_regions:
            region = self.catalog.anatomical_region(region_id)
            if region is not None:
                views.append(region.view)

        assets: list[str] = []
        for view in views:
            identifier = asset_id(view, gender)
            if identifier not in assets:
                assets.append(identifier)
        return assets

    def summarize(self, findings: list[ClinicalFinding]) -> str:
        if not findings:
            return NO_FINDINGS_SUMMARY

        abnormal_count = sum(1 for f in findings if f.clinical_significance == ClinicalSignificance.ABNORMAL)
        normal_count = sum(1 for f in findings if f.clinical_significance == ClinicalSignificance.NORMAL)

        if abnormal_count == 0:
            return (
                f"Physical Examination reveals {normal_count} normal finding(s) "
                "with no abnormalities detected."
            )

        key_findings = [f for f in findings if f.priority >= self.PRIORITY_FINDING_THRESHOLD]
        if key_findings:
            return (
                f"Key Physical Examination finding: {key_findings[0].description}. "
                f"Total: {abnormal_count} abnormal, {normal_count} normal findings."
            )

        return (
            f"Physical Examination reveals {abnormal_count} abnormal finding(s) "
            f"and {normal_count} normal finding(s)."
        )

    @staticmethod
    def empty_result(gender: str) -> ExtractionResult:
        return ExtractionResult(
            recommended_diagrams=[asset_id(DiagramView.FRONT, gender)],
            clinical_summary=NO_SECTION_SUMMARY,
            section_found=False,
        )


_extractor: ClinicalFindingExtractor | None = None


def get_finding_extractor() -> ClinicalFindingExtractor:
    """Get the process-wide extractor."""
    global _extractor
    if _extractor is None:
        _extractor = ClinicalFindingExtractor()
    return _extractor
