"""
Confidence scoring for CV extraction.

The score answers "is this document a CV, and did we read it well?". It is a
weighted sum of evidence, clamped to [0, 1] and rounded to 3 decimals:

  name found            +0.14
  email found           +0.14
  summary found         +0.10
  experience entries    +0.15
  education entries     +0.12
  skills                +0.12
  sections detected     +0.03 each, at most +0.15
  headed sections       +0.03 per distinct key, at most +0.14
  CV-like file name     +0.08

A typical CV lands well above MIN_CV_PARSE_CONFIDENCE (0.45); a report or
letter with a title and a long sentence lands below it.
"""

import re
from typing import Dict, Iterable, List, Tuple

from cv_engine.core.schemas import CVData, SectionKey


CV_FILENAME_RE = re.compile(r"(?<![a-z])cv(?![a-z])|resume|curriculum[- _]?vitae", re.IGNORECASE)


class ConfidenceCalculator:
    """Central place for all extraction confidence logic."""

    FIELD_WEIGHTS: Dict[str, float] = {
        "full_name": 0.14,
        "email": 0.14,
        "summary": 0.10,
        "experience": 0.15,
        "education": 0.12,
        "skills": 0.12,
    }
    SECTION_WEIGHT = 0.03
    SECTION_CAP = 0.15
    HEADING_WEIGHT = 0.03
    HEADING_CAP = 0.14
    FILENAME_WEIGHT = 0.08

    @staticmethod
    def field_evidence(cv_data: CVData) -> List[Tuple[str, float]]:
        """(signal, weight) pairs for each populated core field."""
        present = {
            "full_name": bool(cv_data.personal_info.full_name),
            "email": bool(cv_data.personal_info.email),
            "summary": bool(cv_data.summary),
            "experience": bool(cv_data.experience),
            "education": bool(cv_data.education),
            "skills": bool(cv_data.skills),
        }
        return [(name, weight) for name, weight in ConfidenceCalculator.FIELD_WEIGHTS.items() if present[name]]

    @staticmethod
    def sections(sections_detected: List[SectionKey]) -> float:
        return min(ConfidenceCalculator.SECTION_CAP, len(sections_detected) * ConfidenceCalculator.SECTION_WEIGHT)

    @staticmethod
    def headings(heading_hits: Iterable[SectionKey]) -> float:
        return min(ConfidenceCalculator.HEADING_CAP, len(set(heading_hits)) * ConfidenceCalculator.HEADING_WEIGHT)

    @staticmethod
    def file_name(file_name: str) -> float:
        """
        Examples:
            "jane-doe-cv.pdf"  -> 0.08
            "my_resume.pdf"    -> 0.08
            "q1-report.pdf"    -> 0.0
        """
        return ConfidenceCalculator.FILENAME_WEIGHT if CV_FILENAME_RE.search(file_name or "") else 0.0

    @staticmethod
    def overall(
        cv_data: CVData,
        sections_detected: List[SectionKey],
        heading_hits: Iterable[SectionKey],
        file_name: str,
    ) -> float:
        score = sum(weight for _, weight in ConfidenceCalculator.field_evidence(cv_data))
        score += ConfidenceCalculator.sections(sections_detected)
        score += ConfidenceCalculator.headings(heading_hits)
        score += ConfidenceCalculator.file_name(file_name)
        return max(0.0, min(1.0, round(score, 3)))
