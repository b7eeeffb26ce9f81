"""
Education parsing module for extracting education entries from the Education bucket.

An entry starts on any unbulleted line naming an institution or a degree.
Entry lines are usually "|"-separated (Institution | Degree | Location dates);
each part is classified by keyword rather than trusted by position, so
"BSc Computer Science | University of Cape Town" parses the same way.

Follow-up lines fill the field of study, the GPA or missing dates, and
anything else becomes a highlight.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from cv_engine.core.patterns import has_date_range, parse_date_range, strip_dates
from cv_engine.core.schemas import Education
from cv_engine.core.text_normalization import (
    clean_bullet,
    is_artifact_line,
    is_bullet_line,
    normalize_space,
)

logger = logging.getLogger(__name__)


# ===== INSTITUTION KEYWORDS =====

INSTITUTION_RE = re.compile(
    r"\b(?:university|college|institute|school|academy|polytechnic|universiteit)\b",
    re.IGNORECASE,
)

# ===== DEGREE KEYWORDS (Strong Signal) =====

DEGREE_RE = re.compile(
    r"\b(?:bachelor(?:'s)?|master(?:'s)?|associate of|phd|ph\.d\.?|doctorate|diploma|certificate|"
    r"b\.?sc|m\.?sc|b\.s\.|b\.a\.|m\.s\.|m\.a\.|mba|m\.b\.a\.|btech|b\.tech|honou?rs degree)(?![a-z])",
    re.IGNORECASE,
)

FIELD_HINT_RE = re.compile(
    r"\b(?:computer|engineering|science|business|arts|law|medicine|finance|design)\b",
    re.IGNORECASE,
)
FIELD_FROM_DEGREE_RE = re.compile(r"\bin\s+([A-Za-z&/\- ]+?)\s*(?:,|$)")
GPA_RE = re.compile(r"gpa[:\s]*([0-9.]+)", re.IGNORECASE)


def is_education_entry_line(line: str) -> bool:
    return not is_bullet_line(line) and bool(INSTITUTION_RE.search(line) or DEGREE_RE.search(line))


def field_from_degree(degree: str) -> str:
    """
    "Bachelor of Science in Computer Science" -> "Computer Science"
    """
    m = FIELD_FROM_DEGREE_RE.search(degree or "")
    if not m:
        return ""
    value = m.group(1).strip()
    return value if len(value) > 2 else ""


@dataclass
class _PendingEducation:
    institution: str = ""
    degree: str = ""
    field_of_study: str = ""
    location: Optional[str] = None
    start_date: str = ""
    end_date: str = ""
    gpa: Optional[str] = None
    highlights: List[str] = field(default_factory=list)


def _parse_entry_line(line: str) -> _PendingEducation:
    """
    Split an education entry line into institution / degree / location.

    Examples:
        "University of Washington | BSc Computer Science | Seattle 2015 - 2019"
            -> institution="University of Washington", degree="BSc Computer Science",
               location="Seattle", start_date="2015", end_date="2019"
        "Bachelor of Arts, Stellenbosch University"
            -> institution="Stellenbosch University", degree="Bachelor of Arts"
    """
    start_date, end_date = parse_date_range(line)
    parts = [strip_dates(normalize_space(p)) for p in line.split("|")]
    parts = [p for p in parts if p]
    if len(parts) == 1 and INSTITUTION_RE.search(parts[0]) and DEGREE_RE.search(parts[0]):
        split = [p.strip() for p in re.split(r",\s*|\s-\s", parts[0]) if p.strip()]
        if len(split) > 1:
            parts = split

    entry = _PendingEducation(start_date=start_date, end_date=end_date)
    leftovers = []
    for part in parts:
        if not entry.institution and INSTITUTION_RE.search(part):
            entry.institution = part
        elif not entry.degree and DEGREE_RE.search(part):
            entry.degree = part
        else:
            leftovers.append(part)

    # Positional fallback: Institution | Degree | Location
    if not entry.institution and leftovers:
        entry.institution = leftovers.pop(0)
    if not entry.degree and leftovers and len(parts) > 1:
        entry.degree = leftovers.pop(0)
    if leftovers:
        entry.location = leftovers[0]

    entry.field_of_study = field_from_degree(entry.degree)
    return entry


class EducationParser:
    """Line-at-a-time parser for the Education bucket. One instance per document."""

    def __init__(self):
        self.entries: List[Education] = []
        self.current: Optional[_PendingEducation] = None

    def flush(self) -> None:
        current, self.current = self.current, None
        if current is None or not (current.institution or current.degree):
            return
        self.entries.append(Education(
            id=f"edu-{len(self.entries) + 1}",
            institution=current.institution,
            degree=current.degree,
            field=current.field_of_study,
            location=current.location,
            start_date=current.start_date or None,
            end_date=current.end_date,
            gpa=current.gpa,
            highlights=current.highlights,
        ))

    def feed(self, raw_line: str) -> None:
        line = normalize_space(raw_line)
        if not line or is_artifact_line(line):
            return

        if is_education_entry_line(line):
            entry = _parse_entry_line(line)
            current = self.current
            if current is not None and not current.highlights:
                # Institution line followed by a degree-only line (or vice versa)
                if current.institution and not current.degree and DEGREE_RE.search(line) and not INSTITUTION_RE.search(line):
                    current.degree = strip_dates(line)
                    current.field_of_study = current.field_of_study or field_from_degree(current.degree)
                    current.start_date = current.start_date or entry.start_date
                    current.end_date = current.end_date or entry.end_date
                    return
                if current.degree and not current.institution and INSTITUTION_RE.search(line) and not DEGREE_RE.search(line):
                    current.institution = entry.institution
                    current.location = current.location or entry.location
                    current.start_date = current.start_date or entry.start_date
                    current.end_date = current.end_date or entry.end_date
                    return
            self.flush()
            self.current = entry
            return

        current = self.current
        if current is None:
            return
        text = clean_bullet(line)
        if not text:
            return

        if not current.start_date and not current.end_date and has_date_range(text) and len(strip_dates(text)) < 3:
            current.start_date, current.end_date = parse_date_range(text)
        elif not current.field_of_study and FIELD_HINT_RE.search(text):
            current.field_of_study = text
        elif re.search(r"\bgpa\b", text, re.IGNORECASE):
            m = GPA_RE.search(text)
            if m:
                current.gpa = m.group(1).rstrip(".")
        else:
            current.highlights.append(text)

    def finish(self) -> List[Education]:
        self.flush()
        logger.debug(f"Parsed {len(self.entries)} education entries")
        return self.entries


def parse_education(lines: List[str]) -> List[Education]:
    parser = EducationParser()
    for line in lines:
        parser.feed(line)
    return parser.finish()
