"""
Work experience parsing.

Handles both common layouts:

Single-line headers:
    Senior Engineer | Tech Corp | Seattle, WA Jan 2021 - Present
    Lead Engineer at Nova Labs Jan 2020 - Present
    - Built and maintained microservices

Multi-line headers (fields stacked, in any reasonable order):
    Acme Corp
    Software Engineer
    Jan 2019 - Dec 2021
    Austin, Texas
    - Shipped the billing service
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from cv_engine.core.patterns import (
    DATE_RANGE_RE,
    ROLE_KEYWORDS,
    YEAR_RANGE_RE,
    contains_keyword,
    has_contact_data,
    has_date_range,
    parse_date_range,
)
from cv_engine.core.schemas import Experience
from cv_engine.core.section_segmenter import is_potential_experience_entry
from cv_engine.core.text_normalization import (
    clean_bullet,
    is_artifact_line,
    is_bullet_line,
    normalize_space,
)

logger = logging.getLogger(__name__)


SENIOR_ROLE_RE = re.compile(r"\b(?:founder|co-founder|owner|partner|principal|executive)\b", re.IGNORECASE)
COMPANY_WORD_RE = re.compile(r"^[A-Z][a-zA-Z&.\-]+$|^(?i:and|&|of|the)$")
LOCATION_LINE_RE = re.compile(r"^[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*,\s*(?:[A-Z]{2,3}\b|[A-Z][a-z]+)")
LOCATION_KEYWORD_RE = re.compile(
    r"\b(?:city|state|country|province|region|johannesburg|cape town|durban|pretoria|south africa|gauteng)\b",
    re.IGNORECASE,
)
AT_SPLIT_RE = re.compile(r"\sat\s", re.IGNORECASE)


@dataclass
class ExperienceHeader:
    position: str
    company: str
    location: Optional[str]
    start_date: str
    end_date: str


def parse_experience_header(line: str) -> ExperienceHeader:
    """
    Split a single-line job header into its fields.

    Examples:
        "Senior Engineer | Tech Corp | Seattle, WA Jan 2021 - Present"
            -> position="Senior Engineer", company="Tech Corp", location="Seattle, WA",
               start_date="Jan 2021", end_date="Present"
        "Lead Engineer at Nova Labs Jan 2020 - Present"
            -> position="Lead Engineer", company="Nova Labs"
        "Developer - Orbit - Remote 2019 - 2021"
            -> position="Developer", company="Orbit", location="Remote"
    """
    stripped = normalize_space(re.sub(r"\s*[|*]\s*", " | ", line))
    start_date, end_date = parse_date_range(stripped)
    without_dates = YEAR_RANGE_RE.sub("", DATE_RANGE_RE.sub("", stripped))
    without_dates = normalize_space(re.sub(r"\(\s*\)", "", without_dates)).strip(" |,")

    position, company, location = "", "", None
    if AT_SPLIT_RE.search(without_dates):
        left, right = AT_SPLIT_RE.split(without_dates, maxsplit=1)
        position = normalize_space(left)
        right_parts = [normalize_space(p) for p in right.split("|") if normalize_space(p)]
        company = right_parts[0] if right_parts else ""
        location = right_parts[1] if len(right_parts) > 1 else None
    else:
        parts = [normalize_space(p) for p in without_dates.split("|") if normalize_space(p)]
        if len(parts) < 2:
            parts = [normalize_space(p) for p in re.split(r"\s-\s", without_dates) if normalize_space(p)]
        if parts:
            position = parts[0]
        if len(parts) > 1:
            company = parts[1]
        if len(parts) > 2:
            location = parts[2]

    return ExperienceHeader(
        position=position or without_dates,
        company=company,
        location=location,
        start_date=start_date,
        end_date=end_date,
    )


# ===== LINE SHAPES (multi-line headers) =====

def _plain_line(line: str, max_length: int) -> bool:
    """Shared guard: short, not contact data, not a bullet, no dates, not an artifact."""
    if not line or len(line) > max_length:
        return False
    if has_contact_data(line) or is_bullet_line(line) or has_date_range(line):
        return False
    return not is_artifact_line(line)


def looks_like_company_name(line: str) -> bool:
    if not _plain_line(line, 60):
        return False
    words = line.split()
    if len(words) > 5 or contains_keyword(line, ROLE_KEYWORDS):
        return False
    return all(COMPANY_WORD_RE.match(w) for w in words) or len(words) <= 2


def _is_proper_name(line: str) -> bool:
    """Company-shaped and every word capitalized (stricter than looks_like_company_name)."""
    return looks_like_company_name(line) and all(COMPANY_WORD_RE.match(w) for w in line.split())


def looks_like_position(line: str) -> bool:
    if not _plain_line(line, 80):
        return False
    return contains_keyword(line, ROLE_KEYWORDS) or bool(SENIOR_ROLE_RE.search(line))


def is_just_date_range(line: str) -> bool:
    if not line or is_artifact_line(line):
        return False
    cleaned = normalize_space(re.sub(r"\(.*?\)", "", line))
    return has_date_range(cleaned) and len(cleaned) < 40


def looks_like_location(line: str) -> bool:
    if not _plain_line(line, 60):
        return False
    return bool(LOCATION_LINE_RE.match(line) or LOCATION_KEYWORD_RE.search(line))


# ===== STATE MACHINE =====

@dataclass
class _PendingExperience:
    company: str = ""
    position: str = ""
    location: Optional[str] = None
    start_date: str = ""
    end_date: str = ""
    description: List[str] = field(default_factory=list)
    saw_bullet: bool = False


class ExperienceParser:
    """
    Line-at-a-time parser. One instance per document.

    feed() each line of the Experience bucket, then finish() to get entries.
    """

    def __init__(self):
        self.entries: List[Experience] = []
        self.current: Optional[_PendingExperience] = None

    def flush(self) -> None:
        current, self.current = self.current, None
        if current is None or not (current.position or current.company):
            return
        end_date = current.end_date or ("Present" if current.start_date else "")
        self.entries.append(Experience(
            id=f"exp-{len(self.entries) + 1}",
            company=current.company,
            position=current.position,
            location=current.location,
            start_date=current.start_date,
            end_date=end_date,
            description=[d for d in current.description if d],
        ))

    def _start_from_header(self, line: str) -> None:
        self.flush()
        header = parse_experience_header(line)
        self.current = _PendingExperience(
            company=header.company,
            position=header.position,
            location=header.location,
            start_date=header.start_date,
            end_date=header.end_date,
        )

    def feed(self, raw_line: str) -> None:
        line = normalize_space(raw_line)
        if not line or is_artifact_line(line):
            return

        bullet_like = is_bullet_line(line)
        current = self.current

        # A bare date line completes a stacked header instead of opening a new entry
        if current is not None and not current.start_date and is_just_date_range(line):
            current.start_date, current.end_date = parse_date_range(line)
            return

        # Inside the section any dated line is a header
        dated_header = has_date_range(line) and not has_contact_data(line)
        if not bullet_like and (dated_header or is_potential_experience_entry(line)):
            self._start_from_header(line)
            return

        if current is None:
            if looks_like_company_name(line):
                self.current = _PendingExperience(company=line)
            elif looks_like_position(line):
                self.current = _PendingExperience(position=line)
            return

        # A finished entry followed by a fresh company line opens the next entry
        if current.position and current.saw_bullet and _is_proper_name(line):
            self.flush()
            self.current = _PendingExperience(company=line)
            return

        if not current.position and looks_like_position(line):
            current.position = line
            return
        if not current.company and not current.description and _is_proper_name(line):
            current.company = line
            return
        if not current.location and looks_like_location(line):
            current.location = line
            return

        # Description lines only count once a position is known
        if current.position:
            text = clean_bullet(line)
            if text:
                current.description.append(text)
                current.saw_bullet = current.saw_bullet or bullet_like

    def finish(self) -> List[Experience]:
        self.flush()
        logger.debug(f"Parsed {len(self.entries)} experience entries")
        return self.entries


def parse_experience(lines: List[str]) -> List[Experience]:
    parser = ExperienceParser()
    for line in lines:
        parser.feed(line)
    return parser.finish()
