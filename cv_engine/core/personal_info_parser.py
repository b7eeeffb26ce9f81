"""
Personal info extraction: name, headline title, contact data and profile links.

Contact data (email, phone, links) is searched across the whole document,
since sidebar layouts often put it after the main column. The name is only
searched near the top.
"""

import re
from typing import List, Optional

from cv_engine.core.patterns import (
    EMAIL_RE,
    GITHUB_RE,
    LINKEDIN_RE,
    PHONE_RE,
    SKILL_HINT_KEYWORDS,
    URL_RE,
    contains_keyword,
    has_date_range,
)
from cv_engine.core.schemas import PersonalInfo
from cv_engine.core.section_segmenter import match_section_heading
from cv_engine.core.text_normalization import (
    dedupe_preserving_order,
    is_bullet_line,
    normalize_space,
    title_case_each_word,
)


NAME_SEARCH_WINDOW = 20

TITLE_CASE_WORD_RE = re.compile(r"^[A-Z][a-zA-Z'.-]+$")
UPPER_CASE_WORD_RE = re.compile(r"^[A-Z'.-]+$")
TITLE_ROLE_RE = re.compile(
    r"engineer|developer|designer|manager|architect|analyst|consultant|specialist|founder|"
    r"\blead\b|director|administrator|co-founder|backend|frontend|full.stack",
    re.IGNORECASE,
)

_PLACE = r"(?:[A-Z]{2,3}|[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)"
LOCATION_RE = re.compile(rf"^[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*,\s*{_PLACE}(?:,\s*{_PLACE})?$")
LOCATION_KEYWORD_RE = re.compile(
    r"\b(?:city|state|country|province|region|johannesburg|cape town|durban|pretoria|south africa|gauteng)\b",
    re.IGNORECASE,
)
# Section names that PDF text layers sometimes glue onto the end of a link line.
MERGED_HEADING_RE = re.compile(r"(SKILLS|EXPERIENCE|EDUCATION|PROJECTS|CERTIFICATIONS|LANGUAGES|SUMMARY|CONTACT).*$", re.IGNORECASE)
TRAILING_LABEL_RE = re.compile(r"\s*\([^)]+\)\s*$")
LINKEDIN_CONTINUATION_RE = re.compile(r"^-[a-zA-Z0-9\-]+$")
SEGMENT_SPLIT_RE = re.compile(r"\s*[|*]\s*")


def _is_contact_line(line: str) -> bool:
    return bool(EMAIL_RE.search(line) or PHONE_RE.search(line) or URL_RE.search(line))


def _strip_scheme(url: str) -> str:
    url = re.sub(r"^https?://", "", url.strip(), flags=re.IGNORECASE)
    return re.sub(r"^www\.", "", url, flags=re.IGNORECASE).rstrip(".,;)")


def _extract_linkedin(lines: List[str]) -> str:
    """
    First LinkedIn profile link, re-joined when the slug wraps onto the next line.

    Examples:
        ["linkedin.com/in/jane-doe (LinkedIn)"]   -> "linkedin.com/in/jane-doe"
        ["linkedin.com/in/jane", "-doe-42"]        -> "linkedin.com/in/jane-doe-42"
    """
    for i, line in enumerate(lines):
        if "linkedin.com/" not in line.lower():
            continue
        url_part = MERGED_HEADING_RE.sub("", TRAILING_LABEL_RE.sub("", line))
        m = LINKEDIN_RE.search(url_part)
        if m:
            value = _strip_scheme(m.group(0))
        else:
            loose = re.search(r"linkedin\.com/\S*", url_part, re.IGNORECASE)
            value = _strip_scheme(loose.group(0)) if loose else _strip_scheme(url_part)

        next_line = lines[i + 1].strip() if i + 1 < len(lines) else ""
        if re.search(r"linkedin\.com/in/[a-zA-Z0-9\-]*$", value, re.IGNORECASE):
            if LINKEDIN_CONTINUATION_RE.match(next_line) and len(next_line) < 25:
                value += next_line
        return value
    return ""


def _extract_github(lines: List[str]) -> str:
    for line in lines:
        m = GITHUB_RE.search(line)
        if m:
            return _strip_scheme(m.group(0))
    return ""


def _extract_portfolio(lines: List[str]) -> str:
    for line in lines:
        for m in URL_RE.finditer(line):
            url = m.group(0)
            if re.search(r"linkedin\.com/|github\.com/", url, re.IGNORECASE):
                continue
            return _strip_scheme(url)
    return ""


def _extract_name(lines: List[str]) -> str:
    """Title-case or all-caps line of 2-6 words near the top. All-caps names are title-cased."""
    for line in lines[:NAME_SEARCH_WINDOW]:
        if len(line) < 4 or len(line) > 80:
            continue
        if _is_contact_line(line) or match_section_heading(line) is not None:
            continue
        words = line.split()
        if len(words) < 2 or len(words) > 6:
            continue
        # all-caps first: TITLE_CASE_WORD_RE also accepts "JANE"
        if all(UPPER_CASE_WORD_RE.match(w) for w in words):
            return title_case_each_word(line)
        if all(TITLE_CASE_WORD_RE.match(w) for w in words):
            return line
    return ""


def _extract_title(lines: List[str], full_name: str) -> str:
    for line in lines:
        if not line or line == full_name or len(line) > 80:
            continue
        if _is_contact_line(line) or match_section_heading(line) is not None:
            continue
        if is_bullet_line(line) or has_date_range(line):
            continue
        if TITLE_ROLE_RE.search(line):
            return line
    return ""


def _looks_like_location(segment: str) -> bool:
    if len(segment) < 5 or re.search(r"\d", segment):
        return False
    if _is_contact_line(segment) or match_section_heading(segment) is not None:
        return False
    if contains_keyword(segment, SKILL_HINT_KEYWORDS):
        return False
    return bool(LOCATION_RE.match(segment) or LOCATION_KEYWORD_RE.search(segment))


def _extract_location(lines: List[str], exclude: List[str]) -> str:
    """
    First "City, Region" shaped line or "|"-separated segment of a contact line.

    Examples:
        "Seattle, WA"                          -> "Seattle, WA"
        "Cape Town, South Africa | +27 82 ..." -> "Cape Town, South Africa"
    """
    for line in lines:
        if line in exclude:
            continue
        if _looks_like_location(line):
            return line
        segments = SEGMENT_SPLIT_RE.split(line)
        if len(segments) > 1:
            for segment in segments:
                if _looks_like_location(segment):
                    return segment
    return ""


def extract_personal_info(header_lines: List[str], all_lines: List[str]) -> PersonalInfo:
    """
    Build PersonalInfo from the document's lines.

    Args:
        header_lines: Lines before the first recognized heading
        all_lines: Every line of the document, in reading order

    Returns:
        PersonalInfo with empty strings for anything not found
    """
    unique_lines = dedupe_preserving_order([normalize_space(l) for l in all_lines if normalize_space(l)])
    info = PersonalInfo()

    email_match: Optional[re.Match] = next((m for m in (EMAIL_RE.search(l) for l in unique_lines) if m), None)
    if email_match:
        info.email = email_match.group(0)

    phone_match = next((m for m in (PHONE_RE.search(l) for l in unique_lines) if m), None)
    if phone_match:
        info.phone = normalize_space(phone_match.group(0))

    info.linkedin = _extract_linkedin(unique_lines)
    info.github = _extract_github(unique_lines)
    info.portfolio = _extract_portfolio(unique_lines)

    # Prefer the header block for the name; fall back to the top of the document.
    header = dedupe_preserving_order([normalize_space(l) for l in header_lines if normalize_space(l)])
    info.full_name = _extract_name(header) or _extract_name(unique_lines)
    info.title = _extract_title(unique_lines, info.full_name)
    info.location = _extract_location(unique_lines, exclude=[info.full_name, info.title])
    return info
