"""
Summary and professional development extraction.

Both sections are free text. The summary is joined into one paragraph; when
no summary section exists, the first substantial prose line of the document
stands in for it.
"""

from typing import List

from cv_engine.core.patterns import has_contact_data, has_date_range
from cv_engine.core.section_segmenter import match_section_heading
from cv_engine.core.text_normalization import (
    clean_bullet,
    is_artifact_line,
    is_non_section_heading,
    normalize_space,
)


MAX_SUMMARY_LENGTH = 1200
MIN_SUMMARY_LINE_LENGTH = 10
MIN_FALLBACK_SUMMARY_LENGTH = 40


def parse_summary(lines: List[str]) -> str:
    """
    Join the Summary bucket into one paragraph.

    Short fragments, artifact lines, stray headings and contact lines are
    dropped; the result is capped at MAX_SUMMARY_LENGTH characters.
    """
    kept = []
    for line in lines:
        text = clean_bullet(line)
        if len(text) < MIN_SUMMARY_LINE_LENGTH:
            continue
        if is_artifact_line(text) or is_non_section_heading(text) or match_section_heading(text) is not None:
            continue
        if has_contact_data(text):
            continue
        kept.append(text)
    return normalize_space(" ".join(kept))[:MAX_SUMMARY_LENGTH].strip()


def fallback_summary(header_lines: List[str], all_lines: List[str]) -> str:
    """First line of at least 40 characters that is not contact data, a heading or a dated entry."""
    for line in [*header_lines, *all_lines]:
        text = clean_bullet(line)
        if len(text) < MIN_FALLBACK_SUMMARY_LENGTH:
            continue
        if has_contact_data(text) or has_date_range(text) or match_section_heading(text) is not None:
            continue
        return text[:MAX_SUMMARY_LENGTH]
    return ""


def parse_professional_development(lines: List[str]) -> List[str]:
    return [text for text in (clean_bullet(line) for line in lines) if len(text) > 1 and not is_artifact_line(text)]
