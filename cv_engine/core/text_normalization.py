"""
Text normalization utilities for cleaning up PDF text-layer artifacts.

Every string that enters the pipeline goes through normalize_space(), which
repairs the encoding and glyph artifacts common in CV PDFs:
- typographic dashes, quotes and bullet glyphs are mapped to ASCII
- UTF-8 bytes mis-decoded as Windows-1252 ("mojibake") are mapped back
- runs of whitespace collapse to a single space

Also hosts the small line-shape predicates (bullets, page numbers, artifact
lines) that several parsers share.
"""

import re
from typing import List


# ============================================================================
# Character artifacts
# ============================================================================

# Mojibake (UTF-8 decoded as Windows-1252) is repaired before the typographic
# glyphs because the mis-decoded sequences themselves contain curly quotes.
ARTIFACT_REPLACEMENTS = [
    (re.compile("â€[“”‘]"), "-"),  # â€“ â€” â€‘
    (re.compile("â€¢"), "*"),  # â€¢
    (re.compile("â€[™˜]"), "'"),  # â€™ â€˜
    (re.compile("â€(?:œ|\x9d)"), '"'),  # â€œ â€\x9d
    (re.compile("\u00c2(?=[ \u00a0])"), ""),
    (re.compile("\u00a0"), " "),
    (re.compile("[–—−‑]"), "-"),
    (re.compile("[•●▪◦‣·]"), "*"),
    (re.compile("[“”]"), '"'),
    (re.compile("[‘’]"), "'"),
]

WHITESPACE_RE = re.compile(r"\s+")

# ============================================================================
# Line shapes
# ============================================================================

BULLET_PREFIX_RE = re.compile(r"^\s*([\-*•]|[0-9]+\.)\s*")
PAGE_NUMBER_RE = re.compile(r"^\d{1,2}$")
PAGE_OF_RE = re.compile(r"^page\s+\d+\s*(?:of\s*\d+)?$", re.IGNORECASE)

# Recognizable headings that never open a content section.
NON_SECTION_HEADINGS = [
    re.compile(r"^contact(?:\s+(?:info|information|details))?$", re.IGNORECASE),
    re.compile(r"^personal\s*info", re.IGNORECASE),
    re.compile(r"^references$", re.IGNORECASE),
    re.compile(r"^interests$", re.IGNORECASE),
    re.compile(r"^hobbies$", re.IGNORECASE),
]


def normalize_text_artifacts(value: str) -> str:
    """Map typographic and mojibake sequences to their ASCII equivalents."""
    if not value:
        return ""
    for pattern, replacement in ARTIFACT_REPLACEMENTS:
        value = pattern.sub(replacement, value)
    return value


def normalize_space(value: str) -> str:
    """
    Canonical cleanup applied to every line of text.

    Examples:
        "Lead Engineer  |  Alpha Labs Jan 2020 â€“ Present"
            -> "Lead Engineer | Alpha Labs Jan 2020 - Present"
        "â€¢ Built distributed APIs" -> "* Built distributed APIs"
    """
    return WHITESPACE_RE.sub(" ", normalize_text_artifacts(value or "")).strip()


def normalize_text_for_heading(value: str) -> str:
    """Lowercase, letters only, single spaces. Used for heading comparison."""
    lowered = normalize_space(value).lower()
    return WHITESPACE_RE.sub(" ", re.sub(r"[^a-z]+", " ", lowered)).strip()


def is_bullet_line(line: str) -> bool:
    return bool(BULLET_PREFIX_RE.match(line or ""))


def clean_bullet(line: str) -> str:
    """Strip a leading bullet marker ("-", "*", "•", "1.") and normalize."""
    return normalize_space(BULLET_PREFIX_RE.sub("", line or "", count=1))


def is_page_number(line: str) -> bool:
    text = normalize_space(line)
    return bool(PAGE_NUMBER_RE.match(text) or PAGE_OF_RE.match(text))


def is_non_section_heading(line: str) -> bool:
    text = normalize_space(line)
    return any(p.search(text) for p in NON_SECTION_HEADINGS)


def is_artifact_line(line: str) -> bool:
    """True for lines that carry no CV content: page numbers, stray glyphs, contact/hobby headings."""
    text = normalize_space(line)
    if len(text) < 2:
        return True
    return is_page_number(text) or is_non_section_heading(text)


def dedupe_preserving_order(values: List[str]) -> List[str]:
    """Drop exact duplicates, keeping first occurrence."""
    seen = set()
    out = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        out.append(value)
    return out


def title_case_each_word(value: str) -> str:
    """
    Title-case each whitespace-separated word (including hyphenated parts).

    Examples:
        "JANE DOE" -> "Jane Doe"
        "MARY-ANNE O'NEIL" -> "Mary-Anne O'neil"
    """
    def _cap(part: str) -> str:
        return part[:1].upper() + part[1:].lower() if part else part

    words = []
    for word in value.split():
        words.append("-".join(_cap(p) for p in word.split("-")))
    return " ".join(words)
