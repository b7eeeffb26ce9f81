"""
Shared regular expressions and keyword lexicons used across the entity parsers.

All patterns assume text already passed through normalize_space(), so dashes
are plain "-" and bullets are "*".
"""

import re
from typing import Iterable, Optional, Tuple


# ===== DATES =====

MONTH_PATTERN = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|jun(?:e)?|jul(?:y)?|"
    r"aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
)
OPEN_END_PATTERN = r"(?:present|current|now)"

DATE_RANGE_RE = re.compile(
    rf"\b{MONTH_PATTERN}\.?\s+\d{{4}}\s*(?:-|to)\s*(?:{MONTH_PATTERN}\.?\s+\d{{4}}|{OPEN_END_PATTERN})\b",
    re.IGNORECASE,
)
YEAR_RANGE_RE = re.compile(
    rf"\b(?:19|20)\d{{2}}\s*(?:-|to)\s*(?:(?:19|20)\d{{2}}|{OPEN_END_PATTERN})\b",
    re.IGNORECASE,
)

# Capturing forms used by parse_date_range(), tried in this order.
_STRICT_MONTH_RANGE_RE = re.compile(
    rf"({MONTH_PATTERN}\.?\s+\d{{4}})\s*(?:-|to)\s*({MONTH_PATTERN}\.?\s+\d{{4}}|{OPEN_END_PATTERN})",
    re.IGNORECASE,
)
_LOOSE_MONTH_RANGE_RE = re.compile(
    rf"({MONTH_PATTERN}\.?\s+\d{{4}})\D+?({MONTH_PATTERN}\.?\s+\d{{4}}|{OPEN_END_PATTERN})",
    re.IGNORECASE,
)
_YEAR_RANGE_CAPTURE_RE = re.compile(
    rf"\b((?:19|20)\d{{2}})\s*(?:-|to)\s*((?:19|20)\d{{2}}|{OPEN_END_PATTERN})\b",
    re.IGNORECASE,
)
_LOOSE_YEAR_RANGE_RE = re.compile(
    rf"\b((?:19|20)\d{{2}})\b\D+?\b((?:19|20)\d{{2}}|{OPEN_END_PATTERN})\b",
    re.IGNORECASE,
)
SINGLE_DATE_RE = re.compile(
    rf"\b(?:{MONTH_PATTERN}\.?\s+)?(?:19|20)\d{{2}}\b",
    re.IGNORECASE,
)

# ===== CONTACT DATA =====

EMAIL_RE = re.compile(r"\b[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}\b", re.IGNORECASE)
# The leading lookbehind keeps year ranges like "2015-2019" from reading as a phone.
PHONE_RE = re.compile(r"(?<!\d)(?:\+\d{1,3}[\s-]?)?(?:\(?\d{2,4}\)?[\s-]?)?\d{3}[\s-]?\d{3,4}\b")
# Bare domains only count with a path ("github.com/jane"), so "ASP.NET" and email domains stay text.
URL_RE = re.compile(
    r"(?:https?://|www\.)\S+|(?<![@\w.])[a-z0-9-]+(?:\.[a-z0-9-]+)*\.(?:com|dev|io|org|net|me|app|co|ai)/\S*",
    re.IGNORECASE,
)
LINKEDIN_RE = re.compile(r"linkedin\.com/in/[A-Za-z0-9\-_%]+", re.IGNORECASE)
GITHUB_RE = re.compile(r"github\.com/[A-Za-z0-9\-_.]+(?:/[A-Za-z0-9\-_.]+)?", re.IGNORECASE)

# ===== LEXICONS =====

ROLE_KEYWORDS = (
    "engineer", "developer", "manager", "architect", "analyst", "consultant",
    "specialist", "lead", "director", "administrator", "designer",
)
EDUCATION_KEYWORDS = (
    "university", "college", "institute", "school", "bachelor", "master",
    "phd", "diploma", "degree",
)
SKILL_HINT_KEYWORDS = (
    "javascript", "typescript", "node", "react", "python", "java", "sql",
    "postgresql", "aws", "azure", "docker", "kubernetes", "figma", "photoshop",
)

LANGUAGE_TOKEN_RE = re.compile(
    r"\b(english|spanish|french|german|arabic|portuguese|italian|chinese|mandarin|"
    r"cantonese|japanese|hindi|afrikaans|zulu|xhosa|sotho|tswana|swahili|russian|"
    r"korean|dutch|polish|turkish|swedish)\b",
    re.IGNORECASE,
)


def contains_keyword(text: str, keywords: Iterable[str]) -> bool:
    """Whole-word, case-insensitive membership test."""
    lowered = (text or "").lower()
    return any(re.search(rf"\b{re.escape(k)}\b", lowered) for k in keywords)


def has_contact_data(text: str) -> bool:
    return bool(EMAIL_RE.search(text) or PHONE_RE.search(text) or URL_RE.search(text))


def has_date_range(text: str) -> bool:
    return bool(DATE_RANGE_RE.search(text) or YEAR_RANGE_RE.search(text))


def _canonical_end(value: str) -> str:
    return "Present" if re.fullmatch(OPEN_END_PATTERN, value.strip(), re.IGNORECASE) else value.strip()


def parse_date_range(text: str) -> Tuple[str, str]:
    """
    Extract (start, end) from a line.

    Tries a strict month-year range, a loose month-year pair, a year range and
    a loose year pair, in that order. Open ends are returned as "Present".

    Examples:
        "Acme Jan 2020 - Present" -> ("Jan 2020", "Present")
        "2014 - 2018"             -> ("2014", "2018")
        "Jan 2019 until Mar 2021" -> ("Jan 2019", "Mar 2021")
        "no dates here"           -> ("", "")
    """
    for pattern in (_STRICT_MONTH_RANGE_RE, _LOOSE_MONTH_RANGE_RE, _YEAR_RANGE_CAPTURE_RE, _LOOSE_YEAR_RANGE_RE):
        m = pattern.search(text or "")
        if m:
            return m.group(1).strip(), _canonical_end(m.group(2))
    return "", ""


def find_single_date(text: str) -> Optional[str]:
    """Last standalone "Mon YYYY" or "YYYY" in the line, if any."""
    matches = SINGLE_DATE_RE.findall(text or "")
    return matches[-1].strip() if matches else None


def strip_dates(text: str) -> str:
    """Remove date ranges (and trailing separators they leave behind)."""
    stripped = DATE_RANGE_RE.sub(" ", text or "")
    stripped = YEAR_RANGE_RE.sub(" ", stripped)
    stripped = re.sub(r"\s+", " ", stripped).strip()
    return stripped.strip(" |,-")
