"""
Section segmentation for CV text.

Walks the reconstructed lines with a section cursor that starts at HEADER.
A line that matches the heading table moves the cursor and is not stored;
artifact lines are dropped; every other line goes to the bucket the cursor
points at.

CVs without headings (or with headings nobody anticipated) still carry
recognizable content, so when a bucket comes back empty the fallback pass
scans every non-heading line with content detectors (date-ranged job lines,
institutions, comma-separated technology lists, ...) and fills the bucket
from those instead.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from cv_engine.core.patterns import (
    EDUCATION_KEYWORDS,
    EMAIL_RE,
    LANGUAGE_TOKEN_RE,
    PHONE_RE,
    ROLE_KEYWORDS,
    SKILL_HINT_KEYWORDS,
    URL_RE,
    contains_keyword,
    has_date_range,
)
from cv_engine.core.schemas import SECTION_ORDER, SectionKey
from cv_engine.core.text_normalization import (
    clean_bullet,
    dedupe_preserving_order,
    is_artifact_line,
    is_bullet_line,
    normalize_space,
    normalize_text_for_heading,
)

logger = logging.getLogger(__name__)


# Longer normalized lines are content, never headings.
MAX_HEADING_LENGTH = 40

# ===== HEADING TABLE =====
# Ordered; the first section whose pattern matches wins.

HEADING_PATTERNS: List[Tuple[SectionKey, List[re.Pattern]]] = [
    (SectionKey.SUMMARY, [
        re.compile(r"\bprofessional summary\b"),
        re.compile(r"\bsummary\b"),
        re.compile(r"\bprofile\b"),
        re.compile(r"\bobjective\b"),
        re.compile(r"\babout\b"),
    ]),
    (SectionKey.EXPERIENCE, [
        re.compile(r"\bexperience\b"),
        re.compile(r"\bwork history\b"),
        re.compile(r"\bemployment\b"),
        re.compile(r"\bcareer\b"),
        re.compile(r"\bwork experience\b"),
    ]),
    (SectionKey.EDUCATION, [
        re.compile(r"\beducation\b"),
        re.compile(r"\bacademic\b"),
        re.compile(r"\bqualifications?\b"),
        re.compile(r"\bacademic background\b"),
    ]),
    (SectionKey.SKILLS, [
        re.compile(r"\bskills?\b"),
        re.compile(r"\btechnical skills\b"),
        re.compile(r"\bcompetencies\b"),
        re.compile(r"\b(?:top|core|key) skills\b"),
        re.compile(r"\bexpertise\b"),
        re.compile(r"\btechnologies\b"),
    ]),
    (SectionKey.PROJECTS, [
        re.compile(r"\bprojects?\b"),
        re.compile(r"\bportfolio\b"),
    ]),
    (SectionKey.CERTIFICATIONS, [
        re.compile(r"\bcertifications?\b"),
        re.compile(r"\blicen[sc]es?\b"),
        re.compile(r"\bcourses?\b"),
        re.compile(r"\bcredentials?\b"),
        re.compile(r"\bcert\b"),
    ]),
    (SectionKey.LANGUAGES, [
        re.compile(r"\blanguages?\b"),
        re.compile(r"\blanguage skills\b"),
    ]),
    (SectionKey.PROFESSIONAL_DEVELOPMENT, [
        re.compile(r"\bprofessional development\b"),
        re.compile(r"\btraining\b"),
        re.compile(r"\bworkshops?\b"),
        re.compile(r"\bcontinuing education\b"),
        re.compile(r"\bprofessional growth\b"),
    ]),
]

# "Tech: React, Node" inside a project block is a project field, not the Skills heading.
PROJECT_FIELD_LABEL_RE = re.compile(r"^(?:tech|technologies|tech stack|stack|built with)$", re.IGNORECASE)

# ===== FALLBACK DETECTORS =====

PROSE_STARTER_RE = re.compile(
    r"^(?:i am|i have|the|this|that|with|for|and|working|building|developing|using|certified|mastered|gained)\s",
    re.IGNORECASE,
)
PROSE_NOUN_RE = re.compile(
    r"\b(?:knowledge|experience|working|building|developing|focused|learning|environment|"
    r"concepts|solutions|applications|platforms|projects)\b",
    re.IGNORECASE,
)
PROSE_CATEGORY_RE = re.compile(r"^(?:i|the|this|that|my|our|we)\b", re.IGNORECASE)
FUNCTION_WORD_RE = re.compile(
    r"\b(?:i|the|a|an|and|or|to|for|with|in|on|at|by|from|that|this|is|are|was|were|be|been|"
    r"have|has|had|do|does|did|will|would|could|should|may|might|must|can)\b",
    re.IGNORECASE,
)
SKILL_WORD_RE = re.compile(r"\b(?:skills?|technologies|stack|tools?)\b", re.IGNORECASE)
TECH_SHAPE_RE = re.compile(
    r"\.(?:js|ts|net|io)\b|\b(?:sql|api|aws|azure|git|cli|sdk|css|html|json|yaml|rest|graphql)\b",
    re.IGNORECASE,
)
SKILL_SEPARATOR_RE = re.compile(r"[,|/]")
EDUCATION_EXTRA_RE = re.compile(r"\b(?:gpa|honou?rs|coursework|cum laude)\b", re.IGNORECASE)
PROJECT_LINE_RE = re.compile(r"\bprojects?\b|github\.com/", re.IGNORECASE)
CERTIFICATION_LINE_RE = re.compile(r"\b(?:cert|certified|certificate|certification|license|licence|credential)\b", re.IGNORECASE)
EXPERIENCE_AT_RE = re.compile(r"\s+at\s+", re.IGNORECASE)
OPEN_END_RE = re.compile(r"\b(?:present|current)\b", re.IGNORECASE)
COMPANY_SUFFIX_RE = re.compile(r"\b(?:inc|corp|corporation|ltd|llc|gmbh|plc|pty|limited)\b", re.IGNORECASE)


@dataclass
class SegmentedDocument:
    """Result of segmentation: per-section line buckets plus bookkeeping."""
    sections: Dict[SectionKey, List[str]] = field(default_factory=lambda: {key: [] for key in SectionKey})
    all_lines: List[str] = field(default_factory=list)
    heading_hits: Set[SectionKey] = field(default_factory=set)
    fallback_sections: List[SectionKey] = field(default_factory=list)

    def lines_for(self, key: SectionKey) -> List[str]:
        return self.sections[key]


def match_section_heading(line: str) -> Optional[SectionKey]:
    """
    Map a line to a section if it reads as a heading.

    Examples:
        "WORK HISTORY"     -> SectionKey.EXPERIENCE
        "Technical Skills" -> SectionKey.SKILLS
        "Product-minded engineer with startup and enterprise experience." -> None (too long)
    """
    normalized = normalize_text_for_heading(line)
    if not normalized or len(normalized) > MAX_HEADING_LENGTH:
        return None
    for key, patterns in HEADING_PATTERNS:
        if any(p.search(normalized) for p in patterns):
            return key
    return None


def split_inline_heading(line: str, current: SectionKey) -> Optional[Tuple[SectionKey, str]]:
    """
    Detect "Label: content" lines whose label is a heading.

    Examples:
        "Skills: Python, SQL" -> (SectionKey.SKILLS, "Python, SQL")
        "Backend: Node.js"    -> None
    """
    if ":" not in line:
        return None
    label, _, rest = line.partition(":")
    rest = rest.strip()
    if not rest:
        return None
    if current == SectionKey.PROJECTS and PROJECT_FIELD_LABEL_RE.match(label.strip()):
        return None
    key = match_section_heading(label)
    if key is None:
        return None
    return key, rest


def segment_lines(lines: List[str]) -> SegmentedDocument:
    """
    Route every line into a section bucket, then fill empty buckets by inference.

    Args:
        lines: Reconstructed line texts in reading order

    Returns:
        SegmentedDocument with one bucket per SectionKey (possibly empty)
    """
    doc = SegmentedDocument(all_lines=[normalize_space(line) for line in lines if normalize_space(line)])
    heading_lines = set()
    current = SectionKey.HEADER

    for line in doc.all_lines:
        # "Label: values" lines are judged on the label alone
        if ":" in line and line.partition(":")[2].strip():
            inline = split_inline_heading(line, current)
            if inline is not None:
                current, rest = inline
                doc.heading_hits.add(current)
                logger.debug(f"Inline heading '{line}' -> {current.value}")
                doc.sections[current].append(rest)
                continue
        else:
            key = match_section_heading(line)
            if key is not None:
                current = key
                doc.heading_hits.add(current)
                heading_lines.add(line)
                logger.debug(f"Heading '{line}' -> {key.value}")
                continue

        if is_artifact_line(line):
            continue
        doc.sections[current].append(line)

    candidates = [line for line in doc.all_lines if line not in heading_lines and not is_artifact_line(line)]
    inferred = infer_fallback_sections(candidates)
    for key in SECTION_ORDER:
        if not doc.sections[key] and inferred.get(key):
            doc.sections[key] = inferred[key]
            doc.fallback_sections.append(key)
            logger.debug(f"Section {key.value} filled by inference ({len(inferred[key])} lines)")

    return doc


# ============================================================================
# Fallback inference
# ============================================================================

def is_potential_experience_entry(line: str, next_line: str = "") -> bool:
    """
    A line that looks like a job header.

    A date range alone is not enough ("Fiscal Year 2022 - 2023"); it also
    needs a role keyword, the "at" or pipe shape, a company suffix, or a
    bullet on the following line.

    Examples:
        "Lead Engineer at Nova Labs"               -> True
        "Acme Corp Jan 2019 - Dec 2021"            -> True
        "Fiscal Year 2022 - 2023"                  -> False
        "Fiscal Year 2022 - 2023", "- Led audits"  -> True
    """
    if EMAIL_RE.search(line) or PHONE_RE.search(line) or URL_RE.search(line):
        return False
    if is_bullet_line(line):
        return False
    if has_date_range(line):
        return bool(
            contains_keyword(line, ROLE_KEYWORDS)
            or EXPERIENCE_AT_RE.search(line)
            or "|" in line
            or COMPANY_SUFFIX_RE.search(line)
            or (next_line and is_bullet_line(next_line))
        )
    if EXPERIENCE_AT_RE.search(line) and contains_keyword(line, ROLE_KEYWORDS):
        return True
    if "|" in line and (contains_keyword(line, ROLE_KEYWORDS) or OPEN_END_RE.search(line)):
        return True
    return False


def is_potential_education_line(line: str) -> bool:
    if is_bullet_line(line):
        return False
    return contains_keyword(line, EDUCATION_KEYWORDS) or bool(EDUCATION_EXTRA_RE.search(line))


def is_potential_skill_line(line: str) -> bool:
    """
    Heuristic check that a line is a skill list rather than prose.

    Examples:
        "TypeScript, Node.js, PostgreSQL, AWS, Docker" -> True
        "Backend: Node.js, TypeScript"                 -> True
        "Net operating margin is up by 2.1 points."    -> False
    """
    text = clean_bullet(line)
    if len(text) < 2 or EMAIL_RE.search(text) or URL_RE.search(text):
        return False

    words = text.split()
    if len(words) > 15 and ":" not in text:
        return False
    if ":" not in text and match_section_heading(text) is not None:
        return False
    if PROSE_STARTER_RE.match(text) or PROSE_NOUN_RE.search(text):
        return False
    if len(FUNCTION_WORD_RE.findall(text)) >= 3:
        return False

    if SKILL_WORD_RE.search(text):
        return True
    if contains_keyword(text, SKILL_HINT_KEYWORDS) and SKILL_SEPARATOR_RE.search(text):
        return True

    if ":" in text:
        category, _, values = text.partition(":")
        if len(category) > 30 or PROSE_CATEGORY_RE.match(category):
            return False
        return any(v.strip() for v in SKILL_SEPARATOR_RE.split(values))

    if len(words) <= 4 and len(text) <= 40:
        if contains_keyword(text, SKILL_HINT_KEYWORDS) or TECH_SHAPE_RE.search(text):
            return True

    pieces = [p for p in text.split(",") if p.strip()]
    return len(pieces) >= 3 and contains_keyword(text, SKILL_HINT_KEYWORDS)


def infer_fallback_sections(lines: List[str]) -> Dict[SectionKey, List[str]]:
    """
    Per-section candidate lines found by content detectors over the whole document.

    Experience captures the bullet lines that directly follow a detected job
    header. Lines shaped like education (institution or degree) are left to
    the education detector even when they carry a date range.
    """
    inferred: Dict[SectionKey, List[str]] = {key: [] for key in SECTION_ORDER}

    capturing = False
    for index, line in enumerate(lines):
        next_line = lines[index + 1] if index + 1 < len(lines) else ""
        if is_potential_experience_entry(line, next_line) and not is_potential_education_line(line):
            inferred[SectionKey.EXPERIENCE].append(line)
            capturing = True
        elif capturing and is_bullet_line(line):
            inferred[SectionKey.EXPERIENCE].append(line)
        else:
            capturing = False

        if is_potential_education_line(line):
            inferred[SectionKey.EDUCATION].append(line)
        if is_potential_skill_line(line):
            inferred[SectionKey.SKILLS].append(line)
        if PROJECT_LINE_RE.search(line):
            inferred[SectionKey.PROJECTS].append(line)
        if CERTIFICATION_LINE_RE.search(line):
            inferred[SectionKey.CERTIFICATIONS].append(line)
        if LANGUAGE_TOKEN_RE.search(line):
            inferred[SectionKey.LANGUAGES].append(line)

    return {key: dedupe_preserving_order(values) for key, values in inferred.items()}
