"""
Skills extraction from the Skills bucket.

Supported line shapes:
    Backend: Node.js, TypeScript, PostgreSQL   (categorized)
    React, TypeScript, Node.js                 (uncategorized list)
    Kubernetes                                 (single skill)
    Python (Expert)                            (level qualifier)

Only lines that pass the skill-line heuristic are considered, so prose that
lands in the bucket (a sentence about "experience with ...") is ignored.
"""

import re
from typing import List, Optional, Set, Tuple

from cv_engine.core.schemas import Skill, SkillLevel
from cv_engine.core.section_segmenter import SKILL_SEPARATOR_RE, is_potential_skill_line
from cv_engine.core.text_normalization import clean_bullet, is_artifact_line, normalize_space


PARENTHETICAL_RE = re.compile(r"\((.*?)\)")


def infer_skill_level(value: str) -> SkillLevel:
    """
    Examples:
        "Python (Expert)"  -> "expert"
        "Senior Go"        -> "advanced"
        "Rust (beginner)"  -> "beginner"
        "SQL"              -> "intermediate"
    """
    if re.search(r"\bexpert\b", value, re.IGNORECASE):
        return "expert"
    if re.search(r"\badvanced\b|\bsenior\b", value, re.IGNORECASE):
        return "advanced"
    if re.search(r"\bbasic\b|\bbeginner\b", value, re.IGNORECASE):
        return "beginner"
    return "intermediate"


def canonical_skill_name(value: str) -> str:
    """Drop parenthesised qualifiers: "Python (Expert)" -> "Python"."""
    return normalize_space(PARENTHETICAL_RE.sub("", value)).strip(" .;")


def _split_values(text: str) -> List[str]:
    return [normalize_space(v) for v in SKILL_SEPARATOR_RE.split(text) if normalize_space(v)]


def parse_skills(lines: List[str]) -> List[Skill]:
    skills: List[Skill] = []
    seen: Set[Tuple[str, str]] = set()

    def _add(raw_value: str, category: Optional[str]) -> None:
        name = canonical_skill_name(raw_value)
        key = ((category or "").lower(), name.lower())
        if len(name) < 2 or key in seen:
            return
        seen.add(key)
        skills.append(Skill(
            id=f"skill-{len(skills) + 1}",
            name=name,
            level=infer_skill_level(raw_value),
            category=category,
        ))

    for line in lines:
        cleaned = clean_bullet(line)
        if not cleaned or is_artifact_line(cleaned):
            continue
        if not is_potential_skill_line(cleaned):
            continue

        if ":" in cleaned:
            raw_category, _, raw_values = cleaned.partition(":")
            category = normalize_space(raw_category) or None
            for value in _split_values(raw_values):
                _add(value, category)
            continue

        values = _split_values(cleaned)
        if len(values) >= 2:
            for value in values:
                _add(value, None)
        else:
            _add(cleaned, None)

    return skills
