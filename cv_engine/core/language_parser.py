import re
from typing import List

from cv_engine.core.patterns import LANGUAGE_TOKEN_RE
from cv_engine.core.schemas import Language, LanguageProficiency
from cv_engine.core.section_segmenter import SKILL_SEPARATOR_RE
from cv_engine.core.text_normalization import clean_bullet, is_artifact_line, normalize_space


def infer_proficiency(value: str) -> LanguageProficiency:
    """
    Examples:
        "English (Native)"   -> "native"
        "Spanish - fluent"   -> "fluent"
        "German (basic)"     -> "basic"
        "French"             -> "conversational"
    """
    if re.search(r"\bnative\b|mother tongue", value, re.IGNORECASE):
        return "native"
    if re.search(r"\b(?:fluent|advanced|proficient|bilingual)\b", value, re.IGNORECASE):
        return "fluent"
    if re.search(r"\b(?:basic|beginner|elementary)\b", value, re.IGNORECASE):
        return "basic"
    return "conversational"


def parse_languages(lines: List[str]) -> List[Language]:
    """One Language per lexicon token found in the bucket, deduplicated by name."""
    languages: List[Language] = []
    seen = set()

    for line in lines:
        cleaned = clean_bullet(line)
        if not cleaned or is_artifact_line(cleaned):
            continue
        for value in SKILL_SEPARATOR_RE.split(cleaned):
            value = normalize_space(value)
            token = LANGUAGE_TOKEN_RE.search(value)
            if not token:
                continue
            name = token.group(1).capitalize()
            if name.lower() in seen:
                continue
            seen.add(name.lower())
            languages.append(Language(
                id=f"lang-{len(languages) + 1}",
                name=name,
                proficiency=infer_proficiency(value),
            ))

    return languages
