"""
Final cleanup pass over the assembled CVData.

Runs after every parser and before scoring:
- every string field is re-normalized, and placeholder values become ""
- lists are deduplicated and capped
- entries missing both of their identifying fields are dropped
- identifiers are re-numbered so they stay sequential after drops
"""

from typing import List, Optional

from cv_engine.core.schemas import (
    Certification,
    CVData,
    Education,
    Experience,
    Language,
    PersonalInfo,
    Project,
    Skill,
)
from cv_engine.core.text_normalization import dedupe_preserving_order, normalize_space


MAX_EXPERIENCE_BULLETS = 8
MAX_EDUCATION_HIGHLIGHTS = 6
MAX_CERTIFICATION_DETAILS = 6
MAX_PROJECT_TECHNOLOGIES = 15

PLACEHOLDER_VALUES = {"unknown company", "unknown", "n/a", "na", "tbd", "none", "-"}


def clean_value(value: Optional[str]) -> str:
    text = normalize_space(value or "")
    return "" if text.lower() in PLACEHOLDER_VALUES else text


def _optional(value: Optional[str]) -> Optional[str]:
    return clean_value(value) or None


def clean_list(values: List[str], limit: Optional[int] = None) -> List[str]:
    cleaned = dedupe_preserving_order([v for v in (clean_value(v) for v in values) if v])
    return cleaned[:limit] if limit is not None else cleaned


def _sanitize_personal_info(info: PersonalInfo) -> PersonalInfo:
    return PersonalInfo(**{name: clean_value(value) for name, value in info.model_dump().items()})


def _sanitize_experience(items: List[Experience]) -> List[Experience]:
    out = []
    for item in items:
        company, position = clean_value(item.company), clean_value(item.position)
        if not company and not position:
            continue
        start_date = clean_value(item.start_date)
        out.append(Experience(
            id=f"exp-{len(out) + 1}",
            company=company,
            position=position,
            location=_optional(item.location),
            start_date=start_date,
            end_date=clean_value(item.end_date) or ("Present" if start_date else ""),
            description=clean_list(item.description, MAX_EXPERIENCE_BULLETS),
        ))
    return out


def _sanitize_education(items: List[Education]) -> List[Education]:
    out = []
    for item in items:
        institution, degree = clean_value(item.institution), clean_value(item.degree)
        if not institution and not degree:
            continue
        out.append(Education(
            id=f"edu-{len(out) + 1}",
            institution=institution,
            degree=degree,
            field=clean_value(item.field),
            location=_optional(item.location),
            start_date=_optional(item.start_date),
            end_date=clean_value(item.end_date),
            gpa=_optional(item.gpa),
            highlights=clean_list(item.highlights, MAX_EDUCATION_HIGHLIGHTS),
        ))
    return out


def _sanitize_skills(items: List[Skill]) -> List[Skill]:
    out = []
    seen = set()
    for item in items:
        name = clean_value(item.name)
        category = _optional(item.category)
        key = f"{category or ''}:{name}".lower()
        if len(name) <= 1 or key in seen:
            continue
        seen.add(key)
        out.append(Skill(id=f"skill-{len(out) + 1}", name=name, level=item.level, category=category))
    return out


def _sanitize_projects(items: List[Project]) -> List[Project]:
    out = []
    for item in items:
        name, description = clean_value(item.name), clean_value(item.description)
        if len(name) <= 1 and not description:
            continue
        out.append(Project(
            id=f"proj-{len(out) + 1}",
            name=name,
            description=description,
            technologies=clean_list(item.technologies, MAX_PROJECT_TECHNOLOGIES),
            url=_optional(item.url),
            github=_optional(item.github),
        ))
    return out


def _sanitize_certifications(items: List[Certification]) -> List[Certification]:
    out = []
    for item in items:
        name, issuer = clean_value(item.name), clean_value(item.issuer)
        if len(name) <= 1 and not issuer:
            continue
        out.append(Certification(
            id=f"cert-{len(out) + 1}",
            name=name,
            issuer=issuer,
            date=clean_value(item.date),
            credential_id=_optional(item.credential_id),
            url=_optional(item.url),
            details=clean_list(item.details, MAX_CERTIFICATION_DETAILS),
        ))
    return out


def _sanitize_languages(items: List[Language]) -> List[Language]:
    out = []
    seen = set()
    for item in items:
        name = clean_value(item.name)
        if len(name) <= 1 or name.lower() in seen:
            continue
        seen.add(name.lower())
        out.append(Language(id=f"lang-{len(out) + 1}", name=name, proficiency=item.proficiency))
    return out


def sanitize_cv_data(cv_data: CVData) -> CVData:
    """Return a cleaned copy; the input is not modified."""
    return CVData(
        personal_info=_sanitize_personal_info(cv_data.personal_info),
        summary=clean_value(cv_data.summary),
        experience=_sanitize_experience(cv_data.experience),
        education=_sanitize_education(cv_data.education),
        skills=_sanitize_skills(cv_data.skills),
        projects=_sanitize_projects(cv_data.projects),
        certifications=_sanitize_certifications(cv_data.certifications),
        languages=_sanitize_languages(cv_data.languages),
        professional_development=clean_list(cv_data.professional_development),
    )
