from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


SkillLevel = Literal["beginner", "intermediate", "advanced", "expert"]
LanguageProficiency = Literal["basic", "conversational", "fluent", "native"]


class SectionKey(str, Enum):
    """Closed set of CV sections. Values are the serialized names."""
    HEADER = "header"
    SUMMARY = "summary"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    SKILLS = "skills"
    PROJECTS = "projects"
    CERTIFICATIONS = "certifications"
    LANGUAGES = "languages"
    PROFESSIONAL_DEVELOPMENT = "professionalDevelopment"


# Reporting order for sectionsDetected / missingSections. "header" is never reported.
SECTION_ORDER: List[SectionKey] = [
    SectionKey.SUMMARY,
    SectionKey.EXPERIENCE,
    SectionKey.EDUCATION,
    SectionKey.SKILLS,
    SectionKey.PROJECTS,
    SectionKey.CERTIFICATIONS,
    SectionKey.LANGUAGES,
    SectionKey.PROFESSIONAL_DEVELOPMENT,
]


class CVModel(BaseModel):
    """Base for every output record: snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PersonalInfo(CVModel):
    full_name: str = ""
    title: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    portfolio: str = ""
    github: str = ""


class Experience(CVModel):
    id: str
    company: str = ""
    position: str = ""
    location: Optional[str] = None
    start_date: str = ""
    end_date: str = ""  # "Present" for an open range
    description: List[str] = Field(default_factory=list)


class Education(CVModel):
    id: str
    institution: str = ""
    degree: str = ""
    field: str = ""  # field of study, e.g. "Computer Science"
    location: Optional[str] = None
    start_date: Optional[str] = None
    end_date: str = ""
    gpa: Optional[str] = None
    highlights: List[str] = Field(default_factory=list)


class Skill(CVModel):
    id: str
    name: str
    level: SkillLevel = "intermediate"
    category: Optional[str] = None


class Project(CVModel):
    id: str
    name: str
    description: str = ""
    technologies: List[str] = Field(default_factory=list)
    url: Optional[str] = None
    github: Optional[str] = None


class Certification(CVModel):
    id: str
    name: str
    issuer: str = ""
    date: str = ""
    credential_id: Optional[str] = None
    url: Optional[str] = None
    details: List[str] = Field(default_factory=list)


class Language(CVModel):
    id: str
    name: str
    proficiency: LanguageProficiency = "conversational"


class CVData(CVModel):
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    summary: str = ""
    experience: List[Experience] = Field(default_factory=list)
    education: List[Education] = Field(default_factory=list)
    skills: List[Skill] = Field(default_factory=list)
    projects: List[Project] = Field(default_factory=list)
    certifications: List[Certification] = Field(default_factory=list)
    languages: List[Language] = Field(default_factory=list)
    professional_development: List[str] = Field(default_factory=list)


class ExtractionResult(CVModel):
    cv_data: CVData
    confidence: float = Field(..., ge=0.0, le=1.0, description="Likelihood (0.0-1.0) that the document is a CV and was parsed well")
    sections_detected: List[SectionKey] = Field(default_factory=list)
    missing_sections: List[SectionKey] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    pages_scanned: int = Field(..., ge=0)


class ExtractionResponse(ExtractionResult):
    """HTTP response: the engine result plus the caller-side acceptance decision."""
    accepted: bool = Field(..., description="confidence >= threshold")
    threshold: float
