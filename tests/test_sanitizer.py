from cv_engine.core.sanitizer import MAX_EXPERIENCE_BULLETS, clean_value, sanitize_cv_data
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


def test_placeholders_become_empty():
    assert clean_value("Unknown Company") == ""
    assert clean_value(" N/A ") == ""
    assert clean_value("  Acme   Corp ") == "Acme Corp"
    assert clean_value(None) == ""


def test_entries_without_identifying_fields_are_dropped_and_renumbered():
    cv = CVData(
        experience=[
            Experience(id="exp-1", company="Unknown", position="", description=["orphan"]),
            Experience(id="exp-2", company="Globex", position="Analyst", start_date="2019"),
        ],
        education=[
            Education(id="edu-1", institution="", degree=""),
            Education(id="edu-2", institution="MIT", degree="", start_date="", gpa=""),
        ],
        projects=[Project(id="proj-1", name="x"), Project(id="proj-2", name="Atlas", url="")],
        certifications=[Certification(id="cert-1", name="", issuer=""), Certification(id="cert-2", name="CKA", issuer="CNCF")],
    )

    clean = sanitize_cv_data(cv)

    assert [(e.id, e.company) for e in clean.experience] == [("exp-1", "Globex")]
    assert clean.experience[0].end_date == "Present"
    assert [(e.id, e.institution) for e in clean.education] == [("edu-1", "MIT")]
    assert clean.education[0].start_date is None
    assert clean.education[0].gpa is None
    assert [(p.id, p.name) for p in clean.projects] == [("proj-1", "Atlas")]
    assert clean.projects[0].url is None
    assert [c.id for c in clean.certifications] == ["cert-1"]


def test_lists_are_deduplicated_and_capped():
    bullets = [f"Bullet {n}" for n in range(12)] + ["Bullet 0"]
    cv = CVData(experience=[Experience(id="exp-1", company="Acme", position="Engineer", description=bullets)])

    description = sanitize_cv_data(cv).experience[0].description

    assert len(description) == MAX_EXPERIENCE_BULLETS
    assert description[0] == "Bullet 0"
    assert len(set(description)) == len(description)


def test_skills_and_languages_are_deduplicated():
    cv = CVData(
        skills=[
            Skill(id="skill-1", name="Python", category="Backend"),
            Skill(id="skill-2", name="python", category="backend"),
            Skill(id="skill-3", name="Python", category=None),
        ],
        languages=[Language(id="lang-1", name="English"), Language(id="lang-2", name="english", proficiency="native")],
    )

    clean = sanitize_cv_data(cv)

    assert [(s.id, s.name, s.category) for s in clean.skills] == [("skill-1", "Python", "Backend"), ("skill-2", "Python", None)]
    assert [l.name for l in clean.languages] == ["English"]


def test_personal_info_and_summary_are_cleaned():
    cv = CVData(personal_info=PersonalInfo(full_name="  Jane   Doe ", location="N/A"), summary="  tbd ")

    clean = sanitize_cv_data(cv)

    assert clean.personal_info.full_name == "Jane Doe"
    assert clean.personal_info.location == ""
    assert clean.summary == ""


def test_input_is_not_modified():
    cv = CVData(skills=[Skill(id="skill-9", name=" Go ")])

    sanitize_cv_data(cv)

    assert cv.skills[0].id == "skill-9"
    assert cv.skills[0].name == " Go "
