"""
Test suite for extraction confidence scoring.

The score decides whether callers treat a document as a CV, so these tests
pin the weights and the threshold behaviour around MIN_CV_PARSE_CONFIDENCE.
"""

from cv_engine.core.confidence_calculator import ConfidenceCalculator
from cv_engine.core.config import MIN_CV_PARSE_CONFIDENCE
from cv_engine.core.schemas import CVData, Education, Experience, PersonalInfo, SectionKey, Skill


def _full_cv() -> CVData:
    return CVData(
        personal_info=PersonalInfo(full_name="Jane Doe", email="jane@example.com"),
        summary="Backend engineer.",
        experience=[Experience(id="exp-1", company="Acme", position="Engineer")],
        education=[Education(id="edu-1", institution="MIT")],
        skills=[Skill(id="skill-1", name="Python")],
    )


def test_empty_document_scores_zero():
    assert ConfidenceCalculator.overall(CVData(), [], set(), "scan.pdf") == 0.0


def test_field_weights():
    cv = CVData(personal_info=PersonalInfo(full_name="Jane Doe", email="jane@example.com"))

    assert ConfidenceCalculator.overall(cv, [], set(), "scan.pdf") == 0.28


def test_section_and_heading_bonuses_are_capped():
    assert ConfidenceCalculator.sections([SectionKey.SUMMARY, SectionKey.SKILLS]) == 0.06
    assert ConfidenceCalculator.sections(list(SectionKey)[1:]) == 0.15
    assert ConfidenceCalculator.headings({SectionKey.SUMMARY, SectionKey.SKILLS}) == 0.06
    assert ConfidenceCalculator.headings(set(SectionKey)) == 0.14


def test_file_name_hint():
    assert ConfidenceCalculator.file_name("jane-doe-cv.pdf") == 0.08
    assert ConfidenceCalculator.file_name("Jane_Doe_CV.pdf") == 0.08
    assert ConfidenceCalculator.file_name("my_resume.pdf") == 0.08
    assert ConfidenceCalculator.file_name("Curriculum Vitae.pdf") == 0.08
    assert ConfidenceCalculator.file_name("q1-report.pdf") == 0.0
    assert ConfidenceCalculator.file_name("cvs-pharmacy.pdf") == 0.0
    assert ConfidenceCalculator.file_name("") == 0.0


def test_full_cv_is_clamped_to_one():
    sections = [SectionKey.SUMMARY, SectionKey.EXPERIENCE, SectionKey.EDUCATION, SectionKey.SKILLS, SectionKey.PROJECTS]

    assert ConfidenceCalculator.overall(_full_cv(), sections, set(sections), "jane-cv.pdf") == 1.0


def test_report_with_title_and_sentence_stays_below_threshold():
    cv = CVData(personal_info=PersonalInfo(full_name="Quarterly Revenue Report"), summary="Net operating margin is up by 2.1 points.")

    score = ConfidenceCalculator.overall(cv, [SectionKey.SUMMARY], set(), "q1-report.pdf")

    assert score == 0.27
    assert score < MIN_CV_PARSE_CONFIDENCE


def test_name_email_and_experience_cross_the_threshold():
    cv = CVData(
        personal_info=PersonalInfo(full_name="Taylor Smith", email="taylor@example.org"),
        experience=[Experience(id="exp-1", company="Orbit Inc", position="Software Engineer")],
    )

    score = ConfidenceCalculator.overall(cv, [SectionKey.EXPERIENCE], {SectionKey.EXPERIENCE}, "document.pdf")

    assert score >= MIN_CV_PARSE_CONFIDENCE


def test_score_is_rounded_to_three_places():
    score = ConfidenceCalculator.overall(_full_cv(), [SectionKey.SUMMARY], {SectionKey.SUMMARY}, "scan.pdf")

    assert score == round(score, 3)
    assert 0.0 <= score <= 1.0


def test_repeated_heading_keys_score_once():
    repeated = [SectionKey.EXPERIENCE, SectionKey.EXPERIENCE, SectionKey.EXPERIENCE]

    assert ConfidenceCalculator.headings(repeated) == ConfidenceCalculator.headings({SectionKey.EXPERIENCE}) == 0.03
