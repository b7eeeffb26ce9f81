"""
Section segmentation: heading detection, inline "Label: values" headings,
artifact dropping and fallback inference for CVs without headings.
"""

import pytest

from cv_engine.core.schemas import SectionKey
from cv_engine.core.section_segmenter import (
    is_potential_experience_entry,
    is_potential_skill_line,
    match_section_heading,
    segment_lines,
    split_inline_heading,
)


@pytest.mark.parametrize("line,expected", [
    ("SUMMARY", SectionKey.SUMMARY),
    ("PROFILE", SectionKey.SUMMARY),
    ("WORK HISTORY", SectionKey.EXPERIENCE),
    ("Professional Experience", SectionKey.EXPERIENCE),
    ("EDUCATION", SectionKey.EDUCATION),
    ("Technical Skills", SectionKey.SKILLS),
    ("Core Competencies", SectionKey.SKILLS),
    ("Projects", SectionKey.PROJECTS),
    ("Certifications & Licenses", SectionKey.CERTIFICATIONS),
    ("Languages", SectionKey.LANGUAGES),
    ("Professional Development", SectionKey.PROFESSIONAL_DEVELOPMENT),
    ("Jane Doe", None),
    ("Product-minded engineer with startup and enterprise experience.", None),
])
def test_match_section_heading(line, expected):
    assert match_section_heading(line) == expected


def test_inline_heading_keeps_values():
    assert split_inline_heading("Skills: Python, SQL", SectionKey.HEADER) == (SectionKey.SKILLS, "Python, SQL")
    assert split_inline_heading("Backend: Node.js", SectionKey.SKILLS) is None
    assert split_inline_heading("Skills:", SectionKey.HEADER) is None


def test_tech_label_inside_projects_is_a_project_field():
    assert split_inline_heading("Tech: React, Node", SectionKey.PROJECTS) is None
    assert split_inline_heading("Technologies: React, Node", SectionKey.PROJECTS) is None
    assert split_inline_heading("Technologies: React, Node", SectionKey.HEADER) == (SectionKey.SKILLS, "React, Node")


def test_headings_move_the_cursor_and_are_not_stored():
    doc = segment_lines([
        "Jane Doe",
        "jane@example.com",
        "EXPERIENCE",
        "Engineer at Acme 2020 - Present",
        "- Built things",
        "SKILLS",
        "Python, SQL",
    ])

    assert doc.lines_for(SectionKey.HEADER) == ["Jane Doe", "jane@example.com"]
    assert doc.lines_for(SectionKey.EXPERIENCE) == ["Engineer at Acme 2020 - Present", "- Built things"]
    assert doc.lines_for(SectionKey.SKILLS) == ["Python, SQL"]
    assert doc.heading_hits == {SectionKey.EXPERIENCE, SectionKey.SKILLS}
    assert "EXPERIENCE" in doc.all_lines


def test_artifact_lines_are_dropped():
    doc = segment_lines([
        "Jane Doe",
        "EXPERIENCE",
        "Engineer at Acme 2020 - Present",
        "Page 1 of 2",
        "2",
        "References",
        "- Built things",
    ])

    assert doc.lines_for(SectionKey.EXPERIENCE) == ["Engineer at Acme 2020 - Present", "- Built things"]


def test_inline_heading_switches_section():
    doc = segment_lines(["Jane Doe", "Skills: Python, SQL", "Kubernetes"])

    assert doc.lines_for(SectionKey.SKILLS) == ["Python, SQL", "Kubernetes"]
    assert doc.heading_hits == {SectionKey.SKILLS}


def test_fallback_fills_empty_sections_from_content():
    doc = segment_lines([
        "Morgan Patel",
        "morgan@resume.dev",
        "Senior Software Engineer at Acme Systems Jan 2020 - Present",
        "- Led migration to event-driven architecture.",
        "University of Texas | Bachelor of Science in Computer Science | Austin 2014 - 2018",
        "TypeScript, Node.js, PostgreSQL, AWS, Docker",
    ])

    assert doc.heading_hits == set()
    assert doc.lines_for(SectionKey.EXPERIENCE) == [
        "Senior Software Engineer at Acme Systems Jan 2020 - Present",
        "- Led migration to event-driven architecture.",
    ]
    assert doc.lines_for(SectionKey.EDUCATION) == [
        "University of Texas | Bachelor of Science in Computer Science | Austin 2014 - 2018",
    ]
    assert doc.lines_for(SectionKey.SKILLS) == ["TypeScript, Node.js, PostgreSQL, AWS, Docker"]
    assert doc.fallback_sections == [SectionKey.EXPERIENCE, SectionKey.EDUCATION, SectionKey.SKILLS]


def test_fallback_never_overrides_a_populated_section():
    doc = segment_lines([
        "Jane Doe",
        "TypeScript, Node.js, PostgreSQL, AWS",
        "SKILLS",
        "Go",
    ])

    assert doc.lines_for(SectionKey.SKILLS) == ["Go"]
    assert SectionKey.SKILLS not in doc.fallback_sections


@pytest.mark.parametrize("line,expected", [
    ("TypeScript, Node.js, PostgreSQL, AWS, Docker", True),
    ("Backend: Node.js, TypeScript", True),
    ("Kubernetes, Docker, Terraform", True),
    ("Net operating margin is up by 2.1 points.", False),
    ("I have experience building React apps", False),
    ("jane@example.com", False),
    ("github.com/jane/payments", False),
])
def test_is_potential_skill_line(line, expected):
    assert is_potential_skill_line(line) is expected


@pytest.mark.parametrize("line,expected", [
    ("Lead Engineer at Nova Labs", True),
    ("Engineer | Acme | Present", True),
    ("Acme Corp Jan 2019 - Dec 2021", True),
    ("Data Analyst 2019 - 2021", True),
    ("Fiscal Year 2022 - 2023", False),
    ("- Built pipelines 2019 - 2020", False),
    ("jane@example.com 2019 - 2020", False),
    ("Built internal tooling", False),
])
def test_is_potential_experience_entry(line, expected):
    assert is_potential_experience_entry(line) is expected


def test_dated_line_followed_by_bullet_is_a_job_header():
    assert is_potential_experience_entry("Northwind 2019 - 2021", "- Ran the on-call rotation.") is True
    assert is_potential_experience_entry("Northwind 2019 - 2021", "Revenue grew twelve percent.") is False


def test_repeated_heading_counts_once():
    doc = segment_lines([
        "EXPERIENCE",
        "Engineer at Acme 2020 - 2021",
        "EXPERIENCE",
        "Analyst at Beta 2018 - 2019",
        "Skills: Python",
        "Skills: SQL",
    ])

    assert doc.heading_hits == {SectionKey.EXPERIENCE, SectionKey.SKILLS}
    assert len(doc.lines_for(SectionKey.EXPERIENCE)) == 2
