"""
Test suite for text normalization and the shared date/contact patterns.
"""

import pytest

from cv_engine.core.patterns import (
    EMAIL_RE,
    PHONE_RE,
    URL_RE,
    find_single_date,
    has_date_range,
    parse_date_range,
    strip_dates,
)
from cv_engine.core.text_normalization import (
    clean_bullet,
    is_artifact_line,
    is_bullet_line,
    normalize_space,
    normalize_text_for_heading,
    title_case_each_word,
)


@pytest.mark.parametrize("raw,expected", [
    ("Jan 2020 â€“ Present", "Jan 2020 - Present"),
    ("Jan 2020 â€” Present", "Jan 2020 - Present"),
    ("â€¢ Built APIs", "* Built APIs"),
    ("Jane â€™s team", "Jane 's team"),
    ("Jan 2020 – Present", "Jan 2020 - Present"),
    ("● Built APIs", "* Built APIs"),
    ("“quoted” and ‘single’", "\"quoted\" and 'single'"),
    ("Cape Town", "Cape Town"),
    ("  Lead   Engineer \t| Acme  ", "Lead Engineer | Acme"),
])
def test_normalize_space_repairs_artifacts(raw, expected):
    assert normalize_space(raw) == expected


def test_normalize_space_handles_empty_input():
    assert normalize_space("") == ""
    assert normalize_space(None) == ""


def test_heading_normalization_keeps_letters_only():
    assert normalize_text_for_heading("  Work-History: ") == "work history"
    assert normalize_text_for_heading("SKILLS & TOOLS") == "skills tools"


def test_bullets():
    assert is_bullet_line("- Built APIs")
    assert is_bullet_line("* Built APIs")
    assert is_bullet_line("1. Built APIs")
    assert not is_bullet_line("Built APIs")
    assert clean_bullet("• Built APIs") == "Built APIs"
    assert clean_bullet("2. Shipped v2") == "Shipped v2"


@pytest.mark.parametrize("line", ["", "x", "3", "12", "Page 2", "Page 1 of 3", "CONTACT", "Personal Information", "Hobbies"])
def test_artifact_lines(line):
    assert is_artifact_line(line)


@pytest.mark.parametrize("line", ["Go", "Jane Doe", "Contact me for references"])
def test_content_lines_are_not_artifacts(line):
    assert not is_artifact_line(line)


def test_title_case_each_word():
    assert title_case_each_word("JANE DOE") == "Jane Doe"
    assert title_case_each_word("MARY-ANNE SMITH") == "Mary-Anne Smith"


@pytest.mark.parametrize("text,expected", [
    ("Senior Engineer | Tech Corp Jan 2021 - Present", ("Jan 2021", "Present")),
    ("Lead at Nova Jan 2020 to current", ("Jan 2020", "Present")),
    ("March 2018 - June 2020", ("March 2018", "June 2020")),
    ("Jan 2019 until Mar 2021", ("Jan 2019", "Mar 2021")),
    ("University of Texas 2014 - 2018", ("2014", "2018")),
    ("Orbit Inc 2021 - Present", ("2021", "Present")),
    ("Acme 2016 through 2019", ("2016", "2019")),
    ("no dates here", ("", "")),
])
def test_parse_date_range(text, expected):
    assert parse_date_range(text) == expected


def test_date_helpers():
    assert has_date_range("Jan 2020 - Present")
    assert has_date_range("2015-2019")
    assert not has_date_range("Graduated 2019")
    assert find_single_date("AWS Certified Developer 2023") == "2023"
    assert find_single_date("Issued Mar 2022") == "Mar 2022"
    assert find_single_date("no date") is None
    assert strip_dates("Seattle 2015 - 2019") == "Seattle"
    assert strip_dates("Tech Corp | Jan 2021 - Present") == "Tech Corp"


def test_contact_patterns():
    assert EMAIL_RE.search("reach me: jane.doe+cv@example.co.uk").group(0) == "jane.doe+cv@example.co.uk"
    assert PHONE_RE.search("+1 555 111 2222").group(0) == "+1 555 111 2222"
    assert PHONE_RE.search("(555) 123-4567")
    assert not PHONE_RE.search("2015-2019")
    assert URL_RE.search("https://janedoe.dev")
    assert URL_RE.search("github.com/janedoe")
    assert not URL_RE.search("ASP.NET and Node.js")
    assert not URL_RE.search("jane@example.com")
