"""
Project extraction from the Projects bucket.

A project starts on a short, unbulleted title line; the lines that follow
are routed to the project's GitHub link, URL, technology list or
description.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from cv_engine.core.patterns import GITHUB_RE, URL_RE
from cv_engine.core.schemas import Project
from cv_engine.core.section_segmenter import SKILL_SEPARATOR_RE, match_section_heading
from cv_engine.core.text_normalization import clean_bullet, is_artifact_line, is_bullet_line, normalize_space


# Lowercase product names callers want treated as titles; none by default.
KNOWN_PROJECT_NAMES: Tuple[str, ...] = ()

MAX_TITLE_LENGTH = 90
TITLE_SHAPE_RE = re.compile(r"^[A-Z][a-zA-Z0-9\s\-]+$")
TECH_LABEL_RE = re.compile(r"^(?:tech(?:nologies)?|tech stack|stack|built with)\s*[:\-]\s*", re.IGNORECASE)


def _is_mostly_capitalized(text: str) -> bool:
    """At least half the words start upper-case (or are digits). "Payments Platform" yes, "open source editor" no."""
    words = text.split()
    if not words or len(words) > 8:
        return False
    capitalized = sum(1 for w in words if w[0].isupper() or w[0].isdigit())
    return capitalized / len(words) >= 0.5


def looks_like_project_title(line: str, known_names: Iterable[str] = KNOWN_PROJECT_NAMES) -> bool:
    if is_bullet_line(line) or len(line) >= MAX_TITLE_LENGTH or ":" in line:
        return False
    if match_section_heading(line) is not None:
        return False
    if any(name in line.lower() for name in known_names):
        return True
    return bool(TITLE_SHAPE_RE.match(line)) and _is_mostly_capitalized(line)


@dataclass
class _PendingProject:
    name: str
    description: str = ""
    technologies: List[str] = field(default_factory=list)
    url: Optional[str] = None
    github: Optional[str] = None


class ProjectParser:
    def __init__(self, known_names: Iterable[str] = KNOWN_PROJECT_NAMES):
        self.known_names = tuple(n.lower() for n in known_names)
        self.entries: List[Project] = []
        self.current: Optional[_PendingProject] = None

    def flush(self) -> None:
        current, self.current = self.current, None
        if current is None or not current.name:
            return
        self.entries.append(Project(
            id=f"proj-{len(self.entries) + 1}",
            name=current.name,
            description=current.description,
            technologies=current.technologies,
            url=current.url,
            github=current.github,
        ))

    def feed(self, raw_line: str) -> None:
        line = normalize_space(raw_line)
        if not line or is_artifact_line(line):
            return

        if looks_like_project_title(line, self.known_names):
            self.flush()
            self.current = _PendingProject(name=clean_bullet(line))
            return

        current = self.current
        if current is None:
            return
        text = clean_bullet(line)

        github = GITHUB_RE.search(text)
        url = URL_RE.search(text)
        if github and not current.github:
            current.github = github.group(0)
        elif url and not github and not current.url:
            current.url = url.group(0)
        elif TECH_LABEL_RE.match(text):
            values = SKILL_SEPARATOR_RE.split(TECH_LABEL_RE.sub("", text, count=1))
            current.technologies.extend(normalize_space(v) for v in values if normalize_space(v))
        elif text:
            current.description = f"{current.description} {text}".strip()

    def finish(self) -> List[Project]:
        self.flush()
        return self.entries


def parse_projects(lines: List[str], known_names: Iterable[str] = KNOWN_PROJECT_NAMES) -> List[Project]:
    parser = ProjectParser(known_names)
    for line in lines:
        parser.feed(line)
    return parser.finish()
