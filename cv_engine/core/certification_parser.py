"""
Certification extraction from the Certifications bucket.

    AWS Certified Developer | Amazon | 2023
    - Credential ID: ABC-123
    - https://www.credly.com/badges/...
    - Serverless and containers track
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

from cv_engine.core.patterns import URL_RE, find_single_date, has_date_range, parse_date_range, strip_dates
from cv_engine.core.schemas import Certification
from cv_engine.core.text_normalization import clean_bullet, is_artifact_line, is_bullet_line, normalize_space


CERT_KEYWORD_RE = re.compile(r"\b(?:certified|certification|certificate|license|licence|credential|associate)\b", re.IGNORECASE)
CERT_LOOSE_RE = re.compile(r"\b(?:cert|certificate|certification|license)\b", re.IGNORECASE)
CERTIFYING_BODY_RE = re.compile(r"\b(?:sap|aws|azure|google|oracle|microsoft|cisco|comptia|pmp)\b", re.IGNORECASE)
CREDENTIAL_ID_RE = re.compile(r"\bcredential\s*(?:id|#|no\.?)\s*[:#]?\s*([A-Za-z0-9\-_.]+)", re.IGNORECASE)
YEAR_ONLY_RE = re.compile(r"^(?:[A-Za-z]{3,9}\.?\s+)?(?:19|20)\d{2}$")


def is_certification_header(line: str) -> bool:
    """
    Examples:
        "AWS Certified Developer | Amazon | 2023" -> True
        "Google Cloud Professional Data Engineer"  -> True (known body, long enough)
        "- Passed with distinction"               -> False
    """
    if is_bullet_line(line):
        return False
    if CERT_KEYWORD_RE.search(line):
        return True
    return len(line) > 15 and bool(CERTIFYING_BODY_RE.search(line))


@dataclass
class _PendingCertification:
    name: str
    issuer: str = ""
    date: str = ""
    credential_id: Optional[str] = None
    url: Optional[str] = None
    details: List[str] = field(default_factory=list)


def _parse_header(line: str) -> _PendingCertification:
    start, end = parse_date_range(line)
    date = end or start or find_single_date(line) or ""

    parts = [normalize_space(p) for p in line.split("|") if normalize_space(p)]
    # A part that is only a date is never the name or issuer
    parts = [p for p in parts if not YEAR_ONLY_RE.match(p) and not (has_date_range(p) and len(strip_dates(p)) < 3)]
    name = strip_dates(parts[0]) if parts else strip_dates(line)
    if date and name.endswith(date):
        name = name[: -len(date)].strip(" ,-")
    issuer = parts[1] if len(parts) > 1 else ""
    if not issuer:
        body = CERTIFYING_BODY_RE.search(name)
        issuer = body.group(0) if body else ""
    return _PendingCertification(name=name or line, issuer=issuer, date=date)


class CertificationParser:
    def __init__(self):
        self.entries: List[Certification] = []
        self.current: Optional[_PendingCertification] = None

    def flush(self) -> None:
        current, self.current = self.current, None
        if current is None or not current.name:
            return
        self.entries.append(Certification(
            id=f"cert-{len(self.entries) + 1}",
            name=current.name,
            issuer=current.issuer,
            date=current.date,
            credential_id=current.credential_id,
            url=current.url,
            details=current.details,
        ))

    def feed(self, raw_line: str) -> None:
        line = normalize_space(raw_line)
        if not line or is_artifact_line(line):
            return

        credential = CREDENTIAL_ID_RE.search(line)
        if credential and self.current is not None:
            self.current.credential_id = credential.group(1)
            return

        if is_certification_header(line):
            self.flush()
            self.current = _parse_header(line)
            return

        current = self.current
        if current is None:
            if CERT_LOOSE_RE.search(line):
                self.current = _parse_header(line)
            return

        url = URL_RE.search(line)
        if url and not current.url:
            current.url = url.group(0)
        elif is_bullet_line(line):
            text = clean_bullet(line)
            if text:
                current.details.append(text)

    def finish(self) -> List[Certification]:
        self.flush()
        return self.entries


def parse_certifications(lines: List[str]) -> List[Certification]:
    parser = CertificationParser()
    for line in lines:
        parser.feed(line)
    return parser.finish()
