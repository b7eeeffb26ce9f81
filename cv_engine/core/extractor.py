"""
CV extraction pipeline.

    bytes -> provider pages -> glyph runs -> logical lines -> section buckets
          -> entity parsers -> sanitizer -> sections / warnings / confidence

Entry point: extract_cv_data(). Pages are requested strictly in order and at
most max_pages are read. Errors raised by the text provider (corrupt or
non-PDF input) propagate unchanged; everything after text extraction is
total and never raises for odd content.
"""

import logging
from typing import List, Optional

from cv_engine.core.certification_parser import parse_certifications
from cv_engine.core.confidence_calculator import ConfidenceCalculator
from cv_engine.core.config import get_settings
from cv_engine.core.education_parser import parse_education
from cv_engine.core.experience_parser import parse_experience
from cv_engine.core.language_parser import parse_languages
from cv_engine.core.line_reconstructor import LogicalLine, reconstruct_page_lines, runs_from_items
from cv_engine.core.personal_info_parser import extract_personal_info
from cv_engine.core.project_parser import parse_projects
from cv_engine.core.sanitizer import sanitize_cv_data
from cv_engine.core.schemas import SECTION_ORDER, CVData, ExtractionResult, SectionKey
from cv_engine.core.section_segmenter import segment_lines
from cv_engine.core.skills_parser import parse_skills
from cv_engine.core.summary_parser import fallback_summary, parse_professional_development, parse_summary
from cv_engine.core.text_provider import PdfplumberTextProvider, PositionedTextProvider

logger = logging.getLogger(__name__)


WARNING_NO_NAME = "Could not confidently extract full name."
WARNING_NO_EMAIL = "Could not find email in the document."
WARNING_NO_EXPERIENCE = "No work experience section was parsed."
WARNING_NO_EDUCATION = "No education section was parsed."
WARNING_NO_SKILLS = "No skills section was parsed."
WARNING_NO_SUMMARY = "No summary/profile section was parsed."


async def read_document_lines(
    data: bytes,
    provider: PositionedTextProvider,
    max_pages: int,
) -> tuple[List[LogicalLine], int]:
    """
    Pull positioned text from the provider page by page and rebuild lines.

    Returns:
        (lines in reading order across pages, pages_scanned)
    """
    document = await provider.open_document(data)
    try:
        pages_scanned = min(max_pages, document.page_count)
        lines: List[LogicalLine] = []
        for page_number in range(1, pages_scanned + 1):
            page = await document.get_page(page_number)
            content = await page.get_text_content()
            lines.extend(reconstruct_page_lines(runs_from_items(content.items, page_number)))
    finally:
        try:
            await document.close()
        except Exception as exc:
            logger.warning(f"Ignoring error while closing document: {exc}")
    return lines, pages_scanned


def detect_sections(cv_data: CVData) -> List[SectionKey]:
    """Sections with content, in SECTION_ORDER."""
    populated = {
        SectionKey.SUMMARY: bool(cv_data.summary),
        SectionKey.EXPERIENCE: bool(cv_data.experience),
        SectionKey.EDUCATION: bool(cv_data.education),
        SectionKey.SKILLS: bool(cv_data.skills),
        SectionKey.PROJECTS: bool(cv_data.projects),
        SectionKey.CERTIFICATIONS: bool(cv_data.certifications),
        SectionKey.LANGUAGES: bool(cv_data.languages),
        SectionKey.PROFESSIONAL_DEVELOPMENT: bool(cv_data.professional_development),
    }
    return [key for key in SECTION_ORDER if populated[key]]


def collect_warnings(cv_data: CVData) -> List[str]:
    warnings = []
    if not cv_data.personal_info.full_name:
        warnings.append(WARNING_NO_NAME)
    if not cv_data.personal_info.email:
        warnings.append(WARNING_NO_EMAIL)
    if not cv_data.experience:
        warnings.append(WARNING_NO_EXPERIENCE)
    if not cv_data.education:
        warnings.append(WARNING_NO_EDUCATION)
    if not cv_data.skills:
        warnings.append(WARNING_NO_SKILLS)
    if not cv_data.summary:
        warnings.append(WARNING_NO_SUMMARY)
    return warnings


def build_result(line_texts: List[str], file_name: str, pages_scanned: int) -> ExtractionResult:
    """
    Everything after text extraction: segmentation, parsing, sanitizing, scoring.

    Args:
        line_texts: Logical line texts in reading order
        file_name: Original file name (only used as a confidence hint)
        pages_scanned: Number of pages the lines came from

    Returns:
        ExtractionResult
    """
    doc = segment_lines(line_texts)
    header_lines = doc.lines_for(SectionKey.HEADER)

    cv_data = CVData(
        personal_info=extract_personal_info(header_lines, doc.all_lines),
        summary=parse_summary(doc.lines_for(SectionKey.SUMMARY)) or fallback_summary(header_lines, doc.all_lines),
        experience=parse_experience(doc.lines_for(SectionKey.EXPERIENCE)),
        education=parse_education(doc.lines_for(SectionKey.EDUCATION)),
        skills=parse_skills(doc.lines_for(SectionKey.SKILLS)),
        projects=parse_projects(doc.lines_for(SectionKey.PROJECTS)),
        certifications=parse_certifications(doc.lines_for(SectionKey.CERTIFICATIONS)),
        languages=parse_languages(doc.lines_for(SectionKey.LANGUAGES)),
        professional_development=parse_professional_development(doc.lines_for(SectionKey.PROFESSIONAL_DEVELOPMENT)),
    )
    cv_data = sanitize_cv_data(cv_data)

    sections_detected = detect_sections(cv_data)
    missing_sections = [key for key in SECTION_ORDER if key not in sections_detected]
    confidence = ConfidenceCalculator.overall(cv_data, sections_detected, doc.heading_hits, file_name)

    logger.debug(
        f"Extracted '{file_name}': sections={[k.value for k in sections_detected]}, "
        f"headings={sorted(k.value for k in doc.heading_hits)}, inferred={[k.value for k in doc.fallback_sections]}, confidence={confidence}"
    )

    return ExtractionResult(
        cv_data=cv_data,
        confidence=confidence,
        sections_detected=sections_detected,
        missing_sections=missing_sections,
        warnings=collect_warnings(cv_data),
        pages_scanned=pages_scanned,
    )


async def extract_cv_data(
    data: bytes,
    file_name: str,
    *,
    provider: Optional[PositionedTextProvider] = None,
    max_pages: Optional[int] = None,
) -> ExtractionResult:
    """
    Extract structured CV data from PDF bytes.

    Args:
        data: Raw PDF bytes
        file_name: Original file name, used only as a weak "is a CV" hint
        provider: Positioned-text provider (defaults to pdfplumber)
        max_pages: Page cap (defaults to the configured MAX_CV_PARSE_PAGES)

    Returns:
        ExtractionResult. Low confidence is reported, never raised; callers
        compare it with MIN_CV_PARSE_CONFIDENCE.
    """
    provider = provider or PdfplumberTextProvider()
    max_pages = max_pages if max_pages is not None else get_settings().max_parse_pages

    lines, pages_scanned = await read_document_lines(data, provider, max_pages)
    return build_result([line.text for line in lines], file_name, pages_scanned)
