import logging

from fastapi import APIRouter, File, HTTPException, UploadFile
from pdfminer.psparser import PSException
from pdfplumber.utils.exceptions import PdfminerException

from cv_engine.core.config import get_settings
from cv_engine.core.extractor import extract_cv_data
from cv_engine.core.schemas import ExtractionResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["extract"])

PDF_MAGIC = b"%PDF"


def _looks_like_pdf(raw: bytes, filename: str, content_type: str) -> bool:
    return filename.endswith(".pdf") or content_type == "application/pdf" or raw.startswith(PDF_MAGIC)


@router.post(
    "/extract",
    response_model=ExtractionResponse,
    response_model_by_alias=True,
    summary="Extract CV Structure",
    description="Read a text-layer PDF and return structured CV data, the detected sections, warnings and a confidence score.",
    responses={
        200: {
            "description": "Document was read; check `accepted` before trusting it as a CV",
            "content": {
                "application/json": {
                    "example": {
                        "cvData": {
                            "personalInfo": {
                                "fullName": "Alex Johnson",
                                "title": "Senior Software Engineer",
                                "email": "alex@example.com",
                                "phone": "+1 555 123 4567",
                                "location": "Seattle, WA",
                                "linkedin": "linkedin.com/in/alexjohnson",
                                "portfolio": "",
                                "github": "",
                            },
                            "summary": "Backend engineer building payment systems.",
                            "experience": [
                                {
                                    "id": "exp-1",
                                    "company": "Acme Corp",
                                    "position": "Senior Software Engineer",
                                    "location": "Remote",
                                    "startDate": "Jan 2020",
                                    "endDate": "Present",
                                    "description": ["Led migration to event-driven billing"],
                                }
                            ],
                            "education": [],
                            "skills": [],
                            "projects": [],
                            "certifications": [],
                            "languages": [],
                            "professionalDevelopment": [],
                        },
                        "confidence": 0.71,
                        "sectionsDetected": ["summary", "experience"],
                        "missingSections": ["education", "skills", "projects", "certifications", "languages", "professionalDevelopment"],
                        "warnings": ["No education section was parsed.", "No skills section was parsed."],
                        "pagesScanned": 1,
                        "accepted": True,
                        "threshold": 0.45,
                    }
                }
            },
        },
        400: {"description": "Empty file uploaded"},
        415: {"description": "Only PDF files are supported"},
        422: {"description": "PDF could not be loaded"},
    },
)
async def extract_cv(
    file: UploadFile = File(..., description="CV file (PDF with a text layer)")
):
    """
    Extract structured CV data from an uploaded PDF.

    **Returns:**
    - **cvData**: personal info, summary and one list per CV section
    - **sectionsDetected / missingSections**: which sections produced content
    - **warnings**: missing core fields
    - **confidence**: 0..1 score; **accepted** is `confidence >= threshold`
    - **pagesScanned**: pages actually read (capped by configuration)
    """
    raw = await file.read()
    if not raw:
        raise HTTPException(status_code=400, detail="Empty file uploaded.")

    filename = (file.filename or "").lower()
    content_type = (file.content_type or "").lower()
    if not _looks_like_pdf(raw, filename, content_type):
        raise HTTPException(status_code=415, detail=f"Unsupported content type: {file.content_type}. Only PDF is supported.")

    try:
        result = await extract_cv_data(raw, file.filename or "")
    except (PdfminerException, PSException) as exc:
        logger.warning(f"Rejected unreadable PDF '{file.filename}': {exc}")
        raise HTTPException(status_code=422, detail=f"Could not load PDF: {exc}") from exc

    threshold = get_settings().min_parse_confidence
    return ExtractionResponse(
        **result.model_dump(),
        accepted=result.confidence >= threshold,
        threshold=threshold,
    )
