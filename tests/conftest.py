import asyncio
from typing import List

import pytest

from cv_engine.core.extractor import extract_cv_data
from cv_engine.core.text_provider import TextContent, TextItem


class FakePage:
    def __init__(self, lines: List[str]):
        self.lines = lines

    async def get_text_content(self) -> TextContent:
        # One run per line, left-aligned, 16pt line pitch from the top of a Letter page
        return TextContent(items=[TextItem(text=line, x=72, y=760 - index * 16) for index, line in enumerate(self.lines)])


class FakeDocument:
    def __init__(self, pages: List[List[str]], fail_on_close: bool = False):
        self.pages = pages
        self.page_count = len(pages)
        self.requested: List[int] = []
        self.closed = False
        self.fail_on_close = fail_on_close

    async def get_page(self, page_number: int) -> FakePage:
        self.requested.append(page_number)
        return FakePage(self.pages[page_number - 1])

    async def close(self) -> None:
        self.closed = True
        if self.fail_on_close:
            raise RuntimeError("close failed")


class FakeProvider:
    def __init__(self, pages: List[List[str]], fail_on_close: bool = False):
        self.pages = pages
        self.fail_on_close = fail_on_close
        self.document = None

    async def open_document(self, data: bytes) -> FakeDocument:
        self.document = FakeDocument(self.pages, fail_on_close=self.fail_on_close)
        return self.document


def run_extraction(pages: List[List[str]], file_name: str = "document.pdf", **kwargs):
    provider = kwargs.pop("provider", None) or FakeProvider(pages)
    return asyncio.run(extract_cv_data(b"%PDF-fake", file_name, provider=provider, **kwargs))


def _pdf_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_text_pdf(pages: List[List[str]]) -> bytes:
    """
    Minimal single-font PDF with one text line per entry, 16pt apart from y=760.

    Offsets in the xref table are computed from the written bytes, so the
    output is a valid PDF that pdfplumber opens without repair.
    """
    objects = [
        (1, b"<< /Type /Catalog /Pages 2 0 R >>"),
        (3, b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>"),
    ]
    page_ids = []
    next_id = 4
    for lines in pages:
        page_id, content_id = next_id, next_id + 1
        next_id += 2
        stream = "\n".join(
            f"BT /F1 11 Tf 1 0 0 1 72 {760 - index * 16} Tm ({_pdf_escape(line)}) Tj ET"
            for index, line in enumerate(lines)
        ).encode("latin-1")
        objects.append((page_id, (
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            f"/Resources << /Font << /F1 3 0 R >> >> /Contents {content_id} 0 R >>"
        ).encode("latin-1")))
        objects.append((content_id, b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream"))
        page_ids.append(page_id)

    kids = " ".join(f"{page_id} 0 R" for page_id in page_ids)
    objects.append((2, f"<< /Type /Pages /Kids [{kids}] /Count {len(page_ids)} >>".encode("latin-1")))
    objects.sort(key=lambda obj: obj[0])

    out = bytearray(b"%PDF-1.4\n")
    offsets = {}
    for obj_id, body in objects:
        offsets[obj_id] = len(out)
        out += b"%d 0 obj\n" % obj_id + body + b"\nendobj\n"

    xref_offset = len(out)
    size = len(objects) + 1
    out += b"xref\n0 %d\n" % size
    out += b"0000000000 65535 f \n"
    for obj_id in range(1, size):
        out += b"%010d 00000 n \n" % offsets[obj_id]
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (size, xref_offset)
    return bytes(out)


@pytest.fixture
def sample_cv_pdf() -> bytes:
    return build_text_pdf([[
        "Alex Johnson",
        "Senior Software Engineer",
        "alex@example.com",
        "Seattle, WA",
        "SUMMARY",
        "Backend engineer focused on distributed systems and API design.",
        "EXPERIENCE",
        "Senior Engineer | Tech Corp | Seattle, WA Jan 2021 - Present",
        "- Built and maintained microservices for payments.",
        "EDUCATION",
        "University of Washington | BSc Computer Science | Seattle 2015 - 2019",
        "SKILLS",
        "Backend: Node.js, TypeScript, PostgreSQL",
    ]])


@pytest.fixture
def extract():
    """Run the engine over in-memory pages: extract(pages, file_name=..., max_pages=...)."""
    return run_extraction


@pytest.fixture
def fake_provider():
    """Factory for providers that serve fixed pages: fake_provider(pages, fail_on_close=False)."""
    return FakeProvider


@pytest.fixture
def make_pdf():
    """Factory for real PDF bytes: make_pdf([["line", ...], ...]) with one list per page."""
    return build_text_pdf
