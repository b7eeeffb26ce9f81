"""
Positioned-text providers.

The extraction engine never touches PDF internals; it asks a provider for a
document handle and, page by page, for the text runs on that page with their
anchor coordinates. Coordinates follow PDF user space: x grows to the right,
y grows upward, so sorting by descending y reads a page top to bottom.

PdfplumberTextProvider is the default implementation. pdfplumber reports
words, not runs, so words on the same visual row are merged back into runs
while the horizontal gap between them stays small relative to the font size.
A wide gap (a column gutter) ends the run, which is what lets the line
reconstructor tell a sidebar apart from the main column.
"""

import logging
from dataclasses import dataclass, field
from io import BytesIO
from typing import Dict, List, Protocol

import pdfplumber
from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)


@dataclass
class TextItem:
    """A single positioned text run as reported by a provider."""
    text: str
    x: float
    y: float


@dataclass
class TextContent:
    items: List[TextItem] = field(default_factory=list)


class PageHandle(Protocol):
    async def get_text_content(self) -> TextContent: ...


class DocumentHandle(Protocol):
    page_count: int

    async def get_page(self, page_number: int) -> PageHandle: ...

    async def close(self) -> None: ...


class PositionedTextProvider(Protocol):
    async def open_document(self, data: bytes) -> DocumentHandle: ...


# ============================================================================
# pdfplumber implementation
# ============================================================================

# Words whose tops differ by less than this share a visual row (PDF units).
ROW_TOP_TOLERANCE = 3.0
# Gap between neighbouring words, as a multiple of font height, that still counts as a space.
RUN_GAP_RATIO = 1.2


def _cluster_words_into_rows(words: List[Dict], y_tolerance: float = ROW_TOP_TOLERANCE) -> List[List[Dict]]:
    """
    Group pdfplumber word dicts into rows by clustering on their top edge.

    Args:
        words: Word dicts sorted by (top, x0)
        y_tolerance: Vertical distance threshold for same row

    Returns:
        List of word groups, each sorted left to right
    """
    if not words:
        return []

    rows = []
    current_row = [words[0]]
    current_top = words[0]["top"]

    for word in words[1:]:
        if abs(word["top"] - current_top) < y_tolerance:
            current_row.append(word)
        else:
            rows.append(sorted(current_row, key=lambda w: w["x0"]))
            current_row = [word]
            current_top = word["top"]

    rows.append(sorted(current_row, key=lambda w: w["x0"]))
    return rows


def _merge_row_into_runs(row: List[Dict], page_height: float, gap_ratio: float = RUN_GAP_RATIO) -> List[TextItem]:
    """
    Split one visual row into text runs at wide horizontal gaps.

    Rule: gap > gap_ratio * word height -> new run
    """
    runs: List[TextItem] = []
    current = [row[0]]

    def _emit(words: List[Dict]) -> None:
        bottom = max(w["bottom"] for w in words)
        runs.append(TextItem(
            text=" ".join(w["text"] for w in words),
            x=float(words[0]["x0"]),
            y=float(page_height - bottom),
        ))

    for prev, word in zip(row, row[1:]):
        gap = word["x0"] - prev["x1"]
        size = max(word["bottom"] - word["top"], 1.0)
        if gap > gap_ratio * size:
            _emit(current)
            current = [word]
        else:
            current.append(word)

    _emit(current)
    return runs


class PdfplumberPage:
    def __init__(self, page):
        self._page = page

    def _read_items(self) -> List[TextItem]:
        words = self._page.extract_words(keep_blank_chars=False, use_text_flow=False, x_tolerance=2, y_tolerance=2)
        words.sort(key=lambda w: (round(w["top"], 1), w["x0"]))

        items: List[TextItem] = []
        for row in _cluster_words_into_rows(words):
            items.extend(_merge_row_into_runs(row, float(self._page.height)))

        logger.debug(f"Page {self._page.page_number}: {len(words)} words -> {len(items)} runs")
        return items

    async def get_text_content(self) -> TextContent:
        # pdfminer layout analysis is CPU-bound; keep it off the event loop
        return TextContent(items=await run_in_threadpool(self._read_items))


class PdfplumberDocument:
    def __init__(self, pdf):
        self._pdf = pdf
        self.page_count = len(pdf.pages)

    async def get_page(self, page_number: int) -> PdfplumberPage:
        return PdfplumberPage(self._pdf.pages[page_number - 1])

    async def close(self) -> None:
        self._pdf.close()


def _open_pdf(data: bytes) -> PdfplumberDocument:
    return PdfplumberDocument(pdfplumber.open(BytesIO(data)))


class PdfplumberTextProvider:
    """Default provider. Parse failures (corrupt or non-PDF bytes) propagate to the caller."""

    async def open_document(self, data: bytes) -> PdfplumberDocument:
        return await run_in_threadpool(_open_pdf, data)
