"""
pdfplumber-backed provider: real PDF bytes in, positioned text runs out.
"""

import asyncio
import threading

import pytest
from pdfminer.psparser import PSException
from pdfplumber.utils.exceptions import PdfminerException

from cv_engine.core.text_provider import PdfplumberPage, PdfplumberTextProvider, _merge_row_into_runs


def _read_pages(data: bytes):
    async def _read():
        document = await PdfplumberTextProvider().open_document(data)
        try:
            pages = []
            for page_number in range(1, document.page_count + 1):
                page = await document.get_page(page_number)
                pages.append((await page.get_text_content()).items)
            return pages
        finally:
            await document.close()

    return asyncio.run(_read())


def test_lines_come_back_as_runs_with_upward_y(make_pdf):
    pages = _read_pages(make_pdf([["Alex Johnson", "alex@example.com", "- Built and maintained services"]]))

    items = pages[0]
    assert [item.text for item in items] == ["Alex Johnson", "alex@example.com", "- Built and maintained services"]
    assert all(abs(item.x - 72) < 1 for item in items)
    assert abs(items[0].y - 760) < 5
    assert items[0].y > items[1].y > items[2].y


def test_every_page_is_served(make_pdf):
    pages = _read_pages(make_pdf([["Page one text"], ["Page two text"]]))

    assert [[item.text for item in page] for page in pages] == [["Page one text"], ["Page two text"]]


def test_non_pdf_bytes_raise():
    with pytest.raises((PdfminerException, PSException)):
        _read_pages(b"this is not a pdf at all")


def _word(text, x0, x1, top=100.0, bottom=111.0):
    return {"text": text, "x0": x0, "x1": x1, "top": top, "bottom": bottom}


def test_wide_gaps_split_a_row_into_runs():
    row = [_word("Senior", 72, 105), _word("Engineer", 108, 150), _word("2020", 420, 445)]

    runs = _merge_row_into_runs(row, page_height=792)

    assert [r.text for r in runs] == ["Senior Engineer", "2020"]
    assert runs[0].x == 72
    assert runs[1].x == 420
    assert runs[0].y == 792 - 111.0


def test_page_text_is_read_off_the_event_loop_thread(make_pdf, monkeypatch):
    reader_threads = []
    read_items = PdfplumberPage._read_items

    def _tracking_read(self):
        reader_threads.append(threading.get_ident())
        return read_items(self)

    monkeypatch.setattr(PdfplumberPage, "_read_items", _tracking_read)

    pages = _read_pages(make_pdf([["Jane Doe"], ["jane@example.com"]]))

    assert [[item.text for item in page] for page in pages] == [["Jane Doe"], ["jane@example.com"]]
    assert len(reader_threads) == 2
    assert threading.get_ident() not in reader_threads
