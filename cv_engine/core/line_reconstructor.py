"""
Reading-order line reconstruction from positioned text runs.

Two steps per page:
1) Column detection. Run anchors are bucketed into three horizontal bands
   (left sidebar, main column, right sidebar). When both a sidebar band and
   the main band hold a meaningful share of the runs, the page is split and
   each column is read on its own: a left sidebar is read before the main
   column, the main column is read before a right sidebar.
2) Row grouping. Within a column, runs sorted top to bottom are clustered
   into rows by y-proximity; each row is ordered left to right and joined.

The band boundaries are tuned for A4/Letter pages in PDF points.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List

from cv_engine.core.text_normalization import normalize_space
from cv_engine.core.text_provider import TextItem

logger = logging.getLogger(__name__)


SIDEBAR_LEFT_MAX = 230.0
SIDEBAR_RIGHT_MIN = 400.0
PAGE_MARGIN_MIN = 40.0
ROW_Y_TOLERANCE = 2.5
# Minimum share of runs a band must hold before it counts as a column.
MIN_BAND_SHARE = 0.15


@dataclass
class GlyphRun:
    """A run of text anchored at (x, y) on a page."""
    page: int
    text: str
    x: float
    y: float


@dataclass
class LogicalLine:
    """One reconstructed line of text in reading order."""
    page: int
    y: float
    text: str


class ColumnLayout(str, Enum):
    SINGLE = "single"
    LEFT_SIDEBAR = "left_sidebar"
    RIGHT_SIDEBAR = "right_sidebar"


def runs_from_items(items: List[TextItem], page: int) -> List[GlyphRun]:
    """Normalize provider items into GlyphRuns, dropping empty ones."""
    runs = []
    for item in items:
        text = normalize_space(item.text)
        if text:
            runs.append(GlyphRun(page=page, text=text, x=float(item.x), y=float(item.y)))
    return runs


def detect_layout(runs: List[GlyphRun]) -> ColumnLayout:
    """
    Classify a page as single-column or sidebar-split from run x-anchors.

    Examples:
        runs all at x=72                         -> SINGLE
        runs at x=50..200 and at x=250..380      -> LEFT_SIDEBAR
        runs at x=250..380 and at x=420..520     -> RIGHT_SIDEBAR
    """
    if not runs:
        return ColumnLayout.SINGLE

    total = float(len(runs))
    left = sum(1 for r in runs if PAGE_MARGIN_MIN < r.x < SIDEBAR_LEFT_MAX) / total
    main = sum(1 for r in runs if SIDEBAR_LEFT_MAX <= r.x < SIDEBAR_RIGHT_MIN) / total
    right = sum(1 for r in runs if r.x >= SIDEBAR_RIGHT_MIN) / total

    if left >= MIN_BAND_SHARE and main >= MIN_BAND_SHARE:
        return ColumnLayout.LEFT_SIDEBAR
    if right >= MIN_BAND_SHARE and main >= MIN_BAND_SHARE:
        return ColumnLayout.RIGHT_SIDEBAR
    return ColumnLayout.SINGLE


def split_columns(runs: List[GlyphRun], layout: ColumnLayout) -> List[List[GlyphRun]]:
    """Partition runs into columns, in the order they should be read."""
    if layout == ColumnLayout.LEFT_SIDEBAR:
        sidebar = [r for r in runs if r.x < SIDEBAR_LEFT_MAX]
        main = [r for r in runs if r.x >= SIDEBAR_LEFT_MAX]
        return [sidebar, main]
    if layout == ColumnLayout.RIGHT_SIDEBAR:
        main = [r for r in runs if r.x < SIDEBAR_RIGHT_MIN]
        sidebar = [r for r in runs if r.x >= SIDEBAR_RIGHT_MIN]
        return [main, sidebar]
    return [runs]


def _cluster_runs_into_rows(runs: List[GlyphRun], y_tolerance: float = ROW_Y_TOLERANCE) -> List[List[GlyphRun]]:
    """
    Group runs into rows by clustering on y.

    Args:
        runs: Runs of one column, any order
        y_tolerance: Maximum distance from the row anchor (PDF units)

    Returns:
        Rows top to bottom, each row's runs left to right
    """
    if not runs:
        return []

    ordered = sorted(runs, key=lambda r: (-r.y, r.x))
    rows = []
    current_row = [ordered[0]]
    current_y = ordered[0].y

    for run in ordered[1:]:
        if abs(current_y - run.y) <= y_tolerance:
            current_row.append(run)
        else:
            rows.append(current_row)
            current_row = [run]
            current_y = run.y

    rows.append(current_row)
    return [sorted(row, key=lambda r: r.x) for row in rows]


def build_lines(runs: List[GlyphRun]) -> List[LogicalLine]:
    """Rows of a single column as LogicalLines, top to bottom."""
    lines = []
    for row in _cluster_runs_into_rows(runs):
        text = normalize_space(" ".join(r.text for r in row))
        if text:
            lines.append(LogicalLine(page=row[0].page, y=row[0].y, text=text))
    return lines


def reconstruct_page_lines(runs: List[GlyphRun]) -> List[LogicalLine]:
    """
    Full per-page reconstruction: detect columns, then build rows per column.

    Returns lines in reading order. Every input run's text appears in exactly
    one output line.
    """
    if not runs:
        return []

    layout = detect_layout(runs)
    logger.debug(f"Page {runs[0].page}: {len(runs)} runs, layout={layout.value}")

    lines: List[LogicalLine] = []
    for column in split_columns(runs, layout):
        lines.extend(build_lines(column))
    return lines
