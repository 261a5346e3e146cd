"""
Two-column layout analysis.

A page is split into horizontal bands that are either single-column
(content crosses the page center) or two-column (the center is blank).
Each band becomes one full-width rectangle or a left/right pair, which
are then analysed independently as single columns.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from pagewords.color import ClassificationParams, js_round
from pagewords.config import DEFAULT_CONFIG, AnalysisConfig
from pagewords.projection import (find_active_runs, longest_inactive_run, midline_projection,
                                  vertical_projection)
from pagewords.segment import Box

log = logging.getLogger("pagewords.columns")


@dataclass(frozen=True)
class Span:
    """Vertical extent [y0, y1) of a single-column block."""

    y0: int
    y1: int


def find_column_divide(pixels: np.ndarray, params: ClassificationParams,
                       config: AnalysisConfig = DEFAULT_CONFIG) -> int:
    """
    Find the most probable x position of the gutter between two columns.

    Every column in the central band is scanned; the one with the longest
    uninterrupted vertical blank strip wins, the leftmost on ties.

    Args:
        pixels: RGBA page of shape (h, w, 4)
        params: Foreground/background colors
        config: Analysis thresholds

    Returns:
        Column index of the divide
    """
    w = pixels.shape[1]
    column_divide = js_round(w / 2)
    lo, hi = config.divide_band
    lower = js_round(w * lo)
    upper = min(js_round(w * hi), w)

    global_max = 0
    for x in range(lower, upper):
        projection = midline_projection(pixels, x, params, config.ink_slack)
        blank = longest_inactive_run(projection)
        if blank > global_max:
            global_max = blank
            column_divide = x

    log.debug("Column divide at x=%d (blank run %d of %d rows)", column_divide, global_max, pixels.shape[0])
    return column_divide


def detect_single_column_regions(projection: Sequence[bool],
                                 config: AnalysisConfig = DEFAULT_CONFIG) -> List[Span]:
    """
    Find the blocks whose content crosses the midline.

    Spans closer than a fraction of the page height are joined, so a block
    must be separated by a substantial blank stretch to count as separate.

    Args:
        projection: Midline projection at the column divide
        config: Analysis thresholds

    Returns:
        Single-column spans, top to bottom
    """
    crossing = [Span(run.start, run.end) for run in find_active_runs(projection, 0)]
    if not crossing:
        return []

    threshold = len(projection) / config.column_merge_divisor
    regions = []
    current = crossing[0]
    for span in crossing[1:]:
        if span.y0 - current.y1 < threshold:
            current = Span(current.y0, span.y1)
        else:
            regions.append(current)
            current = span
    regions.append(current)
    return regions


def adjust_single_column_regions(regions: Sequence[Span], projection: Sequence[bool]) -> List[Span]:
    """
    Widen each span to the nearest blank rows of the full-width projection.

    The midline can miss the top and bottom of a block (short lines that
    do not reach the center), so the extent is traced outwards until a
    row without any ink.

    Args:
        regions: Spans from the midline
        projection: Full-width vertical projection of the page

    Returns:
        Adjusted spans
    """
    adjusted = []
    for r in regions:
        y0, y1 = r.y0, r.y1
        for i in range(min(r.y0, len(projection) - 1), -1, -1):
            if not projection[i]:
                y0 = i
                break
        for i in range(r.y1, len(projection)):
            if not projection[i]:
                y1 = i
                break
        adjusted.append(Span(y0, y1))
    return adjusted


def regions_to_rectangles(regions: Sequence[Span], column_divide: int,
                          width: int, height: int) -> Tuple[Box, ...]:
    """
    Turn single-column spans into the ordered rectangles to analyse.

    Every gap before a span yields a left and a right column rectangle,
    then the span itself yields one full-width rectangle. The stretch after
    the last span yields a final left/right pair.
    """
    def gap_pair(y0: int, y1: int) -> Tuple[Box, Box]:
        y1 = max(y0, y1)
        return Box(0, y0, column_divide, y1), Box(column_divide, y0, width, y1)

    rects: Tuple[Box, ...] = ()
    last_end = 0
    for span in regions:
        y0 = max(span.y0, last_end)
        y1 = max(span.y1, y0)
        rects = rects + gap_pair(last_end, span.y0) + (Box(0, y0, width, y1),)
        last_end = y1
    return rects + gap_pair(last_end, height)


def two_column_analysis(pixels: np.ndarray, params: ClassificationParams,
                        config: AnalysisConfig = DEFAULT_CONFIG) -> List[Box]:
    """
    Split a page into rectangles that are each a single column of text.

    Args:
        pixels: RGBA page of shape (h, w, 4)
        params: Foreground/background colors
        config: Analysis thresholds

    Returns:
        Rectangles in reading order: top to bottom, left before right
    """
    h, w = pixels.shape[:2]
    if w == 0 or h == 0:
        return []

    column_divide = find_column_divide(pixels, params, config)
    midline = midline_projection(pixels, min(column_divide, w - 1), params, config.ink_slack)
    full = vertical_projection(pixels, params, config.ink_slack)

    raw = detect_single_column_regions(midline, config)
    spans = adjust_single_column_regions(raw, full)
    rects = list(regions_to_rectangles(spans, column_divide, w, h))

    log.debug("Page %d x %d: %d single-column blocks, %d rectangles",
              w, h, len(spans), len(rects))
    return rects
