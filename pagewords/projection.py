"""
Boolean projection profiles and active-run extraction.
"""

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from pagewords.color import INK_SLACK, ClassificationParams, classify_pixels


@dataclass(frozen=True)
class Run:
    """Half-open span [start, end) of consecutive True projection entries."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


def vertical_projection(pixels: np.ndarray, params: ClassificationParams,
                        slack: float = INK_SLACK) -> np.ndarray:
    """
    Compute the row-wise projection of a region.

    Args:
        pixels: RGBA region of shape (h, w, 4)
        params: Foreground/background colors
        slack: Ink bias for the pixel classifier

    Returns:
        Boolean array of length h, True where the row holds any ink
    """
    if pixels.shape[1] == 0:
        return np.zeros(pixels.shape[0], dtype=bool)
    return classify_pixels(pixels, params, slack).any(axis=1)


def horizontal_projection(pixels: np.ndarray, y0: int, y1: int, params: ClassificationParams,
                          slack: float = INK_SLACK) -> np.ndarray:
    """
    Compute the column-wise projection of rows [y0, y1) of a region.

    Args:
        pixels: RGBA region of shape (h, w, 4)
        y0: First row of the band
        y1: Row after the last row of the band
        params: Foreground/background colors
        slack: Ink bias for the pixel classifier

    Returns:
        Boolean array of length w, True where the column holds any ink
    """
    band = pixels[y0:y1]
    if band.shape[0] == 0:
        return np.zeros(pixels.shape[1], dtype=bool)
    return classify_pixels(band, params, slack).any(axis=0)


def midline_projection(pixels: np.ndarray, x: int, params: ClassificationParams,
                       slack: float = INK_SLACK) -> np.ndarray:
    """Row-wise projection of the single column x."""
    return classify_pixels(pixels[:, x], params, slack)


def find_active_runs(projection: Sequence[bool], min_length: int) -> List[Run]:
    """
    Find the runs of consecutive True values in a projection.

    A run is kept only if it is longer than min_length. A run still open at
    the end of the projection is always kept, so content flush against the
    far edge of the page is never dropped.

    Args:
        projection: Boolean projection profile
        min_length: Runs must be strictly longer than this

    Returns:
        Runs in ascending order
    """
    runs = []
    prev = False
    start = 0

    for i, active in enumerate(projection):
        if active and not prev:
            start = i
        elif not active and prev:
            if i - start > min_length:
                runs.append(Run(start, i))
        prev = bool(active)

    # Handle run at the end
    if prev:
        runs.append(Run(start, len(projection)))

    return runs


def longest_inactive_run(projection: Sequence[bool]) -> int:
    """Length of the longest stretch of consecutive False values."""
    longest = 0
    count = 0
    for active in projection:
        if active:
            count = 0
        else:
            count += 1
            if count > longest:
                longest = count
    return longest
