"""
Line and word detection inside a single-column region.

Lines are bands of rows containing ink. Inside each band, columns
containing ink form letter clusters, and clusters closer together than an
adaptive threshold are joined into words.
"""

import logging
from typing import List, Sequence, Tuple

import numpy as np

from pagewords.color import ClassificationParams
from pagewords.config import DEFAULT_CONFIG, AnalysisConfig
from pagewords.projection import find_active_runs, horizontal_projection, vertical_projection
from pagewords.segment import Box

log = logging.getLogger("pagewords.words")


def find_lines(pixels: np.ndarray, params: ClassificationParams,
               config: AnalysisConfig = DEFAULT_CONFIG) -> List[Tuple[int, int]]:
    """
    Detect text lines using the vertical projection.

    Args:
        pixels: RGBA region of shape (h, w, 4)
        params: Foreground/background colors
        config: Analysis thresholds

    Returns:
        List of (y0, y1) line bands in region coordinates
    """
    projection = vertical_projection(pixels, params, config.ink_slack)
    runs = find_active_runs(projection, config.line_min_length)
    return [(run.start, run.end) for run in runs]


def merge_threshold(gaps: Sequence[int], config: AnalysisConfig = DEFAULT_CONFIG) -> float:
    """
    Choose the gap separating words from letters on one line.

    Half the widest gap, unless that falls outside the configured range
    (a single cluster, or an unusually wide gap), in which case the
    fallback threshold is used.
    """
    if not gaps:
        return config.merge_threshold_fallback
    threshold = max(gaps) / 2
    if threshold > config.merge_threshold_max or threshold < config.merge_threshold_min:
        return config.merge_threshold_fallback
    return threshold


def concatenate_letters_to_words(letters: List[Box],
                                 config: AnalysisConfig = DEFAULT_CONFIG) -> List[Box]:
    """
    Join letter clusters separated by small gaps into words.

    Args:
        letters: Letter boxes of one line, left to right
        config: Analysis thresholds

    Returns:
        Word boxes, left to right
    """
    if not letters:
        return []

    gaps = [nxt.x0 - cur.x1 for cur, nxt in zip(letters, letters[1:])]
    threshold = merge_threshold(gaps, config)

    words = []
    word = letters[0]
    for letter in letters[1:]:
        if letter.x0 - word.x1 < threshold:
            word = Box(word.x0, word.y0, letter.x1, word.y1)
        else:
            words.append(word)
            word = letter
    words.append(word)
    return words


def find_words_for_line(pixels: np.ndarray, y0: int, y1: int, params: ClassificationParams,
                        config: AnalysisConfig = DEFAULT_CONFIG) -> List[Box]:
    """Find the words of the line band [y0, y1) using the horizontal projection."""
    projection = horizontal_projection(pixels, y0, y1, params, config.ink_slack)
    runs = find_active_runs(projection, config.letter_min_length)
    letters = [Box(run.start, y0, run.end, y1) for run in runs]
    return concatenate_letters_to_words(letters, config)


def find_words(pixels: np.ndarray, params: ClassificationParams,
               config: AnalysisConfig = DEFAULT_CONFIG) -> List[Box]:
    """
    Find all words of a region: lines top to bottom, words left to right.

    Args:
        pixels: RGBA region of shape (h, w, 4)
        params: Foreground/background colors
        config: Analysis thresholds

    Returns:
        Word boxes in region coordinates
    """
    words = []
    lines = find_lines(pixels, params, config)
    for y0, y1 in lines:
        words.extend(find_words_for_line(pixels, y0, y1, params, config))

    log.debug("Region %d x %d: %d lines, %d words",
              pixels.shape[1], pixels.shape[0], len(lines), len(words))
    return words
