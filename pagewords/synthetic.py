"""
Generate synthetic 'document' pages with known word boxes for tests and
experiments. Letters are solid blocks; words are runs of letters; lines
wrap at the column edge and paragraphs start with an indented line.
"""

import random
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import cv2
import numpy as np

from pagewords.segment import Box

RGB = Tuple[int, int, int]


@dataclass
class SyntheticPage:
    pixels: np.ndarray            # RGBA, shape (h, w, 4)
    words: List[Box]              # ground truth in reading order
    paragraph_starts: List[int] = field(default_factory=list)  # indices into words
    columns: List[Tuple[int, int]] = field(default_factory=list)  # (x0, x1) per column


def _draw_word(img: np.ndarray, x: int, y: int, letters: int, letter_w: int,
               letter_h: int, letter_gap: int, ink: RGB) -> Box:
    for i in range(letters):
        lx = x + i * (letter_w + letter_gap)
        # cv2 rectangles include both corners
        cv2.rectangle(img, (lx, y), (lx + letter_w - 1, y + letter_h - 1), ink, -1)
    x1 = x + letters * letter_w + (letters - 1) * letter_gap
    return Box(x, y, x1, y + letter_h)


def generate_synthetic_page(width: int = 600, height: int = 800, columns: int = 1,
                            seed: Optional[int] = None,
                            margin: int = 40, gutter: int = 40,
                            letter_w: int = 6, letter_h: int = 10,
                            letter_gap: int = 2, word_gap: int = 8, line_gap: int = 6,
                            paragraph_lines: Tuple[int, int] = (3, 6), indent: int = 24,
                            max_letters: int = 6,
                            ink: RGB = (0, 0, 0), paper: RGB = (255, 255, 255)) -> SyntheticPage:
    """
    Render a page of block text in one or two columns.

    Args:
        width, height: Page size in pixels
        columns: 1 or 2
        seed: Random seed for word lengths and paragraph sizes
        margin: Blank border on every side
        gutter: Blank strip between the two columns
        letter_w, letter_h: Letter block size
        letter_gap, word_gap, line_gap: Spacing in pixels
        paragraph_lines: Inclusive range of lines per paragraph
        indent: First-line indentation of every paragraph
        max_letters: Longest word
        ink, paper: RGB colors

    Returns:
        SyntheticPage with RGBA pixels and ground-truth word boxes
    """
    if columns not in (1, 2):
        raise ValueError(f"columns must be 1 or 2, got {columns}")
    rng = random.Random(seed)

    img = np.empty((height, width, 3), dtype=np.uint8)
    img[:] = paper

    if columns == 1:
        spans = [(margin, width - margin)]
    else:
        col_w = (width - 2 * margin - gutter) // 2
        spans = [(margin, margin + col_w), (width - margin - col_w, width - margin)]

    words: List[Box] = []
    paragraph_starts: List[int] = []
    line_pitch = letter_h + line_gap

    for x_start, x_end in spans:
        y = margin
        lines_left = 0
        while y + letter_h <= height - margin:
            first_line = lines_left == 0
            if first_line:
                lines_left = rng.randint(*paragraph_lines)
                paragraph_starts.append(len(words))
            x = x_start + (indent if first_line else 0)
            placed = 0
            while True:
                letters = rng.randint(1, max_letters)
                word_w = letters * letter_w + (letters - 1) * letter_gap
                if x + word_w > x_end:
                    break
                words.append(_draw_word(img, x, y, letters, letter_w, letter_h, letter_gap, ink))
                x += word_w + word_gap
                placed += 1
            if placed == 0:
                raise ValueError(f"Column {x_start}-{x_end} too narrow for a word")
            lines_left -= 1
            y += line_pitch

    alpha = np.full((height, width, 1), 255, dtype=np.uint8)
    pixels = np.concatenate([img, alpha], axis=2)
    return SyntheticPage(pixels=pixels, words=words, paragraph_starts=paragraph_starts,
                         columns=spans)


def save_page(page: SyntheticPage, path: str) -> None:
    bgr = cv2.cvtColor(np.ascontiguousarray(page.pixels[..., :3]), cv2.COLOR_RGB2BGR)
    if not cv2.imwrite(path, bgr):
        raise ValueError(f"Failed to save image to {path}")
