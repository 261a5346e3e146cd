"""
Foreground/background color estimation and ink/paper pixel classification.

Colors are sampled along a diagonal through the middle of the page, away
from the margins which are usually pure background. The darkest and the
brightest sampled colors are the two candidates; whichever of them is
closer to more of the samples is the background.
"""

import logging
import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

log = logging.getLogger("pagewords.color")

INK_SLACK = 1.3
SAMPLE_OFFSET_DIVISOR = 2.5


def js_round(value: float) -> int:
    """Round half up (2.5 -> 3, -2.5 -> -2), unlike the builtin round."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class Color:
    r: int
    g: int
    b: int

    @classmethod
    def from_pixel(cls, pixel: Sequence[int]) -> 'Color':
        return cls(int(pixel[0]), int(pixel[1]), int(pixel[2]))

    def squared_norm(self) -> int:
        """Squared distance from black, used to rank colors dark to bright."""
        return self.r ** 2 + self.g ** 2 + self.b ** 2

    def squared_distance(self, other: 'Color') -> int:
        return (self.r - other.r) ** 2 + (self.g - other.g) ** 2 + (self.b - other.b) ** 2

    def as_array(self) -> np.ndarray:
        return np.array([self.r, self.g, self.b], dtype=np.float64)

    def css(self) -> str:
        return f"rgb({self.r},{self.g},{self.b})"

    def to_dict(self) -> dict:
        return {'r': self.r, 'g': self.g, 'b': self.b}


BLACK = Color(0, 0, 0)
WHITE = Color(255, 255, 255)


@dataclass(frozen=True)
class ClassificationParams:
    """Reference colors for one analysis pass."""

    foreground: Color
    background: Color


@dataclass
class _ColorAccumulator:
    """Scratch state shared by the two sampling passes of one call."""

    # start each extreme at the opposite end of the scale
    min_color: Color = WHITE
    max_color: Color = BLACK
    min_freq: int = 0
    max_freq: int = 0


def diagonal_samples(pixels: np.ndarray, offset_divisor: float = SAMPLE_OFFSET_DIVISOR) -> np.ndarray:
    """
    Collect the RGB values on the page diagonal, inset from both ends.

    Args:
        pixels: RGBA pixels of shape (h, w, 4)
        offset_divisor: Inset is round(w / offset_divisor)

    Returns:
        Array of shape (n, 3) in top-left to bottom-right order
    """
    h, w = pixels.shape[:2]
    if w == 0 or h == 0:
        return np.empty((0, 3), dtype=np.int64)

    offset = js_round(w / offset_divisor)
    start = offset * w + offset
    end = min((h - offset) * w, (w - offset) * w)
    indices = np.arange(start, end, w + 1)

    flat = pixels.reshape(-1, pixels.shape[2])
    return flat[indices, :3].astype(np.int64)


def _sample_extremes(acc: _ColorAccumulator, samples: np.ndarray) -> None:
    # strict comparisons keep the first occurrence on ties
    if len(samples) == 0:
        return
    norms = np.sum(samples ** 2, axis=1)
    darkest = int(np.argmin(norms))
    if norms[darkest] < acc.min_color.squared_norm():
        acc.min_color = Color.from_pixel(samples[darkest])
    brightest = int(np.argmax(norms))
    if norms[brightest] > acc.max_color.squared_norm():
        acc.max_color = Color.from_pixel(samples[brightest])


def _count_nearest(acc: _ColorAccumulator, samples: np.ndarray) -> None:
    if len(samples) == 0:
        return
    min_ref = np.array([acc.min_color.r, acc.min_color.g, acc.min_color.b], dtype=np.int64)
    max_ref = np.array([acc.max_color.r, acc.max_color.g, acc.max_color.b], dtype=np.int64)
    dist_min = np.sum((samples - min_ref) ** 2, axis=1)
    dist_max = np.sum((samples - max_ref) ** 2, axis=1)
    # ties count towards the dark candidate
    nearer_min = int(np.count_nonzero(dist_min <= dist_max))
    acc.min_freq += nearer_min
    acc.max_freq += len(samples) - nearer_min


def find_foreground_background(pixels: np.ndarray,
                               offset_divisor: float = SAMPLE_OFFSET_DIVISOR) -> ClassificationParams:
    """
    Estimate the page's foreground (ink) and background (paper) colors.

    The more frequent of the two extreme sampled colors is the background,
    since text covers a minority of the page.

    Args:
        pixels: RGBA pixels of shape (h, w, 4)
        offset_divisor: Diagonal inset divisor

    Returns:
        ClassificationParams with foreground and background colors
    """
    samples = diagonal_samples(pixels, offset_divisor)
    acc = _ColorAccumulator()
    _sample_extremes(acc, samples)
    _count_nearest(acc, samples)

    if acc.max_freq > acc.min_freq:
        params = ClassificationParams(foreground=acc.min_color, background=acc.max_color)
    else:
        params = ClassificationParams(foreground=acc.max_color, background=acc.min_color)

    log.debug("Sampled %d diagonal pixels: foreground=%s background=%s (dark=%d, bright=%d)",
              len(samples), params.foreground.css(), params.background.css(),
              acc.min_freq, acc.max_freq)
    return params


def classify_pixels(pixels: np.ndarray, params: ClassificationParams,
                    slack: float = INK_SLACK) -> np.ndarray:
    """
    Classify every pixel as ink (True) or paper (False).

    Args:
        pixels: Array whose last axis holds at least R, G, B
        params: Foreground/background reference colors
        slack: Bias towards ink for anti-aliased pixels

    Returns:
        Boolean array with the last axis dropped
    """
    rgb = pixels[..., :3].astype(np.float64)
    dist_fg = np.sqrt(np.sum((rgb - params.foreground.as_array()) ** 2, axis=-1))
    dist_bg = np.sqrt(np.sum((rgb - params.background.as_array()) ** 2, axis=-1))
    return dist_fg < dist_bg * slack


def is_set(pixel: Sequence[int], params: ClassificationParams, slack: float = INK_SLACK) -> bool:
    """Single-pixel form of classify_pixels."""
    c = Color.from_pixel(pixel)
    dist_fg = math.sqrt(c.squared_distance(params.foreground))
    dist_bg = math.sqrt(c.squared_distance(params.background))
    return dist_fg < dist_bg * slack
