"""
Box and Segment types for word segmentation output.
A page is described as a reading-order sequence of word boxes and markers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterator, List, Optional, Tuple

import numpy as np

from pagewords.color import Color

if TYPE_CHECKING:
    from pagewords.raster import RasterBuffer


@dataclass(frozen=True)
class Box:
    """Axis-aligned rectangle in page pixel coordinates, half-open on x1/y1."""

    x0: int
    y0: int
    x1: int
    y1: int

    def __post_init__(self):
        """Reject inverted rectangles."""
        if self.x1 < self.x0 or self.y1 < self.y0:
            raise ValueError(f"Invalid box geometry: ({self.x0}, {self.y0}, {self.x1}, {self.y1})")

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def center(self) -> Tuple[float, float]:
        """Center point (cx, cy)."""
        return ((self.x0 + self.x1) / 2, (self.y0 + self.y1) / 2)

    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def offset(self, dx: int, dy: int) -> 'Box':
        """Return the box translated by (dx, dy)."""
        return Box(self.x0 + dx, self.y0 + dy, self.x1 + dx, self.y1 + dy)

    def iou(self, other: 'Box') -> float:
        """
        Calculate Intersection over Union (IoU) with another box.

        Args:
            other: Another box

        Returns:
            IoU score between 0 and 1
        """
        inter_w = max(0, min(self.x1, other.x1) - max(self.x0, other.x0))
        inter_h = max(0, min(self.y1, other.y1) - max(self.y0, other.y0))
        intersection = inter_w * inter_h
        if intersection == 0:
            return 0.0
        union = self.area + other.area - intersection
        return intersection / union if union > 0 else 0.0

    def to_dict(self) -> dict:
        return {'x0': self.x0, 'y0': self.y0, 'x1': self.x1, 'y1': self.y1}


class SegmentKind(Enum):
    WORD = "word"
    PARAGRAPH_BREAK = "paragraph_break"
    REGION_BREAK = "region_break"
    LINE_SPACER = "line_spacer"


@dataclass(frozen=True)
class Segment:
    """
    One element of a page's output sequence.

    Only WORD segments carry a box. Break markers are structural separators
    and are told apart by `kind` alone.
    """

    kind: SegmentKind
    box: Optional[Box] = None

    def __post_init__(self):
        if (self.kind is SegmentKind.WORD) != (self.box is not None):
            raise ValueError(f"{self.kind.value} segment with box={self.box!r}")

    @classmethod
    def word(cls, box: Box) -> 'Segment':
        return cls(SegmentKind.WORD, box)

    @property
    def is_word(self) -> bool:
        return self.kind is SegmentKind.WORD

    @property
    def is_marker(self) -> bool:
        return self.kind is not SegmentKind.WORD

    def to_dict(self) -> dict:
        if self.box is None:
            return {'kind': self.kind.value}
        return {'kind': self.kind.value, **self.box.to_dict()}

    def __repr__(self) -> str:
        if self.box is None:
            return f"Segment({self.kind.name})"
        b = self.box
        return f"Segment(WORD, x0={b.x0}, y0={b.y0}, x1={b.x1}, y1={b.y1})"


PARAGRAPH_BREAK = Segment(SegmentKind.PARAGRAPH_BREAK)
REGION_BREAK = Segment(SegmentKind.REGION_BREAK)
LINE_SPACER = Segment(SegmentKind.LINE_SPACER)


@dataclass
class PageResult:
    """Segments of one page in reading order plus its dominant background color."""

    segments: Tuple[Segment, ...]
    background: Color
    # pixels the word boxes refer to, after any contrast/negation transform
    raster: Optional['RasterBuffer'] = field(default=None, compare=False, repr=False)

    def words(self) -> List[Box]:
        """Word boxes in reading order."""
        return [s.box for s in self.segments if s.is_word]

    def count(self, kind: SegmentKind) -> int:
        return sum(1 for s in self.segments if s.kind is kind)

    def word_tiles(self) -> Iterator[Tuple[int, Box, np.ndarray]]:
        """
        Yield (index, box, pixels) for every word, index being the word's
        position in `segments`. Pixels are a read-only RGBA view.
        """
        if self.raster is None:
            raise ValueError("PageResult has no raster to cut word tiles from")
        for i, s in enumerate(self.segments):
            if s.is_word:
                b = s.box
                yield i, b, self.raster.sub_pixels(b.x0, b.y0, b.width, b.height)

    def to_dict(self) -> dict:
        return {
            'background': self.background.to_dict(),
            'segments': [s.to_dict() for s in self.segments],
        }
