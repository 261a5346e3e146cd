"""Shared fixtures: small synthetic pages drawn with solid rectangles."""

import numpy as np
import pytest

from pagewords.synthetic import generate_synthetic_page


def draw_page(width, height, rects, ink=(0, 0, 0), paper=(255, 255, 255)):
    """
    Build an RGBA page with ink rectangles.

    Args:
        rects: Iterable of (x0, y0, x1, y1), half-open
    """
    page = np.empty((height, width, 4), dtype=np.uint8)
    page[..., :3] = paper
    page[..., 3] = 255
    for x0, y0, x1, y1 in rects:
        page[y0:y1, x0:x1, :3] = ink
    return page


@pytest.fixture
def make_page():
    return draw_page


@pytest.fixture
def ink_rect_page():
    """100 x 100 white page with one 10 x 5 black rectangle at (20, 20)."""
    return draw_page(100, 100, [(20, 20, 30, 25)])


@pytest.fixture
def two_block_page():
    """Two columns of line stripes separated by a blank gutter at x 90..109."""
    rects = []
    for y in range(10, 190, 16):
        rects.append((20, y, 90, y + 10))
        rects.append((110, y, 180, y + 10))
    return draw_page(200, 200, rects)


@pytest.fixture
def headed_page():
    """A full-width heading above two columns of line stripes."""
    rects = [(30, 10, 170, 20)]
    for y in range(100, 280, 16):
        rects.append((20, y, 90, y + 10))
        rects.append((110, y, 180, y + 10))
    return draw_page(200, 300, rects)


@pytest.fixture
def synthetic_two_column():
    return generate_synthetic_page(width=600, height=800, columns=2, seed=3)
