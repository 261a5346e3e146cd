"""Test color sampling and pixel classification."""

import numpy as np

from pagewords.color import (BLACK, WHITE, ClassificationParams, Color, classify_pixels,
                             diagonal_samples, find_foreground_background, is_set)


def test_diagonal_samples_inset(make_page):
    """Samples start round(w / 2.5) in from the top-left corner."""
    page = make_page(100, 100, [])
    page[40, 40, :3] = (1, 2, 3)
    samples = diagonal_samples(page)
    assert len(samples) == 20
    assert tuple(samples[0]) == (1, 2, 3)


def test_majority_color_is_background(make_page):
    page = make_page(100, 100, [], paper=(200, 200, 200))
    page[45, 45, :3] = 20
    page[50, 50, :3] = 20
    params = find_foreground_background(page)
    assert params.background == Color(200, 200, 200)
    assert params.foreground == Color(20, 20, 20)


def test_inverted_page_swaps_roles(make_page):
    page = make_page(100, 100, [], paper=(55, 55, 55))
    page[45, 45, :3] = 235
    params = find_foreground_background(page)
    assert params.background == Color(55, 55, 55)
    assert params.foreground == Color(235, 235, 235)


def test_equal_frequencies_pick_dark_background(make_page):
    # w = 10: the diagonal visits (4, 4) and (5, 5) only
    page = make_page(10, 10, [])
    page[4, 4, :3] = 0
    page[5, 5, :3] = 255
    params = find_foreground_background(page)
    assert params.background == BLACK
    assert params.foreground == WHITE


def test_equidistant_sample_counts_as_dark(make_page):
    # w = 15: the diagonal visits (6, 6), (7, 7) and (8, 8)
    page = make_page(15, 15, [])
    page[6, 6, :3] = 0
    page[7, 7, :3] = 254
    page[8, 8, :3] = 127
    params = find_foreground_background(page)
    assert params.background == BLACK
    assert params.foreground == Color(254, 254, 254)


def test_first_extreme_wins_ties(make_page):
    page = make_page(100, 100, [], paper=(128, 128, 128))
    page[42, 42, :3] = (10, 0, 0)
    page[44, 44, :3] = (0, 10, 0)
    params = find_foreground_background(page)
    assert params.foreground == Color(10, 0, 0)


def test_empty_page_defaults():
    page = np.zeros((0, 0, 4), dtype=np.uint8)
    params = find_foreground_background(page)
    assert params.background == WHITE
    assert params.foreground == BLACK


def test_uniform_page_marks_dark_pixels_as_ink(make_page):
    page = make_page(100, 100, [])
    params = find_foreground_background(page)
    assert params.background == WHITE
    assert is_set((0, 0, 0), params)
    assert not is_set((255, 255, 255), params)


def test_slack_favors_ink():
    params = ClassificationParams(foreground=BLACK, background=WHITE)
    # slightly closer to paper, still ink with the default slack
    assert is_set((140, 140, 140), params)
    assert not is_set((140, 140, 140), params, slack=1.0)
    assert not is_set((200, 200, 200), params)


def test_classify_pixels_matches_is_set():
    params = ClassificationParams(foreground=Color(30, 40, 50), background=Color(240, 230, 220))
    rng = np.random.default_rng(0)
    pixels = rng.integers(0, 256, size=(20, 20, 4), dtype=np.uint8)
    mask = classify_pixels(pixels, params)
    assert mask.shape == (20, 20)
    for y in range(20):
        for x in range(20):
            assert mask[y, x] == is_set(pixels[y, x], params)
