"""
Main pipeline for page word segmentation.
Integrates all steps: color sampling, pixel transforms, column analysis,
line/word extraction and paragraph detection.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Union

import numpy as np

from pagewords.color import ClassificationParams, find_foreground_background
from pagewords.columns import two_column_analysis
from pagewords.config import DEFAULT_CONFIG, AnalysisConfig
from pagewords.paragraphs import insert_paragraph_breaks
from pagewords.raster import RasterBuffer, apply_pixel_transform, compress_dynamic_range, negate
from pagewords.segment import REGION_BREAK, Box, PageResult, Segment, SegmentKind
from pagewords.words import find_words

log = logging.getLogger("pagewords.main")


def analyze_region(raster: RasterBuffer, region: Box, params: ClassificationParams,
                   config: AnalysisConfig = DEFAULT_CONFIG) -> List[Box]:
    """
    Find the words of one single-column rectangle of the page.

    Args:
        raster: Page raster
        region: Rectangle in page coordinates
        params: Foreground/background colors
        config: Analysis thresholds

    Returns:
        Word boxes in page coordinates; empty for a zero-area rectangle
    """
    if region.is_empty():
        return []
    pixels = raster.sub_pixels(region.x0, region.y0, region.width, region.height)
    return [box.offset(region.x0, region.y0) for box in find_words(pixels, params, config)]


def _prepare(raster: RasterBuffer, enhance_contrast: bool, negate_image: bool,
             config: AnalysisConfig):
    params = find_foreground_background(raster.pixels, config.sample_offset_divisor)
    if enhance_contrast:
        raster = apply_pixel_transform(raster, compress_dynamic_range, params,
                                       strength=config.contrast_strength)
    if negate_image:
        raster = apply_pixel_transform(raster, negate)
        # inversion swaps foreground and background
        params = find_foreground_background(raster.pixels, config.sample_offset_divisor)
    return raster, params


def analyze_page(raster: Union[RasterBuffer, np.ndarray],
                 enhance_contrast: bool = False,
                 negate_image: bool = False,
                 config: Optional[AnalysisConfig] = None) -> PageResult:
    """
    Complete word segmentation of one page.

    Args:
        raster: Page raster (an RGBA/RGB/gray uint8 array is wrapped)
        enhance_contrast: Stretch the dynamic range before analysis
        negate_image: Invert the page before analysis
        config: Analysis thresholds (defaults if None)

    Returns:
        PageResult with segments in reading order and the background color
    """
    config = config or DEFAULT_CONFIG
    if not isinstance(raster, RasterBuffer):
        raster = RasterBuffer.from_array(raster)

    raster, params = _prepare(raster, enhance_contrast, negate_image, config)

    segments: List[Segment] = []
    regions = two_column_analysis(raster.pixels, params, config)
    for region in regions:
        words = analyze_region(raster, region, params, config)
        segments.extend(Segment.word(box) for box in words)
        if words:
            segments.append(REGION_BREAK)

    # nothing follows the last region
    if segments and segments[-1].kind is SegmentKind.REGION_BREAK:
        segments.pop()

    segments = insert_paragraph_breaks(segments, config)
    result = PageResult(segments=tuple(segments), background=params.background, raster=raster)

    log.info("Page %d x %d: %d regions, %d words, %d paragraph breaks",
             raster.width, raster.height, len(regions),
             result.count(SegmentKind.WORD), result.count(SegmentKind.PARAGRAPH_BREAK))
    return result


def analyze_image(image_path: str,
                  enhance_contrast: bool = False,
                  negate_image: bool = False,
                  config: Optional[AnalysisConfig] = None) -> PageResult:
    """Load a page image from disk and analyze it."""
    return analyze_page(RasterBuffer.from_image(image_path), enhance_contrast, negate_image, config)


def analyze_pages(rasters: Iterable[Union[RasterBuffer, np.ndarray]],
                  enhance_contrast: bool = False,
                  negate_image: bool = False,
                  config: Optional[AnalysisConfig] = None,
                  max_workers: Optional[int] = None) -> List[PageResult]:
    """
    Analyze independent pages concurrently.

    Args:
        rasters: Page rasters
        enhance_contrast: Stretch the dynamic range of every page
        negate_image: Invert every page
        config: Analysis thresholds shared by all pages
        max_workers: Thread pool size (executor default if None)

    Returns:
        One PageResult per page, in input order
    """
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(analyze_page, raster, enhance_contrast, negate_image, config)
            for raster in rasters
        ]
        return [future.result() for future in futures]
