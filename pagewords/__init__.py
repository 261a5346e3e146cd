"""
Pixel-geometry word segmentation for rendered document pages.
"""

from pagewords.color import ClassificationParams, Color
from pagewords.config import AnalysisConfig, load_config
from pagewords.main import analyze_image, analyze_page, analyze_pages, analyze_region
from pagewords.raster import RasterBuffer, compress_dynamic_range, negate
from pagewords.segment import (LINE_SPACER, PARAGRAPH_BREAK, REGION_BREAK, Box, PageResult, Segment,
                               SegmentKind)

__all__ = [
    "AnalysisConfig",
    "Box",
    "ClassificationParams",
    "Color",
    "LINE_SPACER",
    "PARAGRAPH_BREAK",
    "PageResult",
    "REGION_BREAK",
    "RasterBuffer",
    "Segment",
    "SegmentKind",
    "analyze_image",
    "analyze_page",
    "analyze_pages",
    "analyze_region",
    "compress_dynamic_range",
    "load_config",
    "negate",
]
