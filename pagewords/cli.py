"""
Command-line driver: analyze a page image, print a summary, and optionally
save a word overlay and a JSON dump of the segments.
"""

import argparse
import json
import logging
import os
import sys

import cv2
import numpy as np

from pagewords.config import load_config
from pagewords.main import analyze_page
from pagewords.raster import RasterBuffer
from pagewords.segment import PageResult, SegmentKind

WORD_COLOR = (0, 0, 255)        # red, BGR
PARAGRAPH_COLOR = (220, 140, 40)


def draw_overlay(result: PageResult) -> np.ndarray:
    """
    Outline every word in red on a BGR copy of the analyzed page and tag
    the first word of each paragraph.
    """
    out = result.raster.to_bgr()
    pending_paragraph = False
    for seg in result.segments:
        if seg.kind is SegmentKind.PARAGRAPH_BREAK:
            pending_paragraph = True
            continue
        if not seg.is_word:
            continue
        b = seg.box
        cv2.rectangle(out, (b.x0, b.y0), (b.x1 - 1, b.y1 - 1), WORD_COLOR, 1)
        if pending_paragraph:
            cv2.rectangle(out, (max(0, b.x0 - 6), b.y0), (max(0, b.x0 - 3), b.y1 - 1), PARAGRAPH_COLOR, -1)
            pending_paragraph = False
    return out


def _ensure_parent(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Segment a rendered page into words from pixels alone")
    parser.add_argument("--image", type=str, required=True)
    parser.add_argument("--contrast", action="store_true", help="enhance contrast before analysis")
    parser.add_argument("--negate", action="store_true", help="invert the page before analysis")
    parser.add_argument("--config", type=str, default=None, help="YAML file of analysis thresholds")
    parser.add_argument("--save_overlay", type=str, default=None)
    parser.add_argument("--save_json", type=str, default=None)
    parser.add_argument("--ink_slack", type=float, default=None)
    parser.add_argument("--line_min_length", type=int, default=None)
    parser.add_argument("--paragraph_scope", choices=("page", "region"), default=None)
    parser.add_argument("--mark_line_wraps", action="store_true", default=None)
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)-5s:%(name)s: %(message)s")

    config = load_config(args.config).with_overrides(
        ink_slack=args.ink_slack,
        line_min_length=args.line_min_length,
        paragraph_scope=args.paragraph_scope,
        mark_line_wraps=args.mark_line_wraps,
    )

    print("=" * 60)
    print("PAGE WORD SEGMENTATION")
    print("=" * 60)

    raster = RasterBuffer.from_image(args.image)
    print(f"\nImage loaded: {raster.width} x {raster.height} (W x H)")

    result = analyze_page(raster, enhance_contrast=args.contrast, negate_image=args.negate, config=config)

    print(f"\nFinal results:")
    print(f"  Background: {result.background.css()}")
    for kind in SegmentKind:
        print(f"    {kind.value}: {result.count(kind)}")

    if args.save_overlay:
        _ensure_parent(args.save_overlay)
        if not cv2.imwrite(args.save_overlay, draw_overlay(result)):
            raise ValueError(f"Failed to save image to {args.save_overlay}")
        print(f"\nSaved overlay to {args.save_overlay}")

    if args.save_json:
        _ensure_parent(args.save_json)
        with open(args.save_json, "w") as f:
            json.dump(result.to_dict(), f, indent=2)
        print(f"Saved segments to {args.save_json}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
