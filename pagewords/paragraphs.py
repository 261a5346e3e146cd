"""
Paragraph break inference from word geometry.

A line wrap is a word followed by one further to the left. A wrap starts a
new paragraph if the new line is indented, or if the jump down is clearly
larger than the page's typical line height.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from pagewords.config import DEFAULT_CONFIG, AnalysisConfig
from pagewords.segment import LINE_SPACER, PARAGRAPH_BREAK, Box, Segment, SegmentKind

log = logging.getLogger("pagewords.paragraphs")


@dataclass(frozen=True)
class ParagraphStats:
    margin: int
    indent: int
    # None when the words never wrap to a new line
    typical_line_height: Optional[int]


def is_line_wrap(word: Box, next_word: Box) -> bool:
    return next_word.x0 < word.x0


def paragraph_statistics(words: Sequence[Box]) -> Optional[ParagraphStats]:
    """
    Measure margin, indentation unit and typical line height.

    Args:
        words: Word boxes in reading order

    Returns:
        ParagraphStats, or None for fewer than two words
    """
    if len(words) < 2:
        return None

    margin = min(w.x0 for w in words)
    indent = min(w.height for w in words)
    line_heights = sorted(
        nxt.y0 - cur.y0 for cur, nxt in zip(words, words[1:]) if is_line_wrap(cur, nxt)
    )
    typical = line_heights[len(line_heights) // 2] if line_heights else None
    return ParagraphStats(margin=margin, indent=indent, typical_line_height=typical)


def starts_paragraph(word: Box, next_word: Box, stats: ParagraphStats,
                     config: AnalysisConfig = DEFAULT_CONFIG) -> bool:
    """Decide whether the wrap from word to next_word begins a paragraph."""
    if next_word.x0 > stats.margin + stats.indent:
        return True
    if stats.typical_line_height is None:
        return False
    return next_word.y0 - word.y0 > stats.typical_line_height + config.paragraph_line_slack


def _block_ids(segments: Sequence[Segment], scope: str) -> List[int]:
    # every segment's statistics block; regions are separated by REGION_BREAK
    ids = []
    block = 0
    for seg in segments:
        if scope == "region" and seg.kind is SegmentKind.REGION_BREAK:
            block += 1
        ids.append(block)
    return ids


def insert_paragraph_breaks(segments: Sequence[Segment],
                            config: AnalysisConfig = DEFAULT_CONFIG) -> List[Segment]:
    """
    Insert paragraph markers between words of the segment sequence.

    Markers only go between two words that are adjacent in the sequence,
    never next to an existing marker.

    Args:
        segments: Words and region markers in reading order, page coordinates
        config: Analysis thresholds; paragraph_scope picks page-wide or
            per-region statistics

    Returns:
        New segment list with ParagraphBreak (and optionally LineSpacer)
        markers added
    """
    ids = _block_ids(segments, config.paragraph_scope)
    words_by_block: Dict[int, List[Box]] = {}
    for seg, block in zip(segments, ids):
        if seg.is_word:
            words_by_block.setdefault(block, []).append(seg.box)
    stats = {block: paragraph_statistics(words) for block, words in words_by_block.items()}

    result = []
    breaks = 0
    for i, seg in enumerate(segments):
        result.append(seg)
        if i + 1 >= len(segments):
            continue
        nxt = segments[i + 1]
        block_stats = stats.get(ids[i])
        if not (seg.is_word and nxt.is_word) or block_stats is None:
            continue
        if not is_line_wrap(seg.box, nxt.box):
            continue
        if starts_paragraph(seg.box, nxt.box, block_stats, config):
            result.append(PARAGRAPH_BREAK)
            breaks += 1
        elif config.mark_line_wraps:
            result.append(LINE_SPACER)

    log.debug("Inserted %d paragraph breaks over %d blocks", breaks, len(stats))
    return result
