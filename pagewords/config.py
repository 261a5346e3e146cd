"""
Tunable constants for page analysis.

Every threshold the pipeline uses was chosen empirically on rendered
document pages. They are collected here so they can be inspected and
overridden per call or from a YAML file, never edited in place.
"""

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

import yaml

PARAGRAPH_SCOPES = ("page", "region")


@dataclass(frozen=True)
class AnalysisConfig:
    """Thresholds and switches for one analysis pass."""

    # pixel is ink if dist(foreground) < ink_slack * dist(background)
    ink_slack: float = 1.3
    # the color sample diagonal is inset by width / sample_offset_divisor
    sample_offset_divisor: float = 2.5
    # text lines must be taller than this many rows
    line_min_length: int = 3
    # letter clusters must be wider than this many columns
    letter_min_length: int = 0
    # word merge threshold is max letter gap / 2, else the fallback
    merge_threshold_fallback: float = 3
    merge_threshold_min: float = 0
    merge_threshold_max: float = 9
    # column divide is searched in [lo * w, hi * w)
    divide_band: Tuple[float, float] = (0.4, 0.6)
    # midline spans closer than height / divisor belong to one block
    column_merge_divisor: float = 5
    # line gap above typical + slack starts a paragraph
    paragraph_line_slack: int = 3
    # 1 leaves pixels unchanged
    contrast_strength: float = 3
    paragraph_scope: str = "page"
    mark_line_wraps: bool = False

    def __post_init__(self):
        if self.ink_slack <= 0:
            raise ValueError(f"ink_slack must be positive, got {self.ink_slack}")
        if self.sample_offset_divisor <= 0:
            raise ValueError(f"sample_offset_divisor must be positive, got {self.sample_offset_divisor}")
        if self.column_merge_divisor <= 0:
            raise ValueError(f"column_merge_divisor must be positive, got {self.column_merge_divisor}")
        if self.line_min_length < 0 or self.letter_min_length < 0:
            raise ValueError("run minimum lengths must be non-negative")
        if self.merge_threshold_min > self.merge_threshold_max:
            raise ValueError(
                f"merge_threshold_min ({self.merge_threshold_min}) exceeds "
                f"merge_threshold_max ({self.merge_threshold_max})"
            )
        lo, hi = self.divide_band
        if not 0.0 <= lo <= hi <= 1.0:
            raise ValueError(f"divide_band must satisfy 0 <= lo <= hi <= 1, got {self.divide_band}")
        if self.paragraph_scope not in PARAGRAPH_SCOPES:
            raise ValueError(
                f"paragraph_scope must be one of {PARAGRAPH_SCOPES}, got {self.paragraph_scope!r}"
            )

    @classmethod
    def from_dict(cls, data: dict) -> 'AnalysisConfig':
        """
        Build a config from a plain mapping, defaults filling the gaps.

        Raises:
            ValueError: If the mapping has keys that are not config fields
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        values = dict(data)
        if 'divide_band' in values:
            values['divide_band'] = tuple(values['divide_band'])
        return cls(**values)

    def with_overrides(self, **overrides) -> 'AnalysisConfig':
        """Return a copy with the given fields replaced; None values are ignored."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict:
        data = dataclasses.asdict(self)
        data['divide_band'] = list(self.divide_band)
        return data


DEFAULT_CONFIG = AnalysisConfig()


def load_config(config_path: Optional[Union[str, Path]]) -> AnalysisConfig:
    """
    Load analysis configuration from a YAML file.

    Args:
        config_path: Path to a YAML mapping of AnalysisConfig fields

    Returns:
        AnalysisConfig instance (defaults if the path is None or missing)
    """
    if config_path is None:
        return DEFAULT_CONFIG
    config_path = Path(config_path)
    if not config_path.exists():
        return DEFAULT_CONFIG

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    return AnalysisConfig.from_dict(data)
