"""
Coverage tone mapping.

Converts coverage counts into RGBA colors: uncovered cells are water,
single coverage is land, and denser coverage blends from land toward the
dense color with a linear or logarithmic response. The whole grid is
colored through a lookup table indexed by coverage count.
"""

import math
from typing import Tuple

import numpy as np

from .. import config as DEFAULTS

Color = Tuple[int, int, int, int]


def water_color(bg_alpha: int) -> Color:
    """Water color; an alpha of 0 means unset and renders opaque."""
    alpha = min(255, max(0, bg_alpha or 255))
    return DEFAULTS.COLOR_WATER_RGB + (alpha,)


def tone_ratio(coverage: int, brown_cap: float, log_tone: bool) -> float:
    """Blend ratio in [0, 1] for a coverage count greater than 1."""
    cap = max(1, brown_cap)
    if log_tone:
        ratio = math.log(coverage) / math.log(cap + 1)
    else:
        ratio = (coverage - 1) / cap
    return min(1.0, max(0.0, ratio))


def _channel(value: float) -> int:
    if value < 0:
        return 0
    if value > 255:
        return 255
    return int(math.floor(value + 0.5))


def blend_color(a: Color, b: Color, t: float) -> Color:
    """Per-channel linear blend, rounded half-up and clamped to [0, 255]."""
    alpha = (1 - t) * a[3] + t * b[3] or 1
    return (
        _channel((1 - t) * a[0] + t * b[0]),
        _channel((1 - t) * a[1] + t * b[1]),
        _channel((1 - t) * a[2] + t * b[2]),
        _channel(alpha),
    )


def coverage_to_color(
    coverage: int,
    brown_cap: float,
    log_tone: bool,
    land: Color = DEFAULTS.COLOR_LAND,
    dense: Color = DEFAULTS.COLOR_DENSE
) -> Color:
    """Color of a covered cell; transparent black for coverage <= 0."""
    if coverage <= 0:
        return (0, 0, 0, 0)
    if coverage == 1:
        return tuple(land)
    return blend_color(land, dense, tone_ratio(coverage, brown_cap, log_tone))


def create_coverage_lut(
    max_coverage: int,
    brown_cap: float,
    log_tone: bool,
    bg_alpha: int
) -> np.ndarray:
    """Creates a (max_coverage + 1, 4) RGBA LUT indexed by coverage count."""
    lut = np.empty((max_coverage + 1, 4), dtype=np.uint8)
    lut[0] = water_color(bg_alpha)
    for count in range(1, max_coverage + 1):
        lut[count] = coverage_to_color(count, brown_cap, log_tone)
    return lut


def get_coverage_color_array(
    coverage: np.ndarray,
    brown_cap: float,
    log_tone: bool,
    bg_alpha: int
) -> np.ndarray:
    """Converts a (height, width) coverage grid into a (height, width, 4) RGBA array."""
    max_coverage = int(coverage.max()) if coverage.size else 0
    lut = create_coverage_lut(max_coverage, brown_cap, log_tone, bg_alpha)
    return lut[coverage]
