"""
Tile specification language.

This module defines:
- TileSpec / TileBatch: pre- and post-rounding tile groups
- parse_tile_list: parsing of "WxH*N" comma-separated entries
- apply_legacy_tiles: merging of fixed-size legacy boosts
- apply_multiplier: global count scaling
- format_tile_list: the inverse of parse_tile_list for display
"""

import math
from typing import List, NamedTuple, Sequence

from .. import config as DEFAULTS
from ..errors import MapRequestError


class TileSpec:
    """A tile size with a real-valued placement count (before rounding)."""

    __slots__ = ("w", "h", "count")

    def __init__(self, w: int, h: int, count: float):
        self.w = w
        self.h = h
        self.count = count

    def __eq__(self, other):
        if not isinstance(other, TileSpec):
            return NotImplemented
        return (self.w, self.h, self.count) == (other.w, other.h, other.count)

    def __repr__(self):
        return f"TileSpec({self.w}x{self.h}*{self.count})"


class TileBatch(NamedTuple):
    """A tile size with its final integer placement count."""

    w: int
    h: int
    count: int


def _parse_dimension(raw: str, entry: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise MapRequestError(f"invalid tile dimensions in {entry}") from None


def parse_tile_list(text: str) -> List[TileSpec]:
    """
    Parse a tile specification string.

    Entries are comma separated ``WxH`` with an optional ``*N`` count
    (default 1). Empty entries are ignored, entries with a count <= 0
    are dropped and repeated sizes are merged into their first entry.
    An empty string yields the built-in default tile set.

    Raises:
        MapRequestError: on malformed dimensions, non-positive sizes,
            non-finite counts, or when no entry survives.
    """

    trimmed = (text or "").strip()
    if not trimmed:
        return [TileSpec(w, h, count) for w, h, count in DEFAULTS.DEFAULT_TILES]

    result = []
    for raw_part in trimmed.split(","):
        part = raw_part.strip()
        if not part:
            continue

        dim_str, _, count_str = part.partition("*")
        dims = dim_str.split("x")
        if len(dims) != 2:
            raise MapRequestError(f"invalid tile dimensions in {part}")

        w = _parse_dimension(dims[0], part)
        h = _parse_dimension(dims[1], part)
        if w <= 0 or h <= 0:
            raise MapRequestError(f"tile dimensions must be positive in {part}")

        count = 1.0
        count_str = count_str.split("*")[0].strip()
        if count_str:
            try:
                count = float(count_str)
            except ValueError:
                raise MapRequestError(f"invalid tile count in {part}") from None
            if not math.isfinite(count):
                raise MapRequestError(f"invalid tile count in {part}")

        if count <= 0:
            continue
        for spec in result:
            if spec.w == w and spec.h == h:
                spec.count += count
                _require_finite(spec, f"invalid tile count in {part}")
                break
        else:
            result.append(TileSpec(w, h, count))

    if not result:
        raise MapRequestError("no valid tile definitions found")
    return result


def apply_legacy_tiles(specs: List[TileSpec], n22: float, n21: float, n11: float) -> List[TileSpec]:
    """Add the 2x2 / 2x1 / 1x1 boosts to matching specs, appending new ones."""

    boosts = zip(DEFAULTS.LEGACY_TILE_SIZES, (n22, n21, n11))
    for (w, h), n in boosts:
        if not n or n <= 0:
            continue
        for spec in specs:
            if spec.w == w and spec.h == h:
                spec.count += n
                break
        else:
            spec = TileSpec(w, h, n)
            specs.append(spec)
        _require_finite(spec, f"invalid legacy tile count for {w}x{h}")
    return specs


def apply_multiplier(specs: List[TileSpec], ka: float) -> List[TileSpec]:
    """Scale every count by ``ka``; non-positive or unit multipliers are ignored."""

    if not math.isfinite(ka):
        raise MapRequestError(f"invalid tile multiplier {ka}")
    if ka <= 0 or ka == 1:
        return specs
    for spec in specs:
        spec.count *= ka
        _require_finite(spec, f"tile count overflow for {spec.w}x{spec.h} with multiplier {ka}")
    return specs


def _require_finite(spec: TileSpec, message: str):
    if not math.isfinite(spec.count):
        raise MapRequestError(message)


def format_tile_list(batches: Sequence) -> str:
    """Render specs or batches back to ``WxH*N`` form."""

    parts = []
    for batch in batches:
        count = batch.count
        if isinstance(count, float) and count.is_integer():
            count = int(count)
        parts.append(f"{batch.w}x{batch.h}*{count}")
    return ",".join(parts)
