"""
Cap enforcement and integer rounding of tile counts.

Counts are scaled down proportionally when they exceed the placement cap
and then rounded with the largest-remainder method, so the integer total
matches the target exactly.
"""

import math
from typing import List

from ..errors import MapRequestError
from .grammar import TileBatch, TileSpec, apply_legacy_tiles, apply_multiplier, parse_tile_list


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return int(math.floor(value + 0.5))


def finalize_tile_batches(specs: List[TileSpec], cap: int) -> List[TileBatch]:
    """
    Convert real-valued specs into integer batches.

    Args:
        specs: Tile specs in placement order
        cap: Maximum total placements, or 0 for no cap

    Returns:
        Batches with a positive count, in the order of ``specs``

    Raises:
        MapRequestError: if the counts sum to a non-finite total.
    """

    total = sum(spec.count for spec in specs)
    if not math.isfinite(total):
        raise MapRequestError("total tile count is not finite")
    if total == 0:
        return []

    scale = 1.0
    if cap > 0 and total > cap:
        scale = cap / total

    floors = [0] * len(specs)
    scaled_sum = 0.0
    # (index, fractional remainder) for every spec that was not integral
    fractions = []
    for i, spec in enumerate(specs):
        adjusted = spec.count * scale
        if adjusted <= 0:
            continue
        scaled_sum += adjusted
        base = math.floor(adjusted)
        floors[i] = base
        frac = adjusted - base
        if frac > 0:
            fractions.append((i, frac))

    total_floors = sum(floors)
    target = round_half_up(scaled_sum)
    if cap > 0:
        target = cap if scale < 1 else min(cap, target)

    if total_floors > target:
        # Smallest remainders give up a unit first; ties keep input order.
        fractions.sort(key=lambda item: (item[1], item[0]))
        for index, _ in fractions[:total_floors - target]:
            if floors[index] > 0:
                floors[index] -= 1
        total_floors = target

    if total_floors < target:
        fractions.sort(key=lambda item: (-item[1], item[0]))
        for index, _ in fractions[:target - total_floors]:
            floors[index] += 1

    return [
        TileBatch(spec.w, spec.h, count)
        for spec, count in zip(specs, floors)
        if count > 0
    ]


def build_tile_batches(
    tile_string: str,
    ka: float = 1.0,
    cap: int = 0,
    n22: float = 0,
    n21: float = 0,
    n11: float = 0
) -> List[TileBatch]:
    """
    Run the full normalization: parse, merge boosts, multiply, cap and round.

    Raises:
        MapRequestError: if parsing fails or no batch survives rounding.
    """

    specs = parse_tile_list(tile_string)
    specs = apply_legacy_tiles(specs, n22, n21, n11)
    specs = apply_multiplier(specs, ka)
    batches = finalize_tile_batches(specs, cap)
    if not batches:
        raise MapRequestError("no tiles to place after cap adjustment")
    return batches
