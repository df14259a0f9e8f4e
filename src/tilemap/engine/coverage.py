"""
Coverage accumulation.

Rasterizes placed tiles into a per-pixel count grid. With edge polish
enabled every tile is stamped together with a one-cell band of cells
whose squared distance to the tile is at most 1, which rounds the
corners off instead of growing the rectangle uniformly.
"""

from typing import Dict, List, Tuple

import numpy as np
from scipy import ndimage

from ..config import GenerationParams
from ..procgen.grammar import TileBatch
from ..procgen.rng import RNG
from .placement import PlacementEngine

POLISH_PADDING = 1

# 4-connected structuring element: dilation reaches exactly the cells at
# squared distance <= 1 from the nearest tile cell.
_POLISH_STRUCTURE = ndimage.generate_binary_structure(2, 1)


class CoverageAccumulator:
    """
    Owns the coverage grid of one generation run.

    The grid is indexed ``[y, x]`` and shaped ``(height, width)``.
    """

    def __init__(self, width: int, height: int, polish: bool = False):
        self.width = width
        self.height = height
        self.polish = polish
        self.grid = np.zeros((height, width), dtype=np.uint32)
        self._stamps: Dict[Tuple[int, int], np.ndarray] = {}

    def _polish_stamp(self, tw: int, th: int) -> np.ndarray:
        """Padded 0/1 stamp for a polished tile, cached per tile size."""
        stamp = self._stamps.get((tw, th))
        if stamp is None:
            pad = POLISH_PADDING
            core = np.zeros((th + 2 * pad, tw + 2 * pad), dtype=bool)
            core[pad:pad + th, pad:pad + tw] = True
            dilated = ndimage.binary_dilation(core, structure=_POLISH_STRUCTURE)
            stamp = dilated.astype(np.uint32)
            self._stamps[(tw, th)] = stamp
        return stamp

    def add_tile(self, x: int, y: int, tw: int, th: int):
        """Increment coverage under a tile whose top-left corner is (x, y)."""

        if not self.polish:
            self.grid[y:y + th, x:x + tw] += 1
            return

        pad = POLISH_PADDING
        stamp = self._polish_stamp(tw, th)
        # Clip the padded stamp against the canvas edges.
        x0, y0 = x - pad, y - pad
        gx0, gy0 = max(0, x0), max(0, y0)
        gx1 = min(self.width, x + tw + pad)
        gy1 = min(self.height, y + th + pad)
        if gx1 <= gx0 or gy1 <= gy0:
            return
        self.grid[gy0:gy1, gx0:gx1] += stamp[gy0 - y0:gy1 - y0, gx0 - x0:gx1 - x0]

    def total(self) -> int:
        return int(self.grid.sum())


def place_tiles(
    engine: PlacementEngine,
    accumulator: CoverageAccumulator,
    params: GenerationParams,
    batches: List[TileBatch],
    rng: RNG
) -> int:
    """
    Place every unit of every batch.

    Returns:
        Total placements attempted (the sum of batch counts, including
        units skipped because they cannot fit).
    """

    total_placements = 0
    for batch in batches:
        total_placements += batch.count
        for _ in range(batch.count):
            w, h = batch.w, batch.h
            if params.rotate and w != h and rng.intn(2) == 0:
                w, h = h, w
            if w <= 0 or h <= 0 or w > params.width or h > params.height:
                continue
            x, y = engine.position_for_tile(w, h)
            engine.record_placement(x, y, w, h)
            accumulator.add_tile(x, y, w, h)
    return total_placements
