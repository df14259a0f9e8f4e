"""
Map generation pipeline.

Normalizes the tile batches, places every tile with the placement engine,
accumulates coverage and tone-maps the result into an RGBA raster.
"""

import io
import logging
import time
from typing import List, Optional

import numpy as np
from PIL import Image

from ..config import GenerationParams
from ..errors import MapRequestError
from ..procgen import RNG, TileBatch, build_tile_batches, format_tile_list, seed_from_string
from .color_maps import get_coverage_color_array
from .coverage import CoverageAccumulator, place_tiles
from .placement import PlacementEngine

logger = logging.getLogger(__name__)


class MapResult:
    """Raster and metadata of one generation run."""

    def __init__(
        self,
        rgba: np.ndarray,
        coverage: np.ndarray,
        batches: int,
        total_placements: int,
        seed_value: int,
        tile_batches: Optional[List[TileBatch]] = None
    ):
        self.rgba = rgba
        self.coverage = coverage
        self.batches = batches
        self.total_placements = total_placements
        self.seed_value = seed_value
        # Normalized batches in placement order
        self.tile_batches = list(tile_batches or [])

    @property
    def width(self) -> int:
        return self.rgba.shape[1]

    @property
    def height(self) -> int:
        return self.rgba.shape[0]

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.rgba)

    def to_png(self) -> bytes:
        """Encode the raster as PNG bytes."""
        buffer = io.BytesIO()
        self.to_image().save(buffer, format="PNG")
        return buffer.getvalue()

    def metadata(self) -> dict:
        return {
            "batches": self.batches,
            "total_placements": self.total_placements,
            "seed": self.seed_value,
        }


def generate_map(params: GenerationParams) -> MapResult:
    """
    Generate a coverage map.

    Args:
        params: Resolved generation parameters

    Returns:
        MapResult with the RGBA raster, coverage grid and metadata

    Raises:
        MapRequestError: if the canvas or tile specification is invalid.
            Raised before any placement work starts.
    """

    if params.width <= 0 or params.height <= 0:
        raise MapRequestError(f"canvas size must be positive, got {params.width}x{params.height}")

    batches = build_tile_batches(
        params.tile_string,
        ka=params.ka,
        cap=params.cap,
        n22=params.n22,
        n21=params.n21,
        n11=params.n11
    )
    logger.debug("Normalized tile batches: %s", format_tile_list(batches))

    start_time = time.time()
    seed_value = seed_from_string(params.seed)
    rng = RNG(seed_value)
    engine = PlacementEngine(params, rng)
    accumulator = CoverageAccumulator(params.width, params.height, polish=params.polish)

    total_placements = place_tiles(engine, accumulator, params, batches, rng)

    rgba = get_coverage_color_array(
        accumulator.grid, params.brown_cap, params.log_tone, params.bg_alpha
    )

    logger.info(
        "Generated %dx%d map: mode=%s batches=%d placements=%d seed=%d (%.3fs)",
        params.width, params.height, getattr(params.mode, "value", params.mode),
        len(batches), total_placements, seed_value, time.time() - start_time
    )

    return MapResult(
        rgba=rgba,
        coverage=accumulator.grid,
        batches=len(batches),
        total_placements=total_placements,
        seed_value=seed_value,
        tile_batches=batches
    )
