"""
Tile placement and rendering engine.

Places tiles with mode-specific spatial policies, accumulates coverage
and maps coverage counts to colors.
"""

from .placement import PlacementEngine, Point, RunningCentroid, build_ring_boundaries
from .coverage import CoverageAccumulator, place_tiles
from .color_maps import coverage_to_color, get_coverage_color_array
from .map_composer import MapResult, generate_map

__all__ = [
    "PlacementEngine", "Point", "RunningCentroid", "build_ring_boundaries",
    "CoverageAccumulator", "place_tiles",
    "coverage_to_color", "get_coverage_color_array",
    "MapResult", "generate_map"
]
