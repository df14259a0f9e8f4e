"""
Tilemap: procedural tile placement rendered as coverage maps.

Places batches of rectangular tiles on a fixed grid according to a
spatial growth mode, accumulates per-pixel coverage and renders the
result as an RGBA image.
"""

from .config import GenerationParams, MapMode
from .errors import MapRequestError
from .engine import generate_map, MapResult
from .compatibility import normalize_request

__all__ = [
    "GenerationParams", "MapMode", "MapRequestError",
    "generate_map", "MapResult", "normalize_request"
]
