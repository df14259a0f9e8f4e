"""
Default configuration and generation parameters.

Constants here are the fallbacks used when a request omits a value.
They are referenced by the request adapter, the API request model and
the offline CLI so that all entry points agree.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class MapMode(str, Enum):
    """Spatial growth strategies for tile placement."""

    CENTER = "center"
    WEIGHTED = "weighted"
    ISLANDS = "islands"
    DUAL_CONTINENTS = "dual-continents"
    RING = "ring"


# Accepted spellings (lower-cased) for each canonical mode.
MODE_ALIASES: Dict[str, MapMode] = {
    "merkez": MapMode.CENTER,
    "center": MapMode.CENTER,
    "agirlik": MapMode.WEIGHTED,
    "weighted": MapMode.WEIGHTED,
    "adalar": MapMode.ISLANDS,
    "islands": MapMode.ISLANDS,
    "iki-kita": MapMode.DUAL_CONTINENTS,
    "dual-continents": MapMode.DUAL_CONTINENTS,
    "dual-continent": MapMode.DUAL_CONTINENTS,
    "two-continents": MapMode.DUAL_CONTINENTS,
    "ring": MapMode.RING,
}

# --- Canvas ---
DEFAULT_WIDTH = 100
DEFAULT_HEIGHT = 100

# --- Tiles ---
# Used when the tile specification string is empty.
DEFAULT_TILES: Tuple[Tuple[int, int, float], ...] = (
    (2, 2, 400),
    (2, 1, 300),
    (1, 1, 100),
)
# Fixed sizes of the legacy n22 / n21 / n11 boosts.
LEGACY_TILE_SIZES: Tuple[Tuple[int, int], ...] = ((2, 2), (2, 1), (1, 1))
DEFAULT_MULTIPLIER = 1.0
DEFAULT_CAP = 0

# --- Modes ---
DEFAULT_MODE = MapMode.CENTER
DEFAULT_RINGS = 10
DEFAULT_RING_START = 0.1
DEFAULT_RING_END = 0.8
# Minimum ring span enforced when a request has end <= start.
RING_REQUEST_NUDGE = 0.05
# Span used by the placement engine when it has to repair its bounds.
RING_ENGINE_NUDGE = 0.1
DEFAULT_ISLANDS = 4
DEFAULT_ISLAND_RADIUS_FRAC = 0.25
MIN_ISLAND_RADIUS_FRAC = 0.05

# --- Tone mapping ---
DEFAULT_LOG_TONE = True
DEFAULT_BROWN_CAP = 8
DEFAULT_BG_ALPHA = 0

COLOR_LAND = (34, 139, 34, 255)
COLOR_DENSE = (139, 69, 19, 255)
COLOR_WATER_RGB = (22, 75, 135)

# --- Placement behavior ---
DEFAULT_ROTATE = True
DEFAULT_POLISH = False

# Request defaults shown by interactive front ends and the offline CLI.
DEFAULT_UI_REQUEST = {
    "w": 320,
    "h": 320,
    "tiles": "2x2*4000,2x1*3000,1x1*1200",
    "mode": "center",
    "rings": 10,
    "logTone": 1,
    "brownCap": 8,
    "polish": False,
}


@dataclass(frozen=True)
class GenerationParams:
    """Fully resolved, validated parameters for one generation run."""

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    tile_string: str = ""
    ka: float = DEFAULT_MULTIPLIER
    cap: int = DEFAULT_CAP
    mode: MapMode = DEFAULT_MODE
    rings: int = DEFAULT_RINGS
    ring_start: float = DEFAULT_RING_START
    ring_end: float = DEFAULT_RING_END
    seed: str = ""
    log_tone: bool = DEFAULT_LOG_TONE
    brown_cap: float = DEFAULT_BROWN_CAP
    bg_alpha: int = DEFAULT_BG_ALPHA
    islands: int = DEFAULT_ISLANDS
    island_r_frac: float = DEFAULT_ISLAND_RADIUS_FRAC
    rotate: bool = DEFAULT_ROTATE
    polish: bool = DEFAULT_POLISH
    n22: float = 0
    n21: float = 0
    n11: float = 0
