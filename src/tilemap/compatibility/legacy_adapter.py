"""
Request adapter for the map generation wire format.

Converts the loosely typed request payload (short keys such as ``w``,
``ka``, ``bgA``, legacy mode names and 0/1 flags) into validated
GenerationParams with every default applied.
"""

import math
from typing import Any, Mapping, Optional

from .. import config as DEFAULTS
from ..config import GenerationParams, MapMode
from ..errors import MapRequestError

# Wire keys accepted by normalize_request.
REQUEST_FIELDS = (
    "w", "h", "tiles", "ka", "cap", "mode", "rings", "ringStart", "ringEnd",
    "seed", "logTone", "brownCap", "bgA", "islands", "islandRFrac", "rot",
    "n22", "n21", "n11", "polish"
)

# Numeric keys that must be finite; the rest are clamped or integer-typed.
FINITE_FIELDS = ("ka", "cap", "brownCap", "islandRFrac", "n22", "n21", "n11")


def resolve_mode(name: Optional[str]) -> MapMode:
    """Resolve a mode name or alias, case-insensitively."""
    raw = DEFAULTS.DEFAULT_MODE.value if name is None else str(name)
    mode = DEFAULTS.MODE_ALIASES.get(raw.lower())
    if mode is None:
        raise MapRequestError(f"unsupported mode {name}")
    return mode


def _clamp(value: float, min_val: float, max_val: float) -> float:
    if math.isnan(value):
        return min_val
    return max(min_val, min(max_val, value))


def _positive_or(value: Any, default):
    """``value`` when it is a positive number, otherwise ``default``."""
    if value is not None and value > 0:
        return value
    return default


def _flag(value: Any, default: bool) -> bool:
    """0/1 style flag: absent keeps the default, anything but 0 is on."""
    if value is None:
        return default
    return value != 0


def _require_finite(req: Mapping[str, Any]):
    """Reject counts and sizes that overflowed to inf or are NaN."""
    for key in FINITE_FIELDS:
        value = req.get(key)
        if value is not None and not math.isfinite(value):
            raise MapRequestError(f"{key} must be a finite number, got {value}")


def resolve_ring_fractions(ring_start: Optional[float], ring_end: Optional[float]):
    """
    Clamp ring fractions to [0, 1] and make sure end exceeds start.

    Raises:
        MapRequestError: when no end above ``ring_start`` exists.
    """
    start = _clamp(DEFAULTS.DEFAULT_RING_START if ring_start is None else float(ring_start), 0.0, 1.0)
    end = _clamp(DEFAULTS.DEFAULT_RING_END if ring_end is None else float(ring_end), 0.0, 1.0)
    if end <= start:
        adjusted = _clamp(start + DEFAULTS.RING_REQUEST_NUDGE, start, 1.0)
        if adjusted == start:
            raise MapRequestError("ringEnd must be greater than ringStart")
        end = adjusted
    return start, end


def normalize_request(payload: Optional[Mapping[str, Any]] = None) -> GenerationParams:
    """
    Build GenerationParams from a request payload.

    Args:
        payload: Mapping keyed by the wire names in REQUEST_FIELDS. Missing
            keys and None values fall back to the defaults.

    Raises:
        MapRequestError: for an unsupported mode, unresolvable ring
            fractions, a non-finite count or size, or a non-positive canvas.
    """

    req = {key: value for key, value in (payload or {}).items() if value is not None}
    _require_finite(req)

    width = int(_positive_or(req.get("w"), DEFAULTS.DEFAULT_WIDTH))
    height = int(_positive_or(req.get("h"), DEFAULTS.DEFAULT_HEIGHT))
    if width <= 0:
        raise MapRequestError("width must be positive")
    if height <= 0:
        raise MapRequestError("height must be positive")

    mode = resolve_mode(req.get("mode"))
    ring_start, ring_end = resolve_ring_fractions(req.get("ringStart"), req.get("ringEnd"))

    return GenerationParams(
        width=width,
        height=height,
        tile_string=str(req.get("tiles", "")),
        ka=float(req.get("ka", DEFAULTS.DEFAULT_MULTIPLIER)),
        cap=int(_positive_or(req.get("cap"), DEFAULTS.DEFAULT_CAP)),
        mode=mode,
        rings=int(_positive_or(req.get("rings"), DEFAULTS.DEFAULT_RINGS)),
        ring_start=ring_start,
        ring_end=ring_end,
        seed=str(req.get("seed", "")),
        log_tone=_flag(req.get("logTone"), DEFAULTS.DEFAULT_LOG_TONE),
        brown_cap=_positive_or(req.get("brownCap"), DEFAULTS.DEFAULT_BROWN_CAP),
        bg_alpha=int(_clamp(float(req.get("bgA", DEFAULTS.DEFAULT_BG_ALPHA)), 0, 255)),
        islands=int(_positive_or(req.get("islands"), DEFAULTS.DEFAULT_ISLANDS)),
        island_r_frac=_positive_or(req.get("islandRFrac"), DEFAULTS.DEFAULT_ISLAND_RADIUS_FRAC),
        rotate=_flag(req.get("rot"), DEFAULTS.DEFAULT_ROTATE),
        polish=req.get("polish") is True,
        n22=req.get("n22", 0),
        n21=req.get("n21", 0),
        n11=req.get("n11", 0),
    )
