"""
Placement engine.

Chooses the top-left grid coordinate of each tile according to the map
mode. Mode-specific anchors (island centers, continent centers, ring
boundaries) are computed once at construction, and an area-weighted
running centroid of everything placed so far drives the weighted mode.
"""

import logging
import math
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple

from .. import config as DEFAULTS
from ..config import GenerationParams, MapMode
from ..procgen.apportion import round_half_up
from ..procgen.rng import RNG

logger = logging.getLogger(__name__)

# Center mode: (roll threshold, disk fraction of the canvas)
CENTER_DISK_BANDS = ((0.7, 0.3), (0.99, 0.5))
CENTER_DISK_ATTEMPTS = 16

WEIGHTED_RANDOM_CANDIDATES = 24
# Stop early once a candidate brings the centroid this much closer.
WEIGHTED_EARLY_EXIT_RATIO = 0.7

ISLAND_MARGIN_FRAC = 0.1

CONTINENT_SIGMA_X_DIVISOR = 10.0
CONTINENT_SIGMA_Y_DIVISOR = 6.0
CONTINENT_ATTEMPTS = 6

RING_ATTEMPTS = 12
RING_BASE_WEIGHT = 0.02
RING_FALLOFF_EXPONENT = 1.5
RING_MIN_SPAN = 1e-3


class Point(NamedTuple):
    x: int
    y: int


def clamp_int(value: int, min_val: int, max_val: int) -> int:
    if value < min_val:
        return min_val
    if value > max_val:
        return max_val
    return value


def clamp_float(value: float, min_val: float, max_val: float) -> float:
    """Clamp ``value``; NaN maps to ``min_val``."""
    if math.isnan(value):
        return min_val
    if value < min_val:
        return min_val
    if value > max_val:
        return max_val
    return value


class RunningCentroid:
    """Area-weighted mean of tile centers, updated incrementally."""

    def __init__(self):
        self.sum_x = 0.0
        self.sum_y = 0.0
        self.total_area = 0.0

    def add(self, x: int, y: int, tw: int, th: int):
        area = tw * th
        if area <= 0:
            return
        self.total_area += area
        self.sum_x += (x + tw / 2) * area
        self.sum_y += (y + th / 2) * area

    def center(self) -> Optional[Tuple[float, float]]:
        if self.total_area <= 0:
            return None
        return self.sum_x / self.total_area, self.sum_y / self.total_area

    def distance_after(self, x: int, y: int, tw: int, th: int, target_x: float, target_y: float) -> float:
        """Distance from the target of the centroid as it would be after adding a tile."""
        area = tw * th
        if area <= 0:
            com = self.center()
            if com is None:
                return 0.0
            return math.hypot(com[0] - target_x, com[1] - target_y)
        total = self.total_area + area
        new_cx = (self.sum_x + (x + tw / 2) * area) / total
        new_cy = (self.sum_y + (y + th / 2) * area) / total
        return math.hypot(new_cx - target_x, new_cy - target_y)


def build_ring_boundaries(rings: int, ring_start: float, ring_end: float) -> Tuple[List[float], float, float]:
    """
    Build the ring boundary table.

    Returns:
        Tuple of (boundaries, resolved_start, resolved_end). The table has
        ``max(1, rings) + 1`` non-decreasing entries in [0, 1]; entry 0 is
        always 0 so the innermost segment lies below ``resolved_start``.
    """

    start = clamp_float(ring_start, 0.0, 1.0)
    end = clamp_float(ring_end, 0.0, 1.0)
    if end <= start:
        if end >= 1:
            start = clamp_float(end - DEFAULTS.RING_ENGINE_NUDGE, 0.0, 1.0)
        else:
            end = clamp_float(start + DEFAULTS.RING_ENGINE_NUDGE, 0.0, 1.0)

    segments = max(1, rings)
    boundaries = [0.0] * (segments + 1)

    if segments == 1:
        boundaries[1] = max(start, min(1.0, end))
        return boundaries, start, end

    span = end - start
    if span <= 0:
        span = DEFAULTS.RING_ENGINE_NUDGE
        end = clamp_float(start + span, start, 1.0)
    step = span / (segments - 1)

    prev = 0.0
    for i in range(1, segments + 1):
        if i == 1:
            value = start
        elif i == segments:
            value = end
        else:
            value = start + (i - 1) * step
        value = clamp_float(value, prev, 1.0)
        boundaries[i] = value
        prev = value

    return boundaries, start, end


class PlacementEngine:
    """
    Computes tile positions for one generation run.

    The engine and its anchors are owned by a single run; the RNG is shared
    with the coverage accumulator so both draw from one sequence.
    """

    def __init__(self, params: GenerationParams, rng: RNG):
        self.width = params.width
        self.height = params.height
        self.mode = params.mode
        self.rings = params.rings
        self.ring_start = params.ring_start
        self.ring_end = params.ring_end
        self.islands = params.islands
        self.island_r_frac = params.island_r_frac
        self.rng = rng

        self.centroid = RunningCentroid()
        self.island_centers: List[Point] = []
        self.continent_centers: List[Point] = []
        self.ring_boundaries: List[float] = []

        self._dispatch: Dict[MapMode, Callable[[int, int], Point]] = {
            MapMode.CENTER: self._position_center,
            MapMode.WEIGHTED: self._position_weighted,
            MapMode.ISLANDS: self._position_islands,
            MapMode.DUAL_CONTINENTS: self._position_dual_continents,
            MapMode.RING: self._position_ring,
        }

        if self.mode == MapMode.ISLANDS:
            self._init_islands()
        elif self.mode == MapMode.DUAL_CONTINENTS:
            self._init_continents()
        elif self.mode == MapMode.RING:
            self._init_ring_bands()

    def _init_islands(self):
        count = max(1, self.islands or 3)
        margin = int(math.floor(min(self.width, self.height) * ISLAND_MARGIN_FRAC))
        inner_w = self.width - 2 * margin
        inner_h = self.height - 2 * margin

        centers = []
        for _ in range(count):
            x = margin + (self.rng.intn(inner_w) if inner_w > 0 else 0)
            y = margin + (self.rng.intn(inner_h) if inner_h > 0 else 0)
            centers.append(Point(x, y))
        self.island_centers = centers
        logger.debug("Island centers: %s", centers)

    def _init_continents(self):
        self.continent_centers = [
            Point(self.width // 4, self.height // 2),
            Point((3 * self.width) // 4, self.height // 2),
        ]

    def _init_ring_bands(self):
        self.ring_boundaries, self.ring_start, self.ring_end = build_ring_boundaries(
            self.rings, self.ring_start, self.ring_end
        )
        logger.debug(
            "Ring bands %.3f-%.3f: %s",
            self.ring_start, self.ring_end,
            ["%.3f" % b for b in self.ring_boundaries]
        )

    def position_for_tile(self, tw: int, th: int) -> Point:
        """
        Return the top-left corner for a ``tw`` x ``th`` tile.

        A tile at least as wide or tall as the canvas is placed at (0, 0).
        """

        if tw >= self.width or th >= self.height:
            return Point(0, 0)
        position = self._dispatch.get(self.mode, self._position_weighted)
        return position(tw, th)

    def record_placement(self, x: int, y: int, tw: int, th: int):
        """Fold a placed tile into the running centroid."""
        self.centroid.add(x, y, tw, th)

    # --- helpers ---

    def _clamp_point(self, cx: float, cy: float, tw: int, th: int) -> Point:
        """Top-left corner for a tile centered near (cx, cy), clamped to the canvas."""
        x = clamp_int(round_half_up(cx) - tw // 2, 0, self.width - tw)
        y = clamp_int(round_half_up(cy) - th // 2, 0, self.height - th)
        return Point(x, y)

    def _random_placement(self, tw: int, th: int) -> Point:
        span_x = max(0, self.width - tw)
        span_y = max(0, self.height - th)
        x = self.rng.intn(span_x + 1) if span_x > 0 else 0
        y = self.rng.intn(span_y + 1) if span_y > 0 else 0
        return Point(x, y)

    # --- center ---

    def _position_center(self, tw: int, th: int) -> Point:
        roll = self.rng.random()
        for threshold, fraction in CENTER_DISK_BANDS:
            if roll < threshold:
                return self._sample_centered_disk(tw, th, fraction)
        return self._random_placement(tw, th)

    def _sample_centered_disk(self, tw: int, th: int, fraction: float) -> Point:
        center_x = self.width / 2
        center_y = self.height / 2
        region_rx = min(self.width / 2, self.width * fraction / 2)
        region_ry = min(self.height / 2, self.height * fraction / 2)
        max_dx = max(0.0, min(region_rx, self.width / 2 - tw / 2))
        max_dy = max(0.0, min(region_ry, self.height / 2 - th / 2))

        exact_center = Point(
            clamp_int(round_half_up(center_x - tw / 2), 0, self.width - tw),
            clamp_int(round_half_up(center_y - th / 2), 0, self.height - th),
        )
        if max_dx == 0 and max_dy == 0:
            return exact_center

        for _ in range(CENTER_DISK_ATTEMPTS):
            theta = self.rng.random() * 2 * math.pi
            radius_factor = math.sqrt(self.rng.random())
            dx = math.cos(theta) * max_dx * radius_factor
            dy = math.sin(theta) * max_dy * radius_factor
            tile_cx = clamp_float(center_x + dx, tw / 2, self.width - tw / 2)
            tile_cy = clamp_float(center_y + dy, th / 2, self.height - th / 2)
            x = clamp_int(round_half_up(tile_cx - tw / 2), 0, self.width - tw)
            y = clamp_int(round_half_up(tile_cy - th / 2), 0, self.height - th)
            if 0 <= x <= self.width - tw and 0 <= y <= self.height - th:
                return Point(x, y)

        return exact_center

    # --- weighted ---

    def _position_weighted(self, tw: int, th: int) -> Point:
        target_x = self.width / 2
        target_y = self.height / 2
        score = self.centroid.distance_after

        best = self._clamp_point(target_x, target_y, tw, th)
        best_score = score(best.x, best.y, tw, th, target_x, target_y)

        current_dist = math.inf
        com = self.centroid.center()
        if com is not None:
            cx, cy = com
            current_dist = math.hypot(cx - target_x, cy - target_y)
            mirror = self._clamp_point(target_x * 2 - cx, target_y * 2 - cy, tw, th)
            mirror_score = score(mirror.x, mirror.y, tw, th, target_x, target_y)
            if mirror_score < best_score:
                best, best_score = mirror, mirror_score

        for _ in range(WEIGHTED_RANDOM_CANDIDATES):
            candidate = self._random_placement(tw, th)
            candidate_score = score(candidate.x, candidate.y, tw, th, target_x, target_y)
            if candidate_score < best_score:
                best, best_score = candidate, candidate_score
                if current_dist != math.inf and candidate_score <= current_dist * WEIGHTED_EARLY_EXIT_RATIO:
                    break

        return best

    # --- islands ---

    def _position_islands(self, tw: int, th: int) -> Point:
        if not self.island_centers:
            return self._position_center(tw, th)
        center = self.island_centers[self.rng.intn(len(self.island_centers))]
        radius_frac = max(self.island_r_frac or DEFAULTS.DEFAULT_ISLAND_RADIUS_FRAC,
                          DEFAULTS.MIN_ISLAND_RADIUS_FRAC)
        max_radius = radius_frac * min(self.width, self.height)
        radius = self.rng.random() * max_radius
        theta = self.rng.random() * 2 * math.pi
        return self._clamp_point(
            center.x + math.cos(theta) * radius,
            center.y + math.sin(theta) * radius,
            tw, th
        )

    # --- dual continents ---

    def _position_dual_continents(self, tw: int, th: int) -> Point:
        if not self.continent_centers:
            return self._position_center(tw, th)
        center = self.continent_centers[self.rng.intn(len(self.continent_centers))]
        sigma_x = self.width / CONTINENT_SIGMA_X_DIVISOR
        sigma_y = self.height / CONTINENT_SIGMA_Y_DIVISOR
        for _ in range(CONTINENT_ATTEMPTS):
            x = round_half_up(center.x + self.rng.norm_float64() * sigma_x)
            y = round_half_up(center.y + self.rng.norm_float64() * sigma_y)
            if 0 <= x <= self.width - tw and 0 <= y <= self.height - th:
                return Point(x, y)
        return self._position_center(tw, th)

    # --- ring ---

    def _select_ring_segment(self) -> int:
        """Pick a segment index weighted by radial falloff; -1 if there are none."""
        segments = len(self.ring_boundaries) - 1
        if segments <= 0:
            return -1

        start = clamp_float(self.ring_start, 0.0, 1.0)
        end = clamp_float(self.ring_end, start, 1.0)
        span = max(end - start, RING_MIN_SPAN)

        weights = []
        for i in range(segments):
            inner = max(self.ring_boundaries[i], start)
            outer = min(self.ring_boundaries[i + 1], end)
            if outer <= inner:
                weights.append(0.0)
                continue
            normalized = clamp_float(((inner + outer) / 2 - start) / span, 0.0, 1.0)
            weights.append(RING_BASE_WEIGHT + normalized ** RING_FALLOFF_EXPONENT)

        total_weight = sum(weights)
        if total_weight <= 0:
            return segments - 1

        threshold = self.rng.random() * total_weight
        for i, weight in enumerate(weights):
            threshold -= weight
            if threshold <= 0:
                return i
        return segments - 1

    def _ring_point(self, radius_frac: float, tw: int, th: int) -> Point:
        theta = self.rng.random() * 2 * math.pi
        radius = radius_frac * min(self.width, self.height) / 2
        return self._clamp_point(
            self.width / 2 + math.cos(theta) * radius,
            self.height / 2 + math.sin(theta) * radius,
            tw, th
        )

    def _position_ring(self, tw: int, th: int) -> Point:
        for _ in range(RING_ATTEMPTS):
            segment = self._select_ring_segment()
            if segment < 0 or segment + 1 >= len(self.ring_boundaries):
                continue
            inner = max(self.ring_boundaries[segment], self.ring_start)
            outer = min(max(inner, self.ring_boundaries[segment + 1]), self.ring_end)
            if outer <= inner:
                continue
            radius_frac = inner + self.rng.random() * (outer - inner)
            return self._ring_point(radius_frac, tw, th)

        fallback_span = max(self.ring_end - self.ring_start, 0.0)
        if fallback_span > 0:
            radius_frac = self.ring_start + self.rng.random() * fallback_span
            return self._ring_point(radius_frac, tw, th)
        return self._random_placement(tw, th)
