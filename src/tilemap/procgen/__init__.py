"""
Deterministic inputs to tile placement.

This module provides:
- RNG: seeded uniform / normal number source
- seed_from_string: FNV-1a seed derivation
- Tile specification parsing and batch normalization
"""

from .rng import RNG
from .seeding import seed_from_string, fnv1a_64
from .grammar import (
    TileSpec, TileBatch, parse_tile_list, apply_legacy_tiles,
    apply_multiplier, format_tile_list
)
from .apportion import finalize_tile_batches, build_tile_batches, round_half_up

__all__ = [
    "RNG",
    "seed_from_string",
    "fnv1a_64",
    "TileSpec",
    "TileBatch",
    "parse_tile_list",
    "apply_legacy_tiles",
    "apply_multiplier",
    "format_tile_list",
    "finalize_tile_batches",
    "build_tile_batches",
    "round_half_up"
]
