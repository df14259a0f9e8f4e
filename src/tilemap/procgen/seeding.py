"""
Seed derivation from user supplied seed strings.
"""

import time

FNV_OFFSET_BASIS = 1469598103934665603
FNV_PRIME = 1099511628211

_MASK_64 = (1 << 64) - 1
_MASK_63 = (1 << 63) - 1


def fnv1a_64(text: str) -> int:
    """64-bit FNV-1a over the code points of ``text``."""
    h = FNV_OFFSET_BASIS
    for ch in text:
        h ^= ord(ch)
        h = (h * FNV_PRIME) & _MASK_64
    return h


def seed_from_string(seed: str) -> int:
    """
    Map a seed string to a non-negative 63-bit integer.

    An empty string yields a time-derived seed, which is the only
    non-reproducible input to a generation run.
    """
    if not seed:
        return time.time_ns() & _MASK_63
    return fnv1a_64(seed) & _MASK_63
