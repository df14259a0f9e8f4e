"""
Compatibility layer for the map request wire format.

Maps short wire keys, legacy mode aliases and 0/1 flags onto
GenerationParams.
"""

from .legacy_adapter import normalize_request, resolve_mode, resolve_ring_fractions, REQUEST_FIELDS

__all__ = ["normalize_request", "resolve_mode", "resolve_ring_fractions", "REQUEST_FIELDS"]
