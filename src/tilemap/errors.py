"""
Error types raised by the map generation pipeline.
"""


class MapRequestError(ValueError):
    """Raised when request parameters cannot produce a map."""
