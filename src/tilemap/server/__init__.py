"""
HTTP serving for tile map generation.

- FastAPI application factory
- CLI entry point running uvicorn
"""

from .api import create_app, main, MapRequest

__all__ = ["create_app", "main", "MapRequest"]
