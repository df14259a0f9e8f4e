"""
FastAPI server for tile map generation.

Provides REST endpoints that render coverage maps as PNG images.
"""

import argparse
import logging
import os
from typing import Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field, ValidationError
from starlette.concurrency import run_in_threadpool
import uvicorn

from .. import config as DEFAULTS
from ..compatibility import normalize_request
from ..config import MapMode
from ..engine import generate_map

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# Pydantic models for API
class MapRequest(BaseModel):
    w: Optional[int] = Field(None, description="Canvas width in pixels")
    h: Optional[int] = Field(None, description="Canvas height in pixels")
    tiles: Optional[str] = Field(None, description="Tile list, e.g. '2x2*400,2x1*300'")
    ka: Optional[float] = Field(None, description="Global tile count multiplier")
    cap: Optional[float] = Field(None, description="Maximum total placements (0 = no cap)")
    mode: Optional[str] = Field(None, description="Placement mode or alias")
    rings: Optional[int] = Field(None, description="Ring segment count")
    ringStart: Optional[float] = Field(None, description="Inner ring radius fraction")
    ringEnd: Optional[float] = Field(None, description="Outer ring radius fraction")
    seed: Optional[str] = Field(None, description="Seed string; empty uses the clock")
    logTone: Optional[float] = Field(None, description="Logarithmic tone response (0/1)")
    brownCap: Optional[float] = Field(None, description="Coverage at which the dense color saturates")
    bgA: Optional[float] = Field(None, description="Water alpha (0-255, 0 = opaque)")
    islands: Optional[int] = Field(None, description="Island count")
    islandRFrac: Optional[float] = Field(None, description="Island radius as a fraction of the canvas")
    rot: Optional[float] = Field(None, description="Allow tile rotation (0/1)")
    n22: Optional[float] = Field(None, description="Extra 2x2 tiles")
    n21: Optional[float] = Field(None, description="Extra 2x1 tiles")
    n11: Optional[float] = Field(None, description="Extra 1x1 tiles")
    polish: Optional[bool] = Field(None, description="Soften tile edges")


class HealthResponse(BaseModel):
    status: str
    modes: List[str]


def _error(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _cors_origins_from_env() -> List[str]:
    raw = os.getenv("TILEMAP_CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def create_app(cors_origins: List[str] = None) -> FastAPI:
    """Create FastAPI application."""

    app = FastAPI(
        title="Tilemap API",
        description="Render procedural tile coverage maps",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    if cors_origins is None:
        cors_origins = _cors_origins_from_env()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Tile-Batches", "X-Tile-Count", "X-Seed"],
    )

    @app.get("/health", response_model=HealthResponse)
    async def health():
        """Health check endpoint."""
        return HealthResponse(status="healthy", modes=[mode.value for mode in MapMode])

    @app.get("/parameters")
    async def get_parameters() -> Dict:
        """Modes, aliases and defaults for building request forms."""
        return {
            "modes": [mode.value for mode in MapMode],
            "aliases": {alias: mode.value for alias, mode in DEFAULTS.MODE_ALIASES.items()},
            "defaults": DEFAULTS.DEFAULT_UI_REQUEST,
            "default_tiles": [
                {"w": w, "h": h, "count": count} for w, h, count in DEFAULTS.DEFAULT_TILES
            ],
        }

    @app.post("/api/generate")
    async def generate(request: Request):
        """Generate a map and return it as a PNG image."""

        try:
            body = await request.json()
        except ValueError as e:
            return _error(f"invalid JSON: {e}")

        try:
            map_request = MapRequest.model_validate(body)
            params = normalize_request(map_request.model_dump(exclude_none=True))
            result = await run_in_threadpool(generate_map, params)
        except ValidationError as e:
            logger.warning("Rejected request: %s", e)
            return _error(str(e))
        except (ValueError, OverflowError) as e:
            logger.warning("Rejected request: %s", e)
            return _error(str(e))

        return Response(
            content=result.to_png(),
            media_type="image/png",
            headers={
                "Cache-Control": "no-store",
                "X-Tile-Batches": str(result.batches),
                "X-Tile-Count": str(result.total_placements),
                "X-Seed": str(result.seed_value),
            }
        )

    return app


def main():
    """CLI entry point for API server."""

    parser = argparse.ArgumentParser(description="Tilemap API Server")
    parser.add_argument("--host", default=os.getenv("TILEMAP_HOST", "0.0.0.0"), help="Host to bind server")
    parser.add_argument("--port", type=int, default=int(os.getenv("TILEMAP_PORT", "8000")), help="Port to bind server")
    parser.add_argument("--workers", type=int, default=1, help="Number of worker processes")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    parser.add_argument("--log-level", default=os.getenv("TILEMAP_LOG_LEVEL", "info"), help="Logging level")
    parser.add_argument("--cors-origin", action="append", help="Allowed CORS origin (repeatable)")

    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format=LOG_FORMAT)
    if args.cors_origin:
        # Worker processes build their own app from the factory.
        os.environ["TILEMAP_CORS_ORIGINS"] = ",".join(args.cors_origin)

    logger.info("Starting Tilemap API server on http://%s:%d", args.host, args.port)
    logger.info("Docs: http://%s:%d/docs", args.host, args.port)

    uvicorn.run(
        "tilemap.server.api:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        workers=args.workers if not args.reload else 1,
        reload=args.reload,
        log_level=args.log_level.lower()
    )


if __name__ == "__main__":
    main()
