#!/usr/bin/env python3
"""
Offline map renderer.

Builds a map request from command-line flags, generates the coverage map
and saves it as a PNG, printing the normalized tile list and run metadata.
"""

import argparse
import logging
import sys

from tilemap import MapRequestError, generate_map, normalize_request
from tilemap.config import DEFAULT_UI_REQUEST
from tilemap.procgen import format_tile_list


def main():
    parser = argparse.ArgumentParser(description="Render a tile coverage map to a PNG file")
    parser.add_argument("--output", "-o", default="map.png", help="Output PNG path")
    parser.add_argument("--width", type=int, default=DEFAULT_UI_REQUEST["w"], help="Canvas width")
    parser.add_argument("--height", type=int, default=DEFAULT_UI_REQUEST["h"], help="Canvas height")
    parser.add_argument("--tiles", default=DEFAULT_UI_REQUEST["tiles"], help="Tile list, e.g. 2x2*400,1x1*100")
    parser.add_argument("--mode", default=DEFAULT_UI_REQUEST["mode"], help="center, weighted, islands, dual-continents or ring")
    parser.add_argument("--seed", default="", help="Seed string (empty = time based)")
    parser.add_argument("--ka", type=float, help="Tile count multiplier")
    parser.add_argument("--cap", type=int, help="Maximum total placements")
    parser.add_argument("--rings", type=int, default=DEFAULT_UI_REQUEST["rings"], help="Ring segment count")
    parser.add_argument("--ring-start", type=float, help="Inner ring radius fraction")
    parser.add_argument("--ring-end", type=float, help="Outer ring radius fraction")
    parser.add_argument("--linear-tone", action="store_true", help="Use a linear tone response")
    parser.add_argument("--brown-cap", type=float, default=DEFAULT_UI_REQUEST["brownCap"], help="Coverage at which the dense color saturates")
    parser.add_argument("--bg-alpha", type=int, help="Water alpha (0-255, 0 = opaque)")
    parser.add_argument("--islands", type=int, help="Island count")
    parser.add_argument("--island-radius", type=float, help="Island radius fraction")
    parser.add_argument("--no-rotate", action="store_true", help="Disable tile rotation")
    parser.add_argument("--polish", action="store_true", default=DEFAULT_UI_REQUEST["polish"], help="Soften tile edges")
    parser.add_argument("--n22", type=float, help="Extra 2x2 tiles")
    parser.add_argument("--n21", type=float, help="Extra 2x1 tiles")
    parser.add_argument("--n11", type=float, help="Extra 1x1 tiles")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    payload = {
        "w": args.width,
        "h": args.height,
        "tiles": args.tiles,
        "mode": args.mode,
        "seed": args.seed,
        "ka": args.ka,
        "cap": args.cap,
        "rings": args.rings,
        "ringStart": args.ring_start,
        "ringEnd": args.ring_end,
        "logTone": 0 if args.linear_tone else 1,
        "brownCap": args.brown_cap,
        "bgA": args.bg_alpha,
        "islands": args.islands,
        "islandRFrac": args.island_radius,
        "rot": 0 if args.no_rotate else 1,
        "polish": args.polish,
        "n22": args.n22,
        "n21": args.n21,
        "n11": args.n11,
    }

    try:
        params = normalize_request(payload)
        result = generate_map(params)
    except MapRequestError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    result.to_image().save(args.output, format="PNG")

    print(f"Tiles: {format_tile_list(result.tile_batches)}")
    print(f"Batches: {result.batches}")
    print(f"Placements: {result.total_placements}")
    print(f"Seed: {result.seed_value}")
    print(f"Saved {result.width}x{result.height} map to {args.output}")


if __name__ == "__main__":
    main()
