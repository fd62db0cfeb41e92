#!/usr/bin/env python3
"""
Generate sample topology terrains across a range of densities.

For each density this:
1. Builds the spanning tree over the coarse room lattice
2. Rasterizes rooms and bridges into the pixel grid
3. Checks connectivity and prints the grid statistics
4. Writes a 1:1 PNG

Usage:
    python generate_sample_terrains.py [--seed SEED] [--width W] [--height H]
                                       [--densities 0 50 100] [--out DIR]

Without --out, files go to the export_dir setting (EXPORT_DIR env var).
"""

import argparse
from pathlib import Path

from py_topology.config import settings
from py_topology.core.terrain_analysis import analyze_terrain
from py_topology.core.terrain_generator import generate
from py_topology.render.renderer import save_png
from py_topology.utils.logging import configure_logging


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate sample topology terrain PNGs.")
    parser.add_argument("--seed", default="default_seed", help="Deterministic generator seed")
    parser.add_argument("--width", type=int, default=129, help="Terrain width in pixels")
    parser.add_argument("--height", type=int, default=129, help="Terrain height in pixels")
    parser.add_argument(
        "--densities",
        type=int,
        nargs="+",
        default=[0, 25, 50, 75, 100],
        help="Density values (0-100) to render",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=Path(settings.export_dir),
        help="Output directory (defaults to the configured export_dir)",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    configure_logging("WARNING", "plain")

    for density in args.densities:
        print(f"\nGenerating density {density} terrain...")
        result = generate(args.width, args.height, density, seed=args.seed)
        stats = analyze_terrain(result)
        geometry = result.geometry

        print(f"  Dimensions: {result.width}x{result.height}")
        print(f"  Room size: {geometry.room_size}px, lattice {geometry.rows}x{geometry.cols}")
        print(f"  Rooms: {stats.rooms}, bridges: {stats.bridges}")
        print(f"  Path: {stats.path_fraction * 100:.1f}% in {stats.path_components} component(s)")

        out_path = args.out / f"topology-terrain-{result.width}x{result.height}-d{density}.png"
        save_png(result, out_path)
        print(f"  Saved {out_path}")


if __name__ == "__main__":
    main()
