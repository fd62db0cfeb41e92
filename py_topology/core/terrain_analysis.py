"""
Terrain grid inspection.

Counts connected regions and summarizes a generated grid:
- PATH components (4-connectivity); a well-formed terrain has exactly one
- WALL components, reported for information only since nothing in the
  generator tries to keep walls connected
- Path fraction, room count and bridge count
"""

from dataclasses import asdict, dataclass
from typing import Dict, Tuple

import numpy as np
import structlog
from scipy import ndimage

from .terrain_generator import CellType, GenerationResult, TerrainGeometry

logger = structlog.get_logger()

# 4-connectivity structuring element
FOUR_CONNECTED = np.array([[0, 1, 0], [1, 1, 1], [0, 1, 0]], dtype=bool)


@dataclass(frozen=True)
class TerrainStats:
    """Summary numbers for one terrain."""

    width: int
    height: int
    path_pixels: int
    wall_pixels: int
    path_fraction: float
    path_components: int
    wall_components: int
    rooms: int
    bridges: int


def count_components(mask: np.ndarray) -> int:
    """Number of 4-connected True regions in a boolean mask."""
    _, count = ndimage.label(mask, structure=FOUR_CONNECTED)
    return int(count)


def path_components(grid: np.ndarray) -> int:
    return count_components(grid == CellType.PATH)


def wall_components(grid: np.ndarray) -> int:
    return count_components(grid == CellType.WALL)


def lattice_bounding_box(geometry: TerrainGeometry) -> Tuple[int, int, int, int]:
    """(x0, y0, x1, y1) of the lattice footprint, end-exclusive."""
    footprint_w, footprint_h = geometry.footprint
    return (
        geometry.offset_x,
        geometry.offset_y,
        geometry.offset_x + footprint_w,
        geometry.offset_y + footprint_h,
    )


def count_rooms(grid: np.ndarray, geometry: TerrainGeometry) -> int:
    """Lattice cells whose whole room block is PATH."""
    size = geometry.room_size
    rooms = 0
    for r in range(geometry.rows):
        for c in range(geometry.cols):
            x, y = geometry.room_origin(r, c)
            if np.all(grid[y:y + size, x:x + size] == CellType.PATH):
                rooms += 1
    return rooms


def count_bridges(grid: np.ndarray, geometry: TerrainGeometry) -> int:
    """
    Open wall strips between lattice neighbors.

    A strip counts only when all room_size pixels are PATH; the corner
    grout pixels between four rooms are never part of a bridge.
    """
    size = geometry.room_size
    bridges = 0
    for r in range(geometry.rows):
        for c in range(geometry.cols):
            x, y = geometry.room_origin(r, c)
            if c + 1 < geometry.cols and np.all(grid[y:y + size, x + size] == CellType.PATH):
                bridges += 1
            if r + 1 < geometry.rows and np.all(grid[y + size, x:x + size] == CellType.PATH):
                bridges += 1
    return bridges


def analyze_terrain(result: GenerationResult) -> TerrainStats:
    """
    Summarize a generated terrain.

    Args:
        result: Output of generate_terrain

    Returns:
        TerrainStats for the grid
    """
    grid = result.grid
    total = grid.size
    path_pixels = int(np.count_nonzero(grid == CellType.PATH))

    stats = TerrainStats(
        width=result.width,
        height=result.height,
        path_pixels=path_pixels,
        wall_pixels=total - path_pixels,
        path_fraction=path_pixels / total if total else 0.0,
        path_components=path_components(grid),
        wall_components=wall_components(grid),
        rooms=count_rooms(grid, result.geometry),
        bridges=count_bridges(grid, result.geometry),
    )

    if not result.geometry.is_degenerate and stats.path_components != 1:
        logger.error(
            "Terrain path region is disconnected",
            path_components=stats.path_components,
            width=result.width,
            height=result.height,
        )

    return stats


def stats_dict(stats: TerrainStats) -> Dict[str, float]:
    return asdict(stats)
