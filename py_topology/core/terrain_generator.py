"""
Topology terrain generation.

A terrain is a binary WALL/PATH pixel grid built in two stages:

1. A randomized depth-first search over a coarse lattice of room positions
   produces a spanning tree (every room reachable, no cycles).
2. The tree is rasterized: every lattice cell becomes a square room of PATH
   pixels and every tree edge becomes a 1-pixel bridge through the wall
   between the two rooms it joins.

The lattice footprint is centered in the requested canvas; the margin stays
WALL. Because only tree edges get bridges, PATH is a single 4-connected
region whenever the lattice has at least one cell.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
import structlog

from .alea_prng import AleaPRNG

logger = structlog.get_logger()

MIN_DIMENSION = 20
MIN_ROOM_SIZE = 4
MAX_ROOM_SIZE = 12

# Fixed neighbor enumeration order: right, down, left, up
DIRECTIONS = ((0, 1), (1, 0), (0, -1), (-1, 0))

SpanningEdge = Tuple[int, int, int, int]


class CellType:
    """Pixel states of a terrain grid."""
    PATH = 0
    WALL = 1


@dataclass(frozen=True)
class TerrainConfig:
    """Requested terrain parameters. Out-of-range values are clamped, never rejected."""

    width: int = 129
    height: int = 129
    density: int = 50


@dataclass(frozen=True)
class TerrainGeometry:
    """Pixel and lattice measurements derived from a TerrainConfig."""

    width: int
    height: int
    room_size: int
    step: int
    cols: int
    rows: int
    offset_x: int
    offset_y: int

    @property
    def is_degenerate(self) -> bool:
        """True when the canvas cannot hold a single room."""
        return self.rows == 0 or self.cols == 0

    @property
    def footprint(self) -> Tuple[int, int]:
        """Width and height in pixels of the rasterized lattice, outer wall included."""
        return self.cols * self.step + 1, self.rows * self.step + 1

    def room_origin(self, row: int, col: int) -> Tuple[int, int]:
        """Top-left pixel (x, y) of the room at lattice cell (row, col)."""
        return (
            self.offset_x + col * self.step + 1,
            self.offset_y + row * self.step + 1,
        )


@dataclass
class SpanningTree:
    """Edges accepted by the lattice DFS, in discovery order."""

    rows: int
    cols: int
    edges: List[SpanningEdge] = field(default_factory=list)

    @property
    def cell_count(self) -> int:
        return self.rows * self.cols


@dataclass(frozen=True)
class GenerationResult:
    """A finished terrain. ``grid`` is read-only."""

    grid: np.ndarray
    width: int
    height: int
    geometry: TerrainGeometry
    edge_count: int
    seed: Optional[str] = None

    def to_rows(self) -> List[List[int]]:
        """Grid as nested lists, rows first."""
        return self.grid.tolist()


def room_size_for_density(density: float) -> int:
    """
    Map density in [0, 100] to a room edge length in pixels.

    Density 0 gives 12 px rooms, density 100 gives 4 px rooms. The mapping
    does not depend on canvas size, so a given density always yields the
    same room size.
    """
    density = min(100, max(0, density))
    return max(MIN_ROOM_SIZE, int(np.floor(MAX_ROOM_SIZE - (density / 100) * 8)))


def compute_geometry(config: TerrainConfig) -> TerrainGeometry:
    """Clamp the config and derive lattice size and centering offsets."""
    width = max(MIN_DIMENSION, int(config.width))
    height = max(MIN_DIMENSION, int(config.height))

    room_size = room_size_for_density(config.density)
    step = room_size + 1  # room plus one pixel of wall

    cols = (width - 1) // step
    rows = (height - 1) // step

    offset_x = (width - (cols * step + 1)) // 2
    offset_y = (height - (rows * step + 1)) // 2

    return TerrainGeometry(
        width=width,
        height=height,
        room_size=room_size,
        step=step,
        cols=cols,
        rows=rows,
        offset_x=offset_x,
        offset_y=offset_y,
    )


def build_spanning_tree(rows: int, cols: int, prng: AleaPRNG) -> SpanningTree:
    """
    Randomized iterative DFS over a rows x cols lattice, starting at (0, 0).

    At each step the top of the stack moves to one of its unvisited
    neighbors chosen uniformly (one PRNG draw), or is popped when it has
    none. Every cell is visited exactly once, giving rows*cols - 1 edges.

    Args:
        rows: Lattice rows
        cols: Lattice columns
        prng: Random source

    Returns:
        SpanningTree with edges in discovery order
    """
    tree = SpanningTree(rows=rows, cols=cols)
    if rows <= 0 or cols <= 0:
        return tree

    visited = np.zeros((rows, cols), dtype=bool)
    stack = [(0, 0)]
    visited[0, 0] = True

    while stack:
        r, c = stack[-1]
        neighbors = []
        for dr, dc in DIRECTIONS:
            nr, nc = r + dr, c + dc
            if 0 <= nr < rows and 0 <= nc < cols and not visited[nr, nc]:
                neighbors.append((nr, nc))

        if neighbors:
            nr, nc = prng.choice(neighbors)
            visited[nr, nc] = True
            tree.edges.append((r, c, nr, nc))
            stack.append((nr, nc))
        else:
            stack.pop()

    return tree


def rasterize(geometry: TerrainGeometry, tree: SpanningTree) -> np.ndarray:
    """
    Paint rooms and bridges onto a fresh all-WALL grid.

    Every block lies inside the lattice footprint, which always fits the
    canvas.
    """
    grid = np.full((geometry.height, geometry.width), CellType.WALL, dtype=np.uint8)
    size = geometry.room_size

    for r in range(geometry.rows):
        for c in range(geometry.cols):
            x, y = geometry.room_origin(r, c)
            grid[y:y + size, x:x + size] = CellType.PATH

    for r1, c1, r2, c2 in tree.edges:
        if r1 == r2:
            # Same row: vertical strip in the wall column between the rooms
            x, y = geometry.room_origin(r1, min(c1, c2))
            grid[y:y + size, x + size] = CellType.PATH
        else:
            x, y = geometry.room_origin(min(r1, r2), c1)
            grid[y + size, x:x + size] = CellType.PATH

    return grid


def generate_terrain(
    config: TerrainConfig,
    prng: Optional[AleaPRNG] = None,
) -> GenerationResult:
    """
    Generate a terrain grid.

    Never fails: dimensions below 20 are raised to 20 and density is clamped
    to [0, 100]. A canvas too small for one room yields an all-WALL grid.

    Args:
        config: Requested width, height and density
        prng: Random source; the process-wide PRNG is used when omitted

    Returns:
        GenerationResult holding a read-only grid
    """
    if prng is None:
        from ..utils.random import get_prng

        prng = get_prng()

    geometry = compute_geometry(config)
    tree = build_spanning_tree(geometry.rows, geometry.cols, prng)
    grid = rasterize(geometry, tree)
    grid.flags.writeable = False

    if geometry.is_degenerate:
        logger.warning(
            "Terrain lattice is empty, grid is all wall",
            width=geometry.width,
            height=geometry.height,
            room_size=geometry.room_size,
        )

    logger.debug(
        "Terrain generated",
        width=geometry.width,
        height=geometry.height,
        room_size=geometry.room_size,
        rows=geometry.rows,
        cols=geometry.cols,
        edges=len(tree.edges),
    )

    seed = str(prng.seed)
    return GenerationResult(
        grid=grid,
        width=geometry.width,
        height=geometry.height,
        geometry=geometry,
        edge_count=len(tree.edges),
        seed=seed,
    )


def generate(
    width: int,
    height: int,
    density: int,
    seed: Optional[str] = None,
) -> GenerationResult:
    """Convenience wrapper: build config and a fresh PRNG, then generate."""
    from ..utils.random import make_prng

    return generate_terrain(
        TerrainConfig(width=width, height=height, density=density),
        make_prng(seed),
    )
