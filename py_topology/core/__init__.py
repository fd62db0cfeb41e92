"""
Core terrain generation functionality.
"""

from .alea_prng import AleaPRNG
from .terrain_generator import (
    CellType, TerrainConfig, TerrainGeometry, SpanningTree, GenerationResult,
    room_size_for_density, compute_geometry, build_spanning_tree, rasterize,
    generate_terrain, generate,
)
from .terrain_analysis import TerrainStats, analyze_terrain, count_components

__all__ = ['AleaPRNG', 'CellType', 'TerrainConfig', 'TerrainGeometry', 'SpanningTree',
           'GenerationResult', 'room_size_for_density', 'compute_geometry',
           'build_spanning_tree', 'rasterize', 'generate_terrain', 'generate',
           'TerrainStats', 'analyze_terrain', 'count_components']
