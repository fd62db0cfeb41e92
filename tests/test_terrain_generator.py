"""
Tests for terrain generation module.
"""

import pytest
import numpy as np
from py_topology.core.alea_prng import AleaPRNG
from py_topology.core.terrain_analysis import analyze_terrain, path_components
from py_topology.core.terrain_generator import (
    CellType, TerrainConfig, TerrainGeometry, build_spanning_tree, compute_geometry,
    generate, generate_terrain, rasterize, room_size_for_density,
)


class TestRoomSize:
    """Test density to room size mapping."""

    @pytest.mark.parametrize("density,expected", [
        (0, 12), (25, 10), (50, 8), (75, 6), (99, 4), (100, 4),
    ])
    def test_known_values(self, density, expected):
        assert room_size_for_density(density) == expected

    def test_monotonic_non_increasing(self):
        sizes = [room_size_for_density(d) for d in range(101)]
        assert all(a >= b for a, b in zip(sizes, sizes[1:]))
        assert min(sizes) == 4
        assert max(sizes) == 12

    def test_out_of_range_density_is_clamped(self):
        assert room_size_for_density(-20) == 12
        assert room_size_for_density(250) == 4


class TestGeometry:
    """Test lattice sizing and centering."""

    def test_reference_geometry(self):
        geometry = compute_geometry(TerrainConfig(width=129, height=129, density=50))

        assert geometry.room_size == 8
        assert geometry.step == 9
        assert geometry.cols == 14
        assert geometry.rows == 14
        assert geometry.offset_x == 1
        assert geometry.offset_y == 1
        assert not geometry.is_degenerate

    def test_small_dimensions_clamped(self):
        geometry = compute_geometry(TerrainConfig(width=5, height=5, density=50))

        assert geometry.width == 20
        assert geometry.height == 20
        assert geometry.cols == 2
        assert geometry.rows == 2

    def test_minimum_canvas_holds_one_large_room(self):
        geometry = compute_geometry(TerrainConfig(width=1, height=1, density=0))

        assert geometry.step == 13
        assert geometry.rows == 1
        assert geometry.cols == 1
        assert geometry.offset_x == 3
        assert geometry.offset_y == 3

    @pytest.mark.parametrize("width,height,density", [
        (129, 129, 50), (200, 90, 100), (64, 301, 0), (20, 20, 37), (101, 55, 80),
    ])
    def test_centering(self, width, height, density):
        geometry = compute_geometry(TerrainConfig(width, height, density))
        footprint_w, footprint_h = geometry.footprint

        left = geometry.offset_x
        right = geometry.width - (geometry.offset_x + footprint_w)
        top = geometry.offset_y
        bottom = geometry.height - (geometry.offset_y + footprint_h)

        assert left >= 0 and right >= 0
        assert top >= 0 and bottom >= 0
        assert abs(left - right) <= 1
        assert abs(top - bottom) <= 1


class TestSpanningTree:
    """Test the randomized DFS over the coarse lattice."""

    @pytest.mark.parametrize("rows,cols", [(1, 1), (1, 7), (5, 1), (4, 6), (14, 14)])
    def test_edge_count(self, rows, cols):
        tree = build_spanning_tree(rows, cols, AleaPRNG("edges"))
        assert len(tree.edges) == rows * cols - 1

    def test_empty_lattice(self):
        assert build_spanning_tree(0, 5, AleaPRNG("empty")).edges == []
        assert build_spanning_tree(3, 0, AleaPRNG("empty")).edges == []

    def test_edges_form_a_tree(self):
        rows, cols = 9, 11
        tree = build_spanning_tree(rows, cols, AleaPRNG("tree"))

        parent = list(range(rows * cols))

        def find(i):
            while parent[i] != i:
                parent[i] = parent[parent[i]]
                i = parent[i]
            return i

        for r1, c1, r2, c2 in tree.edges:
            assert abs(r1 - r2) + abs(c1 - c2) == 1
            assert 0 <= r2 < rows and 0 <= c2 < cols
            a, b = find(r1 * cols + c1), find(r2 * cols + c2)
            assert a != b, "edge closes a cycle"
            parent[a] = b

        roots = {find(i) for i in range(rows * cols)}
        assert len(roots) == 1

    def test_each_cell_discovered_once(self):
        tree = build_spanning_tree(6, 6, AleaPRNG("once"))
        discovered = [(r2, c2) for _, _, r2, c2 in tree.edges]

        assert len(set(discovered)) == len(discovered)
        assert (0, 0) not in discovered

    def test_one_draw_per_edge(self):
        prng = AleaPRNG("draws")
        tree = build_spanning_tree(7, 5, prng)
        assert prng.call_count == len(tree.edges)

    def test_starts_from_origin(self):
        tree = build_spanning_tree(3, 3, AleaPRNG("origin"))
        assert tree.edges[0][:2] == (0, 0)


class TestTerrainGeneration:
    """Test full terrain generation."""

    @pytest.fixture
    def reference(self):
        return generate_terrain(TerrainConfig(129, 129, 50), AleaPRNG("test123"))

    def test_reference_example(self, reference):
        stats = analyze_terrain(reference)

        assert reference.grid.shape == (129, 129)
        assert reference.width == 129
        assert reference.height == 129
        assert reference.edge_count == 195
        assert stats.rooms == 196
        assert stats.bridges == 195
        assert stats.path_components == 1
        # 196 rooms of 8x8 plus 195 bridges of 8 pixels
        assert stats.path_pixels == 196 * 64 + 195 * 8

    def test_grid_values(self, reference):
        assert reference.grid.dtype == np.uint8
        assert set(np.unique(reference.grid)) <= {CellType.PATH, CellType.WALL}

    def test_grid_is_read_only(self, reference):
        with pytest.raises(ValueError):
            reference.grid[0, 0] = CellType.PATH

    def test_margin_is_wall(self):
        result = generate_terrain(TerrainConfig(200, 90, 100), AleaPRNG("margin"))
        geometry = result.geometry
        footprint_w, footprint_h = geometry.footprint

        inside = np.zeros_like(result.grid, dtype=bool)
        inside[geometry.offset_y:geometry.offset_y + footprint_h,
               geometry.offset_x:geometry.offset_x + footprint_w] = True

        assert np.all(result.grid[~inside] == CellType.WALL)

    def test_outer_ring_of_footprint_is_wall(self, reference):
        geometry = reference.geometry
        x0, y0 = geometry.offset_x, geometry.offset_y
        footprint_w, footprint_h = geometry.footprint
        block = reference.grid[y0:y0 + footprint_h, x0:x0 + footprint_w]

        assert np.all(block[0, :] == CellType.WALL)
        assert np.all(block[-1, :] == CellType.WALL)
        assert np.all(block[:, 0] == CellType.WALL)
        assert np.all(block[:, -1] == CellType.WALL)

    def test_wall_strips_are_all_or_nothing(self, reference):
        """Each strip between neighboring rooms is a full bridge or solid wall."""
        geometry = reference.geometry
        grid = reference.grid
        size = geometry.room_size

        for r in range(geometry.rows):
            for c in range(geometry.cols):
                x, y = geometry.room_origin(r, c)
                if c + 1 < geometry.cols:
                    strip = grid[y:y + size, x + size]
                    assert np.all(strip == strip[0])
                if r + 1 < geometry.rows:
                    strip = grid[y + size, x:x + size]
                    assert np.all(strip == strip[0])
                if r + 1 < geometry.rows and c + 1 < geometry.cols:
                    # grout corner between four rooms
                    assert grid[y + size, x + size] == CellType.WALL

    def test_single_room_terrain(self):
        result = generate_terrain(TerrainConfig(1, 1, 0), AleaPRNG("tiny"))
        stats = analyze_terrain(result)

        assert result.grid.shape == (20, 20)
        assert result.edge_count == 0
        assert stats.rooms == 1
        assert stats.path_pixels == 144
        assert stats.path_components == 1

    @pytest.mark.parametrize("width,height,density", [
        (20, 20, 100), (64, 48, 0), (150, 77, 33), (257, 129, 90), (300, 300, 100),
    ])
    def test_connectivity(self, width, height, density):
        result = generate_terrain(TerrainConfig(width, height, density), AleaPRNG(f"c{width}"))
        geometry = result.geometry

        assert result.edge_count == geometry.rows * geometry.cols - 1
        assert path_components(result.grid) == 1

    def test_degenerate_lattice_rasterizes_to_wall(self):
        geometry = TerrainGeometry(
            width=20, height=20, room_size=12, step=13, cols=0, rows=0,
            offset_x=10, offset_y=10,
        )
        grid = rasterize(geometry, build_spanning_tree(0, 0, AleaPRNG("void")))

        assert geometry.is_degenerate
        assert grid.shape == (20, 20)
        assert np.all(grid == CellType.WALL)


class TestDeterminism:
    """Test seeded reproducibility."""

    def test_same_seed_same_grid(self):
        first = generate(129, 129, 50, seed="repeatable")
        second = generate(129, 129, 50, seed="repeatable")

        np.testing.assert_array_equal(first.grid, second.grid)
        assert first.seed == "repeatable"

    def test_different_seeds_differ(self):
        first = generate(129, 129, 50, seed="seed1")
        second = generate(129, 129, 50, seed="seed2")

        assert not np.array_equal(first.grid, second.grid)

    def test_fresh_grid_per_call(self):
        prng = AleaPRNG("fresh")
        first = generate_terrain(TerrainConfig(), prng)
        second = generate_terrain(TerrainConfig(), prng)

        assert first.grid is not second.grid
        assert not np.shares_memory(first.grid, second.grid)

    def test_default_prng(self):
        result = generate_terrain(TerrainConfig(64, 64, 50))
        assert path_components(result.grid) == 1
