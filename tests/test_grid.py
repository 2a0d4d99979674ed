"""
Unit tests for the icosphere hex grid facade.

Validates sizing, enumeration, adjacency and hop-distance queries against
the closed-form tile count and the known layout of a small grid.
"""

import logging

import numpy as np
import pytest

from icohex import (
    GridConfig,
    IcosphereHexGrid,
    edge_length_for,
    expected_tile_count,
    log_grid_summary,
)
from icohex.geometry import CIRCUMRADIUS, TIE_BREAK_BIAS


N3_VERTICES = {
    (0, 0), (0, 9), (3, 6), (6, 3), (9, 0), (12, -3),
    (6, 12), (9, 9), (12, 6), (15, 3), (18, 0), (15, 12),
}


@pytest.fixture(scope="module")
def grid3():
    return IcosphereHexGrid.from_edge_length(3)


class TestSizing:
    """Test tile count and edge length formulas."""

    def test_expected_tile_count(self):
        assert expected_tile_count(1) == 32
        assert expected_tile_count(3) == 272
        assert expected_tile_count(10) == 3002

    @pytest.mark.parametrize("count,expected", [
        (32, 1),
        (272, 3),
        (1000, 6),
        (3002, 10),
    ])
    def test_edge_length_for(self, count, expected):
        assert edge_length_for(count) == expected

    @pytest.mark.parametrize("count", [0, -5])
    def test_edge_length_for_rejects_non_positive(self, count):
        with pytest.raises(ValueError):
            edge_length_for(count)

    @pytest.mark.parametrize("count", [1, 5, 7, 8])
    def test_tiny_count_gives_smallest_grid(self, count):
        """Any positive count gets at least edge length 1."""
        assert edge_length_for(count) == 1


class TestConstruction:
    """Test grid construction and configuration."""

    def test_from_tile_count(self):
        grid = IcosphereHexGrid(272)
        assert grid.edge_length == 3
        assert grid.tile_count == 272
        assert grid.config.approx_tile_count == 272

    def test_from_edge_length(self):
        grid = IcosphereHexGrid.from_edge_length(4)
        assert grid.edge_length == 4
        assert grid.config.tie_break_bias == TIE_BREAK_BIAS

    @pytest.mark.parametrize("count", [0, -1])
    def test_degenerate_tile_count_fails(self, count):
        """Non-positive counts fail at construction."""
        with pytest.raises(ValueError):
            IcosphereHexGrid(count)

    def test_tiny_tile_count(self):
        grid = IcosphereHexGrid(1)
        assert grid.edge_length == 1
        assert len(list(grid.all_coordinates())) == 32

    def test_count_and_config_conflict(self):
        with pytest.raises(ValueError):
            IcosphereHexGrid(272, config=GridConfig(edge_length=3))

    def test_zero_edge_length_fails(self):
        with pytest.raises(ValueError):
            IcosphereHexGrid.from_edge_length(0)

    def test_config_requires_a_size(self):
        with pytest.raises(ValueError):
            GridConfig()


class TestEnumeration:
    """Test the set of valid coordinates."""

    @pytest.mark.parametrize("n", range(1, 11))
    def test_tile_count(self, n):
        """Enumeration yields 30n² + 2 distinct coordinates."""
        grid = IcosphereHexGrid.from_edge_length(n)
        coords = list(grid.all_coordinates())
        assert len(coords) == 30 * n * n + 2
        assert len(set(coords)) == len(coords)

    def test_deterministic_order(self, grid3):
        first = list(grid3.all_coordinates())
        assert list(grid3.all_coordinates()) == first
        assert first[0] == (0, 0)
        assert first[-1] == (15, 12)
        latitudes = [x + y for x, y in first]
        assert latitudes == sorted(latitudes)

    def test_is_valid(self, grid3):
        assert grid3.is_valid((5, 3))
        assert grid3.is_valid((1, 5))
        assert not grid3.is_valid((2, 4))
        assert not grid3.is_valid((3, -3))

    def test_vertices(self, grid3):
        """The 12 pentagons, each emitted once under one coordinate."""
        assert set(grid3.vertex_coordinates()) == N3_VERTICES
        assert len(grid3.vertex_coordinates()) == 12

    def test_is_vertex(self, grid3):
        assert grid3.is_vertex((0, 0))
        assert grid3.is_vertex((9, 9))
        assert not grid3.is_vertex((5, 3))
        assert not grid3.is_vertex((3, 3))


class TestAdjacency:
    """Test neighbor and outer-neighbor queries."""

    def test_known_neighbors(self, grid3):
        """Tile (5, 3) next to a polar fold."""
        assert set(grid3.neighbors((5, 3))) == {
            (6, 3), (6, 2), (6, 4), (5, 4), (4, 3), (4, 2),
        }

    def test_south_pole(self, grid3):
        """The pole has one neighbor on each of the five polar faces."""
        assert set(grid3.neighbors((0, 0))) == {
            (1, 1), (4, -2), (7, -5), (-2, 4), (-5, 7),
        }

    def test_face_interior(self):
        """Away from any fold the neighbors are plain lattice offsets."""
        grid = IcosphereHexGrid.from_edge_length(5)
        assert grid.neighbors((5, 5)) == [(6, 5), (6, 6), (5, 6), (4, 5), (4, 4), (5, 4)]
        assert grid.outer_neighbors((5, 5)) == [(7, 6), (6, 7), (4, 6), (3, 4), (4, 3), (6, 4)]

    @pytest.mark.parametrize("n", [1, 2, 3, 4])
    def test_neighbor_counts(self, n):
        """Five neighbors for a pentagon, six for everything else."""
        grid = IcosphereHexGrid.from_edge_length(n)
        for coord in grid.all_coordinates():
            expected = 5 if grid.is_vertex(coord) else 6
            assert len(grid.neighbors(coord)) == expected, coord

    @pytest.mark.parametrize("n", [1, 2, 3, 4])
    def test_symmetry(self, n):
        """If b neighbors a then a neighbors b."""
        grid = IcosphereHexGrid.from_edge_length(n)
        for coord in grid.all_coordinates():
            for neighbor in grid.neighbors(coord):
                assert coord in grid.neighbors(neighbor), (coord, neighbor)

    def test_neighbors_are_valid(self, grid3):
        for coord in grid3.all_coordinates():
            for neighbor in grid3.neighbors(coord) + grid3.outer_neighbors(coord):
                assert grid3.is_valid(neighbor), (coord, neighbor)

    def test_unresolvable_offset(self, grid3):
        """Stepping into the gap at a vertex is absent, not an error."""
        assert grid3.offset((0, 0), -1, -1) is None

    def test_offset_canonical(self, grid3):
        assert grid3.offset((5, 3), 0, -1) == (6, 2)


class TestOffNet:
    """Test lattice points that are copies of tiles or lie off the net."""

    def test_canonical_copies(self, grid3):
        """Pole copies, eastern polar edges and wrapped longitudes map to one tile."""
        assert grid3.canonical((3, -3)) == (0, 0)
        assert grid3.canonical((2, 4)) == (1, 5)
        assert grid3.canonical((-10, 18)) == (5, 3)
        assert grid3.canonical((5, 3)) == (5, 3)

    @pytest.mark.parametrize("coord", [(99, 99), (5, 2), (-20, -20)])
    def test_off_net(self, grid3, coord):
        """Points in the gaps of the net or beyond the poles are not tiles."""
        assert grid3.canonical(coord) is None
        assert grid3.neighbors(coord) == []
        assert grid3.outer_neighbors(coord) == []
        assert grid3.offset(coord, 1, 0) is None
        assert not grid3.is_vertex(coord)
        assert grid3.within_distance(coord, 2) == []

    def test_off_net_has_no_position(self, grid3):
        with pytest.raises(ValueError):
            grid3.world_position((99, 99))
        with pytest.raises(ValueError):
            grid3.surface_location((5, 2))

    def test_copy_shares_position(self, grid3):
        np.testing.assert_allclose(
            grid3.world_position((-10, 18)), grid3.world_position((5, 3)), atol=1e-9)

    def test_rounds_half_up(self, grid3):
        """Float input snaps to the lattice, halves rounding up."""
        assert grid3.canonical((4.5, 2.5)) == (5, 3)
        assert grid3.neighbors((5.2, 2.9)) == grid3.neighbors((5, 3))


class TestDistance:
    """Test breadth-first hop-distance queries."""

    def test_distance_zero(self, grid3):
        assert grid3.at_distance((5, 3), 0) == [(5, 3)]
        assert grid3.within_distance((5, 3), 0) == [(5, 3)]

    def test_distance_one_is_neighbors(self, grid3):
        assert set(grid3.at_distance((5, 3), 1)) == {
            (6, 3), (6, 2), (6, 4), (5, 4), (4, 3), (4, 2),
        }

    def test_within_is_union_of_rings(self, grid3):
        origin = (5, 3)
        union = {origin} | set(grid3.at_distance(origin, 1)) | set(grid3.at_distance(origin, 2))
        within = grid3.within_distance(origin, 2)
        assert set(within) == union
        assert len(within) == len(union)

    def test_range(self, grid3):
        ring = grid3.within_distance_range((5, 3), 2, 2)
        assert set(ring) == set(grid3.at_distance((5, 3), 2))
        assert len(grid3.at_distance((12, 0), 2)) == 12

    def test_inverted_range_is_empty(self, grid3):
        assert grid3.within_distance_range((5, 3), 2, 1) == []

    def test_negative_distance_is_empty(self, grid3):
        assert grid3.at_distance((5, 3), -1) == []
        assert grid3.within_distance((5, 3), -1) == []

    def test_covers_sphere(self):
        """Far enough out, the whole grid is within reach."""
        grid = IcosphereHexGrid.from_edge_length(2)
        assert len(grid.within_distance((0, 0), 100)) == 122
        assert grid.at_distance((0, 0), 100) == []


class TestWorldPositions:
    """Test placement of tiles on the sphere."""

    @pytest.mark.parametrize("n", [1, 3, 5])
    def test_on_sphere(self, n):
        grid = IcosphereHexGrid.from_edge_length(n)
        radii = np.linalg.norm(grid.world_positions(), axis=1)
        np.testing.assert_allclose(radii, CIRCUMRADIUS, rtol=1e-6)

    def test_batch_shape(self, grid3):
        assert grid3.world_positions().shape == (272, 3)
        assert grid3.world_positions([(5, 3), (0, 0)]).shape == (2, 3)
        assert grid3.world_positions([]).shape == (0, 3)

    def test_distinct(self, grid3):
        positions = grid3.world_positions()
        assert len(np.unique(positions.round(9), axis=0)) == 272

    def test_neighbor_separation(self, grid3):
        """Neighbors sit about 2/(n√3) apart, within 30%."""
        nominal = 2.0 / (3 * np.sqrt(3.0))
        for coord in grid3.all_coordinates():
            origin = grid3.world_position(coord)
            for neighbor in grid3.neighbors(coord):
                distance = np.linalg.norm(grid3.world_position(neighbor) - origin)
                assert distance == pytest.approx(nominal, rel=0.3), (coord, neighbor)

    def test_neighbor_winding(self, grid3):
        """Consecutive neighbors, wrapping around, are adjacent to each other."""
        nominal = 2.0 / (3 * np.sqrt(3.0))
        for coord in grid3.all_coordinates():
            ring = [grid3.world_position(c) for c in grid3.neighbors(coord)]
            for i, position in enumerate(ring):
                distance = np.linalg.norm(ring[(i + 1) % len(ring)] - position)
                assert distance == pytest.approx(nominal, rel=0.3), (coord, i)

    def test_outer_neighbor_separation(self, grid3):
        """Outer neighbors sit about 2/n apart, within 60%."""
        nominal = 2.0 / 3.0
        for coord in grid3.all_coordinates():
            origin = grid3.world_position(coord)
            for outer in grid3.outer_neighbors(coord):
                distance = np.linalg.norm(grid3.world_position(outer) - origin)
                assert distance == pytest.approx(nominal, rel=0.6), (coord, outer)

    def test_outer_neighbor_winding(self, grid3):
        """Consecutive outer neighbors sit about 2/n apart, within 60%."""
        nominal = 2.0 / 3.0
        for coord in grid3.all_coordinates():
            ring = [grid3.world_position(c) for c in grid3.outer_neighbors(coord)]
            for i, position in enumerate(ring):
                distance = np.linalg.norm(ring[(i + 1) % len(ring)] - position)
                assert distance == pytest.approx(nominal, rel=0.6), (coord, i)


class TestTilesFrame:
    """Test the tabular tile view."""

    def test_columns_and_rows(self, grid3):
        frame = grid3.tiles_frame()
        assert list(frame.columns) == [
            'x', 'y', 'band', 'face', 'wx', 'wy', 'wz', 'is_vertex', 'n_neighbors',
        ]
        assert len(frame) == 272

    def test_pentagons(self, grid3):
        frame = grid3.tiles_frame()
        assert frame['is_vertex'].sum() == 12
        assert (frame.loc[frame['is_vertex'], 'n_neighbors'] == 5).all()
        assert (frame.loc[~frame['is_vertex'], 'n_neighbors'] == 6).all()

    def test_bands(self, grid3):
        frame = grid3.tiles_frame()
        assert set(frame['band']) == {
            'polar-south', 'equatorial-south', 'equatorial-north', 'polar-north',
        }
        assert frame['face'].between(0, 4).all()


class TestSummary:
    """Test the logged grid summary."""

    def test_log_grid_summary(self, grid3, caplog):
        with caplog.at_level(logging.INFO, logger="icohex.grid"):
            log_grid_summary(grid3)
        assert "Icosphere Hex Grid" in caplog.text
        assert "Total: 272" in caplog.text
        assert "Pentagons: 12" in caplog.text

    def test_custom_logger(self, grid3, caplog):
        custom = logging.getLogger("icohex.test")
        with caplog.at_level(logging.INFO, logger="icohex.test"):
            log_grid_summary(grid3, logger_instance=custom)
        assert any(r.name == "icohex.test" for r in caplog.records)
