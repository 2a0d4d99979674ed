"""
Unit tests for grid validation reports.
"""

import pytest

from icohex import IcosphereHexGrid, validate_grid


class _NoNeighborsGrid(IcosphereHexGrid):
    def neighbors(self, coord):
        return []


class _OneWayGrid(IcosphereHexGrid):
    def neighbors(self, coord):
        found = super().neighbors(coord)
        if coord == (0, 0):
            return found
        return [c for c in found if c != (0, 0)]


class TestValidateGrid:
    """Test validation of healthy grids."""

    @pytest.mark.parametrize("n", [1, 2, 3])
    def test_valid(self, n):
        results = validate_grid(IcosphereHexGrid.from_edge_length(n))
        assert results['valid'], results['warnings']
        assert results['tile_count'] == results['expected_tile_count'] == 30 * n * n + 2
        assert results['vertex_count'] == 12
        assert results['asymmetric_pairs'] == 0
        assert results['bad_neighbor_counts'] == 0
        assert results['max_radius_error'] < 1e-9

    def test_separation(self):
        results = validate_grid(IcosphereHexGrid.from_edge_length(3), check_separation=True)
        assert results['valid'], results['warnings']
        assert results['separation_violations'] == 0
        low, high = results['neighbor_spacing_range']
        assert 0.7 <= low <= high <= 1.3

    def test_separation_skipped_by_default(self):
        results = validate_grid(IcosphereHexGrid.from_edge_length(2))
        assert 'separation_violations' not in results


class TestValidateBrokenGrid:
    """Test that validation reports rather than raises."""

    def test_missing_neighbors(self):
        results = validate_grid(_NoNeighborsGrid.from_edge_length(2))
        assert not results['valid']
        assert results['bad_neighbor_counts'] == 122
        assert len(results['warnings']) <= 11

    def test_asymmetric(self):
        """Dropping the pole from its neighbors' lists breaks symmetry."""
        results = validate_grid(_OneWayGrid.from_edge_length(2))
        assert not results['valid']
        assert results['asymmetric_pairs'] == 5
