"""
Grid Validation
===============

Structural self-checks for the icosahedron constants and for grid instances.

Validation reports rather than raises: every function returns a dict with a
'valid' flag, a list of human-readable 'warnings' and the measured values,
so callers (the CLI, tests) can decide what to do with a failure.
"""

import logging
from itertools import combinations
from typing import Any, Dict, List, Tuple

import numpy as np

from .geometry.icosahedron import (
    BOTTOM_VERTEX,
    CIRCUMRADIUS,
    EDGE_LENGTH,
    TOP_VERTEX,
    all_vertices,
    lower_vertex,
    upper_vertex,
)
from .grid import IcosphereHexGrid, expected_tile_count

logger = logging.getLogger(__name__)

# Warnings kept per check before the rest are only counted
MAX_WARNINGS_PER_CHECK = 10


def _icosahedron_edges() -> List[Tuple[str, np.ndarray, np.ndarray]]:
    edges = []
    for i in range(5):
        edges.append((f"top-upper[{i}]", TOP_VERTEX, upper_vertex(i)))
        edges.append((f"bottom-lower[{i}]", BOTTOM_VERTEX, lower_vertex(i)))
        edges.append((f"upper[{i}]-upper[{i + 1}]", upper_vertex(i), upper_vertex(i + 1)))
        edges.append((f"lower[{i}]-lower[{i + 1}]", lower_vertex(i), lower_vertex(i + 1)))
        edges.append((f"upper[{i + 1}]-lower[{i}]", upper_vertex(i + 1), lower_vertex(i)))
        edges.append((f"upper[{i + 1}]-lower[{i + 1}]", upper_vertex(i + 1), lower_vertex(i + 1)))
    return edges


def validate_icosahedron(tolerance: float = 1e-6) -> Dict[str, Any]:
    """
    Check the vertex table against a regular icosahedron of edge length 2.

    Every named edge (pole to ring, along each ring, and the zig-zag between
    the rings) must have length 2, every vertex must lie on the
    circumscribed sphere, and no other vertex pair may be that close.

    Args:
        tolerance: Absolute tolerance on lengths

    Returns:
        Validation results with the largest edge and radius deviations
    """
    results = {
        'valid': True,
        'warnings': [],
        'edge_count': 0,
        'max_edge_error': 0.0,
        'max_radius_error': 0.0,
    }

    for name, a, b in _icosahedron_edges():
        error = abs(float(np.linalg.norm(a - b)) - EDGE_LENGTH)
        results['max_edge_error'] = max(results['max_edge_error'], error)
        if error > tolerance:
            results['valid'] = False
            results['warnings'].append(f"Edge {name} deviates from {EDGE_LENGTH} by {error:.2e}")

    vertices = all_vertices()
    radius_errors = np.abs(np.linalg.norm(vertices, axis=1) - CIRCUMRADIUS)
    results['max_radius_error'] = float(radius_errors.max())
    if results['max_radius_error'] > tolerance:
        results['valid'] = False
        results['warnings'].append(
            f"Vertex off the circumscribed sphere by {results['max_radius_error']:.2e}"
        )

    results['edge_count'] = sum(
        1 for a, b in combinations(vertices, 2)
        if abs(float(np.linalg.norm(a - b)) - EDGE_LENGTH) <= tolerance
    )
    if results['edge_count'] != 30:
        results['valid'] = False
        results['warnings'].append(f"Found {results['edge_count']} edges, expected 30")

    return results


def _warn(results: Dict[str, Any], counter: str, message: str) -> None:
    results[counter] += 1
    if results[counter] <= MAX_WARNINGS_PER_CHECK:
        results['warnings'].append(message)


def validate_grid(
    grid: IcosphereHexGrid,
    check_separation: bool = False,
    radius_tolerance: float = 1e-6,
    neighbor_tolerance: float = 0.3,
    outer_tolerance: float = 0.6,
) -> Dict[str, Any]:
    """
    Validate a grid's enumeration, adjacency and world placement.

    Checks:
    - Tile count equals 30n² + 2 with no duplicates
    - Exactly 12 pentagonal tiles, each with 5 neighbors; all others have 6
    - Neighbor relation is symmetric and stays inside the tile set
    - Every world position lies on the circumscribed sphere
    - Optionally, straight-line distance to each neighbor is within
      neighbor_tolerance of 2/(n√3), and to each outer neighbor within
      outer_tolerance of 2/n. The placement is a projection, so these
      tolerances are wide.

    Args:
        grid: Grid to validate
        check_separation: Also measure tile spacing (slower)
        radius_tolerance: Relative tolerance on world position radius
        neighbor_tolerance: Allowed relative deviation of neighbor spacing
        outer_tolerance: Allowed relative deviation of outer-neighbor spacing

    Returns:
        Validation results; 'valid' is False if any check fails
    """
    n = grid.edge_length
    coords = list(grid.all_coordinates())
    expected = expected_tile_count(n)

    results = {
        'valid': True,
        'warnings': [],
        'edge_length': n,
        'tile_count': len(coords),
        'expected_tile_count': expected,
        'vertex_count': 0,
        'bad_neighbor_counts': 0,
        'asymmetric_pairs': 0,
        'invalid_neighbors': 0,
        'max_radius_error': 0.0,
    }

    if len(coords) != expected:
        results['warnings'].append(f"Enumerated {len(coords):,} tiles, expected {expected:,}")
    if len(set(coords)) != len(coords):
        results['warnings'].append(f"{len(coords) - len(set(coords))} duplicate coordinates")

    adjacency = {c: grid.neighbors(c) for c in coords}
    for coord, neighbors in adjacency.items():
        is_vertex = grid.is_vertex(coord)
        results['vertex_count'] += int(is_vertex)
        wanted = 5 if is_vertex else 6
        if len(neighbors) != wanted:
            _warn(results, 'bad_neighbor_counts',
                  f"{coord} has {len(neighbors)} neighbors, expected {wanted}")
        for neighbor in neighbors:
            if neighbor not in adjacency:
                _warn(results, 'invalid_neighbors',
                      f"{coord} reports {neighbor}, which is not a tile")
            elif coord not in adjacency[neighbor]:
                _warn(results, 'asymmetric_pairs',
                      f"{coord} -> {neighbor} is not reciprocated")

    if results['vertex_count'] != 12:
        results['warnings'].append(f"Found {results['vertex_count']} pentagons, expected 12")

    positions = {c: grid.world_position(c) for c in coords}
    radii = np.linalg.norm(np.vstack(list(positions.values())), axis=1)
    results['max_radius_error'] = float(np.max(np.abs(radii / CIRCUMRADIUS - 1.0)))
    if results['max_radius_error'] > radius_tolerance:
        results['warnings'].append(
            f"World positions deviate from the sphere by {results['max_radius_error']:.2e}"
        )

    if check_separation:
        results.update(_separation_stats(grid, coords, positions, adjacency,
                                         neighbor_tolerance, outer_tolerance))
        if results['separation_violations'] > 0:
            results['warnings'].append(
                f"{results['separation_violations']} tile pairs outside spacing tolerance"
            )

    results['valid'] = (
        results['tile_count'] == expected
        and len(set(coords)) == len(coords)
        and results['vertex_count'] == 12
        and results['bad_neighbor_counts'] == 0
        and results['asymmetric_pairs'] == 0
        and results['invalid_neighbors'] == 0
        and results['max_radius_error'] <= radius_tolerance
        and results.get('separation_violations', 0) == 0
    )

    if not results['valid']:
        logger.warning(f"Grid n={n} failed validation with {len(results['warnings'])} warnings")
    return results


def _separation_stats(grid, coords, positions, adjacency,
                      neighbor_tolerance, outer_tolerance) -> Dict[str, Any]:
    n = grid.edge_length
    nominal = 2.0 / (n * np.sqrt(3.0))
    nominal_outer = 2.0 / n

    neighbor_ratios = []
    outer_ratios = []
    violations = 0
    for coord in coords:
        origin = positions[coord]
        for neighbor in adjacency[coord]:
            ratio = float(np.linalg.norm(positions[neighbor] - origin)) / nominal
            neighbor_ratios.append(ratio)
            violations += int(abs(ratio - 1.0) > neighbor_tolerance)
        for outer in grid.outer_neighbors(coord):
            ratio = float(np.linalg.norm(positions[outer] - origin)) / nominal_outer
            outer_ratios.append(ratio)
            violations += int(abs(ratio - 1.0) > outer_tolerance)

    return {
        'separation_violations': violations,
        'neighbor_spacing_range': (min(neighbor_ratios), max(neighbor_ratios)),
        'outer_spacing_range': (min(outer_ratios), max(outer_ratios)),
    }
