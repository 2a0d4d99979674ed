"""
icohex: hexagonal tiling of a sphere built on an unfolded icosahedron.

Every tile is a hexagon except the twelve pentagons sitting on the
icosahedron vertices.
"""

from .grid import (
    IcosphereHexGrid,
    GridConfig,
    edge_length_for,
    expected_tile_count,
    log_grid_summary,
)
from .validation import validate_grid, validate_icosahedron

__version__ = "0.1.0"

__all__ = [
    'IcosphereHexGrid',
    'GridConfig',
    'edge_length_for',
    'expected_tile_count',
    'log_grid_summary',
    'validate_grid',
    'validate_icosahedron',
]
