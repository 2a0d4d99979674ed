"""
Icosahedral Net Geometry
========================

Geometry underneath the hexagonal sphere grid.

This module provides:
- The fixed vertex table of a regular icosahedron
- Face addressing of global hex coordinates on the unfolded icosahedron net
- Displacement resolution across face boundaries
- Placement of surface locations on the circumscribed sphere

Key Functions:
- locate: Face and local offset of a global coordinate
- resolve: Apply a lattice displacement, crossing faces as needed
- canonical_coordinate: Single representative of a lattice point
- world_coords: 3D position on the sphere
"""

from .icosahedron import (
    # Constants
    GOLDEN_RATIO,
    CIRCUMRADIUS,
    EDGE_LENGTH,
    TOP_VERTEX,
    BOTTOM_VERTEX,
    UPPER_VERTICES,
    LOWER_VERTICES,

    # Vertex lookup
    upper_vertex,
    lower_vertex,
    all_vertices,
)

from .faces import (
    # Types
    Band,
    Face,
    Side,
    Rotation,
    SurfaceLocation,
    HexCoordinate,

    # Tunables
    TIE_BREAK_BIAS,
    BOUNDARY_TOLERANCE,
    MAX_FACE_CROSSINGS,

    # Face addressing
    face_center,
    side_distances,
    locate,
    cross_edge,
    resolve,
    lattice_round,
    to_hex,

    # Canonical coordinates
    canonical_coordinate,
    is_on_net,
    longitude_window,

    # World placement
    barycentric_weights,
    world_coords,
)

__all__ = [
    'GOLDEN_RATIO',
    'CIRCUMRADIUS',
    'EDGE_LENGTH',
    'TOP_VERTEX',
    'BOTTOM_VERTEX',
    'UPPER_VERTICES',
    'LOWER_VERTICES',
    'upper_vertex',
    'lower_vertex',
    'all_vertices',
    'Band',
    'Face',
    'Side',
    'Rotation',
    'SurfaceLocation',
    'HexCoordinate',
    'TIE_BREAK_BIAS',
    'BOUNDARY_TOLERANCE',
    'MAX_FACE_CROSSINGS',
    'face_center',
    'side_distances',
    'locate',
    'cross_edge',
    'resolve',
    'lattice_round',
    'to_hex',
    'canonical_coordinate',
    'is_on_net',
    'longitude_window',
    'barycentric_weights',
    'world_coords',
]
