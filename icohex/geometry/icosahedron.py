"""
Icosahedron Constants
=====================

Vertex table of a regular icosahedron with edge length 2, centred on the
origin with one vertex on each pole of the z axis.

Layout:
- TOP_VERTEX / BOTTOM_VERTEX: the north and south poles
- UPPER_VERTICES: the ring of five vertices adjacent to the north pole
- LOWER_VERTICES: the ring of five vertices adjacent to the south pole

Ring index i of the upper ring sits between lower vertices i - 1 and i, so
upper[i] is joined by an edge to lower[i - 1] and lower[i] (indices mod 5).

All arrays are read-only and shared by every grid instance.
"""

import math

import numpy as np

# Standard mathematical quantity
GOLDEN_RATIO = (1.0 + math.sqrt(5.0)) / 2.0

# Radius of the sphere passing through every vertex
CIRCUMRADIUS = math.sqrt(GOLDEN_RATIO + 2.0)

EDGE_LENGTH = 2.0


def _frozen(values) -> np.ndarray:
    array = np.array(values, dtype=np.float64)
    array.setflags(write=False)
    return array


def _upper_ring() -> np.ndarray:
    phi, r = GOLDEN_RATIO, CIRCUMRADIUS
    height = phi / r
    return _frozen([
        (1.0 / r, -phi, height),
        (-(phi + 1.0) / r, -1.0, height),
        (-(phi + 1.0) / r, 1.0, height),
        (1.0 / r, phi, height),
        (2.0 * phi / r, 0.0, height),
    ])


def _lower_ring() -> np.ndarray:
    phi, r = GOLDEN_RATIO, CIRCUMRADIUS
    height = -phi / r
    return _frozen([
        (-1.0 / r, -phi, height),
        (-2.0 * phi / r, 0.0, height),
        (-1.0 / r, phi, height),
        ((phi + 1.0) / r, 1.0, height),
        ((phi + 1.0) / r, -1.0, height),
    ])


TOP_VERTEX = _frozen((0.0, 0.0, CIRCUMRADIUS))
BOTTOM_VERTEX = _frozen((0.0, 0.0, -CIRCUMRADIUS))
UPPER_VERTICES = _upper_ring()
LOWER_VERTICES = _lower_ring()


def upper_vertex(index: int) -> np.ndarray:
    """Upper-ring vertex by longitude index (wrapped mod 5)."""
    return UPPER_VERTICES[index % 5]


def lower_vertex(index: int) -> np.ndarray:
    """Lower-ring vertex by longitude index (wrapped mod 5)."""
    return LOWER_VERTICES[index % 5]


def all_vertices() -> np.ndarray:
    """All 12 vertices as a (12, 3) array: top, upper ring, lower ring, bottom."""
    return np.vstack([TOP_VERTEX, UPPER_VERTICES, LOWER_VERTICES, BOTTOM_VERTEX])
