"""
Face Addressing on the Icosahedral Net
======================================

Maps the global hexagonal lattice onto the twenty triangular faces of an
icosahedron and back, and places lattice points on the circumscribed sphere.

Coordinate conventions:
- Global hex coordinates (x, y): x points towards 10 o'clock, y towards
  2 o'clock. L = x + y is the net latitude (0 at the south pole, 9n at the
  north pole) and M = y - x the net longitude.
- A face is addressed by latitude band and longitude index 0..4. Each band
  has a closed-form linear map from index to face center (see face_center).
- Local coordinates are offsets from the face center in units of edge length.
  Every face keeps the global axis orientation, so only the fold lines
  between neighbouring polar faces need a rotation when crossed.

Side distances of a local point (lx, ly) are z = lx + ly, x = lx - 2ly and
y = ly - 2lx. They sum to zero. A point-down face holds every point whose
distances are all <= 1, a point-up face every point whose distances are
all >= -1.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from .icosahedron import (
    BOTTOM_VERTEX,
    CIRCUMRADIUS,
    TOP_VERTEX,
    lower_vertex,
    upper_vertex,
)

logger = logging.getLogger(__name__)

# Infinitesimal clockwise rotation applied before choosing a face for a
# global coordinate. Points on a fold line are thereby assigned to exactly
# one face, always the same one. Neighbor symmetry depends on its sign.
TIE_BREAK_BIAS = 1e-6

# Slack when comparing side distances against the face bound, so lattice
# points lying exactly on a side stay on the face.
BOUNDARY_TOLERANCE = 1e-9

# Single-edge crossings attempted before a displacement is declared
# unresolvable.
MAX_FACE_CROSSINGS = 4

HexCoordinate = Tuple[int, int]


# ============================================================================
# FACES
# ============================================================================

class Band(Enum):
    """Latitude band of a face, south to north."""

    POLAR_SOUTH = "polar-south"
    EQUATORIAL_SOUTH = "equatorial-south"
    EQUATORIAL_NORTH = "equatorial-north"
    POLAR_NORTH = "polar-north"

    @property
    def points_up(self) -> bool:
        """True when the face apex points towards the north pole."""
        return self in (Band.EQUATORIAL_SOUTH, Band.POLAR_NORTH)


class Side(Enum):
    """Face side, named by the distance that measures it."""

    Z = "z"
    X = "x"
    Y = "y"


SIDES = (Side.Z, Side.X, Side.Y)


@dataclass(frozen=True)
class Face:
    band: Band
    index: int

    def __post_init__(self):
        object.__setattr__(self, "index", self.index % 5)

    def __str__(self) -> str:
        return f"{self.band.value}[{self.index}]"


@dataclass(frozen=True)
class SurfaceLocation:
    """A point on a face, in edge-length units relative to the face center."""

    face: Face
    x: float
    y: float


# (x, y) of the face center, in edge lengths, as a linear function of index
_CENTER_MAPS: Dict[Band, Callable[[int], Tuple[int, int]]] = {
    Band.POLAR_SOUTH: lambda k: (3 - k, k - 1),
    Band.EQUATORIAL_SOUTH: lambda k: (4 - k, k),
    Band.EQUATORIAL_NORTH: lambda k: (5 - k, k),
    Band.POLAR_NORTH: lambda k: (6 - k, k + 1),
}


def face_center(band: Band, index: int, edge_length: int) -> HexCoordinate:
    """
    Global hex coordinate of a face center.

    The index is NOT wrapped: indices outside 0..4 give the center of the
    same face repeated one net-width (10n in longitude) further along, which
    is what locate needs for points near the longitude seam.
    """
    cx, cy = _CENTER_MAPS[band](index)
    return cx * edge_length, cy * edge_length


def side_distances(x: float, y: float) -> Tuple[float, float, float]:
    """Distances (z, x, y) of a local point to the three sides of its face."""
    return x + y, x - 2.0 * y, y - 2.0 * x


# ============================================================================
# ROTATIONS
# ============================================================================

class Rotation(Enum):
    IDENTITY = "identity"
    CCW_60 = "ccw-60"
    CW_60 = "cw-60"


def _identity(a: float, b: float) -> Tuple[float, float]:
    return a, b


def _ccw_60(a: float, b: float) -> Tuple[float, float]:
    return b, b - a


def _cw_60(a: float, b: float) -> Tuple[float, float]:
    return a - b, a


_ROTATIONS: Dict[Rotation, Callable[[float, float], Tuple[float, float]]] = {
    Rotation.IDENTITY: _identity,
    Rotation.CCW_60: _ccw_60,
    Rotation.CW_60: _cw_60,
}


def rotate(rotation: Rotation, a: float, b: float) -> Tuple[float, float]:
    """Rotate a lattice vector by one of the fixed fold rotations."""
    return _ROTATIONS[rotation](a, b)


# ============================================================================
# CROSSINGS
# ============================================================================

@dataclass(frozen=True)
class Crossing:
    """
    How to re-express a point that left a face through one side.

    The neighbouring face, unfolded flat against the current one, has its
    center at `anchor` (local units). The point is shifted by -anchor and
    then turned by `rotation` to match the neighbour's place in the net.
    """

    band: Band
    index_shift: int
    anchor: Tuple[int, int]
    rotation: Rotation


_PS, _ES, _EN, _PN = (
    Band.POLAR_SOUTH,
    Band.EQUATORIAL_SOUTH,
    Band.EQUATORIAL_NORTH,
    Band.POLAR_NORTH,
)

# Polar faces only touch their band neighbours at the fold lines around the
# pole, hence the rotations. Everything else is glued flat in the net.
CROSSINGS: Dict[Tuple[Band, Side], Crossing] = {
    (_PS, Side.Z): Crossing(_ES, 0, (1, 1), Rotation.IDENTITY),
    (_PS, Side.X): Crossing(_PS, -1, (0, -1), Rotation.CW_60),
    (_PS, Side.Y): Crossing(_PS, 1, (-1, 0), Rotation.CCW_60),
    (_ES, Side.Z): Crossing(_PS, 0, (-1, -1), Rotation.IDENTITY),
    (_ES, Side.Y): Crossing(_EN, 0, (1, 0), Rotation.IDENTITY),
    (_ES, Side.X): Crossing(_EN, 1, (0, 1), Rotation.IDENTITY),
    (_EN, Side.Z): Crossing(_PN, 0, (1, 1), Rotation.IDENTITY),
    (_EN, Side.X): Crossing(_ES, -1, (0, -1), Rotation.IDENTITY),
    (_EN, Side.Y): Crossing(_ES, 0, (-1, 0), Rotation.IDENTITY),
    (_PN, Side.Z): Crossing(_EN, 0, (-1, -1), Rotation.IDENTITY),
    (_PN, Side.Y): Crossing(_PN, -1, (1, 0), Rotation.CCW_60),
    (_PN, Side.X): Crossing(_PN, 1, (0, 1), Rotation.CW_60),
}


def exceeded_sides(location: SurfaceLocation) -> List[Side]:
    """Sides of the location's face that the point lies strictly beyond."""
    sign = -1.0 if location.face.band.points_up else 1.0
    limit = 1.0 + BOUNDARY_TOLERANCE
    distances = side_distances(location.x, location.y)
    return [side for side, d in zip(SIDES, distances) if sign * d > limit]


def cross_edge(location: SurfaceLocation, side: Side) -> SurfaceLocation:
    """Re-express a location in the frame of the face across `side`."""
    crossing = CROSSINGS[(location.face.band, side)]
    ax, ay = crossing.anchor
    x, y = rotate(crossing.rotation, location.x - ax, location.y - ay)
    face = Face(crossing.band, location.face.index + crossing.index_shift)
    return SurfaceLocation(face, x, y)


def resolve(location: SurfaceLocation, dx: float, dy: float,
            edge_length: int) -> Optional[SurfaceLocation]:
    """
    Apply a lattice displacement (dx, dy) to a surface location.

    Crosses one face side at a time until the point settles on a face.
    Returns None when the point lies beyond two sides at once (it would
    land in the gap the net leaves around a vertex) or does not settle
    within MAX_FACE_CROSSINGS crossings; callers should then split the
    displacement into smaller steps.
    """
    current = SurfaceLocation(
        location.face,
        location.x + dx / edge_length,
        location.y + dy / edge_length,
    )
    for _ in range(MAX_FACE_CROSSINGS + 1):
        sides = exceeded_sides(current)
        if not sides:
            return current
        if len(sides) > 1:
            logger.debug(
                f"Displacement ({dx}, {dy}) from {location.face} leaves "
                f"{current.face} through {len(sides)} sides at once"
            )
            return None
        current = cross_edge(current, sides[0])

    logger.debug(
        f"Displacement ({dx}, {dy}) from {location.face} did not settle "
        f"after {MAX_FACE_CROSSINGS} crossings"
    )
    return None


# ============================================================================
# GLOBAL COORDINATES
# ============================================================================

def _face_index(longitude: float, offset: int) -> int:
    # Nearest face center along a band whose centers sit at 2(k - 2) + offset
    return math.floor((longitude - offset + 1.0) / 2.0) + 2


def locate(coord: HexCoordinate, edge_length: int,
           bias: float = TIE_BREAK_BIAS) -> SurfaceLocation:
    """
    Face and local offset of a global hex coordinate.

    The band and index are chosen on a copy of the point rotated by `bias`,
    so that points on a fold line consistently fall to one side of it. The
    returned offset is computed from the unrotated point.
    """
    x, y = coord
    n = float(edge_length)
    bx = (x + bias * y) / n
    by = (y - bias * x) / n
    latitude = bx + by
    longitude = by - bx

    if latitude < 3.0:
        band, index = Band.POLAR_SOUTH, _face_index(longitude, 0)
    elif latitude > 6.0:
        band, index = Band.POLAR_NORTH, _face_index(longitude, -1)
    else:
        index = _face_index(longitude, 0)
        offset = longitude - 2.0 * (index - 2)
        if 3.0 * abs(offset) <= 6.0 - latitude:
            band = Band.EQUATORIAL_SOUTH
        else:
            band, index = Band.EQUATORIAL_NORTH, _face_index(longitude, -1)

    cx, cy = face_center(band, index, edge_length)
    return SurfaceLocation(Face(band, index), (x - cx) / n, (y - cy) / n)


def lattice_round(value: float) -> int:
    """Round half-up to the nearest lattice index."""
    return int(math.floor(value + 0.5))


def to_hex(location: SurfaceLocation, edge_length: int) -> HexCoordinate:
    """Nearest global lattice point for a surface location (not canonicalised)."""
    cx, cy = face_center(location.face.band, location.face.index, edge_length)
    return (
        lattice_round(cx + location.x * edge_length),
        lattice_round(cy + location.y * edge_length),
    )


def _signed_mod(value: int, base: int) -> int:
    # Wrap into [-base/2, base/2)
    half = base // 2
    return (value + half) % base - half


def longitude_window(latitude: int, edge_length: int) -> Tuple[int, int]:
    """Inclusive net longitude range covered at a given latitude."""
    n = edge_length
    low = -4 * n - latitude // 3
    return low, low + 10 * n - 1


def is_on_net(coord: HexCoordinate, edge_length: int) -> bool:
    """True if the coordinate is the canonical representative of a tile."""
    x, y = coord
    n = edge_length
    latitude, longitude = x + y, y - x
    top = 9 * n

    if latitude == 0:
        return longitude == 0
    if latitude == top:
        return longitude == -n
    if latitude < 0 or latitude > top:
        return False
    low, high = longitude_window(latitude, n)
    if not low <= longitude <= high:
        return False
    if latitude < 3 * n:
        offset = _signed_mod(longitude, 2 * n)
        return -latitude <= 3 * offset < latitude
    if latitude > 6 * n:
        offset = _signed_mod(longitude - n, 2 * n)
        return -(top - latitude) <= 3 * offset < top - latitude
    return True


def canonical_coordinate(coord: HexCoordinate, edge_length: int) -> HexCoordinate:
    """
    Canonical representative of a lattice point lying on some face.

    Both poles collapse onto the central face of their band, a point on the
    eastern edge of a polar face moves onto the western edge of the next
    face, and the longitude wraps into the net window.
    """
    x, y = coord
    n = edge_length
    latitude, longitude = x + y, y - x
    top = 9 * n

    if latitude <= 0:
        return 0, 0
    if latitude >= top:
        return 5 * n, 4 * n

    if latitude < 3 * n:
        offset = _signed_mod(longitude, 2 * n)
        if 3 * offset >= latitude:
            longitude += 2 * n - 2 * offset
    elif latitude > 6 * n:
        offset = _signed_mod(longitude - n, 2 * n)
        if 3 * offset >= top - latitude:
            longitude += 2 * n - 2 * offset

    low, _ = longitude_window(latitude, n)
    longitude = low + (longitude - low) % (10 * n)
    return (latitude - longitude) // 2, (latitude + longitude) // 2


# ============================================================================
# WORLD POSITIONS
# ============================================================================

def _anchor_vertices(face: Face) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    # Icosahedron vertices opposite the z, x and y sides of the face
    k = face.index
    band = face.band
    if band is Band.POLAR_SOUTH:
        return BOTTOM_VERTEX, lower_vertex(k + 1), lower_vertex(k)
    if band is Band.EQUATORIAL_SOUTH:
        return upper_vertex(k + 1), lower_vertex(k), lower_vertex(k + 1)
    if band is Band.EQUATORIAL_NORTH:
        return lower_vertex(k), upper_vertex(k + 1), upper_vertex(k)
    return TOP_VERTEX, upper_vertex(k), upper_vertex(k + 1)


def barycentric_weights(location: SurfaceLocation) -> Tuple[float, float, float]:
    """Weights of the vertices opposite the z, x and y sides; they sum to 1."""
    sign = -1.0 if location.face.band.points_up else 1.0
    return tuple((1.0 - sign * d) / 3.0 for d in side_distances(location.x, location.y))


def world_coords(location: SurfaceLocation) -> np.ndarray:
    """
    3D position of a surface location on the circumscribed sphere.

    Interpolates between the face's three icosahedron vertices and projects
    the result radially. This is not an equal-area placement: tiles near
    face corners end up measurably closer together than mid-face tiles.
    """
    anchors = _anchor_vertices(location.face)
    weights = barycentric_weights(location)
    point = sum(w * v for w, v in zip(weights, anchors))
    return point * (CIRCUMRADIUS / np.linalg.norm(point))
