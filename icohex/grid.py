"""
Icosphere Hex Grid
==================

Public facade of the hexagonal sphere grid: sizing, enumeration, coordinate
conversion, neighbor and hop-distance queries.

A grid is defined by its edge length n, the number of tiles along one
icosahedron edge. It holds 30n² + 2 tiles: 20 faces of 1.5n² hexagons each,
plus the 12 pentagons on the icosahedron vertices, which count as the area
of 10 hexagons together.

Key Functions:
- edge_length_for: Edge length giving approximately a requested tile count
- expected_tile_count: 30n² + 2
- IcosphereHexGrid: the grid itself
- log_grid_summary: Boxed log summary of a grid

Example:
    >>> grid = IcosphereHexGrid.from_edge_length(3)
    >>> sorted(grid.neighbors((5, 3)))
    [(4, 2), (4, 3), (5, 4), (6, 2), (6, 3), (6, 4)]
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple

import numpy as np
import pandas as pd

from .geometry.faces import (
    TIE_BREAK_BIAS,
    HexCoordinate,
    SurfaceLocation,
    canonical_coordinate,
    exceeded_sides,
    is_on_net,
    lattice_round,
    locate,
    longitude_window,
    resolve,
    to_hex,
    world_coords,
)

logger = logging.getLogger(__name__)

# Clockwise starting at 10 o'clock
NEIGHBOR_OFFSETS: Tuple[HexCoordinate, ...] = (
    (1, 0), (1, 1), (0, 1), (-1, 0), (-1, -1), (0, -1),
)

# Second ring, the tiles sharing a neighbor pair with the origin
OUTER_NEIGHBOR_OFFSETS: Tuple[HexCoordinate, ...] = (
    (2, 1), (1, 2), (-1, 1), (-2, -1), (-1, -2), (1, -1),
)

FRAME_COLUMNS = ['x', 'y', 'band', 'face', 'wx', 'wy', 'wz', 'is_vertex', 'n_neighbors']


# ============================================================================
# SIZING
# ============================================================================

def expected_tile_count(edge_length: int) -> int:
    """
    Number of tiles on a grid with the given edge length.

    Formula: 20 · 1.5n² + 2 = 30n² + 2

    Examples:
        - n=1: 32 tiles
        - n=3: 272 tiles
        - n=10: 3,002 tiles
    """
    if edge_length < 1:
        raise ValueError(f"Edge length must be >= 1, got {edge_length}")
    return 30 * edge_length ** 2 + 2


def edge_length_for(approx_tile_count: int) -> int:
    """
    Edge length whose grid comes closest to a desired tile count.

    Inverts tile_count ≈ 20 · 1.5n² and rounds to the nearest integer,
    never below 1: any positive count gets at least the 32-tile grid.

    Args:
        approx_tile_count: Desired number of tiles

    Returns:
        Nearest edge length

    Raises:
        ValueError: If approx_tile_count is not positive
    """
    if approx_tile_count <= 0:
        raise ValueError(f"Tile count must be positive, got {approx_tile_count}")
    return max(1, lattice_round(math.sqrt((2.0 / 3.0) * approx_tile_count / 20.0)))


@dataclass
class GridConfig:
    """Configuration for an icosphere hex grid."""

    approx_tile_count: Optional[int] = None
    edge_length: Optional[int] = None

    # Clockwise rotation applied when picking the face of a coordinate
    tie_break_bias: float = TIE_BREAK_BIAS

    def __post_init__(self):
        if self.edge_length is None:
            if self.approx_tile_count is None:
                raise ValueError("Either approx_tile_count or edge_length is required")
            self.edge_length = edge_length_for(self.approx_tile_count)
        if self.edge_length < 1:
            raise ValueError(
                f"Edge length must be >= 1, got {self.edge_length}"
                + (f" (from tile count {self.approx_tile_count})"
                   if self.approx_tile_count is not None else "")
            )
        self.edge_length = int(self.edge_length)


# ============================================================================
# GRID
# ============================================================================

class IcosphereHexGrid:
    """
    Hexagonal tiling of an icosahedron-approximated sphere.

    Coordinates are integer pairs on a global planar hex lattice laid over the
    unfolded icosahedron net. Every query is a pure function of the edge
    length and its arguments; the only instance state besides the
    configuration is a lazily built set of valid coordinates.
    """

    def __init__(self, approx_tile_count: Optional[int] = None,
                 config: Optional[GridConfig] = None):
        if config is not None and approx_tile_count is not None:
            raise ValueError("Pass either approx_tile_count or config, not both")
        self._config = config if config is not None else GridConfig(
            approx_tile_count=approx_tile_count)
        self._valid: Optional[FrozenSet[HexCoordinate]] = None
        logger.debug(
            f"Created grid with edge length {self.edge_length} "
            f"({self.tile_count:,} tiles)"
        )

    @classmethod
    def from_edge_length(cls, edge_length: int,
                         tie_break_bias: float = TIE_BREAK_BIAS) -> "IcosphereHexGrid":
        return cls(config=GridConfig(edge_length=edge_length,
                                     tie_break_bias=tie_break_bias))

    def __repr__(self) -> str:
        return f"IcosphereHexGrid(edge_length={self.edge_length}, tiles={self.tile_count})"

    @property
    def config(self) -> GridConfig:
        return self._config

    @property
    def edge_length(self) -> int:
        return self._config.edge_length

    @property
    def tile_count(self) -> int:
        return expected_tile_count(self.edge_length)

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------

    def all_coordinates(self) -> Iterator[HexCoordinate]:
        """
        Yield every valid coordinate exactly once.

        Order: south pole, then by net latitude and within a latitude by net
        longitude, then north pole. Calling again restarts the enumeration.
        """
        n = self.edge_length
        yield 0, 0
        for latitude in range(1, 9 * n):
            low, high = longitude_window(latitude, n)
            # x and y are integers only when latitude and longitude share parity
            start = low + ((latitude + low) % 2)
            for longitude in range(start, high + 1, 2):
                coord = ((latitude - longitude) // 2, (latitude + longitude) // 2)
                if is_on_net(coord, n):
                    yield coord
        yield 5 * n, 4 * n

    def is_valid(self, coord: HexCoordinate) -> bool:
        """True if coord is one of the enumerated tile coordinates."""
        if self._valid is None:
            self._valid = frozenset(self.all_coordinates())
        return tuple(coord) in self._valid

    def is_vertex(self, coord: HexCoordinate) -> bool:
        """True for the twelve pentagonal tiles on icosahedron vertices."""
        tile = self.canonical(coord)
        if tile is None:
            return False
        n = self.edge_length
        x, y = tile
        return x % n == 0 and y % n == 0 and (x + y) % (3 * n) == 0

    def vertex_coordinates(self) -> List[HexCoordinate]:
        return [c for c in self.all_coordinates() if self.is_vertex(c)]

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    @staticmethod
    def _lattice(coord: HexCoordinate) -> HexCoordinate:
        x, y = coord
        return lattice_round(x), lattice_round(y)

    def _net_location(self, coord: HexCoordinate) -> Optional[SurfaceLocation]:
        # None for lattice points in the gaps of the net or beyond the poles
        location = locate(self._lattice(coord), self.edge_length,
                          bias=self._config.tie_break_bias)
        if exceeded_sides(location):
            return None
        return location

    def canonical(self, coord: HexCoordinate) -> Optional[HexCoordinate]:
        """
        Tile coordinate of any lattice point lying on the net.

        Copies of a tile (a pole seen from another polar face, the eastern
        edge of a polar face, a point one net width further along) map to the
        single enumerated coordinate. Points off the net give None.
        """
        if self._net_location(coord) is None:
            return None
        return canonical_coordinate(self._lattice(coord), self.edge_length)

    def surface_location(self, coord: HexCoordinate) -> SurfaceLocation:
        """
        Face and local offset of a coordinate.

        Raises:
            ValueError: If coord lies off the net
        """
        location = self._net_location(coord)
        if location is None:
            raise ValueError(f"{coord} is not on the grid with edge length {self.edge_length}")
        return location

    def world_position(self, coord: HexCoordinate) -> np.ndarray:
        """3D position of a tile center on the circumscribed sphere."""
        return world_coords(self.surface_location(coord))

    def world_positions(self, coords: Optional[Iterable[HexCoordinate]] = None) -> np.ndarray:
        """
        World positions of many tiles as an (N, 3) array.

        Args:
            coords: Coordinates to place (default: all tiles in enumeration order)
        """
        if coords is None:
            coords = self.all_coordinates()
        positions = [self.world_position(c) for c in coords]
        if not positions:
            return np.empty((0, 3), dtype=np.float64)
        return np.vstack(positions)

    # ------------------------------------------------------------------
    # Adjacency
    # ------------------------------------------------------------------

    def offset(self, coord: HexCoordinate, dx: float, dy: float) -> Optional[HexCoordinate]:
        """
        Coordinate reached by a lattice displacement from coord.

        Returns None when coord is off the net, or when the displacement cannot
        be resolved by crossing one face side at a time (too large, or
        straight into the gap around a vertex). Neighbor-sized displacements
        always resolve or are skipped by the neighbor queries.
        """
        n = self.edge_length
        location = self._net_location(coord)
        if location is None:
            return None
        moved = resolve(location, dx, dy, n)
        if moved is None:
            return None
        return canonical_coordinate(to_hex(moved, n), n)

    def _offsets(self, coord: HexCoordinate,
                 displacements: Tuple[HexCoordinate, ...]) -> List[HexCoordinate]:
        origin = self.canonical(coord)
        if origin is None:
            return []
        found: List[HexCoordinate] = []
        for dx, dy in displacements:
            target = self.offset(coord, dx, dy)
            if target is None or target == origin or target in found:
                continue
            found.append(target)
        return found

    def neighbors(self, coord: HexCoordinate) -> List[HexCoordinate]:
        """
        Adjacent tiles, in clockwise order.

        Six for a hexagon, five for a pentagon on an icosahedron vertex, none
        for a coordinate off the net.
        """
        return self._offsets(coord, NEIGHBOR_OFFSETS)

    def outer_neighbors(self, coord: HexCoordinate) -> List[HexCoordinate]:
        """Tiles of the second ring that sit between two neighbors."""
        return self._offsets(coord, OUTER_NEIGHBOR_OFFSETS)

    # ------------------------------------------------------------------
    # Hop distance
    # ------------------------------------------------------------------

    def _rings(self, origin: HexCoordinate) -> Iterator[List[HexCoordinate]]:
        # Breadth-first rings; ring k holds the tiles exactly k hops away
        start = self.canonical(origin)
        if start is None:
            return
        seen = {start}
        ring = [start]
        while ring:
            yield ring
            next_ring = []
            for coord in ring:
                for neighbor in self.neighbors(coord):
                    if neighbor not in seen:
                        seen.add(neighbor)
                        next_ring.append(neighbor)
            ring = next_ring

    def within_distance_range(self, origin: HexCoordinate,
                              min_distance: int, max_distance: int) -> List[HexCoordinate]:
        """
        Tiles whose hop distance from origin lies in [min_distance, max_distance].

        An inverted range, one entirely below zero, or an origin off the net
        gives an empty list. Results are in breadth-first order.
        """
        if min_distance > max_distance or max_distance < 0:
            return []
        found: List[HexCoordinate] = []
        for distance, ring in enumerate(self._rings(origin)):
            if distance > max_distance:
                break
            if distance >= min_distance:
                found.extend(ring)
        return found

    def at_distance(self, origin: HexCoordinate, distance: int) -> List[HexCoordinate]:
        return self.within_distance_range(origin, distance, distance)

    def within_distance(self, origin: HexCoordinate, distance: int) -> List[HexCoordinate]:
        return self.within_distance_range(origin, 0, distance)

    # ------------------------------------------------------------------
    # Tabular view
    # ------------------------------------------------------------------

    def tiles_frame(self) -> pd.DataFrame:
        """
        One row per tile with face addressing and world position.

        Columns: x, y, band, face, wx, wy, wz, is_vertex, n_neighbors
        """
        rows = []
        for coord in self.all_coordinates():
            location = self.surface_location(coord)
            wx, wy, wz = world_coords(location)
            rows.append({
                'x': coord[0],
                'y': coord[1],
                'band': location.face.band.value,
                'face': location.face.index,
                'wx': wx,
                'wy': wy,
                'wz': wz,
                'is_vertex': self.is_vertex(coord),
                'n_neighbors': len(self.neighbors(coord)),
            })
        return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def log_grid_summary(grid: IcosphereHexGrid,
                     logger_instance: Optional[logging.Logger] = None) -> None:
    """
    Log a summary of a grid's size and face layout.

    Args:
        grid: Grid to summarize
        logger_instance: Logger to use (default: module logger)
    """
    log = logger_instance or logger

    n = grid.edge_length
    per_band: Dict[str, int] = {}
    for coord in grid.all_coordinates():
        band = grid.surface_location(coord).face.band.value
        per_band[band] = per_band.get(band, 0) + 1

    log.info("="*60)
    log.info("Icosphere Hex Grid")
    log.info("="*60)
    log.info(f"Configuration:")
    log.info(f"  Edge length: {n}")
    if grid.config.approx_tile_count is not None:
        log.info(f"  Requested tiles: {grid.config.approx_tile_count:,}")
    log.info(f"  Tie-break bias: {grid.config.tie_break_bias:g}")
    log.info(f"")
    log.info(f"Tiles:")
    log.info(f"  Total: {grid.tile_count:,}")
    log.info(f"  Pentagons: {len(grid.vertex_coordinates())}")
    log.info(f"  Hexagons: {grid.tile_count - 12:,}")
    log.info(f"  Nominal spacing: {2.0 / (n * math.sqrt(3.0)):.4f}")
    log.info(f"")
    log.info(f"By Band:")
    for band, count in per_band.items():
        log.info(f"  {band}: {count:,} tiles")
    log.info("="*60)
