"""
CLI entry point for inspecting an icosphere hex grid.

Usage:
    # Grid closest to a tile count
    python -m icohex --tiles 1000

    # Grid with an explicit edge length, showing the first rows of the tile table
    python -m icohex --edge-length 3 --show 12

    # Include tile spacing checks
    python -m icohex --edge-length 5 --check-separation
"""

import argparse
import logging
import sys

import pandas as pd

from icohex.grid import GridConfig, IcosphereHexGrid, log_grid_summary
from icohex.validation import validate_grid, validate_icosahedron

logger = logging.getLogger(__name__)


def _report(name: str, results: dict) -> None:
    status = "OK" if results['valid'] else "FAILED"
    logger.info(f"{name}: {status}")
    for warning in results['warnings']:
        logger.warning(f"  {warning}")


def main():
    parser = argparse.ArgumentParser(
        description="Build an icosphere hex grid, log its summary and validate it"
    )
    size = parser.add_mutually_exclusive_group(required=True)
    size.add_argument("--tiles", type=int,
                      help="Approximate number of tiles")
    size.add_argument("--edge-length", type=int,
                      help="Tiles along one icosahedron edge")
    parser.add_argument("--show", type=int, default=0,
                        help="Print the first N rows of the tile table")
    parser.add_argument("--check-separation", action="store_true",
                        help="Also check spacing between neighboring tiles")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        config = GridConfig(approx_tile_count=args.tiles, edge_length=args.edge_length)
    except ValueError as e:
        logger.error(f"Invalid grid size: {e}")
        sys.exit(1)

    grid = IcosphereHexGrid(config=config)
    log_grid_summary(grid)

    icosahedron = validate_icosahedron()
    _report("Icosahedron constants", icosahedron)

    results = validate_grid(grid, check_separation=args.check_separation)
    _report(f"Grid n={grid.edge_length}", results)
    if args.check_separation:
        low, high = results['neighbor_spacing_range']
        logger.info(f"  Neighbor spacing: {low:.2f}x - {high:.2f}x nominal")
        low, high = results['outer_spacing_range']
        logger.info(f"  Outer spacing: {low:.2f}x - {high:.2f}x nominal")

    if args.show > 0:
        with pd.option_context('display.max_columns', None, 'display.width', 120):
            print(grid.tiles_frame().head(args.show).to_string(index=False))

    if not (icosahedron['valid'] and results['valid']):
        sys.exit(1)


if __name__ == "__main__":
    main()
