"""
Tilepath CLI - Command-line interface for the engine.

Usage:
    tilepath board [--width W] [--height H] [--players N]   Print a fresh grid
    tilepath demo  [--width W] [--height H] [--break]        Lay a road for player 1
    tilepath serve [--host HOST] [--port PORT]               Run the HTTP API
"""

import argparse
import logging
import sys

from .config import EngineConfig
from .engine_core import TileGrid, TileShape, tile_connectors

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main CLI entry point."""
    config = EngineConfig.from_env()

    parser = argparse.ArgumentParser(
        description="Tilepath - Grid connectivity engine",
        prog="tilepath",
    )
    parser.add_argument(
        "--log-level",
        default=config.log_level,
        help="Logging level (default from TILEPATH_LOG_LEVEL)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Board command
    board_parser = subparsers.add_parser("board", help="Print a fresh grid")
    _add_grid_args(board_parser, config)

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Lay a road for player 1 and check it")
    _add_grid_args(demo_parser, config)
    demo_parser.add_argument(
        "--break", dest="break_road", action="store_true",
        help="Destroy one road tile before checking",
    )
    demo_parser.add_argument("--color", action="store_true", help="Colorize the road")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s: %(message)s")

    if args.command == "board":
        return cmd_board(args)
    elif args.command == "demo":
        return cmd_demo(args)
    elif args.command == "serve":
        return cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def _add_grid_args(sub, config: EngineConfig):
    sub.add_argument("--width", type=int, default=config.grid_width)
    sub.add_argument("--height", type=int, default=config.grid_height)
    sub.add_argument("--players", type=int, default=config.player_count)


def _build_grid(args) -> TileGrid:
    try:
        return TileGrid.create(args.width, args.height, args.players)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)


def lay_demo_road(grid: TileGrid) -> list[tuple[int, int]]:
    """
    Lay tiles from player 1's corner up column 1, then right to the center.

    Returns the coordinates of the placed tiles, in placement order.
    """
    cx, cy = grid.endpoint.coord
    placements = [(1, y, TileShape.STRAIGHT_VERTICAL) for y in range(2, cy)]
    placements.append((1, cy, TileShape.CORNER_DOWN_RIGHT))
    placements += [(x, cy, TileShape.STRAIGHT_HORIZONTAL) for x in range(2, cx)]

    placed = []
    for x, y, shape in placements:
        result = grid.place_tile(x, y, tile_connectors(shape))
        if not result:
            raise RuntimeError(f"Demo tile {shape.value} rejected at ({x}, {y}): {result.message}")
        placed.append((x, y))
    return placed


def cmd_board(args):
    """Print a fresh grid."""
    from .render import render_ascii

    grid = _build_grid(args)
    print(render_ascii(grid))
    return 0


def cmd_demo(args):
    """Lay a road for player 1 and report whether it is complete."""
    from .render import render_ascii

    grid = _build_grid(args)
    placed = lay_demo_road(grid)
    logger.debug("Demo road tiles: %s", placed)
    print(f"Placed {len(placed)} tiles")

    if args.break_road and placed:
        x, y = placed[len(placed) // 2]
        grid.destroy_tile(x, y)
        print(f"Destroyed tile at ({x}, {y})")

    search = grid.find_road(1)
    print(render_ascii(grid, highlight=search.road, color=args.color))
    print(f"\nRoad complete: {search.road_completed}")
    print(f"Checked {len(search.checked_nodes)} nodes")
    return 0 if search.road_completed else 2


def cmd_serve(args):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    from .api import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
