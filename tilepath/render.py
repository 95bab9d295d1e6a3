"""
ASCII rendering of a tile grid.

One character per cell, top row is the highest y. Border cells are drawn
as '#', empty cells as '.', tiles with box-drawing characters for their
open edges. Cells on a found road can be colorized.
"""

from __future__ import annotations
from typing import Iterable

import simple_chalk as chalk  # type: ignore[import-untyped]

from .engine_core import ConnectorSet, Direction, TileGrid

EDGE_CHAR = "#"
EMPTY_CHAR = "."
CLOSED_CHAR = "■"

_U, _R, _D, _L = Direction.UP, Direction.RIGHT, Direction.DOWN, Direction.LEFT

_GLYPHS: dict[frozenset, str] = {
    frozenset({_U, _R, _D, _L}): "┼",
    frozenset({_U, _D}): "│",
    frozenset({_L, _R}): "─",
    frozenset({_U, _R}): "└",
    frozenset({_U, _L}): "┘",
    frozenset({_D, _R}): "┌",
    frozenset({_D, _L}): "┐",
    frozenset({_U, _L, _R}): "┴",
    frozenset({_D, _L, _R}): "┬",
    frozenset({_U, _D, _L}): "┤",
    frozenset({_U, _D, _R}): "├",
    frozenset({_U}): "╵",
    frozenset({_R}): "╶",
    frozenset({_D}): "╷",
    frozenset({_L}): "╴",
}


def glyph_for(connectors: ConnectorSet) -> str:
    """Character for a connector set."""
    if not connectors.occupied:
        return EMPTY_CHAR
    if not connectors.any_direction:
        return CLOSED_CHAR
    return _GLYPHS[frozenset(connectors.directions())]


def render_ascii(
    grid: TileGrid,
    highlight: Iterable[tuple[int, int]] = (),
    color: bool = False,
) -> str:
    """
    Render the grid, border included.

    Args:
        grid: a linked grid
        highlight: coordinates to colorize (e.g. a road)
        color: emit ANSI colors; off by default so output stays plain
    """
    highlighted = set(highlight)
    lines = []
    for y in range(grid.height + 1, -1, -1):
        row = []
        for x in range(grid.width + 2):
            node = grid.node_at(x, y)
            if node.is_edge:
                char = EDGE_CHAR
            else:
                char = glyph_for(node.connectors)
            if color:
                if (x, y) in highlighted:
                    char = chalk.greenBright(char)
                elif node.is_endpoint:
                    char = chalk.yellow(char)
                elif node.is_start_point:
                    char = chalk.cyan(char)
                elif node.is_edge:
                    char = chalk.white(char)
            row.append(char)
        lines.append("".join(row))
    return "\n".join(lines)
