"""
Road Search - Does a player's start node reach the endpoint?

Depth-first walk over the accessible-neighbor relation with an explicit
stack. Directions are expanded in the fixed order up, right, down, left,
so traces are reproducible. Loops of connected tiles are common; the
per-node visited flag keeps the walk finite.

The search borrows the grid's transient state (`checked_nodes`,
`road_completed`, node `visited` flags) and always resets it before
returning.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
import logging

from .events import NodeRefreshed
from .node import GridNode, Coord

if TYPE_CHECKING:
    from .grid import TileGrid

logger = logging.getLogger(__name__)


@dataclass
class RoadSearchResult:
    """
    Outcome of a road search.

    `checked_nodes` is the visit order. `road` runs from the start node to
    the endpoint along the search tree and is empty when no road exists.
    """
    start: Coord
    road_completed: bool
    checked_nodes: list[Coord] = field(default_factory=list)
    road: list[Coord] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.road_completed


@dataclass
class RoadSearch:
    """Runs road searches over one grid."""
    grid: TileGrid

    def run(self, start: GridNode) -> RoadSearchResult:
        grid = self.grid
        grid.checked_nodes = []
        grid.road_completed = False

        parents: dict[Coord, Coord | None] = {}
        stack: list[tuple[GridNode, GridNode | None]] = [(start, None)]
        try:
            while stack:
                node, came_from = stack.pop()
                if node.visited:
                    continue
                parents[node.coord] = came_from.coord if came_from else None
                next_nodes = node.get_checked(grid, came_from)
                if grid.road_completed:
                    break
                # Reversed so the first direction is expanded first
                for other in reversed(next_nodes):
                    stack.append((other, node))

            result = RoadSearchResult(
                start=start.coord,
                road_completed=grid.road_completed,
                checked_nodes=[n.coord for n in grid.checked_nodes],
            )
            if result.road_completed:
                result.road = self._trace_road(parents, grid.checked_nodes[-1].coord)
        finally:
            self._reset()

        logger.debug(
            "Road search from %s: completed=%s, checked %d nodes",
            start.coord, result.road_completed, len(result.checked_nodes),
        )
        return result

    def _trace_road(self, parents: dict[Coord, Coord | None], end: Coord) -> list[Coord]:
        road = [end]
        current = parents[end]
        while current is not None:
            road.append(current)
            current = parents[current]
        road.reverse()
        return road

    def _reset(self) -> None:
        """Clear visited flags and ask the renderer to redraw each checked node."""
        grid = self.grid
        checked = grid.checked_nodes
        grid.checked_nodes = []
        grid.road_completed = False
        for node in checked:
            node.visited = False
        for node in checked:
            grid.events.emit(NodeRefreshed(x=node.x, y=node.y))
