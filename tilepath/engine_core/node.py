"""
Grid Node - A single cell of the tile grid.

Nodes never own each other. Neighbors are stored as coordinates and
resolved through the grid, so the four-way links between cells stay
plain data.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .connectors import ConnectorSet, Direction, DIRECTION_ORDER
from .result import PlacementError

if TYPE_CHECKING:
    from .grid import TileGrid

Coord = tuple[int, int]


def _no_neighbours() -> dict[Direction, Coord | None]:
    return {d: None for d in DIRECTION_ORDER}


@dataclass
class GridNode:
    """
    A cell of the grid.

    Classification flags (`is_edge`, `is_start_point`, `is_endpoint`) are
    fixed at construction. Occupancy lives only in `connectors.occupied`.
    """
    x: int
    y: int
    destructible: bool = True
    is_edge: bool = False
    is_start_point: bool = False
    is_endpoint: bool = False
    start_player: int | None = None

    connectors: ConnectorSet = field(default_factory=ConnectorSet.empty)
    neighbors: dict[Direction, Coord | None] = field(default_factory=_no_neighbours)

    # Road search scratch state
    accessible: tuple[Direction, ...] = ()
    visited: bool = False

    @property
    def coord(self) -> Coord:
        return (self.x, self.y)

    @property
    def filled(self) -> bool:
        return self.connectors.occupied

    def neighbour(self, grid: TileGrid, direction: Direction) -> GridNode | None:
        """Resolve the neighbor in a direction, None if unlinked."""
        coord = self.neighbors[direction]
        if coord is None:
            return None
        return grid.node_at(*coord)

    def check_placement(
        self,
        grid: TileGrid,
        connectors: ConnectorSet,
    ) -> PlacementError | None:
        """
        Check an incoming tile against the neighbors of this cell.

        Every open direction must lead to an in-grid cell. A filled
        neighbor must expose the reciprocal edge; an unfilled one always
        fits. Closed directions are not checked.

        Returns None if the tile fits, otherwise CONNECTOR_MISMATCH.
        """
        for direction in connectors.directions():
            other = self.neighbour(grid, direction)
            if other is None or other.is_edge:
                return PlacementError.CONNECTOR_MISMATCH
            if other.filled and not other.connectors.exposes(direction.opposite):
                return PlacementError.CONNECTOR_MISMATCH
        return None

    def set_accessible_neighbours(self, grid: TileGrid) -> tuple[Direction, ...]:
        """
        Recompute which neighbors a road can continue into.

        A neighbor is accessible when both cells are filled and both
        expose their shared edge.
        """
        accessible = []
        if self.filled:
            for direction in self.connectors.directions():
                other = self.neighbour(grid, direction)
                if other is None or not other.filled:
                    continue
                if other.connectors.exposes(direction.opposite):
                    accessible.append(direction)
        self.accessible = tuple(accessible)
        return self.accessible

    def get_checked(self, grid: TileGrid, came_from: GridNode | None) -> list[GridNode]:
        """
        Visit this node and return where the search goes next.

        Marks the node visited and records it in the grid's checked list.
        Returns accessible, unvisited neighbors in direction order, without
        the node the search arrived from.
        """
        self.visited = True
        grid.checked_nodes.append(self)
        if self.is_endpoint:
            grid.road_completed = True

        next_nodes = []
        for direction in self.set_accessible_neighbours(grid):
            other = self.neighbour(grid, direction)
            if other is came_from or other.visited:
                continue
            next_nodes.append(other)
        return next_nodes

    def clear(self) -> None:
        """Remove the tile on this cell."""
        self.connectors = ConnectorSet.empty()
        self.accessible = ()
