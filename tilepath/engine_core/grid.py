"""
Tile Grid - Owns the nodes and mediates every placement.

Layout:
- width x height playable cells at x in [1, width], y in [1, height]
- a one-cell border ring at index 0 and index size + 1
- one start node per player on the interior corners
- the endpoint in the center, open on all four sides

Lifecycle (two-pass, once per round):
1. instantiate_new_grid() allocates and classifies every node
2. set_neighbours_of_nodes() links neighbors by coordinate
After that the grid accepts place/destroy/move and road queries.

The grid is single-writer. A road search mutates per-node scratch flags
and must not overlap with another search or a mutation.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .connectors import ConnectorSet, DIRECTION_ORDER
from .events import EventHub, GridListener, TileDestroyed, TileMoved, TilePlaced
from .node import Coord, GridNode
from .result import GridResult, GridStateError, PlacementError
from .road_search import RoadSearch, RoadSearchResult

logger = logging.getLogger(__name__)

MIN_SIZE = 3
MAX_PLAYERS = 4


@dataclass(frozen=True)
class NodeSnapshot:
    """Read-only view of a node for rendering."""
    x: int
    y: int
    filled: bool
    destructible: bool
    is_edge: bool
    is_start_point: bool
    is_endpoint: bool
    start_player: int | None
    connectors: ConnectorSet


def start_corners(width: int, height: int) -> list[tuple[Coord, ConnectorSet]]:
    """Start node position and connectors for players 1-4, in player order."""
    up, right, down, left = DIRECTION_ORDER
    return [
        ((1, 1), ConnectorSet.from_directions(up, right)),
        ((width, 1), ConnectorSet.from_directions(up, left)),
        ((1, height), ConnectorSet.from_directions(down, right)),
        ((width, height), ConnectorSet.from_directions(down, left)),
    ]


def center_of(width: int, height: int) -> Coord:
    return ((width + 1) // 2, (height + 1) // 2)


@dataclass
class TileGrid:
    """
    The board of one round.

    Usage:
        grid = TileGrid.create(5, 5, player_count=4)
        grid.place_tile(1, 2, tile_connectors(TileShape.STRAIGHT_VERTICAL))
        grid.complete_road(1)
    """
    width: int = 0
    height: int = 0
    player_count: int = 0

    events: EventHub = field(default_factory=EventHub)

    _nodes: dict[Coord, GridNode] | None = None
    _player_start_nodes: list[GridNode] = field(default_factory=list)
    _endpoint: GridNode | None = None
    _linked: bool = False

    # Road search scratch state, empty between queries
    checked_nodes: list[GridNode] = field(default_factory=list)
    road_completed: bool = False

    @classmethod
    def create(cls, width: int, height: int, player_count: int = MAX_PLAYERS) -> TileGrid:
        """Allocate and link a grid, ready for play."""
        grid = cls()
        grid.instantiate_new_grid(width, height, player_count)
        grid.set_neighbours_of_nodes()
        return grid

    # =========================================================================
    # Construction
    # =========================================================================

    def instantiate_new_grid(self, width: int, height: int, player_count: int) -> None:
        """
        Allocate (width + 2) x (height + 2) nodes and classify them.

        Raises:
            ValueError: grid smaller than 3x3, or player count not in 1..4
        """
        if width < MIN_SIZE or height < MIN_SIZE:
            raise ValueError(
                f"Grid must be at least {MIN_SIZE}x{MIN_SIZE}, got {width}x{height}"
            )
        if not 1 <= player_count <= MAX_PLAYERS:
            raise ValueError(
                f"Player count must be between 1 and {MAX_PLAYERS}, got {player_count}"
            )

        self.width = width
        self.height = height
        self.player_count = player_count
        self._linked = False

        nodes: dict[Coord, GridNode] = {}
        for x in range(width + 2):
            for y in range(height + 2):
                is_edge = x in (0, width + 1) or y in (0, height + 1)
                nodes[(x, y)] = GridNode(
                    x=x,
                    y=y,
                    destructible=not is_edge,
                    is_edge=is_edge,
                )

        starts = []
        for player, (coord, connectors) in enumerate(start_corners(width, height)[:player_count], 1):
            node = nodes[coord]
            node.connectors = connectors
            node.destructible = False
            node.is_start_point = True
            node.start_player = player
            starts.append(node)

        endpoint = nodes[center_of(width, height)]
        endpoint.connectors = ConnectorSet.from_directions(*DIRECTION_ORDER)
        endpoint.destructible = False
        endpoint.is_endpoint = True

        self._nodes = nodes
        self._player_start_nodes = starts
        self._endpoint = endpoint
        logger.info(
            "Allocated %dx%d grid for %d players, endpoint at %s",
            width, height, player_count, endpoint.coord,
        )

    def set_neighbours_of_nodes(self) -> None:
        """
        Link every non-edge node to its four neighbors.

        Raises:
            GridStateError: called before allocation, or called twice
        """
        if self._nodes is None:
            raise GridStateError("Grid nodes must be allocated before linking")
        if self._linked:
            raise GridStateError("Grid neighbors are already linked")

        for (x, y), node in self._nodes.items():
            if node.is_edge:
                continue
            for direction in DIRECTION_ORDER:
                dx, dy = direction.offset
                node.neighbors[direction] = (x + dx, y + dy)
        self._linked = True

    def set_accessible_neighbours_of_nodes(self) -> None:
        """Refresh the cached accessible directions of every playable node."""
        for node in self._require_nodes().values():
            if not node.is_edge:
                node.set_accessible_neighbours(self)

    # =========================================================================
    # Lookup
    # =========================================================================

    def node_at(self, x: int, y: int) -> GridNode | None:
        """Any node, border included. None outside the allocated area."""
        return self._require_nodes().get((x, y))

    def in_bounds(self, x: int, y: int) -> bool:
        """Check if a coordinate is player-addressable (border excluded)."""
        return 1 <= x <= self.width and 1 <= y <= self.height

    @property
    def endpoint(self) -> GridNode:
        self._require_nodes()
        return self._endpoint

    def start_node(self, player: int) -> GridNode:
        """Start node of a 1-based player index."""
        self._require_nodes()
        if not 1 <= player <= len(self._player_start_nodes):
            raise ValueError(
                f"Unknown player {player}; grid has {len(self._player_start_nodes)} players"
            )
        return self._player_start_nodes[player - 1]

    def snapshot(self, x: int, y: int) -> NodeSnapshot:
        node = self.node_at(x, y)
        if node is None:
            raise KeyError(f"No node at ({x}, {y})")
        return NodeSnapshot(
            x=node.x,
            y=node.y,
            filled=node.filled,
            destructible=node.destructible,
            is_edge=node.is_edge,
            is_start_point=node.is_start_point,
            is_endpoint=node.is_endpoint,
            start_player=node.start_player,
            connectors=node.connectors,
        )

    def snapshots(self, include_edges: bool = False) -> list[NodeSnapshot]:
        """Snapshots of all nodes, row by row from y = 0 upward."""
        nodes = self._require_nodes()
        ordered = sorted(nodes, key=lambda c: (c[1], c[0]))
        return [
            self.snapshot(x, y)
            for x, y in ordered
            if include_edges or not nodes[(x, y)].is_edge
        ]

    def subscribe(self, listener: GridListener):
        """Register a listener for grid events."""
        return self.events.subscribe(listener)

    # =========================================================================
    # Mutations
    # =========================================================================

    def place_tile(
        self,
        x: int,
        y: int,
        connectors: ConnectorSet,
        delay: float = 0.0,
    ) -> GridResult:
        """
        Place a tile on an empty cell.

        The tile is stored as occupied even if the caller passed an
        unoccupied connector set.
        """
        self._require_linked()
        return self._place(x, y, connectors, delay)

    def _place(
        self,
        x: int,
        y: int,
        connectors: ConnectorSet,
        delay: float,
        vacating: Coord | None = None,
    ) -> GridResult:
        # vacating: a cell about to be cleared by a move, never bridged to
        if not self.in_bounds(x, y):
            return GridResult.failure(
                PlacementError.OUT_OF_BOUNDS, f"({x}, {y}) is outside the playable area"
            )

        node = self._nodes[(x, y)]
        if node.filled:
            return GridResult.failure(
                PlacementError.CELL_OCCUPIED, f"({x}, {y}) is already filled"
            )

        error = node.check_placement(self, connectors)
        if error:
            logger.debug("Rejected tile at (%d, %d): %s", x, y, connectors)
            return GridResult.failure(
                error, f"Tile does not fit its neighbors at ({x}, {y})"
            )

        node.connectors = ConnectorSet(
            up=connectors.up,
            right=connectors.right,
            down=connectors.down,
            left=connectors.left,
            occupied=True,
        )
        bridges = tuple(
            d for d in node.connectors.directions()
            if node.neighbour(self, d).filled
            and node.neighbors[d] != vacating
        )
        event = TilePlaced(x=x, y=y, connectors=node.connectors, bridges=bridges, delay=delay)
        logger.debug("Placed tile at (%d, %d): %s", x, y, node.connectors)
        self.events.emit(event)
        return GridResult.applied(event)

    def destroy_tile(self, x: int, y: int, delay: float = 0.0) -> GridResult:
        """Remove a tile. Rejects border, empty and fixed cells."""
        self._require_linked()
        rejected = self._check_removable(x, y)
        if rejected is not None:
            return rejected

        self._nodes[(x, y)].clear()
        event = TileDestroyed(x=x, y=y, delay=delay)
        logger.debug("Destroyed tile at (%d, %d)", x, y)
        self.events.emit(event)
        return GridResult.applied(event)

    def move_tile(
        self,
        src_x: int,
        src_y: int,
        dst_x: int,
        dst_y: int,
        delay: float = 0.0,
    ) -> GridResult:
        """
        Move a tile to another cell, all or nothing.

        The source is validated before anything changes; the destination
        is checked with the source still in place.
        """
        self._require_linked()
        rejected = self._check_removable(src_x, src_y)
        if rejected is not None:
            return rejected

        source = self._nodes[(src_x, src_y)]
        connectors = source.connectors
        placed = self._place(dst_x, dst_y, connectors, delay, vacating=source.coord)
        if not placed:
            return placed
        self.destroy_tile(src_x, src_y, delay=delay)

        event = TileMoved(src=(src_x, src_y), dst=(dst_x, dst_y), connectors=connectors, delay=delay)
        logger.debug("Moved tile %s -> %s", event.src, event.dst)
        self.events.emit(event)
        return GridResult.applied(event)

    def _check_removable(self, x: int, y: int) -> GridResult | None:
        # Returns the failure to report, or None when the tile can go
        # (failures are falsy, so callers compare against None)
        if not self.in_bounds(x, y):
            return GridResult.failure(
                PlacementError.OUT_OF_BOUNDS, f"({x}, {y}) is outside the playable area"
            )
        node = self._nodes[(x, y)]
        if not node.filled:
            return GridResult.failure(
                PlacementError.CELL_EMPTY, f"({x}, {y}) has no tile"
            )
        if not node.destructible:
            return GridResult.failure(
                PlacementError.CELL_NOT_DESTRUCTIBLE, f"({x}, {y}) cannot be destroyed"
            )
        return None

    # =========================================================================
    # Road queries
    # =========================================================================

    def find_road(self, player: int) -> RoadSearchResult:
        """Search from a player's start node, returning the full trace."""
        self._require_linked()
        return RoadSearch(self).run(self.start_node(player))

    def complete_road(self, player: int) -> bool:
        """Check whether a player's start node connects to the endpoint."""
        return self.find_road(player).road_completed

    # =========================================================================
    # Helpers
    # =========================================================================

    def _require_nodes(self) -> dict[Coord, GridNode]:
        if self._nodes is None:
            raise GridStateError("Grid has not been instantiated")
        return self._nodes

    def _require_linked(self) -> None:
        self._require_nodes()
        if not self._linked:
            raise GridStateError("Grid neighbors have not been linked")
