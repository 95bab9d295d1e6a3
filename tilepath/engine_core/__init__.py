"""
Engine Core - Grid connectivity for the path-building game.

The engine:
1. Builds a bordered grid with start corners and a central endpoint
2. Validates tile placement against neighboring connectors
3. Places, destroys and moves tiles
4. Answers whether a player's road reaches the endpoint
"""

from .connectors import ConnectorSet, Direction, DIRECTION_ORDER
from .node import GridNode
from .grid import TileGrid, NodeSnapshot
from .road_search import RoadSearch, RoadSearchResult
from .result import GridResult, GridStateError, PlacementError
from .events import EventHub, TilePlaced, TileDestroyed, TileMoved, NodeRefreshed
from .tiles import TileShape, tile_connectors, shape_for

__all__ = [
    "ConnectorSet",
    "Direction",
    "DIRECTION_ORDER",
    "GridNode",
    "TileGrid",
    "NodeSnapshot",
    "RoadSearch",
    "RoadSearchResult",
    "GridResult",
    "GridStateError",
    "PlacementError",
    "EventHub",
    "TilePlaced",
    "TileDestroyed",
    "TileMoved",
    "NodeRefreshed",
    "TileShape",
    "tile_connectors",
    "shape_for",
]
