"""
Tile catalog - The path tiles dealt to players.

Eleven shapes: one crossroad, two straights, four corners and four T-splits.
T-splits are named after the direction of the stem that leaves the straight
bar (T_SPLIT_UP is open up, left and right).
"""

from __future__ import annotations
from enum import Enum

from .connectors import ConnectorSet, Direction

UP, RIGHT, DOWN, LEFT = Direction.UP, Direction.RIGHT, Direction.DOWN, Direction.LEFT


class TileShape(Enum):
    """Path tile shapes."""
    CROSSROAD = "crossroad"
    STRAIGHT_HORIZONTAL = "straight_horizontal"
    STRAIGHT_VERTICAL = "straight_vertical"
    CORNER_UP_LEFT = "corner_up_left"
    CORNER_DOWN_LEFT = "corner_down_left"
    CORNER_UP_RIGHT = "corner_up_right"
    CORNER_DOWN_RIGHT = "corner_down_right"
    T_SPLIT_UP = "t_split_up"
    T_SPLIT_DOWN = "t_split_down"
    T_SPLIT_LEFT = "t_split_left"
    T_SPLIT_RIGHT = "t_split_right"


TILE_CONNECTORS: dict[TileShape, ConnectorSet] = {
    TileShape.CROSSROAD: ConnectorSet.from_directions(UP, RIGHT, DOWN, LEFT),
    TileShape.STRAIGHT_HORIZONTAL: ConnectorSet.from_directions(LEFT, RIGHT),
    TileShape.STRAIGHT_VERTICAL: ConnectorSet.from_directions(UP, DOWN),
    TileShape.CORNER_UP_LEFT: ConnectorSet.from_directions(UP, LEFT),
    TileShape.CORNER_DOWN_LEFT: ConnectorSet.from_directions(DOWN, LEFT),
    TileShape.CORNER_UP_RIGHT: ConnectorSet.from_directions(UP, RIGHT),
    TileShape.CORNER_DOWN_RIGHT: ConnectorSet.from_directions(DOWN, RIGHT),
    TileShape.T_SPLIT_UP: ConnectorSet.from_directions(UP, LEFT, RIGHT),
    TileShape.T_SPLIT_DOWN: ConnectorSet.from_directions(DOWN, LEFT, RIGHT),
    TileShape.T_SPLIT_LEFT: ConnectorSet.from_directions(UP, DOWN, LEFT),
    TileShape.T_SPLIT_RIGHT: ConnectorSet.from_directions(UP, DOWN, RIGHT),
}

_SHAPES_BY_CONNECTORS = {conn: shape for shape, conn in TILE_CONNECTORS.items()}


def tile_connectors(shape: TileShape) -> ConnectorSet:
    """Get the connector set for a tile shape."""
    return TILE_CONNECTORS[shape]


def shape_for(connectors: ConnectorSet) -> TileShape | None:
    """Reverse lookup: the catalog shape with these connectors, if any."""
    return _SHAPES_BY_CONNECTORS.get(connectors)
