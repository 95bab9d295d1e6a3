"""
Connectors - Which edges of a tile are open.

A tile exposes up to four directional connectors plus a middle flag
(`occupied`). The middle flag is the single occupancy bit for a grid cell:
a cell is filled exactly when its connector set is occupied.

Coordinates grow upward: UP is y + 1, RIGHT is x + 1.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class Direction(Enum):
    """Cardinal direction of a tile edge."""
    UP = "up"
    RIGHT = "right"
    DOWN = "down"
    LEFT = "left"

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    @property
    def offset(self) -> tuple[int, int]:
        """(dx, dy) to step from a cell to its neighbor in this direction."""
        return _OFFSETS[self]

    def rotated(self, quarter_turns: int) -> Direction:
        """Direction after rotating clockwise by quarter turns."""
        idx = DIRECTION_ORDER.index(self)
        return DIRECTION_ORDER[(idx + quarter_turns) % 4]


# Fixed traversal order (clockwise from UP)
DIRECTION_ORDER: tuple[Direction, ...] = (
    Direction.UP,
    Direction.RIGHT,
    Direction.DOWN,
    Direction.LEFT,
)

_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

_OFFSETS = {
    Direction.UP: (0, 1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, -1),
    Direction.LEFT: (-1, 0),
}


@dataclass(frozen=True)
class ConnectorSet:
    """
    Exposed connections of a tile.

    `occupied` must be set whenever any directional flag is set. A set with
    only `occupied` is a closed tile: it fills the cell but connects nowhere.
    """
    up: bool = False
    right: bool = False
    down: bool = False
    left: bool = False
    occupied: bool = False

    def __post_init__(self):
        if self.any_direction and not self.occupied:
            raise ValueError(
                "ConnectorSet with an open direction must be occupied: "
                f"{self!r}"
            )

    @classmethod
    def empty(cls) -> ConnectorSet:
        """The connector set of an unfilled cell."""
        return cls()

    @classmethod
    def from_directions(cls, *directions: Direction) -> ConnectorSet:
        """Occupied set exposing exactly the given directions."""
        flags = {d.value: True for d in directions}
        return cls(occupied=True, **flags)

    @property
    def any_direction(self) -> bool:
        return self.up or self.right or self.down or self.left

    def exposes(self, direction: Direction) -> bool:
        """Check if the edge in a direction is open."""
        return getattr(self, direction.value)

    def directions(self) -> tuple[Direction, ...]:
        """Open directions, in traversal order."""
        return tuple(d for d in DIRECTION_ORDER if self.exposes(d))

    def rotated(self, quarter_turns: int = 1) -> ConnectorSet:
        """Return the set rotated clockwise by quarter turns."""
        if not self.occupied:
            return self
        return ConnectorSet.from_directions(
            *(d.rotated(quarter_turns) for d in self.directions())
        )

    def as_dict(self) -> dict[str, bool]:
        return {
            "up": self.up,
            "right": self.right,
            "down": self.down,
            "left": self.left,
            "occupied": self.occupied,
        }
