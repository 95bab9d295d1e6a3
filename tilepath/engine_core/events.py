"""
Grid events - Notifications for the rendering layer.

The grid never waits on presentation. Every state change is applied
immediately and then announced with an event; `delay` tells the listener
when to redraw, it does not postpone the change.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Union
import logging

from .connectors import ConnectorSet, Direction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TilePlaced:
    """A tile was placed. `bridges` point at already-filled neighbors."""
    x: int
    y: int
    connectors: ConnectorSet
    bridges: tuple[Direction, ...] = ()
    delay: float = 0.0


@dataclass(frozen=True)
class TileDestroyed:
    """A tile was removed."""
    x: int
    y: int
    delay: float = 0.0


@dataclass(frozen=True)
class TileMoved:
    """A tile moved from source to destination."""
    src: tuple[int, int]
    dst: tuple[int, int]
    connectors: ConnectorSet
    delay: float = 0.0


@dataclass(frozen=True)
class NodeRefreshed:
    """A node was inspected by a road search and should be redrawn."""
    x: int
    y: int


GridEvent = Union[TilePlaced, TileDestroyed, TileMoved, NodeRefreshed]
GridListener = Callable[[GridEvent], None]


@dataclass
class EventHub:
    """
    Fan-out of grid events to subscribed listeners.

    Listeners are called synchronously, in subscription order.
    """
    listeners: list[GridListener] = field(default_factory=list)

    def subscribe(self, listener: GridListener) -> Callable[[], None]:
        """Add a listener. Returns a function that removes it again."""
        self.listeners.append(listener)

        def unsubscribe():
            if listener in self.listeners:
                self.listeners.remove(listener)

        return unsubscribe

    def emit(self, event: GridEvent) -> None:
        logger.debug("Emitting %s", event)
        for listener in list(self.listeners):
            listener(event)
