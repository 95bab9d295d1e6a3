"""
API Module - HTTP interface to the engine.

Exposes rounds and their grids via REST for the presentation layer:
1. Create a round
2. Place, destroy and move tiles
3. Fetch board snapshots to draw
4. Ask whether a player's road is complete

All state is round-scoped and in-memory.
"""

from .schemas import (
    # Requests
    CreateRoundRequest,
    PlaceTileRequest,
    MoveTileRequest,
    # Responses
    RoundResponse,
    BoardResponse,
    TileActionResponse,
    RoadResponse,
    ErrorResponse,
    # Shared
    ConnectorsInfo,
    NodeInfo,
    EventInfo,
    # Enums
    ErrorCode,
    RoundStatus,
    TileShapeName,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateRoundRequest",
    "PlaceTileRequest",
    "MoveTileRequest",
    # Responses
    "RoundResponse",
    "BoardResponse",
    "TileActionResponse",
    "RoadResponse",
    "ErrorResponse",
    # Shared
    "ConnectorsInfo",
    "NodeInfo",
    "EventInfo",
    # Enums
    "ErrorCode",
    "RoundStatus",
    "TileShapeName",
    # Service
    "APIService",
    "create_app",
]
