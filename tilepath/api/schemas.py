"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between the presentation layer and the
engine. Board nodes are sent as plain snapshots; the client draws them.

Error Codes:
- OUT_OF_BOUNDS: Coordinates outside the playable area
- CELL_OCCUPIED: Target cell already holds a tile
- CELL_EMPTY: Nothing to destroy or move at the source cell
- CELL_NOT_DESTRUCTIBLE: Start, endpoint or border cell
- CONNECTOR_MISMATCH: Tile does not fit its neighbors
- ROUND_NOT_FOUND: Round does not exist or has ended
- UNKNOWN_PLAYER: Player index has no start node on this grid
- INVALID_ROUND_CONFIG: Grid too small or bad player count
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field, model_validator


# =============================================================================
# Enums
# =============================================================================

class RoundStatus(str, Enum):
    """Round status values."""
    CREATED = "created"
    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class TileShapeName(str, Enum):
    """Catalog tile shapes accepted by the place endpoint."""
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


class ErrorCode(str, Enum):
    """Structured error codes."""
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    CELL_OCCUPIED = "CELL_OCCUPIED"
    CELL_EMPTY = "CELL_EMPTY"
    CELL_NOT_DESTRUCTIBLE = "CELL_NOT_DESTRUCTIBLE"
    CONNECTOR_MISMATCH = "CONNECTOR_MISMATCH"
    ROUND_NOT_FOUND = "ROUND_NOT_FOUND"
    UNKNOWN_PLAYER = "UNKNOWN_PLAYER"
    INVALID_ROUND_CONFIG = "INVALID_ROUND_CONFIG"
    VALIDATION_ERROR = "VALIDATION_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class ConnectorsInfo(BaseModel):
    """Open edges of a tile."""
    up: bool = False
    right: bool = False
    down: bool = False
    left: bool = False
    occupied: bool = False

    model_config = {"from_attributes": True}


class NodeInfo(BaseModel):
    """A grid cell for display."""
    x: int
    y: int
    filled: bool
    destructible: bool
    is_edge: bool = False
    is_start_point: bool = False
    is_endpoint: bool = False
    start_player: Optional[int] = None
    connectors: ConnectorsInfo
    shape: Optional[TileShapeName] = Field(None, description="Catalog shape, if the tile is one")

    model_config = {"from_attributes": True}


class EventInfo(BaseModel):
    """A grid event for the renderer."""
    event_type: str = Field(description="tile_placed, tile_destroyed, tile_moved, node_refreshed")
    x: Optional[int] = None
    y: Optional[int] = None
    delay: float = 0.0
    data: dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Request Models
# =============================================================================

class CreateRoundRequest(BaseModel):
    """
    Request to start a new round.

    Omitted fields take the server's configured defaults (TILEPATH_GRID_*,
    TILEPATH_PLAYER_COUNT); the values below apply outside the HTTP app.
    """
    width: int = Field(9, ge=3, le=64, description="Playable columns")
    height: int = Field(9, ge=3, le=64, description="Playable rows")
    player_count: int = Field(4, ge=1, le=4, description="Start corners in use")


class PlaceTileRequest(BaseModel):
    """Request to place a tile. Give either a catalog shape or explicit connectors."""
    x: int
    y: int
    shape: Optional[TileShapeName] = None
    connectors: Optional[ConnectorsInfo] = None
    delay: float = Field(0.0, ge=0.0, description="Seconds before the renderer redraws")

    @model_validator(mode="after")
    def _one_tile_description(self):
        if (self.shape is None) == (self.connectors is None):
            raise ValueError("Provide exactly one of 'shape' or 'connectors'")
        return self


class MoveTileRequest(BaseModel):
    """Request to move a tile."""
    src_x: int
    src_y: int
    dst_x: int
    dst_y: int
    delay: float = Field(0.0, ge=0.0)


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class RoundResponse(BaseModel):
    """Round information."""
    round_id: str
    status: RoundStatus
    width: int
    height: int
    player_count: int
    winner: Optional[int] = None
    created_at: float = 0.0
    api_version: str = "v1"


class BoardResponse(BaseModel):
    """All playable cells of a round's grid."""
    round_id: str
    width: int
    height: int
    nodes: list[NodeInfo] = Field(default_factory=list)
    ascii: Optional[str] = Field(None, description="Plain text rendering, top row first")
    api_version: str = "v1"


class TileActionResponse(BaseModel):
    """Result of a place, destroy or move."""
    round_id: str
    success: bool
    error_code: Optional[ErrorCode] = None
    message: Optional[str] = None
    nodes: list[NodeInfo] = Field(default_factory=list, description="Cells that changed")
    events: list[EventInfo] = Field(default_factory=list)
    api_version: str = "v1"


class RoadResponse(BaseModel):
    """Result of a road completion check."""
    round_id: str
    player: int
    road_completed: bool
    road: list[tuple[int, int]] = Field(default_factory=list)
    checked_count: int = 0
    status: RoundStatus
    winner: Optional[int] = None
    api_version: str = "v1"


class RoundListResponse(BaseModel):
    """Response listing active rounds."""
    rounds: list[str]
    count: int


class EndRoundResponse(BaseModel):
    """Response after ending a round."""
    success: bool
    round_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
