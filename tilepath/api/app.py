"""
FastAPI Application - REST API for the presentation layer.

Endpoints:
    GET    /api/v1/health                           Health check
    POST   /api/v1/rounds                           Create a round
    GET    /api/v1/rounds                           List active rounds
    GET    /api/v1/rounds/{id}                      Get round status
    DELETE /api/v1/rounds/{id}                      End a round
    GET    /api/v1/rounds/{id}/board                Get all cell snapshots
    POST   /api/v1/rounds/{id}/tiles                Place a tile
    DELETE /api/v1/rounds/{id}/tiles/{x}/{y}        Destroy a tile
    POST   /api/v1/rounds/{id}/tiles/move           Move a tile
    POST   /api/v1/rounds/{id}/road/{player}        Check road completion

Rejected tile actions return 409 with an ErrorResponse whose error_code
is the engine's reason (OUT_OF_BOUNDS, CELL_OCCUPIED, ...).
"""

from typing import Annotated, Optional, Union
import logging

from .. import __version__
from ..config import EngineConfig

logger = logging.getLogger(__name__)


def create_app(service=None, config: Optional[EngineConfig] = None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)
        config: Optional EngineConfig (read from environment if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query, Request
        from fastapi.exceptions import RequestValidationError
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService
    from .schemas import (
        # Request models
        CreateRoundRequest,
        PlaceTileRequest,
        MoveTileRequest,
        # Response models
        RoundResponse,
        BoardResponse,
        TileActionResponse,
        RoadResponse,
        ErrorResponse,
        RoundListResponse,
        EndRoundResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )

    config = config or EngineConfig.from_env()

    app = FastAPI(
        title="Tilepath Engine API",
        description="""
Grid connectivity engine for a path-building board game.

Clients place, destroy and move tiles on a round's grid and ask whether a
player's road reaches the center. The engine answers with pass/fail
results, changed cell snapshots, and events for the renderer.

## Error Codes

| Code | Description |
|------|-------------|
| `OUT_OF_BOUNDS` | Coordinates outside the playable area |
| `CELL_OCCUPIED` | Target cell already holds a tile |
| `CELL_EMPTY` | No tile at the cell |
| `CELL_NOT_DESTRUCTIBLE` | Start, endpoint or border cell |
| `CONNECTOR_MISMATCH` | Tile does not fit its neighbors |
| `ROUND_NOT_FOUND` | Round does not exist |
| `UNKNOWN_PLAYER` | Player has no start node in this round |
| `INVALID_ROUND_CONFIG` | Grid size or player count rejected by the engine |
| `VALIDATION_ERROR` | Request body, path or query failed validation (422) |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def error_to_json(response: ErrorResponse) -> JSONResponse:
        status_code = 404 if response.error_code == ErrorCode.ROUND_NOT_FOUND else 400
        return make_error_response(
            response.error_code, response.error, status_code, response.details,
        )

    def action_to_json(
        response: Union[TileActionResponse, ErrorResponse],
    ) -> Union[TileActionResponse, JSONResponse]:
        if isinstance(response, ErrorResponse):
            return error_to_json(response)
        if not response.success:
            return make_error_response(
                response.error_code,
                response.message or "Tile action rejected",
                status_code=409,
                details={"round_id": response.round_id},
            )
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            {"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]}
            for e in exc.errors()
        ]
        logger.debug("Invalid request to %s: %s", request.url.path, errors)
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            status_code=422,
            details={"errors": errors},
        )

    # =========================================================================
    # Health
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["Health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="tilepath", version=__version__)

    # =========================================================================
    # Round Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/rounds",
        response_model=RoundResponse,
        responses={400: {"model": ErrorResponse}},
        tags=["Rounds"],
        summary="Create a new round",
    )
    async def create_round(body: CreateRoundRequest) -> Union[RoundResponse, JSONResponse]:
        """Create a round with a fresh grid. Omitted fields use the configured defaults."""
        defaults = {
            "width": config.grid_width,
            "height": config.grid_height,
            "player_count": config.player_count,
        }
        body = body.model_copy(update={
            name: value for name, value in defaults.items()
            if name not in body.model_fields_set
        })
        try:
            return api_service.create_round(body)
        except ValueError as e:
            logger.warning("Rejected round configuration: %s", e)
            return make_error_response(ErrorCode.INVALID_ROUND_CONFIG, str(e))

    @app.get(
        "/api/v1/rounds",
        response_model=RoundListResponse,
        tags=["Rounds"],
        summary="List active rounds",
    )
    async def list_rounds() -> RoundListResponse:
        rounds = api_service.list_rounds()
        return RoundListResponse(rounds=rounds, count=len(rounds))

    @app.get(
        "/api/v1/rounds/{round_id}",
        response_model=RoundResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Rounds"],
        summary="Get round status",
    )
    async def get_round(round_id: str) -> Union[RoundResponse, JSONResponse]:
        response = api_service.get_round(round_id)
        if isinstance(response, ErrorResponse):
            return error_to_json(response)
        return response

    @app.delete(
        "/api/v1/rounds/{round_id}",
        response_model=EndRoundResponse,
        tags=["Rounds"],
        summary="End a round",
    )
    async def end_round(
        round_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndRoundResponse:
        """End a round and release its grid."""
        success = api_service.end_round(round_id, reason)
        return EndRoundResponse(success=success, round_id=round_id)

    @app.get(
        "/api/v1/rounds/{round_id}/board",
        response_model=BoardResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Board"],
        summary="Get snapshots of all playable cells",
    )
    async def get_board(
        round_id: str,
        include_ascii: Annotated[bool, Query(description="Include a plain text rendering")] = True,
    ) -> Union[BoardResponse, JSONResponse]:
        response = api_service.get_board(round_id, include_ascii=include_ascii)
        if isinstance(response, ErrorResponse):
            return error_to_json(response)
        return response

    # =========================================================================
    # Tile Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/rounds/{round_id}/tiles",
        response_model=TileActionResponse,
        responses={
            404: {"model": ErrorResponse, "description": "Round not found"},
            409: {"model": ErrorResponse, "description": "Tile rejected"},
        },
        tags=["Board"],
        summary="Place a tile",
    )
    async def place_tile(
        round_id: str,
        body: PlaceTileRequest,
    ) -> Union[TileActionResponse, JSONResponse]:
        """
        Place a tile on an empty cell.

        **Request Body:**
        ```json
        {"x": 1, "y": 2, "shape": "straight_vertical"}
        ```
        or
        ```json
        {"x": 1, "y": 2, "connectors": {"up": true, "down": true}}
        ```
        """
        return action_to_json(api_service.place_tile(round_id, body))

    @app.post(
        "/api/v1/rounds/{round_id}/tiles/move",
        response_model=TileActionResponse,
        responses={
            404: {"model": ErrorResponse, "description": "Round not found"},
            409: {"model": ErrorResponse, "description": "Move rejected"},
        },
        tags=["Board"],
        summary="Move a tile",
    )
    async def move_tile(
        round_id: str,
        body: MoveTileRequest,
    ) -> Union[TileActionResponse, JSONResponse]:
        """Move a tile. Either both cells change or neither does."""
        return action_to_json(api_service.move_tile(round_id, body))

    @app.delete(
        "/api/v1/rounds/{round_id}/tiles/{x}/{y}",
        response_model=TileActionResponse,
        responses={
            404: {"model": ErrorResponse, "description": "Round not found"},
            409: {"model": ErrorResponse, "description": "Nothing destructible there"},
        },
        tags=["Board"],
        summary="Destroy a tile",
    )
    async def destroy_tile(
        round_id: str,
        x: int,
        y: int,
        delay: Annotated[float, Query(ge=0.0)] = 0.0,
    ) -> Union[TileActionResponse, JSONResponse]:
        return action_to_json(api_service.destroy_tile(round_id, x, y, delay=delay))

    # =========================================================================
    # Road Endpoint
    # =========================================================================

    @app.post(
        "/api/v1/rounds/{round_id}/road/{player}",
        response_model=RoadResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Unknown player"},
            404: {"model": ErrorResponse, "description": "Round not found"},
        },
        tags=["Road"],
        summary="Check whether a player's road reaches the endpoint",
    )
    async def check_road(round_id: str, player: int) -> Union[RoadResponse, JSONResponse]:
        """
        Run a road search from the player's start corner.

        A completed road marks the round completed with that player as winner.
        """
        response = api_service.check_road(round_id, player)
        if isinstance(response, ErrorResponse):
            return error_to_json(response)
        return response

    return app
