"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to grid calls
2. Manages rounds
3. Converts grid events and snapshots to response models

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

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
from ..engine_core import (
    ConnectorSet,
    GridResult,
    NodeSnapshot,
    NodeRefreshed,
    TileDestroyed,
    TileMoved,
    TilePlaced,
    TileShape,
    shape_for,
    tile_connectors,
)
from ..engine_core.events import GridEvent
from ..render import render_ascii
from ..session import RoundManager, Round

logger = logging.getLogger(__name__)


def _round_not_found(round_id: str) -> ErrorResponse:
    return ErrorResponse(
        error=f"Round {round_id} not found",
        error_code=ErrorCode.ROUND_NOT_FOUND,
    )


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()
        round_response = service.create_round(CreateRoundRequest(width=5, height=5))
        service.place_tile(round_response.round_id, PlaceTileRequest(...))
        service.check_road(round_response.round_id, player=1)
    """
    round_manager: RoundManager = field(default_factory=RoundManager)

    def create_round(self, request: CreateRoundRequest) -> RoundResponse:
        """
        Create a new round.

        Raises:
            ValueError: the engine rejected the grid configuration
        """
        game_round = self.round_manager.create_round(
            width=request.width,
            height=request.height,
            player_count=request.player_count,
        )
        return self._round_to_response(game_round)

    def get_round(self, round_id: str) -> RoundResponse | ErrorResponse:
        game_round = self.round_manager.get_round(round_id)
        if not game_round:
            return _round_not_found(round_id)
        return self._round_to_response(game_round)

    def get_board(self, round_id: str, include_ascii: bool = True) -> BoardResponse | ErrorResponse:
        """Get every playable cell of the round's grid."""
        game_round = self.round_manager.get_round(round_id)
        if not game_round:
            return _round_not_found(round_id)

        grid = game_round.grid
        return BoardResponse(
            round_id=round_id,
            width=grid.width,
            height=grid.height,
            nodes=[self._node_info(s) for s in grid.snapshots()],
            ascii=render_ascii(grid) if include_ascii else None,
        )

    def place_tile(self, round_id: str, request: PlaceTileRequest) -> TileActionResponse | ErrorResponse:
        game_round = self.round_manager.get_round(round_id)
        if not game_round:
            return _round_not_found(round_id)

        if request.shape is not None:
            connectors = tile_connectors(TileShape(request.shape.value))
        else:
            c = request.connectors
            connectors = ConnectorSet(
                up=c.up, right=c.right, down=c.down, left=c.left, occupied=True,
            )

        result = game_round.grid.place_tile(request.x, request.y, connectors, delay=request.delay)
        return self._action_response(game_round, result, [(request.x, request.y)])

    def destroy_tile(
        self,
        round_id: str,
        x: int,
        y: int,
        delay: float = 0.0,
    ) -> TileActionResponse | ErrorResponse:
        game_round = self.round_manager.get_round(round_id)
        if not game_round:
            return _round_not_found(round_id)

        result = game_round.grid.destroy_tile(x, y, delay=delay)
        return self._action_response(game_round, result, [(x, y)])

    def move_tile(self, round_id: str, request: MoveTileRequest) -> TileActionResponse | ErrorResponse:
        game_round = self.round_manager.get_round(round_id)
        if not game_round:
            return _round_not_found(round_id)

        result = game_round.grid.move_tile(
            request.src_x, request.src_y, request.dst_x, request.dst_y, delay=request.delay,
        )
        return self._action_response(
            game_round, result, [(request.src_x, request.src_y), (request.dst_x, request.dst_y)],
        )

    def check_road(self, round_id: str, player: int) -> RoadResponse | ErrorResponse:
        """
        Check whether a player's road reaches the endpoint.

        A completed road ends the round with that player as the winner.
        """
        game_round = self.round_manager.get_round(round_id)
        if not game_round:
            return _round_not_found(round_id)

        if not 1 <= player <= game_round.player_count:
            return ErrorResponse(
                error=f"Player {player} has no start node in this round",
                error_code=ErrorCode.UNKNOWN_PLAYER,
                details={"player_count": game_round.player_count},
            )

        search = game_round.find_road(player)
        # Refresh events from the search are for the renderer only
        game_round.drain_events()

        return RoadResponse(
            round_id=round_id,
            player=player,
            road_completed=search.road_completed,
            road=search.road,
            checked_count=len(search.checked_nodes),
            status=RoundStatus(game_round.state.value),
            winner=game_round.winner,
        )

    def end_round(self, round_id: str, reason: str = "user_ended") -> bool:
        return self.round_manager.end_round(round_id, reason)

    def list_rounds(self) -> list[str]:
        return self.round_manager.list_active_rounds()

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _round_to_response(self, game_round: Round) -> RoundResponse:
        grid = game_round.grid
        return RoundResponse(
            round_id=game_round.round_id,
            status=RoundStatus(game_round.state.value),
            width=grid.width,
            height=grid.height,
            player_count=game_round.player_count,
            winner=game_round.winner,
            created_at=game_round.created_at,
        )

    def _action_response(
        self,
        game_round: Round,
        result: GridResult,
        touched: list[tuple[int, int]],
    ) -> TileActionResponse:
        events = game_round.drain_events()
        if not result:
            logger.debug("Round %s rejected tile action: %s", game_round.round_id, result.message)
            return TileActionResponse(
                round_id=game_round.round_id,
                success=False,
                error_code=ErrorCode(result.error.value),
                message=result.message,
            )

        grid = game_round.grid
        return TileActionResponse(
            round_id=game_round.round_id,
            success=True,
            nodes=[self._node_info(grid.snapshot(x, y)) for x, y in touched],
            events=[self._event_info(e) for e in events],
        )

    def _node_info(self, snapshot: NodeSnapshot) -> NodeInfo:
        shape = shape_for(snapshot.connectors) if snapshot.filled else None
        return NodeInfo(
            x=snapshot.x,
            y=snapshot.y,
            filled=snapshot.filled,
            destructible=snapshot.destructible,
            is_edge=snapshot.is_edge,
            is_start_point=snapshot.is_start_point,
            is_endpoint=snapshot.is_endpoint,
            start_player=snapshot.start_player,
            connectors=ConnectorsInfo(**snapshot.connectors.as_dict()),
            shape=TileShapeName(shape.value) if shape else None,
        )

    def _event_info(self, event: GridEvent) -> EventInfo:
        if isinstance(event, TilePlaced):
            return EventInfo(
                event_type="tile_placed",
                x=event.x,
                y=event.y,
                delay=event.delay,
                data={
                    "connectors": event.connectors.as_dict(),
                    "bridges": [d.value for d in event.bridges],
                },
            )
        if isinstance(event, TileDestroyed):
            return EventInfo(event_type="tile_destroyed", x=event.x, y=event.y, delay=event.delay)
        if isinstance(event, TileMoved):
            return EventInfo(
                event_type="tile_moved",
                x=event.dst[0],
                y=event.dst[1],
                delay=event.delay,
                data={"src": list(event.src), "dst": list(event.dst)},
            )
        if isinstance(event, NodeRefreshed):
            return EventInfo(event_type="node_refreshed", x=event.x, y=event.y)
        raise TypeError(f"Unknown grid event: {event!r}")
