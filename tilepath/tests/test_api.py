"""
Tests for API layer.

Tests:
- API service methods
- HTTP routes via TestClient
- Error codes for rejected tile actions
"""

import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from ..api.app import create_app
from ..api.schemas import (
    ConnectorsInfo,
    CreateRoundRequest,
    ErrorCode,
    ErrorResponse,
    MoveTileRequest,
    PlaceTileRequest,
    RoundStatus,
    TileShapeName,
)
from ..api.service import APIService
from ..config import EngineConfig


def lay_road(service: APIService, round_id: str):
    for x, y, shape in [
        (1, 2, TileShapeName.STRAIGHT_VERTICAL),
        (1, 3, TileShapeName.CORNER_DOWN_RIGHT),
        (2, 3, TileShapeName.STRAIGHT_HORIZONTAL),
    ]:
        response = service.place_tile(round_id, PlaceTileRequest(x=x, y=y, shape=shape))
        assert response.success


class TestAPIService:
    """Tests for APIService."""

    @pytest.fixture
    def round_id(self, service):
        return service.create_round(CreateRoundRequest(width=5, height=5)).round_id

    def test_create_round(self, service):
        response = service.create_round(CreateRoundRequest(width=5, height=7, player_count=2))

        assert response.status == RoundStatus.CREATED
        assert (response.width, response.height) == (5, 7)
        assert response.player_count == 2
        assert response.winner is None

    def test_get_nonexistent_round(self, service):
        response = service.get_round("nonexistent-id")
        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.ROUND_NOT_FOUND

    def test_board(self, service, round_id):
        board = service.get_board(round_id)

        assert len(board.nodes) == 25
        center = next(n for n in board.nodes if n.is_endpoint)
        assert (center.x, center.y) == (3, 3)
        assert center.shape == TileShapeName.CROSSROAD
        assert board.ascii.splitlines()[0] == "#######"

    def test_place_by_shape(self, service, round_id):
        response = service.place_tile(
            round_id, PlaceTileRequest(x=1, y=2, shape=TileShapeName.STRAIGHT_VERTICAL),
        )

        assert response.success
        assert response.nodes[0].filled
        assert response.nodes[0].shape == TileShapeName.STRAIGHT_VERTICAL
        assert response.events[0].event_type == "tile_placed"
        assert response.events[0].data["bridges"] == ["down"]

    def test_place_by_connectors(self, service, round_id):
        response = service.place_tile(
            round_id, PlaceTileRequest(x=2, y=2, connectors=ConnectorsInfo(up=True, left=True)),
        )
        assert response.success
        assert response.nodes[0].connectors.occupied
        assert response.nodes[0].shape == TileShapeName.CORNER_UP_LEFT

    def test_rejected_placement(self, service, round_id):
        response = service.place_tile(
            round_id, PlaceTileRequest(x=1, y=2, shape=TileShapeName.STRAIGHT_HORIZONTAL),
        )
        assert not response.success
        assert response.error_code == ErrorCode.CONNECTOR_MISMATCH
        assert response.events == []

    def test_destroy_fixed(self, service, round_id):
        response = service.destroy_tile(round_id, 1, 1)
        assert response.error_code == ErrorCode.CELL_NOT_DESTRUCTIBLE

    def test_move(self, service, round_id):
        service.place_tile(round_id, PlaceTileRequest(x=2, y=2, shape=TileShapeName.CROSSROAD))

        response = service.move_tile(round_id, MoveTileRequest(src_x=2, src_y=2, dst_x=4, dst_y=4))

        assert response.success
        src, dst = response.nodes
        assert not src.filled
        assert dst.filled
        assert [e.event_type for e in response.events] == [
            "tile_placed", "tile_destroyed", "tile_moved",
        ]

    def test_road_completes_round(self, service, round_id):
        lay_road(service, round_id)

        response = service.check_road(round_id, 1)

        assert response.road_completed
        assert response.road == [(1, 1), (1, 2), (1, 3), (2, 3), (3, 3)]
        assert response.status == RoundStatus.COMPLETED
        assert response.winner == 1
        assert service.list_rounds() == []

    def test_road_incomplete(self, service, round_id):
        response = service.check_road(round_id, 2)
        assert not response.road_completed
        assert response.road == []
        assert response.checked_count == 1

    def test_unknown_player(self, service, round_id):
        response = service.check_road(round_id, 7)
        assert response.error_code == ErrorCode.UNKNOWN_PLAYER

    def test_end_round(self, service, round_id):
        assert service.end_round(round_id)
        assert isinstance(service.get_round(round_id), ErrorResponse)


class TestSchemas:
    """Tests for request validation."""

    def test_place_requires_one_description(self):
        with pytest.raises(ValidationError):
            PlaceTileRequest(x=1, y=1)
        with pytest.raises(ValidationError):
            PlaceTileRequest(
                x=1, y=1,
                shape=TileShapeName.CROSSROAD,
                connectors=ConnectorsInfo(up=True),
            )

    def test_round_size_bounds(self):
        with pytest.raises(ValidationError):
            CreateRoundRequest(width=2)
        with pytest.raises(ValidationError):
            CreateRoundRequest(player_count=5)

    def test_error_response_dump(self):
        data = ErrorResponse(
            error="nope", error_code=ErrorCode.CELL_OCCUPIED,
        ).model_dump(mode="json")
        assert data["error_code"] == "CELL_OCCUPIED"
        assert data["api_version"] == "v1"


class TestHTTP:
    """Tests for the FastAPI routes."""

    @pytest.fixture
    def client(self, service):
        return TestClient(create_app(service=service, config=EngineConfig()))

    @pytest.fixture
    def round_id(self, client):
        response = client.post("/api/v1/rounds", json={"width": 5, "height": 5})
        assert response.status_code == 200
        return response.json()["round_id"]

    def test_health(self, client):
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["service"] == "tilepath"

    def test_invalid_round_config(self, client):
        response = client.post("/api/v1/rounds", json={"width": 2, "height": 5})
        assert response.status_code == 422
        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        assert data["details"]["errors"][0]["loc"] == ["body", "width"]

    def test_configured_round_defaults(self, service):
        config = EngineConfig(grid_width=5, grid_height=7, player_count=2)
        client = TestClient(create_app(service=service, config=config))

        data = client.post("/api/v1/rounds", json={}).json()
        assert (data["width"], data["height"], data["player_count"]) == (5, 7, 2)

        data = client.post("/api/v1/rounds", json={"width": 3}).json()
        assert (data["width"], data["height"]) == (3, 7)

    def test_bad_configured_defaults(self, service):
        client = TestClient(create_app(service=service, config=EngineConfig(grid_width=2)))
        response = client.post("/api/v1/rounds", json={})
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_ROUND_CONFIG"

    def test_round_lifecycle(self, client, round_id):
        assert client.get(f"/api/v1/rounds/{round_id}").json()["status"] == "created"
        assert client.get("/api/v1/rounds").json()["rounds"] == [round_id]

        response = client.delete(f"/api/v1/rounds/{round_id}")
        assert response.json()["success"] is True

        response = client.get(f"/api/v1/rounds/{round_id}")
        assert response.status_code == 404
        assert response.json()["error_code"] == "ROUND_NOT_FOUND"

    def test_board(self, client, round_id):
        data = client.get(f"/api/v1/rounds/{round_id}/board").json()
        assert len(data["nodes"]) == 25
        assert data["ascii"]

        data = client.get(
            f"/api/v1/rounds/{round_id}/board", params={"include_ascii": False},
        ).json()
        assert data["ascii"] is None

    def test_place_and_complete(self, client, round_id):
        for body in [
            {"x": 1, "y": 2, "shape": "straight_vertical"},
            {"x": 1, "y": 3, "connectors": {"down": True, "right": True}},
            {"x": 2, "y": 3, "shape": "straight_horizontal"},
        ]:
            response = client.post(f"/api/v1/rounds/{round_id}/tiles", json=body)
            assert response.status_code == 200, response.text

        response = client.post(f"/api/v1/rounds/{round_id}/road/1")

        data = response.json()
        assert data["road_completed"] is True
        assert data["road"][-1] == [3, 3]
        assert data["status"] == "completed"
        assert data["winner"] == 1

    def test_rejected_tile_is_conflict(self, client, round_id):
        response = client.post(
            f"/api/v1/rounds/{round_id}/tiles",
            json={"x": 1, "y": 2, "shape": "straight_horizontal"},
        )
        assert response.status_code == 409
        assert response.json()["error_code"] == "CONNECTOR_MISMATCH"

    def test_place_needs_shape_or_connectors(self, client, round_id):
        response = client.post(f"/api/v1/rounds/{round_id}/tiles", json={"x": 2, "y": 2})
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_destroy_beyond_grid(self, client, round_id):
        response = client.delete(f"/api/v1/rounds/{round_id}/tiles/99/99")
        assert response.status_code == 409
        assert response.json()["error_code"] == "OUT_OF_BOUNDS"

    def test_destroy_endpoint_rejected(self, client, round_id):
        response = client.delete(f"/api/v1/rounds/{round_id}/tiles/3/3")
        assert response.status_code == 409
        assert response.json()["error_code"] == "CELL_NOT_DESTRUCTIBLE"

    def test_destroy_and_move(self, client, round_id):
        client.post(
            f"/api/v1/rounds/{round_id}/tiles",
            json={"x": 2, "y": 2, "shape": "crossroad"},
        )

        response = client.post(
            f"/api/v1/rounds/{round_id}/tiles/move",
            json={"src_x": 2, "src_y": 2, "dst_x": 4, "dst_y": 4},
        )
        assert response.status_code == 200

        response = client.delete(f"/api/v1/rounds/{round_id}/tiles/4/4")
        assert response.status_code == 200

        response = client.delete(f"/api/v1/rounds/{round_id}/tiles/4/4")
        assert response.status_code == 409
        assert response.json()["error_code"] == "CELL_EMPTY"

    def test_unknown_player(self, client, round_id):
        response = client.post(f"/api/v1/rounds/{round_id}/road/9")
        assert response.status_code == 400
        assert response.json()["error_code"] == "UNKNOWN_PLAYER"

    def test_unknown_round_tiles(self, client):
        response = client.post(
            "/api/v1/rounds/missing/tiles", json={"x": 2, "y": 2, "shape": "crossroad"},
        )
        assert response.status_code == 404
