"""
Pytest fixtures for Tilepath tests.
"""

import pytest

from ..engine_core import TileGrid, TileShape, tile_connectors
from ..api.service import APIService


@pytest.fixture
def grid() -> TileGrid:
    """A 5x5 grid with all four start corners. Endpoint at (3, 3)."""
    return TileGrid.create(5, 5, player_count=4)


@pytest.fixture
def events(grid: TileGrid) -> list:
    """Events emitted by the grid fixture, in order."""
    received = []
    grid.subscribe(received.append)
    return received


@pytest.fixture
def road_grid(grid: TileGrid) -> TileGrid:
    """
    5x5 grid with player 1's road laid to the center:

        (1,1) start -> (1,2) vertical -> (1,3) corner -> (2,3) horizontal -> (3,3)
    """
    assert grid.place_tile(1, 2, tile_connectors(TileShape.STRAIGHT_VERTICAL))
    assert grid.place_tile(1, 3, tile_connectors(TileShape.CORNER_DOWN_RIGHT))
    assert grid.place_tile(2, 3, tile_connectors(TileShape.STRAIGHT_HORIZONTAL))
    return grid


@pytest.fixture
def service() -> APIService:
    """A fresh API service."""
    return APIService()
