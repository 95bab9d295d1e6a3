"""
Tests for road completion.

Tests:
- Completed and broken roads
- Loops in the connector graph
- Deterministic visit order
- Transient state reset and refresh events
"""

import sys

import pytest

from ..engine_core import (
    NodeRefreshed,
    RoadSearch,
    TileGrid,
    TileShape,
    tile_connectors,
)


def place(grid: TileGrid, x: int, y: int, shape: TileShape):
    result = grid.place_tile(x, y, tile_connectors(shape))
    assert result, result.message
    return result


class TestCompleteRoad:
    """Tests for complete_road."""

    def test_connected_road(self, road_grid):
        assert road_grid.complete_road(1)

    def test_broken_road(self, road_grid):
        assert road_grid.destroy_tile(1, 3)
        assert not road_grid.complete_road(1)

    def test_fresh_grid_has_no_roads(self, grid):
        for player in range(1, 5):
            assert not grid.complete_road(player)

    def test_other_players_not_connected(self, road_grid):
        assert not road_grid.complete_road(2)
        assert not road_grid.complete_road(4)

    def test_unknown_player(self, grid):
        with pytest.raises(ValueError):
            grid.complete_road(0)
        with pytest.raises(ValueError):
            grid.complete_road(5)

    def test_both_sides_must_connect(self, grid):
        """A tile that only touches the road from one side does not join it."""
        place(grid, 1, 2, TileShape.STRAIGHT_VERTICAL)
        place(grid, 1, 3, TileShape.CORNER_DOWN_RIGHT)
        # Open up/down only, so (1, 3)'s RIGHT edge dead-ends here
        place(grid, 2, 3, TileShape.STRAIGHT_VERTICAL)
        assert not grid.complete_road(1)

    def test_road_through_another_start(self):
        """Roads may pass through other players' start nodes."""
        grid = TileGrid.create(3, 3)
        # (2, 1) joins player 1 and player 2's corners; player 2 turns up to (3, 2)
        place(grid, 2, 1, TileShape.STRAIGHT_HORIZONTAL)
        place(grid, 3, 2, TileShape.CORNER_DOWN_LEFT)
        result = grid.find_road(1)
        assert result.road_completed
        assert (3, 1) in result.road


class TestSearchTrace:
    """Tests for the search trace and determinism."""

    def test_road_and_visit_order(self, road_grid):
        result = road_grid.find_road(1)

        assert result.start == (1, 1)
        assert result.road == [(1, 1), (1, 2), (1, 3), (2, 3), (3, 3)]
        assert result.checked_nodes == result.road

    def test_broken_trace(self, road_grid):
        road_grid.destroy_tile(1, 3)

        result = road_grid.find_road(1)

        assert not result
        assert result.road == []
        assert result.checked_nodes == [(1, 1), (1, 2)]

    def test_direction_order_up_first(self, grid):
        """Up is expanded before right, so the upper branch is explored first."""
        place(grid, 2, 1, TileShape.CORNER_UP_LEFT)
        place(grid, 2, 2, TileShape.CROSSROAD)
        place(grid, 3, 2, TileShape.CROSSROAD)
        place(grid, 2, 3, TileShape.CROSSROAD)

        result = grid.find_road(1)

        assert result.road_completed
        assert result.checked_nodes == [(1, 1), (2, 1), (2, 2), (2, 3), (3, 3)]
        assert result.road == [(1, 1), (2, 1), (2, 2), (2, 3), (3, 3)]

    def test_same_trace_every_time(self, road_grid):
        first = road_grid.find_road(1)
        second = road_grid.find_road(1)
        assert first.checked_nodes == second.checked_nodes


class TestLoops:
    """Tests for cycles in the connector graph."""

    def test_two_by_two_loop_terminates(self, grid):
        # (1,1) -> (2,1) -> (2,2) -> (1,2) -> (1,1)
        place(grid, 2, 1, TileShape.CORNER_UP_LEFT)
        place(grid, 1, 2, TileShape.CORNER_DOWN_RIGHT)
        place(grid, 2, 2, TileShape.CORNER_DOWN_LEFT)

        result = grid.find_road(1)

        assert not result.road_completed
        assert sorted(result.checked_nodes) == [(1, 1), (1, 2), (2, 1), (2, 2)]

    def test_crossroad_block_around_endpoint(self, grid):
        """Loops that contain the endpoint still finish on reaching it."""
        for x, y in [(2, 2), (3, 2), (2, 3), (4, 2), (4, 3)]:
            place(grid, x, y, TileShape.CROSSROAD)
        place(grid, 2, 1, TileShape.CORNER_UP_LEFT)

        assert grid.complete_road(1)

    def test_serpentine_road_past_recursion_limit(self):
        """A road longer than the interpreter's recursion limit still resolves."""
        grid = TileGrid.create(51, 51, player_count=1)
        cx, cy = grid.endpoint.coord
        last = grid.width

        # Rows below the endpoint snake right, left, right... from (1, 1)
        for y in range(1, cy):
            leftward = y % 2 == 0
            for x in range(1, last + 1):
                if (x, y) == (1, 1):
                    continue
                if x == last:
                    shape = TileShape.CORNER_DOWN_LEFT if leftward else TileShape.CORNER_UP_LEFT
                elif x == 1:
                    shape = TileShape.CORNER_UP_RIGHT if leftward else TileShape.CORNER_DOWN_RIGHT
                else:
                    shape = TileShape.STRAIGHT_HORIZONTAL
                place(grid, x, y, shape)

        # The endpoint row is entered from the right edge
        for x in range(cx + 1, last):
            place(grid, x, cy, TileShape.STRAIGHT_HORIZONTAL)
        place(grid, last, cy, TileShape.CORNER_DOWN_LEFT)

        result = grid.find_road(1)

        assert result.road_completed
        assert len(result.road) > sys.getrecursionlimit()
        assert result.road[0] == (1, 1)
        assert result.road[-1] == (cx, cy)


class TestTransientState:
    """Tests that searches leave no scratch state behind."""

    def test_visited_flags_cleared(self, road_grid):
        road_grid.complete_road(1)

        assert road_grid.checked_nodes == []
        assert road_grid.road_completed is False
        for snapshot in road_grid.snapshots():
            assert not road_grid.node_at(snapshot.x, snapshot.y).visited

    def test_refresh_event_per_checked_node(self, road_grid):
        received = []
        road_grid.subscribe(received.append)

        result = road_grid.find_road(1)

        assert all(isinstance(e, NodeRefreshed) for e in received)
        assert [(e.x, e.y) for e in received] == result.checked_nodes

    def test_search_object_reusable(self, road_grid):
        search = RoadSearch(road_grid)
        start = road_grid.start_node(1)
        assert search.run(start).road_completed
        road_grid.destroy_tile(2, 3)
        assert not search.run(start).road_completed
