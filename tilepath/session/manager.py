"""
Round Manager - Creates and tracks game rounds.

LIFECYCLE:
1. A round is created with a fresh grid (allocated and linked once)
2. Collaborators place, destroy and move tiles through the round's grid
3. Completion checks run road searches; the first success ends the round
4. Ending a round drops it from memory

There is no global grid. Each round owns exactly one TileGrid and hands
it to whoever needs it.

PERSISTENCE:
- None. Rounds are in-memory and rebuilt from scratch each time.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
import time
import uuid

from ..engine_core import NodeRefreshed, RoadSearchResult, TileGrid
from ..engine_core.events import GridEvent

logger = logging.getLogger(__name__)


class RoundState(Enum):
    """State of a round."""
    CREATED = "created"  # Grid built, no tile placed yet
    ACTIVE = "active"  # Tiles are being played
    COMPLETED = "completed"  # A player connected to the endpoint
    ABANDONED = "abandoned"  # Ended without a winner


@dataclass
class Round:
    """
    One round of play.

    Contains:
    - The grid (owned, never shared across rounds)
    - Events emitted by the grid since they were last drained
    - Round metadata and outcome
    """
    round_id: str
    grid: TileGrid
    created_at: float

    state: RoundState = RoundState.CREATED
    winner: int | None = None

    # Events not yet picked up by the presentation layer
    pending_events: list[GridEvent] = field(default_factory=list)

    def __post_init__(self):
        self._unsubscribe = self.grid.subscribe(self._record_event)

    def _record_event(self, event: GridEvent) -> None:
        self.pending_events.append(event)
        if self.state == RoundState.CREATED and not isinstance(event, NodeRefreshed):
            self.state = RoundState.ACTIVE

    @property
    def player_count(self) -> int:
        return self.grid.player_count

    def is_active(self) -> bool:
        """Check if round is still being played."""
        return self.state in {RoundState.CREATED, RoundState.ACTIVE}

    def drain_events(self) -> list[GridEvent]:
        """Get and clear pending grid events."""
        events = self.pending_events.copy()
        self.pending_events.clear()
        return events

    def find_road(self, player: int) -> RoadSearchResult:
        """
        Search a player's road.

        A completed road ends the round with that player as winner.
        """
        result = self.grid.find_road(player)
        if result.road_completed and self.is_active():
            self.state = RoundState.COMPLETED
            self.winner = player
            logger.info("Round %s completed by player %d", self.round_id, player)
        return result

    def check_completion(self, player: int) -> bool:
        """Check whether a player's road is complete."""
        return self.find_road(player).road_completed

    def close(self, state: RoundState) -> None:
        self.state = state
        self._unsubscribe()
        self.pending_events.clear()


class RoundManager:
    """
    Manages rounds.

    Responsibilities:
    - Create rounds with a freshly built grid
    - Track active rounds
    - Drop rounds that have ended

    No persistence - rounds are in-memory only.
    """

    def __init__(self):
        self._rounds: dict[str, Round] = {}

    def create_round(
        self,
        width: int,
        height: int,
        player_count: int = 4,
    ) -> Round:
        """
        Create a new round.

        Raises:
            ValueError: grid dimensions or player count are invalid
        """
        grid = TileGrid.create(width, height, player_count)
        game_round = Round(
            round_id=str(uuid.uuid4()),
            grid=grid,
            created_at=time.time(),
        )
        self._rounds[game_round.round_id] = game_round
        logger.info(
            "Created round %s (%dx%d, %d players)",
            game_round.round_id, width, height, player_count,
        )
        return game_round

    def get_round(self, round_id: str) -> Round | None:
        """Get a round by ID."""
        return self._rounds.get(round_id)

    def end_round(self, round_id: str, reason: str = "user_ended") -> bool:
        """
        End a round and remove it from memory.

        Returns False if the round does not exist.
        """
        game_round = self._rounds.pop(round_id, None)
        if not game_round:
            return False
        if game_round.winner is not None:
            game_round.close(RoundState.COMPLETED)
        else:
            game_round.close(RoundState.ABANDONED)
        logger.info("Ended round %s (%s)", round_id, reason)
        return True

    def list_active_rounds(self) -> list[str]:
        """List IDs of rounds still being played."""
        return [
            rid for rid, game_round in self._rounds.items()
            if game_round.is_active()
        ]

    def cleanup_stale_rounds(self, max_age_seconds: int = 3600):
        """
        Drop finished rounds older than max_age.

        Called periodically to free memory.
        """
        current_time = time.time()
        to_remove = [
            rid for rid, game_round in self._rounds.items()
            if current_time - game_round.created_at > max_age_seconds
            and not game_round.is_active()
        ]
        for rid in to_remove:
            self.end_round(rid, reason="stale")
