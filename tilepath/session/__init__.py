"""
Session Module - Manages rounds of play.

A round represents one board:
- Created with a fresh grid
- Receives tile placements from the rules/presentation layers
- Ends when a player's road reaches the endpoint, or when abandoned

Rounds are EPHEMERAL: nothing is persisted.
"""

from .manager import RoundManager, Round, RoundState

__all__ = [
    "RoundManager",
    "Round",
    "RoundState",
]
