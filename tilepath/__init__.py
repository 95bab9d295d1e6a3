"""
Tilepath - Grid connectivity engine for a path-building board game.

Players lay tiles with open edges onto a bordered grid, trying to connect
their start corner to the center. The engine provides:
- Placement validation against neighboring tiles
- Tile placement, destruction and moves
- Road completion search
- Rounds and an HTTP API for the presentation layer
"""

__version__ = "0.1.0"
