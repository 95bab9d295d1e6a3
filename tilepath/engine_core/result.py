"""
Grid results - Outcome of a mutating grid call.

Placement, destruction and moves never raise for gameplay rejections.
They return a GridResult that is truthy on success and carries a
PlacementError code on failure.

Programmer errors (bad construction arguments, wrong call order) raise.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any


class PlacementError(Enum):
    """Why a grid mutation was rejected."""
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    CELL_OCCUPIED = "CELL_OCCUPIED"
    CELL_EMPTY = "CELL_EMPTY"
    CELL_NOT_DESTRUCTIBLE = "CELL_NOT_DESTRUCTIBLE"
    CONNECTOR_MISMATCH = "CONNECTOR_MISMATCH"


class GridStateError(RuntimeError):
    """Grid methods called out of order (e.g. linking before allocation)."""


@dataclass
class GridResult:
    """
    Result of a grid mutation.

    Contains:
    - Whether the mutation happened
    - The error code and message (if rejected)
    - The event emitted to listeners (if applied)
    """
    success: bool
    error: PlacementError | None = None
    message: str | None = None
    event: Any | None = None  # GridEvent

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def failure(cls, error: PlacementError, message: str) -> GridResult:
        """Create a failure result."""
        return cls(success=False, error=error, message=message)

    @classmethod
    def applied(cls, event: Any) -> GridResult:
        """Create a success result carrying the emitted event."""
        return cls(success=True, event=event)
