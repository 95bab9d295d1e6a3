"""
Environment configuration for the CLI and the HTTP app.

    TILEPATH_GRID_WIDTH     playable columns (default 9)
    TILEPATH_GRID_HEIGHT    playable rows (default 9)
    TILEPATH_PLAYER_COUNT   start corners in use (default 4)
    TILEPATH_LOG_LEVEL      logging level name (default WARNING)
    ALLOWED_ORIGINS         comma separated CORS origins (default *)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import os


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass
class EngineConfig:
    grid_width: int = 9
    grid_height: int = 9
    player_count: int = 4
    log_level: str = "WARNING"
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Read configuration from TILEPATH_* environment variables."""
        return cls(
            grid_width=_env_int("TILEPATH_GRID_WIDTH", 9),
            grid_height=_env_int("TILEPATH_GRID_HEIGHT", 9),
            player_count=_env_int("TILEPATH_PLAYER_COUNT", 4),
            log_level=os.getenv("TILEPATH_LOG_LEVEL", "WARNING").upper(),
            allowed_origins=os.getenv("ALLOWED_ORIGINS", "*").split(","),
        )
