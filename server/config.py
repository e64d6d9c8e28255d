"""Runtime configuration loaded from environment variables."""

from __future__ import annotations

from dataclasses import dataclass, field

from framework.env_utils import getenv_any, getenv_int
from minesweeper.minesweeper_state import DEFAULT_DIFFICULTY
from server.session import DEFAULT_MAX_PARTICIPANTS

DEFAULT_PORT = 8080


@dataclass(frozen=True)
class ServerConfig:
    """Settings for the lobby server process."""

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    default_difficulty: str = DEFAULT_DIFFICULTY
    default_max_players: int = DEFAULT_MAX_PARTICIPANTS
    log_level: str = "INFO"
    allowed_origins: tuple[str, ...] = field(default=("*",))

    def __post_init__(self) -> None:
        if not 0 < self.port < 65536:
            raise ValueError(f"Port must be between 1 and 65535; received {self.port}.")
        if self.default_max_players < 1:
            raise ValueError(f"Default max players must be >= 1; received {self.default_max_players}.")


def load_config() -> ServerConfig:
    """Build a `ServerConfig` from the environment (and `.env`, if present)."""
    origins = getenv_any("ALLOWED_ORIGINS", default="*") or "*"
    return ServerConfig(
        host=getenv_any("MINESWEEPER_HOST", default="0.0.0.0") or "0.0.0.0",
        port=getenv_int("MINESWEEPER_PORT", "PORT", default=DEFAULT_PORT),
        default_difficulty=getenv_any("MINESWEEPER_DEFAULT_DIFFICULTY", default=DEFAULT_DIFFICULTY) or DEFAULT_DIFFICULTY,
        default_max_players=getenv_int("MINESWEEPER_MAX_PLAYERS", default=DEFAULT_MAX_PARTICIPANTS),
        log_level=(getenv_any("MINESWEEPER_LOG_LEVEL", default="INFO") or "INFO").upper(),
        allowed_origins=tuple(origin.strip() for origin in origins.split(",") if origin.strip()) or ("*",),
    )
