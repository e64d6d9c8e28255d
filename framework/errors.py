"""Structured exceptions reported back to the acting connection."""

from __future__ import annotations

from typing import Any


class LobbyError(Exception):
    """Base class for user-facing lobby/session errors."""

    default_message = "Lobby error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    def to_dict(self) -> dict[str, Any]:
        """Return the ERROR event payload for this failure."""
        return {"message": str(self)}


class LobbyNotFoundError(LobbyError):
    """Raised when a lobby code does not match any live session."""

    default_message = "Lobby not found"


class GameAlreadyStartedError(LobbyError):
    """Raised when joining or starting a session that is already playing."""

    default_message = "Game already started"


class LobbyFullError(LobbyError):
    """Raised when a session has reached its participant limit."""

    default_message = "Lobby is full"


class NotHostError(LobbyError):
    """Raised when a non-host participant attempts a host-only action."""

    default_message = "Only host can start the game"


class EmptyLobbyError(LobbyError):
    """Raised when starting a session without participants."""

    default_message = "Need at least 1 player"


class MalformedMessageError(Exception):
    """Raised when an inbound payload cannot be decoded into an action."""
