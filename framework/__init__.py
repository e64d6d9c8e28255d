"""Framework exports for lobby errors, events, and serialization."""

from .errors import (
    EmptyLobbyError,
    GameAlreadyStartedError,
    LobbyError,
    LobbyFullError,
    LobbyNotFoundError,
    MalformedMessageError,
    NotHostError,
)
from .events import EventType, LobbyEvent
from .serialize import json_dumps, json_loads_object, to_serializable

__all__ = [
    "EmptyLobbyError",
    "EventType",
    "GameAlreadyStartedError",
    "LobbyError",
    "LobbyEvent",
    "LobbyFullError",
    "LobbyNotFoundError",
    "MalformedMessageError",
    "NotHostError",
    "json_dumps",
    "json_loads_object",
    "to_serializable",
]
