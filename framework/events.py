"""Outbound event schema shared by sessions and connections."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .serialize import to_serializable


class EventType(str, Enum):
    """Event types fanned out to lobby participants."""

    LOBBY_CREATED = "LOBBY_CREATED"
    JOINED_LOBBY = "JOINED_LOBBY"
    PLAYER_JOINED = "PLAYER_JOINED"
    GAME_STARTED = "GAME_STARTED"
    PLAYER_MOVED = "PLAYER_MOVED"
    TILES_REVEALED = "TILES_REVEALED"
    PLAYER_HIT_MINE = "PLAYER_HIT_MINE"
    GAME_WON = "GAME_WON"
    FLAG_TOGGLED = "FLAG_TOGGLED"
    PLAYER_LEFT = "PLAYER_LEFT"
    ERROR = "ERROR"


@dataclass(frozen=True)
class LobbyEvent:
    """Single message delivered to one or more connections."""

    event_type: EventType
    payload: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the flattened wire representation."""
        data = {key: to_serializable(value) for key, value in self.payload.items()}
        data["type"] = self.event_type.value
        return data

    @classmethod
    def create(cls, event_type: EventType, **payload: Any) -> "LobbyEvent":
        """Construct an event from keyword payload fields."""
        return cls(event_type=event_type, payload=payload)
