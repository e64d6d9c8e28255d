"""Pydantic schemas for inbound lobby actions."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class ActionType(str, Enum):
    """Inbound action discriminators."""

    CREATE_LOBBY = "CREATE_LOBBY"
    JOIN_LOBBY = "JOIN_LOBBY"
    START_GAME = "START_GAME"
    PLAYER_MOVE = "PLAYER_MOVE"
    SCAN_TILE = "SCAN_TILE"
    TOGGLE_FLAG = "TOGGLE_FLAG"
    LEAVE_LOBBY = "LEAVE_LOBBY"


KNOWN_ACTION_TYPES = frozenset(action.value for action in ActionType)

PlayerName = Annotated[str, Field(alias="playerName", min_length=1)]


class _Action(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class CreateLobbyRequest(_Action):
    """Create a lobby and become its host."""

    type: Literal["CREATE_LOBBY"] = "CREATE_LOBBY"
    player_name: PlayerName
    difficulty: str | None = None
    max_players: int | None = Field(default=None, alias="maxPlayers")

    @field_validator("max_players")
    @classmethod
    def non_positive_means_default(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            return None
        return value


class JoinLobbyRequest(_Action):
    """Join an existing lobby by code."""

    type: Literal["JOIN_LOBBY"] = "JOIN_LOBBY"
    player_name: PlayerName
    lobby_code: str = Field(alias="lobbyCode", min_length=1)

    @field_validator("lobby_code")
    @classmethod
    def uppercase_code(cls, value: str) -> str:
        return value.upper()


class StartGameRequest(_Action):
    type: Literal["START_GAME"] = "START_GAME"


class _CellAction(_Action):
    row: int
    col: int


class PlayerMoveRequest(_CellAction):
    type: Literal["PLAYER_MOVE"] = "PLAYER_MOVE"


class ScanTileRequest(_CellAction):
    type: Literal["SCAN_TILE"] = "SCAN_TILE"


class ToggleFlagRequest(_CellAction):
    type: Literal["TOGGLE_FLAG"] = "TOGGLE_FLAG"


class LeaveLobbyRequest(_Action):
    type: Literal["LEAVE_LOBBY"] = "LEAVE_LOBBY"


ActionRequest = Annotated[
    Union[
        CreateLobbyRequest,
        JoinLobbyRequest,
        StartGameRequest,
        PlayerMoveRequest,
        ScanTileRequest,
        ToggleFlagRequest,
        LeaveLobbyRequest,
    ],
    Field(discriminator="type"),
]

action_adapter: TypeAdapter[Any] = TypeAdapter(ActionRequest)


def parse_action(data: dict[str, Any]) -> BaseModel:
    """Validate a decoded message into its typed action model."""
    return action_adapter.validate_python(data)
