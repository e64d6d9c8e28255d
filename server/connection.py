"""Per-connection state and dispatch of inbound actions to lobby sessions."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
import logging
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ValidationError

from framework.errors import LobbyError, MalformedMessageError
from framework.events import EventType, LobbyEvent
from framework.serialize import json_loads_object
from server.config import ServerConfig
from server.schemas import (
    KNOWN_ACTION_TYPES,
    ActionType,
    CreateLobbyRequest,
    JoinLobbyRequest,
    PlayerMoveRequest,
    ScanTileRequest,
    ToggleFlagRequest,
    parse_action,
)
from server.session import LobbySession, Participant, SessionRegistry

logger = logging.getLogger(__name__)

SendFn = Callable[[dict[str, Any]], Awaitable[None]]


def new_player_id() -> str:
    return f"player_{uuid4().hex[:9]}"


class ConnectionHandle:
    """Outbox for one transport connection.

    `deliver` never blocks, so sessions can fan out while holding their lock;
    `pump` drains the outbox to the socket on the connection's own task.
    """

    def __init__(self, connection_id: str | None = None) -> None:
        self.connection_id = connection_id or uuid4().hex[:12]
        self._outbox: asyncio.Queue[LobbyEvent | None] = asyncio.Queue()
        self._open = True

    @property
    def is_open(self) -> bool:
        return self._open

    def deliver(self, event: LobbyEvent) -> None:
        if self._open:
            self._outbox.put_nowait(event)

    def close(self) -> None:
        if self._open:
            self._open = False
            self._outbox.put_nowait(None)

    def pending(self) -> list[LobbyEvent]:
        """Drain and return queued events without sending them."""
        events: list[LobbyEvent] = []
        while not self._outbox.empty():
            event = self._outbox.get_nowait()
            if event is not None:
                events.append(event)
        return events

    async def pump(self, send: SendFn) -> None:
        """Forward queued events to `send` until closed or a send fails."""
        while True:
            event = await self._outbox.get()
            if event is None:
                return
            try:
                await send(event.to_dict())
            except Exception as exc:
                logger.warning("Dropping connection %s after failed send: %s", self.connection_id, exc)
                self._open = False
                return


@dataclass
class ConnectionState:
    """Mutable per-connection context: who this socket is and which lobby it is in."""

    handle: ConnectionHandle
    player_id: str = field(default_factory=new_player_id)
    lobby_code: str | None = None


class ConnectionHandler:
    """Routes decoded actions from one connection to the session it belongs to."""

    def __init__(self, registry: SessionRegistry, config: ServerConfig | None = None) -> None:
        self.registry = registry
        self.config = config or ServerConfig()
        self._dispatch: dict[str, Callable[[ConnectionState, Any], Awaitable[None]]] = {
            ActionType.CREATE_LOBBY.value: self._create_lobby,
            ActionType.JOIN_LOBBY.value: self._join_lobby,
            ActionType.START_GAME.value: self._start_game,
            ActionType.PLAYER_MOVE.value: self._player_move,
            ActionType.SCAN_TILE.value: self._scan_tile,
            ActionType.TOGGLE_FLAG.value: self._toggle_flag,
            ActionType.LEAVE_LOBBY.value: self._leave_lobby,
        }

    def open(self, handle: ConnectionHandle | None = None) -> ConnectionState:
        state = ConnectionState(handle=handle or ConnectionHandle())
        logger.info("Client connected: %s", state.player_id)
        return state

    def decode(self, raw: str | bytes | dict[str, Any]) -> BaseModel | None:
        """Decode a raw message; returns None for unknown action types."""
        data = raw if isinstance(raw, dict) else json_loads_object(raw)
        action_type = data.get("type")
        if not isinstance(action_type, str) or action_type not in KNOWN_ACTION_TYPES:
            return None
        try:
            return parse_action(data)
        except ValidationError as exc:
            raise MalformedMessageError(f"Invalid {data['type']} message: {exc.error_count()} error(s)") from exc

    async def handle_message(self, state: ConnectionState, raw: str | bytes | dict[str, Any]) -> None:
        """Apply one inbound message. Malformed and unknown messages are dropped."""
        try:
            action = self.decode(raw)
        except MalformedMessageError as exc:
            logger.warning("Ignoring malformed message from %s: %s", state.player_id, exc)
            return
        if action is None:
            logger.debug("Ignoring unknown message type from %s", state.player_id)
            return

        handler = self._dispatch[action.type]  # type: ignore[attr-defined]
        try:
            await handler(state, action)
        except LobbyError as exc:
            state.handle.deliver(LobbyEvent(event_type=EventType.ERROR, payload=exc.to_dict()))

    async def handle_disconnect(self, state: ConnectionState) -> None:
        """Treat a closed connection as leaving its lobby."""
        logger.info("Client disconnected: %s", state.player_id)
        state.handle.close()
        await self._leave_current(state)

    def _current_session(self, state: ConnectionState) -> LobbySession | None:
        if state.lobby_code is None:
            return None
        return self.registry.lookup(state.lobby_code)

    async def _leave_current(self, state: ConnectionState) -> None:
        session = self._current_session(state)
        state.lobby_code = None
        if session is not None:
            await self._leave_session(state, session)

    async def _leave_session(self, state: ConnectionState, session: LobbySession) -> None:
        async with session.lock:
            session.leave(state.player_id)
            if session.is_empty:
                self.registry.remove(session.code)

    def _participant(self, state: ConnectionState, player_name: str) -> Participant:
        return Participant(id=state.player_id, name=player_name, connection=state.handle)

    async def _create_lobby(self, state: ConnectionState, action: CreateLobbyRequest) -> None:
        await self._leave_current(state)
        host = self._participant(state, action.player_name)
        session = self.registry.create(
            host=host,
            difficulty=action.difficulty or self.config.default_difficulty,
            max_participants=action.max_players or self.config.default_max_players,
        )
        state.lobby_code = session.code
        state.handle.deliver(
            LobbyEvent.create(
                EventType.LOBBY_CREATED,
                lobbyCode=session.code,
                playerId=host.id,
                isHost=True,
                players=session.roster(),
            )
        )

    async def _join_lobby(self, state: ConnectionState, action: JoinLobbyRequest) -> None:
        session = self.registry.get(action.lobby_code)
        if state.lobby_code == session.code:
            return
        previous = self._current_session(state)
        # The old lobby is only left once the new one has accepted the participant.
        async with session.lock:
            session.join(self._participant(state, action.player_name))
        state.lobby_code = session.code
        if previous is not None:
            await self._leave_session(state, previous)

    async def _start_game(self, state: ConnectionState, action: Any) -> None:
        session = self._current_session(state)
        if session is None:
            return
        async with session.lock:
            session.start(state.player_id)

    async def _player_move(self, state: ConnectionState, action: PlayerMoveRequest) -> None:
        session = self._current_session(state)
        if session is None:
            return
        async with session.lock:
            session.move(state.player_id, action.row, action.col)

    async def _scan_tile(self, state: ConnectionState, action: ScanTileRequest) -> None:
        session = self._current_session(state)
        if session is None:
            return
        async with session.lock:
            session.scan(state.player_id, action.row, action.col)

    async def _toggle_flag(self, state: ConnectionState, action: ToggleFlagRequest) -> None:
        session = self._current_session(state)
        if session is None:
            return
        async with session.lock:
            session.toggle_flag(state.player_id, action.row, action.col)

    async def _leave_lobby(self, state: ConnectionState, action: Any) -> None:
        await self._leave_current(state)
