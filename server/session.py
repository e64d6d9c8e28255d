"""In-memory lobby sessions and the process-wide lobby registry."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
import logging
import random
import string
import time
from typing import TYPE_CHECKING, Any

from framework.errors import (
    EmptyLobbyError,
    GameAlreadyStartedError,
    LobbyFullError,
    LobbyNotFoundError,
    NotHostError,
)
from framework.events import EventType, LobbyEvent
from minesweeper.minesweeper_board import generate_board
from minesweeper.minesweeper_reveal import is_cleared, reveal_from
from minesweeper.minesweeper_state import DEFAULT_DIFFICULTY, Board

if TYPE_CHECKING:
    from server.connection import ConnectionHandle

logger = logging.getLogger(__name__)

LOBBY_CODE_ALPHABET = string.ascii_uppercase + string.digits
LOBBY_CODE_LENGTH = 6
DEFAULT_MAX_PARTICIPANTS = 4


class LobbyPhase(str, Enum):
    """Session phases. PLAYING is terminal."""

    LOBBY = "LOBBY"
    PLAYING = "PLAYING"


@dataclass
class Participant:
    """Player seated in a session, bound to a non-owned connection handle."""

    id: str
    name: str
    connection: "ConnectionHandle | None" = field(default=None, repr=False, compare=False)
    row: int = 0
    col: int = 0
    alive: bool = True

    def send(self, event: LobbyEvent) -> None:
        if self.connection is not None:
            self.connection.deliver(event)

    def summary(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "row": self.row, "col": self.col, "alive": self.alive}


@dataclass
class LobbySession:
    """Single lobby: roster, host, phase and (once playing) the shared board.

    Handlers are synchronous and must run while `lock` is held; they validate
    before mutating and only enqueue outbound events, never awaiting I/O.
    """

    code: str
    host_id: str
    difficulty: str = DEFAULT_DIFFICULTY
    max_participants: int = DEFAULT_MAX_PARTICIPANTS
    participants: list[Participant] = field(default_factory=list)
    phase: LobbyPhase = LobbyPhase.LOBBY
    board: Board | None = None
    created_at: float = 0.0
    started_at: float | None = None
    won_at: float | None = None
    closed: bool = False
    clock: Callable[[], float] = field(default=time.time, repr=False)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def __post_init__(self) -> None:
        if not self.created_at:
            self.created_at = self.clock()

    @property
    def is_empty(self) -> bool:
        return not self.participants

    @property
    def is_playing(self) -> bool:
        return self.phase is LobbyPhase.PLAYING

    def participant(self, player_id: str) -> Participant | None:
        for participant in self.participants:
            if participant.id == player_id:
                return participant
        return None

    def roster(self) -> list[dict[str, Any]]:
        return [participant.summary() for participant in self.participants]

    def broadcast(self, event: LobbyEvent) -> None:
        """Enqueue `event` for every participant; closed connections are skipped."""
        for participant in self.participants:
            participant.send(event)

    def join(self, participant: Participant) -> None:
        """Append a participant and announce the new roster."""
        if self.closed:
            raise LobbyNotFoundError()
        if self.is_playing:
            raise GameAlreadyStartedError()
        if len(self.participants) >= self.max_participants:
            raise LobbyFullError()

        participant.row, participant.col, participant.alive = 0, 0, True
        self.participants.append(participant)
        logger.info("%s joined lobby %s", participant.name, self.code)

        participant.send(LobbyEvent.create(EventType.JOINED_LOBBY, playerId=participant.id))
        self.broadcast(
            LobbyEvent.create(EventType.PLAYER_JOINED, players=self.roster(), newPlayer=participant.name)
        )

    def start(self, actor_id: str) -> None:
        """Generate the board, switch to PLAYING and place everyone near the center."""
        if actor_id != self.host_id:
            raise NotHostError()
        if self.is_playing:
            raise GameAlreadyStartedError()
        if len(self.participants) < 1:
            raise EmptyLobbyError()

        board = generate_board(self.difficulty)
        self.board = board
        self.phase = LobbyPhase.PLAYING
        self.started_at = self.clock()

        # Offsets may run off-grid for wide rosters; positions are advisory only.
        start_row, start_col = board.center()
        for index, participant in enumerate(self.participants):
            participant.row = start_row
            participant.col = start_col + index

        logger.info("Game started in lobby %s (%dx%d, %d mines)", self.code, board.rows, board.cols, board.mine_count)
        self.broadcast(
            LobbyEvent.create(
                EventType.GAME_STARTED,
                gridData=board.to_dict(),
                players=[participant.to_dict() for participant in self.participants],
            )
        )

    def _active_participant(self, actor_id: str) -> Participant | None:
        if not self.is_playing:
            return None
        participant = self.participant(actor_id)
        if participant is None or not participant.alive:
            return None
        return participant

    def move(self, actor_id: str, row: int, col: int) -> None:
        participant = self._active_participant(actor_id)
        if participant is None:
            return
        participant.row, participant.col = row, col
        self.broadcast(LobbyEvent.create(EventType.PLAYER_MOVED, playerId=actor_id, row=row, col=col))

    def scan(self, actor_id: str, row: int, col: int) -> None:
        """Reveal a tile for an alive participant; a mine eliminates only that participant."""
        participant = self._active_participant(actor_id)
        board = self.board
        if participant is None or board is None or not board.in_bounds(row, col):
            return

        cell = board.grid[row][col]
        if cell.revealed or cell.flagged:
            return

        if cell.mine:
            cell.revealed = True
            participant.alive = False
            logger.info("%s hit a mine at (%d, %d) in lobby %s", participant.name, row, col, self.code)
            self.broadcast(
                LobbyEvent.create(
                    EventType.PLAYER_HIT_MINE,
                    playerId=actor_id,
                    playerName=participant.name,
                    row=row,
                    col=col,
                )
            )
            return

        cells = reveal_from(board, row, col)
        self.broadcast(LobbyEvent.create(EventType.TILES_REVEALED, playerId=actor_id, cells=cells))

        if self.won_at is None and is_cleared(board):
            self.won_at = self.clock()
            elapsed = int(self.won_at - (self.started_at or self.won_at))
            logger.info("Lobby %s cleared the board in %ds", self.code, elapsed)
            self.broadcast(LobbyEvent.create(EventType.GAME_WON, time=elapsed))

    def toggle_flag(self, actor_id: str, row: int, col: int) -> None:
        board = self.board
        if not self.is_playing or board is None or not board.in_bounds(row, col):
            return
        if self.participant(actor_id) is None:
            return

        cell = board.grid[row][col]
        if cell.revealed:
            return
        cell.flagged = not cell.flagged
        self.broadcast(
            LobbyEvent.create(EventType.FLAG_TOGGLED, playerId=actor_id, row=row, col=col, flagged=cell.flagged)
        )

    def leave(self, actor_id: str) -> bool:
        """Remove a participant, migrating host if needed.

        Returns True when the participant was removed. Callers destroy the
        session through the registry once it is empty.
        """
        participant = self.participant(actor_id)
        if participant is None:
            return False

        self.participants.remove(participant)
        if self.is_empty:
            self.closed = True
            return True

        if self.host_id == actor_id:
            self.host_id = self.participants[0].id
            logger.info("Host of lobby %s passed to %s", self.code, self.host_id)
        self.broadcast(LobbyEvent.create(EventType.PLAYER_LEFT, players=self.roster(), newHost=self.host_id))
        return True


class SessionRegistry:
    """Process-wide mapping of lobby code to live session. Starts empty."""

    def __init__(self, rng: random.Random | None = None, clock: Callable[[], float] = time.time) -> None:
        self._sessions: dict[str, LobbySession] = {}
        self._rng = rng or random.SystemRandom()
        self._clock = clock

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, code: object) -> bool:
        return code in self._sessions

    def create_code(self) -> str:
        """Return a 6-character code not used by any live session."""
        while True:
            code = "".join(self._rng.choice(LOBBY_CODE_ALPHABET) for _ in range(LOBBY_CODE_LENGTH))
            if code not in self._sessions:
                return code

    def create(
        self,
        *,
        host: Participant,
        difficulty: str | None = None,
        max_participants: int | None = None,
    ) -> LobbySession:
        """Register a new lobby with `host` as its only participant."""
        session = LobbySession(
            code=self.create_code(),
            host_id=host.id,
            difficulty=difficulty or DEFAULT_DIFFICULTY,
            max_participants=max_participants or DEFAULT_MAX_PARTICIPANTS,
            participants=[host],
            clock=self._clock,
        )
        self._sessions[session.code] = session
        logger.info("Lobby %s created by %s", session.code, host.name)
        return session

    def lookup(self, code: str) -> LobbySession | None:
        return self._sessions.get(code)

    def get(self, code: str) -> LobbySession:
        session = self.lookup(code)
        if session is None:
            raise LobbyNotFoundError()
        return session

    def remove(self, code: str) -> None:
        session = self._sessions.pop(code, None)
        if session is not None:
            session.closed = True
            logger.info("Lobby %s deleted (empty)", code)
