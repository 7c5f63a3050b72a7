from __future__ import annotations

import os
import time
from dataclasses import dataclass, field
from threading import Lock, RLock
from typing import Dict, List, Optional, Tuple
from uuid import uuid4

from dots_and_boxes.game_state import (
    Board,
    Direction,
    Player,
    create_board,
    free_edges,
    get_score,
    is_ended,
    winner,
)
from dots_and_boxes.rule_engine import apply_move
from dots_and_boxes.schemas import MoveRequest, NewGameRequest

DEFAULT_WIDTH = int(os.getenv("DOTS_BOARD_WIDTH", "9"))
DEFAULT_HEIGHT = int(os.getenv("DOTS_BOARD_HEIGHT", "9"))
DEFAULT_PLAYER_NAMES = {1: "Player 1", 2: "Player 2"}

PlayedMove = Tuple[int, str, int, int]


class IllegalMoveError(ValueError):
    """Raised by a session when the engine rejects a move."""


def _fresh_tally() -> Dict[str, int]:
    return {"1": 0, "2": 0, "ties": 0}


def _normalise_names(player_names: Dict[int, str]) -> Dict[int, str]:
    # JSON payloads key players by "1" / "2".
    given = {int(pid): name for pid, name in player_names.items()}
    return {
        pid: (given.get(pid) or "").strip() or DEFAULT_PLAYER_NAMES[pid]
        for pid in (1, 2)
    }


@dataclass
class GameSession:
    """
    State of one game owned by its caller: the current board and player,
    display names and the running win tally across games.

    The engine functions are pure; the session is the single writer of its
    board and serialises moves through ``_lock``.
    """

    game_id: str
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    board: Optional[Board] = None
    current_player: Player = Player.ONE
    player_names: Dict[int, str] = field(default_factory=lambda: dict(DEFAULT_PLAYER_NAMES))
    wins: Dict[str, int] = field(default_factory=_fresh_tally)
    game_over: bool = False
    move_history: List[PlayedMove] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)
    last_activity: float = field(default_factory=time.time)
    _lock: RLock = field(default_factory=RLock, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.board is None:
            self.board = create_board(self.width, self.height)
        self.width, self.height = self.board.width, self.board.height
        self.game_over = is_ended(self.board)

    def touch(self) -> None:
        self.last_activity = time.time()

    @property
    def moves_remaining(self) -> int:
        return len(free_edges(self.board))

    @property
    def turn_name(self) -> str:
        return self.player_names[int(self.current_player)]

    @property
    def score(self) -> Dict[str, int]:
        return get_score(self.board)

    @property
    def winner(self) -> int:
        return winner(self.board)

    def new_game(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        player_names: Optional[Dict[int, str]] = None,
    ) -> None:
        """
        Replace the board with an empty one and give player 1 the move.

        Blank names fall back to the defaults. The win tally is reset when
        either name differs from the previous game's.
        """
        with self._lock:
            if player_names is not None:
                names = _normalise_names(player_names)
                if names != self.player_names:
                    self.wins = _fresh_tally()
                self.player_names = names
            if width is not None:
                self.width = width
            if height is not None:
                self.height = height
            self.board = create_board(self.width, self.height)
            self.width, self.height = self.board.width, self.board.height
            self.current_player = Player.ONE
            self.game_over = is_ended(self.board)
            self.move_history = []
            self.touch()

    def play(self, direction: str, row: int, col: int, quiet: bool = True) -> int:
        """
        Draw an edge for the player to move. Returns the number of boxes closed.

        Raises ``IllegalMoveError`` when the move is rejected; the session is
        left untouched in that case.
        """
        with self._lock:
            player = self.current_player
            result = apply_move(player, direction, row, col, self.board)
            if result is None:
                raise IllegalMoveError(
                    f"Player {int(player)} cannot draw "
                    f"{getattr(direction, 'value', direction)} ({row}, {col})"
                )

            self.board = result.board
            self.current_player = result.next_player
            self.move_history.append((int(player), Direction(direction).value, row, col))
            self.touch()

            if is_ended(self.board):
                self.game_over = True
                self._record_result()
                if not quiet:
                    print(self.game_over_message())
            return result.boxes_closed

    def submit(self, request: MoveRequest, quiet: bool = True) -> int:
        with self._lock:
            if request.player != self.current_player:
                raise IllegalMoveError(f"It is not player {request.player}'s turn.")
            return self.play(request.direction, request.row, request.col, quiet=quiet)

    def _record_result(self) -> None:
        result = winner(self.board)
        if result == 0:
            self.wins["ties"] += 1
        else:
            self.wins[str(result)] += 1

    def game_over_message(self) -> Optional[str]:
        if not self.game_over:
            return None
        result = winner(self.board)
        if result == 0:
            return "Game over - It's a tie!"
        return f"Game over - {self.player_names[result]} Wins!"


class GameManager:
    """
    Thread-safe container that manages active game sessions.
    """

    def __init__(self) -> None:
        self._sessions: Dict[str, GameSession] = {}
        self._lock = Lock()

    def create_session(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        player_names: Optional[Dict[int, str]] = None,
        initial_board: Optional[Board] = None,
    ) -> GameSession:
        game_id = uuid4().hex
        session = GameSession(
            game_id=game_id,
            width=width if width is not None else DEFAULT_WIDTH,
            height=height if height is not None else DEFAULT_HEIGHT,
            board=initial_board,
        )
        if player_names:
            session.player_names = _normalise_names(player_names)
        with self._lock:
            self._sessions[game_id] = session
        return session

    def create_session_from_request(self, request: NewGameRequest) -> GameSession:
        return self.create_session(
            width=request.width,
            height=request.height,
            player_names=request.player_names,
        )

    def get_session(self, game_id: str) -> GameSession:
        try:
            session = self._sessions[game_id]
        except KeyError as exc:
            raise KeyError(f"Unknown game id: {game_id}") from exc
        session.touch()
        return session

    def remove_session(self, game_id: str) -> None:
        with self._lock:
            self._sessions.pop(game_id, None)

    def list_sessions(self) -> List[str]:
        with self._lock:
            return list(self._sessions)
