"""Mutable game session: turn order, game mode and the deferred computer reply."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Protocol

from .ai import HeuristicAI
from .game import (
    BOARD_SIZE,
    Board,
    Mark,
    WinResult,
    apply_move,
    empty_board,
    is_full,
    other,
    winner,
)

logger = logging.getLogger(__name__)


class GameMode(str, Enum):
    HUMAN_VS_HUMAN = "player"
    HUMAN_VS_COMPUTER = "computer"


class GameState(str, Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAWN = "drawn"


DEFAULT_MODE = GameMode.HUMAN_VS_COMPUTER
HUMAN_MARK = Mark.X
COMPUTER_MARK = Mark.O
AI_MOVE_DELAY = 0.35  # seconds


@dataclass(frozen=True)
class Status:
    state: GameState
    turn: Mark
    result: Optional[WinResult] = None

    @property
    def message(self) -> str:
        if self.result is not None:
            return f"Winner: {self.result.mark.value}"
        if self.state is GameState.DRAWN:
            return "Draw game"
        return f"Turn: {self.turn.value}"


@dataclass(frozen=True)
class Snapshot:
    """Consistent read of a session taken under its lock."""

    board: Board
    mode: GameMode
    status: Status
    computer_pending: bool


class Cancelable(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], Cancelable]
Listener = Callable[["GameSession"], None]


def timer_scheduler(delay: float, callback: Callable[[], None]) -> Cancelable:
    """Run ``callback`` on a daemon timer thread after ``delay`` seconds."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


def project_status(board: Board, turn: Mark) -> Status:
    result = winner(board)
    if result is not None:
        return Status(GameState.WON, turn, result)
    if is_full(board):
        return Status(GameState.DRAWN, turn)
    return Status(GameState.IN_PROGRESS, turn)


class GameSession:
    """Owns one board and serialises every change made to it.

    Human moves, resets and mode switches are plain method calls. In
    human-vs-computer mode the human always plays X; once it is O's turn the
    computer's reply is scheduled after ``delay`` seconds. Every reset or
    mode change bumps a generation counter, and a scheduled reply that wakes
    up under an older generation is dropped.
    """

    def __init__(
        self,
        mode: GameMode = DEFAULT_MODE,
        *,
        ai: Optional[HeuristicAI] = None,
        delay: float = AI_MOVE_DELAY,
        scheduler: Scheduler = timer_scheduler,
    ) -> None:
        self.ai = ai if ai is not None else HeuristicAI(player=COMPUTER_MARK)
        self.delay = delay
        self._scheduler = scheduler
        self._lock = threading.RLock()
        self._board: Board = empty_board()
        self._turn: Mark = Mark.X
        self._mode = mode
        self._generation = 0
        self._pending: Optional[Cancelable] = None
        self._listeners: List[Listener] = []

    # ---- queries ----

    @property
    def board(self) -> Board:
        return self._board

    @property
    def turn(self) -> Mark:
        return self._turn

    @property
    def mode(self) -> GameMode:
        return self._mode

    @property
    def status(self) -> Status:
        with self._lock:
            return project_status(self._board, self._turn)

    @property
    def computer_pending(self) -> bool:
        return self._pending is not None

    def snapshot(self) -> Snapshot:
        with self._lock:
            return Snapshot(
                board=self._board,
                mode=self._mode,
                status=project_status(self._board, self._turn),
                computer_pending=self._pending is not None,
            )

    # ---- notifications ----

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Session listener %r failed", listener)

    # ---- commands ----

    def handle_human_move(self, index: int) -> bool:
        """Place the current player's mark at ``index``.

        Clicks on finished games, occupied or unknown cells, and clicks made
        while the computer is due to move are ignored. Returns whether the
        move was applied.
        """
        with self._lock:
            if project_status(self._board, self._turn).state is not GameState.IN_PROGRESS:
                return False
            if not 0 <= index < BOARD_SIZE or self._board[index] is not Mark.EMPTY:
                return False
            if self._mode is GameMode.HUMAN_VS_COMPUTER and self._turn is not HUMAN_MARK:
                return False

            player = self._turn
            self._place(index)
            logger.debug("Player %s took cell %d", player.value, index)
            self._schedule_computer_turn()
        self._notify()
        return True

    def reset_game(self, keep_mode: bool = True) -> None:
        with self._lock:
            self._invalidate_pending()
            self._board = empty_board()
            self._turn = Mark.X
            if not keep_mode:
                self._mode = DEFAULT_MODE
            logger.debug("Session reset (mode=%s)", self._mode.value)
        self._notify()

    def set_mode(self, mode: GameMode) -> None:
        with self._lock:
            self._invalidate_pending()
            self._mode = mode
            self._schedule_computer_turn()
        self._notify()

    def close(self) -> None:
        with self._lock:
            self._invalidate_pending()

    # ---- computer turn ----

    def _computer_to_move(self) -> bool:
        return (
            self._mode is GameMode.HUMAN_VS_COMPUTER
            and self._turn is self.ai.player
            and project_status(self._board, self._turn).state is GameState.IN_PROGRESS
        )

    def _schedule_computer_turn(self) -> None:
        if not self._computer_to_move():
            return
        generation = self._generation
        handle = self._scheduler(self.delay, lambda: self._run_computer_turn(generation))
        # An inline scheduler may already have played the move.
        if self._computer_to_move():
            self._pending = handle

    def _run_computer_turn(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug("Dropping stale computer move (generation %d)", generation)
                return
            self._pending = None
            if not self._computer_to_move():
                return
            index = self.ai.choose(self._board)
            if index is None or self._board[index] is not Mark.EMPTY:
                return
            self._place(index)
            logger.debug("Computer took cell %d", index)
        self._notify()

    def _invalidate_pending(self) -> None:
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _place(self, index: int) -> None:
        self._board = apply_move(self._board, index, self._turn)
        self._turn = other(self._turn)
