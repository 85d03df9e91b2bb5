"""Greedy rule-priority computer opponent.

The opponent is deliberately not optimal: it looks one ply ahead for a win
or a block, then falls back to positional preferences.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence, TypeVar

from .game import CENTER, CORNERS, Board, Mark, apply_move, legal_moves, other, winner

T = TypeVar("T")


class RandomSource(Protocol):
    def choice(self, seq: Sequence[T]) -> T: ...


def _completing_move(board: Board, moves: Sequence[int], mark: Mark) -> Optional[int]:
    for idx in moves:
        if winner(apply_move(board, idx, mark)) is not None:
            return idx
    return None


def choose_move(
    board: Board,
    ai_mark: Mark,
    opponent_mark: Mark,
    rng: Optional[RandomSource] = None,
) -> Optional[int]:
    """Pick a cell for ``ai_mark`` using win > block > center > corner > any.

    Returns ``None`` when the board has no empty cell left. Random tie-breaks
    go through ``rng`` (module-level :mod:`random` when omitted).
    """
    moves = legal_moves(board)
    if not moves:
        return None

    move = _completing_move(board, moves, ai_mark)
    if move is not None:
        return move

    move = _completing_move(board, moves, opponent_mark)
    if move is not None:
        return move

    if board[CENTER] is Mark.EMPTY:
        return CENTER

    source = rng if rng is not None else random
    corners = [i for i in CORNERS if board[i] is Mark.EMPTY]
    if corners:
        return source.choice(corners)
    return source.choice(moves)


@dataclass
class HeuristicAI:
    """Computer player bound to a mark and a random source.

      - HeuristicAI(player=Mark.O)
      - choose(board) -> cell index or None
    """

    player: Mark = Mark.O
    rng: random.Random = field(default_factory=random.Random, repr=False)

    @property
    def opponent(self) -> Mark:
        return other(self.player)

    def choose(self, board: Board) -> Optional[int]:
        return choose_move(board, self.player, self.opponent, self.rng)
