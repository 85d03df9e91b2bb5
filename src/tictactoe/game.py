"""Core rules for classic 3x3 tic-tac-toe.

Boards are immutable tuples of nine :class:`Mark` values in row-major order.
Every function here is pure: boards go in, new boards or results come out.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


class Mark(str, Enum):
    X = "X"
    O = "O"
    EMPTY = " "


Board = Tuple[Mark, ...]
Line = Tuple[int, int, int]

BOARD_SIZE = 9

# Order matters: the first completed line found is the one reported.
WINNING_LINES: Tuple[Line, ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

CENTER = 4
CORNERS: Tuple[int, ...] = (0, 2, 6, 8)


class IllegalMove(ValueError):
    """Raised when a move targets a cell outside the board or already taken."""


@dataclass(frozen=True)
class WinResult:
    mark: Mark
    line: Line


def empty_board() -> Board:
    return (Mark.EMPTY,) * BOARD_SIZE


def other(mark: Mark) -> Mark:
    """Return the opposing player's mark."""
    if mark is Mark.X:
        return Mark.O
    if mark is Mark.O:
        return Mark.X
    raise ValueError("Empty cells have no opponent")


# ---------- Queries ----------


def winner(board: Board) -> Optional[WinResult]:
    """Return the first completed line on ``board``, or ``None``.

    Lines are scanned rows first, then columns, then the two diagonals.
    """
    for a, b, c in WINNING_LINES:
        v = board[a]
        if v is not Mark.EMPTY and v == board[b] == board[c]:
            return WinResult(mark=v, line=(a, b, c))
    return None


def is_full(board: Board) -> bool:
    return all(c is not Mark.EMPTY for c in board)


def is_draw(board: Board) -> bool:
    return is_full(board) and winner(board) is None


def legal_moves(board: Board) -> List[int]:
    return [i for i, c in enumerate(board) if c is Mark.EMPTY]


# ---------- Transitions ----------


def apply_move(board: Board, index: int, mark: Mark) -> Board:
    """Return a new board with ``mark`` placed at ``index``.

    The input board is left untouched.
    """
    if mark is Mark.EMPTY:
        raise IllegalMove("Cannot place an empty mark")
    if not 0 <= index < BOARD_SIZE:
        raise IllegalMove(f"Cell {index} is outside the board")
    if board[index] is not Mark.EMPTY:
        raise IllegalMove(f"Cell {index} is already occupied")
    cells = list(board)
    cells[index] = mark
    return tuple(cells)


# ---------- Text helpers ----------


def parse_board(text: str) -> Board:
    """Build a board from nine characters of ``X``, ``O`` and ``.``/``_``.

    Whitespace and ``|`` separators are ignored, so ``"XX.|.O.|..."`` and
    ``"XX. .O. ..."`` describe the same board.
    """
    cells: List[Mark] = []
    for ch in text:
        if ch.isspace() or ch == "|":
            continue
        if ch in ("X", "x"):
            cells.append(Mark.X)
        elif ch in ("O", "o"):
            cells.append(Mark.O)
        elif ch in (".", "_"):
            cells.append(Mark.EMPTY)
        else:
            raise ValueError(f"Unexpected board character {ch!r}")
    if len(cells) != BOARD_SIZE:
        raise ValueError(f"Expected {BOARD_SIZE} cells, got {len(cells)}")
    return tuple(cells)


def format_board(board: Board) -> str:
    rows = []
    for r in range(3):
        rows.append(
            "".join("." if c is Mark.EMPTY else c.value for c in board[r * 3 : r * 3 + 3])
        )
    return "\n".join(rows)
