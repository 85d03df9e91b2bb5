"""Tests for the heuristic computer opponent."""

import random

from tictactoe.ai import HeuristicAI, choose_move
from tictactoe.game import CORNERS, Mark, empty_board, parse_board


class RecordingChoice:
    """Random source that always picks the last candidate and remembers what it saw."""

    def __init__(self):
        self.seen = []

    def choice(self, seq):
        self.seen.append(list(seq))
        return seq[-1]


def test_ai_takes_immediate_win_over_block():
    board = parse_board("OO. XX. ...")
    assert choose_move(board, Mark.O, Mark.X) == 2


def test_ai_blocks_opponent_row():
    board = parse_board("XX. .O. ...")
    assert choose_move(board, Mark.O, Mark.X) == 2


def test_ai_blocks_first_threat_in_index_order():
    # X threatens both 2 (row 0) and 6 (column 0).
    board = parse_board("XX. XO. ..O")
    assert choose_move(board, Mark.O, Mark.X) == 2


def test_ai_prefers_center_on_empty_board():
    assert choose_move(empty_board(), Mark.O, Mark.X) == 4


def test_ai_picks_random_empty_corner():
    board = parse_board("X.. .O. ...")
    rng = RecordingChoice()
    move = choose_move(board, Mark.X, Mark.O, rng)
    assert rng.seen == [[2, 6, 8]]
    assert move == 8


def test_ai_corner_choice_is_seeded():
    board = parse_board("... .X. ...")
    first = choose_move(board, Mark.O, Mark.X, random.Random(7))
    second = choose_move(board, Mark.O, Mark.X, random.Random(7))
    assert first == second
    assert first in CORNERS


def test_ai_falls_back_to_remaining_cells():
    board = parse_board("X.O OOX X.O")
    rng = RecordingChoice()
    move = choose_move(board, Mark.O, Mark.X, rng)
    assert rng.seen == [[1, 7]]
    assert move == 7


def test_ai_returns_none_on_full_board():
    board = parse_board("XOX XOO OXX")
    assert choose_move(board, Mark.O, Mark.X) is None


def test_heuristic_ai_plays_its_mark():
    ai = HeuristicAI(player=Mark.X, rng=random.Random(0))
    assert ai.opponent is Mark.O
    assert ai.choose(parse_board("XX. OO. ...")) == 2
