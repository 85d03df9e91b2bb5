"""Tic-tac-toe package exposing game rules, the computer opponent, and the web application."""

from .ai import HeuristicAI, choose_move
from .game import IllegalMove, Mark, WinResult
from .session import GameMode, GameSession, GameState
from .ui import app

__all__ = [
    "GameMode",
    "GameSession",
    "GameState",
    "HeuristicAI",
    "IllegalMove",
    "Mark",
    "WinResult",
    "app",
    "choose_move",
]
