"""FastAPI-powered web UI for playing tic-tac-toe in the browser."""

from __future__ import annotations

import logging
import os
import uuid
from typing import Dict, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .game import Mark
from .session import AI_MOVE_DELAY as DEFAULT_AI_MOVE_DELAY
from .session import DEFAULT_MODE, GameMode, GameSession, GameState

logger = logging.getLogger(__name__)

SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="Tic Tac Toe", description="Tic-tac-toe against a friend or the computer")

AI_MOVE_DELAY: float = float(os.environ.get("TICTACTOE_AI_DELAY", DEFAULT_AI_MOVE_DELAY))


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    mode: GameMode = Field(default=DEFAULT_MODE, description="'computer' or 'player'")


class MoveRequest(BaseModel):
    """Request payload for clicking a cell."""

    index: int = Field(ge=0, le=8)


class ResetRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    keep_mode: bool = Field(default=True, alias="keepMode")


class ModeRequest(BaseModel):
    mode: GameMode


def _create_session(mode: GameMode) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    session = GameSession(mode=mode, delay=AI_MOVE_DELAY)
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created game %s (mode=%s)", session_id, mode.value)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    snap = session.snapshot()
    status = snap.status
    return {
        "id": game_id,
        "board": [c.value if c is not Mark.EMPTY else "" for c in snap.board],
        "mode": snap.mode.value,
        "state": status.state.value,
        "currentPlayer": status.turn.value,
        "winner": status.result.mark.value if status.result else None,
        "winningLine": list(status.result.line) if status.result else None,
        "drawn": status.state is GameState.DRAWN,
        "status": status.message,
        "aiPending": snap.computer_pending,
    }


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.mode)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    if not session.handle_human_move(request.index):
        logger.debug("Ignored click on cell %d in game %s", request.index, game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str, request: ResetRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    session.reset_game(keep_mode=request.keep_mode)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/mode")
def change_mode(game_id: str, request: ModeRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    session.set_mode(request.mode)
    session.reset_game(keep_mode=True)
    return _serialize_session(game_id, session)


@app.delete("/api/game/{game_id}")
def delete_game(game_id: str) -> Dict[str, str]:
    session = SESSIONS.pop(game_id, None)
    if session is None:
        raise HTTPException(status_code=404, detail="Game not found")
    session.close()
    return {"id": game_id}


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic Tac Toe</title>
    <style>
      body {
        font-family: system-ui, sans-serif;
        background: #f9fafb;
        color: #111827;
        display: flex;
        justify-content: center;
        padding: 24px;
      }
      .card {
        background: #ffffff;
        border-radius: 16px;
        padding: 24px;
        width: min(92vw, 420px);
        box-shadow: 0 10px 25px rgba(0, 0, 0, 0.08);
      }
      .board {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 8px;
        margin: 16px 0;
      }
      .cell {
        aspect-ratio: 1;
        font-size: 2.5rem;
        font-weight: 700;
        border: 1px solid #e5e7eb;
        border-radius: 12px;
        background: #ffffff;
        cursor: pointer;
      }
      .cell.win { background: #fef3c7; border-color: #f59e0b; }
      .cell.x { color: #2563eb; }
      .cell.o { color: #f59e0b; }
      .controls button { margin-right: 8px; }
      .active { font-weight: 700; }
    </style>
  </head>
  <body>
    <div class=\"card\">
      <h1>Tic Tac Toe</h1>
      <div class=\"controls\">
        <button id=\"mode-computer\" data-mode=\"computer\">Vs Computer</button>
        <button id=\"mode-player\" data-mode=\"player\">Vs Player</button>
      </div>
      <p id=\"status\">Loading...</p>
      <div class=\"board\" id=\"board\"></div>
      <button id=\"new-game\">New Game</button>
    </div>
    <script>
      let gameId = null;
      let pollTimer = null;

      async function post(path, body) {
        const response = await fetch(path, {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify(body || {}),
        });
        return response.json();
      }

      function render(state) {
        document.getElementById('status').textContent = state.status;
        const line = state.winningLine || [];
        const board = document.getElementById('board');
        board.innerHTML = '';
        state.board.forEach((value, index) => {
          const cell = document.createElement('button');
          cell.className = 'cell' + (value ? ' ' + value.toLowerCase() : '');
          if (line.includes(index)) cell.classList.add('win');
          cell.textContent = value;
          cell.addEventListener('click', async () => {
            render(await post(`/api/game/${gameId}/move`, { index }));
          });
          board.appendChild(cell);
        });
        for (const mode of ['computer', 'player']) {
          document.getElementById(`mode-${mode}`).classList.toggle('active', state.mode === mode);
        }
        clearTimeout(pollTimer);
        if (state.aiPending) {
          pollTimer = setTimeout(refresh, 150);
        }
      }

      async function refresh() {
        const response = await fetch(`/api/game/${gameId}`);
        render(await response.json());
      }

      async function start() {
        const state = await post('/api/game', { mode: 'computer' });
        gameId = state.id;
        render(state);
      }

      document.getElementById('new-game').addEventListener('click', async () => {
        render(await post(`/api/game/${gameId}/reset`, { keepMode: true }));
      });
      for (const mode of ['computer', 'player']) {
        document.getElementById(`mode-${mode}`).addEventListener('click', async () => {
          render(await post(`/api/game/${gameId}/mode`, { mode }));
        });
      }

      start();
    </script>
  </body>
</html>
"""
