"""Tests for the FastAPI tic-tac-toe interface."""

from __future__ import annotations

import time

from fastapi.testclient import TestClient

from tictactoe import ui
from tictactoe.ui import app


client = TestClient(app)
ui.AI_MOVE_DELAY = 0.0


def _wait_for_computer(game_id: str) -> dict:
    deadline = time.monotonic() + 2.0
    while True:
        state = client.get(f"/api/game/{game_id}").json()
        if not state["aiPending"] or time.monotonic() > deadline:
            return state
        time.sleep(0.01)


def test_create_game_and_first_move():
    response = client.post("/api/game", json={"mode": "computer"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["currentPlayer"] == "X"
    assert payload["board"] == [""] * 9
    assert payload["status"] == "Turn: X"
    assert payload["state"] == "in_progress"

    game_id = payload["id"]
    move_response = client.post(f"/api/game/{game_id}/move", json={"index": 0})
    assert move_response.status_code == 200
    state = move_response.json()
    assert state["board"][0] == "X"

    final_state = _wait_for_computer(game_id)
    assert final_state["aiPending"] is False
    assert final_state["currentPlayer"] == "X"
    assert final_state["board"][4] == "O"


def test_occupied_cell_is_ignored():
    game_id = client.post("/api/game", json={"mode": "player"}).json()["id"]

    first = client.post(f"/api/game/{game_id}/move", json={"index": 0})
    assert first.status_code == 200

    duplicate = client.post(f"/api/game/{game_id}/move", json={"index": 0})
    assert duplicate.status_code == 200
    state = duplicate.json()
    assert state["board"][0] == "X"
    assert state["currentPlayer"] == "O"


def test_out_of_range_cell_rejected():
    game_id = client.post("/api/game", json={}).json()["id"]
    response = client.post(f"/api/game/{game_id}/move", json={"index": 9})
    assert response.status_code == 422


def test_rejects_unknown_mode():
    response = client.post("/api/game", json={"mode": "robot"})
    assert response.status_code == 422


def test_player_mode_win_reports_line():
    game_id = client.post("/api/game", json={"mode": "player"}).json()["id"]
    for index in (0, 4, 1, 8, 2):
        state = client.post(f"/api/game/{game_id}/move", json={"index": index}).json()
    assert state["state"] == "won"
    assert state["winner"] == "X"
    assert state["winningLine"] == [0, 1, 2]
    assert state["status"] == "Winner: X"
    assert state["drawn"] is False


def test_reset_and_mode_switch():
    game_id = client.post("/api/game", json={"mode": "player"}).json()["id"]
    client.post(f"/api/game/{game_id}/move", json={"index": 4})

    reset = client.post(f"/api/game/{game_id}/reset", json={"keepMode": True}).json()
    assert reset["board"] == [""] * 9
    assert reset["mode"] == "player"

    client.post(f"/api/game/{game_id}/move", json={"index": 4})
    reset = client.post(f"/api/game/{game_id}/reset", json={"keepMode": False}).json()
    assert reset["board"] == [""] * 9
    assert reset["mode"] == "computer"

    client.post(f"/api/game/{game_id}/move", json={"index": 0})
    switched = client.post(f"/api/game/{game_id}/mode", json={"mode": "player"}).json()
    assert switched["mode"] == "player"
    assert switched["board"] == [""] * 9
    assert switched["currentPlayer"] == "X"
    assert switched["aiPending"] is False


def test_missing_game_returns_404():
    assert client.get("/api/game/INVALID").status_code == 404
    assert client.post("/api/game/INVALID/move", json={"index": 0}).status_code == 404


def test_delete_game():
    game_id = client.post("/api/game", json={}).json()["id"]
    assert client.delete(f"/api/game/{game_id}").status_code == 200
    assert client.get(f"/api/game/{game_id}").status_code == 404


def test_index_page():
    response = client.get("/")
    assert response.status_code == 200
    assert "Tic Tac Toe" in response.text
