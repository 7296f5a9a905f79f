"""Tests for the FastAPI RewindXO interface."""

from __future__ import annotations

from fastapi.testclient import TestClient

from rewindxo import ui
from rewindxo.ui import SESSIONS, app


client = TestClient(app)


def _new_game() -> str:
    response = client.post("/api/game")
    assert response.status_code == 200
    return response.json()["id"]


def _move(game_id: str, cell_index: int):
    return client.post(f"/api/game/{game_id}/move", json={"cellIndex": cell_index})


def test_create_game_and_first_move():
    response = client.post("/api/game")
    assert response.status_code == 200
    payload = response.json()
    assert payload["currentPlayer"] == "X"
    assert payload["board"] == [""] * 9
    assert payload["status"] == "in_progress"
    assert payload["moves"] == [
        {"step": 0, "label": "Go to game start", "active": True}
    ]
    assert payload["id"] in SESSIONS

    game_id = payload["id"]
    move_response = _move(game_id, 4)
    assert move_response.status_code == 200
    state = move_response.json()
    assert state["board"][4] == "X"
    assert state["currentPlayer"] == "O"
    assert state["statusText"] == "O's turn!"
    assert state["activeStep"] == 1
    assert state["moveCount"] == 1
    assert state["moves"][1] == {"step": 1, "label": "Go to move #1", "active": True}

    follow_up = client.get(f"/api/game/{game_id}")
    assert follow_up.status_code == 200
    assert follow_up.json() == state


def test_invalid_move_rejected():
    game_id = _new_game()
    assert _move(game_id, 0).status_code == 200

    # Attempting to play the same cell should fail.
    duplicate_move = _move(game_id, 0)
    assert duplicate_move.status_code == 400
    assert duplicate_move.json()["detail"] == "Cell already occupied"
    assert client.get(f"/api/game/{game_id}").json()["moveCount"] == 1


def test_win_then_move_is_rejected():
    game_id = _new_game()
    for cell in (0, 3, 1, 4, 2):
        state = _move(game_id, cell).json()
    assert state["status"] == "won"
    assert state["winner"] == "X"
    assert state["statusText"] == "X wins!!!"

    rejected = _move(game_id, 8)
    assert rejected.status_code == 400
    assert rejected.json()["detail"] == "Game already finished"


def test_jump_and_branch():
    game_id = _new_game()
    for cell in (0, 3, 1, 4):
        _move(game_id, cell)

    jumped = client.post(f"/api/game/{game_id}/jump", json={"step": 0})
    assert jumped.status_code == 200
    state = jumped.json()
    assert state["board"] == [""] * 9
    assert state["currentPlayer"] == "X"
    assert state["moveCount"] == 4
    assert [move["active"] for move in state["moves"]] == [True] + [False] * 4

    branched = _move(game_id, 8).json()
    assert branched["moveCount"] == 1
    assert branched["board"][8] == "X"
    assert branched["board"][0] == ""


def test_jump_out_of_range():
    game_id = _new_game()
    _move(game_id, 4)

    response = client.post(f"/api/game/{game_id}/jump", json={"step": 2})
    assert response.status_code == 400
    assert response.json()["detail"]
    assert client.get(f"/api/game/{game_id}").json()["activeStep"] == 1


def test_request_validation():
    game_id = _new_game()
    assert _move(game_id, 9).status_code == 422
    response = client.post(f"/api/game/{game_id}/jump", json={"step": -1})
    assert response.status_code == 422


def test_missing_game_returns_404():
    assert client.get("/api/game/missing").status_code == 404
    assert _move("missing", 0).status_code == 404
    missing_jump = client.post("/api/game/missing/jump", json={"step": 0})
    assert missing_jump.status_code == 404


def test_index_page():
    response = client.get("/")
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert "RewindXO" in response.text


def test_idle_games_are_dropped_on_next_create():
    stale_id = _new_game()
    fresh_id = _new_game()
    SESSIONS[stale_id].last_seen -= ui.SESSION_TTL_SECONDS + 1

    newest_id = _new_game()
    assert stale_id not in SESSIONS
    assert fresh_id in SESSIONS
    assert newest_id in SESSIONS
    assert client.get(f"/api/game/{stale_id}").status_code == 404
