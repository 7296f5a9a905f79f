"""FastAPI-powered web UI for playing RewindXO in the browser."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .game import GameState, MoveRejected, OutOfRange, Won
from .settings import get_logger

get_logger()
logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Container for one game and the lock serialising access to it."""

    state: GameState = field(default_factory=GameState)
    last_seen: float = field(default_factory=lambda: time.time())
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
SESSION_TTL_SECONDS = 60 * 60 * 6  # 6 hours
app = FastAPI(
    title="RewindXO", description="Tic-tac-toe with time travel, played in the browser"
)


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


class JumpRequest(BaseModel):
    """Request payload for travelling to a past (or later) step."""

    step: int = Field(ge=0, description="History index to make active")


def _cleanup_sessions() -> None:
    """Forget games nobody has touched within the session TTL."""

    now = time.time()
    expired = [
        game_id
        for game_id, session in list(SESSIONS.items())
        if now - session.last_seen >= SESSION_TTL_SECONDS
    ]
    for game_id in expired:
        SESSIONS.pop(game_id, None)
    if expired:
        logger.info("Dropped %d idle game(s)", len(expired))


def _create_session() -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    _cleanup_sessions()
    session = GameSession()
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created game %s", session_id)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        session = SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc
    session.last_seen = time.time()
    return session


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        state = session.state
        status = state.status()
        moves: List[Dict[str, object]] = [
            {"step": index, "label": label, "active": index == state.active_step}
            for index, label in state.move_list()
        ]
        return {
            "id": game_id,
            "board": [c or "" for c in state.current_board()],
            "currentPlayer": state.current_player,
            "winner": status.winner if isinstance(status, Won) else None,
            "full": state.is_full(),
            "status": "won" if isinstance(status, Won) else "in_progress",
            "statusText": str(status),
            "activeStep": state.active_step,
            "moveCount": len(state.history) - 1,
            "moves": moves,
        }


@app.post("/api/game")
def create_game() -> Dict[str, object]:
    game_id, session = _create_session()
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        try:
            session.state.play_move(request.cell_index)
        except MoveRejected as exc:
            logger.warning("Rejected move on game %s: %s", game_id, exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/jump")
def jump(game_id: str, request: JumpRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        try:
            session.state.jump_to(request.step)
        except OutOfRange as exc:
            logger.warning("Rejected jump on game %s: %s", game_id, exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>RewindXO</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
        font-weight: 400;
      }
      * {
        box-sizing: border-box;
      }
      body {
        margin: 0;
        background: radial-gradient(circle at top, #f2f5ff, #dbe0ff 40%, #cfd8ff 70%);
        min-height: 100vh;
        display: flex;
        justify-content: center;
        padding: 2rem 1rem 3rem;
        color: #13203a;
      }
      main {
        background: rgba(255, 255, 255, 0.92);
        border-radius: 18px;
        box-shadow: 0 20px 40px rgba(34, 47, 79, 0.16);
        padding: clamp(1.5rem, 4vw, 2.5rem);
        width: min(640px, 100%);
      }
      h1 {
        margin: 0 0 0.5rem;
        font-size: clamp(1.8rem, 2.4vw + 1.2rem, 2.4rem);
        text-align: center;
        letter-spacing: 0.06em;
        color: #0c1a33;
      }
      .tagline {
        text-align: center;
        margin: 0 0 1.5rem;
        color: rgba(19, 32, 58, 0.75);
        font-weight: 500;
      }
      .game {
        display: flex;
        flex-wrap: wrap;
        gap: 2rem;
        justify-content: center;
      }
      .board {
        display: grid;
        grid-template-columns: repeat(3, 72px);
        grid-template-rows: repeat(3, 72px);
        gap: 6px;
      }
      .square {
        border: none;
        border-radius: 10px;
        background: #eef1ff;
        font-size: 2rem;
        font-weight: 700;
        cursor: pointer;
        color: #13203a;
      }
      .square.x {
        color: #2d5bff;
      }
      .square.o {
        color: #ff5a7a;
      }
      .square:disabled {
        cursor: default;
      }
      .status {
        font-weight: 600;
        margin-bottom: 0.75rem;
      }
      .message {
        min-height: 1.2rem;
        color: #c2284a;
        font-size: 0.9rem;
      }
      ol {
        margin: 0;
        padding-left: 1.4rem;
      }
      li button {
        margin: 0.15rem 0;
        border: 1px solid #c9d1f5;
        border-radius: 6px;
        background: white;
        padding: 0.25rem 0.6rem;
        cursor: pointer;
      }
      li button.active {
        background: #2d5bff;
        color: white;
        border-color: #2d5bff;
      }
      .toolbar {
        text-align: center;
        margin-top: 1.5rem;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>RewindXO</h1>
      <p class=\"tagline\">Tic-tac-toe where every move can be undone.</p>
      <div class=\"game\">
        <div class=\"board\" id=\"board\"></div>
        <div class=\"game-info\">
          <div class=\"status\" id=\"status\">Setting up your game…</div>
          <ol id=\"moves\"></ol>
          <div class=\"message\" id=\"message\"></div>
        </div>
      </div>
      <div class=\"toolbar\">
        <button id=\"new-game\">New game</button>
      </div>
    </main>
    <script>
      const boardEl = document.getElementById('board');
      const statusEl = document.getElementById('status');
      const movesEl = document.getElementById('moves');
      const messageEl = document.getElementById('message');
      const newGameButton = document.getElementById('new-game');

      let gameId = null;
      let gameState = null;
      let isRequestPending = false;

      async function request(url, body) {
        const options = body === undefined
          ? { method: 'POST' }
          : {
              method: 'POST',
              headers: { 'Content-Type': 'application/json' },
              body: JSON.stringify(body),
            };
        const response = await fetch(url, options);
        if (!response.ok) {
          const payload = await response.json().catch(() => ({}));
          const detail = typeof payload?.detail === 'string' ? payload.detail : 'Request failed';
          throw new Error(detail);
        }
        return response.json();
      }

      async function send(url, body) {
        if (isRequestPending) return;
        isRequestPending = true;
        messageEl.textContent = '';
        try {
          setState(await request(url, body));
        } catch (error) {
          messageEl.textContent = error.message || 'Network error. Please try again.';
        } finally {
          isRequestPending = false;
        }
      }

      function startGame() {
        gameId = null;
        gameState = null;
        statusEl.textContent = 'Setting up your game…';
        return send('/api/game');
      }

      function handleClick(cellIndex) {
        if (!gameId || !gameState) return;
        if (gameState.winner || gameState.board[cellIndex]) return;
        return send(`/api/game/${gameId}/move`, { cellIndex });
      }

      function jumpTo(step) {
        if (!gameId) return;
        return send(`/api/game/${gameId}/jump`, { step });
      }

      function setState(data) {
        gameId = data.id;
        gameState = data;
        renderBoard();
        renderMoves();
        statusEl.textContent = gameState.statusText;
      }

      function renderBoard() {
        boardEl.innerHTML = '';
        gameState.board.forEach((value, index) => {
          const square = document.createElement('button');
          square.className = 'square';
          if (value) {
            square.classList.add(value === 'X' ? 'x' : 'o');
          }
          square.textContent = value;
          square.disabled = Boolean(value || gameState.winner);
          square.addEventListener('click', () => handleClick(index));
          boardEl.appendChild(square);
        });
      }

      function renderMoves() {
        movesEl.innerHTML = '';
        gameState.moves.forEach((move) => {
          const item = document.createElement('li');
          const button = document.createElement('button');
          button.textContent = move.label;
          if (move.active) {
            button.classList.add('active');
          }
          button.addEventListener('click', () => jumpTo(move.step));
          item.appendChild(button);
          movesEl.appendChild(item);
        });
      }

      newGameButton.addEventListener('click', startGame);
      startGame();
    </script>
  </body>
</html>
"""
