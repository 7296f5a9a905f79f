"""RewindXO package exposing the game core and the web application."""

from .game import (
    GameState,
    InProgress,
    InvalidCell,
    MoveRejected,
    OutOfRange,
    WINNING_LINES,
    Won,
    detect_winner,
)
from .ui import app

__all__ = [
    "GameState",
    "InProgress",
    "InvalidCell",
    "MoveRejected",
    "OutOfRange",
    "WINNING_LINES",
    "Won",
    "app",
    "detect_winner",
]
