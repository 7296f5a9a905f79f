"""Core rules and move history for RewindXO (tic-tac-toe with time travel)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Tuple, Union

Player = str  # "X" or "O"
Cell = Optional[Player]  # None for empty
Board = Tuple[Cell, ...]

FIRST_PLAYER: Player = "X"
SECOND_PLAYER: Player = "O"
BOARD_SIZE = 9

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

EMPTY_BOARD: Board = (None,) * BOARD_SIZE

logger = logging.getLogger(__name__)


# ---------- Errors ----------


class GameError(Exception):
    """Base class for game rule errors."""


class MoveRejected(GameError, ValueError):
    """Move on an occupied cell, or after the game was won at the active step."""


class InvalidCell(GameError, ValueError):
    """Cell index outside the 3x3 grid."""


class OutOfRange(GameError, IndexError):
    """Jump to a step that is not in the history."""


# ---------- Win detection ----------


def detect_winner(board: Board) -> Optional[Player]:
    """Return the mark of the first complete line, or None.

    Lines are checked in ``WINNING_LINES`` order, so a board with several
    complete lines always reports the same mark.
    """
    for a, b, c in WINNING_LINES:
        v = board[a]
        if v is not None and v == board[b] == board[c]:
            return v
    return None


# ---------- Status ----------


@dataclass(frozen=True)
class InProgress:
    next_player: Player

    def __str__(self) -> str:
        return f"{self.next_player}'s turn!"


@dataclass(frozen=True)
class Won:
    winner: Player

    def __str__(self) -> str:
        return f"{self.winner} wins!!!"


Status = Union[InProgress, Won]


class MoveEntry(NamedTuple):
    index: int
    label: str


def move_label(index: int) -> str:
    return f"Go to move #{index}" if index else "Go to game start"


# ---------- Game ----------


@dataclass
class GameState:
    """History of board snapshots plus a pointer to the active one.

    Whose turn it is follows from the parity of ``active_step``; it is never
    stored, so jumping through history cannot desynchronise it.
    """

    _history: List[Board] = field(
        default_factory=lambda: [EMPTY_BOARD], init=False, repr=False
    )
    _active_step: int = field(default=0, init=False)

    # ---- queries ----

    @property
    def history(self) -> Tuple[Board, ...]:
        return tuple(self._history)

    @property
    def active_step(self) -> int:
        return self._active_step

    @property
    def current_player(self) -> Player:
        return FIRST_PLAYER if self._active_step % 2 == 0 else SECOND_PLAYER

    @property
    def winner(self) -> Optional[Player]:
        return detect_winner(self.current_board())

    def current_board(self) -> Board:
        return self._history[self._active_step]

    def is_full(self) -> bool:
        return all(c is not None for c in self.current_board())

    def status(self) -> Status:
        winner = self.winner
        if winner is not None:
            return Won(winner)
        return InProgress(self.current_player)

    def status_text(self) -> str:
        return str(self.status())

    def move_list(self) -> List[MoveEntry]:
        """One ``(index, label)`` entry per snapshot, for a jump-to-move list."""
        return [MoveEntry(i, move_label(i)) for i in range(len(self._history))]

    # ---- mutations ----

    def play_move(self, cell_index: int) -> None:
        """Place the current player's mark, raising ``MoveRejected`` if illegal.

        Any snapshots after the active step are discarded before the new one
        is appended.
        """
        if (
            isinstance(cell_index, bool)
            or not isinstance(cell_index, int)
            or not 0 <= cell_index < BOARD_SIZE
        ):
            raise InvalidCell(f"Cell index must be between 0 and 8, got {cell_index!r}")

        current = self.current_board()
        if detect_winner(current) is not None:
            raise MoveRejected("Game already finished")
        if current[cell_index] is not None:
            raise MoveRejected("Cell already occupied")

        cells = list(current)
        cells[cell_index] = self.current_player
        del self._history[self._active_step + 1 :]
        self._history.append(tuple(cells))
        self._active_step = len(self._history) - 1

    def apply_move(self, cell_index: int) -> bool:
        """Like ``play_move`` but a rejected move is a silent no-op.

        Returns True when the move was accepted.
        """
        try:
            self.play_move(cell_index)
        except MoveRejected as exc:
            logger.debug("Ignoring move at cell %s: %s", cell_index, exc)
            return False
        return True

    def jump_to(self, step: int) -> None:
        """Make ``step`` the active snapshot without touching the history."""
        if isinstance(step, bool) or not isinstance(step, int):
            raise OutOfRange(f"Step must be an integer, got {step!r}")
        if not 0 <= step < len(self._history):
            raise OutOfRange(
                f"Step {step} is outside the history (0..{len(self._history) - 1})"
            )
        logger.debug("Jumping from step %d to step %d", self._active_step, step)
        self._active_step = step
