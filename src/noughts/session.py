"""
Game session controller.

A ``GameSession`` owns all mutable game state (board, turn, scores, mode) in a
single ``GameState`` record and calls the pure rules/search functions. Input
from any presentation layer is turned into command objects and applied with
``GameSession.handle``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from .board import EMPTY, O, X, Board, apply_move, empty_board, opponent, player_name
from .config import MODES, Settings
from .rules import IN_PROGRESS, Draw, Outcome, Win, evaluate
from .search import best_move


@dataclass
class Scoreboard:
    x: int = 0
    o: int = 0
    draws: int = 0

    def record(self, outcome: Outcome) -> None:
        if isinstance(outcome, Win):
            if outcome.player == X:
                self.x += 1
            else:
                self.o += 1
        elif isinstance(outcome, Draw):
            self.draws += 1

    def reset(self) -> None:
        self.x = self.o = self.draws = 0

    def as_dict(self) -> dict:
        return {"X": self.x, "O": self.o, "draws": self.draws}


@dataclass
class GameState:
    board: Board = field(default_factory=empty_board)
    current_turn: int = X
    playing: bool = True
    outcome: Outcome = IN_PROGRESS
    mode: str = "cpu"
    cpu_player: int = O
    scores: Scoreboard = field(default_factory=Scoreboard)


# Commands produced by the presentation layer.

@dataclass(frozen=True)
class PlaceMark:
    index: int


@dataclass(frozen=True)
class Restart:
    preserve_score: bool = True


@dataclass(frozen=True)
class ResetScore:
    pass


@dataclass(frozen=True)
class ToggleMode:
    pass


@dataclass(frozen=True)
class SetMode:
    mode: str


Command = Union[PlaceMark, Restart, ResetScore, ToggleMode, SetMode]


def parse_command(text: str) -> Optional[Command]:
    """Map a keystroke/line of input to a command.

    ``1``-``9`` place on cells 0-8, ``r`` restarts, ``s`` resets the score and
    ``c`` toggles between two-player and computer mode.
    """
    key = text.strip().lower()
    if len(key) == 1 and key in "123456789":
        return PlaceMark(int(key) - 1)
    if key == "r":
        return Restart()
    if key == "s":
        return ResetScore()
    if key == "c":
        return ToggleMode()
    if key in MODES:
        return SetMode(key)
    return None


class GameSession:
    def __init__(self, mode: Optional[str] = None, cpu_player: Optional[int] = None,
                 settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        mode = mode or self.settings.mode
        if mode not in MODES:
            raise ValueError(f"Unknown mode: {mode!r}")
        self.state = GameState(
            mode=mode,
            cpu_player=cpu_player if cpu_player is not None else self.settings.cpu_player,
        )

    @property
    def awaiting_cpu(self) -> bool:
        s = self.state
        return s.mode == "cpu" and s.playing and s.current_turn == s.cpu_player

    def place(self, index: int) -> bool:
        """Place the side to move on ``index``; False if the placement is ignored."""
        if self.awaiting_cpu:
            logging.debug("Ignoring placement at %s: computer to move", index)
            return False
        return self._place(index)

    def _place(self, index: int) -> bool:
        s = self.state
        if not s.playing:
            logging.debug("Ignoring placement at %s: game over", index)
            return False
        if not 0 <= index < 9 or s.board[index] != EMPTY:
            logging.debug("Ignoring placement at %s: not an empty cell", index)
            return False
        s.board = apply_move(s.board, index, s.current_turn)
        outcome = evaluate(s.board)
        if outcome.is_terminal:
            self._end_game(outcome)
        else:
            s.current_turn = opponent(s.current_turn)
        return True

    def _end_game(self, outcome: Outcome) -> None:
        s = self.state
        s.playing = False
        s.outcome = outcome
        s.scores.record(outcome)
        logging.info("Game over: %s", outcome.describe())

    def play_cpu(self) -> Optional[int]:
        """Let the computer move if it is its turn; returns the chosen cell."""
        if not self.awaiting_cpu:
            return None
        idx = best_move(self.state.board, self.state.cpu_player)
        if idx is None:
            return None
        self._place(idx)
        logging.debug("Computer (%s) plays %d", player_name(self.state.cpu_player), idx)
        return idx

    def restart(self, preserve_score: bool = True) -> None:
        s = self.state
        s.board = empty_board()
        s.current_turn = X
        s.playing = True
        s.outcome = IN_PROGRESS
        if not preserve_score:
            s.scores.reset()

    def reset_scores(self) -> None:
        self.restart(preserve_score=False)

    def set_mode(self, mode: str) -> None:
        if mode not in MODES:
            raise ValueError(f"Unknown mode: {mode!r}")
        self.state.mode = mode
        self.restart(preserve_score=True)

    def toggle_mode(self) -> None:
        self.set_mode("pvp" if self.state.mode == "cpu" else "cpu")

    def handle(self, command: Command) -> bool:
        if isinstance(command, PlaceMark):
            return self.place(command.index)
        if isinstance(command, Restart):
            self.restart(command.preserve_score)
        elif isinstance(command, ResetScore):
            self.reset_scores()
        elif isinstance(command, ToggleMode):
            self.toggle_mode()
        elif isinstance(command, SetMode):
            self.set_mode(command.mode)
        else:
            raise TypeError(f"Unknown command: {command!r}")
        return True

    def status_text(self) -> str:
        outcome = self.state.outcome
        if isinstance(outcome, Win):
            return f"{player_name(outcome.player)} wins!"
        if isinstance(outcome, Draw):
            return "Draw"
        return player_name(self.state.current_turn)
