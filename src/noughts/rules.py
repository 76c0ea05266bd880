"""
Rules engine: classify a board as won, drawn or still in progress.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple, Union

from .board import EMPTY, WIN_PATTERNS, player_name


@dataclass(frozen=True)
class InProgress:
    is_terminal = False

    def describe(self) -> str:
        return "outcome=in_progress"


@dataclass(frozen=True)
class Win:
    player: int
    line: Tuple[int, int, int]
    is_terminal = True

    def describe(self) -> str:
        return f"outcome=win player={player_name(self.player)} line={list(self.line)}"


@dataclass(frozen=True)
class Draw:
    is_terminal = True

    def describe(self) -> str:
        return "outcome=draw"


Outcome = Union[InProgress, Win, Draw]

IN_PROGRESS = InProgress()
DRAW = Draw()


def evaluate(board: Sequence[int]) -> Outcome:
    """Classify ``board``.

    The first winning line in row, column, diagonal order decides the winner,
    which only matters for boards that could not arise from legal play.
    """
    for a, b, c in WIN_PATTERNS:
        v = board[a]
        if v != EMPTY and v == board[b] and v == board[c]:
            return Win(v, (a, b, c))
    if EMPTY not in board:
        return DRAW
    return IN_PROGRESS
