"""Optimal-vs-optimal games from the empty board."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .board import X, Board, apply_move, empty_board, opponent
from .rules import Outcome, evaluate
from .search import best_move


@dataclass(frozen=True)
class SelfPlayResult:
    moves: List[int]
    board: Board
    outcome: Outcome


def self_play(first_player: int = X) -> SelfPlayResult:
    board = empty_board()
    player = first_player
    moves: List[int] = []
    outcome = evaluate(board)
    while not outcome.is_terminal:
        mv = best_move(board, player)
        if mv is None:
            break
        board = apply_move(board, mv, player)
        moves.append(mv)
        player = opponent(player)
        outcome = evaluate(board)
    return SelfPlayResult(moves=moves, board=board, outcome=outcome)
