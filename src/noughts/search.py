"""
Exhaustive minimax move search from a fixed searching player's perspective.
Scoring policy:
- Terminal win for the searching player scores +10, a loss -10, a draw 0.
- Scores are not adjusted for depth, so a slow win ranks the same as a fast one.
- Among equal scores the lowest cell index wins.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Optional, Sequence, Tuple

from .board import EMPTY, PLAYERS, Board, legal_moves, opponent, validate_board
from .rules import Draw, Win, evaluate

WIN_SCORE = 10
LOSS_SCORE = -10
DRAW_SCORE = 0


@dataclass(frozen=True)
class SearchResult:
    index: int
    score: int


def _terminal_score(board_t: Board, searching: int) -> Optional[int]:
    outcome = evaluate(board_t)
    if isinstance(outcome, Win):
        return WIN_SCORE if outcome.player == searching else LOSS_SCORE
    if isinstance(outcome, Draw):
        return DRAW_SCORE
    return None


def _check_player(player: int) -> None:
    if player not in PLAYERS:
        raise ValueError(f"Unknown player: {player!r}")


def _child(board_t: Board, idx: int, player: int) -> Board:
    lst = list(board_t)
    lst[idx] = player
    return tuple(lst)


@lru_cache(maxsize=None)
def _minimax(board_t: Board, acting: int, searching: int) -> Tuple[Optional[int], int]:
    score = _terminal_score(board_t, searching)
    if score is not None:
        return None, score

    best_idx: Optional[int] = None
    best_score = 0
    nxt = opponent(acting)
    for mv in legal_moves(board_t):
        _, s = _minimax(_child(board_t, mv, acting), nxt, searching)
        if best_idx is None:
            best_idx, best_score = mv, s
        elif acting == searching and s > best_score:
            best_idx, best_score = mv, s
        elif acting != searching and s < best_score:
            best_idx, best_score = mv, s
    return best_idx, best_score


def search(board: Sequence[int], player: int) -> Optional[SearchResult]:
    """Return the optimal move for ``player`` and its score.

    ``player`` acts first on ``board`` regardless of piece counts. Returns None
    when the board is full or already decided.
    """
    board_t = validate_board(board)
    _check_player(player)
    idx, score = _minimax(board_t, player, player)
    if idx is None:
        return None
    return SearchResult(idx, score)


def best_move(board: Sequence[int], player: int) -> Optional[int]:
    res = search(board, player)
    return res.index if res is not None else None


def move_scores(board: Sequence[int], player: int) -> Dict[int, int]:
    """Score of every empty cell if ``player`` were to take it now."""
    board_t = validate_board(board)
    _check_player(player)
    if _terminal_score(board_t, player) is not None:
        return {}
    nxt = opponent(player)
    return {
        mv: _minimax(_child(board_t, mv, player), nxt, player)[1]
        for mv in range(9)
        if board_t[mv] == EMPTY
    }


def cache_info():
    return _minimax.cache_info()


def clear_cache() -> None:
    _minimax.cache_clear()
