"""noughts package.

Tic-tac-toe rules, an exhaustive minimax opponent, a session controller and a
small CLI.

Convenience imports are exposed for common workflows.
"""

from .board import EMPTY, O, X, InvalidBoardError, NoughtsError
from .rules import Draw, InProgress, Win, evaluate
from .search import SearchResult, best_move, move_scores, search
from .session import GameSession

__all__ = [
    "EMPTY",
    "X",
    "O",
    "NoughtsError",
    "InvalidBoardError",
    "evaluate",
    "InProgress",
    "Win",
    "Draw",
    "best_move",
    "search",
    "move_scores",
    "SearchResult",
    "GameSession",
]
