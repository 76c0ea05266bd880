"""
Board basics: representation, serialization, validity and move helpers.
Notes:
- A board is a tuple of 9 cells: 0=empty, 1=X, 2=O, row-major. X always starts.
- Boards are never mutated in place; helpers return new tuples.
- Valid (reachable) states have equal counts (X to move) or one extra X (O to move).
"""
from typing import Iterable, List, Sequence, Tuple

EMPTY = 0
X = 1
O = 2

PLAYERS = (X, O)

WIN_PATTERNS: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)

Board = Tuple[int, ...]

_NAMES = {X: "X", O: "O"}


class NoughtsError(Exception):
    """Base class for errors raised by the noughts package."""


class InvalidBoardError(NoughtsError, ValueError):
    pass


class IllegalMoveError(NoughtsError, ValueError):
    pass


def empty_board() -> Board:
    return (EMPTY,) * 9


def validate_board(board: Iterable[int]) -> Board:
    """Return ``board`` as a tuple, rejecting wrong lengths or cell values."""
    b = tuple(board)
    if len(b) != 9:
        raise InvalidBoardError(f"Board must have 9 cells, got {len(b)}")
    for i, v in enumerate(b):
        if v not in (EMPTY, X, O):
            raise InvalidBoardError(f"Invalid cell value at {i}: {v!r}")
    return b


def serialize_board(board: Sequence[int]) -> str:
    return ''.join(str(cell) for cell in board)


def deserialize_board(board_str: str) -> Board:
    raw = board_str.strip()
    if len(raw) != 9 or any(c not in "012" for c in raw):
        raise InvalidBoardError("Invalid board string. Must be 9 chars of 0/1/2.")
    return tuple(int(c) for c in raw)


def opponent(player: int) -> int:
    return O if player == X else X


def player_name(player: int) -> str:
    return _NAMES[player]


def parse_player(text: str) -> int:
    key = text.strip().upper()
    if key in ("X", "1"):
        return X
    if key in ("O", "2"):
        return O
    raise ValueError(f"Unknown player: {text!r} (expected X or O)")


def legal_moves(board: Sequence[int]) -> List[int]:
    return [i for i, v in enumerate(board) if v == EMPTY]


def apply_move(board: Sequence[int], idx: int, player: int) -> Board:
    if not 0 <= idx < 9:
        raise IllegalMoveError(f"Cell index out of range: {idx}")
    if board[idx] != EMPTY:
        raise IllegalMoveError(f"Cell {idx} is already occupied")
    lst = list(board)
    lst[idx] = player
    return tuple(lst)


def get_piece_counts(board: Sequence[int]) -> Tuple[int, int]:
    return sum(1 for v in board if v == X), sum(1 for v in board if v == O)


def current_player(board: Sequence[int]) -> int:
    x, o = get_piece_counts(board)
    return X if x == o else O


def count_lines(board: Sequence[int], player: int) -> int:
    return sum(1 for pat in WIN_PATTERNS if all(board[i] == player for i in pat))


def is_valid_state(board: Sequence[int]) -> bool:
    """True if ``board`` can arise from legal alternating play starting with X."""
    x_count, o_count = get_piece_counts(board)
    if not (x_count == o_count or x_count == o_count + 1):
        return False
    x_lines = count_lines(board, X)
    o_lines = count_lines(board, O)
    if x_lines and o_lines:
        return False
    if x_lines and x_count != o_count + 1:
        return False
    if o_lines and x_count != o_count:
        return False
    return True


def format_board(board: Sequence[int], show_indices: bool = False) -> str:
    def cell(i: int) -> str:
        v = board[i]
        if v == EMPTY:
            return str(i + 1) if show_indices else "."
        return _NAMES[v]
    rows = [" ".join(cell(r * 3 + c) for c in range(3)) for r in range(3)]
    return "\n".join(rows)
