from typing import List

import pytest
try:
    from hypothesis import given, settings, strategies as st  # type: ignore
except ModuleNotFoundError:  # pragma: no cover - test infra
    pytest.skip("Hypothesis not installed", allow_module_level=True)

from noughts.board import EMPTY, WIN_PATTERNS, current_player, is_valid_state, opponent
from noughts.datasets import iter_reachable_states
from noughts.rules import Draw, InProgress, Win, evaluate
from noughts.search import best_move, search

REACHABLE = list(iter_reachable_states())
NONTERMINAL = [s for s in REACHABLE if not evaluate(s).is_terminal]

boards = st.lists(st.integers(min_value=0, max_value=2), min_size=9, max_size=9)


@given(boards)
def test_outcome_classification(board: List[int]):
    res = evaluate(board)
    lines = [pat for pat in WIN_PATTERNS
             if board[pat[0]] != EMPTY and board[pat[0]] == board[pat[1]] == board[pat[2]]]
    if lines:
        assert isinstance(res, Win)
        assert res.line == lines[0]
        assert res.player == board[lines[0][0]]
    elif EMPTY not in board:
        assert isinstance(res, Draw)
    else:
        assert isinstance(res, InProgress)


@given(boards)
def test_evaluate_is_deterministic(board: List[int]):
    assert evaluate(board) == evaluate(tuple(board))


@settings(max_examples=200)
@given(st.sampled_from(NONTERMINAL), st.sampled_from([1, 2]))
def test_best_move_is_an_empty_cell(board, player):
    mv = best_move(board, player)
    assert mv is not None
    assert board[mv] == EMPTY


@settings(max_examples=200)
@given(st.sampled_from(NONTERMINAL))
def test_side_to_move_never_drops_value(board):
    # playing the chosen move keeps the side to move's score
    p = current_player(board)
    res = search(board, p)
    child = list(board)
    child[res.index] = p
    outcome = evaluate(child)
    if isinstance(outcome, Win):
        assert outcome.player == p
        assert res.score == 10
    elif not outcome.is_terminal:
        reply = search(child, opponent(p))
        assert reply.score == -res.score


def test_reachable_states_are_valid():
    assert len(REACHABLE) == 5478
    assert all(is_valid_state(s) for s in REACHABLE)
