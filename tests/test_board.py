import pytest

from noughts.board import (
    IllegalMoveError,
    InvalidBoardError,
    O,
    X,
    apply_move,
    current_player,
    deserialize_board,
    format_board,
    is_valid_state,
    parse_player,
    serialize_board,
    validate_board,
)


def test_serialize_roundtrip_example():
    b = deserialize_board("100020000")
    assert b == (X, 0, 0, 0, O, 0, 0, 0, 0)
    assert serialize_board(b) == "100020000"


@pytest.mark.parametrize("bad", ["abc", "012345678", "0123456789", "12345678x", ""])
def test_deserialize_rejects_bad_strings(bad):
    with pytest.raises(InvalidBoardError):
        deserialize_board(bad)


def test_validate_board():
    assert validate_board([0] * 9) == (0,) * 9
    with pytest.raises(InvalidBoardError):
        validate_board([0] * 10)
    with pytest.raises(ValueError):
        validate_board([0] * 8 + ["X"])


def test_apply_move_returns_new_board():
    b = (0,) * 9
    nb = apply_move(b, 4, X)
    assert b == (0,) * 9
    assert nb[4] == X
    with pytest.raises(IllegalMoveError):
        apply_move(nb, 4, O)
    with pytest.raises(IllegalMoveError):
        apply_move(nb, 9, O)


def test_current_player_and_validity():
    assert current_player((0,) * 9) == X
    assert current_player(deserialize_board("100000000")) == O
    assert is_valid_state(deserialize_board("100020000"))
    assert not is_valid_state(deserialize_board("110000000"))
    # X wins but O moved last
    assert not is_valid_state(deserialize_board("111220200"))
    assert not is_valid_state(deserialize_board("111222000"))


def test_parse_player():
    assert parse_player("x") == X
    assert parse_player("2") == O
    with pytest.raises(ValueError):
        parse_player("Z")


def test_format_board():
    b = deserialize_board("100020000")
    assert format_board(b) == "X . .\n. O .\n. . ."
    assert format_board(b, show_indices=True).splitlines()[0] == "X 2 3"
