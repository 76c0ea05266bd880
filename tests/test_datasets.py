import csv
import json
from pathlib import Path

import pytest

from noughts.board import EMPTY, deserialize_board
from noughts.datasets import (
    ExportArgs,
    build_best_move_rows,
    iter_reachable_states,
    run_export,
    terminal_counts,
)
from noughts.search import best_move


@pytest.fixture(scope="module")
def states():
    return list(iter_reachable_states())


def test_reachable_counts(states):
    assert len(states) == 5478
    assert len(set(states)) == len(states)
    assert states[0] == (EMPTY,) * 9
    assert terminal_counts(states) == {"x": 626, "o": 316, "draw": 16, "nonterminal": 4520}


def test_rows_agree_with_search(states):
    rows = build_best_move_rows(states)
    assert len(rows) == 4520
    by_key = {r['board_state']: r for r in rows}
    opening = by_key['000000000']
    assert opening['best_move'] == 0
    assert opening['score'] == 0
    assert opening['optimal_move_count'] == 9
    for key in ('100020000', '110220000', '120010000'):
        r = by_key[key]
        b = deserialize_board(key)
        assert r['best_move'] == best_move(b, 1 if r['to_move'] == 'X' else 2)
        assert r[f"score_{r['best_move']}"] == r['score']
        assert b[r['best_move']] == EMPTY


def test_run_export_reproducible(tmp_path: Path):
    out1 = run_export(ExportArgs(out=tmp_path / "exp1"))
    out2 = run_export(ExportArgs(out=tmp_path / "exp2"))
    b1 = (out1 / "ttt_best_moves.csv").read_bytes()
    b2 = (out2 / "ttt_best_moves.csv").read_bytes()
    assert b1 == b2

    m1 = json.loads((out1 / "manifest.json").read_text())
    m2 = json.loads((out2 / "manifest.json").read_text())
    for m in (m1, m2):
        m.pop("created_at", None)
    assert m1 == m2
    assert m1["row_counts"] == {"best_moves": 4520}
    assert m1["reachable_states"] == 5478
    assert sum(m1["best_move_histogram"]) == 4520
    assert len(m1["best_move_histogram"]) == 9
    assert sum(m1["score_counts"].values()) == 4520
    assert m1["files"] == ["ttt_best_moves.csv"]

    with (out1 / "ttt_best_moves.csv").open(newline='') as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 4520
    assert rows[0]['board_state'] == '000000000'


def test_parquet_export(tmp_path: Path):
    pd = pytest.importorskip("pandas")
    pytest.importorskip("pyarrow")
    out = run_export(ExportArgs(out=tmp_path / "pq", format="both"))
    df = pd.read_parquet(out / "ttt_best_moves.parquet")
    assert len(df) == 4520
    assert set(json.loads((out / "manifest.json").read_text())["files"]) == {
        "ttt_best_moves.csv", "ttt_best_moves.parquet",
    }
    # occupied cells have no score
    row = df[df['board_state'] == '100020000'].iloc[0]
    assert pd.isna(row['score_0'])
    assert not pd.isna(row['score_1'])


def test_unknown_format_rejected(tmp_path: Path):
    with pytest.raises(ValueError):
        run_export(ExportArgs(out=tmp_path, format="xlsx"))
