"""
Best-move dataset export.

Enumerates every position reachable by legal play and records the move the
search chooses for the side to move, along with the score of each cell.
"""
from __future__ import annotations

import csv
import hashlib
import importlib.util
import json
import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import numpy as np

from .board import Board, apply_move, current_player, empty_board, legal_moves, player_name, serialize_board
from .config import data_dir, get_git_commit
from .rules import Draw, Win, evaluate
from .search import move_scores, search

DATASET_VERSION = "1.0.0"

FORMATS = ("csv", "parquet", "both")


@dataclass
class ExportArgs:
    out: Optional[Path] = None
    format: str = "csv"  # one of: "csv", "parquet", "both"
    cli_argv: List[str] | None = None


def iter_reachable_states() -> Iterator[Board]:
    """Breadth-first walk of every position reachable from the empty board."""
    start = empty_board()
    q = deque([start])
    seen = {start}
    while q:
        s = q.popleft()
        yield s
        if evaluate(s).is_terminal:
            continue
        p = current_player(s)
        for mv in legal_moves(s):
            child = apply_move(s, mv, p)
            if child not in seen:
                seen.add(child)
                q.append(child)


def terminal_counts(states: List[Board]) -> Dict[str, int]:
    counts = {"x": 0, "o": 0, "draw": 0, "nonterminal": 0}
    for s in states:
        outcome = evaluate(s)
        if isinstance(outcome, Win):
            counts[player_name(outcome.player).lower()] += 1
        elif isinstance(outcome, Draw):
            counts["draw"] += 1
        else:
            counts["nonterminal"] += 1
    return counts


def build_best_move_rows(states: Optional[List[Board]] = None) -> List[Dict[str, Any]]:
    if states is None:
        states = list(iter_reachable_states())
    rows: List[Dict[str, Any]] = []
    for s in states:
        if evaluate(s).is_terminal:
            continue
        p = current_player(s)
        res = search(s, p)
        scores = move_scores(s, p)
        row: Dict[str, Any] = {
            'board_state': serialize_board(s),
            'to_move': player_name(p),
            'empty_cells': len(scores),
            'best_move': res.index,
            'score': res.score,
            'optimal_move_count': sum(1 for v in scores.values() if v == res.score),
        }
        for i in range(9):
            row[f'score_{i}'] = scores.get(i)
        rows.append(row)
    rows.sort(key=lambda r: r['board_state'])
    return rows


def _schema_hash(rows: List[Dict[str, Any]]) -> str:
    keys = sorted({k for r in rows for k in r.keys()})
    payload = "\n".join(keys).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()


def _write_csv(path: Path, rows: List[Dict[str, Any]]) -> None:
    fnames = list(rows[0].keys()) if rows else []
    with path.open('w', newline='') as f:
        w = csv.DictWriter(f, fieldnames=fnames)
        w.writeheader()
        for r in rows:
            w.writerow(r)


def _write_parquet(path: Path, rows: List[Dict[str, Any]]) -> bool:
    have_pandas = importlib.util.find_spec('pandas') is not None
    have_pyarrow = importlib.util.find_spec('pyarrow') is not None
    if not (have_pandas and have_pyarrow):
        logging.warning("Parquet export needs pandas and pyarrow; skipping %s", path)
        return False
    import pandas as pd

    df = pd.DataFrame(rows)
    score_cols = [f'score_{i}' for i in range(9)]
    df[score_cols] = df[score_cols].astype('Int8')
    df.to_parquet(path, index=False, engine='pyarrow')
    return True


def run_export(args: ExportArgs) -> Path:
    fmt = (args.format or "csv").lower()
    if fmt not in FORMATS:
        raise ValueError(f"Unknown export format: {args.format}")
    out = args.out if args.out is not None else data_dir()
    out.mkdir(parents=True, exist_ok=True)

    logging.info("Enumerating reachable states…")
    states = list(iter_reachable_states())
    logging.info("Found %d reachable states", len(states))
    rows = build_best_move_rows(states)
    logging.debug("Built %d best-move rows", len(rows))

    files: List[str] = []
    if fmt in {"csv", "both"}:
        csv_path = out / 'ttt_best_moves.csv'
        _write_csv(csv_path, rows)
        files.append(csv_path.name)
        logging.info("Wrote CSV: %s (%d rows)", csv_path, len(rows))
    if fmt in {"parquet", "both"}:
        pq_path = out / 'ttt_best_moves.parquet'
        if _write_parquet(pq_path, rows):
            files.append(pq_path.name)
            logging.info("Wrote Parquet: %s (%d rows)", pq_path, len(rows))

    best = np.array([r['best_move'] for r in rows], dtype=np.int64)
    scores = np.array([r['score'] for r in rows], dtype=np.int64)
    manifest = {
        'dataset_version': DATASET_VERSION,
        'created_at': datetime.now(timezone.utc).isoformat(),
        'git_commit': get_git_commit(),
        'cli_argv': args.cli_argv,
        'files': files,
        'row_counts': {'best_moves': len(rows)},
        'reachable_states': len(states),
        'terminal_counts': terminal_counts(states),
        'schema_hash': _schema_hash(rows),
        'best_move_histogram': np.bincount(best, minlength=9).tolist(),
        'score_counts': {
            str(int(v)): int(c) for v, c in zip(*np.unique(scores, return_counts=True))
        },
    }
    (out / 'manifest.json').write_text(json.dumps(manifest, indent=2, sort_keys=True))
    return out
