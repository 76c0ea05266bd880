#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import math
import statistics as stats
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from noughts.board import X
from noughts.datasets import ExportArgs, run_export
from noughts.search import best_move, cache_info, clear_cache


def ci95(values: List[float]) -> Tuple[float, float]:
    if not values:
        return (float("nan"), float("nan"))
    m = stats.fmean(values)
    s = stats.pstdev(values) if len(values) > 1 else 0.0
    half = 1.96 * (s / math.sqrt(len(values)))
    return m, half


@dataclass
class Config:
    repeats: int = 10
    out: Path = Path("data_raw") / "bench"


def main() -> int:
    ap = argparse.ArgumentParser(description="Time the opening search and the dataset export")
    ap.add_argument("--repeats", type=int, default=Config.repeats)
    ap.add_argument("--out", type=Path, default=Config.out)
    ns = ap.parse_args()
    cfg = Config(repeats=ns.repeats, out=ns.out)
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    search_times: List[float] = []
    export_times: List[float] = []
    for _ in range(cfg.repeats):
        clear_cache()
        t0 = time.perf_counter()
        best_move((0,) * 9, X)
        search_times.append(time.perf_counter() - t0)
        logging.debug("%s", cache_info())

        t1 = time.perf_counter()
        run_export(ExportArgs(out=cfg.out))
        export_times.append(time.perf_counter() - t1)

    m_search, h_search = ci95(search_times)
    m_export, h_export = ci95(export_times)
    logging.info("opening_search_mean_s=%.4f ci95_half_s=%.4f", m_search, h_search)
    logging.info("export_mean_s=%.4f ci95_half_s=%.4f", m_export, h_export)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
