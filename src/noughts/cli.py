from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .board import (
    NoughtsError,
    current_player,
    deserialize_board,
    is_valid_state,
    parse_player,
    player_name,
)
from .config import MODES, Settings
from .datasets import FORMATS, ExportArgs, run_export
from .rules import evaluate
from .search import move_scores, search
from .selfplay import self_play
from .session import GameSession, Scoreboard
from . import terminal


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="noughts", description="Tic-tac-toe with an unbeatable computer")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print environment and dependency info and exit",
    )

    p_eval = sub.add_parser(
        "evaluate",
        help="Classify a board as win/draw/in progress (9 digits, 0=empty,1=X,2=O)",
    )
    p_eval.add_argument("--board", required=True, help="Board string, e.g., 111220000")

    p_best = sub.add_parser("best-move", help="Choose the optimal move for a player")
    p_best.add_argument("--board", required=True, help="Board string, e.g., 110220000")
    p_best.add_argument("--player", default=None, help="X or O (default: side to move)")

    p_self = sub.add_parser("selfplay", help="Play the search against itself from the empty board")
    p_self.add_argument("--games", type=int, default=1, help="Number of games (default: 1)")

    p_play = sub.add_parser("play", help="Play in the terminal")
    p_play.add_argument("--mode", choices=list(MODES), default=None,
                        help="pvp or cpu (default: NOUGHTS_MODE or cpu)")
    p_play.add_argument("--cpu", default=None, help="Computer's mark, X or O (default: O)")
    p_play.add_argument("--delay-ms", type=int, default=None, help="Computer reply delay")

    p_ds = sub.add_parser("datasets", help="Dataset utilities")
    g = p_ds.add_subparsers(dest="subcmd")
    p_export = g.add_parser("export", help="Export the best move of every reachable position")
    p_export.add_argument(
        "--out", type=Path, default=None, help="Output directory (default: NOUGHTS_DATA_DIR or data_raw)"
    )
    p_export.add_argument(
        "--format",
        choices=list(FORMATS),
        default="csv",
        help="Export format: csv (default), parquet, both",
    )

    return p


def _print_info() -> None:
    import importlib.util
    import platform

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["numpy", "pandas", "pyarrow"]:
        spec = importlib.util.find_spec(pkg)
        if spec is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            ver = getattr(mod, "__version__", "?")
            print(f"{pkg}={ver}")


def _read_board(raw: str, require_reachable: bool = True):
    b = deserialize_board(raw)
    if require_reachable and not is_valid_state(b):
        raise NoughtsError("Board is not a valid reachable state.")
    return b


def _cmd_evaluate(ns: argparse.Namespace) -> int:
    b = _read_board(ns.board, require_reachable=False)
    logging.info("%s", evaluate(b).describe())
    return 0


def _cmd_best_move(ns: argparse.Namespace) -> int:
    b = _read_board(ns.board)
    player = parse_player(ns.player) if ns.player else current_player(b)
    outcome = evaluate(b)
    if outcome.is_terminal:
        logging.error("Game already over (%s); no move to choose.", outcome.describe())
        return 2
    res = search(b, player)
    logging.info(
        "player=%s best_move=%d score=%d scores=%s",
        player_name(player),
        res.index,
        res.score,
        move_scores(b, player),
    )
    return 0


def _cmd_selfplay(ns: argparse.Namespace) -> int:
    if ns.games < 1:
        logging.error("--games must be >= 1")
        return 2
    tally = Scoreboard()
    for i in range(ns.games):
        res = self_play()
        tally.record(res.outcome)
        logging.debug("game=%d moves=%s %s", i, res.moves, res.outcome.describe())
    logging.info("games=%d x_wins=%d o_wins=%d draws=%d", ns.games, tally.x, tally.o, tally.draws)
    return 0


def _cmd_play(ns: argparse.Namespace) -> int:
    base = Settings.from_env()
    settings = Settings(
        mode=ns.mode or base.mode,
        cpu_player=parse_player(ns.cpu) if ns.cpu else base.cpu_player,
        cpu_delay_ms=ns.delay_ms if ns.delay_ms is not None else base.cpu_delay_ms,
    )
    session = GameSession(settings=settings)
    return terminal.run(session, sys.stdin, sys.stdout)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    if getattr(ns, "version", False):
        try:
            from importlib.metadata import version as _ver

            print(_ver("noughts"))
        except Exception:
            print("unknown")
        return 0
    if getattr(ns, "info", False):
        _print_info()
        return 0

    handlers = {
        "evaluate": _cmd_evaluate,
        "best-move": _cmd_best_move,
        "selfplay": _cmd_selfplay,
        "play": _cmd_play,
    }
    try:
        if ns.cmd in handlers:
            return handlers[ns.cmd](ns)
        if ns.cmd == "datasets" and ns.subcmd == "export":
            out = run_export(ExportArgs(
                out=ns.out,
                format=ns.format,
                cli_argv=list(argv) if argv is not None else None,
            ))
            logging.info("Exported datasets to: %s", out)
            return 0
    except (NoughtsError, ValueError) as e:
        logging.error("%s", e)
        return 2

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
