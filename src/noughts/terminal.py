"""
Line-based terminal front end for a ``GameSession``.

Reads one command per line (``1``-``9`` to place, ``r`` restart, ``s`` reset
score, ``c`` toggle computer mode, ``q`` quit) and renders the board after
every change.
"""
from __future__ import annotations

import time
from typing import Callable, Optional, TextIO

from .board import format_board, player_name
from .rules import Win
from .session import GameSession, PlaceMark, parse_command

HELP = "Cells are numbered 1-9. Commands: r=restart s=reset score c=toggle computer q=quit"


def render(session: GameSession) -> str:
    s = session.state
    lines = [format_board(s.board, show_indices=True)]
    if isinstance(s.outcome, Win):
        lines.append(f"Line: {' '.join(str(i + 1) for i in s.outcome.line)}")
    lines.append(f"Status: {session.status_text()}")
    scores = s.scores
    mode = "vs computer" if s.mode == "cpu" else "two players"
    lines.append(f"X {scores.x} | O {scores.o} | Draws {scores.draws} ({mode})")
    return "\n".join(lines)


def run(session: GameSession, stdin: TextIO, stdout: TextIO,
        sleep: Optional[Callable[[float], None]] = None) -> int:
    sleep = sleep or time.sleep
    delay = session.settings.cpu_delay_ms / 1000.0

    def show() -> None:
        stdout.write(render(session) + "\n\n")
        stdout.flush()

    def cpu_turn() -> None:
        if session.awaiting_cpu:
            sleep(delay)
            idx = session.play_cpu()
            if idx is not None:
                stdout.write(f"Computer ({player_name(session.state.cpu_player)}) plays {idx + 1}\n")
                show()

    stdout.write(HELP + "\n\n")
    show()
    cpu_turn()
    for line in stdin:
        raw = line.strip()
        if not raw:
            continue
        if raw.lower() == "q":
            break
        cmd = parse_command(raw)
        if cmd is None:
            stdout.write(f"Unknown command: {raw}\n{HELP}\n")
            continue
        if not session.handle(cmd) and isinstance(cmd, PlaceMark):
            stdout.write("Illegal move. Try again.\n")
            continue
        show()
        cpu_turn()
    return 0
