"""Settings and path helpers.

Environment-first, with fallbacks that still work when installed as a
package or executed from arbitrary CWDs.
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

from .board import O, parse_player

MODES = ("pvp", "cpu")

DEFAULT_CPU_DELAY_MS = 250


def _find_git_root(start: Path) -> Path | None:
    cur = start
    for _ in range(5):
        if (cur / ".git").exists():
            return cur
        if cur.parent == cur:
            break
        cur = cur.parent
    return None


def repo_root() -> Path:
    """Best-effort repository root.

    Order: env var NOUGHTS_REPO_ROOT -> nearest parent containing .git -> CWD.
    """
    env = os.getenv("NOUGHTS_REPO_ROOT")
    if env:
        return Path(env)
    git_root = _find_git_root(Path(__file__).resolve())
    if git_root is not None:
        return git_root
    return Path.cwd()


def data_dir() -> Path:
    p = os.getenv("NOUGHTS_DATA_DIR")
    return Path(p) if p else repo_root() / "data_raw"


def get_git_commit() -> str | None:
    """Return the current git commit hash, or None outside a git checkout."""
    root = repo_root()
    try:
        out = subprocess.check_output(
            ["git", "-C", str(root), "rev-parse", "HEAD"],
            stderr=subprocess.DEVNULL,
            text=True,
            timeout=2.0,
        )
        return out.strip() or None
    except (OSError, subprocess.SubprocessError):
        return None


@dataclass(frozen=True)
class Settings:
    mode: str = "cpu"
    cpu_player: int = O
    cpu_delay_ms: int = DEFAULT_CPU_DELAY_MS

    @classmethod
    def from_env(cls) -> "Settings":
        mode = os.getenv("NOUGHTS_MODE", "cpu").strip().lower()
        if mode not in MODES:
            raise ValueError(f"NOUGHTS_MODE must be one of {MODES}, got {mode!r}")
        cpu_player = parse_player(os.getenv("NOUGHTS_CPU_PLAYER", "O"))
        raw_delay = os.getenv("NOUGHTS_CPU_DELAY_MS")
        if raw_delay is None or not raw_delay.strip():
            delay = DEFAULT_CPU_DELAY_MS
        else:
            try:
                delay = int(raw_delay)
            except ValueError:
                raise ValueError(f"NOUGHTS_CPU_DELAY_MS must be an integer, got {raw_delay!r}") from None
            if delay < 0:
                raise ValueError(f"NOUGHTS_CPU_DELAY_MS must be >= 0, got {delay}")
        return cls(mode=mode, cpu_player=cpu_player, cpu_delay_ms=delay)
