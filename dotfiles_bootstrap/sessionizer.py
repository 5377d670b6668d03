from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence

from .lib.command import CommandError, run_cmd
from .logging_utils import configure_logging

logger = logging.getLogger(__name__)

SEARCH_DIRS = ["Development", ".config"]


def session_name(path: Path) -> str:
    # tmux treats "." as a window/pane separator in targets.
    return path.name.replace(".", "_")


def list_candidates(home: Path, search_dirs: Sequence[str] = SEARCH_DIRS) -> List[str]:
    """Directories one level below the search roots, relative to home."""

    roots = [str(home / d) for d in search_dirs]
    r = run_cmd(
        ["fd", ".", *roots, "--type=dir", "--max-depth=1", "--full-path", "--base-directory", str(home)],
        check=False,
    )
    prefix = f"{home}/"
    out = []
    for line in r.stdout.splitlines():
        line = line.strip().rstrip("/")
        if not line:
            continue
        out.append(line[len(prefix):] if line.startswith(prefix) else line)
    return out


def pick(candidates: Sequence[str]) -> Optional[str]:
    if not candidates:
        return None
    r = run_cmd(["fzf", "--margin", "10%", "--color=bw"], check=False, input_text="\n".join(candidates) + "\n")
    choice = r.stdout.strip()
    return choice or None


def open_session(path: Path, *, inside_tmux: bool) -> None:
    name = session_name(path)
    if not run_cmd(["tmux", "has-session", "-t", name], check=False).ok:
        run_cmd(["tmux", "new-session", "-ds", name, "-c", str(path)])
        run_cmd(["tmux", "select-window", "-t", f"{name}:1"], check=False)

    if inside_tmux:
        run_cmd(["tmux", "switch-client", "-t", name], capture=False)
    else:
        run_cmd(["tmux", "attach-session", "-t", name], capture=False)


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="tmux-sessionizer", description="Open or switch to a tmux session per project")
    p.add_argument("path", nargs="?", default=None, help="Project directory (default: pick with fzf)")
    args = p.parse_args(argv)
    configure_logging(level=logging.WARNING)

    home = Path.home()
    if args.path:
        selected: Optional[Path] = Path(args.path).expanduser()
    else:
        choice = pick(list_candidates(home))
        selected = home / choice if choice else None

    if selected is None:
        return 0

    try:
        open_session(selected.resolve(), inside_tmux=bool(os.environ.get("TMUX")))
    except CommandError as e:
        logger.error("%s", e)
        return 1
    return 0
