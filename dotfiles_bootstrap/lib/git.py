from __future__ import annotations

from pathlib import Path

from .command import run_cmd


def is_checkout(path: Path) -> bool:
    return (path / ".git").exists()


def clone(repo: str, dest: Path, *, dry_run: bool = False) -> None:
    run_cmd(["git", "clone", "--recurse-submodules", repo, str(dest)], capture=False, dry_run=dry_run)


def pull(path: Path, *, dry_run: bool = False) -> None:
    run_cmd(["git", "-C", str(path), "pull", "--recurse-submodules"], capture=False, dry_run=dry_run)


def update_submodules(path: Path, *, dry_run: bool = False) -> None:
    run_cmd(
        ["git", "-C", str(path), "submodule", "update", "--init", "--recursive"],
        capture=False,
        dry_run=dry_run,
    )
