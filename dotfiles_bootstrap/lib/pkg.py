from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from .command import run_cmd, which
from .hostos import LINUX, MACOS, normalize_arch

logger = logging.getLogger(__name__)

# Variables `brew shellenv` is expected to touch.
_SHELLENV_KEYS = ("PATH", "MANPATH", "INFOPATH")


def apt_update(*, dry_run: bool = False) -> None:
    run_cmd(["sudo", "apt-get", "update"], capture=False, dry_run=dry_run)


def apt_install(packages: Sequence[str], *, dry_run: bool = False) -> None:
    if not packages:
        return
    run_cmd(["sudo", "apt-get", "install", "-y", *packages], capture=False, dry_run=dry_run)


def has_brew() -> bool:
    return which("brew") is not None


def brew_candidates(family: str, *, home: Path, arch: Optional[str] = None) -> List[Path]:
    """Known brew executables for an OS family, most likely first."""

    if family == MACOS:
        prefixes = ["/opt/homebrew", "/usr/local"]
        if normalize_arch(arch) == "x86_64":
            prefixes.reverse()
        return [Path(p) / "bin" / "brew" for p in prefixes]
    if family == LINUX:
        return [
            Path("/home/linuxbrew/.linuxbrew/bin/brew"),
            home / ".linuxbrew" / "bin" / "brew",
        ]
    return []


def find_brew(candidates: Iterable[Path]) -> Optional[Path]:
    for c in candidates:
        if c.is_file():
            return c
    return None


def parse_env0(blob: str) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for item in blob.split("\0"):
        if "=" not in item:
            continue
        key, value = item.split("=", 1)
        out[key] = value
    return out


def apply_brew_shellenv(brew: Path) -> Dict[str, str]:
    """Evaluate `brew shellenv` and merge the result into os.environ.

    The output is evaluated by bash exactly like `eval "$(brew shellenv)"`
    would in a login shell; only the variables it is expected to set are
    copied back into this process.
    """

    script = f'eval "$({brew} shellenv bash)" && env -0'
    r = run_cmd(["bash", "-c", script])
    evaluated = parse_env0(r.stdout)

    changed: Dict[str, str] = {}
    for key, value in evaluated.items():
        if key.startswith("HOMEBREW_") or key in _SHELLENV_KEYS:
            if os.environ.get(key) != value:
                changed[key] = value
    os.environ.update(changed)
    logger.debug("brew shellenv updated %s", ",".join(sorted(changed)) or "nothing")
    return changed


def filter_casks(brewfile: bytes) -> bytes:
    """Drop `cask` entries, which only install on macOS.

    Works on raw bytes so a Brewfile in any encoding passes through untouched.
    """

    kept = [ln for ln in brewfile.splitlines(keepends=True) if not ln.startswith(b"cask ")]
    return b"".join(kept)


def brew_bundle(brewfile: Path, *, dry_run: bool = False) -> None:
    run_cmd(["brew", "bundle", f"--file={brewfile}"], capture=False, dry_run=dry_run)
