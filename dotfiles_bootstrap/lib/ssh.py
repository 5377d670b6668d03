from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from .command import run_cmd, which

logger = logging.getLogger(__name__)

KEY_NAMES = ("id_ed25519", "id_rsa", "id_ecdsa")
AUTH_SUCCESS_MARKER = "successfully authenticated"


def find_private_key(home: Path) -> Optional[Path]:
    for name in KEY_NAMES:
        p = home / ".ssh" / name
        if p.is_file():
            return p
    return None


def agent_has_keys() -> bool:
    """True when a reachable ssh-agent holds at least one identity."""

    if not os.environ.get("SSH_AUTH_SOCK"):
        return False
    if which("ssh-add") is None:
        return False
    return run_cmd(["ssh-add", "-l"], check=False).ok


def remote_auth_ok(host: str) -> bool:
    """Attempt a no-op authenticated connection and look for the success banner.

    GitHub closes the session with exit status 1 even on success, so only the
    banner is checked.
    """

    r = run_cmd(["ssh", "-T", host], check=False)
    return AUTH_SUCCESS_MARKER in r.output
