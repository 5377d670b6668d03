from __future__ import annotations

import platform
import sys
from typing import Optional

MACOS = "darwin"
LINUX = "linux"

_LABELS = {MACOS: "macOS", LINUX: "Linux"}


def detect_os_family(platform_name: Optional[str] = None) -> Optional[str]:
    """Map sys.platform to a supported OS family, None when unsupported."""

    p = (platform_name if platform_name is not None else sys.platform).lower()
    if p.startswith("darwin"):
        return MACOS
    if p.startswith("linux"):
        return LINUX
    return None


def os_label(family: str) -> str:
    return _LABELS.get(family, family)


def normalize_arch(machine: Optional[str] = None) -> str:
    m = (machine if machine is not None else platform.machine()).lower()
    return {
        "x86_64": "x86_64",
        "amd64": "x86_64",
        "aarch64": "arm64",
        "arm64": "arm64",
    }.get(m, m)
