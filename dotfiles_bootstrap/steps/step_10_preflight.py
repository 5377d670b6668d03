from __future__ import annotations

import logging
import sys

from ..config import RunConfig
from ..lib.command import which
from ..lib.hostos import LINUX, detect_os_family, os_label
from ..lib.pkg import apt_install, apt_update
from ..lib.prompt import confirm
from ..pipeline import StepOutcome

logger = logging.getLogger(__name__)

# Homebrew's documented Linux prerequisites.
APT_PREREQUISITES = ["build-essential", "procps", "curl", "file", "git"]
REQUIRED_COMMANDS = ["curl", "git"]


class PreflightStep:
    step_id = "preflight"

    def run(self, cfg: RunConfig) -> StepOutcome:
        logger.info("Checking OS and prerequisites...")

        family = detect_os_family()
        if family is None:
            return StepOutcome.failed(f"Unsupported OS: {sys.platform}")
        logger.info("Detected: %s", os_label(family))

        warning = None
        if family == LINUX:
            if which("apt-get") is None:
                warning = "apt-get not found; install Homebrew prerequisites manually"
            elif confirm("Install Homebrew prerequisites via apt?", assume_yes=cfg.assume_yes):
                apt_update(dry_run=cfg.dry_run)
                apt_install(APT_PREREQUISITES, dry_run=cfg.dry_run)

        for cmd in REQUIRED_COMMANDS:
            if which(cmd) is None:
                return StepOutcome.failed(f"required command not found: {cmd}")

        if warning:
            return StepOutcome.warned(warning)
        return StepOutcome.succeeded("Preflight checks passed")
