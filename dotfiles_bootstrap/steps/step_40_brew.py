from __future__ import annotations

import logging

from ..config import RunConfig
from ..lib.command import run_cmd, which
from ..lib.env import DEFAULTS
from ..lib.hostos import detect_os_family
from ..lib.pkg import apply_brew_shellenv, brew_candidates, find_brew, has_brew
from ..pipeline import StepOutcome

logger = logging.getLogger(__name__)


class BrewStep:
    step_id = "brew"

    def run(self, cfg: RunConfig) -> StepOutcome:
        if has_brew():
            return StepOutcome.succeeded(f"Homebrew already installed: {which('brew')}")

        logger.info("Installing Homebrew...")
        if cfg.dry_run:
            logger.info('[dry-run] bash -c "$(curl -fsSL %s)"', DEFAULTS.brew_install_url)
            return StepOutcome.succeeded("[dry-run] Homebrew would be installed and added to PATH")

        script = run_cmd(["curl", "-fsSL", DEFAULTS.brew_install_url]).stdout
        env = {"NONINTERACTIVE": "1"} if cfg.assume_yes else None
        run_cmd(["bash", "-c", script], env=env, capture=False)

        # A fresh install is not on PATH yet; evaluate its shellenv for this process.
        brew = find_brew(brew_candidates(detect_os_family() or "", home=cfg.home))
        if brew is not None:
            apply_brew_shellenv(brew)

        if not has_brew():
            return StepOutcome.failed("Homebrew installation failed")
        return StepOutcome.succeeded(f"Homebrew ready: {which('brew')}")
