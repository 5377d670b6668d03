from __future__ import annotations

import logging

from ..config import RunConfig
from ..lib.command import run_cmd, which
from ..pipeline import StepOutcome

logger = logging.getLogger(__name__)


class StowStep:
    step_id = "stow"

    def run(self, cfg: RunConfig) -> StepOutcome:
        if which("stow") is None:
            return StepOutcome.warned("stow not found; skipping")

        logger.info("Linking dotfiles with stow...")
        # --restow replaces links left by earlier runs instead of conflicting with them.
        run_cmd(["stow", "--restow", "."], cwd=str(cfg.dotfiles_dir), capture=False, dry_run=cfg.dry_run)
        return StepOutcome.succeeded("Dotfiles linked via stow")
