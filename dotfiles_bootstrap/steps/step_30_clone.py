from __future__ import annotations

import logging

from ..config import RunConfig
from ..lib.git import clone, is_checkout, pull, update_submodules
from ..pipeline import StepOutcome

logger = logging.getLogger(__name__)


class CloneStep:
    step_id = "clone"

    def run(self, cfg: RunConfig) -> StepOutcome:
        target = cfg.dotfiles_dir

        if is_checkout(target):
            logger.info("Dotfiles already cloned; updating...")
            pull(target, dry_run=cfg.dry_run)
        else:
            logger.info("Cloning %s into %s", cfg.dotfiles_repo, target)
            clone(cfg.dotfiles_repo, target, dry_run=cfg.dry_run)

        update_submodules(target, dry_run=cfg.dry_run)
        return StepOutcome.succeeded(f"Dotfiles ready: {target}")
