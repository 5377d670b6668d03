from __future__ import annotations

import logging

from ..config import RunConfig
from ..logging_utils import SUCCESS
from ..pipeline import StepOutcome

logger = logging.getLogger(__name__)

NEXT_STEPS = [
    "Restart your shell or run: exec $SHELL",
    "(Optional) Run: brew doctor",
    "Check installed tools: nvim, tmux, fzf, etc.",
]


class PostflightStep:
    step_id = "postflight"

    def run(self, cfg: RunConfig) -> StepOutcome:
        logger.info("Installation complete!", extra=SUCCESS)
        logger.info("Next steps:")
        for i, line in enumerate(NEXT_STEPS, start=1):
            logger.info("  %d. %s", i, line)
        if cfg.dry_run:
            logger.info("This was a dry run; nothing was changed.")
        return StepOutcome.succeeded()
