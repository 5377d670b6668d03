from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from ..config import RunConfig
from ..lib.command import CommandError
from ..lib.hostos import LINUX, detect_os_family
from ..lib.pkg import brew_bundle, filter_casks
from ..pipeline import StepOutcome

logger = logging.getLogger(__name__)


class BundleStep:
    step_id = "bundle"

    def _bundle(self, brewfile: Path, cfg: RunConfig) -> StepOutcome:
        try:
            brew_bundle(brewfile, dry_run=cfg.dry_run)
        except CommandError as e:
            logger.debug("brew bundle: %s", e)
            return StepOutcome.warned("Some packages failed (continuing)")
        return StepOutcome.succeeded("Package installation completed")

    def run(self, cfg: RunConfig) -> StepOutcome:
        brewfile = cfg.brewfile
        if not brewfile.is_file():
            return StepOutcome.warned(f"Brewfile not found: {brewfile} (skipping)")

        logger.info("Installing packages from Brewfile...")
        if detect_os_family() != LINUX:
            return self._bundle(brewfile, cfg)

        logger.info("Using filtered Brewfile for Linux (casks removed)")
        if cfg.dry_run:
            return self._bundle(Path(tempfile.gettempdir()) / "Brewfile.linux", cfg)

        filtered = filter_casks(brewfile.read_bytes())
        fd, tmp = tempfile.mkstemp(prefix="Brewfile.linux.")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(filtered)
            return self._bundle(Path(tmp), cfg)
        finally:
            os.unlink(tmp)
