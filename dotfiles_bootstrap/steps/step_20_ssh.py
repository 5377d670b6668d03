from __future__ import annotations

import logging

from ..config import RunConfig
from ..lib.env import DEFAULTS
from ..lib.ssh import agent_has_keys, find_private_key, remote_auth_ok
from ..pipeline import StepOutcome

logger = logging.getLogger(__name__)


class SshStep:
    step_id = "ssh"

    def _missing_key_message(self, cfg: RunConfig) -> str:
        email = cfg.ssh_email or "your-email@example.com"
        return (
            "No SSH key found. Please generate one manually:\n"
            f'  ssh-keygen -t ed25519 -C "{email}"\n'
            f"Then add to GitHub: {DEFAULTS.github_keys_url}"
        )

    def run(self, cfg: RunConfig) -> StepOutcome:
        logger.info("Verifying SSH authentication setup...")

        key = find_private_key(cfg.home)
        if key is not None:
            logger.info("Found SSH private key: %s", key)
        has_agent = key is None and agent_has_keys()
        if has_agent:
            logger.info("SSH agent has loaded keys")

        if key is None and not has_agent:
            return StepOutcome.failed(self._missing_key_message(cfg))

        if cfg.skip_ssh_github_check:
            return StepOutcome.succeeded("SSH setup verified (GitHub check skipped)")

        logger.info("Verifying GitHub SSH access...")
        if not remote_auth_ok(DEFAULTS.github_host):
            return StepOutcome.failed(
                "Cannot authenticate with GitHub. Ensure your SSH key is added:\n"
                f"  {DEFAULTS.github_keys_url}\n"
                f"Or verify with: ssh -T {DEFAULTS.github_host}"
            )
        return StepOutcome.succeeded("GitHub SSH authentication successful")
