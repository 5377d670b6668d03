from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Mapping, Optional

from .config import ConfigError, RunConfig, resolve_config, split_step_list
from .lib.env import DEFAULTS
from .logging_utils import SUCCESS, configure_logging
from .pipeline import PipelineResult, Step, StepFailed, run_pipeline
from .steps import (
    BrewStep,
    BundleStep,
    CloneStep,
    PostflightStep,
    PreflightStep,
    SshStep,
    StowStep,
)

logger = logging.getLogger(__name__)


def build_steps() -> List[Step]:
    return [
        PreflightStep(),
        SshStep(),
        CloneStep(),
        BrewStep(),
        BundleStep(),
        StowStep(),
        PostflightStep(),
    ]


def step_names() -> List[str]:
    return [s.step_id for s in build_steps()]


class _Parser(argparse.ArgumentParser):
    # Invalid input is a configuration error: exit 1, not argparse's 2.
    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message} (use --help for usage)\n")


EPILOG = """\
Environment variables:
  SKIP_SSH_GITHUB_CHECK=1    Skip GitHub SSH verification (CI mode)
  DOTFILES_REPO              Same as --dotfiles-repo
  DOTFILES_DIR               Same as --dotfiles-dir
  SSH_EMAIL                  Same as --ssh-email
  DOTFILES_BOOTSTRAP_CONFIG  Same as --config

Available steps (in order):
  {steps}

Examples:
  dotfiles-bootstrap --yes
  dotfiles-bootstrap --dry-run
  dotfiles-bootstrap --only ssh,brew
  dotfiles-bootstrap --skip stow
"""


def build_parser() -> argparse.ArgumentParser:
    p = _Parser(
        prog="dotfiles-bootstrap",
        allow_abbrev=False,
        description="Bootstrap installer for dotfiles + brew + packages.",
        epilog=EPILOG.format(steps=" ".join(step_names())),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("--yes", action="store_true", help="Non-interactive mode (auto-confirm)")
    p.add_argument("--dry-run", action="store_true", help="Show what would be done without executing")
    p.add_argument("--only", default=None, metavar="STEPS", help="Run only specified steps (comma-separated)")
    p.add_argument(
        "--skip",
        action="append",
        default=[],
        metavar="STEPS",
        help="Skip specified steps (comma-separated, repeatable)",
    )
    p.add_argument("--dotfiles-repo", default=None, metavar="URL", help=f"Dotfiles repo (default: {DEFAULTS.dotfiles_repo})")
    p.add_argument("--dotfiles-dir", default=None, metavar="PATH", help=f"Dotfiles install dir (default: {DEFAULTS.dotfiles_dir})")
    p.add_argument("--ssh-email", default=None, metavar="EMAIL", help="Email for SSH key generation guidance")
    p.add_argument("--skip-ssh-check", action="store_true", help="Skip GitHub SSH verification")
    p.add_argument("--config", default=None, metavar="PATH", help=f"YAML defaults file (default: {DEFAULTS.config_path})")
    p.add_argument("--log", default=None, metavar="PATH", help="Also write a log file")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("--list-steps", action="store_true", help="List available steps and exit")
    return p


def list_steps() -> str:
    lines = ["Available steps (in order):"]
    lines += [f"  - {name}" for name in step_names()]
    return "\n".join(lines)


def run(cfg: RunConfig, steps: Optional[List[Step]] = None) -> PipelineResult:
    """Run the bootstrap pipeline. Raises StepFailed on the first fatal step."""

    logger.info("Dotfiles Bootstrap Installer")
    logger.info("Repo: %s", cfg.dotfiles_repo)
    logger.info("Target: %s", cfg.dotfiles_dir)
    if cfg.dry_run:
        logger.info("Dry run: commands are printed, not executed")

    result = run_pipeline(cfg, steps if steps is not None else build_steps())
    logger.info("All steps completed!", extra=SUCCESS)
    return result


def main(argv: Optional[List[str]] = None, environ: Optional[Mapping[str, str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.list_steps:
        print(list_steps())
        return 0

    configure_logging(log_path=args.log, level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        cfg = resolve_config(
            assume_yes=args.yes,
            dry_run=args.dry_run,
            only=split_step_list(args.only),
            skip=split_step_list(args.skip),
            dotfiles_repo=args.dotfiles_repo,
            dotfiles_dir=args.dotfiles_dir,
            ssh_email=args.ssh_email,
            skip_ssh_github_check=args.skip_ssh_check,
            config_path=args.config,
            known_steps=step_names(),
            environ=environ,
        )
    except ConfigError as e:
        logger.error("%s", e)
        return 1

    try:
        run(cfg)
    except StepFailed as e:
        logger.error("%s", e.reason)
        logger.error("Step failed: %s", e.step_id)
        return 1
    return 0
