"""Containerized conformance harness for the bootstrap installer.

Every run starts a fresh `docker run --rm` container from one image, points
the installer at the mounted working copy instead of the real dotfiles
remote, and selects a subset of steps. Running steps alone catches steps that
silently depend on an earlier step; running escalating prefixes catches
ordering assumptions.

Both sweeps follow the installer's own registry order (preflight, ssh,
clone, brew, bundle, stow) so a prefix is always a run the installer could
actually perform. Postflight is left out because it only prints guidance.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from .lib.command import run_cmd
from .logging_utils import SUCCESS, configure_logging
from .main import step_names

logger = logging.getLogger(__name__)

DEFAULT_IMAGE = "dotfiles-test"
CONTAINER_WORKDIR = "/work"
CONTAINER_HOME = "/home/test"


def _repo_root() -> Path:
    # dotfiles_bootstrap/harness.py -> dotfiles_bootstrap -> repo root
    return Path(__file__).resolve().parents[1]


def catalog() -> List[str]:
    """Steps exercised by the sweeps; postflight only prints guidance."""

    return [name for name in step_names() if name != "postflight"]


def prefixes(steps: Sequence[str]) -> List[str]:
    return [",".join(steps[: i + 1]) for i in range(len(steps))]


class HarnessError(RuntimeError):
    pass


@dataclass
class Tally:
    label: str
    passed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def merge(self, other: "Tally") -> None:
        self.passed.extend(other.passed)
        self.failed.extend(other.failed)


@dataclass(frozen=True)
class Harness:
    repo_root: Path
    image: str = DEFAULT_IMAGE
    ssh_dir: Optional[Path] = None

    @property
    def dockerfile_dir(self) -> Path:
        return self.repo_root / "tests" / "docker"

    def build(self) -> None:
        logger.info("Building test image: %s", self.image)
        r = run_cmd(["docker", "build", "-t", self.image, str(self.dockerfile_dir)], check=False, capture=False)
        if not r.ok:
            raise HarnessError(f"Failed to build image: {self.image}")
        logger.info("Image built: %s", self.image, extra=SUCCESS)

    def docker_run_argv(self, selection: str) -> List[str]:
        argv = [
            "docker",
            "run",
            "--rm",
            "-v",
            f"{self.repo_root}:{CONTAINER_WORKDIR}",
            "-w",
            CONTAINER_WORKDIR,
            "-e",
            "SKIP_SSH_GITHUB_CHECK=1",
            "-e",
            f"DOTFILES_DIR={CONTAINER_HOME}/.dotfiles",
            "-e",
            f"DOTFILES_REPO={CONTAINER_WORKDIR}",
        ]
        if self.ssh_dir is not None and self.ssh_dir.is_dir():
            argv += ["-v", f"{self.ssh_dir}:{CONTAINER_HOME}/.ssh:ro"]
        argv += [self.image, "python3", "-m", "dotfiles_bootstrap", "--yes", "--only", selection]
        return argv

    def run_selection(self, selection: str) -> bool:
        logger.info("Running: dotfiles-bootstrap --yes --only %s", selection)
        return run_cmd(self.docker_run_argv(selection), check=False, capture=False).ok

    def _check(self, kind: str, selection: str) -> Tally:
        tally = Tally(label=kind)
        logger.info("Testing %s: %s", kind, selection)
        if self.run_selection(selection):
            logger.info("%s passed: %s", kind.capitalize(), selection, extra=SUCCESS)
            tally.passed.append(selection)
        else:
            logger.error("%s failed: %s", kind.capitalize(), selection)
            tally.failed.append(selection)
        return tally

    def test_step(self, name: str) -> Tally:
        return self._check("step", name)

    def test_prefix(self, selection: str) -> Tally:
        return self._check("prefix", selection)

    def test_all_steps(self) -> Tally:
        tally = Tally(label="per-step")
        for name in catalog():
            tally.merge(self.test_step(name))
        report(tally)
        return tally

    def test_all_prefixes(self) -> Tally:
        tally = Tally(label="prefix")
        for selection in prefixes(catalog()):
            tally.merge(self.test_prefix(selection))
        report(tally)
        return tally


def report(tally: Tally) -> None:
    total = len(tally.passed) + len(tally.failed)
    if tally.ok:
        logger.info("All %s tests passed (%d/%d)", tally.label, total, total, extra=SUCCESS)
    else:
        logger.error("%d of %d %s test(s) failed: %s", len(tally.failed), total, tally.label, ", ".join(tally.failed))


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="dotfiles-bootstrap-harness",
        description="Docker-based installer tests",
        allow_abbrev=False,
    )
    p.add_argument("--image", default=DEFAULT_IMAGE, help=f"Test image tag (default: {DEFAULT_IMAGE})")
    p.add_argument("--repo-root", default=None, help="Working copy to mount (default: this checkout)")

    sub = p.add_subparsers(dest="subcmd", required=True)
    sub.add_parser("build", help="Build test Docker image")
    sp = sub.add_parser("step", help="Test individual step")
    sp.add_argument("name")
    sp = sub.add_parser("prefix", help='Test prefix (e.g. "preflight,ssh,clone")')
    sp.add_argument("selection")
    sub.add_parser("all-steps", help="Test all steps individually")
    sub.add_parser("all-prefixes", help="Test all cumulative prefixes")
    sub.add_parser("all", help="Build + test all steps + all prefixes")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    harness = Harness(
        repo_root=Path(args.repo_root).resolve() if args.repo_root else _repo_root(),
        image=args.image,
        ssh_dir=Path.home() / ".ssh",
    )

    try:
        harness.build()
    except HarnessError as e:
        logger.error("%s", e)
        return 1
    if args.subcmd == "build":
        return 0

    if args.subcmd == "step":
        tally = harness.test_step(args.name)
    elif args.subcmd == "prefix":
        tally = harness.test_prefix(args.selection)
    elif args.subcmd == "all-steps":
        tally = harness.test_all_steps()
    elif args.subcmd == "all-prefixes":
        tally = harness.test_all_prefixes()
    else:
        tally = harness.test_all_steps()
        tally.merge(harness.test_all_prefixes())
        tally.label = "harness"
        report(tally)

    return 0 if tally.ok else 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
