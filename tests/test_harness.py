from __future__ import annotations

import logging

import pytest

from dotfiles_bootstrap import harness
from dotfiles_bootstrap import main as main_mod
from dotfiles_bootstrap.harness import Harness, HarnessError, catalog, prefixes
from dotfiles_bootstrap.lib.command import CmdResult


class FakeDocker:
    def __init__(self, failing=(), build_ok=True):
        self.failing = set(failing)
        self.build_ok = build_ok
        self.calls = []

    def __call__(self, argv, **kw):
        argv = list(argv)
        self.calls.append(argv)
        if argv[1] == "build":
            rc = 0 if self.build_ok else 1
        else:
            rc = 1 if argv[-1] in self.failing else 0
        return CmdResult(argv=argv, returncode=rc, stdout="", stderr="")

    @property
    def selections(self):
        return [a[-1] for a in self.calls if a[1] == "run"]


@pytest.fixture
def docker(monkeypatch):
    fake = FakeDocker()
    monkeypatch.setattr(harness, "run_cmd", fake)
    monkeypatch.setattr(harness, "configure_logging", lambda **kw: None)
    return fake


def test_catalog_and_prefixes():
    assert catalog() == ["preflight", "ssh", "clone", "brew", "bundle", "stow"]
    assert prefixes(["a", "b", "c"]) == ["a", "a,b", "a,b,c"]


def test_sweeps_follow_installer_order():
    assert catalog() == [name for name in main_mod.step_names() if name != "postflight"]


def test_abbreviated_option_is_rejected():
    with pytest.raises(SystemExit):
        harness.build_parser().parse_args(["--img", "x", "build"])


def test_run_argv_points_installer_at_working_copy(tmp_path):
    ssh_dir = tmp_path / "ssh"
    ssh_dir.mkdir()
    h = Harness(repo_root=tmp_path / "repo", ssh_dir=ssh_dir)

    argv = h.docker_run_argv("preflight,ssh")

    assert argv[:3] == ["docker", "run", "--rm"]
    assert f"{tmp_path / 'repo'}:/work" in argv
    assert "SKIP_SSH_GITHUB_CHECK=1" in argv
    assert "DOTFILES_REPO=/work" in argv
    assert "DOTFILES_DIR=/home/test/.dotfiles" in argv
    assert f"{ssh_dir}:/home/test/.ssh:ro" in argv
    assert argv[-7:] == ["dotfiles-test", "python3", "-m", "dotfiles_bootstrap", "--yes", "--only", "preflight,ssh"]


def test_ssh_dir_is_only_mounted_when_present(tmp_path):
    h = Harness(repo_root=tmp_path, ssh_dir=tmp_path / "missing")
    assert not any(a.endswith(":ro") for a in h.docker_run_argv("ssh"))


def test_build_failure_raises(docker, tmp_path):
    docker.build_ok = False
    with pytest.raises(HarnessError):
        Harness(repo_root=tmp_path).build()
    assert docker.calls == [["docker", "build", "-t", "dotfiles-test", str(tmp_path / "tests" / "docker")]]


def test_all_steps_counts_failures_and_finishes(docker, tmp_path, caplog):
    docker.failing = {"ssh", "stow"}

    tally = Harness(repo_root=tmp_path).test_all_steps()

    assert docker.selections == catalog()
    assert tally.failed == ["ssh", "stow"]
    assert len(tally.passed) == len(catalog()) - 2
    assert "2 of 6 per-step test(s) failed" in caplog.text


def test_all_prefixes_escalate(docker, tmp_path):
    tally = Harness(repo_root=tmp_path).test_all_prefixes()
    assert docker.selections == prefixes(catalog())
    assert docker.selections[-1] == "preflight,ssh,clone,brew,bundle,stow"
    assert tally.ok


def test_same_prefix_twice_uses_fresh_containers(docker, tmp_path):
    h = Harness(repo_root=tmp_path)
    first = h.test_prefix("preflight,ssh,clone")
    second = h.test_prefix("preflight,ssh,clone")

    runs = [a for a in docker.calls if a[1] == "run"]
    assert len(runs) == 2
    assert all("--rm" in a for a in runs)
    assert runs[0] == runs[1]
    assert first.passed == second.passed == ["preflight,ssh,clone"]


def test_main_step_builds_then_runs(docker, tmp_path):
    assert harness.main(["--repo-root", str(tmp_path), "step", "clone"]) == 0
    assert [a[1] for a in docker.calls] == ["build", "run"]
    assert docker.selections == ["clone"]


def test_main_build_only(docker, tmp_path):
    assert harness.main(["--repo-root", str(tmp_path), "build"]) == 0
    assert [a[1] for a in docker.calls] == ["build"]


def test_main_all_returns_nonzero_on_any_failure(docker, tmp_path, caplog):
    caplog.set_level(logging.INFO)
    docker.failing = {"preflight,ssh"}

    assert harness.main(["--repo-root", str(tmp_path), "all"]) == 1

    assert len(docker.selections) == 2 * len(catalog())
    assert "All per-step tests passed" in caplog.text
    assert "1 of 12 harness test(s) failed: preflight,ssh" in caplog.text


def test_main_build_failure_exits_one(docker, tmp_path):
    docker.build_ok = False
    assert harness.main(["--repo-root", str(tmp_path), "all-steps"]) == 1
    assert docker.selections == []
