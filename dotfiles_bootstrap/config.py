from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional

from .lib.env import (
    DEFAULTS,
    ENV_CONFIG_PATH,
    ENV_DOTFILES_DIR,
    ENV_DOTFILES_REPO,
    ENV_SKIP_SSH_GITHUB_CHECK,
    ENV_SSH_EMAIL,
    env_flag,
    env_str,
)

logger = logging.getLogger(__name__)

CONFIG_KEYS = ("dotfiles_repo", "dotfiles_dir", "ssh_email", "skip_ssh_github_check")


class ConfigError(ValueError):
    """Invalid command line input or configuration; nothing has run yet."""


@dataclass(frozen=True)
class RunConfig:
    """Resolved settings for one invocation. Built once, never mutated."""

    assume_yes: bool = False
    dry_run: bool = False
    only: FrozenSet[str] = field(default_factory=frozenset)
    skip: FrozenSet[str] = field(default_factory=frozenset)
    dotfiles_repo: str = DEFAULTS.dotfiles_repo
    dotfiles_dir: Path = field(default_factory=lambda: Path(DEFAULTS.dotfiles_dir).expanduser())
    ssh_email: str = ""
    skip_ssh_github_check: bool = False
    home: Path = field(default_factory=Path.home)

    @property
    def brewfile(self) -> Path:
        return self.dotfiles_dir / ".Brewfile"


def split_step_list(values: Iterable[str] | str | None) -> List[str]:
    """Flatten comma-separated lists (possibly repeated) into names, in order."""

    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    out: List[str] = []
    for v in values:
        for name in v.split(","):
            name = name.strip()
            if name and name not in out:
                out.append(name)
    return out


def validate_only(only: Iterable[str], known: Iterable[str]) -> None:
    known_set = set(known)
    for name in only:
        if name not in known_set:
            raise ConfigError(f"Invalid step in --only: {name} (use --list-steps to see available steps)")


def find_config_file(explicit: Optional[str], environ: Mapping[str, str]) -> Optional[Path]:
    """Locate the YAML defaults file. An explicit path must exist."""

    if explicit:
        p = Path(explicit).expanduser()
        if not p.is_file():
            raise ConfigError(f"Config file not found: {p}")
        return p
    from_env = env_str(environ, ENV_CONFIG_PATH)
    if from_env:
        p = Path(from_env).expanduser()
        if not p.is_file():
            raise ConfigError(f"Config file not found: {p} (from {ENV_CONFIG_PATH})")
        return p
    p = Path(DEFAULTS.config_path).expanduser()
    return p if p.is_file() else None


def load_config_file(path: Path) -> Dict[str, Any]:
    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise ConfigError(f"PyYAML is required to read the config file: {path}") from e

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file: {path}: {e}") from e

    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file is not valid YAML: {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")

    data: Dict[str, Any] = {}
    for key, value in raw.items():
        if key not in CONFIG_KEYS:
            logger.warning("Ignoring unknown config key %r in %s", key, path)
            continue
        data[key] = value
    return data


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def resolve_config(
    *,
    assume_yes: bool = False,
    dry_run: bool = False,
    only: Iterable[str] = (),
    skip: Iterable[str] = (),
    dotfiles_repo: Optional[str] = None,
    dotfiles_dir: Optional[str] = None,
    ssh_email: Optional[str] = None,
    skip_ssh_github_check: bool = False,
    config_path: Optional[str] = None,
    known_steps: Iterable[str] = (),
    environ: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> RunConfig:
    """Merge flags > environment > config file > defaults into a RunConfig.

    Raises ConfigError for unknown --only names before anything runs.
    """

    env = os.environ if environ is None else environ
    known = list(known_steps)
    only_list = list(only)
    skip_list = list(skip)

    validate_only(only_list, known)
    for name in skip_list:
        if name not in known:
            logger.warning("Unknown step in --skip: %s (ignored)", name)
    both = [name for name in only_list if name in skip_list]
    if both:
        logger.warning("Steps named in both --only and --skip will be skipped: %s", ",".join(both))

    cfg_file = find_config_file(config_path, env)
    file_values = load_config_file(cfg_file) if cfg_file else {}

    repo = dotfiles_repo or env_str(env, ENV_DOTFILES_REPO) or file_values.get("dotfiles_repo") or DEFAULTS.dotfiles_repo
    target = dotfiles_dir or env_str(env, ENV_DOTFILES_DIR) or file_values.get("dotfiles_dir") or DEFAULTS.dotfiles_dir
    email = ssh_email or env_str(env, ENV_SSH_EMAIL) or file_values.get("ssh_email") or ""

    skip_check = skip_ssh_github_check
    if not skip_check:
        from_env = env_flag(env, ENV_SKIP_SSH_GITHUB_CHECK)
        if from_env is not None:
            skip_check = from_env
        else:
            skip_check = _as_bool(file_values.get("skip_ssh_github_check", False))

    return RunConfig(
        assume_yes=assume_yes,
        dry_run=dry_run,
        only=frozenset(only_list),
        skip=frozenset(skip_list),
        dotfiles_repo=str(repo),
        dotfiles_dir=Path(str(target)).expanduser(),
        ssh_email=str(email),
        skip_ssh_github_check=skip_check,
        home=home if home is not None else Path.home(),
    )
