from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

ENV_DOTFILES_REPO = "DOTFILES_REPO"
ENV_DOTFILES_DIR = "DOTFILES_DIR"
ENV_SSH_EMAIL = "SSH_EMAIL"
ENV_SKIP_SSH_GITHUB_CHECK = "SKIP_SSH_GITHUB_CHECK"
ENV_CONFIG_PATH = "DOTFILES_BOOTSTRAP_CONFIG"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Defaults:
    dotfiles_repo: str = "git@github.com:zeromask1337/.dotfiles.git"
    dotfiles_dir: str = "~/.dotfiles"
    config_path: str = "~/.config/dotfiles-bootstrap/config.yaml"
    github_host: str = "git@github.com"
    github_keys_url: str = "https://github.com/settings/keys"
    brew_install_url: str = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"


DEFAULTS = Defaults()


def env_str(environ: Mapping[str, str], key: str) -> Optional[str]:
    """Return a non-empty environment value, or None."""

    value = environ.get(key)
    if value is None or not value.strip():
        return None
    return value


def env_flag(environ: Mapping[str, str], key: str) -> Optional[bool]:
    """Parse a boolean switch; None when unset."""

    value = env_str(environ, key)
    if value is None:
        return None
    return value.strip().lower() in _TRUTHY
