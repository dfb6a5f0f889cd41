"""
Runtime settings

Settings are read from the process environment, optionally seeded from a
.env file in the working directory. Real environment variables win over the
file.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import dotenv_values

from jenkinsmaster.constants import (
    DEFAULT_ANSIBLE_ROLE,
    DEFAULT_HCLOUD_API_URL,
    DEFAULT_LOG_DIR,
    DEFAULT_TERRAFORM_MODULE,
    SETTLE_DELAY,
    SSH_WAIT_DELAY,
    SSH_WAIT_TIMEOUT,
)
from jenkinsmaster.exceptions import ConfigurationError


@dataclass(frozen=True)
class Settings:
    """Tunable values for one CLI invocation."""

    terraform_module: str = DEFAULT_TERRAFORM_MODULE
    ansible_role: str = DEFAULT_ANSIBLE_ROLE
    hcloud_api_url: str = DEFAULT_HCLOUD_API_URL
    ssh_timeout: float = SSH_WAIT_TIMEOUT
    poll_interval: float = SSH_WAIT_DELAY
    settle_delay: float = SETTLE_DELAY
    log_dir: str = DEFAULT_LOG_DIR

    @property
    def log_dir_expanded(self) -> Path:
        """Get expanded log directory (resolves ~)."""
        return Path(self.log_dir).expanduser()

    @classmethod
    def from_env(cls, env: Mapping[str, Optional[str]]) -> "Settings":
        """
        Build settings from an environment mapping.

        Args:
            env: Mapping of variable name to value (None values are ignored)

        Returns:
            Settings instance

        Raises:
            ConfigurationError: If a numeric variable is not a non-negative number
        """
        return cls(
            terraform_module=env.get("JENKINSMASTER_TERRAFORM_MODULE")
            or DEFAULT_TERRAFORM_MODULE,
            ansible_role=env.get("JENKINSMASTER_ANSIBLE_ROLE") or DEFAULT_ANSIBLE_ROLE,
            hcloud_api_url=(env.get("HCLOUD_API_URL") or DEFAULT_HCLOUD_API_URL).rstrip(
                "/"
            ),
            ssh_timeout=_seconds(env, "JENKINSMASTER_SSH_TIMEOUT", SSH_WAIT_TIMEOUT),
            poll_interval=_seconds(env, "JENKINSMASTER_POLL_INTERVAL", SSH_WAIT_DELAY),
            settle_delay=_seconds(env, "JENKINSMASTER_SETTLE_DELAY", SETTLE_DELAY),
            log_dir=env.get("JENKINSMASTER_LOG_DIR") or DEFAULT_LOG_DIR,
        )


def _seconds(env: Mapping[str, Optional[str]], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw == "":
        return default

    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(
            f"Invalid value for {key}: '{raw}'", context="Expected a number of seconds"
        )

    if value < 0:
        raise ConfigurationError(
            f"Invalid value for {key}: '{raw}'", context="Must not be negative"
        )
    return value


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Load settings from .env (if present) and the process environment.

    Args:
        env_file: Path to a dotenv file (defaults to ./.env)

    Returns:
        Settings instance
    """
    env_file = env_file or Path.cwd() / ".env"

    merged = {}
    if env_file.exists():
        merged.update(dotenv_values(env_file))
    merged.update(os.environ)

    return Settings.from_env(merged)
