"""
SSH Connection Models

Dataclass models for SSH operations.
"""

from dataclasses import dataclass
from pathlib import Path

from jenkinsmaster.constants import ANSIBLE_FORKS, DEFAULT_SSH_PORT


@dataclass(frozen=True)
class ConnectionParams:
    """SSH connection details for the deployment target."""

    host: str
    user: str
    key_path: str
    port: int = DEFAULT_SSH_PORT
    forks: int = ANSIBLE_FORKS

    @property
    def key_path_expanded(self) -> Path:
        """Get expanded key path (resolves ~)."""
        return Path(self.key_path).expanduser()

    @property
    def target(self) -> str:
        return f"{self.user}@{self.host}"

    def __repr__(self) -> str:
        return f"ConnectionParams(target={self.target}, port={self.port}, key={self.key_path})"
