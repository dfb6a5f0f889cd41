"""
Existing host provider

Configures Jenkins on a machine that is already reachable over SSH.
"""

from dataclasses import dataclass
from typing import Optional

from jenkinsmaster.constants import (
    DEFAULT_SSH_PORT,
    DEFAULT_SSH_PRIVATE_KEY_PATH,
    DEFAULT_SSH_USER,
)
from jenkinsmaster.exceptions import SSHError
from jenkinsmaster.models.deployment import DeploymentConfig
from jenkinsmaster.models.results import Phase
from jenkinsmaster.models.ssh import ConnectionParams
from jenkinsmaster.providers.base import Provider, ProviderKind
from jenkinsmaster.validators import (
    expand_path,
    validate_file_path,
    validate_ip_address,
    validate_non_empty,
    validate_port,
)


@dataclass
class ExistingHostState:
    """Answers collected for an existing host."""

    host: str = ""
    port: int = DEFAULT_SSH_PORT
    user: str = DEFAULT_SSH_USER
    private_key_path: str = DEFAULT_SSH_PRIVATE_KEY_PATH
    config: Optional[DeploymentConfig] = None


class ExistingHostProvider(Provider):
    """Deploy Jenkins on an existing VM over SSH."""

    kind = ProviderKind.EXISTING_HOST
    display_name = "SSH to Existing VM"

    def __init__(self, prompter, collector, deployer, gate, ssh_service, logger=None):
        super().__init__(prompter, collector, deployer, gate, logger=logger)
        self.ssh_service = ssh_service
        self.state = ExistingHostState()

    def deploy(self) -> None:
        self.collect_connection()
        self.state.config = self.collector.collect()

        self._confirm_summary(self.summary_rows())

        self.gate.ensure_or_retry("ansible", phase=Phase.CONFIGURATION_APPLY)

        connection = self.connection()
        self.validate_reachability(connection)
        self._apply_configuration(connection, self.state.config)

    def collect_connection(self) -> None:
        self.state.host = self.prompter.ask_validated(
            "VM IP Address", validate_ip_address
        )
        self.state.port = int(
            self.prompter.ask_validated(
                "SSH Port", validate_port, default=str(DEFAULT_SSH_PORT)
            )
        )
        self.state.user = self.prompter.ask_validated(
            "SSH Username", validate_non_empty, default=DEFAULT_SSH_USER
        )
        key_path = self.prompter.ask_validated(
            "SSH Private Key Path",
            validate_file_path,
            default=DEFAULT_SSH_PRIVATE_KEY_PATH,
        )
        self.state.private_key_path = str(expand_path(key_path))

    def summary_rows(self) -> list[tuple[str, str]]:
        rows = [
            ("VM IP Address", self.state.host),
            ("SSH Port", str(self.state.port)),
            ("SSH Username", self.state.user),
            ("SSH Private Key Path", self.state.private_key_path),
        ]
        if self.state.config:
            rows.extend(self.state.config.summary_rows())
        return rows

    def connection(self) -> ConnectionParams:
        return ConnectionParams(
            host=self.state.host,
            user=self.state.user,
            key_path=self.state.private_key_path,
            port=self.state.port,
        )

    def validate_reachability(self, connection: ConnectionParams) -> None:
        """
        Run one SSH probe against the host.

        Raises:
            SSHError: If the probe fails
        """
        self._step("Checking SSH connectivity")
        result = self.ssh_service.probe(connection)
        if result.is_failure:
            raise SSHError(
                f"Cannot connect to {connection.target}:{connection.port}",
                context=result.stderr.strip() or f"ssh exited with code {result.returncode}",
                phase=Phase.READINESS,
            )
        self._success(f"SSH connection to {connection.host} successful")
