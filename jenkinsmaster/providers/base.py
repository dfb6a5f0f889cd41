"""
Base Provider Class

Abstract base for the deployment targets. A provider collects everything it
needs from the operator, makes a host available and hands it to Ansible.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable, Optional

from rich.table import Table

from jenkinsmaster.exceptions import DeploymentCancelled
from jenkinsmaster.models.deployment import DeploymentConfig, DeploymentPayload
from jenkinsmaster.models.ssh import ConnectionParams


class ProviderKind(Enum):
    """Deployment target variants."""

    HETZNER = "hetzner"
    EXISTING_HOST = "existing-host"


class Provider(ABC):
    """
    Abstract deployment provider.

    Provides:
    - Settings review table with a yes/no confirmation
    - Configuration apply through the Ansible deployer
    """

    kind: ProviderKind
    display_name: str = ""

    def __init__(self, prompter, collector, deployer, gate, logger=None):
        """
        Args:
            prompter: Prompter for operator input
            collector: ConfigCollector for the Jenkins stack settings
            deployer: AnsibleDeployer that configures the host
            gate: DependencyGate for external executables
            logger: Optional DeployLogger
        """
        self.prompter = prompter
        self.collector = collector
        self.deployer = deployer
        self.gate = gate
        self.logger = logger

    @property
    def name(self) -> str:
        return self.display_name

    @property
    def requires_external_provisioning(self) -> bool:
        """Whether a host has to be created before it can be configured."""
        return False

    @abstractmethod
    def deploy(self) -> None:
        """
        Run the provider workflow to completion.

        Must be implemented by subclasses.

        Raises:
            DeploymentError: Any workflow failure, tagged with its phase
        """
        pass

    def _step(self, message: str) -> None:
        if self.logger:
            self.logger.step(message)

    def _success(self, message: str) -> None:
        if self.logger:
            self.logger.success(message)
        else:
            self.prompter.show(f"[green]✓ {message}[/green]")

    def _confirm_summary(
        self, rows: Iterable[tuple[str, str]], title: Optional[str] = None
    ) -> None:
        """
        Show every collected setting and ask to proceed.

        Raises:
            DeploymentCancelled: If the operator answers no
            InputCancelled: On Ctrl-C or end of input
        """
        table = Table(
            title=title or "Please review your settings",
            title_justify="left",
            padding=(0, 1),
        )
        table.add_column("Setting", style="cyan", no_wrap=True)
        table.add_column("Value")
        for label, value in rows:
            table.add_row(label, str(value))

        self.prompter.show(table)

        if not self.prompter.confirm("Do you want to proceed with these settings?"):
            raise DeploymentCancelled()

    def _apply_configuration(
        self, connection: ConnectionParams, config: DeploymentConfig
    ) -> None:
        """
        Configure the host with Ansible.

        Raises:
            ConfigApplyError: If rendering, role installation or the playbook fails
        """
        self._step("Configuring Jenkins")
        if self.logger:
            self.logger.log(f"Applying configuration to {connection!r}")

        self.deployer.deploy(DeploymentPayload(config=config, connection=connection))
        self._success(f"Jenkins configured on {connection.host}")
