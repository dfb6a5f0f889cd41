"""
JenkinsMaster deployment providers

Each provider is one way of getting a host that runs Jenkins.
"""

from typing import Optional

from jenkinsmaster.ansible_runner import AnsibleDeployer
from jenkinsmaster.collector import ConfigCollector
from jenkinsmaster.config import Settings
from jenkinsmaster.services.dependency_gate import DependencyGate
from jenkinsmaster.services.readiness import ssh_readiness_poller
from jenkinsmaster.services.ssh_service import SSHService
from jenkinsmaster.terraform_utils import TerraformManager

from .base import Provider, ProviderKind
from .existing_host import ExistingHostProvider, ExistingHostState
from .hetzner import HetznerProvider, HetznerState

# Menu order for provider selection
PROVIDER_CHOICES = [
    (HetznerProvider.display_name, ProviderKind.HETZNER),
    (ExistingHostProvider.display_name, ProviderKind.EXISTING_HOST),
]


def build_provider(
    kind: ProviderKind,
    prompter,
    logger,
    settings: Optional[Settings] = None,
    gate: Optional[DependencyGate] = None,
) -> Provider:
    """
    Create a provider with its default collaborators.

    Args:
        kind: Provider variant
        prompter: Prompter for operator input
        logger: DeployLogger shared by every adapter
        settings: Runtime settings
        gate: DependencyGate (one is created if omitted)

    Raises:
        ValueError: For an unknown kind
    """
    settings = settings or Settings()
    gate = gate or DependencyGate(prompter, logger=logger)
    collector = ConfigCollector(prompter)
    deployer = AnsibleDeployer(logger, role_source=settings.ansible_role)
    ssh_service = SSHService()

    if kind is ProviderKind.HETZNER:
        return HetznerProvider(
            prompter,
            collector,
            deployer,
            gate,
            terraform=TerraformManager(logger),
            poller=ssh_readiness_poller(
                ssh_service, interval=settings.poll_interval, logger=logger
            ),
            settings=settings,
            logger=logger,
        )

    if kind is ProviderKind.EXISTING_HOST:
        return ExistingHostProvider(
            prompter, collector, deployer, gate, ssh_service=ssh_service, logger=logger
        )

    raise ValueError(f"Unknown provider kind: {kind}")


__all__ = [
    "Provider",
    "ProviderKind",
    "HetznerProvider",
    "HetznerState",
    "ExistingHostProvider",
    "ExistingHostState",
    "PROVIDER_CHOICES",
    "build_provider",
]
