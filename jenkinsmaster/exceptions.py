"""
JenkinsMaster CLI Exception Hierarchy

Clean exception hierarchy for consistent error handling across the CLI.
Every workflow failure is a DeploymentError tagged with the phase it
happened in, so the orchestrator can report it verbatim.
"""

from typing import Iterable, Optional

from jenkinsmaster.models.results import Phase


class JenkinsMasterError(Exception):
    """Base exception for all JenkinsMaster errors."""

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional context."""
        if self.context:
            return f"{self.message}\nContext: {self.context}"
        return self.message


class ConfigurationError(JenkinsMasterError):
    """Raised when configuration is invalid or missing."""

    pass


class DeploymentError(JenkinsMasterError):
    """Raised when a deployment phase fails."""

    phase = Phase.INPUT_COLLECTION

    def __init__(
        self,
        message: str,
        context: Optional[str] = None,
        phase: Optional[Phase] = None,
    ):
        if phase is not None:
            self.phase = phase
        super().__init__(message, context)


class InputCancelled(DeploymentError):
    """Raised when the operator interrupts a prompt (Ctrl-C or end of input)."""

    def __init__(self, message: str = "Input cancelled by user", **kwargs):
        super().__init__(message, **kwargs)


class DeploymentCancelled(DeploymentError):
    """Raised when the operator declines the settings summary."""

    def __init__(self, message: str = "Deployment cancelled by user", **kwargs):
        super().__init__(message, **kwargs)


class NoCandidatesError(DeploymentError):
    """Raised when a selection step has nothing to offer."""

    def __init__(self, state: str, context: Optional[str] = None):
        self.state = state
        super().__init__(f"No candidates available for {state}", context=context)


class HetznerAPIError(DeploymentError):
    """Raised when the Hetzner Cloud catalog API cannot be read."""

    pass


class ProvisioningError(DeploymentError):
    """Raised when Terraform fails to provision infrastructure."""

    phase = Phase.PROVISIONING


class ProvisioningOutputError(ProvisioningError):
    """Raised when the Terraform module does not expose a required output."""

    def __init__(self, output_name: str, available: Iterable[str] = ()):
        self.output_name = output_name
        available = sorted(available)
        context = f"Available outputs: {', '.join(available)}" if available else None
        super().__init__(f"Terraform output '{output_name}' not found", context=context)


class ReadinessTimeout(DeploymentError):
    """Raised when a server does not accept SSH commands before the deadline."""

    phase = Phase.READINESS


class SSHError(DeploymentError):
    """Raised when a single SSH reachability check fails."""

    phase = Phase.READINESS


class ConfigApplyError(DeploymentError):
    """Raised when Ansible fails to configure the target."""

    phase = Phase.CONFIGURATION_APPLY


class MissingDependencyError(DeploymentError):
    """Raised when required executables are missing and the operator gives up."""

    def __init__(self, names: Iterable[str], phase: Optional[Phase] = None):
        self.names = list(names)
        super().__init__(
            f"Missing dependencies: {', '.join(self.names)}",
            context="Install them and run the command again",
            phase=phase,
        )
