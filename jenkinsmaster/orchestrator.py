"""
Deployment orchestration

Select a provider, run its workflow and turn the outcome into an exit code.
"""

from typing import Callable, Iterable, Optional

from jenkinsmaster.config import Settings
from jenkinsmaster.exceptions import (
    DeploymentCancelled,
    DeploymentError,
    InputCancelled,
    MissingDependencyError,
)
from jenkinsmaster.models.results import DeploymentResult, ResultStatus
from jenkinsmaster.providers import PROVIDER_CHOICES, build_provider
from jenkinsmaster.services.dependency_gate import DependencyGate, install_hint

CANCELLATION_ERRORS = (InputCancelled, DeploymentCancelled, MissingDependencyError)


class DeploymentOrchestrator:
    """
    Run one deployment from provider selection to a terminal result.

    There is no retry at this level; every DeploymentError ends the run.
    """

    def __init__(
        self,
        prompter,
        logger,
        settings: Optional[Settings] = None,
        gate: Optional[DependencyGate] = None,
        provider_factory: Callable = build_provider,
    ):
        """
        Args:
            prompter: Prompter for operator input
            logger: DeployLogger for the run
            settings: Runtime settings
            gate: DependencyGate shared with the provider
            provider_factory: Builds a provider from a ProviderKind
        """
        self.prompter = prompter
        self.logger = logger
        self.settings = settings or Settings()
        self.gate = gate or DependencyGate(prompter, logger=logger)
        self.provider_factory = provider_factory

    def run(self) -> int:
        """Deploy and report. Returns the process exit code."""
        result = self.execute()
        self.report(result)
        return result.exit_code

    def execute(self) -> DeploymentResult:
        self._soft_check(["ansible"])

        try:
            kind = self.prompter.select(
                "Select a provider for deploying Jenkins", PROVIDER_CHOICES
            )
            provider = self.provider_factory(
                kind,
                prompter=self.prompter,
                logger=self.logger,
                settings=self.settings,
                gate=self.gate,
            )
            self.logger.log(f"Selected provider: {provider.name}")

            if provider.requires_external_provisioning:
                self._soft_check(["terraform"])

            provider.deploy()
        except CANCELLATION_ERRORS as e:
            return DeploymentResult(ResultStatus.CANCELLED, phase=e.phase, error=e)
        except DeploymentError as e:
            return DeploymentResult(ResultStatus.FAILURE, phase=e.phase, error=e)

        return DeploymentResult(ResultStatus.SUCCESS)

    def _soft_check(self, names: Iterable[str]) -> None:
        """Warn about missing executables without stopping."""
        try:
            self.gate.ensure(names)
        except MissingDependencyError as e:
            missing = e.names
        else:
            return

        for name in missing:
            self.logger.warning(f"'{name}' is not installed. It will be required later.")
            self.logger.log(install_hint(name), "INFO")

    def report(self, result: DeploymentResult) -> None:
        if result.is_success:
            self.logger.success("Deployment successful!")
            self.prompter.show("\n[bold green]✓ Deployment successful![/bold green]")
            return

        error = result.error
        phase = result.phase.value if result.phase else "unknown"
        message = getattr(error, "message", str(error))
        context = getattr(error, "context", None)

        if result.status == ResultStatus.CANCELLED:
            self.logger.log(f"Deployment cancelled during {phase}: {message}", "WARNING")
            self.prompter.show(f"\n[yellow]⚠ Deployment cancelled: {message}[/yellow]")
            return

        self.logger.log_error(
            f"Deployment failed: {message}",
            context=f"Phase: {phase}" + (f"\n{context}" if context else ""),
        )
