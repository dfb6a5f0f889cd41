"""
Deploy Command

Interactive deployment of a Jenkins controller to a new Hetzner server or
an existing host.
"""

import click

from jenkinsmaster.base import BaseCommand
from jenkinsmaster.orchestrator import DeploymentOrchestrator
from jenkinsmaster.prompts import Prompter


class DeployCommand(BaseCommand):
    """
    Deploy Jenkins.

    Features:
    - Provider selection (Hetzner Cloud or existing VM)
    - Guided configuration with validation
    - Automatic logging
    """

    def execute(self) -> int:
        self.show_header(
            title="Deploy Jenkins",
            subtitle="Provision a host and configure a Jenkins controller",
            details={"Logs": self.settings.log_dir},
        )

        logger = self.init_logger("jenkinsmaster", "deploy")
        orchestrator = DeploymentOrchestrator(
            prompter=Prompter(console=self.console),
            logger=logger,
            settings=self.settings,
        )
        return orchestrator.run()


@click.command()
@click.option("--verbose", "-v", is_flag=True, help="Show all command output")
def deploy(verbose):
    """
    Deploy a Jenkins controller.

    \b
    Examples:
      jenkinsmaster deploy            # Guided deployment
      jenkinsmaster deploy --verbose  # Show Terraform and Ansible output

    \b
    Environment:
      JENKINSMASTER_TERRAFORM_MODULE  Terraform module source
      JENKINSMASTER_ANSIBLE_ROLE      Ansible role git URL
      JENKINSMASTER_SSH_TIMEOUT       Seconds to wait for SSH (default 300)
      JENKINSMASTER_LOG_DIR           Log directory
    """
    cmd = DeployCommand(verbose=verbose)
    cmd.run()
