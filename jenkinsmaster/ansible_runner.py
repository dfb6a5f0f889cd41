"""
Ansible Runner

Renders the Jenkins playbook and its companions into a temporary directory
and runs them against the target host.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

import yaml
from jinja2 import StrictUndefined, Template, TemplateError

from jenkinsmaster.constants import DEFAULT_ANSIBLE_ROLE
from jenkinsmaster.exceptions import ConfigApplyError
from jenkinsmaster.logger import run_with_progress
from jenkinsmaster.models.deployment import DeploymentPayload

TEMPLATES_DIR = Path(__file__).parent / "templates" / "ansible"

# Rendered file name -> template file name
ARTIFACTS = {
    "inventory.ini": "inventory.ini.j2",
    "ansible.cfg": "ansible.cfg.j2",
    "requirements.yml": "requirements.yml.j2",
    "playbook.yml": "playbook.yml.j2",
}
YAML_ARTIFACTS = ("requirements.yml", "playbook.yml")


class AnsibleRunner:
    """
    Run Ansible commands with logging.

    Responsibilities:
    - Execute Ansible commands
    - Build the Ansible environment
    - Handle logging to file
    - Support verbose and quiet modes
    """

    def __init__(self, logger):
        """
        Initialize Ansible runner.

        Args:
            logger: DeployLogger instance for logging
        """
        self.logger = logger

    def _build_environment(self, working_dir: Path) -> dict:
        """
        Build environment variables for Ansible execution.

        Args:
            working_dir: Directory holding the rendered artifacts

        Returns:
            Dictionary of environment variables
        """
        env = os.environ.copy()
        env.update(
            {
                "PYTHONUNBUFFERED": "1",
                "ANSIBLE_CONFIG": str(working_dir / "ansible.cfg"),
                "ANSIBLE_HOST_KEY_CHECKING": "False",
                "ANSIBLE_FORCE_COLOR": "true" if self.logger.verbose else "false",
                "ANSIBLE_ROLES_PATH": str(working_dir / "roles"),
            }
        )
        if self.logger.log_path:
            ansible_log_path = (
                self.logger.log_path.parent / f"{self.logger.log_path.stem}_ansible.log"
            )
            env["ANSIBLE_LOG_PATH"] = str(ansible_log_path)
            self.logger.log(f"Ansible detailed log: {ansible_log_path}", "INFO")
        return env

    def run(
        self,
        args: list[str],
        cwd: Path,
        description: str,
        display_command: Optional[str] = None,
    ) -> int:
        """
        Run an Ansible command.

        Args:
            args: Complete command argument vector
            cwd: Working directory for execution
            description: Progress label
            display_command: Redacted command text for the log

        Returns:
            Exit code from Ansible

        Raises:
            ConfigApplyError: If the command cannot be started
        """
        try:
            returncode, _, _ = run_with_progress(
                self.logger,
                args,
                description,
                cwd=cwd,
                env=self._build_environment(cwd),
                display_command=display_command,
            )
        except OSError as e:
            raise ConfigApplyError(
                f"Failed to execute {args[0]}", context=str(e)
            )
        return returncode


class AnsibleDeployer:
    """
    Configure a host to run Jenkins.

    Renders inventory, ansible.cfg, requirements and playbook from the
    payload, installs the Galaxy requirements and runs the playbook with the
    stack settings as extra variables.
    """

    def __init__(
        self,
        logger,
        runner: Optional[AnsibleRunner] = None,
        role_source: str = DEFAULT_ANSIBLE_ROLE,
        templates_dir: Path = TEMPLATES_DIR,
    ):
        self.logger = logger
        self.runner = runner or AnsibleRunner(logger)
        self.role_source = role_source
        self.templates_dir = templates_dir

    def render_artifacts(self, payload: DeploymentPayload, working_dir: Path) -> dict:
        """
        Render every artifact into working_dir.

        Returns:
            Mapping of artifact name to written path

        Raises:
            ConfigApplyError: If a template is missing or renders invalid YAML
        """
        context = payload.to_template_context(role_source=self.role_source)
        written = {}

        for artifact, template_name in ARTIFACTS.items():
            template_path = self.templates_dir / template_name
            try:
                content = Template(
                    template_path.read_text(encoding="utf-8"),
                    undefined=StrictUndefined,
                    keep_trailing_newline=True,
                ).render(**context)
            except (OSError, TemplateError) as e:
                raise ConfigApplyError(
                    f"Failed to render {artifact}", context=f"{template_path}: {e}"
                )

            if artifact in YAML_ARTIFACTS:
                try:
                    yaml.safe_load(content)
                except yaml.YAMLError as e:
                    raise ConfigApplyError(
                        f"Rendered {artifact} is not valid YAML", context=str(e)
                    )

            path = working_dir / artifact
            path.write_text(content, encoding="utf-8")
            written[artifact] = path

        return written

    def deploy(self, payload: DeploymentPayload) -> None:
        """
        Run the Jenkins playbook against payload.connection.

        Raises:
            ConfigApplyError: If rendering, role installation or the playbook fails
        """
        with tempfile.TemporaryDirectory(prefix="jenkinsmaster-ansible-") as tmp:
            working_dir = Path(tmp)
            self.render_artifacts(payload, working_dir)
            self.logger.success("Rendered Ansible inventory and playbook")

            returncode = self.runner.run(
                ["ansible-galaxy", "install", "-r", "requirements.yml", "--force"],
                cwd=working_dir,
                description="Installing Ansible Galaxy roles",
            )
            if returncode != 0:
                raise ConfigApplyError(
                    "Failed to install Ansible Galaxy roles",
                    context=f"ansible-galaxy exited with code {returncode}",
                )

            returncode = self.runner.run(
                ["ansible-playbook", "playbook.yml", "-e", payload.extra_vars_json()],
                cwd=working_dir,
                description="Deploying Jenkins",
                display_command="ansible-playbook playbook.yml -e <extra vars>",
            )
            if returncode != 0:
                raise ConfigApplyError(
                    "Ansible deployment failed",
                    context=f"ansible-playbook exited with code {returncode}",
                )
