"""
Jenkins stack configuration - interactive collection

Asks for every setting of the Jenkins deployment (admin account, port,
image, plugins, repositories). Independent of where Jenkins will run.
"""

import secrets
from random import Random
from typing import Optional

from rich.markup import escape

from jenkinsmaster.constants import (
    DEFAULT_ADMIN_USER,
    DEFAULT_CONTAINER_NAME,
    DEFAULT_DOCKER_IMAGE,
    DEFAULT_HTTP_PORT,
    DEFAULT_JOB_DSL_REPO,
    DEFAULT_PLUGINS,
    DEFAULT_SHARED_LIBRARY_REPO,
    GENERATE_PASSWORD_SENTINEL,
    PROTECTED_PLUGINS,
)
from jenkinsmaster.models.deployment import DeploymentConfig, PluginSet
from jenkinsmaster.services.lookups import ExternalLookups
from jenkinsmaster.validators import (
    generate_password,
    validate_non_empty,
    validate_password,
    validate_port,
)

ADD_PLUGIN = "Add a plugin"
REMOVE_PLUGIN = "Remove a plugin"
CONTINUE = "Continue"
CANCEL = "Cancel"


class ConfigCollector:
    """Collect the Jenkins stack configuration."""

    def __init__(
        self,
        prompter,
        lookups: Optional[ExternalLookups] = None,
        rng: Optional[Random] = None,
    ):
        """
        Args:
            prompter: Prompter for operator input
            lookups: Existence checks for images, plugins and repositories
            rng: Random source for generated passwords
        """
        self.prompter = prompter
        self.lookups = lookups or ExternalLookups()
        self.rng = rng or secrets.SystemRandom()

    def collect(self) -> DeploymentConfig:
        """
        Ask for every stack setting in order.

        Raises:
            InputCancelled: If the operator interrupts any prompt
        """
        admin_user = self.prompter.ask_validated(
            "Jenkins Admin Username", validate_non_empty, default=DEFAULT_ADMIN_USER
        )
        admin_password = self.collect_password()
        http_port = int(
            self.prompter.ask_validated(
                "Jenkins HTTP Port", validate_port, default=str(DEFAULT_HTTP_PORT)
            )
        )
        docker_image = self.collect_docker_image()
        container_name = self.prompter.ask_validated(
            "Jenkins Container Name", validate_non_empty, default=DEFAULT_CONTAINER_NAME
        )
        plugins = self.collect_plugins()
        job_dsl_repo = self.collect_repository(
            "Jenkins Job DSL Repository", DEFAULT_JOB_DSL_REPO
        )
        shared_library_repo = self.collect_repository(
            "Jenkins Shared Library Repository", DEFAULT_SHARED_LIBRARY_REPO
        )

        return DeploymentConfig(
            admin_user=admin_user,
            admin_password=admin_password,
            http_port=http_port,
            docker_image=docker_image,
            container_name=container_name,
            plugins=plugins.as_tuple(),
            job_dsl_repo=job_dsl_repo,
            shared_library_repo=shared_library_repo,
            protected_plugins=plugins.protected,
        )

    def collect_password(self) -> str:
        """Ask for a strong admin password, or generate one."""
        while True:
            answer = self.prompter.ask(
                f"Jenkins Admin Password (or type '{GENERATE_PASSWORD_SENTINEL}' "
                "to generate a strong password)",
                password=True,
                strip=False,
            )
            if not answer.strip():
                self.prompter.error("Password cannot be empty")
                continue

            if answer.strip() == GENERATE_PASSWORD_SENTINEL:
                password = generate_password(self.rng)
                # Shown once; never logged or stored
                self.prompter.show(
                    f"Generated strong password: [bold]{escape(password)}[/bold]"
                )
                return password

            error = validate_password(answer)
            if error is None:
                return answer
            self.prompter.error(error)

    def collect_docker_image(self) -> str:
        while True:
            image = self.prompter.ask_validated(
                "Jenkins Docker Image", validate_non_empty, default=DEFAULT_DOCKER_IMAGE
            )
            if self.lookups.docker_image_exists(image):
                return image
            self.prompter.error(
                "Docker image not found on Docker Hub. Please enter a valid image."
            )

    def collect_plugins(self) -> PluginSet:
        """
        Let the operator edit the plugin list.

        Required plugins are always kept. Returns when the operator picks
        Continue.
        """
        plugins = PluginSet(DEFAULT_PLUGINS, PROTECTED_PLUGINS)

        while True:
            self._show_plugins(plugins)
            action = self.prompter.select(
                "Select an action", [ADD_PLUGIN, REMOVE_PLUGIN, CONTINUE]
            )

            if action == ADD_PLUGIN:
                self._add_plugin(plugins)
            elif action == REMOVE_PLUGIN:
                self._remove_plugin(plugins)
            else:
                return plugins

    def _show_plugins(self, plugins: PluginSet) -> None:
        self.prompter.show("\n[bold]Current Jenkins Plugin List:[/bold]")
        for index, plugin in enumerate(plugins, start=1):
            suffix = " [dim](fixed)[/dim]" if plugins.is_protected(plugin) else ""
            self.prompter.show(f"{index}. {plugin}{suffix}")

    def _add_plugin(self, plugins: PluginSet) -> None:
        plugin_id = self.prompter.ask_validated(
            "Enter plugin ID to add", validate_non_empty
        )

        if plugin_id in plugins:
            self.prompter.error("Plugin already in the list.")
            return

        if not self.lookups.jenkins_plugin_exists(plugin_id):
            self.prompter.error("Invalid plugin ID. Plugin not found.")
            return

        plugins.add(plugin_id)
        self.prompter.show("Plugin added.")

    def _remove_plugin(self, plugins: PluginSet) -> None:
        removable = plugins.removable()
        if not removable:
            self.prompter.show("No plugins to remove.")
            return

        choice = self.prompter.select(
            "Select a plugin to remove",
            [(CANCEL, None)] + [(plugin, plugin) for plugin in removable],
        )
        if choice is None:
            return

        plugins.remove(choice)
        self.prompter.show("Plugin removed.")

    def collect_repository(self, label: str, default: str) -> str:
        """
        Ask for a git repository URL.

        If `git ls-remote` cannot read it the operator may keep it anyway.
        """
        while True:
            repo_url = self.prompter.ask_validated(
                label, validate_non_empty, default=default
            )
            if self.lookups.git_remote_reachable(repo_url):
                return repo_url

            if self.prompter.confirm(
                f"Unable to validate {label}. Do you want to proceed anyway?"
            ):
                return repo_url
            self.prompter.show("Please enter a valid repository URL.")
