"""
Deployment Models

Dataclass models for the Jenkins stack configuration and the payload handed
to Ansible.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from jenkinsmaster.constants import ANSIBLE_INVENTORY_GROUP, DEFAULT_PLUGINS, PROTECTED_PLUGINS
from jenkinsmaster.models.ssh import ConnectionParams


class PluginSet:
    """
    Working set of Jenkins plugin IDs used while collecting input.

    Protected plugins are always members and can never be removed. IDs are
    unique; insertion order is kept for display only.
    """

    def __init__(
        self,
        defaults: Iterable[str] = DEFAULT_PLUGINS,
        protected: Iterable[str] = PROTECTED_PLUGINS,
    ):
        self.protected = tuple(dict.fromkeys(protected))
        self._plugins = list(dict.fromkeys(list(self.protected) + list(defaults)))

    def __contains__(self, plugin_id: str) -> bool:
        return plugin_id in self._plugins

    def __iter__(self):
        return iter(self._plugins)

    def __len__(self) -> int:
        return len(self._plugins)

    def is_protected(self, plugin_id: str) -> bool:
        """Check if plugin can never be removed."""
        return plugin_id in self.protected

    def add(self, plugin_id: str) -> None:
        """
        Add a plugin.

        Raises:
            ValueError: If plugin is already in the set
        """
        if plugin_id in self._plugins:
            raise ValueError(f"Plugin '{plugin_id}' is already in the list")
        self._plugins.append(plugin_id)

    def remove(self, plugin_id: str) -> None:
        """
        Remove a non-protected plugin.

        Raises:
            ValueError: If plugin is protected or not in the set
        """
        if self.is_protected(plugin_id):
            raise ValueError(f"Plugin '{plugin_id}' is required and cannot be removed")
        if plugin_id not in self._plugins:
            raise ValueError(f"Plugin '{plugin_id}' is not in the list")
        self._plugins.remove(plugin_id)

    def removable(self) -> list[str]:
        """Plugins the operator is allowed to remove."""
        return [p for p in self._plugins if not self.is_protected(p)]

    def as_tuple(self) -> tuple[str, ...]:
        return tuple(self._plugins)


@dataclass(frozen=True)
class DeploymentConfig:
    """Jenkins stack configuration, immutable once collected."""

    admin_user: str
    admin_password: str = field(repr=False)
    http_port: int
    docker_image: str
    container_name: str
    plugins: tuple[str, ...]
    job_dsl_repo: str
    shared_library_repo: str
    protected_plugins: tuple[str, ...] = PROTECTED_PLUGINS

    def __post_init__(self):
        if len(set(self.plugins)) != len(self.plugins):
            raise ValueError("Plugin list contains duplicate IDs")

        missing = [p for p in self.protected_plugins if p not in self.plugins]
        if missing:
            raise ValueError(f"Required plugins missing: {', '.join(missing)}")

    def summary_rows(self) -> list[tuple[str, str]]:
        """Rows for the settings review table (password is never shown)."""
        return [
            ("Jenkins Admin User", self.admin_user),
            ("Jenkins HTTP Port", str(self.http_port)),
            ("Jenkins Docker Image", self.docker_image),
            ("Jenkins Container Name", self.container_name),
            ("Jenkins Plugin List", ", ".join(self.plugins)),
            ("Jenkins Job DSL Repo", self.job_dsl_repo),
            ("Jenkins Shared Library Repo", self.shared_library_repo),
        ]


@dataclass(frozen=True)
class DeploymentPayload:
    """Stack configuration bound to a concrete target host."""

    config: DeploymentConfig
    connection: ConnectionParams

    def to_extra_vars(self) -> Dict[str, Any]:
        """Variables forwarded to ansible-playbook with -e."""
        return {
            "jenkins_admin_user": self.config.admin_user,
            "jenkins_admin_password": self.config.admin_password,
            "jenkins_http_port": self.config.http_port,
            "jenkins_docker_image": self.config.docker_image,
            "jenkins_container_name": self.config.container_name,
            "jenkins_plugin_list": list(self.config.plugins),
            "jenkins_job_dsl_repo": self.config.job_dsl_repo,
            "jenkins_shared_library_repo": self.config.shared_library_repo,
        }

    def extra_vars_json(self) -> str:
        return json.dumps(self.to_extra_vars())

    def to_template_context(self, role_source: Optional[str] = None) -> Dict[str, Any]:
        """Context used to render inventory, ansible.cfg, requirements and playbook."""
        context = {
            "host": self.connection.host,
            "port": self.connection.port,
            "user": self.connection.user,
            "private_key": str(self.connection.key_path_expanded),
            "forks": self.connection.forks,
            "inventory_file": "inventory.ini",
            "inventory_group": ANSIBLE_INVENTORY_GROUP,
            "role_source": role_source,
        }
        context.update(self.to_extra_vars())
        return context
