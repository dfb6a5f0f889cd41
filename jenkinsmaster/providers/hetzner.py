"""
Hetzner Cloud provider

Creates a server with the Terraform module, waits for SSH and configures
Jenkins on it.
"""

import functools
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from jenkinsmaster.config import Settings
from jenkinsmaster.constants import (
    DEFAULT_SERVER_NAME,
    DEFAULT_SSH_KEY_NAME,
    DEFAULT_SSH_PORT,
    DEFAULT_SSH_PUBLIC_KEY_PATH,
    DEFAULT_SSH_USER,
    SERVER_IP_OUTPUT,
)
from jenkinsmaster.exceptions import HetznerAPIError, NoCandidatesError
from jenkinsmaster.models.deployment import DeploymentConfig
from jenkinsmaster.models.results import Phase
from jenkinsmaster.models.ssh import ConnectionParams
from jenkinsmaster.providers.base import Provider, ProviderKind
from jenkinsmaster.providers.hetzner_catalog import (
    HetznerCatalog,
    available_server_types,
    location_names,
    system_image_names,
)
from jenkinsmaster.validators import expand_path, validate_file_path, validate_non_empty


@dataclass
class HetznerState:
    """Answers collected for a Hetzner deployment."""

    token: str = ""
    location: str = ""
    server_type: str = ""
    image: str = ""
    public_key_path: str = DEFAULT_SSH_PUBLIC_KEY_PATH
    ssh_key_name: str = DEFAULT_SSH_KEY_NAME
    server_name: str = DEFAULT_SERVER_NAME
    config: Optional[DeploymentConfig] = None
    server_ip: Optional[str] = None

    @property
    def private_key_path(self) -> str:
        """Private half of the uploaded key (public path without .pub)."""
        if self.public_key_path.endswith(".pub"):
            return self.public_key_path[: -len(".pub")]
        return self.public_key_path

    def __repr__(self) -> str:
        return (
            f"HetznerState(location={self.location}, server_type={self.server_type}, "
            f"image={self.image}, server_name={self.server_name})"
        )


class HetznerProvider(Provider):
    """
    Deploy Jenkins on a new Hetzner Cloud server.

    Workflow:
    1. Token, location, server type, image, SSH key and server name
    2. Jenkins stack settings and review
    3. Terraform apply, server IP from the module outputs
    4. Wait for SSH, settle, run Ansible
    """

    kind = ProviderKind.HETZNER
    display_name = "Hetzner Cloud"

    def __init__(
        self,
        prompter,
        collector,
        deployer,
        gate,
        terraform,
        poller,
        settings: Optional[Settings] = None,
        catalog_factory: Optional[Callable[[str], HetznerCatalog]] = None,
        sleep: Callable[[float], None] = time.sleep,
        logger=None,
    ):
        """
        Args:
            terraform: TerraformManager that creates the server
            poller: ReadinessPoller used after provisioning
            settings: Runtime settings (module source, timeouts)
            catalog_factory: Builds a catalog client from an API token
            sleep: Sleep function for the settle delay
        """
        super().__init__(prompter, collector, deployer, gate, logger=logger)
        self.terraform = terraform
        self.poller = poller
        self.settings = settings or Settings()
        self.catalog_factory = catalog_factory or functools.partial(
            HetznerCatalog, api_url=self.settings.hcloud_api_url
        )
        self.sleep = sleep
        self.state = HetznerState()
        self.catalog: Optional[HetznerCatalog] = None

    @property
    def requires_external_provisioning(self) -> bool:
        return True

    def deploy(self) -> None:
        self.collect_token()
        self.select_location()
        self.select_server_type()
        self.select_image()
        self.collect_key_reference()
        self.state.server_name = self.prompter.ask_validated(
            "Server Name", validate_non_empty, default=DEFAULT_SERVER_NAME
        )
        self.state.config = self.collector.collect()

        self._confirm_summary(self.summary_rows())

        self.gate.ensure_or_retry("terraform", phase=Phase.PROVISIONING)

        self._step("Provisioning Hetzner server")
        with self.terraform.apply(
            self.terraform_variables(), self.settings.terraform_module
        ) as handle:
            self.state.server_ip = self.terraform.get_output(handle, SERVER_IP_OUTPUT)
            self._success(f"Server created: {self.state.server_ip}")

            connection = self.connection()

            self._step("Waiting for SSH")
            self.poller.wait_until_ready(connection, self.settings.ssh_timeout)
            self._success(f"SSH is available on {connection.host}")

            self.gate.ensure_or_retry("ansible", phase=Phase.CONFIGURATION_APPLY)

            if self.settings.settle_delay:
                self._log(
                    f"Waiting {self.settings.settle_delay:g}s for the server to settle"
                )
                self.sleep(self.settings.settle_delay)

            self._apply_configuration(connection, self.state.config)

    def _log(self, message: str, level: str = "INFO") -> None:
        if self.logger:
            self.logger.log(message, level)

    def collect_token(self) -> None:
        """Ask for an API token until Hetzner accepts it."""
        while True:
            token = self.prompter.ask_validated(
                "Hetzner API Token", validate_non_empty, password=True
            )
            catalog = self.catalog_factory(token)
            try:
                catalog.validate_token()
            except HetznerAPIError as e:
                self._log(f"Token validation failed: {e.message}", "WARNING")
                self.prompter.error("Invalid token. Please try again.")
                continue

            self.state.token = token
            self.catalog = catalog
            return

    def select_location(self) -> None:
        names = location_names(self.catalog.locations())
        if not names:
            raise NoCandidatesError("SelectRegion", context="Hetzner returned no locations")
        self.state.location = self.prompter.select("Select a location", names)

    def select_server_type(self) -> None:
        choices = available_server_types(
            self.catalog.server_types(),
            self.catalog.datacenters(),
            self.state.location,
        )
        if not choices:
            raise NoCandidatesError(
                "SelectInstanceClass",
                context=f"No server types available in {self.state.location}",
            )
        self.state.server_type = self.prompter.select("Select a server type", choices)

    def select_image(self) -> None:
        names = system_image_names(self.catalog.images())
        if not names:
            raise NoCandidatesError("SelectImage", context="No x86 system images found")
        self.state.image = self.prompter.select("Select an image", names)

    def collect_key_reference(self) -> None:
        public_key_path = self.prompter.ask_validated(
            "SSH Public Key Path", validate_file_path, default=DEFAULT_SSH_PUBLIC_KEY_PATH
        )
        self.state.public_key_path = str(expand_path(public_key_path))
        self.state.ssh_key_name = self.prompter.ask_validated(
            "SSH Key Name in Hetzner", validate_non_empty, default=DEFAULT_SSH_KEY_NAME
        )

    def summary_rows(self) -> list[tuple[str, str]]:
        rows = [
            ("Location", self.state.location),
            ("Server Type", self.state.server_type),
            ("Image", self.state.image),
            ("SSH Public Key Path", self.state.public_key_path),
            ("SSH Key Name", self.state.ssh_key_name),
            ("Server Name", self.state.server_name),
        ]
        if self.state.config:
            rows.extend(self.state.config.summary_rows())
        return rows

    def terraform_variables(self) -> Dict[str, Any]:
        """Input variables for the Hetzner Jenkins module."""
        return {
            "hcloud_token": self.state.token,
            "server_name": self.state.server_name,
            "server_type": self.state.server_type,
            "server_image": self.state.image,
            "ssh_public_key_path": self.state.public_key_path,
            "ssh_key_name": self.state.ssh_key_name,
            "server_location": self.state.location,
            "ssh_port": DEFAULT_SSH_PORT,
            "jenkins_http_port": self.state.config.http_port,
        }

    def connection(self) -> ConnectionParams:
        return ConnectionParams(
            host=self.state.server_ip,
            user=DEFAULT_SSH_USER,
            key_path=self.state.private_key_path,
            port=DEFAULT_SSH_PORT,
        )
