"""
Pytest configuration and fixtures for JenkinsMaster tests.
"""

import io
from collections import deque
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
from rich.console import Console

from jenkinsmaster.exceptions import HetznerAPIError, InputCancelled
from jenkinsmaster.logger import DeployLogger
from jenkinsmaster.models.provisioning import ProvisioningHandle
from jenkinsmaster.prompts import Prompter
from jenkinsmaster.providers.hetzner_catalog import (
    Datacenter,
    Image,
    Location,
    ServerType,
)
from jenkinsmaster.terraform_utils import TerraformManager

# Scripted answer that behaves like Ctrl-C at the prompt
INTERRUPT = object()

STRONG_PASSWORD = "Str0ng!Pass"

# Answers for ConfigCollector.collect() that accept every default
STACK_ANSWERS = [
    "",  # admin user
    STRONG_PASSWORD,
    "",  # http port
    "",  # docker image
    "",  # container name
    "",  # job dsl repo
    "",  # shared library repo
]
STACK_SELECTIONS = ["Continue"]


# ============================================================================
# Prompting
# ============================================================================


class FakePrompter(Prompter):
    """
    Prompter driven by scripted answers.

    Free-text answers and menu selections are consumed from separate
    queues. An empty answer takes the prompt default. Running out of
    answers fails the test.
    """

    def __init__(
        self,
        answers: Optional[List[Any]] = None,
        selections: Optional[List[Any]] = None,
        acknowledgements: Optional[List[Any]] = None,
    ):
        super().__init__(console=Console(file=io.StringIO(), width=120))
        self.answers = deque(answers or [])
        self.selections = deque(selections or [])
        self.acknowledgements = deque(acknowledgements or [])
        self.asked: List[str] = []
        self.menus: List[tuple] = []
        self.shown: List[Any] = []
        self.errors: List[str] = []

    def show(self, message: Any = "") -> None:
        self.shown.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)

    def ask(
        self,
        label: str,
        default: Optional[str] = None,
        password: bool = False,
        strip: bool = True,
    ) -> str:
        self.asked.append(label)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {label}")

        answer = self.answers.popleft()
        if answer is INTERRUPT:
            raise InputCancelled()
        if answer == "" and default is not None:
            return default
        return answer

    def select(self, message: str, choices, default=None):
        self.menus.append((message, list(choices)))
        if not self.selections:
            raise AssertionError(f"Unexpected menu: {message}")

        selection = self.selections.popleft()
        if selection is INTERRUPT:
            raise InputCancelled()

        for choice in choices:
            if isinstance(choice, tuple):
                label, value = choice
                if selection == label or selection == value:
                    return value
            elif selection == choice:
                return choice
        raise AssertionError(f"{selection!r} is not offered by menu: {message}")

    def acknowledge(self, message: str) -> str:
        self.shown.append(message)
        if not self.acknowledgements:
            raise AssertionError(f"Unexpected acknowledgement: {message}")

        answer = self.acknowledgements.popleft()
        if answer is INTERRUPT:
            raise InputCancelled()
        return answer

    @property
    def exhausted(self) -> bool:
        return not self.answers and not self.selections and not self.acknowledgements


# ============================================================================
# Time
# ============================================================================


class FakeClock:
    """Monotonic clock advanced only by sleep()."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ============================================================================
# Logging
# ============================================================================


@pytest.fixture
def log_dir(tmp_path_factory) -> Path:
    return tmp_path_factory.mktemp("logs")


@pytest.fixture
def logger(log_dir: Path):
    deploy_logger = DeployLogger(
        "test",
        "deploy",
        log_dir=log_dir,
        console=Console(file=io.StringIO(), width=120),
    )
    yield deploy_logger
    deploy_logger.close()


# ============================================================================
# Adapters
# ============================================================================


class FakeLookups:
    """External lookups answered from fixed data."""

    def __init__(
        self,
        images: Optional[set] = None,
        plugins: Optional[set] = None,
        reachable: bool = True,
    ):
        self.images = images
        self.plugins = plugins if plugins is not None else set()
        self.reachable = reachable
        self.checked_repos: List[str] = []

    def docker_image_exists(self, image: str) -> bool:
        return self.images is None or image in self.images

    def jenkins_plugin_exists(self, plugin_id: str) -> bool:
        return plugin_id in self.plugins

    def git_remote_reachable(self, repo_url: str, timeout: int = 30) -> bool:
        self.checked_repos.append(repo_url)
        return self.reachable


class FakeDeployer:
    """Records payloads instead of running Ansible."""

    def __init__(self):
        self.payloads = []

    def deploy(self, payload) -> None:
        self.payloads.append(payload)


class FakeTerraform(TerraformManager):
    """TerraformManager whose apply returns fixed outputs."""

    def __init__(self, working_dir: Path, outputs: Optional[Dict[str, Any]] = None):
        super().__init__(logger=None)
        self.working_dir = working_dir
        self.outputs = outputs if outputs is not None else {}
        self.applied: List[tuple] = []
        self.handles: List[ProvisioningHandle] = []

    def apply(self, variables, module_ref) -> ProvisioningHandle:
        self.working_dir.mkdir(parents=True, exist_ok=True)
        self.applied.append((dict(variables), module_ref))
        handle = ProvisioningHandle(working_dir=self.working_dir, outputs=dict(self.outputs))
        self.handles.append(handle)
        return handle


class FakeCatalog:
    """Hetzner catalog backed by in-memory records."""

    def __init__(
        self,
        locations=None,
        server_types=None,
        datacenters=None,
        images=None,
        valid_tokens=("valid-token",),
    ):
        self._locations = locations if locations is not None else []
        self._server_types = server_types if server_types is not None else []
        self._datacenters = datacenters if datacenters is not None else []
        self._images = images if images is not None else []
        self.valid_tokens = valid_tokens
        self.token: Optional[str] = None

    def for_token(self, token: str) -> "FakeCatalog":
        self.token = token
        return self

    def validate_token(self) -> None:
        if self.token not in self.valid_tokens:
            raise HetznerAPIError("Hetzner Cloud API returned 401 for /server_types")

    def locations(self):
        return list(self._locations)

    def server_types(self):
        return list(self._server_types)

    def datacenters(self):
        return list(self._datacenters)

    def images(self):
        return list(self._images)


@pytest.fixture
def hetzner_catalog() -> FakeCatalog:
    """Catalog with one orderable type in fsn1 and two Ubuntu images."""
    return FakeCatalog(
        locations=[Location("nbg1"), Location("fsn1"), Location("hel1")],
        server_types=[
            ServerType(
                id=1,
                name="cx22",
                cores=2,
                memory=4.0,
                disk=40,
                architecture="x86",
                monthly_prices={"fsn1": 4.59},
            ),
            ServerType(
                id=2,
                name="cx11",
                cores=1,
                memory=2.0,
                disk=20,
                architecture="x86",
                deprecated=True,
                monthly_prices={"fsn1": 3.29},
            ),
        ],
        datacenters=[
            Datacenter("fsn1-dc14", "fsn1", available_server_types=(1, 2)),
            Datacenter("hel1-dc2", "hel1", available_server_types=()),
        ],
        images=[
            Image("ubuntu-22.04", "system", "x86"),
            Image("ubuntu-24.04", "system", "x86"),
            Image("ubuntu-24.04", "system", "arm"),
        ],
    )


@pytest.fixture
def public_key(tmp_path: Path) -> Path:
    ssh_dir = tmp_path / "ssh"
    ssh_dir.mkdir()
    (ssh_dir / "id_ed25519").write_text("PRIVATE")
    key = ssh_dir / "id_ed25519.pub"
    key.write_text("ssh-ed25519 AAAA test@example")
    return key


@pytest.fixture
def private_key(public_key: Path) -> Path:
    return public_key.with_suffix("")
