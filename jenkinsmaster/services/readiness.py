"""Wait for a freshly provisioned server to accept SSH commands."""

import time
from typing import Callable

from jenkinsmaster.constants import SSH_WAIT_DELAY
from jenkinsmaster.exceptions import ReadinessTimeout
from jenkinsmaster.models.ssh import ConnectionParams


class ReadinessPoller:
    """
    Poll a host with SSH probes until one succeeds or a deadline passes.

    Probes run at a fixed interval; there is no backoff.
    """

    def __init__(
        self,
        probe: Callable[[ConnectionParams], bool],
        interval: float = SSH_WAIT_DELAY,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        logger=None,
    ):
        """
        Args:
            probe: Returns True when the host ran a no-op command
            interval: Seconds to wait between failed attempts
            clock: Monotonic time source
            sleep: Sleep function
            logger: Optional DeployLogger for progress messages
        """
        self.probe = probe
        self.interval = interval
        self.clock = clock
        self.sleep = sleep
        self.logger = logger
        self.attempts = 0

    def _log(self, message: str, level: str = "INFO") -> None:
        if self.logger:
            self.logger.log(message, level)

    def wait_until_ready(self, connection: ConnectionParams, timeout: float) -> None:
        """
        Block until the host accepts SSH commands.

        Args:
            connection: Target connection details
            timeout: Seconds to keep trying

        Raises:
            ReadinessTimeout: If no probe succeeded before the deadline
        """
        deadline = self.clock() + timeout
        self.attempts = 0

        while True:
            self.attempts += 1
            if self.probe(connection):
                self._log(
                    f"SSH available on {connection.host}:{connection.port} "
                    f"after {self.attempts} attempt(s)"
                )
                return

            if self.clock() >= deadline:
                raise ReadinessTimeout(
                    f"SSH connection to {connection.host}:{connection.port} timed out",
                    context=f"No successful probe in {timeout:g}s ({self.attempts} attempts)",
                )

            self._log("Waiting for SSH to become available...", "DEBUG")
            self.sleep(self.interval)


def ssh_readiness_poller(ssh_service, interval: float = SSH_WAIT_DELAY, logger=None) -> ReadinessPoller:
    """Poller that probes with an SSHService."""
    return ReadinessPoller(probe=ssh_service.is_reachable, interval=interval, logger=logger)
