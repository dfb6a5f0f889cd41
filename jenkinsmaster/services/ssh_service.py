"""SSH service for checking that remote hosts accept commands."""

import subprocess
import time
from typing import Optional

from jenkinsmaster.constants import SSH_CONNECTION_TIMEOUT
from jenkinsmaster.models.results import SSHResult
from jenkinsmaster.models.ssh import ConnectionParams

PROBE_COMMAND = "echo Connection successful"


class SSHService:
    """Service for SSH operations."""

    def __init__(self, connect_timeout: int = SSH_CONNECTION_TIMEOUT):
        """
        Initialize SSH service.

        Args:
            connect_timeout: Seconds allowed for a single connection attempt
        """
        self.connect_timeout = connect_timeout

    def build_command(self, connection: ConnectionParams, command: str) -> list[str]:
        """Argument vector for a non-interactive SSH command."""
        return [
            "ssh",
            "-o",
            "BatchMode=yes",
            "-o",
            "StrictHostKeyChecking=no",
            "-o",
            "UserKnownHostsFile=/dev/null",
            "-o",
            "LogLevel=QUIET",
            "-o",
            f"ConnectTimeout={self.connect_timeout}",
            "-i",
            str(connection.key_path_expanded),
            "-p",
            str(connection.port),
            connection.target,
            command,
        ]

    def execute_command(
        self,
        connection: ConnectionParams,
        command: str,
        timeout: Optional[int] = None,
    ) -> SSHResult:
        """
        Execute command on remote host via SSH.

        A hung or unlaunchable ssh client is reported as a failed result
        (returncode -1) rather than raised.

        Args:
            connection: Target connection details
            command: Command to execute
            timeout: Overall timeout in seconds (defaults to twice the connect timeout)

        Returns:
            SSHResult with execution details
        """
        ssh_cmd = self.build_command(connection, command)
        timeout = timeout or self.connect_timeout * 2

        start_time = time.time()

        try:
            result = subprocess.run(
                ssh_cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            return SSHResult(
                returncode=-1,
                stderr=f"SSH command timed out after {timeout}s",
                host=connection.host,
                command=command,
                duration_seconds=time.time() - start_time,
            )
        except OSError as e:
            return SSHResult(
                returncode=-1,
                stderr=f"Failed to run ssh: {e}",
                host=connection.host,
                command=command,
                duration_seconds=time.time() - start_time,
            )

        return SSHResult(
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
            host=connection.host,
            command=command,
            duration_seconds=time.time() - start_time,
        )

    def probe(self, connection: ConnectionParams) -> SSHResult:
        """Run a single no-op command on the target."""
        return self.execute_command(connection, PROBE_COMMAND)

    def is_reachable(self, connection: ConnectionParams) -> bool:
        return self.probe(connection).is_success
