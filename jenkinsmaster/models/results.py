"""
Result Models

Dataclass models for operation results and command outputs.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Phase(Enum):
    """Workflow phase a failure is attributed to."""

    INPUT_COLLECTION = "input-collection"
    PROVISIONING = "provisioning"
    READINESS = "readiness"
    CONFIGURATION_APPLY = "configuration-apply"


class ResultStatus(Enum):
    """Status of an operation result."""

    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"


EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_CANCELLED = 130


@dataclass
class DeploymentResult:
    """Terminal outcome of one deployment run."""

    status: ResultStatus
    phase: Optional[Phase] = None
    error: Optional[Exception] = None

    @property
    def is_success(self) -> bool:
        """Check if deployment succeeded."""
        return self.status == ResultStatus.SUCCESS

    @property
    def exit_code(self) -> int:
        """Process exit code for this outcome."""
        if self.status == ResultStatus.SUCCESS:
            return EXIT_SUCCESS
        if self.status == ResultStatus.CANCELLED:
            return EXIT_CANCELLED
        return EXIT_FAILURE

    def __repr__(self) -> str:
        phase = self.phase.value if self.phase else "-"
        return f"DeploymentResult(status={self.status.value}, phase={phase})"


@dataclass
class ExecutionResult:
    """Result of a command execution (subprocess, SSH, etc.)."""

    returncode: int
    stdout: str = ""
    stderr: str = ""
    command: str = ""

    @property
    def is_success(self) -> bool:
        """Check if execution succeeded."""
        return self.returncode == 0

    @property
    def is_failure(self) -> bool:
        """Check if execution failed."""
        return self.returncode != 0

    def __repr__(self) -> str:
        return f"ExecutionResult(returncode={self.returncode}, command='{self.command[:50]}...')"


@dataclass
class SSHResult:
    """Result of an SSH command execution."""

    returncode: int
    stdout: str = ""
    stderr: str = ""
    host: str = ""
    command: str = ""
    duration_seconds: float = 0.0

    @property
    def is_success(self) -> bool:
        """Check if SSH command succeeded."""
        return self.returncode == 0

    @property
    def is_failure(self) -> bool:
        """Check if SSH command failed."""
        return self.returncode != 0

    def __repr__(self) -> str:
        return f"SSHResult(host={self.host}, returncode={self.returncode}, duration={self.duration_seconds:.2f}s)"
