"""
JenkinsMaster CLI Domain Models

Clean dataclass-based models for type-safe data handling.
"""

from .results import (
    Phase,
    ResultStatus,
    DeploymentResult,
    ExecutionResult,
    SSHResult,
)
from .ssh import ConnectionParams
from .deployment import (
    PluginSet,
    DeploymentConfig,
    DeploymentPayload,
)
from .provisioning import ProvisioningHandle

__all__ = [
    # Results
    "Phase",
    "ResultStatus",
    "DeploymentResult",
    "ExecutionResult",
    "SSHResult",
    # SSH
    "ConnectionParams",
    # Deployment
    "PluginSet",
    "DeploymentConfig",
    "DeploymentPayload",
    # Provisioning
    "ProvisioningHandle",
]
