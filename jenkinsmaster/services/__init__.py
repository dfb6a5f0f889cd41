"""
JenkinsMaster CLI Services Layer

Operations against the outside world used by the deployment workflow.
"""

from .ssh_service import SSHService
from .readiness import ReadinessPoller
from .dependency_gate import DependencyGate
from .lookups import ExternalLookups

__all__ = [
    "SSHService",
    "ReadinessPoller",
    "DependencyGate",
    "ExternalLookups",
]
