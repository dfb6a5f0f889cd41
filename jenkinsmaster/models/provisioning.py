"""
Provisioning Models

Handle on a Terraform working directory created for one deployment.
"""

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass
class ProvisioningHandle:
    """
    Terraform working directory and the outputs read from it.

    The directory belongs to the workflow that created it and is removed
    when the handle is released. Use as a context manager to guarantee
    release on every exit path.
    """

    working_dir: Path
    outputs: Dict[str, Any] = field(default_factory=dict)
    released: bool = False

    def get(self, name: str) -> Optional[str]:
        """Get an output value as a string, or None if absent."""
        if name not in self.outputs:
            return None
        return str(self.outputs[name])

    def release(self) -> None:
        """Remove the working directory (idempotent)."""
        if self.released:
            return
        shutil.rmtree(self.working_dir, ignore_errors=True)
        self.released = True

    def __enter__(self) -> "ProvisioningHandle":
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb):
        self.release()
        return False

    def __repr__(self) -> str:
        return f"ProvisioningHandle(dir={self.working_dir}, outputs={sorted(self.outputs)})"
