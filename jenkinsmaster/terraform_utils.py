"""
Terraform Utilities

Runs a Terraform module in a throwaway working directory and reads its
outputs.
"""

import json
import subprocess
import tempfile
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from jenkinsmaster.constants import TERRAFORM_VARS_FILE
from jenkinsmaster.exceptions import ProvisioningError, ProvisioningOutputError
from jenkinsmaster.logger import run_with_progress
from jenkinsmaster.models.provisioning import ProvisioningHandle
from jenkinsmaster.models.results import ExecutionResult


class TerraformManager:
    """
    Manages Terraform operations with clean interfaces.

    Responsibilities:
    - Initialize a working directory from a module source
    - tfvars generation
    - Apply
    - Output queries

    Every command runs with an explicit cwd; the process working directory
    is never changed.
    """

    def __init__(self, logger, temp_root: Optional[Path] = None):
        """
        Initialize Terraform manager.

        Args:
            logger: DeployLogger for command output
            temp_root: Parent directory for working directories (system temp by default)
        """
        self.logger = logger
        self.temp_root = temp_root

    def _run_command(
        self,
        args: list[str],
        cwd: Path,
        description: str,
        check: bool = True,
    ) -> ExecutionResult:
        """
        Run Terraform command.

        Args:
            args: Command arguments (e.g., ['apply', '-auto-approve'])
            cwd: Working directory
            description: Progress label
            check: Whether to raise exception on failure

        Returns:
            ExecutionResult object

        Raises:
            ProvisioningError: If command fails and check=True
        """
        cmd = ["terraform"] + args
        cmd_string = " ".join(cmd)

        try:
            returncode, stdout, stderr = run_with_progress(
                self.logger, cmd, description, cwd=cwd
            )
        except OSError as e:
            raise ProvisioningError(
                "Failed to execute Terraform command",
                context=f"Command: {cmd_string}, Error: {e}",
            )

        result = ExecutionResult(
            returncode=returncode, stdout=stdout, stderr=stderr, command=cmd_string
        )

        if check and result.is_failure:
            raise ProvisioningError(
                f"Terraform command failed: {cmd_string}",
                context=f"Exit code: {result.returncode}\nError: {result.stderr.strip()}",
            )

        return result

    def generate_tfvars(self, variables: Mapping[str, Any], working_dir: Path) -> Path:
        """
        Write Terraform variables to a JSON var file.

        Args:
            variables: Variable name to scalar value
            working_dir: Directory to write into

        Returns:
            Path to generated tfvars file
        """
        output_file = working_dir / TERRAFORM_VARS_FILE

        with open(output_file, "w") as f:
            json.dump(dict(variables), f, indent=2)
        output_file.chmod(0o600)

        return output_file

    def init(self, working_dir: Path, module_ref: str) -> ExecutionResult:
        """Initialize an empty working directory from a module source."""
        return self._run_command(
            ["init", "-input=false", "-no-color", f"-from-module={module_ref}"],
            cwd=working_dir,
            description="Initializing Terraform",
        )

    def apply(self, variables: Mapping[str, Any], module_ref: str) -> ProvisioningHandle:
        """
        Provision infrastructure from a module.

        Args:
            variables: Module input variables
            module_ref: Module source (registry address, git URL or path)

        Returns:
            ProvisioningHandle owning the working directory; the caller
            must release it (use it as a context manager)

        Raises:
            ProvisioningError: If init, apply or output fails
        """
        working_dir = Path(
            tempfile.mkdtemp(prefix="jenkinsmaster-terraform-", dir=self.temp_root)
        )
        handle = ProvisioningHandle(working_dir=working_dir)
        self.logger.log(f"Terraform working directory: {working_dir}", "DEBUG")

        try:
            self.init(working_dir, module_ref)
            var_file = self.generate_tfvars(variables, working_dir)
            self._run_command(
                [
                    "apply",
                    "-input=false",
                    "-no-color",
                    "-auto-approve",
                    f"-var-file={var_file.name}",
                ],
                cwd=working_dir,
                description="Provisioning server",
            )
            handle.outputs = self.read_outputs(working_dir)
        except BaseException:
            handle.release()
            raise

        return handle

    def read_outputs(self, working_dir: Path) -> Dict[str, Any]:
        """
        Read all outputs of an applied working directory.

        Raises:
            ProvisioningError: If the outputs cannot be read or parsed
        """
        cmd = ["terraform", "output", "-json", "-no-color"]
        self.logger.log_command(" ".join(cmd))

        try:
            result = subprocess.run(
                cmd, cwd=working_dir, capture_output=True, text=True, check=False
            )
        except OSError as e:
            raise ProvisioningError("Failed to read Terraform outputs", context=str(e))

        if result.returncode != 0:
            raise ProvisioningError(
                "Failed to read Terraform outputs", context=result.stderr.strip()
            )

        try:
            raw_outputs = json.loads(result.stdout or "{}")
        except json.JSONDecodeError as e:
            raise ProvisioningError("Failed to parse Terraform outputs", context=str(e))

        return {key: output.get("value") for key, output in raw_outputs.items()}

    def get_output(self, handle: ProvisioningHandle, name: str) -> str:
        """
        Get a single output of a provisioned module.

        Raises:
            ProvisioningOutputError: If the module has no such output
        """
        value = handle.get(name)
        if value is None:
            raise ProvisioningOutputError(name, available=handle.outputs.keys())
        return value
