"""Tests for the deployment logger."""

import io
import subprocess
from datetime import datetime
from unittest.mock import patch

from rich.console import Console

from jenkinsmaster.constants import LOG_DATE_FORMAT
from jenkinsmaster.logger import DeployLogger, run_with_progress


def _logger(log_dir, verbose=False):
    return DeployLogger(
        "hetzner",
        "deploy",
        verbose=verbose,
        log_dir=log_dir,
        console=Console(file=io.StringIO(), width=120),
    )


class TestDeployLogger:
    def test_log_path_layout(self, log_dir):
        logger = _logger(log_dir)
        logger.close()

        relative = logger.log_path.relative_to(log_dir)
        assert relative.parts[0] == "hetzner"
        assert relative.parts[1] == datetime.now().strftime(LOG_DATE_FORMAT)
        assert relative.name.endswith("_deploy.log")

    def test_status_footer(self, log_dir):
        logger = _logger(log_dir)
        logger.step("Provisioning")
        logger.success("Server created")
        logger.close()

        text = logger.log_path.read_text()
        assert "Step: Provisioning" in text
        assert "Status: SUCCESS" in text

    def test_errors_mark_log_failed(self, log_dir):
        logger = _logger(log_dir)
        logger.log_error("Deployment failed", context="Phase: readiness")
        logger.close()

        text = logger.log_path.read_text()
        assert "Context: Phase: readiness" in text
        assert "Status: FAILED" in text

    def test_output_is_stripped_of_ansi(self, log_dir):
        logger = _logger(log_dir)
        logger.log_output("\x1b[32mok\x1b[0m: [jenkins]", "stdout")
        logger.close()

        assert "  [stdout] ok: [jenkins]" in logger.log_path.read_text()


class TestRunWithProgress:
    def test_quiet_mode_captures_output(self, log_dir, tmp_path):
        logger = _logger(log_dir)
        completed = subprocess.CompletedProcess([], 0, stdout="Apply complete!\n", stderr="")

        with patch("jenkinsmaster.logger.subprocess.run", return_value=completed) as run:
            returncode, stdout, _ = run_with_progress(
                logger, ["terraform", "apply"], "Provisioning", cwd=tmp_path
            )

        assert returncode == 0
        assert stdout == "Apply complete!\n"
        assert run.call_args.args[0] == ["terraform", "apply"]
        assert run.call_args.kwargs["cwd"] == tmp_path

        logger.close()
        assert "Apply complete!" in logger.log_path.read_text()

    def test_display_command_hides_arguments(self, log_dir):
        logger = _logger(log_dir)
        completed = subprocess.CompletedProcess([], 0, stdout="", stderr="")

        with patch("jenkinsmaster.logger.subprocess.run", return_value=completed):
            run_with_progress(
                logger,
                ["ansible-playbook", "playbook.yml", "-e", '{"jenkins_admin_password": "s3cret"}'],
                "Deploying Jenkins",
                display_command="ansible-playbook playbook.yml -e <extra vars>",
            )

        logger.close()
        text = logger.log_path.read_text()
        assert "s3cret" not in text
        assert "Executing: ansible-playbook playbook.yml -e <extra vars>" in text
