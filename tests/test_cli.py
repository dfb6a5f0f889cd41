"""Tests for the command line entry points."""

import sys
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from jenkinsmaster import __version__
from jenkinsmaster.main import cli, main


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv("JENKINSMASTER_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.chdir(tmp_path)
    return CliRunner()


class TestGroup:
    def test_banner_without_subcommand(self, runner):
        result = runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "JenkinsMaster" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_deploy_help(self, runner):
        result = runner.invoke(cli, ["deploy", "--help"])
        assert result.exit_code == 0
        assert "--verbose" in result.output


class TestDeploy:
    @pytest.mark.parametrize("exit_code", [0, 1, 130])
    def test_exit_code_follows_result(self, runner, exit_code):
        with patch("jenkinsmaster.commands.deploy.DeploymentOrchestrator") as orchestrator:
            orchestrator.return_value.run.return_value = exit_code
            result = runner.invoke(cli, ["deploy"])

        assert result.exit_code == exit_code

    def test_verbose_reaches_logger(self, runner, tmp_path):
        with patch("jenkinsmaster.commands.deploy.DeploymentOrchestrator") as orchestrator:
            orchestrator.return_value.run.return_value = 0
            runner.invoke(cli, ["deploy", "--verbose"])

        logger = orchestrator.call_args.kwargs["logger"]
        assert logger.verbose
        assert logger.log_path.is_relative_to(tmp_path / "logs")

    def test_keyboard_interrupt_exits_130(self, runner):
        with patch("jenkinsmaster.commands.deploy.DeploymentOrchestrator") as orchestrator:
            orchestrator.return_value.run.side_effect = KeyboardInterrupt
            result = runner.invoke(cli, ["deploy"])

        assert result.exit_code == 130


class TestMain:
    def test_invalid_settings_exit_1(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("JENKINSMASTER_SSH_TIMEOUT", "soon")
        monkeypatch.setattr(sys, "argv", ["jenkinsmaster", "deploy"])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
