"""Tests for Ansible artifact rendering and execution."""

import configparser
import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml

from jenkinsmaster.ansible_runner import AnsibleDeployer, AnsibleRunner
from jenkinsmaster.constants import DEFAULT_PLUGINS
from jenkinsmaster.exceptions import ConfigApplyError
from jenkinsmaster.models import ConnectionParams, DeploymentConfig, DeploymentPayload

ROLE = "https://example.com/ansible-role-jenkinsmaster.git"


@pytest.fixture
def payload() -> DeploymentPayload:
    return DeploymentPayload(
        config=DeploymentConfig(
            admin_user="admin",
            admin_password="Str0ng!Pass",
            http_port=8080,
            docker_image="jenkins/jenkins:lts",
            container_name="jenkinsmaster",
            plugins=DEFAULT_PLUGINS,
            job_dsl_repo="https://example.com/dsl.git",
            shared_library_repo="https://example.com/lib.git",
        ),
        connection=ConnectionParams(
            host="198.51.100.5", user="root", key_path="/keys/id_rsa", port=2222
        ),
    )


class TestRenderArtifacts:
    def test_renders_every_artifact(self, logger, payload, tmp_path):
        written = AnsibleDeployer(logger, role_source=ROLE).render_artifacts(payload, tmp_path)

        assert set(written) == {"inventory.ini", "ansible.cfg", "requirements.yml", "playbook.yml"}
        assert all(path.parent == tmp_path for path in written.values())

    def test_inventory(self, logger, payload, tmp_path):
        AnsibleDeployer(logger, role_source=ROLE).render_artifacts(payload, tmp_path)
        inventory = (tmp_path / "inventory.ini").read_text()

        assert "[jenkins]" in inventory
        assert "[jenkins:vars]" in inventory
        assert "ansible_host=198.51.100.5" in inventory
        assert "ansible_port=2222" in inventory
        assert "ansible_user=root" in inventory
        assert "ansible_ssh_private_key_file=/keys/id_rsa" in inventory

    def test_ansible_cfg(self, logger, payload, tmp_path):
        AnsibleDeployer(logger, role_source=ROLE).render_artifacts(payload, tmp_path)
        parser = configparser.ConfigParser()
        parser.read(tmp_path / "ansible.cfg")

        assert parser["defaults"]["inventory"] == "inventory.ini"
        assert parser["defaults"]["forks"] == "10"
        assert parser["defaults"]["host_key_checking"] == "False"

    def test_requirements_and_playbook(self, logger, payload, tmp_path):
        AnsibleDeployer(logger, role_source=ROLE).render_artifacts(payload, tmp_path)
        requirements = yaml.safe_load((tmp_path / "requirements.yml").read_text())
        playbook = yaml.safe_load((tmp_path / "playbook.yml").read_text())

        assert requirements["roles"][0]["src"] == ROLE
        assert playbook[0]["hosts"] == "jenkins"
        assert playbook[0]["roles"][0]["role"] == "jenkinsmaster"

    def test_password_not_rendered(self, logger, payload, tmp_path):
        AnsibleDeployer(logger, role_source=ROLE).render_artifacts(payload, tmp_path)
        for path in tmp_path.iterdir():
            assert "Str0ng!Pass" not in path.read_text()

    def test_missing_template(self, logger, payload, tmp_path):
        deployer = AnsibleDeployer(logger, templates_dir=tmp_path / "nowhere")
        with pytest.raises(ConfigApplyError, match="Failed to render"):
            deployer.render_artifacts(payload, tmp_path)

    def test_invalid_yaml(self, logger, payload, tmp_path):
        templates = tmp_path / "templates"
        templates.mkdir()
        source = Path(__file__).parent.parent / "jenkinsmaster" / "templates" / "ansible"
        for template in source.iterdir():
            (templates / template.name).write_text(template.read_text())
        (templates / "playbook.yml.j2").write_text("- hosts: [unclosed\n")

        out = tmp_path / "out"
        out.mkdir()
        with pytest.raises(ConfigApplyError, match="not valid YAML"):
            AnsibleDeployer(logger, templates_dir=templates).render_artifacts(payload, out)


class TestDeploy:
    def test_galaxy_then_playbook(self, logger, payload):
        runner = MagicMock()
        runner.run.return_value = 0
        seen = {}

        def record(args, cwd, description, display_command=None):
            seen.setdefault("files", sorted(p.name for p in cwd.iterdir()))
            seen.setdefault("cwd", cwd)
            return 0

        runner.run.side_effect = record
        AnsibleDeployer(logger, runner=runner, role_source=ROLE).deploy(payload)

        galaxy, playbook = runner.run.call_args_list
        assert galaxy.args[0] == ["ansible-galaxy", "install", "-r", "requirements.yml", "--force"]
        assert playbook.args[0][:3] == ["ansible-playbook", "playbook.yml", "-e"]
        assert json.loads(playbook.args[0][3]) == payload.to_extra_vars()
        assert "Str0ng!Pass" not in playbook.kwargs["display_command"]

        assert seen["files"] == ["ansible.cfg", "inventory.ini", "playbook.yml", "requirements.yml"]
        assert not seen["cwd"].exists()

    def test_galaxy_failure(self, logger, payload):
        runner = MagicMock()
        runner.run.return_value = 1

        with pytest.raises(ConfigApplyError, match="Galaxy"):
            AnsibleDeployer(logger, runner=runner).deploy(payload)

        assert runner.run.call_count == 1

    def test_playbook_failure(self, logger, payload):
        runner = MagicMock()
        runner.run.side_effect = [0, 2]

        with pytest.raises(ConfigApplyError) as exc_info:
            AnsibleDeployer(logger, runner=runner).deploy(payload)

        assert "exited with code 2" in exc_info.value.context


class TestAnsibleRunner:
    def test_environment_points_at_working_dir(self, logger, tmp_path):
        env = AnsibleRunner(logger)._build_environment(tmp_path)

        assert env["ANSIBLE_CONFIG"] == str(tmp_path / "ansible.cfg")
        assert env["ANSIBLE_ROLES_PATH"] == str(tmp_path / "roles")
        assert env["ANSIBLE_HOST_KEY_CHECKING"] == "False"
        assert env["ANSIBLE_LOG_PATH"].endswith("_ansible.log")

    def test_run_passes_cwd(self, logger, tmp_path):
        with patch(
            "jenkinsmaster.ansible_runner.run_with_progress", return_value=(0, "", "")
        ) as run:
            assert AnsibleRunner(logger).run(["ansible-playbook", "p.yml"], tmp_path, "Deploy") == 0

        assert run.call_args.kwargs["cwd"] == tmp_path

    def test_missing_binary(self, logger, tmp_path):
        with patch(
            "jenkinsmaster.ansible_runner.run_with_progress",
            side_effect=FileNotFoundError("ansible-playbook"),
        ):
            with pytest.raises(ConfigApplyError, match="ansible-playbook"):
                AnsibleRunner(logger).run(["ansible-playbook", "p.yml"], tmp_path, "Deploy")
