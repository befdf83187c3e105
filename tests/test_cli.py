"""
Tests for CLI commands — deploy, kinds, history, config check, global options.
"""

import json
import subprocess
import textwrap
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from click.testing import CliRunner

from deployer.main import cli

from tests.factories import make_config_map, make_deployment

CONFIG = textwrap.dedent("""\
    default_account: dev
    accounts:
      - name: dev
        context: kind-dev
        default_namespace: dev-ns
""")


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A directory with deployer.yml and a Deployment manifest."""
    (tmp_path / "deployer.yml").write_text(CONFIG)
    (tmp_path / "web.yml").write_text(yaml.safe_dump(make_deployment()))
    return tmp_path


def _kubectl_echo(cmd, input=None, **kwargs):
    """Fake ``kubectl apply -o json``: echo the submitted object back."""
    return subprocess.CompletedProcess(cmd, 0, stdout=json.dumps(yaml.safe_load(input)), stderr="")


def _invoke(project: Path, *args: str):
    return CliRunner().invoke(cli, ["--config", str(project / "deployer.yml"), *args])


class TestCLIGlobal:

    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Kubernetes manifests" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestDeployCommand:

    @patch("deployer.adapters.kubectl.subprocess.run", side_effect=_kubectl_echo)
    def test_deploy(self, mock_run, project: Path):
        result = _invoke(
            project, "deploy", str(project / "web.yml"),
            "--artifact", "docker/image=registry/web=registry/web:1.4.2",
        )
        assert result.exit_code == 0, result.output
        assert "Deployed Deployment web" in result.output
        assert "dev-ns" in result.output
        assert "registry/web:1.4.2" in result.output

        submitted = yaml.safe_load(mock_run.call_args.kwargs["input"])
        assert submitted["spec"]["template"]["spec"]["containers"][0]["image"] == "registry/web:1.4.2"
        assert (project / ".state" / "audit.ndjson").is_file()
        assert (project / ".state" / "artifacts.json").is_file()

    @patch("deployer.adapters.kubectl.subprocess.run", side_effect=_kubectl_echo)
    def test_deploy_json_versioned(self, _mock_run, project: Path):
        result = _invoke(project, "deploy", str(project / "web.yml"), "--versioned", "--namespace", "qa", "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["status"] == "ok"
        assert data["result"]["manifest_names_by_namespace"] == {"qa": ["Deployment web-v000"]}

    @patch("deployer.adapters.kubectl.subprocess.run", side_effect=_kubectl_echo)
    def test_dry_run_flag_passed(self, mock_run, project: Path):
        result = _invoke(project, "deploy", str(project / "web.yml"), "--dry-run")
        assert result.exit_code == 0, result.output
        assert "Validated" in result.output
        assert "--dry-run=client" in mock_run.call_args.args[0]
        assert not (project / ".state" / "artifacts.json").exists()

    @patch("deployer.adapters.kubectl.subprocess.run")
    def test_kubectl_failure(self, mock_run, project: Path):
        mock_run.return_value = subprocess.CompletedProcess([], 1, stdout="", stderr="error: forbidden")
        result = _invoke(project, "deploy", str(project / "web.yml"))
        assert result.exit_code == 1
        assert "E104" in result.output
        assert "forbidden" in result.output

    def test_unknown_kind(self, project: Path):
        (project / "odd.yml").write_text("kind: Gadget\nmetadata: {name: g}\n")
        result = _invoke(project, "deploy", str(project / "odd.yml"), "--json")
        assert result.exit_code == 1
        assert json.loads(result.output)["error_code"] == "E103"

    def test_bad_artifact_option(self, project: Path):
        result = _invoke(project, "deploy", str(project / "web.yml"), "--artifact", "nonsense")
        assert result.exit_code == 2
        assert "TYPE=NAME=REFERENCE" in result.output

    def test_unknown_source_in_request(self, project: Path):
        (project / "req.yml").write_text("source: helm\n")
        result = _invoke(project, "deploy", str(project / "req.yml"))
        assert result.exit_code == 1
        assert "E101" in result.output

    def test_missing_config_without_dry_run(self, tmp_path: Path):
        (tmp_path / "web.yml").write_text(yaml.safe_dump(make_deployment()))
        result = CliRunner().invoke(
            cli, ["--config", str(tmp_path / "absent.yml"), "deploy", str(tmp_path / "web.yml")],
        )
        assert result.exit_code == 1
        assert "not found" in result.output

    @patch("deployer.adapters.kubectl.subprocess.run", side_effect=_kubectl_echo)
    def test_by_reference_relative_to_request(self, _mock_run, project: Path):
        (project / "manifests").mkdir()
        (project / "manifests" / "cm.yml").write_text(yaml.safe_dump(make_config_map()))
        (project / "req.yml").write_text(textwrap.dedent("""\
            source: by-reference
            manifest_artifact:
              type: local/file
              reference: manifests/cm.yml
        """))
        result = _invoke(project, "deploy", str(project / "req.yml"))
        assert result.exit_code == 0, result.output
        assert "ConfigMap settings-v000" in result.output


class TestKindsCommand:

    def test_kinds(self, project: Path):
        result = _invoke(project, "kinds")
        assert result.exit_code == 0
        assert "Deployment" in result.output
        assert "versioned" in result.output

    def test_kinds_json_with_custom_kind(self, tmp_path: Path):
        (tmp_path / "deployer.yml").write_text(CONFIG + "kinds:\n  Widget: {versioned: true}\n")
        result = _invoke(tmp_path, "kinds", "--json")
        kinds = {k["kind"]: k for k in json.loads(result.output)}
        assert kinds["Widget"]["versioned"] is True
        assert kinds["ConfigMap"]["versioned"] is True


class TestHistoryCommand:

    def test_empty(self, project: Path):
        result = _invoke(project, "history")
        assert result.exit_code == 0
        assert "No deploys" in result.output

    @patch("deployer.adapters.kubectl.subprocess.run", side_effect=_kubectl_echo)
    def test_after_deploys(self, _mock_run, project: Path):
        _invoke(project, "deploy", str(project / "web.yml"))
        (project / "odd.yml").write_text("kind: Gadget\nmetadata: {name: g}\n")
        _invoke(project, "deploy", str(project / "odd.yml"))

        result = _invoke(project, "history", "--json")
        entries = json.loads(result.output)
        assert [e["status"] for e in entries] == ["ok", "failed"]

        result = _invoke(project, "history", "-n", "1")
        assert "Gadget" in result.output
        assert "Deployment web" not in result.output


class TestConfigCheck:

    def test_valid(self, project: Path):
        result = _invoke(project, "config", "check")
        assert result.exit_code == 0
        assert "valid" in result.output.lower()
        assert "dev" in result.output

    def test_invalid_json(self, tmp_path: Path):
        (tmp_path / "deployer.yml").write_text("default_account: qa\naccounts:\n  - name: dev\n")
        result = _invoke(tmp_path, "config", "check", "--json")
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["valid"] is False
        assert data["errors"]

    @patch("deployer.adapters.kubectl.subprocess.run")
    def test_kubectl_flag(self, mock_run, project: Path):
        mock_run.return_value = subprocess.CompletedProcess(
            [], 0, stdout=json.dumps({"clientVersion": {"gitVersion": "v1.30.1"}}), stderr="",
        )
        result = _invoke(project, "config", "check", "--kubectl")
        assert result.exit_code == 0, result.output
        assert "kubectl (dev): v1.30.1" in result.output
        assert mock_run.call_args.args[0][-4:] == ["version", "--client", "-o", "json"]
