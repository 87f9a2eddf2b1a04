"""
Tests for CLI commands — setup, cleanup, status and the standalone scripts.
"""

import json
from pathlib import Path

from click.testing import CliRunner

from vaultdev.main import cli, vault_cleanup, vault_setup


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "local TLS Vault" in result.output
        for command in ("setup", "cleanup", "status"):
            assert command in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_invalid_config(self, tmp_path: Path):
        config = tmp_path / "vaultdev.yml"
        config.write_text("host_port: not-a-port\n")
        result = CliRunner().invoke(cli, ["--config", str(config), "--dir", str(tmp_path), "status"])
        assert result.exit_code == 1
        assert "Invalid settings" in result.output

    def test_missing_config(self, tmp_path: Path):
        result = CliRunner().invoke(
            cli, ["--config", str(tmp_path / "nope.yml"), "--dir", str(tmp_path), "status"]
        )
        assert result.exit_code == 1
        assert "not found" in result.output


class TestSetupCommand:
    def test_setup_yes(self, machine):
        result = CliRunner().invoke(cli, ["--dir", str(machine.workdir), "setup", "--yes"])
        assert result.exit_code == 0, result.output
        assert "export VAULT_ADDR=https://vault.example.com:8200" in result.output
        assert "export VAULT_CACERT=" in result.output
        assert "vault operator init" in result.output
        assert "vault operator unseal" in result.output
        assert (machine.workdir / "docker-compose.yml").is_file()

    def test_setup_confirm_with_enter(self, machine):
        result = CliRunner().invoke(cli, ["--dir", str(machine.workdir), "setup"], input="\n")
        assert result.exit_code == 0, result.output
        assert "Press Enter to continue" in result.output

    def test_setup_cancelled(self, machine):
        result = CliRunner().invoke(cli, ["--dir", str(machine.workdir), "setup"], input="")
        assert result.exit_code == 1
        assert not (machine.workdir / "certs").exists()
        assert machine.runner.calls_starting_with("docker", "compose", "--env-file") == []

    def test_setup_not_privileged(self, machine):
        machine.privileged = False
        result = CliRunner().invoke(cli, ["--dir", str(machine.workdir), "setup", "--yes"])
        assert result.exit_code == 1
        assert "sudo" in result.output
        assert not (machine.workdir / "certs").exists()

    def test_setup_compose_failure(self, machine):
        machine.runner.set_failure(["docker", "compose", "--env-file"], stderr="pull access denied")
        result = CliRunner().invoke(cli, ["--dir", str(machine.workdir), "setup", "--yes"])
        assert result.exit_code == 1
        assert "pull access denied" in result.output

    def test_setup_no_wait(self, machine):
        result = CliRunner().invoke(
            cli, ["--dir", str(machine.workdir), "setup", "--yes", "--no-wait"]
        )
        assert result.exit_code == 0, result.output
        assert machine.runner.calls_starting_with("docker", "inspect") == []

    def test_quiet_hides_progress(self, machine):
        result = CliRunner().invoke(cli, ["-q", "--dir", str(machine.workdir), "setup", "--yes"])
        assert result.exit_code == 0, result.output
        assert "✅ TLS certificate" not in result.output
        assert "Next steps" in result.output


class TestCleanupCommand:
    def test_cleanup_after_setup(self, machine):
        runner = CliRunner()
        runner.invoke(cli, ["--dir", str(machine.workdir), "setup", "--yes"])
        hosts_before = Path(machine.settings.hosts_file).read_text()
        assert "vault.example.com" in hosts_before

        result = runner.invoke(cli, ["--dir", str(machine.workdir), "cleanup", "--yes"])
        assert result.exit_code == 0, result.output
        assert not (machine.workdir / "certs").exists()
        assert not (machine.workdir / "docker-compose.yml").exists()
        assert "vault.example.com" not in Path(machine.settings.hosts_file).read_text()
        # the settings file is not generated and survives
        assert (machine.workdir / "vaultdev.yml").is_file()

    def test_cleanup_warns_and_prompts(self, machine):
        result = CliRunner().invoke(cli, ["--dir", str(machine.workdir), "cleanup"], input="\n")
        assert result.exit_code == 0, result.output
        assert "permanently deletes all Vault data" in result.output

    def test_cleanup_cancelled(self, machine):
        CliRunner().invoke(cli, ["--dir", str(machine.workdir), "setup", "--yes"])
        result = CliRunner().invoke(cli, ["--dir", str(machine.workdir), "cleanup"], input="")
        assert result.exit_code == 1
        assert (machine.workdir / "certs").is_dir()

    def test_cleanup_without_compose_file(self, machine):
        result = CliRunner().invoke(cli, ["--dir", str(machine.workdir), "cleanup", "--yes"])
        assert result.exit_code == 0, result.output
        assert "No docker-compose.yml found" in result.output

    def test_cleanup_not_privileged(self, machine):
        machine.privileged = False
        result = CliRunner().invoke(cli, ["--dir", str(machine.workdir), "cleanup", "--yes"])
        assert result.exit_code == 1


class TestStatusCommand:
    def test_status(self, machine):
        result = CliRunner().invoke(cli, ["--dir", str(machine.workdir), "status"])
        assert result.exit_code == 0, result.output
        assert "not provisioned" in result.output

    def test_status_json_after_setup(self, machine):
        runner = CliRunner()
        runner.invoke(cli, ["--dir", str(machine.workdir), "setup", "--yes"])
        result = runner.invoke(cli, ["--dir", str(machine.workdir), "status", "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["provisioned"] is True
        assert data["hosts_entry"] is True
        assert data["certificate"]["common_name"] == "vault.example.com"


class TestStandaloneScripts:
    def test_vault_setup(self, machine):
        result = CliRunner().invoke(vault_setup, ["--yes", "--dir", str(machine.workdir)])
        assert result.exit_code == 0, result.output
        assert "vault operator init" in result.output

    def test_vault_setup_explicit_config(self, machine, tmp_path: Path):
        config = machine.workdir / "vaultdev.yml"
        other = tmp_path / "elsewhere"
        other.mkdir()
        result = CliRunner().invoke(
            vault_setup, ["--yes", "--no-wait", "--dir", str(other), "--config", str(config)]
        )
        assert result.exit_code == 0, result.output
        assert (other / "certs" / "vault.example.com.crt").is_file()

    def test_vault_cleanup(self, machine):
        CliRunner().invoke(vault_setup, ["--yes", "--dir", str(machine.workdir)])
        result = CliRunner().invoke(vault_cleanup, ["--yes", "--dir", str(machine.workdir)])
        assert result.exit_code == 0, result.output
        assert not (machine.workdir / "vault-data").exists()

    def test_vault_cleanup_cancel(self, machine):
        result = CliRunner().invoke(vault_cleanup, ["--dir", str(machine.workdir)], input="")
        assert result.exit_code == 1
