"""
Tests for CLI commands — run, render, summary, and global options.
"""

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from mcp_provision.adapters.mock import MockCommandRunner
from mcp_provision.adapters.platform import http
from mcp_provision.main import cli


@pytest.fixture
def config_file(tmp_path: Path, home: Path) -> Path:
    content = textwrap.dedent(f"""\
        home: {home}
        applications_dir: {tmp_path / "Applications"}
        update_check_delay: 0
        log_file: {tmp_path / "logs" / "install.log"}
    """)
    path = tmp_path / "provision.yml"
    path.write_text(content)
    return path


@pytest.fixture
def offline(monkeypatch):
    def _offline(url, timeout=30):
        raise OSError("offline")

    monkeypatch.setattr(http, "fetch_text", _offline)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("MCP_PROVISION_CONFIG", "MCP_PROVISION_LOG_LEVEL", "MCP_PROVISION_LOG_FILE"):
        monkeypatch.delenv(var, raising=False)


def _invoke(args, mock: MockCommandRunner | None = None):
    obj = {"runner": mock or MockCommandRunner(), "brew_prefix": "/opt/homebrew"}
    return CliRunner().invoke(cli, args, obj=obj)


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Provision a macOS machine" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_missing_config(self, tmp_path: Path):
        result = _invoke(["--config", str(tmp_path / "nope.yml"), "summary"])
        assert result.exit_code == 1
        assert "Settings file not found" in result.output

    def test_invalid_config(self, tmp_path: Path):
        bad = tmp_path / "provision.yml"
        bad.write_text("- a\n- b\n")
        result = _invoke(["--config", str(bad), "summary"])
        assert result.exit_code == 1
        assert "Expected a YAML mapping" in result.output


class TestRunCommand:
    def test_fatal_exits_1(self, config_file: Path, offline):
        result = _invoke(["--config", str(config_file), "run"])
        assert result.exit_code == 1
        assert "INSTALLATION SUMMARY" in result.output
        assert "homebrew" in result.output

    def test_no_command_runs_everything(self, config_file: Path, offline):
        mock = MockCommandRunner()
        result = _invoke(["--config", str(config_file)], mock)
        assert result.exit_code == 1
        assert mock.called("brew") is False
        assert "Installing Homebrew" in result.output

    def test_log_file_written(self, config_file: Path, tmp_path: Path, offline):
        _invoke(["--config", str(config_file), "run"])
        log = (tmp_path / "logs" / "install.log").read_text()
        assert ": Starting MCP servers installation script" in log

    def test_log_file_env_override(self, config_file: Path, tmp_path: Path, offline, monkeypatch):
        override = tmp_path / "override.log"
        monkeypatch.setenv("MCP_PROVISION_LOG_FILE", str(override))
        _invoke(["--config", str(config_file), "run"])
        assert "Installing Homebrew" in override.read_text()


class TestRenderCommand:
    def test_prints_valid_json(self, config_file: Path):
        result = _invoke(["--config", str(config_file), "render"])
        assert result.exit_code == 0, result.output
        docs = json.loads(result.output)
        assert set(docs) == {"claude"}
        assert "firecrawl" in docs["claude"]["mcpServers"]

    @pytest.mark.parametrize("flag", ["-v", "--debug"])
    def test_logging_flags_keep_stdout_json(self, config_file: Path, flag: str):
        result = _invoke([flag, "--config", str(config_file), "render"])
        assert result.exit_code == 0, result.output
        docs = json.loads(result.stdout)
        assert "mcpServers" in docs["claude"]

    def test_single_client(self, config_file: Path):
        result = _invoke(["--config", str(config_file), "render", "--client", "claude"])
        assert result.exit_code == 0
        assert "mcpServers" in json.loads(result.output)

    def test_absent_client(self, config_file: Path):
        result = _invoke(["--config", str(config_file), "render", "--client", "cursor"])
        assert result.exit_code == 1

    def test_unknown_client(self, config_file: Path):
        result = _invoke(["--config", str(config_file), "render", "--client", "vscode"])
        assert result.exit_code == 2
        assert "Unknown client" in result.output


class TestSummaryCommand:
    def test_text(self, config_file: Path):
        result = _invoke(["--config", str(config_file), "summary"])
        assert result.exit_code == 0
        assert "Installation summary" in result.output
        assert "Claude Desktop: Not installed" in result.output

    def test_json(self, config_file: Path):
        result = _invoke(["--config", str(config_file), "summary", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        labels = [row["label"] for row in data["rows"]]
        assert "Homebrew" in labels
