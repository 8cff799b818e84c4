"""
Tests for the command runner, the mock runner, and the tool adapters.
"""

import subprocess
from pathlib import Path

from mcp_provision.adapters.languages.node import NpmAdapter, NvmAdapter, nvm_profile_snippet
from mcp_provision.adapters.languages.python import PythonAdapter, UvAdapter
from mcp_provision.adapters.mock import MockCommandRunner
from mcp_provision.adapters.platform.homebrew import HomebrewAdapter, detect_prefix
from mcp_provision.adapters.platform.macos import MacOSAdapter
from mcp_provision.adapters.secrets.onepassword import OnePasswordAdapter
from mcp_provision.adapters.shell.command import CommandResult, CommandRunner
from mcp_provision.adapters.vcs.git import GitAdapter
from mcp_provision.core.services.tool_version import get_tool_version

# ── Command runner ───────────────────────────────────────────────────


class TestCommandRunner:
    def test_captures_output(self, monkeypatch):
        def _run(cmd, **kwargs):
            return subprocess.CompletedProcess(cmd, 3, stdout="out\n", stderr="warn\nlast line\n")

        monkeypatch.setattr(subprocess, "run", _run)
        result = CommandRunner().run(["tool"])

        assert not result.ok
        assert result.output == "out"
        assert result.describe_error() == "exit 3: last line"

    def test_missing_executable(self, tmp_path: Path):
        runner = CommandRunner(env={"PATH": str(tmp_path)})
        result = runner.run(["definitely-not-installed-tool"])
        assert not result.ok
        assert result.error.startswith("Command execution error")

    def test_timeout(self, monkeypatch):
        def _run(cmd, **kwargs):
            raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

        monkeypatch.setattr(subprocess, "run", _run)
        result = CommandRunner(timeout=7).run(["slow"])

        assert not result.ok
        assert result.error == "Command timed out after 7s"

    def test_env_overrides_are_per_command(self, monkeypatch):
        seen = {}

        def _run(cmd, **kwargs):
            seen.update(kwargs["env"])
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

        monkeypatch.setattr(subprocess, "run", _run)
        runner = CommandRunner(env={"PATH": "/usr/bin"})
        runner.run(["x"], env_overrides={"NVM_DIR": "/n"})

        assert seen["NVM_DIR"] == "/n"
        assert "NVM_DIR" not in runner.env

    def test_prepend_path(self):
        runner = CommandRunner(env={"PATH": "/usr/bin"})
        runner.prepend_path("/opt/homebrew/bin")
        runner.prepend_path("/opt/homebrew/bin")
        assert runner.env["PATH"] == "/opt/homebrew/bin:/usr/bin"

    def test_which_uses_own_path(self, tmp_path: Path):
        tool = tmp_path / "mytool"
        tool.write_text("#!/bin/sh\n")
        tool.chmod(0o755)

        runner = CommandRunner(env={"PATH": "/nonexistent"})
        assert runner.which("mytool") is None
        runner.prepend_path(str(tmp_path))
        assert runner.which("mytool") == str(tool)


# ── Mock runner ──────────────────────────────────────────────────────


class TestMockCommandRunner:
    def test_unscripted_succeeds(self):
        mock = MockCommandRunner()
        assert mock.run(["anything"]).ok
        assert mock.call_count == 1

    def test_longest_prefix_wins(self):
        mock = MockCommandRunner()
        mock.set_failure("brew install")
        mock.set_response("brew install uv", stdout="ok")
        assert mock.run(["brew", "install", "uv"]).stdout == "ok"
        assert not mock.run(["brew", "install", "nvm"]).ok

    def test_latest_registration_wins(self):
        mock = MockCommandRunner()
        mock.set_response("nvm ls", stdout="old")
        mock.set_response("nvm ls", stdout="new")
        assert mock.run(["nvm", "ls"]).stdout == "new"

    def test_bash_shim_matching(self):
        mock = MockCommandRunner()
        mock.set_response("nvm ls", stdout="v23.0.0")
        result = mock.run(["bash", "-c", ". nvm.sh && nvm", "nvm", "ls", "--no-colors"])
        assert result.stdout == "v23.0.0"
        assert mock.called("nvm ls --no-colors")

    def test_tools(self):
        mock = MockCommandRunner(tools=["brew"])
        assert mock.which("brew") == "/mock/bin/brew"
        mock.remove_tool("brew")
        assert mock.which("brew") is None

    def test_effect(self, tmp_path: Path):
        mock = MockCommandRunner()
        mock.on_run("git clone", lambda call: Path(call.args[-1]).mkdir())
        mock.run(["git", "clone", "url", str(tmp_path / "repo")])
        assert (tmp_path / "repo").is_dir()


# ── Tool adapters ────────────────────────────────────────────────────


class TestHomebrewAdapter:
    def test_prefix(self):
        assert detect_prefix("arm64") == "/opt/homebrew"
        assert detect_prefix("x86_64") == "/usr/local"

    def test_cask_install(self):
        mock = MockCommandRunner()
        HomebrewAdapter(mock, "/opt/homebrew").install("1password-cli", cask=True)
        assert mock.call_log[0].args == ["brew", "install", "--cask", "1password-cli"]

    def test_shellenv_line(self):
        brew = HomebrewAdapter(MockCommandRunner(), "/usr/local")
        assert brew.shellenv_line == 'eval "$(/usr/local/bin/brew shellenv)"'


class TestNvmAdapter:
    def test_installed_versions_dedupes(self, tmp_path: Path):
        script = tmp_path / ".nvm" / "nvm.sh"
        script.parent.mkdir()
        script.write_text("# nvm\n")
        mock = MockCommandRunner()
        mock.set_response(
            "nvm ls",
            stdout="->     v23.11.0\n       v18.20.4\ndefault -> 23 (-> v23.11.0)\n",
        )

        nvm = NvmAdapter(mock, tmp_path / ".nvm", str(tmp_path / "brew"))

        assert nvm.installed_versions() == ["v23.11.0", "v18.20.4"]
        assert mock.call_log[0].env_overrides["NVM_DIR"] == str(tmp_path / ".nvm")

    def test_empty_script_ignored(self, tmp_path: Path):
        script = tmp_path / ".nvm" / "nvm.sh"
        script.parent.mkdir()
        script.write_text("")
        nvm = NvmAdapter(MockCommandRunner(), tmp_path / ".nvm", str(tmp_path / "brew"))
        assert nvm.locate() != script

    def test_bin_dir(self, tmp_path: Path):
        nvm = NvmAdapter(MockCommandRunner(), tmp_path / ".nvm", "/opt/homebrew")
        assert nvm.bin_dir("v23.1.0") == tmp_path / ".nvm" / "versions" / "node" / "v23.1.0" / "bin"

    def test_profile_snippet(self):
        snippet = nvm_profile_snippet("/opt/homebrew")
        assert snippet.startswith('export NVM_DIR="$HOME/.nvm"')
        assert '"/opt/homebrew/opt/nvm/nvm.sh"' in snippet


class TestNpmAdapter:
    def test_listing(self):
        mock = MockCommandRunner()
        mock.set_response(
            "npm list -g", stdout="/opt/homebrew/lib\n└── @modelcontextprotocol/server-slack@2025.4.25\n"
        )
        listing = NpmAdapter(mock).listing("@modelcontextprotocol/server-slack")
        assert listing == "└── @modelcontextprotocol/server-slack@2025.4.25"

    def test_listing_missing(self):
        mock = MockCommandRunner()
        mock.set_failure("npm list -g")
        assert NpmAdapter(mock).listing("firecrawl-mcp") is None


class TestOnePasswordAdapter:
    def test_vault_exists(self):
        mock = MockCommandRunner()
        mock.set_response("op vault list", stdout="ID  NAME\nabc MCP\n")
        assert OnePasswordAdapter(mock, "MCP").vault_exists()
        assert not OnePasswordAdapter(mock, "Work").vault_exists()

    def test_get_field_failure_is_empty(self):
        mock = MockCommandRunner()
        mock.set_failure("op item get")
        assert OnePasswordAdapter(mock, "MCP").get_field("Slack", "bot_token") == ""


class TestPythonAdapters:
    def test_python_version(self):
        mock = MockCommandRunner(tools=["python3"])
        mock.set_response("python3 -c", stdout="3.12\n")
        assert PythonAdapter(mock).version() == "3.12"

    def test_python_missing(self):
        assert PythonAdapter(MockCommandRunner()).version() is None

    def test_uv_command_path(self):
        assert UvAdapter(MockCommandRunner(tools={"uv": "/opt/homebrew/bin/uv"})).command_path() == (
            "/opt/homebrew/bin/uv"
        )
        assert UvAdapter(MockCommandRunner()).command_path() == "uv"


class TestGitAndMacOS:
    def test_clone_args(self, tmp_path: Path):
        mock = MockCommandRunner()
        GitAdapter(mock).clone("https://example.com/r.git", tmp_path / "r")
        assert mock.call_log[0].args == ["git", "clone", "https://example.com/r.git", str(tmp_path / "r")]

    def test_attach_failure(self):
        mock = MockCommandRunner()
        mock.set_failure("hdiutil attach")
        assert MacOSAdapter(mock).attach("/tmp/x.dmg") is None

    def test_quit_app(self):
        mock = MockCommandRunner()
        MacOSAdapter(mock).quit_app("Claude")
        assert mock.call_log[0].args == ["osascript", "-e", 'tell application "Claude" to quit']


class TestToolVersion:
    def test_python(self):
        mock = MockCommandRunner(tools=["python3"])
        mock.set_response("python3 --version", stdout="Python 3.12.8\n")
        assert get_tool_version(mock, "python3") == "Python 3.12.8"

    def test_stderr_output(self):
        mock = MockCommandRunner(tools=["node"])
        mock.set_response("node --version", stderr="v23.11.0\n")
        assert get_tool_version(mock, "node") == "v23.11.0"

    def test_unknown_or_missing(self):
        mock = MockCommandRunner()
        assert get_tool_version(mock, "cobol") is None
        assert get_tool_version(mock, "npm") is None


class TestCommandResult:
    def test_error_wins(self):
        result = CommandResult(returncode=0, error="boom")
        assert not result.ok
        assert result.describe_error() == "boom"
