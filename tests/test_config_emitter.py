"""
Tests for mcpServers document generation and writing.
"""

import json
from pathlib import Path

import pytest

from mcp_provision.core.models.credentials import CredentialSet, Credentials
from mcp_provision.core.services.config_emitter import (
    build_document,
    emit_configs,
    render_documents,
)

CLAUDE_CONFIG = Path("Library") / "Application Support" / "Claude" / "claude_desktop_config.json"


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(
        available=True,
        sets={
            "Firecrawl": CredentialSet(
                item="Firecrawl", values={"FIRECRAWL_API_KEY": "fc-123"}, retrieved=True
            ),
            "Slack": CredentialSet(
                item="Slack",
                values={"SLACK_BOT_TOKEN": 'xoxb-"quoted"\\back', "SLACK_TEAM_ID": "T01"},
                retrieved=True,
            ),
        },
    )


@pytest.fixture
def emit_ctx(ctx, runner, credentials):
    runner.add_tool("uv", "/opt/homebrew/bin/uv")
    ctx.credentials = credentials
    return ctx


class TestBuildDocument:
    def test_claude_servers(self, emit_ctx):
        doc = render_documents(emit_ctx)["claude"]
        assert set(doc["mcpServers"]) == {"firecrawl", "filesystem", "slack", "zendesk", "gmail"}

    def test_cursor_only_when_present(self, emit_ctx, home: Path):
        assert set(render_documents(emit_ctx)) == {"claude"}

        (home / ".cursor").mkdir()
        docs = render_documents(emit_ctx)

        assert set(docs) == {"claude", "cursor"}
        assert set(docs["cursor"]["mcpServers"]) == {"firecrawl", "filesystem", "slack", "zendesk"}

    def test_package_server_entries(self, emit_ctx, settings):
        servers = render_documents(emit_ctx)["claude"]["mcpServers"]
        assert servers["firecrawl"] == {
            "command": "npx",
            "args": ["-y", "firecrawl-mcp"],
            "env": {"FIRECRAWL_API_KEY": "fc-123"},
        }
        assert servers["filesystem"]["args"][-1] == str(settings.documents_dir)
        assert "env" not in servers["filesystem"]

    def test_repository_entries_use_detected_uv(self, emit_ctx, home: Path):
        servers = render_documents(emit_ctx)["claude"]["mcpServers"]
        assert servers["zendesk"] == {
            "command": "/opt/homebrew/bin/uv",
            "args": ["run", "--directory", str(home / "zendesk-mcp-server"), "zendesk"],
        }
        assert f"{home}/mcp-gsuite/.gauth.json" in servers["gmail"]["args"]

    def test_uv_fallback_name(self, ctx):
        doc = render_documents(ctx)["claude"]
        assert doc["mcpServers"]["zendesk"]["command"] == "uv"

    def test_empty_credentials(self):
        doc = build_document(
            "claude", Credentials(), {"home": "/h", "documents": "/h/Documents", "uv": "uv"}
        )
        assert doc["mcpServers"]["slack"]["env"] == {"SLACK_BOT_TOKEN": "", "SLACK_TEAM_ID": ""}
        assert "smithery" not in doc["mcpServers"]


class TestEmitConfigs:
    def test_writes_valid_json_round_trip(self, emit_ctx, home: Path, credentials):
        receipt = emit_configs(emit_ctx)

        assert receipt.ok
        path = home / CLAUDE_CONFIG
        assert emit_ctx.configs_written["claude"] == path
        doc = json.loads(path.read_text())
        assert doc["mcpServers"]["slack"]["env"]["SLACK_BOT_TOKEN"] == 'xoxb-"quoted"\\back'

    def test_replaces_previous_document(self, emit_ctx, home: Path):
        path = home / CLAUDE_CONFIG
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"mcpServers": {"old": {}}, "theme": "dark"}))

        emit_configs(emit_ctx)

        doc = json.loads(path.read_text())
        assert "old" not in doc["mcpServers"]
        assert "theme" not in doc

    def test_prints_claude_document(self, emit_ctx, capsys):
        emit_configs(emit_ctx)
        out = capsys.readouterr().out
        assert "Claude Desktop Configuration" in out
        assert '"mcpServers"' in out

    def test_cursor_written_when_present(self, emit_ctx, home: Path):
        (home / ".cursor").mkdir()
        emit_configs(emit_ctx)
        doc = json.loads((home / ".cursor" / "mcp.json").read_text())
        assert "gmail" not in doc["mcpServers"]
