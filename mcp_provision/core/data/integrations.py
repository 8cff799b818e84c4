"""
Static catalog: integrations, vault items, and consuming applications.

Fixed at build time. Adding a server means adding a descriptor here;
nothing registers dynamically.
"""

from __future__ import annotations

from mcp_provision.core.models.credentials import CredentialSpec
from mcp_provision.core.models.integration import (
    ClientApp,
    InstallMethod,
    Integration,
    LaunchSpec,
)

CLAUDE = "claude"
CURSOR = "cursor"

# ── Consuming applications ──────────────────────────────────────

CLIENT_APPS: list[ClientApp] = [
    ClientApp(
        name=CLAUDE,
        display_name="Claude Desktop",
        config_path="Library/Application Support/Claude/claude_desktop_config.json",
        print_config=True,
    ),
    ClientApp(
        name=CURSOR,
        display_name="Cursor",
        config_path=".cursor/mcp.json",
        requires_dir=".cursor",
    ),
]

# ── Vault items ─────────────────────────────────────────────────

CREDENTIAL_SPECS: list[CredentialSpec] = [
    CredentialSpec(
        item="Firecrawl",
        fields={"FIRECRAWL_API_KEY": "api_key"},
        required=["FIRECRAWL_API_KEY"],
    ),
    CredentialSpec(
        item="Zendesk",
        fields={
            "ZENDESK_EMAIL": "username",
            "ZENDESK_API_KEY": "api_token",
            "ZENDESK_SUBDOMAIN": "subdomain",
        },
        required=["ZENDESK_API_KEY"],
        on_failure={
            "ZENDESK_EMAIL": "abc",
            "ZENDESK_API_KEY": "def",
            "ZENDESK_SUBDOMAIN": "wealthsimple.zendesk.com",
        },
        when_disabled={"ZENDESK_API_KEY": "def"},
    ),
    CredentialSpec(
        item="Slack",
        fields={"SLACK_BOT_TOKEN": "bot_token", "SLACK_TEAM_ID": "team_id"},
        required=["SLACK_BOT_TOKEN"],
    ),
    CredentialSpec(
        item="Gmail",
        fields={"GMAIL_CLIENT_ID": "client_id", "GMAIL_CLIENT_SECRET": "client_secret"},
        required=["GMAIL_CLIENT_ID", "GMAIL_CLIENT_SECRET"],
    ),
]

# ── Integrations ────────────────────────────────────────────────

_NPX = "npx"

INTEGRATIONS: list[Integration] = [
    Integration(
        name="smithery",
        display_name="@smithery/cli",
        method=InstallMethod.PACKAGE,
        package="@smithery/cli",
    ),
    Integration(
        name="firecrawl",
        display_name="Firecrawl MCP Server",
        method=InstallMethod.PACKAGE,
        package="firecrawl-mcp",
        launch=LaunchSpec(
            command=_NPX,
            args=["-y", "firecrawl-mcp"],
            env_keys=["FIRECRAWL_API_KEY"],
        ),
        clients=[CLAUDE, CURSOR],
    ),
    Integration(
        name="filesystem",
        display_name="Filesystem MCP Server",
        method=InstallMethod.PACKAGE,
        package="@modelcontextprotocol/server-filesystem",
        launch=LaunchSpec(
            command=_NPX,
            args=["-y", "@modelcontextprotocol/server-filesystem", "{documents}"],
        ),
        clients=[CLAUDE, CURSOR],
    ),
    Integration(
        name="slack",
        display_name="Slack MCP Server",
        method=InstallMethod.PACKAGE,
        package="@modelcontextprotocol/server-slack",
        launch=LaunchSpec(
            command=_NPX,
            args=["-y", "@modelcontextprotocol/server-slack"],
            env_keys=["SLACK_BOT_TOKEN", "SLACK_TEAM_ID"],
        ),
        clients=[CLAUDE, CURSOR],
    ),
    Integration(
        name="zendesk",
        display_name="Zendesk MCP Server",
        method=InstallMethod.REPOSITORY,
        repo_url="https://github.com/reminia/zendesk-mcp-server.git",
        install_dir="{home}/zendesk-mcp-server",
        env_file=".env",
        env_keys=["ZENDESK_EMAIL", "ZENDESK_API_KEY", "ZENDESK_SUBDOMAIN"],
        launch=LaunchSpec(
            command="{uv}",
            args=["run", "--directory", "{install_dir}", "zendesk"],
        ),
        clients=[CLAUDE, CURSOR],
    ),
    Integration(
        name="gmail",
        display_name="Gmail MCP Server",
        method=InstallMethod.REPOSITORY,
        repo_url="https://github.com/MarkusPfundstein/mcp-gsuite.git",
        install_dir="{home}/mcp-gsuite",
        touch_files=[".gauth.json", ".accounts.json"],
        launch=LaunchSpec(
            command="{uv}",
            args=[
                "run",
                "--directory",
                "{install_dir}",
                "mcp-gsuite",
                "--gauth-file",
                "{install_dir}/.gauth.json",
                "--accounts-file",
                "{install_dir}/.accounts.json",
                "--credentials-file",
                "{install_dir}",
            ],
        ),
        clients=[CLAUDE],
    ),
]

# Google OAuth "installed application" client document for mcp-gsuite.
GMAIL_OAUTH_REDIRECT_URIS = ["http://localhost:4000"]
GMAIL_OAUTH_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
GMAIL_OAUTH_TOKEN_URI = "https://oauth2.googleapis.com/token"


def get_integration(name: str) -> Integration | None:
    """Look up an integration by name."""
    for integration in INTEGRATIONS:
        if integration.name == name:
            return integration
    return None


def get_client(name: str) -> ClientApp | None:
    """Look up a consuming application by name."""
    for client in CLIENT_APPS:
        if client.name == name:
            return client
    return None
