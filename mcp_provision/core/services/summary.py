"""
Installation summary — what is and isn't on the machine after a run.

Read-only: every line is re-derived from the machine (PATH lookups,
version probes, file existence), plus the credential state and step
counts of the run when there was one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from mcp_provision.core.context import ProvisionContext
from mcp_provision.core.data import CLIENT_APPS, INTEGRATIONS
from mcp_provision.core.engine.executor import ExecutionReport
from mcp_provision.core.models.integration import InstallMethod
from mcp_provision.core.services.tool_version import get_tool_version

logger = logging.getLogger(__name__)

_RULE = "=" * 25


@dataclass
class Summary:
    """Ordered (label, value) rows plus closing notes."""

    rows: list[tuple[str, str]] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    def add(self, label: str, value: str) -> None:
        self.rows.append((label, value))

    def to_dict(self) -> dict:
        return {"rows": [{"label": k, "value": v} for k, v in self.rows], "notes": self.notes}


def _found(value: str | None, missing: str = "Not found") -> str:
    return value if value else missing


def collect_summary(ctx: ProvisionContext, report: ExecutionReport | None = None) -> Summary:
    """Build the summary for the current machine state."""
    runner = ctx.runner
    home = ctx.home
    summary = Summary()

    summary.add("Homebrew", _found(runner.which("brew")))
    node_version = ctx.node_version or get_tool_version(runner, "node")
    summary.add("Node.js", f"{_found(node_version, 'Not installed')} ({_found(runner.which('node'))})")
    summary.add(
        "npm",
        f"{_found(get_tool_version(runner, 'npm'), 'Not installed')} ({_found(runner.which('npm'))})",
    )
    summary.add("NVM", f"Installed at {ctx.nvm.nvm_dir}" if ctx.nvm.is_available() else "Not installed")
    summary.add(
        "Python",
        f"{_found(get_tool_version(runner, 'python3'), 'Not installed')} ({_found(runner.which('python3'))})",
    )
    summary.add(
        "uv",
        f"{_found(get_tool_version(runner, 'uv'), 'Not installed')} ({_found(runner.which('uv'))})",
    )
    summary.add("1Password CLI", _found(runner.which("op"), "Not installed"))

    app_path = ctx.settings.claude_app_path
    summary.add(
        "Claude Desktop",
        f"Installed at {app_path}" if app_path.is_dir() else "Not installed",
    )

    npm_available = runner.which("npm") is not None
    for integration in INTEGRATIONS:
        if integration.method == InstallMethod.PACKAGE:
            listing = ctx.npm.listing(integration.package) if npm_available else None
            summary.add(integration.display_name, _found(listing))
            continue

        install_dir = integration.resolve_dir(home)
        summary.add(
            integration.display_name,
            f"Installed at {install_dir}" if install_dir and install_dir.is_dir() else "Not found",
        )
        if install_dir and integration.env_file:
            env_file = install_dir / integration.env_file
            summary.add(
                f"{integration.display_name} {integration.env_file} file",
                f"Created at {env_file}" if env_file.is_file() else "Not created",
            )
        if install_dir and integration.touch_files:
            first = install_dir / integration.touch_files[0]
            summary.add(
                f"{integration.display_name} auth files",
                f"Created at {first}" if first.is_file() else "Not created",
            )

    for client in CLIENT_APPS:
        path = client.resolve_config_path(home)
        if client.name in ctx.configs_written or path.is_file():
            summary.add(f"{client.display_name} config", str(path))

    creds = ctx.credentials
    if report is not None:
        summary.add("Credentials retrieved from 1Password", "Yes" if creds.available else "No")
        summary.add(
            "Steps",
            f"{report.succeeded} ok, {report.failed} failed, {report.skipped} skipped",
        )

    # ── Follow-up notes ─────────────────────────────────────────
    env_files = [
        str(integration.resolve_dir(home) / integration.env_file)
        for integration in INTEGRATIONS
        if integration.env_file and integration.resolve_dir(home)
    ]
    if report is not None:
        summary.notes.extend(_credential_notes(creds.available, env_files))

    if app_path.is_dir():
        summary.notes.append(
            "Claude Desktop is installed. You can start it from the Applications folder."
        )
        summary.notes.append("After starting Claude Desktop, the MCP servers will be available.")
    else:
        summary.notes.append(
            "Warning: Claude Desktop could not be installed or found. The MCP servers have "
            "been installed, but you'll need to manually install Claude Desktop from "
            f"{ctx.settings.claude_download_url}"
        )

    return summary


def _credential_notes(available: bool, env_files: list[str]) -> list[str]:
    if not available:
        notes = [
            "NOTE: 1Password CLI was not available or properly set up. You will need to "
            "manually update the Claude Desktop configuration file with your API tokens "
            "and credentials."
        ]
        notes += [
            f"You should also update the .env file at {path} with your credentials."
            for path in env_files
        ]
        return notes

    notes = [
        "API keys and credentials were retrieved from 1Password and have been added "
        "to the Claude Desktop configuration."
    ]
    notes += [f"Credentials have been added to {path}" for path in env_files]
    return notes


def log_summary(summary: Summary) -> None:
    logger.info("%s INSTALLATION SUMMARY %s", _RULE, _RULE)
    for label, value in summary.rows:
        logger.info("%s: %s", label, value)
    logger.info("=" * (len(_RULE) * 2 + 22))
    logger.info("Installation complete!")
    for note in summary.notes:
        logger.info(note)
