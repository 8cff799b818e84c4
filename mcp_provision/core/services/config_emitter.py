"""
Configuration emitter — ``mcpServers`` documents for desktop applications.

Documents are built as plain dicts and serialized with ``json``, so any
credential value (quotes, backslashes, newlines) survives intact. Each
document is regenerated from scratch and atomically replaces the
previous file; nothing from the old file is merged.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from mcp_provision.core.context import ProvisionContext
from mcp_provision.core.data import CLIENT_APPS, INTEGRATIONS
from mcp_provision.core.models.action import Receipt
from mcp_provision.core.models.credentials import Credentials
from mcp_provision.core.models.integration import ClientApp, Integration
from mcp_provision.core.persistence.config_file import write_json_atomic

logger = logging.getLogger(__name__)


def build_server_entry(
    integration: Integration,
    credentials: Credentials,
    placeholders: dict[str, str],
) -> dict:
    """``{"command", "args", "env"?}`` for one integration."""
    launch = integration.launch
    if launch is None:
        raise ValueError(f"{integration.name} has no launch command")

    values = dict(placeholders)
    install_dir = integration.resolve_dir(Path(placeholders["home"]))
    if install_dir is not None:
        values["install_dir"] = str(install_dir)

    entry: dict = {
        "command": launch.command.format(**values),
        "args": [arg.format(**values) for arg in launch.args],
    }
    if launch.env_keys:
        entry["env"] = credentials.env(launch.env_keys)
    return entry


def build_document(
    client: str,
    credentials: Credentials,
    placeholders: dict[str, str],
    integrations: list[Integration] | None = None,
) -> dict:
    """The full configuration document for one consuming application."""
    integrations = INTEGRATIONS if integrations is None else integrations
    servers = {
        integration.name: build_server_entry(integration, credentials, placeholders)
        for integration in integrations
        if integration.eligible_for(client)
    }
    return {"mcpServers": servers}


def launch_placeholders(ctx: ProvisionContext) -> dict[str, str]:
    """Values for ``{home}``, ``{documents}`` and ``{uv}`` in launch specs."""
    return {
        "home": str(ctx.home),
        "documents": str(ctx.settings.documents_dir),
        "uv": ctx.uv.command_path(),
    }


def active_clients(ctx: ProvisionContext, only: str | None = None) -> list[ClientApp]:
    """Consuming applications whose documents should be emitted."""
    clients = [c for c in CLIENT_APPS if c.is_present(ctx.home)]
    if only:
        clients = [c for c in clients if c.name == only]
    return clients


def render_documents(ctx: ProvisionContext, only: str | None = None) -> dict[str, dict]:
    """Client name → document, without writing anything."""
    placeholders = launch_placeholders(ctx)
    return {
        client.name: build_document(client.name, ctx.credentials, placeholders)
        for client in active_clients(ctx, only)
    }


def emit_configs(ctx: ProvisionContext) -> Receipt:
    """Pipeline step: write every active application's document."""
    step = "configuration"
    documents = render_documents(ctx)

    for client in active_clients(ctx):
        path = client.resolve_config_path(ctx.home)
        logger.info("Creating %s configuration...", client.display_name)
        try:
            write_json_atomic(path, documents[client.name])
        except OSError as e:
            logger.error("Could not write %s: %s", path, e)
            continue
        ctx.configs_written[client.name] = path
        logger.info("%s configuration created at: %s", client.display_name, path)

        if client.print_config:
            _print_document(client, path, documents[client.name])

    missing = [c.name for c in active_clients(ctx) if c.name not in ctx.configs_written]
    metadata = {"paths": {name: str(p) for name, p in ctx.configs_written.items()}}
    if missing:
        return Receipt.failure(step, error=f"not written: {', '.join(missing)}", metadata=metadata)
    return Receipt.success(step, output=f"{len(ctx.configs_written)} documents", metadata=metadata)


def _print_document(client: ClientApp, path: Path, document: dict) -> None:
    """Echo the document to stdout for copy-paste."""
    banner = f"====== {client.display_name} Configuration ({path.name}) ======"
    click.echo()
    click.echo(banner)
    click.echo(json.dumps(document, indent=2, ensure_ascii=False))
    click.echo("=" * len(banner))
    click.echo()
