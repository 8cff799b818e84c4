"""
mcp-provision — CLI entrypoint.

Usage:
    mcp-provision                  # full provisioning run
    mcp-provision run
    mcp-provision render --client cursor
    mcp-provision summary
    python -m mcp_provision --help
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from mcp_provision import __version__
from mcp_provision.core.errors import ConfigError
from mcp_provision.core.observability.logging_config import setup_logging

LOG_LEVEL_ENV_VAR = "MCP_PROVISION_LOG_LEVEL"
LOG_FILE_ENV_VAR = "MCP_PROVISION_LOG_FILE"


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="mcp-provision")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Only show errors on the console.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to provision.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Provision a macOS machine with desktop AI integration servers.

    Without a command, runs the full installation.
    """
    from mcp_provision.core.config.loader import load_settings

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    elif ctx.invoked_subcommand == "render":
        level = os.environ.get(LOG_LEVEL_ENV_VAR, "ERROR")
    else:
        level = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO")

    # render's stdout carries the JSON document
    stream = sys.stderr if ctx.invoked_subcommand == "render" else None

    try:
        settings = load_settings(Path(config_path) if config_path else None)
    except ConfigError as e:
        setup_logging(level=level, stream=stream)
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)
    ctx.obj["settings"] = settings

    setup_logging(
        level=level,
        log_file=os.environ.get(LOG_FILE_ENV_VAR) or settings.log_file,
        verbose=verbose,
        quiet_third_party=not debug,
        stream=stream,
    )

    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Also print the run report as JSON.")
@click.pass_context
def run(ctx: click.Context, as_json: bool = False) -> None:
    """Install everything and write the configuration documents."""
    from mcp_provision.core.use_cases.provision import build_context, run_provision

    settings = ctx.obj["settings"]
    context = build_context(settings, ctx.obj.get("runner"), ctx.obj.get("brew_prefix"))
    result = run_provision(settings, context=context)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))

    if result.fatal_step:
        click.secho(f"❌ Stopped at {result.fatal_step}: {result.error}", fg="red", err=True)
        sys.exit(result.exit_code)


@cli.command()
@click.option(
    "--client",
    default=None,
    help="Only this application (claude, cursor). Default: every present one.",
)
@click.pass_context
def render(ctx: click.Context, client: str | None) -> None:
    """Print configuration documents without installing or writing."""
    from mcp_provision.core.use_cases.provision import build_context, render_configs

    settings = ctx.obj["settings"]
    context = build_context(settings, ctx.obj.get("runner"), ctx.obj.get("brew_prefix"))
    try:
        documents = render_configs(settings, client, context=context)
    except ValueError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(2)

    if client:
        if client not in documents:
            click.secho(f"❌ {client} is not installed on this machine", fg="red", err=True)
            sys.exit(1)
        click.echo(json.dumps(documents[client], indent=2, ensure_ascii=False))
        return
    click.echo(json.dumps(documents, indent=2, ensure_ascii=False))


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def summary(ctx: click.Context, as_json: bool) -> None:
    """Show what is installed, without changing anything."""
    from mcp_provision.core.use_cases.provision import build_context, get_summary

    settings = ctx.obj["settings"]
    context = build_context(settings, ctx.obj.get("runner"), ctx.obj.get("brew_prefix"))
    result = get_summary(settings, context=context)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.secho("\n📋 Installation summary", fg="cyan", bold=True)
    for label, value in result.rows:
        click.echo(f"   {label}: {value}")
    click.echo()


def main() -> None:
    """Entry point for the console script."""
    cli(obj={})


if __name__ == "__main__":
    main()
