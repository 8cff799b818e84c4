"""
Provision use case — the full run, from settings to summary.

This is the top-level orchestrator: it builds the context, lays out
the steps in their fixed order, drives them, and always finishes with
the installation summary, even after a fatal step.

Step order:
    bootstrap → homebrew → python → uv → claude-desktop → credentials
    → nvm → node → one step per integration → configuration
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial

from mcp_provision.adapters.shell.command import CommandRunner
from mcp_provision.core.context import ProvisionContext
from mcp_provision.core.data import INTEGRATIONS, get_client
from mcp_provision.core.engine.executor import (
    ExecutionReport,
    Step,
    execute_steps,
    generate_operation_id,
)
from mcp_provision.core.errors import FatalStepError
from mcp_provision.core.models.integration import InstallMethod, Integration
from mcp_provision.core.models.settings import ProvisionSettings
from mcp_provision.core.services.config_emitter import emit_configs, render_documents
from mcp_provision.core.services.credentials import resolve_credentials
from mcp_provision.core.services.desktop_app import STEP as DESKTOP_STEP
from mcp_provision.core.services.desktop_app import install_claude_desktop
from mcp_provision.core.services.integrations import install_integration
from mcp_provision.core.services.summary import Summary, collect_summary, log_summary
from mcp_provision.core.services.toolchain import (
    bootstrap_environment,
    ensure_homebrew,
    ensure_node,
    ensure_nvm,
    ensure_python,
    ensure_uv,
)

logger = logging.getLogger(__name__)


@dataclass
class ProvisionResult:
    """Result of a provisioning run."""

    report: ExecutionReport | None = None
    summary: Summary | None = None
    fatal_step: str | None = None
    error: str | None = None

    @property
    def exit_code(self) -> int:
        return 1 if self.fatal_step or self.error else 0

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
        if self.fatal_step:
            result["fatal_step"] = self.fatal_step
        if self.report:
            result["report"] = self.report.to_dict()
        if self.summary:
            result["summary"] = self.summary.to_dict()
        return result


def _integration_step_name(integration: Integration) -> str:
    if integration.method == InstallMethod.PACKAGE:
        return f"package:{integration.package}"
    return f"repository:{integration.display_name}"


def build_steps() -> list[Step[ProvisionContext]]:
    """The provisioning plan, in execution order."""
    steps: list[Step[ProvisionContext]] = [
        Step("bootstrap", bootstrap_environment, "Homebrew prefix on PATH"),
        Step("homebrew", ensure_homebrew, "Install or update Homebrew"),
        Step("python", ensure_python, "Python at the minimum version"),
        Step("uv", ensure_uv, "uv package installer"),
        Step(DESKTOP_STEP, install_claude_desktop, "Claude Desktop application"),
        Step("credentials", resolve_credentials, "Credentials from 1Password"),
        Step("nvm", ensure_nvm, "Node version manager"),
        Step("node", ensure_node, "Node.js at the minimum major version"),
    ]
    for integration in INTEGRATIONS:
        steps.append(
            Step(
                _integration_step_name(integration),
                partial(install_integration, integration=integration),
                integration.display_name,
            )
        )
    steps.append(Step("configuration", emit_configs, "Configuration documents"))
    return steps


def build_context(
    settings: ProvisionSettings,
    runner: CommandRunner | None = None,
    brew_prefix: str | None = None,
) -> ProvisionContext:
    runner = runner or CommandRunner(timeout=settings.command_timeout)
    if brew_prefix:
        return ProvisionContext(settings=settings, runner=runner, brew_prefix=brew_prefix)
    return ProvisionContext(settings=settings, runner=runner)


def run_provision(
    settings: ProvisionSettings,
    runner: CommandRunner | None = None,
    *,
    context: ProvisionContext | None = None,
    steps: list[Step[ProvisionContext]] | None = None,
) -> ProvisionResult:
    """Run every provisioning step, then log the installation summary.

    Args:
        settings: Validated settings for the run.
        runner: Command runner (a MockCommandRunner in tests).
        context: Pre-built context; takes precedence over ``runner``.
        steps: Override the plan (default: ``build_steps()``).

    Returns:
        ProvisionResult; ``fatal_step`` is set when the run stopped early.
    """
    ctx = context or build_context(settings, runner)
    result = ProvisionResult()
    report = ExecutionReport(operation_id=generate_operation_id())
    result.report = report

    logger.info("Starting MCP servers installation script")
    try:
        execute_steps(steps if steps is not None else build_steps(), ctx, report)
    except FatalStepError as e:
        logger.error("Fatal: %s", e)
        result.fatal_step = e.step
        result.error = str(e)

    result.summary = collect_summary(ctx, report)
    log_summary(result.summary)
    return result


def render_configs(
    settings: ProvisionSettings,
    client: str | None = None,
    runner: CommandRunner | None = None,
    *,
    context: ProvisionContext | None = None,
) -> dict[str, dict]:
    """Resolve credentials and build documents without writing them.

    Raises:
        ValueError: If ``client`` names an unknown application.
    """
    if client and get_client(client) is None:
        raise ValueError(f"Unknown client: {client}")

    ctx = context or build_context(settings, runner)
    resolve_credentials(ctx, install_cli=False)
    return render_documents(ctx, only=client)


def get_summary(
    settings: ProvisionSettings,
    runner: CommandRunner | None = None,
    *,
    context: ProvisionContext | None = None,
) -> Summary:
    """Installation summary for the machine as it is now."""
    ctx = context or build_context(settings, runner)
    ctx.runner.prepend_path(ctx.brew.bin_dir)
    return collect_summary(ctx)
