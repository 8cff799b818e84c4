"""
Toolchain ensure-steps — Homebrew, Python, uv, NVM and Node.js.

Each step compares the machine against the desired state and only
acts on the difference: a tool that is present at the minimum version
gets no installer call at all. Installer failures are warnings, except
for Homebrew, NVM and Node.js, which raise FatalStepError.
"""

from __future__ import annotations

import logging

from mcp_provision.adapters.languages.node import nvm_profile_snippet
from mcp_provision.adapters.platform import http
from mcp_provision.core.context import ProvisionContext
from mcp_provision.core.domain.version import latest, major_of, meets_minimum
from mcp_provision.core.errors import FatalStepError
from mcp_provision.core.models.action import Receipt
from mcp_provision.core.services.shell_profile import ensure_snippet

logger = logging.getLogger(__name__)

NVM_PROFILES = (".zshrc", ".bash_profile")


# ═══════════════════════════════════════════════════════════════════
#  Environment bootstrap
# ═══════════════════════════════════════════════════════════════════


def bootstrap_environment(ctx: ProvisionContext) -> Receipt:
    """Put the Homebrew prefix for this CPU on PATH."""
    ctx.runner.prepend_path(ctx.brew.bin_dir)
    logger.debug("Homebrew prefix: %s", ctx.brew_prefix)
    return Receipt.success("bootstrap", output=ctx.brew_prefix)


# ═══════════════════════════════════════════════════════════════════
#  Homebrew
# ═══════════════════════════════════════════════════════════════════


def ensure_homebrew(ctx: ProvisionContext) -> Receipt:
    """Update Homebrew, or install it non-interactively.

    Raises:
        FatalStepError: If ``brew`` is still missing after installing.
    """
    step = "homebrew"
    brew = ctx.brew
    ctx.runner.prepend_path(brew.bin_dir)

    if brew.is_available():
        logger.info("Homebrew is already installed, updating...")
        result = brew.update()
        if not result.ok:
            logger.warning("brew update failed: %s", result.describe_error())
        return Receipt.success(
            step, output="already installed", metadata={"path": brew.path}
        )

    logger.info("Installing Homebrew...")
    try:
        script = http.fetch_text(
            ctx.settings.homebrew_install_url, timeout=ctx.settings.download_timeout
        )
    except OSError as e:
        logger.error("Could not download the Homebrew installer: %s", e)
    else:
        result = brew.run_installer(script)
        if not result.ok:
            logger.error("Homebrew installer failed: %s", result.describe_error())

    if not brew.is_available():
        logger.error("Homebrew still not found after PATH update. Exiting.")
        raise FatalStepError(step, "Homebrew installation failed")

    logger.info("Homebrew installed successfully")
    ensure_snippet(
        ctx.home / ".zprofile",
        marker=f"{brew.bin_dir}/brew",
        snippet=brew.shellenv_line,
        header="Homebrew",
    )
    return Receipt.success(step, output="installed", metadata={"path": brew.path})


# ═══════════════════════════════════════════════════════════════════
#  Python + uv
# ═══════════════════════════════════════════════════════════════════


def ensure_python(ctx: ProvisionContext) -> Receipt:
    """Make sure ``python3`` is at least the minimum version."""
    step = "python"
    minimum = ctx.settings.python_min_version
    formula = f"python@{minimum}"

    logger.info("Checking for Python installation...")
    version = ctx.python.version()

    if version:
        logger.info("Python version %s is already installed", version)
        if meets_minimum(version, minimum):
            logger.info(
                "Installed Python version (%s) meets minimum requirement (%s)",
                version,
                minimum,
            )
            return Receipt.success(step, output=version, metadata={"version": version})

        logger.info(
            "Installed Python version (%s) is older than minimum required version (%s)",
            version,
            minimum,
        )
        logger.info("Installing Python %s via Homebrew...", minimum)
        result = ctx.brew.install(formula)
        if not result.ok:
            logger.warning(
                "Failed to install Python %s. Will continue with existing Python %s",
                minimum,
                version,
            )
            return Receipt.failure(
                step, error=result.describe_error(), metadata={"version": version}
            )
        logger.info("Python %s installed successfully", minimum)
        ctx.brew.link_overwrite(formula)
        return Receipt.success(step, output=minimum, metadata={"upgraded_from": version})

    logger.info("Python not found. Installing Python %s via Homebrew...", minimum)
    result = ctx.brew.install(formula)
    if result.ok:
        logger.info("Python %s installed successfully", minimum)
        return Receipt.success(step, output=minimum)

    logger.warning(
        "Failed to install Python %s. Trying to install latest Python...", minimum
    )
    result = ctx.brew.install("python")
    if result.ok:
        logger.info("Latest Python installed successfully")
        return Receipt.success(step, output="latest")

    logger.warning("Failed to install Python. Some functionality may not work correctly.")
    return Receipt.failure(step, error=result.describe_error())


def ensure_uv(ctx: ProvisionContext) -> Receipt:
    """Install uv through Homebrew, falling back to pip."""
    step = "uv"
    logger.info("Checking for uv installation...")

    version = ctx.uv.version()
    if version:
        logger.info("uv version %s is already installed", version)
        return Receipt.success(step, output=version)

    logger.info("uv not found. Installing uv via Homebrew...")
    result = ctx.brew.install("uv")
    if result.ok:
        logger.info("uv installed successfully via Homebrew")
        return Receipt.success(step, output="homebrew")

    logger.warning("Failed to install uv via Homebrew. Trying to install with pip...")
    if not ctx.python.has_pip():
        logger.warning("pip3 not found. Cannot install uv. Some functionality may not work correctly.")
        return Receipt.failure(step, error="pip3 not found")

    result = ctx.python.pip_install("uv")
    if result.ok:
        logger.info("uv installed successfully via pip")
        return Receipt.success(step, output="pip")

    logger.warning("Failed to install uv via pip. Some functionality may not work correctly.")
    return Receipt.failure(step, error=result.describe_error())


# ═══════════════════════════════════════════════════════════════════
#  NVM + Node.js
# ═══════════════════════════════════════════════════════════════════


def ensure_nvm(ctx: ProvisionContext) -> Receipt:
    """Find NVM, or install it through Homebrew and wire up the profiles.

    Raises:
        FatalStepError: If no ``nvm.sh`` can be found afterwards.
    """
    step = "nvm"
    nvm = ctx.nvm

    if nvm.locate():
        logger.info("NVM is already installed")
        logger.info("Loaded NVM from %s", nvm.script)
        return Receipt.success(step, output="already installed", metadata={"script": str(nvm.script)})

    logger.info("Installing NVM using Homebrew...")
    result = ctx.brew.install("nvm")
    if not result.ok:
        logger.warning("brew install nvm failed: %s", result.describe_error())

    nvm.nvm_dir.mkdir(parents=True, exist_ok=True)

    snippet = nvm_profile_snippet(ctx.brew_prefix)
    for profile in NVM_PROFILES:
        ensure_snippet(
            ctx.home / profile,
            marker="NVM_DIR",
            snippet=snippet,
            header="NVM Configuration",
        )

    if nvm.locate() is None:
        logger.error("Could not find NVM installation to source")
        raise FatalStepError(step, "NVM not found after installation")

    logger.info("NVM loaded successfully from %s", nvm.script)
    return Receipt.success(step, output="installed", metadata={"script": str(nvm.script)})


def ensure_node(ctx: ProvisionContext) -> Receipt:
    """Install Node.js through NVM and make the newest version the default.

    Raises:
        FatalStepError: If no usable Node.js is available afterwards.
    """
    step = "node"
    nvm = ctx.nvm
    minimum = ctx.settings.node_min_version
    min_major = major_of(minimum) or 0

    if not nvm.is_available():
        logger.error("NVM command not available after installation")
        raise FatalStepError(step, "NVM not available")

    installed = nvm.installed_versions()
    if any((major_of(v) or 0) >= min_major for v in installed):
        logger.info("Node.js v%s or higher is already installed via NVM", minimum)
    else:
        logger.info("Installing latest Node.js v%s.x via NVM...", minimum)
        result = nvm.install(minimum)
        if not result.ok:
            logger.error("Failed to install Node.js v%s.x", minimum)
            logger.info("Trying to install latest LTS version...")
            result = nvm.install_lts()
            if not result.ok:
                logger.error("Failed to install Node.js LTS. Exiting.")
                raise FatalStepError(step, "Node.js installation failed")
        installed = nvm.installed_versions()

    logger.info("Setting latest installed version as NVM default...")
    chosen = latest(installed)
    if chosen is None:
        logger.error("Could not determine an installed Node.js version")
        raise FatalStepError(step, "No Node.js version installed")

    logger.info("Setting %s as default Node.js version", chosen)
    result = nvm.alias_default(chosen)
    if not result.ok:
        logger.warning("nvm alias default failed: %s", result.describe_error())
    ctx.runner.prepend_path(str(nvm.bin_dir(chosen)))

    if not ctx.runner.which("node"):
        logger.error("Node.js is not available in PATH after installation")
        raise FatalStepError(step, "node not on PATH")

    ctx.node_version = chosen
    logger.info("Node.js %s is being used", chosen)
    return Receipt.success(step, output=chosen, metadata={"installed": installed})
