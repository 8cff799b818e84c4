"""
Python adapters — the ``python3`` interpreter and the ``uv`` installer.
"""

from __future__ import annotations

import logging
from pathlib import Path

from mcp_provision.adapters.base import ToolAdapter
from mcp_provision.adapters.shell.command import CommandResult

logger = logging.getLogger(__name__)

_VERSION_SNIPPET = 'import sys; print(".".join(map(str, sys.version_info[:2])))'


class PythonAdapter(ToolAdapter):
    """The system ``python3`` and its ``pip3``."""

    executable = "python3"

    @property
    def name(self) -> str:
        return "python"

    def version(self) -> str | None:
        """``major.minor`` of ``python3``, or None."""
        if not self.is_available():
            return None
        result = self.runner.run(["python3", "-c", _VERSION_SNIPPET], timeout=30)
        if not result.ok:
            return None
        return result.output or None

    def has_pip(self) -> bool:
        return self.runner.which("pip3") is not None

    def pip_install(self, package: str) -> CommandResult:
        return self.runner.run(["pip3", "install", package])


class UvAdapter(ToolAdapter):
    """The ``uv`` package installer, used to build repository integrations."""

    @property
    def name(self) -> str:
        return "uv"

    def version(self) -> str | None:
        if not self.is_available():
            return None
        result = self.runner.run(["uv", "--version"], timeout=30)
        if not result.ok or not result.output:
            return None
        return result.output.splitlines()[0]

    def build(self, cwd: Path) -> CommandResult:
        logger.debug("uv build in %s", cwd)
        return self.runner.run(["uv", "build"], cwd=str(cwd))

    def command_path(self) -> str:
        """Absolute path for generated launch commands (fallback: ``uv``)."""
        return self.path or "uv"
