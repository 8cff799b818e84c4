"""
Homebrew adapter — the platform package manager.

The prefix depends on the CPU: Apple Silicon installs under
``/opt/homebrew``, Intel under ``/usr/local``.
"""

from __future__ import annotations

import logging
import platform

from mcp_provision.adapters.base import ToolAdapter
from mcp_provision.adapters.shell.command import CommandResult, CommandRunner

logger = logging.getLogger(__name__)

ARM_PREFIX = "/opt/homebrew"
INTEL_PREFIX = "/usr/local"


def detect_prefix(machine: str | None = None) -> str:
    """Homebrew prefix for this CPU architecture."""
    machine = (machine or platform.machine()).lower()
    return ARM_PREFIX if machine == "arm64" else INTEL_PREFIX


class HomebrewAdapter(ToolAdapter):
    """Install, upgrade and link Homebrew formulae and casks."""

    executable = "brew"

    def __init__(self, runner: CommandRunner, prefix: str):
        super().__init__(runner)
        self.prefix = prefix

    @property
    def name(self) -> str:
        return "brew"

    @property
    def bin_dir(self) -> str:
        return f"{self.prefix}/bin"

    @property
    def shellenv_line(self) -> str:
        """Profile line that puts this prefix on PATH in new shells."""
        return f'eval "$({self.bin_dir}/brew shellenv)"'

    def update(self) -> CommandResult:
        return self.runner.run(["brew", "update"])

    def install(self, formula: str, cask: bool = False) -> CommandResult:
        cmd = ["brew", "install"]
        if cask:
            cmd.append("--cask")
        cmd.append(formula)
        logger.debug("brew install %s", formula)
        return self.runner.run(cmd)

    def link_overwrite(self, formula: str) -> CommandResult:
        return self.runner.run(["brew", "link", "--overwrite", formula])

    def run_installer(self, script: str) -> CommandResult:
        """Run the official install script without prompts."""
        return self.runner.run(
            ["/bin/bash", "-c", script],
            env_overrides={"NONINTERACTIVE": "1", "CI": "1"},
        )
