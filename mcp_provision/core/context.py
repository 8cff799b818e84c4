"""
Provisioning context — everything one run knows, passed step to step.

Created once by the use case, filled in by the early steps (Homebrew
prefix, resolved credentials, Node version) and read by the later
ones (installers, configuration emitter, summary). Nothing about a run
lives in module-level state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path

from mcp_provision.adapters.languages.node import NpmAdapter, NvmAdapter
from mcp_provision.adapters.languages.python import PythonAdapter, UvAdapter
from mcp_provision.adapters.platform.homebrew import HomebrewAdapter, detect_prefix
from mcp_provision.adapters.platform.macos import MacOSAdapter
from mcp_provision.adapters.secrets.onepassword import OnePasswordAdapter
from mcp_provision.adapters.shell.command import CommandRunner
from mcp_provision.adapters.vcs.git import GitAdapter
from mcp_provision.core.models.credentials import Credentials
from mcp_provision.core.models.settings import ProvisionSettings


@dataclass
class ProvisionContext:
    """State shared by the steps of one run."""

    settings: ProvisionSettings
    runner: CommandRunner
    brew_prefix: str = field(default_factory=detect_prefix)

    credentials: Credentials = field(default_factory=Credentials)
    node_version: str | None = None
    configs_written: dict[str, Path] = field(default_factory=dict)

    @property
    def home(self) -> Path:
        return self.settings.home

    # ── Adapters ────────────────────────────────────────────────

    @cached_property
    def brew(self) -> HomebrewAdapter:
        return HomebrewAdapter(self.runner, self.brew_prefix)

    @cached_property
    def op(self) -> OnePasswordAdapter:
        return OnePasswordAdapter(
            self.runner, self.settings.op_vault, timeout=self.settings.probe_timeout
        )

    @cached_property
    def git(self) -> GitAdapter:
        return GitAdapter(self.runner)

    @cached_property
    def nvm(self) -> NvmAdapter:
        return NvmAdapter(self.runner, self.home / ".nvm", self.brew_prefix)

    @cached_property
    def npm(self) -> NpmAdapter:
        return NpmAdapter(self.runner)

    @cached_property
    def python(self) -> PythonAdapter:
        return PythonAdapter(self.runner)

    @cached_property
    def uv(self) -> UvAdapter:
        return UvAdapter(self.runner)

    @cached_property
    def macos(self) -> MacOSAdapter:
        return MacOSAdapter(self.runner)
