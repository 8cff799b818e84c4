"""
Integration descriptors — the fixed set of MCP servers and the
desktop applications that consume them.

Descriptors are static data (see ``core/data/integrations.py``).
Path-like strings may contain ``{home}``, ``{install_dir}``,
``{documents}`` and ``{uv}`` placeholders, expanded at run time.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class InstallMethod(str, Enum):
    """How an integration gets onto the machine."""

    PACKAGE = "package"
    REPOSITORY = "repository"


class LaunchSpec(BaseModel):
    """How a desktop application starts the server."""

    command: str
    args: list[str] = Field(default_factory=list)
    env_keys: list[str] = Field(default_factory=list)


class Integration(BaseModel):
    """One third-party integration server.

    ``launch`` is None for tools that are installed but never
    referenced from a configuration document.
    """

    name: str
    display_name: str
    method: InstallMethod

    package: str = ""
    repo_url: str = ""
    install_dir: str = ""
    env_file: str = ""
    env_keys: list[str] = Field(default_factory=list)
    touch_files: list[str] = Field(default_factory=list)

    launch: LaunchSpec | None = None
    clients: list[str] = Field(default_factory=list)

    def resolve_dir(self, home: Path) -> Path | None:
        """Absolute install directory for repository integrations."""
        if not self.install_dir:
            return None
        return Path(self.install_dir.format(home=home))

    def eligible_for(self, client: str) -> bool:
        return self.launch is not None and client in self.clients


class ClientApp(BaseModel):
    """A desktop application that reads an ``mcpServers`` document.

    ``config_path`` is relative to the user's home. When
    ``requires_dir`` is set, the document is only emitted if that
    directory (also relative to home) exists.
    """

    name: str
    display_name: str
    config_path: str
    requires_dir: str = ""
    print_config: bool = False

    def resolve_config_path(self, home: Path) -> Path:
        return home / self.config_path

    def is_present(self, home: Path) -> bool:
        if not self.requires_dir:
            return True
        return (home / self.requires_dir).is_dir()
