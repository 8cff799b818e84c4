"""
Provisioning settings — every tunable of a run in one place.

Defaults reproduce the stock deployment; a YAML file can override any
field (see ``core/config/loader.py``). Paths left unset are derived
from ``home`` after validation.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator


def _default_home() -> Path:
    return Path(os.environ.get("HOME") or Path.home())


class ProvisionSettings(BaseModel):
    """Settings for a provisioning run."""

    home: Path = Field(default_factory=_default_home)
    log_file: Path | None = None

    # Toolchain
    node_min_version: str = "23"
    python_min_version: str = "3.12"
    homebrew_install_url: str = (
        "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"
    )

    # Secrets
    op_vault: str = "MCP"

    # Desktop application
    claude_download_url: str = "https://claude.ai/download"
    claude_app_name: str = "Claude"
    applications_dir: Path = Path("/Applications")
    download_dir: Path | None = None
    update_check_delay: float = 5.0

    # Filesystem MCP server root
    documents_dir: Path | None = None

    # Timeouts (seconds)
    command_timeout: int = 600
    probe_timeout: int = 30
    download_timeout: int = 300

    @field_validator("home", "log_file", "applications_dir", "download_dir",
                     "documents_dir", mode="before")
    @classmethod
    def _expand_user(cls, value):
        if isinstance(value, str):
            return Path(os.path.expanduser(value))
        return value

    @model_validator(mode="after")
    def _derive_paths(self) -> ProvisionSettings:
        if self.log_file is None:
            self.log_file = self.home / "Library" / "Logs" / "mcp_installation_script.log"
        if self.download_dir is None:
            self.download_dir = self.home / "Downloads"
        if self.documents_dir is None:
            self.documents_dir = self.home / "Documents"
        return self

    @property
    def claude_app_path(self) -> Path:
        return self.applications_dir / f"{self.claude_app_name}.app"
