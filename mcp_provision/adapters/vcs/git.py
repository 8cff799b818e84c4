"""
Git adapter — clone and update integration repositories.

Uses the git CLI, never raw API calls.
"""

from __future__ import annotations

import logging
from pathlib import Path

from mcp_provision.adapters.base import ToolAdapter
from mcp_provision.adapters.shell.command import CommandResult

logger = logging.getLogger(__name__)


class GitAdapter(ToolAdapter):
    """Clone or fast-forward a working copy."""

    @property
    def name(self) -> str:
        return "git"

    def clone(self, url: str, dest: Path) -> CommandResult:
        logger.debug("git clone %s %s", url, dest)
        return self.runner.run(["git", "clone", url, str(dest)])

    def pull(self, cwd: Path) -> CommandResult:
        logger.debug("git pull in %s", cwd)
        return self.runner.run(["git", "pull"], cwd=str(cwd))
