"""
macOS adapter — application launch/quit and disk image handling.

Wraps ``open``, ``osascript`` and ``hdiutil``.
"""

from __future__ import annotations

import logging

from mcp_provision.adapters.base import ToolAdapter
from mcp_provision.adapters.shell.command import CommandResult

logger = logging.getLogger(__name__)


class MacOSAdapter(ToolAdapter):
    """Desktop application and disk image operations."""

    executable = "hdiutil"

    @property
    def name(self) -> str:
        return "macos"

    def open_app(self, app_name: str) -> CommandResult:
        return self.runner.run(["open", "-a", app_name])

    def quit_app(self, app_name: str) -> CommandResult:
        script = f'tell application "{app_name}" to quit'
        return self.runner.run(["osascript", "-e", script])

    def attach(self, image: str) -> str | None:
        """Mount a disk image and return its mount point.

        ``hdiutil attach`` prints one tab-separated line per partition;
        the mount point is the last column of the last line.
        """
        result = self.runner.run(["hdiutil", "attach", image, "-nobrowse"])
        if not result.ok:
            logger.debug("hdiutil attach failed: %s", result.describe_error())
            return None
        return parse_mount_point(result.stdout)

    def detach(self, mount_point: str) -> CommandResult:
        return self.runner.run(["hdiutil", "detach", mount_point, "-quiet"])


def parse_mount_point(output: str) -> str | None:
    """Extract the mount point from ``hdiutil attach`` output."""
    lines = [line for line in output.splitlines() if line.strip()]
    if not lines:
        return None
    last = lines[-1]
    if "\t" in last:
        column = last.rsplit("\t", 1)[-1].strip()
    else:
        column = last.split()[-1]
    return column if column.startswith("/") else None
