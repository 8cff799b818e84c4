"""
Tool version probes.

Read-only: runs ``--version`` style commands and parses the output.
Used by the ensure-steps and the installation summary.
"""

from __future__ import annotations

import re

from mcp_provision.adapters.shell.command import CommandRunner

VERSION_COMMANDS: dict[str, tuple[list[str], str]] = {
    "brew":    (["brew", "--version"],    r"Homebrew\s+(\d+\.\d+\.\d+)"),
    "node":    (["node", "--version"],    r"(v\d+\.\d+\.\d+)"),
    "npm":     (["npm", "--version"],     r"(\d+\.\d+\.\d+)"),
    "python3": (["python3", "--version"], r"(Python\s+\d+\.\d+(?:\.\d+)?)"),
    "uv":      (["uv", "--version"],      r"(uv\s+\d+\.\d+\.\d+.*)"),
    "op":      (["op", "--version"],      r"(\d+\.\d+\.\d+)"),
    "git":     (["git", "--version"],     r"git version\s+(\d+\.\d+\.\d+)"),
}


def get_tool_version(runner: CommandRunner, tool: str, timeout: int = 30) -> str | None:
    """Installed version of ``tool`` as the tool spells it, or None.

    Returns None when the tool is unknown, not on PATH, or its output
    doesn't match the pattern.
    """
    entry = VERSION_COMMANDS.get(tool)
    if not entry:
        return None

    cmd, pattern = entry
    if not runner.which(cmd[0]):
        return None

    result = runner.run(cmd, timeout=timeout)
    if not result.ok:
        return None
    # Some tools write their version to stderr
    output = (result.stdout or "") + (result.stderr or "")
    match = re.search(pattern, output)
    return match.group(1).strip() if match else None
