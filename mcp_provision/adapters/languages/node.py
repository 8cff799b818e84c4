"""
Node.js adapters — NVM (runtime version manager) and npm.

NVM is a shell function, not an executable: every NVM operation runs
in a fresh ``bash`` that sources ``nvm.sh`` first. Nothing it exports
survives the call, so the chosen Node ``bin`` directory is put on the
runner's PATH explicitly.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from mcp_provision.adapters.base import ToolAdapter
from mcp_provision.adapters.shell.command import CommandResult, CommandRunner

logger = logging.getLogger(__name__)

_NVM_SHIM = '. "$NVM_SH" && nvm "$@"'
_NODE_VERSION_RE = re.compile(r"v\d+\.\d+\.\d+")


def nvm_profile_snippet(brew_prefix: str) -> str:
    """Shell profile block that loads a Homebrew-installed NVM."""
    nvm_opt = f"{brew_prefix}/opt/nvm"
    return (
        'export NVM_DIR="$HOME/.nvm"\n'
        f'[ -s "{nvm_opt}/nvm.sh" ] && . "{nvm_opt}/nvm.sh"  # This loads nvm\n'
        f'[ -s "{nvm_opt}/etc/bash_completion.d/nvm" ] && '
        f'. "{nvm_opt}/etc/bash_completion.d/nvm"  # This loads nvm bash_completion'
    )


class NvmAdapter(ToolAdapter):
    """Install and select Node.js versions through NVM."""

    executable = "bash"

    def __init__(self, runner: CommandRunner, nvm_dir: Path, brew_prefix: str):
        super().__init__(runner)
        self.nvm_dir = nvm_dir
        self.brew_prefix = brew_prefix
        self.script: Path | None = None

    @property
    def name(self) -> str:
        return "nvm"

    def candidate_scripts(self) -> list[Path]:
        """Known ``nvm.sh`` locations, in lookup order."""
        return [
            self.nvm_dir / "nvm.sh",
            Path("/usr/local/opt/nvm/nvm.sh"),
            Path(self.brew_prefix) / "opt" / "nvm" / "nvm.sh",
        ]

    def locate(self) -> Path | None:
        """Find a non-empty ``nvm.sh`` and remember it."""
        for candidate in self.candidate_scripts():
            try:
                if candidate.is_file() and candidate.stat().st_size > 0:
                    self.script = candidate
                    return candidate
            except OSError:
                continue
        return None

    def is_available(self) -> bool:
        return self.script is not None or self.locate() is not None

    # ── Operations ──────────────────────────────────────────────

    def run(self, *args: str) -> CommandResult:
        """Run ``nvm <args>`` in a shell that has sourced nvm.sh."""
        if self.script is None and self.locate() is None:
            return CommandResult(args=["nvm", *args], returncode=127, error="nvm.sh not found")
        return self.runner.run(
            ["bash", "-c", _NVM_SHIM, "nvm", *args],
            env_overrides={"NVM_DIR": str(self.nvm_dir), "NVM_SH": str(self.script)},
        )

    def installed_versions(self) -> list[str]:
        """Installed Node versions (``vX.Y.Z``), in listing order.

        Alias lines such as ``default -> 23 (-> v23.11.0)`` or
        ``lts/krypton -> v24.11.1 (-> N/A)`` are skipped; a leading
        ``->`` only marks the current version.
        """
        result = self.run("ls", "--no-colors")
        if not result.ok:
            return []
        seen: list[str] = []
        for line in result.stdout.splitlines():
            entry = line.strip().removeprefix("->").strip()
            if "->" in entry or "N/A" in entry:
                continue
            match = _NODE_VERSION_RE.match(entry)
            if match and match.group() not in seen:
                seen.append(match.group())
        return seen

    def install(self, spec: str) -> CommandResult:
        return self.run("install", spec)

    def install_lts(self) -> CommandResult:
        return self.run("install", "--lts")

    def alias_default(self, version: str) -> CommandResult:
        return self.run("alias", "default", version)

    def bin_dir(self, version: str) -> Path:
        return self.nvm_dir / "versions" / "node" / version / "bin"


class NpmAdapter(ToolAdapter):
    """Global npm package installs."""

    @property
    def name(self) -> str:
        return "npm"

    def install_global(self, package: str) -> CommandResult:
        return self.runner.run(["npm", "install", "-g", package])

    def is_installed_global(self, package: str) -> bool:
        return self.runner.run(["npm", "list", "-g", package], timeout=60).ok

    def listing(self, package: str) -> str | None:
        """The ``npm list -g`` line naming ``package``, if installed."""
        result = self.runner.run(["npm", "list", "-g", package], timeout=60)
        if not result.ok:
            return None
        short = package.rsplit("/", 1)[-1]
        for line in result.stdout.splitlines():
            if short in line:
                return line.strip()
        return None
