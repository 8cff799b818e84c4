"""
Command runner — the single place where external processes start.

Every adapter goes through ``CommandRunner.run``. The runner owns its
own copy of the environment, so PATH changes made during a run (new
Homebrew prefix, Node bin dir) apply to every later command without
touching ``os.environ``.

``run`` never raises for a failing command: the outcome is captured in
a CommandResult.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 600


@dataclass
class CommandResult:
    """Outcome of one external command."""

    args: list[str] = field(default_factory=list)
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    elapsed_ms: int = 0
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.error

    @property
    def output(self) -> str:
        """Stripped stdout."""
        return self.stdout.strip()

    def describe_error(self) -> str:
        """One-line reason for a failure, for log messages."""
        if self.error:
            return self.error
        detail = self.stderr.strip().splitlines()
        tail = detail[-1] if detail else ""
        suffix = f": {tail}" if tail else ""
        return f"exit {self.returncode}{suffix}"


class CommandRunner:
    """Run external commands with a shared, mutable environment."""

    def __init__(
        self,
        timeout: int = DEFAULT_TIMEOUT,
        env: dict[str, str] | None = None,
    ):
        self.timeout = timeout
        self.env: dict[str, str] = dict(os.environ if env is None else env)

    # ── Environment ─────────────────────────────────────────────

    def which(self, name: str) -> str | None:
        """Resolve ``name`` on this runner's PATH."""
        return shutil.which(name, path=self.env.get("PATH", ""))

    def prepend_path(self, directory: str) -> None:
        """Put ``directory`` first on PATH (no-op if already first)."""
        current = self.env.get("PATH", "")
        parts = [p for p in current.split(os.pathsep) if p]
        if parts and parts[0] == directory:
            return
        self.env["PATH"] = os.pathsep.join([directory, *parts])
        logger.debug("PATH += %s", directory)

    # ── Execution ───────────────────────────────────────────────

    def run(
        self,
        cmd: list[str],
        *,
        cwd: str | None = None,
        timeout: int | None = None,
        env_overrides: dict[str, str] | None = None,
    ) -> CommandResult:
        """Run ``cmd`` and capture its output.

        Args:
            cmd: Command list (never a shell string).
            cwd: Working directory.
            timeout: Seconds before giving up (default: runner timeout).
            env_overrides: Extra variables for this command only.
        """
        timeout = timeout or self.timeout
        env = dict(self.env)
        if env_overrides:
            env.update(env_overrides)

        logger.debug("Executing: %s (cwd=%s)", " ".join(cmd), cwd)
        start = time.monotonic()
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                env=env,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            return CommandResult(
                args=list(cmd),
                returncode=-1,
                error=f"Command timed out after {timeout}s",
            )
        except OSError as e:
            return CommandResult(
                args=list(cmd),
                returncode=-1,
                error=f"Command execution error: {e}",
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        return CommandResult(
            args=list(cmd),
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            elapsed_ms=elapsed_ms,
        )
