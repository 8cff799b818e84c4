"""
Mock command runner — universal test double for external tools.

Simulates a machine without touching it: ``which`` answers from a
table of installed tools, and ``run`` answers from scripted responses
matched by command prefix. Unscripted commands succeed with empty
output.

Commands of the form ``bash -c <script> <name> <args...>`` (how NVM is
driven) are matched on ``<name> <args...>``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from mcp_provision.adapters.shell.command import CommandResult, CommandRunner


@dataclass
class MockCall:
    """One recorded ``run`` invocation."""

    args: list[str]
    cwd: str | None = None
    env_overrides: dict[str, str] = field(default_factory=dict)

    @property
    def effective(self) -> list[str]:
        return _effective(self.args)


Effect = Callable[[MockCall], None]


def _effective(cmd: list[str]) -> list[str]:
    if len(cmd) > 3 and cmd[0] == "bash" and cmd[1] == "-c":
        return list(cmd[3:])
    return list(cmd)


def _as_prefix(prefix: str | list[str] | tuple[str, ...]) -> tuple[str, ...]:
    if isinstance(prefix, str):
        return tuple(prefix.split())
    return tuple(prefix)


class MockCommandRunner(CommandRunner):
    """Scripted CommandRunner for tests."""

    def __init__(
        self,
        tools: dict[str, str] | list[str] | None = None,
        env: dict[str, str] | None = None,
    ):
        super().__init__(timeout=5, env=env or {"PATH": "/mock/bin"})
        self._tools: dict[str, str] = {}
        for name in tools or []:
            path = tools[name] if isinstance(tools, dict) else f"/mock/bin/{name}"
            self._tools[name] = path
        self._responses: list[tuple[tuple[str, ...], CommandResult, Effect | None]] = []
        self._call_log: list[MockCall] = []

    # ── Tools ───────────────────────────────────────────────────

    def which(self, name: str) -> str | None:
        return self._tools.get(name)

    def add_tool(self, name: str, path: str | None = None) -> None:
        self._tools[name] = path or f"/mock/bin/{name}"

    def remove_tool(self, name: str) -> None:
        self._tools.pop(name, None)

    # ── Scripting ───────────────────────────────────────────────

    def set_response(
        self,
        prefix: str | list[str] | tuple[str, ...],
        stdout: str = "",
        returncode: int = 0,
        stderr: str = "",
        effect: Effect | None = None,
    ) -> None:
        """Answer commands starting with ``prefix``.

        Later registrations win over earlier ones for the same prefix;
        longer prefixes win over shorter ones.
        """
        result = CommandResult(returncode=returncode, stdout=stdout, stderr=stderr)
        self._responses.insert(0, (_as_prefix(prefix), result, effect))

    def set_failure(
        self,
        prefix: str | list[str] | tuple[str, ...],
        stderr: str = "mock failure",
        returncode: int = 1,
    ) -> None:
        self.set_response(prefix, returncode=returncode, stderr=stderr)

    def on_run(self, prefix: str | list[str] | tuple[str, ...], effect: Effect) -> None:
        """Succeed and run ``effect`` (e.g. create a clone directory)."""
        self.set_response(prefix, effect=effect)

    # ── Execution ───────────────────────────────────────────────

    def run(
        self,
        cmd: list[str],
        *,
        cwd: str | None = None,
        timeout: int | None = None,
        env_overrides: dict[str, str] | None = None,
    ) -> CommandResult:
        call = MockCall(args=list(cmd), cwd=cwd, env_overrides=dict(env_overrides or {}))
        self._call_log.append(call)

        effective = tuple(call.effective)
        best: tuple[tuple[str, ...], CommandResult, Effect | None] | None = None
        for prefix, result, effect in self._responses:
            if effective[: len(prefix)] != prefix:
                continue
            if best is None or len(prefix) > len(best[0]):
                best = (prefix, result, effect)

        if best is None:
            return CommandResult(args=list(cmd))

        _prefix, result, effect = best
        if effect is not None:
            effect(call)
        return CommandResult(
            args=list(cmd),
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )

    # ── Inspection ──────────────────────────────────────────────

    @property
    def call_log(self) -> list[MockCall]:
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def calls(self, prefix: str | list[str] | tuple[str, ...]) -> list[MockCall]:
        """Recorded calls whose effective command starts with ``prefix``."""
        wanted = _as_prefix(prefix)
        return [c for c in self._call_log if tuple(c.effective[: len(wanted)]) == wanted]

    def called(self, prefix: str | list[str] | tuple[str, ...]) -> bool:
        return bool(self.calls(prefix))

    def reset(self) -> None:
        self._call_log.clear()
        self._responses.clear()
