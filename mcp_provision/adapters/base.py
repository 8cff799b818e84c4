"""
Adapter base — the contract between provisioning steps and tools.

Steps never call external tools directly; they go through an adapter,
and adapters go through the shared CommandRunner. Swapping the runner
for ``MockCommandRunner`` is how the whole pipeline gets tested.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from mcp_provision.adapters.shell.command import CommandRunner


class ToolAdapter(ABC):
    """Abstract base class for command-line tool adapters.

    To create a new adapter:
        1. Subclass ToolAdapter
        2. Set ``name`` (and ``executable`` if it differs)
        3. Add the tool-specific operations
    """

    #: Executable looked up on PATH. Defaults to ``name``.
    executable: str = ""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'brew', 'op', 'git')."""

    @property
    def path(self) -> str | None:
        """Resolved executable path, or None when not installed."""
        return self.runner.which(self.executable or self.name)

    def is_available(self) -> bool:
        """Whether the underlying tool is on PATH. Fast, never raises."""
        return self.path is not None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
