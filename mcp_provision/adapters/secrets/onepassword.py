"""
1Password CLI adapter — account, vault and item lookups through ``op``.
"""

from __future__ import annotations

import logging

from mcp_provision.adapters.base import ToolAdapter
from mcp_provision.adapters.shell.command import CommandRunner

logger = logging.getLogger(__name__)

CASK = "1password-cli"


class OnePasswordAdapter(ToolAdapter):
    """Read-only access to one named vault."""

    executable = "op"

    def __init__(self, runner: CommandRunner, vault: str, timeout: int = 30):
        super().__init__(runner)
        self.vault = vault
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "op"

    def is_signed_in(self) -> bool:
        """``op account list`` succeeds only with a configured account."""
        return self.runner.run(["op", "account", "list"], timeout=self.timeout).ok

    def vault_exists(self) -> bool:
        result = self.runner.run(["op", "vault", "list"], timeout=self.timeout)
        return result.ok and self.vault in result.stdout

    def get_field(self, item: str, field: str) -> str:
        """Return one field of one item, or "" when the lookup fails."""
        result = self.runner.run(
            ["op", "item", "get", item, "--vault", self.vault, "--fields", field],
            timeout=self.timeout,
        )
        if not result.ok:
            logger.debug("op item get %s/%s: %s", item, field, result.describe_error())
            return ""
        return result.output
