"""
Credential resolver — best-effort reads from the 1Password vault.

Lookups never abort the run. A failed field is an empty string; an
item whose required fields came back empty gets its documented
placeholders; and if the CLI is missing, signed out, or the vault is
absent, the resolver is disabled and every item gets its "disabled"
placeholders.
"""

from __future__ import annotations

import logging

from mcp_provision.adapters.secrets.onepassword import CASK, OnePasswordAdapter
from mcp_provision.adapters.platform.homebrew import HomebrewAdapter
from mcp_provision.core.context import ProvisionContext
from mcp_provision.core.data import CREDENTIAL_SPECS
from mcp_provision.core.models.action import Receipt
from mcp_provision.core.models.credentials import CredentialSet, CredentialSpec, Credentials

logger = logging.getLogger(__name__)


class CredentialResolver:
    """Resolve credential specs against one vault."""

    def __init__(self, op: OnePasswordAdapter, brew: HomebrewAdapter | None = None):
        self.op = op
        self.brew = brew
        self.enabled = False

    # ── Setup ───────────────────────────────────────────────────

    def ensure_cli(self) -> bool:
        """Install the 1Password CLI through Homebrew when missing."""
        if self.op.is_available():
            return True
        if self.brew is None:
            return False
        logger.info("1Password CLI not found. Installing...")
        result = self.brew.install(CASK, cask=True)
        if not result.ok:
            logger.debug("brew install --cask %s: %s", CASK, result.describe_error())
        if not self.op.is_available():
            logger.warning(
                "Failed to install 1Password CLI. API keys will not be retrieved automatically."
            )
            return False
        return True

    def check(self) -> bool:
        """Run every precondition; the result decides ``enabled``."""
        self.enabled = False

        if not self.ensure_cli():
            return False

        if not self.op.is_signed_in():
            logger.warning(
                "Not signed in to 1Password CLI. Please sign in manually by running "
                "'op signin' and then rerun this script."
            )
            logger.warning("API keys will not be retrieved automatically.")
            return False

        if not self.op.vault_exists():
            logger.warning(
                "1Password vault '%s' not found. API keys will not be retrieved automatically.",
                self.op.vault,
            )
            return False

        self.enabled = True
        return True

    # ── Lookups ─────────────────────────────────────────────────

    def get_item(self, name: str, field: str) -> str:
        """One field of one item, or "" (with a warning)."""
        if not self.enabled:
            return ""
        value = self.op.get_field(name, field)
        if not value:
            logger.warning(
                "Could not retrieve '%s' from 1Password vault '%s'", name, self.op.vault
            )
        return value

    def resolve_spec(self, spec: CredentialSpec) -> CredentialSet:
        """Fetch every field of one item and apply the placeholder policy."""
        if not self.enabled:
            return CredentialSet(item=spec.item, values=spec.placeholders(disabled=True))

        values = {key: self.get_item(spec.item, field) for key, field in spec.fields.items()}
        if spec.is_complete(values):
            logger.info("Retrieved %s credentials successfully", spec.item)
            return CredentialSet(item=spec.item, values=values, retrieved=True)

        logger.info(
            "Could not retrieve %s credentials. Placeholders will be used in the configuration.",
            spec.item,
        )
        return CredentialSet(item=spec.item, values=spec.placeholders())

    def resolve(self, specs: list[CredentialSpec]) -> Credentials:
        creds = Credentials(available=self.enabled)
        for spec in specs:
            creds.sets[spec.item] = self.resolve_spec(spec)
        return creds


def resolve_credentials(
    ctx: ProvisionContext,
    specs: list[CredentialSpec] | None = None,
    install_cli: bool = True,
) -> Receipt:
    """Pipeline step: populate ``ctx.credentials``.

    With ``install_cli=False`` a missing 1Password CLI is not installed
    and the resolver is simply disabled.
    """
    step = "credentials"
    specs = CREDENTIAL_SPECS if specs is None else specs

    logger.info("Checking for 1Password CLI...")
    resolver = CredentialResolver(ctx.op, ctx.brew if install_cli else None)
    if not resolver.check():
        logger.warning(
            "1Password CLI is not properly set up. Continuing without automatic credential retrieval."
        )
    else:
        logger.info("Retrieving credentials from 1Password vault '%s'...", ctx.op.vault)

    ctx.credentials = resolver.resolve(specs)

    retrieved = [item for item, cred in ctx.credentials.sets.items() if cred.retrieved]
    missing = [item for item, cred in ctx.credentials.sets.items() if not cred.retrieved]
    metadata = {"retrieved": retrieved, "missing": missing}

    if not resolver.enabled:
        return Receipt.skip(step, reason="1Password unavailable", metadata=metadata)
    if missing:
        return Receipt.failure(step, error=f"missing: {', '.join(missing)}", metadata=metadata)
    return Receipt.success(step, output=f"{len(retrieved)} items", metadata=metadata)
