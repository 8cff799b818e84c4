"""
Credential models — what to fetch from the vault and what was fetched.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CredentialSpec(BaseModel):
    """How one vault item maps onto environment variables.

    ``fields`` maps env key → vault field name, in output order.
    ``required`` lists the env keys that must be non-empty for the
    lookup to count as a success. When it does not, ``on_failure``
    replaces the whole set. ``when_disabled`` is used when the secrets
    CLI is unusable for the run. Keys missing from either placeholder
    map become empty strings.
    """

    item: str
    fields: dict[str, str]
    required: list[str] = Field(default_factory=list)
    on_failure: dict[str, str] = Field(default_factory=dict)
    when_disabled: dict[str, str] = Field(default_factory=dict)

    def placeholders(self, disabled: bool = False) -> dict[str, str]:
        """Placeholder values for every env key of this item."""
        source = self.when_disabled if disabled else self.on_failure
        return {key: source.get(key, "") for key in self.fields}

    def is_complete(self, values: dict[str, str]) -> bool:
        """Whether the required keys are all non-empty."""
        return all(values.get(key) for key in self.required)


class CredentialSet(BaseModel):
    """Resolved values for one item."""

    item: str
    values: dict[str, str] = Field(default_factory=dict)
    retrieved: bool = False


class Credentials(BaseModel):
    """Every resolved credential set for the run.

    Populated once by the resolver and passed to the installers
    and the configuration emitter.
    """

    available: bool = False
    sets: dict[str, CredentialSet] = Field(default_factory=dict)

    def get(self, key: str) -> str:
        """Look up an env key across all items (empty if unknown)."""
        for cred in self.sets.values():
            if key in cred.values:
                return cred.values[key]
        return ""

    def env(self, keys: list[str]) -> dict[str, str]:
        """Build an env mapping for the given keys."""
        return {key: self.get(key) for key in keys}

    def retrieved(self, item: str) -> bool:
        cred = self.sets.get(item)
        return bool(cred and cred.retrieved)
