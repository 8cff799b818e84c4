"""
Domain models — Pydantic types for a provisioning run.

    from mcp_provision.core.models import Receipt, Integration, ProvisionSettings
"""

from mcp_provision.core.models.action import Receipt
from mcp_provision.core.models.credentials import CredentialSet, CredentialSpec, Credentials
from mcp_provision.core.models.integration import (
    ClientApp,
    InstallMethod,
    Integration,
    LaunchSpec,
)
from mcp_provision.core.models.settings import ProvisionSettings

__all__ = [
    "ClientApp",
    "CredentialSet",
    "CredentialSpec",
    "Credentials",
    "InstallMethod",
    "Integration",
    "LaunchSpec",
    "ProvisionSettings",
    "Receipt",
]
