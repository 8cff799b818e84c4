"""
Static data — the integration catalog.

Re-exported here so callers can write::

    from mcp_provision.core.data import INTEGRATIONS, CREDENTIAL_SPECS
"""

from mcp_provision.core.data.integrations import (  # noqa: F401
    CLAUDE,
    CLIENT_APPS,
    CREDENTIAL_SPECS,
    CURSOR,
    INTEGRATIONS,
    get_client,
    get_integration,
)
