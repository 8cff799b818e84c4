"""
Error taxonomy for a provisioning run.

Only ``FatalStepError`` stops the run. Everything else is degraded:
captured in a Receipt, logged, and the run continues.
"""

from __future__ import annotations


class ProvisionError(Exception):
    """Base class for all provisioning errors."""


class ConfigError(ProvisionError):
    """Raised when the settings file is invalid or unreadable."""


class FatalStepError(ProvisionError):
    """Raised by a step whose failure makes the rest of the run pointless.

    The driver stops at the first fatal error and the CLI exits with 1.
    """

    def __init__(self, step: str, message: str):
        super().__init__(message)
        self.step = step
