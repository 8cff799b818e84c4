"""
Settings loader — reads an optional provision.yml into ProvisionSettings.

Precedence for the file location:
    --config flag  >  MCP_PROVISION_CONFIG env var  >  ~/.config/mcp-provision/provision.yml

No file at all is fine: the defaults describe the stock deployment.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from mcp_provision.core.errors import ConfigError
from mcp_provision.core.models.settings import ProvisionSettings

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "MCP_PROVISION_CONFIG"
DEFAULT_SETTINGS_FILE = Path(".config") / "mcp-provision" / "provision.yml"


def find_settings_file(home: Path | None = None) -> Path | None:
    """Locate the settings file, or None when there isn't one.

    An explicit MCP_PROVISION_CONFIG is returned even if missing, so
    that ``load_settings`` can report it.
    """
    explicit = os.environ.get(SETTINGS_ENV_VAR)
    if explicit:
        return Path(explicit).expanduser()

    base = home or Path(os.environ.get("HOME") or Path.home())
    candidate = base / DEFAULT_SETTINGS_FILE
    if candidate.is_file():
        return candidate
    return None


def load_settings(path: Path | None = None) -> ProvisionSettings:
    """Load and validate settings.

    Args:
        path: Explicit settings file. If None, searches the default
            locations and falls back to built-in defaults.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    if path is None:
        path = find_settings_file()

    if path is None:
        logger.debug("No settings file, using defaults")
        return ProvisionSettings()

    if not path.is_file():
        raise ConfigError(f"Settings file not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = ProvisionSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.debug("Loaded settings from %s", path)
    return settings
