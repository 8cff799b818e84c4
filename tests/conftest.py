"""
Shared test fixtures and configuration.
"""

import logging
from pathlib import Path

import pytest

from mcp_provision.adapters.mock import MockCommandRunner
from mcp_provision.core.context import ProvisionContext
from mcp_provision.core.models.settings import ProvisionSettings

BREW_PREFIX = "/opt/homebrew"


@pytest.fixture(autouse=True)
def _reset_root_logger():
    """Drop handlers installed by setup_logging during a test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """A fake user home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def settings(tmp_path: Path, home: Path) -> ProvisionSettings:
    """Settings rooted in tmp_path, with no update-check wait."""
    return ProvisionSettings(
        home=home,
        applications_dir=tmp_path / "Applications",
        update_check_delay=0,
    )


@pytest.fixture
def runner() -> MockCommandRunner:
    return MockCommandRunner()


@pytest.fixture
def ctx(settings: ProvisionSettings, runner: MockCommandRunner) -> ProvisionContext:
    return ProvisionContext(settings=settings, runner=runner, brew_prefix=BREW_PREFIX)


@pytest.fixture
def nvm_script(home: Path) -> Path:
    """An installed NVM under ~/.nvm."""
    script = home / ".nvm" / "nvm.sh"
    script.parent.mkdir(parents=True)
    script.write_text("# nvm\n")
    return script


@pytest.fixture
def no_network(monkeypatch):
    """Fail the test on any HTTP access."""
    from mcp_provision.adapters.platform import http

    def _refuse(*args, **kwargs):
        raise AssertionError(f"unexpected network access: {args}")

    monkeypatch.setattr(http, "fetch_text", _refuse)
    monkeypatch.setattr(http, "download", _refuse)
