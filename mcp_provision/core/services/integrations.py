"""
Integration installers — npm packages and git repositories.

Package-based integrations are a global ``npm install`` verified with
``npm list``; they never fail the run. Repository-based integrations
are cloned (or pulled when the directory exists), get their credential
files written, and are built with ``uv build``. A failed build leaves
the working copy in place for the next run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from mcp_provision.adapters.languages.node import NpmAdapter
from mcp_provision.adapters.languages.python import UvAdapter
from mcp_provision.adapters.vcs.git import GitAdapter
from mcp_provision.core.context import ProvisionContext
from mcp_provision.core.data.integrations import (
    GMAIL_OAUTH_AUTH_URI,
    GMAIL_OAUTH_REDIRECT_URIS,
    GMAIL_OAUTH_TOKEN_URI,
)
from mcp_provision.core.models.action import Receipt
from mcp_provision.core.models.credentials import Credentials
from mcp_provision.core.models.integration import InstallMethod, Integration
from mcp_provision.core.persistence.config_file import write_json_atomic, write_text_atomic

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  File rendering
# ═══════════════════════════════════════════════════════════════════


def _quote_env(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def render_env_file(values: dict[str, str]) -> str:
    """``KEY="value"`` lines, values escaped for double quotes."""
    if not values:
        return ""
    return "".join(f"{key}={_quote_env(value)}\n" for key, value in values.items())


def gmail_credentials_document(client_id: str, client_secret: str) -> dict:
    """Google OAuth client document for an installed application."""
    return {
        "installed": {
            "client_id": client_id,
            "client_secret": client_secret,
            "redirect_uris": list(GMAIL_OAUTH_REDIRECT_URIS),
            "auth_uri": GMAIL_OAUTH_AUTH_URI,
            "token_uri": GMAIL_OAUTH_TOKEN_URI,
        }
    }


def _gmail_files(credentials: Credentials) -> dict[str, dict]:
    client_id = credentials.get("GMAIL_CLIENT_ID")
    client_secret = credentials.get("GMAIL_CLIENT_SECRET")
    if not (client_id and client_secret):
        return {}
    return {"credentials.json": gmail_credentials_document(client_id, client_secret)}


# Integration name → extra JSON files to write into its working copy
EXTRA_FILES: dict[str, Callable[[Credentials], dict[str, dict]]] = {
    "gmail": _gmail_files,
}


# ═══════════════════════════════════════════════════════════════════
#  Package-based
# ═══════════════════════════════════════════════════════════════════


def install_package(npm: NpmAdapter, package: str, display_name: str) -> Receipt:
    """``npm install -g`` one package and verify it with ``npm list -g``."""
    step = f"package:{package}"
    logger.info("Installing %s...", display_name)

    result = npm.install_global(package)
    if not result.ok:
        logger.debug("npm install -g %s: %s", package, result.describe_error())

    if npm.is_installed_global(package):
        logger.info("%s installed successfully", display_name)
        return Receipt.success(step, output=package)

    logger.warning("%s installation may have failed", display_name)
    return Receipt.failure(step, error=result.describe_error() if not result.ok else "not listed")


# ═══════════════════════════════════════════════════════════════════
#  Repository-based
# ═══════════════════════════════════════════════════════════════════


def install_repository(
    git: GitAdapter,
    uv: UvAdapter,
    repo_url: str,
    install_dir: Path,
    name: str,
    env_file: Path | None = None,
    env_content: str = "",
    *,
    touch_files: list[str] | None = None,
    json_files: dict[str, dict] | None = None,
) -> Receipt:
    """Clone or update ``repo_url`` into ``install_dir`` and build it.

    Files the integration reads at launch are written before the build:
    ``env_file`` (only when both it and ``env_content`` are non-empty),
    empty ``touch_files`` that don't exist yet, and ``json_files``.
    Nothing else in the directory is touched.
    """
    step = f"repository:{name}"
    logger.info("Installing %s from GitHub...", name)

    if install_dir.is_dir():
        logger.info("%s directory already exists, updating...", name)
        result = git.pull(install_dir)
        if not result.ok:
            logger.warning("git pull failed for %s: %s", name, result.describe_error())
    else:
        logger.info("Cloning %s repository...", name)
        result = git.clone(repo_url, install_dir)
        if not result.ok or not install_dir.is_dir():
            logger.error("Failed to clone %s repository", name)
            return Receipt.failure(step, error=result.describe_error() if not result.ok else "no directory")
        logger.info("%s repository cloned successfully", name)

    written: list[str] = []
    if env_file and env_content:
        write_text_atomic(env_file, env_content)
        logger.info("%s .env file created at %s", name, env_file)
        written.append(str(env_file))

    for filename in touch_files or []:
        target = install_dir / filename
        target.touch(exist_ok=True)
        written.append(str(target))

    for filename, document in (json_files or {}).items():
        target = install_dir / filename
        logger.info("Creating %s with %s credentials...", filename, name)
        write_json_atomic(target, document)
        written.append(str(target))

    logger.info("Building %s using uv...", name)
    result = uv.build(install_dir)
    if not result.ok:
        logger.error("Failed to build %s using uv", name)
        return Receipt.failure(
            step, error=result.describe_error(), metadata={"path": str(install_dir), "files": written}
        )

    logger.info("%s built successfully using uv", name)
    return Receipt.success(
        step, output=str(install_dir), metadata={"path": str(install_dir), "files": written}
    )


# ═══════════════════════════════════════════════════════════════════
#  Pipeline step
# ═══════════════════════════════════════════════════════════════════


def install_integration(ctx: ProvisionContext, integration: Integration) -> Receipt:
    """Install one catalog entry with the method it declares."""
    if integration.method == InstallMethod.PACKAGE:
        return install_package(ctx.npm, integration.package, integration.display_name)

    install_dir = integration.resolve_dir(ctx.home)
    if install_dir is None:
        return Receipt.failure(f"repository:{integration.display_name}", error="no install_dir")

    env_file = install_dir / integration.env_file if integration.env_file else None
    env_content = render_env_file(ctx.credentials.env(integration.env_keys))
    extra = EXTRA_FILES.get(integration.name)

    return install_repository(
        ctx.git,
        ctx.uv,
        integration.repo_url,
        install_dir,
        integration.display_name,
        env_file,
        env_content,
        touch_files=integration.touch_files,
        json_files=extra(ctx.credentials) if extra else None,
    )
