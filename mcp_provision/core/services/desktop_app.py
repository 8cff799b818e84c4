"""
Desktop application installer — Claude Desktop from its disk image.

An installed bundle is only opened and quit again so that it runs its
own updater; nothing is downloaded. Otherwise the download page is
scraped for the first ``.dmg`` link and the bundle is copied out of the
mounted image. The image is not checksummed.
"""

from __future__ import annotations

import logging
import re
import shutil
import time
from pathlib import Path
from urllib.parse import urljoin

from mcp_provision.adapters.platform import http
from mcp_provision.core.context import ProvisionContext
from mcp_provision.core.models.action import Receipt

logger = logging.getLogger(__name__)

_DMG_LINK_RE = re.compile(r'href="([^"]*\.dmg)"')

STEP = "claude-desktop"


def find_dmg_link(page: str, base_url: str) -> str | None:
    """First ``href="...dmg"`` on the page, made absolute."""
    match = _DMG_LINK_RE.search(page)
    if not match:
        return None
    link = match.group(1)
    if link.startswith("http"):
        return link
    return urljoin(base_url, link)


def install_claude_desktop(ctx: ProvisionContext) -> Receipt:
    """Install Claude Desktop, or nudge an existing install to update."""
    settings = ctx.settings
    app_name = settings.claude_app_name
    app_path = settings.claude_app_path

    logger.info("Checking if Claude Desktop is already installed...")
    if app_path.is_dir():
        logger.info("Claude Desktop is already installed. Checking for updates...")
        ctx.macos.open_app(app_name)
        time.sleep(settings.update_check_delay)
        ctx.macos.quit_app(app_name)
        return Receipt.success(STEP, output="already installed", metadata={"path": str(app_path)})

    logger.info("Claude Desktop not found. Installing...")
    settings.download_dir.mkdir(parents=True, exist_ok=True)

    logger.info("Getting download link from Claude website...")
    try:
        page = http.fetch_text(settings.claude_download_url, timeout=settings.probe_timeout)
    except OSError as e:
        logger.error("Could not fetch %s: %s", settings.claude_download_url, e)
        page = ""

    link = find_dmg_link(page, settings.claude_download_url)
    if not link:
        logger.error("Could not find macOS download link for Claude Desktop")
        return Receipt.failure(STEP, error="no download link")
    logger.info("Found download link: %s", link)

    dmg_path = settings.download_dir / f"{app_name}.dmg"
    logger.info("Downloading Claude Desktop to %s...", dmg_path)
    try:
        http.download(link, dmg_path, timeout=settings.download_timeout)
    except OSError as e:
        logger.error("Download failed: %s", e)
    if not dmg_path.is_file():
        logger.error("Failed to download Claude Desktop DMG")
        return Receipt.failure(STEP, error="download produced no file")
    logger.info("Downloaded Claude Desktop successfully")

    logger.info("Mounting DMG file...")
    mount_point = ctx.macos.attach(str(dmg_path))
    if not mount_point:
        logger.error("Failed to mount Claude Desktop DMG")
        return Receipt.failure(STEP, error="no mount point")
    logger.info("DMG mounted at %s", mount_point)

    try:
        logger.info("Installing Claude Desktop to Applications folder...")
        _copy_bundle(Path(mount_point) / app_path.name, app_path)
    finally:
        logger.info("Unmounting DMG...")
        ctx.macos.detach(mount_point)
        logger.info("Cleaning up...")
        dmg_path.unlink(missing_ok=True)

    if app_path.is_dir():
        logger.info("Claude Desktop installed successfully")
        return Receipt.success(STEP, output="installed", metadata={"path": str(app_path)})

    logger.error("Failed to install Claude Desktop")
    return Receipt.failure(STEP, error="bundle missing after copy")


def _copy_bundle(source: Path, dest: Path) -> None:
    """Copy an application bundle, keeping its internal symlinks."""
    try:
        shutil.copytree(source, dest, symlinks=True, dirs_exist_ok=True)
    except OSError as e:
        logger.error("Could not copy %s: %s", source, e)
