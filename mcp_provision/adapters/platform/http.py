"""
HTTP helpers — page fetch and file download over urllib.
"""

from __future__ import annotations

import logging
import shutil
import urllib.request
from pathlib import Path

logger = logging.getLogger(__name__)

USER_AGENT = "mcp-provision/1.0"


def fetch_text(url: str, timeout: int = 30) -> str:
    """GET ``url`` and return the body decoded as UTF-8.

    Raises:
        OSError: On any network or HTTP error (``URLError`` is an OSError).
    """
    req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    with urllib.request.urlopen(req, timeout=timeout) as resp:
        charset = resp.headers.get_content_charset() or "utf-8"
        return resp.read().decode(charset, errors="replace")


def download(url: str, dest: Path, timeout: int = 300) -> Path:
    """Stream ``url`` into ``dest`` (redirects followed).

    Raises:
        OSError: On any network, HTTP or filesystem error.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    logger.debug("Downloading %s → %s", url, dest)
    with urllib.request.urlopen(req, timeout=timeout) as resp, open(dest, "wb") as f:
        shutil.copyfileobj(resp, f)
    return dest
