"""
Shell profile editing — idempotent appends guarded by a marker.

A snippet is appended only when the profile does not already contain
its marker substring, so repeated runs never duplicate lines.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def profile_contains(profile: Path, marker: str) -> bool:
    try:
        return marker in profile.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return False


def ensure_snippet(
    profile: Path,
    marker: str,
    snippet: str,
    header: str = "",
) -> bool:
    """Append ``snippet`` to ``profile`` unless ``marker`` is present.

    A missing profile is created. When ``header`` is given it is
    written as a ``# header`` comment line before the snippet.

    Returns:
        True if the profile was changed.
    """
    if profile_contains(profile, marker):
        logger.debug("%s already contains %r", profile, marker)
        return False

    lines: list[str] = []
    if profile.exists():
        existing = profile.read_text(encoding="utf-8", errors="replace")
        if existing and not existing.endswith("\n"):
            lines.append("")
        lines.append("")
        logger.info("Adding %s to %s", header or "configuration", profile.name)
    else:
        profile.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Creating %s with %s", profile.name, header or "configuration")

    if header:
        lines.append(f"# {header}")
    lines.append(snippet.rstrip("\n"))

    with open(profile, "a", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")
    return True
