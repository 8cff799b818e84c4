"""
Version comparison (pure).

Tool output is messy ("Python 3.12.8", "v23.11.0", "uv 0.6.3 (Homebrew)"),
so versions are pulled out with a regex first and then compared with
``packaging.version``. No I/O, no subprocess.
"""

from __future__ import annotations

import re

from packaging.version import InvalidVersion, Version

_VERSION_RE = re.compile(r"v?(\d+(?:\.\d+){0,2})")


def parse_version(text: str | None) -> Version | None:
    """Extract the first dotted version number from ``text``."""
    if not text:
        return None
    match = _VERSION_RE.search(text)
    if not match:
        return None
    try:
        return Version(match.group(1))
    except InvalidVersion:
        return None


def meets_minimum(installed: str | None, minimum: str) -> bool:
    """Whether ``installed`` is at least ``minimum``.

    An unparseable installed version never meets the minimum.
    """
    have = parse_version(installed)
    want = parse_version(minimum)
    if have is None or want is None:
        return False
    return have >= want


def major_of(text: str | None) -> int | None:
    version = parse_version(text)
    return version.major if version else None


def latest(versions: list[str]) -> str | None:
    """Return the highest version string, keeping its original spelling."""
    parsed = [(parse_version(v), v) for v in versions]
    valid = [(p, v) for p, v in parsed if p is not None]
    if not valid:
        return None
    return max(valid, key=lambda pair: pair[0])[1]
