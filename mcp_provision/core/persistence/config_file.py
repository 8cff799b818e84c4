"""
Config file persistence — atomic writes for generated files.

Generated documents are replaced wholesale on every run. Writes go to a
temp file in the same directory and are renamed over the target, so a
crash never leaves a half-written document behind.
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def write_text_atomic(path: Path, content: str) -> None:
    """Replace ``path`` with ``content`` (atomic write).

    Creates parent directories as needed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    _fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}_",
        suffix=".tmp",
    )
    tmp = Path(tmp_path)
    try:
        with open(_fd, "w", encoding="utf-8") as f:
            f.write(content)
        tmp.replace(path)
        logger.debug("Wrote %s", path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise


def write_json_atomic(path: Path, data: Any) -> None:
    """Serialize ``data`` as indented JSON and replace ``path`` with it."""
    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    write_text_atomic(path, content)
