"""Reading config layers from disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from flexcon.core.errors import LoadError

logger = logging.getLogger(__name__)


def read_json_object(path: Path, *, required: bool = True) -> dict[str, Any] | None:
    """Read a JSON file whose top level must be an object.

    Args:
        path: File to read. A UTF-8 BOM is tolerated.
        required: If False, a missing file returns None instead of raising.

    Returns:
        The parsed object; {} for a blank file; None for a missing
        optional file.

    Raises:
        LoadError: If the file is missing (when required), unreadable, not
            valid JSON, or holds something other than an object.
    """
    if not path.is_file():
        if required:
            raise LoadError(f"Config file not found: {path}")
        logger.debug("No config layer at %s", path)
        return None

    try:
        content = path.read_text(encoding="utf-8-sig").strip()
    except OSError as e:
        raise LoadError(f"Cannot read config file {path}: {e}") from e
    if not content:
        return {}

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise LoadError(f"Invalid JSON in {path} (line {e.lineno}): {e.msg}") from e

    if not isinstance(data, dict):
        raise LoadError(f"Expected object at top level of {path}, got {type(data).__name__}")
    logger.debug("Read config layer %s", path)
    return data
