"""Load flexcon settings from up to two JSON layers.

    ~/.flexcon/config.json        per-user defaults
    ./.flexcon/config.json        per-directory overrides (wins)

Nested objects merge key by key; lists such as ``startup_commands`` are
replaced whole. A missing layer is skipped. Any broken layer stops startup
with ConfigError rather than silently falling back to defaults.
"""

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from flexcon.config.load_utils import read_json_object
from flexcon.config.schema import Config
from flexcon.core.constants import FLEXCON_DIR_NAME, get_default_config_path
from flexcon.core.errors import ConfigError, LoadError
from flexcon.core.utils import deep_merge

logger = logging.getLogger(__name__)


def config_layers(cwd: Path | None = None, home_dir: Path | None = None) -> list[Path]:
    """Candidate config files, lowest precedence first, duplicates removed.

    Args:
        cwd: Directory holding the local ``.flexcon``. Defaults to Path.cwd().
        home_dir: Directory holding the user config.json. Defaults to ~/.flexcon.
    """
    user_layer = home_dir / "config.json" if home_dir else get_default_config_path()
    local_layer = (cwd or Path.cwd()) / FLEXCON_DIR_NAME / "config.json"
    # Running from $HOME makes both point at the same file
    if local_layer.resolve() == user_layer.resolve():
        return [user_layer]
    return [user_layer, local_layer]


def load_config(
    path: Path | None = None,
    cwd: Path | None = None,
    home_dir: Path | None = None,
) -> Config:
    """Build the effective Config.

    Args:
        path: Read only this file instead of the layers.
        cwd: See config_layers().
        home_dir: See config_layers().

    Raises:
        ConfigError: If a file can't be read or parsed, or the merged
            settings don't validate.
    """
    if path is not None:
        return _validate(_read(path, required=True), str(path))

    merged: dict[str, Any] = {}
    sources: list[str] = []
    for layer in config_layers(cwd, home_dir):
        data = _read(layer, required=False)
        if data:
            merged = deep_merge(merged, data)
            sources.append(str(layer))

    if not sources:
        logger.debug("No config layers found, using defaults")
        return Config()
    logger.info("Config layers: %s", ", ".join(sources))
    return _validate(merged, " + ".join(sources))


def _read(path: Path, required: bool) -> dict[str, Any] | None:
    try:
        return read_json_object(path, required=required)
    except LoadError as e:
        raise ConfigError(e.message) from e


def _validate(data: dict[str, Any] | None, source: str) -> Config:
    try:
        return Config.model_validate(data or {})
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {source}: {e}") from e
