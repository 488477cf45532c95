"""Core constants and paths for flexcon.

Single source of truth for global paths and protocol defaults.
"""

from pathlib import Path

FLEXCON_DIR_NAME = ".flexcon"

# Sentinel accepted by --radio meaning "find the radio on the LAN"
DISCOVER = ":discover:"

# TCP control port and UDP discovery port used by SmartSDR radios
DEFAULT_PORT = 4992
DISCOVERY_PORT = 4992

# Capacity of the state-update channel the console subscribes with
UPDATE_QUEUE_SIZE = 10


def get_flexcon_dir() -> Path:
    """Get ~/.flexcon (global config directory)."""
    return Path.home() / FLEXCON_DIR_NAME


def get_default_config_path() -> Path:
    """Get default config file path."""
    return get_flexcon_dir() / "config.json"
