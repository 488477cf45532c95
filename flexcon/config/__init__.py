"""Configuration loading and validation."""

from flexcon.config.loader import load_config
from flexcon.config.schema import Config, ConnectionConfig, ConsoleConfig

__all__ = [
    "Config",
    "ConnectionConfig",
    "ConsoleConfig",
    "load_config",
]
