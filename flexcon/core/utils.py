"""Shared utility functions for flexcon."""

from typing import Any


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dicts. Override values take precedence.

    Merge rules:
    - Dicts are recursively merged
    - Lists are REPLACED (override wins completely)
    - Other values are overwritten

    A local ``startup_commands: []`` therefore clears the global list.

    Args:
        base: Base dictionary.
        override: Dictionary with values to overlay.

    Returns:
        New merged dictionary (original dicts not modified).
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def parse_address(address: str, default_port: int) -> tuple[str, int]:
    """Split ``host`` or ``host:port`` into a (host, port) pair.

    Bracketed IPv6 literals (``[::1]:4992``) are accepted.

    Raises:
        ValueError: If the port is not a number in 1..65535 or host is empty.
    """
    address = address.strip()
    host, port = address, default_port
    if address.startswith("["):
        end = address.find("]")
        if end == -1:
            raise ValueError(f"Unterminated IPv6 literal in {address!r}")
        host = address[1:end]
        rest = address[end + 1:]
        if rest:
            if not rest.startswith(":"):
                raise ValueError(f"Unexpected text after IPv6 literal in {address!r}")
            port = _parse_port(rest[1:], address)
    elif address.count(":") == 1:
        host, _, port_str = address.partition(":")
        port = _parse_port(port_str, address)
    if not host:
        raise ValueError(f"Missing host in {address!r}")
    return host, port


def _parse_port(value: str, address: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise ValueError(f"Invalid port in {address!r}") from None
    if not 0 < port < 65536:
        raise ValueError(f"Port out of range in {address!r}")
    return port
