"""Typed exception hierarchy for flexcon."""

from __future__ import annotations


class FlexconError(Exception):
    """Base class for all flexcon errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigError(FlexconError):
    """Raised for configuration issues (invalid JSON, validation failure)."""


class LoadError(FlexconError):
    """Raised when a config file cannot be found, read or parsed."""


class RadioConnectionError(FlexconError):
    """Raised when the radio cannot be discovered or connected to.

    This is the only fatal error: the console never starts without a client.
    """


class WireFormatError(FlexconError):
    """Raised for an inbound protocol line that cannot be parsed."""

    def __init__(self, line: str, reason: str) -> None:
        self.line = line
        self.reason = reason
        super().__init__(f"Malformed line {line!r}: {reason}")


class ClientClosedError(FlexconError):
    """Raised when a command is sent or pending while the client closes."""


class CommandTimeoutError(FlexconError):
    """Raised when a command's response does not arrive within its timeout."""

    def __init__(self, command: str, timeout: float) -> None:
        self.command = command
        self.timeout = timeout
        super().__init__(f"{command}: timed out after {timeout:g}s")
