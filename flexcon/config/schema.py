"""Pydantic models for flexcon configuration validation."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from flexcon.core.constants import DISCOVER, UPDATE_QUEUE_SIZE


class ConnectionConfig(BaseModel):
    """How to reach the radio.

    Example in config.json:
        "connection": {
            "radio": "192.168.1.50",
            "connect_timeout": 5.0
        }
    """

    model_config = ConfigDict(extra="forbid")

    radio: str = DISCOVER
    """Radio address as host or host:port, or ":discover:" to listen for one."""

    discovery_timeout: float = Field(default=10.0, gt=0)
    """Seconds to wait for a discovery broadcast."""

    connect_timeout: float = Field(default=10.0, gt=0)
    """Seconds to wait for the TCP connection to the radio."""

    @field_validator("radio")
    @classmethod
    def validate_radio(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("radio must not be empty (use ':discover:' to search)")
        return v


class ConsoleConfig(BaseModel):
    """Behaviour of the interactive console.

    Example in config.json:
        "console": {
            "startup_commands": ["sub slice all", "sub tx all"],
            "command_timeout": 30
        }
    """

    model_config = ConfigDict(extra="forbid")

    prompt: str = "flex"
    """Prompt label shown before "> "."""

    update_prefix: str = ""
    """Only render state updates for objects starting with this prefix."""

    update_queue_size: int = Field(default=UPDATE_QUEUE_SIZE, ge=1, le=10000)
    """Capacity of the state-update channel."""

    update_overflow: Literal["block", "drop_oldest"] = "block"
    """What happens when the update channel is full. "block" applies
    backpressure to the radio reader; "drop_oldest" discards stale updates."""

    command_timeout: float | None = Field(default=None, gt=0)
    """Seconds to wait for a command response. None waits indefinitely."""

    startup_commands: list[str] = ["sub slice all"]
    """Commands sent once the client is running, before the prompt appears."""


class Config(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="forbid")

    connection: ConnectionConfig = ConnectionConfig()
    console: ConsoleConfig = ConsoleConfig()

    theme: dict[str, str] = {}
    """Overrides for Theme style fields, e.g. {"alarm": "bold red"}."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    """Logging level for the flexcon namespace."""
