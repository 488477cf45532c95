"""Radio protocol client: wire codec, discovery and the TCP client."""

from flexcon.protocol.flex import FlexClient
from flexcon.protocol.interfaces import ProtocolClient
from flexcon.protocol.types import CommandResponse, Message, StateUpdate, Subscription

__all__ = [
    "CommandResponse",
    "FlexClient",
    "Message",
    "ProtocolClient",
    "StateUpdate",
    "Subscription",
]
