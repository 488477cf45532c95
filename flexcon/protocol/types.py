"""Event and response types exchanged between the radio client and the console.

All dataclasses are frozen; each instance is produced by the client, consumed
once by a relay or the command loop, then discarded.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from flexcon.core.channel import Channel


@dataclass(frozen=True)
class Message:
    """A free-form notice pushed by the radio.

    Attributes:
        text: The notice text, without the protocol prefix.
    """

    text: str


@dataclass(frozen=True)
class StateUpdate:
    """A snapshot of one object's attributes after a status line.

    Attributes:
        sender_handle: Handle of the client whose action caused the change.
        object: Object name, e.g. "slice 0" or "radio".
        current_state: All known attributes of the object after the change.
        updated: Keys that changed in this status line.

    Raises:
        ValueError: If updated names a key missing from current_state.
    """

    sender_handle: str
    object: str
    current_state: Mapping[str, str] = field(default_factory=dict, hash=False)
    updated: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        extra = set(self.updated) - set(self.current_state)
        if extra:
            raise ValueError(
                f"updated keys not in current_state for {self.object!r}: {sorted(extra)}"
            )
        # Freeze both collections so the snapshot can't change under the relay
        object.__setattr__(self, "current_state", MappingProxyType(dict(self.current_state)))
        object.__setattr__(self, "updated", frozenset(self.updated))


@dataclass(frozen=True)
class CommandResponse:
    """The radio's reply to one command.

    Attributes:
        serial: Serial of the command this replies to.
        error: Protocol error code; 0 means success.
        body: Optional reply payload.
    """

    serial: int
    error: int = 0
    body: str = ""

    @property
    def ok(self) -> bool:
        return self.error == 0


@dataclass(eq=False)
class Subscription:
    """A registered interest in state updates.

    Identity-compared: two subscriptions with the same prefix are distinct.

    Attributes:
        prefix: Object-name prefix to match; "" matches every object.
        channel: Where matching updates are delivered.
    """

    prefix: str
    channel: Channel[StateUpdate]

    def matches(self, object_name: str) -> bool:
        return object_name.startswith(self.prefix)
