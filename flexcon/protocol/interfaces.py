"""The radio client interface the console depends on.

The console only ever talks to a ProtocolClient. FlexClient is the TCP
implementation; tests use an in-memory fake with the same shape.
"""

from typing import Protocol

from flexcon.core.channel import Channel, OverflowPolicy
from flexcon.protocol.types import CommandResponse, Message, Subscription


class ProtocolClient(Protocol):
    """Structural interface for a connected radio client.

    Lifecycle:
        client = await SomeClient.connect(address)
        run_task = asyncio.create_task(client.run())
        ...
        client.close()      # from any task, any number of times
        await run_task      # returns once closed

    close() must close the message channel and every subscription channel,
    and fail any pending send_and_wait() with ClientClosedError.
    """

    def subscribe(
        self,
        prefix: str,
        capacity: int | None = None,
        overflow: OverflowPolicy = "block",
    ) -> Subscription:
        """Register for state updates on objects starting with prefix.

        Args:
            prefix: Object-name prefix; "" matches every object.
            capacity: Bound for the subscription's channel, None for unbounded.
            overflow: Channel policy when full, see Channel.
        """
        ...

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscription and close its channel. No-op if already removed."""
        ...

    def set_message_channel(self, channel: Channel[Message]) -> None:
        """Deliver notices to channel from now on."""
        ...

    async def send_and_wait(
        self, command: str, timeout: float | None = None
    ) -> CommandResponse:
        """Send a command and wait for its correlated response.

        Raises:
            ClientClosedError: If the client is or becomes closed.
            CommandTimeoutError: If timeout is set and expires.
            ValueError: If the command can't be put on the wire; nothing
                is sent.
        """
        ...

    async def run(self) -> None:
        """Process inbound traffic until the client is closed."""
        ...

    def close(self) -> None:
        """Tear down the client. Idempotent."""
        ...
