"""Background relays draining radio events into the shared output.

Both relays register with the client in attach() and then run until their
channel is closed, which happens when the client closes. Closure is the
normal way for a relay to finish; nothing is raised.
"""

from __future__ import annotations

import logging

from flexcon.core.channel import Channel, OverflowPolicy
from flexcon.core.constants import UPDATE_QUEUE_SIZE
from flexcon.console.render import render_message, render_update
from flexcon.display.printer import LinePrinter
from flexcon.protocol.interfaces import ProtocolClient
from flexcon.protocol.types import Message, Subscription

logger = logging.getLogger(__name__)


class NotificationRelay:
    """Prints every radio notice as ``MSG <text>``.

    The message channel is unbounded, so notices are never dropped.
    """

    def __init__(self, client: ProtocolClient, printer: LinePrinter) -> None:
        self._client = client
        self._printer = printer
        self._channel: Channel[Message] | None = None
        self.rendered = 0

    def attach(self) -> Channel[Message]:
        """Hand the client a fresh message channel. Idempotent."""
        if self._channel is None:
            self._channel = Channel(name="messages")
            self._client.set_message_channel(self._channel)
        return self._channel

    async def run(self) -> None:
        channel = self.attach()
        async for message in channel:
            self._printer.print_line(render_message(message))
            self.rendered += 1
        logger.debug("Notification relay stopped after %d messages", self.rendered)


class StateUpdateRelay:
    """Prints every state update as ``UPD <handle> <object>: k=v ...``.

    Subscribes once with a prefix filter to a bounded channel. When the
    channel closes the relay unsubscribes before returning.
    """

    def __init__(
        self,
        client: ProtocolClient,
        printer: LinePrinter,
        prefix: str = "",
        capacity: int = UPDATE_QUEUE_SIZE,
        overflow: OverflowPolicy = "block",
    ) -> None:
        self._client = client
        self._printer = printer
        self._prefix = prefix
        self._capacity = capacity
        self._overflow = overflow
        self._subscription: Subscription | None = None
        self.rendered = 0

    @property
    def subscription(self) -> Subscription | None:
        return self._subscription

    def attach(self) -> Subscription:
        """Subscribe with the configured prefix. Idempotent."""
        if self._subscription is None:
            self._subscription = self._client.subscribe(
                self._prefix, capacity=self._capacity, overflow=self._overflow
            )
        return self._subscription

    async def run(self) -> None:
        subscription = self.attach()
        async for update in subscription.channel:
            self._printer.print_line(render_update(update))
            self.rendered += 1
        self._client.unsubscribe(subscription)
        if subscription.channel.dropped:
            logger.info("Dropped %d stale updates", subscription.channel.dropped)
        logger.debug("State update relay stopped after %d updates", self.rendered)
