"""Closable async channels.

asyncio.Queue has no notion of "closed", so consumers blocked in ``get()``
would wait forever once the producer goes away. ``Channel`` wraps a queue and
a private sentinel so that closing wakes the receiver, and iteration ends
cleanly once everything queued before the close has been delivered.

Example:
    channel: Channel[Message] = Channel()

    async def relay() -> None:
        async for message in channel:
            print(message.text)
        # loop exits once channel.close() is called and the queue drains

    await channel.send(Message("hello"))
    channel.close()
"""

from __future__ import annotations

import asyncio
import logging
from typing import Generic, Literal, TypeVar

from flexcon.core.errors import FlexconError

logger = logging.getLogger(__name__)

T = TypeVar("T")

OverflowPolicy = Literal["block", "drop_oldest"]

_CLOSED = object()


class ChannelClosedError(FlexconError):
    """Raised by send() after close, and by receive() once closed and drained."""

    def __init__(self, name: str = "") -> None:
        label = f"Channel {name!r}" if name else "Channel"
        super().__init__(f"{label} is closed")


class Channel(Generic[T]):
    """A FIFO channel that can be closed by its producer.

    Attributes:
        name: Label used in log and error messages.
        dropped: Number of items discarded by the drop_oldest policy.
    """

    def __init__(
        self,
        capacity: int | None = None,
        overflow: OverflowPolicy = "block",
        name: str = "",
    ) -> None:
        """Initialize the channel.

        Args:
            capacity: Maximum queued items, or None for unbounded.
            overflow: What send() does when the channel is full. "block"
                waits for the receiver (no loss); "drop_oldest" discards the
                oldest queued item and never waits.
            name: Label used in log and error messages.

        Raises:
            ValueError: If capacity is below 1 or overflow is unknown.
        """
        if capacity is not None and capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        if overflow not in ("block", "drop_oldest"):
            raise ValueError(f"Unknown overflow policy: {overflow!r}")
        self.name = name
        self.dropped = 0
        self._capacity = capacity
        self._overflow = overflow
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=capacity or 0)
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether close() has been called."""
        return self._closed

    @property
    def capacity(self) -> int | None:
        return self._capacity

    def qsize(self) -> int:
        """Number of items waiting to be received."""
        return self._queue.qsize()

    async def send(self, item: T) -> None:
        """Queue an item for the receiver.

        Raises:
            ChannelClosedError: If the channel has been closed.
        """
        if self._closed:
            raise ChannelClosedError(self.name)
        if self._overflow == "drop_oldest":
            while self._queue.full():
                self._queue.get_nowait()
                self.dropped += 1
                logger.debug("Channel %r full, dropped oldest item", self.name)
            self._queue.put_nowait(item)
            return
        await self._queue.put(item)

    def close(self) -> None:
        """Close the channel. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        try:
            self._queue.put_nowait(_CLOSED)
        except asyncio.QueueFull:
            # Receiver is not blocked; it sees the flag once the queue drains
            pass

    async def receive(self) -> T:
        """Wait for the next item.

        Raises:
            ChannelClosedError: Once the channel is closed and drained.
        """
        if self._closed and self._queue.empty():
            raise ChannelClosedError(self.name)
        item = await self._queue.get()
        if item is _CLOSED:
            raise ChannelClosedError(self.name)
        return item  # type: ignore[return-value]

    def __aiter__(self) -> Channel[T]:
        return self

    async def __anext__(self) -> T:
        try:
            return await self.receive()
        except ChannelClosedError:
            raise StopAsyncIteration from None
