"""Asyncio TCP client for SmartSDR-style radios.

FlexClient implements ProtocolClient over the text protocol in wire.py. It
keeps a per-object attribute map so every StateUpdate carries the object's
full known state, not only the keys in the latest status line.

Example:
    client = await FlexClient.connect("192.168.1.50")
    run_task = asyncio.create_task(client.run())
    response = await client.send_and_wait("info")
    client.close()
    await run_task
"""

from __future__ import annotations

import asyncio
import logging

from flexcon.core.channel import Channel, ChannelClosedError, OverflowPolicy
from flexcon.core.constants import DEFAULT_PORT, DISCOVER
from flexcon.core.errors import (
    ClientClosedError,
    CommandTimeoutError,
    RadioConnectionError,
    WireFormatError,
)
from flexcon.core.utils import parse_address
from flexcon.protocol.discovery import discover
from flexcon.protocol.types import CommandResponse, Message, StateUpdate, Subscription
from flexcon.protocol.wire import (
    Handle,
    Notice,
    Reply,
    Status,
    Version,
    decode_line,
    encode_command,
    parse_line,
)

logger = logging.getLogger(__name__)

# Status lines for large objects (e.g. "info") can be long
STREAM_LIMIT = 1024 * 1024


class FlexClient:
    """A connected radio control session.

    Attributes:
        address: "host:port" of the radio.
        version: Protocol version announced by the radio.
        handle: Handle the radio assigned to this client.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        address: str = "",
    ) -> None:
        self.address = address
        self.version = ""
        self.handle = ""
        self._reader = reader
        self._writer = writer
        self._serial = 0
        self._pending: dict[int, asyncio.Future[CommandResponse]] = {}
        self._state: dict[str, dict[str, str]] = {}
        self._subscriptions: list[Subscription] = []
        self._messages: Channel[Message] | None = None
        self._closed = False

    @classmethod
    async def connect(
        cls,
        address: str,
        connect_timeout: float = 10.0,
        discovery_timeout: float = 10.0,
    ) -> FlexClient:
        """Resolve address and open the control connection.

        Args:
            address: "host", "host:port", or ":discover:" to wait for a
                discovery broadcast.
            connect_timeout: Seconds allowed for the TCP connect.
            discovery_timeout: Seconds to listen for a broadcast.

        Raises:
            RadioConnectionError: If the radio can't be found or reached.
        """
        if address == DISCOVER:
            info = await discover(timeout=discovery_timeout)
            host, port = info.ip, info.port
        else:
            try:
                host, port = parse_address(address, DEFAULT_PORT)
            except ValueError as e:
                raise RadioConnectionError(f"Invalid radio address: {e}") from e

        logger.info("Connecting to radio at %s:%d", host, port)
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port, limit=STREAM_LIMIT),
                timeout=connect_timeout,
            )
        except asyncio.TimeoutError:
            raise RadioConnectionError(
                f"Timed out connecting to {host}:{port} after {connect_timeout:g}s"
            ) from None
        except OSError as e:
            raise RadioConnectionError(f"Cannot connect to {host}:{port}: {e}") from e

        return cls(reader, writer, address=f"{host}:{port}")

    @property
    def closed(self) -> bool:
        return self._closed

    def get_state(self, object_name: str) -> dict[str, str]:
        """Return a copy of the known attributes of an object."""
        return dict(self._state.get(object_name, {}))

    # --- subscriptions -------------------------------------------------------

    def subscribe(
        self,
        prefix: str,
        capacity: int | None = None,
        overflow: OverflowPolicy = "block",
    ) -> Subscription:
        channel: Channel[StateUpdate] = Channel(
            capacity=capacity, overflow=overflow, name=f"updates:{prefix or '*'}"
        )
        subscription = Subscription(prefix=prefix, channel=channel)
        if self._closed:
            channel.close()
        else:
            self._subscriptions.append(subscription)
            logger.debug("Subscribed to %r", prefix)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            return
        subscription.channel.close()
        logger.debug("Unsubscribed from %r", subscription.prefix)

    def set_message_channel(self, channel: Channel[Message]) -> None:
        if self._closed:
            channel.close()
            return
        self._messages = channel

    # --- commands ------------------------------------------------------------

    async def send_and_wait(
        self, command: str, timeout: float | None = None
    ) -> CommandResponse:
        """Send a command and wait for the reply with the same serial.

        Args:
            command: Command text, a single line.
            timeout: Seconds to wait for the reply, or None to wait until
                the reply arrives or the client closes.

        Raises:
            ClientClosedError: If the client is closed before the reply.
            CommandTimeoutError: If timeout expires first.
            ValueError: If command contains a line break or non-ASCII text;
                nothing is sent.
        """
        if self._closed:
            raise ClientClosedError("Client is closed")

        data = encode_command(self._serial + 1, command)
        self._serial += 1
        serial = self._serial
        future: asyncio.Future[CommandResponse] = asyncio.get_running_loop().create_future()
        self._pending[serial] = future
        logger.debug("-> C%d|%s", serial, command)

        try:
            try:
                self._writer.write(data)
                await self._writer.drain()
            except OSError as e:
                self.close()
                raise ClientClosedError(f"Connection lost sending command {serial}: {e}") from e

            if timeout is None:
                return await future
            try:
                return await asyncio.wait_for(future, timeout=timeout)
            except asyncio.TimeoutError:
                raise CommandTimeoutError(command, timeout) from None
        finally:
            self._pending.pop(serial, None)

    # --- main loop -----------------------------------------------------------

    async def run(self) -> None:
        """Read and dispatch radio traffic until closed or disconnected."""
        logger.info("Client running for %s", self.address)
        try:
            while not self._closed:
                raw = await self._reader.readline()
                if not raw:
                    if not self._closed:
                        logger.warning("Radio closed the connection")
                    break
                await self._dispatch(decode_line(raw))
        except OSError as e:
            if not self._closed:
                logger.warning("Connection lost: %s", e)
        finally:
            self.close()
            try:
                await self._writer.wait_closed()
            except OSError as e:
                logger.debug("Error while closing connection: %s", e)
        logger.info("Client stopped")

    def close(self) -> None:
        """Tear down the session. Only the first call has any effect.

        Fails pending commands with ClientClosedError, closes the message
        channel and every subscription channel, and makes run() return.
        """
        if self._closed:
            return
        self._closed = True
        logger.info("Closing connection to %s", self.address)

        self._writer.close()

        for serial, future in self._pending.items():
            if not future.done():
                future.set_exception(
                    ClientClosedError(f"Client closed before reply to command {serial}")
                )
        self._pending.clear()

        if self._messages is not None:
            self._messages.close()
            self._messages = None

        for subscription in self._subscriptions:
            subscription.channel.close()
        self._subscriptions.clear()

    # --- inbound -------------------------------------------------------------

    async def _dispatch(self, line: str) -> None:
        try:
            parsed = parse_line(line)
        except WireFormatError as e:
            logger.warning("%s", e.message)
            return

        if isinstance(parsed, Reply):
            self._resolve(parsed)
        elif isinstance(parsed, Status):
            await self._apply_status(parsed)
        elif isinstance(parsed, Notice):
            await self._deliver_message(parsed)
        elif isinstance(parsed, Version):
            self.version = parsed.version
            logger.info("Radio protocol version %s", parsed.version)
        elif isinstance(parsed, Handle):
            self.handle = parsed.handle
            logger.info("Assigned client handle %s", parsed.handle)

    def _resolve(self, reply: Reply) -> None:
        future = self._pending.get(reply.serial)
        if future is None or future.done():
            logger.debug("Reply for unknown or abandoned command %d", reply.serial)
            return
        future.set_result(
            CommandResponse(serial=reply.serial, error=reply.error, body=reply.body)
        )

    async def _apply_status(self, status: Status) -> None:
        if status.removed:
            self._state.pop(status.object, None)
            current: dict[str, str] = {}
            updated: frozenset[str] = frozenset()
        else:
            state = self._state.setdefault(status.object, {})
            state.update(status.pairs)
            current = dict(state)
            updated = frozenset(status.pairs)

        update = StateUpdate(
            sender_handle=status.handle,
            object=status.object,
            current_state=current,
            updated=updated,
        )
        for subscription in list(self._subscriptions):
            if not subscription.matches(status.object):
                continue
            try:
                await subscription.channel.send(update)
            except ChannelClosedError:
                self.unsubscribe(subscription)

    async def _deliver_message(self, notice: Notice) -> None:
        if self._messages is None:
            logger.debug("No message channel, dropping: %s", notice.text)
            return
        try:
            await self._messages.send(Message(text=notice.text))
        except ChannelClosedError:
            self._messages = None
