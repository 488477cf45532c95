"""Shared pytest fixtures and configuration for pytest."""

from __future__ import annotations

import asyncio
import io
import sys
from collections.abc import Iterable

import pytest
from rich.console import Console

from flexcon.core.channel import Channel, OverflowPolicy
from flexcon.core.errors import ClientClosedError, CommandTimeoutError
from flexcon.display.printer import LinePrinter
from flexcon.display.theme import Theme
from flexcon.protocol.types import CommandResponse, Message, StateUpdate, Subscription


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for platform-specific tests."""
    config.addinivalue_line("markers", "unix_only: mark test to run only on Unix")


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Auto-skip tests based on platform markers."""
    skip_unix = pytest.mark.skip(reason="Unix-only test")

    for item in items:
        if "unix_only" in item.keywords and sys.platform == "win32":
            item.add_marker(skip_unix)


class FakeClient:
    """In-memory ProtocolClient.

    Commands listed in ``hang`` never get a reply; they stay pending until
    the client is closed (or their timeout expires). ``error_codes`` maps a
    command to the error code of its reply.
    """

    def __init__(self) -> None:
        self.sent: list[str] = []
        self.error_codes: dict[str, int] = {}
        self.hang: set[str] = set()
        self.subscriptions: list[Subscription] = []
        self.unsubscribed: list[Subscription] = []
        self.message_channel: Channel[Message] | None = None
        self.closed = False
        self.close_calls = 0
        self.teardowns = 0
        self.command_pending = asyncio.Event()
        self._pending: list[asyncio.Future[CommandResponse]] = []
        self._stopped = asyncio.Event()

    def subscribe(
        self,
        prefix: str,
        capacity: int | None = None,
        overflow: OverflowPolicy = "block",
    ) -> Subscription:
        channel: Channel[StateUpdate] = Channel(capacity=capacity, overflow=overflow)
        subscription = Subscription(prefix=prefix, channel=channel)
        if self.closed:
            channel.close()
        else:
            self.subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        self.unsubscribed.append(subscription)
        if subscription in self.subscriptions:
            self.subscriptions.remove(subscription)
            subscription.channel.close()

    def set_message_channel(self, channel: Channel[Message]) -> None:
        self.message_channel = channel
        if self.closed:
            channel.close()

    async def send_and_wait(
        self, command: str, timeout: float | None = None
    ) -> CommandResponse:
        if self.closed:
            raise ClientClosedError("Client is closed")
        self.sent.append(command)
        serial = len(self.sent)
        if command in self.hang:
            future: asyncio.Future[CommandResponse] = (
                asyncio.get_running_loop().create_future()
            )
            self._pending.append(future)
            self.command_pending.set()
            if timeout is None:
                return await future
            try:
                return await asyncio.wait_for(future, timeout=timeout)
            except asyncio.TimeoutError:
                raise CommandTimeoutError(command, timeout) from None
        return CommandResponse(serial=serial, error=self.error_codes.get(command, 0))

    async def run(self) -> None:
        await self._stopped.wait()

    def close(self) -> None:
        self.close_calls += 1
        if self.closed:
            return
        self.closed = True
        self.teardowns += 1
        for future in self._pending:
            if not future.done():
                future.set_exception(ClientClosedError("Client closed before reply"))
        if self.message_channel is not None:
            self.message_channel.close()
        for subscription in self.subscriptions:
            subscription.channel.close()
        self.subscriptions.clear()
        self._stopped.set()

    async def push_message(self, text: str) -> None:
        assert self.message_channel is not None
        await self.message_channel.send(Message(text))

    async def push_update(self, update: StateUpdate) -> None:
        for subscription in list(self.subscriptions):
            if subscription.matches(update.object):
                await subscription.channel.send(update)


class ScriptedInput:
    """InputSource returning canned lines, then raising EOFError.

    An exception instance in ``lines`` is raised in place of a line. With
    ``block_at_end`` the source waits forever instead of raising EOFError,
    like a user sitting at the prompt.
    """

    def __init__(self, lines: Iterable[str | BaseException], block_at_end: bool = False) -> None:
        self._lines = list(lines)
        self._block_at_end = block_at_end
        self.reads = 0
        self.waiting = asyncio.Event()

    async def read_line(self) -> str:
        await asyncio.sleep(0)
        self.reads += 1
        if self._lines:
            item = self._lines.pop(0)
            if isinstance(item, BaseException):
                raise item
            return item
        if self._block_at_end:
            self.waiting.set()
            await asyncio.Event().wait()
        raise EOFError


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def scripted_input():
    """Factory fixture: scripted_input(["line", ...], block_at_end=False)."""
    return ScriptedInput


@pytest.fixture
def output() -> Console:
    """A plain-text console writing to a StringIO buffer."""
    return Console(
        file=io.StringIO(),
        force_terminal=False,
        color_system=None,
        width=200,
        highlight=False,
        markup=False,
    )


@pytest.fixture
def printer(output: Console) -> LinePrinter:
    return LinePrinter(output, Theme())


def output_lines(console: Console) -> list[str]:
    """Lines written so far to an ``output`` fixture console."""
    assert isinstance(console.file, io.StringIO)
    return console.file.getvalue().splitlines()


@pytest.fixture
def read_output():
    """Return a function giving the lines printed to a console fixture."""
    return output_lines
