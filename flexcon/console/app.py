"""Startup wiring: connect, start every task, and join them on the way out.

Task layout for one session:

    start()
    +-- client = await client_factory(address)     fatal on RadioConnectionError
    +-- NotificationRelay.run()    drains client messages
    +-- StateUpdateRelay.run()     drains client state updates
    +-- client.run()               reads the radio until closed
    +-- startup commands           e.g. "sub slice all"
    +-- ShutdownCoordinator        SIGINT -> client.close()
    +-- CommandLoop.run()          user input -> client -> output
    +-- join: client, command loop, both relays

client.close() is the only cancellation signal; every task observes it and
returns on its own.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from rich.console import Console

from flexcon.config.schema import Config, ConnectionConfig
from flexcon.core.errors import ClientClosedError, CommandTimeoutError
from flexcon.console.command_loop import CommandLoop, InputSource
from flexcon.console.relays import NotificationRelay, StateUpdateRelay
from flexcon.console.render import render_error, render_response
from flexcon.console.shutdown import ShutdownCoordinator
from flexcon.display.printer import LinePrinter
from flexcon.display.theme import load_theme
from flexcon.protocol.flex import FlexClient
from flexcon.protocol.interfaces import ProtocolClient

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str, ConnectionConfig], Awaitable[ProtocolClient]]


async def connect_flex_client(address: str, connection: ConnectionConfig) -> ProtocolClient:
    """Default client factory: a FlexClient over TCP."""
    return await FlexClient.connect(
        address,
        connect_timeout=connection.connect_timeout,
        discovery_timeout=connection.discovery_timeout,
    )


async def start(
    radio_address: str,
    output: Console,
    input_source: InputSource,
    *,
    config: Config | None = None,
    client_factory: ClientFactory | None = None,
) -> None:
    """Run one console session and return once every task has finished.

    Args:
        radio_address: "host", "host:port" or ":discover:".
        output: Console all lines are printed to.
        input_source: Where command lines are read from.
        config: Settings; defaults apply when None.
        client_factory: Builds the connected client. Defaults to FlexClient.

    Raises:
        RadioConnectionError: If the client can't be created. Nothing else
            has started at that point.
    """
    config = config or Config()
    factory = client_factory or connect_flex_client
    client = await factory(radio_address, config.connection)

    printer = LinePrinter(output, load_theme(config.theme))
    coordinator = ShutdownCoordinator(client, printer)

    notifications = NotificationRelay(client, printer)
    updates = StateUpdateRelay(
        client,
        printer,
        prefix=config.console.update_prefix,
        capacity=config.console.update_queue_size,
        overflow=config.console.update_overflow,
    )
    # Register before run() starts so nothing from the radio is missed
    notifications.attach()
    updates.attach()

    tasks: list[asyncio.Task[None]] = [
        asyncio.create_task(notifications.run(), name="notification-relay"),
        asyncio.create_task(updates.run(), name="state-update-relay"),
    ]
    client_task = asyncio.create_task(client.run(), name="client")
    tasks.append(client_task)
    # The radio hanging up ends the session the same way an interrupt does
    client_task.add_done_callback(lambda _: coordinator.shutdown("client stopped"))

    try:
        coordinator.install()
        connected = await _send_startup_commands(
            client, printer, config.console.startup_commands, config.console.command_timeout
        )
        if connected:
            loop = CommandLoop(
                client,
                printer,
                input_source,
                on_terminate=coordinator.shutdown,
                command_timeout=config.console.command_timeout,
            )
            coordinator.on_shutdown(loop.stop)
            loop_task = asyncio.create_task(loop.run(), name="command-loop")
            tasks.append(loop_task)
            await asyncio.gather(client_task, loop_task)
        else:
            await client_task
        # Relays finish once the client has closed their channels
        await asyncio.gather(*tasks)
    finally:
        coordinator.uninstall()
        coordinator.shutdown("exit")
        pending = [task for task in tasks if not task.done()]
        if pending:
            await asyncio.wait(pending)
    logger.info("Console stopped")


async def _send_startup_commands(
    client: ProtocolClient,
    printer: LinePrinter,
    commands: list[str],
    timeout: float | None,
) -> bool:
    """Send configured commands before the prompt appears.

    Returns:
        False if the client closed while sending, True otherwise.
    """
    for command in commands:
        try:
            response = await client.send_and_wait(command, timeout=timeout)
        except ClientClosedError as e:
            logger.warning("Startup command %r not sent: %s", command, e.message)
            return False
        except CommandTimeoutError as e:
            printer.print_line(render_error(e.message))
            continue
        logger.debug("Startup command %r -> %08X", command, response.error)
        if not response.ok:
            printer.print_line(render_response(response))
    return True
