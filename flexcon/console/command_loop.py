"""Read commands from the user and print the radio's replies.

The loop runs one command at a time: it reads a line, sends it, waits for
the correlated response and prints ``RES <serial> <error>``. When the input
ends (EOF, Ctrl+C at the prompt, or a read failure) or the client goes away,
the loop asks for shutdown and returns.
"""

from __future__ import annotations

import asyncio
import html
import logging
from collections.abc import Callable
from enum import Enum
from typing import Protocol

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.input import Input
from prompt_toolkit.output import Output
from prompt_toolkit.styles import Style

from flexcon.core.errors import ClientClosedError, CommandTimeoutError
from flexcon.console.render import render_error, render_response
from flexcon.display.printer import LinePrinter
from flexcon.protocol.interfaces import ProtocolClient

logger = logging.getLogger(__name__)


class LoopState(Enum):
    AWAITING_LINE = "awaiting_line"
    SENDING = "sending"
    AWAITING_RESPONSE = "awaiting_response"
    TERMINATED = "terminated"


class InputSource(Protocol):
    """Where command lines come from.

    read_line() raises EOFError when input ends. KeyboardInterrupt and
    OSError are treated the same way by the loop.
    """

    async def read_line(self) -> str:
        ...


class PromptInput:
    """Interactive line input using prompt_toolkit.

    Shows ``<label>> `` with the label styled, and keeps in-session history.
    """

    def __init__(
        self,
        label: str = "flex",
        style: str = "ansibrightmagenta",
        input: Input | None = None,
        output: Output | None = None,
    ) -> None:
        """Initialize the prompt.

        Args:
            label: Text shown before "> ".
            style: prompt_toolkit style for the label.
            input: Terminal input; the real terminal when None.
            output: Terminal output; the real terminal when None.
        """
        self._message = HTML(f"<prompt>{html.escape(label)}</prompt>> ")
        self._session: PromptSession[str] = PromptSession(
            style=Style.from_dict({"prompt": style}),
            input=input,
            output=output,
        )

    async def read_line(self) -> str:
        # SIGINT stays with the ShutdownCoordinator; Ctrl+C at the prompt
        # still arrives as a key and raises KeyboardInterrupt
        return await self._session.prompt_async(self._message, handle_sigint=False)


class CommandLoop:
    """Synchronous command cycle against the radio.

    Attributes:
        commands_sent: Number of commands handed to the client.
        reason: Why the loop terminated, once it has.
    """

    def __init__(
        self,
        client: ProtocolClient,
        printer: LinePrinter,
        input_source: InputSource,
        on_terminate: Callable[[str], None],
        command_timeout: float | None = None,
    ) -> None:
        """Initialize the loop.

        Args:
            client: Radio client commands are sent through.
            printer: Output for response lines.
            input_source: Source of command lines.
            on_terminate: Called once with a reason when the loop ends;
                expected to close the client.
            command_timeout: Seconds to wait per command, None for no limit.
        """
        self._client = client
        self._printer = printer
        self._input = input_source
        self._on_terminate = on_terminate
        self._timeout = command_timeout
        self._state = LoopState.AWAITING_LINE
        self.commands_sent = 0
        self.reason: str | None = None
        self._stopped = asyncio.Event()

    @property
    def state(self) -> LoopState:
        return self._state

    def stop(self) -> None:
        """Ask the loop to finish without waiting for another input line.

        A command already awaiting its response is not interrupted; closing
        the client is what unblocks it.
        """
        self._stopped.set()

    async def run(self) -> None:
        reason: str | None = None
        while reason is None:
            self._state = LoopState.AWAITING_LINE
            try:
                line = await self._read_line()
            except (EOFError, KeyboardInterrupt):
                reason = "end of input"
                break
            except OSError as e:
                logger.warning("Input read failed: %s", e)
                reason = "input error"
                break
            if line is None:
                reason = "stopped"
                break

            # A pasted block arrives as one string; run it one line at a time
            for part in line.splitlines():
                command = part.strip()
                if command and not await self._execute(command):
                    reason = "client closed"
                    break

        self._state = LoopState.TERMINATED
        self.reason = reason
        logger.debug("Command loop terminated: %s", reason)
        self._on_terminate(reason)

    async def _execute(self, command: str) -> bool:
        """Send one command and print its outcome.

        Returns:
            False if the client closed before replying, True otherwise.
        """
        self._state = LoopState.SENDING
        call = self._client.send_and_wait(command, timeout=self._timeout)
        self.commands_sent += 1
        self._state = LoopState.AWAITING_RESPONSE
        try:
            response = await call
        except ClientClosedError as e:
            logger.info("%s", e.message)
            return False
        except CommandTimeoutError as e:
            self._printer.print_line(render_error(e.message))
            return True
        except ValueError as e:
            # Rejected by the client before anything was written
            self._printer.print_line(render_error(f"{command}: {e}"))
            return True

        if not response.ok:
            logger.debug("Command %r failed with %08X", command, response.error)
        self._printer.print_line(render_response(response))
        return True

    async def _read_line(self) -> str | None:
        """Read one line, or return None if stop() is called first."""
        if self._stopped.is_set():
            return None
        read = asyncio.ensure_future(self._input.read_line())
        stop = asyncio.ensure_future(self._stopped.wait())
        try:
            done, _ = await asyncio.wait({read, stop}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            stop.cancel()
            if not read.done():
                read.cancel()

        if read in done:
            return read.result()
        try:
            await read
        except asyncio.CancelledError:
            pass  # Abandoned prompt
        return None
