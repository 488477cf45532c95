"""Single, idempotent teardown shared by every termination trigger.

Two things can end a session: the user interrupting the process (SIGINT
while a command is in flight) and the command loop finishing. Both funnel
into shutdown(), and only the first call closes the client. Closing the
client closes its channels and fails pending commands, which unwinds the
relays, the command loop and the client's run() on their own.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from collections.abc import Callable
from types import FrameType

from flexcon.display.printer import LinePrinter
from flexcon.protocol.interfaces import ProtocolClient

logger = logging.getLogger(__name__)

EXIT_NOTICE = "Exit on SIGINT"


class ShutdownCoordinator:
    """Ties interrupts and input termination to one client close.

    Attributes:
        reason: Reason passed to the first shutdown() call, None before.
    """

    def __init__(
        self,
        client: ProtocolClient,
        printer: LinePrinter,
        sig: signal.Signals = signal.SIGINT,
    ) -> None:
        self._client = client
        self._printer = printer
        self._signal = sig
        self._loop: asyncio.AbstractEventLoop | None = None
        self._fallback = False
        self._fallback_previous: object = None
        self._installed = False
        self._interrupted = False
        self._callbacks: list[Callable[[], None]] = []
        self.reason: str | None = None

    @property
    def is_shutting_down(self) -> bool:
        return self.reason is not None

    def install(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Register the one-shot interrupt handler on the event loop."""
        if self._installed:
            return
        self._loop = loop or asyncio.get_running_loop()
        try:
            self._loop.add_signal_handler(self._signal, self._on_signal)
        except NotImplementedError:
            # Windows event loops have no add_signal_handler
            self._fallback_previous = signal.signal(self._signal, self._on_signal_threadsafe)
            self._fallback = True
        self._installed = True
        logger.debug("Interrupt handler installed for %s", self._signal.name)

    def uninstall(self) -> None:
        """Remove the interrupt handler. Safe to call when not installed."""
        if not self._installed or self._loop is None:
            return
        self._installed = False
        if self._fallback:
            signal.signal(self._signal, self._fallback_previous or signal.SIG_DFL)  # type: ignore[arg-type]
            self._fallback = False
        else:
            self._loop.remove_signal_handler(self._signal)

    def _on_signal_threadsafe(self, signum: int, frame: FrameType | None) -> None:
        if self._loop is None:
            return
        self._loop.call_soon_threadsafe(self._on_signal)

    def _on_signal(self) -> None:
        # One-shot: a second interrupt falls through to the default handler
        self.uninstall()
        self.interrupt()

    def interrupt(self) -> None:
        """Handle an external interrupt: print the exit notice and shut down."""
        if self._interrupted:
            return
        self._interrupted = True
        self._printer.print_notice(EXIT_NOTICE)
        self.shutdown("interrupt")

    def shutdown(self, reason: str) -> None:
        """Close the client once. Later calls are no-ops."""
        if self.reason is not None:
            logger.debug("Shutdown already requested (%s), ignoring %s", self.reason, reason)
            return
        self.reason = reason
        logger.info("Shutting down: %s", reason)
        self._client.close()
        for callback in self._callbacks:
            self._run_callback(callback)

    def on_shutdown(self, callback: Callable[[], None]) -> None:
        """Register a callback to run after the client is closed.

        If shutdown already happened, callback is invoked immediately.
        """
        self._callbacks.append(callback)
        if self.reason is not None:
            self._run_callback(callback)

    def _run_callback(self, callback: Callable[[], None]) -> None:
        try:
            callback()
        except Exception:
            # Remaining callbacks still run
            logger.exception("Shutdown callback %r failed", callback)
