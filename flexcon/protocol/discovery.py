"""Find a radio on the local network from its discovery broadcast.

Radios announce themselves with a VITA-49 packet on UDP port 4992. The
payload following the fixed header is a space separated list of
``key=value`` words (``ip=... port=... model=... serial=... nickname=...``).
"""

from __future__ import annotations

import asyncio
import logging
import socket
from dataclasses import dataclass

from flexcon.core.constants import DEFAULT_PORT, DISCOVERY_PORT
from flexcon.core.encoding import decode_wire
from flexcon.core.errors import RadioConnectionError

logger = logging.getLogger(__name__)

# Header + stream id + class id + integer and fractional timestamps
VITA_HEADER_SIZE = 28


@dataclass(frozen=True)
class RadioInfo:
    ip: str
    port: int = DEFAULT_PORT
    model: str = ""
    serial: str = ""
    nickname: str = ""

    @property
    def address(self) -> str:
        return f"{self.ip}:{self.port}"


def parse_discovery_packet(data: bytes) -> RadioInfo | None:
    """Extract radio details from a discovery datagram.

    Returns:
        RadioInfo, or None if the packet is too short or carries no ip.
    """
    if len(data) <= VITA_HEADER_SIZE:
        return None
    payload = decode_wire(data[VITA_HEADER_SIZE:])
    fields: dict[str, str] = {}
    for word in payload.replace("\x00", " ").split():
        key, sep, value = word.partition("=")
        if sep:
            fields[key] = value

    ip = fields.get("ip")
    if not ip:
        return None
    try:
        port = int(fields.get("port", DEFAULT_PORT))
    except ValueError:
        port = DEFAULT_PORT
    return RadioInfo(
        ip=ip,
        port=port,
        model=fields.get("model", ""),
        serial=fields.get("serial", ""),
        nickname=fields.get("nickname", "").replace("_", " "),
    )


class _DiscoveryProtocol(asyncio.DatagramProtocol):
    def __init__(self, found: asyncio.Future[RadioInfo]) -> None:
        self._found = found

    def datagram_received(self, data: bytes, addr: tuple[str, int]) -> None:
        info = parse_discovery_packet(data)
        if info is None:
            logger.debug("Ignoring discovery packet from %s", addr[0])
            return
        if not self._found.done():
            self._found.set_result(info)

    def error_received(self, exc: Exception) -> None:
        logger.debug("Discovery socket error: %s", exc)


async def discover(
    timeout: float = 10.0,
    port: int = DISCOVERY_PORT,
    host: str = "0.0.0.0",
) -> RadioInfo:
    """Wait for the first radio discovery broadcast.

    Args:
        timeout: Seconds to listen before giving up.
        port: UDP port to listen on.
        host: Local address to bind.

    Raises:
        RadioConnectionError: If the socket can't be bound or no radio answers.
    """
    loop = asyncio.get_running_loop()
    found: asyncio.Future[RadioInfo] = loop.create_future()
    try:
        transport, _ = await loop.create_datagram_endpoint(
            lambda: _DiscoveryProtocol(found),
            local_addr=(host, port),
            reuse_port=True if hasattr(socket, "SO_REUSEPORT") else None,
        )
    except OSError as e:
        raise RadioConnectionError(f"Cannot listen for discovery on UDP {port}: {e}") from e

    logger.info("Listening for radio discovery on UDP %d", port)
    try:
        info = await asyncio.wait_for(found, timeout=timeout)
    except asyncio.TimeoutError:
        raise RadioConnectionError(
            f"No radio discovered within {timeout:g}s"
        ) from None
    finally:
        transport.close()

    logger.info("Discovered %s %s at %s", info.model, info.nickname, info.address)
    return info
