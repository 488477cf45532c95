"""Line codec for the SmartSDR text control protocol.

Every line starts with a one-letter type:

    C<serial>|<command>            client -> radio command
    R<serial>|<hex error>[|<body>] reply to a command
    S<handle>|<object> k=v k=v ... status (state delta)
    M<hex number>|<text>           free-form message
    V<version>                     protocol version, sent once on connect
    H<handle>                      this client's handle, sent once on connect
"""

from __future__ import annotations

from dataclasses import dataclass, field

from flexcon.core.encoding import decode_wire, encode_wire
from flexcon.core.errors import WireFormatError

# Trailing object word marking an object that no longer exists
REMOVED = "removed"


@dataclass(frozen=True)
class Reply:
    serial: int
    error: int
    body: str = ""


@dataclass(frozen=True)
class Status:
    """A parsed status line.

    Attributes:
        handle: Handle of the client that caused the change.
        object: Leading words of the payload that contain no "=".
        pairs: Attribute assignments in line order.
        removed: True if the object words ended in "removed".
    """

    handle: str
    object: str
    pairs: dict[str, str] = field(default_factory=dict, hash=False)
    removed: bool = False


@dataclass(frozen=True)
class Notice:
    number: int
    text: str


@dataclass(frozen=True)
class Version:
    version: str


@dataclass(frozen=True)
class Handle:
    handle: str


InboundLine = Reply | Status | Notice | Version | Handle


def encode_command(serial: int, command: str) -> bytes:
    """Encode a command line for the wire.

    Raises:
        ValueError: If the command contains a line break or non-ASCII text.
    """
    if "\n" in command or "\r" in command:
        raise ValueError("command must be a single line")
    try:
        return encode_wire(f"C{serial}|{command}\n")
    except UnicodeEncodeError as e:
        bad = e.object[e.start:e.end]
        raise ValueError(f"command must be ASCII, got {bad!r}") from None


def decode_line(raw: bytes) -> str:
    """Decode one raw line, dropping the line terminator."""
    return decode_wire(raw).rstrip("\r\n")


def parse_line(line: str) -> InboundLine:
    """Parse one inbound line.

    Raises:
        WireFormatError: If the line type is unknown or its fields are malformed.
    """
    if not line:
        raise WireFormatError(line, "empty line")

    kind, rest = line[0], line[1:]
    if kind == "R":
        return _parse_reply(line, rest)
    if kind == "S":
        return _parse_status(line, rest)
    if kind == "M":
        return _parse_notice(line, rest)
    if kind == "V":
        return Version(rest)
    if kind == "H":
        if not rest:
            raise WireFormatError(line, "missing handle")
        return Handle(rest)
    raise WireFormatError(line, f"unknown line type {kind!r}")


def _parse_reply(line: str, rest: str) -> Reply:
    parts = rest.split("|", 2)
    if len(parts) < 2:
        raise WireFormatError(line, "reply needs serial and error code")
    try:
        serial = int(parts[0])
    except ValueError:
        raise WireFormatError(line, f"bad serial {parts[0]!r}") from None
    try:
        error = int(parts[1], 16)
    except ValueError:
        raise WireFormatError(line, f"bad error code {parts[1]!r}") from None
    body = parts[2] if len(parts) == 3 else ""
    return Reply(serial=serial, error=error, body=body)


def _parse_status(line: str, rest: str) -> Status:
    handle, sep, payload = rest.partition("|")
    if not sep:
        raise WireFormatError(line, "status needs a '|' after the handle")

    words = payload.split()
    object_words: list[str] = []
    index = 0
    while index < len(words) and "=" not in words[index]:
        object_words.append(words[index])
        index += 1

    removed = bool(object_words) and object_words[-1] == REMOVED
    if removed:
        object_words.pop()

    pairs: dict[str, str] = {}
    for word in words[index:]:
        key, _, value = word.partition("=")
        if key:
            pairs[key] = value

    if not object_words:
        raise WireFormatError(line, "status has no object name")
    return Status(handle=handle, object=" ".join(object_words), pairs=pairs, removed=removed)


def _parse_notice(line: str, rest: str) -> Notice:
    number, sep, text = rest.partition("|")
    if not sep:
        raise WireFormatError(line, "message needs a '|' after the number")
    try:
        value = int(number, 16)
    except ValueError:
        raise WireFormatError(line, f"bad message number {number!r}") from None
    return Notice(number=value, text=text)
