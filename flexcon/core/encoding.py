"""Text encodings: UTF-8 for the terminal, ASCII for the radio link."""

import sys

STDIO_ENCODING = "utf-8"

# The radio speaks plain ASCII
WIRE_ENCODING = "ascii"


def encode_wire(text: str) -> bytes:
    """Encode text for the radio.

    Raises:
        UnicodeEncodeError: If text has non-ASCII characters. Sending a
            silently altered command is worse than not sending it.
    """
    return text.encode(WIRE_ENCODING)


def decode_wire(raw: bytes) -> str:
    """Decode bytes from the radio; undecodable bytes become U+FFFD."""
    return raw.decode(WIRE_ENCODING, errors="replace")


def configure_stdio() -> None:
    """Switch the standard streams to UTF-8 so radio text never raises on print.

    Streams that were replaced by something without reconfigure() (pytest
    capture, patch_stdout) are left alone.
    """
    for stream in (sys.stdin, sys.stdout, sys.stderr):
        reconfigure = getattr(stream, "reconfigure", None)
        if reconfigure is not None:
            reconfigure(encoding=STDIO_ENCODING, errors="replace")
