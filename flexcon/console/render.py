"""Turn radio events into styled lines.

Rendering produces plain data: a Line is a sequence of Tokens, each carrying
its text, what it represents (Role) and how strongly it should stand out
(Emphasis). Mapping that to colors is the Theme's job, so the same Line can
be printed to a terminal, captured as plain text, or asserted on in tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from flexcon.protocol.types import CommandResponse, Message, StateUpdate


class Role(Enum):
    """What a token represents."""

    TAG = "tag"
    HANDLE = "handle"
    OBJECT = "object"
    SERIAL = "serial"
    KEY = "key"
    VALUE = "value"
    STATUS = "status"
    TEXT = "text"


class Emphasis(Enum):
    """How strongly a token should stand out.

    BASELINE/ELEVATED mark unchanged vs changed attributes; SUCCESS/ALARM
    mark command outcomes.
    """

    BASELINE = "baseline"
    ELEVATED = "elevated"
    SUCCESS = "success"
    ALARM = "alarm"


@dataclass(frozen=True)
class Token:
    text: str
    role: Role = Role.TEXT
    emphasis: Emphasis = Emphasis.BASELINE


@dataclass(frozen=True)
class Line:
    """One output line; printed with a single write."""

    tokens: tuple[Token, ...]

    @property
    def plain(self) -> str:
        return "".join(token.text for token in self.tokens)

    def find(self, text: str) -> Token | None:
        """Return the first token whose text equals text."""
        for token in self.tokens:
            if token.text == text:
                return token
        return None


def _space() -> Token:
    return Token(" ")


def render_message(message: Message) -> Line:
    """``MSG <text>``"""
    return Line((Token("MSG", Role.TAG), _space(), Token(message.text, Role.TEXT)))


def render_update(update: StateUpdate) -> Line:
    """``UPD <handle> <object>: k=v k=v ...`` with keys in sorted order.

    Keys changed by this update are ELEVATED, the rest BASELINE.
    """
    tokens: list[Token] = [
        Token("UPD", Role.TAG),
        _space(),
        Token(update.sender_handle, Role.HANDLE),
        _space(),
        Token(update.object, Role.OBJECT),
        Token(": "),
    ]
    for index, key in enumerate(sorted(update.current_state)):
        emphasis = Emphasis.ELEVATED if key in update.updated else Emphasis.BASELINE
        if index:
            tokens.append(_space())
        tokens.append(Token(key, Role.KEY, emphasis))
        tokens.append(Token("="))
        tokens.append(Token(update.current_state[key], Role.VALUE, emphasis))
    return Line(tuple(tokens))


def render_response(response: CommandResponse) -> Line:
    """``RES <serial> <error as 8 upper-case hex digits>``"""
    emphasis = Emphasis.SUCCESS if response.error == 0 else Emphasis.ALARM
    return Line((
        Token("RES", Role.TAG),
        _space(),
        Token(str(response.serial), Role.SERIAL),
        _space(),
        Token(f"{response.error:08X}", Role.STATUS, emphasis),
    ))


def render_error(message: str) -> Line:
    """``ERR <message>`` for failures reported inline (e.g. command timeouts)."""
    return Line((
        Token("ERR", Role.TAG, Emphasis.ALARM),
        _space(),
        Token(message, Role.TEXT, Emphasis.ALARM),
    ))
