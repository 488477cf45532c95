"""Unit tests for event rendering to tokens."""

from flexcon.console.render import (
    Emphasis,
    Role,
    render_error,
    render_message,
    render_response,
    render_update,
)
from flexcon.protocol.types import CommandResponse, Message, StateUpdate


class TestRenderUpdate:
    """Tests for UPD lines."""

    def test_example_update(self) -> None:
        """Changed pairs are elevated, unchanged pairs baseline."""
        update = StateUpdate("H1", "OBJ", {"a": "1", "b": "2"}, frozenset({"b"}))
        line = render_update(update)

        assert line.plain == "UPD H1 OBJ: a=1 b=2"
        key_a, key_b = line.find("a"), line.find("b")
        value_a, value_b = line.find("1"), line.find("2")
        assert key_a is not None and key_a.emphasis is Emphasis.BASELINE
        assert value_a is not None and value_a.emphasis is Emphasis.BASELINE
        assert key_b is not None and key_b.emphasis is Emphasis.ELEVATED
        assert value_b is not None and value_b.emphasis is Emphasis.ELEVATED

    def test_keys_sorted_regardless_of_insertion_order(self) -> None:
        state = {"zeta": "3", "alpha": "1", "mode": "USB", "Beta": "2"}
        line = render_update(StateUpdate("H1", "slice 0", state))
        keys = [token.text for token in line.tokens if token.role is Role.KEY]
        assert keys == sorted(state)
        assert line.plain == "UPD H1 slice 0: Beta=2 alpha=1 mode=USB zeta=3"

    def test_empty_state_keeps_trailing_colon(self) -> None:
        line = render_update(StateUpdate("H1", "slice 1"))
        assert line.plain == "UPD H1 slice 1: "

    def test_roles(self) -> None:
        line = render_update(StateUpdate("H1", "radio", {"k": "v"}))
        assert line.tokens[0].role is Role.TAG
        assert line.find("H1").role is Role.HANDLE  # type: ignore[union-attr]
        assert line.find("radio").role is Role.OBJECT  # type: ignore[union-attr]


class TestRenderResponse:
    """Tests for RES lines."""

    def test_success(self) -> None:
        line = render_response(CommandResponse(serial=5, error=0))
        assert line.plain == "RES 5 00000000"
        status = line.tokens[-1]
        assert status.role is Role.STATUS
        assert status.emphasis is Emphasis.SUCCESS

    def test_error_is_upper_hex_with_alarm(self) -> None:
        line = render_response(CommandResponse(serial=5, error=291))
        assert line.plain == "RES 5 00000123"
        assert line.tokens[-1].emphasis is Emphasis.ALARM

    def test_large_error_code(self) -> None:
        line = render_response(CommandResponse(serial=12, error=0x5000002D))
        assert line.plain == "RES 12 5000002D"


class TestRenderMessage:
    def test_message_line(self) -> None:
        line = render_message(Message("Client disconnected"))
        assert line.plain == "MSG Client disconnected"
        assert line.tokens[0].role is Role.TAG

    def test_message_text_not_interpreted(self) -> None:
        """Brackets in radio text stay literal."""
        line = render_message(Message("[bold]x[/bold]"))
        assert line.plain == "MSG [bold]x[/bold]"


def test_error_line_uses_alarm() -> None:
    line = render_error("info: timed out after 5s")
    assert line.plain == "ERR info: timed out after 5s"
    assert all(token.emphasis is Emphasis.ALARM for token in line.tokens if token.text.strip())
