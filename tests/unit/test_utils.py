"""Unit tests for shared helpers."""

import pytest

from flexcon.core.utils import deep_merge, parse_address


class TestDeepMerge:
    def test_nested_dicts_merge(self) -> None:
        base = {"console": {"prompt": "flex", "update_prefix": ""}}
        override = {"console": {"prompt": "radio"}}
        assert deep_merge(base, override) == {"console": {"prompt": "radio", "update_prefix": ""}}

    def test_lists_replaced(self) -> None:
        assert deep_merge({"a": [1, 2]}, {"a": [3]}) == {"a": [3]}

    def test_inputs_not_modified(self) -> None:
        base = {"a": {"b": 1}}
        deep_merge(base, {"a": {"b": 2}})
        assert base == {"a": {"b": 1}}


class TestParseAddress:
    @pytest.mark.parametrize(
        ("address", "expected"),
        [
            ("192.168.1.50", ("192.168.1.50", 4992)),
            ("192.168.1.50:5000", ("192.168.1.50", 5000)),
            ("radio.local", ("radio.local", 4992)),
            ("[fe80::1]:4993", ("fe80::1", 4993)),
            ("[::1]", ("::1", 4992)),
            ("::1", ("::1", 4992)),
        ],
    )
    def test_valid(self, address: str, expected: tuple[str, int]) -> None:
        assert parse_address(address, 4992) == expected

    @pytest.mark.parametrize("address", ["host:", "host:99999", ":4992", "[::1", "[::1]x"])
    def test_invalid(self, address: str) -> None:
        with pytest.raises(ValueError):
            parse_address(address, 4992)
