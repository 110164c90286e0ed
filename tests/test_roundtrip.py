"""Round-trip tests: decode(encode(value)) == value."""

from __future__ import annotations

from typing import Any

import pytest

from toon_codec import UNDEFINED, DecodeOptions, EncodeOptions, decode, encode

TRICKY_STRINGS = [
    "",
    " padded ",
    "null",
    "true",
    "undefined",
    "123",
    "-5",
    "1e3",
    "007",
    "a,b",
    'quote " inside',
    "line1\nline2",
    "crlf\r\nline",
    "tab\there",
    "back\\slash",
    'ends with backslash\\',
    "colon: here",
    "trailing:",
    "- dash",
    "-",
    "# hash",
    "[bracket",
    "{brace",
    "[]",
    "ünïcødé ✓",
]


def _deep_mapping(levels: int) -> dict[str, Any]:
    value: dict[str, Any] = {"leaf": True}
    for i in range(levels):
        value = {f"level{i}": value, "sibling": i}
    return value


ROUND_TRIP_VALUES = [
    pytest.param(
        {"name": "Alice", "age": 30, "active": True, "score": 9.5, "nickname": None},
        id="flat-mapping",
    ),
    pytest.param(
        {
            "order": {
                "id": "A-1",
                "items": [
                    {"sku": "x1", "qty": 2, "price": 9.99},
                    {"sku": "y2", "qty": 1, "price": 0.5},
                ],
                "notes": ["fragile", "gift wrap"],
            }
        },
        id="nested-order",
    ),
    pytest.param(TRICKY_STRINGS, id="tricky-strings-as-bullets"),
    pytest.param(
        [{"text": s, "n": i} for i, s in enumerate(TRICKY_STRINGS)],
        id="tricky-strings-as-cells",
    ),
    pytest.param({s: s for s in TRICKY_STRINGS}, id="tricky-strings-as-keys"),
    pytest.param([1, "two", {"a": 1}, [], {}, [1, 2], None, False, 2.5], id="mixed-sequence"),
    pytest.param({"matrix": [[1, 2], [3, 4]]}, id="matrix"),
    pytest.param(
        [
            {"id": 1, "tags": [], "meta": {}, "note": None},
            {"id": 2, "tags": [], "meta": {}, "note": "x"},
        ],
        id="cells-with-empty-containers",
    ),
    pytest.param(
        [{"id": 1, "tags": ["a"]}, {"id": 2, "tags": ["b", "c"]}],
        id="uniform-with-nested-values",
    ),
    pytest.param([{"a": 1, "b": 2}, {"b": 3, "a": 4}], id="uniform-any-key-order"),
    pytest.param([{"zip": "02139", "n": 1}, {"zip": "10001", "n": 2}], id="numeric-like-cells"),
    pytest.param([[{"id": 1}, {"id": 2}], [{"id": 3}]], id="tabular-inside-bullets"),
    pytest.param({"a": {"b": {"c": {"d": 1}}}}, id="inline-chain"),
    pytest.param([[[]]], id="nested-empty"),
    pytest.param([{}], id="single-empty-mapping"),
    pytest.param(_deep_mapping(40), id="deep-mapping"),
    pytest.param({"big": 10**30, "small": -1e-300, "zero": 0.0}, id="numbers"),
    pytest.param("hello", id="top-level-string"),
    pytest.param(0, id="top-level-zero"),
    pytest.param(None, id="top-level-null"),
]


class TestRoundTrip:
    """Decoding an encoding reproduces the value."""

    @pytest.mark.parametrize("value", ROUND_TRIP_VALUES)
    def test_round_trip(self, value: Any) -> None:
        """decode(encode(v)) == v."""
        assert decode(encode(value)) == value

    @pytest.mark.parametrize("value", ROUND_TRIP_VALUES)
    def test_re_encoding_is_idempotent(self, value: Any) -> None:
        """encode(decode(encode(v))) == encode(v)."""
        text = encode(value)
        assert encode(decode(text)) == text

    @pytest.mark.parametrize("value", ROUND_TRIP_VALUES)
    def test_round_trip_with_wide_indent(self, value: Any) -> None:
        """Any indent width works when both sides agree."""
        text = encode(value, EncodeOptions(indent=4))
        assert decode(text, DecodeOptions(indent=4)) == value

    def test_round_trip_with_banner(self, users: list[dict[str, Any]]) -> None:
        """The size banner is stripped before decoding."""
        assert decode(encode(users, EncodeOptions(include_size_banner=True))) == users

    def test_undefined_round_trips(self) -> None:
        """UNDEFINED survives TOON, in mappings, bullets and cells."""
        value = {"a": UNDEFINED, "b": [UNDEFINED, 1], "c": [{"x": UNDEFINED}, {"x": 2}]}
        result = decode(encode(value))
        assert result["a"] is UNDEFINED
        assert result["b"][0] is UNDEFINED
        assert result["c"][0]["x"] is UNDEFINED

    def test_tuples_come_back_as_lists(self) -> None:
        """Tuples encode like lists and decode as lists."""
        assert decode(encode({"pair": (1, 2)})) == {"pair": [1, 2]}

    def test_field_order_is_preserved(self) -> None:
        """Header field order follows the first element."""
        result = decode(encode([{"name": "Alice", "id": 1}, {"id": 2, "name": "Bob"}]))
        assert [list(row) for row in result] == [["name", "id"], ["name", "id"]]


class TestLibraryOutput:
    """The codec functions never write to stdout."""

    def test_encode_and_decode_are_silent(
        self, capsys: pytest.CaptureFixture[str], users: list[dict[str, Any]]
    ) -> None:
        """Debug events are not printed when logging is left unconfigured."""
        decode(encode({"users": users}, EncodeOptions(include_size_banner=True)))
        assert capsys.readouterr().out == ""
