"""Tests for size estimation and JSON/TOON comparison."""

from __future__ import annotations

from typing import Any

import pytest

from toon_codec import (
    UNDEFINED,
    CyclicValueError,
    EncodeOptions,
    compare,
    estimate_size,
    to_generic_json,
)


class TestEstimateSize:
    """Tests for estimate_size()."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("", 0), ("a", 1), ("abcd", 1), ("abcde", 2), ("x" * 400, 100)],
    )
    def test_quarter_of_characters_rounded_up(self, text: str, expected: int) -> None:
        """Estimated tokens are ceil(characters / 4)."""
        assert estimate_size(text) == expected


class TestGenericJson:
    """Tests for the JSON baseline."""

    def test_compact_separators(self) -> None:
        """The baseline has no whitespace between tokens."""
        assert to_generic_json({"a": 1, "b": [1, 2]}) == '{"a":1,"b":[1,2]}'

    def test_non_ascii_is_kept(self) -> None:
        """Non-ASCII text is not escaped."""
        assert to_generic_json({"city": "Zürich"}) == '{"city":"Zürich"}'

    def test_undefined_has_no_json_form(self) -> None:
        """UNDEFINED entries are dropped and UNDEFINED items become null."""
        assert to_generic_json({"a": UNDEFINED, "b": [UNDEFINED]}) == '{"b":[null]}'
        assert to_generic_json(UNDEFINED) == "null"


class TestCompare:
    """Tests for compare()."""

    def test_empty_mapping(self) -> None:
        """An empty mapping saves nothing."""
        result = compare({})
        assert result.generic_text == "{}"
        assert result.toon_text == "{}"
        assert result.savings_percent == 0.0

    def test_uniform_array_savings(self, users: list[dict[str, Any]]) -> None:
        """Uniform arrays save tokens."""
        result = compare(users)
        assert result.generic_size == 12
        assert result.toon_size == 8
        assert result.savings_percent == pytest.approx(100 / 3)

    def test_negative_savings_are_not_clamped(self) -> None:
        """TOON can be larger than JSON for small irregular values."""
        result = compare([[], []])
        assert result.generic_size == 2
        assert result.toon_size == 3
        assert result.savings_percent == -50.0

    def test_banner_is_never_included(self, users: list[dict[str, Any]]) -> None:
        """The compared TOON text is the bare body."""
        result = compare(users, EncodeOptions(include_size_banner=True))
        assert not result.toon_text.startswith("#")

    def test_options_are_applied(self, users: list[dict[str, Any]]) -> None:
        """Indent width affects the TOON size."""
        narrow = compare({"users": users})
        wide = compare({"users": users}, EncodeOptions(indent=8))
        assert wide.toon_size > narrow.toon_size

    def test_cyclic_value(self) -> None:
        """Invalid values fail with the codec's own errors."""
        data: dict[str, Any] = {}
        data["self"] = data
        with pytest.raises(CyclicValueError):
            compare(data)
