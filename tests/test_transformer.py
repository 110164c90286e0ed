"""Tests for JSON/TOON content negotiation."""

from __future__ import annotations

from typing import Any

from toon_codec import UNDEFINED
from toon_codec.transformer import (
    get_size_comparison,
    should_use_toon,
    to_json,
    to_toon,
    transform_result,
)


class TestShouldUseToon:
    """Tests for should_use_toon() heuristic."""

    def test_uniform_array_returns_true(self, users: list[dict[str, Any]]) -> None:
        """Uniform array of objects should use TOON."""
        assert should_use_toon(users) is True

    def test_heterogeneous_array_returns_false(self) -> None:
        """Non-uniform array should not use TOON."""
        data = [
            {"id": 1, "name": "Alice"},
            {"id": 2, "email": "bob@test.com"},  # Different keys
        ]
        assert should_use_toon(data) is False

    def test_nested_uniform_array_returns_true(self, users: list[dict[str, Any]]) -> None:
        """Dict with uniform array value should use TOON."""
        assert should_use_toon({"users": users}) is True

    def test_simple_dict_returns_false(self) -> None:
        """Simple flat dict should not use TOON."""
        assert should_use_toon({"temperature": 20, "city": "London"}) is False

    def test_scalars_return_false(self) -> None:
        """Scalars should not use TOON."""
        assert should_use_toon("hello") is False
        assert should_use_toon(42) is False
        assert should_use_toon(None) is False

    def test_empty_array_returns_false(self) -> None:
        """Empty array should not use TOON."""
        assert should_use_toon([]) is False

    def test_min_array_size_parameter(self, users: list[dict[str, Any]]) -> None:
        """min_array_size parameter should be respected."""
        assert should_use_toon(users[:1]) is False
        assert should_use_toon(users, min_array_size=2) is True
        assert should_use_toon(users, min_array_size=3) is False


class TestToToon:
    """Tests for to_toon() conversion."""

    def test_converts_uniform_array(self, users: list[dict[str, Any]]) -> None:
        """to_toon should convert uniform array."""
        assert to_toon(users) == "[2]{id,name}:\n  1,Alice\n  2,Bob"

    def test_returns_none_on_failure(self) -> None:
        """Unencodable data yields None instead of raising."""
        data: list[Any] = []
        data.append(data)
        assert to_toon(data) is None


class TestToJson:
    """Tests for to_json() conversion."""

    def test_converts_dict(self) -> None:
        """to_json should convert dict."""
        assert to_json({"temperature": 20, "city": "London"}) == (
            '{"temperature": 20, "city": "London"}'
        )

    def test_converts_array(self) -> None:
        """to_json should convert array."""
        assert to_json([1, 2, 3]) == "[1, 2, 3]"

    def test_indent_parameter(self) -> None:
        """to_json should respect indent parameter."""
        assert "\n" in to_json({"a": 1}, indent=2)

    def test_undefined_becomes_null(self) -> None:
        """UNDEFINED has no JSON form."""
        assert to_json({"a": UNDEFINED}) == '{"a": null}'


class TestTransformResult:
    """Tests for transform_result() main function."""

    def test_returns_toon_when_preferred(self, users: list[dict[str, Any]]) -> None:
        """Returns TOON format when requested."""
        formatted, content_type = transform_result(users, prefer_toon=True)
        assert content_type == "text/toon"
        assert "Alice" in formatted

    def test_returns_toon_for_simple_data_when_preferred(self) -> None:
        """Returns TOON format for any data when explicitly requested."""
        formatted, content_type = transform_result({"simple": "object"}, prefer_toon=True)
        assert content_type == "text/toon"
        assert formatted == "simple: object"

    def test_default_is_json(self, users: list[dict[str, Any]]) -> None:
        """Default format should be JSON."""
        _, content_type = transform_result(users)
        assert content_type == "application/json"

    def test_falls_back_to_json_on_failure(self) -> None:
        """Falls back to JSON when TOON conversion fails."""
        formatted, content_type = transform_result({"value": float("nan")}, prefer_toon=True)
        assert content_type == "application/json"
        assert formatted == '{"value": NaN}'


class TestGetSizeComparison:
    """Tests for get_size_comparison() metrics function."""

    def test_returns_all_fields(self) -> None:
        """Should return all expected fields."""
        result = get_size_comparison([{"id": 1}, {"id": 2}])
        assert set(result) == {
            "json_size",
            "toon_size",
            "savings_percent",
            "savings_bytes",
            "recommendation",
            "toon_beneficial",
        }

    def test_recommends_toon_for_uniform_array(self) -> None:
        """Should recommend TOON for uniform arrays."""
        data = [
            {"id": 1, "name": "Alice", "email": "alice@test.com"},
            {"id": 2, "name": "Bob", "email": "bob@test.com"},
            {"id": 3, "name": "Charlie", "email": "charlie@test.com"},
        ]
        result = get_size_comparison(data)
        assert result["recommendation"] == "toon"
        assert result["toon_beneficial"] is True
        assert result["savings_percent"] > 0
        assert result["savings_bytes"] > 0

    def test_recommends_json_for_simple_data(self) -> None:
        """Should recommend JSON for non-beneficial data."""
        result = get_size_comparison({"temperature": 20})
        assert result["recommendation"] == "json"
        assert result["toon_beneficial"] is False

    def test_forecast_response(self, forecast: dict[str, Any]) -> None:
        """Nested uniform arrays give real savings."""
        assert should_use_toon(forecast) is True
        assert get_size_comparison(forecast)["savings_percent"] > 10

    def test_unencodable_data(self) -> None:
        """Failures leave sizes unset and recommend JSON."""
        result = get_size_comparison({"value": float("inf")})
        assert result["toon_size"] is None
        assert result["recommendation"] == "json"
