"""Shared test fixtures for toon-codec."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient
from typer.testing import CliRunner


@pytest.fixture
def users() -> list[dict[str, Any]]:
    """Uniform array of user objects."""
    return [
        {"id": 1, "name": "Alice"},
        {"id": 2, "name": "Bob"},
    ]


@pytest.fixture
def forecast() -> dict[str, Any]:
    """Forecast-like tool response with a nested uniform array."""
    return {
        "location": "Berlin, Germany",
        "timezone": "Europe/Berlin",
        "daily": [
            {"date": "2026-01-19", "temp_max": 5, "temp_min": -2},
            {"date": "2026-01-20", "temp_max": 7, "temp_min": 0},
            {"date": "2026-01-21", "temp_max": 4, "temp_min": -3},
        ],
    }


@pytest.fixture
def client() -> TestClient:
    """Create a test client for the HTTP service."""
    from toon_codec.server import app

    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner."""
    return CliRunner()
