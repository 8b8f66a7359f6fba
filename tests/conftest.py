"""Shared test fixtures."""

from collections.abc import Generator
from pathlib import Path

import pytest

import cardsynth.config as config_module

# 2023-11-14T22:13:20Z, a Tuesday
NOW = 1_700_000_000_000


@pytest.fixture
def now() -> int:
    """Fixed clock reading so synthesized data is reproducible."""
    return NOW


@pytest.fixture
def lookup() -> dict[str, dict]:
    """Entity snapshots keyed by entity id, as a host application would supply them."""
    return {
        "sensor.cpu_load": {"state": "42.5", "attributes": {"unit_of_measurement": "%"}},
        "sensor.outside_temperature": {"state": "18.25", "attributes": {}},
        "sensor.unavailable": {"state": "unavailable", "attributes": {}},
        "sensor.activity": {
            "state": "ok",
            "attributes": {
                "timeline": [
                    {"time": "2023-11-14T20:00:00Z", "message": "Backup finished"},
                    {"created": NOW + 60_000, "name": "Door opened", "details": "Front door"},
                    {"title": "No timestamp"},
                ]
            },
        },
        "calendar.home": {
            "state": "off",
            "attributes": {
                "events": [
                    {
                        "summary": "Dentist",
                        "start_time": "2023-11-15T09:00:00Z",
                        "end_time": "2023-11-15T10:00:00Z",
                        "state": "confirmed",
                    },
                ]
            },
        },
        "weather.home": {
            "state": "sunny",
            "attributes": {
                "temperature": 20,
                "temperature_unit": "°C",
                "wind_speed_unit": "km/h",
                "forecast": [
                    {"datetime": "2023-11-16T00:00:00Z", "temperature": 14, "precipitation": 2.5},
                    {"datetime": "2023-11-15T00:00:00Z", "temperature": 12, "wind_speed": 10},
                    {"condition": "rainy", "temperature": 9},
                ],
            },
        },
    }


@pytest.fixture
def env_file(tmp_path: Path) -> Generator[Path, None, None]:
    """Use a temporary .env file instead of the real one."""
    env_path = tmp_path / ".env"
    original = config_module._ENV_FILE
    config_module._ENV_FILE = env_path
    yield env_path
    config_module._ENV_FILE = original
