"""Shared test fixtures."""

import json
import sqlite3
from pathlib import Path

import pytest
import yaml

from glasscast.config.schema import GlasscastConfig
from glasscast.models.weather import CityCandidate
from glasscast.storage.database import connect, run_migrations

FIXTURE_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def db(tmp_path: Path) -> sqlite3.Connection:
    """A migrated SQLite database in a temp directory."""
    conn = connect(tmp_path / "test.db")
    run_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def default_config() -> GlasscastConfig:
    return GlasscastConfig()


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "weather": {"api_key": "yaml-key", "base_url": "https://owm.example.com/data/2.5"},
        "search": {"debounce_ms": 250},
        "units": "imperial",
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURE_DIR


@pytest.fixture
def current_london() -> dict:
    with open(FIXTURE_DIR / "owm_current_london.json") as f:
        return json.load(f)


@pytest.fixture
def forecast_london() -> dict:
    with open(FIXTURE_DIR / "owm_forecast_london.json") as f:
        return json.load(f)


@pytest.fixture
def geocode_springfield() -> list[dict]:
    with open(FIXTURE_DIR / "owm_geocode_springfield.json") as f:
        return json.load(f)


@pytest.fixture
def gotrue_session() -> dict:
    with open(FIXTURE_DIR / "gotrue_session.json") as f:
        return json.load(f)


@pytest.fixture
def make_city():
    """Factory for CityCandidate with coordinate-derived ids."""

    def _make(name: str = "London", lat: float = 51.5074, lon: float = -0.1278) -> CityCandidate:
        return CityCandidate(
            id=f"{lat:.4f},{lon:.4f}",
            name=name,
            country="GB",
            latitude=lat,
            longitude=lon,
            temperature=11.2,
            condition="Clouds",
        )

    return _make
