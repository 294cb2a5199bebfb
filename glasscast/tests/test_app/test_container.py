from pathlib import Path

import pytest

from glasscast.app.container import Container
from glasscast.auth.errors import AuthProviderError
from glasscast.config.schema import GlasscastConfig
from glasscast.models.common import TemperatureUnit
from glasscast.storage import preferences_repo


def _config(**auth) -> GlasscastConfig:
    return GlasscastConfig(
        weather={"api_key": "k", "cache_ttl_seconds": 120},
        search={"debounce_ms": 250, "recent_limit": 4},
        auth=auth,
    )


class TestContainer:
    def test_services_built_once(self, tmp_path: Path):
        c = Container(_config(), tmp_path / "c.db")
        try:
            assert c.weather_client is c.weather_client
            assert c.city_search.client is c.weather_client
            assert c.weather_client.cache_ttl == 120
            assert c.search.debounce == 0.25
            assert c.search.recent_limit == 4
        finally:
            c.close()

    def test_weather_units_from_preferences(self, tmp_path: Path):
        c = Container(_config(), tmp_path / "c.db")
        try:
            preferences_repo.set_temperature_unit(c.conn, TemperatureUnit.FAHRENHEIT)
            assert c.weather.units == TemperatureUnit.FAHRENHEIT
        finally:
            c.close()

    def test_auth_requires_settings(self, tmp_path: Path):
        c = Container(_config(), tmp_path / "c.db")
        try:
            with pytest.raises(AuthProviderError):
                c.gateway
        finally:
            c.close()

    def test_auth_stack(self, tmp_path: Path):
        c = Container(_config(url="https://test.supabase.co", anon_key="anon"), tmp_path / "c.db")
        try:
            assert c.auth_provider.base_url == "https://test.supabase.co/auth/v1"
            assert c.app_state.startup_delay == 0.3
            assert c.auth.post_login_delay == 0.1
        finally:
            c.close()

    def test_close_without_connection(self, tmp_path: Path):
        c = Container(_config(), tmp_path / "never.db")
        c.close()
        assert not (tmp_path / "never.db").exists()
