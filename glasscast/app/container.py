"""Composition root: builds every service once and wires the controllers."""

import logging
from functools import cached_property
from pathlib import Path

from glasscast.app.app_state import AppState
from glasscast.app.auth_controller import AuthController
from glasscast.app.events import EventBus
from glasscast.app.location import LocationResolver
from glasscast.app.search_controller import SearchController
from glasscast.app.settings_controller import SettingsController
from glasscast.app.weather_controller import WeatherController
from glasscast.auth.session_gateway import SessionGateway
from glasscast.auth.supabase_client import SupabaseAuthClient
from glasscast.config.schema import GlasscastConfig
from glasscast.ingest.city_search import CitySearch
from glasscast.ingest.weather_client import WeatherClient
from glasscast.models.common import Coordinates
from glasscast.storage import preferences_repo
from glasscast.storage.database import open_store

logger = logging.getLogger(__name__)


class Container:
    """Services are created lazily, at most once per container.

    Building the auth stack requires Supabase settings; weather-only commands
    never touch it.
    """

    def __init__(self, config: GlasscastConfig, db_path: str | Path):
        self.config = config
        self.db_path = db_path
        self.bus = EventBus()

    @cached_property
    def conn(self):
        return open_store(self.db_path)

    @cached_property
    def weather_client(self) -> WeatherClient:
        cfg = self.config.weather
        return WeatherClient(
            api_key=cfg.api_key,
            base_url=cfg.base_url,
            geo_url=cfg.geo_url,
            timeout=cfg.timeout_seconds,
            cache_ttl=cfg.cache_ttl_seconds,
        )

    @cached_property
    def city_search(self) -> CitySearch:
        return CitySearch(
            self.weather_client,
            max_results=self.config.search.max_results,
            geocode_limit=self.config.search.geocode_limit,
        )

    @cached_property
    def locator(self) -> LocationResolver:
        loc = self.config.location
        return LocationResolver(
            default=Coordinates(loc.default_latitude, loc.default_longitude),
            timeout=loc.timeout_seconds,
        )

    @cached_property
    def auth_provider(self) -> SupabaseAuthClient:
        cfg = self.config.auth
        return SupabaseAuthClient(
            url=cfg.url,
            anon_key=cfg.anon_key,
            store=preferences_repo.SessionStore(self.conn),
            timeout=cfg.timeout_seconds,
        )

    @cached_property
    def gateway(self) -> SessionGateway:
        return SessionGateway(self.auth_provider)

    @cached_property
    def app_state(self) -> AppState:
        cfg = self.config.auth
        return AppState(
            self.gateway,
            self.bus,
            startup_delay=cfg.startup_delay_ms / 1000,
            login_settle_delay=cfg.login_settle_ms / 1000,
            login_retry_delay=cfg.login_retry_ms / 1000,
        )

    @cached_property
    def auth(self) -> AuthController:
        return AuthController(
            self.gateway,
            self.bus,
            post_login_delay=self.config.auth.post_login_delay_ms / 1000,
        )

    @cached_property
    def settings(self) -> SettingsController:
        return SettingsController(
            self.conn, self.gateway, self.bus, default_unit=self.config.units
        )

    @cached_property
    def search(self) -> SearchController:
        controller = SearchController(
            self.city_search,
            self.conn,
            self.bus,
            debounce=self.config.search.debounce_ms / 1000,
            recent_limit=self.config.search.recent_limit,
        )
        controller.load_recent()
        return controller

    @cached_property
    def weather(self) -> WeatherController:
        return WeatherController(
            self.weather_client,
            self.locator,
            self.bus,
            units=preferences_repo.get_temperature_unit(self.conn, self.config.units),
            default_city=self.config.location.default_city,
        )

    def close(self) -> None:
        if "conn" in self.__dict__:
            self.conn.close()
