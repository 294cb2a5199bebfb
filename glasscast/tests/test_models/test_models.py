"""Tests for the data models."""

import dataclasses

import pytest

from glasscast.models.auth import AuthUser, Session
from glasscast.models.common import TemperatureUnit, coordinate_key
from glasscast.models.weather import CityCandidate


class TestTemperatureUnit:
    def test_convert(self):
        assert TemperatureUnit.CELSIUS.convert(11.2) == 11.2
        assert TemperatureUnit.FAHRENHEIT.convert(0) == 32
        assert TemperatureUnit.FAHRENHEIT.convert(100) == 212
        assert TemperatureUnit.FAHRENHEIT.convert(-40) == -40

    def test_labels(self):
        assert TemperatureUnit.CELSIUS.display_name == "Celsius"
        assert TemperatureUnit.FAHRENHEIT.symbol == "°F"


class TestCoordinateKey:
    def test_four_decimals(self):
        assert coordinate_key(51.5074, -0.1278) == "51.5074,-0.1278"
        assert coordinate_key(39.799, -89.644) == "39.7990,-89.6440"

    def test_sub_precision_collapses(self):
        assert coordinate_key(51.50741, -0.12779) == coordinate_key(51.5074, -0.1278)

    def test_negative_zero_matches_zero(self):
        assert coordinate_key(-0.0, -0.00001) == "0.0000,0.0000"
        assert coordinate_key(-0.0, 0.0) == coordinate_key(0.0, 0.0)


class TestCityCandidate:
    def test_display_name(self, make_city):
        assert make_city("London").display_name == "London, GB"

    def test_dict_round_trip(self, make_city):
        city = make_city("Paris", 48.8566, 2.3522)
        assert CityCandidate.from_dict(city.to_dict()) == city

    def test_immutable(self, make_city):
        with pytest.raises(dataclasses.FrozenInstanceError):
            make_city().name = "Elsewhere"


class TestSession:
    def test_is_expired(self):
        session = Session("a", "r", 100.0, AuthUser("u1"))
        assert not session.is_expired(99.9)
        assert session.is_expired(100.0)

    def test_from_dict_defaults_token_type(self):
        session = Session.from_dict(
            {"access_token": "a", "refresh_token": "r", "expires_at": 5, "user": {"id": "u1"}}
        )
        assert session.token_type == "bearer"
        assert session.user == AuthUser(id="u1", email=None)
