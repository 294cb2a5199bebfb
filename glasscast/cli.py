"""CLI entry point for Glasscast."""

import argparse
import asyncio
import getpass
import json
import logging

from pydantic import BaseModel

from glasscast.app.container import Container
from glasscast.auth.errors import AuthProviderError
from glasscast.config.loader import get_config_value, load_config
from glasscast.config.schema import GlasscastConfig
from glasscast.models.common import TemperatureUnit
from glasscast.reporting.formatters import (
    format_cities_json,
    format_cities_text,
    format_weather_json,
    format_weather_text,
)
from glasscast.storage import preferences_repo

DEFAULT_CONFIG = "config/glasscast.yaml"
DEFAULT_DB = "data/glasscast.db"
SECRET_FIELDS = (("weather", "api_key"), ("auth", "anon_key"))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="glasscast",
        description="Current weather and forecasts from OpenWeather",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="Config YAML path")
    parser.add_argument("--db", default=DEFAULT_DB, help="SQLite DB path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    # weather
    weather_p = sub.add_parser("weather", help="Current conditions and forecast")
    weather_p.add_argument("--lat", type=float, help="Latitude")
    weather_p.add_argument("--lon", type=float, help="Longitude")
    weather_p.add_argument("--json", action="store_true", help="JSON output")

    # search
    search_p = sub.add_parser("search", help="Search cities")
    search_p.add_argument("query", help="City name")
    search_p.add_argument(
        "--select", type=int, metavar="N", help="Save the N-th result to recents"
    )
    search_p.add_argument("--json", action="store_true", help="JSON output")

    # recent
    recent_p = sub.add_parser("recent", help="Show recent searches")
    recent_p.add_argument("--clear", action="store_true", help="Forget recent searches")

    # units
    units_p = sub.add_parser("units", help="Show or set the temperature unit")
    units_p.add_argument(
        "unit", nargs="?", choices=[u.value for u in TemperatureUnit]
    )

    # auth
    login_p = sub.add_parser("login", help="Sign in")
    login_p.add_argument("email")
    login_p.add_argument("--password", help="Prompted for when omitted")
    signup_p = sub.add_parser("signup", help="Create an account")
    signup_p.add_argument("email")
    signup_p.add_argument("--password", help="Prompted for when omitted")
    sub.add_parser("logout", help="Sign out")
    reset_p = sub.add_parser("reset-password", help="Send a password reset email")
    reset_p.add_argument("email")
    sub.add_parser("status", help="Show whether a user is signed in")

    # config show / config get
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    get_p = config_sub.add_parser("get", help="Display one config value")
    get_p.add_argument("key", help="Dotted key, e.g. search.debounce_ms")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # httpx logs full request URLs, which carry the API key.
    logging.getLogger("httpx").setLevel(logging.WARNING)

    config = load_config(args.config)

    if args.command == "config":
        return _cmd_config(config, args)

    container = Container(config, args.db)
    try:
        return asyncio.run(_dispatch(container, args))
    except AuthProviderError as e:
        print(f"Error: {e}")
        return 1
    finally:
        container.close()


async def _dispatch(c: Container, args) -> int:
    if args.command == "weather":
        return await _cmd_weather(c, args)
    elif args.command == "search":
        return await _cmd_search(c, args)
    elif args.command == "recent":
        return _cmd_recent(c, args)
    elif args.command == "units":
        return _cmd_units(c, args)
    elif args.command == "login":
        return await _cmd_login(c, args)
    elif args.command == "signup":
        return await _cmd_signup(c, args)
    elif args.command == "logout":
        return await _cmd_logout(c)
    elif args.command == "reset-password":
        return await _cmd_reset_password(c, args)
    elif args.command == "status":
        return await _cmd_status(c)
    return 1


async def _cmd_weather(c: Container, args) -> int:
    controller = c.weather
    if (args.lat is None) != (args.lon is None):
        print("Error: --lat and --lon must be given together")
        return 1
    if args.lat is not None:
        c.locator.provide(args.lat, args.lon)
        await controller.fetch_weather()
    else:
        loc = c.config.location
        await controller.fetch_for_location(
            loc.default_latitude, loc.default_longitude, loc.default_city
        )

    if controller.current is None:
        print(f"Error: {controller.error_message}")
        return 1
    fmt = format_weather_json if args.json else format_weather_text
    print(fmt(controller.current, controller.forecast, controller.units))
    return 0


async def _cmd_search(c: Container, args) -> int:
    controller = c.search
    # Nothing to debounce when the whole query arrives at once.
    controller.debounce = 0.0
    results = await controller.search_now(args.query)
    if controller.error_message:
        print(f"Error: {controller.error_message}")
        return 1

    unit = preferences_repo.get_temperature_unit(c.conn, c.config.units)
    print(format_cities_json(results) if args.json else format_cities_text(results, unit))

    if args.select is not None:
        if not 1 <= args.select <= len(results):
            print(f"Error: --select must be between 1 and {len(results)}")
            return 1
        city = results[args.select - 1]
        await controller.select_city(city)
        print(f"Saved {city.display_name} to recent searches")
    return 0


def _cmd_recent(c: Container, args) -> int:
    if args.clear:
        c.search.clear_recent()
        print("Recent searches cleared")
        return 0
    unit = preferences_repo.get_temperature_unit(c.conn, c.config.units)
    print(format_cities_text(c.search.recent, unit))
    return 0


def _cmd_units(c: Container, args) -> int:
    if args.unit is None:
        unit = preferences_repo.get_temperature_unit(c.conn, c.config.units)
    else:
        unit = TemperatureUnit(args.unit)
        preferences_repo.set_temperature_unit(c.conn, unit)
    print(f"Units: {unit.display_name} ({unit.symbol})")
    return 0


async def _cmd_login(c: Container, args) -> int:
    password = args.password or getpass.getpass("Password: ")
    app_state = c.app_state
    ok = await c.auth.login(args.email, password)
    if not ok:
        print(f"Error: {_auth_error(c)}")
        return 1
    print(f"Signed in as {args.email} ({app_state.status})")
    return 0


async def _cmd_signup(c: Container, args) -> int:
    password = args.password or getpass.getpass("Password: ")
    if not await c.auth.sign_up(args.email, password):
        print(f"Error: {_auth_error(c)}")
        return 1
    print(c.auth.info_message)
    return 0


async def _cmd_logout(c: Container) -> int:
    if not await c.settings.logout():
        print(f"Error: {c.settings.logout_error}")
        return 1
    print("Signed out")
    return 0


async def _cmd_reset_password(c: Container, args) -> int:
    if not await c.auth.reset_password(args.email):
        print(f"Error: {_auth_error(c)}")
        return 1
    print(c.auth.info_message)
    return 0


async def _cmd_status(c: Container) -> int:
    status = await c.app_state.start()
    user = await c.gateway.current_user()
    print(f"Status: {status}")
    if user is not None:
        print(f"User: {user.email or user.id}")
    return 0


def _auth_error(c: Container) -> str:
    return c.auth.email_error or c.auth.password_error or c.auth.error_message or "unknown error"


def _cmd_config(config: GlasscastConfig, args) -> int:
    if args.config_command == "show":
        data = config.model_dump(mode="json")
        for section, field in SECRET_FIELDS:
            if data[section][field]:
                data[section][field] = "***"
        print(json.dumps(data, indent=2))
        return 0
    elif args.config_command == "get":
        try:
            value = get_config_value(config, args.key)
        except KeyError as e:
            print(f"Error: {e}")
            return 1
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json")
            for section, field in SECRET_FIELDS:
                if section == args.key and value[field]:
                    value[field] = "***"
            value = json.dumps(value, indent=2)
        elif (tuple(args.key.split(".")) in SECRET_FIELDS) and value:
            value = "***"
        print(f"{args.key} = {value}")
        return 0
    else:
        print("Use: config show | config get KEY")
        return 1
