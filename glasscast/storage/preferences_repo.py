"""Repository for locally persisted preferences: recents, units, auth session."""

import json
import logging
import sqlite3

from glasscast.models.auth import Session
from glasscast.models.common import TemperatureUnit
from glasscast.models.weather import CityCandidate

logger = logging.getLogger(__name__)

RECENT_SEARCHES_KEY = "recent_searches"
TEMPERATURE_UNIT_KEY = "temperature_unit"
AUTH_SESSION_KEY = "auth_session"


# --- Raw key/value ---

def get_preference(conn: sqlite3.Connection, key: str) -> str | None:
    row = conn.execute(
        "SELECT value FROM preferences WHERE key = ?", (key,)
    ).fetchone()
    if row is None:
        return None
    return row[0]


def set_preference(conn: sqlite3.Connection, key: str, value: str) -> None:
    conn.execute(
        "INSERT INTO preferences (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
        "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP",
        (key, value),
    )
    conn.commit()


def delete_preference(conn: sqlite3.Connection, key: str) -> None:
    conn.execute("DELETE FROM preferences WHERE key = ?", (key,))
    conn.commit()


# --- Recent searches ---

def load_recent_searches(conn: sqlite3.Connection) -> list[CityCandidate]:
    """Load recents, most recent first. Unreadable data yields an empty list."""
    raw = get_preference(conn, RECENT_SEARCHES_KEY)
    if raw is None:
        return []
    try:
        return [CityCandidate.from_dict(item) for item in json.loads(raw)]
    except (ValueError, KeyError, TypeError) as e:
        logger.warning("Discarding unreadable recent searches: %s", e)
        return []


def save_recent_searches(conn: sqlite3.Connection, cities: list[CityCandidate]) -> None:
    set_preference(conn, RECENT_SEARCHES_KEY, json.dumps([c.to_dict() for c in cities]))


def clear_recent_searches(conn: sqlite3.Connection) -> None:
    delete_preference(conn, RECENT_SEARCHES_KEY)


# --- Temperature unit ---

def get_temperature_unit(
    conn: sqlite3.Connection, default: TemperatureUnit = TemperatureUnit.CELSIUS
) -> TemperatureUnit:
    raw = get_preference(conn, TEMPERATURE_UNIT_KEY)
    try:
        return TemperatureUnit(raw) if raw is not None else default
    except ValueError:
        logger.warning("Unknown temperature unit %r, using %s", raw, default)
        return default


def set_temperature_unit(conn: sqlite3.Connection, unit: TemperatureUnit) -> None:
    set_preference(conn, TEMPERATURE_UNIT_KEY, unit.value)


# --- Auth session ---

class SessionStore:
    """Persists the auth provider's session between runs."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def load(self) -> Session | None:
        raw = get_preference(self.conn, AUTH_SESSION_KEY)
        if raw is None:
            return None
        try:
            return Session.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Discarding unreadable stored session: %s", e)
            return None

    def save(self, session: Session) -> None:
        set_preference(self.conn, AUTH_SESSION_KEY, json.dumps(session.to_dict()))

    def clear(self) -> None:
        delete_preference(self.conn, AUTH_SESSION_KEY)
