"""User settings: temperature unit and logout."""

import logging
import sqlite3

from glasscast.app.events import EventBus, LogoutCompleted, TemperatureUnitChanged
from glasscast.auth.errors import AuthError
from glasscast.auth.session_gateway import SessionGateway
from glasscast.models.common import TemperatureUnit
from glasscast.storage import preferences_repo

logger = logging.getLogger(__name__)


class SettingsController:
    def __init__(
        self,
        conn: sqlite3.Connection,
        gateway: SessionGateway,
        bus: EventBus,
        default_unit: TemperatureUnit = TemperatureUnit.CELSIUS,
    ):
        self.conn = conn
        self.gateway = gateway
        self.bus = bus
        self.selected_unit = preferences_repo.get_temperature_unit(conn, default_unit)
        self.is_logging_out = False
        self.logout_error: str | None = None

    async def set_unit(self, unit: TemperatureUnit) -> None:
        """Persist the unit and notify listeners, even if it is unchanged."""
        self.selected_unit = unit
        preferences_repo.set_temperature_unit(self.conn, unit)
        logger.info("Temperature unit set to %s", unit.display_name)
        await self.bus.publish(TemperatureUnitChanged(unit=unit))

    async def logout(self) -> bool:
        """Sign out, drop per-user local data and announce the logout."""
        self.is_logging_out = True
        self.logout_error = None
        try:
            await self.gateway.sign_out()
        except AuthError as e:
            logger.warning("Logout failed: %s", e)
            self.logout_error = "Failed to log out. Please try again."
            return False
        finally:
            self.is_logging_out = False

        preferences_repo.clear_recent_searches(self.conn)
        await self.bus.publish(LogoutCompleted())
        return True
