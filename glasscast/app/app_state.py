"""Top-level app state: which screen to show based on session status."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import StrEnum

from glasscast.app.events import EventBus, LoginCompleted, LogoutCompleted
from glasscast.auth.session_gateway import SessionGateway

logger = logging.getLogger(__name__)


class AppStatus(StrEnum):
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class AppState:
    """Drives Loading -> Authenticated / Unauthenticated.

    The settle and retry delays give the auth provider's local session store
    time to catch up after start-up and after a login.
    """

    def __init__(
        self,
        gateway: SessionGateway,
        bus: EventBus,
        startup_delay: float = 0.3,
        login_settle_delay: float = 0.3,
        login_retry_delay: float = 0.5,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.gateway = gateway
        self.status = AppStatus.LOADING
        self.startup_delay = startup_delay
        self.login_settle_delay = login_settle_delay
        self.login_retry_delay = login_retry_delay
        self._sleep = sleep
        bus.subscribe(LoginCompleted, self._on_login)
        bus.subscribe(LogoutCompleted, self._on_logout)

    @property
    def is_authenticated(self) -> bool:
        return self.status == AppStatus.AUTHENTICATED

    async def start(self) -> AppStatus:
        self.status = AppStatus.LOADING
        await self._sleep(self.startup_delay)
        await self._check_session()
        logger.info("Auth check complete: %s", self.status)
        return self.status

    async def handle_login(self) -> AppStatus:
        await self._sleep(self.login_settle_delay)
        await self._check_session()

        if not self.is_authenticated:
            logger.warning("Session not found after login, retrying once")
            await self._sleep(self.login_retry_delay)
            await self._check_session()

        if not self.is_authenticated and await self.gateway.current_session() is not None:
            logger.info("Session confirmed, forcing authenticated state")
            self.status = AppStatus.AUTHENTICATED

        logger.info("Login handling complete: %s", self.status)
        return self.status

    def handle_logout(self) -> AppStatus:
        self.status = AppStatus.UNAUTHENTICATED
        return self.status

    async def _check_session(self) -> None:
        session = await self.gateway.current_session()
        self.status = (
            AppStatus.AUTHENTICATED if session is not None else AppStatus.UNAUTHENTICATED
        )

    async def _on_login(self, event: LoginCompleted) -> None:
        await self.handle_login()

    def _on_logout(self, event: LogoutCompleted) -> None:
        self.handle_logout()
