"""Login / sign-up form logic: validation, gateway calls, user-facing errors."""

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable

from glasscast.app.events import EventBus, LoginCompleted
from glasscast.auth.errors import AuthError
from glasscast.auth.session_gateway import SessionGateway

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"[A-Z0-9a-z._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,64}")
MIN_PASSWORD_LENGTH = 6


class AuthController:
    def __init__(
        self,
        gateway: SessionGateway,
        bus: EventBus,
        post_login_delay: float = 0.1,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.gateway = gateway
        self.bus = bus
        self.post_login_delay = post_login_delay
        self._sleep = sleep

        self.is_loading = False
        self.is_authenticated = False
        self.error_message: str | None = None
        self.info_message: str | None = None
        self.email_error: str | None = None
        self.password_error: str | None = None

    # --- Validation ---

    def validate_email(self, email: str) -> bool:
        self.email_error = None
        if not email:
            self.email_error = "Email is required"
            return False
        if not EMAIL_RE.fullmatch(email):
            self.email_error = "Please enter a valid email"
            return False
        return True

    def validate_password(self, password: str) -> bool:
        self.password_error = None
        if not password:
            self.password_error = "Password is required"
            return False
        if len(password) < MIN_PASSWORD_LENGTH:
            self.password_error = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            return False
        return True

    def validate(self, email: str, password: str) -> bool:
        # Run both so each field reports its own error.
        email_ok = self.validate_email(email)
        password_ok = self.validate_password(password)
        return email_ok and password_ok

    def _reset_messages(self) -> None:
        self.error_message = None
        self.info_message = None
        self.email_error = None
        self.password_error = None

    # --- Operations ---

    async def login(self, email: str, password: str) -> bool:
        self._reset_messages()
        if not self.validate(email, password):
            return False

        self.is_loading = True
        try:
            await self.gateway.sign_in(email, password)
        except AuthError as e:
            self.error_message = e.user_message
            self.is_authenticated = False
            return False
        finally:
            self.is_loading = False

        self.is_authenticated = True
        # Give the provider's session store a moment before listeners re-read it.
        await self._sleep(self.post_login_delay)
        await self.bus.publish(LoginCompleted())
        return True

    async def sign_up(self, email: str, password: str) -> bool:
        self._reset_messages()
        if not self.validate(email, password):
            return False

        self.is_loading = True
        try:
            await self.gateway.sign_up(email, password)
        except AuthError as e:
            self.error_message = e.user_message
            return False
        finally:
            self.is_loading = False

        self.info_message = "Account created. Check your email to confirm it."
        return True

    async def reset_password(self, email: str) -> bool:
        self._reset_messages()
        if not self.validate_email(email):
            return False

        self.is_loading = True
        try:
            await self.gateway.reset_password(email)
        except AuthError as e:
            self.error_message = e.user_message
            return False
        finally:
            self.is_loading = False

        self.info_message = "Password reset email sent."
        return True

    async def sign_out(self) -> bool:
        self._reset_messages()
        try:
            await self.gateway.sign_out()
        except AuthError as e:
            self.error_message = e.user_message
            return False
        self.is_authenticated = False
        return True

    async def check_auth_status(self) -> bool:
        self.is_authenticated = await self.gateway.current_session() is not None
        return self.is_authenticated
