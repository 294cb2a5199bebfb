"""Session gateway: the app's single entry point to the auth provider."""

import logging

from glasscast.auth.errors import SessionMissingError, map_auth_error
from glasscast.auth.supabase_client import AuthProvider
from glasscast.models.auth import AuthUser, Session

logger = logging.getLogger(__name__)


class SessionGateway:
    """Delegates to an AuthProvider and normalizes its errors.

    Every failure of sign-in/up/out and reset surfaces as an AuthError
    subclass. Session lookup never raises: a missing session and any provider
    failure both resolve to None.
    """

    def __init__(self, provider: AuthProvider):
        self.provider = provider

    async def sign_in(self, email: str, password: str) -> Session:
        logger.info("Attempting sign in for %s", email)
        try:
            session = await self.provider.sign_in(email, password)
        except Exception as e:
            logger.warning("Sign in failed for %s: %s", email, e)
            raise map_auth_error(e) from e
        logger.info("Sign in successful, user %s", session.user.id)
        return session

    async def sign_up(self, email: str, password: str) -> AuthUser:
        logger.info("Attempting sign up for %s", email)
        try:
            user = await self.provider.sign_up(email, password)
        except Exception as e:
            logger.warning("Sign up failed for %s: %s", email, e)
            raise map_auth_error(e) from e
        logger.info("Sign up successful, user %s", user.id)
        return user

    async def sign_out(self) -> None:
        try:
            await self.provider.sign_out()
        except Exception as e:
            logger.warning("Sign out failed: %s", e)
            raise map_auth_error(e) from e

    async def reset_password(self, email: str) -> None:
        logger.info("Requesting password reset for %s", email)
        try:
            await self.provider.reset_password_for_email(email)
        except Exception as e:
            logger.warning("Password reset failed for %s: %s", email, e)
            raise map_auth_error(e) from e

    async def current_session(self) -> Session | None:
        try:
            return await self.provider.get_session()
        except SessionMissingError:
            logger.debug("No active session")
            return None
        except Exception as e:
            logger.warning("Session lookup failed, treating as signed out: %s", e)
            return None

    async def current_user(self) -> AuthUser | None:
        session = await self.current_session()
        return session.user if session is not None else None
