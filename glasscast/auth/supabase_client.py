"""Supabase Auth (GoTrue) REST client with a locally persisted session."""

import logging
import time
from collections.abc import Callable
from typing import Any, Protocol

import httpx

from glasscast.auth.errors import AuthProviderError, SessionMissingError
from glasscast.models.auth import AuthUser, Session

logger = logging.getLogger(__name__)

AUTH_PATH = "/auth/v1"
EXPIRY_MARGIN_SECONDS = 10.0
# Sign-out succeeds locally even if the server no longer knows the token.
IGNORABLE_LOGOUT_STATUSES = (401, 403, 404)


class SessionStoreLike(Protocol):
    def load(self) -> Session | None: ...
    def save(self, session: Session) -> None: ...
    def clear(self) -> None: ...


class AuthProvider(Protocol):
    async def sign_in(self, email: str, password: str) -> Session: ...
    async def sign_up(self, email: str, password: str) -> AuthUser: ...
    async def sign_out(self) -> None: ...
    async def reset_password_for_email(self, email: str) -> None: ...
    async def get_session(self) -> Session: ...


class SupabaseAuthClient:
    """Thin wrapper around the GoTrue endpoints the app consumes.

    The session returned by sign-in is written to ``store`` so it survives
    restarts. ``get_session`` refreshes an expired access token on demand.
    """

    def __init__(
        self,
        url: str,
        anon_key: str,
        store: SessionStoreLike,
        timeout: float = 30.0,
        clock: Callable[[], float] = time.time,
    ):
        if not url or not anon_key:
            raise AuthProviderError("Supabase URL and anon key must be configured")
        self.base_url = url.rstrip("/") + AUTH_PATH
        self.anon_key = anon_key
        self.store = store
        self.timeout = timeout
        self._clock = clock

    def _headers(self, token: str | None = None) -> dict[str, str]:
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {token or self.anon_key}",
            "Content-Type": "application/json",
        }

    async def _post(
        self,
        endpoint: str,
        data: dict | None = None,
        params: dict[str, str] | None = None,
        token: str | None = None,
    ) -> httpx.Response:
        url = f"{self.base_url}{endpoint}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                return await client.post(
                    url, params=params, json=data or {}, headers=self._headers(token)
                )
        except httpx.RequestError as e:
            logger.error("Auth request failed: POST %s -> %s", endpoint, e)
            raise AuthProviderError(f"network connection error: {e}") from e

    # --- Operations ---

    async def sign_in(self, email: str, password: str) -> Session:
        resp = await self._post(
            "/token",
            {"email": email, "password": password},
            params={"grant_type": "password"},
        )
        _raise_for_error(resp)
        session = self._parse_session(resp.json())
        self.store.save(session)
        logger.info("Signed in user %s", session.user.id)
        return session

    async def sign_up(self, email: str, password: str) -> AuthUser:
        resp = await self._post("/signup", {"email": email, "password": password})
        _raise_for_error(resp)
        data = resp.json()
        # With auto-confirm on, GoTrue returns a full session; otherwise just the user.
        if "access_token" in data:
            session = self._parse_session(data)
            self.store.save(session)
            return session.user
        return _parse_user(data)

    async def sign_out(self) -> None:
        session = self.store.load()
        if session is not None:
            resp = await self._post("/logout", token=session.access_token)
            if resp.status_code not in IGNORABLE_LOGOUT_STATUSES:
                _raise_for_error(resp)
        self.store.clear()
        logger.info("Signed out")

    async def reset_password_for_email(self, email: str) -> None:
        resp = await self._post("/recover", {"email": email})
        _raise_for_error(resp)

    async def get_session(self) -> Session:
        session = self.store.load()
        if session is None:
            raise SessionMissingError()
        if not session.is_expired(self._clock() + EXPIRY_MARGIN_SECONDS):
            return session
        return await self._refresh(session)

    async def _refresh(self, session: Session) -> Session:
        logger.info("Access token expired, refreshing session")
        resp = await self._post(
            "/token",
            {"refresh_token": session.refresh_token},
            params={"grant_type": "refresh_token"},
        )
        if resp.status_code >= 400:
            self.store.clear()
            message, code = _error_details(resp)
            raise AuthProviderError(
                f"session expired: {message}", resp.status_code, code
            )
        refreshed = self._parse_session(resp.json())
        self.store.save(refreshed)
        return refreshed

    def _parse_session(self, data: dict[str, Any]) -> Session:
        try:
            expires_at = data.get("expires_at")
            if expires_at is None:
                expires_at = self._clock() + float(data["expires_in"])
            return Session(
                access_token=data["access_token"],
                refresh_token=data["refresh_token"],
                expires_at=float(expires_at),
                token_type=data.get("token_type", "bearer"),
                user=_parse_user(data["user"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise AuthProviderError(f"Malformed session response: {e}") from e


def _parse_user(data: dict[str, Any]) -> AuthUser:
    try:
        return AuthUser(id=str(data["id"]), email=data.get("email"))
    except (KeyError, TypeError) as e:
        raise AuthProviderError(f"Malformed user response: {e}") from e


def _error_details(resp: httpx.Response) -> tuple[str, str | None]:
    try:
        body = resp.json()
    except ValueError:
        return (resp.text[:200] or f"HTTP {resp.status_code}", None)
    if not isinstance(body, dict):
        return (f"HTTP {resp.status_code}", None)
    message = (
        body.get("msg")
        or body.get("error_description")
        or body.get("message")
        or body.get("error")
        or f"HTTP {resp.status_code}"
    )
    code = body.get("error_code") or body.get("code")
    return (str(message), str(code) if code is not None else None)


def _raise_for_error(resp: httpx.Response) -> None:
    if resp.status_code < 400:
        return
    message, code = _error_details(resp)
    logger.error("Auth API %d: %s (%s)", resp.status_code, message, code)
    raise AuthProviderError(message, resp.status_code, code)
