"""Auth-side error taxonomy and provider error normalization."""

import logging

logger = logging.getLogger(__name__)


class AuthProviderError(Exception):
    """Raw failure reported by the auth provider."""

    def __init__(self, message: str, status_code: int | None = None, code: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class SessionMissingError(AuthProviderError):
    """The provider holds no session."""

    def __init__(self, message: str = "auth session missing"):
        super().__init__(message)


class AuthError(Exception):
    """Normalized auth failure shown to the user."""

    user_message = "Authentication failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.user_message)


class InvalidCredentialsError(AuthError):
    user_message = "Invalid email or password"


class UserNotFoundError(AuthError):
    user_message = "No account found with this email"


class EmailAlreadyInUseError(AuthError):
    user_message = "An account with this email already exists"


class WeakPasswordError(AuthError):
    user_message = "Password must be at least 6 characters"


class AuthNetworkError(AuthError):
    user_message = "Network error. Please check your connection"


class SessionExpiredError(AuthError):
    user_message = "Your session has expired. Please log in again"


class UnknownAuthError(AuthError):
    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail
        self.user_message = detail


def map_auth_error(error: Exception) -> AuthError:
    """Classify a provider error by keywords in its message and code.

    Best effort: messages the provider words differently fall through to
    UnknownAuthError carrying the original text.
    """
    detail = str(error)
    text = f"{detail} {getattr(error, 'code', None) or ''}".lower()
    logger.debug("Mapping auth error: %s", text)

    if "invalid" in text or "credentials" in text:
        return InvalidCredentialsError(detail)
    if "already" in text or "exists" in text:
        return EmailAlreadyInUseError(detail)
    if "password" in text and ("weak" in text or "at least" in text):
        return WeakPasswordError(detail)
    if "not found" in text or "user" in text:
        return UserNotFoundError(detail)
    if "network" in text or "connection" in text:
        return AuthNetworkError(detail)
    if "expired" in text or "session" in text:
        return SessionExpiredError(detail)
    return UnknownAuthError(detail)
