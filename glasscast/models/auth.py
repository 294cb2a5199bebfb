"""Auth session models."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: str | None = None


@dataclass(frozen=True)
class Session:
    access_token: str
    refresh_token: str
    expires_at: float  # epoch seconds
    user: AuthUser
    token_type: str = "bearer"

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at

    def to_dict(self) -> dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.expires_at,
            "token_type": self.token_type,
            "user": {"id": self.user.id, "email": self.user.email},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Session":
        user = data.get("user") or {}
        return cls(
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
            expires_at=float(data["expires_at"]),
            token_type=data.get("token_type", "bearer"),
            user=AuthUser(id=str(user.get("id", "")), email=user.get("email")),
        )
