"""Short-lived token records: OTP codes, password resets and sessions."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ridelink.models.fields import from_iso, to_iso


@dataclass
class OtpToken:
    """The single pending one-time passcode of a user. Keyed by user ID."""
    id: int
    user_email: str
    code: str
    expires_at: datetime
    version: Optional[int] = None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_email": self.user_email,
            "code": self.code,
            "expires_at": to_iso(self.expires_at),
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OtpToken":
        return cls(
            id=data["id"],
            user_email=data["user_email"],
            code=str(data["code"]),
            expires_at=from_iso(data["expires_at"]),
            version=data.get("version"),
        )


@dataclass
class PasswordResetToken:
    """The single outstanding password reset token of a user. Keyed by user ID."""
    id: int
    token: str
    user_id: int
    expires_at: datetime
    version: Optional[int] = None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "token": self.token,
            "user_id": self.user_id,
            "expires_at": to_iso(self.expires_at),
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PasswordResetToken":
        return cls(
            id=data["id"],
            token=data["token"],
            user_id=data["user_id"],
            expires_at=from_iso(data["expires_at"]),
            version=data.get("version"),
        )


@dataclass
class Session:
    """A bearer session, keyed by the token identifier."""
    id: str
    email: str
    issued_at: datetime
    expires_at: datetime
    version: Optional[int] = None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "issued_at": to_iso(self.issued_at),
            "expires_at": to_iso(self.expires_at),
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        return cls(
            id=data["id"],
            email=data["email"],
            issued_at=from_iso(data["issued_at"]),
            expires_at=from_iso(data["expires_at"]),
            version=data.get("version"),
        )
